"""Chat-completion proxy client.

Forwards message lists to the configured upstream endpoint so the API key
never reaches the browser.
"""

import logging
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from chatbot.exceptions import CompletionError, MissingAPIConfigError
from chatbot_server.config import CompletionConfig

logger = logging.getLogger(__name__)


class UpstreamUnavailableError(Exception):
    """Upstream answered with a 5xx status; the request may be retried."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        super().__init__(f"Upstream API error: {response.status_code}")


class CompletionClient:
    """Async client for the upstream chat-completion API.

    Uses a persistent httpx.AsyncClient for connection reuse across requests.
    Transport errors and 5xx responses are retried with exponential backoff;
    4xx responses fail immediately.
    """

    def __init__(
        self,
        config: CompletionConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Upstream settings (loads from env vars if None)
            transport: Optional httpx transport, used by tests to stub the upstream
        """
        self.config = config or CompletionConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_payload(self, messages: list[dict[str, Any]]) -> dict[str, Any]:
        """Build the upstream request body.

        A conversation that does not open with a system message gets the
        configured system prompt prepended.
        """
        first = messages[0] if messages else None
        if not (isinstance(first, dict) and first.get("role") == "system"):
            messages = [{"role": "system", "content": self.config.system_prompt}, *messages]
        return {
            "messages": messages,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }

    async def _post_with_retry(self, payload: dict[str, Any]) -> httpx.Response:
        client = self._get_client()
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((httpx.TransportError, UpstreamUnavailableError)),
            stop=stop_after_attempt(max(self.config.max_retries, 1)),
            wait=wait_exponential(multiplier=self.config.retry_backoff, max=10),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await client.post(
                    self.config.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json", "api-key": self.config.key},
                )
                if response.status_code >= 500:
                    raise UpstreamUnavailableError(response)
        return response

    async def complete(self, messages: list[dict[str, Any]]) -> dict[str, Any]:
        """Send a conversation upstream and return the raw JSON reply.

        Args:
            messages: OpenAI-style message list

        Returns:
            Upstream response body

        Raises:
            MissingAPIConfigError: If the endpoint or key is not configured
            CompletionError: If the upstream fails or returns invalid JSON
        """
        missing = self.config.missing
        if missing:
            raise MissingAPIConfigError(missing)

        try:
            response = await self._post_with_retry(self.build_payload(messages))
        except UpstreamUnavailableError as e:
            raise CompletionError(str(e), status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Upstream unreachable: {e}") from e

        if response.is_error:
            raise CompletionError(
                f"Upstream API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError("Upstream returned invalid JSON") from e

        logger.info(
            "Completion received",
            extra={"messages": len(messages), "status_code": response.status_code},
        )
        return data
