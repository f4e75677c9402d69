"""Server configuration with environment variable support.

Provides typed configuration models for the HTTP server, the
chat-completion upstream and session storage. Values load from environment
variables (and a local ``.env`` file) for 12-factor deployments.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatbot.markdown.options import RenderOptions
from chatbot_state.models import DEFAULT_SYSTEM_PROMPT


class CORSConfig(BaseSettings):
    """CORS configuration for cross-origin requests."""

    enabled: bool = Field(
        default=False,
        description="Enable CORS middleware"
    )
    allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed origins for CORS"
    )
    allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed HTTP methods"
    )
    allow_headers: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed HTTP headers"
    )

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        case_sensitive=False,
    )


class CompletionConfig(BaseSettings):
    """Upstream chat-completion API settings.

    Endpoint and key are optional at load time; a request made without them
    fails with a server configuration error instead of refusing to boot.

    Example:
        ```bash
        export AZURE_API_ENDPOINT=https://example.openai.azure.com/openai/deployments/gpt/chat/completions?api-version=2024-02-01
        export AZURE_API_KEY=...
        ```
    """

    endpoint: str | None = Field(
        default=None,
        description="Full URL of the chat-completion endpoint"
    )
    key: str | None = Field(
        default=None,
        description="API key sent in the api-key header"
    )
    max_tokens: int = Field(
        default=2000,
        description="Completion token limit sent with every request"
    )
    temperature: float = Field(
        default=0.7,
        description="Sampling temperature sent with every request"
    )
    timeout: float = Field(
        default=60.0,
        description="Upstream request timeout in seconds"
    )
    max_retries: int = Field(
        default=3,
        description="Attempts per request for transient upstream failures"
    )
    retry_backoff: float = Field(
        default=1.0,
        description="Exponential backoff multiplier in seconds between attempts"
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="System prompt prepended to conversations that open without one"
    )

    model_config = SettingsConfigDict(
        env_prefix="AZURE_API_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def missing(self) -> list[str]:
        """Names of required settings that are not set."""
        names = []
        if not self.endpoint:
            names.append("AZURE_API_ENDPOINT")
        if not self.key:
            names.append("AZURE_API_KEY")
        return names


class StorageConfig(BaseSettings):
    """Session storage settings."""

    backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Session backend"
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (redis backend only)"
    )
    key_prefix: str = Field(
        default="session:",
        description="Key prefix for stored sessions"
    )
    default_user: str = Field(
        default="anonymous",
        description="User id applied when a request names none"
    )
    ttl: int | None = Field(
        default=None,
        description="Optional session time-to-live in seconds"
    )

    model_config = SettingsConfigDict(
        env_prefix="CHATBOT_STORAGE_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )


class ServerConfig(BaseSettings):
    """Server configuration with environment variable support.

    Loads configuration from environment variables with the CHATBOT_SERVER_
    prefix. Provides sensible defaults for local development.

    Example:
        ```bash
        export CHATBOT_SERVER_HOST=0.0.0.0
        export CHATBOT_SERVER_PORT=3000
        export CHATBOT_SERVER_LOG_LEVEL=info
        ```

        ```python
        config = ServerConfig()  # Loads from env vars
        ```
    """

    host: str = Field(
        default="127.0.0.1",
        description="Server bind address"
    )
    port: int = Field(
        default=3000,
        description="Server port"
    )
    reload: bool = Field(
        default=False,
        description="Enable auto-reload on code changes (development only)"
    )
    log_level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default="info",
        description="Logging level"
    )
    access_log: bool = Field(
        default=True,
        description="Enable uvicorn access logging"
    )

    # Server metadata
    title: str = Field(
        default="chatbot API",
        description="API title shown in docs"
    )
    version: str = Field(
        default="0.1.0",
        description="API version"
    )
    enable_docs: bool = Field(
        default=True,
        description="Enable /docs and /redoc endpoints"
    )

    cors: CORSConfig = Field(
        default_factory=CORSConfig,
        description="CORS configuration"
    )
    completion: CompletionConfig = Field(
        default_factory=CompletionConfig,
        description="Chat-completion upstream configuration"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Session storage configuration"
    )
    render: RenderOptions = Field(
        default_factory=RenderOptions,
        description="Markdown renderer options"
    )

    model_config = SettingsConfigDict(
        env_prefix="CHATBOT_SERVER_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    @property
    def docs_url(self) -> str | None:
        """Return docs URL if enabled, None otherwise."""
        return "/docs" if self.enable_docs else None

    @property
    def redoc_url(self) -> str | None:
        """Return redoc URL if enabled, None otherwise."""
        return "/redoc" if self.enable_docs else None

    @property
    def openapi_url(self) -> str | None:
        """Return OpenAPI schema URL if docs enabled, None otherwise."""
        return "/openapi.json" if self.enable_docs else None
