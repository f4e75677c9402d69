"""HTML escaping helpers for rendered markup."""

import hashlib
import html


def escape_text(text: str, enabled: bool = True) -> str:
    """HTML-escape text content, or return it untouched when disabled."""
    if not enabled:
        return text
    return html.escape(text, quote=False)


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute.

    Already-escaped entities are left alone so text that went through
    ``escape_text`` is not double-escaped.
    """
    value = html.unescape(value)
    return html.escape(value, quote=True)


def code_block_id(body: str, index: int) -> str:
    """Stable element id for the ``index``-th code block of a message.

    Derived from the block's content so identical input yields identical
    markup.
    """
    digest = hashlib.sha1(body.encode("utf-8")).hexdigest()[:10]
    return f"code-{digest}-{index}"
