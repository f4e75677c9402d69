"""Renderer options with environment variable support."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RenderOptions(BaseSettings):
    """Presentation options for the markdown renderer.

    Loads from environment variables with the CHATBOT_RENDER_ prefix. Options
    change the emitted markup only; the set of recognized constructs is fixed.

    Example:
        ```bash
        export CHATBOT_RENDER_ESCAPE_HTML=false
        export CHATBOT_RENDER_COPY_LABEL="Copy code"
        ```
    """

    escape_html: bool = Field(
        default=True,
        description="HTML-escape message text and code bodies before formatting",
    )
    default_language: str = Field(
        default="text",
        description="Language label for fences without a language tag",
    )
    link_glyph: str = Field(
        default="↗",
        description="Glyph appended to link labels to mark external links",
    )
    bullet_glyph: str = Field(
        default="•",
        description="Glyph shown for every unordered list item",
    )
    copy_label: str = Field(
        default="Copy",
        description="Text of the copy button on code blocks",
    )

    model_config = SettingsConfigDict(
        env_prefix="CHATBOT_RENDER_",
        case_sensitive=False,
        frozen=True,
    )
