"""Markdown-subset rendering entry point."""

import logging
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from chatbot.markdown.assemble import assemble
from chatbot.markdown.blocks import scan_blocks
from chatbot.markdown.escape import code_block_id, escape_text
from chatbot.markdown.fences import extract_fences
from chatbot.markdown.inline import format_fragment
from chatbot.markdown.models import CodeFence, PlaceholderArena, RenderedCodeBlock
from chatbot.markdown.options import RenderOptions

logger = logging.getLogger(__name__)

# Template directory
TEMPLATES_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def get_jinja_env() -> Environment:
    """Get configured Jinja2 environment."""
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(default=False),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


@lru_cache(maxsize=1)
def default_options() -> RenderOptions:
    """Options loaded once from the environment."""
    return RenderOptions()


def render_code_block(fence: CodeFence, index: int, options: RenderOptions) -> str:
    """Render one code fence with its language label and copy control.

    The body is emitted exactly as extracted (escaped when escaping is on);
    no inline or block formatting is ever applied to it.

    Args:
        fence: Extracted code fence
        index: Position of the fence within the message
        options: Renderer options

    Returns:
        Code block markup
    """
    block = RenderedCodeBlock(
        element_id=code_block_id(fence.body, index),
        language=fence.language,
        body=escape_text(fence.body, options.escape_html),
        copy_label=options.copy_label,
    )
    template = get_jinja_env().get_template("code_block.html.j2")
    return template.render(block=block)  # type: ignore[no-any-return]


def render_markdown(text: str, options: RenderOptions | None = None) -> str:
    """Convert assistant message text into display markup.

    Runs the four stages in order: fence extraction, block classification,
    inline formatting, paragraph assembly. Never raises for string input;
    anything not recognized is rendered as literal text.

    Args:
        text: Raw message text
        options: Renderer options (loaded from the environment if None)

    Returns:
        Markup wrapped in a single ``formatted-response`` container

    Example:
        >>> render_markdown("Hello **world**")
        '<div class="formatted-response"><p class="ai-paragraph">Hello <strong>world</strong></p></div>'
    """
    if options is None:
        options = default_options()

    text = normalize_newlines(text)
    arena = PlaceholderArena()
    body, fences = extract_fences(text, arena, options.default_language)
    fragments = [
        format_fragment(fragment, arena, options)
        for fragment in scan_blocks(body, options.bullet_glyph)
    ]

    logger.debug(
        "Rendered message",
        extra={"fences": len(fences), "fragments": len(fragments), "length": len(text)},
    )

    return assemble(
        fragments,
        arena,
        lambda fence, index: render_code_block(fence, index, options),
    )
