"""Inline formatting of line text.

Substitutions run in a fixed order because their markers overlap: code
spans first, then links, then emphasis from the longest marker down,
strikethrough and highlight. Code spans and finished links are stashed in the
arena, so later passes never see inside them. Unbalanced markers are left as
literal text.

No pattern body may cross its own closing delimiter, which keeps every pass
linear in the length of the line.
"""

import html
import re

from chatbot.markdown.escape import escape_attribute, escape_text
from chatbot.markdown.models import Fragment, FragmentKind, PlaceholderArena
from chatbot.markdown.options import RenderOptions

CODE_SPAN_KIND = "C"
LINK_KIND = "L"

CODE_SPAN_PATTERN = re.compile(r"`([^`\n]+)`")
BOLD_ITALIC_PATTERN = re.compile(r"\*\*\*(?![\s*])((?:[^*\n]|\*(?!\*\*))*?[^\s*])\*\*\*")
BOLD_PATTERN = re.compile(r"\*\*(?![\s*])((?:[^*\n]|\*(?!\*))*?[^\s*])\*\*")
# A lone asterisk is italic only when no other asterisk touches it.
ITALIC_PATTERN = re.compile(r"(?<!\*)\*(?![\s*])([^*\n]*?[^\s*])\*(?!\*)")
LINK_PATTERN = re.compile(r"\[([^\[\]\n]+)\]\(([^()\s]+)\)")
STRIKE_PATTERN = re.compile(r"~~(?![\s~])((?:[^~\n]|~(?!~))*?[^\s~])~~")
HIGHLIGHT_PATTERN = re.compile(r"==(?![\s=])((?:[^=\n]|=(?!=))*?[^\s=])==")

LABELED_LINE_PATTERN = re.compile(r"\*\*([^*:\n]+):\*\*\s*(.*)")

SAFE_LINK_SCHEMES = frozenset({"http", "https", "mailto"})
_SCHEME_PATTERN = re.compile(r"([a-zA-Z][a-zA-Z0-9+.-]*):")
_CONTROL_CHARS = re.compile(r"[\x00-\x20\x7f]")


def is_safe_link_target(target: str) -> bool:
    """Accept relative targets and http(s)/mailto URLs only.

    The scheme is read after entity decoding and with control characters
    removed, the way a browser reads it.
    """
    decoded = _CONTROL_CHARS.sub("", html.unescape(target))
    match = _SCHEME_PATTERN.match(decoded)
    if not match:
        return True
    return match.group(1).lower() in SAFE_LINK_SCHEMES


def emphasize(text: str) -> str:
    """Apply the emphasis, strikethrough and highlight passes."""
    text = BOLD_ITALIC_PATTERN.sub(r"<strong><em>\1</em></strong>", text)
    text = BOLD_PATTERN.sub(r"<strong>\1</strong>", text)
    text = ITALIC_PATTERN.sub(r"<em>\1</em>", text)
    text = STRIKE_PATTERN.sub(r'<del class="strikethrough">\1</del>', text)
    return HIGHLIGHT_PATTERN.sub(r'<mark class="highlight">\1</mark>', text)


def format_inline(text: str, arena: PlaceholderArena, options: RenderOptions) -> str:
    """Apply inline substitutions to one line of text.

    Args:
        text: Unformatted line text
        arena: Placeholder arena of the current render
        options: Renderer options

    Returns:
        The line as markup
    """
    text = escape_text(text, options.escape_html)

    text = CODE_SPAN_PATTERN.sub(
        lambda m: arena.stash(f'<code class="inline-code">{m.group(1)}</code>', CODE_SPAN_KIND),
        text,
    )

    def _link(match: re.Match) -> str:
        label, target = match.group(1), match.group(2)
        if arena.contains_token(target, CODE_SPAN_KIND) or not is_safe_link_target(target):
            return match.group(0)
        anchor = (
            f'<a href="{escape_attribute(target)}" target="_blank" '
            f'rel="noopener noreferrer" class="ai-link">'
            f"{emphasize(label)} {options.link_glyph}</a>"
        )
        return arena.stash(anchor, LINK_KIND)

    text = LINK_PATTERN.sub(_link, text)
    text = emphasize(text)

    text = arena.resolve(text, LINK_KIND)
    return arena.resolve(text, CODE_SPAN_KIND)


def format_labeled_line(text: str, arena: PlaceholderArena, options: RenderOptions) -> str | None:
    """Render a ``**Label:** value`` line as a label/value block.

    Returns None when the line does not have that shape, so the caller falls
    back to ordinary inline formatting.
    """
    match = LABELED_LINE_PATTERN.fullmatch(text)
    if not match:
        return None

    label = format_inline(match.group(1).strip(), arena, options)
    value = format_inline(match.group(2), arena, options)
    return (
        '<div class="info-line">'
        f'<span class="info-label">{label}:</span> '
        f'<span class="info-value">{value}</span>'
        "</div>"
    )


def format_fragment(
    fragment: Fragment,
    arena: PlaceholderArena,
    options: RenderOptions,
) -> Fragment:
    """Resolve a TEXT fragment into a MARKUP fragment.

    MARKUP and BREAK fragments pass through unchanged. A plain line shaped
    like ``**Label:** value`` becomes a block-level label/value fragment.
    """
    if fragment.kind is not FragmentKind.TEXT:
        return fragment

    if fragment.plain:
        labeled = format_labeled_line(fragment.text, arena, options)
        if labeled is not None:
            return Fragment.markup(labeled)
        return Fragment(
            kind=FragmentKind.MARKUP,
            html=format_inline(fragment.text, arena, options),
        )

    html = fragment.opening + format_inline(fragment.text, arena, options) + fragment.closing
    return Fragment.markup(html)
