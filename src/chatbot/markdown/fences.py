"""Fenced code block extraction.

Fences are lifted out of the raw text before any other rule runs, so block
and inline patterns can never match inside code or across a fence boundary.
"""

import re

from chatbot.markdown.models import CodeFence, PlaceholderArena

FENCE_KIND = "F"

# The language tag only counts when nothing else follows it on the opening
# line; otherwise the whole interior is code.
FENCE_PATTERN = re.compile(r"```(?:([\w+#.-]+)?[ \t]*\n)?(.*?)```", re.DOTALL)


def trim_fence_body(body: str) -> str:
    """Strip blank lines at the outer edges of a fence body.

    Indentation and blank lines inside the body are kept verbatim.
    """
    lines = body.split("\n")
    start, end = 0, len(lines)
    while start < end and not lines[start].strip(" \t"):
        start += 1
    while end > start and not lines[end - 1].strip(" \t"):
        end -= 1
    return "\n".join(lines[start:end])


def extract_fences(
    text: str,
    arena: PlaceholderArena,
    default_language: str = "text",
) -> tuple[str, list[CodeFence]]:
    """Replace fenced code blocks with arena tokens.

    Each token ends up on a line of its own so the block classifier sees it
    as a single plain line. An opening delimiter without a matching close is
    left as literal text.

    Args:
        text: Raw message text
        arena: Placeholder arena of the current render
        default_language: Label used when the fence has no language tag

    Returns:
        Tuple of (text with placeholders, fences in source order)
    """
    fences: list[CodeFence] = []

    def _replace(match: re.Match) -> str:
        fence = CodeFence(
            language=match.group(1) or default_language,
            body=trim_fence_body(match.group(2)),
        )
        fences.append(fence)
        token = arena.stash(fence, FENCE_KIND)

        source = match.string
        before = "" if match.start() == 0 or source[match.start() - 1] == "\n" else "\n"
        after = "" if match.end() == len(source) or source[match.end()] == "\n" else "\n"
        return f"{before}{token}{after}"

    return FENCE_PATTERN.sub(_replace, text), fences
