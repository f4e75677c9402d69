"""Paragraph assembly and code block resolution."""

from collections.abc import Callable

from chatbot.markdown.fences import FENCE_KIND
from chatbot.markdown.models import CodeFence, Fragment, FragmentKind, PlaceholderArena

PARAGRAPH_OPENING = '<p class="ai-paragraph">'
PARAGRAPH_CLOSING = "</p>"
RESPONSE_OPENING = '<div class="formatted-response">'
RESPONSE_CLOSING = "</div>"


def group_fragments(fragments: list[Fragment]) -> list[list[Fragment]]:
    """Split fragments into paragraph groups at every paragraph break."""
    groups: list[list[Fragment]] = [[]]
    for fragment in fragments:
        if fragment.kind is FragmentKind.BREAK:
            groups.append([])
        else:
            groups[-1].append(fragment)
    return groups


def assemble(
    fragments: list[Fragment],
    arena: PlaceholderArena,
    render_fence: Callable[[CodeFence, int], str],
) -> str:
    """Join formatted fragments into the final response markup.

    Groups holding any block-level fragment or a code fence placeholder are
    emitted as they are; every other group becomes one paragraph. Fence
    placeholders are resolved last, so code bodies never pass through
    paragraph or inline handling.

    Args:
        fragments: Formatted fragments and paragraph breaks in order
        arena: Placeholder arena holding the extracted code fences
        render_fence: Callable producing markup for a fence and its index

    Returns:
        Markup wrapped in a single response container
    """
    parts: list[str] = []
    for group in group_fragments(fragments):
        content = "\n".join(fragment.html for fragment in group).strip()
        if not content:
            continue
        if any(fragment.block for fragment in group) or arena.contains_token(content, FENCE_KIND):
            parts.append(content)
        else:
            parts.append(f"{PARAGRAPH_OPENING}{content}{PARAGRAPH_CLOSING}")

    indexes = {token: index for index, token in enumerate(arena.tokens(FENCE_KIND))}
    body = arena.pattern(FENCE_KIND).sub(
        lambda m: render_fence(arena[m.group(0)], indexes[m.group(0)]),
        "".join(parts),
    )

    return f"{RESPONSE_OPENING}{body}{RESPONSE_CLOSING}"
