"""Line-oriented block classification.

Walks the placeholder-bearing text one line at a time and turns each line
into a fragment. The only state carried between lines is which list
container is open; it lives in the scan loop, never on a module or instance.
"""

import re

from chatbot.markdown.models import Fragment, LineKind, LineRecord, ListKind

HEADING_PATTERN = re.compile(r"(#{1,6})\s+(.*)")
RULE_PATTERN = re.compile(r"-{3,}|_{3,}|\*{3,}")
QUOTE_PATTERN = re.compile(r">(>?)\s*(.*)")
TASK_PATTERN = re.compile(r"[-*+][ \t]*\[([ xX])\]\s+(.*)")
ORDERED_PATTERN = re.compile(r"([0-9]+[.)])\s+(.*)")
UNORDERED_PATTERN = re.compile(r"([-*+•])\s+(.*)")

LIST_OPENING = {
    ListKind.ORDERED: '<ol class="ai-ordered-list">',
    ListKind.UNORDERED: '<ul class="ai-unordered-list">',
}
LIST_CLOSING = {
    ListKind.ORDERED: "</ol>",
    ListKind.UNORDERED: "</ul>",
}
RULE_MARKUP = '<hr class="section-divider">'

_ITEM_LISTS = {
    LineKind.ORDERED_ITEM: ListKind.ORDERED,
    LineKind.UNORDERED_ITEM: ListKind.UNORDERED,
}


def classify_line(line: str) -> LineRecord:
    """Classify one line; the first matching rule wins."""
    stripped = line.strip()
    if not stripped:
        return LineRecord(kind=LineKind.BLANK)

    match = HEADING_PATTERN.fullmatch(stripped)
    if match:
        return LineRecord(
            kind=LineKind.HEADING,
            level=len(match.group(1)),
            text=match.group(2),
        )

    if RULE_PATTERN.fullmatch(stripped):
        return LineRecord(kind=LineKind.RULE)

    match = QUOTE_PATTERN.fullmatch(stripped)
    if match:
        return LineRecord(
            kind=LineKind.QUOTE,
            text=match.group(2),
            nested=bool(match.group(1)),
        )

    match = TASK_PATTERN.fullmatch(stripped)
    if match:
        return LineRecord(
            kind=LineKind.TASK_ITEM,
            checked=match.group(1).lower() == "x",
            text=match.group(2),
        )

    match = ORDERED_PATTERN.fullmatch(stripped)
    if match:
        return LineRecord(
            kind=LineKind.ORDERED_ITEM,
            marker=match.group(1),
            text=match.group(2),
        )

    match = UNORDERED_PATTERN.fullmatch(stripped)
    if match:
        return LineRecord(
            kind=LineKind.UNORDERED_ITEM,
            marker=match.group(1),
            text=match.group(2),
        )

    return LineRecord(kind=LineKind.PLAIN, text=stripped)


def record_fragment(record: LineRecord, bullet_glyph: str = "•") -> Fragment:
    """Build the fragment for a classified line.

    Text-bearing records keep their inner text unformatted; the inline
    formatter fills it in later.
    """
    kind = record.kind

    if kind is LineKind.BLANK:
        return Fragment.paragraph_break()

    if kind is LineKind.RULE:
        return Fragment.markup(RULE_MARKUP)

    if kind is LineKind.HEADING:
        level = record.level
        return Fragment.wrapped(
            record.text,
            f'<h{level} class="ai-header h{level}">',
            f"</h{level}>",
        )

    if kind is LineKind.QUOTE:
        css = "ai-quote nested-quote" if record.nested else "ai-quote"
        return Fragment.wrapped(record.text, f'<blockquote class="{css}">', "</blockquote>")

    if kind is LineKind.TASK_ITEM:
        if record.checked:
            opening = (
                '<div class="task-item completed">'
                '<span class="checkbox checked">✓</span> '
                '<span class="task-text">'
            )
        else:
            opening = (
                '<div class="task-item">'
                '<span class="checkbox">○</span> '
                '<span class="task-text">'
            )
        return Fragment.wrapped(record.text, opening, "</span></div>")

    if kind is LineKind.ORDERED_ITEM:
        return Fragment.wrapped(
            record.text,
            f'<li class="ai-list-item"><span class="list-marker">{record.marker}</span> ',
            "</li>",
        )

    if kind is LineKind.UNORDERED_ITEM:
        return Fragment.wrapped(
            record.text,
            f'<li class="ai-list-item"><span class="list-bullet">{bullet_glyph}</span> ',
            "</li>",
        )

    return Fragment.plain_text(record.text)


def scan_blocks(text: str, bullet_glyph: str = "•") -> list[Fragment]:
    """Classify every line and emit fragments with list containers.

    A list container opens on the first item of its kind and closes on any
    line that is not an item of the same kind, and at end of input.

    Args:
        text: Text with code fences already replaced by placeholders
        bullet_glyph: Glyph rendered in front of unordered items

    Returns:
        Fragments in source order
    """
    fragments: list[Fragment] = []
    open_list = ListKind.NONE

    for line in text.split("\n"):
        record = classify_line(line)
        wanted = _ITEM_LISTS.get(record.kind, ListKind.NONE)

        if open_list is not ListKind.NONE and wanted is not open_list:
            fragments.append(Fragment.markup(LIST_CLOSING[open_list]))
            open_list = ListKind.NONE

        if wanted is not ListKind.NONE and open_list is ListKind.NONE:
            fragments.append(Fragment.markup(LIST_OPENING[wanted]))
            open_list = wanted

        fragments.append(record_fragment(record, bullet_glyph))

    if open_list is not ListKind.NONE:
        fragments.append(Fragment.markup(LIST_CLOSING[open_list]))

    return fragments
