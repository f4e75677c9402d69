"""Markdown-subset renderer for assistant messages.

This module converts assistant replies into display markup with:
- Fence extraction that keeps code bodies out of every other rule
- A line scanner for headings, rules, quotes, lists and task items
- Inline formatting for emphasis, links, code spans, strikethrough, highlight
- Paragraph assembly that never wraps block markup
"""

from chatbot.markdown.assemble import assemble, group_fragments
from chatbot.markdown.blocks import classify_line, record_fragment, scan_blocks
from chatbot.markdown.escape import code_block_id, escape_attribute, escape_text
from chatbot.markdown.fences import extract_fences, trim_fence_body
from chatbot.markdown.inline import format_fragment, format_inline, format_labeled_line
from chatbot.markdown.models import (
    CodeFence,
    Fragment,
    FragmentKind,
    LineKind,
    LineRecord,
    ListKind,
    PlaceholderArena,
)
from chatbot.markdown.options import RenderOptions
from chatbot.markdown.render import render_code_block, render_markdown

__all__ = [
    # Entry point
    "render_markdown",
    "render_code_block",
    "RenderOptions",
    # Stages
    "extract_fences",
    "trim_fence_body",
    "classify_line",
    "record_fragment",
    "scan_blocks",
    "format_inline",
    "format_labeled_line",
    "format_fragment",
    "group_fragments",
    "assemble",
    # Models
    "CodeFence",
    "LineRecord",
    "LineKind",
    "ListKind",
    "Fragment",
    "FragmentKind",
    "PlaceholderArena",
    # Escape utilities
    "escape_text",
    "escape_attribute",
    "code_block_id",
]
