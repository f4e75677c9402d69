"""Pydantic models for the markdown rendering pipeline."""

import re
import secrets
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class LineKind(str, Enum):
    """Block-level classification of a single input line."""

    HEADING = "heading"
    RULE = "rule"
    QUOTE = "quote"
    ORDERED_ITEM = "ordered_item"
    UNORDERED_ITEM = "unordered_item"
    TASK_ITEM = "task_item"
    BLANK = "blank"
    PLAIN = "plain"


class ListKind(str, Enum):
    """The list container currently open during a scan."""

    NONE = "none"
    ORDERED = "ordered"
    UNORDERED = "unordered"


class FragmentKind(str, Enum):
    """Kind of element emitted by the block classifier."""

    MARKUP = "markup"
    TEXT = "text"
    BREAK = "break"


class CodeFence(BaseModel):
    """A fenced code block lifted out of the raw text."""

    model_config = ConfigDict(frozen=True)

    language: str = "text"
    body: str = ""


class LineRecord(BaseModel):
    """Classification result for one line after fence removal."""

    model_config = ConfigDict(frozen=True)

    kind: LineKind
    text: str = ""
    level: int | None = None
    marker: str | None = None
    checked: bool | None = None
    nested: bool = False


class Fragment(BaseModel):
    """One element of the rendered block sequence.

    MARKUP fragments are literal markup and are never touched again.
    TEXT fragments hold inner text still awaiting inline formatting,
    together with the markup to wrap it in. ``block`` marks fragments whose
    output is block-level, so the paragraph assembler leaves their group
    unwrapped.
    """

    model_config = ConfigDict(frozen=True)

    kind: FragmentKind
    html: str = ""
    text: str = ""
    opening: str = ""
    closing: str = ""
    block: bool = False
    plain: bool = False

    @classmethod
    def markup(cls, html: str) -> "Fragment":
        return cls(kind=FragmentKind.MARKUP, html=html, block=True)

    @classmethod
    def paragraph_break(cls) -> "Fragment":
        return cls(kind=FragmentKind.BREAK)

    @classmethod
    def wrapped(cls, text: str, opening: str, closing: str) -> "Fragment":
        return cls(
            kind=FragmentKind.TEXT,
            text=text,
            opening=opening,
            closing=closing,
            block=True,
        )

    @classmethod
    def plain_text(cls, text: str) -> "Fragment":
        return cls(kind=FragmentKind.TEXT, text=text, plain=True)


class PlaceholderArena:
    """Per-render mapping of opaque tokens to stashed values.

    Every token embeds a random nonce drawn when the arena is created, so a
    token cannot collide with input text or with tokens of a concurrent
    render. An arena lives for exactly one render call.
    """

    def __init__(self) -> None:
        self.nonce = secrets.token_hex(6)
        self._values: dict[str, Any] = {}
        self._patterns: dict[str, re.Pattern] = {}

    def stash(self, value: Any, kind: str) -> str:
        """Store ``value`` and return the token that stands in for it.

        ``kind`` is a single letter naming the token family.
        """
        token = f"@@{kind}{len(self._values)}x{self.nonce}@@"
        self._values[token] = value
        return token

    def __contains__(self, token: str) -> bool:
        return token in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, token: str) -> Any:
        return self._values[token]

    def tokens(self, kind: str) -> list[str]:
        prefix = f"@@{kind}"
        return [t for t in self._values if t.startswith(prefix)]

    def pattern(self, kind: str) -> re.Pattern:
        """Regex matching any token of ``kind`` issued by this arena."""
        if kind not in self._patterns:
            self._patterns[kind] = re.compile(
                rf"@@{re.escape(kind)}\d+x{self.nonce}@@"
            )
        return self._patterns[kind]

    def resolve(self, text: str, kind: str) -> str:
        """Replace every token of ``kind`` in ``text`` with its stashed value.

        Runs in one pass over ``text`` however many tokens were issued.
        """
        return self.pattern(kind).sub(
            lambda m: self._values.get(m.group(0), m.group(0)), text
        )

    def contains_token(self, text: str, kind: str) -> bool:
        return self.pattern(kind).search(text) is not None


class RenderedCodeBlock(BaseModel):
    """Template context for one code block."""

    element_id: str
    language: str
    body: str
    copy_label: str = "Copy"
