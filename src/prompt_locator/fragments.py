"""
Records describing what a language parser hands over for one prompt candidate.

The parser supplies raw span boundaries and raw text; nothing here knows a
language grammar. Literal forms arrive already tagged with the stripping mode
their language applies.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

from .errors import InvalidSpan, InvalidSpanShape
from .indentation import ClosingIndentRule, StrippingMode
from .span import Span, SpanShape


@dataclass(frozen=True)
class Interpolation:
    """An interpolated expression, e.g. `#{user}` (outer) around `user` (inner)."""
    exp: str
    span: SpanShape


@dataclass(frozen=True)
class Literal:
    """
    A string literal segment.

    `text` is the raw source text of `span.inner`. `slots` are interpolations
    embedded in the literal and must lie inside `span.inner`.
    """
    span: SpanShape
    text: str
    slots: tuple[Interpolation, ...] = ()
    mode: StrippingMode = StrippingMode.NONE
    closing_indent: int | None = None
    closing_rule: ClosingIndentRule | None = None

    def __post_init__(self):
        size = len(self.text.encode("utf-8"))
        if size != len(self.span.inner):
            raise InvalidSpan(
                f"Literal text is {size} bytes but its inner span "
                f"({self.span.inner.start}, {self.span.inner.end}) covers {len(self.span.inner)}"
            )
        previous_end = self.span.inner.start
        for slot in sorted(self.slots, key=lambda s: s.span.outer.start):
            if not self.span.inner.contains(slot.span.outer):
                raise InvalidSpanShape(
                    f"Interpolation `{slot.exp}` at ({slot.span.outer.start}, {slot.span.outer.end}) "
                    f"is outside its literal ({self.span.inner.start}, {self.span.inner.end})"
                )
            if slot.span.outer.start < previous_end:
                raise InvalidSpanShape(f"Interpolation `{slot.exp}` overlaps the previous one")
            previous_end = slot.span.outer.end


@dataclass(frozen=True)
class JoinCall:
    """An array joined with a separator, e.g. `["a", b].join(", ")`."""
    span: SpanShape
    elements: tuple[Union[Literal, Interpolation], ...]
    separator: Literal


Element = Union[Literal, Interpolation, JoinCall]


@dataclass(frozen=True)
class PromptCandidate:
    """
    One candidate prompt expression.

    `enclosure` covers the whole defining statement; `span` is the expression
    itself; `elements` are its parts in source order (a single literal, a
    concatenation, or a join call).
    """
    file: str
    enclosure: Span
    span: SpanShape
    elements: tuple[Element, ...] = field(default_factory=tuple)
