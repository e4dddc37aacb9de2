"""
Span and SpanShape classes for the prompt locator.

This module contains the coordinate system every other stage reports in:
byte offsets into one UTF-8 source buffer.
"""

from __future__ import annotations
from dataclasses import dataclass

from .errors import InvalidSpan, InvalidSpanShape


@dataclass(frozen=True)
class Span:
    """
    Represents a byte range in the source buffer.

    Spans are immutable; combining two spans produces a new one.
    """
    start: int = 0
    end: int = 0

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise InvalidSpan(f"Span bounds must be non-negative, got ({self.start}, {self.end})")
        if self.start > self.end:
            raise InvalidSpan(f"Span start {self.start} is after end {self.end}")

    def check_within(self, length: int) -> Span:
        """Raise InvalidSpan unless the span fits a buffer of `length` bytes."""
        if self.end > length:
            raise InvalidSpan(f"Span ({self.start}, {self.end}) exceeds buffer length {length}")
        return self

    def contains(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end

    def extract_bytes(self, code_bytes: bytes) -> bytes:
        """Extract bytes from the span."""
        return code_bytes[self.start:self.end]

    def extract(self, code_bytes: bytes) -> str:
        """Extract the span as text."""
        return self.extract_bytes(code_bytes).decode('utf-8', errors='replace')

    def to_list(self) -> list[int]:
        return [self.start, self.end]

    def __len__(self) -> int:
        """Get the length of the span."""
        return self.end - self.start


@dataclass(frozen=True)
class SpanShape:
    """
    Outer/inner span pair.

    The outer span includes delimiters (quotes, heredoc tags, comment
    markers); the inner span is the content only and is the one to slice
    when extracting literal text.
    """
    outer: Span
    inner: Span

    def __post_init__(self):
        if not self.outer.contains(self.inner):
            raise InvalidSpanShape(
                f"Inner span ({self.inner.start}, {self.inner.end}) is not within "
                f"outer span ({self.outer.start}, {self.outer.end})"
            )

    @classmethod
    def flat(cls, span: Span) -> SpanShape:
        """Shape without delimiters: inner equals outer."""
        return cls(outer=span, inner=span)

    @classmethod
    def empty(cls) -> SpanShape:
        return cls(outer=Span(0, 0), inner=Span(0, 0))

    @classmethod
    def of(cls, outer: tuple[int, int], inner: tuple[int, int] | None = None) -> SpanShape:
        """Build a shape from plain `(start, end)` pairs."""
        outer_span = Span(*outer)
        return cls(outer=outer_span, inner=Span(*inner) if inner is not None else outer_span)

    def to_dict(self) -> dict:
        return {"outer": self.outer.to_list(), "inner": self.inner.to_list()}
