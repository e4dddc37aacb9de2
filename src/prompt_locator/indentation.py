"""
Reproduces the whitespace-stripping rules of multi-line string literals.

Ruby squiggly heredocs, Java text blocks, PHP flexible heredocs and C# raw
strings all remove the indentation common to their body lines; plain
heredocs, Python triple-quoted strings, Go raw strings and template literals
keep every byte. Both behaviours are expressed by a `StrippingMode`, and the
normalized text keeps a per-character map back to source byte offsets so
tokens can still point at the original buffer.
"""
import re
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .span import Span

INDENT_CHARS = " \t"

_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")


class StrippingMode(str, Enum):
    NONE = "none"
    COMMON_INDENT = "common-indent"


class ClosingIndentRule(str, Enum):
    """How the closing delimiter's own indentation affects the baseline."""
    IGNORE = "ignore"            # Ruby <<~: only body lines count
    PARTICIPATE = "participate"  # Java/C#/PHP: closing line counts like a body line


@dataclass(frozen=True)
class RawLine:
    """One source line of a literal, terminator included, with its byte start."""
    text: str
    start: int

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @property
    def indent_width(self) -> int:
        return len(self.text) - len(self.text.lstrip(INDENT_CHARS))

    def starts_inside(self, spans: Sequence[Span]) -> bool:
        """True when the line begins in the middle of one of `spans` (an interpolation)."""
        return any(span.start < self.start < span.end for span in spans)

    @property
    def terminator(self) -> str:
        if self.text.endswith("\r\n"):
            return "\r\n"
        if self.text.endswith("\n"):
            return "\n"
        return ""


@dataclass(frozen=True)
class NormalizedText:
    """
    Literal text after stripping, plus the source byte offset of every character.

    `offsets` is strictly increasing; `end` is the source offset just past the
    last input character and stands in for `offsets[len(text)]`.
    """
    text: str
    offsets: tuple[int, ...]
    indent: int = 0
    end: int = 0

    def __len__(self) -> int:
        return len(self.text)

    def index_of(self, offset: int) -> int:
        """Normalized index of the first character at or after a source offset."""
        return bisect_left(self.offsets, offset)

    def source_offset(self, index: int) -> int:
        if index >= len(self.offsets):
            return self.end
        return self.offsets[index]

    def source_spans(self, start: int, end: int) -> list[Span]:
        """
        Map the normalized range [start, end) to source spans.

        Each returned span is a maximal run of characters that are adjacent
        in the source too, so stripped indentation splits the range.
        """
        spans: list[Span] = []
        run_start = run_end = None
        for index in range(start, min(end, len(self.text))):
            char_start = self.offsets[index]
            char_end = char_start + len(self.text[index].encode("utf-8"))
            if run_end == char_start:
                run_end = char_end
                continue
            if run_start is not None:
                spans.append(Span(run_start, run_end))
            run_start, run_end = char_start, char_end
        if run_start is not None:
            spans.append(Span(run_start, run_end))
        return spans


def split_lines(text: str, start: int = 0) -> list[RawLine]:
    """Split literal text on `\\n`, keeping terminators and tracking byte starts."""
    lines = []
    offset = start
    for match in _LINE_RE.finditer(text):
        piece = match.group()
        lines.append(RawLine(piece, offset))
        offset += len(piece.encode("utf-8"))
    return lines


def common_indent(
    lines: list[RawLine],
    closing_indent: int | None = None,
    rule: ClosingIndentRule = ClosingIndentRule.IGNORE,
    interior: Sequence[Span] = (),
) -> int:
    """
    Minimum indentation over non-blank lines (and the closing line, if it participates).

    Lines that begin inside an `interior` span continue an interpolated
    expression and do not count.
    """
    widths = [
        line.indent_width for line in lines
        if not line.is_blank and not line.starts_inside(interior)
    ]
    if closing_indent is not None and rule is ClosingIndentRule.PARTICIPATE:
        widths.append(closing_indent)
    return min(widths, default=0)


def normalize_lines(
    lines: list[RawLine],
    mode: StrippingMode = StrippingMode.NONE,
    closing_indent: int | None = None,
    rule: ClosingIndentRule = ClosingIndentRule.IGNORE,
    interior: Sequence[Span] = (),
) -> NormalizedText:
    """
    Apply a stripping mode to raw literal lines.

    Under `COMMON_INDENT`, every non-blank line loses exactly the common
    indentation (deeper lines keep their excess) and blank lines keep only
    their terminator. Lines beginning inside an `interior` span are kept
    verbatim. Under `NONE` the text is unchanged.
    """
    if not lines:
        return NormalizedText(text="", offsets=(), indent=0, end=0)

    indent = common_indent(lines, closing_indent, rule, interior) if mode is StrippingMode.COMMON_INDENT else 0

    chars: list[str] = []
    offsets: list[int] = []
    for line in lines:
        if mode is not StrippingMode.COMMON_INDENT or line.starts_inside(interior):
            skip = 0
        elif line.is_blank:
            skip = len(line.text) - len(line.terminator)
        else:
            skip = min(indent, line.indent_width)

        offset = line.start + len(line.text[:skip].encode("utf-8"))
        for char in line.text[skip:]:
            chars.append(char)
            offsets.append(offset)
            offset += len(char.encode("utf-8"))

    last = lines[-1]
    end = last.start + len(last.text.encode("utf-8"))
    return NormalizedText(text="".join(chars), offsets=tuple(offsets), indent=indent, end=end)


def normalize_text(
    text: str,
    start: int = 0,
    mode: StrippingMode = StrippingMode.NONE,
    closing_indent: int | None = None,
    rule: ClosingIndentRule = ClosingIndentRule.IGNORE,
    interior: Sequence[Span] = (),
) -> NormalizedText:
    """Split `text` (which begins at source offset `start`) and normalize it."""
    lines = split_lines(text, start)
    if not lines:
        return NormalizedText(text="", offsets=(), indent=0, end=start)
    return normalize_lines(lines, mode, closing_indent, rule, interior)
