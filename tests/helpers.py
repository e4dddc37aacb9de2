"""Shared helpers for the prompt locator tests."""
from prompt_locator.fragments import Interpolation, Literal
from prompt_locator.span import SpanShape


def find_span(source: str, needle: str, start: int = 0) -> tuple[int, int]:
    """Byte span of the first `needle` in `source` at or after character `start`."""
    position = source.index(needle, start)
    begin = len(source[:position].encode("utf-8"))
    return begin, begin + len(needle.encode("utf-8"))


def make_literal(source: str, quoted: str, start: int = 0, quote_len: int = 1, slots=(), **kwargs):
    """Literal for the first `quoted` (delimiters included) found in `source`."""
    outer = find_span(source, quoted, start)
    inner = (outer[0] + quote_len, outer[1] - quote_len)
    text = source.encode("utf-8")[inner[0]:inner[1]].decode("utf-8")
    return Literal(span=SpanShape.of(outer, inner), text=text, slots=tuple(slots), **kwargs)


def make_interpolation(source: str, outer_text: str, exp: str, start: int = 0):
    """Interpolation whose outer text is `outer_text` and whose expression is `exp`."""
    outer = find_span(source, outer_text, start)
    inner_start = outer[0] + len(outer_text[:outer_text.index(exp)].encode("utf-8"))
    inner = (inner_start, inner_start + len(exp.encode("utf-8")))
    return Interpolation(exp=exp, span=SpanShape.of(outer, inner))


def line_comment_shapes(source: str, marker: str = "#") -> list[SpanShape]:
    """Span shapes for every `marker` comment, the way a comment scanner reports them."""
    shapes = []
    code_bytes = source.encode("utf-8")
    position = code_bytes.find(marker.encode("utf-8"))
    while position != -1:
        line_end = code_bytes.find(b"\n", position)
        if line_end == -1:
            line_end = len(code_bytes)
        shapes.append(SpanShape.of((position, line_end), (position + len(marker), line_end)))
        position = code_bytes.find(marker.encode("utf-8"), line_end)
    return shapes
