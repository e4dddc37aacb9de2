"""
Prompt records produced by an extraction pass.

All records are immutable snapshots; re-extracting after an edit produces a
new, unrelated set.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union

from .span import Span, SpanShape


@dataclass(frozen=True)
class StrToken:
    """Literal text; `span` is a source range with stripped indentation excluded."""
    span: Span
    type: str = field(default="str", init=False)

    def to_dict(self) -> dict:
        return {"type": self.type, "span": self.span.to_list()}


@dataclass(frozen=True)
class VarToken:
    """An interpolation; `index` points into `Prompt.vars`."""
    span: Span
    index: int
    type: str = field(default="var", init=False)

    def to_dict(self) -> dict:
        return {"type": self.type, "span": self.span.to_list(), "index": self.index}


@dataclass(frozen=True)
class JointToken:
    """Position where the join separator is rendered."""
    type: str = field(default="joint", init=False)

    def to_dict(self) -> dict:
        return {"type": self.type}


PromptContentToken = Union[StrToken, VarToken, JointToken]


@dataclass(frozen=True)
class PromptVar:
    exp: str
    span: SpanShape

    def to_dict(self) -> dict:
        return {"exp": self.exp, "span": self.span.to_dict()}


@dataclass(frozen=True)
class PromptAnnotation:
    """A contiguous comment block; one span shape per comment line, in line order."""
    spans: tuple[SpanShape, ...]

    @property
    def outer(self) -> Span:
        return Span(self.spans[0].outer.start, self.spans[-1].outer.end)

    def text(self, code_bytes: bytes) -> str:
        """Comment content with markers removed, one line per span."""
        return "\n".join(shape.inner.extract(code_bytes) for shape in self.spans)

    def to_dict(self) -> dict:
        return {"spans": [shape.to_dict() for shape in self.spans]}


@dataclass(frozen=True)
class Prompt:
    file: str
    enclosure: Span
    span: SpanShape
    content: tuple[PromptContentToken, ...] = ()
    joint: SpanShape = field(default_factory=SpanShape.empty)
    vars: tuple[PromptVar, ...] = ()
    annotations: tuple[PromptAnnotation, ...] = ()
