"""
Validates the JSON-shaped output of a language parser and converts it into
fragment records.

Spans travel as `[start, end]` pairs; every element carries a `kind` of
`literal`, `interpolation` or `join`. A literal may name its opening token
(`<<~`, a triple quote ...) instead of a stripping mode; the mode is then looked up
for the file's language.
"""
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from . import fragments
from .errors import UnsupportedExpressionShape
from .indentation import ClosingIndentRule, StrippingMode
from .language_config import literal_form
from .span import Span, SpanShape

SpanPair = Tuple[int, int]


class ShapePayload(BaseModel):
    outer: SpanPair
    inner: Optional[SpanPair] = None

    @field_validator('outer', 'inner')
    def validate_pair(cls, v):
        if v is not None and (v[0] < 0 or v[0] > v[1]):
            raise ValueError(f'Span {list(v)} must satisfy 0 <= start <= end')
        return v

    def to_shape(self) -> SpanShape:
        return SpanShape.of(self.outer, self.inner)


class InterpolationPayload(BaseModel):
    kind: str = "interpolation"
    exp: str
    span: ShapePayload

    def to_fragment(self, language: Optional[str] = None) -> fragments.Interpolation:
        return fragments.Interpolation(exp=self.exp, span=self.span.to_shape())


class LiteralPayload(BaseModel):
    kind: str = "literal"
    span: ShapePayload
    text: str
    slots: List[InterpolationPayload] = []
    opener: Optional[str] = None
    mode: Optional[StrippingMode] = None
    closing_indent: Optional[int] = Field(default=None, ge=0)
    closing_rule: Optional[ClosingIndentRule] = None

    def to_fragment(self, language: Optional[str] = None) -> fragments.Literal:
        mode, closing_rule = self.mode, self.closing_rule
        if mode is None and self.opener and language:
            form = literal_form(language, self.opener)
            mode, closing_rule = form.mode, closing_rule or form.closing_rule
        return fragments.Literal(
            span=self.span.to_shape(),
            text=self.text,
            slots=tuple(slot.to_fragment() for slot in self.slots),
            mode=mode or StrippingMode.NONE,
            closing_indent=self.closing_indent,
            closing_rule=closing_rule,
        )


class JoinCallPayload(BaseModel):
    kind: str = "join"
    span: ShapePayload
    elements: List[dict[str, Any]]
    separator: LiteralPayload

    def to_fragment(self, language: Optional[str] = None) -> fragments.JoinCall:
        return fragments.JoinCall(
            span=self.span.to_shape(),
            elements=tuple(element_from_payload(element, language) for element in self.elements),
            separator=self.separator.to_fragment(language),
        )


_ELEMENT_PAYLOADS = {
    "literal": LiteralPayload,
    "interpolation": InterpolationPayload,
    "join": JoinCallPayload,
}


def element_from_payload(data: dict[str, Any], language: Optional[str] = None) -> fragments.Element:
    """
    Validate one element payload and convert it.

    Raises:
        UnsupportedExpressionShape: `kind` is missing or not a modelled form.
        pydantic.ValidationError: The element does not match its schema.
    """
    kind = data.get("kind") if isinstance(data, dict) else None
    payload_cls = _ELEMENT_PAYLOADS.get(kind)
    if payload_cls is None:
        raise UnsupportedExpressionShape(f"Unsupported expression element kind: {kind!r}")
    return payload_cls.model_validate(data).to_fragment(language)


class CandidatePayload(BaseModel):
    enclosure: SpanPair
    span: ShapePayload
    elements: List[dict[str, Any]]

    @field_validator('enclosure')
    def validate_enclosure(cls, v):
        if v[0] < 0 or v[0] > v[1]:
            raise ValueError(f'Enclosure {list(v)} must satisfy 0 <= start <= end')
        return v

    def to_candidate(self, file: str, language: Optional[str] = None) -> fragments.PromptCandidate:
        return fragments.PromptCandidate(
            file=file,
            enclosure=Span(*self.enclosure),
            span=self.span.to_shape(),
            elements=tuple(element_from_payload(element, language) for element in self.elements),
        )


class FilePayload(BaseModel):
    """
    Everything a parser reports for one file.

    Candidates stay raw here and are validated one by one, so a single
    malformed candidate does not reject the whole file.
    """
    file: str
    language: Optional[str] = None
    candidates: List[dict[str, Any]] = []
    comments: Optional[List[ShapePayload]] = None

    @field_validator('file')
    def validate_file(cls, v):
        if not v.strip():
            raise ValueError('File identifier is required')
        return v

    def comment_shapes(self) -> list[SpanShape] | None:
        if self.comments is None:
            return None
        return [comment.to_shape() for comment in self.comments]
