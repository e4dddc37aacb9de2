"""
Error types raised by the prompt locator.

Span errors mean the parser handed over malformed coordinates. Shape errors
mean the tokenizer does not model the expression. Both abort a single prompt
candidate, never a whole file.
"""
from dataclasses import dataclass


class PromptLocatorError(Exception):
    """Base class for all prompt locator errors."""


class SpanError(PromptLocatorError):
    """Malformed coordinates coming from the parser."""


class InvalidSpan(SpanError):
    """Span bounds are negative, reversed or outside the buffer."""


class InvalidSpanShape(SpanError):
    """Inner span escapes its outer span (or a prompt escapes its enclosure)."""


class UnsupportedExpressionShape(PromptLocatorError):
    """Expression element is neither a literal, an interpolation nor a join call."""


@dataclass(frozen=True)
class SkippedCandidate:
    """A prompt candidate that was dropped, with the reason it was dropped."""
    index: int
    reason: str
    error_type: str

    @classmethod
    def from_error(cls, index: int, error: Exception) -> "SkippedCandidate":
        return cls(index=index, reason=str(error), error_type=type(error).__name__)

    def to_dict(self) -> dict:
        return {"index": self.index, "reason": self.reason, "error_type": self.error_type}
