"""
Turns a prompt expression into its ordered content tokens.

Literal segments are normalized first (see `indentation`), then split at
every interpolation slot; join calls get a joint token between elements.
Variables are deduplicated by expression text within one prompt.
"""
import logging
from dataclasses import dataclass

from .errors import UnsupportedExpressionShape
from .fragments import Element, Interpolation, JoinCall, Literal
from .indentation import ClosingIndentRule, normalize_text
from .prompt import JointToken, PromptContentToken, PromptVar, StrToken, VarToken
from .span import SpanShape

# --- Logging Setup ---
logger = logging.getLogger(__name__)
# --- End Logging Setup ---


@dataclass(frozen=True)
class TokenizedContent:
    content: tuple[PromptContentToken, ...]
    vars: tuple[PromptVar, ...]
    joint: SpanShape


class VarRegistry:
    """
    Lookup table from expression text to its index in the prompt's vars.

    Keys are the expression text with whitespace runs collapsed. Empty or
    whitespace-only expressions have no key, so each one gets its own entry.
    """

    def __init__(self):
        self._index_by_key: dict[str, int] = {}
        self.vars: list[PromptVar] = []

    @staticmethod
    def key_for(exp: str) -> str | None:
        return " ".join(exp.split()) or None

    def register(self, slot: Interpolation) -> int:
        key = self.key_for(slot.exp)
        if key is not None and key in self._index_by_key:
            return self._index_by_key[key]
        index = len(self.vars)
        self.vars.append(PromptVar(exp=slot.exp, span=slot.span))
        if key is not None:
            self._index_by_key[key] = index
        else:
            logger.debug(f"Interpolation at {slot.span.outer.start} has an empty expression")
        return index

    def token_for(self, slot: Interpolation) -> VarToken:
        return VarToken(span=slot.span.outer, index=self.register(slot))


def _literal_tokens(
    literal: Literal,
    registry: VarRegistry,
    default_rule: ClosingIndentRule,
) -> list[PromptContentToken]:
    normalized = normalize_text(
        literal.text,
        start=literal.span.inner.start,
        mode=literal.mode,
        closing_indent=literal.closing_indent,
        rule=literal.closing_rule or default_rule,
        interior=[slot.span.outer for slot in literal.slots],
    )

    tokens: list[PromptContentToken] = []
    cursor = 0
    for slot in sorted(literal.slots, key=lambda s: s.span.outer.start):
        slot_start = normalized.index_of(slot.span.outer.start)
        tokens.extend(StrToken(span) for span in normalized.source_spans(cursor, slot_start))
        tokens.append(registry.token_for(slot))
        cursor = normalized.index_of(slot.span.outer.end)
    tokens.extend(StrToken(span) for span in normalized.source_spans(cursor, len(normalized)))
    return tokens


def _element_tokens(
    element: Element,
    registry: VarRegistry,
    default_rule: ClosingIndentRule,
) -> list[PromptContentToken]:
    if isinstance(element, Literal):
        return _literal_tokens(element, registry, default_rule)
    if isinstance(element, Interpolation):
        return [registry.token_for(element)]
    if isinstance(element, JoinCall):
        raise UnsupportedExpressionShape("Join calls cannot be nested inside a join call")
    raise UnsupportedExpressionShape(f"Unsupported expression element: {type(element).__name__}")


def _join_tokens(
    call: JoinCall,
    registry: VarRegistry,
    default_rule: ClosingIndentRule,
) -> list[PromptContentToken]:
    if not isinstance(call.separator, Literal):
        raise UnsupportedExpressionShape(
            f"Join separator must be a string literal, got {type(call.separator).__name__}"
        )
    if call.separator.slots:
        raise UnsupportedExpressionShape("Join separator must not contain interpolations")

    tokens: list[PromptContentToken] = []
    for position, element in enumerate(call.elements):
        if position:
            tokens.append(JointToken())
        tokens.extend(_element_tokens(element, registry, default_rule))
    return tokens


def tokenize(
    elements: tuple[Element, ...] | list[Element],
    default_rule: ClosingIndentRule = ClosingIndentRule.IGNORE,
) -> TokenizedContent:
    """
    Tokenize the elements of one prompt expression, left to right.

    Args:
        elements: Literal, interpolation and join-call parts in source order.
        default_rule: Closing-indent rule for literals that do not carry one.

    Returns:
        The content tokens, the deduplicated vars, and the joint shape
        (empty unless the expression contains a join call).

    Raises:
        UnsupportedExpressionShape: An element is not a modelled form.
    """
    registry = VarRegistry()
    content: list[PromptContentToken] = []
    joint = SpanShape.empty()
    join_seen = False

    for element in elements:
        if isinstance(element, JoinCall):
            if join_seen:
                raise UnsupportedExpressionShape("Only one join call per prompt is supported")
            join_seen = True
            content.extend(_join_tokens(element, registry, default_rule))
            joint = element.separator.span
        else:
            content.extend(_element_tokens(element, registry, default_rule))

    return TokenizedContent(content=tuple(content), vars=tuple(registry.vars), joint=joint)
