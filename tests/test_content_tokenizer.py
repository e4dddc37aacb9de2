"""
Tests for prompt_locator.content_tokenizer

Test Coverage:
- Plain literals, interpolated literals and concatenations
- Squiggly heredocs with interpolations (per-line str tokens)
- Join calls and the joint shape
- Variable deduplication and empty expressions
- Unsupported expression shapes
"""
import pytest

from helpers import find_span, make_interpolation, make_literal
from prompt_locator.content_tokenizer import VarRegistry, tokenize
from prompt_locator.errors import InvalidSpan, InvalidSpanShape, UnsupportedExpressionShape
from prompt_locator.fragments import Interpolation, JoinCall, Literal
from prompt_locator.indentation import StrippingMode
from prompt_locator.prompt import JointToken, StrToken, VarToken
from prompt_locator.span import Span, SpanShape


def test_plain_literal_is_one_str_token():
    source = 'greeting = "Hello there"'
    result = tokenize([make_literal(source, '"Hello there"')])
    assert result.content == (StrToken(Span(12, 23)),)
    assert result.vars == ()
    assert result.joint == SpanShape.empty()


def test_interpolated_literal_splits_at_slots():
    source = 'user_prompt = "Welcome, #{user}!"'
    slot = make_interpolation(source, "#{user}", "user")
    result = tokenize([make_literal(source, '"Welcome, #{user}!"', slots=[slot])])

    assert result.content == (
        StrToken(Span(15, 24)),
        VarToken(Span(24, 31), 0),
        StrToken(Span(31, 32)),
    )
    assert result.vars[0].exp == "user"
    assert result.vars[0].span == SpanShape.of((24, 31), (26, 30))


def test_slot_at_literal_edges_emits_no_empty_str():
    source = '"#{a}#{b}"'
    slots = [make_interpolation(source, "#{a}", "a"), make_interpolation(source, "#{b}", "b")]
    result = tokenize([make_literal(source, source, slots=slots)])
    assert result.content == (VarToken(Span(1, 5), 0), VarToken(Span(5, 9), 1))


def test_concatenation_of_literals_and_variables():
    source = 'msg = "Hello " + name + "!"'
    name = Interpolation(exp="name", span=SpanShape.of(find_span(source, "name")))
    result = tokenize([
        make_literal(source, '"Hello "'),
        name,
        make_literal(source, '"!"'),
    ])
    assert [token.type for token in result.content] == ["str", "var", "str"]
    assert result.content[1] == VarToken(Span(17, 21), 0)


def test_squiggly_heredoc_with_interpolations():
    source = "user = <<~TEXT\n  Hello, #{name}!\n  How is #{city}?\nTEXT\n"
    body = "  Hello, #{name}!\n  How is #{city}?\n"
    body_start, body_end = find_span(source, body)
    heredoc = Literal(
        span=SpanShape.of((7, body_end + len("TEXT")), (body_start, body_end)),
        text=body,
        slots=(
            make_interpolation(source, "#{name}", "name"),
            make_interpolation(source, "#{city}", "city"),
        ),
        mode=StrippingMode.COMMON_INDENT,
    )
    result = tokenize([heredoc])

    assert result.content == (
        StrToken(Span(17, 24)),
        VarToken(Span(24, 31), 0),
        StrToken(Span(31, 33)),
        StrToken(Span(35, 42)),
        VarToken(Span(42, 49), 1),
        StrToken(Span(49, 51)),
    )


def test_multiline_interpolation_keeps_heredoc_baseline():
    text = "  a #{\nfoo}\n  b\n"
    heredoc = Literal(
        span=SpanShape.of((0, 16)),
        text=text,
        slots=(Interpolation(exp="foo", span=SpanShape.of((4, 11), (7, 10))),),
        mode=StrippingMode.COMMON_INDENT,
    )
    result = tokenize([heredoc])

    assert result.content == (
        StrToken(Span(2, 4)),
        VarToken(Span(4, 11), 0),
        StrToken(Span(11, 12)),
        StrToken(Span(14, 16)),
    )


def test_plain_heredoc_keeps_indentation_in_one_token():
    source = "text = <<TEXT\n  Line 1\n  Line 2\nTEXT\n"
    body = "  Line 1\n  Line 2\n"
    body_start, body_end = find_span(source, body)
    heredoc = Literal(
        span=SpanShape.of((7, body_end + len("TEXT")), (body_start, body_end)),
        text=body,
        mode=StrippingMode.NONE,
    )
    assert tokenize([heredoc]).content == (StrToken(Span(body_start, body_end)),)


def test_array_join():
    source = '["foo","bar"].join(", ")'
    separator = make_literal(source, '", "')
    call = JoinCall(
        span=SpanShape.of((0, len(source)), (1, 12)),
        elements=(make_literal(source, '"foo"'), make_literal(source, '"bar"')),
        separator=separator,
    )
    result = tokenize([call])

    assert result.content == (StrToken(Span(2, 5)), JointToken(), StrToken(Span(8, 11)))
    assert result.joint == separator.span
    assert source[result.joint.inner.start:result.joint.inner.end] == ", "


def test_array_join_with_variable_element():
    source = '# @prompt\nprompt = ["Hello", user, "!"].join("\\n")'
    user = Interpolation(exp="user", span=SpanShape.of(find_span(source, "user")))
    call = JoinCall(
        span=SpanShape.of((19, 50), (20, 38)),
        elements=(make_literal(source, '"Hello"'), user, make_literal(source, '"!"')),
        separator=make_literal(source, '"\\n"'),
    )
    result = tokenize([call])

    assert result.content == (
        StrToken(Span(21, 26)),
        JointToken(),
        VarToken(Span(29, 33), 0),
        JointToken(),
        StrToken(Span(36, 37)),
    )
    assert result.joint == SpanShape.of((45, 49), (46, 48))
    assert result.vars[0].span == SpanShape.of((29, 33), (29, 33))


def test_join_keeps_joints_around_empty_elements():
    source = '["", x].join("-")'
    x = Interpolation(exp="x", span=SpanShape.of(find_span(source, "x")))
    call = JoinCall(
        span=SpanShape.of((0, len(source)), (1, 6)),
        elements=(make_literal(source, '""'), x),
        separator=make_literal(source, '"-"'),
    )
    assert tokenize([call]).content == (JointToken(), VarToken(Span(5, 6), 0))


def test_repeated_expression_reuses_index():
    source = '"#{name} and #{ name } and #{other} and #{name}"'
    slots = [
        make_interpolation(source, "#{name}", "name"),
        make_interpolation(source, "#{ name }", " name "),
        make_interpolation(source, "#{other}", "other"),
        make_interpolation(source, "#{name}", "name", start=source.index("#{other}")),
    ]
    result = tokenize([make_literal(source, source, slots=slots)])

    indices = [token.index for token in result.content if isinstance(token, VarToken)]
    assert indices == [0, 0, 1, 0]
    assert [var.exp for var in result.vars] == ["name", "other"]


def test_var_indices_are_dense_in_first_appearance_order():
    source = 'a + b + a + c'
    elements = [
        Interpolation(exp=name, span=SpanShape.of(find_span(source, name, position)))
        for name, position in (("a", 0), ("b", 0), ("a", 8), ("c", 0))
    ]
    result = tokenize(elements)
    assert [token.index for token in result.content] == [0, 1, 0, 2]
    assert len(result.vars) == 3


def test_empty_expressions_are_kept_as_vars():
    source = '"#{} #{ }"'
    slots = [make_interpolation(source, "#{}", ""), make_interpolation(source, "#{ }", " ")]
    result = tokenize([make_literal(source, source, slots=slots)])

    var_tokens = [token for token in result.content if isinstance(token, VarToken)]
    assert [token.index for token in var_tokens] == [0, 1]
    assert len(result.vars) == 2


def test_var_registry_key_collapses_whitespace():
    assert VarRegistry.key_for("  user.name ") == "user.name"
    assert VarRegistry.key_for("a  +\n b") == "a + b"
    assert VarRegistry.key_for("   ") is None


def test_unknown_element_is_unsupported():
    with pytest.raises(UnsupportedExpressionShape, match="dict"):
        tokenize([{"kind": "call"}])


def test_nested_join_is_unsupported():
    source = '[["a"].join("")].join("")'
    inner_call = JoinCall(
        span=SpanShape.of((1, 15)),
        elements=(make_literal(source, '"a"'),),
        separator=make_literal(source, '""'),
    )
    outer_call = JoinCall(
        span=SpanShape.of((0, len(source))),
        elements=(inner_call,),
        separator=make_literal(source, '""', start=16),
    )
    with pytest.raises(UnsupportedExpressionShape, match="nested"):
        tokenize([outer_call])


def test_interpolated_separator_is_unsupported():
    source = '["a"].join("#{sep}")'
    separator = make_literal(source, '"#{sep}"', slots=[make_interpolation(source, "#{sep}", "sep")])
    call = JoinCall(
        span=SpanShape.of((0, len(source))),
        elements=(make_literal(source, '"a"'),),
        separator=separator,
    )
    with pytest.raises(UnsupportedExpressionShape, match="separator"):
        tokenize([call])


def test_literal_text_must_match_inner_span():
    with pytest.raises(InvalidSpan):
        Literal(span=SpanShape.of((0, 5), (1, 4)), text="toolong")


def test_slot_outside_literal_is_rejected():
    slot = Interpolation(exp="x", span=SpanShape.of((10, 14), (12, 13)))
    with pytest.raises(InvalidSpanShape):
        Literal(span=SpanShape.of((0, 5), (1, 4)), text="abc", slots=(slot,))
