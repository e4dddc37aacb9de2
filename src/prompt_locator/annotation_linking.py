"""
Groups comment lines into annotation blocks and links each block to the
prompt it documents.

A block immediately preceding a prompt's statement wins; a block right
after the statement is used only when nothing precedes it and no other
prompt claims that block as its leading comment.
"""
import logging
import re
from typing import Protocol, Sequence

from .prompt import PromptAnnotation
from .span import Span, SpanShape
from .utils import LineIndex, byte_length

# --- Logging Setup ---
logger = logging.getLogger(__name__)
# --- End Logging Setup ---

_PROMPT_MARKER_RE = re.compile(r"@prompt", re.IGNORECASE)

# Longest openers first so `///` wins over `//` and `/**` over `/*`.
_COMMENT_OPENERS = ("///", "//", "/**", "/*", '"""', "'''", "#")
_COMMENT_CLOSERS = {"/**": "*/", "/*": "*/", '"""': '"""', "'''": "'''"}


class Locatable(Protocol):
    enclosure: Span
    span: SpanShape


def comment_inner_offsets(text: str) -> tuple[int, int]:
    """
    Byte offsets of a comment line's content relative to its start.

    Leading markers (`//`, `#`, `/*` ...) and a trailing block closer are
    excluded; continuation lines of block comments keep everything except
    a final `*/`.
    """
    length = byte_length(text)
    for opener in _COMMENT_OPENERS:
        if text.startswith(opener):
            start = len(opener)
            closer = _COMMENT_CLOSERS.get(opener)
            if closer and text.endswith(closer):
                return start, max(start, length - len(closer))
            return start, length
    if text.endswith("*/"):
        return 0, length - 2
    return 0, length


def has_prompt_marker(text: str) -> bool | None:
    """
    Check a comment for the `@prompt` marker.

    Returns True when the marker stands alone as a word, False when it only
    appears inside a longer word (`@prompting`, `my@prompt`), and None when
    the text does not mention it at all.
    """
    found = False
    for match in _PROMPT_MARKER_RE.finditer(text):
        found = True
        before = text[match.start() - 1] if match.start() > 0 else ""
        after = text[match.end()] if match.end() < len(text) else ""
        if not _is_word_char(before) and not _is_word_char(after):
            return True
    return False if found else None


def _is_word_char(char: str) -> bool:
    return bool(char) and (char.isalnum() or char == "_")


def _bridgeable(
    code_bytes: bytes,
    line_index: LineIndex,
    before: Span,
    gap_end: int,
    tolerance: int,
) -> bool:
    """True when only whitespace, with at most `tolerance` blank lines, lies between `before` and `gap_end`."""
    gap_start = before.end
    if gap_end < gap_start:
        return False
    if code_bytes[gap_start:gap_end].strip():
        return False
    # Line of the last byte of `before`; an empty span sits on the line it starts on.
    last_line = line_index.line_of(max(before.end - 1, before.start))
    next_line = line_index.line_of(gap_end)
    return next_line - last_line - 1 <= tolerance


def group_comment_lines(
    lines: Sequence[SpanShape],
    code_bytes: bytes,
    tolerance: int = 0,
) -> list[PromptAnnotation]:
    """
    Merge comment lines into contiguous blocks.

    Args:
        lines: One span shape per comment line, from the comment scanner.
        code_bytes: The source buffer.
        tolerance: Number of blank lines allowed between two lines of a block.

    Returns:
        Annotation blocks in source order.
    """
    line_index = LineIndex(code_bytes)
    blocks: list[PromptAnnotation] = []
    current: list[SpanShape] = []

    for shape in sorted(lines, key=lambda s: s.outer.start):
        if current and not _bridgeable(code_bytes, line_index, current[-1].outer, shape.outer.start, tolerance):
            blocks.append(PromptAnnotation(spans=tuple(current)))
            current = []
        current.append(shape)
    if current:
        blocks.append(PromptAnnotation(spans=tuple(current)))

    return blocks


def block_has_marker(block: PromptAnnotation, code_bytes: bytes) -> bool:
    return any(has_prompt_marker(shape.inner.extract(code_bytes)) for shape in block.spans)


def _preceding_block(
    prompt: Locatable,
    blocks: Sequence[PromptAnnotation],
    code_bytes: bytes,
    line_index: LineIndex,
    tolerance: int,
) -> int | None:
    nearest = None
    for position, block in enumerate(blocks):
        if block.outer.end <= prompt.span.outer.start:
            nearest = position
        else:
            break
    if nearest is None:
        return None

    block = blocks[nearest]
    # Already inside the statement (the enclosure absorbed its leading comment).
    if block.outer.end > prompt.enclosure.start:
        return nearest
    if _bridgeable(code_bytes, line_index, block.outer, prompt.enclosure.start, tolerance):
        return nearest
    return None


def _following_block(
    prompt: Locatable,
    blocks: Sequence[PromptAnnotation],
    code_bytes: bytes,
    line_index: LineIndex,
    tolerance: int,
) -> int | None:
    for position, block in enumerate(blocks):
        if block.outer.start < prompt.span.outer.end:
            continue
        if block.outer.start < prompt.enclosure.end:
            return position
        if _bridgeable(code_bytes, line_index, prompt.enclosure, block.outer.start, tolerance):
            return position
        return None
    return None


def link_annotations(
    prompts: Sequence[Locatable],
    blocks: Sequence[PromptAnnotation],
    code_bytes: bytes,
    tolerance: int = 0,
    require_marker: bool = False,
) -> list[tuple[PromptAnnotation, ...]]:
    """
    Associate annotation blocks with prompts.

    Args:
        prompts: Objects exposing `enclosure` and `span`, in source order.
        blocks: Annotation blocks from `group_comment_lines`.
        code_bytes: The source buffer.
        tolerance: Blank lines allowed between a block and its statement.
        require_marker: Only link blocks that carry the `@prompt` marker.

    Returns:
        One tuple of annotations per prompt, aligned with `prompts`.
    """
    if require_marker:
        blocks = [block for block in blocks if block_has_marker(block, code_bytes)]
    blocks = sorted(blocks, key=lambda b: b.outer.start)
    line_index = LineIndex(code_bytes)

    linked: list[int | None] = [
        _preceding_block(prompt, blocks, code_bytes, line_index, tolerance) for prompt in prompts
    ]
    claimed = {position for position in linked if position is not None}

    for prompt_position, prompt in enumerate(prompts):
        if linked[prompt_position] is not None:
            continue
        following = _following_block(prompt, blocks, code_bytes, line_index, tolerance)
        if following is not None and following not in claimed:
            linked[prompt_position] = following

    logger.debug(f"Linked {sum(p is not None for p in linked)} of {len(prompts)} prompts to annotations")
    return [(blocks[position],) if position is not None else () for position in linked]
