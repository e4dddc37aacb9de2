"""
Finds comment lines in a source buffer using tree-sitter.

Produces the per-line span shapes the annotation linker groups into blocks.
"""
import logging

from tree_sitter import Node

from .annotation_linking import comment_inner_offsets
from .indentation import INDENT_CHARS, split_lines
from .language_config import LANGUAGE_CONFIG, get_parser
from .span import Span, SpanShape
from .utils import byte_length

# --- Logging Setup ---
logger = logging.getLogger(__name__)
# --- End Logging Setup ---


def find_comment_nodes(root_node: Node, comment_types: set[str]) -> list[Node]:
    """Collect comment nodes under `root_node`, sorted by start byte."""
    comments: list[Node] = []
    stack = [root_node]
    while stack:
        node = stack.pop()
        if node.type in comment_types:
            comments.append(node)
            continue
        stack.extend(node.children)
    comments.sort(key=lambda n: n.start_byte)
    return comments


def comment_line_shapes(code_bytes: bytes, start: int, end: int) -> list[SpanShape]:
    """
    Split one comment (possibly a multi-line block comment) into per-line shapes.

    The outer span of each line starts at its first non-indent character and
    stops before the line terminator. A blank line inside the comment gets an
    empty shape, so the comment still reads as one run of lines.
    """
    text = code_bytes[start:end].decode('utf-8', errors='replace')
    shapes = []
    for line in split_lines(text, start):
        body = line.text.rstrip("\r\n")
        content = body.lstrip(INDENT_CHARS)
        outer_start = line.start + byte_length(body[:len(body) - len(content)])
        if not content:
            shapes.append(SpanShape.flat(Span(outer_start, outer_start)))
            continue
        outer_end = outer_start + byte_length(content)
        inner_start, inner_end = comment_inner_offsets(content)
        shapes.append(SpanShape(
            outer=Span(outer_start, outer_end),
            inner=Span(outer_start + inner_start, outer_start + inner_end),
        ))
    return shapes


def scan_comment_lines(source: str, language_name: str) -> list[SpanShape]:
    """
    Parse `source` and return one span shape per comment line.

    Args:
        source: The source code as a string.
        language_name: A language configured in LANGUAGE_CONFIG.

    Returns:
        Comment line shapes in source order; empty for unsupported languages.
    """
    language_config = LANGUAGE_CONFIG.get(language_name)
    if not language_config:
        logger.warning(f"Language '{language_name}' not configured. No comments scanned.")
        return []

    code_bytes = source.encode("utf-8")
    tree = get_parser(language_name).parse(code_bytes)
    if tree.root_node.has_error:
        logger.warning(f"Parsing issues while scanning {language_name} comments; results may be partial.")

    shapes: list[SpanShape] = []
    for node in find_comment_nodes(tree.root_node, set(language_config["comment_types"])):
        shapes.extend(comment_line_shapes(code_bytes, node.start_byte, node.end_byte))
    return shapes
