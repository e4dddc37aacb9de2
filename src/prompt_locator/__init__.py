"""
Prompt locator.

This package turns parser-reported prompt expressions into span-accurate
prompt records: content tokens, variables, join separators and linked
comment annotations.
"""

from .span import Span, SpanShape
from .errors import (
    PromptLocatorError,
    SpanError,
    InvalidSpan,
    InvalidSpanShape,
    UnsupportedExpressionShape,
    SkippedCandidate,
)
from .indentation import (
    StrippingMode,
    ClosingIndentRule,
    RawLine,
    NormalizedText,
    split_lines,
    normalize_lines,
    normalize_text,
)
from .fragments import Interpolation, Literal, JoinCall, PromptCandidate
from .prompt import (
    StrToken,
    VarToken,
    JointToken,
    PromptVar,
    PromptAnnotation,
    Prompt,
)
from .content_tokenizer import tokenize, TokenizedContent
from .annotation_linking import (
    group_comment_lines,
    link_annotations,
    has_prompt_marker,
    comment_inner_offsets,
)
from .comment_scanning import scan_comment_lines
from .language_config import LANGUAGE_CONFIG, literal_form
from .language_mapping import get_language_from_extension
from .prompt_assembly import assemble_prompt
from .config import ExtractionSettings, configure_logging
from .extractor import (
    ExtractionResult,
    extract_prompts,
    extract_prompts_async,
    extract_file,
    extract_from_payload,
)
from .prompt_formatting import prompt_to_dict, format_prompts, format_result, render_prompt, prompt_cuts

__all__ = [
    'Span',
    'SpanShape',
    'PromptLocatorError',
    'SpanError',
    'InvalidSpan',
    'InvalidSpanShape',
    'UnsupportedExpressionShape',
    'SkippedCandidate',
    'StrippingMode',
    'ClosingIndentRule',
    'RawLine',
    'NormalizedText',
    'split_lines',
    'normalize_lines',
    'normalize_text',
    'Interpolation',
    'Literal',
    'JoinCall',
    'PromptCandidate',
    'StrToken',
    'VarToken',
    'JointToken',
    'PromptVar',
    'PromptAnnotation',
    'Prompt',
    'tokenize',
    'TokenizedContent',
    'group_comment_lines',
    'link_annotations',
    'has_prompt_marker',
    'comment_inner_offsets',
    'scan_comment_lines',
    'LANGUAGE_CONFIG',
    'literal_form',
    'get_language_from_extension',
    'assemble_prompt',
    'ExtractionSettings',
    'configure_logging',
    'ExtractionResult',
    'extract_prompts',
    'extract_prompts_async',
    'extract_file',
    'extract_from_payload',
    'prompt_to_dict',
    'format_prompts',
    'format_result',
    'render_prompt',
    'prompt_cuts',
]
