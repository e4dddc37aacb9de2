"""
Main entry point for prompt extraction.

Orchestrates the stages for one source buffer: candidate validation,
tokenization, annotation linking and assembly. Each candidate is isolated;
a failing candidate is skipped and reported, the rest of the file goes on.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from pydantic import ValidationError

# --- Logging Setup ---
logger = logging.getLogger(__name__)
# --- End Logging Setup ---

from .annotation_linking import group_comment_lines, link_annotations
from .comment_scanning import scan_comment_lines
from .config import ExtractionSettings
from .content_tokenizer import TokenizedContent, tokenize
from .errors import InvalidSpanShape, PromptLocatorError, SkippedCandidate
from .fragments import PromptCandidate
from .language_mapping import get_language_from_extension
from .payloads import CandidatePayload, FilePayload
from .prompt import Prompt
from .prompt_assembly import assemble_prompt
from .span import SpanShape

CANDIDATE_ERRORS = (PromptLocatorError, ValidationError)


@dataclass(frozen=True)
class ExtractionResult:
    """Prompts found in one file, in source order, plus the candidates that were skipped."""
    prompts: tuple[Prompt, ...]
    skipped: tuple[SkippedCandidate, ...] = ()


def _tokenize_candidate(
    candidate: PromptCandidate,
    code_bytes: bytes,
    settings: ExtractionSettings,
) -> TokenizedContent:
    """Check a candidate's coordinates against the buffer, then tokenize it."""
    buffer_length = len(code_bytes)
    candidate.enclosure.check_within(buffer_length)
    candidate.span.outer.check_within(buffer_length)
    if not candidate.enclosure.contains(candidate.span.outer):
        raise InvalidSpanShape(
            f"Enclosure ({candidate.enclosure.start}, {candidate.enclosure.end}) does not contain "
            f"expression ({candidate.span.outer.start}, {candidate.span.outer.end})"
        )
    return tokenize(candidate.elements, default_rule=settings.closing_indent_rule)


def _skip(index: int, file: str, error: Exception) -> SkippedCandidate:
    logger.warning(f"Skipping prompt candidate {index} in {file}: {type(error).__name__}: {error}")
    return SkippedCandidate.from_error(index, error)


def _finish(
    accepted: list[tuple[PromptCandidate, TokenizedContent]],
    skipped: list[SkippedCandidate],
    comment_lines: Sequence[SpanShape],
    code_bytes: bytes,
    settings: ExtractionSettings,
) -> ExtractionResult:
    # Source order, independent of the order candidates were evaluated in.
    accepted.sort(key=lambda item: (item[0].enclosure.start, item[0].span.outer.start))

    blocks = group_comment_lines(comment_lines, code_bytes, settings.blank_line_tolerance)
    annotations = link_annotations(
        [candidate for candidate, _ in accepted],
        blocks,
        code_bytes,
        tolerance=settings.blank_line_tolerance,
        require_marker=settings.require_marker,
    )

    prompts = tuple(
        assemble_prompt(candidate, tokenized, linked)
        for (candidate, tokenized), linked in zip(accepted, annotations)
    )
    skipped.sort(key=lambda s: s.index)
    return ExtractionResult(prompts=prompts, skipped=tuple(skipped))


def extract_prompts(
    source: str,
    candidates: Iterable[PromptCandidate],
    comment_lines: Sequence[SpanShape] = (),
    settings: ExtractionSettings | None = None,
) -> ExtractionResult:
    """
    Extract prompts from one source buffer.

    Args:
        source: The source code as a string (offsets are UTF-8 byte offsets).
        candidates: Prompt candidates reported by the language parser.
        comment_lines: One span shape per comment line, from the comment scanner.
        settings: Extraction settings; read from the environment when omitted.

    Returns:
        An ExtractionResult with prompts sorted by enclosure start and the
        skipped candidates with their reasons.
    """
    settings = settings or ExtractionSettings.from_env()
    code_bytes = source.encode("utf-8")

    accepted: list[tuple[PromptCandidate, TokenizedContent]] = []
    skipped: list[SkippedCandidate] = []
    for index, candidate in enumerate(candidates):
        try:
            accepted.append((candidate, _tokenize_candidate(candidate, code_bytes, settings)))
        except PromptLocatorError as e:
            skipped.append(_skip(index, candidate.file, e))

    return _finish(accepted, skipped, comment_lines, code_bytes, settings)


async def extract_prompts_async(
    source: str,
    candidates: Iterable[PromptCandidate],
    comment_lines: Sequence[SpanShape] = (),
    settings: ExtractionSettings | None = None,
) -> ExtractionResult:
    """
    Async version of extract_prompts that tokenizes candidates concurrently.

    Args:
        Same as extract_prompts

    Returns:
        Same as extract_prompts
    """
    settings = settings or ExtractionSettings.from_env()
    code_bytes = source.encode("utf-8")
    semaphore = asyncio.Semaphore(settings.max_concurrency)

    async def run(index: int, candidate: PromptCandidate):
        async with semaphore:
            try:
                # Run the tokenizer in a thread pool
                tokenized = await asyncio.to_thread(_tokenize_candidate, candidate, code_bytes, settings)
                return index, candidate, tokenized, None
            except PromptLocatorError as e:
                return index, candidate, None, e

    outcomes = await asyncio.gather(*(run(index, candidate) for index, candidate in enumerate(candidates)))

    accepted: list[tuple[PromptCandidate, TokenizedContent]] = []
    skipped: list[SkippedCandidate] = []
    for index, candidate, tokenized, error in outcomes:
        if error is not None:
            skipped.append(_skip(index, candidate.file, error))
        else:
            accepted.append((candidate, tokenized))

    return _finish(accepted, skipped, comment_lines, code_bytes, settings)


def _resolve_comment_lines(
    source: str,
    file: str,
    language_name: str | None,
    comment_lines: Sequence[SpanShape] | None,
) -> Sequence[SpanShape]:
    if comment_lines is not None:
        return comment_lines
    language_name = language_name or get_language_from_extension(file)
    if not language_name:
        logger.warning(f"Could not infer language for '{file}'. Prompts will have no annotations.")
        return []
    logger.info(f"Scanning {language_name} comments for {file}")
    return scan_comment_lines(source, language_name)


def extract_file(
    source: str,
    file: str,
    candidates: Iterable[PromptCandidate],
    language_name: str | None = None,
    comment_lines: Sequence[SpanShape] | None = None,
    settings: ExtractionSettings | None = None,
) -> ExtractionResult:
    """
    Extract prompts, scanning comments with tree-sitter when none are supplied.

    The language is inferred from `file` when `language_name` is not given.
    """
    comment_lines = _resolve_comment_lines(source, file, language_name, comment_lines)
    return extract_prompts(source, candidates, comment_lines, settings)


def extract_from_payload(
    source: str,
    payload: FilePayload | dict[str, Any],
    settings: ExtractionSettings | None = None,
) -> ExtractionResult:
    """
    Extract prompts from a JSON-shaped parser payload.

    The file-level payload must be valid (a pydantic ValidationError is
    raised otherwise); each candidate is validated on its own and skipped
    when malformed.
    """
    file_payload = payload if isinstance(payload, FilePayload) else FilePayload.model_validate(payload)

    language_name = file_payload.language or get_language_from_extension(file_payload.file)
    candidates: list[PromptCandidate] = []
    rejected: list[SkippedCandidate] = []
    for index, raw_candidate in enumerate(file_payload.candidates):
        try:
            candidate = CandidatePayload.model_validate(raw_candidate).to_candidate(file_payload.file, language_name)
            candidates.append(candidate)
        except CANDIDATE_ERRORS as e:
            rejected.append(_skip(index, file_payload.file, e))

    comment_lines = _resolve_comment_lines(source, file_payload.file, language_name, file_payload.comment_shapes())
    result = extract_prompts(source, candidates, comment_lines, settings)
    if not rejected:
        return result

    # Re-number the tokenizer's skips against the original payload positions.
    accepted_positions = [i for i in range(len(file_payload.candidates)) if i not in {r.index for r in rejected}]
    renumbered = [
        SkippedCandidate(index=accepted_positions[s.index], reason=s.reason, error_type=s.error_type)
        for s in result.skipped
    ]
    skipped = sorted(rejected + renumbered, key=lambda s: s.index)
    return ExtractionResult(prompts=result.prompts, skipped=tuple(skipped))
