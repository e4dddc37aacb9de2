"""
Handles the assembly of a single Prompt from the outputs of the earlier stages.
"""
from .content_tokenizer import TokenizedContent
from .fragments import PromptCandidate
from .prompt import Prompt, PromptAnnotation


def assemble_prompt(
    candidate: PromptCandidate,
    tokenized: TokenizedContent,
    annotations: tuple[PromptAnnotation, ...] = (),
) -> Prompt:
    """
    Compose the final Prompt record.

    Args:
        candidate: The parser's description of the prompt expression.
        tokenized: Content tokens, vars and joint from the tokenizer.
        annotations: Comment blocks linked to this prompt.

    Returns:
        The immutable Prompt record.
    """
    return Prompt(
        file=candidate.file,
        enclosure=candidate.enclosure,
        span=candidate.span,
        content=tokenized.content,
        joint=tokenized.joint,
        vars=tokenized.vars,
        annotations=tuple(annotations),
    )
