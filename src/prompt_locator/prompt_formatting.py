"""
Handles the formatting of extracted prompts into JSON-shaped documents,
rendered text, and source cuts for inspection.
"""
from .prompt import JointToken, Prompt, StrToken, VarToken

VAR_PLACEHOLDER = "{{{index}}}"


def prompt_to_dict(prompt: Prompt) -> dict:
    """
    Encode a prompt with the field names downstream tooling expects.

    Spans become `[start, end]` pairs and span shapes `{"outer", "inner"}`.
    """
    return {
        "file": prompt.file,
        "enclosure": prompt.enclosure.to_list(),
        "span": prompt.span.to_dict(),
        "content": [token.to_dict() for token in prompt.content],
        "joint": prompt.joint.to_dict(),
        "vars": [var.to_dict() for var in prompt.vars],
        "annotations": [annotation.to_dict() for annotation in prompt.annotations],
    }


def format_prompts(prompts) -> list[dict]:
    return [prompt_to_dict(prompt) for prompt in prompts]


def format_result(result) -> dict:
    """Encode an ExtractionResult, skipped candidates included."""
    return {
        "status": "success",
        "prompts": format_prompts(result.prompts),
        "skipped": [skipped.to_dict() for skipped in result.skipped],
    }


def render_prompt(prompt: Prompt, source: str, placeholder: str = VAR_PLACEHOLDER) -> str:
    """
    Rebuild the prompt text from its content tokens.

    Literal text comes from the source at each `str` span, variables become
    `placeholder` formatted with their index, and joints become the
    separator literal's content.
    """
    code_bytes = source.encode("utf-8")
    joint_text = prompt.joint.inner.extract(code_bytes)
    parts = []
    for token in prompt.content:
        if isinstance(token, StrToken):
            parts.append(token.span.extract(code_bytes))
        elif isinstance(token, VarToken):
            parts.append(placeholder.format(index=token.index))
        elif isinstance(token, JointToken):
            parts.append(joint_text)
    return "".join(parts)


def prompt_cuts(prompt: Prompt, source: str) -> dict:
    """Source text under each of the prompt's spans."""
    code_bytes = source.encode("utf-8")
    return {
        "enclosure": prompt.enclosure.extract(code_bytes),
        "outer": prompt.span.outer.extract(code_bytes),
        "inner": prompt.span.inner.extract(code_bytes),
        "vars": [
            {"outer": var.span.outer.extract(code_bytes), "inner": var.span.inner.extract(code_bytes)}
            for var in prompt.vars
        ],
        "annotations": [
            [
                {"outer": shape.outer.extract(code_bytes), "inner": shape.inner.extract(code_bytes)}
                for shape in annotation.spans
            ]
            for annotation in prompt.annotations
        ],
    }
