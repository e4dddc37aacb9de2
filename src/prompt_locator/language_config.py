"""
Language configuration for the prompt locator.

This module contains, per language, the tree-sitter grammar used by the
comment scanner and the multi-line literal forms with the stripping rule
the language applies to them.
"""
from dataclasses import dataclass
from functools import lru_cache

import tree_sitter_language_pack
from tree_sitter import Parser

from .indentation import ClosingIndentRule, StrippingMode


@dataclass(frozen=True)
class LiteralForm:
    mode: StrippingMode = StrippingMode.NONE
    closing_rule: ClosingIndentRule | None = None


PLAIN = LiteralForm()
STRIP_BODY = LiteralForm(StrippingMode.COMMON_INDENT, ClosingIndentRule.IGNORE)
STRIP_WITH_CLOSING = LiteralForm(StrippingMode.COMMON_INDENT, ClosingIndentRule.PARTICIPATE)

# Literal forms are keyed by their opening token. Lookup uses the longest
# matching prefix, so `<<~` is found before `<<`.
LANGUAGE_CONFIG = {
    "python": {
        "grammar": "python",
        "comment_types": ["comment"],
        "literal_forms": {'"""': PLAIN, "'''": PLAIN, '"': PLAIN, "'": PLAIN},
    },
    "ruby": {
        "grammar": "ruby",
        "comment_types": ["comment"],
        "literal_forms": {"<<~": STRIP_BODY, "<<-": PLAIN, "<<": PLAIN, '"': PLAIN, "'": PLAIN, "%q": PLAIN, "%Q": PLAIN},
    },
    "javascript": {
        "grammar": "javascript",
        "comment_types": ["comment"],
        "literal_forms": {"`": PLAIN, '"': PLAIN, "'": PLAIN},
    },
    "typescript": {
        "grammar": "typescript",
        "comment_types": ["comment"],
        "literal_forms": {"`": PLAIN, '"': PLAIN, "'": PLAIN},
    },
    "php": {
        "grammar": "php",
        "comment_types": ["comment"],
        "literal_forms": {"<<<": STRIP_WITH_CLOSING, '"': PLAIN, "'": PLAIN},
    },
    "java": {
        "grammar": "java",
        "comment_types": ["line_comment", "block_comment"],
        "literal_forms": {'"""': STRIP_WITH_CLOSING, '"': PLAIN},
    },
    "go": {
        "grammar": "go",
        "comment_types": ["comment"],
        "literal_forms": {"`": PLAIN, '"': PLAIN},
    },
    "c#": {  # Identifier is 'csharp' in the pack
        "grammar": "csharp",
        "comment_types": ["comment"],
        "opener_prefix": "$",  # $$""" raw strings repeat the interpolation sign
        "literal_forms": {'"""': STRIP_WITH_CLOSING, '@"': PLAIN, '"': PLAIN},
    },
}


@lru_cache(maxsize=None)
def get_parser(language_name: str) -> Parser:
    """Load (once) the tree-sitter parser for a configured language."""
    return tree_sitter_language_pack.get_parser(LANGUAGE_CONFIG[language_name]["grammar"])


def literal_form(language_name: str, opener: str) -> LiteralForm:
    """
    Stripping behaviour for a literal that starts with `opener`.

    Unknown languages and openers fall back to no stripping. Leading
    `opener_prefix` characters are dropped before matching.
    """
    config = LANGUAGE_CONFIG.get(language_name, {})
    forms = config.get("literal_forms", {})
    opener = opener.lstrip(config.get("opener_prefix", ""))
    for token in sorted(forms, key=len, reverse=True):
        if opener.startswith(token):
            return forms[token]
    return PLAIN
