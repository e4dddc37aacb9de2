"""
Configuration settings for the prompt locator.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .indentation import ClosingIndentRule

# Load environment variables
load_dotenv()

# ========================================
# ANNOTATION LINKING
# ========================================
DEFAULT_BLANK_LINE_TOLERANCE = 0  # Blank lines allowed inside one comment block
DEFAULT_REQUIRE_MARKER = False  # Only link comment blocks carrying `@prompt`

# ========================================
# INDENTATION
# ========================================
DEFAULT_CLOSING_INDENT_RULE = ClosingIndentRule.IGNORE.value  # "ignore" or "participate"

# ========================================
# CONCURRENCY
# ========================================
DEFAULT_MAX_CONCURRENCY = 8  # Candidates tokenized at once by the async extractor

# ========================================
# LOGGING
# ========================================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

_TRUE_VALUES = ("1", "true", "yes", "on")


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


@dataclass(frozen=True)
class ExtractionSettings:
    """Snapshot of the settings one extraction pass runs with."""
    blank_line_tolerance: int = DEFAULT_BLANK_LINE_TOLERANCE
    require_marker: bool = DEFAULT_REQUIRE_MARKER
    closing_indent_rule: ClosingIndentRule = ClosingIndentRule(DEFAULT_CLOSING_INDENT_RULE)
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    def __post_init__(self):
        if self.blank_line_tolerance < 0:
            raise ValueError("Blank line tolerance must be non-negative")
        if self.max_concurrency < 1:
            raise ValueError("Max concurrency must be at least 1")

    @classmethod
    def from_env(cls) -> "ExtractionSettings":
        return cls(
            blank_line_tolerance=int(os.getenv("PROMPT_LOCATOR_BLANK_LINE_TOLERANCE", str(DEFAULT_BLANK_LINE_TOLERANCE))),
            require_marker=os.getenv("PROMPT_LOCATOR_REQUIRE_MARKER", str(DEFAULT_REQUIRE_MARKER)).lower() in _TRUE_VALUES,
            closing_indent_rule=ClosingIndentRule(os.getenv("PROMPT_LOCATOR_CLOSING_INDENT", DEFAULT_CLOSING_INDENT_RULE).lower()),
            max_concurrency=int(os.getenv("PROMPT_LOCATOR_MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY))),
        )
