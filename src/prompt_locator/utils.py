"""
Utility functions for the prompt locator.

This module contains helpers for working with byte offsets in source buffers.
"""
from bisect import bisect_right


def byte_length(text: str) -> int:
    """Length of `text` once encoded as UTF-8."""
    return len(text.encode('utf-8'))


class LineIndex:
    """
    Maps byte offsets to 0-based line numbers.

    Line starts are computed once per buffer so lookups are a bisect.
    """

    def __init__(self, code_bytes: bytes):
        self.line_starts = [0]
        position = code_bytes.find(b'\n')
        while position != -1:
            self.line_starts.append(position + 1)
            position = code_bytes.find(b'\n', position + 1)

    def line_of(self, offset: int) -> int:
        return bisect_right(self.line_starts, max(offset, 0)) - 1

