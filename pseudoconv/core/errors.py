"""
Converter exceptions and diagnostic formatting.

Exceptions here never escape ``PseudoCodeConverter.convert``: syntax
errors are caught per line by the parser, generation errors per statement
by the generator, and anything else is turned into a failed result.
"""

from __future__ import annotations


class PseudoCodeError(Exception):
    """Base exception for pseudo-code conversion errors."""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        super().__init__(message if line is None else f"line {line}: {message}")


class PseudoSyntaxError(PseudoCodeError):
    """A pseudo-code construct is missing a required part."""


class GenerationError(PseudoCodeError):
    """A tree node has no Python rendering."""


def format_source_context(source: str, line: int, radius: int = 2) -> str:
    """
    Render a numbered excerpt of ``source`` around ``line``.

    The target line is marked with ``>``. Line 0 (whole-input diagnostics)
    and lines outside the source yield an empty string.

    Args:
        source: Pseudo-code text the diagnostic refers to
        line: 1-based line number
        radius: Number of lines shown before and after the target

    Returns:
        Numbered source listing
    """
    lines = source.split("\n")
    if line < 1 or line > len(lines):
        return ""

    first = max(1, line - radius)
    last = min(len(lines), line + radius)
    listing = []
    for number in range(first, last + 1):
        marker = ">" if number == line else " "
        listing.append(f"{marker}{number:4d}:\t{lines[number - 1]}")
    return "\n".join(listing)
