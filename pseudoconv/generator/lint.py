"""
Text-level cleanup and heuristic checks for generated Python.

Neither function parses Python; both look at lines only, so they work on
the output of every conversion strategy.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_BLANK_RUN = re.compile(r"\n\s*\n\s*\n")
_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_REPEATED_ZERO_INIT = re.compile(r"^([ \t]*)(\w+)\s*=\s*0\n\1\2\s*=\s*0$", re.MULTILINE)

_BLOCK_HEADER = re.compile(
    r"^\s*(if|elif|else|for|while|def|class|try|except|finally|with)\b.*:$"
)
_ASSIGNMENT_TARGET = re.compile(r"^\s*(\w+)\s*=(?!=)")


@dataclass
class LintIssue:
    line: int
    message: str
    type: str = "syntax"


@dataclass
class LintResult:
    is_valid: bool
    errors: list[LintIssue] = field(default_factory=list)
    warnings: list[LintIssue] = field(default_factory=list)


def optimize(code: str) -> str:
    """
    Best-effort textual cleanup of generated code.

    Collapses runs of blank lines to one, strips trailing whitespace and
    folds two consecutive identical zero initializations of the same name
    into one.
    """
    optimized = _BLANK_RUN.sub("\n\n", code)
    optimized = _TRAILING_SPACE.sub("", optimized)
    optimized = _REPEATED_ZERO_INIT.sub(r"\1\2 = 0", optimized)
    return optimized


def validate_python(code: str) -> LintResult:
    """
    Heuristic lint over generated Python.

    Reports, by line number:
      - a colon-terminated line that is not a block header (warning)
      - an unindented line right after a colon-terminated line (error)
      - an assignment target starting with a digit (error)

    Args:
        code: Generated Python text

    Returns:
        LintResult; ``is_valid`` is False when any error was found
    """
    errors: list[LintIssue] = []
    warnings: list[LintIssue] = []
    lines = code.split("\n")

    for index, line in enumerate(lines):
        number = index + 1

        if line.strip().endswith(":") and not _BLOCK_HEADER.match(line):
            warnings.append(LintIssue(number, "Unexpected colon in statement"))

        if index > 0 and line and not line.startswith((" ", "\t")):
            if lines[index - 1].strip().endswith(":"):
                errors.append(LintIssue(number, "Expected indented block"))

        target = _ASSIGNMENT_TARGET.match(line)
        if target and target.group(1)[0].isdigit():
            errors.append(LintIssue(number, f"Invalid variable name: {target.group(1)}"))

    return LintResult(is_valid=not errors, errors=errors, warnings=warnings)
