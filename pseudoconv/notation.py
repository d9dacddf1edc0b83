"""
Keyword and symbol tables for the exam pseudo-language.

The notation is accepted in two renderings: an English one
(``integer: x``, ``if x > 0 then``, ``for i from 0 to 9 step 1``) and the
Japanese original (``整数型：x``, ``もし x > 0 ならば``,
``i を 0 から 9 まで 1 ずつ増やす``). Every fragment below is a regular
expression alternation covering both, so the rule catalog, the parser and
the syntax checker agree on one vocabulary.
"""

from __future__ import annotations

import re

# Declarations
COLON = r"[:：]"
INTEGER_TYPE = r"(?:integer|整数型|整数)"
STRING_TYPE = r"(?:string|文字列型)"
ARRAY_TYPE = r"(?:array|配列)"

# Control structures
IF = r"(?:if|もし)"
THEN = r"(?:then|ならば)"
ELSE = r"(?:else|そうでなければ)"
WHILE = r"while"
DO = r"do"
WHILE_SUFFIX = r"の間[，,]\s*繰り返す"
FOR = r"for"
FROM = r"from"
TO = r"to"
STEP = r"step"
FOR_FROM = r"を"
FOR_START = r"から"
FOR_END = r"まで"
FOR_STEP = r"ずつ増やす"

# Procedures
PROCEDURE = r"(?:procedure|手続き)"
RETURN = r"(?:return|戻り値)"

ASSIGN_ARROW = "←"

DATA_TYPES = ("integer", "string", "array")

DATA_TYPE_KEYWORDS = {
    "integer": "integer",
    "整数型": "integer",
    "整数": "integer",
    "string": "string",
    "文字列型": "string",
    "array": "array",
    "配列": "array",
}

# Python annotation for each declared data type
PYTHON_TYPE_HINTS = {
    "integer": "int",
    "string": "str",
    "array": "list[int]",
}

# Glyph operators and their Python spelling
OPERATOR_SYMBOLS = {
    "≠": "!=",
    "≤": "<=",
    "≥": ">=",
    "←": "=",
    "×": "*",
    "÷": "//",
    "mod": "%",
}

# Binary operators tried, in this order, when splitting an expression.
# Multi-character spellings precede their single-character prefixes; the
# word operator carries its surrounding spaces so names containing it stay
# whole.
BINARY_OPERATORS = (
    "≠", "!=", "≤", "<=", "≥", ">=", "<", ">", "==",
    "+", "-", "×", "÷", "*", "//", "/", "%", " mod ",
)

_NUMERIC = re.compile(r"^\d+$")


def data_type_of(keyword: str) -> str | None:
    """Map a declaration keyword (either rendering) to its data type."""
    return DATA_TYPE_KEYWORDS.get(keyword.strip().lower())


def python_type_hint(declared: str) -> str | None:
    """Python annotation for a declared type keyword or data type name."""
    data_type = data_type_of(declared) or declared
    return PYTHON_TYPE_HINTS.get(data_type)


def adjust_range_end(end: str) -> str:
    """
    Turn an inclusive loop bound into an exclusive ``range()`` bound.

    The pseudo-language counts ``from 0 to 9`` inclusively. A purely
    numeric bound is incremented; anything else (``n-1``, ``len(a)``,
    ``k+1``) passes through unchanged. This is a textual heuristic: it does
    not evaluate the expression, so ``n+0`` is also passed through.

    Args:
        end: Rendered end expression

    Returns:
        Exclusive upper bound text
    """
    text = end.strip()
    if "-" in text or "+" in text or not _NUMERIC.match(text):
        return text
    return str(int(text) + 1)
