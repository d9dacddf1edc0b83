"""
Text rewrite rules for the pattern-based conversion strategy.

Each rule is a regular expression paired with either a replacement
template (``\\g<n>`` back-references) or a function over the captured
groups. Rules are applied to the whole text in descending priority; rules
of equal priority keep their catalog order.

Line-oriented rules are anchored with ``re.MULTILINE`` and capture the
line's leading whitespace as group 1 so the rewritten line keeps its
indentation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from .. import notation as nt


class RuleCategory(str, Enum):
    """Kind of construct a rule rewrites."""

    DECLARATION = "declaration"
    ASSIGNMENT = "assignment"
    CONTROL_STRUCTURE = "control_structure"
    FUNCTION_DEFINITION = "function_definition"
    OPERATOR = "operator"
    EXPRESSION = "expression"
    STATEMENT = "statement"


Replacement = Union[str, Callable[..., str]]


@dataclass(frozen=True)
class RuleExample:
    input: str
    output: str
    description: str = ""


@dataclass(frozen=True)
class Rule:
    """
    A prioritized pattern → template rewrite.

    Attributes:
        id: Stable identifier, used in conversion steps
        name: Short human-readable name
        description: What the rule converts
        pattern: Compiled regular expression
        replacement: Template string, or callable receiving the captured groups
        priority: Higher applies first
        category: Construct family
        enabled: Disabled rules are skipped by ``get_enabled``
        examples: Input/output pairs the rule reproduces exactly
    """

    id: str
    name: str
    description: str
    pattern: re.Pattern
    replacement: Replacement
    priority: int
    category: RuleCategory
    enabled: bool = True
    examples: tuple[RuleExample, ...] = field(default_factory=tuple)


def _line(body: str) -> re.Pattern:
    """Compile a line-anchored pattern whose group 1 is the indentation."""
    return re.compile(rf"^([ \t]*){body}[ \t]*$", re.MULTILINE)


def _pick(groups: tuple[Optional[str], ...], width: int) -> tuple[str, ...]:
    """Return the first fully captured alternative of ``width`` groups."""
    for offset in range(0, len(groups), width):
        chunk = groups[offset:offset + width]
        if all(value is not None for value in chunk):
            return tuple(chunk)
    raise ValueError("no alternative captured")


def _expand_integers(indent: str, names: str) -> str:
    return "\n".join(f"{indent}{name.strip()} = 0" for name in names.split(","))


def _while_loop(indent: str, *conditions: Optional[str]) -> str:
    (condition,) = _pick(conditions, 1)
    return f"{indent}while {condition.strip()}:"


def _numeric_for(indent: str, *groups: Optional[str]) -> str:
    variable, start, end, step = _pick(groups, 4)
    return f"{indent}for {variable} in range({start}, {int(end) + 1}, {step}):"


def _expression_for(indent: str, *groups: Optional[str]) -> str:
    variable, start, end, step = (part.strip() for part in _pick(groups, 4))
    return f"{indent}for {variable} in range({start}, {nt.adjust_range_end(end)}, {step}):"


def _parameter_names(params: str) -> str:
    names = []
    for param in params.split(","):
        param = param.strip()
        if not param:
            continue
        typed = re.match(rf"[^:：]+{nt.COLON}\s*(\w+)", param)
        plain = re.match(r"(\w+)", param)
        match = typed or plain
        names.append(match.group(1) if match else param)
    return ", ".join(names)


def _procedure(indent: str, name: str, params: str) -> str:
    return f"{indent}def {name}({_parameter_names(params)}):"


CONVERSION_RULES: tuple[Rule, ...] = (
    # Declarations
    Rule(
        id="var_integer",
        name="Integer declaration",
        description="Declare an integer variable initialised to 0",
        pattern=_line(rf"{nt.INTEGER_TYPE}[ \t]*{nt.COLON}[ \t]*(\w+)"),
        replacement=r"\g<1>\g<2> = 0",
        priority=100,
        category=RuleCategory.DECLARATION,
        examples=(
            RuleExample("integer: count", "count = 0", "integer variable"),
            RuleExample("整数型：count", "count = 0", "integer variable (Japanese)"),
        ),
    ),
    Rule(
        id="var_string",
        name="String declaration",
        description="Declare a string variable initialised to the empty string",
        pattern=_line(rf"{nt.STRING_TYPE}[ \t]*{nt.COLON}[ \t]*(\w+)"),
        replacement=r'\g<1>\g<2> = ""',
        priority=100,
        category=RuleCategory.DECLARATION,
        examples=(
            RuleExample("string: name", 'name = ""', "string variable"),
            RuleExample("文字列型：name", 'name = ""', "string variable (Japanese)"),
        ),
    ),
    Rule(
        id="var_multiple_integers",
        name="Integer list declaration",
        description="Declare several comma-separated integer variables",
        pattern=_line(
            rf"{nt.INTEGER_TYPE}[ \t]*{nt.COLON}[ \t]*(\w+(?:[ \t]*,[ \t]*\w+)+)"
        ),
        replacement=_expand_integers,
        priority=105,
        category=RuleCategory.DECLARATION,
        examples=(
            RuleExample(
                "integer: i, j, temp",
                "i = 0\nj = 0\ntemp = 0",
                "every name is initialised",
            ),
            RuleExample("整数:i, j", "i = 0\nj = 0", "integer list (Japanese)"),
        ),
    ),
    Rule(
        id="array_declaration",
        name="Array declaration",
        description="Declare a zero-filled list of the given size",
        pattern=_line(rf"{nt.ARRAY_TYPE}[ \t]*{nt.COLON}[ \t]*(\w+)\((\d+)\)"),
        replacement=r"\g<1>\g<2> = [0] * \g<3>",
        priority=95,
        category=RuleCategory.DECLARATION,
        examples=(
            RuleExample("array: numbers(10)", "numbers = [0] * 10", "sized array"),
            RuleExample("配列：numbers(10)", "numbers = [0] * 10", "sized array (Japanese)"),
        ),
    ),
    Rule(
        id="array_declaration_with_type",
        name="Typed array declaration",
        description="Declare a zero-filled list with an element type and size",
        pattern=_line(
            rf"{nt.ARRAY_TYPE}[ \t]*{nt.COLON}[ \t]*(\w+)\([^)]*?,[ \t]*(\d+)\)"
        ),
        replacement=r"\g<1>\g<2> = [0] * \g<3>",
        priority=96,
        category=RuleCategory.DECLARATION,
        examples=(
            RuleExample("array: B(integer, 5)", "B = [0] * 5", "element type is dropped"),
            RuleExample("配列：B(整数型, 5)", "B = [0] * 5", "typed array (Japanese)"),
        ),
    ),
    # Assignment
    Rule(
        id="assignment",
        name="Assignment",
        description="Replace the assignment arrow with '='",
        pattern=_line(r"(\w+(?:\[[^\]]*\])?)[ \t]*←[ \t]*(.+?)"),
        replacement=r"\g<1>\g<2> = \g<3>",
        priority=90,
        category=RuleCategory.ASSIGNMENT,
        examples=(
            RuleExample("x ← 10", "x = 10", "simple assignment"),
            RuleExample("array[i] ← value", "array[i] = value", "element assignment"),
        ),
    ),
    # Control structures
    Rule(
        id="if_statement",
        name="If statement",
        description="Convert a conditional header to an if block",
        pattern=_line(rf"{nt.IF}[ \t]+(.+?)[ \t]+{nt.THEN}"),
        replacement=r"\g<1>if \g<2>:",
        priority=85,
        category=RuleCategory.CONTROL_STRUCTURE,
        examples=(
            RuleExample("if x > 0 then", "if x > 0:", "condition"),
            RuleExample("もし x > 0 ならば", "if x > 0:", "condition (Japanese)"),
        ),
    ),
    Rule(
        id="else_statement",
        name="Else clause",
        description="Convert the else marker",
        pattern=_line(nt.ELSE),
        replacement=r"\g<1>else:",
        priority=84,
        category=RuleCategory.CONTROL_STRUCTURE,
        examples=(
            RuleExample("else", "else:", "else clause"),
            RuleExample("そうでなければ", "else:", "else clause (Japanese)"),
        ),
    ),
    Rule(
        id="while_statement",
        name="While loop",
        description="Convert a conditional loop header",
        pattern=_line(
            rf"(?:{nt.WHILE}[ \t]+(.+?)[ \t]+{nt.DO}|(.+?)[ \t]*{nt.WHILE_SUFFIX})"
        ),
        replacement=_while_loop,
        priority=83,
        category=RuleCategory.CONTROL_STRUCTURE,
        examples=(
            RuleExample("while i < n do", "while i < n:", "while loop"),
            RuleExample("i < n の間，繰り返す", "while i < n:", "while loop (Japanese)"),
        ),
    ),
    Rule(
        id="for_loop",
        name="Counted loop",
        description="Convert a loop with numeric bounds to range()",
        pattern=_line(
            rf"(?:(?:{nt.FOR}[ \t]+)?(\w+)[ \t]+{nt.FROM}[ \t]+(\d+)[ \t]+{nt.TO}[ \t]+(\d+)"
            rf"[ \t]+{nt.STEP}[ \t]+(\d+)"
            rf"|(\w+)[ \t]*{nt.FOR_FROM}[ \t]*(\d+)[ \t]*{nt.FOR_START}[ \t]*(\d+)"
            rf"[ \t]*{nt.FOR_END}[ \t]*(\d+)[ \t]*{nt.FOR_STEP})"
        ),
        replacement=_numeric_for,
        priority=82,
        category=RuleCategory.CONTROL_STRUCTURE,
        examples=(
            RuleExample("for i from 0 to 9 step 1", "for i in range(0, 10, 1):", "inclusive bound"),
            RuleExample(
                "i を 0 から 9 まで 1 ずつ増やす",
                "for i in range(0, 10, 1):",
                "inclusive bound (Japanese)",
            ),
        ),
    ),
    Rule(
        id="for_loop_expression",
        name="Counted loop with expression bounds",
        description="Convert a loop whose bounds are expressions to range()",
        pattern=_line(
            rf"(?:(?:{nt.FOR}[ \t]+)?(\w+)[ \t]+{nt.FROM}[ \t]+(.+?)[ \t]+{nt.TO}[ \t]+(.+?)"
            rf"[ \t]+{nt.STEP}[ \t]+(\d+)"
            rf"|(\w+)[ \t]*{nt.FOR_FROM}[ \t]*(.+?)[ \t]*{nt.FOR_START}[ \t]*(.+?)"
            rf"[ \t]*{nt.FOR_END}[ \t]*(\d+)[ \t]*{nt.FOR_STEP})"
        ),
        replacement=_expression_for,
        priority=81,
        category=RuleCategory.CONTROL_STRUCTURE,
        examples=(
            RuleExample(
                "for i from 0 to n-1 step 1",
                "for i in range(0, n-1, 1):",
                "expression bound passes through",
            ),
            RuleExample(
                "i を 1 から n まで 1 ずつ増やす",
                "for i in range(1, n, 1):",
                "expression bound passes through (Japanese)",
            ),
        ),
    ),
    # Procedures
    Rule(
        id="procedure_definition",
        name="Procedure definition",
        description="Convert a procedure header to a def, dropping parameter types",
        pattern=_line(rf"{nt.PROCEDURE}[ \t]+(\w+)\((.*?)\)"),
        replacement=_procedure,
        priority=75,
        category=RuleCategory.FUNCTION_DEFINITION,
        examples=(
            RuleExample("procedure sort(array: A, integer: n)", "def sort(A, n):", "typed parameters"),
            RuleExample("手続き sort(配列:A, 整数:n)", "def sort(A, n):", "typed parameters (Japanese)"),
            RuleExample("procedure main()", "def main():", "no parameters"),
        ),
    ),
    Rule(
        id="return_statement",
        name="Return statement",
        description="Convert a return statement",
        pattern=_line(rf"{nt.RETURN}[ \t]+(.+?)"),
        replacement=r"\g<1>return \g<2>",
        priority=70,
        category=RuleCategory.STATEMENT,
        examples=(
            RuleExample("return result", "return result", "value return"),
            RuleExample("戻り値 result", "return result", "value return (Japanese)"),
        ),
    ),
    # Operators
    Rule(
        id="operator_not_equal",
        name="Not-equal operator",
        description="Replace the not-equal glyph",
        pattern=re.compile("≠"),
        replacement="!=",
        priority=65,
        category=RuleCategory.OPERATOR,
        examples=(RuleExample("x ≠ y", "x != y", "not equal"),),
    ),
    Rule(
        id="operator_less_equal",
        name="Less-or-equal operator",
        description="Replace the less-or-equal glyph",
        pattern=re.compile("≤"),
        replacement="<=",
        priority=65,
        category=RuleCategory.OPERATOR,
        examples=(RuleExample("x ≤ y", "x <= y", "less or equal"),),
    ),
    Rule(
        id="operator_greater_equal",
        name="Greater-or-equal operator",
        description="Replace the greater-or-equal glyph",
        pattern=re.compile("≥"),
        replacement=">=",
        priority=65,
        category=RuleCategory.OPERATOR,
        examples=(RuleExample("x ≥ y", "x >= y", "greater or equal"),),
    ),
    Rule(
        id="operator_multiply",
        name="Multiplication operator",
        description="Replace the multiplication sign",
        pattern=re.compile("×"),
        replacement="*",
        priority=64,
        category=RuleCategory.OPERATOR,
        examples=(RuleExample("x × y", "x * y", "multiplication"),),
    ),
    Rule(
        id="operator_integer_division",
        name="Integer division operator",
        description="Replace the division sign with floor division",
        pattern=re.compile("÷"),
        replacement="//",
        priority=64,
        category=RuleCategory.OPERATOR,
        examples=(RuleExample("x ÷ y", "x // y", "integer division"),),
    ),
    Rule(
        id="operator_modulo",
        name="Modulo operator",
        description="Replace the mod keyword with '%'",
        pattern=re.compile(r"(?<=\s)mod(?=\s)"),
        replacement="%",
        priority=64,
        category=RuleCategory.OPERATOR,
        examples=(RuleExample("x mod y", "x % y", "remainder"),),
    ),
)


class RuleCatalog:
    """
    Read-only, ordered collection of conversion rules.

    The catalog never changes after construction; every query returns a new
    list so callers cannot reorder the catalog itself.
    """

    def __init__(self, rules: Iterable[Rule] = CONVERSION_RULES):
        self._rules: tuple[Rule, ...] = tuple(rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def get_all(self) -> list[Rule]:
        """All rules in catalog order, enabled or not."""
        return list(self._rules)

    def get_enabled(self) -> list[Rule]:
        """Enabled rules in catalog order."""
        return [rule for rule in self._rules if rule.enabled]

    def get_by_category(self, category: RuleCategory | str) -> list[Rule]:
        """Enabled rules of one category, in catalog order."""
        category = RuleCategory(category)
        return [rule for rule in self._rules if rule.category is category and rule.enabled]

    def get_by_id(self, rule_id: str) -> Rule | None:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    @staticmethod
    def sort_by_priority(rules: Iterable[Rule]) -> list[Rule]:
        """Sort by descending priority; equal priorities keep their input order."""
        return sorted(rules, key=lambda rule: -rule.priority)

    @staticmethod
    def matches(rule: Rule, text: str) -> bool:
        return rule.pattern.search(text) is not None

    @staticmethod
    def apply_one(rule: Rule, text: str) -> str:
        """
        Apply a single rule to every match in ``text``.

        Template replacements expand ``\\g<n>`` back-references; callable
        replacements are called with the match's captured groups (``None``
        for groups that did not participate).

        Args:
            rule: Rule to apply
            text: Input text

        Returns:
            Rewritten text (unchanged when nothing matches)
        """
        replacement = rule.replacement
        if callable(replacement):
            return rule.pattern.sub(lambda match: replacement(*match.groups()), text)
        return rule.pattern.sub(replacement, text)

    def apply_all(self, text: str) -> tuple[str, list[str]]:
        """
        Apply every enabled rule in priority order.

        Returns:
            Tuple of (rewritten text, ids of rules that changed the text)
        """
        applied: list[str] = []
        for rule in self.sort_by_priority(self.get_enabled()):
            rewritten = self.apply_one(rule, text)
            if rewritten != text:
                applied.append(rule.id)
                text = rewritten
        return text, applied


DEFAULT_CATALOG = RuleCatalog()
