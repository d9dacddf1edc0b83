"""
Line-oriented parser for the exam pseudo-language.

Each non-blank line becomes exactly one statement. Lines are classified in
a fixed priority order (declarations, array declarations, procedure
headers, if headers, else markers, counted loops, conditional loops,
returns, assignments) and anything unrecognised is kept as an opaque
literal so no source text is lost.

Compound statements are flat by default: their bodies stay empty and the
lines that follow them are siblings in ``Program.body``. With
``nest_blocks=True`` the parser uses indentation to fill the bodies
instead, including the bodies of opaque lines that already are Python
block headers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .. import notation as nt
from ..core.errors import PseudoSyntaxError
from .ast import (
    ArrayAccess,
    Assignment,
    BinaryExpression,
    Expression,
    ExpressionStatement,
    ForStatement,
    FunctionCall,
    Identifier,
    IfStatement,
    Literal,
    Parameter,
    ProcedureDeclaration,
    Program,
    ProgramMetadata,
    ReturnStatement,
    Statement,
    VariableDeclaration,
    VariableInfo,
    WhileStatement,
    child_blocks,
)

logger = logging.getLogger(__name__)

ELSE_MARKER = "else:"

# Line classifiers, in priority order
_DECLARATION = re.compile(
    rf"^(?P<keyword>{nt.INTEGER_TYPE}|{nt.STRING_TYPE})\s*{nt.COLON}\s*(?P<names>.+)$",
    re.IGNORECASE,
)
_ARRAY_HEADER = re.compile(rf"^{nt.ARRAY_TYPE}\s*{nt.COLON}", re.IGNORECASE)
_ARRAY_SIZED = re.compile(rf"^{nt.ARRAY_TYPE}\s*{nt.COLON}\s*(\w+)\((\d+)\)", re.IGNORECASE)
_ARRAY_TYPED = re.compile(
    rf"^{nt.ARRAY_TYPE}\s*{nt.COLON}\s*(\w+)\([^)]*?,\s*(\d+)\)", re.IGNORECASE
)
_PROCEDURE_HEADER = re.compile(rf"^{nt.PROCEDURE}(?:\s+|$)")
_PROCEDURE = re.compile(rf"^{nt.PROCEDURE}\s+(\w+)\((.*?)\)")
_PARAMETER = re.compile(rf"^([^:：]+){nt.COLON}\s*(\w+)$")
_IF_HEADER = re.compile(rf"^{nt.IF}\s+")
_IF = re.compile(rf"^{nt.IF}\s+(.+?)\s+{nt.THEN}\s*$")
_ELSE = re.compile(rf"^(?:else\b|そうでなければ)")
_FOR = re.compile(
    rf"^(?:{nt.FOR}\s+)?(\w+)\s+{nt.FROM}\s+(.+?)\s+{nt.TO}\s+(.+?)\s+{nt.STEP}\s+(\d+)\s*$"
)
_FOR_JA = re.compile(
    rf"(\w+)\s*{nt.FOR_FROM}\s*(.+?)\s*{nt.FOR_START}\s*(.+?)\s*{nt.FOR_END}\s*(\d+)\s*{nt.FOR_STEP}"
)
_WHILE = re.compile(rf"^{nt.WHILE}\s+(.+?)\s+{nt.DO}\s*$")
_WHILE_JA = re.compile(rf"^(.+?)\s*{nt.WHILE_SUFFIX}\s*$")
_RETURN = re.compile(rf"^{nt.RETURN}\s+(.+)$")
_ASSIGNMENT = re.compile(rf"^(.+?)\s*{nt.ASSIGN_ARROW}\s*(.+)$")

# Expression forms
_INTEGER = re.compile(r"^\d+$")
_ARRAY_ACCESS = re.compile(r"^(\w+)\[(.+)\]$")
_CALL = re.compile(r"^(\w+)\((.*)\)$")

# Header checks used by validate_syntax
_CHECK_PROCEDURE = re.compile(rf"^{nt.PROCEDURE}(?:\s|$)")
_CHECK_IF = re.compile(rf"^{nt.IF}\s")
_CHECK_THEN = re.compile(rf"(?:\bthen\b|ならば)")
_CHECK_LOOP_EN = re.compile(rf"^(?:{nt.FOR}\s+)?\w+\s+{nt.FROM}\s+.+\s+{nt.TO}\s+")
_CHECK_STEP_EN = re.compile(rf"\s{nt.STEP}\s")


@dataclass
class SyntaxIssue:
    """A problem found by ``validate_syntax``."""

    line: int
    column: int
    message: str
    severity: str  # "error" | "warning"


def _closing_bracket(text: str, open_index: int) -> int:
    """Index of the bracket closing the one at ``open_index``, or -1."""
    depth = 0
    for index in range(open_index, len(text)):
        if text[index] == "[":
            depth += 1
        elif text[index] == "]":
            depth -= 1
            if depth == 0:
                return index
    return -1


def is_else_marker(statement: Statement) -> bool:
    """True for the ExpressionStatement the parser emits for an else line."""
    return (
        isinstance(statement, ExpressionStatement)
        and isinstance(statement.expression, Literal)
        and statement.expression.value == ELSE_MARKER
    )


class SyntaxParser:
    """
    Parse pseudo-code text into a Program tree.

    The parser keeps no state between calls; one instance can be shared.
    """

    def __init__(self, nest_blocks: bool = False):
        """
        Initialize parser.

        Args:
            nest_blocks: Use indentation to fill compound statement bodies
        """
        self.nest_blocks = nest_blocks

    def parse(self, text: str) -> Program:
        """
        Parse pseudo-code into a Program.

        Never raises: a line that cannot be classified is logged and
        skipped, and the rest of the text is still parsed.

        Args:
            text: Newline-separated pseudo-code

        Returns:
            Program with body and metadata
        """
        entries = [
            (len(raw) - len(raw.lstrip()), raw.strip())
            for raw in (text or "").expandtabs(4).splitlines()
            if raw.strip()
        ]

        body: list[Statement] = []
        variables: list[VariableInfo] = []
        procedures: list[str] = []
        complexity = 0
        # (indent width, statement list) pairs; the root list never pops
        blocks: list[tuple[int, list[Statement]]] = [(-1, body)]

        for number, (width, line) in enumerate(entries, start=1):
            try:
                statement = self.parse_statement(line, number)
            except PseudoSyntaxError as error:
                logger.warning(f"Parse error at line {number}: {line!r} ({error.message})")
                continue
            except Exception:
                logger.exception(f"Parse error at line {number}: {line!r}")
                continue

            if isinstance(statement, VariableDeclaration):
                variables.append(
                    VariableInfo(
                        name=statement.name,
                        type=statement.data_type,
                        size=statement.size,
                        line=number,
                    )
                )
            elif isinstance(statement, ProcedureDeclaration):
                procedures.append(statement.name)
                complexity += 2
            elif isinstance(statement, (IfStatement, ForStatement, WhileStatement)):
                complexity += 1

            if not self.nest_blocks:
                body.append(statement)
                continue

            while blocks[-1][0] >= width:
                blocks.pop()
            container = blocks[-1][1]

            if (
                is_else_marker(statement)
                and container
                and isinstance(container[-1], IfStatement)
                and container[-1].alternate is None
            ):
                container[-1].alternate = []
                blocks.append((width, container[-1].alternate))
                continue

            container.append(statement)
            for block in child_blocks(statement):
                blocks.append((width, block))

        return Program(
            body=body,
            metadata=ProgramMetadata(
                total_lines=len(entries),
                complexity=complexity,
                procedures=procedures,
                variables=variables,
            ),
        )

    def parse_statement(self, line: str, number: int) -> Statement:
        """
        Classify one trimmed line.

        Raises:
            PseudoSyntaxError: If a recognised header is malformed
        """
        if _DECLARATION.match(line):
            return self._parse_declaration(line, number)

        if _ARRAY_HEADER.match(line):
            return self._parse_array_declaration(line, number)

        if _PROCEDURE_HEADER.match(line) and not line.endswith(":"):
            return self._parse_procedure(line, number)

        if _IF_HEADER.match(line) and not line.endswith(":"):
            return self._parse_if(line, number)

        if _ELSE.match(line):
            return ExpressionStatement(
                expression=Literal(value=ELSE_MARKER, raw=ELSE_MARKER),
                line=number,
            )

        loop = _FOR.match(line) or _FOR_JA.search(line)
        if loop:
            variable, start, end, step = loop.groups()
            return ForStatement(
                variable=variable,
                start=self.parse_expression(start),
                end=self.parse_expression(end),
                step=self.parse_expression(step),
                line=number,
            )

        loop = _WHILE.match(line) or _WHILE_JA.match(line)
        if loop:
            return WhileStatement(condition=self.parse_expression(loop.group(1)), line=number)

        match = _RETURN.match(line)
        if match:
            return ReturnStatement(argument=self.parse_expression(match.group(1)), line=number)

        if nt.ASSIGN_ARROW in line:
            match = _ASSIGNMENT.match(line)
            if not match:
                raise PseudoSyntaxError("assignment is missing a target or value", number)
            return Assignment(
                left=self.parse_expression(match.group(1)),
                right=self.parse_expression(match.group(2)),
                line=number,
            )

        return ExpressionStatement(expression=Literal(value=line, raw=line), line=number)

    def _parse_declaration(self, line: str, number: int) -> VariableDeclaration:
        match = _DECLARATION.match(line)
        data_type = nt.data_type_of(match.group("keyword"))
        # Only the first name of a comma list is kept; the rule catalog
        # expands the full list.
        name = match.group("names").split(",")[0].strip()
        if not re.fullmatch(r"\w+", name):
            raise PseudoSyntaxError(f"invalid variable name {name!r}", number)
        return VariableDeclaration(data_type=data_type, name=name, line=number)

    def _parse_array_declaration(self, line: str, number: int) -> VariableDeclaration:
        match = _ARRAY_SIZED.match(line) or _ARRAY_TYPED.match(line)
        if not match:
            raise PseudoSyntaxError("array declaration needs a size", number)
        return VariableDeclaration(
            data_type="array",
            name=match.group(1),
            size=int(match.group(2)),
            line=number,
        )

    def _parse_procedure(self, line: str, number: int) -> ProcedureDeclaration:
        match = _PROCEDURE.match(line)
        if not match:
            raise PseudoSyntaxError("procedure header needs a parameter list", number)

        parameters = []
        for param in match.group(2).split(","):
            param = param.strip()
            if not param:
                continue
            typed = _PARAMETER.match(param)
            if typed:
                parameters.append(Parameter(type=typed.group(1).strip(), name=typed.group(2)))
            elif re.fullmatch(r"\w+", param):
                parameters.append(Parameter(type="", name=param))
            else:
                logger.debug(f"Ignoring parameter {param!r} at line {number}")

        return ProcedureDeclaration(name=match.group(1), parameters=parameters, line=number)

    def _parse_if(self, line: str, number: int) -> IfStatement:
        match = _IF.match(line)
        if not match:
            raise PseudoSyntaxError("if header is missing 'then'", number)
        return IfStatement(condition=self.parse_expression(match.group(1)), line=number)

    def parse_expression(self, text: str) -> Expression:
        """
        Parse an expression.

        Forms are tried in order: integer literal, quoted string, array
        element ``name[expr]``, a single split at the first operator from
        ``BINARY_OPERATORS`` found in the text, call ``name(args)``, and
        finally a plain identifier holding the text.
        """
        text = text.strip()

        if _INTEGER.match(text):
            return Literal(value=int(text), raw=text)

        if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
            return Literal(value=text[1:-1], raw=text)

        match = _ARRAY_ACCESS.match(text)
        if match and _closing_bracket(text, match.end(1)) == len(text) - 1:
            return ArrayAccess(
                object=Identifier(name=match.group(1)),
                property=self.parse_expression(match.group(2)),
            )

        for operator in nt.BINARY_OPERATORS:
            index = text.find(operator)
            if index > 0:
                return BinaryExpression(
                    operator=operator.strip(),
                    left=self.parse_expression(text[:index]),
                    right=self.parse_expression(text[index + len(operator):]),
                )

        match = _CALL.match(text)
        if match:
            args = match.group(2).strip()
            return FunctionCall(
                callee=Identifier(name=match.group(1)),
                arguments=[self.parse_expression(arg) for arg in args.split(",")] if args else [],
            )

        return Identifier(name=text)

    def validate_syntax(self, text: str) -> list[SyntaxIssue]:
        """
        Check pseudo-code headers for missing keywords.

        Independent of ``parse``. Reports, by source line number:
        a procedure header without parentheses (error), an if header without
        its then keyword (error), and a counted loop header without its step
        keyword (warning). Colon-terminated lines are already Python and are
        not checked.

        Args:
            text: Pseudo-code text

        Returns:
            Issues in line order
        """
        issues: list[SyntaxIssue] = []

        for number, raw in enumerate((text or "").split("\n"), start=1):
            line = raw.strip()
            if not line or line.endswith(":"):
                continue

            if _CHECK_PROCEDURE.match(line) and "(" not in line and ")" not in line:
                issues.append(
                    SyntaxIssue(number, 0, "Procedure declaration is missing parentheses", "error")
                )

            if _CHECK_IF.match(line) and not _CHECK_THEN.search(line):
                issues.append(
                    SyntaxIssue(number, 0, "If statement is missing 'then'", "error")
                )

            english_loop = _CHECK_LOOP_EN.match(line) and not _CHECK_STEP_EN.search(line)
            japanese_loop = (
                nt.FOR_FROM in line
                and nt.FOR_START in line
                and nt.FOR_END in line
                and nt.FOR_STEP not in line
            )
            if english_loop or japanese_loop:
                issues.append(
                    SyntaxIssue(number, 0, "Loop header is missing its 'step' increment", "warning")
                )

        return issues

    @staticmethod
    def print_ast(program: Program) -> str:
        """Serialize a Program as indented JSON for debugging."""
        return program.model_dump_json(indent=2, by_alias=True)


_default_parser = SyntaxParser()


def parse(text: str) -> Program:
    """Parse pseudo-code with a flat default parser."""
    return _default_parser.parse(text)


def validate_syntax(text: str) -> list[SyntaxIssue]:
    return _default_parser.validate_syntax(text)


def print_ast(program: Program) -> str:
    return SyntaxParser.print_ast(program)
