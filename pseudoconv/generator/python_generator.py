"""
Python code generation from a Program tree.

``StatementEmitter`` and ``ExpressionRenderer`` implement the statement and
expression visitor protocols, one method per node type. Indentation is
carried by an immutable ``EmitContext``: compound statements emit their
bodies through a new emitter built from ``context.nested()``, so nothing
about the current depth is stored outside the call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .. import notation as nt
from ..core.errors import GenerationError
from ..parser.ast import (
    ArrayAccess,
    Assignment,
    BinaryExpression,
    ExpressionStatement,
    ForStatement,
    FunctionCall,
    Identifier,
    IfStatement,
    Literal,
    ProcedureDeclaration,
    Program,
    ReturnStatement,
    VariableDeclaration,
    WhileStatement,
    walk,
)
from .lint import optimize

logger = logging.getLogger(__name__)

DEFAULT_ARRAY_SIZE = 10


class GenerationOptions(BaseModel):
    """Options accepted by ``PythonGenerator.generate``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    indent_size: int = Field(default=4, ge=0)
    include_comments: bool = False
    include_type_hints: bool = False
    optimize_code: bool = False
    pad_empty_blocks: bool = False


@dataclass
class GenerationResult:
    code: str
    imports: list[str] = field(default_factory=list)
    functions: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    complexity: int = 0


@dataclass(frozen=True)
class EmitContext:
    """Indentation and output switches for one nesting depth."""

    indent_size: int = 4
    depth: int = 0
    include_comments: bool = False
    include_type_hints: bool = False
    pad_empty_blocks: bool = False

    @property
    def indent(self) -> str:
        return " " * (self.indent_size * self.depth)

    def nested(self) -> EmitContext:
        return replace(self, depth=self.depth + 1)


class ExpressionRenderer:
    """
    Render expressions as Python source.

    With ``compact=True`` binary operators are written without surrounding
    spaces (``n-1``); ``range()`` bounds use this so they keep the spelling
    of the pseudo-code.
    """

    def __init__(self, compact: bool = False):
        self.compact = compact

    def render(self, expression: Any) -> str:
        accept = getattr(expression, "accept", None)
        if accept is None:
            logger.warning(f"No Python rendering for expression {expression!r}")
            return "None"
        return accept(self)

    def visit_identifier(self, node: Identifier) -> str:
        return node.name

    def visit_literal(self, node: Literal) -> str:
        if isinstance(node.value, int):
            return str(node.value)
        if node.raw.startswith('"'):
            return f'"{node.value}"'
        # Opaque source text, including parser markers such as "else:"
        return node.raw

    def visit_binary_expression(self, node: BinaryExpression) -> str:
        left = self.render(node.left)
        right = self.render(node.right)
        operator = convert_operator(node.operator)
        if self.compact:
            return f"{left}{operator}{right}"
        return f"{left} {operator} {right}"

    def visit_array_access(self, node: ArrayAccess) -> str:
        return f"{self.render(node.object)}[{self.render(node.property)}]"

    def visit_function_call(self, node: FunctionCall) -> str:
        args = ", ".join(self.render(arg) for arg in node.arguments)
        return f"{self.render(node.callee)}({args})"


def convert_operator(operator: str) -> str:
    """Translate a pseudo-code operator glyph to Python."""
    return nt.OPERATOR_SYMBOLS.get(operator, operator)


class StatementEmitter:
    """Emit the lines for statements at one nesting depth."""

    def __init__(self, context: EmitContext):
        self.context = context
        self.expressions = ExpressionRenderer()

    def emit(self, statement: Any) -> list[str]:
        """
        Emit one statement.

        Raises:
            GenerationError: If the statement has no Python rendering
        """
        accept = getattr(statement, "accept", None)
        if accept is None:
            line = getattr(statement, "line", None)
            raise GenerationError(f"unsupported statement {type(statement).__name__}", line)
        return accept(self)

    def emit_block(self, statements: list[Any]) -> list[str]:
        """
        Emit a statement list, degrading failed statements.

        A statement that raises becomes an ``# ERROR`` comment when comments
        are enabled and is dropped otherwise; the rest of the list is still
        emitted.
        """
        lines: list[str] = []
        for statement in statements:
            try:
                lines.extend(self.emit(statement))
            except Exception as error:
                line = getattr(statement, "line", "?")
                logger.warning(f"Code generation error at line {line}: {error}")
                if self.context.include_comments:
                    lines.append(
                        f"{self.context.indent}# ERROR: Could not generate code for statement at line {line}"
                    )
                    lines.append(f"{self.context.indent}# {error}")
        return lines

    def _nested_block(self, statements: list[Any]) -> list[str]:
        inner = self.context.nested()
        lines = StatementEmitter(inner).emit_block(statements)
        if not lines and self.context.pad_empty_blocks:
            return [f"{inner.indent}pass"]
        return lines

    def visit_variable_declaration(self, node: VariableDeclaration) -> list[str]:
        if node.data_type == "integer":
            value = "0"
        elif node.data_type == "string":
            value = '""'
        elif node.data_type == "array":
            value = f"[0] * {node.size if node.size is not None else DEFAULT_ARRAY_SIZE}"
        else:
            value = "None"

        target = node.name
        hint = nt.python_type_hint(node.data_type)
        if self.context.include_type_hints and hint:
            target = f"{node.name}: {hint}"
        return [f"{self.context.indent}{target} = {value}"]

    def visit_assignment(self, node: Assignment) -> list[str]:
        left = self.expressions.render(node.left)
        right = self.expressions.render(node.right)
        return [f"{self.context.indent}{left} = {right}"]

    def visit_if_statement(self, node: IfStatement) -> list[str]:
        ind = self.context.indent
        lines = [f"{ind}if {self.expressions.render(node.condition)}:"]
        lines.extend(self._nested_block(node.consequent))
        if node.alternate is not None:
            lines.append(f"{ind}else:")
            lines.extend(self._nested_block(node.alternate))
        return lines

    def visit_for_statement(self, node: ForStatement) -> list[str]:
        bounds = ExpressionRenderer(compact=True)
        start = bounds.render(node.start)
        end = nt.adjust_range_end(bounds.render(node.end))
        step = bounds.render(node.step)
        lines = [f"{self.context.indent}for {node.variable} in range({start}, {end}, {step}):"]
        lines.extend(self._nested_block(node.body))
        return lines

    def visit_while_statement(self, node: WhileStatement) -> list[str]:
        lines = [f"{self.context.indent}while {self.expressions.render(node.condition)}:"]
        lines.extend(self._nested_block(node.body))
        return lines

    def visit_procedure_declaration(self, node: ProcedureDeclaration) -> list[str]:
        params = []
        for param in node.parameters:
            hint = nt.python_type_hint(param.type) if param.type else None
            if self.context.include_type_hints and hint:
                params.append(f"{param.name}: {hint}")
            else:
                params.append(param.name)

        inner = self.context.nested()
        lines = [f"{self.context.indent}def {node.name}({', '.join(params)}):"]
        if self.context.include_comments:
            lines.append(f'{inner.indent}"""Generated procedure from pseudo code"""')

        body = self._nested_block(node.body)
        lines.extend(body or [f"{inner.indent}pass"])
        return lines

    def visit_return_statement(self, node: ReturnStatement) -> list[str]:
        return [f"{self.context.indent}return {self.expressions.render(node.argument)}"]

    def visit_expression_statement(self, node: ExpressionStatement) -> list[str]:
        lines = [f"{self.context.indent}{self.expressions.render(node.expression)}"]
        if node.opens_block:
            lines.extend(self._nested_block(node.body))
        return lines


class PythonGenerator:
    """
    Generate Python source from a Program tree.

    The generator keeps no state between calls; one instance can be
    shared by concurrent conversions.
    """

    def generate(
        self,
        program: Program,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult:
        """
        Generate Python code.

        Args:
            program: Parsed pseudo-code
            options: Generation switches (defaults apply when None)

        Returns:
            GenerationResult with code, declared functions and variables
        """
        options = options or GenerationOptions()
        context = EmitContext(
            indent_size=options.indent_size,
            include_comments=options.include_comments,
            include_type_hints=options.include_type_hints,
            pad_empty_blocks=options.pad_empty_blocks,
        )

        lines: list[str] = []
        if options.include_comments:
            lines.append("# Generated from pseudo code")
            lines.append("# Auto-converted by pseudoconv")
            lines.append("")

        lines.extend(StatementEmitter(context).emit_block(program.body))

        functions = []
        variables = []
        for statement in walk(program.body):
            if isinstance(statement, ProcedureDeclaration):
                functions.append(statement.name)
            elif isinstance(statement, VariableDeclaration):
                variables.append(statement.name)

        code = "\n".join(lines)
        if options.optimize_code:
            code = optimize(code)

        return GenerationResult(
            code=code,
            imports=[],
            functions=functions,
            variables=variables,
            complexity=program.metadata.complexity,
        )


def generate(program: Program, options: Optional[GenerationOptions] = None) -> GenerationResult:
    return PythonGenerator().generate(program, options)
