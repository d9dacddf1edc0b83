"""
Program tree node definitions for parsed pseudo-code.

Statements and expressions are closed sets of pydantic models, each tagged
by a ``type`` field so a whole Program round-trips through JSON. Every node
implements ``accept`` and dispatches to exactly one visitor method, so a
visitor that implements the protocol handles every variant.
"""

import typing
from typing import Annotated, Any, Iterator, Optional, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExpressionVisitor(Protocol):
    """Visitor protocol for expression nodes."""

    def visit_identifier(self, node: "Identifier") -> Any:
        ...

    def visit_literal(self, node: "Literal") -> Any:
        ...

    def visit_binary_expression(self, node: "BinaryExpression") -> Any:
        ...

    def visit_array_access(self, node: "ArrayAccess") -> Any:
        ...

    def visit_function_call(self, node: "FunctionCall") -> Any:
        ...


class StatementVisitor(Protocol):
    """Visitor protocol for statement nodes."""

    def visit_variable_declaration(self, node: "VariableDeclaration") -> Any:
        ...

    def visit_assignment(self, node: "Assignment") -> Any:
        ...

    def visit_if_statement(self, node: "IfStatement") -> Any:
        ...

    def visit_for_statement(self, node: "ForStatement") -> Any:
        ...

    def visit_while_statement(self, node: "WhileStatement") -> Any:
        ...

    def visit_procedure_declaration(self, node: "ProcedureDeclaration") -> Any:
        ...

    def visit_return_statement(self, node: "ReturnStatement") -> Any:
        ...

    def visit_expression_statement(self, node: "ExpressionStatement") -> Any:
        ...


class Node(BaseModel):
    """Base class for all tree nodes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Expressions


class Identifier(Node):
    """A bare name, or any expression text the parser keeps as-is."""

    type: typing.Literal["Identifier"] = "Identifier"
    name: str

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_identifier(self)


class Literal(Node):
    """
    A literal value.

    Integers carry an ``int`` value. Quoted strings carry the unquoted text
    as ``value`` and the quoted source as ``raw``. Lines the parser cannot
    classify are wrapped as opaque literals whose ``raw`` is the line itself.
    """

    type: typing.Literal["Literal"] = "Literal"
    value: Union[int, str]
    raw: str

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_literal(self)


class BinaryExpression(Node):
    type: typing.Literal["BinaryExpression"] = "BinaryExpression"
    operator: str
    left: "Expression"
    right: "Expression"

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_binary_expression(self)


class ArrayAccess(Node):
    type: typing.Literal["ArrayAccess"] = "ArrayAccess"
    object: "Expression"
    property: "Expression"

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_array_access(self)


class FunctionCall(Node):
    type: typing.Literal["FunctionCall"] = "FunctionCall"
    callee: "Expression"
    arguments: list["Expression"] = Field(default_factory=list)

    def accept(self, visitor: ExpressionVisitor) -> Any:
        return visitor.visit_function_call(self)


Expression = Annotated[
    Union[Identifier, Literal, BinaryExpression, ArrayAccess, FunctionCall],
    Field(discriminator="type"),
]


# Statements


class Parameter(Node):
    type: str
    name: str


class VariableDeclaration(Node):
    type: typing.Literal["VariableDeclaration"] = "VariableDeclaration"
    data_type: str
    name: str
    size: Optional[int] = None
    line: int

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_variable_declaration(self)


class Assignment(Node):
    type: typing.Literal["Assignment"] = "Assignment"
    left: Expression
    right: Expression
    line: int

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_assignment(self)


class IfStatement(Node):
    type: typing.Literal["IfStatement"] = "IfStatement"
    condition: Expression
    consequent: list["Statement"] = Field(default_factory=list)
    alternate: Optional[list["Statement"]] = None
    line: int

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_if_statement(self)


class ForStatement(Node):
    type: typing.Literal["ForStatement"] = "ForStatement"
    variable: str
    start: Expression
    end: Expression
    step: Expression
    body: list["Statement"] = Field(default_factory=list)
    line: int

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_for_statement(self)


class WhileStatement(Node):
    type: typing.Literal["WhileStatement"] = "WhileStatement"
    condition: Expression
    body: list["Statement"] = Field(default_factory=list)
    line: int

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_while_statement(self)


class ProcedureDeclaration(Node):
    type: typing.Literal["ProcedureDeclaration"] = "ProcedureDeclaration"
    name: str
    parameters: list[Parameter] = Field(default_factory=list)
    body: list["Statement"] = Field(default_factory=list)
    line: int

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_procedure_declaration(self)


class ReturnStatement(Node):
    type: typing.Literal["ReturnStatement"] = "ReturnStatement"
    argument: Expression
    line: int

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_return_statement(self)


class ExpressionStatement(Node):
    """
    A line kept as an expression or as opaque source text.

    ``body`` is only filled by a nesting parser, for an opaque line that
    already is a Python block header (``def main():``, ``else:``).
    """

    type: typing.Literal["ExpressionStatement"] = "ExpressionStatement"
    expression: Expression
    body: list["Statement"] = Field(default_factory=list)
    line: int

    @property
    def opens_block(self) -> bool:
        return isinstance(self.expression, Literal) and self.expression.raw.endswith(":")

    def accept(self, visitor: StatementVisitor) -> Any:
        return visitor.visit_expression_statement(self)


Statement = Annotated[
    Union[
        VariableDeclaration,
        Assignment,
        IfStatement,
        ForStatement,
        WhileStatement,
        ProcedureDeclaration,
        ReturnStatement,
        ExpressionStatement,
    ],
    Field(discriminator="type"),
]


# Program


class VariableInfo(Node):
    name: str
    type: str
    size: Optional[int] = None
    line: int


class ProgramMetadata(Node):
    total_lines: int = 0
    complexity: int = 0
    procedures: list[str] = Field(default_factory=list)
    variables: list[VariableInfo] = Field(default_factory=list)


class Program(Node):
    """Root of a parsed pseudo-code text."""

    type: typing.Literal["Program"] = "Program"
    body: list[Statement] = Field(default_factory=list)
    metadata: ProgramMetadata = Field(default_factory=ProgramMetadata)


for _model in (
    BinaryExpression,
    ArrayAccess,
    FunctionCall,
    Assignment,
    IfStatement,
    ForStatement,
    WhileStatement,
    ProcedureDeclaration,
    ReturnStatement,
    ExpressionStatement,
    Program,
):
    _model.model_rebuild()


def child_blocks(statement: Any) -> list[list[Any]]:
    """Statement lists nested directly inside a compound statement."""
    if isinstance(statement, IfStatement):
        blocks = [statement.consequent]
        if statement.alternate is not None:
            blocks.append(statement.alternate)
        return blocks
    if isinstance(statement, (ForStatement, WhileStatement, ProcedureDeclaration)):
        return [statement.body]
    if isinstance(statement, ExpressionStatement) and statement.opens_block:
        return [statement.body]
    return []


def walk(statements: list[Any]) -> Iterator[Any]:
    """Yield statements depth-first in source order."""
    for statement in statements:
        yield statement
        for block in child_blocks(statement):
            yield from walk(block)
