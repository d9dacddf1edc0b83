"""
Pseudo-code parser and program tree.
"""

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
    walk,
)
from .parser import (
    ELSE_MARKER,
    SyntaxIssue,
    SyntaxParser,
    is_else_marker,
    parse,
    print_ast,
    validate_syntax,
)

__all__ = [
    "ArrayAccess",
    "Assignment",
    "BinaryExpression",
    "ELSE_MARKER",
    "Expression",
    "ExpressionStatement",
    "ForStatement",
    "FunctionCall",
    "Identifier",
    "IfStatement",
    "Literal",
    "Parameter",
    "ProcedureDeclaration",
    "Program",
    "ProgramMetadata",
    "ReturnStatement",
    "Statement",
    "SyntaxIssue",
    "SyntaxParser",
    "VariableDeclaration",
    "VariableInfo",
    "WhileStatement",
    "is_else_marker",
    "parse",
    "print_ast",
    "validate_syntax",
    "walk",
]
