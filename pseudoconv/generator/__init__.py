"""
Python code generation from parsed pseudo-code.
"""

from .lint import LintIssue, LintResult, optimize, validate_python
from .python_generator import (
    EmitContext,
    ExpressionRenderer,
    GenerationOptions,
    GenerationResult,
    PythonGenerator,
    StatementEmitter,
    convert_operator,
    generate,
)

__all__ = [
    "EmitContext",
    "ExpressionRenderer",
    "GenerationOptions",
    "GenerationResult",
    "LintIssue",
    "LintResult",
    "PythonGenerator",
    "StatementEmitter",
    "convert_operator",
    "generate",
    "optimize",
    "validate_python",
]
