"""
Conversion orchestrator.

``PseudoCodeConverter.convert`` runs one of three strategies:

- ``pattern``: rewrite the whole text with the rule catalog, then re-indent
- ``tree``: parse into a Program, check the headers, generate Python
- ``hybrid`` (default): ``pattern`` first, then ``tree`` on its output

The call is total: every failure, however deep, is reported in the
returned ``ConversionResult`` and nothing is raised to the caller.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional, Union

from ..generator.lint import validate_python
from ..generator.python_generator import GenerationOptions, PythonGenerator
from ..parser.parser import SyntaxParser
from ..rules.catalog import DEFAULT_CATALOG, RuleCatalog
from .models import (
    ConversionError,
    ConversionMetadata,
    ConversionOptions,
    ConversionResult,
    ConversionStep,
    ConversionWarning,
    ValidationResult,
)

logger = logging.getLogger(__name__)

OptionsLike = Union[ConversionOptions, Mapping[str, Any], None]

# Generated code shorter than this share of the pseudo-code is suspicious
MIN_COVERAGE_RATIO = 0.5


def _count_lines(text: Any) -> int:
    return len(text.split("\n")) if isinstance(text, str) else 0


def format_python_code(code: str, indent_size: int = 4) -> str:
    """
    Re-indent code line by line with a running depth counter.

    The depth increases after every colon-terminated line and an
    ``else:``/``elif`` line is placed one level up. Nothing ever closes a
    block, so lines after a nested body stay at the body's depth.

    Args:
        code: Code whose indentation is discarded
        indent_size: Spaces per level

    Returns:
        Re-indented code
    """
    formatted = []
    depth = 0
    for line in code.split("\n"):
        stripped = line.strip()
        if not stripped:
            formatted.append("")
            continue

        if stripped == "else:" or stripped.startswith("elif "):
            depth = max(0, depth - 1)
            formatted.append(" " * (depth * indent_size) + stripped)
            depth += 1
        elif stripped.endswith(":"):
            formatted.append(" " * (depth * indent_size) + stripped)
            depth += 1
        else:
            formatted.append(" " * (depth * indent_size) + stripped)
    return "\n".join(formatted)


class PseudoCodeConverter:
    """
    Convert pseudo-code to Python.

    Instances hold only the rule catalog and the generator, both
    stateless, so one converter can serve any number of calls.
    """

    def __init__(
        self,
        catalog: Optional[RuleCatalog] = None,
        generator: Optional[PythonGenerator] = None,
    ):
        """
        Initialize converter.

        Args:
            catalog: Rule catalog for the pattern strategy (default catalog if None)
            generator: Code generator for the tree strategy
        """
        self.catalog = catalog or DEFAULT_CATALOG
        self.generator = generator or PythonGenerator()

    def convert(self, text: str, options: OptionsLike = None) -> ConversionResult:
        """
        Convert pseudo-code to Python.

        Args:
            text: Newline-separated pseudo-code
            options: ConversionOptions, a mapping of option names, or None

        Returns:
            ConversionResult; ``success`` is False when any error was found
        """
        start = time.perf_counter()
        method = "unknown"

        try:
            resolved = self._resolve_options(options)
            method = resolved.method
            text = "" if text is None else text
            if not isinstance(text, str):
                raise TypeError(f"pseudo-code must be a string, not {type(text).__name__}")

            logger.debug(f"Converting {_count_lines(text)} lines with method={method}")
            if method == "pattern":
                result = self._convert_with_rules(text, resolved)
            elif method == "tree":
                result = self._convert_with_tree(text, resolved)
            else:
                result = self._convert_hybrid(text, resolved)

            if resolved.validate_output:
                self._append_validation(text, result)
        except Exception as exc:
            logger.exception(f"Conversion failed (method={method})")
            result = ConversionResult(
                success=False,
                code="",
                errors=[ConversionError(line=0, message=str(exc) or "Unknown conversion error")],
                metadata=ConversionMetadata(total_lines=_count_lines(text), method=method),
            )

        result.metadata.conversion_time = (time.perf_counter() - start) * 1000
        return result

    def convert_with_steps(self, text: str, options: OptionsLike = None) -> ConversionResult:
        """Convert with step tracing forced on."""
        try:
            resolved = self._resolve_options(options)
        except Exception:
            # Let convert() report the invalid options
            return self.convert(text, options)
        return self.convert(text, resolved.model_copy(update={"include_debug_info": True}))

    def validate_conversion(self, pseudo_code: str, python_code: str) -> ValidationResult:
        """
        Check generated code against the pseudo-code it came from.

        Runs the generated-code lint and a coverage heuristic: a warning is
        raised when the generated code has fewer than half as many
        non-blank, non-comment lines as the pseudo-code has non-blank lines.

        Args:
            pseudo_code: Source pseudo-code
            python_code: Generated Python

        Returns:
            ValidationResult with lint errors, warnings and suggestions
        """
        errors: list[ConversionError] = []
        warnings: list[ConversionWarning] = []
        suggestions: list[str] = []

        lint = validate_python(python_code)
        for issue in lint.errors:
            errors.append(ConversionError(line=issue.line, message=issue.message))
        for issue in lint.warnings:
            warnings.append(ConversionWarning(line=issue.line, message=issue.message, type=issue.type))

        pseudo_lines = [line for line in pseudo_code.split("\n") if line.strip()]
        python_lines = [
            line
            for line in python_code.split("\n")
            if line.strip() and not line.strip().startswith("#")
        ]
        if len(python_lines) < len(pseudo_lines) * MIN_COVERAGE_RATIO:
            warnings.append(
                ConversionWarning(
                    line=0,
                    message="Generated Python code seems too short compared to pseudo code",
                    type="semantic",
                )
            )
            suggestions.append("Check the pseudo-code for lines that could not be converted")

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
        )

    @staticmethod
    def _resolve_options(options: OptionsLike) -> ConversionOptions:
        if options is None:
            return ConversionOptions()
        if isinstance(options, ConversionOptions):
            return options
        return ConversionOptions.model_validate(dict(options))

    def _append_validation(self, text: str, result: ConversionResult) -> None:
        """Add post-hoc findings to the warnings; errors are left untouched."""
        validation = self.validate_conversion(text, result.code)
        for error in validation.errors:
            result.warnings.append(
                ConversionWarning(line=error.line, message=error.message, type="syntax")
            )
        for warning in validation.warnings:
            result.warnings.append(warning)

    def _convert_with_rules(self, text: str, options: ConversionOptions) -> ConversionResult:
        """Pattern strategy: every enabled rule over the whole text."""
        steps: list[ConversionStep] = []
        rules_applied = 0
        code = text

        for rule in self.catalog.sort_by_priority(self.catalog.get_enabled()):
            before = code
            code = self.catalog.apply_one(rule, code)
            if code == before:
                continue

            rules_applied += 1
            logger.debug(f"Rule {rule.id} applied")
            if options.include_debug_info:
                steps.append(
                    ConversionStep(
                        step_number=len(steps) + 1,
                        description=rule.description,
                        input_text=before,
                        output_text=code,
                        rule_applied=rule.id,
                        transformation_type="pattern-based",
                    )
                )

        return ConversionResult(
            success=True,
            code=format_python_code(code, options.indent_size),
            steps=steps,
            metadata=ConversionMetadata(
                total_lines=_count_lines(text),
                rules_applied=rules_applied,
                method="pattern",
            ),
        )

    def _convert_with_tree(self, text: str, options: ConversionOptions) -> ConversionResult:
        """Tree strategy: parse, check headers, generate."""
        parser = SyntaxParser(nest_blocks=options.nest_blocks)
        errors: list[ConversionError] = []
        warnings: list[ConversionWarning] = []
        steps: list[ConversionStep] = []

        program = parser.parse(text)
        if options.include_debug_info:
            steps.append(
                ConversionStep(
                    step_number=1,
                    description="Parse pseudo code to AST",
                    input_text=text,
                    output_text=parser.print_ast(program),
                    rule_applied="syntax-parser",
                    transformation_type="structural",
                )
            )

        for issue in parser.validate_syntax(text):
            if issue.severity == "error":
                errors.append(
                    ConversionError(line=issue.line, column=issue.column, message=issue.message)
                )
            else:
                warnings.append(
                    ConversionWarning(
                        line=issue.line, column=issue.column, message=issue.message, type="syntax"
                    )
                )

        generated = self.generator.generate(
            program,
            GenerationOptions(
                indent_size=options.indent_size,
                include_comments=options.include_comments,
                include_type_hints=False,
                optimize_code=True,
                pad_empty_blocks=options.nest_blocks,
            ),
        )
        code = generated.code
        if not options.nest_blocks:
            # Flat trees carry no block structure; indent the way the pattern pass does
            code = format_python_code(code, options.indent_size)

        if options.include_debug_info:
            steps.append(
                ConversionStep(
                    step_number=2,
                    description="Generate Python code from AST",
                    input_text=parser.print_ast(program),
                    output_text=code,
                    rule_applied="python-generator",
                    transformation_type="structural",
                )
            )

        return ConversionResult(
            success=not errors,
            code=code,
            errors=errors,
            warnings=warnings,
            steps=steps,
            metadata=ConversionMetadata(
                total_lines=_count_lines(text),
                complexity_score=generated.complexity,
                method="tree",
                ast=program,
            ),
        )

    def _convert_hybrid(self, text: str, options: ConversionOptions) -> ConversionResult:
        """Hybrid strategy: pattern pass, then tree pass over its output."""
        quiet = options.model_copy(update={"include_debug_info": False})
        pattern_result = self._convert_with_rules(text, quiet)
        if not pattern_result.success:
            return pattern_result

        tree_input = pattern_result.code
        if options.nest_blocks:
            # The re-indented pattern output never closes a block; nesting
            # needs the rewritten text with its source indentation
            tree_input = self.catalog.apply_all(text)[0]
        tree_result = self._convert_with_tree(tree_input, quiet)

        steps: list[ConversionStep] = []
        if options.include_debug_info:
            steps.append(
                ConversionStep(
                    step_number=1,
                    description="Rule-based preprocessing",
                    input_text=text,
                    output_text=tree_input,
                    rule_applied="conversion-rules",
                    transformation_type="pattern-based",
                )
            )
            steps.append(
                ConversionStep(
                    step_number=2,
                    description="AST-based structure conversion",
                    input_text=tree_input,
                    output_text=tree_result.code,
                    rule_applied="syntax-parser + python-generator",
                    transformation_type="structural",
                )
            )

        errors = pattern_result.errors + tree_result.errors
        return ConversionResult(
            success=not errors,
            code=tree_result.code,
            errors=errors,
            warnings=pattern_result.warnings + tree_result.warnings,
            steps=steps,
            metadata=ConversionMetadata(
                total_lines=_count_lines(text),
                rules_applied=pattern_result.metadata.rules_applied,
                complexity_score=tree_result.metadata.complexity_score,
                method="hybrid",
                ast=tree_result.metadata.ast,
            ),
        )


_default_converter = PseudoCodeConverter()


def convert(text: str, options: OptionsLike = None) -> ConversionResult:
    """Convert pseudo-code with the default converter."""
    return _default_converter.convert(text, options)


def convert_with_steps(text: str, options: OptionsLike = None) -> ConversionResult:
    return _default_converter.convert_with_steps(text, options)


def validate_conversion(pseudo_code: str, python_code: str) -> ValidationResult:
    return _default_converter.validate_conversion(pseudo_code, python_code)
