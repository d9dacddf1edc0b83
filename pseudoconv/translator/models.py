"""
Options and result models for pseudo-code conversion.

All models accept both snake_case field names and the camelCase aliases
used by JSON clients (``includeDebugInfo``, ``pythonCode`` ...).
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..parser.ast import Program

Method = Literal["pattern", "tree", "hybrid"]

# Names accepted for ``method`` besides the canonical ones
METHOD_ALIASES = {
    "rules": "pattern",
    "rule": "pattern",
    "ast": "tree",
}


class ConversionModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConversionOptions(ConversionModel):
    """Switches for ``PseudoCodeConverter.convert``."""

    method: Method = "hybrid"
    include_comments: bool = False
    indent_size: int = Field(default=4, ge=0)
    include_debug_info: bool = False
    validate_output: bool = True
    nest_blocks: bool = False

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        """Accept legacy method names and any letter case."""
        if v is None:
            return "hybrid"
        if isinstance(v, str):
            name = v.strip().lower()
            return METHOD_ALIASES.get(name, name)
        return v


class ConversionError(ConversionModel):
    line: int
    column: int = 0
    message: str
    severity: Literal["error", "warning"] = "error"
    suggestion: Optional[str] = None


class ConversionWarning(ConversionModel):
    line: int
    column: int = 0
    message: str
    type: Literal["syntax", "semantic", "style"] = "syntax"
    suggestion: Optional[str] = None


class ConversionStep(ConversionModel):
    """Input/output snapshot of one conversion pass."""

    step_number: int
    description: str
    input_text: str
    output_text: str
    rule_applied: str
    transformation_type: Literal["pattern-based", "structural"]


class ConversionMetadata(ConversionModel):
    total_lines: int = 0
    conversion_time: float = Field(default=0.0, description="Elapsed milliseconds")
    rules_applied: int = 0
    complexity_score: int = 0
    method: str = "hybrid"
    ast: Optional[Program] = None


class ConversionResult(ConversionModel):
    """Outcome of one ``convert`` call; ``success`` is True when ``errors`` is empty."""

    success: bool
    code: str = ""
    errors: list[ConversionError] = Field(default_factory=list)
    warnings: list[ConversionWarning] = Field(default_factory=list)
    steps: list[ConversionStep] = Field(default_factory=list)
    metadata: ConversionMetadata = Field(default_factory=ConversionMetadata)

    @property
    def python_code(self) -> str:
        return self.code


class ValidationResult(ConversionModel):
    is_valid: bool
    errors: list[ConversionError] = Field(default_factory=list)
    warnings: list[ConversionWarning] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
