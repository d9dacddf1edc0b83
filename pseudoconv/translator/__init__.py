"""
Pseudo-code to Python conversion.
"""

from .converter import (
    PseudoCodeConverter,
    convert,
    convert_with_steps,
    format_python_code,
    validate_conversion,
)
from .models import (
    ConversionError,
    ConversionMetadata,
    ConversionOptions,
    ConversionResult,
    ConversionStep,
    ConversionWarning,
    ValidationResult,
)

__all__ = [
    "ConversionError",
    "ConversionMetadata",
    "ConversionOptions",
    "ConversionResult",
    "ConversionStep",
    "ConversionWarning",
    "PseudoCodeConverter",
    "ValidationResult",
    "convert",
    "convert_with_steps",
    "format_python_code",
    "validate_conversion",
]
