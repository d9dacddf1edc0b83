"""Core utilities package"""

from .config import Settings, get_settings
from .errors import (
    GenerationError,
    PseudoCodeError,
    PseudoSyntaxError,
    format_source_context,
)
from .logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "PseudoCodeError",
    "PseudoSyntaxError",
    "GenerationError",
    "format_source_context",
]
