"""pseudoconv - exam pseudo-code to Python translator.

Main package containing:
- pseudoconv.rules: Prioritized text rewrite rules (pattern strategy)
- pseudoconv.parser: Line parser and program tree
- pseudoconv.generator: Python code generation and lint
- pseudoconv.translator: Conversion orchestrator and command line interface
- pseudoconv.core: Configuration, logging and errors
"""

__version__ = "0.1.0"

from .translator import ConversionOptions, ConversionResult, PseudoCodeConverter, convert

__all__ = [
    "ConversionOptions",
    "ConversionResult",
    "PseudoCodeConverter",
    "convert",
]
