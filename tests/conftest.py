"""
Shared pytest fixtures for the pseudoconv test suite.

This module provides:
- Fresh parser, generator, catalog and converter instances
- Sample pseudo-code programs in both notations
- Logger cleanup after command line tests
"""

import logging

import pytest

from pseudoconv.generator import PythonGenerator
from pseudoconv.parser import SyntaxParser
from pseudoconv.rules import RuleCatalog
from pseudoconv.translator import PseudoCodeConverter


NESTED_PROGRAM = """procedure main()
    integer: x
    if x > 0 then
        x ← 1
    else
        x ← 2
    return x"""

NESTED_PYTHON = """def main():
    x = 0
    if x > 0:
        x = 1
    else:
        x = 2
    return x"""


@pytest.fixture
def parser():
    """Flat parser (compound bodies stay empty)."""
    return SyntaxParser()


@pytest.fixture
def nesting_parser():
    """Parser that nests statements by indentation."""
    return SyntaxParser(nest_blocks=True)


@pytest.fixture
def generator():
    return PythonGenerator()


@pytest.fixture
def catalog():
    return RuleCatalog()


@pytest.fixture
def converter():
    return PseudoCodeConverter()


@pytest.fixture
def nested_program():
    return NESTED_PROGRAM


@pytest.fixture
def nested_python():
    return NESTED_PYTHON


@pytest.fixture
def write_source(tmp_path):
    """Write pseudo-code to a temporary file and return its path."""
    def _write(text: str, name: str = "program.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler changes made by setup_logging()."""
    yield
    logger = logging.getLogger("pseudoconv")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
