"""
Tests for configuration, logging, errors and the shared notation tables.
"""

import json
import logging

import pytest
from pydantic import ValidationError

from pseudoconv import notation
from pseudoconv.core import (
    GenerationError,
    PseudoCodeError,
    PseudoSyntaxError,
    Settings,
    format_source_context,
    get_settings,
    setup_logging,
)
from pseudoconv.core.logging import StructuredFormatter, TextFormatter, get_logger


class TestErrors:
    def test_message_with_line(self):
        error = PseudoSyntaxError("boom", 3)
        assert str(error) == "line 3: boom"
        assert error.message == "boom"
        assert error.line == 3

    def test_message_without_line(self):
        assert str(GenerationError("boom")) == "boom"

    def test_hierarchy(self):
        assert issubclass(PseudoSyntaxError, PseudoCodeError)
        assert issubclass(GenerationError, PseudoCodeError)


class TestSourceContext:
    def test_marks_target_line(self):
        assert format_source_context("a\nb\nc\nd\ne", 3, radius=1) == (
            "    2:\tb\n>   3:\tc\n    4:\td"
        )

    def test_clamps_to_source(self):
        assert format_source_context("a\nb", 1).split("\n") == [">   1:\ta", "    2:\tb"]

    @pytest.mark.parametrize("line", [0, -1, 5])
    def test_out_of_range(self, line):
        assert format_source_context("a\nb", line) == ""


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.DEFAULT_METHOD == "hybrid"
        assert settings.INDENT_SIZE == 4
        assert settings.VALIDATE_OUTPUT is True

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("PSEUDOCONV_INDENT_SIZE", "2")
        monkeypatch.setenv("PSEUDOCONV_DEFAULT_METHOD", "tree")
        settings = Settings()
        assert settings.INDENT_SIZE == 2
        assert settings.DEFAULT_METHOD == "tree"

    def test_invalid_method(self):
        with pytest.raises(ValidationError):
            Settings(DEFAULT_METHOD="magic")

    def test_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    def test_text_handler(self):
        setup_logging(Settings(LOG_LEVEL="DEBUG"))
        logger = logging.getLogger("pseudoconv")
        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0].formatter, TextFormatter)
        assert logger.propagate is False

    def test_json_and_file(self, tmp_path):
        log_file = tmp_path / "logs" / "pseudoconv.log"
        setup_logging(Settings(LOG_FORMAT="json", LOG_FILE=str(log_file)))
        logger = logging.getLogger("pseudoconv")
        assert len(logger.handlers) == 2
        assert all(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers)

        logging.getLogger("pseudoconv.test").warning("hello")
        for handler in logger.handlers:
            handler.flush()
        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert record["message"] == "hello"
        assert record["level"] == "WARNING"

    def test_setup_is_idempotent(self):
        setup_logging(Settings())
        setup_logging(Settings())
        assert len(logging.getLogger("pseudoconv").handlers) == 1

    def test_get_logger(self):
        assert get_logger("pseudoconv.translator.cli") is logging.getLogger("pseudoconv.translator.cli")


class TestNotation:
    @pytest.mark.parametrize(
        "end,expected",
        [("9", "10"), (" 9 ", "10"), ("n-1", "n-1"), ("n", "n"), ("n+0", "n+0"), ("len(a)", "len(a)")],
    )
    def test_adjust_range_end(self, end, expected):
        assert notation.adjust_range_end(end) == expected

    def test_data_type_keywords(self):
        assert notation.data_type_of("整数型") == "integer"
        assert notation.data_type_of("INTEGER") == "integer"
        assert notation.data_type_of("float") is None

    def test_type_hints(self):
        assert notation.python_type_hint("配列") == "list[int]"
        assert notation.python_type_hint("string") == "str"
        assert notation.python_type_hint("") is None
