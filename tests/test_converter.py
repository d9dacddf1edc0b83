"""
Tests for the conversion orchestrator and its three strategies.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from pseudoconv.parser import Program
from pseudoconv.translator import (
    ConversionOptions,
    ConversionResult,
    convert,
    convert_with_steps,
    format_python_code,
    validate_conversion,
)

METHODS = ["pattern", "tree", "hybrid"]


class TestScenarios:
    """End-to-end behaviour shared by every strategy."""

    @pytest.mark.parametrize("method", METHODS)
    def test_integer_declaration(self, converter, method):
        result = converter.convert("integer: count", {"method": method})
        assert result.success
        assert result.code.split("\n")[0] == "count = 0"

    @pytest.mark.parametrize("method", METHODS)
    def test_if_header(self, converter, method):
        result = converter.convert("if x > 0 then", {"method": method})
        assert result.code == "if x > 0:"

    @pytest.mark.parametrize("method", METHODS)
    def test_counted_loop(self, converter, method):
        result = converter.convert("i from 0 to 9 step 1", {"method": method})
        assert result.code == "for i in range(0, 10, 1):"

    @pytest.mark.parametrize("method", METHODS)
    def test_expression_bound_passes_through(self, converter, method):
        result = converter.convert("for i from 0 to n-1 step 1", {"method": method})
        assert "range(0, n-1, 1)" in result.code

    @pytest.mark.parametrize("method", METHODS)
    def test_declarations(self, converter, method):
        result = converter.convert('string: name\narray: a(5)', {"method": method})
        assert result.code == 'name = ""\na = [0] * 5'

    @pytest.mark.parametrize("method", METHODS)
    def test_operator_translation(self, converter, method):
        result = converter.convert("if a ≠ b then\n    c ← a ≤ b", {"method": method})
        assert result.code == "if a != b:\n    c = a <= b"

    @pytest.mark.parametrize("method", ["tree", "hybrid"])
    def test_procedure_without_parentheses_fails(self, converter, method):
        result = converter.convert("procedure main\n    x ← 1", {"method": method})
        assert not result.success
        assert [(e.line, e.severity) for e in result.errors] == [(1, "error")]

    @pytest.mark.parametrize("method", METHODS)
    def test_if_else_blocks(self, converter, method):
        text = "if x > 0 then\n    x ← 1\nelse\n    x ← 2"
        assert converter.convert(text, {"method": method}).code == (
            "if x > 0:\n    x = 1\nelse:\n    x = 2"
        )

    def test_japanese_program(self, converter):
        text = "整数型：count\ncount ← 1\ni を 0 から 9 まで 1 ずつ増やす\n    count ← count + i"
        assert converter.convert(text).code == (
            "count = 0\ncount = 1\nfor i in range(0, 10, 1):\n    count = count + i"
        )

    def test_nested_tree(self, converter, nested_program, nested_python):
        result = converter.convert(nested_program, {"method": "tree", "nest_blocks": True})
        assert result.success
        assert result.code == nested_python
        assert result.warnings == []

    def test_nested_hybrid(self, converter, nested_program, nested_python):
        result = converter.convert(nested_program, {"nest_blocks": True})
        assert result.success
        assert result.metadata.method == "hybrid"
        assert result.code == nested_python

    def test_nested_hybrid_steps_carry_source_indentation(self, converter, nested_program):
        result = converter.convert(nested_program, {"nest_blocks": True, "include_debug_info": True})
        rewritten = result.steps[0].output_text
        assert rewritten.split("\n")[-1] == "    return x"
        assert result.steps[1].input_text == rewritten

    @pytest.mark.parametrize("method", METHODS)
    def test_word_modulo(self, converter, method):
        assert converter.convert("x ← a mod b", {"method": method}).code == "x = a % b"

    @pytest.mark.parametrize("method", ["tree", "hybrid"])
    def test_nested_empty_bodies_get_pass(self, converter, method):
        result = converter.convert("if x > 0 then\nx ← 1", {"method": method, "nest_blocks": True})
        assert result.code == "if x > 0:\n    pass\nx = 1"


class TestTotality:
    """convert() returns a result for any input."""

    @pytest.mark.parametrize("method", METHODS)
    @pytest.mark.parametrize(
        "text",
        ["", "   \n\t", "???", "if", "procedure", "for i from", "x ←", "配列：", "\x00\x01", "]][[", "((("],
    )
    def test_never_raises(self, converter, method, text):
        result = converter.convert(text, {"method": method})
        assert isinstance(result, ConversionResult)

    def test_none_text(self, converter):
        assert converter.convert(None).success

    def test_non_string_text(self, converter):
        result = converter.convert(123)
        assert not result.success
        assert result.code == ""
        assert len(result.errors) == 1
        assert result.errors[0].line == 0

    @pytest.mark.parametrize("options", [{"method": "bogus"}, {"indentSize": -1}, {"method": 3}])
    def test_invalid_options_become_an_error_result(self, converter, options):
        result = converter.convert("x ← 1", options)
        assert not result.success
        assert result.code == ""
        assert len(result.errors) == 1
        assert result.metadata.rules_applied == 0
        assert result.metadata.complexity_score == 0
        assert result.metadata.method == "unknown"


class TestOptions:
    """Option resolution."""

    def test_default_method_is_hybrid(self, converter):
        assert converter.convert("x ← 1").metadata.method == "hybrid"

    @pytest.mark.parametrize("legacy,method", [("rules", "pattern"), ("ast", "tree"), ("HYBRID", "hybrid")])
    def test_legacy_method_names(self, converter, legacy, method):
        assert converter.convert("x ← 1", {"method": legacy}).metadata.method == method

    def test_camel_case_keys(self, converter):
        result = converter.convert("x ← 1", {"method": "pattern", "includeDebugInfo": True})
        assert result.steps

    def test_options_model(self, converter):
        options = ConversionOptions(method="tree", indent_size=2)
        result = converter.convert("if x > 0 then\nx ← 1", options)
        assert result.code == "if x > 0:\n  x = 1"

    def test_module_level_convert(self):
        assert convert("integer: x").code == "x = 0"


class TestHybridComposition:
    """Hybrid errors are the pattern errors followed by the tree errors of the rewritten text."""

    @pytest.mark.parametrize(
        "text",
        [
            "procedure main\nif x > 0\ninteger: x",
            "if x > 0 then\nx ← 1",
            "for i from 0 to 9\nprocedure f",
            "",
        ],
    )
    def test_errors_compose(self, converter, text):
        pattern = converter.convert(text, {"method": "pattern"})
        tree = converter.convert(pattern.code, {"method": "tree"})
        hybrid = converter.convert(text, {"method": "hybrid"})
        assert hybrid.errors == pattern.errors + tree.errors
        assert hybrid.code == tree.code


class TestSteps:
    """Step tracing."""

    def test_pattern_records_one_step_per_rule(self, converter):
        result = converter.convert(
            "integer: count\nx ← count + 1", {"method": "pattern", "include_debug_info": True}
        )
        assert [s.rule_applied for s in result.steps] == ["var_integer", "assignment"]
        assert [s.step_number for s in result.steps] == [1, 2]
        assert all(s.transformation_type == "pattern-based" for s in result.steps)
        assert result.steps[0].output_text == result.steps[1].input_text
        assert result.metadata.rules_applied == 2

    def test_tree_records_parse_and_generate(self, converter):
        result = converter.convert("x ← 1", {"method": "tree", "include_debug_info": True})
        assert [s.rule_applied for s in result.steps] == ["syntax-parser", "python-generator"]
        assert all(s.transformation_type == "structural" for s in result.steps)

    def test_hybrid_records_two_summary_steps(self, converter):
        result = converter.convert_with_steps("integer: x\nx ← 1\nif x > 0 then")
        assert len(result.steps) == 2
        first, second = result.steps
        assert first.input_text == "integer: x\nx ← 1\nif x > 0 then"
        assert first.output_text == second.input_text
        assert second.output_text == result.code

    def test_no_steps_without_tracing(self, converter):
        assert converter.convert("integer: x").steps == []

    def test_module_level_convert_with_steps(self):
        assert len(convert_with_steps("x ← 1", {"method": "tree"}).steps) == 2


class TestMetadata:
    def test_pattern_has_no_tree(self, converter):
        result = converter.convert("if x > 0 then", {"method": "pattern"})
        assert result.metadata.ast is None
        assert result.metadata.complexity_score == 0

    def test_tree_has_tree_and_complexity(self, converter):
        result = converter.convert("procedure main()\nif x > 0 then", {"method": "tree"})
        assert isinstance(result.metadata.ast, Program)
        assert result.metadata.complexity_score == 3

    def test_hybrid_has_tree(self, converter):
        assert isinstance(converter.convert("x ← 1").metadata.ast, Program)

    def test_total_lines_and_time(self, converter):
        result = converter.convert("a\nb\nc")
        assert result.metadata.total_lines == 3
        assert result.metadata.conversion_time >= 0

    def test_python_code_alias(self, converter):
        result = converter.convert("x ← 1")
        assert result.python_code == result.code == "x = 1"
        assert result.model_dump(by_alias=True)["metadata"]["conversionTime"] >= 0


class TestValidation:
    """Post-hoc consistency checks."""

    def test_short_output_warning(self):
        result = validate_conversion("a\nb\nc\nd", "x = 1")
        assert result.is_valid
        assert [w.type for w in result.warnings] == ["semantic"]
        assert result.suggestions

    def test_lint_errors(self):
        result = validate_conversion("p", "if x:\ny = 1")
        assert not result.is_valid
        assert result.errors[0].line == 2

    def test_comment_lines_do_not_count(self):
        result = validate_conversion("a\nb", "# one\n# two")
        assert result.warnings[0].type == "semantic"

    def test_findings_become_warnings(self, converter):
        result = converter.convert("array: A\narray: B", {"method": "tree"})
        assert result.success
        assert "semantic" in [w.type for w in result.warnings]

    def test_validation_can_be_disabled(self, converter):
        result = converter.convert(
            "array: A\narray: B", {"method": "tree", "validate_output": False}
        )
        assert result.warnings == []

    def test_lint_findings_never_fail_a_conversion(self, converter):
        result = converter.convert("1x ← 5", {"method": "pattern"})
        assert result.success
        assert "Invalid variable name: 1x" in [w.message for w in result.warnings]


class TestFormatting:
    def test_reindents_after_colon_lines(self):
        assert format_python_code("if a:\nb\nelse:\nc", 4) == "if a:\n    b\nelse:\n    c"

    def test_blank_lines_are_kept_empty(self):
        assert format_python_code("a\n   \nb") == "a\n\nb"


class TestConcurrency:
    def test_parallel_conversions_match_sequential(self, converter, nested_program):
        texts = [nested_program, "integer: x", "for i from 0 to 9 step 1", "if x then"] * 5
        options = {"method": "tree", "nest_blocks": True}
        expected = [converter.convert(text, options).code for text in texts]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda text: converter.convert(text, options).code, texts))

        assert results == expected
