"""
Tests for the pattern rewrite rule catalog.
"""

import dataclasses

import pytest

from pseudoconv.rules import CONVERSION_RULES, DEFAULT_CATALOG, RuleCatalog, RuleCategory


ALL_EXAMPLES = [
    pytest.param(rule, example, id=f"{rule.id}:{example.description}")
    for rule in CONVERSION_RULES
    for example in rule.examples
]


class TestRuleExamples:
    """Every documented example is reproduced exactly."""

    @pytest.mark.parametrize("rule,example", ALL_EXAMPLES)
    def test_example_is_exact(self, rule, example):
        assert RuleCatalog.apply_one(rule, example.input) == example.output

    def test_every_rule_has_examples(self):
        for rule in CONVERSION_RULES:
            assert rule.examples, rule.id

    def test_rule_ids_are_unique(self):
        ids = [rule.id for rule in CONVERSION_RULES]
        assert len(ids) == len(set(ids))


class TestQueries:
    """Lookup by id, category and enabled state."""

    def test_get_all_is_catalog_order(self, catalog):
        assert [r.id for r in catalog.get_all()] == [r.id for r in CONVERSION_RULES]

    def test_get_by_id(self, catalog):
        rule = catalog.get_by_id("var_integer")
        assert rule is not None
        assert rule.priority == 100
        assert rule.category is RuleCategory.DECLARATION

    def test_get_by_id_missing(self, catalog):
        assert catalog.get_by_id("no_such_rule") is None

    def test_get_by_category_accepts_string(self, catalog):
        ids = [rule.id for rule in catalog.get_by_category("operator")]
        assert ids == [
            "operator_not_equal",
            "operator_less_equal",
            "operator_greater_equal",
            "operator_multiply",
            "operator_integer_division",
            "operator_modulo",
        ]

    def test_disabled_rules_are_filtered(self):
        rules = [
            dataclasses.replace(rule, enabled=False) if rule.id == "assignment" else rule
            for rule in CONVERSION_RULES
        ]
        catalog = RuleCatalog(rules)
        assert len(catalog.get_all()) == len(CONVERSION_RULES)
        assert "assignment" not in [rule.id for rule in catalog.get_enabled()]
        assert catalog.get_by_category(RuleCategory.ASSIGNMENT) == []

    def test_queries_return_copies(self, catalog):
        rules = catalog.get_all()
        rules.clear()
        assert len(catalog) == len(CONVERSION_RULES)

    def test_rules_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            CONVERSION_RULES[0].priority = 0

    def test_default_catalog_is_shared(self):
        assert len(DEFAULT_CATALOG) == len(CONVERSION_RULES)


class TestSortByPriority:
    """Descending priority, stable for ties."""

    def test_descending(self, catalog):
        priorities = [rule.priority for rule in catalog.sort_by_priority(catalog.get_all())]
        assert priorities == sorted(priorities, reverse=True)

    def test_equal_priorities_keep_input_order(self, catalog):
        ne = catalog.get_by_id("operator_not_equal")
        le = catalog.get_by_id("operator_less_equal")
        ge = catalog.get_by_id("operator_greater_equal")

        assert RuleCatalog.sort_by_priority([ne, le, ge]) == [ne, le, ge]
        assert RuleCatalog.sort_by_priority([ge, ne, le]) == [ge, ne, le]

    def test_repeated_calls_are_identical(self, catalog):
        first = [rule.id for rule in catalog.sort_by_priority(catalog.get_all())]
        for _ in range(5):
            assert [rule.id for rule in catalog.sort_by_priority(catalog.get_all())] == first

    def test_input_is_not_modified(self, catalog):
        rules = catalog.get_all()
        catalog.sort_by_priority(rules)
        assert [rule.id for rule in rules] == [rule.id for rule in CONVERSION_RULES]


class TestApply:
    """Applying single rules and the whole catalog."""

    def test_no_match_is_noop(self, catalog):
        rule = catalog.get_by_id("procedure_definition")
        assert catalog.apply_one(rule, "x ← 1") == "x ← 1"
        assert not catalog.matches(rule, "x ← 1")

    def test_indentation_is_preserved(self, catalog):
        rule = catalog.get_by_id("assignment")
        assert catalog.apply_one(rule, "    x ← 1") == "    x = 1"

    def test_every_line_is_rewritten(self, catalog):
        rule = catalog.get_by_id("assignment")
        assert catalog.apply_one(rule, "a ← 1\nb ← 2") == "a = 1\nb = 2"

    def test_callable_replacement_keeps_indent(self, catalog):
        rule = catalog.get_by_id("var_multiple_integers")
        assert catalog.apply_one(rule, "  integer: a, b") == "  a = 0\n  b = 0"

    def test_numeric_loop_wins_over_expression_loop(self, catalog):
        text, applied = catalog.apply_all("for i from 0 to 9 step 2")
        assert text == "for i in range(0, 10, 2):"
        assert applied == ["for_loop"]

    def test_modulo_needs_surrounding_space(self, catalog):
        rule = catalog.get_by_id("operator_modulo")
        assert catalog.apply_one(rule, "modulus ← a mod b") == "modulus ← a % b"

    def test_apply_all_reports_changing_rules(self, catalog):
        text, applied = catalog.apply_all("integer: count\nx ← count + 1")
        assert text == "count = 0\nx = count + 1"
        assert applied == ["var_integer", "assignment"]

    def test_apply_all_on_python_is_noop(self, catalog):
        code = "for i in range(0, 10, 1):\n    total = total + i"
        assert catalog.apply_all(code) == (code, [])
