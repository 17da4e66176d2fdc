"""
Catalog filter formula unit tests
"""
import pytest

from app.services.catalog import IN_STOCK_CLAUSE, build_filter_formula
from app.utils.formula import field_ref, quote_formula_string


class TestQuoteFormulaString:
    """Formula string literal quoting"""

    def test_plain_value(self):
        assert quote_formula_string("potting-soil") == "'potting-soil'"

    def test_single_quote_is_escaped(self):
        assert quote_formula_string("gardener's mix") == "'gardener\\'s mix'"

    def test_backslash_is_escaped_before_quote(self):
        # A trailing backslash must not be able to escape the closing quote
        assert quote_formula_string("mix\\") == "'mix\\\\'"

    def test_none_is_empty_literal(self):
        assert quote_formula_string(None) == "''"

    def test_field_ref(self):
        assert field_ref("in_stock") == "{in_stock}"


class TestBuildFilterFormula:
    """Filter formula construction"""

    def test_no_filters_is_exactly_in_stock_clause(self):
        assert build_filter_formula() == "AND({in_stock} = TRUE())"

    @pytest.mark.parametrize("tags", [None, []])
    def test_empty_tags_add_nothing(self, tags):
        assert build_filter_formula(None, tags) == f"AND({IN_STOCK_CLAUSE})"

    def test_empty_category_adds_nothing(self):
        assert build_filter_formula("", None) == "AND({in_stock} = TRUE())"

    def test_category_only(self):
        assert build_filter_formula("potting-soil") == (
            "AND({in_stock} = TRUE(), {category} = 'potting-soil')"
        )

    def test_category_and_tags(self):
        formula = build_filter_formula("potting-soil", ["organic", "drainage"])
        assert formula == (
            "AND({in_stock} = TRUE(), {category} = 'potting-soil', "
            "OR(FIND('organic', {tags}), FIND('drainage', {tags})))"
        )

    @pytest.mark.parametrize(
        "tags",
        [
            ["organic"],
            ["organic", "drainage"],
            ["organic", "drainage", "vegetables", "seed-starting"],
        ],
    )
    def test_one_find_clause_per_tag(self, tags):
        formula = build_filter_formula(None, tags)

        assert formula.startswith(f"AND({IN_STOCK_CLAUSE}, OR(")
        assert formula.count("FIND(") == len(tags)
        assert formula.count("OR(") == 1
        for tag in tags:
            assert f"FIND('{tag}', {{tags}})" in formula

    def test_tag_order_is_preserved(self):
        formula = build_filter_formula(None, ["b", "a"])
        assert formula.index("FIND('b'") < formula.index("FIND('a'")

    def test_quote_in_category_cannot_break_out(self):
        formula = build_filter_formula("x') , TRUE(), ('")
        assert formula == "AND({in_stock} = TRUE(), {category} = 'x\\') , TRUE(), (\\'')"

    def test_quote_in_tag_is_escaped(self):
        formula = build_filter_formula(None, ["farmer's choice"])
        assert "FIND('farmer\\'s choice', {tags})" in formula
