"""Tests for CSS2.1 selector specificity."""

import pytest

from cssinliner.specificity import specificity, specificity_counts


class TestSpecificity:
    @pytest.mark.parametrize(
        "selector, expected",
        [
            ("*", 0),
            ("li", 1),
            ("ul li", 2),
            ("ul ol+li", 3),
            ("h1 + *[rel=up]", 11),
            ("ul ol li.red", 13),
            ("li.red", 11),
            ("li.red.level", 21),
            ("#x34y", 101),
            ("#blah td.foo span.bar", 123),
            ("div>em", 2),
            ("div > em", 2),
            ("*.warning", 10),
            ("#main *", 101),
            ("a:visited", 11),
            ("p::first-line", 2),
            ("li:nth-child(2n+1)", 11),
            ('a[href$=".pdf"]', 11),
            ("DIV.Foo", 11),
            (".foo", 11),
            ("*#x", 100),
            ("::before", 2),
        ],
    )
    def test_scores(self, selector, expected):
        assert specificity(selector) == expected

    def test_combinators_do_not_score(self):
        # td, then #blah with its implied element name; the whitespace adds nothing.
        assert specificity("td #blah") == 102
        assert specificity("td > #blah") == specificity("td #blah")

    def test_universal_suppresses_implied_element(self):
        assert specificity("*.warning") == 10
        assert specificity(".warning") == 11

    def test_leading_and_trailing_whitespace(self):
        assert specificity("   p.note  ") == 11

    def test_empty_selector(self):
        assert specificity("") == 0


class TestSpecificityCounts:
    def test_triple(self):
        assert specificity_counts("#a .b c") == (1, 1, 3)

    def test_attribute_with_nested_quotes(self):
        assert specificity_counts("input[value='a]b']") == (0, 1, 1)

    def test_ten_classes_alias_one_id(self):
        many = "." + ".".join("abcdefghij")
        assert specificity_counts(many) == (0, 10, 1)
        assert specificity(many) == specificity("#x")
