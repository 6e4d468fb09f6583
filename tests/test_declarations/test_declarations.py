"""Tests for the declaration codec."""

import pytest

from cssinliner.declarations import decode, encode, split_declarations
from cssinliner.diagnostics import ContentWarnings
from cssinliner.errors import ContentWarningError


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------


class TestDecode:
    def test_simple_declarations(self):
        assert decode("color: red; font-size: 12px") == {"color": "red", "font-size": "12px"}

    def test_property_names_are_lowercased(self):
        assert decode("COLOR:Red; Font-Weight: Bold") == {"color": "Red", "font-weight": "Bold"}

    def test_later_duplicate_overwrites(self):
        assert decode("color:red;color:blue;") == {"color": "blue"}

    def test_blank_fragments_ignored(self):
        assert decode(" ; ;color:red;;  ") == {"color": "red"}

    def test_empty_string(self):
        assert decode("") == {}

    def test_value_whitespace_trimmed(self):
        assert decode("margin :   0 auto   ") == {"margin": "0 auto"}

    def test_value_may_contain_colons(self):
        assert decode("background: url(http://example.com/a.png)") == {
            "background": "url(http://example.com/a.png)"
        }

    def test_semicolon_inside_parentheses_does_not_split(self):
        style = "background:url(data:image/png;base64,AAAA);color:red"
        assert decode(style) == {
            "background": "url(data:image/png;base64,AAAA)",
            "color": "red",
        }

    def test_semicolon_inside_quotes_does_not_split(self):
        assert decode("font-family: 'a;b', serif") == {"font-family": "'a;b', serif"}


class TestDecodeWarnings:
    def test_malformed_fragment_dropped_with_warning(self):
        warnings = ContentWarnings()
        result = decode("color red; margin:0", warnings)
        assert result == {"margin": "0"}
        assert warnings.as_list() == [
            "Invalid or unexpected property 'color red' in style 'color red; margin:0'"
        ]

    def test_context_replaces_style_in_message(self):
        warnings = ContentWarnings()
        decode("!bad", warnings, context="h1")
        assert "Invalid or unexpected property '!bad' in style 'h1'" in warnings

    def test_no_collector_means_silent_drop(self):
        assert decode("nonsense") == {}

    def test_strict_raises(self):
        with pytest.raises(ContentWarningError):
            decode("color red", ContentWarnings(strict=True))


# ---------------------------------------------------------------------------
# encode
# ---------------------------------------------------------------------------


class TestEncode:
    def test_pairs_with_trailing_semicolons(self):
        assert encode({"color": "red", "font-size": "20px"}) == "color:red;font-size:20px;"

    def test_keeps_mapping_order_by_default(self):
        assert encode({"z-index": "1", "color": "red"}) == "z-index:1;color:red;"

    def test_sorted_keys(self):
        assert encode({"z-index": "1", "color": "red"}, sort_keys=True) == "color:red;z-index:1;"

    def test_empty(self):
        assert encode({}) == ""


class TestRoundTrip:
    def test_decode_inverts_encode(self):
        declarations = {
            "color": "red",
            "margin": "0 auto",
            "font-family": "'Helvetica Neue', Arial, sans-serif",
            "background": "url(data:image/gif;base64,R0lGOD)",
        }
        assert decode(encode(declarations)) == declarations


class TestSplitDeclarations:
    def test_fragments_keep_their_whitespace(self):
        assert list(split_declarations(" a:1 ; b:2")) == [" a:1 ", " b:2"]
