"""Tests for the balanced-source scanner and the marker locator."""

import pytest

from streamsig.core.js_scanner import between, cut_after_js


class TestCutAfterJs:
    @pytest.mark.parametrize(
        "expected",
        [
            '{"a": 1, "b": 1}',
            '{"a": "}1", "b": 1}',
            "{\"a\": '}1', \"b\": 1}",
            "[-1816574795, '\",;/[;', function asdf() { a = 2/3; return a;}]",
            '{"a": `}1`, "b": 1}',
            r'{"a": "\"}1", "b": 1}',
            r'{"a": "\"}1", "b": 1, "c": /[0-9]}}\/}/}',
            r'{"a": [-1929233002,b,/,][}",],()}(\[)/,2070160835,1561177444]}',
            r'{"a": "\"}1", "b": 1, "c": [4/6, /[0-9]}}\/}/]}',
            r'{"a": "\"1", "b": 1, "c": {"test": 1}}',
            r'{"a": "\"1", "b": 1, "c": () => { try { /* do sth */ } catch (e) { a = [2+3] }; return 5}}',
            r'{"a": "\"фыва", "b": 1, "c": {"test": 1}}',
            r'{"a": "\\\\фыва", "b": 1, "c": {"test": 1}}',
            '[{"a": 1}, {"b": 2}]',
            "(function(a){return a/2})",
        ],
        ids=[
            "simple_json",
            "double_quoted_bracket",
            "single_quoted_bracket",
            "complex_single_quoted",
            "back_tick_quoted",
            "escaped_quote",
            "regex_literal",
            "regex_in_array",
            "division_then_regex",
            "nested_objects",
            "try_catch_and_comment",
            "utf8",
            "backslashes_in_string",
            "array_start",
            "paren_start",
        ],
    )
    def test_cuts_trailing_text(self, expected):
        assert cut_after_js(f"{expected}abcd") == expected

    def test_exact_input(self):
        assert cut_after_js('{"a": 1, "b": 1}') == '{"a": 1, "b": 1}'

    def test_backslashes_towards_end_of_string(self):
        assert cut_after_js(r'{"text": "\\\\"};') == r'{"text": "\\\\"}'

    def test_block_comment_with_brackets(self):
        assert cut_after_js("{a: 1 /* } ] ) */, b: 2}c") == "{a: 1 /* } ] ) */, b: 2}"

    def test_not_beginning_with_bracket(self):
        assert cut_after_js("abcd]}") is None

    @pytest.mark.parametrize("source", ['"abc"xyz', "'x'y", "`t`u", "/*c*/{a}", " {a}"])
    def test_leading_literal_is_not_a_fragment(self, source):
        assert cut_after_js(source) is None

    def test_closing_bracket_first(self):
        assert cut_after_js("}{") is None

    def test_missing_closing_bracket(self):
        assert cut_after_js('{"a": 1,{ "b": 1}') is None

    def test_lone_bracket(self):
        assert cut_after_js("{") is None

    def test_empty_input(self):
        assert cut_after_js("") is None

    def test_unterminated_string(self):
        assert cut_after_js('{"a": "never closed}') is None

    def test_unterminated_comment(self):
        assert cut_after_js("{a /* never closed }") is None

    def test_unterminated_regex(self):
        assert cut_after_js("{a: /never closed}") is None


class TestBetween:
    def test_interior_text(self):
        assert between("var a=[Xy];", "var a=[", "]") == "Xy"

    def test_right_searched_after_left(self):
        assert between("]x[abc]", "[", "]") == "abc"

    def test_first_left_wins(self):
        assert between("<1><2>", "<", ">") == "1"

    def test_missing_left(self):
        assert between("abc", "[", "]") == ""

    def test_missing_right(self):
        assert between("[abc", "[", "]") == ""

    def test_adjacent_anchors(self):
        assert between("[]", "[", "]") == ""
