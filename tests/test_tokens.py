"""Tests for token-tree shape helpers."""

import pytest

from mcp_lint_marker.models import MESSAGE_KIND, Text, Token
from mcp_lint_marker.tokens import (
    MalformedTreeError,
    flatten_text,
    iter_tokens,
    node_length,
    split_at,
)


class TestNodeLength:
    def test_text(self):
        assert node_length(Text("abc")) == 3

    def test_token_with_string_content(self):
        assert node_length(Token("keyword", "const")) == 5

    def test_nested_token(self):
        token = Token("group", [Text("ab"), Token("inner", [Text("c"), Token("x", "de")])])
        assert node_length(token) == 5

    def test_message_is_zero_width(self):
        assert node_length(Token(MESSAGE_KIND, "Unexpected tab.")) == 0

    def test_unknown_node_raises(self):
        with pytest.raises(MalformedTreeError):
            node_length("raw string")

    def test_bad_content_raises(self):
        with pytest.raises(MalformedTreeError):
            node_length(Token("number", 42))

    def test_non_string_text_raises(self):
        with pytest.raises(MalformedTreeError):
            node_length(Text(None))


class TestFlattenText:
    def test_sequence(self):
        tree = [Token("keyword", "let"), Text(" "), Token("group", [Text("x"), Text(";")])]
        assert flatten_text(tree) == "let x;"

    def test_single_node(self):
        assert flatten_text(Token("keyword", "let")) == "let"

    def test_skips_messages(self):
        tree = [Token("annotated-span", [Text("x"), Token(MESSAGE_KIND, "bad")])]
        assert flatten_text(tree) == "x"

    def test_malformed_nested_node_raises(self):
        with pytest.raises(MalformedTreeError):
            flatten_text([Token("group", [Text("a"), None])])

    def test_non_string_text_raises(self):
        with pytest.raises(MalformedTreeError):
            flatten_text([Text("a"), Text(None)])


class TestSplitAt:
    def test_text(self):
        assert split_at(Text("abcd"), 1) == (Text("a"), Text("bcd"))

    def test_string_token_keeps_kind_and_alias(self):
        token = Token("string", "'abc'", ("quoted",))
        assert split_at(token, 2) == (
            Token("string", "'a", ("quoted",)),
            Token("string", "bc'", ("quoted",)),
        )

    def test_offset_at_edges(self):
        token = Token("keyword", "let")
        assert split_at(token, 0) == (None, token)
        assert split_at(token, 3) == (token, None)

    def test_nested_token(self):
        token = Token("group", [Text("ab"), Token("inner", "cd"), Text("ef")])
        left, right = split_at(token, 3)
        assert left == Token("group", [Text("ab"), Token("inner", "c")])
        assert right == Token("group", [Token("inner", "d"), Text("ef")])

    def test_nested_split_on_child_boundary(self):
        token = Token("group", [Text("ab"), Text("cd")])
        assert split_at(token, 2) == (
            Token("group", [Text("ab")]),
            Token("group", [Text("cd")]),
        )

    def test_zero_width_child_on_split_point_goes_left(self):
        message = Token(MESSAGE_KIND, "m")
        token = Token("group", [Text("ab"), message, Text("cd")])
        left, right = split_at(token, 2)
        assert left.content == [Text("ab"), message]
        assert right.content == [Text("cd")]


class TestIterTokens:
    def test_depth_first_order(self):
        tree = [
            Token("a", [Token("b", "x"), Text("y")]),
            Text("z"),
            Token("c", "w"),
        ]
        assert [t.kind for t in iter_tokens(tree)] == ["a", "b", "c"]
