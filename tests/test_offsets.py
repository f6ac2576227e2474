"""Tests for the line-start index."""

from mcp_lint_marker.models import Location
from mcp_lint_marker.offsets import build_line_index, resolve_location


class TestBuildLineIndex:
    def test_single_line(self):
        assert build_line_index("abc") == [0]

    def test_empty_text(self):
        assert build_line_index("") == [0]

    def test_lf(self):
        assert build_line_index("abc\ndef\nghi") == [0, 4, 8]

    def test_crlf_counts_as_one_break(self):
        assert build_line_index("ab\r\ncd\r\nef") == [0, 4, 8]

    def test_lone_cr_and_unicode_separators(self):
        assert build_line_index("a\rb\u2028c\u2029d") == [0, 2, 4, 6]

    def test_trailing_break_adds_empty_line(self):
        assert build_line_index("a\n") == [0, 2]

    def test_blank_lines(self):
        assert build_line_index("\n\n") == [0, 1, 2]


class TestResolveLocation:
    def test_first_character(self):
        assert resolve_location([0, 4, 8], Location(1, 1)) == 0

    def test_later_line(self):
        text = "abc\ndef\nghi"
        index = build_line_index(text)
        offset = resolve_location(index, Location(3, 2))
        assert text[offset] == "h"

    def test_column_past_line_end_points_at_break(self):
        text = "abc\ndef"
        index = build_line_index(text)
        assert text[resolve_location(index, Location(1, 4))] == "\n"

    def test_crlf_text(self):
        text = "ab\r\ncd"
        index = build_line_index(text)
        assert text[resolve_location(index, Location(2, 2))] == "d"
