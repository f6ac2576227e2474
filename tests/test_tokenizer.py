"""Tests for the regex-based tokenizer."""

import time

import pytest

from mcp_lint_marker.models import Text, Token
from mcp_lint_marker.tokenizer import resolve_language, tokenize
from mcp_lint_marker.tokens import flatten_text, iter_tokens

JS_SOURCE = """\
// greet the user
const name = "world";
function greet(who) {
    return `Hello ${who.toUpperCase()}!`;
}
/* done */ greet(name);"""

PY_SOURCE = '''\
@dataclass
class Point:
    """A point."""
    x: int = 0

    def label(self, prefix='p'):
        # format it
        return f"{prefix}{self.x!r:>4}"
'''


def _kinds(tree) -> list[str]:
    return [t.kind for t in iter_tokens(tree)]


class TestJavaScript:
    def test_reconstitutes_source(self):
        assert flatten_text(tokenize(JS_SOURCE, "javascript")) == JS_SOURCE

    def test_keywords_and_strings(self):
        tree = tokenize('const name = "world";')
        assert tree[0] == Token("keyword", "const")
        assert Token("string", '"world"') in tree
        assert tree[-1] == Token("punctuation", ";")

    def test_unclaimed_text_becomes_text_leaves(self):
        tree = tokenize("let  x")
        assert tree[1] == Text("  x")

    def test_comments(self):
        tree = tokenize("// hi\nx")
        assert tree[0] == Token("comment", "// hi")

    def test_function_name(self):
        tree = tokenize("greet(name)")
        assert tree[0] == Token("function", "greet")

    def test_template_string_is_nested(self):
        tree = tokenize("`a ${b} c`")
        assert len(tree) == 1
        template = tree[0]
        assert template.kind == "template-string"
        assert not template.has_text_content
        kinds = _kinds(tree)
        assert "interpolation" in kinds
        assert "interpolation-punctuation" in kinds
        assert flatten_text(tree) == "`a ${b} c`"

    def test_interpolation_expression_uses_javascript_grammar(self):
        tree = tokenize("`${new Date()}`")
        kinds = _kinds(tree)
        assert "keyword" in kinds
        assert "class-name" in kinds or "function" in kinds


class TestPython:
    def test_reconstitutes_source(self):
        assert flatten_text(tokenize(PY_SOURCE, "python")) == PY_SOURCE

    def test_decorator_and_keywords(self):
        tree = tokenize(PY_SOURCE, "python")
        assert tree[0] == Token("decorator", "@dataclass", ("annotation",))
        assert Token("keyword", "class") in tree
        assert Token("keyword", "def") in tree

    def test_docstring(self):
        tree = tokenize(PY_SOURCE, "py")
        assert Token("triple-quoted-string", '"""A point."""', ("string",)) in tree

    def test_f_string_fields_are_nested(self):
        tree = tokenize('f"{a!r:>4} {{x}}"', "python")
        assert tree[0].kind == "string-interpolation"
        kinds = _kinds(tree)
        assert "interpolation" in kinds
        assert "conversion-option" in kinds
        assert "format-spec" in kinds
        assert flatten_text(tree) == 'f"{a!r:>4} {{x}}"'

    def test_matmul_is_not_a_decorator(self):
        tree = tokenize("a @ b", "python")
        assert Token("operator", "@") in tree


class TestLanguages:
    def test_plain_is_one_leaf(self):
        assert tokenize("any text", "plain") == [Text("any text")]

    def test_empty_text(self):
        assert tokenize("") == []

    def test_aliases(self):
        assert resolve_language("JS") == "javascript"
        assert resolve_language("txt") == "plain"

    def test_unknown_language(self):
        with pytest.raises(ValueError, match="Unsupported language"):
            tokenize("x", "cobol")

    def test_sub_grammar_is_not_a_language(self):
        with pytest.raises(ValueError):
            resolve_language("interpolation")


class TestLargeInput:
    def test_tokenizing_scales_linearly(self):
        line = "let x = 1;\n"
        source = line * 2000  # 22,000 chars
        start = time.perf_counter()
        tree = tokenize(source)
        elapsed = time.perf_counter() - start
        assert elapsed < 2.0
        assert tree == tokenize(line) * 2000

    def test_large_python_source(self):
        source = PY_SOURCE * 100
        start = time.perf_counter()
        tree = tokenize(source, "python")
        assert time.perf_counter() - start < 2.0
        assert flatten_text(tree) == source
