# mcp-lint-marker - Lint diagnostic marker for token trees with MCP server
# Copyright (C) 2026 Michael Doyle
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing available. See COMMERCIAL-LICENSE.md for details.

"""Regex-based syntax tokenizer (best-effort, highlighting quality).

This is NOT a full lexer. Each language is an ordered list of rules; at every
position the rule whose match starts earliest wins, ties going to the rule
listed first. Text no rule claims becomes plain ``Text`` leaves. A rule may
name an ``inside`` grammar, in which case the matched text is tokenized again
with that grammar and the token gets nested content, e.g. template literals
whose ``${...}`` interpolations hold ordinary JavaScript tokens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mcp_lint_marker.models import Node, Text, Token


@dataclass(frozen=True)
class Rule:
    """A single grammar rule."""

    kind: str
    pattern: re.Pattern[str]
    alias: tuple[str, ...] = ()
    inside: str | None = None  # Name of the grammar for nested content


def _rule(kind: str, pattern: str, alias: tuple[str, ...] = (), inside: str | None = None) -> Rule:
    return Rule(kind, re.compile(pattern), alias, inside)


# ---------------------------------------------------------------------------
# Grammars
# ---------------------------------------------------------------------------

_JS_KEYWORDS = (
    "async|await|break|case|catch|class|const|continue|debugger|default|delete|do|"
    "else|export|extends|finally|for|from|function|if|import|in|instanceof|let|new|"
    "of|return|static|super|switch|this|throw|try|typeof|var|void|while|with|yield"
)

_PY_KEYWORDS = (
    "and|as|assert|async|await|break|class|continue|def|del|elif|else|except|"
    "finally|for|from|global|if|import|in|is|lambda|nonlocal|not|or|pass|raise|"
    "return|try|while|with|yield"
)

_GRAMMARS: dict[str, list[Rule]] = {
    "plain": [],
    "javascript": [
        _rule("comment", r"//[^\r\n]*|/\*[\s\S]*?\*/"),
        _rule("template-string", r"`(?:\\[\s\S]|\$\{[^}]*\}|[^\\`$]|\$(?!\{))*`", inside="template-string"),
        _rule("string", r"\"(?:\\.|[^\\\"\r\n])*\"|'(?:\\.|[^\\'\r\n])*'"),
        _rule("keyword", rf"\b(?:{_JS_KEYWORDS})\b"),
        _rule("boolean", r"\b(?:true|false)\b"),
        _rule("constant", r"\b(?:null|undefined|NaN|Infinity)\b"),
        _rule("function", r"[A-Za-z_$][\w$]*(?=\s*\()"),
        _rule("class-name", r"\b[A-Z][\w$]*"),
        _rule("number", r"\b(?:0[xX][\da-fA-F]+|0[bB][01]+|0[oO][0-7]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?n?)\b"),
        _rule("operator", r"=>|[-+*/%=!<>&|^~?]+|\.\.\."),
        _rule("punctuation", r"[{}\[\]();,.:]"),
    ],
    "template-string": [
        _rule("template-punctuation", r"^`|`$", alias=("string",)),
        _rule("interpolation", r"\$\{[^}]*\}", inside="interpolation"),
        _rule("string", r"[^`$]+|\$(?!\{)"),
    ],
    "interpolation": [
        _rule("interpolation-punctuation", r"^\$\{|\}$", alias=("punctuation",)),
        _rule("expression", r"[\s\S]+(?=\}$)", inside="javascript"),
    ],
    "python": [
        _rule("comment", r"#[^\r\n]*"),
        _rule("triple-quoted-string", r"(?:[rRbBuUfF]{,2})(?:\"\"\"[\s\S]*?\"\"\"|'''[\s\S]*?''')", alias=("string",)),
        _rule("string-interpolation", r"(?:[fF][rR]?|[rR][fF])(?:\"(?:\\.|[^\\\"\r\n])*\"|'(?:\\.|[^\\'\r\n])*')", inside="f-string"),
        _rule("string", r"(?:[rRbBuU]{,2})(?:\"(?:\\.|[^\\\"\r\n])*\"|'(?:\\.|[^\\'\r\n])*')"),
        _rule("decorator", r"(?<![\w)\]}])@[A-Za-z_][\w.]*", alias=("annotation",)),
        _rule("keyword", rf"\b(?:{_PY_KEYWORDS})\b"),
        _rule("boolean", r"\b(?:True|False)\b"),
        _rule("constant", r"\bNone\b"),
        _rule("builtin", r"\b(?:print|len|range|str|int|float|list|dict|set|tuple|isinstance|super|open)\b(?=\s*\()"),
        _rule("function", r"[A-Za-z_]\w*(?=\s*\()"),
        _rule("number", r"\b(?:0[xX][\da-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|\d[\d_]*(?:\.\d*)?(?:[eE][+-]?\d+)?j?)\b"),
        _rule("operator", r"[-+*/%=!<>&|^~@]+|:="),
        _rule("punctuation", r"[{}\[\]();,.:]"),
    ],
    "f-string": [
        _rule("string", r"^[fFrR]+[\"']|[\"']$|[^{}]+|\{\{|\}\}"),
        _rule("interpolation", r"\{[^{}]*\}", inside="f-string-field"),
    ],
    "f-string-field": [
        _rule("punctuation", r"^\{|\}$"),
        _rule("format-spec", r"(?<=:)[^:{}]*(?=\}$)"),
        _rule("conversion-option", r"![rsa](?=[:}])", alias=("punctuation",)),
        _rule("expression", r"[^!:}]+|![^rsa]|!$", inside="python"),
        _rule("punctuation", r":"),
    ],
}

_LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "py": "python",
    "text": "plain",
    "txt": "plain",
}

# Languages a caller may ask for; the others are sub-grammars only
LANGUAGES: tuple[str, ...] = ("javascript", "python", "plain")


def resolve_language(language: str) -> str:
    """Normalize a language name or alias, raising ValueError if unknown."""
    name = _LANGUAGE_ALIASES.get(language.lower(), language.lower())
    if name not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language!r}")
    return name


def _tokenize_grammar(text: str, grammar_name: str) -> list[Node]:
    rules = _GRAMMARS[grammar_name]
    nodes: list[Node] = []
    pending = ""  # Unclaimed text waiting to become a Text leaf
    pos = 0

    # Next match of each rule at or after pos. A match stays valid until pos
    # moves past its start; None means the rule has no further matches.
    lookahead: list[re.Match[str] | None] = [None] * len(rules)
    exhausted = [False] * len(rules)

    while pos < len(text):
        best: tuple[re.Match[str], Rule] | None = None
        for i, rule in enumerate(rules):
            if exhausted[i]:
                continue
            match = lookahead[i]
            if match is None or match.start() < pos:
                match = _search_nonempty(rule.pattern, text, pos)
                lookahead[i] = match
                if match is None:
                    exhausted[i] = True
                    continue
            if best is None or match.start() < best[0].start():
                best = (match, rule)
        if best is None:
            pending += text[pos:]
            break

        match, rule = best
        pending += text[pos:match.start()]
        if pending:
            nodes.append(Text(pending))
            pending = ""

        matched = match.group()
        if rule.inside is not None:
            content: str | list[Node] = _tokenize_grammar(matched, rule.inside)
        else:
            content = matched
        nodes.append(Token(rule.kind, content, rule.alias))
        pos = match.end()

    if pending:
        nodes.append(Text(pending))
    return nodes


def _search_nonempty(pattern: re.Pattern[str], text: str, pos: int) -> re.Match[str] | None:
    """First non-empty match of *pattern* at or after *pos*.

    Anchors like ^ and $ refer to the whole fragment, so the full string is
    searched from pos rather than a slice.
    """
    while pos <= len(text):
        match = pattern.search(text, pos)
        if match is None or match.end() > match.start():
            return match
        pos = match.start() + 1
    return None


def tokenize(text: str, language: str = "javascript") -> list[Node]:
    """Tokenize *text* into a token tree for the given language.

    The concatenated text of the returned tree always equals *text*.
    """
    return _tokenize_grammar(text, resolve_language(language))
