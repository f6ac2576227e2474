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

"""Lint analyzers that report diagnostics over source text.

An analyzer is anything with an ``analyze(text, options)`` method returning
``Diagnostic`` objects. The built-in :class:`LineRuleAnalyzer` runs a small
set of line-oriented style rules, plus a syntax check for Python sources
whose failure is reported as a single fatal diagnostic.

Options are a free-form mapping::

    {"language": "python", "rules": {"max-len": 100, "no-tabs": False}}

A rule value of ``False`` or ``None`` disables the rule, ``True`` enables it
with its default setting, and any other value is the rule's setting.
"""

from __future__ import annotations

import ast
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from mcp_lint_marker.models import Diagnostic
from mcp_lint_marker.offsets import LINEBREAK_PATTERN
from mcp_lint_marker.tokenizer import resolve_language

logger = logging.getLogger(__name__)


class Analyzer(Protocol):
    def analyze(self, text: str, options: Mapping[str, Any] | None = None) -> list[Diagnostic]:
        ...


# ---------------------------------------------------------------------------
# Line rules
# ---------------------------------------------------------------------------


def _check_trailing_spaces(lines: list[str], setting: Any) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for lineno, line in enumerate(lines, start=1):
        match = re.search(r"[ \t]+$", line)
        if match:
            diagnostics.append(
                Diagnostic(
                    message="Trailing spaces not allowed.",
                    line=lineno,
                    column=match.start() + 1,
                    end_line=lineno,
                    end_column=match.end() + 1,
                    rule_id="no-trailing-spaces",
                )
            )
    return diagnostics


def _check_tabs(lines: list[str], setting: Any) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for lineno, line in enumerate(lines, start=1):
        for match in re.finditer(r"\t", line):
            diagnostics.append(
                Diagnostic(
                    message="Unexpected tab character.",
                    line=lineno,
                    column=match.start() + 1,
                    end_line=lineno,
                    end_column=match.end() + 1,
                    rule_id="no-tabs",
                )
            )
    return diagnostics


def _check_max_len(lines: list[str], setting: Any) -> list[Diagnostic]:
    limit = int(setting)
    diagnostics: list[Diagnostic] = []
    for lineno, line in enumerate(lines, start=1):
        if len(line) > limit:
            diagnostics.append(
                Diagnostic(
                    message=f"This line has a length of {len(line)}. Maximum allowed is {limit}.",
                    line=lineno,
                    column=1,
                    end_line=lineno,
                    end_column=len(line) + 1,
                    rule_id="max-len",
                    severity="warning",
                )
            )
    return diagnostics


def _check_multiple_empty_lines(lines: list[str], setting: Any) -> list[Diagnostic]:
    """Report each blank line beyond the allowed run as a point on its line break."""
    allowed = int(setting)
    diagnostics: list[Diagnostic] = []
    run = 0
    # The last line has no break after it, so it is never reported
    for lineno, line in enumerate(lines[:-1], start=1):
        if line.strip():
            run = 0
            continue
        run += 1
        if run > allowed:
            diagnostics.append(
                Diagnostic(
                    message=f"More than {allowed} blank {'line' if allowed == 1 else 'lines'} not allowed.",
                    line=lineno,
                    column=len(line) + 1,
                    rule_id="no-multiple-empty-lines",
                )
            )
    return diagnostics


@dataclass(frozen=True)
class LineRule:
    """A registered line rule with its default setting."""

    rule_id: str
    description: str
    default: Any
    check: Callable[[list[str], Any], list[Diagnostic]]


RULES: dict[str, LineRule] = {
    rule.rule_id: rule
    for rule in (
        LineRule("no-trailing-spaces", "Disallow trailing whitespace at the end of lines", True, _check_trailing_spaces),
        LineRule("no-tabs", "Disallow tab characters", True, _check_tabs),
        LineRule("max-len", "Enforce a maximum line length", 80, _check_max_len),
        LineRule("no-multiple-empty-lines", "Disallow runs of blank lines", 1, _check_multiple_empty_lines),
    )
}


def resolve_rule_settings(rules: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge user rule settings over the defaults, dropping disabled rules."""
    settings: dict[str, Any] = {rule_id: rule.default for rule_id, rule in RULES.items()}
    for rule_id, value in (rules or {}).items():
        if rule_id not in RULES:
            raise ValueError(f"Unknown rule: {rule_id!r}")
        settings[rule_id] = RULES[rule_id].default if value is True else value
    return {rule_id: value for rule_id, value in settings.items() if value is not False and value is not None}


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------


def _check_python_syntax(text: str) -> Diagnostic | None:
    try:
        ast.parse(text)
    except SyntaxError as e:
        return Diagnostic(
            message=f"Parsing error: {e.msg}",
            line=e.lineno or 1,
            column=e.offset or 1,
            fatal=True,
        )
    return None


class LineRuleAnalyzer:
    """Built-in analyzer running the registered line rules."""

    def analyze(self, text: str, options: Mapping[str, Any] | None = None) -> list[Diagnostic]:
        options = options or {}
        language = resolve_language(str(options.get("language", "javascript")))
        settings = resolve_rule_settings(options.get("rules"))

        if language == "python":
            fatal = _check_python_syntax(text)
            if fatal is not None:
                logger.info("Syntax error at %d:%d: %s", fatal.line, fatal.column, fatal.message)
                return [fatal]

        lines = LINEBREAK_PATTERN.split(text)
        diagnostics: list[Diagnostic] = []
        for rule_id, setting in settings.items():
            diagnostics.extend(RULES[rule_id].check(lines, setting))

        diagnostics.sort(key=lambda d: (d.line, d.column))
        logger.debug("Analyzer reported %d diagnostics", len(diagnostics))
        return diagnostics
