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

"""Marking pipeline: lint an example and splice the results into its tokens.

Steps:
1. Normalize the example (drop ``⏎`` markers and the trailing newline) so the
   tokenizer and the analyzer see the same text.
2. Tokenize it into a token tree.
3. Analyze it. If the analyzer reports a fatal (parse) error the tree is
   returned unmarked.
4. Convert each diagnostic location to an absolute range and apply the
   ranges to the tree in ascending start order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from mcp_lint_marker.analyzer import Analyzer, LineRuleAnalyzer
from mcp_lint_marker.models import AnnotatedRange, Diagnostic, MarkResult
from mcp_lint_marker.normalize import example_code_to_parsable
from mcp_lint_marker.offsets import build_line_index, resolve_location
from mcp_lint_marker.splitter import apply_annotations
from mcp_lint_marker.tokenizer import resolve_language, tokenize

logger = logging.getLogger(__name__)


def diagnostics_to_ranges(
    diagnostics: Iterable[Diagnostic],
    line_index: list[int],
) -> list[AnnotatedRange]:
    """Convert diagnostics to absolute ranges, sorted by start offset.

    A diagnostic without an end location covers the single character at its
    start. The sort is stable, so diagnostics at the same offset keep the
    order the analyzer reported them in.
    """
    ranges: list[AnnotatedRange] = []
    for diagnostic in diagnostics:
        start = resolve_location(line_index, diagnostic.start)
        end_location = diagnostic.end
        end = start + 1 if end_location is None else resolve_location(line_index, end_location)
        ranges.append(AnnotatedRange(start=start, end=end, message=diagnostic.message))
    ranges.sort(key=lambda r: r.start)
    return ranges


def mark_code(
    code: str,
    language: str = "javascript",
    options: Mapping[str, Any] | None = None,
    analyzer: Analyzer | None = None,
) -> MarkResult:
    """Lint *code* and return its token tree with every diagnostic marked.

    Args:
        code: Example source, possibly with a trailing newline and ``⏎``
            markers.
        language: Tokenizer language; also passed to the analyzer unless
            *options* names one.
        options: Free-form analyzer options.
        analyzer: Analyzer to use; defaults to :class:`LineRuleAnalyzer`.

    Raises:
        ValueError: Unknown language or rule.
        MalformedTreeError: The token tree could not be read as text.
    """
    language = resolve_language(language)
    analyzer_options = {"language": language, **(options or {})}
    analyzer = analyzer or LineRuleAnalyzer()

    text = example_code_to_parsable(code)
    tree = tokenize(text, language)
    diagnostics = analyzer.analyze(text, analyzer_options)

    if any(d.fatal for d in diagnostics):
        logger.info("Fatal diagnostic reported; leaving %d tokens unmarked", len(tree))
        return MarkResult(tree=tree, diagnostics=diagnostics, fatal=True)

    ranges = diagnostics_to_ranges(diagnostics, build_line_index(text))
    return MarkResult(
        tree=apply_annotations(tree, ranges),
        ranges=ranges,
        diagnostics=diagnostics,
    )
