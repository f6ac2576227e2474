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

"""Token-tree splitter.

Rewrites a token tree so that each annotated range becomes a single
``annotated-span`` token holding exactly the characters of the range plus
one ``annotation-message`` token. Text outside the ranges stays on its
original tokens, split at the range boundaries.

Every function here is pure: input trees are never mutated, and each call
returns a new node list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace

from mcp_lint_marker.models import (
    LINE_FEED_ALIAS,
    MARKED_KIND,
    MESSAGE_ALIAS,
    MESSAGE_KIND,
    AnnotatedRange,
    Node,
    Token,
)
from mcp_lint_marker.offsets import LINEBREAK_PATTERN
from mcp_lint_marker.tokens import flatten_text, node_length, split_at

logger = logging.getLogger(__name__)


def _build_marked(inner: list[Node], annotated_range: AnnotatedRange) -> Token:
    """Wrap the in-range nodes together with their message token."""
    text = flatten_text(inner)
    alias: tuple[str, ...] = ()
    if len(text) == 1 and LINEBREAK_PATTERN.fullmatch(text):
        alias = (LINE_FEED_ALIAS,)
    message = Token(MESSAGE_KIND, annotated_range.message, (MESSAGE_ALIAS,))
    return Token(MARKED_KIND, [*inner, message], alias)


def apply_range(
    nodes: Sequence[Node],
    annotated_range: AnnotatedRange,
    offset: int = 0,
) -> list[Node]:
    """Insert one annotated range into a node sequence.

    Args:
        nodes: The sequence to rewrite.
        annotated_range: Absolute half-open range and its message.
        offset: Absolute offset of the first character of *nodes*. Nested
            calls pass the start of the enclosing token so that all
            bookkeeping stays in source coordinates.

    Returns:
        A new node list. When the range is empty or starts at or past the end
        of the sequence, the nodes are returned unchanged.
    """
    start, end = annotated_range.start, annotated_range.end
    if start >= end:
        logger.debug("Ignoring empty range [%d, %d)", start, end)
        return list(nodes)

    result: list[Node] = []
    cursor = offset
    index = 0

    # Pass through everything that ends at or before the range start
    while index < len(nodes):
        length = node_length(nodes[index])
        if length and cursor + length > start:
            break
        result.append(nodes[index])
        cursor += length
        index += 1
    else:
        logger.debug(
            "Range [%d, %d) lies past the end of the tree (%d chars); skipping",
            start,
            end,
            cursor,
        )
        return result

    entry = nodes[index]
    entry_end = cursor + node_length(entry)

    # The range fits inside a token with nested content: mark it one level down
    if isinstance(entry, Token) and not entry.has_text_content and end <= entry_end:
        nested = apply_range(entry.content, annotated_range, cursor)
        result.append(replace(entry, content=nested))
        result.extend(nodes[index + 1:])
        return result

    inner: list[Node] = []
    after: Node | None = None
    while index < len(nodes) and cursor < end:
        piece: Node | None = nodes[index]
        length = node_length(piece)
        if cursor < start:
            before, piece = split_at(piece, start - cursor)
            result.append(before)
        piece_start = max(cursor, start)
        if cursor + length > end:
            piece, after = split_at(piece, end - piece_start)
        if piece is not None:
            inner.append(piece)
        cursor += length
        index += 1

    result.append(_build_marked(inner, annotated_range))
    if after is not None:
        result.append(after)
    result.extend(nodes[index:])
    return result


def apply_annotations(
    tree: Sequence[Node],
    ranges: Iterable[AnnotatedRange],
) -> list[Node]:
    """Apply each range in turn, threading the tree through every step.

    Ranges must already be sorted by start offset and must not cross one
    another; they are neither reordered nor validated here.
    """
    result = list(tree)
    for annotated_range in ranges:
        result = apply_range(result, annotated_range)
    return result
