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

"""Token-tree shape helpers: length, flattening, splitting, traversal."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import replace

from mcp_lint_marker.models import Node, Text, Token


class MalformedTreeError(ValueError):
    """Raised when a token tree contains a node that cannot be read as text."""


def _check_text(text: Text) -> None:
    if not isinstance(text.value, str):
        raise MalformedTreeError(
            f"Text leaf has unsupported value {type(text.value).__name__}"
        )


def _check_token(token: Token) -> None:
    if not isinstance(token.content, (str, list)):
        raise MalformedTreeError(
            f"Token {token.kind!r} has unsupported content {type(token.content).__name__}"
        )


def node_length(node: Node) -> int:
    """Number of source characters covered by *node*.

    Message nodes ride inside the tree as metadata and cover nothing.
    """
    if isinstance(node, Text):
        _check_text(node)
        return len(node.value)
    if isinstance(node, Token):
        _check_token(node)
        if node.is_message:
            return 0
        if node.has_text_content:
            return len(node.content)
        return sum(node_length(child) for child in node.content)
    raise MalformedTreeError(f"Unexpected node in token tree: {node!r}")


def flatten_text(nodes: Node | Sequence[Node]) -> str:
    """Reconstitute the source text covered by a node or a node sequence."""
    if isinstance(nodes, (Text, Token)):
        nodes = [nodes]
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, Text):
            _check_text(node)
            parts.append(node.value)
        elif isinstance(node, Token):
            _check_token(node)
            if node.is_message:
                continue
            if node.has_text_content:
                parts.append(node.content)
            else:
                parts.append(flatten_text(node.content))
        else:
            raise MalformedTreeError(f"Unexpected node in token tree: {node!r}")
    return "".join(parts)


def split_at(node: Node, offset: int) -> tuple[Node | None, Node | None]:
    """Split *node* into two nodes at a node-relative character offset.

    Both halves keep the node's kind and alias. A side that would cover no
    characters is returned as None, so ``split_at(node, 0)`` gives
    ``(None, node)`` and ``split_at(node, length)`` gives ``(node, None)``.
    Zero-width children sitting exactly on the split point go left.
    """
    length = node_length(node)
    if offset <= 0:
        return None, node
    if offset >= length:
        return node, None

    if isinstance(node, Text):
        return Text(node.value[:offset]), Text(node.value[offset:])

    if node.has_text_content:
        return (
            replace(node, content=node.content[:offset]),
            replace(node, content=node.content[offset:]),
        )

    left: list[Node] = []
    right: list[Node] = []
    cursor = 0
    for child in node.content:
        child_length = node_length(child)
        if cursor + child_length <= offset:
            left.append(child)
        elif cursor >= offset:
            right.append(child)
        else:
            head, tail = split_at(child, offset - cursor)
            left.append(head)
            right.append(tail)
        cursor += child_length
    return replace(node, content=left), replace(node, content=right)


def iter_tokens(nodes: Sequence[Node]) -> Iterator[Token]:
    """Yield every Token in the tree, depth-first, parents before children."""
    for node in nodes:
        if isinstance(node, Token):
            yield node
            if not node.has_text_content:
                yield from iter_tokens(node.content)
