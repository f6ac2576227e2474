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

"""Render token trees as highlighted HTML or JSON-ready data."""

from __future__ import annotations

import html
from collections.abc import Sequence
from typing import Any

from mcp_lint_marker.models import Node, Text, Token
from mcp_lint_marker.tokens import MalformedTreeError


def _render_node(node: Node) -> str:
    if isinstance(node, Text):
        return html.escape(node.value, quote=False)
    if isinstance(node, Token):
        if node.has_text_content:
            inner = html.escape(node.content, quote=False)
        else:
            inner = render_html(node.content)
        classes = " ".join(["token", node.kind, *node.alias])
        return f'<span class="{html.escape(classes)}">{inner}</span>'
    raise MalformedTreeError(f"Unexpected node in token tree: {node!r}")


def render_html(nodes: Sequence[Node]) -> str:
    """Render a token tree as nested ``<span class="token ...">`` elements.

    Message tokens are rendered like any other token; a stylesheet is expected
    to hide ``annotation-message`` spans until their parent is hovered.
    """
    return "".join(_render_node(node) for node in nodes)


def tree_to_data(nodes: Sequence[Node]) -> list[Any]:
    """Convert a token tree to plain lists, dicts and strings."""
    data: list[Any] = []
    for node in nodes:
        if isinstance(node, Text):
            data.append(node.value)
        elif isinstance(node, Token):
            item: dict[str, Any] = {
                "type": node.kind,
                "content": node.content if node.has_text_content else tree_to_data(node.content),
            }
            if node.alias:
                item["alias"] = list(node.alias)
            data.append(item)
        else:
            raise MalformedTreeError(f"Unexpected node in token tree: {node!r}")
    return data
