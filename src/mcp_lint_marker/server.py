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

"""MCP server for the lint diagnostic marker.

Exposes the marking pipeline as MCP tools, so an assistant can lint a code
example and get back highlighted HTML (or a JSON token tree) in which every
problem is wrapped in a marked span carrying its message.

Usage:
    LINT_MARKER_LANGUAGE=python LINT_MARKER_MAX_LEN=100 python -m mcp_lint_marker.server
"""

from __future__ import annotations

import json
import os
import sys
import time
import traceback
from dataclasses import asdict

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent
import mcp.types as types

from mcp_lint_marker.analyzer import RULES, LineRuleAnalyzer
from mcp_lint_marker.marker import mark_code
from mcp_lint_marker.models import Diagnostic
from mcp_lint_marker.normalize import example_code_to_parsable
from mcp_lint_marker.render import render_html, tree_to_data
from mcp_lint_marker.tokenizer import LANGUAGES

# ---------------------------------------------------------------------------
# Module-level state
# ---------------------------------------------------------------------------

server = Server("mcp-lint-marker")

_default_language: str = "javascript"
_default_rules: dict[str, object] = {}
_analyzer = LineRuleAnalyzer()

# Session usage stats
_session_start: float = time.time()
_tool_call_counts: dict[str, int] = {}
_total_chars_returned: int = 0


def _format_result(value: object) -> str:
    """Format a tool result as readable text."""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, default=str)
    return str(value)


def _format_usage_stats() -> str:
    """Format session usage statistics."""
    elapsed = time.time() - _session_start
    total_calls = sum(_tool_call_counts.values())
    # Don't count get_usage_stats itself in the call total
    tool_calls = total_calls - _tool_call_counts.get("get_usage_stats", 0)

    lines = [
        f"Session duration: {_format_duration(elapsed)}",
        f"Total calls: {tool_calls}",
    ]

    if _tool_call_counts:
        lines.append("")
        lines.append("Calls by tool:")
        for tool_name, count in sorted(_tool_call_counts.items(), key=lambda x: -x[1]):
            if tool_name == "get_usage_stats":
                continue
            lines.append(f"  {tool_name}: {count}")

    lines.append("")
    lines.append(f"Total chars returned: {_total_chars_returned:,}")
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Format seconds into a human-readable duration."""
    if seconds < 60:
        return f"{seconds:.0f}s"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours = minutes // 60
    mins = minutes % 60
    return f"{hours}h {mins}m"


def _load_config() -> None:
    """Read server defaults from the environment."""
    global _default_language, _default_rules

    _default_language = os.environ.get("LINT_MARKER_LANGUAGE", "javascript")
    _default_rules = {}
    max_len = os.environ.get("LINT_MARKER_MAX_LEN")
    if max_len:
        _default_rules["max-len"] = int(max_len)

    print(
        f"[mcp-lint-marker] Default language: {_default_language}, "
        f"rule overrides: {_default_rules or 'none'}",
        file=sys.stderr,
    )


def _options_for(arguments: dict) -> dict:
    """Build analyzer options from server defaults and tool arguments."""
    return {"rules": {**_default_rules, **(arguments.get("rules") or {})}}


def _summarize_diagnostics(diagnostics: list[Diagnostic]) -> list[dict]:
    return [
        {
            "line": d.line,
            "column": d.column,
            "end_line": d.end_line,
            "end_column": d.end_column,
            "rule": d.rule_id,
            "message": d.message,
            "fatal": d.fatal,
        }
        for d in diagnostics
    ]


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

_LANGUAGE_PROPERTY = {
    "type": "string",
    "description": f"Source language ({', '.join(LANGUAGES)}). Defaults to the server default.",
}

_RULES_PROPERTY = {
    "type": "object",
    "description": "Rule settings, e.g. {\"max-len\": 100, \"no-tabs\": false}.",
}

TOOLS = [
    Tool(
        name="mark_code",
        description="Lint a code example and return it highlighted, with each problem wrapped in a marked span carrying its message.",
        inputSchema={
            "type": "object",
            "properties": {
                "code": {
                    "type": "string",
                    "description": "Example source code. A trailing newline and line-end ⏎ markers are ignored.",
                },
                "language": _LANGUAGE_PROPERTY,
                "format": {
                    "type": "string",
                    "enum": ["html", "json"],
                    "description": "Output format: rendered HTML (default) or the JSON token tree.",
                },
                "rules": _RULES_PROPERTY,
            },
            "required": ["code"],
        },
    ),
    Tool(
        name="analyze_code",
        description="Lint a code example and list its diagnostics (line, column, rule, message).",
        inputSchema={
            "type": "object",
            "properties": {
                "code": {
                    "type": "string",
                    "description": "Example source code.",
                },
                "language": _LANGUAGE_PROPERTY,
                "rules": _RULES_PROPERTY,
            },
            "required": ["code"],
        },
    ),
    Tool(
        name="list_rules",
        description="List the available lint rules with their default settings.",
        inputSchema={
            "type": "object",
            "properties": {},
        },
    ),
    Tool(
        name="get_usage_stats",
        description="Session stats: tool calls and characters returned.",
        inputSchema={
            "type": "object",
            "properties": {},
        },
    ),
]


# ---------------------------------------------------------------------------
# MCP handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def list_tools() -> list[Tool]:
    return TOOLS


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    global _total_chars_returned

    _tool_call_counts[name] = _tool_call_counts.get(name, 0) + 1

    try:
        if name == "get_usage_stats":
            return [TextContent(type="text", text=_format_usage_stats())]

        if name == "list_rules":
            result = [
                {"rule": rule.rule_id, "description": rule.description, "default": rule.default}
                for rule in RULES.values()
            ]

        elif name == "mark_code":
            marked = mark_code(
                arguments["code"],
                language=arguments.get("language") or _default_language,
                options=_options_for(arguments),
                analyzer=_analyzer,
            )
            if arguments.get("format", "html") == "json":
                result = {
                    "fatal": marked.fatal,
                    "ranges": [asdict(r) for r in marked.ranges],
                    "diagnostics": _summarize_diagnostics(marked.diagnostics),
                    "tokens": tree_to_data(marked.tree),
                }
            else:
                result = render_html(marked.tree)
                if marked.fatal:
                    messages = "; ".join(d.message for d in marked.diagnostics)
                    result = f"<!-- not marked: {messages} -->\n{result}"
                if marked.diagnostics:
                    summary = _format_result(_summarize_diagnostics(marked.diagnostics))
                    result = f"{result}\n<!-- diagnostics:\n{summary}\n-->"

        elif name == "analyze_code":
            options = _options_for(arguments)
            options["language"] = arguments.get("language") or _default_language
            diagnostics = _analyzer.analyze(example_code_to_parsable(arguments["code"]), options)
            result = _summarize_diagnostics(diagnostics)

        else:
            return [TextContent(type="text", text=f"Error: unknown tool '{name}'")]

        formatted = _format_result(result)
        _total_chars_returned += len(formatted)
        return [TextContent(type="text", text=formatted)]

    except Exception as e:
        tb = traceback.format_exc()
        print(f"[mcp-lint-marker] Error in {name}: {tb}", file=sys.stderr)
        return [TextContent(type="text", text=f"Error: {e}")]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def main():
    _load_config()
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main_sync():
    """Synchronous entry point for console_scripts."""
    import asyncio

    asyncio.run(main())


if __name__ == "__main__":
    main_sync()
