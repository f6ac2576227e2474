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

"""Normalization of documentation examples before they are linted."""

import re

# Presentational marker used in docs to make a line break visible
LINE_FEED_MARKER = "\u23ce"

_MARKER_BEFORE_BREAK = re.compile(LINE_FEED_MARKER + r"(?=\r\n|[\r\n\u2028\u2029]|\Z)")
_TRAILING_NEWLINE = re.compile(r"(?:\r\n|\n)\Z")


def example_code_to_parsable(code: str) -> str:
    """Strip ``⏎`` markers at line ends and a single trailing newline."""
    code = _MARKER_BEFORE_BREAK.sub("", code)
    return _TRAILING_NEWLINE.sub("", code, count=1)
