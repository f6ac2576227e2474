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

"""Line-start index for converting (line, column) locations to offsets."""

import re

from mcp_lint_marker.models import Location

# CRLF first so it counts as a single break
LINEBREAK_PATTERN = re.compile(r"\r\n|[\r\n\u2028\u2029]")


def build_line_index(text: str) -> list[int]:
    """Compute the character offset of each line start.

    The first entry is always 0. Every line break (``\\r\\n`` counted once)
    adds the offset of the character that follows it, so a text ending in a
    break gets an entry equal to ``len(text)`` for the empty last line.
    """
    line_starts = [0]
    for match in LINEBREAK_PATTERN.finditer(text):
        line_starts.append(match.end())
    return line_starts


def resolve_location(line_index: list[int], location: Location) -> int:
    """Convert a 1-indexed location to an absolute character offset."""
    return line_index[location.line - 1] + location.column - 1
