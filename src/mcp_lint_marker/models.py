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

"""Data models for lint diagnostics and the token trees they are marked into."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Reserved token kinds
MARKED_KIND = "annotated-span"
MESSAGE_KIND = "annotation-message"
LINE_FEED_ALIAS = "annotated-line-feed"
MESSAGE_ALIAS = "alert"


@dataclass(frozen=True)
class Location:
    """A position in source text (1-indexed line and column)."""

    line: int
    column: int


@dataclass(frozen=True)
class AnnotatedRange:
    """A half-open character range [start, end) carrying a message."""

    start: int
    end: int
    message: str


@dataclass(frozen=True)
class Diagnostic:
    """A single problem reported by an analyzer."""

    message: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None
    rule_id: str | None = None  # None for parser errors
    severity: str = "error"
    fatal: bool = False  # True when the source could not be parsed at all

    @property
    def start(self) -> Location:
        return Location(self.line, self.column)

    @property
    def end(self) -> Location | None:
        if self.end_line is None or self.end_column is None:
            return None
        return Location(self.end_line, self.end_column)


@dataclass(frozen=True)
class Text:
    """A raw text fragment (leaf of the token tree)."""

    value: str


@dataclass(frozen=True)
class Token:
    """A typed span whose content is either plain text or nested nodes."""

    kind: str
    content: str | list[Node]
    alias: tuple[str, ...] = ()

    @property
    def has_text_content(self) -> bool:
        return isinstance(self.content, str)

    @property
    def is_message(self) -> bool:
        return self.kind == MESSAGE_KIND

    @property
    def is_marked(self) -> bool:
        return self.kind == MARKED_KIND


Node = Union[Text, Token]


@dataclass
class MarkResult:
    """Outcome of running the marking pipeline over one source text."""

    tree: list[Node]
    ranges: list[AnnotatedRange] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    fatal: bool = False  # Source failed to parse; tree left unmarked
