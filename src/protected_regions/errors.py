"""Exceptions raised while scanning, parsing, and configuring.

Every parse error is fatal for the document being parsed. Nothing here is
recovered internally; callers decide how to report.
"""

from __future__ import annotations

import re

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def line_and_column(text: str, position: int) -> tuple[int, int]:
    """Translate a 0-based offset into 1-based (line, column).

    ``\\r\\n``, ``\\r`` and ``\\n`` each end a line.
    """
    line_start = 0
    line = 1
    for match in _LINE_BREAK_RE.finditer(text, 0, position):
        line += 1
        line_start = match.end()
    return line, position - line_start + 1


class ConfigError(ValueError):
    """Invalid parser configuration (builder, preset, or YAML file)."""


class RegionError(ValueError):
    """Base class for fatal scan/parse conditions.

    Attributes:
        position: 0-based offset into the input, if known.
        line: 1-based line number, if known.
        column: 1-based column number, if known.
    """

    def __init__(
        self,
        message: str,
        position: int | None = None,
        text: str | None = None,
    ) -> None:
        self.position = position
        self.line: int | None = None
        self.column: int | None = None
        if position is not None and text is not None:
            self.line, self.column = line_and_column(text, position)
            message = f"{message} (line {self.line}, column {self.column})"
        super().__init__(message)


class UnterminatedCommentError(RegionError):
    """A block comment is still open at end of input."""


class UnmatchedEndMarkerError(RegionError):
    """An end marker appeared with no open region."""


class UnterminatedRegionError(RegionError):
    """A region is still open at end of input."""

    def __init__(self, region_id: str, position: int | None = None, text: str | None = None) -> None:
        self.region_id = region_id
        super().__init__(f"Unterminated marked region: {region_id}", position, text)


class MalformedMarkerError(RegionError):
    """A start marker from which the oracle could not extract an id."""

    def __init__(self, marker: str, position: int | None = None, text: str | None = None) -> None:
        self.marker = marker
        super().__init__(f"Marked region start without id: {marker.strip()!r}", position, text)


class DuplicateRegionIdError(RegionError):
    """A region id was used twice in one document."""

    def __init__(self, region_id: str, position: int | None = None, text: str | None = None) -> None:
        self.region_id = region_id
        super().__init__(f"Duplicate marked region id: {region_id}", position, text)
