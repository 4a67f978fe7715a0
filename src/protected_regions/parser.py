"""Turn raw text into a Document of plain segments and marked regions.

Usage:
    parser = (
        RegionParserBuilder()
        .add_comment("/*", "*/")
        .add_comment("//")
        .set_nesting("flat")
        .use_oracle(DEFAULT_ORACLE)
        .build()
    )
    doc = parser.parse(text)

In inverse mode the roles swap: markers are looked for in the text outside
comments, one line at a time, and comments pass through as plain text.
This suits templates whose delimited spans are template code and whose
remaining text is the generated output.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from protected_regions.document import Document, PlainSegment, RegionSegment, Segment
from protected_regions.errors import (
    ConfigError,
    DuplicateRegionIdError,
    MalformedMarkerError,
    UnmatchedEndMarkerError,
    UnterminatedRegionError,
)
from protected_regions.oracle import DEFAULT_ORACLE, RegionOracle
from protected_regions.scanner import FLAT, CommentScanner, CommentSyntax

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass
class _Frame:
    """An open region (or the document root) collecting its segments."""

    start: int = 0
    region_id: str | None = None
    enabled: bool = False
    start_marker: str = ""
    segments: list[Segment] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    def add_text(self, text: str) -> None:
        self.pending.append(text)

    def add_segment(self, segment: Segment) -> None:
        self.flush()
        self.segments.append(segment)

    def flush(self) -> None:
        text = "".join(self.pending)
        self.pending.clear()
        if text:
            self.segments.append(PlainSegment(text))


class RegionParser:
    """Parser for one comment syntax and one oracle. Stateless between calls."""

    def __init__(
        self,
        syntax: CommentSyntax,
        oracle: RegionOracle = DEFAULT_ORACLE,
        inverse: bool = False,
    ) -> None:
        self.syntax = syntax
        self.oracle = oracle
        self.inverse = inverse
        self._scanner = CommentScanner(syntax)

    def __repr__(self) -> str:
        return (
            f"RegionParser(syntax={self.syntax!r}, oracle={self.oracle!r}, "
            f"inverse={self.inverse!r})"
        )

    def parse(self, text: str) -> Document:
        """Parse ``text`` into a Document.

        Raises:
            UnterminatedCommentError: A block comment never closes.
            UnmatchedEndMarkerError: An end marker with no open region.
            UnterminatedRegionError: A region still open at end of input.
            MalformedMarkerError: A start marker without an id.
            DuplicateRegionIdError: A region id used twice.
        """
        seen: set[str] = set()
        stack = [_Frame()]

        for candidate, piece, start in self._pieces(text):
            if not candidate:
                stack[-1].add_text(piece)
            elif self.oracle.is_marked_region_start(piece):
                stack.append(self._open_region(piece, start, text, seen))
            elif self.oracle.is_marked_region_end(piece):
                if len(stack) == 1:
                    raise UnmatchedEndMarkerError(
                        f"End marker without open region: {piece.strip()!r}",
                        start, text,
                    )
                frame = stack.pop()
                frame.flush()
                stack[-1].add_segment(RegionSegment(
                    id=frame.region_id,
                    enabled=frame.enabled,
                    start_marker=frame.start_marker,
                    end_marker=piece,
                    body=tuple(frame.segments),
                ))
            else:
                stack[-1].add_text(piece)

        if len(stack) > 1:
            frame = stack[-1]
            raise UnterminatedRegionError(frame.region_id, frame.start, text)

        root = stack[0]
        root.flush()
        doc = Document(tuple(root.segments))
        logger.debug("Parsed %d segments, %d regions", len(doc.segments), len(doc.regions))
        return doc

    def parse_file(self, path: Path | str, encoding: str = "utf-8") -> Document:
        """Read a file and parse its contents.

        Newlines are kept exactly as stored so the document round-trips.
        """
        with open(path, encoding=encoding, newline="") as f:
            return self.parse(f.read())

    def _pieces(self, text: str) -> Iterator[tuple[bool, str, int]]:
        """Yield (is_marker_candidate, text, offset) covering ``text`` in order."""
        for token in self._scanner.scan(text):
            if not self.inverse:
                yield token.is_comment, token.text, token.start
            elif token.is_comment:
                yield False, token.text, token.start
            else:
                # each line is a candidate, its line break is not
                pos = 0
                for match in _LINE_BREAK_RE.finditer(token.text):
                    if match.start() > pos:
                        yield True, token.text[pos:match.start()], token.start + pos
                    yield False, match.group(), token.start + match.start()
                    pos = match.end()
                if pos < len(token.text):
                    yield True, token.text[pos:], token.start + pos

    def _open_region(self, marker: str, start: int, text: str, seen: set[str]) -> _Frame:
        region_id = self.oracle.get_id(marker)
        if not region_id:
            raise MalformedMarkerError(marker, start, text)
        if region_id in seen:
            raise DuplicateRegionIdError(region_id, start, text)
        seen.add(region_id)
        return _Frame(
            start=start,
            region_id=region_id,
            enabled=self.oracle.is_enabled(marker),
            start_marker=marker,
        )


class RegionParserBuilder:
    """Fluent configuration of a RegionParser."""

    def __init__(self) -> None:
        self._blocks: list[tuple[str, str]] = []
        self._lines: list[str] = []
        self._nesting = FLAT
        self._oracle: RegionOracle = DEFAULT_ORACLE
        self._inverse = False

    def add_comment(self, start: str, end: str | None = None) -> RegionParserBuilder:
        """Register a block comment pair, or a line comment prefix if ``end`` is omitted."""
        if end is None:
            self._lines.append(start)
        else:
            self._blocks.append((start, end))
        return self

    def set_nesting(self, nesting: str) -> RegionParserBuilder:
        self._nesting = nesting
        return self

    def set_inverse(self, inverse: bool) -> RegionParserBuilder:
        """Look for markers outside comments instead of inside them."""
        self._inverse = inverse
        return self

    def use_oracle(self, oracle: RegionOracle) -> RegionParserBuilder:
        if not isinstance(oracle, RegionOracle):
            raise ConfigError(f"{oracle!r} does not implement the region oracle methods")
        self._oracle = oracle
        return self

    def build(self) -> RegionParser:
        syntax = CommentSyntax(
            blocks=tuple(self._blocks),
            lines=tuple(self._lines),
            nesting=self._nesting,
        )
        return RegionParser(syntax, self._oracle, self._inverse)
