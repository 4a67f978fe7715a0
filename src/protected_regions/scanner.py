"""Split source text into code and comment tokens.

The scanner knows nothing about the host language beyond its comment
delimiters. Strings, escapes and other lexical rules are ignored, so a
comment delimiter inside a string literal is treated as a real comment.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from protected_regions.errors import ConfigError, UnterminatedCommentError

FLAT = "flat"
NESTED = "nested"
NESTING_POLICIES = (FLAT, NESTED)

CODE = "code"
COMMENT = "comment"

_LINE_BREAK_RE = re.compile(r"[\r\n]")


@dataclass(frozen=True)
class Token:
    """A verbatim slice of the input: either code or one complete comment."""

    kind: str
    text: str
    start: int
    end: int

    @property
    def is_comment(self) -> bool:
        return self.kind == COMMENT


@dataclass(frozen=True)
class CommentSyntax:
    """Comment delimiters of a host language.

    Attributes:
        blocks: (start, end) delimiter pairs of block comments.
        lines: Prefixes that open a comment running to the end of the line.
        nesting: "flat" or "nested" block comment policy.
    """

    blocks: tuple[tuple[str, str], ...] = ()
    lines: tuple[str, ...] = ()
    nesting: str = FLAT

    def __post_init__(self) -> None:
        if self.nesting not in NESTING_POLICIES:
            raise ConfigError(
                f"Unknown nesting policy '{self.nesting}' "
                f"(valid: {', '.join(NESTING_POLICIES)})"
            )
        if not self.blocks and not self.lines:
            raise ConfigError("At least one comment delimiter is required")
        for start, end in self.blocks:
            if not start or not end:
                raise ConfigError(f"Empty block comment delimiter in {(start, end)!r}")
        if any(not prefix for prefix in self.lines):
            raise ConfigError("Empty line comment prefix")


@dataclass
class CommentScanner:
    """Tokenizer driven by a CommentSyntax.

    Each call to ``scan`` starts a fresh pass, so one scanner can serve any
    number of inputs.
    """

    syntax: CommentSyntax
    _openers: re.Pattern = field(init=False, repr=False)
    _ends: dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._ends = {}
        for start, end in self.syntax.blocks:
            self._ends.setdefault(start, end)
        openers = set(self._ends) | set(self.syntax.lines)
        # Longest first so that, at a given position, the alternation prefers
        # the longest delimiter; re.search already yields the earliest position.
        ordered = sorted(openers, key=lambda s: (-len(s), s))
        self._openers = re.compile("|".join(re.escape(o) for o in ordered))

    def scan(self, text: str) -> Iterator[Token]:
        """Yield code and comment tokens covering ``text`` exactly.

        Raises:
            UnterminatedCommentError: A block comment is open at end of input.
        """
        pos = 0
        while pos < len(text):
            match = self._openers.search(text, pos)
            if match is None:
                yield Token(CODE, text[pos:], pos, len(text))
                return
            begin = match.start()
            if begin > pos:
                yield Token(CODE, text[pos:begin], pos, begin)
            opener = match.group()
            if opener in self._ends:
                end = self._block_end(text, begin, opener, self._ends[opener])
            else:
                brk = _LINE_BREAK_RE.search(text, match.end())
                end = brk.start() if brk else len(text)
            yield Token(COMMENT, text[begin:end], begin, end)
            pos = end

    def tokens(self, text: str) -> list[Token]:
        return list(self.scan(text))

    def _block_end(self, text: str, begin: int, opener: str, closer: str) -> int:
        """Return the offset just past the comment opened at ``begin``."""
        pos = begin + len(opener)
        if self.syntax.nesting == FLAT or opener == closer:
            idx = text.find(closer, pos)
            if idx == -1:
                raise UnterminatedCommentError(
                    f"Unterminated comment starting with '{opener}'", begin, text,
                )
            return idx + len(closer)

        pattern = re.compile(
            "|".join(re.escape(d) for d in sorted({opener, closer}, key=len, reverse=True))
        )
        depth = 1
        while True:
            match = pattern.search(text, pos)
            if match is None:
                raise UnterminatedCommentError(
                    f"Unterminated nested comment starting with '{opener}'", begin, text,
                )
            depth += 1 if match.group() == opener else -1
            pos = match.end()
            if depth == 0:
                return pos
