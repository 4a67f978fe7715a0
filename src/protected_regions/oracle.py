"""Region oracles: recognize marker comments and read their id and flag.

An oracle is anything with the four methods of ``RegionOracle``. Each
method receives the full comment text, delimiters included, exactly as the
scanner produced it.

Built-in grammars:
    DEFAULT_ORACLE     // PROTECTED REGION ID(<id>) [ENABLED] START
                       // PROTECTED REGION END
    NESTED_ID_ORACLE   // PROTECTED REGION /*<id>*/ [ENABLED] START
                       // PROTECTED REGION [/*<id>*/] END
    GENERATED_ORACLE   // GENERATED ID(<id>) [DISABLED] START
                       // GENERATED END
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from protected_regions.errors import ConfigError

# Comment delimiters surrounding a marker: anything that is not a word char.
_LEAD = r"[^\w]*?"
_TRAIL = r"[^\w]*"


@runtime_checkable
class RegionOracle(Protocol):
    def is_marked_region_start(self, comment: str) -> bool: ...

    def is_marked_region_end(self, comment: str) -> bool: ...

    def get_id(self, marked_region_start: str) -> str | None: ...

    def is_enabled(self, marked_region_start: str) -> bool: ...


@dataclass(frozen=True)
class PatternOracle:
    """Oracle driven by two regular expressions.

    Both patterns must match the whole comment text. The start pattern must
    define a group named ``id``. The enabled flag is the presence (or, with
    ``enabled_when_present=False``, the absence) of ``keyword`` as a whole
    word in the start marker after the id.
    """

    start: str
    end: str
    keyword: str = "ENABLED"
    enabled_when_present: bool = True
    _start_re: re.Pattern = field(init=False, repr=False, compare=False)
    _end_re: re.Pattern = field(init=False, repr=False, compare=False)
    _keyword_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            start_re = re.compile(self.start, re.DOTALL)
            end_re = re.compile(self.end, re.DOTALL)
        except re.error as e:
            raise ConfigError(f"Invalid oracle pattern: {e}") from e
        if "id" not in start_re.groupindex:
            raise ConfigError(f"Start pattern {self.start!r} has no (?P<id>...) group")
        # frozen dataclass: bypass __setattr__ for the compiled caches
        object.__setattr__(self, "_start_re", start_re)
        object.__setattr__(self, "_end_re", end_re)
        object.__setattr__(self, "_keyword_re", re.compile(rf"\b{re.escape(self.keyword)}\b"))

    def is_marked_region_start(self, comment: str) -> bool:
        return self._start_re.fullmatch(comment) is not None

    def is_marked_region_end(self, comment: str) -> bool:
        return self._end_re.fullmatch(comment) is not None

    def get_id(self, marked_region_start: str) -> str | None:
        match = self._start_re.fullmatch(marked_region_start)
        if match is None:
            return None
        region_id = (match.group("id") or "").strip()
        return region_id or None

    def is_enabled(self, marked_region_start: str) -> bool:
        # only the text after the id counts, so an id can't flip the flag
        match = self._start_re.fullmatch(marked_region_start)
        end = match.end("id") if match else -1
        tail = marked_region_start[end:] if end >= 0 else marked_region_start
        present = self._keyword_re.search(tail) is not None
        return present if self.enabled_when_present else not present


def marker_pattern(body: str) -> str:
    """Wrap a marker regex so it tolerates surrounding comment delimiters."""
    return rf"{_LEAD}{body}{_TRAIL}"


DEFAULT_ORACLE = PatternOracle(
    start=marker_pattern(r"PROTECTED\s+REGION\s+ID\s*\((?P<id>[^)]*)\)\s+(?:ENABLED\s+)?START"),
    end=marker_pattern(r"PROTECTED\s+REGION\s+END"),
    keyword="ENABLED",
    enabled_when_present=True,
)

NESTED_ID_ORACLE = PatternOracle(
    start=marker_pattern(r"PROTECTED\s+REGION\s+/\*(?P<id>.*?)\*/\s+(?:ENABLED\s+)?START"),
    end=marker_pattern(r"PROTECTED\s+REGION\s+(?:/\*.*?\*/\s+)?END"),
    keyword="ENABLED",
    enabled_when_present=True,
)

GENERATED_ORACLE = PatternOracle(
    start=marker_pattern(r"GENERATED\s+ID\s*\((?P<id>[^)]*)\)\s+(?:DISABLED\s+)?START"),
    end=marker_pattern(r"GENERATED\s+END"),
    keyword="DISABLED",
    enabled_when_present=False,
)

BUILTIN_ORACLES: dict[str, PatternOracle] = {
    "default": DEFAULT_ORACLE,
    "nested-id": NESTED_ID_ORACLE,
    "generated": GENERATED_ORACLE,
}
