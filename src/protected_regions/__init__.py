"""Protected regions — keep hand-written edits across code regeneration.

Generated files carry marked regions delimited by comment markers:
    // PROTECTED REGION ID(imports) ENABLED START
    ...developer code...
    // PROTECTED REGION END

A RegionParser scans a file into a Document; merge and fill_in combine a
freshly generated Document with the previous one by region id.
"""

from protected_regions.document import Document, PlainSegment, RegionSegment
from protected_regions.errors import (
    ConfigError,
    DuplicateRegionIdError,
    MalformedMarkerError,
    RegionError,
    UnmatchedEndMarkerError,
    UnterminatedCommentError,
    UnterminatedRegionError,
)
from protected_regions.oracle import (
    DEFAULT_ORACLE,
    GENERATED_ORACLE,
    NESTED_ID_ORACLE,
    PatternOracle,
    RegionOracle,
)
from protected_regions.parser import RegionParser, RegionParserBuilder
from protected_regions.presets import (
    create_java_parser,
    create_parser,
    create_scala_parser,
    create_xml_parser,
)
from protected_regions.reconcile import fill_in, fill_in_text, merge, merge_text
from protected_regions.scanner import FLAT, NESTED, CommentScanner, CommentSyntax, Token

__all__ = [
    "Document",
    "PlainSegment",
    "RegionSegment",
    "ConfigError",
    "DuplicateRegionIdError",
    "MalformedMarkerError",
    "RegionError",
    "UnmatchedEndMarkerError",
    "UnterminatedCommentError",
    "UnterminatedRegionError",
    "DEFAULT_ORACLE",
    "GENERATED_ORACLE",
    "NESTED_ID_ORACLE",
    "PatternOracle",
    "RegionOracle",
    "RegionParser",
    "RegionParserBuilder",
    "create_java_parser",
    "create_parser",
    "create_scala_parser",
    "create_xml_parser",
    "fill_in",
    "fill_in_text",
    "merge",
    "merge_text",
    "FLAT",
    "NESTED",
    "CommentScanner",
    "CommentSyntax",
    "Token",
]
