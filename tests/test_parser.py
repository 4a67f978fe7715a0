"""Tests for the region parser and its builder."""

from pathlib import Path

import pytest

from protected_regions.document import PlainSegment, RegionSegment
from protected_regions.errors import (
    ConfigError,
    DuplicateRegionIdError,
    MalformedMarkerError,
    UnmatchedEndMarkerError,
    UnterminatedCommentError,
    UnterminatedRegionError,
    line_and_column,
)
from protected_regions.oracle import NESTED_ID_ORACLE
from protected_regions.parser import RegionParserBuilder
from protected_regions.presets import create_java_parser, create_scala_parser
from protected_regions.scanner import NESTED

FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(name):
    with open(FIXTURES / name, newline="") as f:
        return f.read()


# ── Document structure ───────────────────────────────────────────


class TestParse:
    def test_plain_text_only(self, java_parser):
        doc = java_parser.parse("int x; // comment\n")
        assert doc.segments == (PlainSegment("int x; // comment\n"),)
        assert doc.regions == {}

    def test_empty_text(self, java_parser):
        doc = java_parser.parse("")
        assert doc.segments == ()
        assert doc.content == ""

    def test_single_region(self, java_parser):
        text = (
            "head\n"
            "// PROTECTED REGION ID(a) ENABLED START\n"
            "body\n"
            "// PROTECTED REGION END\n"
            "tail\n"
        )
        doc = java_parser.parse(text)
        plain1, region, plain2 = doc.segments
        assert plain1 == PlainSegment("head\n")
        assert isinstance(region, RegionSegment)
        assert region.id == "a"
        assert region.enabled is True
        assert region.start_marker == "// PROTECTED REGION ID(a) ENABLED START"
        assert region.end_marker == "// PROTECTED REGION END"
        assert region.body_text == "\nbody\n"
        assert plain2 == PlainSegment("\ntail\n")

    def test_non_marker_comments_are_coalesced(self, java_parser):
        doc = java_parser.parse("a /* b */ c // d\ne")
        assert doc.segments == (PlainSegment("a /* b */ c // d\ne"),)

    def test_adjacent_regions(self, java_parser):
        text = (
            "/* PROTECTED REGION ID(a) START *//* PROTECTED REGION END */"
            "/* PROTECTED REGION ID(b) START *//* PROTECTED REGION END */"
        )
        doc = java_parser.parse(text)
        assert doc.region_ids() == ["a", "b"]
        assert all(isinstance(s, RegionSegment) for s in doc.segments)

    def test_nested_regions(self, java_parser):
        text = (
            "/* PROTECTED REGION ID(outer) ENABLED START */\n"
            "x\n"
            "/* PROTECTED REGION ID(inner) START */y/* PROTECTED REGION END */\n"
            "/* PROTECTED REGION END */"
        )
        doc = java_parser.parse(text)
        assert doc.region_ids() == ["outer", "inner"]
        outer = doc.get_region("outer")
        assert outer.body[1] is doc.get_region("inner")
        assert doc.get_region("inner").body_text == "y"
        assert doc.content == text

    def test_parse_file(self, java_parser):
        doc = java_parser.parse_file(FIXTURES / "protected_current.txt")
        assert doc.region_ids() == ["imports", "fields", "bar.body", "newMethod"]

    def test_parse_file_keeps_crlf(self, java_parser, tmp_path):
        text = "a\r\n// PROTECTED REGION ID(x) START\r\nb\r\n// PROTECTED REGION END\r\n"
        target = tmp_path / "crlf.java"
        target.write_bytes(text.encode())
        assert java_parser.parse_file(target).content == text


class TestRoundTrip:
    @pytest.mark.parametrize("name", [
        "protected_current.txt",
        "protected_previous.txt",
        "switched_current.txt",
        "nested_comments.txt",
    ])
    def test_content_equals_input(self, java_parser, name):
        text = read_fixture(name)
        assert java_parser.parse(text).content == text

    def test_scala_round_trip(self):
        text = read_fixture("nested_comments.txt")
        parser = create_scala_parser(NESTED_ID_ORACLE)
        assert parser.parse(text).content == text


# ── Errors ───────────────────────────────────────────────────────


class TestErrors:
    def test_duplicate_id(self, java_parser):
        with pytest.raises(DuplicateRegionIdError, match="Duplicate marked region id: uniqueId") as exc_info:
            java_parser.parse(read_fixture("non_unique_ids.txt"))
        assert exc_info.value.region_id == "uniqueId"
        assert exc_info.value.line == 6

    def test_distinct_ids_parse(self, java_parser):
        text = read_fixture("non_unique_ids.txt").replace("ID(uniqueId) START\n    int b", "ID(otherId) START\n    int b")
        doc = java_parser.parse(text)
        assert doc.region_ids() == ["uniqueId", "otherId"]

    def test_duplicate_nested_id(self, java_parser):
        text = (
            "// PROTECTED REGION ID(a) START\n"
            "// PROTECTED REGION ID(a) START\n"
            "// PROTECTED REGION END\n"
            "// PROTECTED REGION END\n"
        )
        with pytest.raises(DuplicateRegionIdError):
            java_parser.parse(text)

    def test_ids_are_per_document(self, java_parser):
        text = "// PROTECTED REGION ID(a) START\n// PROTECTED REGION END\n"
        java_parser.parse(text)
        assert java_parser.parse(text).region_ids() == ["a"]

    def test_unmatched_end(self, java_parser):
        with pytest.raises(UnmatchedEndMarkerError) as exc_info:
            java_parser.parse("x\n// PROTECTED REGION END\n")
        assert exc_info.value.line == 2

    def test_unterminated_region(self, java_parser):
        with pytest.raises(UnterminatedRegionError, match="open") as exc_info:
            java_parser.parse("// PROTECTED REGION ID(open) START\nbody\n")
        assert exc_info.value.region_id == "open"

    def test_malformed_marker(self, java_parser):
        with pytest.raises(MalformedMarkerError):
            java_parser.parse("// PROTECTED REGION ID( ) START\n// PROTECTED REGION END\n")

    def test_unterminated_comment(self, java_parser):
        with pytest.raises(UnterminatedCommentError):
            java_parser.parse("/* PROTECTED REGION ID(a) START")

    def test_position_with_carriage_returns(self, java_parser):
        with pytest.raises(UnmatchedEndMarkerError) as exc_info:
            java_parser.parse("x\ry\r// PROTECTED REGION END\r")
        assert (exc_info.value.line, exc_info.value.column) == (3, 1)


class TestLineAndColumn:
    @pytest.mark.parametrize("text, position, expected", [
        ("ab", 1, (1, 2)),
        ("a\nb", 2, (2, 1)),
        ("a\r\nb", 3, (2, 1)),
        ("a\rb", 2, (2, 1)),
        ("a\r\rbc", 4, (3, 2)),
    ])
    def test_line_breaks(self, text, position, expected):
        assert line_and_column(text, position) == expected


# ── Comment nesting ──────────────────────────────────────────────


class TestCommentNesting:
    def test_nested_parser_reads_nested_comments(self):
        parser = create_scala_parser(NESTED_ID_ORACLE)
        doc = parser.parse(read_fixture("nested_comments.txt"))
        region = doc.get_region("1234")
        assert region is not None
        assert "val x = 1" in region.body_text

    def test_flat_parser_does_not_read_nested_comments(self):
        parser = create_java_parser(NESTED_ID_ORACLE)
        doc = parser.parse(read_fixture("nested_comments.txt"))
        assert doc.get_region("1234") is None
        assert doc.regions == {}


# ── Builder ──────────────────────────────────────────────────────


class TestBuilder:
    def test_build_with_custom_oracle(self, bracket_oracle):
        parser = (
            RegionParserBuilder()
            .add_comment("/*", "*/")
            .add_comment("//")
            .set_nesting(NESTED)
            .use_oracle(bracket_oracle)
            .build()
        )
        assert parser.syntax.blocks == (("/*", "*/"),)
        assert parser.syntax.lines == ("//",)
        assert parser.syntax.nesting == NESTED
        doc = parser.parse(read_fixture("simple_current.txt"))
        assert doc.region_ids() == ["header", "body"]

    def test_build_without_comments(self):
        with pytest.raises(ConfigError):
            RegionParserBuilder().build()

    def test_use_oracle_rejects_incomplete_strategy(self):
        class HalfOracle:
            def is_marked_region_start(self, comment):
                return False

        with pytest.raises(ConfigError):
            RegionParserBuilder().use_oracle(HalfOracle())

    def test_unknown_nesting(self):
        with pytest.raises(ConfigError):
            RegionParserBuilder().add_comment("#").set_nesting("deep").build()

    def test_inverse_defaults_to_false(self):
        assert RegionParserBuilder().add_comment("#").build().inverse is False


# ── Inverse mode ─────────────────────────────────────────────────


@pytest.fixture
def template_parser():
    return RegionParserBuilder().add_comment("<%", "%>").set_inverse(True).build()


class TestInverse:
    def test_markers_found_outside_comments(self, template_parser):
        text = read_fixture("template_current.txt")
        doc = template_parser.parse(text)
        assert doc.region_ids() == ["fields", "id", "methods"]
        assert doc.get_region("fields").enabled
        assert not doc.get_region("id").enabled
        assert doc.get_region("fields").start_marker == "    // PROTECTED REGION ID(fields) ENABLED START"
        assert doc.get_region("fields").body_text == "\n    // add fields here\n"
        assert doc.content == text

    def test_regular_mode_sees_no_markers_in_template(self):
        parser = RegionParserBuilder().add_comment("<%", "%>").build()
        doc = parser.parse(read_fixture("template_current.txt"))
        assert doc.regions == {}

    def test_comments_pass_through(self, template_parser):
        text = (
            "<%# PROTECTED REGION END %>\n"
            "// PROTECTED REGION ID(a) START\n"
            "x\n"
            "// PROTECTED REGION END\n"
        )
        doc = template_parser.parse(text)
        assert doc.region_ids() == ["a"]
        assert doc.content == text

        regular = RegionParserBuilder().add_comment("<%", "%>").build()
        with pytest.raises(UnmatchedEndMarkerError):
            regular.parse(text)

    def test_marker_must_fill_its_line(self, template_parser):
        doc = template_parser.parse("int x; // PROTECTED REGION ID(a) START\n")
        assert doc.regions == {}

    def test_crlf_lines(self, template_parser):
        text = "// PROTECTED REGION ID(a) START\r\nb\r\n// PROTECTED REGION END\r\n"
        doc = template_parser.parse(text)
        region = doc.get_region("a")
        assert region.start_marker == "// PROTECTED REGION ID(a) START"
        assert region.body_text == "\r\nb\r\n"
        assert doc.content == text

    def test_error_position(self, template_parser):
        with pytest.raises(UnmatchedEndMarkerError) as exc_info:
            template_parser.parse("x\n// PROTECTED REGION END\n")
        assert exc_info.value.line == 2

    def test_java_preset_inverse(self):
        parser = create_java_parser(inverse=True)
        text = "/* PROTECTED REGION ID(a) START */\n// PROTECTED REGION ID(a) START\n// PROTECTED REGION END\n"
        doc = parser.parse(text)
        assert parser.inverse is True
        assert doc.regions == {}
        assert doc.content == text
