"""Shared test fixtures for protected-regions."""

from pathlib import Path

import pytest

from protected_regions.presets import create_java_parser

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def java_parser():
    return create_java_parser()


class BracketOracle:
    """$(id)-{ ... }-$ markers, always enabled."""

    @staticmethod
    def _inner(comment):
        s = comment.strip()
        if s.startswith("/*") and s.endswith("*/"):
            return s[2:-2].strip()
        if s.startswith("//"):
            return s[2:].strip()
        return s

    def is_marked_region_start(self, comment):
        s = self._inner(comment)
        return s.startswith("$(") and s.endswith(")-{")

    def is_marked_region_end(self, comment):
        return self._inner(comment) == "}-$"

    def get_id(self, marked_region_start):
        s = self._inner(marked_region_start)
        i = s.find("(")
        j = s.find(")", i + 1)
        return s[i + 1:j].strip() if i != -1 and j != -1 else None

    def is_enabled(self, marked_region_start):
        return True


@pytest.fixture
def bracket_oracle():
    return BracketOracle()
