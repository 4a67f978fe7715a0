"""Canonical comment grammars of common host languages.

All preset definitions live here. Each entry: preset name → comment
delimiters and block comment nesting policy.
"""

from __future__ import annotations

import os

from protected_regions.errors import ConfigError
from protected_regions.oracle import RegionOracle
from protected_regions.parser import RegionParser, RegionParserBuilder
from protected_regions.scanner import FLAT, NESTED

_C_FAMILY = {"blocks": [("/*", "*/")], "lines": ["//"]}
_HASH = {"blocks": [], "lines": ["#"]}
_MARKUP = {"blocks": [("<!--", "-->")], "lines": []}

PRESETS: dict[str, dict] = {
    "java":       {**_C_FAMILY, "nesting": FLAT},
    "c":          {**_C_FAMILY, "nesting": FLAT},
    "cpp":        {**_C_FAMILY, "nesting": FLAT},
    "csharp":     {**_C_FAMILY, "nesting": FLAT},
    "go":         {**_C_FAMILY, "nesting": FLAT},
    "javascript": {**_C_FAMILY, "nesting": FLAT},
    "typescript": {**_C_FAMILY, "nesting": FLAT},
    "kotlin":     {**_C_FAMILY, "nesting": NESTED},
    "swift":      {**_C_FAMILY, "nesting": NESTED},
    "scala":      {**_C_FAMILY, "nesting": NESTED},
    "css":        {"blocks": [("/*", "*/")], "lines": [], "nesting": FLAT},
    "xml":        {**_MARKUP, "nesting": FLAT},
    "html":       {**_MARKUP, "nesting": FLAT},
    "python":     {**_HASH, "nesting": FLAT},
    "ruby":       {**_HASH, "nesting": FLAT},
    "shell":      {**_HASH, "nesting": FLAT},
    "yaml":       {**_HASH, "nesting": FLAT},
    "properties": {**_HASH, "nesting": FLAT},
    "sql":        {"blocks": [("/*", "*/")], "lines": ["--"], "nesting": FLAT},
    "haskell":    {"blocks": [("{-", "-}")], "lines": ["--"], "nesting": NESTED},
}

DEFAULT_PRESET = "java"


def default_preset() -> str:
    """Preset used when none is given: $PROTECTED_REGIONS_PRESET or java."""
    return os.environ.get("PROTECTED_REGIONS_PRESET", DEFAULT_PRESET)


def list_presets() -> list[str]:
    return sorted(PRESETS)


def get_preset(name: str) -> dict:
    """Look up a preset by name (case-insensitive).

    Raises:
        ConfigError: If the preset is unknown.
    """
    preset = PRESETS.get(name.lower())
    if preset is None:
        raise ConfigError(
            f"Unknown preset '{name}' (known: {', '.join(list_presets())})"
        )
    return preset


def preset_builder(name: str) -> RegionParserBuilder:
    """Return a builder pre-loaded with a preset's comment syntax."""
    preset = get_preset(name)
    builder = RegionParserBuilder()
    for start, end in preset["blocks"]:
        builder.add_comment(start, end)
    for prefix in preset["lines"]:
        builder.add_comment(prefix)
    return builder.set_nesting(preset["nesting"])


def create_parser(
    name: str,
    oracle: RegionOracle | None = None,
    inverse: bool = False,
) -> RegionParser:
    """Build a parser for a named preset, with the default oracle unless given."""
    builder = preset_builder(name).set_inverse(inverse)
    if oracle is not None:
        builder.use_oracle(oracle)
    return builder.build()


def create_java_parser(oracle: RegionOracle | None = None, inverse: bool = False) -> RegionParser:
    return create_parser("java", oracle, inverse)


def create_scala_parser(oracle: RegionOracle | None = None, inverse: bool = False) -> RegionParser:
    return create_parser("scala", oracle, inverse)


def create_xml_parser(oracle: RegionOracle | None = None, inverse: bool = False) -> RegionParser:
    return create_parser("xml", oracle, inverse)
