"""Load parser configuration from YAML.

A config file describes a comment grammar and, optionally, a custom marker
grammar:

    preset: java
    comments:
      - ["/*", "*/"]
      - ["//"]
    nesting: flat
    inverse: false                # markers outside comments (templates)
    oracle:
      builtin: generated          # or a pattern description:
      start: '...(?P<id>...)...'
      end: '...'
      keyword: ENABLED
      enabled_when_present: true

Environment variables:
    PROTECTED_REGIONS_CONFIG — config file path (default: ./.protected-regions.yaml)
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from protected_regions.errors import ConfigError
from protected_regions.oracle import BUILTIN_ORACLES, PatternOracle, RegionOracle
from protected_regions.parser import RegionParser, RegionParserBuilder
from protected_regions.presets import default_preset, get_preset, preset_builder

DEFAULT_CONFIG_NAME = ".protected-regions.yaml"
_KNOWN_KEYS = {"preset", "comments", "nesting", "inverse", "oracle"}


def default_config_path() -> Path | None:
    """Return the config file to use when none is given, if any exists."""
    env = os.environ.get("PROTECTED_REGIONS_CONFIG")
    if env:
        return Path(env).expanduser()
    local = Path.cwd() / DEFAULT_CONFIG_NAME
    return local if local.is_file() else None


def load_config(path: Path | str) -> dict:
    """Read and parse a YAML config file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ConfigError: If the document is not a mapping.
    """
    config_path = Path(path)
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config at {config_path} is not a YAML mapping")

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    return data


def oracle_from_config(spec: dict | str) -> RegionOracle:
    """Build an oracle from a builtin name or a pattern description."""
    if isinstance(spec, str):
        spec = {"builtin": spec}
    if not isinstance(spec, dict):
        raise ConfigError(f"oracle must be a name or a mapping, got {type(spec).__name__}")

    builtin = spec.get("builtin")
    if builtin is not None:
        if builtin not in BUILTIN_ORACLES:
            raise ConfigError(
                f"Unknown builtin oracle '{builtin}' "
                f"(known: {', '.join(sorted(BUILTIN_ORACLES))})"
            )
        return BUILTIN_ORACLES[builtin]

    for key in ("start", "end"):
        if not isinstance(spec.get(key), str):
            raise ConfigError(f"oracle.{key} must be a regular expression string")
    return PatternOracle(
        start=spec["start"],
        end=spec["end"],
        keyword=str(spec.get("keyword", "ENABLED")),
        enabled_when_present=bool(spec.get("enabled_when_present", True)),
    )


def parser_from_config(config: dict) -> RegionParser:
    """Build a RegionParser from a loaded config mapping.

    Raises:
        ConfigError: On unknown presets, bad comment entries, or bad oracles.
    """
    base = config.get("preset")
    comments = config.get("comments")

    if comments is not None:
        builder = RegionParserBuilder()
        if base:
            # comments replace the preset's delimiters, nesting is inherited
            builder.set_nesting(get_preset(base)["nesting"])
        if not isinstance(comments, list) or not comments:
            raise ConfigError("comments must be a non-empty list")
        for entry in comments:
            if isinstance(entry, str):
                entry = [entry]
            if not isinstance(entry, list) or len(entry) not in (1, 2):
                raise ConfigError(f"Invalid comment entry: {entry!r}")
            builder.add_comment(*[str(e) for e in entry])
    elif base:
        builder = preset_builder(base)
    else:
        raise ConfigError("Config needs either a preset or a comments list")

    if "nesting" in config:
        builder.set_nesting(str(config["nesting"]))
    if "inverse" in config:
        if not isinstance(config["inverse"], bool):
            raise ConfigError("inverse must be true or false")
        builder.set_inverse(config["inverse"])
    if "oracle" in config:
        builder.use_oracle(oracle_from_config(config["oracle"]))
    return builder.build()


def resolve_parser(
    config_path: Path | str | None = None,
    preset: str | None = None,
) -> RegionParser:
    """Build the parser for a run from an explicit or default config file.

    An explicit ``preset`` wins over the config file's preset.
    """
    path = Path(config_path) if config_path else default_config_path()
    config = load_config(path) if path else {}
    if preset:
        config = {**config, "preset": preset}
    elif not config.get("preset") and not config.get("comments"):
        config = {**config, "preset": default_preset()}
    return parser_from_config(config)
