"""Unified CLI for protected-regions.

Usage:
    protected-regions merge <current> <previous> [-o <out>]
    protected-regions fill-in <current> <previous> [-o <out>]
    protected-regions regions <file> [--json]
    protected-regions check <file>...
    protected-regions sync <generated> <target> [--fill-in] [--dry-run]
    protected-regions presets

Global options:
    --preset <name>    comment grammar preset (default: $PROTECTED_REGIONS_PRESET or java)
    --config <path>    YAML config (default: $PROTECTED_REGIONS_CONFIG or ./.protected-regions.yaml)
    -v, --verbose      debug logging on stderr
"""

import argparse
import logging
import sys

import yaml

from protected_regions.cli.regions import (
    cmd_check,
    cmd_fill_in,
    cmd_merge,
    cmd_presets,
    cmd_regions,
)
from protected_regions.cli.sync import cmd_sync
from protected_regions.errors import ConfigError, RegionError


def _setup_logging(verbose: bool) -> None:
    # Without -v, warnings reach stderr through logging's last-resort handler
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protected-regions",
        description="Keep hand-written edits in marked regions across code regeneration",
    )
    parser.add_argument(
        "--preset", default=None,
        help="Comment grammar preset (see 'presets')",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to a YAML parser config",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command")

    # merge / fill-in
    for name, help_text in (
        ("merge", "Keep previous bodies of enabled regions"),
        ("fill-in", "Keep previous bodies of disabled regions"),
    ):
        rec = sub.add_parser(name, help=help_text)
        rec.add_argument("current", help="Freshly generated file")
        rec.add_argument("previous", help="Previously generated and edited file")
        rec.add_argument(
            "-o", "--output", default=None,
            help="Output file (default: stdout)",
        )

    # regions
    reg = sub.add_parser("regions", help="List the marked regions of a file")
    reg.add_argument("file")
    reg.add_argument(
        "--json", action="store_true",
        help="Output machine-readable JSON",
    )

    # check
    chk = sub.add_parser("check", help="Verify that files parse cleanly")
    chk.add_argument("files", nargs="+")

    # sync
    syn = sub.add_parser(
        "sync", help="Write generated output into a target, keeping edits",
    )
    syn.add_argument("generated", help="Freshly generated file")
    syn.add_argument("target", help="File to update in place")
    syn.add_argument(
        "--fill-in", action="store_true",
        help="Use fill-in instead of merge",
    )
    syn.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    # presets
    sub.add_parser("presets", help="List comment grammar presets")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _setup_logging(args.verbose)

    dispatch = {
        "merge": cmd_merge,
        "fill-in": cmd_fill_in,
        "regions": cmd_regions,
        "check": cmd_check,
        "sync": cmd_sync,
        "presets": cmd_presets,
    }

    try:
        return dispatch[args.command](args)
    except (RegionError, ConfigError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
