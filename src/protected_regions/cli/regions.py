"""Region CLI commands: merge, fill-in, regions, check, presets."""

import argparse
import json
import sys

from protected_regions.config import resolve_parser
from protected_regions.document import iter_regions
from protected_regions.presets import PRESETS, list_presets
from protected_regions.reconcile import fill_in, merge


def _write_output(content: str, output: str | None) -> None:
    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    else:
        sys.stdout.write(content)


def _reconcile_files(args: argparse.Namespace, operation) -> int:
    parser = resolve_parser(args.config, args.preset)
    current = parser.parse_file(args.current)
    previous = parser.parse_file(args.previous)
    _write_output(operation(current, previous).content, args.output)
    return 0


def cmd_merge(args: argparse.Namespace) -> int:
    return _reconcile_files(args, merge)


def cmd_fill_in(args: argparse.Namespace) -> int:
    return _reconcile_files(args, fill_in)


def cmd_regions(args: argparse.Namespace) -> int:
    parser = resolve_parser(args.config, args.preset)
    doc = parser.parse_file(args.file)
    regions = list(iter_regions(doc.segments))

    if args.json:
        print(json.dumps(
            [
                {"id": r.id, "enabled": r.enabled, "body": r.body_text}
                for r in regions
            ],
            indent=2,
        ))
        return 0

    print(f"{args.file}: {len(regions)} marked regions")
    for r in regions:
        flag = "enabled" if r.enabled else "disabled"
        lines = r.body_text.count("\n")
        print(f"  {r.id:<30} {flag:<9} {lines} lines")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    parser = resolve_parser(args.config, args.preset)
    failed = 0
    for path in args.files:
        try:
            doc = parser.parse_file(path)
        except (ValueError, OSError) as e:
            failed += 1
            print(f"  ✗ {path}: {e}")
            continue
        print(f"  ✓ {path}: {len(doc.regions)} regions")
    print(f"\n{len(args.files) - failed}/{len(args.files)} files parsed cleanly")
    return 1 if failed else 0


def cmd_presets(args: argparse.Namespace) -> int:
    for name in list_presets():
        preset = PRESETS[name]
        delimiters = [f"{s} {e}" for s, e in preset["blocks"]] + list(preset["lines"])
        print(f"  {name:<12} {preset['nesting']:<7} {', '.join(delimiters)}")
    return 0
