"""Sync CLI command."""

import argparse

from protected_regions.config import resolve_parser
from protected_regions.sync import FILL_IN, MERGE, sync_file


def cmd_sync(args: argparse.Namespace) -> int:
    parser = resolve_parser(args.config, args.preset)
    with open(args.generated, encoding="utf-8", newline="") as f:
        generated = f.read()

    mode = FILL_IN if args.fill_in else MERGE
    action = sync_file(args.target, generated, parser, mode=mode, dry_run=args.dry_run)

    print(f"{args.target}: {action}")
    if args.dry_run:
        print("\n[DRY RUN] No files were modified.")
    return 0
