"""File sync — write generator output while keeping edits in marked regions.

The sync process for one target file:
1. If the target does not exist, write the generated text as-is
2. Otherwise parse the generated text (current) and the file (previous)
3. Reconcile them (merge or fill-in) and write the result if it changed

Preserves the developer's content inside protected regions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from protected_regions.errors import RegionError
from protected_regions.parser import RegionParser
from protected_regions.reconcile import fill_in, merge

logger = logging.getLogger(__name__)

MERGE = "merge"
FILL_IN = "fill-in"
_MODES = {MERGE: merge, FILL_IN: fill_in}


def reconcile_text(generated: str, existing: str, parser: RegionParser, mode: str = MERGE) -> str:
    """Reconcile generator output with an existing file's text."""
    try:
        operation = _MODES[mode]
    except KeyError:
        raise ValueError(f"Unknown sync mode '{mode}' (valid: {', '.join(_MODES)})") from None
    return operation(parser.parse(generated), parser.parse(existing)).content


def sync_file(
    target: Path | str,
    generated: str,
    parser: RegionParser,
    mode: str = MERGE,
    dry_run: bool = False,
) -> str:
    """Write ``generated`` into ``target``, keeping its protected regions.

    Returns:
        "created", "updated", or "unchanged".
    """
    file_path = Path(target)
    if not file_path.exists():
        if not dry_run:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(generated, encoding="utf-8", newline="")
        logger.info("%s: created", file_path)
        return "created"

    with open(file_path, encoding="utf-8", newline="") as f:
        existing = f.read()
    new_content = reconcile_text(generated, existing, parser, mode)
    if new_content == existing:
        logger.info("%s: unchanged", file_path)
        return "unchanged"
    if not dry_run:
        file_path.write_text(new_content, encoding="utf-8", newline="")
    logger.info("%s: updated", file_path)
    return "updated"


def sync_files(
    pairs: Iterable[tuple[Path | str, str]],
    parser: RegionParser,
    mode: str = MERGE,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Sync many (target, generated text) pairs, collecting per-file errors."""
    created = []
    updated = []
    skipped = []
    errors = []

    for target, generated in pairs:
        try:
            action = sync_file(target, generated, parser, mode, dry_run)
        except (RegionError, OSError) as e:
            logger.warning("%s: %s", target, e)
            errors.append({"path": str(target), "error": str(e)})
            continue
        if action == "created":
            created.append(str(target))
        elif action == "updated":
            updated.append(str(target))
        else:
            skipped.append(str(target))

    return {
        "created": created,
        "updated": updated,
        "skipped": skipped,
        "errors": errors,
        "dry_run": dry_run,
    }
