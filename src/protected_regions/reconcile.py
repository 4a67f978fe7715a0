"""Reconcile a freshly generated document with a previously edited one.

Both operations walk ``current`` and keep its layout, plain text and marker
text. They differ only in which regions take their body from ``previous``:

    merge    enabled regions keep the developer's previous body
    fill_in  disabled regions keep the previous body; enabled ones are
             filled in by the generator

A region present only in ``previous`` is dropped. Inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Set

from protected_regions.document import Document, PlainSegment, RegionSegment, Segment, iter_regions
from protected_regions.parser import RegionParser

logger = logging.getLogger(__name__)

KeepPrevious = Callable[[RegionSegment], bool]


def _keep_enabled(region: RegionSegment) -> bool:
    return region.enabled


def _keep_disabled(region: RegionSegment) -> bool:
    return not region.enabled


def _drop_regions(segments: tuple[Segment, ...], ids: Set[str]) -> tuple[Segment, ...]:
    """Remove regions named in ``ids`` (markers and body) from a copied body.

    Plain text left adjacent by a removal is coalesced.
    """
    result: list[Segment] = []
    for seg in segments:
        if isinstance(seg, RegionSegment):
            if seg.id in ids:
                logger.debug("Region %s: moved out of copied body, dropping old copy", seg.id)
                continue
            seg = seg.with_body(_drop_regions(seg.body, ids))
        elif result and isinstance(result[-1], PlainSegment):
            result[-1] = PlainSegment(result[-1].text + seg.text)
            continue
        result.append(seg)
    return tuple(result)


def _reconcile_segments(
    segments: tuple[Segment, ...],
    previous: Document,
    keep_previous: KeepPrevious,
    current_ids: Set[str],
) -> tuple[Segment, ...]:
    result: list[Segment] = []
    for seg in segments:
        if not isinstance(seg, RegionSegment):
            result.append(seg)
            continue
        old = previous.get_region(seg.id)
        if old is not None and keep_previous(seg):
            logger.debug("Region %s: keeping previous body", seg.id)
            # ids the generator now emits outside this region stay there
            elsewhere = current_ids - {r.id for r in iter_regions((seg,))}
            result.append(seg.with_body(_drop_regions(old.body, elsewhere)))
        else:
            logger.debug("Region %s: keeping generated body", seg.id)
            body = _reconcile_segments(seg.body, previous, keep_previous, current_ids)
            result.append(seg.with_body(body))
    return tuple(result)


def reconcile(current: Document, previous: Document, keep_previous: KeepPrevious) -> Document:
    """Build a new Document from ``current``, taking bodies from ``previous``
    for every shared region id where ``keep_previous(region)`` holds.

    A copied body loses any nested region whose id ``current`` places
    elsewhere, so ids stay unique in the result.
    """
    current_ids = frozenset(current.regions)
    return Document(_reconcile_segments(current.segments, previous, keep_previous, current_ids))


def merge(current: Document, previous: Document) -> Document:
    """Preserve the previous body of every enabled region of ``current``."""
    return reconcile(current, previous, _keep_enabled)


def fill_in(current: Document, previous: Document) -> Document:
    """Preserve the previous body of every disabled region of ``current``."""
    return reconcile(current, previous, _keep_disabled)


def merge_text(current_text: str, previous_text: str, parser: RegionParser) -> str:
    """Parse both texts with ``parser`` and return the merged content."""
    return merge(parser.parse(current_text), parser.parse(previous_text)).content


def fill_in_text(current_text: str, previous_text: str, parser: RegionParser) -> str:
    """Parse both texts with ``parser`` and return the filled-in content."""
    return fill_in(parser.parse(current_text), parser.parse(previous_text)).content
