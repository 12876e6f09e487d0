"""Transcript structure resolution and strand-aware coordinate shifts.

Two small building blocks used by every region extractor:

- ``resolve_children`` orders a transcript's exon-like children 5'->3'.
- ``adjust_region`` shifts a region's ends relative to its own strand.

Example:
    >>> children = resolve_children(transcript)
    >>> first, last = children[0], children[-1]  # 5'-most, 3'-most
    >>> adjust_region(region, start_adj=-50, stop_adj=50)
"""

from __future__ import annotations

import logging

import attrs

from generegions.core.features import (
    STRAND_FORWARD,
    Feature,
    Region,
    require_strand,
    tag_matches,
)

logger = logging.getLogger(__name__)

# Tag tokens (case-insensitive substrings)
EXON_TOKENS = ("exon",)
CDS_TOKENS = ("cds", "utr", "untranslated")


# =============================================================================
# Exon/CDS Resolver
# =============================================================================


def _has_token(feature: Feature, tokens: tuple[str, ...]) -> bool:
    return any(tag_matches(feature, token) for token in tokens)


def resolve_children(transcript: Feature) -> list[Feature] | None:
    """Return the transcript's exon-like children in 5'->3' order.

    Exon children are preferred. When a transcript has none, its CDS and
    UTR children are used instead. Forward-strand lists are sorted by
    ascending start, reverse-strand lists by descending end, so the first
    element is always the 5'-most child whatever the strand.

    Args:
        transcript: Transcript feature.

    Returns:
        Ordered child list, or None if the transcript has no exon, CDS
        or UTR children.

    Raises:
        MalformedFeatureError: If the transcript strand is 0.
    """
    exons: list[Feature] = []
    cds: list[Feature] = []
    for child in transcript.children:
        if _has_token(child, EXON_TOKENS):
            exons.append(child)
        elif _has_token(child, CDS_TOKENS):
            cds.append(child)

    selected = exons or cds
    if not selected:
        logger.debug(f"No exon or CDS children for {transcript.name}")
        return None

    if require_strand(transcript) == STRAND_FORWARD:
        return sorted(selected, key=lambda f: f.start)
    return sorted(selected, key=lambda f: f.end, reverse=True)


# =============================================================================
# Coordinate Adjuster
# =============================================================================


def adjust_region(region: Region, start_adj: int = 0, stop_adj: int = 0) -> Region:
    """Shift region ends relative to the region's 5'->3' direction.

    A start adjustment always moves the 5' end and a stop adjustment the
    3' end; negative values move upstream. Inverted ranges produced by
    large negative values are left as they are.

    Args:
        region: Region to adjust.
        start_adj: Offset applied to the 5' end.
        stop_adj: Offset applied to the 3' end.

    Returns:
        Adjusted region (the same record when both offsets are 0).
    """
    if not start_adj and not stop_adj:
        return region

    if region.strand == STRAND_FORWARD:
        return attrs.evolve(
            region,
            start=region.start + start_adj,
            stop=region.stop + stop_adj,
        )
    return attrs.evolve(
        region,
        start=region.start - stop_adj,
        stop=region.stop - start_adj,
    )
