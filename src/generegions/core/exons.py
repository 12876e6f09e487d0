"""Alternate and common exons across the transcripts of a gene.

Exons are compared by exact ``(start, end)`` coordinates. With ``n``
participating transcripts and ``k`` transcripts sharing an interval, the
interval is common when ``k == n`` and alternate when ``k < n``. A gene
needs at least two participating transcripts for either question to make
sense; otherwise no regions are returned.

Example:
    >>> common = collect_common_exons(gene, config)
    >>> alternate = collect_alternate_exons(gene, config)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from generegions.core.features import Feature, Region, require_strand
from generegions.core.selection import is_requested, select_transcripts
from generegions.core.structure import resolve_children

if TYPE_CHECKING:
    from generegions.config import CollectionConfig

logger = logging.getLogger(__name__)

ExonKey = tuple[int, int]


def group_exons(
    transcripts: list[Feature],
) -> tuple[dict[ExonKey, list[tuple[Feature, Feature]]], int]:
    """Group the exons of several transcripts by exact coordinates.

    Args:
        transcripts: Transcripts that passed selection and the subtype gate.

    Returns:
        Tuple of (``(start, end)`` -> list of (transcript, exon) pairs,
        number of transcripts). Transcripts without exon-like children
        still count towards the total.
    """
    groups: dict[ExonKey, list[tuple[Feature, Feature]]] = defaultdict(list)
    for transcript in transcripts:
        for exon in resolve_children(transcript) or []:
            groups[(exon.start, exon.end)].append((transcript, exon))
    return groups, len(transcripts)


def _collect(gene: Feature, config: CollectionConfig, alternate: bool) -> list[Region]:
    candidates = select_transcripts(gene, config)
    if len(candidates) < 2:
        return []

    transcripts = [t for t in candidates if is_requested(t, config)]
    if len(transcripts) < 2:
        logger.debug(f"Gene {gene.name}: fewer than two requested transcripts")
        return []

    groups, n_transcripts = group_exons(transcripts)

    regions = []
    for key in sorted(groups):
        members = groups[key]
        shared_by_all = len(members) == n_transcripts
        if shared_by_all == alternate:
            continue

        start, _ = key
        for transcript, exon in members:
            regions.append(
                Region(
                    transcript_name=transcript.name,
                    name=exon.name or f"{transcript.name}.{start}",
                    seq_id=exon.seq_id,
                    start=exon.start,
                    stop=exon.end,
                    strand=require_strand(transcript),
                )
            )
    return regions


def collect_alternate_exons(gene: Feature, config: CollectionConfig) -> list[Region]:
    """Exons present in some but not all participating transcripts."""
    return _collect(gene, config, alternate=True)


def collect_common_exons(gene: Feature, config: CollectionConfig) -> list[Region]:
    """Exons present in every participating transcript."""
    return _collect(gene, config, alternate=False)
