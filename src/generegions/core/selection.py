"""Transcript selection for genes with several transcript biotypes.

Genes can carry both mRNA and other RNA transcripts. Selection happens
in two steps:

1. Group policy (``select_transcripts``): decide whether the gene's mRNA
   group, its other-RNA group, or both participate.
2. Subtype gate (``TranscriptTypes.accepts``): each selected transcript
   must match one of the requested transcript types.

Example:
    >>> transcripts = select_transcripts(gene, config)
    >>> accepted = [t for t in transcripts if is_requested(t, config)]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from generegions.core.features import Feature

if TYPE_CHECKING:
    from generegions.config import CollectionConfig

logger = logging.getLogger(__name__)


class TranscriptGroups(NamedTuple):
    """A gene's transcripts split by biotype.

    Attributes:
        mrna: Children tagged ``mRNA``.
        other: Other children whose tag ends in ``RNA``.
    """

    mrna: list[Feature]
    other: list[Feature]


def partition_transcripts(gene: Feature) -> TranscriptGroups:
    """Split a gene's children into mRNA and other-RNA groups.

    Children that are neither (exons, CDS, unrelated features) are
    ignored. Matching is case-insensitive.
    """
    mrna = []
    other = []
    for child in gene.children:
        tag = child.primary_tag.lower()
        if tag == "mrna":
            mrna.append(child)
        elif tag.endswith("rna"):
            other.append(child)
    return TranscriptGroups(mrna, other)


def select_transcripts(gene: Feature, config: CollectionConfig) -> list[Feature]:
    """Choose which of a gene's transcripts participate.

    When a gene has both groups, they are combined only if mixing is
    allowed; otherwise mRNA is taken if mRNA was requested and the other
    group if not. A gene with a single group uses it as is.

    Args:
        gene: Gene feature.
        config: Run configuration.

    Returns:
        Selected transcripts, mRNA first.
    """
    groups = partition_transcripts(gene)
    if groups.mrna and groups.other:
        if config.mix:
            return groups.mrna + groups.other
        if config.transcript_types.mrna:
            return groups.mrna
        return groups.other
    return groups.mrna or groups.other


def is_requested(transcript: Feature, config: CollectionConfig) -> bool:
    """Apply the per-subtype gate to a single transcript."""
    if config.transcript_types.accepts(transcript.primary_tag):
        return True
    logger.debug(
        f"Skipping {transcript.primary_tag} {transcript.name}: "
        f"not in requested types ({config.transcript_types.label})"
    )
    return False
