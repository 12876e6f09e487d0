"""Annotation feature interface and emitted region records.

The core only ever reads the attributes declared by the ``Feature``
protocol, so any annotation source (the bundled GFF3 reader, a database
adaptor, hand-built test fixtures) can drive region collection.

Coordinates are 1-based and inclusive throughout, with ``start <= end``
regardless of strand. Strand is ``1`` or ``-1``; ``0`` marks a feature
whose orientation is unknown, which is fatal for any operation that
depends on direction.

Example:
    >>> from generegions.core.features import FeatureNode
    >>> exon = FeatureNode("exon1", "chr1", 100, 200, 1, "exon")
    >>> tx = FeatureNode("tx1", "chr1", 100, 400, 1, "mRNA", children=[exon])
    >>> tx.children[0].length
    101
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

import attrs

# =============================================================================
# Constants
# =============================================================================

STRAND_FORWARD = 1
STRAND_REVERSE = -1
STRAND_UNKNOWN = 0

VALID_STRANDS = (STRAND_FORWARD, STRAND_REVERSE)

# Output column names, in order
REGION_COLUMNS = ("Parent", "Transcript", "Name", "Chromosome", "Start", "Stop", "Strand")


# =============================================================================
# Exceptions
# =============================================================================


class MalformedFeatureError(ValueError):
    """Raised when a feature cannot be oriented (strand is neither 1 nor -1)."""

    def __init__(self, message: str, feature_name: str | None = None) -> None:
        # Both values in args so the error survives pickling between processes
        super().__init__(message, feature_name)
        self.message = message
        self.feature_name = feature_name

    def __str__(self) -> str:
        if self.feature_name:
            return f"Malformed feature {self.feature_name}: {self.message}"
        return self.message


# =============================================================================
# Feature Interface
# =============================================================================


@runtime_checkable
class Feature(Protocol):
    """Read-only view of one node of an annotation tree."""

    name: str | None
    seq_id: str
    start: int
    end: int
    strand: int
    primary_tag: str
    children: Sequence[Feature]


@attrs.define(slots=True)
class FeatureNode:
    """Concrete annotation feature with child features.

    Attributes:
        name: Display name (``None`` when the source provides none).
        seq_id: Chromosome/contig name.
        start: Start position (1-based, inclusive).
        end: End position (1-based, inclusive).
        strand: 1, -1, or 0 when unknown.
        primary_tag: Feature type (gene, mRNA, exon, CDS, ...).
        children: Child features, in any order.
        feature_id: Source identifier, used to resolve parent links.
        attributes: Additional source attributes (never read by the core).
    """

    name: str | None
    seq_id: str
    start: int
    end: int
    strand: int
    primary_tag: str
    children: list[FeatureNode] = attrs.Factory(list)
    feature_id: str | None = None
    attributes: dict[str, str] = attrs.Factory(dict)

    @property
    def length(self) -> int:
        """Feature length in base pairs."""
        return self.end - self.start + 1

    def add_child(self, child: FeatureNode) -> None:
        """Attach a child feature."""
        self.children.append(child)


def require_strand(feature: Feature) -> int:
    """Return the feature strand, raising if it cannot be oriented.

    Args:
        feature: Feature whose orientation is needed.

    Returns:
        1 or -1.

    Raises:
        MalformedFeatureError: If the strand is 0 or otherwise invalid.
    """
    if feature.strand not in VALID_STRANDS:
        raise MalformedFeatureError(
            f"strand must be 1 or -1, got {feature.strand!r}",
            feature_name=feature.name,
        )
    return feature.strand


def tag_matches(feature: Feature, token: str) -> bool:
    """Case-insensitive substring match against a feature's primary tag."""
    return token.lower() in feature.primary_tag.lower()


# =============================================================================
# Emitted Regions
# =============================================================================


@attrs.define(frozen=True, slots=True)
class Region:
    """A derived genomic region ready for output.

    Frozen: adjustments and parent assignment return new records.

    Attributes:
        transcript_name: Name of the transcript the region came from.
        name: Region name (e.g. ``tx1_TSS``).
        seq_id: Chromosome/contig name.
        start: Start position (1-based, inclusive).
        stop: Stop position (1-based, inclusive).
        strand: 1 or -1.
        parent_name: Gene (or bare transcript) name, set by the walker.
    """

    transcript_name: str | None
    name: str | None
    seq_id: str
    start: int
    stop: int
    strand: int
    parent_name: str | None = None

    @property
    def length(self) -> int:
        """Region length in base pairs (may be <= 0 after large adjustments)."""
        return self.stop - self.start + 1

    def with_parent(self, parent_name: str | None) -> Region:
        """Return a copy attributed to ``parent_name``."""
        return attrs.evolve(self, parent_name=parent_name)

    def to_row(self) -> tuple:
        """Output columns in ``REGION_COLUMNS`` order."""
        return (
            self.parent_name,
            self.transcript_name,
            self.name,
            self.seq_id,
            self.start,
            self.stop,
            self.strand,
        )
