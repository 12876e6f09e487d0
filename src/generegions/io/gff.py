"""GFF3 annotation reader.

Builds ``FeatureNode`` trees (gene -> transcript -> exon/CDS/UTR) from a
GFF3 file so they can be fed to ``GeneRegionCollector``.

Features:
    - Plain or gzip-compressed input (``.gz`` suffix)
    - Parent-child relationships, including multiple parents
    - Top-level features yielded in file order
    - Coordinates kept 1-based inclusive, as in the file

Example:
    >>> from generegions.io.gff import GFF3Reader
    >>> reader = GFF3Reader("annotations.gff3.gz")
    >>> for feature in reader.iter_top_features():
    ...     print(feature.primary_tag, feature.name, len(feature.children))
"""

from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import IO, Any, Iterator

from generegions.core.features import (
    STRAND_FORWARD,
    STRAND_REVERSE,
    STRAND_UNKNOWN,
    FeatureNode,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

# GFF3 column indices
COL_SEQID = 0
COL_SOURCE = 1
COL_TYPE = 2
COL_START = 3
COL_END = 4
COL_SCORE = 5
COL_STRAND = 6
COL_PHASE = 7
COL_ATTRIBUTES = 8

STRAND_CODES = {"+": STRAND_FORWARD, "-": STRAND_REVERSE}


# =============================================================================
# Attribute Parsing
# =============================================================================


def parse_attributes(attr_string: str) -> dict[str, str]:
    """Parse GFF3 attribute string into dictionary.

    Args:
        attr_string: Semicolon-separated key=value pairs.

    Returns:
        Dictionary of attribute key-value pairs.
    """
    attributes = {}
    if not attr_string or attr_string == ".":
        return attributes

    for item in attr_string.split(";"):
        item = item.strip()
        if not item:
            continue

        if "=" in item:
            key, value = item.split("=", 1)
            # URL decode
            value = value.replace("%3B", ";").replace("%3D", "=").replace("%26", "&")
            value = value.replace("%2C", ",")
            attributes[key] = value

    return attributes


def open_annotation(path: Path | str) -> IO[str]:
    """Open a GFF3 file for reading, decompressing ``.gz`` files."""
    path = Path(path)
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, encoding="utf-8")


# =============================================================================
# GFF3 Reader
# =============================================================================


class GFF3Reader:
    """Read a GFF3 file into annotation feature trees.

    Feature names come from the ``Name`` attribute, falling back to ``ID``.
    Children reference parents through ``Parent`` (comma-separated for
    features shared by several transcripts). Features whose parents are
    missing from the file are reported and dropped.

    Attributes:
        path: Path to the GFF3 file.

    Example:
        >>> reader = GFF3Reader("annotations.gff3")
        >>> genes = [f for f in reader.iter_top_features() if f.primary_tag == "gene"]
    """

    def __init__(self, gff_path: Path | str) -> None:
        """Initialize the reader.

        Args:
            gff_path: Path to GFF3 file (optionally gzipped).

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        self.path = Path(gff_path)
        if not self.path.exists():
            raise FileNotFoundError(f"GFF3 file not found: {self.path}")

        self._top_features: list[FeatureNode] | None = None
        self._feature_count = 0

    def _parse_line(self, line: str, line_number: int) -> dict[str, Any] | None:
        """Parse a single GFF3 line.

        Args:
            line: Raw GFF3 line.
            line_number: 1-based line number for messages.

        Returns:
            Parsed feature dictionary or None for comments/empty/bad lines.
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        parts = line.split("\t")
        if len(parts) < 9:
            logger.warning(
                f"Malformed GFF3 line {line_number} (expected 9 columns): {line[:50]}..."
            )
            return None

        try:
            return {
                "seqid": parts[COL_SEQID],
                "type": parts[COL_TYPE],
                "start": int(parts[COL_START]),
                "end": int(parts[COL_END]),
                "strand": STRAND_CODES.get(parts[COL_STRAND], STRAND_UNKNOWN),
                "attributes": parse_attributes(parts[COL_ATTRIBUTES]),
            }
        except ValueError as e:
            logger.warning(f"Error parsing GFF3 line {line_number}: {e}")
            return None

    def _build_features(self) -> list[FeatureNode]:
        """Build feature trees from the GFF3 file."""
        by_id: dict[str, FeatureNode] = {}
        ordered: list[tuple[FeatureNode, list[str]]] = []

        with open_annotation(self.path) as f:
            for line_number, line in enumerate(f, 1):
                record = self._parse_line(line, line_number)
                if record is None:
                    continue

                attributes = record["attributes"]
                feature_id = attributes.get("ID")
                node = FeatureNode(
                    name=attributes.get("Name", feature_id),
                    seq_id=record["seqid"],
                    start=record["start"],
                    end=record["end"],
                    strand=record["strand"],
                    primary_tag=record["type"],
                    feature_id=feature_id,
                    attributes=attributes,
                )
                if feature_id is not None and feature_id not in by_id:
                    by_id[feature_id] = node

                parent = attributes.get("Parent", "")
                parent_ids = [p for p in parent.split(",") if p] if parent else []
                ordered.append((node, parent_ids))

        # Link children once every ID is known; parents may follow children
        top_features = []
        orphans = 0
        for node, parent_ids in ordered:
            if not parent_ids:
                top_features.append(node)
                continue

            linked = False
            for parent_id in parent_ids:
                parent_node = by_id.get(parent_id)
                if parent_node is not None:
                    parent_node.add_child(node)
                    linked = True
            if not linked:
                orphans += 1
                logger.debug(f"No parent found for {node.primary_tag} {node.name} ({','.join(parent_ids)})")

        if orphans:
            logger.warning(f"Dropped {orphans} features with unknown parents")

        self._feature_count = len(ordered)
        logger.info(f"Parsed {len(ordered):,} features, {len(top_features):,} top-level")
        return top_features

    def _ensure_parsed(self) -> None:
        """Ensure the GFF3 file has been parsed."""
        if self._top_features is None:
            self._top_features = self._build_features()

    def iter_top_features(self) -> Iterator[FeatureNode]:
        """Iterate over parentless features with their children attached.

        Yields:
            FeatureNode objects, in file order.
        """
        self._ensure_parsed()
        assert self._top_features is not None
        yield from self._top_features

    @property
    def top_features(self) -> list[FeatureNode]:
        """All parentless features."""
        self._ensure_parsed()
        assert self._top_features is not None
        return list(self._top_features)

    @property
    def feature_count(self) -> int:
        """Total number of features read."""
        self._ensure_parsed()
        return self._feature_count


# =============================================================================
# Convenience Functions
# =============================================================================


def read_features(path: Path | str) -> list[FeatureNode]:
    """Read top-level feature trees from a GFF3 file.

    Args:
        path: Path to the GFF3 file.

    Returns:
        List of top-level FeatureNode objects.
    """
    return GFF3Reader(path).top_features
