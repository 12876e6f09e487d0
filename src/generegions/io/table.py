"""Output writers for collected regions.

- Tab-delimited region table with ``# key=value`` metadata lines
- BED6 conversion
- Optional gzip compression for both
- Summary statistics for reporting

Example:
    >>> from generegions.io.table import write_regions, write_bed
    >>> table = collector.collect(features)
    >>> write_regions(table, "tss.txt", gz=True)
    PosixPath('tss.txt.gz')
    >>> write_bed(table, "tss.bed")
    PosixPath('tss.bed')
"""

from __future__ import annotations

import csv
import gzip
import logging
from pathlib import Path
from typing import IO, Any

import numpy as np

from generegions.core.features import REGION_COLUMNS, STRAND_FORWARD, Region
from generegions.core.walker import RegionTable

logger = logging.getLogger(__name__)

METADATA_PREFIX = "# "


# =============================================================================
# Helpers
# =============================================================================


def _output_path(path: Path | str, gz: bool) -> Path:
    path = Path(path)
    if gz and path.suffix != ".gz":
        path = path.with_name(path.name + ".gz")
    return path


def _open_output(path: Path) -> IO[str]:
    if path.suffix == ".gz":
        return gzip.open(path, "wt", encoding="utf-8", newline="")
    return open(path, "w", encoding="utf-8", newline="")


def _open_input(path: Path) -> IO[str]:
    if path.suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8", newline="")
    return open(path, encoding="utf-8", newline="")


# =============================================================================
# Region Table
# =============================================================================


def write_regions(
    table: RegionTable,
    output_path: Path | str,
    gz: bool = False,
    source: str | None = None,
) -> Path:
    """Write regions as a tab-delimited table.

    Metadata lines come first, then a header row with ``REGION_COLUMNS``,
    then one row per region. Missing parent names are written empty.

    Args:
        table: Collected regions and metadata.
        output_path: Output file path.
        gz: Compress with gzip (``.gz`` is appended when missing).
        source: Optional source annotation description for the metadata.

    Returns:
        Path actually written.
    """
    path = _output_path(output_path, gz)

    metadata = dict(table.metadata)
    if source is not None:
        metadata["source"] = source

    with _open_output(path) as f:
        for key, value in metadata.items():
            f.write(f"{METADATA_PREFIX}{key}={value}\n")
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        writer.writerow(REGION_COLUMNS)
        writer.writerows(table.rows())

    logger.info(f"Wrote {len(table):,} regions to {path}")
    return path


def read_regions(input_path: Path | str) -> RegionTable:
    """Load a region table written by ``write_regions``.

    Args:
        input_path: Path to the table (plain or ``.gz``).

    Returns:
        RegionTable with metadata values as strings.
    """
    path = Path(input_path)
    metadata: dict[str, Any] = {}
    regions = []

    with _open_input(path) as f:
        lines = []
        for line in f:
            if line.startswith(METADATA_PREFIX) and not lines:
                key, _, value = line[len(METADATA_PREFIX):].rstrip("\n").partition("=")
                metadata[key] = value
                continue
            lines.append(line)

        for row in csv.DictReader(lines, delimiter="\t"):
            regions.append(
                Region(
                    parent_name=row["Parent"] or None,
                    transcript_name=row["Transcript"] or None,
                    name=row["Name"] or None,
                    seq_id=row["Chromosome"],
                    start=int(row["Start"]),
                    stop=int(row["Stop"]),
                    strand=int(row["Strand"]),
                )
            )

    logger.info(f"Loaded {len(regions):,} regions from {path}")
    return RegionTable(regions=regions, metadata=metadata)


# =============================================================================
# BED Conversion
# =============================================================================


def region_to_bed(region: Region) -> list:
    """BED6 fields for a region (0-based half-open start)."""
    return [
        region.seq_id,
        region.start - 1,
        region.stop,
        region.name or "",
        0,
        "+" if region.strand == STRAND_FORWARD else "-",
    ]


def write_bed(
    table: RegionTable,
    output_path: Path | str,
    gz: bool = False,
) -> Path:
    """Write regions in BED6 format.

    Args:
        table: Collected regions.
        output_path: Output file path.
        gz: Compress with gzip (``.gz`` is appended when missing).

    Returns:
        Path actually written.
    """
    path = _output_path(output_path, gz)

    with _open_output(path) as f:
        writer = csv.writer(f, delimiter="\t", lineterminator="\n")
        for region in table:
            writer.writerow(region_to_bed(region))

    logger.info(f"Wrote {len(table):,} BED records to {path}")
    return path


# =============================================================================
# Summary Statistics
# =============================================================================


def summarize_regions(regions: list[Region]) -> dict[str, float | int]:
    """Summarize collected regions.

    Args:
        regions: Collected regions.

    Returns:
        Dictionary with summary statistics.
    """
    if not regions:
        return {
            "n_regions": 0,
            "n_parents": 0,
            "mean_length": 0.0,
            "median_length": 0.0,
            "min_length": 0,
            "max_length": 0,
        }

    lengths = np.array([r.length for r in regions])
    return {
        "n_regions": len(regions),
        "n_parents": len({r.parent_name for r in regions}),
        "mean_length": float(np.mean(lengths)),
        "median_length": float(np.median(lengths)),
        "min_length": int(lengths.min()),
        "max_length": int(lengths.max()),
    }
