"""Removal of near-duplicate regions within a gene.

Regions are compared by start position only. Each surviving region
claims every position within ``slop`` bp of its start; a later region
whose own window touches a claimed position is dropped. The scan is
greedy and order-dependent: the first region to claim a window wins, and
a dropped region claims nothing.

Example:
    >>> unique = remove_duplicates(regions, slop=5)
"""

from __future__ import annotations

import logging

from generegions.core.features import Region

logger = logging.getLogger(__name__)


def remove_duplicates(regions: list[Region], slop: int = 0) -> list[Region]:
    """Drop regions whose start lies near an earlier region's start.

    Args:
        regions: Regions of one gene, in emission order.
        slop: Tolerance in bp around each start position.

    Returns:
        New list of surviving regions, in their original order.

    Raises:
        ValueError: If slop is negative.
    """
    if slop < 0:
        raise ValueError(f"Slop must be >= 0, got {slop}")

    # Two windows of half-width slop overlap when their starts are within 2 * slop
    reach = 2 * slop
    claimed: list[int] = []
    kept = []
    for region in regions:
        if any(abs(region.start - start) <= reach for start in claimed):
            continue
        claimed.append(region.start)
        kept.append(region)

    if len(kept) < len(regions):
        logger.debug(f"Removed {len(regions) - len(kept)} duplicate regions (slop={slop})")
    return kept
