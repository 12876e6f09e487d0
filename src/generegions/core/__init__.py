"""Core region collection logic for generegions.

This module contains the region model and the algorithms that derive
regions from annotation features:

- Feature interface and region records
- Exon/CDS resolution and strand-aware adjustment
- Per-transcript region extractors
- Transcript selection
- Alternate and common exons
- Duplicate removal
- The gene/transcript walker

Example:
    >>> from generegions.core import GeneRegionCollector, RegionKind
    >>> RegionKind.parse("firstIntron")
    <RegionKind.FIRST_INTRON: 'first intron'>
"""

from generegions.core.dedup import remove_duplicates
from generegions.core.exons import collect_alternate_exons, collect_common_exons
from generegions.core.extract import EXTRACTORS, RegionKind
from generegions.core.features import (
    Feature,
    FeatureNode,
    MalformedFeatureError,
    Region,
)
from generegions.core.selection import (
    TranscriptGroups,
    partition_transcripts,
    select_transcripts,
)
from generegions.core.structure import adjust_region, resolve_children
from generegions.core.walker import GeneRegionCollector, RegionTable

__all__: list[str] = [
    # Features
    "Feature",
    "FeatureNode",
    "MalformedFeatureError",
    "Region",
    # Structure
    "adjust_region",
    "resolve_children",
    # Extraction
    "EXTRACTORS",
    "RegionKind",
    # Selection
    "TranscriptGroups",
    "partition_transcripts",
    "select_transcripts",
    # Gene-level
    "collect_alternate_exons",
    "collect_common_exons",
    "remove_duplicates",
    # Walker
    "GeneRegionCollector",
    "RegionTable",
]
