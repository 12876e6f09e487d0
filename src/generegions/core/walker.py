"""Region collection over gene and transcript features.

``GeneRegionCollector`` walks a stream of top-level annotation features
and turns each into output regions:

- Genes: transcripts are selected, gated by type, extracted and adjusted;
  with ``unique`` set, near-duplicates across the gene's transcripts are
  removed. Alternate and common exons are computed per gene.
- Bare transcripts (RNA features without a gene): extracted and adjusted
  directly, with the transcript's own name as parent.
- Anything else is ignored.

Example:
    >>> from generegions.config import CollectionConfig
    >>> from generegions.core.walker import GeneRegionCollector
    >>> config = CollectionConfig.from_options(region="intron", transcript="mRNA")
    >>> collector = GeneRegionCollector(config)
    >>> table = collector.collect(features)
    >>> print(f"collected {len(table)} regions")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Iterator

import attrs

from generegions.core.dedup import remove_duplicates
from generegions.core.exons import collect_alternate_exons, collect_common_exons
from generegions.core.extract import RegionKind
from generegions.core.features import Feature, Region
from generegions.core.selection import is_requested, select_transcripts
from generegions.core.structure import adjust_region
from generegions.parallel.executor import ExecutorBackend, ParallelExecutor
from generegions.utils.logging import ProgressLogger

if TYPE_CHECKING:
    from generegions.config import CollectionConfig

logger = logging.getLogger(__name__)

# Features between progress messages
PROGRESS_INTERVAL = 10_000


# =============================================================================
# Result Container
# =============================================================================


@attrs.define(slots=True)
class RegionTable:
    """Collected regions plus the metadata describing how they were made.

    Attributes:
        regions: Regions in input order.
        metadata: Run metadata (region label, transcript types,
            adjustments, uniqueness).
    """

    regions: list[Region] = attrs.Factory(list)
    metadata: dict[str, Any] = attrs.Factory(dict)

    def __len__(self) -> int:
        return len(self.regions)

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions)

    def rows(self) -> Iterator[tuple]:
        """Iterate over output rows."""
        for region in self.regions:
            yield region.to_row()


# =============================================================================
# Collector
# =============================================================================


class GeneRegionCollector:
    """Collect one kind of region from annotation features.

    Attributes:
        config: Run configuration.
    """

    def __init__(self, config: CollectionConfig) -> None:
        """Initialize the collector.

        Args:
            config: Run configuration.
        """
        self.config = config

    @property
    def kind(self) -> RegionKind:
        """Region kind being collected."""
        return self.config.region

    def _adjust(self, regions: list[Region]) -> list[Region]:
        return [
            adjust_region(r, self.config.start_adj, self.config.stop_adj)
            for r in regions
        ]

    def process_transcript(self, transcript: Feature) -> list[Region]:
        """Extract and adjust regions for a single transcript.

        Returns an empty list for gene-level kinds and for transcripts
        whose type was not requested. Parent names are left unset.

        Raises:
            MalformedFeatureError: If the transcript strand is 0.
        """
        if self.kind.is_gene_level:
            return []
        if not is_requested(transcript, self.config):
            return []
        return self._adjust(self.kind.extract(transcript))

    def process_gene(self, gene: Feature) -> list[Region]:
        """Collect regions from every participating transcript of a gene.

        Raises:
            MalformedFeatureError: If a participating transcript has strand 0.
        """
        if self.kind == RegionKind.ALTERNATE_EXON:
            regions = self._adjust(collect_alternate_exons(gene, self.config))
        elif self.kind == RegionKind.COMMON_EXON:
            regions = self._adjust(collect_common_exons(gene, self.config))
        else:
            regions = []
            for transcript in select_transcripts(gene, self.config):
                regions.extend(self.process_transcript(transcript))

        if not regions:
            return []

        if self.config.unique:
            regions = remove_duplicates(regions, self.config.slop)

        return [r.with_parent(gene.name) for r in regions]

    def process_feature(self, feature: Feature) -> list[Region]:
        """Dispatch a top-level feature by its type."""
        tag = feature.primary_tag.lower()
        if tag == "gene":
            return self.process_gene(feature)
        if "rna" in tag:
            return [r.with_parent(feature.name) for r in self.process_transcript(feature)]

        logger.debug(f"Ignoring top-level {feature.primary_tag} {feature.name}")
        return []

    def collect(
        self,
        features: Iterable[Feature],
        workers: int = 1,
        backend: ExecutorBackend | str = ExecutorBackend.THREADS,
    ) -> RegionTable:
        """Collect regions from a stream of top-level features.

        Args:
            features: Genes and/or bare transcripts.
            workers: Number of parallel workers (1 = serial).
            backend: Parallel backend used when ``workers > 1``.

        Returns:
            RegionTable with regions in input order.

        Raises:
            MalformedFeatureError: If any feature cannot be oriented. No
                partial result is returned.
        """
        features = list(features)
        progress = ProgressLogger(
            logger,
            total=len(features),
            interval=PROGRESS_INTERVAL,
            description="Collecting regions",
        )

        executor = ParallelExecutor(
            n_workers=workers,
            backend=backend,
            progress_callback=lambda completed, total: progress.update(),
        )
        results, _ = executor.map_items(
            self.process_feature, features, continue_on_error=False
        )

        table = RegionTable(metadata=self.config.metadata())
        for task_result in results:
            table.regions.extend(task_result.result)

        logger.info(f"Collected {len(table):,} {self.kind.value} regions from {len(features):,} features")
        return table
