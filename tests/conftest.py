"""Pytest configuration and shared fixtures for generegions tests.

This module contains fixtures that are shared across multiple test modules.
Fixtures are organized by category:

- Builder fixtures: Factories for hand-built annotation features
- Gene fixtures: Small genes with known regions
- File fixtures: GFF3 files written to a temporary directory
"""

from pathlib import Path
from typing import Callable, Optional

import pytest

from generegions.core.features import FeatureNode


# =============================================================================
# Builder Fixtures
# =============================================================================


@pytest.fixture
def make_transcript() -> Callable[..., FeatureNode]:
    """Factory for a transcript with exon children.

    Exons are given as (start, end) tuples; names are left unset unless
    ``exon_names`` is passed.
    """

    def _make(
        name: str,
        exons: list[tuple[int, int]],
        strand: int = 1,
        tag: str = "mRNA",
        seq_id: str = "chr1",
        exon_tag: str = "exon",
        exon_names: Optional[list[str]] = None,
    ) -> FeatureNode:
        children = [
            FeatureNode(
                name=exon_names[i] if exon_names else None,
                seq_id=seq_id,
                start=start,
                end=end,
                strand=strand,
                primary_tag=exon_tag,
            )
            for i, (start, end) in enumerate(exons)
        ]
        return FeatureNode(
            name=name,
            seq_id=seq_id,
            start=min(s for s, _ in exons) if exons else 1,
            end=max(e for _, e in exons) if exons else 1,
            strand=strand,
            primary_tag=tag,
            children=children,
        )

    return _make


@pytest.fixture
def make_gene() -> Callable[..., FeatureNode]:
    """Factory for a gene wrapping the given transcripts."""

    def _make(name: str, transcripts: list[FeatureNode], strand: int = 1) -> FeatureNode:
        return FeatureNode(
            name=name,
            seq_id=transcripts[0].seq_id,
            start=min(t.start for t in transcripts),
            end=max(t.end for t in transcripts),
            strand=strand,
            primary_tag="gene",
            children=list(transcripts),
        )

    return _make


# =============================================================================
# Gene Fixtures
# =============================================================================


@pytest.fixture
def forward_transcript(make_transcript) -> FeatureNode:
    """Forward-strand mRNA with three exons.

    Exons: [100,150], [200,250], [300,400] (given out of order).
    """
    return make_transcript("tx1", [(300, 400), (100, 150), (200, 250)])


@pytest.fixture
def reverse_transcript(make_transcript) -> FeatureNode:
    """Reverse-strand mRNA with exons [100,200] and [300,400]."""
    return make_transcript("txm", [(100, 200), (300, 400)], strand=-1)


@pytest.fixture
def two_isoform_gene(make_transcript, make_gene) -> FeatureNode:
    """Gene G with two mRNAs sharing their first exon.

    - T1: [100,200], [300,400]
    - T2: [100,200], [350,450]
    """
    t1 = make_transcript("T1", [(100, 200), (300, 400)])
    t2 = make_transcript("T2", [(100, 200), (350, 450)])
    return make_gene("G", [t1, t2])


@pytest.fixture
def mixed_gene(make_transcript, make_gene) -> FeatureNode:
    """Gene with one mRNA and one ncRNA transcript."""
    mrna = make_transcript("M1", [(100, 200), (300, 400)])
    ncrna = make_transcript("N1", [(150, 250)], tag="ncRNA")
    return make_gene("GM", [mrna, ncrna])


# =============================================================================
# File Fixtures
# =============================================================================

SAMPLE_GFF = """\
##gff-version 3
chr1\ttest\tgene\t100\t450\t.\t+\t.\tID=G1;Name=GeneA
chr1\ttest\tmRNA\t100\t400\t.\t+\t.\tID=T1;Parent=G1
chr1\ttest\texon\t100\t200\t.\t+\t.\tID=T1.e1;Parent=T1
chr1\ttest\texon\t300\t400\t.\t+\t.\tID=T1.e2;Parent=T1
chr1\ttest\tmRNA\t100\t450\t.\t+\t.\tID=T2;Parent=G1
chr1\ttest\texon\t100\t200\t.\t+\t.\tParent=T2
chr1\ttest\texon\t350\t450\t.\t+\t.\tParent=T2
chr2\ttest\tncRNA\t10\t90\t.\t-\t.\tID=N1;Name=lnc1
chr2\ttest\texon\t10\t40\t.\t-\t.\tParent=N1
chr2\ttest\texon\t60\t90\t.\t-\t.\tParent=N1
"""


@pytest.fixture
def sample_gff(tmp_path: Path) -> Path:
    """Small GFF3 file with one two-isoform gene and one bare ncRNA.

    - GeneA (chr1, +): T1 [100,200],[300,400]; T2 [100,200],[350,450]
    - lnc1 (chr2, -): exons [10,40],[60,90], no parent gene
    """
    gff_path = tmp_path / "sample.gff3"
    gff_path.write_text(SAMPLE_GFF)
    return gff_path


@pytest.fixture
def unstranded_gff(tmp_path: Path) -> Path:
    """GFF3 file whose only transcript has no strand."""
    gff_path = tmp_path / "unstranded.gff3"
    gff_path.write_text(
        "##gff-version 3\n"
        "chr1\ttest\tgene\t100\t400\t.\t.\t.\tID=G1\n"
        "chr1\ttest\tmRNA\t100\t400\t.\t.\t.\tID=T1;Parent=G1\n"
        "chr1\ttest\texon\t100\t400\t.\t.\t.\tParent=T1\n"
    )
    return gff_path
