"""Region extractors, one per transcript-level region kind.

Each extractor takes a transcript feature and returns the raw (not yet
adjusted) regions it defines. Exon, intron and splice extractors work
from the ordered child list produced by ``resolve_children`` and return
an empty list when the transcript has no usable children.

``RegionKind`` is the closed set of region kinds the tool understands.
Transcript-level kinds map to an extractor in ``EXTRACTORS``; alternate
and common exons need every transcript of a gene and are handled by
``generegions.core.exons``.

Example:
    >>> kind = RegionKind.parse("firstExon")
    >>> kind
    <RegionKind.FIRST_EXON: 'first exon'>
    >>> regions = kind.extract(transcript)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

from generegions.core.features import (
    STRAND_FORWARD,
    Feature,
    Region,
    require_strand,
)
from generegions.core.structure import resolve_children

Extractor = Callable[[Feature], list[Region]]


# =============================================================================
# Region Kinds
# =============================================================================


class RegionKind(Enum):
    """Kinds of region that can be collected."""

    TSS = "transcription start site"
    TTS = "transcription stop site"
    EXON = "exon"
    FIRST_EXON = "first exon"
    LAST_EXON = "last exon"
    ALTERNATE_EXON = "alternate exon"
    COMMON_EXON = "common exon"
    INTRON = "intron"
    FIRST_INTRON = "first intron"
    LAST_INTRON = "last intron"
    SPLICE_SITES = "splice sites"

    @classmethod
    def parse(cls, request: str | RegionKind) -> RegionKind:
        """Resolve a free-form request string to a region kind.

        Accepts the short forms used on the command line (``tss``,
        ``firstExon``, ``altExon``, ``splice``...) as well as the long
        names. Patterns are tried in a fixed order, case-insensitively.

        Args:
            request: Request string or an existing RegionKind.

        Returns:
            Matching RegionKind.

        Raises:
            ValueError: If the request matches no region kind.
        """
        if isinstance(request, RegionKind):
            return request

        text = request.strip()
        for pattern, kind in _REQUEST_PATTERNS:
            if pattern.search(text):
                return kind

        raise ValueError(
            f"Unknown region request: '{request}'. "
            f"Expected one of: {', '.join(k.short_name for k in cls)}"
        )

    @property
    def label(self) -> str:
        """Metadata label (long name with underscores)."""
        return re.sub(r"\s", "_", self.value)

    @property
    def short_name(self) -> str:
        """Command-line short form."""
        return _SHORT_NAMES[self]

    @property
    def is_gene_level(self) -> bool:
        """True for kinds computed across all transcripts of a gene."""
        return self in (RegionKind.ALTERNATE_EXON, RegionKind.COMMON_EXON)

    def extract(self, transcript: Feature) -> list[Region]:
        """Run this kind's extractor on a single transcript.

        Raises:
            ValueError: For gene-level kinds, which have no per-transcript
                extractor.
        """
        if self.is_gene_level:
            raise ValueError(f"'{self.value}' regions require a gene with multiple transcripts")
        return EXTRACTORS[self](transcript)


_REQUEST_PATTERNS: list[tuple[re.Pattern, RegionKind]] = [
    (re.compile(r"^first ?exon$", re.I), RegionKind.FIRST_EXON),
    (re.compile(r"^last ?exon$", re.I), RegionKind.LAST_EXON),
    (re.compile(r"tss", re.I), RegionKind.TSS),
    (re.compile(r"start site", re.I), RegionKind.TSS),
    (re.compile(r"tts", re.I), RegionKind.TTS),
    (re.compile(r"stop site", re.I), RegionKind.TTS),
    (re.compile(r"^splices?", re.I), RegionKind.SPLICE_SITES),
    (re.compile(r"^introns?$", re.I), RegionKind.INTRON),
    (re.compile(r"^first ?intron", re.I), RegionKind.FIRST_INTRON),
    (re.compile(r"^last ?intron", re.I), RegionKind.LAST_INTRON),
    (re.compile(r"^alt.*exons?", re.I), RegionKind.ALTERNATE_EXON),
    (re.compile(r"^common ?exons?", re.I), RegionKind.COMMON_EXON),
    (re.compile(r"^exons?", re.I), RegionKind.EXON),
]

_SHORT_NAMES = {
    RegionKind.TSS: "tss",
    RegionKind.TTS: "tts",
    RegionKind.EXON: "exon",
    RegionKind.FIRST_EXON: "firstExon",
    RegionKind.LAST_EXON: "lastExon",
    RegionKind.ALTERNATE_EXON: "altExon",
    RegionKind.COMMON_EXON: "commonExon",
    RegionKind.INTRON: "intron",
    RegionKind.FIRST_INTRON: "firstIntron",
    RegionKind.LAST_INTRON: "lastIntron",
    RegionKind.SPLICE_SITES: "splice",
}


# =============================================================================
# Helpers
# =============================================================================


def _region(transcript: Feature, name: str | None, start: int, stop: int) -> Region:
    return Region(
        transcript_name=transcript.name,
        name=name,
        seq_id=transcript.seq_id,
        start=start,
        stop=stop,
        strand=transcript.strand,
    )


def _child_region(transcript: Feature, child: Feature, default_name: str) -> Region:
    return _region(transcript, child.name or default_name, child.start, child.end)


# =============================================================================
# Transcription Start/Stop Sites
# =============================================================================


def extract_tss(transcript: Feature) -> list[Region]:
    """Single-base region at the transcript's 5'-most coordinate."""
    if require_strand(transcript) == STRAND_FORWARD:
        position = transcript.start
    else:
        position = transcript.end
    return [_region(transcript, f"{transcript.name}_TSS", position, position)]


def extract_tts(transcript: Feature) -> list[Region]:
    """Single-base region at the transcript's 3'-most coordinate."""
    if require_strand(transcript) == STRAND_FORWARD:
        position = transcript.end
    else:
        position = transcript.start
    return [_region(transcript, f"{transcript.name}_TTS", position, position)]


# =============================================================================
# Exons
# =============================================================================


def extract_exons(transcript: Feature) -> list[Region]:
    """Every exon (or CDS/UTR) of the transcript, in 5'->3' order."""
    children = resolve_children(transcript)
    if not children:
        return []
    return [
        _child_region(transcript, child, f"{transcript.name}_exon{i}")
        for i, child in enumerate(children)
    ]


def extract_first_exon(transcript: Feature) -> list[Region]:
    """The 5'-most exon."""
    children = resolve_children(transcript)
    if not children:
        return []
    return [_child_region(transcript, children[0], f"{transcript.name}_firstExon")]


def extract_last_exon(transcript: Feature) -> list[Region]:
    """The 3'-most exon."""
    children = resolve_children(transcript)
    if not children:
        return []
    return [_child_region(transcript, children[-1], f"{transcript.name}_lastExon")]


# =============================================================================
# Introns
# =============================================================================


def extract_introns(transcript: Feature) -> list[Region]:
    """Gaps between consecutive exons, in 5'->3' order.

    On the forward strand intron ``i`` runs from the end of exon ``i`` to
    the start of exon ``i + 1``; on the reverse strand the ordered exons
    descend, so the intron runs from the end of exon ``i + 1`` to the
    start of exon ``i``. Both bounds exclude the exon bases.
    """
    children = resolve_children(transcript)
    if not children or len(children) < 2:
        return []

    forward = transcript.strand == STRAND_FORWARD
    introns = []
    for i, (upstream, downstream) in enumerate(zip(children, children[1:])):
        if forward:
            start, stop = upstream.end + 1, downstream.start - 1
        else:
            start, stop = downstream.end + 1, upstream.start - 1
        introns.append(_region(transcript, f"{transcript.name}.intron{i}", start, stop))
    return introns


def extract_first_intron(transcript: Feature) -> list[Region]:
    """The 5'-most intron."""
    return extract_introns(transcript)[:1]


def extract_last_intron(transcript: Feature) -> list[Region]:
    """The 3'-most intron."""
    return extract_introns(transcript)[-1:]


# =============================================================================
# Splice Sites
# =============================================================================


def extract_splice_sites(transcript: Feature) -> list[Region]:
    """Single-base markers on the intron side of each exon boundary.

    The 5' marker of an exon sits next to its TSS-facing end and the 3'
    marker next to its TTS-facing end. The first exon has no 5' marker
    and the last exon no 3' marker, so ``e`` exons give ``2e - 2`` sites.
    """
    children = resolve_children(transcript)
    if not children or len(children) < 2:
        return []

    forward = transcript.strand == STRAND_FORWARD
    last = len(children) - 1
    sites = []
    for i, exon in enumerate(children):
        name = exon.name or f"{transcript.name}.exon{i}"
        if forward:
            five_prime, three_prime = exon.start - 1, exon.end + 1
        else:
            five_prime, three_prime = exon.end + 1, exon.start - 1

        if i > 0:
            sites.append(_region(transcript, f"{name}_5'", five_prime, five_prime))
        if i < last:
            sites.append(_region(transcript, f"{name}_3'", three_prime, three_prime))
    return sites


EXTRACTORS: dict[RegionKind, Extractor] = {
    RegionKind.TSS: extract_tss,
    RegionKind.TTS: extract_tts,
    RegionKind.EXON: extract_exons,
    RegionKind.FIRST_EXON: extract_first_exon,
    RegionKind.LAST_EXON: extract_last_exon,
    RegionKind.INTRON: extract_introns,
    RegionKind.FIRST_INTRON: extract_first_intron,
    RegionKind.LAST_INTRON: extract_last_intron,
    RegionKind.SPLICE_SITES: extract_splice_sites,
}
