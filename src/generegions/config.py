"""Run configuration for region collection.

Configuration is built once per run (normally from command-line options)
and passed explicitly to the selector, extractors and walker. Both
classes are frozen so a configuration cannot change mid-run.

Example:
    >>> from generegions.config import CollectionConfig
    >>> config = CollectionConfig.from_options(
    ...     region="tss", transcript="mRNA,ncRNA", start_adj=-50, stop_adj=50
    ... )
    >>> config.region.label
    'transcription_start_site'
    >>> config.transcript_types.label
    'mRNA,ncRNA'
"""

from __future__ import annotations

from typing import Any, Iterable

import attrs

from generegions.core.extract import RegionKind

# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_TRANSCRIPT_TYPES = "all"
DEFAULT_START_ADJ = 0
DEFAULT_STOP_ADJ = 0
DEFAULT_SLOP = 0

# Recognized transcript labels -> TranscriptTypes field, in display order
TRANSCRIPT_LABELS = {
    "all": "all",
    "mRNA": "mrna",
    "ncRNA": "ncrna",
    "snRNA": "snrna",
    "snoRNA": "snorna",
    "tRNA": "trna",
    "rRNA": "rrna",
    "miRNA": "mirna",
    "lincRNA": "lincrna",
    "misc_RNA": "misc_rna",
}

_FIELD_TO_LABEL = {field: label for label, field in TRANSCRIPT_LABELS.items()}
_LOWER_LABELS = {label.lower(): field for label, field in TRANSCRIPT_LABELS.items()}


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define(frozen=True)
class TranscriptTypes:
    """Which transcript subtypes participate in region collection.

    Each flag matches transcripts whose primary tag contains the flag's
    token (``mrna``, ``ncrna``, ...), case-insensitively. ``all`` accepts
    any tag containing ``rna``.

    Attributes:
        all: Accept every RNA transcript.
        mrna: Accept mRNA.
        mirna: Accept miRNA.
        ncrna: Accept ncRNA.
        snrna: Accept snRNA.
        snorna: Accept snoRNA.
        trna: Accept tRNA.
        rrna: Accept rRNA.
        misc_rna: Accept misc_RNA.
        lincrna: Accept lincRNA.
    """

    all: bool = False
    mrna: bool = False
    mirna: bool = False
    ncrna: bool = False
    snrna: bool = False
    snorna: bool = False
    trna: bool = False
    rrna: bool = False
    misc_rna: bool = False
    lincrna: bool = False

    @classmethod
    def from_labels(cls, labels: str | Iterable[str]) -> TranscriptTypes:
        """Build from transcript labels.

        Args:
            labels: Comma-delimited string or iterable of labels such as
                ``"mRNA,ncRNA"`` or ``["all"]``. Matching is
                case-insensitive; ``all`` overrides everything else.

        Returns:
            TranscriptTypes with the requested flags set.

        Raises:
            ValueError: If a label is unknown or no label is given.
        """
        if isinstance(labels, str):
            labels = labels.split(",")

        flags: dict[str, bool] = {}
        for label in labels:
            label = label.strip()
            if not label:
                continue
            field = _LOWER_LABELS.get(label.lower())
            if field is None:
                raise ValueError(
                    f"Unknown transcript type: '{label}'. "
                    f"Expected one of: {', '.join(TRANSCRIPT_LABELS)}"
                )
            if field == "all":
                return cls(all=True)
            flags[field] = True

        if not flags:
            raise ValueError("At least one transcript type is required")
        return cls(**flags)

    @property
    def label(self) -> str:
        """Comma-joined canonical labels of the selected types."""
        if self.all:
            return "all"
        return ",".join(
            label for label, field in TRANSCRIPT_LABELS.items()
            if field != "all" and getattr(self, field)
        )

    def accepts(self, primary_tag: str) -> bool:
        """Check whether a transcript with this tag was requested."""
        tag = primary_tag.lower()
        if self.all and "rna" in tag:
            return True
        for field in _FIELD_TO_LABEL:
            if field != "all" and getattr(self, field) and field in tag:
                return True
        return False


@attrs.define(frozen=True)
class CollectionConfig:
    """Settings for one region collection run.

    Attributes:
        region: Kind of region to collect.
        transcript_types: Transcript subtypes to include.
        start_adj: Offset applied to each region's 5' end.
        stop_adj: Offset applied to each region's 3' end.
        unique: Remove duplicate regions within each gene.
        slop: Tolerance in bp when comparing start positions for uniqueness.
        mix: Allow mRNA and other RNA transcripts of one gene together.
    """

    region: RegionKind
    transcript_types: TranscriptTypes = attrs.Factory(lambda: TranscriptTypes(all=True))
    start_adj: int = DEFAULT_START_ADJ
    stop_adj: int = DEFAULT_STOP_ADJ
    unique: bool = False
    slop: int = DEFAULT_SLOP
    mix: bool = False

    @classmethod
    def from_options(
        cls,
        region: str | RegionKind,
        transcript: str | Iterable[str] = DEFAULT_TRANSCRIPT_TYPES,
        start_adj: int | None = None,
        stop_adj: int | None = None,
        unique: bool = False,
        slop: int | None = None,
        mix: bool = False,
    ) -> CollectionConfig:
        """Build and validate a configuration from raw option values.

        ``None`` numeric values fall back to their defaults.

        Raises:
            ValueError: If the region request, a transcript label or the
                slop value is invalid.
        """
        config = cls(
            region=RegionKind.parse(region),
            transcript_types=TranscriptTypes.from_labels(transcript),
            start_adj=DEFAULT_START_ADJ if start_adj is None else start_adj,
            stop_adj=DEFAULT_STOP_ADJ if stop_adj is None else stop_adj,
            unique=unique,
            slop=DEFAULT_SLOP if slop is None else slop,
            mix=mix,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if self.slop < 0:
            raise ValueError(f"Slop must be >= 0, got {self.slop}")

    def metadata(self) -> dict[str, Any]:
        """Summary metadata describing the collected regions.

        Adjustments appear only when non-zero, uniqueness settings only
        when uniqueness is requested.
        """
        meta: dict[str, Any] = {
            "region": self.region.label,
            "transcript_type": self.transcript_types.label,
        }
        if self.start_adj:
            meta["start_adjusted"] = self.start_adj
        if self.stop_adj:
            meta["stop_adjusted"] = self.stop_adj
        if self.unique:
            meta["unique"] = 1
            meta["slop"] = self.slop
        return meta

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "region": self.region.value,
            "transcript_types": self.transcript_types.label,
            "start_adj": self.start_adj,
            "stop_adj": self.stop_adj,
            "unique": self.unique,
            "slop": self.slop,
            "mix": self.mix,
        }
