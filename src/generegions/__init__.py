"""generegions: Derived sub-regions from gene annotations.

generegions walks gene -> transcript -> exon annotation and reports
transcription start and stop sites, exons, introns, splice sites, and
exons that are alternate or common across a gene's transcripts.

Example:
    >>> import generegions
    >>> generegions.__version__
    '0.1.0'

Modules:
    core: Region extraction, transcript selection and deduplication
    io: GFF3 input and region table/BED output
    parallel: Local parallel execution
    utils: Logging utilities
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
