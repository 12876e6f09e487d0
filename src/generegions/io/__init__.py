"""Input/output for generegions.

- GFF3 annotation reading (plain or gzipped)
- Region table and BED writing
"""

from generegions.io.gff import GFF3Reader, read_features
from generegions.io.table import read_regions, summarize_regions, write_bed, write_regions

__all__ = [
    "GFF3Reader",
    "read_features",
    "read_regions",
    "summarize_regions",
    "write_bed",
    "write_regions",
]
