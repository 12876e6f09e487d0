"""Command-line interface for generegions.

This module provides the main entry point for the generegions CLI tool.
It uses Click to define commands.

Commands:
    collect: Collect one kind of region from a GFF3 annotation
    kinds: List the region kinds and the requests they accept

Example:
    $ generegions --help
    $ generegions collect -i genes.gff3.gz -o tss.txt -r tss --transcript mRNA
    $ generegions collect -i genes.gff3 -o introns.txt -r intron --unique --bed
    $ generegions kinds
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from generegions import __version__
from generegions.utils.logging import setup_logging

# Initialize rich console for pretty output
console = Console()


def _bed_path(output: Path) -> Path:
    """BED path next to the region table, never the table path itself."""
    if output.suffix == ".bed":
        return output.with_name(output.stem + ".regions.bed")
    return output.with_suffix(".bed")


@click.group()
@click.version_option(version=__version__, prog_name="generegions")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """generegions: Collect derived sub-regions from gene annotations.

    Transcription start and stop sites, exons, introns, splice sites and
    alternate or common exons are computed from gene -> transcript ->
    exon annotation and written as a region table.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# =============================================================================
# collect command
# =============================================================================


@main.command()
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="GFF3 annotation file (may be gzipped).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Output region table.",
)
@click.option(
    "--region",
    "-r",
    required=True,
    help="Region kind: tss, tts, exon, firstExon, lastExon, altExon, "
    "commonExon, intron, firstIntron, lastIntron, splice.",
)
@click.option(
    "--transcript",
    "-t",
    default="all",
    show_default=True,
    help="Transcript types, comma-separated: all, mRNA, ncRNA, snRNA, "
    "snoRNA, tRNA, rRNA, miRNA, lincRNA, misc_RNA.",
)
@click.option(
    "--start",
    "start_adj",
    type=int,
    default=0,
    show_default=True,
    help="Adjust the 5' end of each region (negative = upstream).",
)
@click.option(
    "--stop",
    "stop_adj",
    type=int,
    default=0,
    show_default=True,
    help="Adjust the 3' end of each region (negative = upstream).",
)
@click.option(
    "--unique/--no-unique",
    default=False,
    show_default=True,
    help="Keep only unique regions within each gene.",
)
@click.option(
    "--slop",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Tolerance (bp) around start positions when testing uniqueness.",
)
@click.option(
    "--mix/--no-mix",
    default=False,
    show_default=True,
    help="Allow mRNA and other RNA transcripts of the same gene together.",
)
@click.option("--bed", is_flag=True, help="Also write the regions as BED6.")
@click.option("--gz", is_flag=True, help="Compress output with gzip.")
@click.option(
    "--workers",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of parallel workers.",
)
@click.option(
    "--backend",
    type=click.Choice(["serial", "threads", "processes"]),
    default="threads",
    show_default=True,
    help="Parallel backend used when --workers > 1.",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Write a DEBUG log to this file.",
)
@click.pass_context
def collect(
    ctx: click.Context,
    input_path: Path,
    output: Path,
    region: str,
    transcript: str,
    start_adj: int,
    stop_adj: int,
    unique: bool,
    slop: int,
    mix: bool,
    bed: bool,
    gz: bool,
    workers: int,
    backend: str,
    log_file: Optional[Path],
) -> None:
    """Collect one kind of region from a GFF3 annotation.

    Regions are reported with their parent gene, transcript, name,
    chromosome, 1-based start and stop, and strand. Start and stop
    adjustments are applied relative to each region's strand.

    \b
    Examples:
        # Transcription start sites of mRNAs, +/- 50 bp
        $ generegions collect -i genes.gff3 -o tss.txt -r tss \\
            -t mRNA --start -50 --stop 50

        # Unique first introns, gzipped, with a BED copy
        $ generegions collect -i genes.gff3.gz -o introns.txt \\
            -r firstIntron --unique --bed --gz
    """
    from generegions.config import CollectionConfig
    from generegions.core.walker import GeneRegionCollector
    from generegions.io.gff import GFF3Reader
    from generegions.io.table import summarize_regions, write_bed, write_regions
    from generegions.utils.logging import Timer, get_logger

    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)
    setup_logging(verbosity=0 if quiet else (2 if verbose else 1), log_file=log_file)
    logger = get_logger(__name__)

    try:
        config = CollectionConfig.from_options(
            region=region,
            transcript=transcript,
            start_adj=start_adj,
            stop_adj=stop_adj,
            unique=unique,
            slop=slop,
            mix=mix,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    if not quiet:
        console.print(f"[blue]Input:[/blue] {input_path}")
        console.print(f"[blue]Region:[/blue] {'unique ' if unique else ''}{config.region.value}")
        console.print(f"[blue]Transcript types:[/blue] {config.transcript_types.label}")
        if start_adj or stop_adj:
            console.print(f"[blue]Adjustments:[/blue] start {start_adj:+d}, stop {stop_adj:+d}")
        if unique:
            console.print(f"[blue]Slop:[/blue] {slop} bp")

    try:
        with Timer("Region collection", logger):
            if not quiet:
                console.print("[dim]Loading annotation...[/dim]")
            reader = GFF3Reader(input_path)
            features = reader.top_features

            if not quiet:
                console.print(f"[dim]Collecting from {len(features):,} top-level features...[/dim]")
            collector = GeneRegionCollector(config)
            table = collector.collect(features, workers=workers, backend=backend)

            written = write_regions(table, output, gz=gz, source=str(input_path))
            bed_path = None
            if bed:
                bed_path = write_bed(table, _bed_path(output), gz=gz)

        if not quiet:
            stats = summarize_regions(table.regions)
            console.print("")
            console.print("[bold]Collection Summary:[/bold]")
            console.print(f"  Regions collected:   {stats['n_regions']:,}")
            console.print(f"  Parent features:     {stats['n_parents']:,}")
            if stats["n_regions"]:
                console.print(f"  Mean length:         {stats['mean_length']:.1f} bp")
                console.print(f"  Median length:       {stats['median_length']:.1f} bp")
            console.print("")
            console.print(f"[green]Wrote region table:[/green] {written}")
            if bed_path is not None:
                console.print(f"[green]Wrote BED file:[/green] {bed_path}")

    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        raise SystemExit(1)


# =============================================================================
# kinds command
# =============================================================================


@main.command()
def kinds() -> None:
    """List the region kinds and the requests they accept."""
    from generegions.core.extract import RegionKind

    for kind in RegionKind:
        scope = "gene" if kind.is_gene_level else "transcript"
        console.print(f"  [bold]{kind.short_name:<12}[/bold] {kind.value} [dim]({scope})[/dim]")


if __name__ == "__main__":
    main()
