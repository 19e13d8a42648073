"""sampan - Strip unnecessary information from Samsung panorama images."""
from __future__ import annotations

import time
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click

from sampan_strip.extract import convert_files, expand_inputs
from sampan_strip.report import write_report

try:
    __version__ = version("sampan")
except PackageNotFoundError:
    __version__ = "0.0.0"


@click.command()
@click.argument("inputs", metavar="INPUT...", nargs=-1, required=True)
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Output file name.")
@click.option("-s", "--silent", is_flag=True, help="Do not print any information.")
@click.option(
    "-i",
    "--in-place",
    is_flag=True,
    help="Overwrites file(s) in place. Ensure you have a backup. "
    "If this is enabled, the OUTPUT argument must not be set.",
)
@click.option("-d", "--dry-run", is_flag=True, help="Run program but do not write output.")
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Force conversion even if the Samsung version number is unsupported "
    "and even if the entry types do not match. Files that are not in "
    "Samsung format are never touched.",
)
@click.option(
    "--report",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write a Parquet table of per-file results.",
)
@click.version_option(__version__, prog_name="sampan")
def main(
    inputs: tuple[str, ...],
    output: str | None,
    silent: bool,
    in_place: bool,
    dry_run: bool,
    force: bool,
    report: Path | None,
) -> None:
    """Strip the Samsung panorama trailer from JPEG files.

    INPUT can be a pattern containing wildcards to process multiple files at
    once. Use ** to recurse into folders.
    """
    if output and (in_place or dry_run):
        raise click.UsageError("--output cannot be used with --in-place or --dry-run")
    if not output and not (in_place or dry_run):
        raise click.UsageError("Missing option '-o' / '--output'")

    start = time.perf_counter()
    try:
        results, total, size = convert_files(
            expand_inputs(inputs),
            output,
            in_place=in_place,
            silent=silent,
            dry_run=dry_run,
            force=force,
        )
        if report is not None:
            write_report(results, report)
    except OSError as e:
        # Unreadable or unwritable files abort the whole run.
        click.echo(f"FATAL: {e}")
        raise SystemExit(1)

    if not silent:
        pct = round(100 * size / total) if total else 0
        click.echo(
            f"---\nExtracted {round(size / 1_000_000)} of {round(total / 1_000_000)} MB "
            f"({pct} %) -- Time: {time.perf_counter() - start:.3f} s"
        )


if __name__ == "__main__":
    main()
