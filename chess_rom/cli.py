"""CLI for compiling Lichess puzzles into a flash image."""

from pathlib import Path
from typing import TextIO

import click
from tqdm import tqdm

from chess_rom.config import settings
from chess_rom.logging_config import set_verbose

from .errors import ChessRomError
from .filters import MAX_MOVE_NUMBER, NO_THEME, FilterConfig
from .puzzles import iter_puzzles
from .records import RecordWriter
from .replay import PuzzleResult, ReplayContext, compile_puzzles
from .rom import RomLayout, assemble, load_units, write_rom


def print_summary(context: ReplayContext, layout: RomLayout) -> None:
    kbytes = context.page_count * layout.row_size // 1024
    click.echo("\nSummary:")
    click.echo(f"  Total puzzles processed: {context.processed_count}")
    click.echo(f"  Puzzles generated: {context.puzzle_count}")
    click.echo(f"  Puzzles skipped: {context.skipped_count}")
    click.echo(f"  Puzzles rejected by last moved piece: {context.rejected_count}")
    click.echo(f"  Total screens/pages: {context.page_count} ({kbytes} KB)")
    if context.capacity_reached:
        click.echo(f"  ROM capacity reached ({context.max_pages} pages)")


def build_rom_file(input_dir: Path, output: Path, layout: RomLayout) -> None:
    click.echo("Generating rom file...")
    image, summary = assemble(load_units(input_dir), layout)
    write_rom(output, image)
    if summary.truncated:
        click.echo("Stopped early, remaining puzzles would exceed ROM capacity")
    click.echo(f"{summary.puzzle_count} puzzles in {summary.num_pages} rows...")
    click.echo(f"Used {summary.used_bytes} bytes ({summary.free_bytes} free)")
    click.echo(f"Wrote {len(image)} bytes to {output}")


@click.group()
def main() -> None:
    """Compile chess puzzles into a ROM image for the display device."""


@main.command()
@click.argument("input_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("-v", "--verbose", is_flag=True, help="Be verbose")
@click.option("--dry-run", is_flag=True, help="Only count puzzles, write nothing")
@click.option(
    "--max-moves",
    type=click.IntRange(max=MAX_MOVE_NUMBER),
    default=MAX_MOVE_NUMBER,
    help="Maximum moves in puzzle",
)
@click.option("--min-moves", type=int, default=2, help="Minimum moves in puzzle")
@click.option("--max-rating", type=int, default=10000, help="Maximum rating of the puzzle")
@click.option("--min-rating", type=int, default=1, help="Minimum rating of the puzzle")
@click.option("--theme-tag", type=str, default=NO_THEME, help="Only include puzzles with this theme tag (e.g. mate)")
@click.option(
    "--exclude-pieces",
    type=str,
    default="",
    help="Skip puzzles with these pieces, case insensitive (e.g. QR)",
)
@click.option(
    "--last-move-pieces",
    type=str,
    default="prnbkq",
    help="Only include puzzles whose last move was made by one of these pieces, case insensitive (e.g. pN)",
)
@click.option("--from-puzzle-id", type=str, default=None, help="Skip puzzles with ids sorting before this one")
@click.option("--to-puzzle-id", type=str, default=None, help="Skip puzzles with ids sorting after this one")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path(settings.PUZZLES_DIR),
    help="Directory receiving one record file per page",
)
@click.option(
    "--rom",
    "rom_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(settings.ROM_FILE),
    help="ROM image to generate",
)
@click.option("--no-rom", is_flag=True, help="Skip generating the ROM image")
def generate(
    input_file: TextIO,
    verbose: bool,
    dry_run: bool,
    max_moves: int,
    min_moves: int,
    max_rating: int,
    min_rating: int,
    theme_tag: str,
    exclude_pieces: str,
    last_move_pieces: str,
    from_puzzle_id: str | None,
    to_puzzle_id: str | None,
    output_dir: Path,
    rom_file: Path,
    no_rom: bool,
) -> None:
    """Replay puzzles from a Lichess CSV file (or stdin) into page records."""
    set_verbose(verbose)
    config = FilterConfig(
        verbose=verbose,
        dry_run=dry_run,
        max_moves=max_moves,
        min_moves=min_moves,
        max_rating=max_rating,
        min_rating=min_rating,
        theme_tag=theme_tag,
        exclude_pieces=exclude_pieces,
        last_move_pieces=last_move_pieces,
        from_puzzle_id=from_puzzle_id,
        to_puzzle_id=to_puzzle_id,
    )
    layout = RomLayout()

    if verbose:
        click.echo("Running with configuration:")
        for name, value in config.model_dump().items():
            click.echo(f"  {name}: {value}")

    writer: RecordWriter | None = None
    if dry_run:
        click.echo("Dry run, no puzzles will be generated...")
    else:
        writer = RecordWriter(output_dir, theme_tag=theme_tag)
        writer.reset()

    def write_accepted(result: PuzzleResult) -> None:
        assert writer is not None
        writer.write_puzzle(result.puzzle, result.pages)

    try:
        rows = tqdm(input_file, desc="Processing puzzles", unit="row", disable=verbose)
        context = compile_puzzles(
            iter_puzzles(rows),
            config,
            max_pages=layout.max_pages,
            on_accepted=write_accepted if writer is not None else None,
        )
        print_summary(context, layout)

        if not dry_run and not no_rom:
            build_rom_file(output_dir, rom_file, layout)
    except ChessRomError as e:
        raise click.ClickException(str(e)) from e


@main.command("build-rom")
@click.option(
    "--input-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path(settings.PUZZLES_DIR),
    help="Directory of record files written by 'generate'",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(settings.ROM_FILE),
    help="ROM image to generate",
)
def build_rom(input_dir: Path, output: Path) -> None:
    """Pack an existing directory of page records into a ROM image."""
    try:
        build_rom_file(input_dir, output, RomLayout())
    except ChessRomError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
