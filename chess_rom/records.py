"""Text records for puzzle pages and the directory of units they are written to.

Each page is one line ``id,board,from,to,move,total`` stored in its own file.
File names embed the puzzle id, rating, theme tag and a two digit move number,
so sorting the names by byte order restores puzzle and move order.
"""

from collections.abc import Iterable
from pathlib import Path

from chess_rom.config import settings
from chess_rom.logging_config import setup_logging

from .errors import ChessRomError, MalformedInput, RecordTooLong
from .filters import NO_THEME
from .puzzles import Puzzle
from .replay import PageRecord

logger = setup_logging(__name__)

UNIT_PREFIX = "puzzle"
UNIT_SUFFIX = ".txt"
FIRST_MOVE_SUFFIX = f"-01{UNIT_SUFFIX}"
RECORD_FIELDS = 6


def format_record(page: PageRecord) -> str:
    """Serialize a page as one text line.

    >>> from chess_rom.board import EMPTY
    >>> page = PageRecord("00008", "K" + EMPTY * 63, 7, 0, 1, 4)
    >>> format_record(page)[:10], format_record(page)[-13:]
    ('00008,K111', '11,07,00,1,4\\n')
    """
    return (
        f"{page.puzzle_id},{page.board},{page.from_index:02d},{page.to_index:02d},"
        f"{page.move_number},{page.total_moves}\n"
    )


def parse_record(line: str) -> PageRecord:
    """Parse a line written by ``format_record``.

    >>> from chess_rom.board import EMPTY
    >>> page = PageRecord("00008", "K" + EMPTY * 63, 7, 0, 1, 4)
    >>> parse_record(format_record(page)) == page
    True
    >>> parse_record("00008,K111,07,00,1,4")
    Traceback (most recent call last):
    ...
    chess_rom.errors.MalformedInput: Invalid record '00008,K111,07,00,1,4': Expanded board must have 64 squares, got 4
    """
    text = line.rstrip("\r\n")
    fields = text.split(",")
    if len(fields) != RECORD_FIELDS:
        raise MalformedInput(f"Expected {RECORD_FIELDS} fields in record {text!r}, got {len(fields)}")

    puzzle_id, board, from_index, to_index, move_number, total_moves = fields
    try:
        return PageRecord(
            puzzle_id=puzzle_id,
            board=board,
            from_index=int(from_index),
            to_index=int(to_index),
            move_number=int(move_number),
            total_moves=int(total_moves),
        )
    except (ValueError, ChessRomError) as e:
        raise MalformedInput(f"Invalid record {text!r}: {e}") from e


def unit_name(puzzle_id: str, rating: int, theme_tag: str, move_number: int) -> str:
    """Name of the file holding one page.

    >>> unit_name("00sHx", 1760, "mate", 3)
    'puzzle-00sHx-1760-mate-03.txt'
    """
    return f"{UNIT_PREFIX}-{puzzle_id}-{rating}-{theme_tag}-{move_number:02d}{UNIT_SUFFIX}"


class RecordWriter:
    """Writes accepted puzzles as one unit file per page."""

    def __init__(self, directory: Path, theme_tag: str = NO_THEME, record_budget: int | None = None):
        self.directory = directory
        self.theme_tag = theme_tag
        self.record_budget = record_budget if record_budget is not None else settings.RECORD_BUDGET

    def reset(self) -> None:
        """Create the output directory and remove unit files left by an earlier run.

        Only files named like units are deleted, anything else in the directory is kept.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        for path in self.directory.glob(f"{UNIT_PREFIX}-*{UNIT_SUFFIX}"):
            path.unlink()

    def write_puzzle(self, puzzle: Puzzle, pages: Iterable[PageRecord]) -> list[Path]:
        """Write every page of ``puzzle``; nothing is written if one line is too long."""
        units: list[tuple[Path, str]] = []
        for page in sorted(pages, key=lambda p: p.sort_key):
            line = format_record(page)
            # the budget counts the text, not the line terminator
            if len(line.rstrip("\n")) > self.record_budget:
                raise RecordTooLong(
                    f"Record for move {page.move_number} of puzzle {puzzle.puzzle_id} has "
                    f"{len(line.rstrip())} characters, budget is {self.record_budget}"
                )
            name = unit_name(puzzle.puzzle_id, puzzle.rating, self.theme_tag, page.move_number)
            units.append((self.directory / name, line))

        for path, line in units:
            path.write_text(line, encoding="ascii")
        logger.debug("Wrote %d pages for %s", len(units), puzzle.puzzle_id)
        return [path for path, _ in units]
