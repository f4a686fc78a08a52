"""Lichess puzzle rows parsed into typed records.

The Lichess puzzle database is a CSV file with the columns
``PuzzleId,FEN,Moves,Rating,RatingDeviation,Popularity,NbPlays,Themes,GameUrl,OpeningTags``.
"""

import csv
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .board import SIDES, expand
from .errors import MalformedBoard, MalformedInput

MIN_FIELDS = 8

ID_FIELD = 0
FEN_FIELD = 1
MOVES_FIELD = 2
RATING_FIELD = 3
THEMES_FIELD = 7


@dataclass(frozen=True)
class Puzzle:
    """A single puzzle as read from the source database.

    >>> puzzle = parse_puzzle_row(["00008", "r6k/pp2r2p/4Rp1Q/3p4/8/1N1P2R1/PqP2bPP/7K b - - 0 24",
    ...                            "f2g3 e6e7 b2b1 b3c1 b1c1 h6c1", "1913", "75", "94", "6230",
    ...                            "crushing hangingPiece long middlegame", "https://lichess.org/787zsVup/black#48", ""])
    >>> puzzle.puzzle_id, puzzle.side_to_move, puzzle.rating
    ('00008', 'b', 1913)
    >>> puzzle.moves[:2]
    ('f2g3', 'e6e7')
    >>> puzzle.themes
    ('crushing', 'hangingpiece', 'long', 'middlegame')
    """

    puzzle_id: str
    fen: str
    side_to_move: str
    moves: tuple[str, ...]
    rating: int
    themes: tuple[str, ...]

    @property
    def num_moves(self) -> int:
        return len(self.moves)


def parse_puzzle_row(row: list[str]) -> Puzzle:
    """Build a Puzzle from one CSV row, raising MalformedInput on bad data."""
    if len(row) < MIN_FIELDS:
        raise MalformedInput(f"Expected at least {MIN_FIELDS} fields, got {len(row)}: {row!r}")

    puzzle_id = row[ID_FIELD].strip()
    if not puzzle_id:
        raise MalformedInput(f"Missing puzzle id: {row!r}")

    fen_fields = row[FEN_FIELD].split()
    if not fen_fields:
        raise MalformedInput(f"Missing FEN in puzzle {puzzle_id}")
    fen = fen_fields[0]
    side_to_move = fen_fields[1] if len(fen_fields) > 1 else "w"
    if side_to_move not in SIDES:
        raise MalformedInput(f"Unknown side to move {side_to_move!r} in puzzle {puzzle_id}")

    try:
        expand(fen)
    except MalformedBoard as e:
        raise MalformedInput(f"Invalid FEN in puzzle {puzzle_id}: {e}") from e

    try:
        rating = int(row[RATING_FIELD])
    except ValueError as e:
        raise MalformedInput(f"Invalid rating {row[RATING_FIELD]!r} in puzzle {puzzle_id}") from e

    return Puzzle(
        puzzle_id=puzzle_id,
        fen=fen,
        side_to_move=side_to_move,
        moves=tuple(row[MOVES_FIELD].split()),
        rating=rating,
        themes=tuple(theme.lower() for theme in row[THEMES_FIELD].split()),
    )


def iter_puzzles(lines: Iterable[str]) -> Iterator[Puzzle]:
    """Yield puzzles from CSV lines, skipping the header row.

    >>> rows = [
    ...     "PuzzleId,FEN,Moves,Rating,RatingDeviation,Popularity,NbPlays,Themes,GameUrl,OpeningTags",
    ...     "0000D,5rk1/1p3ppp/pq3b2/8/8/1P1Q1N2/P4PPP/3R2K1 w - - 2 27,d3d6 f8d8 d6d8 f6d8,1426,500,2,0,"
    ...     "advantage endgame short,https://lichess.org/F8M8OS71#53,",
    ... ]
    >>> [p.puzzle_id for p in iter_puzzles(rows)]
    ['0000D']
    """
    reader = csv.reader(lines)
    next(reader, None)
    for row in reader:
        if not row:
            continue
        yield parse_puzzle_row(row)
