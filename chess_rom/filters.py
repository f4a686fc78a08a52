"""Puzzle selection filters."""

from pydantic import BaseModel, Field

from .board import PIECE_SYMBOLS
from .puzzles import Puzzle

NO_THEME = "none"
# unit names carry a two digit move number
MAX_MOVE_NUMBER = 99


class FilterConfig(BaseModel):
    """Options controlling which puzzles end up in the ROM.

    >>> config = FilterConfig(theme_tag="mate", exclude_pieces="Q")
    >>> config.max_moves, config.min_moves, config.last_move_pieces
    (99, 2, 'prnbkq')
    """

    verbose: bool = False
    dry_run: bool = False
    max_moves: int = Field(default=MAX_MOVE_NUMBER, le=MAX_MOVE_NUMBER)
    min_moves: int = 2
    max_rating: int = 10000
    min_rating: int = 1
    theme_tag: str = NO_THEME
    exclude_pieces: str = ""
    last_move_pieces: str = "prnbkq"
    from_puzzle_id: str | None = None
    to_puzzle_id: str | None = None


def skip_reason(puzzle: Puzzle, config: FilterConfig) -> str | None:
    """Return why ``puzzle`` is filtered out before replay, or None to keep it.

    Filters run in a fixed order and the first failing one wins.

    >>> from chess_rom.puzzles import Puzzle
    >>> puzzle = Puzzle("00sHx", "q3k1nr/1pp1nQpp/3p4/1P2p3/4P3/B1PP1b2/B5PP/5K2", "b",
    ...                 ("e8d7", "a2e6", "d7d8", "f7f8"), 1760, ("mate", "matein2", "middlegame", "short"))
    >>> skip_reason(puzzle, FilterConfig()) is None
    True
    >>> skip_reason(puzzle, FilterConfig(exclude_pieces="Q", max_rating=1000))
    "contains excluded piece 'q'"
    >>> skip_reason(puzzle, FilterConfig(max_rating=1000))
    'rating 1760 > max 1000'
    >>> skip_reason(puzzle, FilterConfig(theme_tag="fork"))
    "missing theme 'fork' (has: mate, matein2, middlegame, short)"
    """
    fen = puzzle.fen.lower()
    pieces = [piece for piece in config.exclude_pieces.lower() if piece in PIECE_SYMBOLS]
    excluded = next((piece for piece in pieces if piece in fen), None)
    if excluded is not None:
        return f"contains excluded piece {excluded!r}"

    if puzzle.rating > config.max_rating:
        return f"rating {puzzle.rating} > max {config.max_rating}"
    if puzzle.rating < config.min_rating:
        return f"rating {puzzle.rating} < min {config.min_rating}"

    if puzzle.num_moves > config.max_moves:
        return f"move count {puzzle.num_moves} > max {config.max_moves}"
    if puzzle.num_moves < config.min_moves:
        return f"move count {puzzle.num_moves} < min {config.min_moves}"
    if not puzzle.moves:
        return "no moves"

    if config.theme_tag != NO_THEME and config.theme_tag.lower() not in puzzle.themes:
        return f"missing theme {config.theme_tag!r} (has: {', '.join(puzzle.themes)})"

    if config.from_puzzle_id is not None and puzzle.puzzle_id < config.from_puzzle_id:
        return f"id {puzzle.puzzle_id} < from id {config.from_puzzle_id}"
    if config.to_puzzle_id is not None and puzzle.puzzle_id > config.to_puzzle_id:
        return f"id {puzzle.puzzle_id} > to id {config.to_puzzle_id}"

    return None


def accepts_last_piece(piece: str, config: FilterConfig) -> bool:
    """Whether a puzzle whose final move was made by ``piece`` is kept.

    >>> accepts_last_piece("Q", FilterConfig(last_move_pieces="qr"))
    True
    >>> accepts_last_piece("p", FilterConfig(last_move_pieces="NB"))
    False
    """
    return piece.lower() in config.last_move_pieces.lower()
