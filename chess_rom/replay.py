"""Replay puzzle solutions and turn every move into a page record."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import Enum

from chess_rom.logging_config import setup_logging

from .board import BOARD_SIZE, expand, rotate180, validate_board
from .errors import InvalidSquare, MalformedInput
from .filters import FilterConfig, accepts_last_piece, skip_reason
from .moves import apply_move, move_indices, parse_move
from .puzzles import Puzzle

logger = setup_logging(__name__)


class ReplayState(Enum):
    FILTERING = "filtering"
    REPLAYING = "replaying"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class PageRecord:
    """The board shown after one move of a puzzle."""

    puzzle_id: str
    board: str
    from_index: int
    to_index: int
    move_number: int
    total_moves: int

    def __post_init__(self) -> None:
        validate_board(self.board)
        for index in (self.from_index, self.to_index):
            if not 0 <= index < BOARD_SIZE:
                raise InvalidSquare(f"Square index {index} out of range in puzzle {self.puzzle_id}")
        if not 1 <= self.move_number <= self.total_moves:
            raise MalformedInput(
                f"Move number {self.move_number} outside 1..{self.total_moves} in puzzle {self.puzzle_id}"
            )

    @property
    def sort_key(self) -> tuple[str, int]:
        return (self.puzzle_id, self.move_number)

    @property
    def is_first_move(self) -> bool:
        return self.move_number == 1


@dataclass(frozen=True)
class PuzzleResult:
    puzzle: Puzzle
    state: ReplayState
    pages: tuple[PageRecord, ...] = ()
    reason: str | None = None
    rejected_at: ReplayState | None = None

    @property
    def accepted(self) -> bool:
        return self.state is ReplayState.ACCEPTED


def is_rotated(puzzle: Puzzle) -> bool:
    """Whether the puzzle's pages are shown from the other side of the board.

    Lichess puzzles start with the opponent's move, so a puzzle whose FEN says
    white to move is solved by black and is drawn with black at the bottom.
    """
    return puzzle.side_to_move == "w"


def replay_moves(puzzle: Puzzle) -> tuple[tuple[PageRecord, ...], str]:
    """Play every move of ``puzzle`` and return its pages and the last moved piece.

    >>> from chess_rom.puzzles import Puzzle
    >>> puzzle = Puzzle("demo", "4k3/8/8/8/8/8/8/4K3", "b", ("e8d8", "e1e2"), 1500, ())
    >>> pages, piece = replay_moves(puzzle)
    >>> [(p.from_index, p.to_index, p.move_number) for p in pages], piece
    ([(4, 3, 1), (60, 52, 2)], 'K')
    """
    rotated = is_rotated(puzzle)
    board = expand(puzzle.fen, puzzle.side_to_move)
    total_moves = puzzle.num_moves
    moved_piece = ""
    pages: list[PageRecord] = []

    for move_number, token in enumerate(puzzle.moves, start=1):
        move = parse_move(token)
        board, moved_piece = apply_move(board, move)
        from_index, to_index = move_indices(move, rotated)
        pages.append(
            PageRecord(
                puzzle_id=puzzle.puzzle_id,
                board=rotate180(board) if rotated else board,
                from_index=from_index,
                to_index=to_index,
                move_number=move_number,
                total_moves=total_moves,
            )
        )
        logger.debug("Processed move %d of %s", move_number, puzzle.puzzle_id)

    return tuple(pages), moved_piece


def replay_puzzle(puzzle: Puzzle, config: FilterConfig) -> PuzzleResult:
    """Filter and replay a single puzzle.

    Pre-replay filters reject the puzzle without touching the board. The last
    moved piece filter can only run after the full replay; a puzzle failing it
    keeps none of its pages.
    """
    reason = skip_reason(puzzle, config)
    if reason is not None:
        logger.debug("Skipped %s: %s", puzzle.puzzle_id, reason)
        return PuzzleResult(puzzle, ReplayState.REJECTED, reason=reason, rejected_at=ReplayState.FILTERING)

    pages, last_piece = replay_moves(puzzle)

    if not accepts_last_piece(last_piece, config):
        reason = f"last moved piece {last_piece} not in {config.last_move_pieces!r}"
        logger.debug("Skipped %s: %s", puzzle.puzzle_id, reason)
        return PuzzleResult(puzzle, ReplayState.REJECTED, reason=reason, rejected_at=ReplayState.REPLAYING)

    return PuzzleResult(puzzle, ReplayState.ACCEPTED, pages=pages)


@dataclass(frozen=True)
class ReplayContext:
    """Run-level totals, folded from one puzzle result at a time."""

    max_pages: int
    processed_count: int = 0
    puzzle_count: int = 0
    page_count: int = 0
    skipped_count: int = 0
    rejected_count: int = 0
    capacity_reached: bool = False

    @property
    def is_full(self) -> bool:
        return self.page_count >= self.max_pages

    def fold(self, result: PuzzleResult) -> "ReplayContext":
        """Return a new context that accounts for ``result``.

        >>> from chess_rom.puzzles import Puzzle
        >>> puzzle = Puzzle("demo", "4k3/8/8/8/8/8/8/4K3", "b", ("e8d8", "e1e2"), 1500, ())
        >>> context = ReplayContext(max_pages=10).fold(replay_puzzle(puzzle, FilterConfig()))
        >>> context.puzzle_count, context.page_count, context.processed_count
        (1, 2, 1)
        """
        processed = self.processed_count + 1
        if result.accepted:
            return replace(
                self,
                processed_count=processed,
                puzzle_count=self.puzzle_count + 1,
                page_count=self.page_count + len(result.pages),
            )
        if result.rejected_at is ReplayState.FILTERING:
            return replace(self, processed_count=processed, skipped_count=self.skipped_count + 1)
        return replace(self, processed_count=processed, rejected_count=self.rejected_count + 1)


def compile_puzzles(
    puzzles: Iterable[Puzzle],
    config: FilterConfig,
    max_pages: int,
    on_accepted: Callable[[PuzzleResult], object] | None = None,
) -> ReplayContext:
    """Replay ``puzzles`` in order until the input ends or the page cap is hit.

    ``on_accepted`` receives every accepted result, in input order. Rejected
    puzzles never reach it, so the final page count always equals the number
    of pages handed out.
    """
    context = ReplayContext(max_pages=max_pages)

    for puzzle in puzzles:
        if context.is_full:
            logger.info("Maximum pages limit reached (%d)", max_pages)
            return replace(context, capacity_reached=True)

        result = replay_puzzle(puzzle, config)
        if result.accepted and on_accepted is not None:
            on_accepted(result)
        context = context.fold(result)

    return context
