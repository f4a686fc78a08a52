"""Conversion between compact FEN placement and the expanded 64-square board.

The expanded board is a plain string of 64 symbols, one per square, starting at
a8 and ending at h1. Pieces use FEN letters and every empty square is ``1``.
"""

from itertools import groupby

from .errors import MalformedBoard

BOARD_SIZE = 64
RANK_SIZE = 8
EMPTY = "1"
RANK_SEPARATOR = "/"
PIECE_SYMBOLS = frozenset("PNBRQKpnbrqk")
RUN_DIGITS = frozenset("2345678")
SIDES = ("w", "b")


def _expand_rank(rank: str, placement: str) -> str:
    squares: list[str] = []
    for symbol in rank:
        if symbol in PIECE_SYMBOLS or symbol == EMPTY:
            squares.append(symbol)
        elif symbol in RUN_DIGITS:
            squares.append(EMPTY * int(symbol))
        else:
            raise MalformedBoard(f"Unknown symbol {symbol!r} in board {placement!r}")
    return "".join(squares)


def expand(compact: str, side_to_move: str | None = None) -> str:
    """Expand a FEN piece placement into a 64-symbol board.

    Trailing FEN fields (side to move, castling rights, ...) are ignored, and a
    board that is already expanded passes through unchanged.

    >>> expand("8/8/8/8/8/8/8/8") == EMPTY * 64
    True
    >>> expand("4k3/8/8/8/8/8/8/4K3 w - - 0 1")[:8]
    '1111k111'
    >>> expand(expand("4k3/8/8/8/8/8/8/4K3")) == expand("4k3/8/8/8/8/8/8/4K3")
    True
    >>> expand("4x3/8/8/8/8/8/8/4K3")
    Traceback (most recent call last):
    ...
    chess_rom.errors.MalformedBoard: Unknown symbol 'x' in board '4x3/8/8/8/8/8/8/4K3'
    """
    if side_to_move is not None and side_to_move not in SIDES:
        raise MalformedBoard(f"Unknown side to move {side_to_move!r}")

    fields = compact.split()
    if not fields:
        raise MalformedBoard("Empty board")
    placement = fields[0]

    ranks = placement.split(RANK_SEPARATOR)
    if len(ranks) not in (1, RANK_SIZE):
        raise MalformedBoard(f"Expected {RANK_SIZE} ranks in board {placement!r}, got {len(ranks)}")

    expanded_ranks: list[str] = []
    for rank in ranks:
        expanded = _expand_rank(rank, placement)
        if len(ranks) == RANK_SIZE and len(expanded) != RANK_SIZE:
            raise MalformedBoard(f"Rank {rank!r} of board {placement!r} does not cover {RANK_SIZE} squares")
        expanded_ranks.append(expanded)

    board = "".join(expanded_ranks)
    if len(board) != BOARD_SIZE:
        raise MalformedBoard(f"Board {placement!r} expands to {len(board)} squares instead of {BOARD_SIZE}")
    return board


def validate_board(board: str) -> None:
    """Raise MalformedBoard unless ``board`` is a valid expanded board."""
    if len(board) != BOARD_SIZE:
        raise MalformedBoard(f"Expanded board must have {BOARD_SIZE} squares, got {len(board)}")
    unknown = set(board) - PIECE_SYMBOLS - {EMPTY}
    if unknown:
        raise MalformedBoard(f"Unknown symbols {''.join(sorted(unknown))!r} in expanded board")


def ranks(board: str) -> list[str]:
    """Split an expanded board into its eight ranks, rank 8 first."""
    validate_board(board)
    return [board[start : start + RANK_SIZE] for start in range(0, BOARD_SIZE, RANK_SIZE)]


def compact(board: str) -> str:
    """Collapse an expanded board back into FEN piece placement.

    >>> compact(expand("r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R"))
    'r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R'
    >>> compact(EMPTY * 64)
    '8/8/8/8/8/8/8/8'
    """
    compact_ranks: list[str] = []
    for rank in ranks(board):
        parts: list[str] = []
        for symbol, group in groupby(rank):
            run = "".join(group)
            parts.append(str(len(run)) if symbol == EMPTY else run)
        compact_ranks.append("".join(parts))
    return RANK_SEPARATOR.join(compact_ranks)


def rotate180(board: str) -> str:
    """View the board from the opposite side.

    Reversing every rank and then the rank order is the same as reversing the
    whole 64-symbol string.

    >>> compact(rotate180(expand("rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR")))
    'RNBKQBNR/PPPP1PPP/8/4P3/8/8/pppppppp/rnbkqbnr'
    """
    validate_board(board)
    return board[::-1]
