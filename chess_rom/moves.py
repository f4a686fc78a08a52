"""Apply UCI moves to expanded boards and map squares to board indices."""

from dataclasses import dataclass

import chess

from .board import BOARD_SIZE, EMPTY, validate_board
from .errors import InvalidMove, InvalidSquare

LAST_INDEX = BOARD_SIZE - 1
# n, b, r, q
PROMOTION_SYMBOLS = chess.PIECE_SYMBOLS[chess.KNIGHT : chess.KING]


@dataclass(frozen=True)
class Move:
    """A move token split into its squares and optional promotion letter."""

    source: str
    destination: str
    promotion: str | None = None

    @property
    def uci(self) -> str:
        return f"{self.source}{self.destination}{self.promotion or ''}"


def square_index(square: str, rotated: bool = False) -> int:
    """Index of ``square`` in the expanded board.

    Index 0 is a8 and index 63 is h1. With ``rotated`` the index is reflected
    through the board centre, matching ``board.rotate180``.

    >>> square_index("a8"), square_index("h1"), square_index("e2"), square_index("g1")
    (0, 63, 52, 62)
    >>> square_index("e2", rotated=True)
    11
    >>> square_index("i9")
    Traceback (most recent call last):
    ...
    chess_rom.errors.InvalidSquare: Invalid square 'i9'
    """
    try:
        chess_square = chess.parse_square(square)
    except ValueError as e:
        raise InvalidSquare(f"Invalid square {square!r}") from e

    # python-chess counts from a1, the expanded board from a8
    index = chess.square_mirror(chess_square)
    if rotated:
        index = abs(index - LAST_INDEX)
    return index


def parse_move(token: str) -> Move:
    """Parse a 4 or 5 character UCI token.

    >>> parse_move("a7a8q")
    Move(source='a7', destination='a8', promotion='q')
    >>> parse_move("e1g1").uci
    'e1g1'
    """
    if len(token) not in (4, 5):
        raise InvalidMove(f"Move {token!r} must have 4 or 5 characters")

    source, destination = token[:2], token[2:4]
    for square in (source, destination):
        square_index(square)

    promotion = token[4:] or None
    if promotion is not None and promotion.lower() not in PROMOTION_SYMBOLS:
        raise InvalidMove(f"Unknown promotion piece {promotion!r} in move {token!r}")

    return Move(source=source, destination=destination, promotion=promotion)


def move_indices(move: Move | str, rotated: bool = False) -> tuple[int, int]:
    """Source and destination indices of a move.

    >>> move_indices("e2e4")
    (52, 36)
    >>> move_indices("g1f3", rotated=True)
    (1, 18)
    """
    if isinstance(move, str):
        move = parse_move(move)
    return square_index(move.source, rotated), square_index(move.destination, rotated)


def apply_move(board: str, move: Move | str) -> tuple[str, str]:
    """Play ``move`` on an expanded board.

    Only the source and destination squares change. The source becomes empty
    and the destination receives the moving piece, or the promotion piece cased
    like the mover. Returns the new board and the symbol of the moved piece.

    >>> from chess_rom.board import compact, expand
    >>> new_board, piece = apply_move(expand("8/P7/8/8/8/8/8/8"), "a7a8q")
    >>> compact(new_board), piece
    ('Q7/8/8/8/8/8/8/8', 'P')
    >>> new_board, piece = apply_move(expand("8/8/8/8/8/8/7p/8"), "h2h1r")
    >>> compact(new_board), piece
    ('8/8/8/8/8/8/8/7r', 'p')
    """
    if isinstance(move, str):
        move = parse_move(move)
    validate_board(board)

    source, destination = move_indices(move)
    moved_piece = board[source]

    placed = moved_piece
    if move.promotion:
        placed = move.promotion.upper() if moved_piece.isupper() else move.promotion.lower()

    squares = list(board)
    squares[source] = EMPTY
    squares[destination] = placed
    return "".join(squares), moved_piece
