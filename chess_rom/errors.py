"""Exceptions raised while compiling puzzles into a ROM image."""


class ChessRomError(Exception):
    """Base class for all chess_rom errors."""


class MalformedInput(ChessRomError):
    """A puzzle row or record line could not be parsed."""


class MalformedBoard(ChessRomError):
    """A board string is not a valid compact or expanded board."""


class InvalidMove(ChessRomError):
    """A move token cannot be applied to a board."""


class InvalidSquare(InvalidMove):
    """A square name does not map to an index in 0..63."""


class RecordTooLong(ChessRomError):
    """A serialized record does not fit in its text budget or ROM row."""
