"""Compile chess puzzles into a ROM image for a small display device."""

from .board import compact, expand, rotate180
from .errors import ChessRomError, InvalidMove, InvalidSquare, MalformedBoard, MalformedInput, RecordTooLong
from .filters import FilterConfig
from .moves import Move, apply_move, move_indices, parse_move, square_index
from .puzzles import Puzzle, iter_puzzles, parse_puzzle_row
from .records import RecordWriter, format_record, parse_record, unit_name
from .replay import PageRecord, PuzzleResult, ReplayContext, ReplayState, compile_puzzles, replay_puzzle
from .rom import PageType, RecordUnit, RomLayout, RomSummary, assemble, load_units, pack_config, write_rom

__all__ = [
    # Board codec
    "compact",
    "expand",
    "rotate180",
    # Errors
    "ChessRomError",
    "InvalidMove",
    "InvalidSquare",
    "MalformedBoard",
    "MalformedInput",
    "RecordTooLong",
    # Move engine
    "Move",
    "apply_move",
    "move_indices",
    "parse_move",
    "square_index",
    # Puzzles and replay
    "FilterConfig",
    "PageRecord",
    "Puzzle",
    "PuzzleResult",
    "ReplayContext",
    "ReplayState",
    "compile_puzzles",
    "iter_puzzles",
    "parse_puzzle_row",
    "replay_puzzle",
    # Records
    "RecordWriter",
    "format_record",
    "parse_record",
    "unit_name",
    # ROM
    "PageType",
    "RecordUnit",
    "RomLayout",
    "RomSummary",
    "assemble",
    "load_units",
    "pack_config",
    "write_rom",
]
