"""Pack puzzle record units into a flash image for the display device.

The image is a sequence of fixed-size rows, one record per row, padded with
zeros up to the configuration sector that occupies the last bytes of flash.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from itertools import groupby
from pathlib import Path

from chess_rom.config import settings
from chess_rom.logging_config import setup_logging

from .errors import ChessRomError, MalformedInput, RecordTooLong
from .records import FIRST_MOVE_SUFFIX, UNIT_SUFFIX, parse_record

logger = setup_logging(__name__)

# magic, num_pages, total_size, num_types, font_size, reserved, type0..3, size0..3
CONFIG_STRUCT = struct.Struct("<IIIBBH4B4I")
NUM_PAGE_TYPES = 4


class PageType(IntEnum):
    """Content kinds understood by the device firmware."""

    UNUSED = 0
    TEXT = 1
    RAW_IMAGE = 2
    SENSORS = 3
    CHESS_PUZZLE = 4


@dataclass(frozen=True)
class RomLayout:
    flash_size: int = settings.FLASH_SIZE
    row_size: int = settings.ROW_SIZE
    config_sector_size: int = settings.CONFIG_SECTOR_SIZE
    max_moves_per_puzzle: int = settings.MAX_MOVES_PER_PUZZLE
    magic: int = settings.ROM_MAGIC
    font_size: int = settings.FONT_SIZE
    page_type: PageType = PageType.CHESS_PUZZLE

    def __post_init__(self) -> None:
        if self.row_size <= 0:
            raise ChessRomError(f"Row size must be positive, got {self.row_size}")
        if self.config_sector_size < CONFIG_STRUCT.size:
            raise ChessRomError(
                f"Config sector of {self.config_sector_size} bytes cannot hold the {CONFIG_STRUCT.size} byte header"
            )
        if self.flash_size <= self.config_sector_size:
            raise ChessRomError(f"Flash size {self.flash_size} leaves no room for data")

    @property
    def data_size(self) -> int:
        """Bytes available before the configuration sector."""
        return self.flash_size - self.config_sector_size

    @property
    def max_pages(self) -> int:
        """
        >>> RomLayout().max_pages
        174720
        """
        return self.data_size // self.row_size

    @property
    def max_puzzle_size(self) -> int:
        return self.row_size * self.max_moves_per_puzzle


@dataclass(frozen=True)
class RecordUnit:
    """One record file: its name decides ordering, its bytes go into a row."""

    name: str
    data: bytes

    @property
    def puzzle_key(self) -> str:
        """Name without the move number, shared by all pages of a puzzle.

        >>> RecordUnit("puzzle-00sHx-1760-mate-03.txt", b"").puzzle_key
        'puzzle-00sHx-1760-mate'
        """
        return self.name.rsplit("-", 1)[0]

    @property
    def is_first_move(self) -> bool:
        return self.name.endswith(FIRST_MOVE_SUFFIX)

    @property
    def sort_key(self) -> bytes:
        # byte order keeps upper and lower case ids from interleaving
        return self.name.encode()


@dataclass(frozen=True)
class RomSummary:
    num_pages: int
    puzzle_count: int
    used_bytes: int
    free_bytes: int
    truncated: bool


def load_units(directory: Path) -> list[RecordUnit]:
    """Read every record file of ``directory`` in byte order of their names."""
    units = [RecordUnit(path.name, path.read_bytes()) for path in directory.glob(f"*{UNIT_SUFFIX}")]
    return sorted(units, key=lambda unit: unit.sort_key)


def group_units(units: list[RecordUnit]) -> list[list[RecordUnit]]:
    """Group consecutive units belonging to the same puzzle.

    >>> units = [RecordUnit(name, b"") for name in ("puzzle-a-1-none-01.txt", "puzzle-a-1-none-02.txt",
    ...                                              "puzzle-b-2-none-01.txt")]
    >>> [len(group) for group in group_units(units)]
    [2, 1]
    """
    return [list(group) for _, group in groupby(units, key=lambda unit: unit.puzzle_key)]


def pack_config(num_pages: int, layout: RomLayout) -> bytes:
    """Build the configuration sector describing ``num_pages`` rows.

    >>> sector = pack_config(3, RomLayout())
    >>> len(sector)
    4096
    >>> CONFIG_STRUCT.unpack(sector[: CONFIG_STRUCT.size])
    (286463769, 3, 288, 1, 1, 0, 4, 0, 0, 0, 96, 0, 0, 0)
    """
    page_types = [int(layout.page_type)] + [int(PageType.UNUSED)] * (NUM_PAGE_TYPES - 1)
    page_sizes = [layout.row_size] + [0] * (NUM_PAGE_TYPES - 1)
    try:
        header = CONFIG_STRUCT.pack(
            layout.magic,
            num_pages,
            num_pages * layout.row_size,
            1,
            layout.font_size,
            0,
            *page_types,
            *page_sizes,
        )
    except struct.error as e:
        raise ChessRomError(f"Cannot encode config sector: {e}") from e
    return header + bytes(layout.config_sector_size - len(header))


def _row_payload(unit: RecordUnit, row_size: int) -> bytes:
    payload = unit.data.rstrip(b"\r\n")
    if len(payload) > row_size:
        raise RecordTooLong(f"Record {unit.name} has {len(payload)} bytes, row size is {row_size}")
    try:
        parse_record(payload.decode("ascii"))
    except UnicodeDecodeError as e:
        raise MalformedInput(f"Record {unit.name} is not ASCII") from e
    return payload


def assemble(units: list[RecordUnit], layout: RomLayout | None = None) -> tuple[bytes, RomSummary]:
    """Build a complete flash image from record units.

    Units are ordered by name and packed one per row. Packing stops before a
    puzzle once the space left before the configuration sector is smaller than
    the largest allowed puzzle or than the puzzle itself, so a puzzle is never
    split. The result is always exactly ``layout.flash_size`` bytes.
    """
    layout = layout or RomLayout()
    ordered = sorted(units, key=lambda unit: unit.sort_key)

    image = bytearray()
    num_pages = 0
    puzzle_count = 0
    truncated = False

    for group in group_units(ordered):
        free = layout.data_size - len(image)
        if free < layout.max_puzzle_size or free < len(group) * layout.row_size:
            logger.info("Stopping - next puzzle would exceed ROM capacity")
            truncated = True
            break

        for unit in group:
            payload = _row_payload(unit, layout.row_size)
            image += payload
            image += bytes(layout.row_size - len(payload))
            num_pages += 1

        if group[0].is_first_move:
            puzzle_count += 1

    used_bytes = len(image)
    free_bytes = layout.data_size - used_bytes
    logger.info("Used %d bytes (%d free)", used_bytes, free_bytes)

    image += bytes(free_bytes)
    image += pack_config(num_pages, layout)

    summary = RomSummary(
        num_pages=num_pages,
        puzzle_count=puzzle_count,
        used_bytes=used_bytes,
        free_bytes=free_bytes,
        truncated=truncated,
    )
    return bytes(image), summary


def write_rom(path: Path, image: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(image)
