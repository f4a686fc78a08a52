"""
Configuration module for chess_rom.
"""

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    # Flash layout of the target device
    FLASH_SIZE: int = 16 * 1024 * 1024
    ROW_SIZE: int = 96
    CONFIG_SECTOR_SIZE: int = 0x1000
    MAX_MOVES_PER_PUZZLE: int = 4

    # Configuration sector fields
    ROM_MAGIC: int = 0x11131719
    FONT_SIZE: int = 1

    # Longest text line a single record may hold (must fit in one row)
    RECORD_BUDGET: int = 96

    # Output locations
    PUZZLES_DIR: str = "fenpuzzles"
    ROM_FILE: str = "lightnote.rom"


settings = Settings()
