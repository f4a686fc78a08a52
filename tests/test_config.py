"""Tests for environment driven settings."""

import pytest

from chess_rom.config import Settings
from chess_rom.records import RecordWriter
from chess_rom.rom import RomLayout


def test_defaults():
    config = Settings()

    assert config.FLASH_SIZE == 16 * 1024 * 1024
    assert config.ROW_SIZE == 96
    assert config.CONFIG_SECTOR_SIZE == 4096
    assert config.ROM_MAGIC == 0x11131719


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ROW_SIZE", "64")
    monkeypatch.setenv("RECORD_BUDGET", "75")
    monkeypatch.setenv("PUZZLES_DIR", "units")

    config = Settings()

    assert config.ROW_SIZE == 64
    assert config.RECORD_BUDGET == 75
    assert config.PUZZLES_DIR == "units"
    assert RomLayout(row_size=config.ROW_SIZE).max_pages == (16 * 1024 * 1024 - 4096) // 64


def test_record_budget_follows_settings(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setattr("chess_rom.records.settings", Settings(RECORD_BUDGET=75))

    assert RecordWriter(tmp_path).record_budget == 75
