"""Tests for page record serialization and the unit directory writer."""

from pathlib import Path

import pytest

from chess_rom.board import EMPTY, expand
from chess_rom.errors import MalformedInput, RecordTooLong
from chess_rom.filters import MAX_MOVE_NUMBER, FilterConfig
from chess_rom.puzzles import Puzzle, iter_puzzles
from chess_rom.records import RecordWriter, format_record, parse_record, unit_name
from chess_rom.replay import PageRecord, replay_puzzle

BOARD = expand("r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R")


def test_format_record_layout():
    page = PageRecord("00008", BOARD, 3, 1, 2, 6)
    assert format_record(page) == f"00008,{BOARD},03,01,2,6\n"


def test_format_record_fits_a_row():
    page = PageRecord("00008", BOARD, 63, 62, 12, 12)
    assert len(format_record(page)) <= 96


def test_parse_record_round_trip():
    page = PageRecord("0000D", BOARD, 52, 36, 1, 4)
    assert parse_record(format_record(page)) == page


@pytest.mark.parametrize(
    "line",
    [
        "",
        f"00008,{BOARD},03,01,2",
        f"00008,{BOARD},03,01,2,6,7",
        f"00008,{BOARD},xx,01,2,6",
        f"00008,{BOARD},03,99,2,6",
        f"00008,{BOARD},03,01,7,6",
        f"00008,{BOARD[:-1]},03,01,2,6",
    ],
)
def test_parse_record_rejects_malformed_lines(line: str):
    with pytest.raises(MalformedInput):
        parse_record(line)


def test_unit_name():
    assert unit_name("0009B", 1112, "none", 1) == "puzzle-0009B-1112-none-01.txt"


def test_unit_names_sort_in_move_order():
    names = [unit_name("abc", 1500, "mate", n) for n in range(1, MAX_MOVE_NUMBER + 1)]
    assert sorted(names, key=str.encode) == names


class TestRecordWriter:
    def test_reset_creates_missing_directory(self, tmp_path: Path):
        directory = tmp_path / "out" / "fenpuzzles"

        RecordWriter(directory).reset()

        assert directory.is_dir()
        assert list(directory.iterdir()) == []

    def test_reset_removes_only_unit_files(self, tmp_path: Path):
        (tmp_path / unit_name("00008", 1913, "none", 1)).write_text("old")
        (tmp_path / "notes.md").write_text("keep")
        (tmp_path / "stale.txt").write_text("keep")

        RecordWriter(tmp_path).reset()

        assert sorted(p.name for p in tmp_path.iterdir()) == ["notes.md", "stale.txt"]

    def test_write_puzzle(self, tmp_path: Path, puzzle_lines: list[str]):
        puzzle = next(iter_puzzles(puzzle_lines))
        result = replay_puzzle(puzzle, FilterConfig())
        writer = RecordWriter(tmp_path, theme_tag="mate")

        paths = writer.write_puzzle(puzzle, result.pages)

        assert [p.name for p in paths] == [f"puzzle-00008-1913-mate-0{n}.txt" for n in range(1, 7)]
        first = paths[0].read_text()
        assert first.endswith(",1,6\n")
        assert parse_record(first) == result.pages[0]

    def test_record_over_budget_writes_nothing(self, tmp_path: Path):
        writer = RecordWriter(tmp_path, record_budget=75)
        pages = [PageRecord("00008", EMPTY * 64, 0, 1, n, 2) for n in (1, 2)]

        with pytest.raises(RecordTooLong):
            writer.write_puzzle(Puzzle("00008", "8/8/8/8/8/8/8/8", "w", ("a1a2", "a2a3"), 1500, ()), pages)

        assert list(tmp_path.iterdir()) == []
