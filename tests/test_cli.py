"""Integration tests for the chess-rom CLI."""

import logging
from pathlib import Path

from click.testing import CliRunner

from chess_rom.cli import main
from chess_rom.config import settings
from chess_rom.logging_config import PACKAGE_LOGGER, set_verbose
from chess_rom.rom import CONFIG_STRUCT


def read_header(rom: Path) -> tuple[int, ...]:
    data = rom.read_bytes()
    offset = settings.FLASH_SIZE - settings.CONFIG_SECTOR_SIZE
    return CONFIG_STRUCT.unpack(data[offset : offset + CONFIG_STRUCT.size])


def test_generate_writes_units_without_rom(puzzle_csv: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "fenpuzzles"

    runner = CliRunner()
    result = runner.invoke(
        main,
        ["generate", str(puzzle_csv), "--output-dir", str(output_dir), "--last-move-pieces", "q", "--no-rom"],
    )

    assert result.exit_code == 0, result.output
    assert "Puzzles generated: 2" in result.output
    assert "Puzzles rejected by last moved piece: 2" in result.output
    assert "Total screens/pages: 10 (0 KB)" in result.output

    names = sorted(p.name for p in output_dir.iterdir())
    assert len(names) == 10
    assert names[0] == "puzzle-00008-1913-none-01.txt"
    assert not any("0000D" in name or "000aY" in name for name in names)
    assert not (tmp_path / "lightnote.rom").exists()


def test_generate_builds_rom(puzzle_csv: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "fenpuzzles"
    rom = tmp_path / "lightnote.rom"

    runner = CliRunner()
    result = runner.invoke(
        main,
        ["generate", str(puzzle_csv), "--output-dir", str(output_dir), "--rom", str(rom), "--theme-tag", "short"],
    )

    assert result.exit_code == 0, result.output
    assert "Puzzles generated: 3" in result.output
    assert "3 puzzles in 12 rows..." in result.output
    assert rom.stat().st_size == settings.FLASH_SIZE
    assert read_header(rom)[1:3] == (12, 12 * settings.ROW_SIZE)


def test_dry_run_writes_nothing(puzzle_lines: list[str], tmp_path: Path) -> None:
    output_dir = tmp_path / "fenpuzzles"

    runner = CliRunner()
    result = runner.invoke(
        main,
        ["generate", "--dry-run", "--output-dir", str(output_dir), "--exclude-pieces", "N"],
        input="\n".join(puzzle_lines) + "\n",
    )

    assert result.exit_code == 0, result.output
    assert "Dry run, no puzzles will be generated..." in result.output
    assert "Puzzles skipped: 4" in result.output
    assert not output_dir.exists()


def test_malformed_input_fails(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["generate", "--output-dir", str(tmp_path / "out"), "--no-rom"],
        input="PuzzleId,FEN,Moves\nbroken,row\n",
    )

    assert result.exit_code == 1
    assert "Expected at least 8 fields" in result.output


def test_build_rom_from_existing_units(puzzle_csv: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "fenpuzzles"
    rom = tmp_path / "build" / "puzzles.rom"

    runner = CliRunner()
    generated = runner.invoke(main, ["generate", str(puzzle_csv), "--output-dir", str(output_dir), "--no-rom"])
    assert generated.exit_code == 0, generated.output

    result = runner.invoke(main, ["build-rom", "--input-dir", str(output_dir), "--output", str(rom)])

    assert result.exit_code == 0, result.output
    assert "4 puzzles in 18 rows..." in result.output
    assert rom.stat().st_size == settings.FLASH_SIZE
    assert read_header(rom)[1] == 18


def test_generate_keeps_unrelated_files_in_output_dir(puzzle_csv: Path, tmp_path: Path) -> None:
    output_dir = tmp_path / "work"
    output_dir.mkdir()
    (output_dir / "notes.md").write_text("keep me")

    runner = CliRunner()
    result = runner.invoke(main, ["generate", str(puzzle_csv), "--output-dir", str(output_dir), "--no-rom"])

    assert result.exit_code == 0, result.output
    assert (output_dir / "notes.md").read_text() == "keep me"
    assert len(list(output_dir.glob("puzzle-*.txt"))) == 18


def test_max_moves_above_two_digits_is_refused(puzzle_csv: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["generate", str(puzzle_csv), "--output-dir", str(tmp_path / "out"), "--no-rom", "--max-moves", "100"],
    )

    assert result.exit_code == 2
    assert "--max-moves" in result.output
    assert not (tmp_path / "out").exists()


def test_verbose_prints_configuration_and_enables_debug(puzzle_csv: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    try:
        result = runner.invoke(
            main,
            ["generate", str(puzzle_csv), "-v", "--dry-run", "--output-dir", str(tmp_path / "out")],
        )

        assert result.exit_code == 0, result.output
        assert "Running with configuration:" in result.output
        assert "  max_moves: 99" in result.output
        assert logging.getLogger(PACKAGE_LOGGER).getEffectiveLevel() == logging.DEBUG
    finally:
        set_verbose(False)
