"""Shared fixtures: a handful of rows from the Lichess puzzle database."""

from pathlib import Path

import pytest

HEADER = "PuzzleId,FEN,Moves,Rating,RatingDeviation,Popularity,NbPlays,Themes,GameUrl,OpeningTags"

# Last moved pieces: Q, b, Q, n
PUZZLE_ROWS = [
    "00008,r6k/pp2r2p/4Rp1Q/3p4/8/1N1P2R1/PqP2bPP/7K b - - 0 24,f2g3 e6e7 b2b1 b3c1 b1c1 h6c1,1913,75,94,6230,"
    "crushing hangingPiece long middlegame,https://lichess.org/787zsVup/black#48,",
    "0000D,5rk1/1p3ppp/pq3b2/8/8/1P1Q1N2/P4PPP/3R2K1 w - - 2 27,d3d6 f8d8 d6d8 f6d8,1426,500,2,0,"
    "advantage endgame short,https://lichess.org/F8M8OS71#53,",
    "0009B,r2qr1k1/b1p2ppp/pp4n1/P1P1p3/4P1n1/B2P2Pb/3NBP1P/RN1QR1K1 b - - 1 16,b6c5 e2g4 h3g4 d1g4,1112,74,96,"
    "25296,advantage middlegame short,https://lichess.org/4MWQCxQ6/black#32,Kings_Pawn_Game",
    "000aY,r4rk1/pp3ppp/2n1b3/q1pp2B1/8/P1Q2NP1/1PP1PP1P/2KR3R w - - 0 15,g5e7 a5c3 b2c3 c6e7,1510,75,96,"
    "651,advantage master middlegame short,https://lichess.org/iihZGl6t#29,",
]


@pytest.fixture
def puzzle_rows() -> list[str]:
    return list(PUZZLE_ROWS)


@pytest.fixture
def puzzle_lines() -> list[str]:
    return [HEADER, *PUZZLE_ROWS]


@pytest.fixture
def puzzle_csv(tmp_path: Path, puzzle_lines: list[str]) -> Path:
    path = tmp_path / "lichess_db_puzzle.csv"
    path.write_text("\n".join(puzzle_lines) + "\n")
    return path
