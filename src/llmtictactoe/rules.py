"""
Tic-Tac-Toe rules: marks, winning lines and the win/draw evaluator.

- evaluate(): checks the 8 fixed lines in order and reports the first match.
- Outcome is always derived from a board, never stored beside it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Sequence

Mark = Literal["X", "O"]
Cell = Optional[str]
Outcome = Literal["in_progress", "x_wins", "o_wins", "draw"]

MARKS: tuple[Mark, Mark] = ("X", "O")
BOARD_SIZE = 9

WINNING_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)

_WIN_OUTCOME = {"X": "x_wins", "O": "o_wins"}


@dataclass(frozen=True)
class Evaluation:
    outcome: Outcome
    winner: Optional[str] = None
    line: Optional[tuple[int, int, int]] = None

    @property
    def terminal(self) -> bool:
        return self.outcome != "in_progress"

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome,
            "winner": self.winner,
            "winning_line": list(self.line) if self.line else None,
        }


def other_mark(mark: str) -> Mark:
    if mark not in MARKS:
        raise ValueError(f"Unknown mark {mark!r}")
    return "O" if mark == "X" else "X"


def check_board(board: Sequence[Cell]) -> None:
    """Raise ValueError unless board is 9 cells of None/'X'/'O'."""
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")
    for idx, cell in enumerate(board):
        if cell is not None and cell not in MARKS:
            raise ValueError(f"Cell {idx} holds unknown value {cell!r}")


def evaluate(board: Sequence[Cell]) -> Evaluation:
    """Return the outcome of a board: first winning line, else draw if full, else in progress."""
    check_board(board)
    for line in WINNING_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Evaluation(outcome=_WIN_OUTCOME[board[a]], winner=board[a], line=line)
    if all(cell is not None for cell in board):
        return Evaluation(outcome="draw")
    return Evaluation(outcome="in_progress")


def empty_cells(board: Sequence[Cell]) -> list[int]:
    return [i for i, cell in enumerate(board) if cell is None]


def first_empty(board: Sequence[Cell]) -> Optional[int]:
    for i, cell in enumerate(board):
        if cell is None:
            return i
    return None
