"""
Referee: owns the board and applies validated placements.

- apply(): places a mark in an empty cell, enforcing alternation.
- status(): current Evaluation derived from the board.
- reset(): back to the canonical empty board.

Used by GameRunner to track state; nothing here is persisted.
"""
from __future__ import annotations

from typing import Optional

from .rules import BOARD_SIZE, MARKS, Cell, Evaluation, empty_cells, evaluate, first_empty


class Referee:
    """Plain Tic-Tac-Toe referee around a 9-cell list."""

    def __init__(self, first_mark: str = "X"):
        if first_mark not in MARKS:
            raise ValueError(f"Unknown mark {first_mark!r}")
        self.first_mark = first_mark
        self.board: list[Cell] = [None] * BOARD_SIZE

    # ---------------- Move Application -----------------
    def can_place(self, index) -> bool:
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < BOARD_SIZE and self.board[index] is None

    def apply(self, index: int, mark: str) -> bool:
        """Place mark at index. Returns False (board untouched) if the placement is not legal."""
        if mark not in MARKS or not self.can_place(index):
            return False
        if self.status().terminal:
            return False
        if mark != self.mark_to_move():
            return False
        self.board[index] = mark
        return True

    def mark_to_move(self) -> str:
        placed = BOARD_SIZE - len(empty_cells(self.board))
        if placed % 2 == 0:
            return self.first_mark
        return "O" if self.first_mark == "X" else "X"

    def first_empty(self) -> Optional[int]:
        return first_empty(self.board)

    def snapshot(self) -> list[Cell]:
        return list(self.board)

    # ---------------- Status -----------------
    def status(self) -> Evaluation:
        return evaluate(self.board)

    def reset(self) -> None:
        self.board = [None] * BOARD_SIZE
