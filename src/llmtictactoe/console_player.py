"""Interactive terminal player that only submits empty cells."""
from __future__ import annotations
from typing import Sequence

from .rules import empty_cells


def render_board(board: Sequence) -> str:
    """3x3 grid; empty cells show their index so the player knows what to type."""
    rows = []
    for r in range(3):
        cells = [board[r * 3 + c] or str(r * 3 + c) for c in range(3)]
        rows.append(" " + " | ".join(cells))
    return "\n---+---+---\n".join(rows)


class ConsolePlayer:
    name = "Human"

    def __init__(self, input_fn=input, print_fn=print):
        self._input = input_fn
        self._print = print_fn

    def choose(self, board: Sequence, mark: str) -> int:
        """Prompt the user for an empty cell; repeat until valid."""
        open_cells = empty_cells(board)
        while True:
            self._print(f"\nYour turn ({mark}).")
            self._print(render_board(board))
            raw = self._input("Enter a cell number (0-8): ").strip()
            if not raw:
                continue
            if raw.isdigit() and int(raw) in open_cells:
                return int(raw)
            self._print("That cell is not available. Please pick an empty cell.")
