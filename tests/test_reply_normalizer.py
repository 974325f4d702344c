import unittest
from unittest.mock import AsyncMock, patch

from llmtictactoe.reply_normalizer import normalize

MODULE = "llmtictactoe.reply_normalizer"


class NormalizerTests(unittest.TestCase):
    def test_move_key_in_broken_json(self):
        self.assertEqual(normalize("{'move': 3, explanation: corner"), "3")

    def test_single_digit_in_prose(self):
        self.assertEqual(normalize("My choice is square 5."), "5")

    def test_decimals_are_not_cells(self):
        with patch(f"{MODULE}.USE_GUARD_AGENT", False):
            self.assertEqual(normalize("Confidence 0.75, no move."), "")

    def test_many_digits_defer_to_guard_agent(self):
        suggest = AsyncMock(return_value="8")
        with patch(f"{MODULE}.USE_GUARD_AGENT", True), patch(f"{MODULE}._agent_suggest", suggest):
            self.assertEqual(normalize("Cells 0, 4 are taken, so I go to the last corner."), "8")
        suggest.assert_awaited_once()

    def test_guard_agent_none(self):
        with patch(f"{MODULE}.USE_GUARD_AGENT", True), patch(f"{MODULE}._agent_suggest", AsyncMock(return_value="NONE")):
            self.assertEqual(normalize("pass"), "")

    def test_guard_agent_failure_is_contained(self):
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        with patch(f"{MODULE}.USE_GUARD_AGENT", True), patch(f"{MODULE}._agent_suggest", failing):
            self.assertEqual(normalize("pass"), "")


if __name__ == "__main__":
    unittest.main()
