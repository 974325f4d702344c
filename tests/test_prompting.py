import unittest

from llmtictactoe.prompting import DEFAULT_TEMPLATE, PromptConfig, board_listing, build_prompt_messages, render_custom_prompt


class PromptingTests(unittest.TestCase):
    def test_board_listing_one_line_per_cell(self):
        listing = board_listing(["X", None, "O", None, None, None, None, None, None])
        self.assertEqual(listing.splitlines()[:3], ["0: X", "1:", "2: O"])
        self.assertEqual(len(listing.splitlines()), 9)

    def test_unknown_placeholders_left_intact(self):
        self.assertEqual(render_custom_prompt("{A} and {B}", {"A": "1"}), "1 and {B}")

    def test_default_prompt_asks_for_json(self):
        msgs = build_prompt_messages([None] * 9, human_mark="X", ai_mark="O", prompt_cfg=PromptConfig())
        self.assertEqual([m["role"] for m in msgs], ["system", "user"])
        self.assertIn('"move"', msgs[1]["content"])
        self.assertIn("Your mark: O", msgs[1]["content"])
        self.assertNotIn("{BOARD}", msgs[1]["content"])
        self.assertIn("{BOARD}", DEFAULT_TEMPLATE)


if __name__ == "__main__":
    unittest.main()
