"""Play one game of Tic-Tac-Toe against the LLM in the terminal."""
import argparse
import logging

from llmtictactoe.config import SETTINGS
from llmtictactoe.console_player import ConsolePlayer, render_board
from llmtictactoe.game import GameConfig, GameRunner
from llmtictactoe.llm_opponent import LLMOpponent


if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--model", default=None, help="Model name (defaults to LLMTTT_MODEL)")
    ap.add_argument("--human-mark", choices=["X", "O"], default="X", help="Your mark; you always move first")
    ap.add_argument("--delay-ms", type=int, default=None, help="Pause before the AI answers (defaults to LLMTTT_AI_MOVE_DELAY_MS)")
    ap.add_argument("--log-level", default="WARNING", help="Python logging level (e.g., INFO, DEBUG)")
    args = ap.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    log = logging.getLogger("play_one")

    model = args.model or SETTINGS.model
    delay_ms = SETTINGS.ai_move_delay_ms if args.delay_ms is None else args.delay_ms
    opp = LLMOpponent(model=model)
    runner = GameRunner(opponent=opp, cfg=GameConfig(human_mark=args.human_mark, ai_move_delay_ms=delay_ms, game_log=True))
    player = ConsolePlayer()
    log.info("Starting game: model=%s human=%s", model, args.human_mark)

    while True:
        state = runner.export_state()
        if state["phase"] == "human_turn":
            runner.human_move(player.choose(state["board"], runner.human_mark))
            continue
        if state["phase"] == "opponent_pending":
            print("AI is thinking...")
            state = runner.opponent_turn(wait=True)
            if state["notice"]:
                print(f"[{state['notice']['title']}] {state['notice']['description']}")
            if state["explanation"]:
                print(f"AI's thought: \"{state['explanation']}\"")
            continue
        print(render_board(state["board"]))
        print(state["status_message"])
        again = input("Play again? [y/N]: ").strip().lower()
        if again != "y":
            break
        runner.restart()

    opp.close()
