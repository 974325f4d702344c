import time
import unittest
from unittest.mock import patch

from llmtictactoe import server

ASK = "llmtictactoe.llm_opponent.ask_for_move_conversation"


class ServerTests(unittest.TestCase):
    def setUp(self):
        server.GAMES.clear()
        self.client = server.app.test_client()

    def _new_game(self, **body):
        rsp = self.client.post("/api/games", json=body)
        self.assertEqual(rsp.status_code, 201)
        return rsp.get_json()

    def test_index_and_health(self):
        rsp = self.client.get("/")
        self.assertEqual(rsp.status_code, 200)
        self.assertIn(b"Tic-Tac-Toe", rsp.data)
        rsp.close()
        self.assertEqual(self.client.get("/health").get_json(), {"ok": True})

    def test_create_game(self):
        game = self._new_game(model="dummy")
        self.assertEqual(game["board"], [None] * 9)
        self.assertEqual(game["phase"], "human_turn")
        self.assertEqual(game["human_mark"], "X")
        self.assertEqual(game["ai_mark"], "O")
        self.assertEqual(game["model"], "dummy")
        self.assertEqual(game["opponent"], "dummy")
        self.assertEqual(game["status_message"], "Your Turn")
        self.assertIn(game["game_id"], server.GAMES)

    def test_create_game_with_o(self):
        game = self._new_game(human_mark="o")
        self.assertEqual((game["human_mark"], game["ai_mark"]), ("O", "X"))

    def test_create_game_bad_mark(self):
        rsp = self.client.post("/api/games", json={"human_mark": "Z"})
        self.assertEqual(rsp.status_code, 400)

    def test_full_turn(self):
        game = self._new_game(model="dummy")
        gid = game["game_id"]
        state = self.client.post(f"/api/games/{gid}/move", json={"cell": 0}).get_json()
        self.assertEqual(state["phase"], "opponent_pending")
        with patch(ASK, return_value='{"move": 4, "explanation": "Center."}'):
            rsp = self.client.post(f"/api/games/{gid}/opponent-move")
        self.assertEqual(rsp.status_code, 200)
        state = rsp.get_json()
        self.assertEqual(state["board"][4], "O")
        self.assertEqual(state["explanation"], "Center.")
        self.assertEqual(state["phase"], "human_turn")
        self.assertEqual(self.client.get(f"/api/games/{gid}").get_json()["board"], state["board"])

    def test_oracle_failure_surfaces_notice(self):
        gid = self._new_game()["game_id"]
        self.client.post(f"/api/games/{gid}/move", json={"cell": 0})
        with patch(ASK, return_value=""):
            state = self.client.post(f"/api/games/{gid}/opponent-move").get_json()
        self.assertEqual(state["board"][:2], ["X", "O"])
        self.assertEqual(state["notice"]["title"], "AI Error")

    def test_invalid_index_surfaces_notice(self):
        gid = self._new_game()["game_id"]
        self.client.post(f"/api/games/{gid}/move", json={"cell": 0})
        with patch(ASK, return_value='{"move": 0, "explanation": "Corner."}'):
            state = self.client.post(f"/api/games/{gid}/opponent-move").get_json()
        self.assertEqual(state["board"][:2], ["X", "O"])
        self.assertEqual(state["notice"]["title"], "AI Error")
        self.assertIn("first open cell", state["notice"]["description"])

    def test_wrong_phase_is_conflict(self):
        gid = self._new_game()["game_id"]
        rsp = self.client.post(f"/api/games/{gid}/opponent-move")
        self.assertEqual(rsp.status_code, 409)
        self.assertEqual(rsp.get_json()["error"], "not_opponent_turn")
        self.client.post(f"/api/games/{gid}/move", json={"cell": 0})
        rsp = self.client.post(f"/api/games/{gid}/move", json={"cell": 1})
        self.assertEqual(rsp.status_code, 409)

    def test_bad_cells(self):
        gid = self._new_game()["game_id"]
        self.assertEqual(self.client.post(f"/api/games/{gid}/move", json={}).status_code, 400)
        rsp = self.client.post(f"/api/games/{gid}/move", json={"cell": 9})
        self.assertEqual((rsp.status_code, rsp.get_json()["error"]), (400, "out_of_range"))
        for cell in ("--3", "\u00b2"):
            rsp = self.client.post(f"/api/games/{gid}/move", json={"cell": cell})
            self.assertEqual((rsp.status_code, rsp.get_json()["error"]), (400, "bad_move_value"))
        self.assertEqual(self.client.get(f"/api/games/{gid}").get_json()["board"], [None] * 9)

    def test_unknown_game(self):
        self.assertEqual(self.client.get("/api/games/nope").status_code, 404)
        self.assertEqual(self.client.post("/api/games/nope/move", json={"cell": 0}).status_code, 404)
        self.assertEqual(self.client.post("/api/games/nope/opponent-move").status_code, 404)
        self.assertEqual(self.client.post("/api/games/nope/restart").status_code, 404)

    def test_restart(self):
        gid = self._new_game()["game_id"]
        self.client.post(f"/api/games/{gid}/move", json={"cell": 0})
        state = self.client.post(f"/api/games/{gid}/restart").get_json()
        self.assertEqual(state["board"], [None] * 9)
        self.assertEqual(state["phase"], "human_turn")
        self.assertEqual(state["game_id"], gid)

    def test_stale_games_are_dropped(self):
        gid = self._new_game()["game_id"]
        server.GAMES[gid]["updated_at"] = time.time() - 100
        server._cleanup_stale_games(max_age_s=10)
        self.assertNotIn(gid, server.GAMES)


if __name__ == "__main__":
    unittest.main()
