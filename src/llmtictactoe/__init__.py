"""
LLM Tic-Tac-Toe package.

Components:
- rules/referee: board, winning lines and the win/draw evaluator
- game: turn coordinator for one human-vs-LLM game
- llm_opponent: the move oracle (prompt -> model -> claimed cell + explanation)
- prompting/move_validator/reply_normalizer: prompt build and reply parsing
- llm_client: minimal OpenAI-compatible chat transport (base_url configurable)
- server: Flask app serving the browser game
"""
# No re-exports; import the modules directly.
