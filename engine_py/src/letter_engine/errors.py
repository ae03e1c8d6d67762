# engine_py/src/letter_engine/errors.py

class GameError(Exception):
    """Base exception for game-related errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
ROOM_FULL = "ROOM_FULL"
NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
PLAYER_ALREADY_IN_ROOM = "PLAYER_ALREADY_IN_ROOM"
NOT_YOUR_TURN = "NOT_YOUR_TURN"
INVALID_CARD = "INVALID_CARD"
COUNTESS_CONSTRAINT_VIOLATED = "COUNTESS_CONSTRAINT_VIOLATED"
INVALID_TARGET = "INVALID_TARGET"
INVALID_GUESS = "INVALID_GUESS"
GAME_NOT_IN_PROGRESS = "GAME_NOT_IN_PROGRESS"
ROOM_CODES_EXHAUSTED = "ROOM_CODES_EXHAUSTED"
INTERNAL_ERROR = "INTERNAL_ERROR"

# Helper function to raise common errors
def raise_error(code: str, message: str):
    raise GameError(code, message)
