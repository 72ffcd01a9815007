from .board import ACTION_NAMES, MAX_EXPONENT, MOVE_NONE, Board
from .game2x2 import Game2x2Env

__all__ = ["ACTION_NAMES", "MAX_EXPONENT", "MOVE_NONE", "Board", "Game2x2Env"]
