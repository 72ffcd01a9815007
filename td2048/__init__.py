"""td2048: TD(0) afterstate learning on a 2x2 2048 board.

Expose the board, the value table, the learner and the Gymnasium environment.
"""

from .agents.td_learner import TDLearner
from .agents.value_table import ValueTable
from .envs.board import Board
from .envs.game2x2 import Game2x2Env

__all__ = ["Board", "Game2x2Env", "TDLearner", "ValueTable"]
