import numpy as np
import gymnasium as gym
from gymnasium import spaces

from td2048.envs.board import MAX_EXPONENT, MOVE_NONE, Board
from td2048.render import format_board


class Game2x2Env(gym.Env):
    """
    Gymnasium-compatible 2x2 2048 environment.

    - Actions: 0=up, 1=right, 2=down, 3=left
    - Observation: (2, 2) int8 grid of tile exponents (0 = empty)
    - Reward: sum of merged tile values produced by the move
    - Terminated: when no move changes the board
    - Truncated: never
    """

    metadata = {"render_modes": ["human"]}

    def __init__(self, render_mode: str | None = None):
        super().__init__()
        self.render_mode = render_mode

        self.action_space = spaces.Discrete(4)
        self.observation_space = spaces.Box(low=0, high=MAX_EXPONENT, shape=(2, 2), dtype=np.int8)

        self.board: Board | None = None
        self.score: int = 0

    def reset(self, *, seed: int | None = None, options: dict | None = None):
        super().reset(seed=seed)
        self.board = Board()
        self.score = 0
        self.board.spawn_random(self.np_random)
        info = {"score": self.score, "valid_actions": self._valid_actions()}
        return self.board.tile.copy(), info

    def step(self, action: int):
        if not self.action_space.contains(action):
            raise gym.error.InvalidAction(f"Invalid action: {action}")
        assert self.board is not None

        reward = self.board.move(int(action))
        moved = reward != MOVE_NONE
        if moved:
            self.score += reward
        else:
            reward = 0
        afterstate = self.board.name()

        if moved:
            self.board.spawn_random(self.np_random)

        terminated = self.board.is_terminal()
        info = {
            "score": self.score,
            "moved": moved,
            "afterstate": afterstate,
            "max_tile": 1 << self.board.max_exponent(),
            "valid_actions": self._valid_actions(),
        }
        return self.board.tile.copy(), float(reward), bool(terminated), False, info

    def render(self):
        if self.render_mode == "human" or self.render_mode is None:
            assert self.board is not None
            print(format_board(self.board))
            print(f"Score: {self.score}\n")

    def _valid_actions(self) -> np.ndarray:
        """Return boolean mask of valid actions for current board."""
        assert self.board is not None
        return np.array([self.board.copy().move(a) != MOVE_NONE for a in range(4)], dtype=bool)
