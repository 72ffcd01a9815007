import logging
from dataclasses import dataclass, field
from enum import Enum

from td2048.agents.value_table import ValueTable
from td2048.envs.board import MOVE_NONE, Board

logger = logging.getLogger(__name__)

MODES = ("forward", "backward")


class Phase(Enum):
    AWAITING_SPAWN = "awaiting_spawn"
    EVALUATING = "evaluating"
    APPLYING_MOVE = "applying_move"
    TERMINAL = "terminal"


@dataclass
class ActionEvaluation:
    """Candidate afterstates of one board, one entry per direction."""

    afterstates: list
    rewards: list
    values: list
    best: int | None = None

    @property
    def valid(self) -> bool:
        return self.best is not None

    @property
    def best_value(self) -> float:
        # No valid move: terminal target, no future reward.
        return self.values[self.best] if self.valid else 0.0

    @property
    def best_reward(self) -> int:
        return self.rewards[self.best] if self.valid else 0


@dataclass
class TDUpdate:
    board: str
    value_before: float
    target: float
    reward: int
    delta: float
    value_after: float
    images: int


@dataclass
class StepResult:
    board: str
    evaluation: ActionEvaluation
    update: TDUpdate | None = None
    terminal: bool = False


@dataclass
class EpisodeStats:
    steps: int
    score: int
    max_tile: int
    final_board: str
    updates: int
    backward: list = field(default_factory=list)


def evaluate_actions(table: ValueTable, board: Board) -> ActionEvaluation:
    """Score all four moves of `board` as reward + V(afterstate).

    Directions are scanned in order 0..3 and the best one only changes on a
    strictly greater value, so ties go to the lowest direction index.
    """
    afterstates, rewards, values = [], [], []
    best = None
    for op in range(4):
        after = board.copy()
        r = after.move(op)
        afterstates.append(after)
        rewards.append(r)
        if r == MOVE_NONE:
            values.append(float("-inf"))
            continue
        v = r + table.value(after)
        values.append(v)
        if best is None or v > values[best]:
            best = op
    return ActionEvaluation(afterstates=afterstates, rewards=rewards, values=values, best=best)


class TDLearner:
    """
    TD(0) afterstate learner for the 2x2 game.

    - forward: after each evaluation, the previous afterstate is moved toward
      best reward + V(best afterstate), or toward 0 when the episode ends
    - backward: the same update applied once per afterstate after the episode
      ends, walking the trajectory from the last move back to the first
    - Every update is shared across the board's distinct symmetric images
    """

    def __init__(self, table: ValueTable, alpha: float = 0.01, isomorphic: int = 8, mode: str = "forward", observer=None):
        if mode not in MODES:
            raise ValueError(f"Unknown training mode: {mode!r} (expected one of {MODES})")
        if not 1 <= int(isomorphic) <= 8:
            raise ValueError(f"isomorphic must be in [1, 8], got {isomorphic}")
        if not float(alpha) > 0:
            raise ValueError(f"alpha must be positive, got {alpha}")
        self.table = table
        self.alpha = float(alpha)
        self.isomorphic = int(isomorphic)
        self.mode = mode
        self.observer = observer

        self.board = Board()
        self.history: list[Board] = []
        self.actions: list[int] = []
        self.phase = Phase.AWAITING_SPAWN
        self.score = 0
        self.num_updates = 0

    def reset(self):
        self.board = Board()
        self.history.clear()
        self.actions.clear()
        self.phase = Phase.AWAITING_SPAWN
        self.score = 0
        self.num_updates = 0

    def _train(self, board: Board, target: float, reward: int) -> TDUpdate:
        before = self.table.value(board)
        delta = self.alpha * (target - before)
        images = self.table.update_with_symmetry(board, delta, self.isomorphic)
        self.num_updates += 1
        update = TDUpdate(
            board=board.name(),
            value_before=before,
            target=target,
            reward=reward,
            delta=delta,
            value_after=self.table.value(board),
            images=len(images),
        )
        if self.observer is not None:
            self.observer.on_update(update)
        return update

    def step(self, rng) -> StepResult:
        if self.phase is Phase.TERMINAL:
            raise RuntimeError("Episode already terminated; call reset() first")

        self.board.spawn_random(rng)
        self.history.append(self.board.copy())
        self.phase = Phase.EVALUATING

        evaluation = evaluate_actions(self.table, self.board)
        if self.observer is not None:
            self.observer.on_step(self, evaluation)

        update = None
        if self.mode == "forward" and len(self.history) > 1:
            update = self._train(self.history[-2], evaluation.best_value, evaluation.best_reward)

        if not evaluation.valid:
            self.phase = Phase.TERMINAL
            return StepResult(board=self.board.name(), evaluation=evaluation, update=update, terminal=True)

        self.phase = Phase.APPLYING_MOVE
        spawned = self.board.name()
        self.board = evaluation.afterstates[evaluation.best].copy()
        self.score += evaluation.best_reward
        self.history.append(self.board.copy())
        self.actions.append(evaluation.best)
        self.phase = Phase.AWAITING_SPAWN
        return StepResult(board=spawned, evaluation=evaluation, update=update)

    def backward_pass(self) -> list:
        """Replay the finished trajectory from its end, consuming history and actions."""
        if self.mode != "backward":
            raise RuntimeError("backward_pass() requires mode='backward'")
        if self.phase is not Phase.TERMINAL:
            raise RuntimeError("backward_pass() requires a terminated episode")

        updates = []
        # The final spawned state has no afterstate to learn from.
        self.history.pop()
        exact, reward = 0.0, 0
        while self.history:
            afterstate = self.history.pop()
            updates.append(self._train(afterstate, exact, reward))
            before = self.history.pop()
            reward = before.move(self.actions.pop())
            exact = self.table.value(afterstate) + reward
        return updates

    def run_episode(self, rng) -> EpisodeStats:
        self.reset()
        while self.phase is not Phase.TERMINAL:
            self.step(rng)

        stats = EpisodeStats(
            steps=len(self.actions),
            score=self.score,
            max_tile=1 << self.board.max_exponent(),
            final_board=self.board.name(),
            updates=self.num_updates,
        )
        if self.mode == "backward":
            stats.backward = self.backward_pass()
            stats.updates = self.num_updates
        logger.debug(
            "Episode finished: steps=%d score=%d max_tile=%d final=%s",
            stats.steps, stats.score, stats.max_tile, stats.final_board,
        )
        return stats
