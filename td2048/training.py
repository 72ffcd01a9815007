import logging
from typing import Callable, Tuple

import numpy as np
from omegaconf import DictConfig

from td2048.agents.td_learner import EpisodeStats, TDLearner, evaluate_actions
from td2048.agents.value_table import ValueTable
from td2048.envs.board import Board
from td2048.envs.game2x2 import Game2x2Env
from td2048.render import TraceObserver

logger = logging.getLogger(__name__)

Gate = Callable[[int, EpisodeStats], None]


def build_learner(cfg: DictConfig, table: ValueTable | None = None) -> TDLearner:
    learner_cfg = cfg.learner
    alpha = float(learner_cfg.alpha)
    observer = None
    trace_cfg = cfg.get("trace")
    if trace_cfg is not None and bool(trace_cfg.get("enabled", False)):
        observer = TraceObserver(alpha=alpha, decimal=int(trace_cfg.get("decimal", 4)))
    return TDLearner(
        table=table if table is not None else ValueTable(),
        alpha=alpha,
        isomorphic=int(learner_cfg.isomorphic),
        mode=str(learner_cfg.mode),
        observer=observer,
    )


def keypress_gate(prompt: str = "Press Enter for the next episode...") -> Gate:
    def gate(episode: int, stats: EpisodeStats):
        input(prompt)

    return gate


def train(
    learner: TDLearner,
    episodes: int,
    rng: np.random.Generator,
    gate: Gate | None = None,
    log_interval: int = 100,
) -> list:
    """Run `episodes` episodes on a shared table. `gate` runs after each one."""
    history = []
    for episode in range(1, episodes + 1):
        stats = learner.run_episode(rng)
        history.append(stats)
        if learner.observer is not None:
            logger.info("Episode #%d: score=%d max_tile=%d", episode, stats.score, stats.max_tile)
        if log_interval > 0 and episode % log_interval == 0:
            recent = history[-log_interval:]
            logger.info(
                "Episode %d | mean_score=%.1f | mean_max_tile=%.1f | visited=%d",
                episode,
                np.mean([s.score for s in recent]),
                np.mean([s.max_tile for s in recent]),
                learner.table.num_visited(),
            )
        if gate is not None:
            gate(episode, stats)
    return history


def greedy_action(table: ValueTable, obs: np.ndarray) -> int | None:
    return evaluate_actions(table, Board.from_grid(obs)).best


def evaluate(env: Game2x2Env, table: ValueTable, episodes: int = 10, seed=None, max_steps: int = 1000) -> Tuple[float, list]:
    """Play greedily with respect to `table` without learning."""
    returns, lengths = [], []
    for ep in range(episodes):
        obs, info = env.reset(seed=None if seed is None else int(seed) + ep)
        ep_return = 0.0
        ep_len = 0
        while ep_len < max_steps:
            a = greedy_action(table, obs)
            if a is None:
                break
            obs, reward, terminated, truncated, info = env.step(a)
            ep_return += float(reward)
            ep_len += 1
            if terminated or truncated:
                break
        returns.append(ep_return)
        lengths.append(ep_len)
    return float(np.mean(returns)), lengths
