from .td_learner import EpisodeStats, Phase, TDLearner, evaluate_actions
from .value_table import ValueTable

__all__ = ["EpisodeStats", "Phase", "TDLearner", "ValueTable", "evaluate_actions"]
