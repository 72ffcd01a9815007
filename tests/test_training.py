import numpy as np
import pytest
from omegaconf import OmegaConf

from td2048.agents.value_table import ValueTable
from td2048.envs.game2x2 import Game2x2Env
from td2048.render import TraceObserver
from td2048.training import build_learner, evaluate, greedy_action, keypress_gate, train


def make_cfg(**learner):
    return OmegaConf.create(
        {
            "learner": {"alpha": 0.01, "isomorphic": 8, "mode": "forward", **learner},
            "trace": {"enabled": False, "decimal": 4},
        }
    )


def test_build_learner_from_config():
    learner = build_learner(make_cfg(alpha=0.05, isomorphic=4, mode="backward"))
    assert learner.alpha == 0.05
    assert learner.isomorphic == 4
    assert learner.mode == "backward"
    assert learner.observer is None
    assert learner.table.num_visited() == 0


def test_build_learner_with_trace_and_shared_table():
    cfg = make_cfg()
    cfg.trace.enabled = True
    table = ValueTable()
    learner = build_learner(cfg, table=table)
    assert learner.table is table
    assert isinstance(learner.observer, TraceObserver)


def test_build_learner_rejects_unknown_mode():
    with pytest.raises(ValueError):
        build_learner(make_cfg(mode="sideways"))


@pytest.mark.parametrize("mode", ["forward", "backward"])
def test_train_runs_bounded_episodes_and_gates(mode):
    learner = build_learner(make_cfg(mode=mode))
    calls = []
    stats = train(learner, episodes=5, rng=np.random.default_rng(0), gate=lambda ep, s: calls.append((ep, s.score)), log_interval=2)
    assert len(stats) == 5
    assert [ep for ep, _ in calls] == [1, 2, 3, 4, 5]
    assert [s.score for s in stats] == [score for _, score in calls]
    assert all(s.steps > 0 for s in stats)
    assert learner.table.num_visited() > 0


def test_keypress_gate_waits_for_input(monkeypatch):
    prompts = []
    monkeypatch.setattr("builtins.input", lambda prompt="": prompts.append(prompt) or "")
    gate = keypress_gate("next?")
    gate(1, None)
    assert prompts == ["next?"]


def test_greedy_action():
    table = ValueTable()
    assert greedy_action(table, np.array([[1, 0], [0, 0]], dtype=np.int8)) == 1
    assert greedy_action(table, np.array([[1, 2], [3, 4]], dtype=np.int8)) is None


def test_evaluate_greedy_policy():
    learner = build_learner(make_cfg())
    train(learner, episodes=20, rng=np.random.default_rng(3), log_interval=0)
    snapshot = learner.table.values.copy()
    mean_return, lengths = evaluate(Game2x2Env(), learner.table, episodes=4, seed=11)
    assert len(lengths) == 4
    assert all(n > 0 for n in lengths)
    assert mean_return >= 0.0
    np.testing.assert_array_equal(learner.table.values, snapshot)
