from td2048.agents.td_learner import TDLearner, TDUpdate, evaluate_actions
from td2048.agents.value_table import ValueTable
from td2048.envs.board import RIGHT, Board
from td2048.render import TraceObserver, format_action_values, format_board, format_update, norm, trajectory_lines


def test_format_board():
    assert format_board(Board.decode(0x1205)) == "+------+\n|  2  4|\n|  0 32|\n+------+"
    assert format_board(Board()) == "+------+\n|  0  0|\n|  0  0|\n+------+"


def test_trajectory_lines_annotate_afterstates():
    lines = trajectory_lines([Board.decode(0x1100), Board.decode(0x0200)], [RIGHT])
    assert lines == [
        "+------+--(+4)+",
        "|  2  2|  0  4|",
        "|  0  0|  0  0|",
        "+------+[0200]+",
    ]


def test_format_action_values():
    table = ValueTable()
    table.update(Board.decode(0x0010), 0.123456)
    ev = evaluate_actions(table, Board.decode(0x1000))
    assert format_action_values(ev, table) == ["^: n/a", ">: 0 + 0.0", "v: 0 + 0.1235 *", "<: n/a"]


def test_format_update():
    update = TDUpdate(board="0100", value_before=0.0, target=4.0, reward=4, delta=0.04, value_after=0.04, images=4)
    assert format_update(update, 0.01) == "TD(0): V(0100) = 0.0 + 0.01 * (4 + 0.0 - 0.0) = 0.04"
    assert norm(1.23456789, 2) == 1.23


def test_trace_observer_logs_steps_and_updates(fixed_rng):
    lines = []
    learner = TDLearner(ValueTable(), alpha=0.01, observer=TraceObserver(alpha=0.01, log=lines.append))
    learner.step(fixed_rng)
    learner.step(fixed_rng)
    assert lines[0] == "+------+ ^: n/a"
    assert lines[1] == "|  2  0| >: 0 + 0.0 *"
    assert lines[4] == "TD(0): n/a"
    assert lines[-1] == "TD(0): V(0100) = 0.0 + 0.01 * (4 + 0.0 - 0.0) = 0.04"
