"""Text rendering of boards, action values and TD(0) updates.

Everything here is read-only with respect to the learner and its table.
"""

import logging

from td2048.envs.board import MOVE_NONE, Board

logger = logging.getLogger(__name__)

ACTION_SYMBOLS = ("^", ">", "v", "<")
BORDER = "+------+"


def norm(v: float, decimal: int = 4) -> float:
    return round(float(v), decimal)


def board_lines(board: Board) -> list:
    t = board.tiles()
    return [
        BORDER,
        f"|{int(t[0, 0]):3d}{int(t[0, 1]):3d}|",
        f"|{int(t[1, 0]):3d}{int(t[1, 1]):3d}|",
        BORDER,
    ]


def format_board(board: Board) -> str:
    return "\n".join(board_lines(board))


def trajectory_lines(history: list, actions: list) -> list:
    """Lay the boards of a trajectory side by side.

    Afterstates (odd positions) carry the reward of the move that produced
    them on the top border and their name on the bottom border.
    """
    lines = ["+", "|", "|", "+"]
    for i, b in enumerate(history):
        segment = [line[1:] for line in board_lines(b)]
        if i % 2:
            reward = history[i - 1].copy().move(actions[i // 2])
            segment[0] = f"(+{reward})".rjust(6, "-") + "+"
            segment[3] = f"[{b.name()}]+"
        lines = [acc + seg for acc, seg in zip(lines, segment)]
    return lines


def format_action_values(evaluation, table, decimal: int = 4) -> list:
    lines = []
    for op, symbol in enumerate(ACTION_SYMBOLS):
        r = evaluation.rewards[op]
        if r == MOVE_NONE:
            lines.append(f"{symbol}: n/a")
            continue
        line = f"{symbol}: {r} + {norm(table.value(evaluation.afterstates[op]), decimal)}"
        if op == evaluation.best:
            line += " *"
        lines.append(line)
    return lines


def format_update(update, alpha: float, decimal: int = 4) -> str:
    u = norm(update.value_before, decimal)
    future = norm(update.target - update.reward, decimal)
    return (
        f"TD(0): V({update.board}) = {u} + {alpha} * "
        f"({update.reward} + {future} - {u}) = {norm(update.value_after, decimal)}"
    )


class TraceObserver:
    """Learner observer that logs the per-step trace."""

    def __init__(self, alpha: float, decimal: int = 4, log=None):
        self.alpha = alpha
        self.decimal = decimal
        self.log = log or logger.info

    def on_step(self, learner, evaluation):
        strip = trajectory_lines(learner.history, learner.actions)
        values = format_action_values(evaluation, learner.table, self.decimal)
        for line, value in zip(strip, values):
            self.log(f"{line} {value}")
        if learner.mode == "forward" and len(learner.history) == 1:
            self.log("TD(0): n/a")

    def on_update(self, update):
        self.log(format_update(update, self.alpha, self.decimal))
