import numpy as np

from td2048.envs.board import NUM_EXPONENTS, Board


class ValueTable:
    """Dense afterstate value table indexed by the four cell exponents.

    The table is built once and handed to the learner; it is never reset
    between episodes. Reads are exact-configuration only, symmetry sharing
    happens on the write side through `update_with_symmetry`.
    """

    def __init__(self):
        self._weights = np.zeros((NUM_EXPONENTS,) * 4, dtype=np.float64)

    @staticmethod
    def index(board: Board) -> tuple:
        idx = board.exponents()
        for e in idx:
            # numpy would silently wrap negative indices
            if not 0 <= e < NUM_EXPONENTS:
                raise IndexError(f"Exponent {e} of board {board.name()} outside value table")
        return idx

    @property
    def values(self) -> np.ndarray:
        view = self._weights.view()
        view.flags.writeable = False
        return view

    def value(self, board: Board) -> float:
        return float(self._weights[self.index(board)])

    def update(self, board: Board, delta: float):
        self._weights[self.index(board)] += delta

    def update_with_symmetry(self, board: Board, delta: float, isomorphic: int = 8) -> list:
        """Add `delta` once to every distinct image of `board` under the first
        `isomorphic` symmetries. Images that coincide are updated only once.
        Returns the updated images.
        """
        trained = []
        seen = set()
        for i in range(isomorphic):
            iso = board.copy()
            iso.isomorphic(i)
            key = iso.encode()
            if key in seen:
                continue
            seen.add(key)
            trained.append(iso)
            self.update(iso, delta)
        return trained

    def num_visited(self) -> int:
        return int(np.count_nonzero(self._weights))
