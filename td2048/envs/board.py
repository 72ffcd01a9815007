import numpy as np


UP, RIGHT, DOWN, LEFT = 0, 1, 2, 3
ACTION_NAMES = ("up", "right", "down", "left")

# Exponents live in [0, MAX_EXPONENT]; 0 is an empty cell.
MAX_EXPONENT = 5
NUM_EXPONENTS = MAX_EXPONENT + 1

# Returned by a move that leaves every cell unchanged.
MOVE_NONE = -1


def _check_exponent(e) -> int:
    e = int(e)
    if not 0 <= e <= MAX_EXPONENT:
        raise ValueError(f"Tile exponent out of range [0, {MAX_EXPONENT}]: {e}")
    return e


class Board:
    """
    2x2 board of tile exponents.

    - Cells: (2, 2) int8 grid, exponent n > 0 is a tile of 2**n, 0 is empty
    - Encoding: 4 nibbles row-major, cell (0, 0) in the top nibble
    - Moves: 0=up, 1=right, 2=down, 3=left; all reduce to `left` through
      mirror/rotate so a single row rule implements every direction
    """

    def __init__(self, value: "Board | int | None" = None):
        self.tile = np.zeros((2, 2), dtype=np.int8)
        if isinstance(value, Board):
            self.tile[:] = value.tile
        elif value is not None:
            self.tile[:] = Board.decode(value).tile

    @classmethod
    def decode(cls, v: int) -> "Board":
        v = int(v)
        if not 0 <= v <= 0xFFFF:
            raise ValueError(f"Encoded board out of range: {v}")
        b = cls()
        b.tile[0, 0] = _check_exponent((v >> 12) & 15)
        b.tile[0, 1] = _check_exponent((v >> 8) & 15)
        b.tile[1, 0] = _check_exponent((v >> 4) & 15)
        b.tile[1, 1] = _check_exponent(v & 15)
        return b

    @classmethod
    def from_grid(cls, grid) -> "Board":
        """Build a board from a 2x2 array of exponents, e.g. an env observation."""
        grid = np.asarray(grid)
        if grid.shape != (2, 2):
            raise ValueError(f"Expected a (2, 2) grid, got shape {grid.shape}")
        b = cls()
        for (r, c), e in np.ndenumerate(grid):
            b[r, c] = e
        return b

    def encode(self) -> int:
        t = self.tile
        return (int(t[0, 0]) << 12) | (int(t[0, 1]) << 8) | (int(t[1, 0]) << 4) | int(t[1, 1])

    def __int__(self) -> int:
        return self.encode()

    def name(self) -> str:
        return f"{self.encode():04x}"

    def copy(self) -> "Board":
        return Board(self)

    def __getitem__(self, pos) -> int:
        r, c = pos
        if not (0 <= r < 2 and 0 <= c < 2):
            raise IndexError(f"Cell out of range: {pos}")
        return int(self.tile[r, c])

    def __setitem__(self, pos, e):
        r, c = pos
        if not (0 <= r < 2 and 0 <= c < 2):
            raise IndexError(f"Cell out of range: {pos}")
        self.tile[r, c] = _check_exponent(e)

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.encode() == other.encode()

    # Mutable value type: compare by value, key containers by encode().
    __hash__ = None

    def __repr__(self) -> str:
        return f"Board({self.name()})"

    def exponents(self) -> tuple:
        return tuple(int(e) for e in self.tile.reshape(-1))

    def tiles(self) -> np.ndarray:
        """Tile magnitudes 2**e, with 0 for empty cells."""
        t = self.tile.astype(np.int32)
        return np.where(t > 0, 1 << t, 0)

    def max_exponent(self) -> int:
        return int(self.tile.max())

    def empty_cells(self) -> list:
        return [(int(r), int(c)) for r, c in np.argwhere(self.tile == 0)]

    def is_full(self) -> bool:
        return not (self.tile == 0).any()

    # --- Moves ---
    def move(self, direction: int) -> int:
        """Apply a move in place. Returns the merge score, or MOVE_NONE if nothing changed."""
        if direction == UP:
            return self.up()
        if direction == RIGHT:
            return self.right()
        if direction == DOWN:
            return self.down()
        if direction == LEFT:
            return self.left()
        return MOVE_NONE

    def left(self) -> int:
        before = self.encode()
        score = 0
        for row in self.tile:
            if row[0] == 0:
                row[0] = row[1]
                row[1] = 0
            elif row[0] == row[1]:
                row[0] = _check_exponent(row[0] + 1)
                row[1] = 0
                score += 1 << int(row[0])
        return score if self.encode() != before else MOVE_NONE

    def right(self) -> int:
        self.mirror()
        score = self.left()
        self.mirror()
        return score

    def up(self) -> int:
        self.rotate(1)
        score = self.right()
        self.rotate(-1)
        return score

    def down(self) -> int:
        self.rotate(1)
        score = self.left()
        self.rotate(-1)
        return score

    def can_move(self) -> bool:
        for direction in (UP, RIGHT, DOWN, LEFT):
            if self.copy().move(direction) != MOVE_NONE:
                return True
        return False

    def is_terminal(self) -> bool:
        return not self.can_move()

    # --- Geometry ---
    def transpose(self):
        self.tile[0, 1], self.tile[1, 0] = self.tile[1, 0], self.tile[0, 1]

    def mirror(self):
        self.tile[:] = self.tile[:, ::-1].copy()

    def flip(self):
        self.tile[:] = self.tile[::-1, :].copy()

    def rotate(self, r: int = 1):
        """Rotate clockwise by r quarter turns (negative turns counter-clockwise)."""
        r = r % 4
        if r == 1:
            self.transpose()
            self.mirror()
        elif r == 2:
            self.mirror()
            self.flip()
        elif r == 3:
            self.transpose()
            self.flip()

    def isomorphic(self, i: int):
        """Apply the i-th symmetry: reflect for i in 5..7, then rotate i % 4. Index 4 repeats the identity."""
        iso = i % 8
        if iso > 4:
            self.mirror()
        self.rotate(iso)

    # --- Tile generation ---
    def spawn_random(self, rng):
        """Place a 2 (p=0.9) or a 4 (p=0.1) on a uniformly chosen empty cell.

        Returns the (row, col) filled, or None when the board is full.
        """
        empty = self.empty_cells()
        if not empty:
            return None
        r, c = empty[int(rng.integers(0, len(empty)))]
        self.tile[r, c] = 1 if rng.random() < 0.9 else 2
        return r, c
