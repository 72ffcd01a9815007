import pytest


class FixedRng:
    """Stand-in for numpy's Generator: fills the `index`-th empty cell, spawns a 2 while draw < 0.9."""

    def __init__(self, index: int = 0, draw: float = 0.0):
        self.index = index
        self.draw = draw

    def integers(self, low, high):
        assert low + self.index < high
        return low + self.index

    def random(self):
        return self.draw


@pytest.fixture
def fixed_rng():
    return FixedRng()
