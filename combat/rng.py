import numpy as np

class DRNG:
    """Deterministic Random Number Generator wrapper."""

    def __init__(self, seed: int):
        self.g = np.random.Generator(np.random.PCG64(seed))

    def pick(self, n: int) -> int:
        """Return a uniformly chosen index in [0, n)."""
        return int(self.g.integers(0, n))
