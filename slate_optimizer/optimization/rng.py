"""Deterministic per-attempt random number generation.

Each optimization attempt gets its own generator seeded from the attempt
coordinates, so identical inputs always reproduce identical batches while
successive attempts still see different tie-breaking and shuffles. Nothing
here touches the global ``random`` module state.
"""

MODULUS = 2_147_483_647  # 2**31 - 1
MULTIPLIER = 16_807


def attempt_seed(iteration: int, attempt: int) -> int:
    """Seed for one attempt.

    Args:
        iteration: Index of the lineup being built (number found so far)
        attempt: Running attempt counter for the whole batch
    """
    return (iteration + 1) * 10_007 + (attempt + 1) * 97


class SeededRandom:
    """Park-Miller minimal standard generator.

    Produces floats in [0, 1). Cheap, stateless beyond a single integer, and
    identical across platforms.
    """

    def __init__(self, seed: int):
        state = seed % MODULUS
        if state <= 0:
            state += MODULUS - 1
        self._state = state

    @classmethod
    def for_attempt(cls, iteration: int, attempt: int) -> "SeededRandom":
        return cls(attempt_seed(iteration, attempt))

    def random(self) -> float:
        self._state = (self._state * MULTIPLIER) % MODULUS
        return self._state / MODULUS

    def randbelow(self, n: int) -> int:
        """Integer in [0, n)."""
        return int(self.random() * n)

    def shuffle_top(self, items: list, top: int) -> list:
        """Fisher-Yates shuffle of the first ``top`` items of a copy of ``items``."""
        shuffled = list(items)
        n = min(top, len(shuffled))
        for i in range(n - 1, 0, -1):
            j = self.randbelow(i + 1)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled
