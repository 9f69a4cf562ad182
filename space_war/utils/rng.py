"""Seedable RNG wrapper for deterministic gameplay."""

import random

from .constants import DIE_SIDES


class GameRNG:
    """Wrapper around Python's random.Random for deterministic game behavior.

    All randomness in the game should go through this class to ensure
    deterministic behavior when using the same seed. Passing seed=None
    seeds from OS entropy, which is what a live match uses.
    """

    def __init__(self, seed: int | None = None):
        """Initialize RNG with given seed.

        Args:
            seed: Integer seed for deterministic randomness, or None
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def randint(self, a: int, b: int) -> int:
        """Return random integer in range [a, b], inclusive.

        Args:
            a: Lower bound (inclusive)
            b: Upper bound (inclusive)

        Returns:
            Random integer between a and b
        """
        return self.rng.randint(a, b)

    def roll_die(self, sides: int = DIE_SIDES) -> int:
        """Roll one die with the given number of sides.

        Args:
            sides: Number of faces (default six)

        Returns:
            Random integer between 1 and sides
        """
        return self.rng.randint(1, sides)

    def choice(self, seq):
        """Choose random element from non-empty sequence.

        Args:
            seq: Sequence to choose from

        Returns:
            Random element from sequence
        """
        return self.rng.choice(seq)

    def shuffle(self, seq):
        """Shuffle sequence in place.

        Args:
            seq: Sequence to shuffle
        """
        self.rng.shuffle(seq)

    def get_state(self):
        """Get the current state of the RNG.

        Returns:
            RNG state tuple that can be used with set_state
        """
        return self.rng.getstate()

    def set_state(self, state):
        """Restore a state captured with get_state.

        Args:
            state: RNG state tuple from get_state
        """
        self.rng.setstate(state)
