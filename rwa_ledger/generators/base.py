"""Seeded Faker wrapper shared by the synthetic data generators."""

from __future__ import annotations

import random

from faker import Faker


class BaseGenerator:
    """Faker plus a private ``random.Random``, both driven by one seed.

    Two generators built with the same seed and locale produce the same
    sequence of values, which keeps simulations and fixtures reproducible.

    Parameters
    ----------
    seed : int | None
        Random seed. ``None`` gives a different sequence on every run.
    locale : str
        Faker locale used for addresses and names.
    """

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        self.seed = seed
        self.fake = Faker(locale)
        self.random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability."""
        return self.random.random() < probability

    def wallet_address(self) -> str:
        """A 20-byte account identity in ``0x``-prefixed hex form."""
        return "0x" + self.fake.hexify("^" * 40)
