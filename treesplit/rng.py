from __future__ import annotations

import random
from typing import Iterable, Optional, Protocol


class UniformSource(Protocol):
    """The random-bit source consumed by the engine and the generator.

    :class:`random.Random` satisfies it as-is.
    """

    def random(self) -> float:
        """Uniform float in ``[0, 1)``."""

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in ``[a, b]``, both ends inclusive."""


def make_source(seed: Optional[int] = None) -> random.Random:
    """Return an independent, optionally seeded source."""

    return random.Random(seed)


class SequenceSource:
    """Replays a fixed script of draws, for pinning down traversal decisions.

    ``floats`` feed :meth:`random` and ``ints`` feed :meth:`randint`; running
    out of either raises :class:`IndexError`. Scripted floats are returned
    verbatim, so ``1.0`` can be used to force "not selected" past the first
    node.
    """

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = ()) -> None:
        self._floats = list(floats)
        self._ints = list(ints)
        self.float_draws = 0
        self.int_draws = 0

    def random(self) -> float:
        if self.float_draws >= len(self._floats):
            raise IndexError(f"float script exhausted after {self.float_draws} draws")
        value = self._floats[self.float_draws]
        self.float_draws += 1
        return value

    def randint(self, a: int, b: int) -> int:
        if self.int_draws >= len(self._ints):
            raise IndexError(f"int script exhausted after {self.int_draws} draws")
        value = self._ints[self.int_draws]
        self.int_draws += 1
        if not a <= value <= b:
            raise ValueError(f"scripted int {value} outside [{a}, {b}]")
        return value

    def remaining(self) -> tuple[int, int]:
        return len(self._floats) - self.float_draws, len(self._ints) - self.int_draws
