from __future__ import annotations

import random
from typing import Iterable


class FixedRandom(random.Random):
    """Random source replaying a fixed cycle of ``random()`` values."""

    def __init__(self, values: Iterable[float]) -> None:
        super().__init__(0)
        self._values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self._values[self.calls % len(self._values)]
        self.calls += 1
        return value
