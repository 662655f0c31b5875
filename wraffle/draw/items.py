"""Item descriptors shared by the sources, the sequencer and the sinks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from .records import normalize_name


@dataclass(frozen=True)
class RaffleItem:
    """One prize to be drawn.

    Attributes
    ----------
    name : str
        Item name; used as the key of the winners mapping.
    value : int
        Item value. Only used to order the draws, never for weighting.
    participant_names : tuple[str, ...]
        Names eligible to win this item, in source order.
    """

    name: str
    value: int
    participant_names: Tuple[str, ...] = ()

    @classmethod
    def build(cls, name: str, value: int, participant_names: Iterable[str]) -> "RaffleItem":
        """Create an item, trimming names and dropping blanks and repeats."""
        seen: dict[str, None] = {}
        for raw in participant_names:
            if raw is None or not str(raw).strip():
                continue
            seen.setdefault(normalize_name(str(raw)), None)
        return cls(name=name, value=int(value), participant_names=tuple(seen))


__all__ = ["RaffleItem"]
