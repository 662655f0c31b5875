"""Ticket weighting and weighted winner selection."""

from __future__ import annotations

from dataclasses import dataclass
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .records import WinRecordStore


NO_WINNER = None
"""Sentinel returned when an item has no eligible participants."""


class SelectionError(RuntimeError):
    """Raised when the weighted draw reaches an impossible state."""


@dataclass(frozen=True)
class TicketWeighting:
    """Definition of a ticket weighting function.

    Attributes
    ----------
    key : str
        Registry key used to identify the weighting. This is used by
        :class:`WeightingRegistry` to map to the definition.
    weigher : Callable[[int], float]
        Callable that takes a participant's prior win count and returns a
        strictly positive ticket weight.
    description : Optional[str]
        Human-readable summary of the weighting's behaviour.
    """

    key: str
    weigher: Callable[[int], float]
    description: Optional[str] = None

    def weight(self, prior_wins: int) -> float:
        """Return the ticket weight for a participant with ``prior_wins`` wins."""
        if prior_wins < 0:
            raise ValueError("prior_wins must be non-negative")
        return float(self.weigher(prior_wins))


class WeightingRegistry:
    """Mutable registry mapping weighting keys to definitions."""

    def __init__(self) -> None:
        self._weightings: Dict[str, TicketWeighting] = {}

    def register(self, weighting: TicketWeighting, *, replace: bool = False) -> None:
        """Register a ticket weighting under its key.

        Parameters
        ----------
        weighting : TicketWeighting
            Weighting to add to the registry.
        replace : bool, default: False
            When ``True`` an existing registration with the same key is
            overwritten. Otherwise a duplicate raises :class:`ValueError`.
        """
        if not replace and weighting.key in self._weightings:
            raise ValueError(f"Weighting '{weighting.key}' is already registered")
        self._weightings[weighting.key] = weighting

    def get(self, key: str) -> TicketWeighting:
        """Return the weighting registered under ``key``."""
        try:
            return self._weightings[key]
        except KeyError as exc:
            raise KeyError(f"Unknown ticket weighting '{key}'") from exc

    def available_weightings(self) -> Dict[str, TicketWeighting]:
        """Return a copy of the registered weightings keyed by identifier."""
        return dict(self._weightings)


def _inverse_total_wins(prior_wins: int) -> float:
    return 1.0 / (1 + prior_wins)


DEFAULT_WEIGHTING_KEY = "inverse_total_wins"

DEFAULT_WEIGHTING_REGISTRY = WeightingRegistry()
DEFAULT_WEIGHTING_REGISTRY.register(
    TicketWeighting(
        key=DEFAULT_WEIGHTING_KEY,
        weigher=_inverse_total_wins,
        description=(
            "One full ticket for participants without wins; each win across any "
            "item shrinks the ticket to 1 / (1 + wins)."
        ),
    )
)


@dataclass(frozen=True)
class TicketTable:
    """Ordered ticket weights for one draw.

    Attributes
    ----------
    entries : tuple[tuple[str, float], ...]
        ``(participant, ticket)`` pairs sorted by participant name.
    total : float
        Sum of all tickets.
    """

    entries: Tuple[Tuple[str, float], ...]
    total: float

    def chance(self, name: str) -> float:
        """Return the selection probability of ``name`` for this draw."""
        for participant, ticket in self.entries:
            if participant == name:
                return ticket / self.total
        return 0.0

    def __len__(self) -> int:
        return len(self.entries)


class WeightedSelector:
    """Draws one winner per call, favouring participants with fewer wins."""

    def __init__(
        self,
        store: WinRecordStore,
        *,
        weighting_key: str = DEFAULT_WEIGHTING_KEY,
        registry: Optional[WeightingRegistry] = None,
    ) -> None:
        """Create a selector reading prior wins from ``store``.

        Parameters
        ----------
        store : WinRecordStore
            Shared win records. The selector only reads from it.
        weighting_key : str, default: "inverse_total_wins"
            Key of the ticket weighting to use.
        registry : Optional[WeightingRegistry], default: None
            Custom registry that contains ticket weightings. Typically this
            parameter is omitted, in which case the default registry is used.
        """

        self._store = store
        self._weighting = (registry or DEFAULT_WEIGHTING_REGISTRY).get(weighting_key)

    @property
    def weighting(self) -> TicketWeighting:
        return self._weighting

    def ticket_table(self, participants: Sequence[str]) -> TicketTable:
        """Compute tickets for ``participants`` in name order.

        Duplicated names are counted once.
        """
        entries: List[Tuple[str, float]] = []
        for name in sorted(set(participants)):
            ticket = self._weighting.weight(self._store.wins_for(name))
            if not ticket > 0.0:
                raise SelectionError(
                    f"Weighting '{self._weighting.key}' produced a non-positive "
                    f"ticket ({ticket!r}) for '{name}'"
                )
            entries.append((name, ticket))
        return TicketTable(entries=tuple(entries), total=sum(t for _, t in entries))

    def select(
        self, participants: Sequence[str], rng: random.Random
    ) -> Optional[str]:
        """Return the winner among ``participants`` or ``None`` when empty.

        Parameters
        ----------
        participants : Sequence[str]
            Eligible participant names for one item.
        rng : random.Random
            Random source; only ``rng.random()`` is used and it is not called
            when ``participants`` is empty.

        Returns
        -------
        Optional[str]
            A name taken from ``participants``, or :data:`NO_WINNER`.

        Notes
        -----
        Participants are visited in sorted name order, accumulating their
        tickets. The first participant whose cumulative weight reaches the
        random point wins, so a roll of ``0.0`` always picks the first name.
        """
        if not participants:
            return NO_WINNER
        table = self.ticket_table(participants)
        return self.select_from_table(table, rng)

    def select_from_table(self, table: TicketTable, rng: random.Random) -> Optional[str]:
        if not table.entries:
            return NO_WINNER
        if not table.total > 0.0:
            raise SelectionError("ticket total must be positive for a non-empty pool")

        point = rng.random() * table.total
        cumulative = 0.0
        for name, ticket in table.entries:
            cumulative += ticket
            if cumulative >= point:
                return name

        # Rounding can leave the final cumulative sum a hair below the point.
        return table.entries[-1][0]


__all__ = [
    "DEFAULT_WEIGHTING_KEY",
    "DEFAULT_WEIGHTING_REGISTRY",
    "NO_WINNER",
    "SelectionError",
    "TicketTable",
    "TicketWeighting",
    "WeightedSelector",
    "WeightingRegistry",
]
