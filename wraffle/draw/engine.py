"""Sequential draw engine applying one weighted draw per item."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
from typing import Callable, Dict, List, Optional, Sequence

from .items import RaffleItem
from .records import EligibilityPool, WinRecordStore
from .selector import TicketTable, WeightedSelector

logger = logging.getLogger(__name__)

PauseHook = Callable[[], None]
KeepEligibleHook = Callable[[str, RaffleItem], bool]


def _no_pause() -> None:
    return None


def _always_keep(winner: str, item: RaffleItem) -> bool:
    return True


@dataclass
class DrawOutcome:
    """Value object describing the draw of a single item.

    Attributes
    ----------
    item : RaffleItem
        The item that was processed.
    winner : Optional[str]
        Winning participant, or ``None`` when the pool was empty.
    tickets : Optional[TicketTable]
        Ticket weights used for the draw; ``None`` for skipped items.
    wins_after : int
        Winner's total wins after this draw (``0`` for skipped items).
    opted_out : bool
        ``True`` when the winner left every following draw.
    """

    item: RaffleItem
    winner: Optional[str]
    tickets: Optional[TicketTable] = None
    wins_after: int = 0
    opted_out: bool = False

    @property
    def skipped(self) -> bool:
        return self.winner is None


@dataclass
class SequenceResult:
    """Everything a full pass over the items produced."""

    items: List[RaffleItem]
    winners: Dict[str, str] = field(default_factory=dict)
    outcomes: List[DrawOutcome] = field(default_factory=list)


def sort_items_by_value(items: Sequence[RaffleItem]) -> List[RaffleItem]:
    """Return ``items`` ordered by ascending value; ties keep their input order."""
    return sorted(items, key=lambda item: item.value)


class DrawSequencer:
    """Runs the weighted draws for every item in ascending value order."""

    def __init__(
        self,
        items: Sequence[RaffleItem],
        store: WinRecordStore,
        *,
        selector: Optional[WeightedSelector] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        pause: Optional[PauseHook] = None,
        keep_eligible: Optional[KeepEligibleHook] = None,
    ) -> None:
        """Prepare a single pass over ``items``.

        Parameters
        ----------
        items : Sequence[RaffleItem]
            Items to draw. Names must be unique.
        store : WinRecordStore
            Shared win records. Every participant of every item is registered
            on construction.
        selector : Optional[WeightedSelector], default: None
            Selector override; defaults to one reading from ``store``.
        rng : Optional[random.Random], default: None
            Random source. When omitted a ``random.Random(seed)`` is created.
        seed : Optional[int], default: None
            Seed used only when ``rng`` is not provided.
        pause : Optional[PauseHook], default: None
            Called before each winner is revealed. No-op by default.
        keep_eligible : Optional[KeepEligibleHook], default: None
            Asked after each win whether the winner stays in the following
            draws. Everyone stays by default.

        Raises
        ------
        ValueError
            If two items share the same name.
        """

        names_seen: set[str] = set()
        for item in items:
            if item.name in names_seen:
                raise ValueError(f"Duplicate item name '{item.name}'")
            names_seen.add(item.name)

        self._store = store
        self._items = sort_items_by_value(items)
        self._pools: Dict[str, EligibilityPool] = {
            item.name: EligibilityPool(item.participant_names) for item in items
        }
        for item in items:
            store.register_all(item.participant_names)

        self._selector = selector or WeightedSelector(store)
        self._rng = rng if rng is not None else random.Random(seed)
        self._pause = pause or _no_pause
        self._keep_eligible = keep_eligible or _always_keep
        self._result: Optional[SequenceResult] = None

    @property
    def items(self) -> List[RaffleItem]:
        """Items in draw order."""
        return list(self._items)

    @property
    def store(self) -> WinRecordStore:
        return self._store

    def pool_for(self, item_name: str) -> EligibilityPool:
        try:
            return self._pools[item_name]
        except KeyError as exc:
            raise KeyError(f"Unknown item '{item_name}'") from exc

    def run(self) -> SequenceResult:
        """Draw every item once and return the accumulated result.

        Notes
        -----
        For each item in draw order:

        1. Resolve the eligible names at draw time (pool members still in the
           store), so earlier opt-outs are honoured.
        2. Skip items with nobody eligible; no winners entry is written.
        3. Call the pause hook, draw, record the win, store the winner.
        4. If the winner opts out, drop them from every pool and the store.

        Raises
        ------
        RuntimeError
            If the sequencer has already run.
        """
        if self._result is not None:
            raise RuntimeError("DrawSequencer.run() may only be called once")

        result = SequenceResult(items=list(self._items))
        for item in self._items:
            result.outcomes.append(self._draw_item(item, result.winners))

        self._result = result
        return result

    def _draw_item(self, item: RaffleItem, winners: Dict[str, str]) -> DrawOutcome:
        eligible = self._pools[item.name].eligible(self._store)
        if not eligible:
            logger.info(f"Item {item.name} with value {item.value} has no eligible participants")
            return DrawOutcome(item=item, winner=None)

        tickets = self._selector.ticket_table(eligible)
        logger.info(f"Item {item.name} with value {item.value}")
        logger.info("Eligible Participants:")
        for name, _ticket in tickets.entries:
            logger.info(
                f"- Participant: {name}, Previous Wins: {self._store.wins_for(name)}, "
                f"Chance: {tickets.chance(name):.1%}"
            )

        self._pause()
        winner = self._selector.select_from_table(tickets, self._rng)
        if winner is None:  # pragma: no cover - guarded by the eligibility check
            return DrawOutcome(item=item, winner=None, tickets=tickets)

        wins_after = self._store.record_win(winner)
        winners[item.name] = winner
        logger.info(f"Winner for item {item.name} with value {item.value}: {winner}")

        opted_out = not self._keep_eligible(winner, item)
        if opted_out:
            self._opt_out(winner)
            logger.info(f"{winner} has opted out and will be removed from future drawings.")

        return DrawOutcome(
            item=item,
            winner=winner,
            tickets=tickets,
            wins_after=wins_after,
            opted_out=opted_out,
        )

    def _opt_out(self, name: str) -> None:
        for pool in self._pools.values():
            pool.discard(name)
        self._store.remove(name)


__all__ = [
    "DrawOutcome",
    "DrawSequencer",
    "KeepEligibleHook",
    "PauseHook",
    "SequenceResult",
    "sort_items_by_value",
]
