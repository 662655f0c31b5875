from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import random
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .draw.engine import (
    DrawOutcome,
    DrawSequencer,
    KeepEligibleHook,
    PauseHook,
)
from .draw.items import RaffleItem
from .draw.records import WinRecordStore
from .draw.selector import WeightedSelector, WeightingRegistry, DEFAULT_WEIGHTING_KEY
from .models import RaffleEntryRecord, RaffleItemRecord, RaffleResultRecord
from .sources import RaffleSinkError, RaffleSourceError

logger = logging.getLogger(__name__)


@dataclass
class RaffleRun:
    """Result of :func:`run_raffle`.

    Attributes
    ----------
    items : list[RaffleItem]
        Items in the order they were drawn.
    winners : dict[str, str]
        Item name to winner name; items without eligible participants are absent.
    outcomes : list[DrawOutcome]
        Per-item draw details, aligned with ``items``.
    store : WinRecordStore
        Final win records of the participants still in the raffle.
    """

    items: List[RaffleItem]
    winners: Dict[str, str] = field(default_factory=dict)
    outcomes: List[DrawOutcome] = field(default_factory=list)
    store: WinRecordStore = field(default_factory=WinRecordStore)


def run_raffle(
    items: Sequence[RaffleItem],
    *,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    pause: Optional[PauseHook] = None,
    start: Optional[PauseHook] = None,
    keep_eligible: Optional[KeepEligibleHook] = None,
    weighting_key: str = DEFAULT_WEIGHTING_KEY,
    registry: Optional[WeightingRegistry] = None,
) -> RaffleRun:
    """Run one weighted draw per item and return the winners.

    The workflow performs the following steps:

    1. Register every participant in first-seen order with zero wins.
    2. Announce the participant list and call ``start`` once before the
       first draw.
    3. Delegate to :class:`DrawSequencer`, which draws items by ascending
       value and applies wins and opt-outs between draws.

    Parameters
    ----------
    items : Sequence[RaffleItem]
        Items to draw. Names must be unique.
    rng : Optional[random.Random], default: None
        Random source. When omitted a ``random.Random(seed)`` is used.
    seed : Optional[int], default: None
        Seed for the default random source.
    pause : Optional[PauseHook], default: None
        Hook called before each reveal.
    start : Optional[PauseHook], default: None
        Hook called once after the participant list is announced.
    keep_eligible : Optional[KeepEligibleHook], default: None
        Decides after each win whether the winner stays in later draws.
    weighting_key : str, default: "inverse_total_wins"
        Ticket weighting to use.
    registry : Optional[WeightingRegistry], default: None
        Optional registry containing custom ticket weightings.

    Returns
    -------
    RaffleRun
        Draw order, winners mapping, per-item outcomes and final win records.

    Raises
    ------
    ValueError
        If two items share the same name.
    """

    store = WinRecordStore()
    sequencer = DrawSequencer(
        items,
        store,
        selector=WeightedSelector(store, weighting_key=weighting_key, registry=registry),
        rng=rng,
        seed=seed,
        pause=pause,
        keep_eligible=keep_eligible,
    )

    logger.info("Total List of Participants:")
    for name in store.names():
        logger.info(f"- Participant: {name}")

    if start is not None:
        start()

    result = sequencer.run()
    return RaffleRun(
        items=result.items,
        winners=result.winners,
        outcomes=result.outcomes,
        store=store,
    )


def register_items(session: Session, items: Iterable[RaffleItem]) -> List[RaffleItemRecord]:
    """Persist ``items`` and their entrants, replacing entrants of existing names.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    items : Iterable[RaffleItem]
        Items to store. An item whose name already exists is updated in-place.

    Returns
    -------
    list[RaffleItemRecord]
        The persisted rows, in the order given.
    """

    records: List[RaffleItemRecord] = []
    for item in items:
        record = RaffleItemRecord.get_by_name(session, item.name)
        if record is None:
            record = RaffleItemRecord(name=item.name, value=item.value)
            session.add(record)
        else:
            record.value = item.value
            record.entries.clear()
            # Flush the orphan deletes before re-adding names under the
            # (item_id, participant_name) unique constraint.
            session.flush()

        record.entries = [
            RaffleEntryRecord(participant_name=name, position=position)
            for position, name in enumerate(item.participant_names)
        ]
        records.append(record)

    session.flush()
    return records


def load_items(session: Session) -> List[RaffleItem]:
    """Return every stored item as a :class:`RaffleItem`, in insertion order.

    Raises
    ------
    RaffleSourceError
        If the database cannot be queried.
    """

    stmt = (
        select(RaffleItemRecord)
        .options(selectinload(RaffleItemRecord.entries))
        .order_by(RaffleItemRecord.id.asc())
    )
    try:
        records = session.scalars(stmt).all()
    except SQLAlchemyError as exc:
        raise RaffleSourceError(f"Error loading raffle items: {exc}") from exc

    items = [record.to_item() for record in records]
    logger.debug(f"Loaded {len(items)} items from the database")
    return items


def record_results(
    session: Session,
    items: Sequence[RaffleItem],
    winners: Mapping[str, str],
) -> List[RaffleResultRecord]:
    """Upsert one result row per item, storing ``None`` for items without a winner.

    Items missing from the ``raffle_items`` table are registered first so the
    sink works for items that came from another source.

    Raises
    ------
    RaffleSinkError
        If the results cannot be written.
    """

    results: List[RaffleResultRecord] = []
    try:
        for position, item in enumerate(items):
            record = RaffleItemRecord.get_by_name(session, item.name)
            if record is None:
                (record,) = register_items(session, [item])

            result = record.result
            winner = winners.get(item.name)
            if result is None:
                result = RaffleResultRecord(
                    winner_name=winner, draw_position=position, item=record
                )
                session.add(result)
            else:
                result.winner_name = winner
                result.draw_position = position
                result.drawn_at = datetime.now(timezone.utc)
            results.append(result)
        session.flush()
    except SQLAlchemyError as exc:
        raise RaffleSinkError(f"Error writing raffle results: {exc}") from exc
    return results


__all__ = [
    "RaffleRun",
    "load_items",
    "record_results",
    "register_items",
    "run_raffle",
]
