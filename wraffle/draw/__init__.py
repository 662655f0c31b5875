"""Weighted draw core: win records, eligibility pools, selection and sequencing."""

from .engine import DrawOutcome, DrawSequencer, SequenceResult, sort_items_by_value
from .items import RaffleItem
from .records import EligibilityPool, WinRecord, WinRecordStore
from .selector import (
    DEFAULT_WEIGHTING_KEY,
    DEFAULT_WEIGHTING_REGISTRY,
    NO_WINNER,
    SelectionError,
    TicketTable,
    TicketWeighting,
    WeightedSelector,
    WeightingRegistry,
)

__all__ = [
    "DEFAULT_WEIGHTING_KEY",
    "DEFAULT_WEIGHTING_REGISTRY",
    "DrawOutcome",
    "DrawSequencer",
    "EligibilityPool",
    "NO_WINNER",
    "RaffleItem",
    "SelectionError",
    "SequenceResult",
    "TicketTable",
    "TicketWeighting",
    "WeightedSelector",
    "WeightingRegistry",
    "WinRecord",
    "WinRecordStore",
    "sort_items_by_value",
]
