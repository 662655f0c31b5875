"""CSV data source and result sink for the raffle."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence, Union

from .draw.items import RaffleItem

logger = logging.getLogger(__name__)

NO_WINNER_LABEL = "No winner"
RESULT_HEADER = ("Item", "Winner")

PathLike = Union[str, Path]

_ITEM_VALUE_RE = re.compile(r"[+-]?[0-9]+")


class RaffleSourceError(RuntimeError):
    """Raised when raffle items cannot be read."""


class RaffleSinkError(RuntimeError):
    """Raised when raffle results cannot be written."""


def parse_item_rows(rows: Iterable[Sequence[str]]) -> List[RaffleItem]:
    """Turn raw ``name,value,participant,...`` rows into items.

    Rows with fewer than three fields, a non-numeric value or a name that was
    already seen are skipped with a warning; the first occurrence of a name
    wins.

    Parameters
    ----------
    rows : Iterable[Sequence[str]]
        Raw rows, e.g. as produced by :func:`csv.reader`.

    Returns
    -------
    list[RaffleItem]
        Parsed items in source order.
    """

    items: List[RaffleItem] = []
    seen: set[str] = set()
    for line_no, row in enumerate(rows, start=1):
        if len(row) < 3:
            logger.warning(f"Skipping row {line_no}: expected at least 3 fields, got {len(row)}")
            continue

        name = row[0]
        raw_value = row[1].strip()
        if not _ITEM_VALUE_RE.fullmatch(raw_value):
            logger.warning(f"Skipping row {line_no}: error parsing item value {row[1]!r}")
            continue
        value = int(raw_value)

        if name in seen:
            logger.warning(f"Skipping row {line_no}: duplicate item name {name!r}")
            continue
        seen.add(name)

        items.append(RaffleItem.build(name, value, row[2:]))
    return items


def read_items_csv(path: PathLike) -> List[RaffleItem]:
    """Load raffle items from the CSV file at ``path``.

    Raises
    ------
    RaffleSourceError
        If the file cannot be opened or is not valid CSV.
    """

    try:
        with open(path, newline="", encoding="utf-8") as handle:
            rows = list(csv.reader(handle))
    except (OSError, csv.Error, UnicodeDecodeError) as exc:
        raise RaffleSourceError(f"Error reading CSV file {path}: {exc}") from exc

    items = parse_item_rows(rows)
    logger.debug(f"Loaded {len(items)} items from {path}")
    return items


def result_rows(items: Iterable[RaffleItem], winners: Mapping[str, str]) -> List[List[str]]:
    """Return ``[item, winner]`` rows, using ``"No winner"`` for missing entries."""
    return [[item.name, winners.get(item.name) or NO_WINNER_LABEL] for item in items]


def write_results_csv(
    path: PathLike, items: Iterable[RaffleItem], winners: Mapping[str, str]
) -> None:
    """Write one ``Item,Winner`` row per item to ``path``.

    Raises
    ------
    RaffleSinkError
        If the file cannot be written.
    """

    rows = result_rows(items, winners)
    try:
        with open(path, "w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(RESULT_HEADER)
            writer.writerows(rows)
    except OSError as exc:
        raise RaffleSinkError(f"Error writing results to CSV {path}: {exc}") from exc
    logger.debug(f"Wrote {len(rows)} results to {path}")


__all__ = [
    "NO_WINNER_LABEL",
    "RESULT_HEADER",
    "RaffleSinkError",
    "RaffleSourceError",
    "parse_item_rows",
    "read_items_csv",
    "result_rows",
    "write_results_csv",
]
