"""Win tracking and per-item eligibility state shared across sequential draws."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional


def normalize_name(name: str) -> str:
    """Trim a raw participant name and reject empty values.

    Parameters
    ----------
    name : str
        Raw participant name as supplied by a data source.
    """

    if name is None:
        raise ValueError("participant name must not be None")
    if not isinstance(name, str):
        raise TypeError("participant name must be a string")
    normalized = name.strip()
    if not normalized:
        raise ValueError("participant name must not be empty")
    return normalized


@dataclass
class WinRecord:
    """Total number of items a participant has won during the current run.

    Attributes
    ----------
    name : str
        Participant name, case-sensitive.
    wins : int
        Monotonic win counter across all items.
    """

    name: str
    wins: int = 0

    def record_win(self) -> int:
        self.wins += 1
        return self.wins


class WinRecordStore:
    """Registry of active participants keyed by name.

    The store is the single source of truth for prior wins. Records are looked
    up by reference so every item pool sees the same counters.
    """

    def __init__(self) -> None:
        self._records: Dict[str, WinRecord] = {}

    def register(self, name: str) -> WinRecord:
        """Return the record for ``name``, creating it on first sight."""
        name = normalize_name(name)
        record = self._records.get(name)
        if record is None:
            record = WinRecord(name=name)
            self._records[name] = record
        return record

    def register_all(self, names: Iterable[str]) -> None:
        for name in names:
            self.register(name)

    def get(self, name: str) -> Optional[WinRecord]:
        return self._records.get(name)

    def wins_for(self, name: str) -> int:
        """Return the prior win count for ``name``."""
        try:
            return self._records[name].wins
        except KeyError as exc:
            raise KeyError(f"Unknown participant '{name}'") from exc

    def record_win(self, name: str) -> int:
        """Increment the win counter of ``name`` and return the new total."""
        try:
            record = self._records[name]
        except KeyError as exc:
            raise KeyError(f"Unknown participant '{name}'") from exc
        return record.record_win()

    def remove(self, name: str) -> bool:
        """Drop ``name`` from the registry. Returns ``True`` if it was present."""
        return self._records.pop(name, None) is not None

    def names(self) -> List[str]:
        """Return registered names in first-seen order."""
        return list(self._records)

    def snapshot(self) -> Dict[str, int]:
        """Return a copy of the current win counters keyed by name."""
        return {name: record.wins for name, record in self._records.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[WinRecord]:
        return iter(list(self._records.values()))


class EligibilityPool:
    """Names still allowed to win one item.

    Duplicates collapse onto the first occurrence. Iteration order is the
    insertion order; the selector imposes its own ordering before drawing.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: Dict[str, None] = {}
        for name in names:
            self.add(name)

    def add(self, name: str) -> None:
        self._names.setdefault(normalize_name(name), None)

    def discard(self, name: str) -> bool:
        """Remove ``name`` if present. Returns ``True`` when something was removed."""
        if name in self._names:
            del self._names[name]
            return True
        return False

    def names(self) -> List[str]:
        return list(self._names)

    def eligible(self, store: WinRecordStore) -> List[str]:
        """Return the names that are both in this pool and still registered."""
        return [name for name in self._names if name in store]

    def is_empty(self) -> bool:
        return not self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<EligibilityPool({self.names()!r})>"


__all__ = [
    "EligibilityPool",
    "WinRecord",
    "WinRecordStore",
    "normalize_name",
]
