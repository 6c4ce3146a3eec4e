# tunnel_collection.py

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from errors import OutOfRange
from tunnel_codec import TunnelRecord


class TunnelCollection:
    """
    Ordered, in-memory list of tunnels being edited.

    - Order is insertion order and is the order shown and re-encoded.
    - Identity is positional; duplicates are allowed.
    - `selected` is the position being edited (or None). A removal at or
      before it clears it; otherwise only select() changes it.
    """

    def __init__(self, records: Optional[Iterable[TunnelRecord]] = None) -> None:
        self._records: List[TunnelRecord] = list(records or [])
        self._selected: Optional[int] = None

    def _check(self, position: int) -> None:
        if not 0 <= position < len(self._records):
            raise OutOfRange(position, len(self._records))

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    def select(self, position: Optional[int]) -> Optional[TunnelRecord]:
        if position is None:
            self._selected = None
            return None
        self._check(position)
        self._selected = position
        return self._records[position]

    def get(self, position: int) -> TunnelRecord:
        self._check(position)
        return self._records[position]

    def append(self, record: TunnelRecord) -> int:
        self._records.append(record)
        return len(self._records) - 1

    def replace_at(self, position: int, record: TunnelRecord) -> None:
        self._check(position)
        self._records[position] = record

    def remove_at(self, position: int) -> TunnelRecord:
        self._check(position)
        removed = self._records.pop(position)
        if self._selected is not None and self._selected >= position:
            self._selected = None
        return removed

    def all(self) -> Tuple[TunnelRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TunnelRecord]:
        return iter(self.all())
