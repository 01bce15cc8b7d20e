"""Bounded, ordered image selection.

Generate / TryOn pathways toggle with a bound: clicking a selected image
removes it, clicking a new one appends it only while below the bound.
The Edit pathway behaves like a radio button: the clicked image replaces
the whole selection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from designirl.models.domain import ImageRecord

logger = logging.getLogger(__name__)


class SelectionSet:
    """Insertion-ordered set of ImageRecord, unique by id."""

    def __init__(self, max_size: int = 5, radio: bool = False) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be >= 1, got {max_size}")
        self._items: list[ImageRecord] = []
        self.max_size = max_size
        self.radio = radio

    @property
    def bound(self) -> int:
        return 1 if self.radio else self.max_size

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self.bound

    def toggle(self, record: ImageRecord) -> bool:
        """Apply one click. Returns True if the selection changed."""
        if self.radio:
            if self._items == [record]:
                return False
            self._items = [record]
            return True

        for i, existing in enumerate(self._items):
            if existing.id == record.id:
                del self._items[i]
                return True

        if self.is_full:
            logger.debug("Selection full (%d/%d), ignoring %s", len(self._items), self.bound, record.id)
            return False

        self._items.append(record)
        return True

    def clear(self) -> None:
        self._items = []

    def ids(self) -> list[str]:
        return [r.id for r in self._items]

    def items(self) -> list[ImageRecord]:
        return list(self._items)

    def __contains__(self, image_id: object) -> bool:
        return any(r.id == image_id for r in self._items)

    def __iter__(self) -> Iterator[ImageRecord]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
