from __future__ import annotations

import logging
from typing import Callable, Dict, Generic, Iterable, Iterator, Optional, Protocol, TypeVar

from ..errors import NotFound

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Repository(Protocol[T_co]):
    """Read-only lookup of definitions (spells, monsters, loot tables) by id."""

    def get_by_id(self, key: str) -> Optional[T_co]:  # pragma: no cover - Protocol
        ...


class InMemoryRepository(Generic[T]):
    """Dictionary-backed repository.

    Lookups are case-sensitive. ``get_by_id`` returns None for unknown ids so
    the fail-soft callers can degrade to empty results; ``require`` raises.
    """

    def __init__(self, items: Iterable[T] = (), key: Callable[[T], str] | None = None) -> None:
        self._key = key or (lambda item: getattr(item, "id"))
        self._items: Dict[str, T] = {}
        for item in items:
            self.add(item)

    def add(self, item: T) -> None:
        k = self._key(item)
        if k in self._items:
            logger.warning("Replacing duplicate definition for id=%s", k)
        self._items[k] = item

    def get_by_id(self, key: str) -> Optional[T]:
        if not key:
            return None
        return self._items.get(key)

    def require(self, key: str) -> T:
        item = self.get_by_id(key)
        if item is None:
            raise NotFound(f"No definition registered for id {key!r}")
        return item

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["Repository", "InMemoryRepository"]
