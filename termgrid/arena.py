"""A registry of items addressed by reusable handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, List, Optional, Tuple, TypeVar, Union

__all__ = ["Handle", "RegistryItems", "Registry"]

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Handle:
    """Identifies an item stored in a :class:`Registry`."""

    index: int


@dataclass(frozen=True)
class _FreeSlot:
    next_free: Optional[int]


class RegistryItems(Generic[T]):
    """The slots of a registry; iteration yields ``(handle, item)`` for live items."""

    def __init__(self) -> None:
        self._slots: List[Union[_FreeSlot, T]] = []

    def is_empty(self) -> bool:
        """Whether no live item is stored."""
        return next(iter(self), None) is None

    def __iter__(self) -> Iterator[Tuple[Handle, T]]:
        for index, slot in enumerate(self._slots):
            if not isinstance(slot, _FreeSlot):
                yield Handle(index), slot

    def _check(self, handle: Handle) -> None:
        if not 0 <= handle.index < len(self._slots) or isinstance(self._slots[handle.index], _FreeSlot):
            raise KeyError(handle)

    def __getitem__(self, handle: Handle) -> T:
        self._check(handle)
        return self._slots[handle.index]  # type: ignore[return-value]

    def __setitem__(self, handle: Handle, value: T) -> None:
        self._check(handle)
        self._slots[handle.index] = value


class Registry(Generic[T]):
    """Stores items, handing out handles; freed handles are reused last-freed first."""

    def __init__(self) -> None:
        self._items: RegistryItems[T] = RegistryItems()
        self._free_cell: Optional[int] = None

    def items(self) -> RegistryItems[T]:
        """The stored items."""
        return self._items

    def insert(self, f: Callable[[Handle], Tuple[T, R]]) -> R:
        """Store the item built by ``f(handle)`` and return the second value ``f`` gives."""
        slots = self._items._slots
        if self._free_cell is not None:
            index = self._free_cell
            item, result = f(Handle(index))
            free = slots[index]
            assert isinstance(free, _FreeSlot)
            self._free_cell = free.next_free
            slots[index] = item
        else:
            index = len(slots)
            item, result = f(Handle(index))
            slots.append(item)
        return result

    def remove(self, handle: Handle) -> T:
        """Remove and return the item under ``handle``."""
        item = self._items[handle]
        self._items._slots[handle.index] = _FreeSlot(self._free_cell)
        self._free_cell = handle.index
        return item

    def __getitem__(self, handle: Handle) -> T:
        return self._items[handle]

    def __setitem__(self, handle: Handle, value: T) -> None:
        self._items[handle] = value