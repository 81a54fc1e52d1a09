"""A multimap with ordered keys and ordered sets of values."""

from __future__ import annotations

from bisect import bisect_left
from typing import Any, Dict, Generic, Iterable, Iterator, List, Tuple, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class MultiMap(Generic[K, V]):
    """Maps each key to a sorted set of values.

    Keys with no values are never stored, so two maps with the same bindings
    compare equal.
    """

    __slots__ = ("_map",)

    def __init__(self, pairs: Iterable[Tuple[K, V]] = ()) -> None:
        self._map: Dict[K, List[V]] = {}
        for key, val in pairs:
            self.insert(key, val)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[K, V]]) -> MultiMap[K, V]:
        """Build a map from a sequence of (key, value) pairs."""
        return cls(pairs)

    def get(self, key: K) -> Iterator[V]:
        """Iterate, in order, over all values bound to ``key``."""
        return iter(tuple(self._map.get(key, ())))

    def get_from(self, key: K, val: Any) -> Iterator[V]:
        """Iterate, in order, over the values bound to ``key`` that are >= ``val``."""
        values = self._map.get(key)
        if not values:
            return iter(())
        return iter(tuple(values[bisect_left(values, val):]))

    def insert(self, key: K, val: V) -> None:
        values = self._map.setdefault(key, [])
        idx = bisect_left(values, val)
        if idx == len(values) or values[idx] != val:
            values.insert(idx, val)

    def remove(self, key: K, val: V) -> bool:
        """Remove one binding; return whether it was present."""
        values = self._map.get(key)
        if values is None:
            return False
        idx = bisect_left(values, val)
        found = idx < len(values) and values[idx] == val
        if found:
            del values[idx]
        if not values:
            del self._map[key]
        return found

    def remove_all(self, key: K) -> None:
        self._map.pop(key, None)

    def contains(self, key: K, val: V) -> bool:
        values = self._map.get(key)
        if not values:
            return False
        idx = bisect_left(values, val)
        return idx < len(values) and values[idx] == val

    def __iter__(self) -> Iterator[Tuple[K, V]]:
        for key in sorted(self._map):
            for val in self._map[key]:
                yield key, val

    def __len__(self) -> int:
        return sum(len(values) for values in self._map.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiMap):
            return NotImplemented
        return self._map == other._map

    __hash__ = None  # type: ignore[assignment]

    def copy(self) -> MultiMap[K, V]:
        new: MultiMap[K, V] = MultiMap()
        new._map = {key: list(values) for key, values in self._map.items()}
        return new

    def to_list(self) -> List[Tuple[K, V]]:
        """All bindings as an ordered list of (key, value) pairs."""
        return list(self)

    def __repr__(self) -> str:
        return f"MultiMap({self.to_list()!r})"