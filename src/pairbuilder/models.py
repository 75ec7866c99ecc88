"""Data models for candidate pair sets."""

from __future__ import annotations

from typing import Iterable, Iterator, Literal

from .pairs import Pair, make_pair

PairPolicy = Literal["exhaustive", "contiguous"]


def _coerce_pair(item: Pair | tuple[int, int]) -> Pair:
    """Return ``item`` as a canonical ``Pair``."""
    if isinstance(item, Pair):
        return item
    view_a, view_b = item
    return make_pair(view_a, view_b)


class PairSet:
    """Immutable, duplicate-free collection of candidate pairs.

    Two pair sets are equal when they hold the same pairs. Iteration always
    yields pairs in ascending ``(first, second)`` order.
    """

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Iterable[Pair | tuple[int, int]] = ()) -> None:
        self._pairs: frozenset[Pair] = frozenset(_coerce_pair(item) for item in pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[Pair]:
        return iter(sorted(self._pairs))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Pair):
            return item in self._pairs
        if isinstance(item, tuple) and len(item) == 2:
            try:
                return make_pair(item[0], item[1]) in self._pairs
            except (TypeError, ValueError):
                return False
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PairSet):
            return False
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __repr__(self) -> str:
        inner = ", ".join(f"({pair.first}, {pair.second})" for pair in self)
        return f"PairSet([{inner}])"

    def grouped_by_first(self) -> dict[int, list[int]]:
        """Group partners under their smaller view id.

        :return: Mapping of ``first`` to ascending ``second`` values, with keys
            inserted in ascending order.
        """
        grouped: dict[int, list[int]] = {}
        for pair in self:
            grouped.setdefault(pair.first, []).append(pair.second)
        return grouped

    def view_ids(self) -> set[int]:
        """Return every view id that appears in at least one pair."""
        ids: set[int] = set()
        for pair in self._pairs:
            ids.add(pair.first)
            ids.add(pair.second)
        return ids
