"""Canonical pair type for candidate image pairs."""

from __future__ import annotations

from dataclasses import dataclass


def _check_view_id(value: object) -> int:
    """Validate a single view identifier.

    :param object value: Candidate identifier.
    :raises TypeError: If ``value`` is not an integer (``bool`` included).
    :raises ValueError: If ``value`` is negative.
    :return int: The identifier.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"View id must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"View id must be >= 0, got {value}")
    return value


@dataclass(frozen=True, order=True)
class Pair:
    """Unordered relation between two distinct views, stored smaller id first.

    Components given in reverse order are swapped on construction, so
    ``Pair(5, 3) == Pair(3, 5)`` and ``first < second`` always holds.
    """

    first: int
    second: int

    def __post_init__(self) -> None:
        first = _check_view_id(self.first)
        second = _check_view_id(self.second)
        if first == second:
            raise ValueError(f"A view cannot be paired with itself: {first}")
        if first > second:
            object.__setattr__(self, "first", second)
            object.__setattr__(self, "second", first)

    def as_tuple(self) -> tuple[int, int]:
        return (self.first, self.second)


def make_pair(view_a: int, view_b: int) -> Pair:
    """Return the canonical pair for two view ids.

    :param int view_a: First view id.
    :param int view_b: Second view id.
    :return Pair: Pair ordered as ``(min, max)``.
    """

    return Pair(view_a, view_b)
