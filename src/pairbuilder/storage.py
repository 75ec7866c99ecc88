"""Text persistence for candidate pair sets.

Each line holds a view id followed by all of its partners, ascending, separated
by single spaces::

    0 1 2
    1 2

Lines are ordered by their leading id, so equal pair sets always produce
byte-identical files.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .models import PairSet
from .pairs import Pair, make_pair

logger = logging.getLogger(__name__)


class PairSetError(Exception):
    """Base error for pair set persistence and view loading."""


class PairSetIOError(PairSetError):
    """Raised when a pairs file cannot be opened, written, or read."""

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)


class PairSetParseError(PairSetError, ValueError):
    """Raised when pairs file content is malformed."""

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.line = line


def format_pairs(pair_set: PairSet) -> str:
    """Serialize a pair set to its canonical text form.

    :param pair_set: Pairs to serialize.
    :return: Newline-terminated lines, or ``""`` for an empty set.
    """
    lines = [
        " ".join(str(view_id) for view_id in (first, *partners))
        for first, partners in pair_set.grouped_by_first().items()
    ]
    return "".join(f"{line}\n" for line in lines)


def _parse_view_id(token: str, *, line_number: int, line: str) -> int:
    if not token.isascii() or not token.isdigit():
        raise PairSetParseError(
            f"expected an unsigned integer view id, got {token!r}",
            line_number=line_number,
            line=line,
        )
    return int(token)


def _parse_line(line: str, line_number: int) -> list[Pair]:
    tokens = line.split()
    view_ids = [_parse_view_id(token, line_number=line_number, line=line) for token in tokens]
    if len(view_ids) < 2:
        raise PairSetParseError(
            "expected a view id followed by at least one partner",
            line_number=line_number,
            line=line,
        )

    first, partners = view_ids[0], view_ids[1:]
    pairs: list[Pair] = []
    for partner in partners:
        if partner == first:
            raise PairSetParseError(
                f"view {first} is paired with itself",
                line_number=line_number,
                line=line,
            )
        pairs.append(make_pair(first, partner))
    return pairs


def parse_pairs(
    text: str,
    *,
    range_start: int | None = None,
    range_size: int | None = None,
) -> PairSet:
    """Parse canonical (or hand-written) pairs text into a new pair set.

    Blank lines are ignored. Partners listed before their leading id, such as
    ``2 0``, are stored canonically as ``(0, 2)``.

    :param text: Pairs file content.
    :param range_start: Index of the first non-blank line to load. ``None`` loads all lines.
    :param range_size: Number of non-blank lines to load from ``range_start``.
        ``None`` loads to the end.
    :raises ValueError: If the requested range is invalid.
    :raises PairSetParseError: If a selected line is malformed.
    :return: Parsed pair set.
    """
    if range_start is not None and range_start < 0:
        raise ValueError("range_start must be >= 0")
    if range_size is not None and range_size <= 0:
        raise ValueError("range_size must be > 0")

    start = range_start or 0
    stop = None if range_size is None else start + range_size

    pairs: list[Pair] = []
    entry_index = 0
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        if stop is not None and entry_index >= stop:
            break
        if entry_index >= start:
            pairs.extend(_parse_line(line, line_number))
        entry_index += 1

    return PairSet(pairs)


def save_pairs(destination: Path | str, pair_set: PairSet) -> None:
    """Write a pair set to ``destination`` in canonical form.

    :param destination: Output file path. Parent directories must exist.
    :param pair_set: Pairs to persist.
    :raises PairSetIOError: If the file cannot be opened or fully written.
    """
    path = Path(destination)
    text = format_pairs(pair_set)
    try:
        with path.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
    except OSError as exc:
        raise PairSetIOError(f"Could not write pairs file {path}: {exc}", path) from exc

    logger.info(f"Saved {len(pair_set)} pairs to {path}")


def load_pairs(
    source: Path | str,
    *,
    range_start: int | None = None,
    range_size: int | None = None,
) -> PairSet:
    """Load a pair set previously written by :func:`save_pairs`.

    :param source: Pairs file path.
    :param range_start: Index of the first non-blank line to load.
    :param range_size: Number of non-blank lines to load.
    :raises PairSetIOError: If the file cannot be opened or read.
    :raises PairSetParseError: If the content is malformed.
    :return: A new pair set with the persisted membership.
    """
    path = Path(source)
    try:
        with path.open("r", encoding="utf-8") as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise PairSetIOError(f"Could not read pairs file {path}: {exc}", path) from exc

    pair_set = parse_pairs(text, range_start=range_start, range_size=range_size)
    logger.info(f"Loaded {len(pair_set)} pairs from {path}")
    return pair_set
