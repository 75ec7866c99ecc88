from __future__ import annotations

from pathlib import Path

import pytest

from pairbuilder.builder import contiguous_with_overlap, exhaustive_pairs
from pairbuilder.models import PairSet
from pairbuilder.storage import (
    PairSetError,
    PairSetIOError,
    PairSetParseError,
    format_pairs,
    load_pairs,
    parse_pairs,
    save_pairs,
)
from tests.conftest import write_text_file


def test_save_and_load_canonicalizes_pairs(tmp_path: Path) -> None:
    pair_set = PairSet([(0, 1), (1, 2), (2, 0)])
    path = tmp_path / "pairs.txt"

    save_pairs(path, pair_set)
    loaded = load_pairs(path)

    assert path.read_text(encoding="utf-8") == "0 1 2\n1 2\n"
    assert [pair.as_tuple() for pair in loaded] == [(0, 1), (0, 2), (1, 2)]
    assert loaded == pair_set


def test_round_trip_preserves_membership(tmp_path: Path) -> None:
    views = [3, 17, 4, 250, 99, 12, 0]
    for pair_set in (
        exhaustive_pairs(views),
        contiguous_with_overlap(views, 2),
        PairSet(),
    ):
        path = tmp_path / "pairs.txt"
        save_pairs(path, pair_set)
        assert load_pairs(path) == pair_set


def test_equal_sets_serialize_identically() -> None:
    forward = PairSet([(12, 54), (54, 65), (12, 89)])
    backward = PairSet([(89, 12), (65, 54), (54, 12)])

    assert format_pairs(forward) == format_pairs(backward) == "12 54 89\n54 65\n"
    assert format_pairs(PairSet()) == ""


def test_parse_accepts_unsorted_lines_and_blank_lines() -> None:
    text = "\n5 3 9\n   \n1\t2 7\n9 0\n"

    pair_set = parse_pairs(text)

    assert [pair.as_tuple() for pair in pair_set] == [(0, 9), (1, 2), (1, 7), (3, 5), (5, 9)]


@pytest.mark.parametrize(
    ("text", "line_number"),
    [
        ("0 1\n1 x\n", 2),
        ("0 1.5\n", 1),
        ("-1 2\n", 1),
        ("0 1\n4\n", 2),
        ("3 3\n", 1),
    ],
)
def test_parse_rejects_malformed_lines(text: str, line_number: int) -> None:
    with pytest.raises(PairSetParseError) as exc_info:
        parse_pairs(text)

    assert exc_info.value.line_number == line_number
    assert isinstance(exc_info.value, ValueError)
    assert isinstance(exc_info.value, PairSetError)


def test_load_fails_without_partial_result(tmp_path: Path) -> None:
    path = write_text_file(tmp_path, "0 1 2\n1 2\n2 three\n", "pairs.txt")

    loaded = None
    with pytest.raises(PairSetParseError, match="line 3"):
        loaded = load_pairs(path)
    assert loaded is None


def test_load_missing_file_raises_io_error(tmp_path: Path) -> None:
    path = tmp_path / "missing.txt"

    with pytest.raises(PairSetIOError) as exc_info:
        load_pairs(path)

    assert exc_info.value.path == path
    assert isinstance(exc_info.value.__cause__, OSError)


def test_load_empty_file_is_empty_set(tmp_path: Path) -> None:
    path = write_text_file(tmp_path, "", "pairs.txt")
    assert load_pairs(path) == PairSet()


def test_save_to_missing_directory_raises_io_error(tmp_path: Path) -> None:
    path = tmp_path / "missing" / "pairs.txt"

    with pytest.raises(PairSetIOError):
        save_pairs(path, PairSet([(0, 1)]))
    assert not path.exists()


def test_save_to_directory_raises_io_error(tmp_path: Path) -> None:
    with pytest.raises(PairSetIOError):
        save_pairs(tmp_path, PairSet([(0, 1)]))


def test_load_range_selects_lines(tmp_path: Path) -> None:
    path = write_text_file(tmp_path, "0 1 2\n\n1 2 3\n2 3\n3 4\n", "pairs.txt")

    middle = load_pairs(path, range_start=1, range_size=2)
    tail = load_pairs(path, range_start=2)

    assert [pair.as_tuple() for pair in middle] == [(1, 2), (1, 3), (2, 3)]
    assert [pair.as_tuple() for pair in tail] == [(2, 3), (3, 4)]
    assert len(load_pairs(path, range_start=10)) == 0


def test_load_range_skips_parsing_outside_range(tmp_path: Path) -> None:
    path = write_text_file(tmp_path, "0 1\nbad line\n", "pairs.txt")
    assert [pair.as_tuple() for pair in load_pairs(path, range_start=0, range_size=1)] == [(0, 1)]


def test_invalid_range_arguments() -> None:
    with pytest.raises(ValueError, match="range_start"):
        parse_pairs("0 1\n", range_start=-1)
    with pytest.raises(ValueError, match="range_size"):
        parse_pairs("0 1\n", range_start=0, range_size=0)
