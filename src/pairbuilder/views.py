"""Loading view ids from scene description files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .storage import PairSetError

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json", ".sfm")


class ViewSourceError(PairSetError):
    """Raised when view ids cannot be read from a source file."""


def _coerce_view_id(raw: Any, *, where: str) -> int:
    """Convert a raw JSON/text value to a view id.

    :param raw: Integer or numeric string.
    :param where: Location used in error messages.
    :raises ViewSourceError: If ``raw`` is not an unsigned integer.
    :return: Parsed view id.
    """
    if isinstance(raw, bool):
        raise ViewSourceError(f"Invalid view id {raw!r} ({where})")
    if isinstance(raw, int):
        if raw < 0:
            raise ViewSourceError(f"View id must be >= 0, got {raw} ({where})")
        return raw
    if isinstance(raw, str) and raw.isascii() and raw.isdigit():
        return int(raw)
    raise ViewSourceError(f"Invalid view id {raw!r} ({where})")


def _view_ids_from_json(payload: Any) -> list[int]:
    if not isinstance(payload, dict) or not isinstance(payload.get("views"), list):
        raise ViewSourceError("Scene file must contain a top-level 'views' list.")

    view_ids: list[int] = []
    for index, view in enumerate(payload["views"]):
        if not isinstance(view, dict) or "viewId" not in view:
            raise ViewSourceError(f"View entry {index} has no 'viewId'.")
        view_ids.append(_coerce_view_id(view["viewId"], where=f"views[{index}]"))
    return view_ids


def _view_ids_from_text(text: str) -> list[int]:
    view_ids: list[int] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        for token in line.split():
            view_ids.append(_coerce_view_id(token, where=f"line {line_number}"))
    return view_ids


def read_view_ids(path: Path | str) -> set[int]:
    """Read the set of view ids described by a scene file.

    ``.json``/``.sfm`` files are read as scene documents whose ``views`` list
    holds objects with a ``viewId``. Any other file is read as whitespace
    separated integers.

    :param path: Scene or id-list file.
    :raises ViewSourceError: If the file is unreadable or malformed.
    :return: Distinct view ids.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ViewSourceError(f"Could not read views file {path}: {exc}") from exc

    if path.suffix.lower() in JSON_SUFFIXES:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ViewSourceError(f"Invalid JSON in {path}: {exc}") from exc
        view_ids = _view_ids_from_json(payload)
    else:
        view_ids = _view_ids_from_text(text)

    unique_ids = set(view_ids)
    if len(unique_ids) != len(view_ids):
        logger.warning(f"Ignoring {len(view_ids) - len(unique_ids)} duplicate view ids in {path}")
    logger.info(f"Read {len(unique_ids)} view ids from {path}")
    return unique_ids
