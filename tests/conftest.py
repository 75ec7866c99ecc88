from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from textwrap import dedent
from typing import Any, Iterable

from pairbuilder.models import PairSet


@dataclass
class FakeView:
    """Minimal stand-in for a view registry record."""

    view_id: int
    path: str = "filepath"


def build_views(view_ids: Iterable[int]) -> dict[int, FakeView]:
    return {view_id: FakeView(view_id) for view_id in view_ids}


def write_text_file(tmp_path: Path, text: str, filename: str) -> Path:
    path = tmp_path / filename
    path.write_text(dedent(text).lstrip("\n"), encoding="utf-8")
    return path


def write_views_list(tmp_path: Path, view_ids: Iterable[int], filename: str = "views.txt") -> Path:
    return write_text_file(tmp_path, " ".join(str(view_id) for view_id in view_ids) + "\n", filename)


def write_scene_file(
    tmp_path: Path,
    view_ids: Iterable[int],
    filename: str = "scene.sfm",
) -> Path:
    """Write a scene document with string view ids, as scene exporters do."""
    payload = {
        "version": ["1", "0", "0"],
        "views": [
            {"viewId": str(view_id), "path": f"/images/{view_id}.jpg"} for view_id in view_ids
        ],
    }
    return write_text_file(tmp_path, json.dumps(payload, indent=2), filename)


def patch_cli_builder(
    monkeypatch: Any,
    cli_module: Any,
    *,
    captured_configs: list[Any],
) -> None:
    """Wrap ``build_pairs`` in the CLI so tests can inspect the config it receives."""
    original = cli_module.build_pairs

    def recording_build_pairs(views: Any, config: Any = None) -> PairSet:
        captured_configs.append(config)
        return original(views, config)

    monkeypatch.setattr(cli_module, "build_pairs", recording_build_pairs)
