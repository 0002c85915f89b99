"""Atomic JSON file writes shared by the ledgers."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def write_json_atomic(path: Path, data: Any) -> None:
    """Serialize ``data`` to ``path`` without ever exposing a half-written file.

    The document is written to ``<path>.tmp`` and then renamed over the
    canonical path with ``os.replace``.

    Raises:
        OSError: If the scratch file cannot be written or renamed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(tmp_path, path)


def read_json(path: Path) -> Any:
    """Load a JSON document, raising ``json.JSONDecodeError`` on bad content."""
    return json.loads(path.read_text(encoding="utf-8"))
