"""ProcessedSet — agent run identities that have already been acted upon."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from revchain.chains.storage import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class ProcessedSet:
    """Durable, grow-only set of processed identities.

    Stored as a JSON array and rewritten atomically on every addition so the
    polling loop stays idempotent across restarts.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ids: set[str] = self._load()

    def _load(self) -> set[str]:
        if not self.path.exists():
            return set()
        try:
            raw = read_json(self.path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable processed-agents file %s: %s", self.path, e)
            return set()
        return {str(item) for item in raw} if isinstance(raw, list) else set()

    def _save(self) -> None:
        try:
            write_json_atomic(self.path, sorted(self._ids))
        except OSError as e:
            logger.error("Failed to persist processed agents to %s: %s", self.path, e)

    def add(self, identity: str) -> bool:
        """Record ``identity``. Returns False if it was already present."""
        if identity in self._ids:
            return False
        self._ids.add(identity)
        self._save()
        return True

    def flush(self) -> None:
        self._save()

    def __contains__(self, identity: object) -> bool:
        return identity in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)
