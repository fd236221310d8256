from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Any

from rewardledger.errors import CorruptPersistedState, PersistenceFailure

logger = logging.getLogger(__name__)

Snapshot = dict[str, Any]


class PersistenceGateway(ABC):
    """Durable key-value store for the full ledger snapshot."""

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        """Replace the stored snapshot. Raises PersistenceFailure."""

    @abstractmethod
    def load(self) -> Snapshot | None:
        """Return the last complete snapshot, or None if nothing was saved.

        Raises PersistenceFailure if the store cannot be read and
        CorruptPersistedState if its content cannot be parsed.
        """

    def clear(self) -> None:
        """Drop the stored snapshot."""


class MemoryGateway(PersistenceGateway):
    """In-process store; keeps a private deep copy of each snapshot."""

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.save_count = 0

    def save(self, snapshot: Snapshot) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.save_count += 1

    def load(self) -> Snapshot | None:
        return copy.deepcopy(self._snapshot)

    def clear(self) -> None:
        self._snapshot = None


class JsonFileGateway(PersistenceGateway):
    """Single JSON document on disk, replaced atomically on every save."""

    def __init__(self, path: str) -> None:
        self.path = path

    def save(self, snapshot: Snapshot) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{os.path.basename(self.path)}.", suffix=".tmp"
            )
        except OSError as exc:
            raise PersistenceFailure(f"Cannot write {self.path}: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise PersistenceFailure(f"Cannot write {self.path}: {exc}") from exc
        logger.debug("Saved snapshot to %s", self.path)

    def load(self) -> Snapshot | None:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise CorruptPersistedState(f"{self.path} is not valid JSON: {exc}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceFailure(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptPersistedState(f"{self.path} does not hold a JSON object")
        return data

    def clear(self) -> None:
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise PersistenceFailure(f"Cannot remove {self.path}: {exc}") from exc
