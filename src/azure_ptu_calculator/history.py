"""Recent calculation history.

A small JSON file in the user data directory, newest entry first, capped at
a fixed number of entries. Stored usage is replayed through
``UsageInput.from_raw``, so a rehydrated calculation behaves exactly like a
fresh one.
"""

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .calculator import CalculationResult, UsageInput
from .config_paths import get_history_path
from .deployment import DeploymentType
from .errors import HistoryError
from .logging import LogEvent, log_debug, log_info

DEFAULT_MAX_ENTRIES = 10


@dataclass(frozen=True)
class HistoryEntry:
    """One saved calculation."""

    timestamp: str
    model: str
    deployment_type: str
    usage: Dict[str, float]
    result: Dict[str, Any]

    @property
    def usage_input(self) -> UsageInput:
        return UsageInput.from_raw(self.usage)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "model": self.model,
            "deployment_type": self.deployment_type,
            "usage": dict(self.usage),
            "result": dict(self.result),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            timestamp=str(data["timestamp"]),
            model=str(data["model"]),
            deployment_type=str(data["deployment_type"]),
            usage=dict(data.get("usage") or {}),
            result=dict(data.get("result") or {}),
        )


class HistoryStore:
    """Recency-ordered, capped store of past calculations."""

    def __init__(self, path: Optional[Union[str, Path]] = None, max_entries: int = DEFAULT_MAX_ENTRIES):
        """Initialize the store.

        Args:
            path: History file; ``history.json`` in the user data dir if None
            max_entries: Number of entries kept
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.path = Path(path) if path else get_history_path()
        self.max_entries = max_entries

    def entries(self) -> List[HistoryEntry]:
        """Return saved entries, newest first.

        Raises:
            HistoryError: If the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise HistoryError(f"Could not read history file: {e}", path=str(self.path)) from e

        if not isinstance(raw, list):
            raise HistoryError("History file must contain a list", path=str(self.path))
        try:
            return [HistoryEntry.from_dict(item) for item in raw][: self.max_entries]
        except (KeyError, TypeError, ValueError) as e:
            raise HistoryError(f"Malformed history entry: {e}", path=str(self.path)) from e

    def add(self, entry: HistoryEntry) -> List[HistoryEntry]:
        """Prepend an entry and drop anything beyond ``max_entries``."""
        updated = [entry] + self.entries()
        updated = updated[: self.max_entries]
        self._write(updated)
        log_debug(LogEvent.HISTORY, "Saved calculation to history", model=entry.model, entries=len(updated))
        return updated

    def record(
        self,
        model: str,
        deployment_type: Union[str, DeploymentType],
        usage: UsageInput,
        result: CalculationResult,
    ) -> HistoryEntry:
        """Save a calculation and return the stored entry."""
        entry = HistoryEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            model=model,
            deployment_type=DeploymentType.parse(deployment_type).value,
            usage=usage.to_dict(),
            result=result.to_dict(),
        )
        self.add(entry)
        return entry

    def clear(self) -> int:
        """Delete the history file. Returns the number of entries removed."""
        if not self.path.exists():
            return 0
        try:
            count = len(self.entries())
        except HistoryError:
            count = 0
        try:
            self.path.unlink()
        except OSError as e:
            raise HistoryError(f"Could not delete history file: {e}", path=str(self.path)) from e
        log_info(LogEvent.HISTORY, "Cleared history", removed=count)
        return count

    def _write(self, entries: List[HistoryEntry]) -> None:
        tmp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self.path.parent), prefix=".history-", suffix=".json")
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in entries], f, indent=2)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise HistoryError(f"Could not write history file: {e}", path=str(self.path)) from e
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
