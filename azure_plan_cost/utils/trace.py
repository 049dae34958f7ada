"""Append-only JSONL run trace."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union


@dataclass
class TraceLogger:
    """Writes one JSON event per line; a disabled logger is a no-op."""

    path: Optional[Path] = None
    enabled: bool = True
    _initialized: bool = field(default=False, init=False, repr=False)

    def _ensure_parent(self) -> None:
        if self._initialized or self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._initialized = True

    def log(self, event: str, payload: Dict[str, Any], *, address: Optional[str] = None) -> None:
        if not self.enabled or self.path is None:
            return

        self._ensure_parent()
        record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "payload": payload,
        }
        if address:
            record["address"] = address

        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False) + "\n")


NULL_TRACE = TraceLogger(None, enabled=False)


def build_trace_logger(path: Optional[Union[Path, str]]) -> TraceLogger:
    if not path:
        return NULL_TRACE
    return TraceLogger(Path(path))


__all__ = ["TraceLogger", "NULL_TRACE", "build_trace_logger"]
