from __future__ import annotations

from collections.abc import Callable
import contextlib
from datetime import datetime, timezone
import json
import secrets
import time
from pathlib import Path
from typing import Any

EventHandler = Callable[[dict[str, Any]], Any]


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).replace(microsecond=0).isoformat()


def new_event_id() -> str:
    stamp = int(time.time() * 1000)
    token = secrets.token_hex(4)
    return f"evt-{stamp}-{token}"


class ActivityLog:
    """Append-only JSONL record of what each invocation changed.

    With no log path the events are only dispatched to subscribers. A log
    that cannot be written never fails the command that produced it.
    """

    def __init__(self, log_path: Path | None = None) -> None:
        self._log_path = log_path
        self._handlers: list[EventHandler] = []
        self.events_written = 0

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, event: dict[str, Any]) -> dict[str, Any]:
        normalized = self._normalize_event(event)
        self._append_to_disk(normalized)
        self._dispatch(normalized)
        return normalized

    def publish_event(
        self,
        event_type: str,
        message: str,
        *,
        severity: str = "info",
        source: str = "cli",
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self.publish(
            {
                "type": str(event_type or "tasknote.event"),
                "severity": str(severity or "info"),
                "source": str(source or "cli"),
                "message": str(message or ""),
                "metadata": metadata or {},
            }
        )

    def _append_to_disk(self, event: dict[str, Any]) -> None:
        if self._log_path is None:
            return
        line = json.dumps(event, sort_keys=True, ensure_ascii=True)
        with contextlib.suppress(OSError):
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as handle:
                handle.write(line)
                handle.write("\n")
            self.events_written += 1

    def _normalize_event(self, event: dict[str, Any]) -> dict[str, Any]:
        metadata = event.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        return {
            "id": str(event.get("id") or new_event_id()),
            "ts": str(event.get("ts") or utc_now_iso()),
            "type": str(event.get("type") or "tasknote.event"),
            "severity": str(event.get("severity") or "info").lower(),
            "source": str(event.get("source") or "cli"),
            "message": str(event.get("message") or ""),
            "metadata": metadata,
        }

    def _dispatch(self, event: dict[str, Any]) -> None:
        for handler in list(self._handlers):
            with contextlib.suppress(Exception):
                handler(event)
