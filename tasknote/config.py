from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import tomllib

from .paths import ACTIVITY_LOG_FILENAME, RUNTIME_DIRNAME


DEFAULT_ACTIVITY_LOG = f"{RUNTIME_DIRNAME}/{ACTIVITY_LOG_FILENAME}"


def _as_bool(value, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "y", "on"}:
            return True
        if lowered in {"0", "false", "no", "n", "off"}:
            return False
    return bool(default)


def _as_str(value, *, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


@dataclass(frozen=True)
class ActivityConfig:
    enabled: bool = True
    path: str = DEFAULT_ACTIVITY_LOG


@dataclass(frozen=True)
class TasknoteConfig:
    activity: ActivityConfig = field(default_factory=ActivityConfig)


def load_tasknote_toml(path: Path) -> tuple[TasknoteConfig, str]:
    """Load optional settings from tasknote.toml.

    Returns (config, warning). Warning is empty on success; a broken file
    falls back to defaults instead of blocking the lists.
    """

    if not path.exists():
        return TasknoteConfig(), ""

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        return TasknoteConfig(), f"tasknote.toml parse failed: {exc}"

    activity = data.get("activity") if isinstance(data.get("activity"), dict) else {}

    cfg = TasknoteConfig(
        activity=ActivityConfig(
            enabled=_as_bool(activity.get("enabled"), default=ActivityConfig.enabled),
            path=_as_str(activity.get("path"), default=ActivityConfig.path),
        ),
    )
    return cfg, ""
