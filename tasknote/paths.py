from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


STORE_FILENAME = "todo.json"
CONFIG_FILENAME = "tasknote.toml"
RUNTIME_DIRNAME = ".tasknote"
ACTIVITY_LOG_FILENAME = "events.jsonl"


def workspace_root() -> Path:
    """Directory the lists live in.

    There is no discovery: the store always sits in the current working
    directory, so running from another directory means working on other lists.
    """

    return Path.cwd()


@dataclass(frozen=True)
class WorkspacePaths:
    root: Path
    store_json: Path
    config_toml: Path


def workspace_paths(root: Path | None = None) -> WorkspacePaths:
    root = root or workspace_root()
    return WorkspacePaths(
        root=root,
        store_json=root / STORE_FILENAME,
        config_toml=root / CONFIG_FILENAME,
    )


def resolve_workspace_path(root: Path, configured: str) -> Path:
    path = Path(configured).expanduser()
    if path.is_absolute():
        return path
    return root / path
