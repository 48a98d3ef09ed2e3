from __future__ import annotations

import io
import json
from pathlib import Path

from tasknote.terminal import TerminalIO


def write_store(root: Path, *, todo=(), done=(), note=()) -> Path:
    path = root / "todo.json"
    payload = {"todo": list(todo), "done": list(done), "note": list(note)}
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def read_store_payload(root: Path) -> dict:
    return json.loads((root / "todo.json").read_text(encoding="utf-8"))


def scripted_terminal(*answers: str) -> tuple[TerminalIO, io.StringIO]:
    reader = io.StringIO("".join(f"{answer}\n" for answer in answers))
    writer = io.StringIO()
    return TerminalIO(reader, writer), writer
