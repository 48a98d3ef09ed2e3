from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import json
from pathlib import Path
from typing import Any

from .terminal import TerminalIO


STORE_KEYS = ("todo", "done", "note")
DEFAULT_COMPLETE_INDEX = 0


class StoreError(RuntimeError):
    pass


class StoreLoadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class StoreExistsError(StoreError):
    pass


class CompletionIndexError(StoreError, IndexError):
    pass


class Selector(str, Enum):
    PENDING = "todo"
    COMPLETED = "done"
    NOTES = "note"
    ALL = "all"

    def expand(self) -> tuple[Selector, ...]:
        if self is Selector.ALL:
            return CONCRETE_SELECTORS
        return (self,)


CONCRETE_SELECTORS: tuple[Selector, ...] = (Selector.PENDING, Selector.COMPLETED, Selector.NOTES)


@dataclass(frozen=True)
class ListSection:
    attr: str
    header: str
    clear_name: str
    item_name: str
    cleared_name: str


SECTIONS: dict[Selector, ListSection] = {
    Selector.PENDING: ListSection(
        attr="pending",
        header="TODO",
        clear_name="todo",
        item_name="todo",
        cleared_name="Todo",
    ),
    Selector.COMPLETED: ListSection(
        attr="completed",
        header="DONE",
        clear_name="done",
        item_name="done",
        cleared_name="Done",
    ),
    Selector.NOTES: ListSection(
        attr="notes",
        header="NOTE",
        clear_name="notes",
        item_name="note",
        cleared_name="Note",
    ),
}


def selector_from_name(value: str | None, *, default: Selector = Selector.ALL) -> Selector:
    candidate = str(value or "").strip().lower()
    if not candidate:
        return default
    try:
        return Selector(candidate)
    except ValueError as exc:
        choices = ", ".join(selector.value for selector in Selector)
        raise ValueError(f"unknown list {value!r} (choose from {choices})") from exc


def selector_names() -> list[str]:
    return [selector.value for selector in Selector]


@dataclass(frozen=True)
class ClearOutcome:
    selector: Selector
    cleared: bool
    removed: int


@dataclass
class Store:
    pending: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def entries(self, selector: Selector) -> list[str]:
        if selector is Selector.ALL:
            raise ValueError("the 'all' selector spans several lists")
        return getattr(self, SECTIONS[selector].attr)

    def add_task(self, text: str, term: TerminalIO) -> bool:
        """Append `text` to the pending list unless it is blank or already there.

        The confirmation line always echoes the text exactly as given.
        """

        term.say(f"Adding `{text}` to todos!")
        return self._insert_unique(self.pending, text)

    def add_note(self, text: str, term: TerminalIO) -> bool:
        term.say(f"Adding `{text}` to notes!")
        return self._insert_unique(self.notes, text)

    @staticmethod
    def _insert_unique(target: list[str], text: str) -> bool:
        cleaned = text.strip()
        if not cleaned:
            return False
        if cleaned in target:
            return False
        target.append(cleaned)
        return True

    def complete(self, index: int | None, term: TerminalIO) -> str:
        """Move one pending entry to the completed list.

        With no index the pending list is shown and an index is read from the
        terminal; unparsable or empty input falls back to 0. The bounds check
        happens before either list is touched.
        """

        if index is None:
            self.show(Selector.PENDING, term)
            term.say(f"Choose item to mark as done. (Default {DEFAULT_COMPLETE_INDEX}) :")
            index = parse_index(term.read_line())

        if index < 0 or index >= len(self.pending):
            raise CompletionIndexError(
                f"no pending item at index {index} (pending has {len(self.pending)} item(s))"
            )

        item = self.pending.pop(index)
        self.completed.append(item)
        term.say(f"Removing `{item}` from todos!")
        return item

    def clear(self, selector: Selector, term: TerminalIO) -> list[ClearOutcome]:
        outcomes: list[ClearOutcome] = []
        for concrete in selector.expand():
            section = SECTIONS[concrete]
            target = self.entries(concrete)
            if not term.confirm(f"Clearing {section.clear_name}. Is this what you want to do?"):
                term.say(f"Aborted clearing {section.item_name} items.")
                outcomes.append(ClearOutcome(selector=concrete, cleared=False, removed=0))
                continue
            removed = len(target)
            target.clear()
            term.say(f"✅ {section.cleared_name} list cleared.")
            outcomes.append(ClearOutcome(selector=concrete, cleared=True, removed=removed))
        return outcomes

    def show(self, selector: Selector, term: TerminalIO) -> None:
        for concrete in selector.expand():
            for line in format_section(SECTIONS[concrete].header, self.entries(concrete)):
                term.say(line)

    def to_payload(self) -> dict[str, list[str]]:
        return {
            "todo": list(self.pending),
            "done": list(self.completed),
            "note": list(self.notes),
        }

    @classmethod
    def from_payload(cls, raw: Any) -> Store:
        if not isinstance(raw, dict):
            raise StoreLoadError("store must be a JSON object with todo/done/note lists")

        missing = [key for key in STORE_KEYS if key not in raw]
        if missing:
            raise StoreLoadError(f"store is missing key(s): {', '.join(missing)}")
        unexpected = sorted(str(key) for key in raw if key not in STORE_KEYS)
        if unexpected:
            raise StoreLoadError(f"store has unexpected key(s): {', '.join(unexpected)}")

        lists: dict[str, list[str]] = {}
        for key in STORE_KEYS:
            value = raw[key]
            if not isinstance(value, list):
                raise StoreLoadError(f"store key {key!r} must be a list of strings")
            for position, item in enumerate(value):
                if not isinstance(item, str):
                    raise StoreLoadError(f"store key {key!r} has a non-string entry at index {position}")
            lists[key] = list(value)

        return cls(pending=lists["todo"], completed=lists["done"], notes=lists["note"])


def format_section(header: str, entries: list[str]) -> list[str]:
    if not entries:
        return []
    lines = [f"-- {header} --"]
    for idx, entry in enumerate(entries):
        lines.append(f"   {idx}. {entry}")
    return lines


def parse_index(raw: str, *, default: int = DEFAULT_COMPLETE_INDEX) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    if value < 0:
        return default
    return value


def dumps_store(store: Store) -> str:
    return json.dumps(store.to_payload(), indent=2, ensure_ascii=False) + "\n"


def load_store(path: Path) -> Store:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise StoreLoadError(f"store file not found: {path} (run `tasknote init` to create one)") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise StoreLoadError(f"failed reading {path}: {exc}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoreLoadError(f"{path} is not valid JSON: {exc}") from exc

    try:
        return Store.from_payload(raw)
    except StoreLoadError as exc:
        raise StoreLoadError(f"{path}: {exc}") from exc


def save_store(store: Store, path: Path) -> None:
    # Encode first: opening the file truncates it.
    try:
        data = dumps_store(store).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise StoreWriteError(f"cannot write {path}: text is not valid UTF-8 ({exc.reason})") from exc
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise StoreWriteError(f"failed writing {path}: {exc}") from exc
