from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
import sys
from typing import Callable

from . import __version__
from .config import load_tasknote_toml
from .events import ActivityLog
from .paths import WorkspacePaths, resolve_workspace_path, workspace_paths
from .store import (
    SECTIONS,
    Store,
    StoreError,
    StoreExistsError,
    load_store,
    save_store,
    selector_from_name,
    selector_names,
)
from .terminal import TerminalIO


@dataclass(frozen=True)
class CommandContext:
    store_path: Path
    term: TerminalIO
    activity: ActivityLog


def _non_negative_index(value: str) -> int:
    try:
        index = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid index: {value!r}") from None
    if index < 0:
        raise argparse.ArgumentTypeError(f"index must be >= 0: {value!r}")
    return index


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasknote",
        description="tasknote: pending tasks, completed tasks and notes in one todo.json",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="cmd", required=False)

    todo = sub.add_parser("todo", help="Adds new item to Todo")
    todo.add_argument("item", help="Task text")

    done = sub.add_parser("done", help="Marks item as Done")
    done.add_argument(
        "item",
        nargs="?",
        type=_non_negative_index,
        help="Index of the pending task (asks interactively when omitted)",
    )

    note = sub.add_parser("note", help="Adds new item to Notes")
    note.add_argument("item", help="Note text")

    show = sub.add_parser("show", help="Print all todos or all notes")
    show.add_argument("selector", nargs="?", choices=selector_names(), help="List to print (default: all)")

    clear = sub.add_parser("clear", help="Clears selected items")
    clear.add_argument("selector", nargs="?", choices=selector_names(), help="List to clear (default: all)")

    sub.add_parser("init", help="Create an empty todo.json in the current directory")

    return parser


def _report_error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


def _activity_log(paths: WorkspacePaths) -> ActivityLog:
    cfg, warning = load_tasknote_toml(paths.config_toml)
    if warning:
        print(f"warning: {warning}", file=sys.stderr)
    if not cfg.activity.enabled:
        return ActivityLog()
    return ActivityLog(resolve_workspace_path(paths.root, cfg.activity.path))


def cmd_todo(args: argparse.Namespace, ctx: CommandContext) -> int:
    store = load_store(ctx.store_path)
    added = store.add_task(args.item, ctx.term)
    save_store(store, ctx.store_path)
    if added:
        ctx.activity.publish_event("task.added", f"added task: {args.item.strip()}", metadata={"size": len(store.pending)})
    return 0


def cmd_note(args: argparse.Namespace, ctx: CommandContext) -> int:
    store = load_store(ctx.store_path)
    added = store.add_note(args.item, ctx.term)
    save_store(store, ctx.store_path)
    if added:
        ctx.activity.publish_event("note.added", f"added note: {args.item.strip()}", metadata={"size": len(store.notes)})
    return 0


def cmd_done(args: argparse.Namespace, ctx: CommandContext) -> int:
    store = load_store(ctx.store_path)
    item = store.complete(args.item, ctx.term)
    save_store(store, ctx.store_path)
    ctx.activity.publish_event(
        "task.completed",
        f"completed task: {item}",
        metadata={"pending": len(store.pending), "completed": len(store.completed)},
    )
    return 0


def cmd_show(args: argparse.Namespace, ctx: CommandContext) -> int:
    store = load_store(ctx.store_path)
    store.show(selector_from_name(args.selector), ctx.term)
    return 0


def cmd_clear(args: argparse.Namespace, ctx: CommandContext) -> int:
    store = load_store(ctx.store_path)
    outcomes = store.clear(selector_from_name(args.selector), ctx.term)
    save_store(store, ctx.store_path)
    for outcome in outcomes:
        name = SECTIONS[outcome.selector].clear_name
        if outcome.cleared:
            ctx.activity.publish_event(
                "list.cleared",
                f"cleared {name}",
                metadata={"list": outcome.selector.value, "removed": outcome.removed},
            )
        else:
            ctx.activity.publish_event(
                "list.clear_aborted",
                f"kept {name}",
                metadata={"list": outcome.selector.value},
            )
    return 0


def cmd_init(args: argparse.Namespace, ctx: CommandContext) -> int:
    if ctx.store_path.exists():
        raise StoreExistsError(f"{ctx.store_path} already exists")
    save_store(Store(), ctx.store_path)
    ctx.term.say(f"Created {ctx.store_path.name}")
    ctx.activity.publish_event("store.created", f"created {ctx.store_path}")
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace, CommandContext], int]] = {
    "todo": cmd_todo,
    "done": cmd_done,
    "note": cmd_note,
    "show": cmd_show,
    "clear": cmd_clear,
    "init": cmd_init,
}


def main(
    argv: list[str] | None = None,
    *,
    root: Path | None = None,
    term: TerminalIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help(sys.stderr)
        return 2

    handler = COMMANDS.get(args.cmd)
    if handler is None:
        parser.error(f"Unknown command: {args.cmd}")
        return 2

    paths = workspace_paths(root)
    ctx = CommandContext(
        store_path=paths.store_json,
        term=term or TerminalIO.standard(),
        activity=_activity_log(paths),
    )

    try:
        return handler(args, ctx)
    except StoreError as exc:
        _report_error(str(exc))
        ctx.activity.publish_event(
            "command.failed",
            str(exc),
            severity="error",
            metadata={"command": args.cmd, "error": exc.__class__.__name__},
        )
        return 1
