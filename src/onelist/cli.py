"""onelist command-line interface."""

import argparse
import logging
import os
import sys
from typing import Callable, List, Optional

from . import core
from .config import (
    get_settings,
    load_config,
    normalize_folder,
    resolve_task_dir,
    save_config,
)
from .errors import (
    EmptyNameError,
    IndexOutOfRangeError,
    InputClosedError,
    NoListsFoundError,
    NotConfiguredError,
    OneListError,
)
from .logging_setup import setup_logging
from .models import Status, TaskList
from .selector import ListSelector, confirmed
from .shell import TaskShell, render_list
from .storage import (
    create_list,
    discover_lists,
    folder_contents,
    load_list,
    remove_list,
    save_list,
)

logger = logging.getLogger(__name__)

USAGE_HINT = "Use: onelist set-folder <path>"


def show_folder_contents(folder: str) -> None:
    """Print the list files and other files found in ``folder``."""
    try:
        lists, others = folder_contents(folder)
    except OneListError as exc:
        print(f"❌ {exc}")
        return
    print(f"\nFiles in {folder}:")
    if lists:
        print("  📋 Task lists:")
        for name in lists:
            print(f"    - {name}")
    if others:
        print("  📄 Other files:")
        for name in others:
            print(f"    - {name}")
    if not lists and not others:
        print("  (no files found)")
    print()


def resolve_list_path(args: argparse.Namespace) -> str:
    """Path of the list to work on: ``--file`` or the picker's choice."""
    if args.file:
        return args.file
    filenames = discover_lists(args.task_dir)
    return ListSelector(args.task_dir).select(filenames)


def _mutate(args: argparse.Namespace, action: Callable[[TaskList], str]) -> None:
    path = resolve_list_path(args)
    task_list = load_list(path)
    message = action(task_list)
    save_list(path, task_list)
    print(message)


def cmd_list(args: argparse.Namespace) -> None:
    path = resolve_list_path(args)
    task_list = load_list(path)
    print(f"📁 {os.path.basename(path)}")
    for line in render_list(task_list, show_done=args.all):
        print(line)


def cmd_add(args: argparse.Namespace) -> None:
    def action(task_list: TaskList) -> str:
        task = core.add_task(task_list, " ".join(args.text))
        return f"✨ Added: {task.title}"

    _mutate(args, action)


def cmd_toggle(args: argparse.Namespace) -> None:
    def action(task_list: TaskList) -> str:
        task = core.toggle_timer(task_list, args.index)
        if task.status is Status.ACTIVE:
            return f"▶️  Started: {task.title}"
        return f"⏸️  Paused: {task.title} ({core.format_duration(task.total_duration)})"

    _mutate(args, action)


def cmd_done(args: argparse.Namespace) -> None:
    path = resolve_list_path(args)
    task_list = load_list(path)
    if core.get_task(task_list, args.index).is_done:
        print("Already done.")
        return
    task = core.complete_task(task_list, args.index)
    save_list(path, task_list)
    print(f"✅ Completed: {task.title} ({core.format_duration(task.total_duration)})")


def cmd_rm(args: argparse.Namespace) -> None:
    def action(task_list: TaskList) -> str:
        task = core.remove_task(task_list, args.index)
        return f"🗑️  Removed: {task.title}"

    _mutate(args, action)


def cmd_edit(args: argparse.Namespace) -> None:
    def action(task_list: TaskList) -> str:
        task = core.edit_task(task_list, args.index, " ".join(args.text))
        return f"Edited {args.index}: {task.title}"

    _mutate(args, action)


def cmd_comment(args: argparse.Namespace) -> None:
    def action(task_list: TaskList) -> str:
        if args.text:
            core.set_comment(task_list, args.index, " ".join(args.text))
            return f"💬 Comment set on {args.index}."
        task = core.toggle_comment(task_list, args.index)
        return f"💬 Comment {'shown' if task.comment_displayed else 'hidden'} for {args.index}."

    _mutate(args, action)


def cmd_clean(args: argparse.Namespace) -> None:
    def action(task_list: TaskList) -> str:
        return f"Removed {core.clean_done(task_list)} done task(s)."

    _mutate(args, action)


def cmd_lists(args: argparse.Namespace) -> None:
    if not args.task_dir:
        raise NotConfiguredError()
    show_folder_contents(args.task_dir)


def cmd_create_list(args: argparse.Namespace) -> None:
    if not args.task_dir:
        raise NotConfiguredError()
    name = " ".join(args.name).strip()
    if not name:
        try:
            name = input("Enter list name: ").strip()
        except EOFError as exc:
            raise InputClosedError() from exc
        if not name:
            raise EmptyNameError()
    path = create_list(args.task_dir, name)
    print(f"✅ Created list: {name} ({os.path.basename(path)})")
    show_folder_contents(args.task_dir)


def cmd_remove_list(args: argparse.Namespace) -> None:
    filenames = discover_lists(args.task_dir)
    if args.index < 1 or args.index > len(filenames):
        raise IndexOutOfRangeError(args.index, len(filenames))
    filename = filenames[args.index - 1]
    if not args.yes:
        try:
            answer = input(f"Remove '{filename}'? (y/N): ")
        except EOFError as exc:
            raise InputClosedError() from exc
        if not confirmed(answer):
            print("Cancelled.")
            return
    remove_list(args.task_dir, filename)
    print(f"✅ Removed: {filename}")


def cmd_set_folder(args: argparse.Namespace) -> None:
    folder = normalize_folder(args.folder)
    args.config.task_folder = folder
    save_config(args.config, args.settings.config_path)
    print(f"✅ Folder set: {folder}")
    show_folder_contents(folder)


def cmd_path(args: argparse.Namespace) -> None:
    print(os.path.abspath(resolve_list_path(args)))


def run_interactive(args: argparse.Namespace) -> None:
    """Pick a list, then run the command loop on it."""
    if not args.file and not args.task_dir:
        print("🔧 No folder configured")
        print(USAGE_HINT)
        return
    try:
        path = resolve_list_path(args)
    except NoListsFoundError as exc:
        print(f"❌ {exc}")
        show_folder_contents(args.task_dir)
        print("Use: onelist create-list <name>")
        return
    task_list = load_list(path)
    print(f"📁 {os.path.basename(path)}")
    TaskShell(path, task_list).run()


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    p = argparse.ArgumentParser(
        prog="onelist", description="Task lists with time tracking, one file per list."
    )
    p.add_argument("-d", "--dir", help="Task folder (default: the configured one)")
    p.add_argument("-f", "--file", help="Work on this list file instead of picking one")
    sub = p.add_subparsers(dest="cmd")

    s_list = sub.add_parser("list", help="Show tasks")
    s_list.add_argument("--all", action="store_true", help="Include done tasks")
    s_list.set_defaults(func=cmd_list)

    s_add = sub.add_parser("add", help="Append a new task")
    s_add.add_argument("text", nargs="+", help="Task title")
    s_add.set_defaults(func=cmd_add)

    s_toggle = sub.add_parser("toggle", aliases=["start"], help="Start/stop a task's timer")
    s_toggle.add_argument("index", type=int, help="Task number from `list`")
    s_toggle.set_defaults(func=cmd_toggle)

    s_done = sub.add_parser("done", help="Mark a task done")
    s_done.add_argument("index", type=int)
    s_done.set_defaults(func=cmd_done)

    s_rm = sub.add_parser("rm", help="Remove a task")
    s_rm.add_argument("index", type=int)
    s_rm.set_defaults(func=cmd_rm)

    s_edit = sub.add_parser("edit", help="Rename a task")
    s_edit.add_argument("index", type=int)
    s_edit.add_argument("text", nargs="+", help="New title")
    s_edit.set_defaults(func=cmd_edit)

    s_comment = sub.add_parser(
        "comment", help="Set a task's comment, or show/hide it when no text is given"
    )
    s_comment.add_argument("index", type=int)
    s_comment.add_argument("text", nargs="*")
    s_comment.set_defaults(func=cmd_comment)

    s_clean = sub.add_parser("clean", help="Remove all done tasks")
    s_clean.set_defaults(func=cmd_clean)

    s_lists = sub.add_parser("lists", help="Show the files in the task folder")
    s_lists.set_defaults(func=cmd_lists)

    s_create = sub.add_parser("create-list", help="Create a new list")
    s_create.add_argument("name", nargs="*", help="List name (prompted if omitted)")
    s_create.set_defaults(func=cmd_create_list)

    s_remove = sub.add_parser("remove-list", help="Delete a list file")
    s_remove.add_argument("index", type=int, help="List number as shown by the picker")
    s_remove.add_argument("-y", "--yes", action="store_true", help="Do not ask")
    s_remove.set_defaults(func=cmd_remove_list)

    s_folder = sub.add_parser("set-folder", help="Set the task folder")
    s_folder.add_argument("folder")
    s_folder.set_defaults(func=cmd_set_folder)

    s_path = sub.add_parser("path", help="Show the absolute path to the list file")
    s_path.set_defaults(func=cmd_path)

    return p


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point. Runs the interactive loop if no subcommand given."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    try:
        args.settings = settings
        args.config = load_config(settings.config_path)
        args.task_dir = args.dir or resolve_task_dir(settings, args.config)
        logger.debug("Task folder: %r", args.task_dir)
        if args.cmd is None:
            run_interactive(args)
        else:
            args.func(args)
    except OneListError as exc:
        logger.debug("Command failed", exc_info=True)
        sys.exit(f"❌ {exc}")
    except KeyboardInterrupt:
        print()
        sys.exit(130)


if __name__ == "__main__":
    main()
