"""Interactive shell over an unlocked contact vault."""
import argparse
import enum
import logging
import shlex
import sys

from typing import Callable, Dict, List

from contactvault.utils.core import (
    SessionContext, cmd_add, cmd_edit, cmd_edit_field, cmd_edit_notes, cmd_export_vcard, cmd_ls, cmd_search, cmd_show,
)
from contactvault.utils.editor import EditorBridge, resolve_editor_command
from contactvault.utils.errors import CommandError
from contactvault.utils.maintain import open_or_exit

logger = logging.getLogger(__name__)

PROMPT = "cvault> "
HELP = "help"
EXIT = "exit"


class SessionState(enum.Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting-input"
    EXECUTING = "executing"
    TERMINATED = "terminated"


class ReplArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports problems as CommandError instead of exiting the process."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("add_help", False)
        super().__init__(*args, **kwargs)

    def error(self, message):
        raise CommandError(f"{self.prog}: {message}")

    def exit(self, status=0, message=None):
        raise CommandError(message.strip() if message else f"{self.prog}: aborted")


def build_commands() -> Dict[str, ReplArgumentParser]:
    cmds: Dict[str, ReplArgumentParser] = {}

    p_ls = ReplArgumentParser(prog="ls", description="List entries sorted by title")
    p_ls.add_argument("--tag", help="Only entries carrying this tag")
    p_ls.set_defaults(func=cmd_ls)
    cmds["ls"] = p_ls

    p_show = ReplArgumentParser(prog="show", description="Show every populated field of an entry")
    p_show.add_argument("id", help="Entry id")
    p_show.set_defaults(func=cmd_show)
    cmds["show"] = p_show

    p_search = ReplArgumentParser(prog="search", description="Search titles, nicknames and phone numbers")
    p_search.add_argument("term", help="Text to look for")
    p_search.set_defaults(func=cmd_search)
    cmds["search"] = p_search

    p_add = ReplArgumentParser(prog="add", description="Add a contact")
    p_add.add_argument("name", help="Contact title")
    p_add.set_defaults(func=cmd_add)
    cmds["add"] = p_add

    p_field = ReplArgumentParser(prog="edit-field", description="Set any field of an entry")
    p_field.add_argument("id", help="Entry id")
    p_field.add_argument("field", help="Field name (case-sensitive)")
    p_field.add_argument("value", help="New value")
    p_field.set_defaults(func=cmd_edit_field)
    cmds["edit-field"] = p_field

    p_edit = ReplArgumentParser(prog="edit", description="Set several well-known fields at once")
    p_edit.add_argument("id", help="Entry id")
    p_edit.add_argument("--birthdate")
    p_edit.add_argument("--address")
    p_edit.add_argument("--email")
    p_edit.add_argument("--phone")
    p_edit.add_argument("--matrix", help="Matrix ID")
    p_edit.add_argument("--nickname")
    p_edit.add_argument("--tags", help="Comma separated; replaces all tags")
    p_edit.set_defaults(func=cmd_edit)
    cmds["edit"] = p_edit

    p_notes = ReplArgumentParser(prog="edit-notes", description="Edit the notes of an entry in the external editor")
    p_notes.add_argument("id", help="Entry id")
    p_notes.set_defaults(func=cmd_edit_notes)
    cmds["edit-notes"] = p_notes

    p_exp = ReplArgumentParser(prog="export-vcard", description="Write all exportable contacts as vCard 4.0")
    p_exp.add_argument("path", help="Output file (overwritten)")
    p_exp.set_defaults(func=cmd_export_vcard)
    cmds["export-vcard"] = p_exp

    p_help = ReplArgumentParser(prog=HELP, description="Show this summary")
    p_help.set_defaults(func=None, builtin=HELP)
    cmds[HELP] = p_help
    cmds["?"] = p_help

    p_exit = ReplArgumentParser(prog=EXIT, description="Leave the shell")
    p_exit.set_defaults(func=None, builtin=EXIT)
    cmds[EXIT] = p_exit

    return cmds


class Session:
    def __init__(self, ctx: SessionContext, input_fn: Callable[[str], str] | None = None):
        self.ctx = ctx
        self.commands = build_commands()
        self.state = SessionState.IDLE
        self._input = input_fn or input

    def run(self) -> None:
        while self.state is not SessionState.TERMINATED:
            self.state = SessionState.AWAITING_INPUT
            try:
                line = self._input(PROMPT)
            except EOFError:
                print()
                self.terminate()
                break
            except KeyboardInterrupt:
                print()
                continue
            self.execute(line)

    def execute(self, line: str) -> None:
        try:
            argv = shlex.split(line)
        except ValueError as e:
            print(f"[!] {e}")
            return
        if not argv:
            return

        self.state = SessionState.EXECUTING
        try:
            self.dispatch(argv[0], argv[1:])
        except CommandError as e:
            print(f"[!] {e}")
        except KeyboardInterrupt:
            print()
            print(f"[!] {argv[0]}: interrupted")
        finally:
            if self.state is SessionState.EXECUTING:
                self.state = SessionState.AWAITING_INPUT

    def dispatch(self, name: str, argv: List[str]) -> None:
        parser = self.commands.get(name)
        if parser is None:
            print(f"[!] Invalid command: {name} (type 'help' for a list)")
            return
        args = parser.parse_args(argv)
        logger.debug("dispatching %s", name)
        builtin = getattr(args, "builtin", None)
        if builtin == HELP:
            self.print_help()
        elif builtin == EXIT:
            self.terminate()
        else:
            args.func(self.ctx, args)

    def print_help(self) -> None:
        seen = set()
        for name, parser in self.commands.items():
            if id(parser) in seen:
                continue
            seen.add(id(parser))
            usage = " ".join(parser.format_usage().split()[1:])
            if name == HELP:
                usage += " | ?"
            print(usage)
            print(f"    {parser.description}")

    def terminate(self) -> None:
        if self.ctx.unsynced:
            print("[!] Some changes could not be saved and are lost on exit")
        self.state = SessionState.TERMINATED


def cmd_shell(args: argparse.Namespace) -> None:
    store, database = open_or_exit(args)
    editor = EditorBridge(resolve_editor_command(args.editor))
    ctx = SessionContext(database=database, store=store, editor=editor)
    print(f"[+] Unlocked {store.path}. Type 'help' for commands.")
    Session(ctx).run()
    if ctx.unsynced:
        sys.exit(1)
