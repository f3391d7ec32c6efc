import argparse
import logging

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from contactvault.utils.dataModels import (
    ADDRESS, BIRTH_DATE, EMAIL, MATRIX_ID, MULTI_VALUE_FIELDS, NICKNAME, NOTES, PHONE_NUMBER,
    TITLE, WELL_KNOWN_FIELDS, Database, Entry,
)
from contactvault.utils.editor import EditorBridge
from contactvault.utils.errors import EditorError, EntryNotFoundError, SaveError
from contactvault.utils.helper import numbered_variants, split_tags
from contactvault.utils.tracker import commit_if_changed
from contactvault.utils.traversal import collect_matching, find_by_id, has_tag, search, sort_by_title
from contactvault.utils.vcard import write_vcard_file

logger = logging.getLogger(__name__)

PROTECTED_MASK = "********"
NOTES_RULE = "-" * 40

# `edit` option -> field name
EDIT_FLAGS = {
    "birthdate": BIRTH_DATE,
    "address": ADDRESS,
    "email": EMAIL,
    "phone": PHONE_NUMBER,
    "matrix": MATRIX_ID,
    "nickname": NICKNAME,
}


@dataclass
class SessionContext:
    """Everything a shell command may touch: the open tree, where it is saved, and the notes editor."""
    database: Database
    store: Any
    editor: EditorBridge
    unsynced: bool = False

    def persist(self) -> bool:
        # A failed save leaves the in-memory change in place; the next save writes the whole tree.
        try:
            self.store.save(self.database)
        except SaveError as e:
            self.unsynced = True
            print(f"[!] Save failed, changes are only in memory: {e}")
            return False
        self.unsynced = False
        return True


def _not_found(entry_id: str) -> None:
    print(f"[!] Entry {entry_id} not found")


def _commit(ctx: SessionContext, entry: Entry) -> None:
    if commit_if_changed(entry):
        ctx.persist()
        print(f"[+] Entry {entry.id} modified")
    else:
        print(f"Entry {entry.id} not modified")


def _display(entry: Entry, name: str) -> str:
    f = entry.fields[name]
    return PROTECTED_MASK if f.protected else f.value


def cmd_ls(ctx: SessionContext, args: argparse.Namespace) -> None:
    predicate = has_tag(args.tag) if args.tag is not None else None
    for view in sort_by_title(collect_matching(ctx.database.root, predicate)):
        title = PROTECTED_MASK if view.fields[TITLE].protected else view.title
        print(f"{view.id}\t{title}")


def cmd_show(ctx: SessionContext, args: argparse.Namespace) -> None:
    entry = find_by_id(ctx.database.root, args.id)
    if entry is None:
        _not_found(args.id)
        return

    print(f"Id: {entry.id}")
    for name in WELL_KNOWN_FIELDS:
        names = [name]
        if name in MULTI_VALUE_FIELDS:
            names += numbered_variants(name, entry.fields)
        for n in names:
            if entry.get(n):
                print(f"{n}: {_display(entry, n)}")
    if entry.tags:
        print(f"Tags: {', '.join(entry.tags)}")
    if entry.get(NOTES):
        print("Notes:")
        print(NOTES_RULE)
        print(_display(entry, NOTES))
        print(NOTES_RULE)


def cmd_search(ctx: SessionContext, args: argparse.Namespace) -> None:
    hits = search(ctx.database.root, args.term)
    if not hits:
        print(f"No entries found matching {args.term!r}")
        return
    for hit in hits:
        print(f"{hit.entry_id}\t{hit.label}\t{hit.value}")


def cmd_add(ctx: SessionContext, args: argparse.Namespace) -> None:
    entry = Entry.new(args.name)
    ctx.database.root.add(entry)
    if commit_if_changed(entry):
        ctx.persist()
    print(f"[+] Added {args.name} as id={entry.id}")


def cmd_edit_field(ctx: SessionContext, args: argparse.Namespace) -> None:
    entry = find_by_id(ctx.database.root, args.id)
    if entry is None:
        raise EntryNotFoundError(args.id)
    entry.set_field(args.field, args.value)
    _commit(ctx, entry)


def cmd_edit(ctx: SessionContext, args: argparse.Namespace) -> None:
    entry = find_by_id(ctx.database.root, args.id)
    if entry is None:
        _not_found(args.id)
        return
    for flag, name in EDIT_FLAGS.items():
        value = getattr(args, flag)
        if value is not None:
            entry.set_field(name, value)
    if args.tags is not None:
        entry.set_tags(split_tags(args.tags))
    _commit(ctx, entry)


def cmd_edit_notes(ctx: SessionContext, args: argparse.Namespace) -> None:
    entry = find_by_id(ctx.database.root, args.id)
    if entry is None:
        _not_found(args.id)
        return
    current = entry.fields.get(NOTES)
    try:
        text = ctx.editor.edit_text(entry.title or entry.id, current.value if current else "")
    except EditorError as e:
        logger.debug("editor failed for %s", entry.id)
        print(f"[!] Notes not changed: {e}")
        return
    entry.set_field(NOTES, text, protected=current.protected if current else False)
    _commit(ctx, entry)


def cmd_export_vcard(ctx: SessionContext, args: argparse.Namespace) -> None:
    out = Path(args.path)
    try:
        count = write_vcard_file(ctx.database.root, out)
    except OSError as e:
        print(f"[!] Cannot write {out}: {e.strerror or e}")
        return
    print(f"[+] Exported {count} contact(s) -> {out}")
