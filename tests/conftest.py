"""Shared fixtures: a small contact tree, a recording store and a scripted editor."""

import pytest

from contactvault.crypto.hash import KdfParams
from contactvault.ui.shell import Session
from contactvault.utils.core import SessionContext
from contactvault.utils.dataModels import Database, Entry, Group
from contactvault.utils.errors import EditorError, SaveError

# Argon2 minimums keep store tests fast.
FAST_KDF = dict(t_cost=1, m_cost_kib=8, parallelism=1)


class RecordingStore:
    def __init__(self) -> None:
        self.saves = 0
        self.fail = False

    def save(self, database: Database) -> None:
        if self.fail:
            raise SaveError("disk full")
        self.saves += 1


class ScriptedEditor:
    def __init__(self) -> None:
        self.calls = []
        self.result = ""
        self.error: str | None = None

    def edit_text(self, title: str, initial_text: str) -> str:
        self.calls.append((title, initial_text))
        if self.error is not None:
            raise EditorError(self.error)
        return self.result


def make_entry(entry_id: str, title: str | None = None, **fields) -> Entry:
    entry = Entry(id=entry_id)
    if title is not None:
        entry.set_field("Title", title)
    for name, value in fields.items():
        entry.set_field(name, value)
    entry.history = entry.snapshot()
    return entry


@pytest.fixture
def fast_kdf() -> KdfParams:
    return KdfParams.fresh(**FAST_KDF)


@pytest.fixture
def database() -> Database:
    """
    Contacts
      bob      (friends)
      Work
        alice
        untitled
        Clients
          Zed
      carol    (friends, work)
    """
    bob = make_entry("id-bob", "Bob", PhoneNumber="+1-555-0101", Nickname="Bobby")
    bob.set_tags(["friends"])
    bob.history = bob.snapshot()
    alice = make_entry("id-alice", "alice", PhoneNumber="+1-555-0102", Email="alice@example.org")
    untitled = make_entry("id-untitled", None, PhoneNumber="+1-555-0103")
    zed = make_entry("id-zed", "Zed", Nickname="zz")
    carol = make_entry("id-carol", "Carol", Notes="met at\nthe conference")
    carol.set_tags(["friends", "work"])
    carol.history = carol.snapshot()

    clients = Group("Clients", [zed])
    work = Group("Work", [alice, untitled, clients])
    root = Group("Contacts", [bob, work, carol])
    return Database(root=root)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def editor() -> ScriptedEditor:
    return ScriptedEditor()


@pytest.fixture
def ctx(database, store, editor) -> SessionContext:
    return SessionContext(database=database, store=store, editor=editor)


@pytest.fixture
def session(ctx) -> Session:
    return Session(ctx)
