"""Entry/Group tree model and its serialized form."""

import pytest

from contactvault.utils.dataModels import Database, Entry, Field, Group
from contactvault.utils.helper import numbered_variants, split_tags


def test_new_entry_has_title_and_unique_id() -> None:
    a = Entry.new("Jane Doe")
    b = Entry.new("Jane Doe")
    assert a.title == "Jane Doe"
    assert a.id != b.id
    assert a.history is None
    assert a.created_at.endswith("Z")


def test_set_field_last_write_wins_and_is_case_sensitive() -> None:
    entry = Entry.new("x")
    entry.set_field("Email", "a@example.org")
    entry.set_field("email", "b@example.org")
    entry.set_field("Email", "c@example.org", protected=True)
    assert entry.fields["Email"] == Field("c@example.org", True)
    assert entry.get("email") == "b@example.org"
    assert entry.get("Missing") is None


def test_set_tags_keeps_order_and_drops_duplicates() -> None:
    entry = Entry.new("x")
    entry.set_tags(["b", "a", "b", "c"])
    assert entry.tags == ["b", "a", "c"]
    assert entry.has_tag("a")
    assert not entry.has_tag("d")


def test_view_is_a_detached_copy() -> None:
    entry = Entry.new("x")
    entry.set_tags(["t"])
    view = entry.view()
    entry.set_field("Title", "y")
    entry.set_tags([])
    assert view.title == "x"
    assert view.tags == ("t",)
    with pytest.raises(TypeError):
        view.fields["Title"] = Field("z")


def test_database_bytes_keep_structure_order_and_protection(database) -> None:
    database.root.children[0].set_field("Password", "s3cret", protected=True)
    loaded = Database.from_bytes(database.to_bytes())

    names = [c.name if isinstance(c, Group) else c.id for c in loaded.root.children]
    assert names == ["id-bob", "Work", "id-carol"]
    work = loaded.root.children[1]
    assert [c.name if isinstance(c, Group) else c.id for c in work.children] == ["id-alice", "id-untitled", "Clients"]

    bob = loaded.root.children[0]
    assert bob.fields["Password"] == Field("s3cret", True)
    assert bob.tags == ["friends"]
    carol = loaded.root.children[2]
    assert carol.tags == ["friends", "work"]
    assert carol.get("Notes") == "met at\nthe conference"


def test_loaded_entries_are_committed(database) -> None:
    loaded = Database.from_bytes(database.to_bytes())
    bob = loaded.root.children[0]
    assert bob.history == bob.snapshot()


def test_unknown_node_type_is_rejected() -> None:
    with pytest.raises(ValueError):
        Group.from_dict({"name": "root", "children": [{"type": "folder"}]})


def test_unknown_fields_survive_round_trip() -> None:
    entry = Entry.new("x")
    entry.set_field("Favourite Colour", "green")
    root = Group("root", [entry])
    loaded = Database.from_bytes(Database(root=root).to_bytes())
    assert loaded.root.children[0].get("Favourite Colour") == "green"


def test_split_tags() -> None:
    assert split_tags("a,b,c") == ["a", "b", "c"]
    assert split_tags(" a , ,b ") == ["a", "b"]
    assert split_tags("") == []


def test_numbered_variants_sorted_numerically() -> None:
    names = ["PhoneNumber", "PhoneNumber10", "PhoneNumber2", "Email2", "PhoneNumberX", "PhoneNumber1"]
    assert numbered_variants("PhoneNumber", names) == ["PhoneNumber2", "PhoneNumber10"]
    assert numbered_variants("Email", names) == ["Email2"]
