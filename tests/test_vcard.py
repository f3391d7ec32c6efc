"""vCard 4.0 encoding."""

from contactvault.utils.dataModels import Entry, Group
from contactvault.utils.vcard import encode_entry, encode_tree, escape_text, fold_line, write_vcard_file


def _jane() -> Entry:
    entry = Entry(id="0b5c3e9e-51b3-4bb4-8c8c-5a8e2d9f0e11")
    entry.set_field("Title", "Jane Doe")
    entry.set_field("PhoneNumber", "+1-555-0100")
    return entry


def test_encode_entry_exact_card() -> None:
    card = encode_entry(_jane())
    assert card == (
        "BEGIN:VCARD\r\n"
        "VERSION:4.0\r\n"
        "UID:urn:uuid:0b5c3e9e-51b3-4bb4-8c8c-5a8e2d9f0e11\r\n"
        "FN:Jane Doe\r\n"
        "TEL:+1-555-0100\r\n"
        "END:VCARD\r\n"
        "\r\n"
    )
    assert "EMAIL:" not in card


def test_encode_entry_with_email() -> None:
    entry = _jane()
    entry.set_field("Email", "jane@example.org")
    lines = encode_entry(entry).split("\r\n")
    assert lines.index("EMAIL:jane@example.org") == lines.index("TEL:+1-555-0100") + 1


def test_protected_email_is_left_out() -> None:
    entry = _jane()
    entry.set_field("Email", "jane@example.org", protected=True)
    assert "EMAIL" not in encode_entry(entry)


def test_no_title_no_card() -> None:
    entry = Entry(id="x")
    entry.set_field("PhoneNumber", "+1-555-0100")
    assert encode_entry(entry) is None


def test_no_phone_no_card_whatever_else_is_set() -> None:
    entry = Entry(id="x")
    entry.set_field("Title", "Jane Doe")
    entry.set_field("Email", "jane@example.org")
    entry.set_field("Nickname", "JD")
    entry.set_field("PhoneNumber2", "+1-555-0199")
    assert encode_entry(entry) is None


def test_protected_title_no_card() -> None:
    entry = _jane()
    entry.set_field("Title", "Secret Person", protected=True)
    assert encode_entry(entry) is None
    assert encode_tree(Group("Contacts", [entry])) == ""


def test_protected_phone_no_card() -> None:
    entry = _jane()
    entry.set_field("PhoneNumber", "+1-555-0100", protected=True)
    entry.set_field("Email", "jane@example.org")
    assert encode_entry(entry) is None


def test_numbered_variants_are_not_exported() -> None:
    entry = _jane()
    entry.set_field("PhoneNumber2", "+1-555-0199")
    entry.set_field("Email2", "other@example.org")
    card = encode_entry(entry)
    assert "0199" not in card
    assert "other@" not in card


def test_text_values_are_escaped() -> None:
    assert escape_text("Doe, Jane; Jr.\\") == "Doe\\, Jane\\; Jr.\\\\"
    assert escape_text("a\nb") == "a\\nb"
    entry = _jane()
    entry.set_field("Title", "Doe, Jane")
    assert "FN:Doe\\, Jane\r\n" in encode_entry(entry)


def test_long_lines_are_folded() -> None:
    line = "FN:" + "x" * 100
    folded = fold_line(line)
    physical = folded.split("\r\n")
    assert all(len(p.encode("utf-8")) <= 75 for p in physical)
    assert all(p.startswith(" ") for p in physical[1:])
    assert "".join(p[1:] if i else p for i, p in enumerate(physical)) == line


def test_folding_never_splits_multibyte_characters() -> None:
    line = "FN:" + "é" * 60
    for p in fold_line(line).split("\r\n"):
        p.encode("utf-8")
        assert len(p.encode("utf-8")) <= 75


def test_short_lines_are_untouched() -> None:
    assert fold_line("FN:Jane") == "FN:Jane"


def test_encode_tree_pre_order(database) -> None:
    out = encode_tree(database.root)
    # bob, alice (untitled skipped, Zed and Carol have no phone)
    assert out.count("BEGIN:VCARD") == 2
    assert out.index("FN:Bob") < out.index("FN:alice")
    assert "EMAIL:alice@example.org" in out


def test_encode_tree_of_empty_group() -> None:
    assert encode_tree(Group("root")) == ""


def test_write_vcard_file_truncates(tmp_path, database) -> None:
    out = tmp_path / "contacts.vcf"
    out.write_text("stale content that is longer than nothing\n" * 100)
    count = write_vcard_file(database.root, out)
    assert count == 2
    data = out.read_bytes()
    assert data.startswith(b"BEGIN:VCARD\r\nVERSION:4.0\r\n")
    assert b"stale" not in data
    assert data.decode("utf-8") == encode_tree(database.root)
