"""vCard 4.0 (RFC 6350) export.

One card per entry that has an unprotected Title and an unprotected PhoneNumber:

    BEGIN:VCARD
    VERSION:4.0
    UID:urn:uuid:<entry id>
    FN:<Title>
    TEL:<PhoneNumber>
    EMAIL:<Email>        (only when an unprotected Email exists)
    END:VCARD
    <blank line>

Lines end with CRLF and are folded at 75 octets. Numbered variants
(PhoneNumber2, Email2, ...) are not exported.
"""
from pathlib import Path
from typing import List

from contactvault.utils.dataModels import EMAIL, Entry, Group, PHONE_NUMBER, TITLE
from contactvault.utils.traversal import iter_entries

CRLF = "\r\n"
MAX_LINE_OCTETS = 75


def escape_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(",", "\\,")
        .replace(";", "\\;")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line so no physical line exceeds 75 octets.

    Continuation lines start with a single space, which counts towards
    their length. Multi-byte characters are never split.
    """
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line
    parts: List[str] = []
    current = ""
    size = 0
    limit = MAX_LINE_OCTETS
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > limit:
            parts.append(current)
            current = " "
            size = 1
        current += ch
        size += width
    parts.append(current)
    return CRLF.join(parts)


def _content_line(name: str, value: str) -> str:
    return fold_line(f"{name}:{value}")


def encode_entry(entry: Entry) -> str | None:
    title = entry.title
    if not title:
        return None
    if entry.fields[TITLE].protected:
        return None
    phone = entry.fields.get(PHONE_NUMBER)
    if phone is None:
        return None
    if phone.protected:
        return None

    lines = [
        "BEGIN:VCARD",
        "VERSION:4.0",
        _content_line("UID", f"urn:uuid:{entry.id}"),
        _content_line("FN", escape_text(title)),
        _content_line("TEL", escape_text(phone.value)),
    ]
    email = entry.fields.get(EMAIL)
    if email is not None and not email.protected:
        lines.append(_content_line("EMAIL", escape_text(email.value)))
    lines.append("END:VCARD")
    return CRLF.join(lines) + CRLF + CRLF


def encode_cards(root: Group) -> List[str]:
    cards = []
    for entry in iter_entries(root):
        card = encode_entry(entry)
        if card is not None:
            cards.append(card)
    return cards


def encode_tree(root: Group) -> str:
    return "".join(encode_cards(root))


def write_vcard_file(root: Group, path: Path) -> int:
    """Encode the whole tree into `path` (create or truncate). Returns the number of cards written."""
    cards = encode_cards(root)
    with Path(path).open("w", encoding="utf-8", newline="") as f:
        f.write("".join(cards))
    return len(cards)
