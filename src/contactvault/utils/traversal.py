"""Recursive walks over the group tree.

Every walk is pre-order and depth-first: a group's children are visited in
their stored order, and a sub-group is fully explored before its next
sibling.
"""
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from contactvault.utils.dataModels import Entry, EntryView, Group, NICKNAME, PHONE_NUMBER, TITLE

Predicate = Callable[[Entry], bool]


@dataclass(frozen=True)
class SearchHit:
    entry_id: str
    label: str
    value: str


def iter_entries(group: Group) -> Iterator[Entry]:
    for child in group.children:
        if isinstance(child, Group):
            yield from iter_entries(child)
        else:
            yield child


def find_by_id(root: Group, entry_id: str) -> Entry | None:
    """Return the first entry with `entry_id`, or None. The entry is live and may be edited."""
    for child in root.children:
        if isinstance(child, Group):
            found = find_by_id(child, entry_id)
            if found is not None:
                return found
        elif child.id == entry_id:
            return child
    return None


def has_tag(tag: str) -> Predicate:
    return lambda entry: entry.has_tag(tag)


def collect_matching(root: Group, predicate: Optional[Predicate] = None) -> List[EntryView]:
    """Read-only views of every titled entry accepted by `predicate` (all of them when None)."""
    out: List[EntryView] = []
    for entry in iter_entries(root):
        if not entry.title:
            continue
        if predicate is not None and not predicate(entry):
            continue
        out.append(entry.view())
    return out


def sort_by_title(views: List[EntryView]) -> List[EntryView]:
    # Plain str ordering compares code points; sorted() is stable for equal titles.
    return sorted(views, key=lambda v: v.title)


def search(root: Group, term: str) -> List[SearchHit]:
    """Substring search over Title, Nickname and PhoneNumber.

    Title and Nickname are compared case-insensitively, PhoneNumber as an
    exact substring. Protected values are skipped. An entry yields one hit
    per matching field.
    """
    if not term:
        return []
    needle = term.lower()
    hits: List[SearchHit] = []
    for entry in iter_entries(root):
        for label in (TITLE, NICKNAME):
            f = entry.fields.get(label)
            if f is not None and not f.protected and needle in f.value.lower():
                hits.append(SearchHit(entry_id=entry.id, label=label, value=f.value))
        phone = entry.fields.get(PHONE_NUMBER)
        if phone is not None and not phone.protected and term in phone.value:
            hits.append(SearchHit(entry_id=entry.id, label=PHONE_NUMBER, value=phone.value))
    return hits
