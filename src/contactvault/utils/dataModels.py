import json
import struct
import uuid

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from contactvault.utils.helper import rel_time_iso

DEFAULT_T_COST = 4
DEFAULT_M_COST_KiB = 262144  # 256 MiB (tune per device)
DEFAULT_PARALLELISM = 2

VAULT_MAGIC = b"CVS1"
VAULT_VERSION = 1
VAULT_HDR_FMT = ">4sBIII16s12s"  # magic, ver, t, m, p, salt(16), nonce(12)
VAULT_HDR_SIZE = struct.calcsize(VAULT_HDR_FMT)

DOCUMENT_VERSION = 1
DEFAULT_ROOT_NAME = "Contacts"

TITLE = "Title"
NICKNAME = "Nickname"
PHONE_NUMBER = "PhoneNumber"
EMAIL = "Email"
ADDRESS = "Address"
MATRIX_ID = "MatrixID"
BIRTH_DATE = "BirthDate"
NOTES = "Notes"

# Display order used by `show`. Numbered variants follow their base name.
WELL_KNOWN_FIELDS = (TITLE, NICKNAME, PHONE_NUMBER, EMAIL, ADDRESS, MATRIX_ID, BIRTH_DATE)
MULTI_VALUE_FIELDS = (PHONE_NUMBER, EMAIL)


@dataclass(frozen=True)
class Field:
    value: str
    protected: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "protected": self.protected}

    @staticmethod
    def from_dict(obj: Dict[str, Any]) -> "Field":
        return Field(value=obj.get("value", ""), protected=bool(obj.get("protected", False)))


@dataclass(frozen=True)
class EntrySnapshot:
    """Committed state of an entry: field values with their protection flag, and tags in order."""
    fields: Mapping[str, Field]
    tags: Tuple[str, ...]


@dataclass(frozen=True)
class EntryView:
    """Read-only copy of an entry handed out by the traversal helpers."""
    id: str
    title: str
    fields: Mapping[str, Field]
    tags: Tuple[str, ...]


@dataclass
class Entry:
    id: str
    fields: Dict[str, Field] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)
    created_at: str = ""
    modified_at: str = ""
    history: EntrySnapshot | None = None

    @classmethod
    def new(cls, title: str) -> "Entry":
        now = rel_time_iso(None)
        entry = cls(id=str(uuid.uuid4()), created_at=now, modified_at=now)
        entry.set_field(TITLE, title)
        return entry

    @property
    def title(self) -> str | None:
        return self.get(TITLE)

    def get(self, name: str) -> str | None:
        f = self.fields.get(name)
        return f.value if f is not None else None

    def set_field(self, name: str, value: str, protected: bool = False) -> None:
        self.fields[name] = Field(value=value, protected=protected)

    def set_tags(self, tags: Iterable[str]) -> None:
        ordered: List[str] = []
        for tag in tags:
            if tag not in ordered:
                ordered.append(tag)
        self.tags = ordered

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def snapshot(self) -> EntrySnapshot:
        return EntrySnapshot(fields=MappingProxyType(dict(self.fields)), tags=tuple(self.tags))

    def view(self) -> EntryView:
        return EntryView(
            id=self.id,
            title=self.title or "",
            fields=MappingProxyType(dict(self.fields)),
            tags=tuple(self.tags),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "entry",
            "id": self.id,
            "fields": {name: f.to_dict() for name, f in self.fields.items()},
            "tags": list(self.tags),
            "created_at": self.created_at,
            "modified_at": self.modified_at,
        }

    @staticmethod
    def from_dict(obj: Dict[str, Any]) -> "Entry":
        entry = Entry(
            id=obj["id"],
            fields={name: Field.from_dict(f) for name, f in obj.get("fields", {}).items()},
            created_at=obj.get("created_at", ""),
            modified_at=obj.get("modified_at", ""),
        )
        entry.set_tags(obj.get("tags", []))
        # What was loaded is what was last persisted.
        entry.history = entry.snapshot()
        return entry


@dataclass
class Group:
    name: str
    children: List["Node"] = field(default_factory=list)

    def add(self, node: "Node") -> None:
        self.children.append(node)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "group",
            "name": self.name,
            "children": [child.to_dict() for child in self.children],
        }

    @staticmethod
    def from_dict(obj: Dict[str, Any]) -> "Group":
        group = Group(name=obj.get("name", ""))
        for child in obj.get("children", []):
            if child.get("type") == "group":
                group.add(Group.from_dict(child))
            elif child.get("type") == "entry":
                group.add(Entry.from_dict(child))
            else:
                raise ValueError(f"Unknown node type: {child.get('type')!r}")
        return group


Node = Union[Group, Entry]


@dataclass
class Database:
    root: Group
    version: int = DOCUMENT_VERSION

    @staticmethod
    def empty(name: str = DEFAULT_ROOT_NAME) -> "Database":
        return Database(root=Group(name=name))

    def to_bytes(self) -> bytes:
        return json.dumps({"version": self.version, "root": self.root.to_dict()}, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    @staticmethod
    def from_bytes(b: bytes) -> "Database":
        obj = json.loads(b.decode("utf-8"))
        return Database(root=Group.from_dict(obj.get("root", {"name": DEFAULT_ROOT_NAME})), version=obj.get("version", DOCUMENT_VERSION))
