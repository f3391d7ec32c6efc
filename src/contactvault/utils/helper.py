import datetime as _dt
import re

from typing import List

_NUMBERED = re.compile(r"^(?P<base>.+?)(?P<n>[2-9]|[1-9]\d+)$")


def rel_time_iso(ts: float | None) -> str:
    if ts is None:
        return _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0).strftime("%Y-%m-%dT%H:%M:%SZ")
    return _dt.datetime.fromtimestamp(ts, _dt.timezone.utc).replace(microsecond=0).strftime("%Y-%m-%dT%H:%M:%SZ")


def split_tags(raw: str) -> List[str]:
    """Split a comma separated tag list, dropping blanks."""
    return [t.strip() for t in raw.split(",") if t.strip()]


def numbered_variants(base: str, names) -> List[str]:
    """Return `base2`, `base3`, ... present in `names`, in numeric order."""
    found = []
    for name in names:
        m = _NUMBERED.match(name)
        if m and m.group("base") == base:
            found.append((int(m.group("n")), name))
    return [name for _, name in sorted(found)]
