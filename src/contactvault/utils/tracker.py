import logging

from contactvault.utils.dataModels import Entry
from contactvault.utils.helper import rel_time_iso

logger = logging.getLogger(__name__)


def commit_if_changed(entry: Entry) -> bool:
    """Record the entry's current state if it differs from the last commit.

    Field values, protection flags, tag membership and tag order all count.
    Returns True when a new snapshot was stored (the caller should persist),
    False when the entry is identical to what was last committed.
    """
    current = entry.snapshot()
    if entry.history is not None and entry.history == current:
        logger.debug("entry %s unchanged", entry.id)
        return False
    entry.history = current
    entry.modified_at = rel_time_iso(None)
    logger.debug("entry %s committed", entry.id)
    return True
