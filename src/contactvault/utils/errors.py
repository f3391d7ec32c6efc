"""Exception hierarchy shared by the store, the shell and the editor bridge."""


class ContactVaultError(Exception):
    """Base class for every error raised by contactvault."""


class CommandError(ContactVaultError):
    """A shell line could not be parsed or validated."""


class EntryNotFoundError(CommandError):
    def __init__(self, entry_id: str):
        super().__init__(f"No such id: {entry_id}")
        self.entry_id = entry_id


class EditorError(ContactVaultError):
    """The external editor exited non-zero or could not be started."""


class StoreError(ContactVaultError):
    pass


class OpenError(StoreError):
    """The vault could not be read or unlocked."""


class SaveError(StoreError):
    """The vault could not be written."""
