import logging
import os
import struct

from pathlib import Path
from typing import Tuple

from contactvault.crypto.aead import new_nonce, seal, unseal
from contactvault.crypto.hash import KdfParams, derive_store_key
from contactvault.utils.dataModels import Database, VAULT_HDR_FMT, VAULT_MAGIC, VAULT_VERSION, VAULT_HDR_SIZE
from contactvault.utils.errors import OpenError, SaveError

logger = logging.getLogger(__name__)


def pack_header(params: KdfParams, nonce: bytes) -> bytes:
    return struct.pack(VAULT_HDR_FMT, VAULT_MAGIC, VAULT_VERSION, params.t_cost, params.m_cost_kib, params.parallelism, params.salt, nonce)


def save_vault(path: Path, header: bytes, ct: bytes) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("wb") as f:
        f.write(header)
        f.write(ct)
    os.replace(tmp, path)


def load_vault(path: Path) -> Tuple[KdfParams, bytes, bytes, bytes]:
    """Return (kdf params, nonce, header bytes, ciphertext)."""
    data = path.read_bytes()
    if len(data) < VAULT_HDR_SIZE:
        raise OpenError(f"{path.name} is too small or corrupt")
    header = data[:VAULT_HDR_SIZE]
    magic, ver, t, m, p, salt, nonce = struct.unpack(VAULT_HDR_FMT, header)
    if magic != VAULT_MAGIC:
        raise OpenError("Invalid vault magic")
    if ver != VAULT_VERSION:
        raise OpenError("Unsupported vault version")
    return KdfParams(t, m, p, salt), nonce, header, data[VAULT_HDR_SIZE:]


class VaultStore:
    """Encrypted single-file contact store.

    The whole tree is serialized to JSON and sealed with AES-256-GCM under
    a key derived from the passphrase. The key is derived once per store
    object and reused for every save; each save uses a fresh nonce.
    """

    def __init__(self, path: Path, passphrase: str):
        self.path = Path(path)
        self._passphrase = passphrase
        self._params: KdfParams | None = None
        self._key: bytes | None = None

    def create(self, database: Database, params: KdfParams, force: bool = False) -> None:
        if self.path.exists() and not force:
            raise SaveError(f"{self.path} exists. Use --force to overwrite.")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._params = params
        self._key = derive_store_key(self._passphrase, params)
        self.save(database)

    def open(self) -> Database:
        try:
            params, nonce, header, ct = load_vault(self.path)
        except OSError as e:
            raise OpenError(f"Cannot read {self.path}: {e.strerror or e}") from e
        key = derive_store_key(self._passphrase, params)
        plaintext = unseal(key, nonce, ct, header)
        try:
            database = Database.from_bytes(plaintext)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise OpenError(f"Malformed vault contents: {e}") from e
        self._params, self._key = params, key
        logger.debug("opened %s (format version %d)", self.path, database.version)
        return database

    def save(self, database: Database) -> None:
        if self._key is None or self._params is None:
            raise SaveError("Vault is not unlocked")
        nonce = new_nonce()
        header = pack_header(self._params, nonce)
        ct = seal(self._key, nonce, database.to_bytes(), header)
        try:
            save_vault(self.path, header, ct)
        except OSError as e:
            raise SaveError(f"Cannot write {self.path}: {e.strerror or e}") from e
        logger.debug("saved %s", self.path)
