import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from contactvault.utils.errors import OpenError

NONCE_SIZE = 12


def new_nonce() -> bytes:
    return os.urandom(NONCE_SIZE)


def seal(key: bytes, nonce: bytes, plaintext: bytes, header: bytes) -> bytes:
    """AES-256-GCM encrypt `plaintext`, authenticating the cleartext `header` alongside it."""
    return AESGCM(key).encrypt(nonce, plaintext, header)


def unseal(key: bytes, nonce: bytes, ct: bytes, header: bytes) -> bytes:
    try:
        return AESGCM(key).decrypt(nonce, ct, header)
    except InvalidTag as e:
        raise OpenError("Wrong passphrase or corrupt vault") from e
