import os

from argon2.low_level import hash_secret_raw, Type as Argon2Type
from cryptography.hazmat.primitives import hashes
from dataclasses import dataclass

from contactvault.utils.dataModels import DEFAULT_T_COST, DEFAULT_M_COST_KiB, DEFAULT_PARALLELISM

SALT_SIZE = 16
KEY_SIZE = 32


@dataclass(frozen=True)
class KdfParams:
    t_cost: int = DEFAULT_T_COST
    m_cost_kib: int = DEFAULT_M_COST_KiB
    parallelism: int = DEFAULT_PARALLELISM
    salt: bytes = b""

    @staticmethod
    def fresh(t_cost: int = DEFAULT_T_COST, m_cost_kib: int = DEFAULT_M_COST_KiB, parallelism: int = DEFAULT_PARALLELISM) -> "KdfParams":
        return KdfParams(t_cost, m_cost_kib, parallelism, os.urandom(SALT_SIZE))


def sha3_512_bytes(data: bytes) -> bytes:
    digest = hashes.Hash(hashes.SHA3_512())
    digest.update(data)
    return digest.finalize()


def derive_store_key(passphrase: str, params: KdfParams) -> bytes:
    """Store key = Argon2id(SHA3-512(passphrase)) -> 32 bytes"""
    return hash_secret_raw(
        secret=sha3_512_bytes(passphrase.encode("utf-8")),
        salt=params.salt,
        time_cost=params.t_cost,
        memory_cost=params.m_cost_kib,
        parallelism=params.parallelism,
        hash_len=KEY_SIZE,
        type=Argon2Type.ID,
    )
