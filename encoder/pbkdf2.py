from typing import Optional

from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .hashes import hash_algorithm, normalize_hash_name
from .types import (DEFAULT_HASH_FUNC, DEFAULT_KEY_LEN, SALT_LEN, EncoderType,
                    HexKdfEncoder, Option, generate_random_salt)

DEFAULT_ITERATIONS = 10000
# Generated salts are printable; stored hashes depend on this exact mapping.
ALPHABET = b"./ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"


class Pbkdf2Config(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    salt_len: int = Field(default=SALT_LEN, ge=1)
    iterations: int = Field(default=DEFAULT_ITERATIONS, ge=1)
    key_len: int = Field(default=DEFAULT_KEY_LEN, ge=1)
    hash_func: str = DEFAULT_HASH_FUNC
    salt: Optional[bytes] = None

    @field_validator("hash_func")
    @classmethod
    def _known_hash(cls, v: str) -> str:
        return normalize_hash_name(v)


class Pbkdf2Encoder(HexKdfEncoder):
    algorithm = EncoderType.PBKDF2

    def _generate_salt(self) -> bytes:
        raw = generate_random_salt(self.config.salt_len)
        return bytes(ALPHABET[b % len(ALPHABET)] for b in raw)

    def _derive_key(self, secret: bytes, salt: bytes) -> bytes:
        c = self.config
        kdf = PBKDF2HMAC(algorithm=hash_algorithm(c.hash_func), length=c.key_len,
                         salt=salt, iterations=c.iterations)
        return kdf.derive(secret)


def with_salt(salt: bytes) -> Option:
    return Option(EncoderType.PBKDF2, "salt", salt)


def with_salt_len(length: int) -> Option:
    return Option(EncoderType.PBKDF2, "salt_len", length)


def with_iterations(iterations: int) -> Option:
    """Iteration count, default 10000."""
    return Option(EncoderType.PBKDF2, "iterations", iterations)


def with_key_len(length: int) -> Option:
    return Option(EncoderType.PBKDF2, "key_len", length)


def with_hash_func(name: str) -> Option:
    """Underlying hash, e.g. ``"sha512"``; default sha256."""
    return Option(EncoderType.PBKDF2, "hash_func", name)
