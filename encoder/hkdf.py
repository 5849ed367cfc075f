from typing import Optional

from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .hashes import hash_algorithm, normalize_hash_name
from .types import (DEFAULT_HASH_FUNC, DEFAULT_KEY_LEN, SALT_LEN, EncoderType,
                    HexKdfEncoder, Option)


class HkdfConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    salt_len: int = Field(default=SALT_LEN, ge=1)
    hash_func: str = DEFAULT_HASH_FUNC
    info: str = ""
    hash_len: int = Field(default=DEFAULT_KEY_LEN, ge=1)
    salt: Optional[bytes] = None

    @field_validator("hash_func")
    @classmethod
    def _known_hash(cls, v: str) -> str:
        return normalize_hash_name(v)

    @model_validator(mode="after")
    def _expand_limit(self) -> "HkdfConfig":
        limit = 255 * hash_algorithm(self.hash_func).digest_size
        if self.hash_len > limit:
            raise ValueError(f"hash_len cannot exceed {limit} for {self.hash_func}")
        return self


class HkdfEncoder(HexKdfEncoder):
    algorithm = EncoderType.HKDF

    def _derive_key(self, secret: bytes, salt: bytes) -> bytes:
        c = self.config
        kdf = HKDF(algorithm=hash_algorithm(c.hash_func), length=c.hash_len,
                   salt=salt, info=c.info.encode("utf-8"))
        return kdf.derive(secret)


def with_salt(salt: bytes) -> Option:
    return Option(EncoderType.HKDF, "salt", salt)


def with_salt_len(length: int) -> Option:
    return Option(EncoderType.HKDF, "salt_len", length)


def with_hash_len(length: int) -> Option:
    """Output size in bytes, default 32."""
    return Option(EncoderType.HKDF, "hash_len", length)


def with_hash_func(name: str) -> Option:
    return Option(EncoderType.HKDF, "hash_func", name)


def with_info(info: str) -> Option:
    """Context string folded into the expansion, default empty."""
    return Option(EncoderType.HKDF, "info", info)
