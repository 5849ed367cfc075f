from typing import Optional

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import SALT_LEN, EncoderType, HexKdfEncoder, Option

DEFAULT_N = 1 << 15
DEFAULT_R = 8
DEFAULT_P = 1


class ScryptConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # also the length of the derived key
    salt_len: int = Field(default=SALT_LEN * 2, ge=1)
    n: int = Field(default=DEFAULT_N, gt=1, description="CPU/memory cost")
    r: int = Field(default=DEFAULT_R, ge=1, description="block size")
    p: int = Field(default=DEFAULT_P, ge=1, description="parallelisation")
    salt: Optional[bytes] = None

    @field_validator("n")
    @classmethod
    def _power_of_two(cls, v: int) -> int:
        if v & (v - 1):
            raise ValueError("n must be a power of 2")
        return v


class ScryptEncoder(HexKdfEncoder):
    algorithm = EncoderType.SCRYPT

    def _derive_key(self, secret: bytes, salt: bytes) -> bytes:
        c = self.config
        return Scrypt(salt=salt, length=c.salt_len, n=c.n, r=c.r, p=c.p).derive(secret)


def with_salt(salt: bytes) -> Option:
    return Option(EncoderType.SCRYPT, "salt", salt)


def with_salt_len(length: int) -> Option:
    """Salt size and derived key size, default 32."""
    return Option(EncoderType.SCRYPT, "salt_len", length)


def with_n(n: int) -> Option:
    return Option(EncoderType.SCRYPT, "n", n)


def with_r(r: int) -> Option:
    return Option(EncoderType.SCRYPT, "r", r)


def with_p(p: int) -> Option:
    return Option(EncoderType.SCRYPT, "p", p)
