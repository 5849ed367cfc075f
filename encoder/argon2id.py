"""Argon2id encoder producing self-describing PHC-style strings.

Encoded layout::

    $argon2id$v=19$m=65536,t=1,p=4$<salt>$<digest>

salt and digest are standard base64 without padding. Everything ``verify``
needs is read back from the string, so any instance can verify any hash.
"""
import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional

from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw
from cryptography.hazmat.primitives import constant_time
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import FormatParseError
from .types import (DEFAULT_KEY_LEN, SALT_LEN, DerivedKey, EncoderType, Option,
                    SaltedEncoder, Secret, to_bytes)

DEFAULT_MEMORY = 64 * 1024
DEFAULT_TIME = 1
DEFAULT_THREADS = 4

PREFIX = "argon2id"
SUPPORTED_VERSIONS = (0x10, 0x13)
_UINT32_MAX = 0xFFFFFFFF
MIN_SALT_LEN = 8

_VERSION_RE = re.compile(r"v=(\d+)", re.ASCII)
_PARAMS_RE = re.compile(r"m=(\d+),t=(\d+),p=(\d+)", re.ASCII)


class Argon2idConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    memory: int = Field(default=DEFAULT_MEMORY, ge=8, le=_UINT32_MAX, description="memory cost in KiB")
    time: int = Field(default=DEFAULT_TIME, ge=1, le=_UINT32_MAX, description="number of passes")
    threads: int = Field(default=DEFAULT_THREADS, ge=1, le=255, description="degree of parallelism")
    salt_len: int = Field(default=SALT_LEN, ge=MIN_SALT_LEN, description="generated salt size in bytes")
    key_len: int = Field(default=DEFAULT_KEY_LEN, ge=4, description="digest size in bytes")
    salt: Optional[bytes] = None

    @model_validator(mode="after")
    def _primitive_limits(self) -> "Argon2idConfig":
        if self.memory < 8 * self.threads:
            raise ValueError(f"memory must be at least 8 KiB per thread ({8 * self.threads})")
        if self.salt is not None and len(self.salt) < MIN_SALT_LEN:
            raise ValueError(f"salt must be at least {MIN_SALT_LEN} bytes")
        return self


@dataclass(frozen=True)
class Argon2idHash:
    version: int
    memory: int
    time: int
    threads: int
    salt: bytes
    digest: bytes


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").rstrip("=")


def _b64decode(segment: str) -> bytes:
    if "=" in segment:
        raise ValueError("padding is not allowed")
    return base64.b64decode(segment + "=" * (-len(segment) % 4), validate=True)


def parse_encoded(encoded: str) -> Argon2idHash:
    """Split an encoded argon2id hash back into its parameters, salt and digest.

    Raises FormatParseError when the string does not have exactly six
    ``$``-separated segments, a segment does not match its pattern, or the
    salt/digest are not valid unpadded base64.
    """
    parts = encoded.split("$")
    if len(parts) != 6 or parts[0] != "" or not all(parts[1:]):
        raise FormatParseError(f"expected 6 '$'-separated segments, got {len(parts)}")
    if parts[1] != PREFIX:
        raise FormatParseError(f"unsupported variant: {parts[1]!r}")

    version_match = _VERSION_RE.fullmatch(parts[2])
    if version_match is None:
        raise FormatParseError(f"malformed version segment: {parts[2]!r}")
    version = int(version_match.group(1))
    if version not in SUPPORTED_VERSIONS:
        raise FormatParseError(f"unsupported argon2 version: {version}")

    params_match = _PARAMS_RE.fullmatch(parts[3])
    if params_match is None:
        raise FormatParseError(f"malformed parameter segment: {parts[3]!r}")
    memory, time, threads = (int(v) for v in params_match.groups())
    if max(memory, time, threads) > _UINT32_MAX:
        raise FormatParseError("parameter out of range")

    try:
        salt = _b64decode(parts[4])
        digest = _b64decode(parts[5])
    except (binascii.Error, ValueError) as exc:
        raise FormatParseError(f"invalid base64 in encoded hash: {exc}") from exc

    return Argon2idHash(version=version, memory=memory, time=time, threads=threads,
                        salt=salt, digest=digest)


class Argon2idEncoder(SaltedEncoder):
    algorithm = EncoderType.ARGON2ID

    def derive(self, secret: Secret) -> DerivedKey:
        c = self.config
        salt = self._materialize_salt()
        key = hash_secret_raw(to_bytes(secret), salt, time_cost=c.time, memory_cost=c.memory,
                              parallelism=c.threads, hash_len=c.key_len, type=Type.ID)
        return DerivedKey(key=key, salt=salt)

    def encode(self, secret: Secret) -> str:
        c = self.config
        dk = self.derive(secret)
        return (f"${PREFIX}$v={ARGON2_VERSION}$m={c.memory},t={c.time},p={c.threads}"
                f"${_b64encode(dk.salt)}${_b64encode(dk.key)}")

    def verify(self, encoded: str, secret: Secret) -> bool:
        # parameters, salt and output length all come from the string, not from self
        parsed = parse_encoded(encoded)
        candidate = hash_secret_raw(to_bytes(secret), parsed.salt, time_cost=parsed.time,
                                    memory_cost=parsed.memory, parallelism=parsed.threads,
                                    hash_len=len(parsed.digest), type=Type.ID,
                                    version=parsed.version)
        return constant_time.bytes_eq(parsed.digest, candidate)


def with_memory(memory: int) -> Option:
    """Memory cost in KiB, default 64 * 1024."""
    return Option(EncoderType.ARGON2ID, "memory", memory)


def with_time(time: int) -> Option:
    """Number of passes, default 1."""
    return Option(EncoderType.ARGON2ID, "time", time)


def with_threads(threads: int) -> Option:
    """Degree of parallelism, default 4."""
    return Option(EncoderType.ARGON2ID, "threads", threads)


def with_salt_len(length: int) -> Option:
    return Option(EncoderType.ARGON2ID, "salt_len", length)


def with_key_len(length: int) -> Option:
    return Option(EncoderType.ARGON2ID, "key_len", length)


def with_salt(salt: bytes) -> Option:
    """Use a fixed salt instead of generating one."""
    return Option(EncoderType.ARGON2ID, "salt", salt)
