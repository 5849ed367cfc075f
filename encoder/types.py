"""Shared encoder contract: algorithm tags, options, salts."""
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Type, TypeVar, Union

from cryptography.hazmat.primitives import constant_time
from pydantic import BaseModel, ValidationError

from .errors import InvalidConfigError, RandomSourceError

logger = logging.getLogger(__name__)

SALT_LEN = 16  # default size of a generated salt
DEFAULT_KEY_LEN = 32
DEFAULT_HASH_FUNC = "sha256"

Secret = Union[str, bytes]
ConfigT = TypeVar("ConfigT", bound=BaseModel)


class EncoderType(str, Enum):
    BCRYPT = "bcrypt"
    SCRYPT = "scrypt"
    PBKDF2 = "pbkdf2"
    ARGON2ID = "argon2id"
    HKDF = "hkdf"
    HMAC = "hmac"

    @classmethod
    def parse(cls, tag: Union["EncoderType", str]) -> "EncoderType":
        """Resolve a tag such as ``"Argon2id"`` or the older ``"argon2"``."""
        if isinstance(tag, cls):
            return tag
        name = str(tag).strip().lower()
        if name == "argon2":
            return cls.ARGON2ID
        return cls(name)


class Encoder(Protocol):
    def encode(self, secret: Secret) -> str:
        """Return the encoded hash of ``secret``."""

    def verify(self, encoded: str, secret: Secret) -> bool:
        """Check ``secret`` against a previously encoded hash."""

    def get_salt(self) -> bytes:
        """Return the salt in use, or ``b""`` when the format embeds its own."""


@dataclass(frozen=True)
class DerivedKey:
    key: bytes
    salt: bytes


@dataclass(frozen=True)
class Option:
    """One named configuration change for a specific algorithm."""

    algorithm: EncoderType
    name: str
    value: Any

    def apply(self, fields: Dict[str, Any]) -> None:
        fields[self.name] = self.value


def to_bytes(secret: Secret) -> bytes:
    if isinstance(secret, bytes):
        return secret
    return secret.encode("utf-8")


def generate_random_salt(length: int) -> bytes:
    """Read ``length`` bytes from the OS CSPRNG."""
    try:
        salt = os.urandom(length)
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError(f"entropy source failed for {length} bytes") from exc
    if len(salt) != length:
        raise RandomSourceError(f"entropy source returned {len(salt)} of {length} bytes")
    return salt


def build_config(model: Type[ConfigT], fields: Dict[str, Any]) -> ConfigT:
    try:
        return model(**fields)
    except ValidationError as exc:
        raise InvalidConfigError(str(exc)) from exc


class SaltedEncoder:
    """Lazy, first-use-wins salt shared by the salted encoders.

    The salt comes from the ``salt`` option or is generated once, on the first
    ``encode``/``derive``/``get_salt`` call, and kept for the instance lifetime.
    Instances are not thread-safe.
    """

    algorithm: EncoderType

    def __init__(self, config: Any):
        self.config = config
        self._salt: Optional[bytes] = config.salt

    def _generate_salt(self) -> bytes:
        return generate_random_salt(self.config.salt_len)

    def _materialize_salt(self) -> bytes:
        if self._salt is None:
            self._salt = self._generate_salt()
            logger.debug("generated %d-byte salt for %s", len(self._salt), self.algorithm.value)
        return self._salt

    def get_salt(self) -> bytes:
        return self._materialize_salt()


class HexKdfEncoder(SaltedEncoder, ABC):
    """Salted KDF whose encoding is the bare lowercase hex digest.

    Nothing but the digest is stored, so ``verify`` only succeeds on an
    instance holding the same configuration and salt as the one that encoded.
    """

    @abstractmethod
    def _derive_key(self, secret: bytes, salt: bytes) -> bytes:
        """Run the KDF over ``secret`` with ``salt`` and the instance config."""

    def derive(self, secret: Secret) -> DerivedKey:
        salt = self._materialize_salt()
        return DerivedKey(key=self._derive_key(to_bytes(secret), salt), salt=salt)

    def encode(self, secret: Secret) -> str:
        return self.derive(secret).key.hex()

    def verify(self, encoded: str, secret: Secret) -> bool:
        return constant_time.bytes_eq(encoded.encode("utf-8"), self.encode(secret).encode("ascii"))
