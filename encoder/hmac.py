"""Keyed HMAC encoder. Uses a shared key instead of a salt."""
import binascii

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hmac
from pydantic import BaseModel, ConfigDict, field_validator

from .errors import FormatParseError
from .hashes import hash_algorithm, normalize_hash_name
from .types import DEFAULT_HASH_FUNC, EncoderType, Option, Secret, to_bytes


class HmacConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = ""
    hash_func: str = DEFAULT_HASH_FUNC

    @field_validator("hash_func")
    @classmethod
    def _known_hash(cls, v: str) -> str:
        return normalize_hash_name(v)


class HmacEncoder:
    algorithm = EncoderType.HMAC

    def __init__(self, config: HmacConfig):
        self.config = config

    def _mac(self, secret: Secret) -> hmac.HMAC:
        h = hmac.HMAC(self.config.key.encode("utf-8"), hash_algorithm(self.config.hash_func))
        h.update(to_bytes(secret))
        return h

    def encode(self, secret: Secret) -> str:
        return self._mac(secret).finalize().hex()

    def verify(self, encoded: str, secret: Secret) -> bool:
        try:
            expected = binascii.unhexlify(encoded)
        except (binascii.Error, ValueError) as exc:
            raise FormatParseError(f"invalid hex digest: {exc}") from exc
        try:
            self._mac(secret).verify(expected)
        except InvalidSignature:
            return False
        return True

    def get_salt(self) -> bytes:
        return b""


def with_key(key: str) -> Option:
    """Shared secret key, default empty."""
    return Option(EncoderType.HMAC, "key", key)


def with_hash_func(name: str) -> Option:
    return Option(EncoderType.HMAC, "hash_func", name)
