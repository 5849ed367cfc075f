"""Environment configuration (``.env`` aware).

    ENCODER_ALGORITHM=argon2id
    ENCODER_ARGON2ID_MEMORY=32768
    ENCODER_PBKDF2_HASH_FUNC=sha512
    ENCODER_HMAC_KEY=...
    ENCODER_SCRYPT_SALT=<hex>
"""
import binascii
import logging
import os
from typing import Dict, Iterable, Mapping, Optional

from dotenv import load_dotenv

from .errors import InvalidConfigError
from .types import EncoderType

logger = logging.getLogger(__name__)

ENV_PREFIX = "ENCODER_"
DEFAULT_ALGORITHM = EncoderType.ARGON2ID.value


def load_settings(dotenv_path: Optional[str] = None) -> bool:
    """Load a ``.env`` file into the process environment without overriding it."""
    return load_dotenv(dotenv_path, override=False)


def default_algorithm(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return env.get(f"{ENV_PREFIX}ALGORITHM", DEFAULT_ALGORITHM)


def env_var(algorithm: EncoderType, field: str) -> str:
    return f"{ENV_PREFIX}{algorithm.name}_{field.upper()}"


def env_overrides(algorithm: EncoderType, fields: Iterable[str],
                  environ: Optional[Mapping[str, str]] = None) -> Dict[str, object]:
    """Collect ``ENCODER_<ALGORITHM>_<FIELD>`` values for the given config fields.

    Values stay strings for pydantic to coerce, except ``salt`` which is hex.
    """
    env = os.environ if environ is None else environ
    found: Dict[str, object] = {}
    for field in fields:
        name = env_var(algorithm, field)
        raw = env.get(name)
        if raw is None:
            continue
        if field == "salt":
            try:
                found[field] = binascii.unhexlify(raw.strip())
            except (binascii.Error, ValueError) as exc:
                raise InvalidConfigError(f"{name} must be hex encoded") from exc
        else:
            found[field] = raw
        logger.debug("using %s from environment", name)
    return found
