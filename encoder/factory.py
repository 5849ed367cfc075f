"""Build a configured encoder from an algorithm tag and options."""
import logging
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel

from . import settings
from .argon2id import Argon2idConfig, Argon2idEncoder
from .bcrypt import BcryptConfig, BcryptEncoder
from .errors import InvalidConfigError
from .hkdf import HkdfConfig, HkdfEncoder
from .hmac import HmacConfig, HmacEncoder
from .pbkdf2 import Pbkdf2Config, Pbkdf2Encoder
from .scrypt import ScryptConfig, ScryptEncoder
from .types import Encoder, EncoderType, Option, build_config

logger = logging.getLogger(__name__)

# defaults live on the config models
_REGISTRY: Dict[EncoderType, Tuple[Type[BaseModel], Any]] = {
    EncoderType.BCRYPT: (BcryptConfig, BcryptEncoder),
    EncoderType.PBKDF2: (Pbkdf2Config, Pbkdf2Encoder),
    EncoderType.ARGON2ID: (Argon2idConfig, Argon2idEncoder),
    EncoderType.SCRYPT: (ScryptConfig, ScryptEncoder),
    EncoderType.HKDF: (HkdfConfig, HkdfEncoder),
    EncoderType.HMAC: (HmacConfig, HmacEncoder),
}


def new(tag: Union[EncoderType, str], *opts: Option) -> Optional[Encoder]:
    """Return an unused encoder for ``tag`` with ``opts`` applied in order.

    Unknown tags give ``None``; callers should treat that as a configuration
    error. Options meant for another algorithm raise InvalidConfigError.
    """
    try:
        kind = EncoderType.parse(tag)
    except ValueError:
        logger.warning("unknown encoder type: %r", tag)
        return None

    config_model, encoder_cls = _REGISTRY[kind]
    fields: Dict[str, Any] = {}
    for opt in opts:
        if opt.algorithm != kind:
            raise InvalidConfigError(
                f"option {opt.name!r} is for {getattr(opt.algorithm, 'value', opt.algorithm)}, not {kind.value}")
        opt.apply(fields)
    logger.debug("creating %s encoder with options %s", kind.value, sorted(fields))
    return encoder_cls(build_config(config_model, fields))


def from_env(tag: Optional[Union[EncoderType, str]] = None) -> Optional[Encoder]:
    """Build an encoder from ``ENCODER_*`` environment settings."""
    settings.load_settings()
    if tag is None:
        tag = settings.default_algorithm()
    try:
        kind = EncoderType.parse(tag)
    except ValueError:
        logger.warning("unknown encoder type: %r", tag)
        return None
    config_model, _ = _REGISTRY[kind]
    overrides = settings.env_overrides(kind, config_model.model_fields)
    return new(kind, *(Option(kind, name, value) for name, value in overrides.items()))


def new_bcrypt_encoder(*opts: Option) -> Optional[Encoder]:
    return new(EncoderType.BCRYPT, *opts)


def new_pbkdf2_encoder(*opts: Option) -> Optional[Encoder]:
    return new(EncoderType.PBKDF2, *opts)


def new_argon2id_encoder(*opts: Option) -> Optional[Encoder]:
    return new(EncoderType.ARGON2ID, *opts)


def new_scrypt_encoder(*opts: Option) -> Optional[Encoder]:
    return new(EncoderType.SCRYPT, *opts)


def new_hkdf_encoder(*opts: Option) -> Optional[Encoder]:
    return new(EncoderType.HKDF, *opts)


def new_hmac_encoder(*opts: Option) -> Optional[Encoder]:
    return new(EncoderType.HMAC, *opts)
