"""Encoder package: one encode/verify contract over bcrypt, argon2id, pbkdf2, scrypt, hkdf and hmac."""
import logging

from .errors import EncoderError, FormatParseError, InvalidConfigError, RandomSourceError
from .factory import (from_env, new, new_argon2id_encoder, new_bcrypt_encoder, new_hkdf_encoder,
                      new_hmac_encoder, new_pbkdf2_encoder, new_scrypt_encoder)
from .types import DerivedKey, Encoder, EncoderType, Option, generate_random_salt

logging.getLogger(__name__).addHandler(logging.NullHandler())
