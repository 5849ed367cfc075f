"""bcrypt encoder; cost, salt and digest live inside the bcrypt string itself."""
import re

import bcrypt
from pydantic import BaseModel, ConfigDict, Field

from .errors import FormatParseError
from .types import EncoderType, Option, Secret, to_bytes

MIN_COST = 4
MAX_COST = 31
DEFAULT_COST = 10

_HASH_RE = re.compile(rb"\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}", re.ASCII)


class BcryptConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    cost: int = Field(default=DEFAULT_COST, ge=MIN_COST, le=MAX_COST)


class BcryptEncoder:
    algorithm = EncoderType.BCRYPT

    def __init__(self, config: BcryptConfig):
        self.config = config

    def encode(self, secret: Secret) -> str:
        hashed = bcrypt.hashpw(to_bytes(secret), bcrypt.gensalt(rounds=self.config.cost))
        return hashed.decode("ascii")

    def verify(self, encoded: str, secret: Secret) -> bool:
        stored = to_bytes(encoded)
        if _HASH_RE.fullmatch(stored) is None:
            raise FormatParseError("not a bcrypt hash")
        return bcrypt.checkpw(to_bytes(secret), stored)

    def get_salt(self) -> bytes:
        return b""


def with_cost(cost: int) -> Option:
    """Work factor between 4 and 31, default 10."""
    return Option(EncoderType.BCRYPT, "cost", cost)
