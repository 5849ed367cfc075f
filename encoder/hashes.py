"""Hash-function selector for the pbkdf2, hkdf and hmac encoders."""
from typing import Callable, Dict

from cryptography.hazmat.primitives import hashes

_HASH_FUNCS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha512224": hashes.SHA512_224,
    "sha512256": hashes.SHA512_256,
    "sha3224": hashes.SHA3_224,
    "sha3256": hashes.SHA3_256,
    "sha3384": hashes.SHA3_384,
    "sha3512": hashes.SHA3_512,
    "blake2b": lambda: hashes.BLAKE2b(64),
    "blake2s": lambda: hashes.BLAKE2s(32),
}


def normalize_hash_name(name: str) -> str:
    """``"SHA-256"``, ``"sha_256"`` and ``"sha256"`` all map to ``"sha256"``.

    Raises ValueError for names with no registered algorithm.
    """
    key = str(name).lower().replace("-", "").replace("_", "")
    if key not in _HASH_FUNCS:
        raise ValueError(f"unsupported hash function: {name!r}")
    return key


def hash_algorithm(name: str) -> hashes.HashAlgorithm:
    return _HASH_FUNCS[normalize_hash_name(name)]()
