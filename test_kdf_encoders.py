"""
pbkdf2 / scrypt / hkdf encoder tests.

These formats store only the hex digest, so verification depends on the
instance's own salt and configuration.

Usage:
    pytest test_kdf_encoders.py
"""
import hashlib

import pytest

from encoder import InvalidConfigError, new_hkdf_encoder, new_pbkdf2_encoder, new_scrypt_encoder
from encoder import hkdf, pbkdf2, scrypt
from encoder.hkdf import HkdfConfig
from encoder.types import EncoderType, HexKdfEncoder

SALT = b"fixed-salt-value"


def test_pbkdf2_matches_hashlib():
    enc = new_pbkdf2_encoder(pbkdf2.with_salt(SALT))
    expected = hashlib.pbkdf2_hmac("sha256", b"hello world", SALT, 10000, 32).hex()
    assert enc.encode("hello world") == expected


def test_pbkdf2_generated_salt_uses_alphabet():
    enc = new_pbkdf2_encoder(pbkdf2.with_salt_len(64), pbkdf2.with_iterations(1000))
    salt = enc.get_salt()
    assert len(salt) == 64
    assert set(salt) <= set(pbkdf2.ALPHABET)


def test_pbkdf2_hash_func_and_key_len():
    enc = new_pbkdf2_encoder(pbkdf2.with_salt(SALT), pbkdf2.with_hash_func("SHA-512"),
                             pbkdf2.with_key_len(64), pbkdf2.with_iterations(1000))
    expected = hashlib.pbkdf2_hmac("sha512", b"pw", SALT, 1000, 64).hex()
    assert enc.encode("pw") == expected


@pytest.mark.parametrize("make", [
    lambda *o: new_pbkdf2_encoder(pbkdf2.with_iterations(1000), *o),
    lambda *o: new_scrypt_encoder(scrypt.with_n(1024), *o),
    lambda *o: new_hkdf_encoder(*o),
])
def test_salt_stability_and_verify(make):
    enc = make()
    salt_before = enc.get_salt()

    first = enc.encode("correct horse")
    second = enc.encode("correct horse")

    assert first == second
    assert first == first.lower()
    assert enc.get_salt() == salt_before
    assert enc.verify(first, "correct horse") is True
    assert enc.verify(first, "battery staple") is False
    assert enc.verify(first.upper(), "correct horse") is False


@pytest.mark.parametrize("make,salt_option", [
    (lambda *o: new_pbkdf2_encoder(pbkdf2.with_iterations(1000), *o), pbkdf2.with_salt),
    (lambda *o: new_scrypt_encoder(scrypt.with_n(1024), *o), scrypt.with_salt),
    (lambda *o: new_hkdf_encoder(*o), hkdf.with_salt),
])
def test_verify_needs_matching_salt(make, salt_option):
    original = make()
    encoded = original.encode("password")

    rebuilt = make(salt_option(original.get_salt()))
    assert rebuilt.verify(encoded, "password") is True
    # a fresh instance generates its own salt
    assert make().verify(encoded, "password") is False


def test_scrypt_matches_hashlib():
    enc = new_scrypt_encoder(scrypt.with_salt(SALT), scrypt.with_n(1024))
    expected = hashlib.scrypt(b"pw", salt=SALT, n=1024, r=8, p=1, dklen=32).hex()
    assert enc.encode("pw") == expected


def test_scrypt_key_length_follows_salt_len():
    enc = new_scrypt_encoder(scrypt.with_salt_len(16), scrypt.with_n(1024))
    assert len(enc.get_salt()) == 16
    assert len(enc.encode("pw")) == 32


def test_scrypt_defaults():
    enc = new_scrypt_encoder()
    assert (enc.config.n, enc.config.r, enc.config.p, enc.config.salt_len) == (32768, 8, 1, 32)


@pytest.mark.parametrize("n", [0, 1, 1000])
def test_scrypt_rejects_bad_n(n):
    with pytest.raises(InvalidConfigError):
        new_scrypt_encoder(scrypt.with_n(n))


def test_hkdf_info_and_length():
    plain = new_hkdf_encoder(hkdf.with_salt(SALT))
    tagged = new_hkdf_encoder(hkdf.with_salt(SALT), hkdf.with_info("session"))
    long = new_hkdf_encoder(hkdf.with_salt(SALT), hkdf.with_hash_len(64))

    assert plain.encode("ikm") != tagged.encode("ikm")
    assert len(long.encode("ikm")) == 128
    assert long.encode("ikm")[:64] == plain.encode("ikm")


def test_hkdf_rejects_bad_config():
    with pytest.raises(InvalidConfigError):
        new_hkdf_encoder(hkdf.with_hash_len(255 * 32 + 1))
    with pytest.raises(InvalidConfigError):
        new_hkdf_encoder(hkdf.with_hash_func("md4"))


def test_kdf_subclass_must_implement_derive_key():
    class Incomplete(HexKdfEncoder):
        algorithm = EncoderType.HKDF

    with pytest.raises(TypeError):
        Incomplete(HkdfConfig())
