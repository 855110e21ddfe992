import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from envelope_crypto import (
    KeyWrapAlgorithm,
    RSAOAEPKeyWrap,
    SymmetricKey,
    UnsupportedCertificateError,
    UnsupportedFormatError,
    UnwrapError,
    get_key_wrap,
)

from conftest import issue_cert

WRAP = RSAOAEPKeyWrap()


def test_wrap_unwrap_roundtrip(recipient):
    cert, key = recipient
    with SymmetricKey.generate(32) as sym:
        original = bytes(sym.material)
        wrapped  = WRAP.wrap(cert.public_key(), sym)
    assert len(wrapped) == 2048 // 8
    with WRAP.unwrap(key, wrapped, 32) as recovered:
        assert bytes(recovered.material) == original

def test_wrap_is_randomized(recipient):
    cert, _ = recipient
    sym = SymmetricKey(b"\x07" * 32)
    assert WRAP.wrap(cert.public_key(), sym) != WRAP.wrap(cert.public_key(), sym)

def test_unwrap_with_unrelated_key(recipient, other_recipient):
    cert, _       = recipient
    _, other_key  = other_recipient
    wrapped = WRAP.wrap(cert.public_key(), SymmetricKey.generate(32))
    with pytest.raises(UnwrapError):
        WRAP.unwrap(other_key, wrapped, 32)

def test_unwrap_tampered(recipient):
    cert, key = recipient
    wrapped = bytearray(WRAP.wrap(cert.public_key(), SymmetricKey.generate(32)))
    wrapped[10] ^= 0x01
    with pytest.raises(UnwrapError):
        WRAP.unwrap(key, bytes(wrapped), 32)

def test_unwrap_wrong_key_length(recipient):
    cert, key = recipient
    wrapped = WRAP.wrap(cert.public_key(), SymmetricKey.generate(16))
    with pytest.raises(UnwrapError):
        WRAP.unwrap(key, wrapped, 32)

def test_unwrap_with_non_rsa_key(recipient, ec_recipient):
    cert, _     = recipient
    _, ec_key   = ec_recipient
    wrapped = WRAP.wrap(cert.public_key(), SymmetricKey.generate(32))
    with pytest.raises(UnwrapError):
        WRAP.unwrap(ec_key, wrapped, 32)


# ── certificate compatibility ────────────────────────────────────────────────
def test_ec_certificate_rejected(ec_recipient):
    cert, _ = ec_recipient
    with pytest.raises(UnsupportedCertificateError):
        WRAP.check_public_key(cert.public_key())

def test_small_rsa_certificate_rejected():
    small = rsa.generate_private_key(public_exponent=65537, key_size=1024)
    cert, _ = issue_cert(key=small, common_name="weak")
    with pytest.raises(UnsupportedCertificateError):
        WRAP.wrap(cert.public_key(), SymmetricKey.generate(32))


# ── registry ─────────────────────────────────────────────────────────────────
def test_get_key_wrap():
    assert isinstance(get_key_wrap(KeyWrapAlgorithm.RSA_OAEP_SHA256), RSAOAEPKeyWrap)
    with pytest.raises(UnsupportedFormatError):
        get_key_wrap(0x7F)
