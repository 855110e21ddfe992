"""
EncryptedDocument: the "Test Data to Sign" scenario end to end.
"""

import logging

import pytest

from envelope_crypto import (
    CipherAlgorithm,
    EncryptedDocument,
    EnvelopeError,
    KeyMismatchError,
)

TEST_DATA = "Test Data to Sign"


@pytest.fixture(scope="module")
def doc(recipient):
    cert, _ = recipient
    return EncryptedDocument(TEST_DATA, cert)


def test_should_create_encrypted_data(doc):
    assert doc.encrypted_data() is not None
    assert TEST_DATA not in doc.encrypted_data()

def test_should_decrypt_correctly(doc, recipient):
    cert, key = recipient
    assert doc.decrypted_data(key, cert) == TEST_DATA

def test_encrypted_data_is_stable_per_document(doc):
    assert doc.encrypted_data() == doc.encrypted_data()

def test_unrelated_key_raises(doc, recipient, other_recipient):
    cert, _      = recipient
    _, other_key = other_recipient
    with pytest.raises(KeyMismatchError):
        doc.decrypted_data(other_key, cert)

def test_two_documents_differ_but_both_decrypt(recipient):
    cert, key = recipient
    d1 = EncryptedDocument(TEST_DATA, cert)
    d2 = EncryptedDocument(TEST_DATA, cert)
    assert d1.encrypted_data() != d2.encrypted_data()
    assert d1.decrypted_data(key, cert) == d2.decrypted_data(key, cert) == TEST_DATA


# ── PEM / DER ────────────────────────────────────────────────────────────────
@pytest.mark.parametrize("fmt", ["pem", "der"])
def test_from_data_roundtrip(fmt, doc, recipient):
    cert, key = recipient
    blob = doc.encrypted_data(fmt)
    assert isinstance(blob, str if fmt == "pem" else bytes)
    assert EncryptedDocument.from_data(blob).decrypted_data(key, cert) == TEST_DATA

def test_from_data_accepts_pem_bytes(doc, recipient):
    cert, key = recipient
    blob = doc.encrypted_data("pem").encode("ascii")
    assert EncryptedDocument.from_data(blob).decrypted_data(key, cert) == TEST_DATA

def test_unknown_format(doc):
    with pytest.raises(ValueError):
        doc.encrypted_data("pkcs7")

def test_from_data_garbage():
    with pytest.raises(EnvelopeError):
        EncryptedDocument.from_data(b"\x09garbage")


# ── options ──────────────────────────────────────────────────────────────────
def test_binary_data_without_decoding(recipient):
    cert, key = recipient
    data = bytes(range(256))
    doc  = EncryptedDocument(data, cert)
    assert doc.decrypted_data(key, cert, encoding=None) == data

def test_chacha_document(recipient):
    cert, key = recipient
    doc = EncryptedDocument(TEST_DATA, cert, cipher=CipherAlgorithm.CHACHA20_POLY1305)
    assert doc.envelope.cipher_algorithm == CipherAlgorithm.CHACHA20_POLY1305
    assert EncryptedDocument.from_data(doc.encrypted_data()).decrypted_data(key, cert) == TEST_DATA

@pytest.mark.parametrize("data", [3, None, 2.5])
def test_non_text_data_rejected(data, recipient):
    cert, _ = recipient
    with pytest.raises(TypeError):
        EncryptedDocument(data, cert)

def test_documents_are_quiet_at_info(recipient, caplog):
    cert, _ = recipient
    with caplog.at_level(logging.INFO, logger="envelope_crypto"):
        EncryptedDocument(TEST_DATA, cert)
        EncryptedDocument(TEST_DATA, cert)
    assert [r for r in caplog.records if r.levelno >= logging.INFO] == []
