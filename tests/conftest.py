"""
Test fixtures: self-signed certificates issued on the fly.

Certificate issuance is not part of envelope_crypto; tests build what a
PKI would hand over using cryptography's x509 builder.
"""

import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

from envelope_crypto import Certificate, PrivateKey


def issue_cert(key=None, common_name="envelope-crypto test", key_size=2048):
    """Return (Certificate, PrivateKey) for a fresh self-signed certificate."""
    if key is None:
        key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now  = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=5))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return Certificate(cert), PrivateKey(key)


@pytest.fixture(scope="session")
def recipient():
    return issue_cert(common_name="recipient")


@pytest.fixture(scope="session")
def other_recipient():
    return issue_cert(common_name="other recipient")


@pytest.fixture(scope="session")
def ec_recipient():
    return issue_cert(key=ec.generate_private_key(ec.SECP256R1()), common_name="ec recipient")
