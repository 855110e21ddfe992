"""
envelope_crypto — Live Demo
===========================
Run:  python examples/demo_envelope.py

Issues a throwaway self-signed certificate, encrypts a document to it, and
shows every layer: cipher, key wrap, envelope, PEM armor, and the errors a
recipient gets for a wrong key or a tampered envelope.
"""

import dataclasses
import datetime
import logging
import time

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from envelope_crypto import (
    AuthenticationError,
    Certificate,
    CipherAlgorithm,
    EncryptedDocument,
    EnvelopeCodec,
    KeyMismatchError,
    PrivateKey,
    UnsupportedFormatError,
    decrypt,
    encrypt,
)

LINE = "═" * 70
MSG  = b"Test Data to Sign"


def header(step, name):
    print(f"\n{LINE}")
    print(f"  {step} — {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

def issue_cert(common_name, key_size=3072):
    """Stand-in for a real PKI: self-signed certificate + key."""
    key  = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now  = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return Certificate(cert), PrivateKey(key)


def main():
    logging.basicConfig(level=logging.INFO, format=' %(name)s: %(message)s')

    print(f"\n{LINE}")
    print("  envelope_crypto — Envelope Encryption Demo")
    print(LINE)
    print(f"  Message: {MSG.decode()}\n")

    print("  (Issuing RSA-3072 certificates — takes a moment...)")
    cert, key        = issue_cert("recipient")
    _, stranger_key  = issue_cert("stranger")
    ok("Recipient",   cert.subject)
    ok("Fingerprint", cert.fingerprint.hex()[:32] + "...")

    # ── ENCRYPT ──────────────────────────────────────────────────────────────
    header(1, "ENCRYPT — RSA-OAEP-SHA256 + AES-256-GCM")
    t0 = time.perf_counter()
    e1 = encrypt(MSG, cert)
    e2 = encrypt(MSG, cert)
    elapsed = time.perf_counter() - t0
    ok("Wrapped key", f"{len(e1.wrapped_key)} bytes")
    ok("Envelope",    f"{len(e1.to_bytes())} bytes")
    ok("Same input, different envelopes", str(e1 != e2))
    ok("Two encryptions", f"{elapsed*1000:.1f} ms")

    # ── DECRYPT ──────────────────────────────────────────────────────────────
    header(2, "DECRYPT — unwrap key, verify tag")
    t0 = time.perf_counter()
    pt = decrypt(e1, key, cert)
    elapsed = time.perf_counter() - t0
    ok("Decrypted",  pt.decode())
    ok("Round-trip", f"{elapsed*1000:.1f} ms")

    # ── CHACHA ───────────────────────────────────────────────────────────────
    header(3, "ALTERNATE CIPHER — ChaCha20-Poly1305")
    codec = EnvelopeCodec(cipher=CipherAlgorithm.CHACHA20_POLY1305)
    e3    = codec.encrypt(MSG, cert)
    ok("Cipher id in envelope", CipherAlgorithm(e3.cipher_algorithm).name)
    ok("Decrypted by default codec", decrypt(e3, key, cert).decode())

    # ── DOCUMENT ─────────────────────────────────────────────────────────────
    header(4, "ENCRYPTED DOCUMENT — PEM armor")
    doc = EncryptedDocument(MSG.decode(), cert)
    pem = doc.encrypted_data()
    print("  " + "\n  ".join(pem.splitlines()[:3]) + "\n  ...")
    ok("Decrypted", EncryptedDocument.from_data(pem).decrypted_data(key, cert))

    # ── FAILURES ─────────────────────────────────────────────────────────────
    header(5, "FAILURES — typed errors, never wrong plaintext")
    try:
        decrypt(e1, stranger_key, cert)
    except KeyMismatchError as e:
        ok("Wrong private key", type(e).__name__)
    tampered = bytearray(e1.ciphertext)
    tampered[0] ^= 0x01
    try:
        decrypt(dataclasses.replace(e1, ciphertext=bytes(tampered)), key, cert)
    except AuthenticationError as e:
        ok("Tampered ciphertext", type(e).__name__)
    try:
        decrypt(dataclasses.replace(e1, version=9), key, cert)
    except UnsupportedFormatError as e:
        ok("Unknown version", type(e).__name__)

    print(f"\n{LINE}")
    print("  DEMO COMPLETE")
    print(LINE + "\n")


if __name__ == "__main__":
    main()
