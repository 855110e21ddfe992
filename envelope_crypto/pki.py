"""
Certificate and private key handles
===================================
The envelope core never issues certificates or generates keys. It consumes
them through two narrow wrappers:

    Certificate  public_key(), fingerprint, subject, serial_number
    PrivateKey   public_key(), corresponds_to(certificate), decrypt(ct, padding)

A PrivateKey can be loaded but never exported: there is no serialisation
method on purpose. Both wrappers are immutable and are only borrowed for the
duration of an encrypt()/decrypt() call.

Dependencies: cryptography >= 41.0
"""

from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization


def _spki(public_key) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo
    )


class Certificate:
    """Recipient identity + public key, backed by an X.509 certificate."""

    __slots__ = ("_cert", "_fingerprint")

    def __init__(self, cert: x509.Certificate):
        if not isinstance(cert, x509.Certificate):
            raise TypeError("Certificate expects a cryptography x509.Certificate.")
        object.__setattr__(self, "_cert", cert)
        object.__setattr__(self, "_fingerprint", cert.fingerprint(hashes.SHA256()))

    def __setattr__(self, name, value):
        raise AttributeError("Certificate is immutable.")

    @classmethod
    def from_pem(cls, data: bytes) -> "Certificate":
        if isinstance(data, str):
            data = data.encode("ascii")
        return cls(x509.load_pem_x509_certificate(data))

    @classmethod
    def from_der(cls, data: bytes) -> "Certificate":
        return cls(x509.load_der_x509_certificate(data))

    def public_key(self):
        return self._cert.public_key()

    @property
    def fingerprint(self) -> bytes:
        """SHA-256 over the DER encoding (32 bytes)."""
        return self._fingerprint

    @property
    def subject(self) -> str:
        return self._cert.subject.rfc4514_string()

    @property
    def serial_number(self) -> int:
        return self._cert.serial_number

    @property
    def x509(self) -> x509.Certificate:
        return self._cert

    def __eq__(self, other):
        if not isinstance(other, Certificate):
            return NotImplemented
        return self._fingerprint == other._fingerprint

    def __hash__(self):
        return hash(self._fingerprint)

    def __repr__(self):
        return f"Certificate({self.subject}, sha256={self._fingerprint.hex()[:16]}...)"


class PrivateKey:
    """Private key handle, usable only together with its certificate."""

    __slots__ = ("_key",)

    def __init__(self, key):
        if not hasattr(key, "public_key"):
            raise TypeError("PrivateKey expects a cryptography private key object.")
        object.__setattr__(self, "_key", key)

    def __setattr__(self, name, value):
        raise AttributeError("PrivateKey is immutable.")

    @classmethod
    def from_pem(cls, data: bytes, password: Optional[bytes] = None) -> "PrivateKey":
        """Load a PEM private key (PKCS#1 or PKCS#8, optionally encrypted)."""
        if isinstance(data, str):
            data = data.encode("ascii")
        return cls(serialization.load_pem_private_key(data, password=password))

    def public_key(self):
        return self._key.public_key()

    def corresponds_to(self, certificate: Certificate) -> bool:
        """True if this key is the private half of the certificate's public key."""
        return _spki(self._key.public_key()) == _spki(certificate.public_key())

    def decrypt(self, ciphertext: bytes, padding) -> bytes:
        """Primitive asymmetric decryption used by the key wrap."""
        if not hasattr(self._key, "decrypt"):
            raise TypeError(f"{type(self._key).__name__} cannot decrypt.")
        return self._key.decrypt(ciphertext, padding)

    @property
    def key_size(self) -> Optional[int]:
        return getattr(self._key, "key_size", None)

    def __repr__(self):
        size = self.key_size
        return f"PrivateKey({type(self._key).__name__}{f', {size}-bit' if size else ''})"
