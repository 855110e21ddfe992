"""
EncryptedDocument
=================
Document-level wrapper over the envelope codec:

    doc = EncryptedDocument("Test Data to Sign", cert)
    blob = doc.encrypted_data()                # PEM text
    EncryptedDocument.from_data(blob).decrypted_data(key, cert)

The envelope is produced once, on first access, and reused afterwards.
"""

from typing import Optional, Union

from .algorithms import CipherAlgorithm
from .envelope import PEM_BEGIN, Envelope, get_codec

FORMATS = ("pem", "der")


class EncryptedDocument:
    """A document encrypted to one recipient certificate."""

    def __init__(self, data: Union[str, bytes], certificate,
                 cipher=CipherAlgorithm.AES_256_GCM):
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"data must be str or bytes-like, not {type(data).__name__}.")
        self._data        = data
        self._certificate = certificate
        self._codec       = get_codec(cipher)
        self._envelope: Optional[Envelope] = None

    @classmethod
    def from_envelope(cls, envelope: Envelope) -> "EncryptedDocument":
        doc = cls.__new__(cls)
        doc._data        = None
        doc._certificate = None
        doc._codec       = get_codec()
        doc._envelope    = envelope
        return doc

    @classmethod
    def from_data(cls, encrypted_data: Union[str, bytes]) -> "EncryptedDocument":
        """Load from the output of encrypted_data(), PEM or DER."""
        if isinstance(encrypted_data, str):
            envelope = Envelope.from_pem(encrypted_data)
        elif bytes(encrypted_data[:len(PEM_BEGIN)]) == PEM_BEGIN.encode("ascii"):
            envelope = Envelope.from_pem(encrypted_data)
        else:
            envelope = Envelope.from_bytes(encrypted_data)
        return cls.from_envelope(envelope)

    @property
    def envelope(self) -> Envelope:
        if self._envelope is None:
            self._envelope = self._codec.encrypt(self._data, self._certificate)
            self._data = None
        return self._envelope

    def encrypted_data(self, format: str = "pem") -> Union[str, bytes]:
        """PEM text (default) or raw DER-style binary bytes."""
        if format not in FORMATS:
            raise ValueError(f"format must be one of {FORMATS}, got {format!r}")
        if format == "der":
            return self.envelope.to_bytes()
        return self.envelope.to_pem()

    def decrypted_data(self, key, certificate,
                       encoding: Optional[str] = "utf-8") -> Union[str, bytes]:
        """Decrypt with the recipient's key and certificate."""
        plaintext = self._codec.decrypt(self.envelope, key, certificate)
        if encoding is None:
            return plaintext
        return plaintext.decode(encoding)

    def __repr__(self):
        state = "sealed" if self._envelope is not None else "pending"
        return f"EncryptedDocument({state})"
