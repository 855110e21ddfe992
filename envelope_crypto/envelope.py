"""
Envelope Codec: RSA-OAEP key wrap + AEAD payload
================================================
Encrypt the DOCUMENT with a random one-time AES-256 (or ChaCha20) key, then
encrypt THAT key to the recipient's certificate with RSA-OAEP. Only the
holder of the matching private key can unwrap the key and read the document.

The envelope describes itself completely: version and algorithm ids travel
with the ciphertext, so decrypt() needs nothing but the envelope, the
private key and its certificate.

Wire format (big-endian):
    version(1) | key_wrap_id(1) | cipher_id(1) | recipient_sha256(32)
    | wrapped_key_len(2) | wrapped_key | nonce(12)
    | ciphertext_len(8) | ciphertext | tag(16)

The first 35 bytes (the header) are bound into the AEAD tag as associated
data: changing the recipient or an algorithm id fails authentication even
if the new value happens to be valid.

PEM armor: base64 of the above between
    -----BEGIN ENCRYPTED DOCUMENT-----
    -----END ENCRYPTED DOCUMENT-----

Dependencies: cryptography >= 41.0
"""

import base64
import binascii
import logging
import struct
import textwrap
from dataclasses import dataclass, field
from typing import Tuple, Union

from .algorithms import (
    FORMAT_VERSION,
    SUPPORTED_VERSIONS,
    CipherAlgorithm,
    KeyWrapAlgorithm,
    parse_cipher,
    parse_key_wrap,
)
from .ciphers import AEADCipher, get_cipher
from .errors import (
    KeyMismatchError,
    MalformedEnvelopeError,
    RecipientMismatchError,
    UnsupportedFormatError,
)
from .keys import SymmetricKey
from .keywrap import RSAOAEPKeyWrap, get_key_wrap

logger = logging.getLogger(__name__)

FINGERPRINT_SIZE = 32

_HEADER  = struct.Struct(">BBB32s")
_KEY_LEN = struct.Struct(">H")
_CT_LEN  = struct.Struct(">Q")

PEM_BEGIN = "-----BEGIN ENCRYPTED DOCUMENT-----"
PEM_END   = "-----END ENCRYPTED DOCUMENT-----"


class _Reader:
    """Bounds-checked cursor over a serialized envelope."""

    def __init__(self, data: bytes):
        self._data   = data
        self._offset = 0

    def take(self, size: int, what: str) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise MalformedEnvelopeError(
                f"Envelope truncated while reading {what} "
                f"(need {size}B at offset {self._offset}, have {len(self._data) - self._offset}B)."
            )
        chunk, self._offset = self._data[self._offset:end], end
        return chunk

    def unpack(self, fmt: struct.Struct, what: str) -> tuple:
        return fmt.unpack(self.take(fmt.size, what))

    def finish(self) -> None:
        extra = len(self._data) - self._offset
        if extra:
            raise MalformedEnvelopeError(f"{extra} trailing byte(s) after envelope.")


@dataclass(frozen=True)
class Envelope:
    """The encrypted document. Immutable; safe to persist or transmit."""

    version:               int
    key_wrap_algorithm:    int
    cipher_algorithm:      int
    recipient_fingerprint: bytes
    wrapped_key:           bytes = field(repr=False)
    nonce:                 bytes
    ciphertext:            bytes = field(repr=False)
    tag:                   bytes

    def validate(self) -> Tuple[RSAOAEPKeyWrap, AEADCipher]:
        """
        Check version, algorithm ids and field sizes. No cryptography runs here.
        Returns the key wrap and cipher the envelope names.
        """
        if self.version not in SUPPORTED_VERSIONS:
            raise UnsupportedFormatError(
                f"Unsupported envelope version {self.version!r} "
                f"(supported: {sorted(SUPPORTED_VERSIONS)})."
            )
        key_wrap = get_key_wrap(self.key_wrap_algorithm)
        cipher   = get_cipher(self.cipher_algorithm)
        if len(self.recipient_fingerprint) != FINGERPRINT_SIZE:
            raise MalformedEnvelopeError(
                f"Recipient fingerprint must be {FINGERPRINT_SIZE} bytes."
            )
        if not self.wrapped_key:
            raise MalformedEnvelopeError("Wrapped key is empty.")
        if len(self.nonce) != cipher.NONCE_SIZE:
            raise MalformedEnvelopeError(
                f"{cipher.NAME} nonce must be {cipher.NONCE_SIZE} bytes, got {len(self.nonce)}."
            )
        if len(self.tag) != cipher.TAG_SIZE:
            raise MalformedEnvelopeError(
                f"{cipher.NAME} tag must be {cipher.TAG_SIZE} bytes, got {len(self.tag)}."
            )
        return key_wrap, cipher

    def associated_data(self) -> bytes:
        """Header bytes authenticated by the AEAD tag."""
        try:
            return _HEADER.pack(
                self.version,
                self.key_wrap_algorithm,
                self.cipher_algorithm,
                self.recipient_fingerprint,
            )
        except struct.error as e:
            raise MalformedEnvelopeError(f"Envelope header cannot be encoded: {e}") from None

    def to_bytes(self) -> bytes:
        if len(self.recipient_fingerprint) != FINGERPRINT_SIZE:
            raise MalformedEnvelopeError(
                f"Recipient fingerprint must be {FINGERPRINT_SIZE} bytes."
            )
        try:
            key_len = _KEY_LEN.pack(len(self.wrapped_key))
            ct_len  = _CT_LEN.pack(len(self.ciphertext))
        except struct.error as e:
            raise MalformedEnvelopeError(f"Envelope field too large: {e}") from None
        return b"".join((
            self.associated_data(),
            key_len, self.wrapped_key,
            self.nonce,
            ct_len, self.ciphertext,
            self.tag,
        ))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Envelope":
        """
        Parse a binary envelope.
        Raises UnsupportedFormatError for an unknown version or algorithm id,
        MalformedEnvelopeError for truncated or oversized input.
        """
        data = bytes(data)
        if not data:
            raise MalformedEnvelopeError("Envelope is empty.")
        if data[0] not in SUPPORTED_VERSIONS:
            raise UnsupportedFormatError(f"Unsupported envelope version {data[0]}.")

        r = _Reader(data)
        version, wrap_id, cipher_id, fingerprint = r.unpack(_HEADER, "header")
        get_key_wrap(wrap_id)
        cipher = get_cipher(cipher_id)

        (key_len,)  = r.unpack(_KEY_LEN, "wrapped key length")
        wrapped_key = r.take(key_len, "wrapped key")
        nonce       = r.take(cipher.NONCE_SIZE, "nonce")
        (ct_len,)   = r.unpack(_CT_LEN, "ciphertext length")
        ciphertext  = r.take(ct_len, "ciphertext")
        tag         = r.take(cipher.TAG_SIZE, "tag")
        r.finish()

        return cls(
            version=version,
            key_wrap_algorithm=wrap_id,
            cipher_algorithm=cipher_id,
            recipient_fingerprint=fingerprint,
            wrapped_key=wrapped_key,
            nonce=nonce,
            ciphertext=ciphertext,
            tag=tag,
        )

    def to_pem(self) -> str:
        body = base64.b64encode(self.to_bytes()).decode("ascii")
        return "\n".join([PEM_BEGIN, *textwrap.wrap(body, 64), PEM_END]) + "\n"

    @classmethod
    def from_pem(cls, text: Union[str, bytes]) -> "Envelope":
        if isinstance(text, bytes):
            try:
                text = text.decode("ascii")
            except UnicodeDecodeError:
                raise MalformedEnvelopeError("PEM envelope is not ASCII.") from None
        text = text.strip()
        if text.count(PEM_BEGIN) != 1 or text.count(PEM_END) != 1:
            raise MalformedEnvelopeError(
                "Expected exactly one ENCRYPTED DOCUMENT PEM block."
            )
        end = len(text) - len(PEM_END)
        if not text.startswith(PEM_BEGIN) or text.find(PEM_END) != end:
            raise MalformedEnvelopeError("Missing ENCRYPTED DOCUMENT PEM armor.")
        body = "".join(text[len(PEM_BEGIN):end].split())
        try:
            raw = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedEnvelopeError(f"Bad base64 in PEM envelope: {e}") from None
        return cls.from_bytes(raw)


class EnvelopeCodec:
    """
    Envelope encryption to an X.509 certificate.

    The constructor picks the algorithms used for NEW envelopes. decrypt()
    always follows the ids stored in the envelope it is given.
    """

    def __init__(self, cipher=CipherAlgorithm.AES_256_GCM,
                 key_wrap=KeyWrapAlgorithm.RSA_OAEP_SHA256):
        self._cipher   = get_cipher(parse_cipher(cipher))
        self._key_wrap = get_key_wrap(parse_key_wrap(key_wrap))
        logger.debug(f"EnvelopeCodec {self._key_wrap.NAME} + {self._cipher.NAME}")

    @property
    def cipher(self) -> AEADCipher:
        return self._cipher

    @property
    def key_wrap(self) -> RSAOAEPKeyWrap:
        return self._key_wrap

    def encrypt(self, plaintext: bytes, certificate) -> Envelope:
        """
        Encrypt arbitrary-length plaintext for the certificate's owner.
        Every call uses a fresh key and nonce, so identical inputs give
        different envelopes.
        """
        if isinstance(plaintext, str):
            raise TypeError("plaintext must be bytes; encode text first.")
        if not isinstance(plaintext, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"plaintext must be bytes-like, not {type(plaintext).__name__}."
            )
        plaintext  = bytes(plaintext)
        public_key = certificate.public_key()
        self._key_wrap.check_public_key(public_key)

        header = Envelope(
            version=FORMAT_VERSION,
            key_wrap_algorithm=self._key_wrap.ALGORITHM,
            cipher_algorithm=self._cipher.ALGORITHM,
            recipient_fingerprint=certificate.fingerprint,
            wrapped_key=b"",
            nonce=b"",
            ciphertext=b"",
            tag=b"",
        )

        # 1. Fresh one-time key and nonce
        nonce = self._cipher.generate_nonce()
        with SymmetricKey.generate(self._cipher.KEY_SIZE) as key:
            # 2. Encrypt the document, binding the header
            ciphertext, tag = self._cipher.seal(
                key, nonce, plaintext, aad=header.associated_data()
            )
            # 3. Wrap the key to the recipient
            wrapped_key = self._key_wrap.wrap(public_key, key)
        # 4. key is wiped on leaving the block

        logger.debug(
            f"Encrypted {len(plaintext)}B for {certificate.subject}: "
            f"{self._cipher.NAME}, wrapped key {len(wrapped_key)}B"
        )
        return Envelope(
            version=header.version,
            key_wrap_algorithm=header.key_wrap_algorithm,
            cipher_algorithm=header.cipher_algorithm,
            recipient_fingerprint=header.recipient_fingerprint,
            wrapped_key=wrapped_key,
            nonce=nonce,
            ciphertext=ciphertext,
            tag=tag,
        )

    def decrypt(self, envelope, private_key, certificate) -> bytes:
        """
        Decrypt an Envelope (or its binary or PEM form) with the recipient's
        private key and certificate.
        """
        if isinstance(envelope, str):
            envelope = Envelope.from_pem(envelope)
        elif isinstance(envelope, (bytes, bytearray, memoryview)):
            envelope = Envelope.from_bytes(envelope)
        elif not isinstance(envelope, Envelope):
            raise TypeError(
                "envelope must be an Envelope, its binary bytes or its PEM text, "
                f"not {type(envelope).__name__}."
            )

        # 1. Format check, before any cryptography
        key_wrap, cipher = envelope.validate()

        # 2. Key pair correspondence
        if not private_key.corresponds_to(certificate):
            raise KeyMismatchError(
                f"Private key does not correspond to certificate {certificate.subject}."
            )
        if certificate.fingerprint != envelope.recipient_fingerprint:
            raise RecipientMismatchError(
                f"Envelope was encrypted for another certificate "
                f"(sha256 {envelope.recipient_fingerprint.hex()[:16]}...), "
                f"not {certificate.subject}."
            )

        # 3. Unwrap, 4. open; key is wiped on every exit path
        with key_wrap.unwrap(private_key, envelope.wrapped_key, cipher.KEY_SIZE) as key:
            plaintext = cipher.open(
                key, envelope.nonce, envelope.ciphertext, envelope.tag,
                aad=envelope.associated_data(),
            )

        logger.debug(f"Decrypted {len(plaintext)}B for {certificate.subject} ({cipher.NAME})")
        return plaintext

    def __repr__(self):
        return f"EnvelopeCodec({self._key_wrap.NAME}, {self._cipher.NAME})"


_codecs = {}


def get_codec(cipher=CipherAlgorithm.AES_256_GCM) -> EnvelopeCodec:
    """Shared codec for a cipher choice. Codecs hold no per-call state."""
    algorithm = parse_cipher(cipher)
    codec = _codecs.get(algorithm)
    if codec is None:
        codec = _codecs.setdefault(algorithm, EnvelopeCodec(cipher=algorithm))
    return codec


_default_codec = get_codec()


def encrypt(plaintext: bytes, certificate) -> Envelope:
    """Envelope-encrypt with the default algorithms (RSA-OAEP-SHA256 + AES-256-GCM)."""
    return _default_codec.encrypt(plaintext, certificate)


def decrypt(envelope, private_key, certificate) -> bytes:
    """
    Envelope-decrypt. Raises UnsupportedFormatError, KeyMismatchError,
    UnwrapError or AuthenticationError.
    """
    return _default_codec.decrypt(envelope, private_key, certificate)
