"""
Symmetric Cipher Engine
=======================
Common seal/open contract for the AEAD ciphers an envelope can carry.

    seal(key, nonce, plaintext, aad) -> (ciphertext, tag)
    open(key, nonce, ciphertext, tag, aad) -> plaintext

The ciphertext is exactly as long as the plaintext (both supported ciphers
are stream modes); the tag is a fixed 16 bytes. open() only ever returns
plaintext after the tag has verified, the underlying primitive decrypts and
authenticates in one call and releases nothing on failure.

Nonce uniqueness per key is the caller's job. The envelope codec uses a
fresh random key AND a fresh random nonce for every message.

Dependencies: cryptography >= 41.0
"""

import os
from typing import Optional, Tuple

from cryptography.exceptions import InvalidTag

from ..errors import AuthenticationError
from ..keys import SymmetricKey


class AEADCipher:
    """Base class: subclasses set the constants and _primitive."""

    ALGORITHM  = None
    NAME       = None
    KEY_SIZE   = 32   # 256-bit key
    NONCE_SIZE = 12   # 96-bit nonce
    TAG_SIZE   = 16   # 128-bit tag

    _primitive = None

    def _check(self, key, nonce: bytes):
        material = key.material if isinstance(key, SymmetricKey) else key
        if len(material) != self.KEY_SIZE:
            raise ValueError(f"{self.NAME} key must be {self.KEY_SIZE} bytes.")
        if len(nonce) != self.NONCE_SIZE:
            raise ValueError(f"{self.NAME} nonce must be {self.NONCE_SIZE} bytes.")
        return material

    def generate_nonce(self) -> bytes:
        return os.urandom(self.NONCE_SIZE)

    def seal(self, key, nonce: bytes, plaintext: bytes,
             aad: Optional[bytes] = None) -> Tuple[bytes, bytes]:
        """
        Encrypt and authenticate.
        Returns: (ciphertext, tag)
        """
        material = self._check(key, nonce)
        sealed   = self._primitive(material).encrypt(nonce, plaintext, aad)
        return sealed[:-self.TAG_SIZE], sealed[-self.TAG_SIZE:]

    def open(self, key, nonce: bytes, ciphertext: bytes, tag: bytes,
             aad: Optional[bytes] = None) -> bytes:
        """
        Verify the tag, then decrypt.
        Raises AuthenticationError if tampered or under the wrong key/nonce.
        """
        material = self._check(key, nonce)
        if len(tag) != self.TAG_SIZE:
            raise AuthenticationError(
                f"{self.NAME} tag must be {self.TAG_SIZE} bytes, got {len(tag)}."
            )
        try:
            return self._primitive(material).decrypt(nonce, bytes(ciphertext) + bytes(tag), aad)
        except InvalidTag:
            raise AuthenticationError(
                f"{self.NAME} authentication failed. Data tampered or wrong key."
            ) from None

    def __repr__(self):
        return f"{type(self).__name__}({self.NAME})"
