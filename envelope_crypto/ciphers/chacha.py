"""
ChaCha20-Poly1305
=================
ChaCha20 stream cipher + Poly1305 authentication tag (RFC 8439).

A faster choice than AES on hardware without AES-NI acceleration.
Select it with EnvelopeCodec(cipher="CHACHA20_POLY1305"); decryption
picks it up from the envelope's cipher id automatically.

Key:   256-bit (32 bytes)
Nonce:  96-bit (12 bytes), IETF variant
Tag:   128-bit (16 bytes)

Dependencies: cryptography >= 41.0
"""

from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from ..algorithms import CipherAlgorithm
from .aead import AEADCipher


class ChaChaCipher(AEADCipher):
    """ChaCha20-Poly1305 authenticated stream encryption."""

    ALGORITHM = CipherAlgorithm.CHACHA20_POLY1305
    NAME      = "ChaCha20-Poly1305"

    _primitive = ChaCha20Poly1305
