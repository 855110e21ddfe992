"""
AES-256-GCM
===========
AES-256 in Galois/Counter Mode. The default envelope cipher.

GCM provides authenticated encryption: it encrypts the document and
produces a 128-bit tag over the ciphertext and the envelope header
(passed as associated data). Any change to either is detected on open().

Key size: 256 bits (32 bytes), one fresh key per envelope.
Nonce:    96 bits (12 bytes), randomly generated per envelope.
Tag:      128 bits (16 bytes).

Dependencies: cryptography >= 41.0
"""

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..algorithms import CipherAlgorithm
from .aead import AEADCipher


class AESCipher(AEADCipher):
    """AES-256-GCM authenticated encryption."""

    ALGORITHM = CipherAlgorithm.AES_256_GCM
    NAME      = "AES-256-GCM"

    _primitive = AESGCM
