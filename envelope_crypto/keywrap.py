"""
Key wrap: RSA-OAEP-SHA256
=========================
Encrypts the envelope's one-time symmetric key to the recipient's RSA
public key, using OAEP with SHA-256 for both the hash and MGF1, no label.

OAEP can encrypt at most k - 2*hLen - 2 bytes: 190 bytes for a 2048-bit
key, plenty for a 32-byte symmetric key. Keys under 2048 bits are refused.

The wrapped key is exactly modulus-size bytes (256 for RSA-2048,
512 for RSA-4096).

Dependencies: cryptography >= 41.0
"""

import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .algorithms import KeyWrapAlgorithm
from .errors import UnsupportedCertificateError, UnsupportedFormatError, UnwrapError
from .keys import SymmetricKey, wipe

logger = logging.getLogger(__name__)


class RSAOAEPKeyWrap:
    """RSA-OAEP-SHA256 wrap / unwrap of a symmetric key."""

    ALGORITHM    = KeyWrapAlgorithm.RSA_OAEP_SHA256
    NAME         = "RSA-OAEP-SHA256"
    MIN_KEY_SIZE = 2048

    def _oaep(self):
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA256()),
            algorithm=hashes.SHA256(),
            label=None
        )

    def check_public_key(self, public_key) -> None:
        """Raise UnsupportedCertificateError unless the key can wrap."""
        if not isinstance(public_key, rsa.RSAPublicKey):
            raise UnsupportedCertificateError(
                f"{self.NAME} needs an RSA public key, "
                f"certificate carries {type(public_key).__name__}."
            )
        if public_key.key_size < self.MIN_KEY_SIZE:
            raise UnsupportedCertificateError(
                f"RSA key is {public_key.key_size} bits; "
                f"{self.NAME} requires at least {self.MIN_KEY_SIZE}."
            )

    def wrap(self, public_key, key: SymmetricKey) -> bytes:
        """Encrypt the symmetric key with the recipient's public key."""
        self.check_public_key(public_key)
        wrapped = public_key.encrypt(bytes(key.material), self._oaep())
        logger.debug(f"Wrapped {len(key)}B key -> {len(wrapped)}B ({self.NAME})")
        return wrapped

    def unwrap(self, private_key, wrapped: bytes, key_size: int) -> SymmetricKey:
        """
        Recover the symmetric key with the recipient's private key.
        Raises UnwrapError if the private key rejects the ciphertext.
        """
        try:
            raw = private_key.decrypt(wrapped, self._oaep())
        except (ValueError, TypeError) as e:
            raise UnwrapError(f"{self.NAME} could not unwrap the key: {e}") from None
        buf = bytearray(raw)
        try:
            if len(buf) != key_size:
                raise UnwrapError(
                    f"Unwrapped key is {len(buf)} bytes, expected {key_size}."
                )
            return SymmetricKey(buf)
        finally:
            wipe(buf)

    def __repr__(self):
        return f"RSAOAEPKeyWrap({self.NAME})"


_KEY_WRAPS = {
    KeyWrapAlgorithm.RSA_OAEP_SHA256: RSAOAEPKeyWrap(),
}


def get_key_wrap(algorithm_id) -> RSAOAEPKeyWrap:
    """Look up the key wrap for an envelope's key-wrap id."""
    try:
        return _KEY_WRAPS[KeyWrapAlgorithm(algorithm_id)]
    except ValueError:
        raise UnsupportedFormatError(
            f"Unsupported key wrap algorithm id: {algorithm_id!r}"
        ) from None
