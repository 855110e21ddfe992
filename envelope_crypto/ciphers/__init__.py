from ..algorithms import CipherAlgorithm
from ..errors import UnsupportedFormatError
from .aead import AEADCipher
from .aes_gcm import AESCipher
from .chacha import ChaChaCipher

_CIPHERS = {
    CipherAlgorithm.AES_256_GCM:       AESCipher(),
    CipherAlgorithm.CHACHA20_POLY1305: ChaChaCipher(),
}


def get_cipher(algorithm_id) -> AEADCipher:
    """Look up the cipher for an envelope's cipher id."""
    try:
        return _CIPHERS[CipherAlgorithm(algorithm_id)]
    except ValueError:
        raise UnsupportedFormatError(
            f"Unsupported cipher algorithm id: {algorithm_id!r}"
        ) from None


__all__ = ["AEADCipher", "AESCipher", "ChaChaCipher", "get_cipher"]
