"""
envelope_crypto
===============
Hybrid (envelope) encryption of documents to an X.509 certificate.
A document is encrypted once against the recipient's certificate and can only
be decrypted by the holder of the matching private key.

Layers:
    SYMMETRIC   AES-256-GCM / ChaCha20-Poly1305   (ciphers/)
    KEY WRAP    RSA-OAEP-SHA256                    (keywrap.py)
    ENVELOPE    versioned, self-describing format  (envelope.py)
    DOCUMENT    PEM / DER encrypted documents      (document.py)

    from envelope_crypto import Certificate, PrivateKey, encrypt, decrypt

    envelope  = encrypt(b"Test Data to Sign", cert)
    plaintext = decrypt(envelope, key, cert)

License: Apache 2.0
"""

__version__ = "1.0.0"

from .algorithms import FORMAT_VERSION, CipherAlgorithm, KeyWrapAlgorithm
from .ciphers    import AESCipher, ChaChaCipher, get_cipher
from .document   import EncryptedDocument
from .envelope   import Envelope, EnvelopeCodec, decrypt, encrypt, get_codec
from .errors     import (
    AuthenticationError,
    EnvelopeError,
    KeyMismatchError,
    MalformedEnvelopeError,
    RecipientMismatchError,
    UnsupportedCertificateError,
    UnsupportedFormatError,
    UnwrapError,
)
from .keys       import SymmetricKey
from .keywrap    import RSAOAEPKeyWrap, get_key_wrap
from .pki        import Certificate, PrivateKey

__all__ = [
    "FORMAT_VERSION",
    "CipherAlgorithm",
    "KeyWrapAlgorithm",
    "AESCipher",
    "ChaChaCipher",
    "get_cipher",
    "RSAOAEPKeyWrap",
    "get_key_wrap",
    "SymmetricKey",
    "Certificate",
    "PrivateKey",
    "Envelope",
    "EnvelopeCodec",
    "get_codec",
    "encrypt",
    "decrypt",
    "EncryptedDocument",
    "EnvelopeError",
    "UnsupportedCertificateError",
    "UnsupportedFormatError",
    "MalformedEnvelopeError",
    "KeyMismatchError",
    "RecipientMismatchError",
    "UnwrapError",
    "AuthenticationError",
]
