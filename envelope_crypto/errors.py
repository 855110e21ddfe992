"""
Errors
======
Every failure of encrypt() / decrypt() surfaces as one of these.

    EnvelopeError
    ├── UnsupportedCertificateError   encrypt: key type/size unusable for the key wrap
    ├── UnsupportedFormatError        decrypt: unknown version or algorithm id
    │   └── MalformedEnvelopeError    decrypt: truncated, padded or badly armored bytes
    ├── KeyMismatchError              decrypt: private key does not match certificate
    │   └── RecipientMismatchError    decrypt: envelope was sealed for another certificate
    ├── UnwrapError                   decrypt: key wrap rejected the wrapped key
    └── AuthenticationError           decrypt: AEAD tag did not verify

Nothing is retried. A failed verification means tampering or caller error.
"""


class EnvelopeError(Exception):
    """Base class for envelope encryption failures."""


class UnsupportedCertificateError(EnvelopeError):
    pass


class UnsupportedFormatError(EnvelopeError):
    pass


class MalformedEnvelopeError(UnsupportedFormatError):
    pass


class KeyMismatchError(EnvelopeError):
    pass


class RecipientMismatchError(KeyMismatchError):
    pass


class UnwrapError(EnvelopeError):
    pass


class AuthenticationError(EnvelopeError):
    pass
