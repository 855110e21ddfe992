"""
Algorithm identifiers written into every envelope.

Ids are one byte each. Assigned ids differ from one another in at least two
bits, so a single flipped bit never turns one valid id into another.
"""

from enum import IntEnum

FORMAT_VERSION = 1
SUPPORTED_VERSIONS = frozenset({FORMAT_VERSION})


class KeyWrapAlgorithm(IntEnum):
    RSA_OAEP_SHA256 = 0x01


class CipherAlgorithm(IntEnum):
    AES_256_GCM       = 0x01
    CHACHA20_POLY1305 = 0x02


def parse_key_wrap(value) -> KeyWrapAlgorithm:
    """Accept an enum member, its int id or its name."""
    if isinstance(value, str):
        try:
            return KeyWrapAlgorithm[value.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown key wrap algorithm: {value!r}") from None
    return KeyWrapAlgorithm(value)


def parse_cipher(value) -> CipherAlgorithm:
    """Accept an enum member, its int id or its name."""
    if isinstance(value, str):
        try:
            return CipherAlgorithm[value.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Unknown cipher algorithm: {value!r}") from None
    return CipherAlgorithm(value)
