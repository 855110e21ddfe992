"""
Ephemeral symmetric keys
========================
A SymmetricKey lives only inside one encrypt() or decrypt() call. It is kept
in a bytearray so it can be overwritten with zeros once the call is done:

    with SymmetricKey.generate(32) as key:
        cipher.seal(key, nonce, plaintext)
    # key is zeroed here, on success or on exception

LIMITATION: Python cannot promise erasure. The AEAD and RSA primitives copy
the key into their own buffers, immutable bytes copies may be made on the way
in, and the allocator may have moved the buffer. Wiping our copy only narrows
the window in which the key sits in memory.
"""

import os


def wipe(buf: bytearray) -> None:
    """Overwrite a mutable buffer with zeros. Immutable bytes are skipped."""
    if not isinstance(buf, bytearray):
        return
    for i in range(len(buf)):
        buf[i] = 0


class SymmetricKey:
    """One-time symmetric key with explicit wipe."""

    def __init__(self, material):
        self._buf   = bytearray(material)
        self._wiped = False

    @classmethod
    def generate(cls, size: int) -> "SymmetricKey":
        buf = bytearray(os.urandom(size))
        try:
            return cls(buf)
        finally:
            wipe(buf)

    def __len__(self) -> int:
        return len(self._buf)

    @property
    def material(self) -> bytearray:
        """The live key buffer. Do not keep references past wipe()."""
        if self._wiped:
            raise ValueError("Symmetric key has already been wiped.")
        return self._buf

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        wipe(self._buf)
        self._wiped = True

    def __enter__(self) -> "SymmetricKey":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __repr__(self):
        state = "wiped" if self._wiped else f"{len(self._buf) * 8}-bit"
        return f"SymmetricKey({state})"
