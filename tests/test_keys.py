import pytest

from envelope_crypto import SymmetricKey
from envelope_crypto.keys import wipe


def test_generate_size_and_freshness():
    a = SymmetricKey.generate(32)
    b = SymmetricKey.generate(32)
    assert len(a) == 32
    assert bytes(a.material) != bytes(b.material)

def test_wipe_zeroes_buffer():
    key = SymmetricKey(b"\x42" * 32)
    buf = key.material
    key.wipe()
    assert key.wiped
    assert buf == bytearray(32)

def test_material_unavailable_after_wipe():
    key = SymmetricKey.generate(32)
    key.wipe()
    with pytest.raises(ValueError):
        key.material

def test_context_manager_wipes_on_exception():
    key = SymmetricKey.generate(32)
    buf = key.material
    with pytest.raises(RuntimeError):
        with key:
            raise RuntimeError("boom")
    assert key.wiped
    assert buf == bytearray(32)

def test_constructor_copies_material():
    source = bytearray(b"\x01" * 32)
    key = SymmetricKey(source)
    key.wipe()
    assert source == bytearray(b"\x01" * 32)

def test_wipe_helper_skips_immutable_bytes():
    data = b"\x01\x02"
    wipe(data)
    assert data == b"\x01\x02"

def test_repr_never_shows_material():
    key = SymmetricKey(b"\xAB" * 32)
    assert repr(key) == "SymmetricKey(256-bit)"
    key.wipe()
    assert repr(key) == "SymmetricKey(wiped)"
