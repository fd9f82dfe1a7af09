import pytest
from Cryptodome.Util.Padding import pad, unpad

from bfcipher.block_modes import pad_pkcs7, unpad_pkcs7


@pytest.mark.parametrize("length", range(0, 25))
def test_pad_reaches_block_boundary(length):
    padded = pad_pkcs7(b"x" * length, 8)
    added = len(padded) - length
    assert len(padded) % 8 == 0
    assert 1 <= added <= 8
    assert padded[length:] == bytes([added]) * added


def test_exact_multiple_gains_full_block():
    assert pad_pkcs7(b"12345678", 8) == b"12345678" + b"\x08" * 8


def test_empty_message_is_one_padding_block():
    assert pad_pkcs7(b"", 8) == b"\x08" * 8


@pytest.mark.parametrize("length", range(0, 25))
def test_unpad_inverts_pad(length):
    message = bytes(range(length))
    assert unpad_pkcs7(pad_pkcs7(message, 8), 8) == message


def test_unpad_strips_valid_padding():
    assert unpad_pkcs7(b"abcde\x03\x03\x03", 8) == b"abcde"
    assert unpad_pkcs7(b"\x08" * 8, 8) == b""


def test_unpad_leaves_out_of_range_value():
    # Last byte 0 or above the block size means "not padded"
    assert unpad_pkcs7(b"abcdefg\x00", 8) == b"abcdefg\x00"
    assert unpad_pkcs7(b"abcdefg\x09", 8) == b"abcdefg\x09"
    assert unpad_pkcs7(bytes.fromhex("0123456789ABCDEF"), 8) == bytes.fromhex("0123456789ABCDEF")


def test_unpad_leaves_inconsistent_padding():
    # Claims three bytes of padding but only two match
    block = b"abcde\x01\x03\x03"
    assert unpad_pkcs7(block, 8) == block


def test_unpad_empty_input():
    assert unpad_pkcs7(b"", 8) == b""


def test_unpad_value_longer_than_data():
    assert unpad_pkcs7(b"\x05\x05", 8) == b"\x05\x05"


@pytest.mark.parametrize("block_size", [0, 256])
def test_invalid_block_size(block_size):
    with pytest.raises(ValueError):
        pad_pkcs7(b"abc", block_size)
    with pytest.raises(ValueError):
        unpad_pkcs7(b"abc", block_size)


@pytest.mark.parametrize("length", range(0, 40))
def test_pad_matches_cryptodome(length):
    message = bytes(range(length))
    assert pad_pkcs7(message, 8) == pad(message, 8, style='pkcs7')


def _unpad_or_keep(block):
    try:
        return unpad(block, 8, style='pkcs7')
    except ValueError:
        return block


@pytest.mark.parametrize("value", range(256))
def test_unpad_every_final_block_shape(value):
    # Last byte `value` repeated over the final `run` bytes of a block
    for run in range(1, 9):
        block = bytes(range(0x41, 0x41 + 8 - run)) + bytes([value]) * run
        result = unpad_pkcs7(block, 8)
        assert result == _unpad_or_keep(block)
        if 1 <= value <= run:
            assert result == block[:-value]
        elif value > 8 or value == 0:
            assert result == block
