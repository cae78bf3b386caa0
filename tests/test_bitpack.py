import pytest

from bitpack import pack_bits_from_codes, unpack_and_decode
from huffman import (
    Code,
    HuffmanNode,
    InconsistentPayloadError,
    UnknownSymbolError,
    build_huffman_tree,
    compute_frequencies,
    generate_huffman_codes,
)


def _tree_and_codes(data):
    root = build_huffman_tree(compute_frequencies(data))
    return root, generate_huffman_codes(root)


def test_pack_msb_first_with_padding():
    codes = {0: Code(0b0, 1), 1: Code(0b10, 2), 2: Code(0b11, 2)}
    packed, bit_length = pack_bits_from_codes(bytes([0, 1, 2, 0]), codes)
    assert bit_length == 6
    assert packed == bytes([0b01011000])


def test_pack_crosses_byte_boundaries():
    packed, bit_length = pack_bits_from_codes(bytes([5, 5, 5]), {5: Code(0b101, 3)})
    assert bit_length == 9
    assert packed == bytes([0b10110110, 0b10000000])


def test_pack_unknown_symbol_raises():
    with pytest.raises(UnknownSymbolError) as exc_info:
        pack_bits_from_codes(b"\x00\x07", {0: Code(0, 1)})
    assert exc_info.value.symbol == 7
    assert exc_info.value.position == 1


def test_pack_empty():
    assert pack_bits_from_codes(b"", {}) == (b"", 0)


def test_unpack_round_trip():
    data = b"abracadabra, abracadabra!"
    root, codes = _tree_and_codes(data)
    packed, bit_length = pack_bits_from_codes(data, codes)
    assert unpack_and_decode(packed, bit_length, root) == data


def test_unpack_ignores_padding_bits():
    data = b"abbcccd"
    root, codes = _tree_and_codes(data)
    packed, bit_length = pack_bits_from_codes(data, codes)
    padded = packed[:-1] + bytes([packed[-1] | ((1 << (8 - bit_length % 8)) - 1)])
    assert unpack_and_decode(padded, bit_length, root) == data


def test_unpack_ending_mid_tree_raises():
    data = b"abbcccd"
    root, codes = _tree_and_codes(data)
    packed, bit_length = pack_bits_from_codes(data, codes)
    # last symbol 'd' has a 3-bit code
    with pytest.raises(InconsistentPayloadError):
        unpack_and_decode(packed, bit_length - 1, root)


def test_unpack_bit_length_beyond_buffer_raises():
    root = HuffmanNode(None, 2, HuffmanNode(1, 1), HuffmanNode(2, 1))
    with pytest.raises(InconsistentPayloadError):
        unpack_and_decode(b"\x00", 9, root)


def test_unpack_without_tree():
    assert unpack_and_decode(b"", 0, None) == b""
    with pytest.raises(InconsistentPayloadError):
        unpack_and_decode(b"\x00", 3, None)


def test_unpack_single_leaf_tree():
    root = HuffmanNode(ord("z"), 5)
    assert unpack_and_decode(b"\x00", 5, root) == b"zzzzz"
