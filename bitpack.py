import logging
from typing import Dict, List, Optional, Tuple

from huffman import Code, HuffmanNode, InconsistentPayloadError, UnknownSymbolError

logger = logging.getLogger(__name__)


def _lookup_table(code_map: Dict[int, Code]) -> List[Optional[Code]]:
    table: List[Optional[Code]] = [None] * 256
    for symbol, code in code_map.items():
        table[symbol] = code
    return table


def pack_bits_from_codes(data: bytes, code_map: Dict[int, Code]) -> Tuple[bytes, int]:
    """
    Converts Huffman codes into packed bytes, most significant bit first.
    Returns (packed_bytes, bit_length); the last byte is zero-padded
    """
    table = _lookup_table(code_map)
    out = bytearray()
    acc = 0
    acc_bits = 0
    bit_length = 0

    for position, b in enumerate(data):
        code = table[b]
        if code is None:
            raise UnknownSymbolError(b, position)

        acc = (acc << code.length) | code.bits
        acc_bits += code.length
        bit_length += code.length
        while acc_bits >= 8:
            acc_bits -= 8
            out.append((acc >> acc_bits) & 0xFF)
        acc &= (1 << acc_bits) - 1

    if acc_bits != 0:
        out.append((acc << (8 - acc_bits)) & 0xFF)

    logger.debug("packed %d symbols into %d bits (%d bytes)", len(data), bit_length, len(out))
    return bytes(out), bit_length


def unpack_and_decode(packed: bytes, bit_length: int, root: Optional[HuffmanNode]) -> bytes:
    """
    Decode the first bit_length bits of packed using the Huffman tree.

    Raises InconsistentPayloadError when the bits and the tree disagree:
    the walk stops between leaves, the buffer is too short, or there is no
    tree for a non-empty payload.
    """
    if bit_length < 0:
        raise InconsistentPayloadError(f"negative bit length {bit_length}")
    if bit_length > len(packed) * 8:
        raise InconsistentPayloadError(
            f"bit length {bit_length} exceeds packed buffer of {len(packed)} bytes"
        )
    if bit_length == 0:
        return b""
    if root is None:
        raise InconsistentPayloadError(f"{bit_length} payload bits but no tree to decode them")

    # Single-leaf tree: every bit stands for the one symbol
    if root.is_leaf:
        return bytes([root.symbol]) * bit_length

    decoded = bytearray()
    node = root
    bit_index = 0

    for byte in packed:
        for i in range(7, -1, -1):
            if bit_index >= bit_length:
                break
            bit = (byte >> i) & 1
            node = node.right if bit == 1 else node.left
            if node is None:
                raise InconsistentPayloadError(f"bit {bit_index} leads outside the tree")

            # Leaf
            if node.is_leaf:
                decoded.append(node.symbol)
                node = root
            bit_index += 1
        if bit_index >= bit_length:
            break

    if node is not root:
        raise InconsistentPayloadError(
            f"payload ends inside the tree after {bit_length} bits ({len(decoded)} symbols decoded)"
        )

    return bytes(decoded)
