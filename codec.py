"""
Public entry points of the coder: encode, decode, verify.

The tree returned by encode is read-only and must be handed back unchanged
to decode together with the payload and its exact bit length.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from bitpack import pack_bits_from_codes, unpack_and_decode
from huffman import (
    Code,
    HuffmanNode,
    average_code_length,
    build_huffman_tree,
    compute_frequencies,
    generate_huffman_codes,
)
from verify import MatchResult, verify

logger = logging.getLogger(__name__)

__all__ = ["EncodeStats", "EncodeResult", "encode", "decode", "verify", "round_trip"]


@dataclass(frozen=True)
class EncodeStats:
    input_bits: int
    output_bits: int
    unique_symbols: int

    @property
    def compressed_bytes(self) -> int:
        return (self.output_bits + 7) // 8

    @property
    def pad_bits(self) -> int:
        return self.compressed_bytes * 8 - self.output_bits

    @property
    def compression_ratio(self) -> float:
        return self.output_bits / self.input_bits if self.input_bits else 0.0

    @property
    def percent_improvement(self) -> float:
        if not self.input_bits:
            return 0.0
        return (self.input_bits - self.output_bits) / self.input_bits * 100


@dataclass(frozen=True)
class EncodeResult:
    tree: Optional[HuffmanNode]
    payload: bytes
    bit_length: int
    stats: EncodeStats
    codes: Dict[int, Code]
    frequencies: Dict[int, int]

    @property
    def average_code_length(self) -> float:
        return average_code_length(self.codes, self.frequencies)


def encode(data: bytes) -> EncodeResult:
    """Build a Huffman code for data and pack data with it."""
    data = bytes(data)
    frequencies = compute_frequencies(data)
    tree = build_huffman_tree(frequencies)
    codes = generate_huffman_codes(tree)
    payload, bit_length = pack_bits_from_codes(data, codes)

    stats = EncodeStats(
        input_bits=len(data) * 8,
        output_bits=bit_length,
        unique_symbols=len(frequencies),
    )
    logger.debug(
        "encoded %d bytes: %d unique symbols, %d bits out",
        len(data), stats.unique_symbols, bit_length,
    )
    return EncodeResult(tree, payload, bit_length, stats, codes, frequencies)


def decode(tree: Optional[HuffmanNode], payload: bytes, bit_length: int) -> bytes:
    """Reconstruct the original bytes; raises InconsistentPayloadError on bad input."""
    decoded = unpack_and_decode(payload, bit_length, tree)
    logger.debug("decoded %d bits into %d bytes", bit_length, len(decoded))
    return decoded


def round_trip(data: bytes) -> MatchResult:
    """Encode, decode and verify data in one call."""
    result = encode(data)
    return verify(data, decode(result.tree, result.payload, result.bit_length))
