import heapq
import logging
import math
from collections import Counter
from typing import Dict, Iterator, NamedTuple, Optional

logger = logging.getLogger(__name__)


class HuffmanError(ValueError):
    """Base class for failures raised by the Huffman coder."""


class UnknownSymbolError(HuffmanError):
    def __init__(self, symbol: int, position: int):
        super().__init__(f"symbol {symbol} at position {position} has no code")
        self.symbol = symbol
        self.position = position


class InconsistentPayloadError(HuffmanError):
    """Payload and tree do not describe the same message."""


class Code(NamedTuple):
    bits: int    # code value, most significant bit first
    length: int  # number of bits

    def as_bitstring(self) -> str:
        return format(self.bits, f"0{self.length}b")


class HuffmanNode: # Node for Huffman tree
    __slots__ = ("symbol", "frequency", "left", "right")

    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # byte or None
        self.frequency = frequency
        self.left = left
        self.right = right

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(symbol={self.symbol}, frequency={self.frequency})"
        return f"HuffmanNode(frequency={self.frequency})"


def compute_frequencies(data: bytes) -> Dict[int, int]:
    """
    Count occurrences of every distinct byte in data.
    Returns dict of symbol -> count, one entry per byte value present
    """
    return dict(Counter(data))


def build_huffman_tree(frequency_table: Dict[int, int]) -> Optional[HuffmanNode]: # frequency_table: dict of symbol -> frequency
    """
    Build the Huffman tree by repeatedly merging the two lightest nodes.

    Ties are broken by insertion order: leaves are pushed in ascending symbol
    order and every merged node gets the next sequence number, so the same
    table always yields the same tree. Returns None for an empty table.
    """
    for symbol, frequency in frequency_table.items():
        if not 0 <= symbol <= 255:
            raise ValueError(f"symbol {symbol!r} is not a byte value")
        if frequency < 1:
            raise ValueError(f"symbol {symbol} has non-positive frequency {frequency}")

    if not frequency_table:
        return None

    priority_queue = [
        (frequency, order, HuffmanNode(symbol, frequency))
        for order, (symbol, frequency) in enumerate(sorted(frequency_table.items()))
    ]
    heapq.heapify(priority_queue)
    order = len(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        left_freq, _, left = heapq.heappop(priority_queue)
        right_freq, _, right = heapq.heappop(priority_queue)
        merged = HuffmanNode(None, left_freq + right_freq, left, right) # internal node with combined frequency
        heapq.heappush(priority_queue, (merged.frequency, order, merged))
        order += 1

    root = priority_queue[0][2]
    logger.debug("built Huffman tree: %d leaves, height %d", len(frequency_table), tree_height(root))
    return root


def generate_huffman_codes(root: Optional[HuffmanNode]) -> Dict[int, Code]: # root: root of the Huffman tree
    """
    Walk the tree once and return symbol -> Code (0 = left edge, 1 = right edge).

    A tree that is a single leaf gets the one-bit code 0 so that every symbol
    still costs at least one bit on the wire.
    """
    codes: Dict[int, Code] = {}
    if root is None:
        return codes
    if root.is_leaf:
        codes[root.symbol] = Code(0, 1)
        return codes

    # Explicit stack instead of recursion; depth never exceeds 255
    stack = [(root, 0, 0)]
    while stack:
        node, bits, length = stack.pop()
        if node.is_leaf:
            codes[node.symbol] = Code(bits, length)
            continue
        stack.append((node.right, (bits << 1) | 1, length + 1))
        stack.append((node.left, bits << 1, length + 1))

    return codes


def iter_leaves(root: Optional[HuffmanNode]) -> Iterator[HuffmanNode]:
    """Yield leaves left to right."""
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        if node.is_leaf:
            yield node
        else:
            stack.append(node.right)
            stack.append(node.left)


def tree_height(root: Optional[HuffmanNode]) -> int:
    """Number of edges on the longest root-to-leaf path; -1 for no tree."""
    if root is None:
        return -1
    height = 0
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if node.is_leaf:
            height = max(height, depth)
        else:
            stack.append((node.left, depth + 1))
            stack.append((node.right, depth + 1))
    return height


def average_code_length(codes: Dict[int, Code], frequency_table: Dict[int, int]) -> float:
    """Frequency-weighted mean code length in bits per symbol."""
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    return sum(codes[s].length * f for s, f in frequency_table.items()) / total


def shannon_entropy(frequency_table: Dict[int, int]) -> float:
    """Entropy of the symbol distribution in bits per symbol."""
    total = sum(frequency_table.values())
    if total == 0:
        return 0.0
    h = 0.0
    for f in frequency_table.values():
        p = f / total
        h -= p * math.log2(p)
    return h
