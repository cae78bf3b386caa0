import itertools

import pytest

from huffman import (
    Code,
    HuffmanNode,
    average_code_length,
    build_huffman_tree,
    compute_frequencies,
    generate_huffman_codes,
    iter_leaves,
    shannon_entropy,
    tree_height,
)


def _weighted_length(freqs):
    codes = generate_huffman_codes(build_huffman_tree(freqs))
    return sum(codes[s].length * f for s, f in freqs.items())


def _assert_strict_binary(node: HuffmanNode):
    if node.is_leaf:
        assert node.left is None and node.right is None
        return node.frequency
    assert node.left is not None and node.right is not None
    weight = _assert_strict_binary(node.left) + _assert_strict_binary(node.right)
    assert node.frequency == weight
    return weight


def test_compute_frequencies_counts_each_byte():
    assert compute_frequencies(b"abbcccd") == {ord("a"): 1, ord("b"): 2, ord("c"): 3, ord("d"): 1}


def test_compute_frequencies_empty():
    assert compute_frequencies(b"") == {}


def test_build_tree_empty_returns_none():
    assert build_huffman_tree({}) is None
    assert generate_huffman_codes(None) == {}


def test_build_tree_rejects_bad_entries():
    with pytest.raises(ValueError):
        build_huffman_tree({65: 0})
    with pytest.raises(ValueError):
        build_huffman_tree({300: 1})


def test_single_symbol_gets_one_bit_code():
    root = build_huffman_tree({ord("a"): 4})
    assert root.is_leaf
    assert tree_height(root) == 0
    assert generate_huffman_codes(root) == {ord("a"): Code(0, 1)}


def test_tree_is_strict_binary_with_summed_weights():
    freqs = compute_frequencies(b"the quick brown fox jumps over the lazy dog")
    root = build_huffman_tree(freqs)
    assert _assert_strict_binary(root) == sum(freqs.values())
    assert sorted(leaf.symbol for leaf in iter_leaves(root)) == sorted(freqs)


def test_tree_is_deterministic():
    freqs = {s: 1 for s in range(10)}
    a = generate_huffman_codes(build_huffman_tree(freqs))
    b = generate_huffman_codes(build_huffman_tree(dict(reversed(list(freqs.items())))))
    assert a == b


def test_small_example_code_lengths():
    freqs = compute_frequencies(b"abbcccd")
    codes = generate_huffman_codes(build_huffman_tree(freqs))
    c, a, d = codes[ord("c")], codes[ord("a")], codes[ord("d")]
    assert c.length == min(code.length for code in codes.values())
    assert a.length == d.length == max(code.length for code in codes.values())
    assert _weighted_length(freqs) == 13


@pytest.mark.parametrize("freqs, expected", [
    ({0: 45, 1: 13, 2: 12, 3: 16, 4: 9, 5: 5}, 224),
    ({0: 1, 1: 1, 2: 2, 3: 3, 4: 5, 5: 8}, 45),
    ({0: 7, 1: 7, 2: 7, 3: 7}, 56),
    ({0: 3, 1: 3, 2: 3, 3: 3, 4: 3}, 36),
    ({0: 1, 1: 100}, 101),
])
def test_weighted_length_is_optimal(freqs, expected):
    assert _weighted_length(freqs) == expected


def test_codes_are_prefix_free():
    freqs = compute_frequencies(bytes(range(256)) + b"eeeeeetttaaooinnn")
    codes = generate_huffman_codes(build_huffman_tree(freqs))
    strings = [code.as_bitstring() for code in codes.values()]
    assert len(set(strings)) == len(strings)
    for x, y in itertools.permutations(strings, 2):
        assert not y.startswith(x)


def test_code_length_within_entropy_bound():
    freqs = compute_frequencies(b"mississippi river banks")
    codes = generate_huffman_codes(build_huffman_tree(freqs))
    h = shannon_entropy(freqs)
    avg = average_code_length(codes, freqs)
    assert h <= avg < h + 1


def test_code_as_bitstring_keeps_leading_zeros():
    assert Code(0b011, 3).as_bitstring() == "011"
    assert Code(0, 1).as_bitstring() == "0"
