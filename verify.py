from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass(frozen=True)
class Equal:
    pass


@dataclass(frozen=True)
class LengthMismatch:
    expected_length: int
    actual_length: int


@dataclass(frozen=True)
class ContentMismatch:
    index: int
    expected: int  # byte value in the original
    actual: int    # byte value in the decoded stream


MatchResult = Union[Equal, LengthMismatch, ContentMismatch]


def verify(original: bytes, decoded: bytes) -> MatchResult:
    """
    Compare original and decoded streams.
    Lengths are checked first, then bytes up to the first divergence
    """
    if len(original) != len(decoded):
        return LengthMismatch(len(original), len(decoded))
    if original == decoded:
        return Equal()
    for i, (expected, actual) in enumerate(zip(original, decoded)):
        if expected != actual:
            return ContentMismatch(i, expected, actual)
    return Equal()


def _show_byte(b: int) -> str:
    return repr(chr(b)) if 32 <= b < 127 else f"0x{b:02x}"


def describe_match(match: MatchResult) -> str:
    if isinstance(match, Equal):
        return "Decompression Successful: Messages Are Identical"
    if isinstance(match, LengthMismatch):
        return (f"Differing Amounts of Data: expected {match.expected_length} bytes, "
                f"got {match.actual_length}")
    return (f"Mismatch at index: {match.index} | Expected: {_show_byte(match.expected)} "
            f"| Received: {_show_byte(match.actual)}")


def format_report(name: str, stats, match: MatchResult, elapsed_us: Optional[float] = None) -> str:
    """
    Render a run summary: sizes in bits, unique symbols, percent improvement,
    verification outcome and optionally total pipeline time.
    stats is any object with the EncodeStats attributes.
    """
    lines: List[str] = [
        "-" * 59,
        f"Input: {name}",
        f"Original File Size: {stats.input_bits} bits",
        f"Compressed Size: {stats.output_bits} bits ({stats.compressed_bytes} bytes)",
        f"Total Unique Characters: {stats.unique_symbols}",
        f"Percent Difference: {stats.percent_improvement:.1f}% improvement",
        describe_match(match),
    ]
    if elapsed_us is not None:
        lines.append(f"Total Time: {elapsed_us:.0f} microseconds")
    lines.append("-" * 59)
    return "\n".join(lines)
