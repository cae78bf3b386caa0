from types import SimpleNamespace

from verify import ContentMismatch, Equal, LengthMismatch, describe_match, format_report, verify


def test_equal():
    assert verify(b"hello", b"hello") == Equal()
    assert verify(b"", b"") == Equal()


def test_content_mismatch_reports_first_divergence():
    assert verify(b"hello", b"hellp") == ContentMismatch(index=4, expected=ord("o"), actual=ord("p"))
    assert verify(b"abc", b"xbz") == ContentMismatch(index=0, expected=ord("a"), actual=ord("x"))


def test_length_mismatch():
    assert verify(b"hi", b"hiya") == LengthMismatch(expected_length=2, actual_length=4)


def test_describe_match():
    assert "Messages Are Identical" in describe_match(Equal())
    assert "Differing Amounts of Data" in describe_match(LengthMismatch(2, 4))
    text = describe_match(ContentMismatch(4, ord("o"), 0x00))
    assert "Mismatch at index: 4" in text
    assert "'o'" in text and "0x00" in text


def test_format_report():
    stats = SimpleNamespace(input_bits=56, output_bits=13, compressed_bytes=2,
                            unique_symbols=4, percent_improvement=76.79)
    report = format_report("abbcccd", stats, Equal(), elapsed_us=12.0)
    assert "Original File Size: 56 bits" in report
    assert "Compressed Size: 13 bits (2 bytes)" in report
    assert "Total Unique Characters: 4" in report
    assert "76.8% improvement" in report
    assert "Total Time: 12 microseconds" in report
