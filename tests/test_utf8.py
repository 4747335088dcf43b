import pytest

from vellum.utf8 import Range, Sequence, new_sequences, sequence_from_encoded_range


def test_utf8_sequences():
    want = [
        Sequence((Range(0x0, 0x7F),)),
        Sequence((Range(0xC2, 0xDF), Range(0x80, 0xBF))),
        Sequence((Range(0xE0, 0xE0), Range(0xA0, 0xBF), Range(0x80, 0xBF))),
        Sequence((Range(0xE1, 0xEC), Range(0x80, 0xBF), Range(0x80, 0xBF))),
        Sequence((Range(0xED, 0xED), Range(0x80, 0x9F), Range(0x80, 0xBF))),
        Sequence((Range(0xEE, 0xEF), Range(0x80, 0xBF), Range(0x80, 0xBF))),
    ]
    assert new_sequences(0, 0xFFFF) == want


@pytest.mark.parametrize(
    "start,end",
    [(0x0, 0xFFFF), (0x0, 0x10FFFF), (0x0, 0x10FFFE), (0x80, 0x10FFFF), (0xD7FF, 0xE000)],
)
def test_never_accepts_surrogates(start, end):
    sequences = new_sequences(start, end)
    for cp in range(0xD800, 0xE000):
        encoded = chr(cp).encode("utf-8", "surrogatepass")
        assert not any(seq.matches(encoded) for seq in sequences)


def test_every_scalar_matched_exactly_once():
    sequences = new_sequences(0, 0x10FFFF)
    for cp in range(0, 0x110000, 97):
        if 0xD800 <= cp <= 0xDFFF:
            continue
        encoded = chr(cp).encode("utf-8")
        assert sum(seq.matches(encoded) for seq in sequences) == 1


def test_ascii_boundary():
    assert new_sequences(0x7F, 0x80) == [
        Sequence((Range(0x7F, 0x7F),)),
        Sequence((Range(0xC2, 0xC2), Range(0x80, 0x80))),
    ]


def test_empty_when_start_after_end():
    assert new_sequences(10, 5) == []


def test_sequence_from_encoded_range():
    seq = sequence_from_encoded_range(b"\xc2\x80", b"\xdf\xbf")
    assert seq == Sequence((Range(0xC2, 0xDF), Range(0x80, 0xBF)))


def test_sequence_from_encoded_range_length_mismatch():
    with pytest.raises(ValueError, match="same length"):
        sequence_from_encoded_range(b"\xc2\x80", b"\xe0\xa0\x80")


def test_sequence_from_encoded_range_bad_length():
    with pytest.raises(ValueError, match="invalid encoded byte length"):
        sequence_from_encoded_range(b"a", b"b")


def test_range_matches_and_str():
    r = Range(0x10, 0x20)
    assert r.matches(0x10)
    assert r.matches(0x20)
    assert not r.matches(0x21)
    assert str(r) == "[10-20]"
    assert str(Range(0xAB, 0xAB)) == "[AB]"


def test_sequence_matches_and_str():
    seq = Sequence((Range(0xC2, 0xDF), Range(0x80, 0xBF)))
    assert seq.matches("é".encode("utf-8"))
    assert not seq.matches(b"\xc2")
    assert not seq.matches(b"ab")
    assert str(seq) == "[C2-DF][80-BF]"
    assert str(Sequence()) == "invalid utf8 sequence"