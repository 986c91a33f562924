import pytest

from readdedup.errors import PairIdMismatchError, PrematureEndError, RecordCheckError
from readdedup.records import FastaRecord, FastqRecord, PairedRecord
from readdedup.stages.paired import PairedRecords


def _failing(exc, *records):
    yield from records
    raise exc


def test_both_empty():
    assert list(PairedRecords([], [])) == []


def test_r1_longer():
    pairs = PairedRecords([FastaRecord("id_a", b"")], [])
    with pytest.raises(PrematureEndError) as ei:
        next(pairs)
    assert str(ei.value) == "reached the end of r2 before r1"
    assert isinstance(ei.value, EOFError)


def test_r2_longer():
    pairs = PairedRecords([], [FastaRecord("id_a", b"")])
    with pytest.raises(PrematureEndError) as ei:
        next(pairs)
    assert str(ei.value) == "reached the end of r1 before r2"


def test_different_ids():
    pairs = PairedRecords([FastaRecord("id_a", b"")], [FastaRecord("id_b", b"")])
    with pytest.raises(PairIdMismatchError) as ei:
        next(pairs)
    assert str(ei.value) == "read pair had different read IDs: (id_a, id_b)"
    assert isinstance(ei.value, ValueError)


def test_r1_error_wins():
    r1_err = OSError("I'm broken")
    pairs = PairedRecords(_failing(r1_err), _failing(OSError("I'm also broken")))
    with pytest.raises(OSError) as ei:
        next(pairs)
    assert ei.value is r1_err


def test_r2_error():
    r2_err = OSError("I'm broken")
    pairs = PairedRecords([FastaRecord("id_a", b"")], _failing(r2_err))
    with pytest.raises(OSError) as ei:
        next(pairs)
    assert ei.value is r2_err


def test_error_against_end_is_premature_end():
    pairs = PairedRecords(_failing(OSError("broken")), [])
    with pytest.raises(PrematureEndError):
        next(pairs)


def test_yields_pairs_in_lockstep():
    r1 = [FastaRecord("a", b"AC"), FastaRecord("b", b"GT")]
    r2 = [FastaRecord("a", b"TT"), FastaRecord("b", b"GG")]
    pairs = list(PairedRecords(r1, r2))
    assert [p.id for p in pairs] == ["a", "b"]
    assert pairs[1].r2.seq == b"GG"


def test_can_continue_after_mismatch():
    r1 = [FastaRecord("a", b""), FastaRecord("b", b"")]
    r2 = [FastaRecord("x", b""), FastaRecord("b", b"")]
    pairs = PairedRecords(r1, r2)
    with pytest.raises(PairIdMismatchError):
        next(pairs)
    assert next(pairs).id == "b"
    with pytest.raises(StopIteration):
        next(pairs)


def test_pulls_lazily():
    pulled = []

    def gen(tag, n):
        for i in range(n):
            pulled.append(tag)
            yield FastaRecord(str(i), b"A")

    pairs = PairedRecords(gen("r1", 3), gen("r2", 3))
    next(pairs)
    assert pulled == ["r1", "r2"]


def test_pair_check_prefixes_mate():
    pair = PairedRecord.from_records(FastqRecord("a", b"ACG", b"II"), FastqRecord("a", b"A", b"I"))
    with pytest.raises(RecordCheckError) as ei:
        pair.check()
    assert str(ei.value) == "r1: Unequal length of sequence an qualities."

    pair = PairedRecord.from_records(FastaRecord("a", b"A"), FastaRecord("a", "é".encode("latin-1")))
    with pytest.raises(RecordCheckError) as ei:
        pair.check()
    assert str(ei.value) == "r2: Non-ascii character found in sequence."
