import gzip

import pytest

from readdedup.errors import FormatDetectionError, RecordReadError
from readdedup.fastx import FastxType, fastx_type, open_writer, read_records
from readdedup.records import FastaRecord, FastqRecord


def test_detect_types(tmp_path):
    fa = tmp_path / "a.txt"
    fa.write_text(">r1\nACGT\n")
    fq = tmp_path / "b.txt"
    fq.write_text("@r1\nACGT\n+\nIIII\n")
    bad = tmp_path / "c.txt"
    bad.write_text("ACGT\n")
    empty = tmp_path / "d.txt"
    empty.write_text("")
    assert fastx_type(str(fa)) is FastxType.FASTA
    assert fastx_type(str(fq)) is FastxType.FASTQ
    assert fastx_type(str(bad)) is FastxType.INVALID
    assert fastx_type(str(empty)) is FastxType.INVALID


def test_detect_gzip(tmp_path):
    path = tmp_path / "a.fq.gz"
    with gzip.open(path, "wt") as f:
        f.write("@r1\nACGT\n+\nIIII\n")
    assert fastx_type(str(path)) is FastxType.FASTQ


def test_detect_missing_file(tmp_path):
    with pytest.raises(FormatDetectionError):
        fastx_type(str(tmp_path / "missing.fa"))


def test_type_names():
    assert str(FastxType.FASTA) == "fasta"
    assert str(FastxType.FASTQ) == "fastq"


def test_read_fasta(tmp_path):
    path = tmp_path / "a.fa"
    path.write_text(">r1 first read\nACGT\nTTGA\n>r2\nGG\n")
    records = list(read_records(str(path), FastxType.FASTA))
    assert records == [FastaRecord("r1", b"ACGTTTGA", "first read"), FastaRecord("r2", b"GG")]


def test_read_fastq(tmp_path):
    path = tmp_path / "a.fq"
    path.write_text("@r1 x\nACGT\n+\nIIII\n@r2\nGG\n+\nHH\n")
    records = list(read_records(str(path), FastxType.FASTQ))
    assert records == [FastqRecord("r1", b"ACGT", b"IIII", "x"), FastqRecord("r2", b"GG", b"HH")]


def test_read_malformed_fastq(tmp_path):
    path = tmp_path / "a.fq"
    path.write_text("@r1\nACGT\n+\nII\n")
    with pytest.raises(RecordReadError):
        list(read_records(str(path), FastxType.FASTQ))


def test_read_is_lazy(tmp_path):
    path = tmp_path / "a.fq"
    path.write_text("@r1\nACGT\n+\nIIII\n@r2\nAC\n+\nI\n")
    records = read_records(str(path), FastxType.FASTQ)
    assert next(records).id == "r1"
    with pytest.raises(RecordReadError):
        next(records)


def test_write_then_read_gzip(tmp_path):
    path = str(tmp_path / "out.fq.gz")
    with open_writer(path, FastxType.FASTQ) as w:
        w.write_record(FastqRecord("r1", b"ACGT", b"IIII", "desc"))
    with gzip.open(path, "rt") as f:
        assert f.read() == "@r1 desc\nACGT\n+\nIIII\n"


def test_write_fasta(tmp_path):
    path = tmp_path / "out.fa"
    with open_writer(str(path), FastxType.FASTA) as w:
        w.write_record(FastaRecord("r1", b"ACGT"))
        w.write_record(FastaRecord("r2", b"", "empty"))
    assert path.read_text() == ">r1\nACGT\n>r2 empty\n\n"


def test_fasta_spaces_in_sequence_are_dropped(tmp_path):
    path = tmp_path / "a.fa"
    path.write_text(">a\nAC GT\n>b\nACGT\n")
    records = list(read_records(str(path), FastxType.FASTA))
    assert [r.seq for r in records] == [b"ACGT", b"ACGT"]
