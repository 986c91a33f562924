"""FASTA / FASTQ detection, reading and writing.

Files are handled as latin-1 text so every byte maps to exactly one
character and sequences round-trip to the same bytes. Paths ending in
``.gz`` are transparently (de)compressed.

FASTA sequence lines are joined by Biopython's parser, which also drops
spaces inside them: ``AC GT`` reads as ``ACGT``. FASTQ records whose
sequence and quality lengths differ are rejected by the parser and surface
as ``RecordReadError`` rather than a record check failure.
"""

from __future__ import annotations

import gzip
from enum import Enum
from typing import IO, Iterator, Union

from Bio.SeqIO.FastaIO import SimpleFastaParser
from Bio.SeqIO.QualityIO import FastqGeneralIterator

from readdedup.errors import FormatDetectionError, RecordReadError, SinkWriteError
from readdedup.records import FastaRecord, FastqRecord

ENCODING = "latin-1"


class FastxType(Enum):
    FASTA = "fasta"
    FASTQ = "fastq"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value


def _open_text(path: str, mode: str) -> IO[str]:
    if path.endswith(".gz"):
        return gzip.open(path, mode + "t", encoding=ENCODING)
    return open(path, mode, encoding=ENCODING)


def fastx_type(path: str) -> FastxType:
    """Detect the format of ``path`` from its first byte."""
    try:
        with _open_text(path, "r") as f:
            first = f.read(1)
    except (OSError, EOFError) as e:
        raise FormatDetectionError(f"cannot read {path}: {e}") from e
    if first == ">":
        return FastxType.FASTA
    if first == "@":
        return FastxType.FASTQ
    return FastxType.INVALID


def _split_title(title: str):
    parts = title.split(None, 1)
    if not parts:
        return "", ""
    return parts[0], parts[1] if len(parts) > 1 else ""


def _parse_fasta(handle: IO[str]) -> Iterator[FastaRecord]:
    for title, seq in SimpleFastaParser(handle):
        rid, desc = _split_title(title)
        yield FastaRecord(rid, seq.encode(ENCODING), desc)


def _parse_fastq(handle: IO[str]) -> Iterator[FastqRecord]:
    for title, seq, qual in FastqGeneralIterator(handle):
        rid, desc = _split_title(title)
        yield FastqRecord(rid, seq.encode(ENCODING), qual.encode(ENCODING), desc)


def read_records(path: str, file_type: FastxType) -> Iterator[Union[FastaRecord, FastqRecord]]:
    """Lazily yield records from ``path``. Read and parse failures raise RecordReadError."""
    if file_type is FastxType.FASTA:
        parser = _parse_fasta
    elif file_type is FastxType.FASTQ:
        parser = _parse_fastq
    else:
        raise ValueError(f"cannot read records of type {file_type}")

    try:
        with _open_text(path, "r") as handle:
            yield from parser(handle)
    except (OSError, EOFError, ValueError) as e:
        raise RecordReadError(f"{path}: {e}") from e


class RecordWriter:
    """Writes records back out in ``file_type`` format."""

    def __init__(self, handle: IO[str], file_type: FastxType, name: str = "<stream>"):
        if file_type is FastxType.INVALID:
            raise ValueError("cannot write records of type invalid")
        self.name = name
        self.file_type = file_type
        self._handle = handle

    def _format(self, record) -> str:
        seq = record.seq.decode(ENCODING)
        if self.file_type is FastxType.FASTA:
            return f">{record.title}\n{seq}\n"
        return f"@{record.title}\n{seq}\n+\n{record.qual.decode(ENCODING)}\n"

    def write_record(self, record) -> None:
        try:
            self._handle.write(self._format(record))
        except OSError as e:
            raise SinkWriteError(f"cannot write record {record.id} to {self.name}: {e}") from e

    def close(self) -> None:
        try:
            self._handle.close()
        except OSError as e:
            raise SinkWriteError(f"cannot close {self.name}: {e}") from e

    def __enter__(self) -> "RecordWriter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_writer(path: str, file_type: FastxType) -> RecordWriter:
    try:
        handle = _open_text(path, "w")
    except OSError as e:
        raise SinkWriteError(f"cannot create {path}: {e}") from e
    return RecordWriter(handle, file_type, name=path)
