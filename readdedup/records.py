"""Sequence records.

The dedup engine only relies on the :class:`SequenceRecord` protocol: an
``id``, the raw ``seq`` bytes and a ``check()`` that raises
:class:`~readdedup.errors.RecordCheckError` when the record is malformed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Tuple, runtime_checkable

from readdedup.errors import PairIdMismatchError, RecordCheckError


@runtime_checkable
class SequenceRecord(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def seq(self) -> bytes: ...

    def check(self) -> None: ...


@dataclass(frozen=True)
class FastaRecord:
    id: str
    seq: bytes
    description: str = ""

    def check(self) -> None:
        if not self.id:
            raise RecordCheckError("Expecting id for FastA record.")
        if not self.seq.isascii():
            raise RecordCheckError("Non-ascii character found in sequence.")

    @property
    def title(self) -> str:
        return f"{self.id} {self.description}" if self.description else self.id


@dataclass(frozen=True)
class FastqRecord:
    id: str
    seq: bytes
    qual: bytes
    description: str = ""

    def check(self) -> None:
        if not self.id:
            raise RecordCheckError("Expecting id for FastQ record.")
        if not self.seq.isascii():
            raise RecordCheckError("Non-ascii character found in sequence.")
        if not self.qual.isascii():
            raise RecordCheckError("Non-ascii character found in qualities.")
        if len(self.seq) != len(self.qual):
            raise RecordCheckError("Unequal length of sequence an qualities.")

    @property
    def title(self) -> str:
        return f"{self.id} {self.description}" if self.description else self.id


@dataclass(frozen=True)
class PairedRecord:
    """Two mates sharing one read id. Build with :meth:`from_records`."""

    r1: SequenceRecord
    r2: SequenceRecord

    @classmethod
    def from_records(cls, r1: SequenceRecord, r2: SequenceRecord) -> "PairedRecord":
        if r1.id != r2.id:
            raise PairIdMismatchError(f"read pair had different read IDs: ({r1.id}, {r2.id})")
        return cls(r1, r2)

    @property
    def id(self) -> str:
        return self.r1.id

    def check(self) -> None:
        for name, record in (("r1", self.r1), ("r2", self.r2)):
            try:
                record.check()
            except RecordCheckError as e:
                raise RecordCheckError(f"{name}: {e}") from e

    def as_tuple(self) -> Tuple[SequenceRecord, SequenceRecord]:
        return self.r1, self.r2
