from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

from readdedup.errors import PrematureEndError
from readdedup.records import PairedRecord, SequenceRecord

_END = object()


def _pull(records: Iterator[SequenceRecord]) -> Tuple[object, Optional[OSError]]:
    try:
        return next(records), None
    except StopIteration:
        return _END, None
    except OSError as e:
        return None, e


class PairedRecords:
    """Zip R1 and R2 record streams into validated read pairs.

    Exactly one element is taken from each stream per ``next()``. A read
    failure on either side counts as that side's element. Errors are raised
    for the current step only, so a caller may keep iterating past a
    mismatched pair.
    """

    def __init__(self, records_r1: Iterable[SequenceRecord], records_r2: Iterable[SequenceRecord]):
        self._records_r1 = iter(records_r1)
        self._records_r2 = iter(records_r2)
        self._done = False

    def __iter__(self) -> "PairedRecords":
        return self

    def __next__(self) -> PairedRecord:
        if self._done:
            raise StopIteration
        r1, err_r1 = _pull(self._records_r1)
        r2, err_r2 = _pull(self._records_r2)

        if r1 is _END and r2 is _END:
            self._done = True
            raise StopIteration
        if r2 is _END:
            raise PrematureEndError("reached the end of r2 before r1")
        if r1 is _END:
            raise PrematureEndError("reached the end of r1 before r2")
        if err_r1 is not None:
            raise err_r1
        if err_r2 is not None:
            raise err_r2
        return PairedRecord.from_records(r1, r2)
