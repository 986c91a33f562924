"""Tabular sinks for the cluster mapping and cluster size reports."""

from __future__ import annotations

import csv
from typing import IO, Optional, Protocol, Sequence

from readdedup.errors import SinkWriteError
from readdedup.fastx import ENCODING

CLUSTER_HEADER = ("representative read id", "read id")
CLUSTER_SIZE_HEADER = ("representative read id", "cluster size")


class RowSink(Protocol):
    def write_row(self, row: Sequence[object]) -> None: ...


class NullRowSink:
    """Accepts and drops every row. Stands in when no report path is configured."""

    def write_row(self, row: Sequence[object]) -> None:
        return None


class CsvRowSink:
    def __init__(self, handle: IO[str], name: str = "<stream>"):
        self.name = name
        self._handle = handle
        self._owns_handle = False
        self._writer = csv.writer(handle, lineterminator="\n")

    @classmethod
    def open(cls, path: str) -> "CsvRowSink":
        try:
            handle = open(path, "w", encoding=ENCODING, newline="")
        except OSError as e:
            raise SinkWriteError(f"cannot create report {path}: {e}") from e
        sink = cls(handle, name=path)
        sink._owns_handle = True
        return sink

    def write_row(self, row: Sequence[object]) -> None:
        try:
            self._writer.writerow(row)
        except (OSError, csv.Error) as e:
            raise SinkWriteError(f"cannot write row to {self.name}: {e}") from e

    def close(self) -> None:
        if not self._owns_handle:
            return
        try:
            self._handle.close()
        except OSError as e:
            raise SinkWriteError(f"cannot close report {self.name}: {e}") from e

    def __enter__(self) -> "CsvRowSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_row_sink(path: Optional[str]) -> Optional[CsvRowSink]:
    return CsvRowSink.open(path) if path else None
