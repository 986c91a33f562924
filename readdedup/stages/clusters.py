"""Exact (prefix) duplicate clustering of reads and read pairs.

Each record is keyed by a 64-bit BLAKE2b fingerprint of its sequence prefix.
The first record seen with a fingerprint becomes the cluster representative;
later records only bump the cluster size. Distinct sequences that collide on
the fingerprint are merged as duplicates, which at 64 bits is a negligible but
non-zero risk.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from readdedup.records import PairedRecord, SequenceRecord
from readdedup.reports import CLUSTER_HEADER, CLUSTER_SIZE_HEADER, NullRowSink, RowSink
from readdedup.utils import get_logger

logger = get_logger(__name__)

FINGERPRINT_BYTES = 8
# Separates R1 and R2 digests so a pair never hashes like its swapped mates
PAIR_SENTINEL = b"\x00"


def _digest(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=FINGERPRINT_BYTES).digest()


def fingerprint(data: bytes) -> int:
    return int.from_bytes(_digest(data), "big")


def pair_fingerprint(r1: bytes, r2: bytes) -> int:
    return fingerprint(_digest(r1) + PAIR_SENTINEL + _digest(r2))


@dataclass
class Cluster:
    representative: str
    size: int = 1


@dataclass(frozen=True)
class DedupSummary:
    duplicates: int
    unique: int
    total: int

    def lines(self, width: int = 16) -> list[str]:
        return [
            f"duplicates:   {self.duplicates:>{width}}",
            f"unique reads: {self.unique:>{width}}",
            f"total reads:  {self.total:>{width}}",
        ]


class ClusterStore:
    """Assigns reads to clusters and keeps duplicate / unique / total counters.

    ``row_sink`` receives one ``(representative id, read id)`` row per insert,
    in insert order, after the header. ``capacity`` is the expected number of
    clusters; it is only reported in logs since dicts grow on demand.
    """

    def __init__(
        self,
        row_sink: Optional[RowSink] = None,
        prefix_length: Optional[int] = None,
        capacity: int = 0,
    ):
        if prefix_length is not None and prefix_length < 0:
            raise ValueError(f"prefix_length must be >= 0, got {prefix_length}")
        self._clusters: Dict[int, Cluster] = {}
        self._total = 0
        self.prefix_length = prefix_length
        self.capacity = capacity
        self._rows: RowSink = row_sink if row_sink is not None else NullRowSink()
        self._rows.write_row(CLUSTER_HEADER)
        logger.debug("clusters.init: prefix_length=%s capacity=%d", prefix_length, capacity)

    def _prefix(self, seq: bytes) -> bytes:
        if self.prefix_length is None:
            return seq
        return seq[: self.prefix_length]

    def _insert(self, key: int, read_id: str) -> bool:
        self._total += 1
        cluster = self._clusters.get(key)
        if cluster is not None:
            cluster.size += 1
            self._rows.write_row((cluster.representative, read_id))
            return False
        self._clusters[key] = Cluster(read_id)
        self._rows.write_row((read_id, read_id))
        return True

    def insert_single(self, record: SequenceRecord) -> bool:
        """Add one read. Returns True when it starts a new cluster."""
        return self._insert(fingerprint(self._prefix(record.seq)), record.id)

    def insert_pair(self, pair: PairedRecord) -> bool:
        """Add one read pair. Mates are compared positionally, R1 with R1 and R2 with R2."""
        key = pair_fingerprint(self._prefix(pair.r1.seq), self._prefix(pair.r2.seq))
        return self._insert(key, pair.id)

    @property
    def unique_count(self) -> int:
        return len(self._clusters)

    @property
    def duplicate_count(self) -> int:
        return self._total - len(self._clusters)

    @property
    def total_count(self) -> int:
        return self._total

    def summary(self) -> DedupSummary:
        return DedupSummary(self.duplicate_count, self.unique_count, self.total_count)

    def clusters(self) -> Iterator[Cluster]:
        return iter(self._clusters.values())

    def write_sizes(self, sink: RowSink) -> None:
        """Write ``(representative id, size)`` per cluster. Row order is unspecified."""
        sink.write_row(CLUSTER_SIZE_HEADER)
        for cluster in self._clusters.values():
            sink.write_row((cluster.representative, cluster.size))
        logger.info("clusters.sizes: clusters=%d", len(self._clusters))
