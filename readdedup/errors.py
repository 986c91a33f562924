"""Error types raised by a dedup run.

Every failure aborts the run. Each class also derives from the builtin
exception kind it stands for (``OSError`` for I/O, ``ValueError`` for bad
data, ``EOFError`` for misaligned streams) so callers can catch either.
"""

from __future__ import annotations

from typing import Optional


class DedupError(Exception):
    """Base class. ``summary`` holds the counters reached before the failure, if any."""

    summary: Optional[object] = None


class ConfigError(DedupError, ValueError):
    pass


class FormatDetectionError(DedupError, OSError):
    pass


class InvalidFormatError(DedupError, ValueError):
    pass


class PairedFormatMismatchError(DedupError, ValueError):
    pass


class RecordCheckError(DedupError, ValueError):
    pass


class PrematureEndError(DedupError, EOFError):
    pass


class PairIdMismatchError(DedupError, ValueError):
    pass


class RecordReadError(DedupError, OSError):
    pass


class SinkWriteError(DedupError, OSError):
    pass
