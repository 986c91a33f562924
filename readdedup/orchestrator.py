import os
import time
import uuid
from contextlib import ExitStack
from typing import Any, Dict, Iterable, Optional

from readdedup.errors import ConfigError, DedupError, InvalidFormatError, PairedFormatMismatchError
from readdedup.fastx import FastxType, fastx_type, open_writer, read_records
from readdedup.records import PairedRecord, SequenceRecord
from readdedup.reports import CsvRowSink, open_row_sink
from readdedup.stages.clusters import ClusterStore, DedupSummary
from readdedup.stages.paired import PairedRecords
from readdedup.utils import get_logger, load_config, validate_config

logger = get_logger(__name__)

# Average bytes per record of a typical short-read FASTQ; sizes the cluster map estimate
DEFAULT_BYTES_PER_RECORD = 400
DEFAULT_PROGRESS_EVERY = 1_000_000


def _apply_overrides(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> None:
    if not overrides:
        return
    for key, value in overrides.items():
        if value is not None:
            cfg[key] = value


def build_config(config_path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Load the optional YAML config, merge CLI overrides on top and validate."""
    cfg = load_config(config_path) if config_path else {}
    _apply_overrides(cfg, overrides)
    validate_config(cfg)
    cfg.setdefault("prefix_length", None)
    cfg.setdefault("bytes_per_record", DEFAULT_BYTES_PER_RECORD)
    cfg.setdefault("progress_every", DEFAULT_PROGRESS_EVERY)
    return cfg


def _log_progress(store: ClusterStore, progress_every: int) -> None:
    if progress_every and store.total_count % progress_every == 0:
        logger.info("dedup.progress: total=%d unique=%d", store.total_count, store.unique_count)


def _dedup_single(records: Iterable[SequenceRecord], writer, store: ClusterStore, progress_every: int) -> None:
    for record in records:
        record.check()
        if store.insert_single(record):
            writer.write_record(record)
        _log_progress(store, progress_every)


def _dedup_paired(pairs: Iterable[PairedRecord], writer_r1, writer_r2, store: ClusterStore, progress_every: int) -> None:
    for pair in pairs:
        pair.check()
        if store.insert_pair(pair):
            writer_r1.write_record(pair.r1)
            writer_r2.write_record(pair.r2)
        _log_progress(store, progress_every)


def _detect_types(inputs) -> FastxType:
    type_r1 = fastx_type(inputs[0])
    if type_r1 is FastxType.INVALID:
        raise InvalidFormatError("input file is not a valid FASTA or FASTQ file")
    if len(inputs) == 2:
        type_r2 = fastx_type(inputs[1])
        if type_r2 is not type_r1:
            raise PairedFormatMismatchError(
                f"paired inputs have different file types r1: {type_r1}, r2: {type_r2}"
            )
    return type_r1


def run_dedup(cfg: Dict[str, Any]) -> DedupSummary:
    """Deduplicate the configured input(s) and write outputs and reports.

    The first error aborts the run. The counters reached so far are attached
    to the raised ``DedupError`` as ``summary``.
    """
    inputs, outputs = cfg["inputs"], cfg["outputs"]
    if len(inputs) != len(outputs):
        raise ConfigError("must have the same number of inputs and outputs")
    paired = len(inputs) == 2
    file_type = _detect_types(inputs)
    capacity = os.path.getsize(inputs[0]) // int(cfg.get("bytes_per_record") or DEFAULT_BYTES_PER_RECORD)
    progress_every = int(cfg.get("progress_every") or 0)
    logger.info(
        "dedup.start: mode=%s type=%s prefix_length=%s capacity=%d",
        "paired" if paired else "single", file_type, cfg.get("prefix_length"), capacity,
    )

    t0 = time.monotonic()
    with ExitStack() as stack:
        cluster_sink = open_row_sink(cfg.get("cluster_output"))
        if cluster_sink is not None:
            stack.enter_context(cluster_sink)
        store = ClusterStore(cluster_sink, prefix_length=cfg.get("prefix_length"), capacity=capacity)
        try:
            records_r1 = read_records(inputs[0], file_type)
            writer_r1 = stack.enter_context(open_writer(outputs[0], file_type))
            if paired:
                records_r2 = read_records(inputs[1], file_type)
                writer_r2 = stack.enter_context(open_writer(outputs[1], file_type))
                _dedup_paired(PairedRecords(records_r1, records_r2), writer_r1, writer_r2, store, progress_every)
            else:
                _dedup_single(records_r1, writer_r1, store, progress_every)
        except DedupError as e:
            e.summary = store.summary()
            raise

    logger.info(
        "dedup.done: unique=%d duplicates=%d total=%d took_ms=%d",
        store.unique_count, store.duplicate_count, store.total_count, int((time.monotonic() - t0) * 1000),
    )

    size_path = cfg.get("cluster_size_output")
    if size_path:
        with CsvRowSink.open(size_path) as sink:
            store.write_sizes(sink)
        logger.info("cluster sizes written: %s", size_path)

    return store.summary()


def run_once(config_path: Optional[str] = None, *, overrides: Optional[Dict[str, Any]] = None) -> DedupSummary:
    """Execute one dedup run from an optional config file plus overrides."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        cfg = build_config(config_path, overrides)
        return run_dedup(cfg)
    except DedupError as e:
        if e.summary is not None:
            logger.error("Dedup failed: %s (partial counters: %s)", e, e.summary)
        else:
            logger.error("Dedup failed: %s", e)
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)
