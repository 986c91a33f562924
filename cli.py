#!/usr/bin/env python3
import argparse
import sys

from readdedup.errors import DedupError
from readdedup.orchestrator import run_once


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collapse exact duplicate reads in FASTA/FASTQ files (single or paired end)")
    parser.add_argument("--config", help="Path to YAML config; flags below override its values")
    parser.add_argument("-i", "--inputs", dest="inputs", action="extend", nargs="+", help="Input FASTA/FASTQ (one, or two for paired reads)")
    parser.add_argument("-o", "--deduped-outputs", dest="outputs", action="extend", nargs="+", help="Output deduped FASTA/FASTQ, one per input")
    parser.add_argument("-c", "--cluster-output", dest="cluster_output", help="Output cluster file (representative read id, read id)")
    parser.add_argument("--cluster-size-output", dest="cluster_size_output", help="Output cluster size file")
    parser.add_argument("-l", "--prefix-length", dest="prefix_length", type=int, help="Length of the prefix to consider")
    parser.add_argument("--bytes-per-record", dest="bytes_per_record", type=int, help="Average input bytes per record, for sizing (default 400)")
    parser.add_argument("--progress-every", dest="progress_every", type=int, help="Log progress every N records, 0 disables")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.inputs and len(args.inputs) > 2:
        parser.error("at most two inputs are supported")
    if args.outputs and len(args.outputs) > 2:
        parser.error("at most two deduped outputs are supported")
    if not args.config and not (args.inputs and args.outputs):
        parser.error("--inputs and --deduped-outputs are required without --config")

    overrides = {
        "inputs": args.inputs,
        "outputs": args.outputs,
        "cluster_output": args.cluster_output,
        "cluster_size_output": args.cluster_size_output,
        "prefix_length": args.prefix_length,
        "bytes_per_record": args.bytes_per_record,
        "progress_every": args.progress_every,
    }

    try:
        summary = run_once(args.config, overrides=overrides)
    except DedupError as e:
        print(e, file=sys.stderr)
        return 1
    for line in summary.lines():
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
