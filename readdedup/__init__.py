"""Exact and prefix duplicate removal for single and paired-end FASTA/FASTQ reads."""

__all__: list[str] = []
