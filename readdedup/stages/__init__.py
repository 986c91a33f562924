"""Pipeline stages: read pairing and cluster assignment.

Both stages work against the ``SequenceRecord`` protocol only and never look
at the concrete FASTA / FASTQ record types.
"""
