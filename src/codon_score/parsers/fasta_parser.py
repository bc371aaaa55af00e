"""
FASTA parser module yielding normalized and finalized coding sequences.
"""

import os
from typing import Iterator, Tuple
from Bio import SeqIO
import logging

from ..analysis.normalizer import FinalizedSequence, finalize_sequence, normalize
from ..tables.translation import TranslationTable

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 100


def read_fasta(fasta_file: str) -> Iterator[Tuple[str, str]]:
    """
    Yield (header, normalized sequence) for every record of a FASTA file.

    Args:
        fasta_file: Path to a nucleotide FASTA file

    Yields:
        Tuple of header line (without '>') and uppercase, U-free sequence
    """
    if not os.path.exists(fasta_file):
        raise FileNotFoundError(f"FASTA file not found: {fasta_file}")

    count = 0
    for record in SeqIO.parse(fasta_file, 'fasta'):
        count += 1
        if count % PROGRESS_INTERVAL == 0:
            logger.info(f"{count} sequences processed")
        yield record.description, normalize(str(record.seq))

    logger.info(f"Total of {count} sequences processed")


def iter_finalized(fasta_file: str, table: TranslationTable) -> Iterator[FinalizedSequence]:
    """
    Yield the finalized sequences of a FASTA file, skipping short records.

    Args:
        fasta_file: Path to a nucleotide FASTA file
        table: Translation table supplying the stop codons

    Yields:
        FinalizedSequence for every record long enough to be used
    """
    for header, sequence in read_fasta(fasta_file):
        record = finalize_sequence(header, sequence, table)
        if record is not None:
            yield record
