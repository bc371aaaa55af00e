"""
Sequence normalization module for cleaning and tokenizing coding sequences.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ..tables.translation import TranslationTable

logger = logging.getLogger(__name__)

MIN_SEQUENCE_LENGTH = 6


@dataclass
class FinalizedSequence:
    """
    A coding sequence ready for counting and scoring.

    Attributes:
        header: FASTA header the sequence came from
        sequence: Nucleotide string, a multiple of 3 long
        codons: Non-overlapping codons of ``sequence``, left to right
        terminal_stops: The whole terminal run of two or more stop codons,
            including the one kept at the end of ``codons``
    """
    header: str
    sequence: str
    codons: List[str]
    terminal_stops: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.sequence)


def normalize(raw_line: str) -> str:
    """
    Uppercase a sequence line, rewrite U as T and drop all whitespace.

    Args:
        raw_line: One non-header line of a FASTA record

    Returns:
        Normalized nucleotide string
    """
    return ''.join(raw_line.upper().replace('U', 'T').split())


def tokenize(sequence: str) -> List[str]:
    """Split a nucleotide string into non-overlapping codons."""
    return [sequence[i:i + 3] for i in range(0, len(sequence) - 2, 3)]


def terminal_stop_run(codons: List[str], table: TranslationTable) -> int:
    """Return the number of consecutive stop codons at the end of ``codons``."""
    run = 0
    for codon in reversed(codons):
        if not table.is_stop(codon):
            break
        run += 1
    return run


def finalize_sequence(header: str,
                      buffer: str,
                      table: TranslationTable) -> Optional[FinalizedSequence]:
    """
    Trim, validate and tokenize the concatenated sequence of one record.

    A trailing partial codon is cut off. Records shorter than two codons are
    skipped. A terminal run of two or more stop codons is cut back so that
    only its first stop codon remains. The whole run is kept on the result so
    that frequency computation can still count it.

    Args:
        header: FASTA header used in warnings
        buffer: Normalized nucleotide string of the whole record
        table: Translation table supplying the stop codons

    Returns:
        FinalizedSequence, or None if the record should be skipped
    """
    seq = buffer
    remainder = len(seq) % 3
    if remainder:
        logger.warning(f"Length of {header} is not divisible by 3")
        seq = seq[:-remainder]

    if len(seq) < MIN_SEQUENCE_LENGTH:
        logger.warning(f"{header} is too short to be considered. Skipping")
        return None

    codons = tokenize(seq)
    terminal: List[str] = []

    run = terminal_stop_run(codons, table)
    if run >= 2:
        logger.warning(f"{header} has more than one stop signal at the end")
        terminal = codons[len(codons) - run:]
        codons = codons[:len(codons) - run + 1]
        seq = seq[:3 * len(codons)]

    return FinalizedSequence(header=header, sequence=seq, codons=codons,
                             terminal_stops=terminal)
