"""
Codon counting module accumulating codon, amino acid and pair occurrences.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional
import logging

import pandas as pd

from ..tables.translation import TranslationTable, STOP, START
from .normalizer import FinalizedSequence
from ..utils.file_utils import mapping_to_dataframe

logger = logging.getLogger(__name__)

COUNT_TABLES = {
    'codon': ('codon_counts', ('codon', 'count')),
    'codon_pair': ('pair_counts', ('codon_pair', 'count')),
    'aa': ('aa_counts', ('aa', 'count')),
    'aa_pair': ('aa_pair_counts', ('aa_pair', 'count')),
}


@dataclass
class RecordFlags:
    """Per-record problems found while counting."""
    internal_stop: bool = False
    unknown: bool = False
    non_methionine_start: bool = False


class CodonCounter:
    """
    Accumulator for codon, amino acid, codon pair and amino acid pair counts.

    Every key of the translation table starts at zero. Pair keys are the
    concatenation of both members and never start with a stop codon (or the
    stop amino acid). One counter can collect a whole corpus, or a fresh
    counter can be used per sequence; partial counters from independent
    workers are combined with :meth:`merge`.
    """

    def __init__(self, table: TranslationTable):
        self.table = table
        self.codon_counts: Dict[str, int] = {codon: 0 for codon in table.codons}
        self.aa_counts: Dict[str, int] = {aa: 0 for aa in table.amino_acids}
        self.pair_counts: Dict[str, int] = {
            first + second: 0
            for first in table.codons if not table.is_stop(first)
            for second in table.codons
        }
        self.aa_pair_counts: Dict[str, int] = {
            first + second: 0
            for first in table.amino_acids if first != STOP
            for second in table.amino_acids
        }
        self.sequences = 0

    def _count_codon(self, codon: str, amino_acid: str) -> None:
        self.codon_counts[codon] += 1
        self.aa_counts[amino_acid] += 1

    def _count_pair(self, first: str, second: str,
                    first_aa: str, second_aa: str) -> None:
        self.pair_counts[first + second] += 1
        self.aa_pair_counts[first_aa + second_aa] += 1

    def add_sequence(self, record: FinalizedSequence,
                     count_terminal_run: bool = False) -> RecordFlags:
        """
        Count one finalized sequence.

        The first codon is counted on its own only when it is a methionine;
        every later codon is counted as the second member of its pair with the
        previous codon. An internal stop is never counted, but a single stop
        in the last position is. A pair is only counted when its first member
        is a recognized non-stop codon, and the pair starting at position 0
        only when that codon is a methionine.

        Args:
            record: Finalized sequence to count
            count_terminal_run: Also count every stop codon of a terminal run
                of stops, the kept one included (frequency computation mode).
                The kept stop is then counted a second time by the pair walk.

        Returns:
            RecordFlags describing the problems found in the record
        """
        table = self.table
        codons = record.codons
        flags = RecordFlags()

        if count_terminal_run:
            for codon in record.terminal_stops:
                self._count_codon(codon, STOP)

        if not codons:
            return flags

        first_aa = table.amino_acid_of(codons[0])
        if first_aa is None:
            flags.unknown = True
        elif first_aa == STOP:
            flags.internal_stop = True
        elif first_aa != START:
            flags.non_methionine_start = True
            logger.warning(f"{record.header} does not start with a methionine")
        else:
            self._count_codon(codons[0], first_aa)

        last = len(codons) - 2
        for i in range(len(codons) - 1):
            current, following = codons[i], codons[i + 1]
            following_aa = table.amino_acid_of(following)

            if following_aa is None:
                flags.unknown = True
                continue
            if following_aa == STOP and i != last:
                flags.internal_stop = True
                continue

            self._count_codon(following, following_aa)

            current_aa = table.amino_acid_of(current)
            if current_aa is None or current_aa == STOP:
                continue
            if i > 0 or current_aa == START:
                self._count_pair(current, following, current_aa, following_aa)

        if flags.internal_stop:
            logger.warning(f"{record.header} has internal stop codons")
        if flags.unknown:
            logger.warning(f"{record.header} has unrecognized codons")

        self.sequences += 1
        return flags

    def merge(self, other: 'CodonCounter') -> 'CodonCounter':
        """
        Add the counts of another counter built on the same table.

        Args:
            other: Counter to fold into this one

        Returns:
            This counter
        """
        if other.table is not self.table and dict(other.table.items()) != dict(self.table.items()):
            raise ValueError("Cannot merge counters built on different translation tables")

        for mine, theirs in ((self.codon_counts, other.codon_counts),
                             (self.aa_counts, other.aa_counts),
                             (self.pair_counts, other.pair_counts),
                             (self.aa_pair_counts, other.aa_pair_counts)):
            for key, value in theirs.items():
                mine[key] += value
        self.sequences += other.sequences
        return self

    def copy(self) -> 'CodonCounter':
        """Return an independent counter holding the same counts."""
        duplicate = CodonCounter.__new__(CodonCounter)
        duplicate.table = self.table
        duplicate.codon_counts = dict(self.codon_counts)
        duplicate.aa_counts = dict(self.aa_counts)
        duplicate.pair_counts = dict(self.pair_counts)
        duplicate.aa_pair_counts = dict(self.aa_pair_counts)
        duplicate.sequences = self.sequences
        return duplicate

    def to_dataframe(self, kind: str = 'codon') -> pd.DataFrame:
        """
        Export one of the count tables as a key-sorted DataFrame.

        Args:
            kind: 'codon', 'codon_pair', 'aa' or 'aa_pair'

        Returns:
            Two-column DataFrame of keys and counts
        """
        if kind not in COUNT_TABLES:
            raise ValueError(f"Unknown count table: {kind}")
        attribute, columns = COUNT_TABLES[kind]
        return mapping_to_dataframe(getattr(self, attribute), columns)

    def total_codons(self) -> int:
        return sum(self.codon_counts.values())


def count_sequences(records: Iterable[FinalizedSequence],
                    table: TranslationTable,
                    counter: Optional[CodonCounter] = None) -> CodonCounter:
    """
    Count a batch of finalized sequences in frequency computation mode.

    Args:
        records: Finalized sequences
        table: Translation table
        counter: Existing accumulator to extend; a new one is created if None

    Returns:
        The accumulator holding the combined counts
    """
    if counter is None:
        counter = CodonCounter(table)

    for record in records:
        counter.add_sequence(record, count_terminal_run=True)

    logger.info(f"Counted {counter.sequences} sequences, {counter.total_codons()} codons")
    return counter
