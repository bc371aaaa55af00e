"""
Frequency model module for ICU and CC reference frequencies.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple
import logging

from ..tables.translation import TranslationTable, STOP, canonical_codon
from .counting import CodonCounter

logger = logging.getLogger(__name__)


def _ratio(count: int, total: int) -> float:
    # Zero counts give 0.0 without consulting the (possibly zero) total
    if count:
        return count / total
    return 0.0


@dataclass(frozen=True)
class FrequencyModel:
    """
    Reference codon usage of a host.

    Attributes:
        table: Translation table the frequencies refer to
        icu: Codon -> frequency among the synonymous codons of its amino acid
        cc: Codon pair -> frequency among pairs with the same amino acid pair
    """
    table: TranslationTable
    icu: Dict[str, float]
    cc: Dict[str, float]

    @classmethod
    def from_counts(cls,
                    codon_counts: Mapping[str, int],
                    aa_counts: Mapping[str, int],
                    pair_counts: Mapping[str, int],
                    aa_pair_counts: Mapping[str, int],
                    table: TranslationTable) -> 'FrequencyModel':
        """
        Derive ICU and CC frequencies from accumulated counts.

        A codon (or pair) that was never observed gets frequency 0.0, even if
        its amino acid (or amino acid pair) was observed through a synonym.

        Args:
            codon_counts: Codon -> occurrences
            aa_counts: Amino acid -> occurrences
            pair_counts: Concatenated codon pair -> occurrences
            aa_pair_counts: Concatenated amino acid pair -> occurrences
            table: Translation table

        Returns:
            FrequencyModel
        """
        icu = {}
        for codon in sorted(codon_counts):
            amino_acid = table.amino_acid_of(codon)
            icu[codon] = _ratio(codon_counts[codon], aa_counts.get(amino_acid, 0))

        cc = {}
        for pair in sorted(pair_counts):
            first_aa = table.amino_acid_of(pair[:3])
            second_aa = table.amino_acid_of(pair[3:])
            if first_aa is None or first_aa == STOP or second_aa is None:
                continue
            cc[pair] = _ratio(pair_counts[pair], aa_pair_counts.get(first_aa + second_aa, 0))

        return cls(table=table, icu=icu, cc=cc)

    @classmethod
    def from_counter(cls, counter: CodonCounter) -> 'FrequencyModel':
        return cls.from_counts(counter.codon_counts, counter.aa_counts,
                               counter.pair_counts, counter.aa_pair_counts,
                               counter.table)

    @classmethod
    def from_tables(cls,
                    table: TranslationTable,
                    icu_rows: Iterable[Tuple[str, float]],
                    cc_rows: Iterable[Tuple[str, float]]) -> 'FrequencyModel':
        """
        Build a reference model from loaded ICU and CC table rows.

        Every codon of the translation table, and every pair whose first codon
        is not a stop, starts at 0.0 and is overwritten by matching rows.
        Rows for keys outside the default entries are kept, with a warning.

        Args:
            table: Translation table
            icu_rows: (codon, frequency) rows
            cc_rows: (codon pair, frequency) rows

        Returns:
            FrequencyModel
        """
        icu = {codon: 0.0 for codon in table.codons}
        for codon, value in icu_rows:
            icu[canonical_codon(codon)] = float(value)

        cc = {
            first + second: 0.0
            for first in table.codons if not table.is_stop(first)
            for second in table.codons
        }
        for pair, value in cc_rows:
            cc[canonical_codon(pair)] = float(value)

        extra_icu = len(icu) - len(table)
        if extra_icu:
            logger.warning(f"ICU table has {extra_icu} codons missing from the translation table")

        extra_cc = len(cc) - len(table.codons) * (len(table.codons) - len(table.stop_codons))
        if extra_cc:
            logger.warning(f"CC table has {extra_cc} codon pairs outside the translation table "
                           f"or starting with a stop codon")

        logger.info(f"Reference model: {len(icu)} ICU entries, {len(cc)} CC entries")
        return cls(table=table, icu=icu, cc=cc)

    def icu_frequency(self, codon: str) -> float:
        return self.icu.get(codon, 0.0)

    def cc_frequency(self, pair: str) -> float:
        return self.cc.get(pair, 0.0)


def most_frequent_codon_per_amino_acid(
        model: FrequencyModel) -> Tuple[Dict[str, str], Dict[str, float]]:
    """
    Find the most used synonymous codon of every amino acid.

    Codons are visited in lexicographic order and replace the current best
    only when strictly more frequent, so exact ties resolve to the
    lexicographically smallest codon. Amino acids whose codons all have
    frequency 0.0 get value 0.0 and no best codon.

    Args:
        model: Reference frequency model

    Returns:
        Tuple of (amino acid -> best codon, amino acid -> best frequency)
    """
    best_codon: Dict[str, str] = {}
    best_value: Dict[str, float] = {}

    for codon in sorted(model.icu):
        amino_acid = model.table.amino_acid_of(codon)
        if amino_acid is None:
            continue
        value = model.icu[codon]
        best_value.setdefault(amino_acid, 0.0)
        if best_value[amino_acid] < value:
            best_codon[amino_acid] = codon
            best_value[amino_acid] = value

    return best_codon, best_value
