"""
Scoring module comparing a coding sequence against a host reference model.
"""

from dataclasses import dataclass, astuple
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple
import numpy as np
import logging

from ..tables.translation import STOP
from .counting import CodonCounter
from .frequency import FrequencyModel, most_frequent_codon_per_amino_acid
from .motifs import count_overlapping, count_motifs, count_repeats
from .normalizer import FinalizedSequence

logger = logging.getLogger(__name__)

SCORE_COLUMNS = ['ICU score', 'CC score', 'CAI score', 'Hidden',
                 'GC content', 'GC3 content', 'Excluseq', 'Repeat']


@dataclass
class SequenceScore:
    """
    Scores of one sequence. ICU, CC and CAI scores are negated so that a
    higher value is a closer match to the host.
    """
    icu_score: float
    cc_score: float
    cai_score: float
    hidden_stops: int
    gc_content: float
    gc3_content: float
    exclusion_count: int
    repeat_count: int

    def as_row(self) -> Tuple:
        return astuple(self)


def _gc_percent(seq: str) -> float:
    if not seq:
        return 0.0
    chars = np.frombuffer(seq.encode(), dtype=np.uint8)
    isgc = (chars == ord('G')) | (chars == ord('C'))
    return 100.0 * float(np.count_nonzero(isgc)) / len(chars)


def gc_content(seq: str) -> float:
    """Percentage of G and C nucleotides in a sequence."""
    return _gc_percent(seq)


def gc3_content(seq: str) -> float:
    """Percentage of G and C nucleotides at the third position of each codon."""
    return _gc_percent(seq[2::3])


def hidden_stop_count(seq: str, stop_codons: Iterable[str]) -> int:
    """
    Count stop codon substrings at any offset except the final codon position.

    Args:
        seq: Nucleotide sequence
        stop_codons: Stop codons of the translation table

    Returns:
        Number of hidden stop codons
    """
    # The last codon position holds the genuine terminal stop
    scanned = seq[:-1]
    return sum(count_overlapping(scanned, stop) for stop in sorted(stop_codons))


def _mean_deviation(reference: Mapping[str, float],
                    observed_counts: Mapping[str, int],
                    group_counts: Mapping[str, int],
                    group_of) -> float:
    score = 0.0
    for key, ref in reference.items():
        group = group_of(key)
        total = group_counts.get(group, 0) if group is not None else 0
        if total != 0:
            score += abs(observed_counts.get(key, 0) / total - ref)
        else:
            score += ref
    return score / len(reference)


class ScoringEngine:
    """
    Scores finalized sequences against one reference model.

    The reference model, exclusion motifs and repeat specification are fixed
    at construction; the engine holds no per-sequence state and can score
    any number of records.
    """

    def __init__(self,
                 model: FrequencyModel,
                 exclusions: Optional[Iterable[str]] = None,
                 repeat_spec: Optional[Mapping[int, int]] = None):
        self.model = model
        self.table = model.table
        self.exclusions: FrozenSet[str] = frozenset(exclusions or ())
        self.repeat_spec: Dict[int, int] = dict(repeat_spec or {})
        self.best_codon, self.best_value = most_frequent_codon_per_amino_acid(model)

    def count(self, record: FinalizedSequence) -> CodonCounter:
        """Count one sequence on its own, without its terminal run of stops."""
        counter = CodonCounter(self.table)
        counter.add_sequence(record, count_terminal_run=False)
        return counter

    def icu_deviation(self, counter: CodonCounter) -> float:
        """
        Mean absolute deviation of the sequence's codon usage from the reference.

        Codons whose amino acid does not occur in the sequence contribute
        their reference frequency.
        """
        return _mean_deviation(self.model.icu, counter.codon_counts,
                               counter.aa_counts, self.table.amino_acid_of)

    def cc_deviation(self, counter: CodonCounter) -> float:
        """Mean absolute deviation of codon pair usage from the reference."""
        table = self.table

        def pair_group(pair: str) -> Optional[str]:
            first = table.amino_acid_of(pair[:3])
            second = table.amino_acid_of(pair[3:])
            if first is None or second is None:
                return None
            return first + second

        return _mean_deviation(self.model.cc, counter.pair_counts,
                               counter.aa_pair_counts, pair_group)

    def codon_adaptation_index(self, record: FinalizedSequence) -> float:
        """
        Geometric mean of each codon's reference frequency relative to the
        most frequent synonymous codon.

        A codon with zero reference frequency drives the index to 0.0. An
        unknown codon, or an amino acid without any used codon in the
        reference, makes it NaN.
        """
        refs = []
        bests = []
        for codon in record.codons:
            amino_acid = self.table.amino_acid_of(codon)
            refs.append(self.model.icu.get(codon, np.nan))
            bests.append(self.best_value.get(amino_acid, 0.0) if amino_acid else np.nan)

        with np.errstate(divide='ignore', invalid='ignore'):
            ratios = np.asarray(refs, dtype=float) / np.asarray(bests, dtype=float)
            index = float(np.exp(np.mean(np.log(ratios))))

        if not np.isfinite(index) or index == 0.0:
            logger.warning(f"{record.header}: CAI is {index} "
                           f"(codons missing or unused in the reference)")
        return index

    def score(self, record: FinalizedSequence) -> SequenceScore:
        """
        Compute every score for one finalized sequence.

        Args:
            record: Finalized sequence

        Returns:
            SequenceScore
        """
        seq = record.sequence
        counter = self.count(record)

        return SequenceScore(
            icu_score=-self.icu_deviation(counter),
            cc_score=-self.cc_deviation(counter),
            cai_score=-self.codon_adaptation_index(record),
            hidden_stops=hidden_stop_count(seq, self.table.codons_of(STOP)),
            gc_content=gc_content(seq),
            gc3_content=gc3_content(seq),
            exclusion_count=count_motifs(seq, sorted(self.exclusions)),
            repeat_count=count_repeats(seq, self.repeat_spec),
        )
