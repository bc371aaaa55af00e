"""
Analysis module for codon counting, frequency models and sequence scoring.
"""

from .normalizer import normalize, finalize_sequence, FinalizedSequence
from .counting import CodonCounter, count_sequences
from .frequency import FrequencyModel, most_frequent_codon_per_amino_acid
from .motifs import count_overlapping, count_repeat_windows
from .scoring import ScoringEngine, SequenceScore
