"""
Motif scanning utilities for exclusion sequences and consecutive repeats.
"""

from typing import Iterable, Mapping


def count_overlapping(haystack: str, needle: str) -> int:
    """
    Count occurrences of ``needle`` in ``haystack``, overlaps included.

    After each match the search resumes one position further, so ``AA`` is
    found three times in ``AAAA``.
    """
    if not needle:
        return 0

    count = 0
    pos = haystack.find(needle)
    while pos >= 0:
        count += 1
        pos = haystack.find(needle, pos + 1)
    return count


def count_repeat_windows(haystack: str, unit_length: int, multiplicity: int) -> int:
    """
    Count offsets where a unit is immediately repeated ``multiplicity`` times.

    Every offset is tested independently, so overlapping windows each count.

    Args:
        haystack: Nucleotide sequence
        unit_length: Length of the repeated unit
        multiplicity: Number of back-to-back copies required

    Returns:
        Number of matching offsets
    """
    if unit_length < 1 or multiplicity < 1:
        return 0

    window = unit_length * multiplicity
    count = 0
    for i in range(len(haystack) - window + 1):
        unit = haystack[i:i + unit_length]
        if haystack[i:i + window] == unit * multiplicity:
            count += 1
    return count


def count_motifs(haystack: str, motifs: Iterable[str]) -> int:
    """Sum of overlapping occurrence counts of every motif."""
    return sum(count_overlapping(haystack, motif) for motif in motifs)


def count_repeats(haystack: str, repeat_spec: Mapping[int, int]) -> int:
    """Sum of repeat window counts over every (unit length, multiplicity) entry."""
    return sum(count_repeat_windows(haystack, unit_length, multiplicity)
               for unit_length, multiplicity in sorted(repeat_spec.items()))
