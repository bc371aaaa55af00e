"""
Translation table module mapping codons to amino acids and back.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple
from Bio.Data import CodonTable
import logging

logger = logging.getLogger(__name__)

STOP = '*'
START = 'M'


class TableFormatError(ValueError):
    """Raised when a table source contains a malformed row."""


class DuplicateCodonError(TableFormatError):
    """Raised when one codon is assigned to two different amino acids."""


def canonical_codon(codon: str) -> str:
    """Uppercase a codon and rewrite U as T."""
    return codon.strip().upper().replace('U', 'T')


def canonical_amino_acid(amino_acid: str) -> str:
    """Uppercase an amino acid code and map the '.' stop marker to '*'."""
    return amino_acid.strip().upper().replace('.', STOP)


class TranslationTable:
    """
    Immutable codon to amino acid mapping with its derived reverse mapping.

    The forward mapping is a plain dict keyed by codon; the reverse mapping is
    the partition of codons induced by it. Both are built once and never
    mutated, so a single table can be shared by every component.
    """

    def __init__(self, codon_to_aa: Dict[str, str]):
        self._forward = dict(codon_to_aa)
        reverse: Dict[str, List[str]] = {}
        for codon in sorted(self._forward):
            reverse.setdefault(self._forward[codon], []).append(codon)
        self._reverse = {aa: frozenset(codons) for aa, codons in reverse.items()}

    @classmethod
    def build(cls, rows: Iterable[Tuple[str, str]]) -> 'TranslationTable':
        """
        Build a table from (codon, amino acid) rows.

        Codons are uppercased with U rewritten as T, and the '.' stop marker
        becomes '*'. A codon repeated with the same amino acid is accepted;
        a codon repeated with a different amino acid is rejected.

        Args:
            rows: Iterable of (codon, amino acid or stop marker) pairs

        Returns:
            TranslationTable

        Raises:
            TableFormatError: If a row has an empty codon or amino acid
            DuplicateCodonError: If a codon is mapped to two amino acids
        """
        forward: Dict[str, str] = {}

        for codon, amino_acid in rows:
            codon = canonical_codon(codon)
            amino_acid = canonical_amino_acid(amino_acid)

            if not codon or not amino_acid:
                raise TableFormatError(f"Empty field in translation row: {codon!r}, {amino_acid!r}")

            previous = forward.get(codon)
            if previous is not None and previous != amino_acid:
                raise DuplicateCodonError(
                    f"Codon {codon} mapped to both {previous} and {amino_acid}"
                )
            forward[codon] = amino_acid

        if not forward:
            raise TableFormatError("Translation table is empty")

        logger.debug(f"Built translation table with {len(forward)} codons")
        return cls(forward)

    @classmethod
    def standard(cls, table_id: int = 1) -> 'TranslationTable':
        """
        Build a table from one of the NCBI genetic codes shipped with Biopython.

        Args:
            table_id: NCBI translation table ID (1 is the standard code)

        Returns:
            TranslationTable covering all 64 codons

        Raises:
            ValueError: If Biopython has no genetic code with that ID
        """
        try:
            table = CodonTable.unambiguous_dna_by_id[table_id]
        except KeyError:
            known = ', '.join(str(key) for key in sorted(CodonTable.unambiguous_dna_by_id))
            raise ValueError(f"Unknown NCBI genetic code {table_id} (known codes: {known})")
        rows = list(table.forward_table.items())
        rows.extend((codon, STOP) for codon in table.stop_codons)
        logger.info(f"Using NCBI genetic code {table_id} ({table.names[0]})")
        return cls.build(rows)

    def amino_acid_of(self, codon: str) -> Optional[str]:
        """Return the amino acid for a codon, or None if the codon is unknown."""
        return self._forward.get(codon)

    def codons_of(self, amino_acid: str) -> FrozenSet[str]:
        """Return the synonymous codons of an amino acid (stops for '*')."""
        return self._reverse.get(amino_acid, frozenset())

    def is_stop(self, codon: str) -> bool:
        return self._forward.get(codon) == STOP

    @property
    def stop_codons(self) -> FrozenSet[str]:
        return self.codons_of(STOP)

    @property
    def codons(self) -> List[str]:
        """All codons in lexicographic order."""
        return sorted(self._forward)

    @property
    def amino_acids(self) -> List[str]:
        """All amino acids (including '*') in lexicographic order."""
        return sorted(self._reverse)

    def __contains__(self, codon: str) -> bool:
        return codon in self._forward

    def __len__(self) -> int:
        return len(self._forward)

    def items(self):
        return self._forward.items()
