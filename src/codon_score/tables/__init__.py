"""
Translation table module for codon and amino acid mappings.
"""

from .translation import (TranslationTable, TableFormatError, DuplicateCodonError,
                          STOP, START)
