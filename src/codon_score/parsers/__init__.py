"""
Parsers module for FASTA input and reference table files.
"""

from .fasta_parser import read_fasta, iter_finalized
from .table_parser import (load_translation_table, load_icu_table, load_cc_table,
                           load_exclusion_sequences, load_repeat_spec)
