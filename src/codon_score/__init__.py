"""
Codon Score

Codon usage statistics for coding sequences relative to a reference host:
individual codon usage (ICU), codon context (CC), codon adaptation index (CAI),
GC content, hidden stop codons, excluded motifs and consecutive repeats.
"""

__version__ = "1.0.0"
__author__ = "Codon Score"
__email__ = "codon-score@example.com"

from .tables import translation
from .analysis import normalizer, counting, frequency, motifs, scoring
from .parsers import fasta_parser, table_parser
from .utils import config_loader, file_utils
