"""
Table parser module for translation, ICU, CC, exclusion and repeat files.
"""

import os
from typing import Dict, List, Set, Tuple
import pandas as pd
import logging

from ..tables.translation import TranslationTable, TableFormatError, canonical_codon

logger = logging.getLogger(__name__)


def _read_two_column_table(file_path: str, label: str) -> List[Tuple[str, str]]:
    """
    Read a headerless tab-separated file with (key, value) rows.

    Args:
        file_path: Path to the table
        label: Table name used in messages

    Returns:
        List of (key, value) string pairs

    Raises:
        FileNotFoundError: If the file does not exist
        TableFormatError: If the file is empty or a row lacks a value
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"{label} not found: {file_path}")

    logger.info(f"Loading {label} from {file_path}")

    try:
        df = pd.read_csv(file_path, sep='\t', header=None, dtype=str,
                         keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        raise TableFormatError(f"{label} is empty: {file_path}")
    except pd.errors.ParserError as e:
        raise TableFormatError(f"Error parsing {label} {file_path}: {e}")

    if df.shape[1] < 2:
        raise TableFormatError(f"{label} must have two tab-separated columns: {file_path}")

    rows = []
    for line_no, (key, value) in enumerate(zip(df[0], df[1]), start=1):
        if pd.isna(key) or pd.isna(value) or not str(key).strip() or not str(value).strip():
            raise TableFormatError(f"{label} row {line_no} is incomplete: {file_path}")
        rows.append((str(key).strip(), str(value).strip()))

    logger.debug(f"Read {len(rows)} rows from {file_path}")
    return rows


def load_translation_table(file_path: str) -> TranslationTable:
    """
    Load a translation table of (codon, amino acid) rows.

    Args:
        file_path: Path to a tab-separated translation table

    Returns:
        TranslationTable
    """
    rows = _read_two_column_table(file_path, 'Translation table')
    table = TranslationTable.build(rows)
    logger.info(f"Loaded translation table: {len(table)} codons, "
                f"{len(table.amino_acids)} amino acids, {len(table.stop_codons)} stop codons")
    return table


def _read_frequency_table(file_path: str, label: str) -> List[Tuple[str, float]]:
    rows = []
    for key, value in _read_two_column_table(file_path, label):
        try:
            rows.append((canonical_codon(key), float(value)))
        except ValueError:
            raise TableFormatError(f"{label} has a non-numeric frequency for {key}: {value!r}")
    return rows


def load_icu_table(file_path: str) -> List[Tuple[str, float]]:
    """Load (codon, frequency) rows of an ICU table."""
    return _read_frequency_table(file_path, 'ICU table')


def load_cc_table(file_path: str) -> List[Tuple[str, float]]:
    """Load (codon pair, frequency) rows of a CC table."""
    rows = _read_frequency_table(file_path, 'CC table')
    for pair, _ in rows:
        if len(pair) != 6:
            logger.warning(f"CC table key {pair} is not a 6-nucleotide codon pair")
    return rows


def _content_lines(file_path: str):
    # Whitespace is removed entirely; comment and blank lines are skipped
    with open(file_path, 'r') as f:
        for line in f:
            line = ''.join(line.split())
            if not line or line.startswith('#'):
                continue
            yield line


def load_exclusion_sequences(file_path: str) -> Set[str]:
    """
    Load exclusion motifs, separated by ';' on one or more lines.

    A missing file is not an error and yields an empty set.

    Args:
        file_path: Path to the exclusion sequence file

    Returns:
        Set of uppercase motifs with U rewritten as T
    """
    if not file_path:
        logger.info("No exclusion sequence file configured")
        return set()
    if not os.path.exists(file_path):
        logger.info(f"No {file_path} file found. Assuming no exclusion sequences")
        return set()

    exclusions = set()
    for line in _content_lines(file_path):
        for motif in line.upper().replace('U', 'T').split(';'):
            if not motif:
                continue
            if set(motif) - set('ACGT'):
                logger.error(f"Non-ACGTU characters found in exclusion sequence {motif} ({file_path})")
            exclusions.add(motif)

    logger.info(f"Loaded {len(exclusions)} exclusion sequences")
    return exclusions


def load_repeat_spec(file_path: str) -> Dict[int, int]:
    """
    Load a repeat specification of ``unit_length:multiplicity`` entries.

    A missing file is not an error and yields an empty mapping.

    Args:
        file_path: Path to the repeat specification

    Returns:
        Dictionary unit length -> required number of copies

    Raises:
        TableFormatError: If an entry is not two positive integers
    """
    if not file_path:
        logger.info("No repeat specification file configured")
        return {}
    if not os.path.exists(file_path):
        logger.info(f"No {file_path} file found. Assuming no repeats specified")
        return {}

    repeat_spec = {}
    for line in _content_lines(file_path):
        for entry in line.split(';'):
            if not entry:
                continue
            parts = entry.split(':')
            try:
                unit_length, multiplicity = (int(part) for part in parts)
            except ValueError:
                raise TableFormatError(f"Invalid repeat entry {entry!r} in {file_path}")
            if unit_length < 1 or multiplicity < 1:
                raise TableFormatError(f"Repeat entry {entry!r} must use positive integers")
            repeat_spec[unit_length] = multiplicity

    logger.info(f"Loaded {len(repeat_spec)} repeat specifications")
    return repeat_spec
