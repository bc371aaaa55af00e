"""
File utilities module for output directories and table writing.
"""

import os
from typing import Mapping, Optional, Sequence
import pandas as pd
import logging

logger = logging.getLogger(__name__)

FREQUENCY_FORMAT = '%.6f'


def ensure_directory(directory: str) -> None:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory: Directory path to create
    """
    if not directory:
        return
    if not os.path.exists(directory):
        logger.info(f"Creating directory: {directory}")
        os.makedirs(directory, exist_ok=True)
    else:
        logger.debug(f"Directory already exists: {directory}")


def save_dataframe(df: pd.DataFrame,
                   output_path: str,
                   header: bool = True,
                   float_format: Optional[str] = FREQUENCY_FORMAT) -> None:
    """
    Save a DataFrame as a tab-separated file.

    Args:
        df: DataFrame to save
        output_path: Output file path
        header: Write the column names as the first line
        float_format: printf-style format for float columns
    """
    logger.info(f"Saving table to {output_path}")

    ensure_directory(os.path.dirname(output_path))

    try:
        df.to_csv(output_path, sep='\t', index=False, header=header,
                  float_format=float_format)
        logger.info(f"Table saved successfully: {len(df)} rows")

    except Exception as e:
        logger.error(f"Error saving table: {e}")
        raise


def mapping_to_dataframe(mapping: Mapping, columns: Sequence[str]) -> pd.DataFrame:
    """
    Convert a key -> value mapping to a two-column DataFrame sorted by key.

    Args:
        mapping: Mapping to convert
        columns: Names of the key and value columns

    Returns:
        DataFrame with one row per key in lexicographic key order
    """
    keys = sorted(mapping)
    return pd.DataFrame({columns[0]: keys,
                         columns[1]: [mapping[key] for key in keys]})


def save_mapping(mapping: Mapping, output_path: str,
                 columns: Sequence[str] = ('key', 'value')) -> None:
    """Save a mapping as a headerless, key-sorted, tab-separated table."""
    save_dataframe(mapping_to_dataframe(mapping, columns), output_path, header=False)

