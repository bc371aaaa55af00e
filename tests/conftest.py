"""
Shared fixtures for the codon_score test suite.
"""

import logging
import os
import sys

import pytest

# Allow running the tests from a source checkout without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from codon_score.tables.translation import TranslationTable
from codon_score.analysis.normalizer import finalize_sequence


@pytest.fixture(scope='session')
def table():
    """The NCBI standard genetic code."""
    return TranslationTable.standard()


@pytest.fixture
def finalize(table):
    """Finalize a raw nucleotide string against the standard code."""
    def _finalize(seq, header='test_seq'):
        return finalize_sequence(header, seq, table)
    return _finalize


@pytest.fixture
def write_file(tmp_path):
    """Write text to a file under tmp_path and return its path as a string."""
    def _write(name, content):
        path = tmp_path / name
        path.write_text(content)
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo the handlers and level the CLI installs on the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
