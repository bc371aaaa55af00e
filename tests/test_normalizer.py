"""
Tests for sequence normalization and finalization.
"""

import logging

from codon_score.analysis.normalizer import normalize, tokenize, terminal_stop_run


class TestNormalize:

    def test_uppercase_u_to_t_and_whitespace(self):
        assert normalize(' acgu\tacg \r\n') == 'ACGTACG'

    def test_idempotent(self):
        once = normalize('auG gcu uaa')
        assert normalize(once) == once

    def test_empty_line(self):
        assert normalize('   \n') == ''


class TestTokenize:

    def test_non_overlapping_codons(self):
        assert tokenize('ATGAAATAA') == ['ATG', 'AAA', 'TAA']

    def test_terminal_stop_run(self, table):
        assert terminal_stop_run(['ATG', 'TAA', 'TAG'], table) == 2
        assert terminal_stop_run(['ATG', 'AAA'], table) == 0


class TestFinalizeSequence:

    def test_plain_sequence(self, finalize):
        record = finalize('ATGAAATAA')
        assert record.sequence == 'ATGAAATAA'
        assert record.codons == ['ATG', 'AAA', 'TAA']
        assert record.terminal_stops == []

    def test_length_not_multiple_of_three_is_truncated(self, finalize, caplog):
        caplog.set_level(logging.WARNING)
        record = finalize('ATGAAATAAC', header='odd')
        assert len(record) == 9
        assert record.codons == ['ATG', 'AAA', 'TAA']
        assert 'Length of odd is not divisible by 3' in caplog.text

    def test_too_short_is_skipped(self, finalize, caplog):
        caplog.set_level(logging.WARNING)
        assert finalize('ATGA', header='tiny') is None
        assert 'tiny is too short' in caplog.text

    def test_six_nucleotides_is_enough(self, finalize):
        assert finalize('ATGTAA').codons == ['ATG', 'TAA']

    def test_truncation_below_six_skips(self, finalize):
        assert finalize('ATGTA') is None

    def test_multiple_terminal_stops_keep_first(self, finalize, caplog):
        caplog.set_level(logging.WARNING)
        record = finalize('ATGAAATAATAGTGA', header='multi')
        assert record.codons == ['ATG', 'AAA', 'TAA']
        assert record.sequence == 'ATGAAATAA'
        assert record.terminal_stops == ['TAA', 'TAG', 'TGA']
        assert 'multi has more than one stop signal at the end' in caplog.text

    def test_single_terminal_stop_untouched(self, finalize, caplog):
        caplog.set_level(logging.WARNING)
        record = finalize('ATGTAAAAATAA')
        assert record.codons == ['ATG', 'TAA', 'AAA', 'TAA']
        assert record.terminal_stops == []
        assert 'stop signal' not in caplog.text
