"""
End-to-end tests of the command-line interface.
"""

import os

import pandas as pd
import pytest
import yaml
from click.testing import CliRunner

from codon_score.cli import cli, FREQUENCY_OUTPUTS, SCORES_FILE, LOG_FILE
from codon_score.analysis.scoring import SCORE_COLUMNS

FASTA = """>gene1
ATGAAAAAGAAAGGCGGTCTGCTTTAA
>gene2 short
ATGA
>gene3
ATGGCTGCCAAGTAGTGA
"""

SINGLE = """>only
ATGAAAAAGAAAGGCGGTCTGCTTTAA
"""


def read_table(path):
    return pd.read_csv(path, sep='\t', header=None, dtype={0: str}, keep_default_na=False)


@pytest.fixture
def runner():
    return CliRunner()


class TestFreq:

    def test_writes_sorted_tables(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', FASTA)
        outdir = tmp_path / 'out'

        result = runner.invoke(cli, ['freq', fasta, '--outdir', str(outdir), '--quiet'])
        assert result.exit_code == 0, result.output

        for name in FREQUENCY_OUTPUTS.values():
            assert (outdir / name).exists()

        codons = read_table(outdir / FREQUENCY_OUTPUTS['codon'])
        assert len(codons) == 64
        assert list(codons[0]) == sorted(codons[0])
        counts = dict(zip(codons[0], codons[1]))
        assert counts['ATG'] == 2
        assert counts['AAA'] == 2
        # gene3's terminal run TAG TGA is counted whole, and the kept TAG
        # again as the last codon
        assert counts['TGA'] == 1
        assert counts['TAG'] == 2
        assert counts['TAA'] == 1

        amino_acids = read_table(outdir / FREQUENCY_OUTPUTS['aa'])
        assert dict(zip(amino_acids[0], amino_acids[1]))['*'] == 4

        pairs = read_table(outdir / FREQUENCY_OUTPUTS['codon_pair'])
        assert len(pairs) == 61 * 64
        assert not any(pair.startswith('TAA') for pair in pairs[0])

        aa_pairs = read_table(outdir / FREQUENCY_OUTPUTS['aa_pair'])
        assert len(aa_pairs) == 20 * 21

    def test_frequency_format(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', SINGLE)
        outdir = tmp_path / 'out'
        runner.invoke(cli, ['freq', fasta, '--outdir', str(outdir), '--quiet'])

        lines = (outdir / FREQUENCY_OUTPUTS['icu']).read_text().splitlines()
        assert 'ATG\t1.000000' in lines
        assert 'AAA\t0.666667' in lines
        assert 'AAG\t0.333333' in lines
        assert 'GCT\t0.000000' in lines

    def test_custom_translation_table(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', SINGLE)
        trans = write_file('trans_table.txt', 'ATG\tM\nAAA\tK\nTAA\t.\n')
        outdir = tmp_path / 'out'

        result = runner.invoke(cli, ['freq', fasta, '--trans-table', trans,
                                     '--outdir', str(outdir), '--quiet'])
        assert result.exit_code == 0, result.output
        codons = read_table(outdir / FREQUENCY_OUTPUTS['codon'])
        assert list(codons[0]) == ['AAA', 'ATG', 'TAA']

    def test_missing_translation_table_fails(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', SINGLE)
        result = runner.invoke(cli, ['freq', fasta, '--trans-table', str(tmp_path / 'none.txt'),
                                     '--outdir', str(tmp_path / 'out'), '--quiet'])
        assert result.exit_code == 1

    def test_unknown_genetic_code_fails(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', SINGLE)
        outdir = tmp_path / 'out'
        result = runner.invoke(cli, ['freq', fasta, '--genetic-code', '7',
                                     '--outdir', str(outdir), '--quiet'])
        assert result.exit_code == 1
        assert 'Unknown NCBI genetic code 7' in (outdir / LOG_FILE).read_text()


class TestScore:

    def test_score_against_own_frequencies(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', SINGLE)
        freq_dir = tmp_path / 'freq'
        runner.invoke(cli, ['freq', fasta, '--outdir', str(freq_dir), '--quiet'])

        score_dir = tmp_path / 'score'
        result = runner.invoke(cli, [
            'score', fasta,
            '--icu-table', str(freq_dir / FREQUENCY_OUTPUTS['icu']),
            '--cc-table', str(freq_dir / FREQUENCY_OUTPUTS['cc']),
            '--outdir', str(score_dir), '--quiet',
        ])
        assert result.exit_code == 0, result.output

        scores = pd.read_csv(score_dir / SCORES_FILE, sep='\t')
        assert list(scores.columns) == SCORE_COLUMNS
        assert len(scores) == 1
        # frequencies were rounded to six decimals on the way through the files
        assert scores['ICU score'][0] == pytest.approx(0.0, abs=1e-5)
        assert scores['CC score'][0] == pytest.approx(0.0, abs=1e-5)
        # off-frame TGA at offset 1
        assert scores['Hidden'][0] == 1

    def test_optional_files(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', FASTA)
        icu = write_file('count_icu.txt', 'ATG\t1.0\n')
        cc = write_file('count_cc.txt', 'ATGAAA\t1.0\n')
        exclusion = write_file('exclusion_seq.txt', 'AA\n')
        repeats = write_file('repeat_numbers.txt', '1:2\n')
        outdir = tmp_path / 'score'

        result = runner.invoke(cli, [
            'score', fasta, '--icu-table', icu, '--cc-table', cc,
            '--exclusion-file', exclusion, '--repeat-file', repeats,
            '--outdir', str(outdir), '--quiet',
        ])
        assert result.exit_code == 0, result.output

        scores = pd.read_csv(outdir / SCORES_FILE, sep='\t')
        assert len(scores) == 2
        assert scores['Excluseq'][0] == 7
        assert scores['Repeat'][0] == 11

    def test_missing_reference_tables_fail(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', FASTA)
        result = runner.invoke(cli, ['score', fasta, '--outdir', str(tmp_path / 'o'), '--quiet'])
        assert result.exit_code == 1


class TestConfigCommands:

    def test_create_and_validate(self, runner, tmp_path):
        config_path = tmp_path / 'config.yaml'
        result = runner.invoke(cli, ['create-config', '--output', str(config_path)])
        assert result.exit_code == 0
        config = yaml.safe_load(config_path.read_text())
        assert config['icu_table'] == 'count_icu.txt'

        result = runner.invoke(cli, ['validate-config', str(config_path), '--mode', 'score'])
        assert result.exit_code == 0
        assert 'Missing file paths' in result.output

    def test_score_from_config(self, runner, write_file, tmp_path):
        fasta = write_file('genes.fasta', SINGLE)
        write_file('count_icu.txt', 'ATG\t1.0\n')
        write_file('count_cc.txt', 'ATGAAA\t1.0\n')
        config = write_file('config.yaml', 'icu_table: count_icu.txt\n'
                                           'cc_table: count_cc.txt\n'
                                           'output_dir: results\n')

        result = runner.invoke(cli, ['score', fasta, '--config', config, '--quiet'])
        assert result.exit_code == 0, result.output
        assert os.path.exists(tmp_path / 'results' / SCORES_FILE)

    def test_invalid_config(self, runner, write_file):
        config = write_file('config.yaml', 'icu_table: [1, 2]\n')
        result = runner.invoke(cli, ['validate-config', config])
        assert result.exit_code == 1
