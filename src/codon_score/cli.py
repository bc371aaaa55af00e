"""
Command-line interface for the codon usage scoring tools.
"""

import os
import sys
import logging
from typing import Any, Dict, Optional
import click
import pandas as pd

from .utils.config_loader import (load_config, expand_paths, override_config,
                                  validate_config, validate_file_paths,
                                  create_example_config)
from .utils.file_utils import ensure_directory, save_dataframe, save_mapping
from .parsers.fasta_parser import iter_finalized
from .parsers.table_parser import (load_translation_table, load_icu_table, load_cc_table,
                                   load_exclusion_sequences, load_repeat_spec)
from .tables.translation import TranslationTable
from .analysis.counting import CodonCounter, COUNT_TABLES, count_sequences
from .analysis.frequency import FrequencyModel
from .analysis.scoring import ScoringEngine, SCORE_COLUMNS

logger = logging.getLogger(__name__)

FREQUENCY_OUTPUTS = {
    'codon': 'count_codon.txt',
    'codon_pair': 'count_codonp.txt',
    'aa': 'count_aa.txt',
    'aa_pair': 'count_aap.txt',
    'icu': 'count_icu.txt',
    'cc': 'count_cc.txt',
}
SCORES_FILE = 'scores.txt'
LOG_FILE = 'codon_score.log'


def _setup_logging(log_file: Optional[str], verbose: bool = False, quiet: bool = False) -> None:
    """Set up logging to the console and, if given, a log file."""

    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.INFO
    root_logger.setLevel(log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        ensure_directory(os.path.dirname(log_file))
        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(f"Logging configured - console and file: {log_file}")


def load_table(config: Dict[str, Any]) -> TranslationTable:
    """Load the configured translation table, or an NCBI genetic code if none is set."""
    if config.get('trans_table'):
        return load_translation_table(config['trans_table'])
    return TranslationTable.standard(int(config.get('genetic_code') or 1))


def compute_frequencies(fasta_file: str,
                        table: TranslationTable,
                        output_dir: str) -> FrequencyModel:
    """
    Count a FASTA file and write the count and frequency tables.

    Args:
        fasta_file: Input FASTA file
        table: Translation table
        output_dir: Directory receiving the six output tables

    Returns:
        FrequencyModel derived from the counts
    """
    counter = count_sequences(iter_finalized(fasta_file, table), table)
    model = FrequencyModel.from_counter(counter)
    write_frequency_tables(counter, model, output_dir)
    return model


def write_frequency_tables(counter: CodonCounter,
                           model: FrequencyModel,
                           output_dir: str) -> None:
    """Write the four count tables and the ICU and CC tables."""
    ensure_directory(output_dir)

    for kind in COUNT_TABLES:
        save_dataframe(counter.to_dataframe(kind),
                       os.path.join(output_dir, FREQUENCY_OUTPUTS[kind]), header=False)

    save_mapping(model.icu, os.path.join(output_dir, FREQUENCY_OUTPUTS['icu']),
                 ('codon', 'frequency'))
    save_mapping(model.cc, os.path.join(output_dir, FREQUENCY_OUTPUTS['cc']),
                 ('codon_pair', 'frequency'))


def build_engine(config: Dict[str, Any], table: TranslationTable) -> ScoringEngine:
    """Load the reference tables and optional motif files into a scoring engine."""
    model = FrequencyModel.from_tables(table,
                                       load_icu_table(config['icu_table']),
                                       load_cc_table(config['cc_table']))
    exclusions = load_exclusion_sequences(config.get('exclusion_file'))
    repeat_spec = load_repeat_spec(config.get('repeat_file'))
    return ScoringEngine(model, exclusions, repeat_spec)


def score_fasta(fasta_file: str,
                engine: ScoringEngine,
                output_path: Optional[str] = None) -> pd.DataFrame:
    """
    Score every usable record of a FASTA file.

    Args:
        fasta_file: Input FASTA file
        engine: Scoring engine holding the reference model
        output_path: Where to write the score table, if given

    Returns:
        DataFrame with one row per scored sequence
    """
    rows = [engine.score(record).as_row()
            for record in iter_finalized(fasta_file, engine.table)]
    scores_df = pd.DataFrame(rows, columns=SCORE_COLUMNS)

    logger.info(f"Scored {len(scores_df)} sequences")

    if output_path:
        save_dataframe(scores_df, output_path)
    return scores_df


def _resolve_config(config: Optional[str], mode: str, **options: Any) -> Dict[str, Any]:
    if config:
        config_data = expand_paths(load_config(config), os.path.dirname(os.path.abspath(config)))
    else:
        config_data = {}
    config_data = override_config(config_data, **options)
    config_data.setdefault('output_dir', 'results')
    validate_config(config_data, mode)
    return config_data


def _common_options(func):
    options = [
        click.option('--config', type=click.Path(exists=True), help='Path to YAML config file'),
        click.option('--trans-table', type=click.Path(), help='Codon translation table (tab-separated)'),
        click.option('--genetic-code', type=click.IntRange(1, 33),
                     help='NCBI genetic code used when no translation table is given'),
        click.option('--outdir', type=click.Path(), help='Output directory (overrides config)'),
        click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging'),
        click.option('--quiet', '-q', is_flag=True, help='Enable quiet mode (errors only)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.command()
@click.argument('fasta_file', type=click.Path(exists=True))
@_common_options
def freq(fasta_file: str,
         config: Optional[str],
         trans_table: Optional[str],
         genetic_code: Optional[int],
         outdir: Optional[str],
         verbose: bool,
         quiet: bool) -> None:
    """Compute codon, pair and amino acid counts with ICU and CC frequencies."""
    try:
        config_data = _resolve_config(config, 'freq', trans_table=trans_table,
                                      genetic_code=genetic_code, output_dir=outdir)
        _setup_logging(os.path.join(config_data['output_dir'], LOG_FILE), verbose, quiet)

        table = load_table(config_data)
        compute_frequencies(fasta_file, table, config_data['output_dir'])
        logger.info(f"Frequency tables written to {config_data['output_dir']}")

    except Exception as e:
        logger.error(f"Frequency computation failed: {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@click.command()
@click.argument('fasta_file', type=click.Path(exists=True))
@_common_options
@click.option('--icu-table', type=click.Path(), help='Host ICU frequency table')
@click.option('--cc-table', type=click.Path(), help='Host CC frequency table')
@click.option('--exclusion-file', type=click.Path(), help='Exclusion sequences (optional)')
@click.option('--repeat-file', type=click.Path(), help='Repeat specification (optional)')
def score(fasta_file: str,
          config: Optional[str],
          trans_table: Optional[str],
          genetic_code: Optional[int],
          outdir: Optional[str],
          verbose: bool,
          quiet: bool,
          icu_table: Optional[str],
          cc_table: Optional[str],
          exclusion_file: Optional[str],
          repeat_file: Optional[str]) -> None:
    """Score sequences against a host's ICU and CC tables."""
    try:
        config_data = _resolve_config(config, 'score', trans_table=trans_table,
                                      genetic_code=genetic_code, output_dir=outdir,
                                      icu_table=icu_table, cc_table=cc_table,
                                      exclusion_file=exclusion_file, repeat_file=repeat_file)
        _setup_logging(os.path.join(config_data['output_dir'], LOG_FILE), verbose, quiet)

        table = load_table(config_data)
        engine = build_engine(config_data, table)
        output_path = os.path.join(config_data['output_dir'], SCORES_FILE)
        score_fasta(fasta_file, engine, output_path)
        logger.info(f"Scores written to {output_path}")

    except Exception as e:
        logger.error(f"Scoring failed: {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@click.command()
@click.option('--output', '-o',
              type=click.Path(),
              default='config/codon_score.yaml',
              help='Output path for example configuration')
def create_config(output: str) -> None:
    """Create an example configuration file."""
    create_example_config(output)
    click.echo(f"Example configuration written to {output}")


@click.command()
@click.argument('config_path', type=click.Path(exists=True))
@click.option('--mode', type=click.Choice(['freq', 'score']), help='Also check keys needed by this mode')
def validate_config_cmd(config_path: str, mode: Optional[str]) -> None:
    """Validate a configuration file."""
    try:
        config = expand_paths(load_config(config_path, mode),
                              os.path.dirname(os.path.abspath(config_path)))
    except Exception as e:
        click.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(1)

    missing_paths = validate_file_paths(config)
    if missing_paths:
        click.echo(f"Missing file paths: {', '.join(missing_paths)}")
    else:
        click.echo("Configuration is valid")


@click.group()
def cli():
    """Codon usage scoring CLI."""
    pass


cli.add_command(freq, name='freq')
cli.add_command(score, name='score')
cli.add_command(create_config, name='create-config')
cli.add_command(validate_config_cmd, name='validate-config')


if __name__ == '__main__':
    cli()
