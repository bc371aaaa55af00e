"""
Configuration loader utility module.
"""

import os
import yaml
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)

PATH_KEYS = ['trans_table', 'icu_table', 'cc_table', 'exclusion_file',
             'repeat_file', 'output_dir']

REQUIRED_KEYS = {
    'freq': [],
    'score': ['icu_table', 'cc_table'],
}


def load_config(config_path: str, mode: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file
        mode: 'freq' or 'score' to also check mode-specific keys

    Returns:
        Dictionary with configuration data
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        validate_config(config, mode)

        logger.info("Configuration loaded successfully")
        return config

    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML configuration: {e}")
        raise


def validate_config(config: Dict[str, Any], mode: Optional[str] = None) -> None:
    """
    Validate configuration structure and required fields.

    Args:
        config: Configuration dictionary
        mode: 'freq' or 'score' to check the keys that mode needs

    Raises:
        ValueError: If configuration is invalid
    """
    logger.debug("Validating configuration")

    if not isinstance(config, dict):
        raise ValueError("Configuration must be a mapping")

    for key in PATH_KEYS:
        value = config.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Configuration key {key} must be a path string")

    if 'genetic_code' in config and config['genetic_code'] is not None:
        try:
            code = int(config['genetic_code'])
        except (ValueError, TypeError):
            raise ValueError(f"genetic_code must be an integer: {config['genetic_code']!r}")
        if code < 1:
            raise ValueError("genetic_code must be a positive NCBI table ID")

    if mode is not None:
        if mode not in REQUIRED_KEYS:
            raise ValueError(f"Unknown mode: {mode}")
        for key in REQUIRED_KEYS[mode]:
            if not config.get(key):
                raise ValueError(f"Missing required configuration key for {mode}: {key}")

    logger.debug("Configuration validation passed")


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration template.

    Returns:
        Dictionary with default configuration
    """
    return {
        'trans_table': 'trans_table.txt',
        'genetic_code': 1,
        'icu_table': 'count_icu.txt',
        'cc_table': 'count_cc.txt',
        'exclusion_file': 'exclusion_seq.txt',
        'repeat_file': 'repeat_numbers.txt',
        'output_dir': 'results'
    }


def save_config(config: Dict[str, Any], output_path: str) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        output_path: Path to save configuration
    """
    logger.info(f"Saving configuration to {output_path}")

    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, indent=2)

    logger.info("Configuration saved successfully")


def expand_paths(config: Dict[str, Any], base_dir: str = '.') -> Dict[str, Any]:
    """
    Expand relative paths in configuration to absolute paths.

    Args:
        config: Configuration dictionary
        base_dir: Base directory for relative paths

    Returns:
        Configuration with expanded paths
    """
    expanded = config.copy()

    for key in PATH_KEYS:
        if expanded.get(key):
            expanded[key] = os.path.abspath(os.path.join(base_dir, expanded[key]))

    return expanded


def override_config(config: Dict[str, Any], **options: Any) -> Dict[str, Any]:
    """Return a copy of ``config`` with every option that is not None applied."""
    merged = config.copy()
    for key, value in options.items():
        if value is not None:
            merged[key] = value
    return merged


def create_example_config(output_path: str) -> None:
    """
    Create an example configuration file.

    Args:
        output_path: Path to save example configuration
    """
    logger.info(f"Creating example configuration at {output_path}")
    save_config(get_default_config(), output_path)


def validate_file_paths(config: Dict[str, Any]) -> List[str]:
    """
    Validate that the required input files in configuration exist.

    Optional inputs (exclusion and repeat files) are not reported.

    Args:
        config: Configuration dictionary

    Returns:
        List of missing file paths
    """
    missing_paths = []

    for key in ['trans_table', 'icu_table', 'cc_table']:
        path = config.get(key)
        if path and not os.path.exists(path):
            missing_paths.append(path)

    if missing_paths:
        logger.warning(f"Missing file paths: {missing_paths}")
    else:
        logger.info("All file paths validated successfully")

    return missing_paths
