"""
StrandSplit v0.1.0

Configuration schema for StrandSplit.

Defines all available configuration parameters with defaults and validation.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
from typing import Dict, Any, Optional, List
from pathlib import Path
import yaml


VALID_BACKENDS = ['biopython', 'seqtk']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
TEMPLATES = ['default', 'paf', 'strict', 'seqtk']


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Alignment Records
    # ========================================================================
    'records': {
        'read_id_column': 1,  # PAF qname
        'strand_column': 5,  # PAF strand
        'strict': False,  # Abort on first malformed record
        'comment_prefix': '#',
    },

    # ========================================================================
    # Strand Classification
    # ========================================================================
    'classification': {
        'workers': 1,  # >1 enables chunked parallel accumulation
        'chunk_size': 100000,  # Record lines per chunk
    },

    # ========================================================================
    # Sequence Extraction / Reverse Complement
    # ========================================================================
    'extraction': {
        'backend': 'biopython',  # 'biopython', 'seqtk'
        'seqtk_dir': None,  # Directory containing seqtk (None = PATH)
        'tmp_dir': None,  # Scratch space for seqtk (None = system default)
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'prefix': 'sample',
        'format': None,  # 'fastq', 'fasta' (None = same as input)
        'compress': True,  # gzip final output
        'rename': True,  # Rename merged reads to <prefix>_<n>
        'keep_id_lists': False,  # Keep Forward/Reverse/Ambiguous ID lists
        'report_unmapped': True,  # Log count of reads without alignment records

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': 'strandsplit.log',
        },
    },
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                user_config = yaml.safe_load(f)

            # Deep merge user config into defaults
            if user_config:
                config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'paf', 'strict', 'seqtk')
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template '{template}'. Must be one of: {', '.join(TEMPLATES)}")

    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'paf':
        config['records']['read_id_column'] = 1
        config['records']['strand_column'] = 5

    elif template == 'strict':
        config['records']['strict'] = True
        config['output']['keep_id_lists'] = True

    elif template == 'seqtk':
        config['extraction']['backend'] = 'seqtk'
        config['classification']['workers'] = 4

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    # Validate record columns
    records = config.get('records', {})
    columns = {}
    for key in ('read_id_column', 'strand_column'):
        value = records.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            errors.append(f"records.{key} must be a positive integer, got {value!r}")
        else:
            columns[key] = value
    if len(columns) == 2 and columns['read_id_column'] == columns['strand_column']:
        errors.append("records.read_id_column and records.strand_column must differ")

    # Validate classification settings
    classification = config.get('classification', {})
    for key in ('workers', 'chunk_size'):
        value = classification.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            errors.append(f"classification.{key} must be a positive integer, got {value!r}")

    # Validate extraction backend
    extraction = config.get('extraction', {})
    backend = extraction.get('backend')
    if backend not in VALID_BACKENDS:
        errors.append(f"Invalid extraction backend: {backend} (must be one of {', '.join(VALID_BACKENDS)})")

    seqtk_dir = extraction.get('seqtk_dir')
    if seqtk_dir and not Path(seqtk_dir).is_dir():
        errors.append(f"seqtk directory not found: {seqtk_dir}")

    # Validate output
    output = config.get('output', {})
    if not output.get('prefix'):
        errors.append("output.prefix must be a non-empty string")

    out_format = output.get('format')
    if out_format not in (None, 'fastq', 'fasta'):
        errors.append(f"Invalid output format: {out_format} (must be fastq or fasta)")

    level = output.get('logging', {}).get('level', 'INFO')
    if level not in VALID_LOG_LEVELS:
        errors.append(f"Invalid logging level: {level}")

    return errors
