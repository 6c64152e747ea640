"""
StrandSplit v0.1.0

Configuration management for StrandSplit.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .parser import ConfigParser, ConfigValidationError
from .schema import DEFAULT_CONFIG, load_config, save_config_template, validate_config

__all__ = [
    "ConfigParser",
    "ConfigValidationError",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config_template",
    "validate_config",
]
