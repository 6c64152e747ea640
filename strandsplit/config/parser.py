#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Configuration parser - YAML config loading, merging, and validation.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy
import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .schema import DEFAULT_CONFIG, _deep_merge, validate_config


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigParser:
    """
    Parse and validate StrandSplit configuration files.

    Features:
    - Load YAML configuration files
    - Merge with default values
    - Environment variable substitution (${VAR} and ${VAR:-default})
    - CLI parameter overrides
    - Schema validation
    - Dotted notation access (e.g., config.get('records.strand_column'))
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration parser.

        Args:
            config_file: Path to YAML configuration file (optional)
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)

        # Load user configuration if provided
        if self.config_file:
            self._load_user_config()

    def _load_user_config(self):
        """Load and merge user configuration file."""
        if not self.config_file.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_file}"
            )

        try:
            with open(self.config_file, 'r') as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Invalid YAML in config file {self.config_file}: {e}"
            )

        if user_config is None:
            return
        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {self.config_file} must contain a mapping at the top level"
            )

        # User values override defaults
        self._config = _deep_merge(self._config, user_config)
        self._config = self._substitute_env_vars(self._config)

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports:
        - ${VAR}: Replace with environment variable VAR
        - ${VAR:-default}: Replace with VAR, or 'default' if not set

        A value that is a single placeholder is parsed as a YAML scalar after
        substitution, so '${COL:-5}' yields the integer 5 and '${FLAG:-true}'
        a boolean. Placeholders embedded in longer text stay strings.

        Args:
            config: Configuration value (can be dict, list, or string)

        Returns:
            Configuration with substituted values
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}

        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]

        elif isinstance(config, str):
            # Pattern: ${VAR} or ${VAR:-default}
            pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

            def replace_var(match):
                var_name = match.group(1)
                default_value = match.group(2)
                return os.environ.get(var_name, default_value or '')

            substituted = re.sub(pattern, replace_var, config)
            if substituted and re.fullmatch(pattern, config.strip()):
                try:
                    return yaml.safe_load(substituted)
                except yaml.YAMLError:
                    return substituted
            return substituted

        else:
            return config

    def merge_cli_overrides(self, overrides: Dict[str, Any]):
        """
        Merge command-line overrides into configuration.

        None values are ignored so unset CLI options keep the file/default value.

        Args:
            overrides: Dictionary of override values
                      Keys can use dotted notation (e.g., 'records.strict')
        """
        for key, value in overrides.items():
            if value is None:
                continue

            keys = key.split('.')

            target = self._config
            for k in keys[:-1]:
                if k not in target or not isinstance(target[k], dict):
                    target[k] = {}
                target = target[k]

            target[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Supports dotted notation for nested access.

        Args:
            key: Configuration key (e.g., 'output.logging.level')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def to_dict(self) -> Dict[str, Any]:
        """
        Export configuration as dictionary.

        Returns:
            Complete configuration dictionary (deep copy)
        """
        return copy.deepcopy(self._config)

    def validate(self) -> bool:
        """
        Validate configuration.

        Returns:
            True if valid

        Raises:
            ConfigValidationError: If validation fails
        """
        errors = validate_config(self._config)
        if errors:
            raise ConfigValidationError(
                "Invalid configuration:\n  " + "\n  ".join(errors)
            )
        return True

    def __repr__(self) -> str:
        """String representation."""
        return f"ConfigParser(config_file={self.config_file})"

# StrandSplit v0.1.0
# Any usage is subject to this software's license.
