#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Tests for configuration loading and validation.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import copy

import pytest
import yaml

from strandsplit.config import (
    DEFAULT_CONFIG,
    ConfigParser,
    ConfigValidationError,
    load_config,
    save_config_template,
    validate_config,
)
from strandsplit.config.schema import TEMPLATES


class TestSchema:
    """Test defaults, templates and validation."""

    def test_defaults_are_valid(self):
        assert validate_config(DEFAULT_CONFIG) == []

    def test_default_columns_are_paf(self):
        assert DEFAULT_CONFIG['records']['read_id_column'] == 1
        assert DEFAULT_CONFIG['records']['strand_column'] == 5

    @pytest.mark.parametrize("template", TEMPLATES)
    def test_templates_load_and_validate(self, temp_output_dir, template):
        path = temp_output_dir / f"{template}.yaml"

        save_config_template(path, template=template)
        config = load_config(path)

        assert validate_config(config) == []

    def test_strict_template(self, temp_output_dir):
        path = temp_output_dir / "strict.yaml"
        save_config_template(path, template='strict')

        config = load_config(path)

        assert config['records']['strict'] is True
        assert config['output']['keep_id_lists'] is True

    def test_unknown_template(self, temp_output_dir):
        with pytest.raises(ValueError):
            save_config_template(temp_output_dir / "x.yaml", template='nanopore')

    def test_load_config_without_file(self):
        config = load_config()
        config['records']['strict'] = True

        assert DEFAULT_CONFIG['records']['strict'] is False

    @pytest.mark.parametrize("section,key,value", [
        ('records', 'read_id_column', 0),
        ('records', 'strand_column', 'five'),
        ('classification', 'workers', 0),
        ('classification', 'chunk_size', True),
        ('extraction', 'backend', 'samtools'),
        ('output', 'prefix', ''),
        ('output', 'format', 'bam'),
    ])
    def test_invalid_values(self, section, key, value):
        config = copy.deepcopy(DEFAULT_CONFIG)
        config[section][key] = value

        errors = validate_config(config)

        assert len(errors) == 1

    def test_equal_columns(self):
        config = copy.deepcopy(DEFAULT_CONFIG)
        config['records']['strand_column'] = 1

        assert any("must differ" in e for e in validate_config(config))

    def test_invalid_log_level(self):
        config = copy.deepcopy(DEFAULT_CONFIG)
        config['output']['logging']['level'] = 'VERBOSE'

        assert validate_config(config) == ["Invalid logging level: VERBOSE"]


class TestConfigParser:
    """Test YAML loading, env substitution and overrides."""

    def test_defaults_without_file(self):
        parser = ConfigParser()

        assert parser.get('extraction.backend') == 'biopython'
        assert parser.validate()

    def test_user_values_override_defaults(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text(yaml.dump({'records': {'strict': True}}))

        parser = ConfigParser(path)

        assert parser.get('records.strict') is True
        assert parser.get('records.strand_column') == 5

    def test_env_substitution(self, temp_output_dir, monkeypatch):
        monkeypatch.setenv('STRANDSPLIT_TEST_PREFIX', 'run42')
        path = temp_output_dir / "config.yaml"
        path.write_text(
            "output:\n"
            "  prefix: ${STRANDSPLIT_TEST_PREFIX}\n"
            "extraction:\n"
            "  tmp_dir: ${STRANDSPLIT_TEST_UNSET:-/tmp/scratch}\n"
        )

        parser = ConfigParser(path)

        assert parser.get('output.prefix') == 'run42'
        assert parser.get('extraction.tmp_dir') == '/tmp/scratch'

    def test_env_substitution_keeps_scalar_types(self, temp_output_dir, monkeypatch):
        """A whole-value placeholder is typed like a YAML scalar."""
        monkeypatch.delenv('STRANDSPLIT_TEST_COL', raising=False)
        monkeypatch.setenv('STRANDSPLIT_TEST_STRICT', 'true')
        path = temp_output_dir / "config.yaml"
        path.write_text(
            "records:\n"
            "  strand_column: ${STRANDSPLIT_TEST_COL:-6}\n"
            "  strict: ${STRANDSPLIT_TEST_STRICT}\n"
            "output:\n"
            "  prefix: run_${STRANDSPLIT_TEST_COL:-6}\n"
        )

        parser = ConfigParser(path)

        assert parser.get('records.strand_column') == 6
        assert parser.get('records.strict') is True
        assert parser.get('output.prefix') == 'run_6'
        assert parser.validate()

    def test_cli_overrides_skip_none(self):
        parser = ConfigParser()

        parser.merge_cli_overrides({
            'records.strict': True,
            'extraction.backend': None,
            'runtime.reads': 'reads.fq',
        })

        assert parser.get('records.strict') is True
        assert parser.get('extraction.backend') == 'biopython'
        assert parser.get('runtime.reads') == 'reads.fq'

    def test_get_default(self):
        assert ConfigParser().get('output.missing.key', 'fallback') == 'fallback'

    def test_to_dict_is_a_copy(self):
        parser = ConfigParser()
        config = parser.to_dict()
        config['output']['prefix'] = 'changed'

        assert parser.get('output.prefix') == 'sample'

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            ConfigParser(temp_output_dir / "missing.yaml")

    def test_invalid_yaml(self, temp_output_dir):
        path = temp_output_dir / "bad.yaml"
        path.write_text("records: [unclosed\n")

        with pytest.raises(ConfigValidationError):
            ConfigParser(path)

    def test_non_mapping(self, temp_output_dir):
        path = temp_output_dir / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigValidationError):
            ConfigParser(path)

    def test_validate_raises(self):
        parser = ConfigParser()
        parser.merge_cli_overrides({'classification.workers': -1})

        with pytest.raises(ConfigValidationError, match="workers"):
            parser.validate()

# StrandSplit v0.1.0
# Any usage is subject to this software's license.
