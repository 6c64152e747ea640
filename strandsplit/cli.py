#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for StrandSplit.

This module provides the main CLI entry point and all subcommands for
classifying mixed-orientation long reads by alignment strand and writing a
single forward-oriented read set.
"""

import logging
import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.parser import ConfigParser, ConfigValidationError
from .config.schema import TEMPLATES, VALID_BACKENDS, save_config_template, validate_config
from .orientation.errors import StrandSplitError


def _log_level(ctx) -> str:
    if ctx.obj.get('VERBOSE'):
        return 'DEBUG'
    if ctx.obj.get('QUIET'):
        return 'WARNING'
    return 'INFO'


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    StrandSplit: strand-aware reorientation of mixed-orientation long reads

    Splits reads by the strand of their alignments to a reference, drops
    reads aligned to both strands, and writes forward reads followed by
    reverse-complemented reverse reads.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='strandsplit_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(TEMPLATES), default='default',
              help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
        click.echo(f"✓ Configuration file created: {output}")
    except (OSError, ValueError) as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        parser = ConfigParser(config_file)
        config = parser.to_dict()
    except (ConfigValidationError, OSError) as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")
    click.echo("\nKey Settings:")
    click.echo(f"  Record columns: read ID={parser.get('records.read_id_column')}, "
               f"strand={parser.get('records.strand_column')}")
    click.echo(f"  Strict records: {parser.get('records.strict')}")
    click.echo(f"  Extraction backend: {parser.get('extraction.backend')}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        parser = ConfigParser(config_file)
        config = parser.to_dict()
    except (ConfigValidationError, OSError) as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)

    click.echo("\nRecords:")
    click.echo(f"  Read ID column: {parser.get('records.read_id_column')}")
    click.echo(f"  Strand column: {parser.get('records.strand_column')}")
    click.echo(f"  Strict: {parser.get('records.strict')}")

    click.echo("\nClassification:")
    click.echo(f"  Workers: {parser.get('classification.workers')}")
    click.echo(f"  Chunk size: {parser.get('classification.chunk_size'):,}")

    click.echo("\nExtraction:")
    click.echo(f"  Backend: {parser.get('extraction.backend')}")
    if parser.get('extraction.seqtk_dir'):
        click.echo(f"  seqtk dir: {parser.get('extraction.seqtk_dir')}")

    click.echo("\nOutput:")
    click.echo(f"  Prefix: {parser.get('output.prefix')}")
    click.echo(f"  Compress: {parser.get('output.compress')}")
    click.echo(f"  Rename reads: {parser.get('output.rename')}")
    click.echo(f"  Keep ID lists: {parser.get('output.keep_id_lists')}")


# ============================================================================
# Classification
# ============================================================================

@main.command()
@click.option('--alignments', '-a', required=True, type=click.Path(exists=True),
              help='Alignment records (PAF or other tab-separated, can be gzipped)')
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output directory for read ID lists')
@click.option('--prefix', '-p', required=True, help='Prefix for output files')
@click.option('--read-id-column', type=int, default=1, show_default=True,
              help='1-based column holding the read ID')
@click.option('--strand-column', type=int, default=5, show_default=True,
              help='1-based column holding the strand (+/-)')
@click.option('--strict', is_flag=True, help='Abort on the first malformed record')
@click.option('--workers', '-t', type=int, default=1, show_default=True,
              help='Worker processes for chunked classification')
@click.option('--chunk-size', type=int, default=100000, show_default=True,
              help='Record lines per chunk when --workers > 1')
@click.pass_context
def classify(ctx, alignments, output, prefix, read_id_column, strand_column,
             strict, workers, chunk_size):
    """
    Split read IDs by alignment strand.

    Writes <prefix>.ForwardReads.txt, <prefix>.ReverseReads.txt and
    <prefix>.AmbiguousReads.txt. Reads aligned to both strands are ambiguous.

    Examples:
        strandsplit classify -a sample.paf -o ids/ -p sample16S
    """
    from .utils.pipeline import classify_alignments

    logging.basicConfig(
        level=getattr(logging, _log_level(ctx)),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        partition, stats = classify_alignments(
            alignments,
            read_id_column=read_id_column,
            strand_column=strand_column,
            strict=strict,
            workers=workers,
            chunk_size=chunk_size,
        )
        written = partition.write_id_lists(Path(output), prefix)
    except (StrandSplitError, ValueError, OSError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    summary = partition.summary()
    click.echo(f"Records: {stats.records:,} ({stats.malformed:,} malformed skipped)")
    click.echo(f"Forward IDs: {summary['forward']:,}")
    click.echo(f"Reverse IDs: {summary['reverse']:,}")
    click.echo(f"Ambiguous IDs excluded: {summary['ambiguous']:,}")
    for path in written.values():
        click.echo(f"✓ {path}")


# ============================================================================
# Reorientation
# ============================================================================

@main.command()
@click.option('--file', '-f', 'reads', required=True, type=click.Path(exists=True),
              help='Reads (FASTQ/FASTA, can be gzipped)')
@click.option('--alignments', '-a', required=True, type=click.Path(exists=True),
              help='Alignment records of the reads against the reference (PAF)')
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output directory (created)')
@click.option('--prefix', '-p', required=True, help='Prefix for output files and renamed reads')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file')
@click.option('--backend', type=click.Choice(VALID_BACKENDS), default=None,
              help='Sequence extraction backend')
@click.option('--seqtk-dir', type=click.Path(), default=None,
              help='Directory containing seqtk (default: PATH)')
@click.option('--read-id-column', type=int, default=None, help='1-based read ID column')
@click.option('--strand-column', type=int, default=None, help='1-based strand column')
@click.option('--strict', is_flag=True, help='Abort on the first malformed record')
@click.option('--workers', '-t', type=int, default=None, help='Worker processes for classification')
@click.option('--no-rename', is_flag=True, help='Keep original read IDs instead of <prefix>_<n>')
@click.option('--no-compress', is_flag=True, help='Write uncompressed output')
@click.option('--keep-id-lists', is_flag=True, help='Keep Forward/Reverse/Ambiguous read ID lists')
@click.option('--force', is_flag=True, help='Allow an existing output directory')
@click.pass_context
def reorient(ctx, reads, alignments, output, prefix, config_file, backend, seqtk_dir,
             read_id_column, strand_column, strict, workers, no_rename, no_compress,
             keep_id_lists, force):
    """
    Reorient reads to the reference strand.

    Forward-strand reads are kept, reverse-strand reads are
    reverse-complemented, reads aligned to both strands are dropped. Output is
    forward reads followed by reverse-complemented reads.

    Examples:
        minimap2 -x map-ont SILVA.fasta reads.fq.gz > sample.paf
        strandsplit reorient -f reads.fq.gz -a sample.paf -o sample.rc -p sample16S
    """
    from .utils.pipeline import ReorientationPipeline

    output_dir = Path(output)
    if output_dir.exists() and not force:
        click.echo(f"❌ Error: Output folder '{output}' already exists. Use --force to proceed.",
                   err=True)
        sys.exit(1)

    try:
        parser = ConfigParser(config_file)
    except (ConfigValidationError, OSError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    parser.merge_cli_overrides({
        'runtime.reads': reads,
        'runtime.alignments': alignments,
        'runtime.output_dir': output,
        'output.prefix': prefix,
        'extraction.backend': backend,
        'extraction.seqtk_dir': seqtk_dir,
        'records.read_id_column': read_id_column,
        'records.strand_column': strand_column,
        'records.strict': True if strict else None,
        'classification.workers': workers,
        'output.rename': False if no_rename else None,
        'output.compress': False if no_compress else None,
        'output.keep_id_lists': True if keep_id_lists else None,
    })
    if ctx.obj.get('VERBOSE') or ctx.obj.get('QUIET'):
        parser.merge_cli_overrides({'output.logging.level': _log_level(ctx)})

    try:
        parser.validate()
    except ConfigValidationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    try:
        pipeline = ReorientationPipeline(parser.to_dict())
        summary = pipeline.run()
    except (StrandSplitError, ValueError, OSError) as e:
        click.echo(f"\n❌ Reorientation failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"Forward reads: {summary['forward']:,}")
    click.echo(f"Reverse-complemented reads: {summary['reverse']:,}")
    click.echo(f"Ambiguous reads excluded: {summary['ambiguous']:,}")
    if summary['unmapped'] is not None:
        click.echo(f"Unmapped reads dropped: {summary['unmapped']:,}")
    click.echo(f"✓ Final output: {summary['output_file']}")


if __name__ == '__main__':
    main()
