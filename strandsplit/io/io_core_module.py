#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Core I/O module for StrandSplit.

Consolidated module containing:
- File utilities with automatic gzip detection
- Sequence file format detection
- FASTQ/FASTA loading and writing through Biopython SeqIO
- Post-merge read renaming

Record-level sequence handling is delegated to Biopython; this module only
moves SeqRecord objects between files and the reorientation engine.
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import gzip
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from Bio import SeqIO
from Bio.SeqRecord import SeqRecord

logger = logging.getLogger(__name__)

FASTQ_SUFFIXES = ('.fastq', '.fq')
FASTA_SUFFIXES = ('.fasta', '.fa', '.fna', '.fas')


# =============================================================================
# SECTION 2: FILE UTILITIES
# =============================================================================
# Helper functions for file handling with automatic gzip detection

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """
    Check if file is gzip compressed.

    Args:
        filepath: Path to file

    Returns:
        True if file is gzipped
    """
    filepath = Path(filepath)
    return filepath.suffix in ('.gz', '.gzip')


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.

    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')

    Returns:
        File handle
    """
    filepath = Path(filepath)

    if is_gzipped(filepath):
        if 'r' in mode:
            return gzip.open(filepath, 'rt')
        else:
            return gzip.open(filepath, 'wt')
    else:
        return open(filepath, mode)


def detect_sequence_format(filepath: Union[str, Path]) -> str:
    """
    Infer 'fastq' or 'fasta' from a file name, ignoring a gzip suffix.

    Args:
        filepath: Path to sequence file

    Returns:
        Biopython SeqIO format name

    Raises:
        ValueError: If the extension is not a known FASTQ/FASTA extension
    """
    filepath = Path(filepath)
    suffixes = [s.lower() for s in filepath.suffixes]
    if suffixes and suffixes[-1] in ('.gz', '.gzip'):
        suffixes = suffixes[:-1]

    if suffixes and suffixes[-1] in FASTQ_SUFFIXES:
        return 'fastq'
    if suffixes and suffixes[-1] in FASTA_SUFFIXES:
        return 'fasta'

    raise ValueError(
        f"Cannot infer sequence format from {filepath.name}; "
        f"expected one of {FASTQ_SUFFIXES + FASTA_SUFFIXES} (optionally .gz)"
    )


# =============================================================================
# SECTION 3: SEQUENCE FILE I/O
# =============================================================================

def iter_sequences(
    filepath: Union[str, Path],
    file_format: Optional[str] = None
) -> Iterator[SeqRecord]:
    """
    Stream SeqRecord objects from a FASTQ/FASTA file.

    Args:
        filepath: Path to sequence file (can be gzipped)
        file_format: 'fastq' or 'fasta' (None = infer from extension)

    Yields:
        Bio.SeqRecord.SeqRecord objects in file order
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Sequence file not found: {filepath}")

    file_format = file_format or detect_sequence_format(filepath)

    with open_file(filepath, 'r') as handle:
        yield from SeqIO.parse(handle, file_format)


def load_sequences(
    filepath: Union[str, Path],
    file_format: Optional[str] = None
) -> List[SeqRecord]:
    """Load all records of a FASTQ/FASTA file into memory."""
    return list(iter_sequences(filepath, file_format))


def read_ids_in_file(
    filepath: Union[str, Path],
    file_format: Optional[str] = None
) -> List[str]:
    """
    List read IDs in file order.

    Args:
        filepath: Path to sequence file (can be gzipped)
        file_format: 'fastq' or 'fasta' (None = infer from extension)

    Returns:
        Read IDs
    """
    return [record.id for record in iter_sequences(filepath, file_format)]


def write_sequences(
    records: Iterable[SeqRecord],
    filepath: Union[str, Path],
    file_format: Optional[str] = None,
    compress: bool = False
) -> int:
    """
    Write SeqRecord objects to a FASTQ/FASTA file.

    Args:
        records: Iterable of SeqRecord objects
        filepath: Output file path
        file_format: 'fastq' or 'fasta' (None = infer from extension)
        compress: Whether to gzip compress output

    Returns:
        Number of records written
    """
    filepath = Path(filepath)

    # Add .gz extension if compressing
    if compress and not is_gzipped(filepath):
        filepath = Path(str(filepath) + '.gz')

    # Create output directory if needed
    filepath.parent.mkdir(parents=True, exist_ok=True)

    file_format = file_format or detect_sequence_format(filepath)

    with open_file(filepath, 'w') as handle:
        count = SeqIO.write(records, handle, file_format)

    logger.debug(f"Wrote {count:,} records to {filepath}")
    return count


# =============================================================================
# SECTION 4: READ RENAMING
# =============================================================================

def rename_reads(records: Iterable[SeqRecord], prefix: str, start: int = 0) -> List[SeqRecord]:
    """
    Assign sequential IDs <prefix>_<n> by position.

    Must be applied to the full merged stream so that IDs come from one
    monotonically increasing counter. Input records are not modified.

    Args:
        records: Records in output order
        prefix: ID prefix
        start: First index

    Returns:
        New SeqRecord objects with renamed IDs and empty descriptions
    """
    renamed = []
    for index, record in enumerate(records, start=start):
        new_id = f"{prefix}_{index}"
        copy = record[:]
        copy.id = new_id
        copy.name = new_id
        copy.description = ""
        renamed.append(copy)
    return renamed


__all__ = [
    'FASTQ_SUFFIXES',
    'FASTA_SUFFIXES',
    'is_gzipped',
    'open_file',
    'detect_sequence_format',
    'iter_sequences',
    'load_sequences',
    'read_ids_in_file',
    'write_sequences',
    'rename_reads',
]
