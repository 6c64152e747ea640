#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Alignment record reader.

Turns tab-separated alignment lines (PAF by default: query name in column 1,
strand in column 5) into a lazy stream of AlignmentRecord tuples. Malformed
lines are skipped and counted in permissive mode, or abort the stream with
MalformedRecordError in strict mode.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Union

from ..io.io_core_module import open_file
from .data_structures import AlignmentRecord, Strand
from .errors import MalformedRecordError

logger = logging.getLogger(__name__)

# PAF layout: qname (col 1), strand (col 5)
DEFAULT_READ_ID_COLUMN = 1
DEFAULT_STRAND_COLUMN = 5

RecordSource = Union[str, Path, TextIO, Iterable[str]]


@dataclass
class ReaderStats:
    """
    Counters filled in while a record stream is consumed.

    Attributes:
        lines_read: Lines seen, including comments and blank lines
        records: Valid records yielded
        malformed: Lines skipped as malformed (permissive mode)
        malformed_lines: Line numbers of the first malformed lines
    """
    lines_read: int = 0
    records: int = 0
    malformed: int = 0
    malformed_lines: List[int] = field(default_factory=list)

    max_reported: int = 10

    def add_malformed(self, line_number: int):
        self.malformed += 1
        if len(self.malformed_lines) < self.max_reported:
            self.malformed_lines.append(line_number)

    def merge(self, other: 'ReaderStats'):
        """Fold another chunk's counters into this one."""
        self.lines_read += other.lines_read
        self.records += other.records
        self.malformed += other.malformed
        room = self.max_reported - len(self.malformed_lines)
        if room > 0:
            self.malformed_lines.extend(other.malformed_lines[:room])
        self.malformed_lines.sort()


def validate_columns(read_id_column: int, strand_column: int):
    """
    Check that record column positions are usable.

    Raises:
        ValueError: If a column is not a positive integer or both are equal
    """
    for name, column in (('read_id_column', read_id_column), ('strand_column', strand_column)):
        if not isinstance(column, int) or isinstance(column, bool) or column < 1:
            raise ValueError(f"{name} must be a positive 1-based column index, got {column!r}")

    if read_id_column == strand_column:
        raise ValueError(
            f"read_id_column and strand_column must differ (both are {read_id_column})"
        )


def parse_record_line(
    line: str,
    line_number: int,
    read_id_column: int = DEFAULT_READ_ID_COLUMN,
    strand_column: int = DEFAULT_STRAND_COLUMN
) -> AlignmentRecord:
    """
    Parse one tab-separated alignment line.

    Args:
        line: Line content without trailing newline
        line_number: 1-based line number (used in error messages)
        read_id_column: 1-based column holding the read ID
        strand_column: 1-based column holding the strand symbol

    Returns:
        AlignmentRecord for the line

    Raises:
        MalformedRecordError: If a required column is missing, the read ID is
            empty, or the strand symbol is not '+' or '-'
    """
    fields = line.split('\t')
    needed = max(read_id_column, strand_column)

    if len(fields) < needed:
        raise MalformedRecordError(
            line_number, line,
            f"expected at least {needed} tab-separated fields, found {len(fields)}"
        )

    read_id = fields[read_id_column - 1]
    if not read_id:
        raise MalformedRecordError(line_number, line, "empty read ID")

    symbol = fields[strand_column - 1]
    strand = Strand.from_symbol(symbol)
    if strand is None:
        raise MalformedRecordError(
            line_number, line, f"unrecognized strand symbol {symbol!r}"
        )

    return AlignmentRecord(read_id, strand)


def read_alignment_records(
    source: RecordSource,
    read_id_column: int = DEFAULT_READ_ID_COLUMN,
    strand_column: int = DEFAULT_STRAND_COLUMN,
    strict: bool = False,
    comment_prefix: Optional[str] = '#',
    stats: Optional[ReaderStats] = None,
    first_line_number: int = 1
) -> Iterator[AlignmentRecord]:
    """
    Lazily read alignment records.

    Args:
        source: Path to a record file (can be gzipped), an open text handle,
            or any iterable of lines
        read_id_column: 1-based column holding the read ID
        strand_column: 1-based column holding the strand symbol
        strict: Abort on the first malformed line instead of skipping it
        comment_prefix: Lines starting with this prefix are ignored (None disables)
        stats: Optional ReaderStats updated while the stream is consumed
        first_line_number: Line number of the first line in source (for chunks)

    Yields:
        AlignmentRecord objects, in input order

    Raises:
        MalformedRecordError: In strict mode, on the first malformed line

    Examples:
        >>> lines = ["r1\\t100\\t0\\t90\\t+\\tref", "r2\\t100\\t0\\t90\\t-\\tref"]
        >>> [rec.strand.value for rec in read_alignment_records(lines)]
        ['+', '-']
    """
    validate_columns(read_id_column, strand_column)

    if stats is None:
        stats = ReaderStats()

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Alignment record file not found: {path}")
        with open_file(path, 'r') as handle:
            yield from _iter_records(
                handle, read_id_column, strand_column, strict,
                comment_prefix, stats, first_line_number
            )
    else:
        yield from _iter_records(
            source, read_id_column, strand_column, strict,
            comment_prefix, stats, first_line_number
        )


def _iter_records(
    lines: Iterable[str],
    read_id_column: int,
    strand_column: int,
    strict: bool,
    comment_prefix: Optional[str],
    stats: ReaderStats,
    first_line_number: int
) -> Iterator[AlignmentRecord]:
    for line_number, raw in enumerate(lines, start=first_line_number):
        stats.lines_read += 1
        line = raw.rstrip('\r\n')

        if not line.strip():
            continue
        if comment_prefix and line.startswith(comment_prefix):
            continue

        try:
            record = parse_record_line(line, line_number, read_id_column, strand_column)
        except MalformedRecordError as e:
            if strict:
                raise
            stats.add_malformed(line_number)
            if stats.malformed <= stats.max_reported:
                logger.warning(f"Skipping record: {e}")
            else:
                logger.debug(f"Skipping record: {e}")
            continue

        stats.records += 1
        yield record


__all__ = [
    'DEFAULT_READ_ID_COLUMN',
    'DEFAULT_STRAND_COLUMN',
    'ReaderStats',
    'validate_columns',
    'parse_record_line',
    'read_alignment_records',
]
