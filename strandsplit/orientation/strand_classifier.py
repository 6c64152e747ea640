#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Strand classifier.

Accumulates per-read strand evidence from the alignment record stream and
assigns every observed read a Classification. A read seen on one strand only
keeps that strand's class no matter how many records it has; the first
record on the opposite strand makes it AMBIGUOUS, and AMBIGUOUS never
reverts. Partial results from contiguous chunks of the input can be merged
with the same transition, so chunked parallel accumulation gives the same
answer as a single pass.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import threading
from collections import deque
from concurrent.futures import ProcessPoolExecutor
from itertools import islice
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .data_structures import AlignmentRecord, Classification
from .errors import ClassificationCancelled
from .record_reader import (
    DEFAULT_READ_ID_COLUMN,
    DEFAULT_STRAND_COLUMN,
    ReaderStats,
    read_alignment_records,
    validate_columns,
)

logger = logging.getLogger(__name__)


def combine(current: Optional[Classification], incoming: Classification) -> Classification:
    """
    Fold new evidence into a read's running classification.

    Agreement keeps the class, disagreement yields AMBIGUOUS, and AMBIGUOUS
    on either side stays AMBIGUOUS. Associative and commutative.

    Args:
        current: Classification so far (None if the read is new)
        incoming: Classification implied by the new evidence

    Returns:
        Updated classification
    """
    if current is None or current is incoming:
        return incoming
    return Classification.AMBIGUOUS


class StrandClassifier:
    """
    Single-pass accumulator of strand evidence per read.

    Space is O(distinct read IDs): each read holds one Classification, which
    encodes the set of distinct strands seen ({+}, {-} or both).

    Example:
        >>> classifier = StrandClassifier()
        >>> classifier.update(read_alignment_records(["r1\\t.\\t.\\t.\\t+"]))
        True
        >>> classifier.classifications()
        {'r1': <Classification.FORWARD: 'forward'>}
    """

    def __init__(self):
        self._calls: Dict[str, Classification] = {}
        self.records_observed = 0

    def observe(self, record: AlignmentRecord):
        """Add the evidence of a single record."""
        read_id = record.read_id
        self._calls[read_id] = combine(self._calls.get(read_id), record.strand.classification)
        self.records_observed += 1

    def update(
        self,
        records: Iterable[AlignmentRecord],
        cancel_event: Optional[threading.Event] = None
    ) -> bool:
        """
        Consume a record stream.

        Args:
            records: Records to observe
            cancel_event: If set while consuming, stop after the current record

        Returns:
            True if the stream was exhausted, False if consumption was cancelled
        """
        for record in records:
            self.observe(record)
            if cancel_event is not None and cancel_event.is_set():
                logger.info(
                    f"Classification cancelled after {self.records_observed:,} records"
                )
                return False
        return True

    def merge(self, other: 'StrandClassifier') -> 'StrandClassifier':
        """
        Merge another classifier's partial evidence into this one.

        Args:
            other: Classifier built from a different chunk of the same input

        Returns:
            self, for chaining
        """
        self.merge_calls(other._calls)
        self.records_observed += other.records_observed
        return self

    def merge_calls(self, calls: Dict[str, Classification]):
        """Merge a partial read ID -> Classification mapping."""
        for read_id, call in calls.items():
            self._calls[read_id] = combine(self._calls.get(read_id), call)

    def classifications(self) -> Dict[str, Classification]:
        """Return a copy of the read ID -> Classification mapping."""
        return dict(self._calls)

    def __len__(self) -> int:
        return len(self._calls)

    def __repr__(self) -> str:
        return f"StrandClassifier(reads={len(self._calls)}, records={self.records_observed})"


def classify_records(records: Iterable[AlignmentRecord]) -> Dict[str, Classification]:
    """Classify every read in a record stream (single pass)."""
    classifier = StrandClassifier()
    classifier.update(records)
    return classifier.classifications()


# =============================================================================
# CHUNKED PARALLEL ACCUMULATION
# =============================================================================

def _chunk_lines(lines: Iterable[str], chunk_size: int) -> Iterator[Tuple[int, List[str]]]:
    """Split lines into contiguous chunks, tagged with their first line number."""
    iterator = iter(lines)
    first_line = 1
    while True:
        chunk = list(islice(iterator, chunk_size))
        if not chunk:
            return
        yield first_line, chunk
        first_line += len(chunk)


def _classify_chunk(
    args: Tuple[int, List[str], int, int, bool, Optional[str]]
) -> Tuple[Dict[str, Classification], ReaderStats]:
    """Worker: classify one chunk of raw lines."""
    first_line, lines, read_id_column, strand_column, strict, comment_prefix = args
    stats = ReaderStats()
    records = read_alignment_records(
        lines,
        read_id_column=read_id_column,
        strand_column=strand_column,
        strict=strict,
        comment_prefix=comment_prefix,
        stats=stats,
        first_line_number=first_line,
    )
    return classify_records(records), stats


def classify_parallel(
    lines: Iterable[str],
    workers: int = 2,
    chunk_size: int = 100000,
    read_id_column: int = DEFAULT_READ_ID_COLUMN,
    strand_column: int = DEFAULT_STRAND_COLUMN,
    strict: bool = False,
    comment_prefix: Optional[str] = '#',
    stats: Optional[ReaderStats] = None,
    cancel_event: Optional[threading.Event] = None
) -> Dict[str, Classification]:
    """
    Classify raw record lines using chunked parallel accumulation.

    Each contiguous chunk is parsed and classified in a worker process and
    the partial maps are merged with combine(). At most 2 * workers chunks
    are in flight; the next chunk is read from the input only after the
    oldest one is merged. Chunks are merged in input order, so in strict
    mode the error raised is the one for the earliest malformed line.

    Args:
        lines: Raw record lines
        workers: Number of worker processes
        chunk_size: Lines per chunk
        read_id_column: 1-based column holding the read ID
        strand_column: 1-based column holding the strand symbol
        strict: Abort on the first malformed line
        comment_prefix: Lines starting with this prefix are ignored
        stats: Optional ReaderStats receiving the merged counters
        cancel_event: If set, pending chunks are cancelled and no more input is read

    Returns:
        Read ID -> Classification mapping, identical to a serial pass

    Raises:
        MalformedRecordError: In strict mode
        ClassificationCancelled: If cancel_event was set before all chunks were merged
    """
    validate_columns(read_id_column, strand_column)
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")

    if stats is None:
        stats = ReaderStats()

    merged = StrandClassifier()
    max_pending = 2 * workers
    pending = deque()
    n_chunks = 0

    def check_cancelled():
        if cancel_event is not None and cancel_event.is_set():
            raise ClassificationCancelled(
                f"Classification cancelled after {n_chunks} merged chunk(s), "
                f"{merged.records_observed:,} records"
            )

    def merge_oldest():
        nonlocal n_chunks
        calls, chunk_stats = pending.popleft().result()
        merged.merge_calls(calls)
        merged.records_observed += chunk_stats.records
        stats.merge(chunk_stats)
        n_chunks += 1

    with ProcessPoolExecutor(max_workers=workers) as executor:
        try:
            check_cancelled()
            for first_line, chunk in _chunk_lines(lines, chunk_size):
                pending.append(executor.submit(
                    _classify_chunk,
                    (first_line, chunk, read_id_column, strand_column, strict, comment_prefix)
                ))
                if len(pending) >= max_pending:
                    merge_oldest()
                check_cancelled()
            while pending:
                merge_oldest()
                check_cancelled()
        except BaseException:
            executor.shutdown(wait=True, cancel_futures=True)
            raise

    logger.debug(
        f"Merged {n_chunks} chunk(s) from {workers} worker(s): "
        f"{len(merged):,} reads, {merged.records_observed:,} records"
    )

    return merged.classifications()


__all__ = [
    'combine',
    'StrandClassifier',
    'classify_records',
    'classify_parallel',
]
