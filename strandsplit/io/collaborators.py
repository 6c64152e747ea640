#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

In-process sequence collaborators backed by Biopython.

BiopythonSubsetExtractor and BiopythonReverseComplementer implement the
SubsetExtractor and ReverseComplementer capabilities used by the
reorientation coordinator. Reverse complementation itself is done by
Bio.SeqRecord.SeqRecord.reverse_complement, which also reverses per-letter
quality annotations.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from pathlib import Path
from typing import AbstractSet, Iterable, List, Optional, Sequence, Union

from Bio.SeqRecord import SeqRecord

from ..orientation.errors import ExtractorMismatchError
from .io_core_module import iter_sequences

logger = logging.getLogger(__name__)

ReadSource = Union[str, Path, Sequence[SeqRecord]]


def _iter_source(reads: ReadSource, file_format: Optional[str]) -> Iterable[SeqRecord]:
    if isinstance(reads, (str, Path)):
        return iter_sequences(reads, file_format)
    return reads


class BiopythonSubsetExtractor:
    """
    Select reads by ID from a SeqRecord collection or a FASTQ/FASTA file.

    Reads are returned unmodified in order of appearance in the source.
    Requesting an ID that the source does not contain raises
    ExtractorMismatchError.
    """

    def __init__(self, file_format: Optional[str] = None):
        """
        Args:
            file_format: 'fastq' or 'fasta' for file sources (None = infer from extension)
        """
        self.file_format = file_format

    def extract(self, reads: ReadSource, read_ids: AbstractSet[str]) -> List[SeqRecord]:
        """
        Return the reads whose IDs are in read_ids.

        Args:
            reads: Path to a sequence file, or a re-iterable sequence of SeqRecords
            read_ids: IDs to select

        Returns:
            Selected SeqRecord objects in source order

        Raises:
            ExtractorMismatchError: If any requested ID is absent from the source
        """
        wanted = set(read_ids)
        selected = [record for record in _iter_source(reads, self.file_format)
                    if record.id in wanted]

        missing = wanted - {record.id for record in selected}
        if missing:
            raise ExtractorMismatchError(missing=missing)

        return selected


class BiopythonReverseComplementer:
    """
    Reverse-complement reads, keeping IDs and descriptions.

    Quality scores are reversed position by position alongside the sequence.
    """

    def reverse_complement(self, reads: Sequence[SeqRecord]) -> List[SeqRecord]:
        """
        Args:
            reads: SeqRecord objects

        Returns:
            New SeqRecord objects, same order and IDs
        """
        return [
            record.reverse_complement(id=True, name=True, description=True)
            for record in reads
        ]


__all__ = [
    'BiopythonSubsetExtractor',
    'BiopythonReverseComplementer',
]
