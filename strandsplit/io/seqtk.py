#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

seqtk-backed sequence collaborators.

SeqtkSubsetExtractor runs ``seqtk subseq`` and SeqtkReverseComplementer runs
``seqtk seq -r``; their output is parsed back into SeqRecord objects with
Biopython so the reorientation coordinator can check the results.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import io
import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import AbstractSet, List, Optional, Sequence, Union

from Bio import SeqIO
from Bio.SeqRecord import SeqRecord

from ..orientation.errors import ExternalToolError, ExtractorMismatchError, ToolNotFoundError
from .io_core_module import detect_sequence_format

logger = logging.getLogger(__name__)


def resolve_executable(name: str, directory: Optional[Union[str, Path]] = None) -> str:
    """
    Locate an executable in an explicit directory or on PATH.

    Args:
        name: Executable name (e.g. 'seqtk')
        directory: Directory expected to contain the executable (None = search PATH)

    Returns:
        Path to the executable

    Raises:
        ToolNotFoundError: If the executable cannot be found or is not executable
    """
    if directory:
        path = Path(directory) / name
        if not (path.is_file() and os.access(path, os.X_OK)):
            raise ToolNotFoundError(f"Cannot find executable for {name} at: {path}")
        return str(path)

    found = shutil.which(name)
    if not found:
        raise ToolNotFoundError(
            f"'{name}' not found in PATH. Provide its directory or load the module/conda env."
        )
    return found


def _run(cmd: List[str]) -> str:
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        completed = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        raise ExternalToolError(
            f"{Path(cmd[0]).name} exited with status {e.returncode}: {e.stderr.strip()}"
        ) from e
    return completed.stdout


def _output_format(records: Sequence[SeqRecord]) -> str:
    if records and all('phred_quality' in r.letter_annotations for r in records):
        return 'fastq'
    return 'fasta'


class SeqtkSubsetExtractor:
    """
    Extract reads from a FASTQ/FASTA file with ``seqtk subseq``.

    seqtk silently ignores IDs it cannot find, so the output is checked and
    any absent ID raises ExtractorMismatchError.
    """

    def __init__(
        self,
        seqtk_dir: Optional[Union[str, Path]] = None,
        tmp_dir: Optional[Union[str, Path]] = None
    ):
        self.seqtk = resolve_executable('seqtk', seqtk_dir)
        self.tmp_dir = str(tmp_dir) if tmp_dir else None

    def extract(self, reads: Union[str, Path], read_ids: AbstractSet[str]) -> List[SeqRecord]:
        """
        Args:
            reads: Path to the source sequence file (can be gzipped)
            read_ids: IDs to select

        Returns:
            Selected SeqRecord objects in source order

        Raises:
            ExtractorMismatchError: If any requested ID is absent from the source
            ExternalToolError: If seqtk fails
        """
        if not isinstance(reads, (str, Path)):
            raise TypeError("SeqtkSubsetExtractor needs a sequence file path")

        file_format = detect_sequence_format(reads)

        with tempfile.TemporaryDirectory(prefix="strandsplit_", dir=self.tmp_dir) as tmp:
            id_file = Path(tmp) / "ids.txt"
            id_file.write_text("".join(f"{read_id}\n" for read_id in sorted(read_ids)))
            stdout = _run([self.seqtk, 'subseq', str(reads), str(id_file)])

        selected = list(SeqIO.parse(io.StringIO(stdout), file_format))

        missing = set(read_ids) - {record.id for record in selected}
        if missing:
            raise ExtractorMismatchError(missing=missing)

        return selected


class SeqtkReverseComplementer:
    """Reverse-complement reads with ``seqtk seq -r``."""

    def __init__(
        self,
        seqtk_dir: Optional[Union[str, Path]] = None,
        tmp_dir: Optional[Union[str, Path]] = None
    ):
        self.seqtk = resolve_executable('seqtk', seqtk_dir)
        self.tmp_dir = str(tmp_dir) if tmp_dir else None

    def reverse_complement(self, reads: Sequence[SeqRecord]) -> List[SeqRecord]:
        if not reads:
            return []

        file_format = _output_format(reads)

        with tempfile.TemporaryDirectory(prefix="strandsplit_", dir=self.tmp_dir) as tmp:
            seq_file = Path(tmp) / f"reads.{'fq' if file_format == 'fastq' else 'fa'}"
            SeqIO.write(reads, str(seq_file), file_format)
            stdout = _run([self.seqtk, 'seq', '-r', str(seq_file)])

        return list(SeqIO.parse(io.StringIO(stdout), file_format))


__all__ = [
    'resolve_executable',
    'SeqtkSubsetExtractor',
    'SeqtkReverseComplementer',
]
