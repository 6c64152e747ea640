"""
Read I/O module for StrandSplit.

Handles sequence files and the external sequence collaborators driven by
the reorientation engine.

CONSOLIDATED MODULES:
- io_core_module.py: gzip-aware file helpers, SeqIO loading/writing, renaming
- collaborators.py: Biopython-backed subset extractor and reverse complementer
- seqtk.py: seqtk-backed subset extractor and reverse complementer
"""

from .io_core_module import (
    is_gzipped,
    open_file,
    detect_sequence_format,
    iter_sequences,
    load_sequences,
    read_ids_in_file,
    write_sequences,
    rename_reads,
)

from .collaborators import (
    BiopythonSubsetExtractor,
    BiopythonReverseComplementer,
)

from .seqtk import (
    resolve_executable,
    SeqtkSubsetExtractor,
    SeqtkReverseComplementer,
)

__all__ = [
    # File helpers
    "is_gzipped",
    "open_file",
    "detect_sequence_format",

    # Sequence I/O
    "iter_sequences",
    "load_sequences",
    "read_ids_in_file",
    "write_sequences",
    "rename_reads",

    # Collaborators
    "BiopythonSubsetExtractor",
    "BiopythonReverseComplementer",
    "resolve_executable",
    "SeqtkSubsetExtractor",
    "SeqtkReverseComplementer",
]
