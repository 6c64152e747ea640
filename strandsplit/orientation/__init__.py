"""
Read-orientation engine for StrandSplit.

Classifies reads by the strand of their alignment records and partitions
them into forward, reverse and ambiguous sets:

- record_reader.py: tab-separated alignment records -> AlignmentRecord stream
- strand_classifier.py: per-read strand evidence, absorbing ambiguity
- partitioner.py: disjoint forward/reverse/ambiguous ID sets
- reorientation.py: extractor/reverse-complement coordination and merge
"""

from .data_structures import AlignmentRecord, Classification, Strand
from .errors import (
    StrandSplitError,
    MalformedRecordError,
    EmptyInputWarning,
    CollaboratorContractError,
    ExtractorMismatchError,
    ReverseComplementMismatchError,
    ClassificationCancelled,
    ToolNotFoundError,
    ExternalToolError,
)
from .record_reader import ReaderStats, parse_record_line, read_alignment_records
from .strand_classifier import StrandClassifier, classify_parallel, classify_records, combine
from .partitioner import Partition, partition_reads
from .reorientation import (
    ReorientationCoordinator,
    ReorientationResult,
    ReverseComplementer,
    SubsetExtractor,
)

__all__ = [
    # Data types
    "AlignmentRecord",
    "Classification",
    "Strand",

    # Errors
    "StrandSplitError",
    "MalformedRecordError",
    "EmptyInputWarning",
    "CollaboratorContractError",
    "ExtractorMismatchError",
    "ReverseComplementMismatchError",
    "ClassificationCancelled",
    "ToolNotFoundError",
    "ExternalToolError",

    # Records
    "ReaderStats",
    "parse_record_line",
    "read_alignment_records",

    # Classification
    "StrandClassifier",
    "classify_parallel",
    "classify_records",
    "combine",

    # Partition
    "Partition",
    "partition_reads",

    # Reorientation
    "ReorientationCoordinator",
    "ReorientationResult",
    "ReverseComplementer",
    "SubsetExtractor",
]
