#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Reorientation coordinator.

Given a Partition, asks a subset extractor for the forward and reverse reads,
asks a reverse-complement transformer to flip the reverse reads, and merges
the two into one new collection: forward reads first, then the
reverse-complemented reverse reads. Downstream renaming numbers reads by
output position, so this order is fixed.

The coordinator only handles read IDs. Reads are opaque objects exposing an
``id`` attribute (Bio.SeqRecord.SeqRecord in the bundled adapters).

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import AbstractSet, Any, List, Protocol, Sequence

from .errors import (
    CollaboratorContractError,
    ExtractorMismatchError,
    ReverseComplementMismatchError,
)
from .partitioner import Partition

logger = logging.getLogger(__name__)


class SubsetExtractor(Protocol):
    """Returns exactly the reads of an ID set, unmodified, in source order."""

    def extract(self, reads: Any, read_ids: AbstractSet[str]) -> List[Any]:
        ...


class ReverseComplementer(Protocol):
    """Reverse-complements sequences and reverses qualities, same cardinality."""

    def reverse_complement(self, reads: Sequence[Any]) -> List[Any]:
        ...


@dataclass
class ReorientationResult:
    """
    Output of a reorientation run.

    Attributes:
        reads: Forward reads followed by reverse-complemented reverse reads
        forward_count: Number of forward reads in the output
        reverse_count: Number of reverse-complemented reads in the output
        ambiguous_excluded: Number of ambiguous reads left out
    """
    reads: List[Any] = field(default_factory=list)
    forward_count: int = 0
    reverse_count: int = 0
    ambiguous_excluded: int = 0

    @property
    def total(self) -> int:
        return len(self.reads)


class ReorientationCoordinator:
    """
    Drives the extractor and reverse-complement collaborators for a partition.

    Each collaborator response is checked against its contract; violations
    raise a CollaboratorContractError subclass and are never retried.
    """

    def __init__(self, extractor: SubsetExtractor, reverse_complementer: ReverseComplementer):
        """
        Initialize coordinator.

        Args:
            extractor: Subset extractor capability
            reverse_complementer: Reverse-complement capability
        """
        self.extractor = extractor
        self.reverse_complementer = reverse_complementer
        self.logger = logging.getLogger(f"{__name__}.ReorientationCoordinator")

    def reorient(self, reads: Any, partition: Partition) -> ReorientationResult:
        """
        Build the merged, reoriented read collection.

        Args:
            reads: Original read collection, passed through to the extractor
            partition: Read ID partition

        Returns:
            ReorientationResult with forward reads first, then
            reverse-complemented reverse reads

        Raises:
            ExtractorMismatchError: If extraction did not return exactly the requested reads
            ReverseComplementMismatchError: If the transformer changed cardinality or IDs
        """
        if partition.ambiguous:
            self.logger.info(
                f"Excluding {len(partition.ambiguous):,} ambiguous read(s) mapped to both strands"
            )

        forward_reads = self._extract(reads, partition.forward, "forward")
        reverse_reads = self._extract(reads, partition.reverse, "reverse")
        flipped = self._reverse_complement(reverse_reads)

        merged = forward_reads + flipped

        leaked = {read.id for read in merged} & partition.ambiguous
        if leaked:
            raise CollaboratorContractError(
                f"{len(leaked)} ambiguous read(s) reached the reoriented output "
                f"(e.g. {sorted(leaked)[0]})"
            )

        self.logger.info(
            f"Reoriented {len(merged):,} reads: {len(forward_reads):,} forward, "
            f"{len(flipped):,} reverse-complemented"
        )

        return ReorientationResult(
            reads=merged,
            forward_count=len(forward_reads),
            reverse_count=len(flipped),
            ambiguous_excluded=len(partition.ambiguous),
        )

    def _extract(self, reads: Any, read_ids: AbstractSet[str], label: str) -> List[Any]:
        if not read_ids:
            self.logger.debug(f"No {label} reads to extract")
            return []

        extracted = list(self.extractor.extract(reads, read_ids))
        returned = Counter(read.id for read in extracted)

        missing = set(read_ids) - set(returned)
        unexpected = set(returned) - set(read_ids)
        if missing or unexpected:
            raise ExtractorMismatchError(missing=missing, unexpected=unexpected)

        duplicated = sorted(read_id for read_id, n in returned.items() if n > 1)
        if duplicated:
            raise ExtractorMismatchError(
                message=(f"Subset extraction returned {len(duplicated)} read ID(s) more "
                         f"than once (e.g. {duplicated[0]})")
            )

        self.logger.debug(f"Extracted {len(extracted):,} {label} reads")
        return extracted

    def _reverse_complement(self, reads: List[Any]) -> List[Any]:
        if not reads:
            return []

        flipped = list(self.reverse_complementer.reverse_complement(reads))

        if len(flipped) != len(reads):
            raise ReverseComplementMismatchError(
                f"Reverse complement returned {len(flipped)} reads for {len(reads)} inputs"
            )

        for original, result in zip(reads, flipped):
            if original.id != result.id:
                raise ReverseComplementMismatchError(
                    f"Reverse complement changed read order or IDs: "
                    f"expected {original.id!r}, got {result.id!r}"
                )

        return flipped


__all__ = [
    'SubsetExtractor',
    'ReverseComplementer',
    'ReorientationResult',
    'ReorientationCoordinator',
]
