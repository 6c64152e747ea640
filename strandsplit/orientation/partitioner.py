#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Partition of classified reads into forward, reverse and ambiguous ID sets.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Union

from .data_structures import Classification

logger = logging.getLogger(__name__)

ID_LIST_SUFFIXES = {
    Classification.FORWARD: "ForwardReads.txt",
    Classification.REVERSE: "ReverseReads.txt",
    Classification.AMBIGUOUS: "AmbiguousReads.txt",
}


@dataclass(frozen=True)
class Partition:
    """
    Three disjoint read ID sets.

    Attributes:
        forward: Reads seen on the forward strand only
        reverse: Reads seen on the reverse strand only
        ambiguous: Reads seen on both strands (excluded from reorientation)
    """
    forward: FrozenSet[str] = field(default_factory=frozenset)
    reverse: FrozenSet[str] = field(default_factory=frozenset)
    ambiguous: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        """Coerce to frozensets and check disjointness."""
        for name in ('forward', 'reverse', 'ambiguous'):
            value = getattr(self, name)
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(value))

        overlaps = (
            ('forward', 'reverse', self.forward & self.reverse),
            ('forward', 'ambiguous', self.forward & self.ambiguous),
            ('reverse', 'ambiguous', self.reverse & self.ambiguous),
        )
        for a, b, shared in overlaps:
            if shared:
                raise ValueError(
                    f"Partition sets must be disjoint: {len(shared)} read(s) in both "
                    f"{a} and {b} (e.g. {sorted(shared)[0]})"
                )

    @classmethod
    def from_classifications(cls, calls: Mapping[str, Classification]) -> 'Partition':
        """Build a partition from a read ID -> Classification mapping."""
        return partition_reads(calls)

    @property
    def all_reads(self) -> FrozenSet[str]:
        """Union of the three sets (every read with at least one record)."""
        return self.forward | self.reverse | self.ambiguous

    def is_empty(self) -> bool:
        return not (self.forward or self.reverse or self.ambiguous)

    def get(self, classification: Classification) -> FrozenSet[str]:
        """Return the set holding reads of the given classification."""
        if classification is Classification.FORWARD:
            return self.forward
        if classification is Classification.REVERSE:
            return self.reverse
        if classification is Classification.AMBIGUOUS:
            return self.ambiguous
        raise ValueError(f"Unknown classification: {classification!r}")

    def summary(self) -> Dict[str, int]:
        """Counts per class."""
        return {
            'forward': len(self.forward),
            'reverse': len(self.reverse),
            'ambiguous': len(self.ambiguous),
        }

    def write_id_lists(self, output_dir: Union[str, Path], prefix: str) -> Dict[Classification, Path]:
        """
        Write one sorted read ID per line for each class.

        Files are named <prefix>.ForwardReads.txt, <prefix>.ReverseReads.txt
        and <prefix>.AmbiguousReads.txt.

        Args:
            output_dir: Directory to write into (created if needed)
            prefix: File name prefix

        Returns:
            Mapping of classification to written file path
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        written = {}
        for classification, suffix in ID_LIST_SUFFIXES.items():
            path = output_dir / f"{prefix}.{suffix}"
            with open(path, 'w') as f:
                for read_id in sorted(self.get(classification)):
                    f.write(f"{read_id}\n")
            written[classification] = path

        logger.debug(f"Wrote read ID lists to {output_dir}")
        return written

    def __repr__(self) -> str:
        return (f"Partition(forward={len(self.forward)}, reverse={len(self.reverse)}, "
                f"ambiguous={len(self.ambiguous)})")


def partition_reads(calls: Mapping[str, Classification]) -> Partition:
    """
    Split classified reads into three disjoint sets.

    An empty mapping gives three empty sets.

    Args:
        calls: Read ID -> Classification mapping

    Returns:
        Partition with one set per classification
    """
    forward, reverse, ambiguous = set(), set(), set()

    for read_id, call in calls.items():
        if call is Classification.FORWARD:
            forward.add(read_id)
        elif call is Classification.REVERSE:
            reverse.add(read_id)
        elif call is Classification.AMBIGUOUS:
            ambiguous.add(read_id)
        else:
            raise ValueError(f"Unknown classification for {read_id}: {call!r}")

    return Partition(frozenset(forward), frozenset(reverse), frozenset(ambiguous))


__all__ = [
    'ID_LIST_SUFFIXES',
    'Partition',
    'partition_reads',
]
