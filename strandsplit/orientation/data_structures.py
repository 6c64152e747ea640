#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Core value types for read-orientation classification.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from enum import Enum
from typing import NamedTuple, Optional


class Strand(Enum):
    """Orientation asserted by a single alignment record."""
    FORWARD = "+"
    REVERSE = "-"

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional['Strand']:
        """
        Map a textual strand symbol onto a Strand.

        Args:
            symbol: Strand field from an alignment record

        Returns:
            Matching Strand, or None for any value other than '+' or '-'
        """
        if symbol == "+":
            return cls.FORWARD
        if symbol == "-":
            return cls.REVERSE
        return None

    @property
    def classification(self) -> 'Classification':
        """Classification of a read whose evidence is only this strand."""
        if self is Strand.FORWARD:
            return Classification.FORWARD
        return Classification.REVERSE


class Classification(Enum):
    """Final orientation call for a read."""
    FORWARD = "forward"
    REVERSE = "reverse"
    AMBIGUOUS = "ambiguous"  # Conflicting strand evidence


class AlignmentRecord(NamedTuple):
    """A (read ID, strand) pair taken from one alignment line."""
    read_id: str
    strand: Strand


__all__ = [
    'Strand',
    'Classification',
    'AlignmentRecord',
]
