#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Exceptions and warnings raised by the read-orientation engine.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Iterable, Optional


class StrandSplitError(Exception):
    """Base class for all StrandSplit errors."""
    pass


class MalformedRecordError(StrandSplitError):
    """
    An alignment record lacks required fields or has an unknown strand symbol.

    Attributes:
        line_number: 1-based line number in the record source
        line: Raw line content (without trailing newline)
        reason: Short description of what is wrong with the line
    """

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(
            f"Malformed alignment record at line {line_number}: {reason} "
            f"(content: {line!r})"
        )

    def __reduce__(self):
        # Raised inside classification worker processes
        return (type(self), (self.line_number, self.line, self.reason))


class EmptyInputWarning(UserWarning):
    """No alignment records were observed; the partition is empty."""
    pass


class CollaboratorContractError(StrandSplitError):
    """An external sequence collaborator violated its contract."""
    pass


class ExtractorMismatchError(CollaboratorContractError):
    """
    The subset extractor could not return exactly the requested reads.

    Attributes:
        missing: Requested read IDs that were absent from the source
        unexpected: Returned read IDs that were never requested
    """

    def __init__(
        self,
        missing: Iterable[str] = (),
        unexpected: Iterable[str] = (),
        message: Optional[str] = None
    ):
        self.missing = frozenset(missing)
        self.unexpected = frozenset(unexpected)

        if message is None:
            parts = []
            if self.missing:
                parts.append(
                    f"{len(self.missing)} requested read(s) absent from source "
                    f"(e.g. {_preview(self.missing)})"
                )
            if self.unexpected:
                parts.append(
                    f"{len(self.unexpected)} unrequested read(s) returned "
                    f"(e.g. {_preview(self.unexpected)})"
                )
            message = "Subset extraction mismatch: " + "; ".join(parts or ["unknown cause"])

        super().__init__(message)


class ReverseComplementMismatchError(CollaboratorContractError):
    """The reverse-complement transformer changed the cardinality or identity of reads."""
    pass


class ClassificationCancelled(StrandSplitError):
    """Strand classification was abandoned before the record stream was exhausted."""
    pass


class ToolNotFoundError(StrandSplitError):
    """An external executable could not be located."""
    pass


class ExternalToolError(StrandSplitError):
    """An external executable exited with a non-zero status."""
    pass


def _preview(read_ids: Iterable[str], limit: int = 3) -> str:
    shown = sorted(read_ids)[:limit]
    return ", ".join(shown)


__all__ = [
    'StrandSplitError',
    'MalformedRecordError',
    'EmptyInputWarning',
    'CollaboratorContractError',
    'ExtractorMismatchError',
    'ReverseComplementMismatchError',
    'ClassificationCancelled',
    'ToolNotFoundError',
    'ExternalToolError',
]
