"""
Utilities module for StrandSplit.

This module provides pipeline orchestration for read reorientation:
- Alignment classification entry point
- Collaborator backend selection
- End-to-end reorientation pipeline with logging
"""

from .pipeline import (
    PIPELINE_STEPS,
    ClassificationStats,
    ReorientationPipeline,
    build_collaborators,
    classify_alignments,
)

__all__ = [
    "PIPELINE_STEPS",
    "ClassificationStats",
    "ReorientationPipeline",
    "build_collaborators",
    "classify_alignments",
]
