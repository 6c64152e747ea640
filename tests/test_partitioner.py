#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Tests for read partitioning.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import random

import pytest
from strandsplit.orientation import (
    Classification,
    Partition,
    classify_records,
    partition_reads,
    read_alignment_records,
)


def partition_lines(lines):
    return partition_reads(classify_records(read_alignment_records(lines)))


class TestPartitionReads:
    """Test splitting classifications into three sets."""

    def test_example_partition(self, example_paf_lines):
        partition = partition_lines(example_paf_lines)

        assert partition.forward == {"r1", "r4"}
        assert partition.reverse == {"r2"}
        assert partition.ambiguous == {"r3"}

    def test_empty_mapping(self):
        partition = partition_reads({})

        assert partition.is_empty()
        assert partition.summary() == {'forward': 0, 'reverse': 0, 'ambiguous': 0}

    def test_unknown_classification(self):
        with pytest.raises(ValueError):
            partition_reads({"r1": "forward"})

    def test_idempotent(self, example_paf_lines):
        """Partitioning the same stream twice gives equal results."""
        assert partition_lines(example_paf_lines) == partition_lines(example_paf_lines)

    @pytest.mark.parametrize("seed", range(8))
    def test_disjoint_and_exhaustive(self, paf_line, seed):
        """Every observed read lands in exactly one set."""
        rng = random.Random(seed)
        pairs = [(f"read{rng.randrange(50)}", rng.choice("+-")) for _ in range(400)]
        partition = partition_lines([paf_line(read_id, strand) for read_id, strand in pairs])

        observed = {read_id for read_id, _ in pairs}
        assert partition.all_reads == observed
        assert len(partition.forward) + len(partition.reverse) + len(partition.ambiguous) == len(observed)

        strands = {}
        for read_id, strand in pairs:
            strands.setdefault(read_id, set()).add(strand)
        for read_id, seen in strands.items():
            if seen == {"+"}:
                assert read_id in partition.forward
            elif seen == {"-"}:
                assert read_id in partition.reverse
            else:
                assert read_id in partition.ambiguous


class TestPartition:
    """Test the Partition value type."""

    def test_overlapping_sets_rejected(self):
        with pytest.raises(ValueError, match="disjoint"):
            Partition(forward={"r1"}, reverse={"r1"})

    def test_coerces_to_frozensets(self):
        partition = Partition(forward=["r1"], reverse={"r2"})

        assert isinstance(partition.forward, frozenset)
        assert isinstance(partition.ambiguous, frozenset)

    def test_get(self):
        partition = Partition(forward={"a"}, reverse={"b"}, ambiguous={"c"})

        assert partition.get(Classification.FORWARD) == {"a"}
        assert partition.get(Classification.REVERSE) == {"b"}
        assert partition.get(Classification.AMBIGUOUS) == {"c"}

    def test_from_classifications(self):
        partition = Partition.from_classifications({
            "a": Classification.FORWARD,
            "b": Classification.AMBIGUOUS,
        })

        assert partition.summary() == {'forward': 1, 'reverse': 0, 'ambiguous': 1}
        assert "forward=1" in repr(partition)

    def test_write_id_lists(self, temp_output_dir):
        partition = Partition(forward={"r4", "r1"}, reverse={"r2"}, ambiguous={"r3"})

        written = partition.write_id_lists(temp_output_dir / "ids", "sample16S")

        assert written[Classification.FORWARD].name == "sample16S.ForwardReads.txt"
        assert written[Classification.FORWARD].read_text() == "r1\nr4\n"
        assert written[Classification.REVERSE].read_text() == "r2\n"
        assert written[Classification.AMBIGUOUS].read_text() == "r3\n"

    def test_write_empty_id_lists(self, temp_output_dir):
        written = Partition().write_id_lists(temp_output_dir, "empty")

        assert all(path.read_text() == "" for path in written.values())

# StrandSplit v0.1.0
# Any usage is subject to this software's license.
