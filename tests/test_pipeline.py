#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Integration tests for the reorientation pipeline.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import threading

import pytest
from strandsplit.config import ConfigParser
from strandsplit.io import load_sequences
from strandsplit.orientation import (
    ClassificationCancelled,
    EmptyInputWarning,
    MalformedRecordError,
)
from strandsplit.utils import (
    ClassificationStats,
    ReorientationPipeline,
    build_collaborators,
    classify_alignments,
)
from strandsplit.io import BiopythonSubsetExtractor


@pytest.fixture
def sample_inputs(temp_output_dir, simple_fastq, example_paf_lines):
    reads = temp_output_dir / "reads.fastq"
    reads.write_text(simple_fastq)
    alignments = temp_output_dir / "sample.paf"
    alignments.write_text("".join(example_paf_lines))
    return reads, alignments


def make_config(reads, alignments, output_dir, **overrides):
    parser = ConfigParser()
    parser.merge_cli_overrides({
        'runtime.reads': str(reads),
        'runtime.alignments': str(alignments),
        'runtime.output_dir': str(output_dir),
        'output.prefix': 'sample16S',
    })
    parser.merge_cli_overrides(overrides)
    return parser.to_dict()


class TestClassifyAlignments:
    """Test the classification entry point."""

    def test_example(self, sample_inputs):
        _, alignments = sample_inputs

        partition, stats = classify_alignments(alignments)

        assert partition.forward == {"r1", "r4"}
        assert partition.reverse == {"r2"}
        assert partition.ambiguous == {"r3"}
        assert stats.records == 5

    def test_parallel_matches_serial(self, sample_inputs):
        _, alignments = sample_inputs

        serial, _ = classify_alignments(alignments)
        parallel, stats = classify_alignments(alignments, workers=2, chunk_size=2)

        assert parallel == serial
        assert stats.records == 5

    def test_empty_input_warns(self):
        with pytest.warns(EmptyInputWarning):
            partition, stats = classify_alignments(["# only a comment\n"])

        assert partition.is_empty()
        assert stats.records == 0

    def test_strict_malformed(self, paf_line):
        lines = [paf_line("r1", "+"), "r2\t?\n"]

        with pytest.raises(MalformedRecordError):
            classify_alignments(lines, strict=True)

    def test_cancelled(self, paf_line):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(ClassificationCancelled):
            classify_alignments([paf_line("r1", "+"), paf_line("r2", "-")], cancel_event=cancel)

    def test_cancelled_with_workers(self, sample_inputs):
        _, alignments = sample_inputs
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(ClassificationCancelled):
            classify_alignments(alignments, workers=2, chunk_size=2, cancel_event=cancel)


class TestBuildCollaborators:
    """Test backend selection."""

    def test_biopython(self):
        extractor, _ = build_collaborators({'backend': 'biopython'})

        assert isinstance(extractor, BiopythonSubsetExtractor)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_collaborators({'backend': 'samtools'})


class TestReorientationPipeline:
    """End-to-end pipeline runs."""

    def test_run(self, sample_inputs, temp_output_dir):
        reads, alignments = sample_inputs
        config = make_config(reads, alignments, temp_output_dir / "out")

        summary = ReorientationPipeline(config, configure_logging=False).run()

        assert summary['status'] == 'success'
        assert summary['steps_completed'] == 3
        assert (summary['forward'], summary['reverse'], summary['ambiguous']) == (2, 1, 1)
        assert summary['unmapped'] == 1
        assert summary['output_file'].endswith("sample16S.rc.fq.gz")

        output = load_sequences(summary['output_file'])
        assert [r.id for r in output] == ["sample16S_0", "sample16S_1", "sample16S_2"]
        assert [str(r.seq) for r in output] == ["ACGTACGTAA", "CATGCATGCA", "ATGGTAACCC"]

    def test_keep_original_ids_uncompressed(self, sample_inputs, temp_output_dir):
        reads, alignments = sample_inputs
        config = make_config(reads, alignments, temp_output_dir / "out",
                             **{'output.rename': False, 'output.compress': False,
                                'output.keep_id_lists': True})

        summary = ReorientationPipeline(config, configure_logging=False).run()

        output_dir = temp_output_dir / "out"
        assert summary['output_file'] == str(output_dir / "sample16S.rc.fq")
        assert [r.id for r in load_sequences(summary['output_file'])] == ["r1", "r4", "r2"]
        assert (output_dir / "sample16S.AmbiguousReads.txt").read_text() == "r3\n"

    def test_fasta_output(self, sample_inputs, temp_output_dir):
        reads, alignments = sample_inputs
        config = make_config(reads, alignments, temp_output_dir / "out",
                             **{'output.format': 'fasta', 'output.compress': False})

        summary = ReorientationPipeline(config, configure_logging=False).run()

        assert summary['output_file'].endswith("sample16S.rc.fa")

    def test_missing_reads_file(self, sample_inputs, temp_output_dir):
        _, alignments = sample_inputs
        config = make_config(temp_output_dir / "nope.fq", alignments, temp_output_dir / "out")

        with pytest.raises(FileNotFoundError):
            ReorientationPipeline(config, configure_logging=False).run()


class TestClassificationStats:
    def test_summary(self):
        stats = ClassificationStats(records=10, forward=3, reverse=2, ambiguous=1, unmapped=4)

        text = stats.summary()

        assert "Forward IDs: 3" in text
        assert "Unmapped reads dropped: 4" in text

# StrandSplit v0.1.0
# Any usage is subject to this software's license.
