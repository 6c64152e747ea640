#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Tests for sequence file I/O helpers.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import gzip

import pytest
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from strandsplit.io import (
    detect_sequence_format,
    is_gzipped,
    load_sequences,
    read_ids_in_file,
    rename_reads,
    write_sequences,
)


def fastq_record(read_id, seq):
    record = SeqRecord(Seq(seq), id=read_id, description=f"{read_id} runid=abc")
    record.letter_annotations["phred_quality"] = list(range(len(seq)))
    return record


class TestFormatDetection:
    """Test file format inference."""

    @pytest.mark.parametrize("name,expected", [
        ("reads.fastq", "fastq"),
        ("reads.fq.gz", "fastq"),
        ("reads.FQ", "fastq"),
        ("contigs.fasta", "fasta"),
        ("contigs.fa.gz", "fasta"),
        ("sample.v2.fna", "fasta"),
    ])
    def test_known_extensions(self, name, expected):
        assert detect_sequence_format(name) == expected

    @pytest.mark.parametrize("name", ["reads.bam", "reads.txt.gz", "reads"])
    def test_unknown_extension(self, name):
        with pytest.raises(ValueError):
            detect_sequence_format(name)

    def test_is_gzipped(self):
        assert is_gzipped("reads.fq.gz")
        assert not is_gzipped("reads.fq")


class TestSequenceIO:
    """Test loading and writing sequences."""

    def test_load_fastq(self, temp_output_dir, simple_fastq):
        path = temp_output_dir / "reads.fastq"
        path.write_text(simple_fastq)

        records = load_sequences(path)

        assert [r.id for r in records] == ["r1", "r2", "r3", "r4", "r5"]
        assert str(records[0].seq) == "ACGTACGTAA"
        assert read_ids_in_file(path) == ["r1", "r2", "r3", "r4", "r5"]

    def test_load_gzipped_fastq(self, temp_output_dir, simple_fastq):
        path = temp_output_dir / "reads.fq.gz"
        with gzip.open(path, "wt") as f:
            f.write(simple_fastq)

        assert len(load_sequences(path)) == 5

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            load_sequences(temp_output_dir / "missing.fq")

    def test_write_compressed(self, temp_output_dir):
        records = [fastq_record("a", "ACGT"), fastq_record("b", "GGCA")]

        count = write_sequences(records, temp_output_dir / "out" / "reads.fq", compress=True)

        output = temp_output_dir / "out" / "reads.fq.gz"
        assert count == 2
        assert output.exists()
        loaded = load_sequences(output)
        assert [str(r.seq) for r in loaded] == ["ACGT", "GGCA"]
        assert loaded[1].letter_annotations["phred_quality"] == [0, 1, 2, 3]

    def test_write_fasta(self, temp_output_dir):
        path = temp_output_dir / "reads.fa"

        write_sequences([fastq_record("a", "ACGT")], path)

        assert path.read_text().startswith(">a")


class TestRenameReads:
    """Test sequential renaming of the merged stream."""

    def test_sequential_ids(self):
        records = [fastq_record(name, "ACGT") for name in ("x", "y", "z")]

        renamed = rename_reads(records, "sample16S")

        assert [r.id for r in renamed] == ["sample16S_0", "sample16S_1", "sample16S_2"]
        assert all(r.description == "" for r in renamed)
        assert renamed[0].letter_annotations["phred_quality"] == [0, 1, 2, 3]

    def test_inputs_unchanged(self):
        records = [fastq_record("x", "ACGT")]

        rename_reads(records, "p", start=5)

        assert records[0].id == "x"
        assert records[0].description == "x runid=abc"

    def test_start_index(self):
        renamed = rename_reads([fastq_record("x", "A")], "p", start=5)

        assert renamed[0].id == "p_5"

# StrandSplit v0.1.0
# Any usage is subject to this software's license.
