#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
StrandSplit v0.1.0

Pytest configuration and shared fixtures.

Author: StrandSplit Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from pathlib import Path
import tempfile
import shutil


def _paf_line(read_id, strand, target="16S_ref"):
    """Build a 12-column PAF line."""
    return f"{read_id}\t1500\t12\t1488\t{strand}\t{target}\t1550\t30\t1510\t1400\t1480\t60\n"


@pytest.fixture
def paf_line():
    """Builder for 12-column PAF lines: paf_line(read_id, strand)."""
    return _paf_line


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="strandsplit_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def example_records():
    """Record stream from the worked example: r3 is seen on both strands."""
    return [
        ("r1", "+"),
        ("r2", "-"),
        ("r3", "+"),
        ("r3", "-"),
        ("r4", "+"),
    ]


@pytest.fixture
def example_paf_lines(example_records):
    """PAF lines for example_records."""
    return [_paf_line(read_id, strand) for read_id, strand in example_records]


@pytest.fixture
def simple_fastq():
    """FASTQ reads matching example_records plus one unmapped read (r5)."""
    return """@r1
ACGTACGTAA
+
ABCDEFGHIJ
@r2
GGGTTACCAT
+
JIHGFEDCBA
@r3
TTTTCCCCGG
+
IIIIIIIIII
@r4
CATGCATGCA
+
#$%&'()*+,
@r5
AAAAAAAAAA
+
++++++++++
"""

# StrandSplit v0.1.0
# Any usage is subject to this software's license.
