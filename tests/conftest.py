#!/usr/bin/env python3
"""
Pytest configuration and shared fixtures for preqc_multiqc tests.
"""

import json

import pytest


# =============================================================================
# SHARED TEST DATA
# =============================================================================

# Smallest block that satisfies every invariant
SIMPLE_BLOCK = {
    "x_labels": ["1", "2", "3"],
    "tiles": [1101, 1102],
    "means": [[0.1, -0.2, 0.0], [-0.1, 0.05, 0.02]],
}

# Block shaped like real preqc output for a 2x150 run, grouped positions
GROUPED_BLOCK = {
    "x_labels": ["1", "2", "3", "4", "5", "6", "7", "8", "9", "10-14", "15-19"],
    "tiles": [1101, 1102, 1103, 2101],
    "means": [
        [0.12, 0.08, -0.03, 0.0, 0.04, 0.11, -0.02, 0.01, 0.05, 0.07, 0.09],
        [-0.05, -0.01, 0.02, 0.03, -0.04, -0.06, 0.0, 0.02, -0.01, -0.03, -0.02],
        [0.01, 0.0, 0.04, -0.02, 0.02, 0.03, 0.05, -0.06, 0.01, 0.02, 0.04],
        [-0.08, -0.07, -0.03, -0.01, -0.02, -0.08, -0.03, 0.03, -0.05, -6.5, -11.25],
    ],
}

# Fields the upstream tool writes next to the three report fields
UPSTREAM_EXTRAS = {
    "per_tile_quality_counts": {},
    "current_length": 19,
    "high": 41,
    "total_count": 20000,
    "split_position": 4,
    "max_deviation": 11.25,
    "ignore_in_report": False,
}


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def simple_block():
    """Minimal valid per tile quality block."""
    return json.loads(json.dumps(SIMPLE_BLOCK))


@pytest.fixture
def grouped_block():
    """Per tile quality block with grouped positions and one bad tile."""
    return json.loads(json.dumps(GROUPED_BLOCK))


@pytest.fixture
def upstream_block(grouped_block):
    """Block as serialised by preqc, including its internal fields."""
    return {**grouped_block, **UPSTREAM_EXTRAS}


@pytest.fixture
def preqc_report(upstream_block):
    """Full report document as written by the preqc meta command."""
    return {
        "fastqc": {
            "basic_stats": {"name": "sample1.fastq.gz", "total_sequences": 20000},
            "per_tile_quality_score": upstream_block,
        },
        "filemeta": {"filename": "sample1.fastq.gz", "md5sum": "0" * 32},
    }


@pytest.fixture
def preqc_report_file(tmp_path, preqc_report):
    """Write a report document to a temporary .preqc.json file."""
    report_path = tmp_path / "sample1.preqc.json"
    report_path.write_text(json.dumps(preqc_report))
    return report_path


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks integration tests"
    )
    config.addinivalue_line(
        "markers", "multiqc: marks tests that need MultiQC installed"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to add markers based on test names/locations.
    """
    for item in items:
        if "integration" in item.fspath.basename:
            item.add_marker(pytest.mark.integration)
        if "multiqc" in item.fspath.basename:
            item.add_marker(pytest.mark.multiqc)
