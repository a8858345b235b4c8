"""
preqc_multiqc Test Suite

Test Organization:
- test_per_tile.py: Unit tests for the per tile quality record and validator
- test_report_integration.py: Extraction from full reports and grading
- test_config.py: Unit tests for threshold settings
- test_utils.py: Unit tests for logging and JSON decoding helpers
- test_multiqc_plugin.py: MultiQC hooks and plot inputs (needs MultiQC)

Run tests with:
    pytest                      # Run all tests
    pytest -v                   # Verbose output
    pytest -m "not multiqc"     # Skip tests that need MultiQC
    pytest -m integration       # Run only integration tests
"""
