"""
MultiQC hooks for the PreQC plugin.
"""

import logging

from multiqc import config


logger = logging.getLogger(__name__)

# Must match the module's entry point name for MultiQC to keep the pattern
SEARCH_PATTERN_KEY = "preqc_per_tile"
DEFAULT_SEARCH_PATTERN = {"fn": "*.preqc.json"}
REPORT_EXTENSION = ".preqc.json"


def execution_start():
    """Register the report search pattern and sample name cleaning."""
    if SEARCH_PATTERN_KEY not in config.sp:
        config.sp[SEARCH_PATTERN_KEY] = dict(DEFAULT_SEARCH_PATTERN)
        logger.debug(f"Registered search pattern {SEARCH_PATTERN_KEY}")

    # Checked in order, so it has to come before the generic ".json"
    if REPORT_EXTENSION not in config.fn_clean_exts:
        config.fn_clean_exts.insert(0, REPORT_EXTENSION)
