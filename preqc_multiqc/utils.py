"""
Shared helpers for the PreQC MultiQC plugin.

This module provides utility functions for decoding PreQC reports handed
over by MultiQC.
"""

import json
import logging
from typing import Any, Optional


logger = logging.getLogger(__name__)


def parse_json_text(content: str, source: str = "<string>") -> Optional[Any]:
    """
    Decode the contents of a PreQC JSON report.

    Args:
        content: Report text
        source: Name used in log messages

    Returns:
        Decoded document or None if the text is not valid JSON
    """
    try:
        return json.loads(content)
    except ValueError as e:
        logger.error(f"Error parsing JSON report {source}: {e}")
        return None
