"""
PreQC MultiQC plugin.

This package reads the Per Tile Sequence Quality block of PreQC JSON reports,
validates it, and shows it in MultiQC reports as a per-sample heatmap.
"""

from preqc_multiqc.config import PerTileQualityConfig, load_config
from preqc_multiqc.per_tile import (
    BaseGroup,
    PerTileQualityReport,
    check_per_tile_quality,
    extract_per_tile_quality,
    flagged_tiles,
    grade_per_tile_quality,
    summarise_per_tile_quality,
)

__version__ = "1.0.0"
__description__ = "MultiQC plugin for PreQC per tile sequence quality reports"

__all__ = [
    "BaseGroup",
    "PerTileQualityConfig",
    "PerTileQualityReport",
    "check_per_tile_quality",
    "extract_per_tile_quality",
    "flagged_tiles",
    "grade_per_tile_quality",
    "load_config",
    "summarise_per_tile_quality",
]
