"""
PreQC MultiQC modules.

This package contains the following MultiQC modules:
- per_tile_quality: Per tile sequence quality heatmaps and deviation summary
"""
