"""
Settings for the per tile quality report.

Inside MultiQC the values come from the ``preqc_per_tile`` key of the user's
MultiQC config, for example in ``multiqc_config.yaml``:

    preqc_per_tile:
        warn_threshold: 5
        error_threshold: 10
        ignore: false
"""

import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional


logger = logging.getLogger(__name__)

CONFIG_KEY = "preqc_per_tile"


@dataclass
class PerTileQualityConfig:
    """Thresholds for grading per tile quality deviation."""
    warn_threshold: float = 5.0    # deviation above this is a warning
    error_threshold: float = 10.0  # deviation above this is a failure
    ignore: bool = False           # skip the analysis entirely


def load_config(overrides: Optional[Mapping[str, Any]] = None) -> PerTileQualityConfig:
    """
    Build a config from user overrides.

    Args:
        overrides: Mapping of setting names to values. Unknown keys are
            logged and ignored.

    Returns:
        PerTileQualityConfig with defaults for anything not given

    Raises:
        ValueError: If a threshold is not a non-negative number or the warn
            threshold is above the error threshold
    """
    config = PerTileQualityConfig()
    if not overrides:
        return config

    known = {f.name for f in fields(PerTileQualityConfig)}
    for key in overrides:
        if key not in known:
            logger.warning(f"Ignoring unknown {CONFIG_KEY} setting: {key}")

    for key in ("warn_threshold", "error_threshold"):
        if key in overrides:
            setattr(config, key, _parse_threshold(key, overrides[key]))

    if "ignore" in overrides:
        config.ignore = str(overrides["ignore"]).lower() in ("true", "yes", "1")

    if config.warn_threshold > config.error_threshold:
        raise ValueError(
            f"warn_threshold ({config.warn_threshold}) is above "
            f"error_threshold ({config.error_threshold})"
        )

    return config


def _parse_threshold(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {value!r}") from None
    if not math.isfinite(threshold) or threshold < 0:
        raise ValueError(f"{key} must be a finite, non-negative number, got {threshold}")
    return threshold
