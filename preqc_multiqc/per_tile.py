"""
Per Tile Sequence Quality record.

The PreQC suite reports, for every flowcell tile, how far the mean base
quality of that tile deviates from the all-tile average at each position
bucket. This module holds the immutable record, its validator, the JSON
round trip, and the pass/warn/fail grading used in reports.

JSON LAYOUT:
    {
        "per_tile_quality_score": {
            "x_labels": ["1", "2", "3", "10-14"],
            "tiles": [1101, 1102],
            "means": [[0.1, -0.2, 0.0, 0.3], [-0.1, 0.05, 0.02, -0.3]]
        }
    }

    means[i][j] belongs to tiles[i] at x_labels[j]. The whole block is left
    out of the report when the read identifiers carry no tile number.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from preqc_multiqc.config import PerTileQualityConfig


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

REPORT_KEY = "per_tile_quality_score"
FIELDS = ("x_labels", "tiles", "means")

# The preqc meta command nests the analyses under this key
FASTQC_KEY = "fastqc"

STATUS_PASS = "pass"
STATUS_WARN = "warn"
STATUS_FAIL = "fail"

LABEL_PATTERN = re.compile(r"([0-9]+)(?:-([0-9]+))?")


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class BaseGroup:
    """One position bucket on the x axis (1-based, inclusive)."""
    lower: int
    upper: int

    @property
    def name(self) -> str:
        if self.lower == self.upper:
            return str(self.lower)
        return f"{self.lower}-{self.upper}"

    @property
    def width(self) -> int:
        return self.upper - self.lower + 1

    @classmethod
    def parse(cls, label: str) -> "BaseGroup":
        """
        Parse a position label such as "7" or "10-14".

        Raises:
            ValueError: If the label is not a single position or an
                ascending range of positions starting at 1 or later
        """
        if not isinstance(label, str):
            raise ValueError(f"Position label must be a string, got {label!r}")

        match = LABEL_PATTERN.fullmatch(label)
        if match is None:
            raise ValueError(f"Malformed position label: {label!r}")

        lower = int(match.group(1))
        upper = int(match.group(2)) if match.group(2) is not None else lower

        if lower < 1:
            raise ValueError(f"Position label starts before base 1: {label!r}")
        if upper < lower:
            raise ValueError(f"Position label range is reversed: {label!r}")

        return cls(lower, upper)


@dataclass(frozen=True)
class PerTileQualityReport:
    """
    Mean quality deviation per flowcell tile and position bucket.

    Instances are validated on construction and never change afterwards;
    list arguments are stored as tuples.
    """
    x_labels: tuple[str, ...]
    tiles: tuple[int, ...]
    means: tuple[tuple[float, ...], ...]

    def __post_init__(self):
        messages = check_per_tile_quality({
            "x_labels": self.x_labels,
            "tiles": self.tiles,
            "means": self.means,
        })
        if messages:
            raise ValueError(_format_errors(messages))

        object.__setattr__(self, "x_labels", tuple(self.x_labels))
        object.__setattr__(self, "tiles", tuple(self.tiles))
        object.__setattr__(
            self, "means", tuple(tuple(float(v) for v in row) for row in self.means)
        )

    # -------------------------------------------------------------------------
    # Construction and serialisation
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PerTileQualityReport":
        """
        Build a record from a decoded ``per_tile_quality_score`` object.

        Keys other than x_labels, tiles and means (the upstream tool also
        writes its raw counts, max_deviation, ignore_in_report and so on)
        are ignored.

        Raises:
            ValueError: Listing every problem found in the object
        """
        messages = check_per_tile_quality(data)
        if messages:
            raise ValueError(_format_errors(messages))
        return cls(**{field: data[field] for field in FIELDS})

    def to_dict(self) -> dict:
        """Convert to a plain dictionary with the three report fields."""
        return {
            "x_labels": list(self.x_labels),
            "tiles": list(self.tiles),
            "means": [list(row) for row in self.means],
        }

    @classmethod
    def from_json(cls, text: str) -> "PerTileQualityReport":
        """
        Parse JSON text holding the block, either wrapped in its
        ``per_tile_quality_score`` key or as the bare object.
        """
        data = json.loads(text)
        if isinstance(data, Mapping) and REPORT_KEY in data:
            data = data[REPORT_KEY]
        return cls.from_dict(data)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialise wrapped in the ``per_tile_quality_score`` key."""
        return json.dumps({REPORT_KEY: self.to_dict()}, indent=indent)

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def base_groups(self) -> tuple[BaseGroup, ...]:
        return tuple(BaseGroup.parse(label) for label in self.x_labels)

    @property
    def max_deviation(self) -> float:
        """Largest absolute deviation over all tiles and positions."""
        values = self.to_array()
        if values.size == 0:
            return 0.0
        return float(np.abs(values).max())

    def tile_deviation(self, tile: int) -> tuple[float, ...]:
        """
        Return the row of mean deviations for one tile.

        Raises:
            KeyError: If the tile is not in the report
        """
        try:
            index = self.tiles.index(tile)
        except ValueError:
            raise KeyError(tile) from None
        return self.means[index]

    def to_array(self) -> np.ndarray:
        """Means as a float array of shape (tiles, positions)."""
        return np.array(self.means, dtype=float).reshape(
            len(self.tiles), len(self.x_labels)
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Means as a DataFrame indexed by tile with one column per label."""
        return pd.DataFrame(
            self.to_array(),
            index=pd.Index(self.tiles, name="tile"),
            columns=list(self.x_labels),
        )


# =============================================================================
# VALIDATION
# =============================================================================

def check_per_tile_quality(data: Any) -> list[str]:
    """
    Validate a decoded per tile quality object.

    Args:
        data: Mapping with x_labels, tiles and means

    Returns:
        List of error messages (empty if valid)
    """
    if not isinstance(data, Mapping):
        return [f"Expected an object, got {type(data).__name__}"]

    missing = [field for field in FIELDS if field not in data]
    if missing:
        return [f"Missing required fields: {', '.join(missing)}"]

    messages = []
    for field in FIELDS:
        if not isinstance(data[field], (list, tuple)):
            messages.append(
                f"'{field}' must be an array, got {type(data[field]).__name__}"
            )
    if messages:
        return messages

    x_labels = data["x_labels"]
    tiles = data["tiles"]
    means = data["means"]

    messages.extend(_check_labels(x_labels))
    messages.extend(_check_tiles(tiles))

    if len(means) != len(tiles):
        messages.append(
            f"'means' has {len(means)} rows but there are {len(tiles)} tiles"
        )

    for i, row in enumerate(means):
        if not isinstance(row, (list, tuple)):
            messages.append(f"means[{i}]: row must be an array, got {type(row).__name__}")
            continue
        if len(row) != len(x_labels):
            messages.append(
                f"means[{i}]: row has {len(row)} values but there are "
                f"{len(x_labels)} position labels"
            )
        for j, value in enumerate(row):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                messages.append(f"means[{i}][{j}]: expected a number, got {value!r}")
            elif not _is_finite(value):
                messages.append(f"means[{i}][{j}]: value is not finite")

    return messages


def _check_labels(x_labels) -> list[str]:
    messages = []
    previous = None

    for j, label in enumerate(x_labels):
        try:
            group = BaseGroup.parse(label)
        except ValueError as e:
            messages.append(f"x_labels[{j}]: {e}")
            continue

        if previous is not None and group.lower <= previous.upper:
            messages.append(
                f"x_labels[{j}]: {label!r} overlaps or precedes {previous.name!r}"
            )
        previous = group

    return messages


def _check_tiles(tiles) -> list[str]:
    messages = []
    seen = set()

    for i, tile in enumerate(tiles):
        if isinstance(tile, bool) or not isinstance(tile, int):
            messages.append(f"tiles[{i}]: tile id must be an integer, got {tile!r}")
            continue
        if tile <= 0:
            messages.append(f"tiles[{i}]: tile id must be positive, got {tile}")
        if tile in seen:
            messages.append(f"tiles[{i}]: duplicate tile id {tile}")
        seen.add(tile)

    return messages


def _is_finite(value) -> bool:
    # JSON integers can be too large to convert to a float
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _format_errors(messages: list[str]) -> str:
    return "Invalid per tile quality block: " + "; ".join(messages)


# =============================================================================
# REPORT EXTRACTION
# =============================================================================

def extract_per_tile_quality(report: Mapping[str, Any]) -> Optional[PerTileQualityReport]:
    """
    Pull the per tile quality record out of a decoded PreQC report.

    The block is looked up at the top level first, then under "fastqc".

    Args:
        report: Decoded JSON report document

    Returns:
        The record, or None if the report carries no tile data

    Raises:
        ValueError: If the report is not an object or the block is malformed
    """
    if not isinstance(report, Mapping):
        raise ValueError(f"Expected a report object, got {type(report).__name__}")

    block = report.get(REPORT_KEY)
    if block is None and isinstance(report.get(FASTQC_KEY), Mapping):
        block = report[FASTQC_KEY].get(REPORT_KEY)

    if block is None:
        logger.debug("Report has no per tile quality block")
        return None

    if isinstance(block, Mapping):
        if block.get("ignore_in_report"):
            logger.debug("Per tile quality block is marked as ignored")
            return None
        if isinstance(block.get("tiles"), list) and not block["tiles"]:
            logger.debug("Per tile quality block has no tiles")
            return None

    return PerTileQualityReport.from_dict(block)


# =============================================================================
# GRADING
# =============================================================================

def grade_per_tile_quality(
    report: PerTileQualityReport,
    config: Optional[PerTileQualityConfig] = None
) -> str:
    """
    Grade a record from its largest deviation.

    Returns:
        "fail" above the error threshold, "warn" above the warn threshold,
        otherwise "pass"
    """
    config = config or PerTileQualityConfig()
    deviation = report.max_deviation

    if deviation > config.error_threshold:
        return STATUS_FAIL
    if deviation > config.warn_threshold:
        return STATUS_WARN
    return STATUS_PASS


def flagged_tiles(report: PerTileQualityReport, threshold: float) -> list[int]:
    """Tile ids whose largest absolute deviation exceeds the threshold."""
    values = report.to_array()
    if values.size == 0:
        return []

    worst = np.abs(values).max(axis=1)
    return [tile for tile, value in zip(report.tiles, worst) if value > threshold]


def summarise_per_tile_quality(
    report: PerTileQualityReport,
    config: Optional[PerTileQualityConfig] = None
) -> dict:
    """
    Summary statistics for one record.

    Returns:
        Dictionary with tiles, positions, max_deviation, flagged_tiles
        (count above the warn threshold) and status
    """
    config = config or PerTileQualityConfig()
    return {
        "tiles": len(report.tiles),
        "positions": len(report.x_labels),
        "max_deviation": report.max_deviation,
        "flagged_tiles": len(flagged_tiles(report, config.warn_threshold)),
        "status": grade_per_tile_quality(report, config),
    }
