"""
MultiQC module for PreQC per tile sequence quality.

This module visualizes:
- Mean quality deviation per flowcell tile and read position (heatmap per sample)
- Largest deviation and number of flagged tiles (general statistics)
"""

import logging
from collections import OrderedDict

from multiqc import config
from multiqc.base_module import BaseMultiqcModule
from multiqc.plots import heatmap

from preqc_multiqc.config import CONFIG_KEY, load_config
from preqc_multiqc.hooks import SEARCH_PATTERN_KEY
from preqc_multiqc.per_tile import extract_per_tile_quality, summarise_per_tile_quality
from preqc_multiqc.utils import parse_json_text

logger = logging.getLogger(__name__)


def heatmap_inputs(report):
    """
    Arrange a record for ``heatmap.plot``.

    Returns:
        Tuple of (rows of means, x categories, y categories)
    """
    data = [list(row) for row in report.means]
    xcats = list(report.x_labels)
    ycats = [str(tile) for tile in report.tiles]
    return data, xcats, ycats


class MultiqcModule(BaseMultiqcModule):
    """
    PreQC Per Tile Sequence Quality Module

    Parses the per_tile_quality_score block of PreQC JSON reports and plots
    how far each tile's mean quality deviates from the average of all tiles.
    """

    def __init__(self):
        # Initialise the parent object
        super(MultiqcModule, self).__init__(
            name="PreQC Per Tile Quality",
            anchor="preqc_per_tile_quality",
            info="Mean base quality deviation of each flowcell tile from the all-tile average.",
        )

        self.tile_config = load_config(getattr(config, CONFIG_KEY, None))
        if self.tile_config.ignore:
            logger.info("Per tile quality is disabled in the MultiQC config")
            raise UserWarning

        self.per_tile_data = OrderedDict()

        for f in self.find_log_files(SEARCH_PATTERN_KEY):
            self.parse_report(f)

        self.per_tile_data = self.ignore_samples(self.per_tile_data)

        # If no data found, exit
        if not self.per_tile_data:
            raise UserWarning

        logger.info(f"Found {len(self.per_tile_data)} reports with per tile quality")

        self.summary = OrderedDict(
            (s_name, summarise_per_tile_quality(report, self.tile_config))
            for s_name, report in self.per_tile_data.items()
        )
        self.write_data_file(self.summary, "multiqc_preqc_per_tile")

        self.add_summary_table()
        for index, (s_name, report) in enumerate(self.per_tile_data.items()):
            self.per_tile_heatmap(index, s_name, report)

    def parse_report(self, f):
        """Decode one report file and keep its per tile record."""
        document = parse_json_text(f["f"], f["fn"])
        if document is None:
            return

        try:
            report = extract_per_tile_quality(document)
        except ValueError as e:
            logger.warning(f"Skipping {f['fn']}: {e}")
            return

        if report is None:
            logger.debug(f"No tile information in {f['fn']}")
            return

        s_name = self.clean_s_name(f["s_name"], f)
        if s_name in self.per_tile_data:
            logger.debug(f"Duplicate sample name found! Overwriting: {s_name}")
        self.add_data_source(f, s_name)
        self.per_tile_data[s_name] = report

    def per_tile_heatmap(self, index, s_name, report):
        """Create the tile by position heatmap for one sample."""
        data, xcats, ycats = heatmap_inputs(report)
        limit = max(report.max_deviation, self.tile_config.warn_threshold)
        anchor = f"preqc_per_tile_quality_heatmap_{index}"

        pconfig = {
            "id": anchor,
            "title": f"PreQC: Per Tile Sequence Quality ({s_name})",
            "xlab": "Position in read (bp)",
            "ylab": "Tile",
            "min": -limit,
            "max": limit,
            "square": False,
            "xcats_samples": False,
            "ycats_samples": False,
        }

        self.add_section(
            name=f"Per Tile Sequence Quality: {s_name}",
            anchor=anchor,
            description=(
                f"Status <b>{self.summary[s_name]['status']}</b>, "
                f"largest deviation {report.max_deviation:.2f}."
            ),
            helptext="""
            Each cell is the mean Phred quality of one tile at one position (or range
            of positions) minus the mean of all tiles at that position.
            - **Negative values**: the tile is below the average
            - **Positive values**: the tile is above the average

            Problems confined to a few tiles usually point at bubbles, smudges on the
            flowcell, or debris in the lane rather than at the library itself.
            """,
            plot=heatmap.plot(data, xcats, ycats, pconfig),
        )

    def add_summary_table(self):
        """Add per tile deviation columns to the general statistics table."""
        headers = OrderedDict()
        headers["max_deviation"] = {
            "title": "Tile Max Dev",
            "description": "Largest absolute deviation of a tile from the all-tile mean quality",
            "format": "{:.2f}",
            "min": 0,
            "scale": "OrRd",
        }
        headers["flagged_tiles"] = {
            "title": "Flagged Tiles",
            "description": (
                f"Tiles deviating by more than {self.tile_config.warn_threshold:g} "
                "from the all-tile mean quality"
            ),
            "format": "{:,.0f}",
            "min": 0,
            "scale": "Reds",
        }

        self.general_stats_addcols(self.summary, headers)
