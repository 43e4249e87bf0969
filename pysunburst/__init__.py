"""pysunburst package exports.

Preferred high-level API:
    from pysunburst import render_sunburst, ChartConfig, SunburstSettings
"""

from .api import Chart, ChartConfig, render_sunburst
from .config import GroupSettings, LegendSettings, SunburstSettings

__version__ = "0.1.0"

__all__ = [
    "Chart",
    "ChartConfig",
    "GroupSettings",
    "LegendSettings",
    "SunburstSettings",
    "render_sunburst",
    "__version__",
]
