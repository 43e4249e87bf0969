#!/usr/bin/env python3
"""Render a sales sunburst from a synthetic DataFrame.

Writes ``sunburst_demo.html`` (chart with the "Europe / Germany" slice
pre-selected) and ``sunburst_demo.json`` (slice geometry) to the current
directory.
"""

import numpy as np
import pandas as pd

from pysunburst import ChartConfig, GroupSettings, LegendSettings, SunburstSettings, render_sunburst


def create_sales_frame(seed: int = 7) -> pd.DataFrame:
    """Create a region / country / product sales table."""
    rng = np.random.default_rng(seed)
    regions = {
        "Europe": ["Germany", "France", "Spain"],
        "Americas": ["USA", "Brazil"],
        "Asia": ["Japan", "India", "Vietnam"],
    }
    products = ["Hardware", "Software", "Services"]
    rows = []
    for region, countries in regions.items():
        for country in countries:
            for product in products:
                rows.append(
                    {
                        "region": region,
                        "country": country,
                        "product": product,
                        "sales": float(rng.gamma(2.0, 500.0)),
                    }
                )
    return pd.DataFrame(rows)


def main():
    df = create_sales_frame()
    config = ChartConfig(
        settings=SunburstSettings(
            group=GroupSettings(font_size=14, show_selected=True, show_data_labels=True),
            legend=LegendSettings(show=True, position="Right", title_text="Region"),
        ),
        measure_format="#,0.00",
    )
    chart = render_sunburst(
        df,
        levels=["region", "country", "product"],
        measure="sales",
        config=config,
        select=["Europe", "Germany"],
    )
    chart.save("sunburst_demo.html")
    chart.save("sunburst_demo.json")

    print(f"Total sales: {chart.stats['total']:,.2f}")
    print(f"Selected: {chart.stats['selection']}")
    for entry in chart.stats["legend"]:
        print(f"  {entry['label']:<10} {entry['color']}")


if __name__ == "__main__":
    main()
