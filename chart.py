# chart.py
# Plotly line chart: one line per manufacturer, hover tooltips, and an
# optional dashed trendline. All layout settings come in through ChartConfig.

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

import plotly.express as px
import plotly.graph_objects as go

from analysis import SeriesPoint, TrendPoint, manufacturers_of

TEMPLATE = "plotly_white"

HOVER = ("<b>Year:</b> %{x}<br>"
         "<b>Total Fatalities:</b> %{y}<br>"
         "<b>Manufacturer:</b> %{customdata}<extra></extra>")


@dataclass(frozen=True)
class ChartConfig:
    width: int = 900
    height: int = 400
    # top, right, bottom, left
    margin: tuple[int, int, int, int] = (50, 30, 60, 70)
    palette: tuple[str, ...] = tuple(px.colors.qualitative.D3)
    line_width: int = 2
    x_title: str = "Year"
    y_title: str = "Total Fatal Injuries"
    legend_title: str = "Manufacturer"
    trend_name: str = "Trendline"
    trend_color: str = "gray"
    trend_dash: str = "dash"
    template: str = TEMPLATE
    title: Optional[str] = None

    def color(self, index: int) -> str:
        return self.palette[index % len(self.palette)]


def build_figure(series: Sequence[SeriesPoint],
                 trend: Sequence[TrendPoint] = (),
                 config: ChartConfig = ChartConfig()) -> go.Figure:
    fig = go.Figure()

    for i, manufacturer in enumerate(manufacturers_of(series)):
        points = [p for p in series if p.manufacturer == manufacturer]
        fig.add_trace(go.Scatter(
            x=[p.year for p in points],
            y=[p.total_fatalities for p in points],
            mode="lines",
            name=manufacturer,
            line=dict(color=config.color(i), width=config.line_width),
            customdata=[manufacturer] * len(points),
            hovertemplate=HOVER,
        ))

    if trend:
        fig.add_trace(go.Scatter(
            x=[t.year for t in trend],
            y=[t.fitted_value for t in trend],
            mode="lines",
            name=config.trend_name,
            line=dict(color=config.trend_color, width=config.line_width, dash=config.trend_dash),
            hoverinfo="skip",
        ))

    top, right, bottom, left = config.margin
    fig.update_layout(
        width=config.width,
        height=config.height,
        margin=dict(t=top, r=right, b=bottom, l=left),
        template=config.template,
        legend_title_text=config.legend_title,
        hovermode="closest",
    )
    if config.title:
        fig.update_layout(title_text=config.title)
    fig.update_xaxes(title_text=config.x_title, tickformat="d")
    fig.update_yaxes(title_text=config.y_title)

    if series:
        years = [p.year for p in series]
        fig.update_xaxes(range=[min(years), max(years)])
        fig.update_yaxes(range=[0, max(p.total_fatalities for p in series) + 1])

    return fig
