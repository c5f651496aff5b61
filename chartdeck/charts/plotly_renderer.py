"""Plotly renderer adapter for ChartSpecs."""

import re
from pathlib import Path
from typing import Any, Protocol

import plotly.graph_objects as go
import plotly.offline as pyo
from loguru import logger

from chartdeck.utils.vis_types import AxisPosition, AxisScale, ChartSpec, SeriesDescriptor

_AXIS_TYPES = {
    AxisScale.CATEGORY: "category",
    AxisScale.NUMBER: "linear",
    AxisScale.TIME: "date",
}

_THEMES = {"light": "plotly_white", "dark": "plotly_dark"}

DONUT_HOLE = 0.4


class ChartRenderer(Protocol):
    """Anything that can draw a ChartSpec."""

    def render(
        self, spec: ChartSpec, width: int, height: int, theme: str = "light"
    ) -> dict[str, Any]:
        """Render a spec at the given size and theme."""
        ...


def sanitize_filename(title: str | None) -> str:
    """
    Derive a PNG export filename from a chart title.

    Args:
        title: Chart title

    Returns:
        Lowercase filename restricted to [a-z0-9_.-] with a .png suffix

    """
    if not title:
        return "chart.png"
    name = re.sub(r"[^a-z0-9_.-]+", "_", title, flags=re.IGNORECASE)
    name = re.sub(r"_+", "_", name)
    return name.lower() + ".png"


def _column(data: list[dict[str, Any]], key: str | None) -> list[Any]:
    return [row.get(key) for row in data] if key else []


class PlotlyRenderer:
    """Converts ChartSpecs into Plotly figure dictionaries."""

    @staticmethod
    def generate_bar_traces(
        series: SeriesDescriptor, data: list[dict[str, Any]], chart_json: dict[str, Any]
    ) -> None:
        """Generate bar traces (single, horizontal, stacked or grouped)."""
        x_data = _column(data, series.x_key)

        if series.y_keys:
            for y_key in series.y_keys:
                chart_json["data"].append(
                    {"x": x_data, "y": _column(data, y_key), "type": "bar", "name": y_key}
                )
            chart_json["layout"]["barmode"] = "stack" if series.stacked else "group"
            return

        trace = {
            "x": x_data,
            "y": _column(data, series.y_key),
            "type": "bar",
            "name": series.y_name or series.y_key,
        }
        if series.direction == "horizontal":
            # X holds the values, Y the categories
            trace["orientation"] = "h"
        chart_json["data"].append(trace)

    @staticmethod
    def generate_scatter_traces(
        series: SeriesDescriptor, data: list[dict[str, Any]], chart_json: dict[str, Any]
    ) -> None:
        """Generate scatter trace."""
        chart_json["data"].append(
            {
                "x": _column(data, series.x_key),
                "y": _column(data, series.y_key),
                "type": "scatter",
                "mode": "markers",
                "name": series.y_name or series.y_key,
            }
        )

    @staticmethod
    def generate_pie_traces(
        series: SeriesDescriptor, data: list[dict[str, Any]], chart_json: dict[str, Any]
    ) -> None:
        """Generate pie or donut trace."""
        chart_json["data"].append(
            {
                "labels": _column(data, series.callout_label_key),
                "values": _column(data, series.angle_key),
                "type": "pie",
                "hole": DONUT_HOLE if series.type == "donut" else 0,
                "name": series.angle_key,
            }
        )

    def to_figure_dict(
        self,
        spec: ChartSpec,
        width: int | None = None,
        height: int | None = None,
        theme: str = "light",
    ) -> dict[str, Any]:
        """
        Convert a ChartSpec into a Plotly figure dictionary.

        Args:
            spec: Chart specification
            width: Figure width in pixels (renderer-owned)
            height: Figure height in pixels (renderer-owned)
            theme: "light" or "dark"

        Returns:
            Dict with "data" (traces) and "layout"

        """
        chart_json: dict[str, Any] = {
            "data": [],
            "layout": {
                "title": {"text": spec.title},
                "template": _THEMES.get(theme, _THEMES["light"]),
            },
        }
        if width:
            chart_json["layout"]["width"] = width
        if height:
            chart_json["layout"]["height"] = height

        for series in spec.series:
            if series.type == "bar":
                self.generate_bar_traces(series, spec.data, chart_json)
            elif series.type == "scatter":
                self.generate_scatter_traces(series, spec.data, chart_json)
            elif series.type in ("donut", "pie"):
                self.generate_pie_traces(series, spec.data, chart_json)

        for axis in spec.axes or []:
            layout_key = "xaxis" if axis.position == AxisPosition.BOTTOM else "yaxis"
            chart_json["layout"][layout_key] = {
                "type": _AXIS_TYPES[axis.type],
                "title": {"text": axis.title},
            }

        return chart_json

    def render(
        self, spec: ChartSpec, width: int, height: int, theme: str = "light"
    ) -> dict[str, Any]:
        """Render a spec to a figure dictionary."""
        return self.to_figure_dict(spec, width=width, height=height, theme=theme)

    def to_figure(self, spec: ChartSpec, **kwargs) -> go.Figure:
        """Build a plotly Figure from a spec."""
        chart_json = self.to_figure_dict(spec, **kwargs)
        return go.Figure(data=chart_json["data"], layout=chart_json["layout"])

    def write_html(
        self, spec: ChartSpec, path: str | Path | None = None, **kwargs
    ) -> str | None:
        """
        Write a standalone HTML file for a spec without opening a browser.

        Args:
            spec: Chart specification
            path: Output file (defaults to the sanitized title with .html)
            **kwargs: Passed to to_figure_dict

        Returns:
            Path to generated HTML file or None if failed

        """
        html_path = (
            Path(path) if path else Path(sanitize_filename(spec.title)).with_suffix(".html")
        )
        try:
            fig = self.to_figure(spec, **kwargs)
            pyo.plot(fig, auto_open=False, filename=str(html_path))
        except Exception as e:
            logger.error(f"Error creating chart file: {e}")
            return None

        logger.info(f"Wrote chart '{spec.title}' to {html_path}")
        return str(html_path)
