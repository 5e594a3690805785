"""
Chart construction on top of Plotly.

register_plotting() installs the dashboard's Plotly template once per
process. It is safe to call from any thread and any number of times;
build_figure() calls it before building the first figure.
"""
from __future__ import annotations
import threading
import plotly.graph_objects as go
import plotly.io as pio
from loguru import logger
from .models import ChartSeries

TEMPLATE_NAME = "fuel_dashboard"

BAR_COLOR = "rgba(32, 0, 150, 0.53)"
LINE_COLOR = "rgb(174, 0, 255)"

_registered = False
_register_lock = threading.Lock()


def register_plotting() -> bool:
    """
    Register the dashboard template with Plotly.

    Returns True if this call performed the registration, False if it had
    already been done.
    """
    global _registered
    with _register_lock:
        if _registered:
            return False
        pio.templates[TEMPLATE_NAME] = go.layout.Template(
            layout=go.Layout(
                font=dict(family="Helvetica, Arial, sans-serif", size=13),
                title=dict(x=0.5),
                legend=dict(orientation="h", y=-0.2),
                margin=dict(l=40, r=20, t=60, b=40),
                plot_bgcolor="white",
            )
        )
        _registered = True
        logger.debug(f"Registered plotly template {TEMPLATE_NAME!r}")
        return True


def is_registered() -> bool:
    return _registered


def build_figure(series: ChartSeries) -> go.Figure:
    register_plotting()

    if series.kind == "bar":
        trace = go.Bar(
            x=series.labels,
            y=series.values,
            name=series.label,
            marker_color=BAR_COLOR,
        )
    else:
        trace = go.Scatter(
            x=series.labels,
            y=series.values,
            name=series.label,
            mode="lines+markers",
            line=dict(color=LINE_COLOR),
        )

    fig = go.Figure(data=[trace])
    fig.update_layout(
        template=f"plotly_white+{TEMPLATE_NAME}",
        title=series.title,
        showlegend=True,
    )
    return fig


def figure_html(fig: go.Figure, include_plotlyjs: str | bool = "cdn") -> str:
    """Embeddable <div> for a figure. ``include_plotlyjs`` follows plotly's to_html."""
    if include_plotlyjs == "inline":
        include_plotlyjs = True
    elif include_plotlyjs == "none":
        include_plotlyjs = False
    return fig.to_html(full_html=False, include_plotlyjs=include_plotlyjs)
