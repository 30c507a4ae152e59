"""Blessed UI components."""

from .layout import calculate_layout
from .panels import (
    draw_box,
    gauge_bar,
    legend_lines,
    playlist_rows,
    render_info_panel,
    render_legend,
    render_playlist,
    render_progress_gauge,
    render_volume_gauge,
)

__all__ = [
    "calculate_layout",
    "draw_box",
    "gauge_bar",
    "legend_lines",
    "playlist_rows",
    "render_info_panel",
    "render_legend",
    "render_playlist",
    "render_progress_gauge",
    "render_volume_gauge",
]
