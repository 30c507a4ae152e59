"""Layout calculation functions."""

# Gauge panels are a border plus one bar row
GAUGE_HEIGHT = 3
LEGEND_HEIGHT = 2
MIN_WIDTH = 20
MIN_HEIGHT = LEGEND_HEIGHT + 2 * GAUGE_HEIGHT + 3


def calculate_layout(width: int, height: int) -> dict[str, int]:
    """
    Pure function: calculate positions and sizes of every panel.

    The screen is split into two equal columns above a two-line control
    legend. The left column stacks the info panel, progress gauge and
    volume gauge; the right column is the playlist.

    Args:
        width: Terminal width in columns
        height: Terminal height in rows

    Returns:
        Dictionary with region positions and sizes
    """
    width = max(width, MIN_WIDTH)
    height = max(height, MIN_HEIGHT)

    body_height = height - LEGEND_HEIGHT
    left_width = width // 2
    info_height = body_height - 2 * GAUGE_HEIGHT

    return {
        "left_x": 0,
        "left_width": left_width,
        "right_x": left_width,
        "right_width": width - left_width,
        "info_y": 0,
        "info_height": info_height,
        "progress_y": info_height,
        "volume_y": info_height + GAUGE_HEIGHT,
        "gauge_height": GAUGE_HEIGHT,
        "playlist_y": 0,
        "playlist_height": body_height,
        "legend_y": body_height,
        "width": width,
        "height": height,
    }
