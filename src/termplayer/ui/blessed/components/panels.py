"""Panel rendering functions.

Each function returns fully padded rows for its panel so the app can
compose the two columns line by line.
"""

from blessed import Terminal

from termplayer.domain.playback.cursor import page_window_start
from termplayer.domain.playback.view import PlayerView

STATUS_STYLES = {
    "Playing": "black_on_green",
    "Paused": "black_on_yellow",
    "Stopped": "black_on_red",
}


def fit(term: Terminal, text: str, width: int) -> str:
    """Truncate or pad formatted text to exactly width visible columns."""
    if width <= 0:
        return ""
    return term.ljust(term.truncate(text, width), width)


def draw_box(
    term: Terminal, title: str, body: list[str], width: int, height: int, title_style: str = ""
) -> list[str]:
    """Bordered panel of the given outer size with body rows clipped to fit."""
    if width < 2 or height < 2:
        return [" " * max(width, 0)] * max(height, 0)

    inner = width - 2
    border = term.green
    label = f" {title} "[:inner] if title else ""
    styled_label = getattr(term, title_style)(label) if title_style and label else border(label)

    rows = [border("┌") + styled_label + border("─" * (inner - len(label)) + "┐")]
    for i in range(height - 2):
        text = body[i] if i < len(body) else ""
        rows.append(border("│") + fit(term, text, inner) + border("│"))
    rows.append(border("└" + "─" * inner + "┘"))
    return rows


def render_info_panel(term: Terminal, view: PlayerView, width: int, height: int) -> list[str]:
    """Song info of the playing item, wrapped, plus the last status message."""
    inner = max(width - 2, 1)
    body: list[str] = []
    for line in view.info_lines:
        label, sep, value = line.partition(":")
        wrapped = term.wrap(line, inner) or [""]
        if sep and wrapped:
            # Colour the field name on the first wrapped row only
            first = wrapped[0]
            if first.startswith(label + sep):
                wrapped[0] = term.green(label + sep) + first[len(label + sep):]
        body.extend(wrapped)

    if view.message:
        body.append("")
        body.extend(term.yellow(part) for part in term.wrap(view.message, inner))

    return draw_box(term, "Song info", body, width, height)


def gauge_bar(term: Terminal, percent: int, label: str, width: int) -> str:
    """A bar filled to percent with the label centred over it."""
    if width <= 0:
        return ""
    percent = max(0, min(100, percent))
    filled = int(width * percent / 100)
    text = label[:width].center(width)
    return term.black_on_green(text[:filled]) + text[filled:]


def render_progress_gauge(term: Terminal, view: PlayerView, width: int) -> list[str]:
    inner = max(width - 2, 0)
    if view.status == "Stopped":
        bar = gauge_bar(term, 0, "Stopped", inner)
    else:
        bar = gauge_bar(term, view.progress_percent, f"{view.progress_percent}%  {view.progress_label}", inner)
    title = f"({view.status})"
    return draw_box(term, title, [bar], width, 3, STATUS_STYLES.get(view.status, ""))


def render_volume_gauge(term: Terminal, view: PlayerView, width: int) -> list[str]:
    inner = max(width - 2, 0)
    bar = gauge_bar(term, view.volume, f"{view.volume}%", inner)
    return draw_box(term, "Volume", [bar], width, 3)


def playlist_rows(view: PlayerView, panel_height: int) -> list[tuple[str, bool]]:
    """
    Visible playlist rows as (text, selected) pairs.

    The window jumps a page at a time so the cursor is always on screen;
    exactly one row (the cursor's) is marked selected.
    """
    page = max(panel_height - 2, 0)
    start = page_window_start(view.cursor, panel_height)
    visible = view.playlist[start:start + page]
    return [(name, start + i == view.cursor) for i, name in enumerate(visible)]


def render_playlist(term: Terminal, view: PlayerView, width: int, height: int) -> list[str]:
    page = max(height - 2, 0)
    start = page_window_start(view.cursor, height)
    body = []
    for offset, (name, selected) in enumerate(playlist_rows(view, height)):
        index = start + offset
        if selected:
            body.append(term.black_on_green(name))
        elif index == view.playing_index:
            body.append(term.bold(name))
        else:
            body.append(name)
    return draw_box(term, "Playlist", body[:page], width, height)


def legend_lines(play_mode: str) -> tuple[list[tuple[str, str]], list[tuple[str, str]]]:
    """Key/action pairs for the two legend rows, the first led by the play mode.

    Both rows fit in 80 columns so the mode name is never truncated.
    """
    first = [
        ("", f" {play_mode} "),
        (" < ", "Previous"),
        ("Left ", "-10s"),
        (" - ", "Vol-"),
        (" Up ", "Move Up  "),
        ("Enter", "Select"),
        (" m ", "Mode"),
    ]
    second = [
        (" > ", "Next"),
        ("Right", "+10s"),
        (" + ", "Vol+"),
        ("Down", "Move Down"),
        (" Esc ", "Stop"),
        ("Space", "Pause"),
        (" r ", "Refresh"),
        (" q ", "Exit"),
    ]
    return first, second


def render_legend(term: Terminal, view: PlayerView, width: int) -> list[str]:
    rows = []
    for pairs in legend_lines(view.play_mode):
        parts = []
        for key, action in pairs:
            if key:
                parts.append(term.black_on_white(key) + term.black_on_green(action))
            else:
                parts.append(term.black_on_yellow(action))
        rows.append(fit(term, " ".join(parts), width))
    return rows
