"""Drawing the player's screen with curses."""

from __future__ import annotations

import curses
from dataclasses import dataclass

from .app import CurrentList
from .widgets import (
    current_playing_lines,
    list_area_lines,
    progress_label,
    progress_ratio,
    status_lines,
)

_COLORS: dict[str, int] = {}
_ROW_STYLES = {0: ("bold",), 1: ("dim", "italic")}


@dataclass(frozen=True)
class Rect:
    """A rectangular screen area."""

    x: int
    y: int
    width: int
    height: int

    def inner(self) -> Rect:
        """The area inside a one-cell border."""
        return Rect(self.x + 1, self.y + 1, max(self.width - 2, 0), max(self.height - 2, 0))


def compute_layout(width: int, height: int) -> tuple[Rect, Rect, Rect, Rect, Rect]:
    """Areas for playlists, tracks, now playing, progress and status.

    The bottom row is at most four lines high; the playlists take a third
    of the top row; the bottom row is split one, two and one quarters.
    """
    width, height = max(width, 0), max(height, 0)
    bottom_height = min(4, height)
    top_height = height - bottom_height
    left = width // 3
    quarter = width // 4
    return (
        Rect(0, 0, left, top_height),
        Rect(left, 0, width - left, top_height),
        Rect(0, top_height, quarter, bottom_height),
        Rect(quarter, top_height, width - 2 * quarter, bottom_height),
        Rect(width - quarter, top_height, quarter, bottom_height),
    )


def _green() -> int:
    if "green" not in _COLORS:
        try:
            if curses.has_colors():
                curses.start_color()
                try:
                    curses.use_default_colors()
                    background = -1
                except curses.error:
                    background = curses.COLOR_BLACK
                curses.init_pair(1, curses.COLOR_GREEN, background)
                _COLORS["green"] = curses.color_pair(1)
            else:
                _COLORS["green"] = 0
        except curses.error:
            return 0
    return _COLORS["green"]


def _attr(names) -> int:
    table = {
        "bold": curses.A_BOLD,
        "dim": curses.A_DIM,
        "italic": getattr(curses, "A_ITALIC", 0),
        "reverse": curses.A_REVERSE,
    }
    value = 0
    for name in names:
        value |= table[name]
    return value


def _put(screen, y: int, x: int, text: str, attr: int, width: int) -> None:
    if width <= 0 or not text:
        return
    try:
        screen.addstr(y, x, text[:width], attr)
    except curses.error:
        pass


def _draw_box(screen, rect: Rect, attr: int) -> None:
    if rect.width < 2 or rect.height < 2:
        return
    span = "─" * (rect.width - 2)
    _put(screen, rect.y, rect.x, f"╭{span}╮", attr, rect.width)
    for y in range(rect.y + 1, rect.y + rect.height - 1):
        _put(screen, y, rect.x, "│", attr, 1)
        _put(screen, y, rect.x + rect.width - 1, "│", attr, 1)
    _put(screen, rect.y + rect.height - 1, rect.x, f"╰{span}╯", attr, rect.width)


def _draw_list(screen, rect: Rect, items, selected, focused: bool, green: int) -> None:
    _draw_box(screen, rect, green)
    inner = rect.inner()
    styled_rows = any(not isinstance(item, str) for item in items)
    for offset, line in enumerate(list_area_lines(items, selected, inner.height)):
        names = _ROW_STYLES.get(line.row, ()) if styled_rows else ()
        text = line.text
        if line.highlighted:
            names = tuple(name for name in names if name != "dim")
            if focused:
                names += ("reverse",)
            attr = _attr(names) | green
            text = text.ljust(inner.width)
        else:
            attr = _attr(names)
        _put(screen, inner.y + offset, inner.x, text, attr, inner.width)


def _draw_paragraph(screen, rect: Rect, lines, green: int) -> None:
    _draw_box(screen, rect, green)
    inner = rect.inner()
    for offset, line in enumerate(lines[: inner.height]):
        column = 0
        for text, names in line:
            _put(screen, inner.y + offset, inner.x + column, text, _attr(names), inner.width - column)
            column += len(text)


def _draw_gauge(screen, rect: Rect, ratio: float, label: str, green: int) -> None:
    _draw_box(screen, rect, green)
    inner = rect.inner()
    if inner.width <= 0 or inner.height <= 0:
        return
    filled = int(ratio * inner.width)
    label = label[: inner.width]
    start = (inner.width - len(label)) // 2
    label_row = (inner.height - 1) // 2
    base = green | _attr(("italic",))
    for row in range(inner.height):
        cells = " " * inner.width
        if row == label_row:
            cells = cells[:start] + label + cells[start + len(label):]
        y = inner.y + row
        _put(screen, y, inner.x, cells[:filled], base | curses.A_REVERSE, filled)
        _put(screen, y, inner.x + filled, cells[filled:], base, inner.width - filled)


def render(app, screen) -> None:
    """Draw the whole player onto a curses screen."""
    height, width = screen.getmaxyx()
    playlists_area, tracks_area, playing_area, progress_area, status_area = compute_layout(
        width, height
    )
    green = _green()
    screen.erase()

    playlists_focused = app.current_list is CurrentList.PLAYLISTS
    _draw_list(
        screen,
        playlists_area,
        app.source.list_playlists(),
        app.album_index,
        playlists_focused,
        green,
    )
    playlist = app.source.playlists.get(app.album_index)
    _draw_list(
        screen,
        tracks_area,
        playlist.display() if playlist is not None else [],
        app.track_index,
        not playlists_focused,
        green,
    )

    current = app.audio.current_track
    _draw_paragraph(screen, playing_area, current_playing_lines(current), green)
    _draw_gauge(
        screen,
        progress_area,
        progress_ratio(current),
        progress_label(current, app.audio.sink.is_paused()),
        green,
    )
    _draw_paragraph(
        screen, status_area, status_lines(app.audio.volume(), len(app.audio.queue)), green
    )
    screen.refresh()