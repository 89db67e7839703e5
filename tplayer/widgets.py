"""Content of the player's panes: what each box shows, independent of drawing."""

from __future__ import annotations

import math
from typing import NamedTuple, Optional, Sequence, Union

from .audio import CurrentTrack

HIGHLIGHT_SYMBOL = "|"
PAUSE_SYMBOL = "‖"
NOTHING_PLAYING = "Nothing Playing"

Span = tuple  # (text, style names)
ListItem = Union[str, Sequence[str]]


class ListLine(NamedTuple):
    """One visible row of a list pane."""

    text: str
    highlighted: bool
    row: int


def format_duration(seconds: float) -> str:
    """Format whole seconds as ``m:ss``, or ``h:mm:ss`` from one hour up."""
    total = int(max(seconds, 0))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}:{minutes:02}:{secs:02}"
    return f"{minutes}:{secs:02}"


def current_playing_lines(current: Optional[CurrentTrack]) -> list[list[Span]]:
    """Title and artist lines of the playing track."""
    if current is None:
        title = artist = NOTHING_PLAYING
    else:
        title = current.track.metadata.title
        artist = current.track.metadata.artists
    return [[(title, ("bold",))], [(artist, ("italic", "dim"))]]


def progress_ratio(current: Optional[CurrentTrack]) -> float:
    """Fraction of the playing track that has elapsed, kept within 0..1."""
    if current is None:
        return 0.0
    elapsed, total = current.elapsed_duration, current.total_duration
    if total <= 0:
        return 1.0 if elapsed > 0 else 0.0
    return min(max(elapsed / total, 0.0), 1.0)


def progress_label(current: Optional[CurrentTrack], paused: bool) -> str:
    """Label of the progress gauge: pause mark, elapsed and total time."""
    if current is None:
        elapsed = total = 0.0
    else:
        elapsed, total = current.elapsed_duration, current.total_duration
    mark = PAUSE_SYMBOL if paused else " "
    return f"{mark} {format_duration(elapsed)} / {format_duration(total)}"


def status_lines(volume: float, queue_len: int) -> list[list[Span]]:
    """Volume percentage and queue length lines."""
    percent = math.floor(volume * 100.0)
    return [
        [("V: ", ("dim",)), (f"{percent}%", ("bold",))],
        [("Q: ", ("dim",)), (str(queue_len), ("bold",))],
    ]


def list_area_lines(
    items: Sequence[ListItem], selected: Optional[int], height: int
) -> list[ListLine]:
    """Rows of a list pane that fit in ``height``, scrolled to show the selection.

    An item is a string or a sequence of strings, one per row. When an item is
    selected every row gets a one-character prefix: the highlight symbol on
    the selected item's rows, a space on the others.
    """
    entries = [(item,) if isinstance(item, str) else tuple(item) for item in items]
    if not entries or height <= 0:
        return []
    if selected is not None:
        selected = min(max(selected, 0), len(entries) - 1)

    offset = 0
    if selected is not None:
        used = sum(len(entry) for entry in entries[: selected + 1])
        while used > height and offset < selected:
            used -= len(entries[offset])
            offset += 1

    lines: list[ListLine] = []
    for index, entry in enumerate(entries[offset:], start=offset):
        chosen = index == selected
        if selected is None:
            prefix = ""
        else:
            prefix = HIGHLIGHT_SYMBOL if chosen else " "
        for row, text in enumerate(entry):
            if len(lines) >= height:
                return lines
            lines.append(ListLine(prefix + text, chosen, row))
    return lines