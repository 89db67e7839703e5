"""Playback state: the output sink, current track, queue and volume."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path

from .config import Config
from .files import Track

SEEK_STEP = 5.0


def round_vol(value: float) -> float:
    """Round a volume to two decimal places."""
    return math.floor(value * 100.0 + 0.5) / 100.0


class PygameSink:
    """An output sink playing one file at a time through the pygame mixer."""

    def __init__(self):
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame

        pygame.mixer.init()
        self._music = pygame.mixer.music
        self._loaded = False
        self._started = False
        self._paused = False
        self._offset = 0.0
        self._volume = 1.0
        self._music.set_volume(self._volume)

    def play(self) -> None:
        self._paused = False
        if not self._loaded:
            return
        if self._started:
            self._music.unpause()
        else:
            self._music.play(start=self._offset)
            self._started = True

    def pause(self) -> None:
        self._paused = True
        if self._started:
            self._music.pause()

    def is_paused(self) -> bool:
        return self._paused

    def clear(self) -> None:
        self._music.stop()
        self._music.unload()
        self._loaded = self._started = False
        self._offset = 0.0

    def append(self, path) -> None:
        if self._loaded:
            self._music.queue(str(path))
            return
        self._music.load(str(path))
        self._loaded = True
        self._started = False
        self._offset = 0.0

    def empty(self) -> bool:
        if not self._loaded:
            return True
        return self._started and not self._paused and not self._music.get_busy()

    def get_pos(self) -> float:
        if not self._started:
            return self._offset
        return self._offset + max(self._music.get_pos(), 0) / 1000.0

    def try_seek(self, position: float) -> None:
        if not self._loaded:
            raise RuntimeError("nothing loaded to seek in")
        self._music.play(start=position)
        self._started = True
        self._offset = position
        if self._paused:
            self._music.pause()

    def volume(self) -> float:
        return self._volume

    def set_volume(self, volume: float) -> None:
        self._volume = volume
        self._music.set_volume(volume)


@dataclass
class CurrentTrack:
    track: Track
    elapsed_duration: float
    total_duration: float


@dataclass
class AudioHandler:
    """Controls playback of tracks and the play queue."""

    sink: object = field(default_factory=PygameSink)
    primary_track: Track | None = None
    current_track: CurrentTrack | None = None
    queue: list[Track] = field(default_factory=list)

    def __post_init__(self):
        self.sink.pause()

    def play_track(self, track: Track, set_primary: bool) -> None:
        """Play ``track`` immediately, replacing whatever was playing."""
        Path(track.path).stat()
        self.sink.clear()
        self.sink.append(track.path)
        self.sink.play()
        if set_primary:
            self.primary_track = track
        self.current_track = CurrentTrack(track, 0.0, track.metadata.total_duration)

    def queue_track(self, track: Track) -> None:
        self.queue.append(track)

    def pop_queue(self) -> Track | None:
        return self.queue.pop() if self.queue else None

    def toggle_playing(self) -> None:
        if self.sink.is_paused():
            self.sink.play()
        else:
            self.sink.pause()

    def next(self) -> None:
        self.sink.clear()

    def seek_forward(self) -> None:
        current = self.current_track
        if current is None:
            return
        if current.elapsed_duration >= SEEK_STEP and (
            current.elapsed_duration - SEEK_STEP > current.total_duration
        ):
            return
        self.sink.try_seek(self.sink.get_pos() + SEEK_STEP)

    def seek_back(self) -> None:
        if self.current_track is None or int(self.sink.get_pos()) < SEEK_STEP:
            return
        self.sink.try_seek(self.sink.get_pos() - SEEK_STEP)

    def volume(self) -> float:
        return self.sink.volume()

    def lower_volume(self, amount: float, config: Config) -> None:
        volume = self.volume()
        self.sink.set_volume(0.0 if volume - amount <= 0.0 else round_vol(volume - amount))
        config.set_volume(self.volume())

    def raise_volume(self, amount: float, config: Config) -> None:
        volume = self.volume()
        self.sink.set_volume(1.0 if volume + amount >= 1.0 else round_vol(volume + amount))
        config.set_volume(self.volume())