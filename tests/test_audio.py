from pathlib import Path

import pytest

from tplayer.audio import AudioHandler, round_vol
from tplayer.config import Config
from tplayer.files import Track, TrackMetadata


class FakeSink:
    def __init__(self):
        self.paused = False
        self.items = []
        self.pos = 0.0
        self.vol = 1.0
        self.seeks = []

    def play(self):
        self.paused = False

    def pause(self):
        self.paused = True

    def is_paused(self):
        return self.paused

    def clear(self):
        self.items = []

    def append(self, path):
        self.items.append(path)

    def empty(self):
        return not self.items

    def get_pos(self):
        return self.pos

    def try_seek(self, position):
        self.seeks.append(position)
        self.pos = position

    def volume(self):
        return self.vol

    def set_volume(self, volume):
        self.vol = volume


def make_track(path, number=1, duration=60.0):
    meta = TrackMetadata(number, f"t{number}", "a", 2000, duration, 128, 44100)
    return Track(0, Path(path), meta)


@pytest.fixture
def handler():
    return AudioHandler(sink=FakeSink())


@pytest.fixture
def config(tmp_path):
    return Config.parse_or_new(tmp_path / "config.json")


def test_starts_paused(handler):
    assert handler.sink.is_paused()
    handler.toggle_playing()
    assert not handler.sink.is_paused()


def test_play_track(handler, tmp_path):
    path = tmp_path / "a.wav"
    path.write_bytes(b"x")
    track = make_track(path, duration=42.0)
    handler.play_track(track, True)
    assert handler.sink.items == [path]
    assert handler.primary_track == track
    assert handler.current_track.total_duration == 42.0
    assert handler.current_track.elapsed_duration == 0.0


def test_play_track_not_primary(handler, tmp_path):
    path = tmp_path / "a.wav"
    path.write_bytes(b"x")
    handler.play_track(make_track(path), False)
    assert handler.primary_track is None


def test_play_missing_file(handler, tmp_path):
    with pytest.raises(FileNotFoundError):
        handler.play_track(make_track(tmp_path / "gone.wav"), True)


def test_queue_is_last_in_first_out(handler, tmp_path):
    first, second = make_track(tmp_path / "1.wav", 1), make_track(tmp_path / "2.wav", 2)
    handler.queue_track(first)
    handler.queue_track(second)
    assert handler.pop_queue() == second
    assert handler.pop_queue() == first
    assert handler.pop_queue() is None


def test_next_clears_sink(handler, tmp_path):
    path = tmp_path / "a.wav"
    path.write_bytes(b"x")
    handler.play_track(make_track(path), True)
    handler.next()
    assert handler.sink.empty()


def test_seek_guards(handler, tmp_path):
    handler.seek_forward()
    handler.seek_back()
    assert handler.sink.seeks == []
    path = tmp_path / "a.wav"
    path.write_bytes(b"x")
    handler.play_track(make_track(path), True)
    handler.sink.pos = 3.0
    handler.seek_back()
    assert handler.sink.seeks == []
    handler.seek_forward()
    assert handler.sink.seeks == [8.0]
    handler.seek_back()
    assert handler.sink.seeks == [8.0, 3.0]


def test_volume_clamps_and_saves(handler, config):
    handler.raise_volume(0.05, config)
    assert handler.volume() == 1.0
    assert Config.parse_or_new(config.path).volume == 1.0
    handler.sink.vol = 0.03
    handler.lower_volume(0.05, config)
    assert handler.volume() == 0.0
    assert config.volume == 0.0


def test_volume_steps_are_rounded(handler, config):
    handler.sink.vol = 0.5
    handler.lower_volume(0.05, config)
    assert handler.volume() == round_vol(0.45)
    handler.raise_volume(0.05, config)
    assert handler.volume() == 0.5


def test_round_vol_idempotent():
    for value in (0.123, 0.456, 0.999, 0.0):
        assert round_vol(round_vol(value)) == round_vol(value)
    assert round_vol(0.5) == 0.5