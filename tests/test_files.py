import struct

import pytest

from tplayer.files import Playlist, SourceHandler, Track, read_track_metadata
from tplayer.tags import TagError


def write_wav(path, fields):
    fmt = struct.pack("<HHIIHH", 1, 1, 8000, 16000, 2, 16)
    info = b"INFO"
    for key, value in fields.items():
        text = value.encode() + b"\x00"
        if len(text) % 2:
            text += b"\x00"
        info += key + struct.pack("<I", len(text)) + text
    audio = bytes(16000)
    chunks = (
        b"fmt " + struct.pack("<I", len(fmt)) + fmt
        + b"LIST" + struct.pack("<I", len(info)) + info
        + b"data" + struct.pack("<I", len(audio)) + audio
    )
    path.write_bytes(b"RIFF" + struct.pack("<I", 4 + len(chunks)) + b"WAVE" + chunks)


def song(path, number, title):
    write_wav(path, {b"INAM": title, b"IART": "Band", b"ITRK": str(number), b"ICRD": "2000"})


@pytest.fixture
def library(tmp_path):
    album = tmp_path / "Band - Album"
    album.mkdir()
    song(album / "01.wav", 1, "First")
    song(album / "02.wav", 2, "Second")
    (album / "cover.txt").write_text("not audio")
    other = tmp_path / "Other - Record"
    other.mkdir()
    song(other / "a.wav", 1, "Only")
    (tmp_path / "loose.wav").write_bytes(b"")
    return tmp_path


def test_source_build(library):
    source = SourceHandler.build(library)
    assert source.list_playlists() == [("Album", "Band"), ("Record", "Other")]
    assert source.num_tracks_in_playlists(0) == 2
    assert source.num_tracks_in_playlists(1) == 1
    assert source.num_tracks_in_playlists(9) == 0


def test_playlist_get_and_display(library):
    playlist = SourceHandler.build(library).playlists[0]
    assert playlist.get(2).metadata.title == "Second"
    assert playlist.get(5) is None
    assert playlist.display() == [" 1 First", " 2 Second"]


def test_track_ids_point_to_playlist(library):
    source = SourceHandler.build(library)
    for pid, playlist in source.playlists.items():
        assert all(t.playlist_index == pid for t in playlist.tracks)


def test_try_new_skips_unsupported(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("x")
    assert Track.try_new(path, 0) is None


def test_bad_playlist_name(tmp_path):
    folder = tmp_path / "NoSeparator"
    folder.mkdir()
    with pytest.raises(ValueError):
        Playlist.build("NoSeparator", folder, 0)


def test_metadata_missing_fields(tmp_path):
    path = tmp_path / "x.wav"
    write_wav(path, {b"INAM": "Title only"})
    with pytest.raises(TagError):
        read_track_metadata(path)


def test_metadata_values(tmp_path):
    path = tmp_path / "x.wav"
    song(path, 4, "Four")
    meta = read_track_metadata(path)
    assert (meta.number, meta.title, meta.artists, meta.year) == (4, "Four", "Band", 2000)