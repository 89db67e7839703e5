"""Scanning the music library into playlists and tracks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .tags import TagError, read_tags

AUDIO_EXTENSIONS = ("aac", "alac", "flac", "mp3", "ogg", "opus", "wav")


@dataclass(frozen=True)
class TrackMetadata:
    number: int
    title: str
    artists: str
    year: int
    total_duration: float
    bit_rate: int
    sample_rate: int


@dataclass(frozen=True)
class Track:
    playlist_index: int
    path: Path
    metadata: TrackMetadata

    @classmethod
    def try_new(cls, path, playlist_index: int) -> Track | None:
        """Return a track if the file has a supported extension, else None."""
        path = Path(path)
        if path.suffix[1:] not in AUDIO_EXTENSIONS or not path.suffix[1:]:
            return None
        return cls(playlist_index, path, read_track_metadata(path))


def read_track_metadata(path) -> TrackMetadata:
    """Read the metadata of a track; every field must be present."""
    tags = read_tags(path)
    missing = [key for key, value in tags.items() if value is None]
    if missing:
        raise TagError(f"{path}: missing {', '.join(missing)}")
    return TrackMetadata(
        number=tags["track"],
        title=tags["title"],
        artists=tags["artist"],
        year=tags["year"],
        total_duration=tags["duration"],
        bit_rate=tags["bit_rate"],
        sample_rate=tags["sample_rate"],
    )


@dataclass
class Playlist:
    """A folder named ``ARTIST - TITLE`` holding tracks."""

    id: int
    title: str
    artists: str
    path: Path
    tracks: list[Track] = field(default_factory=list)

    @classmethod
    def build(cls, name: str, path, playlist_id: int) -> Playlist:
        path = Path(path)
        parts = name.split(" - ")
        if len(parts) < 2:
            raise ValueError(
                f"{name}: unexpected name format, desired [ARTIST] - [TITLE]"
            )
        artists, title = parts[0].strip(), parts[1].strip()
        tracks = [
            track
            for child in sorted(path.iterdir())
            if child.is_file()
            and (track := Track.try_new(child, playlist_id)) is not None
        ]
        return cls(playlist_id, title, artists, path, tracks)

    def get(self, number: int) -> Track | None:
        """Return the track with the given track number, if any."""
        return next((t for t in self.tracks if t.metadata.number == number), None)

    def display(self) -> list[str]:
        """Track lines for display."""
        return [f"{t.metadata.number:2} {t.metadata.title}" for t in self.tracks]


@dataclass
class SourceHandler:
    """The music library: every subdirectory of ``path`` is a playlist."""

    path: Path
    playlists: dict[int, Playlist]

    @classmethod
    def build(cls, path) -> SourceHandler:
        path = Path(path)
        directories = sorted(child for child in path.iterdir() if child.is_dir())
        playlists = {
            index: Playlist.build(child.name, child, index)
            for index, child in enumerate(directories)
        }
        return cls(path, playlists)

    def list_playlists(self) -> list[tuple[str, str]]:
        """(title, artists) pairs in playlist order."""
        return [(p.title, p.artists) for p in self.playlists.values()]

    def num_tracks_in_playlists(self, playlist_id: int) -> int:
        playlist = self.playlists.get(playlist_id)
        return len(playlist.tracks) if playlist else 0