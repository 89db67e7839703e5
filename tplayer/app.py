"""The application state and its reactions to events."""

from __future__ import annotations

from enum import Enum, auto

from .audio import AudioHandler
from .config import Config
from .event import AppEvent, AppMessage, EventHandler, Key, KeyInput, Tick
from .files import Playlist, SourceHandler, Track

VOLUME_STEP = 0.05

_LIST_EVENTS = frozenset(
    {
        AppEvent.LIST_UP,
        AppEvent.LIST_DOWN,
        AppEvent.LIST_QUEUE,
        AppEvent.LIST_SELECT,
        AppEvent.LIST_BACK,
    }
)

_CTRL_KEYS = {
    "c": AppEvent.QUIT,
    "C": AppEvent.QUIT,
    "Up": AppEvent.VOLUME_UP,
    "Down": AppEvent.VOLUME_DOWN,
    "Right": AppEvent.PLAY_NEXT,
    "Left": AppEvent.PLAY_PREVIOUS,
}

_PLAIN_KEYS = {
    "q": AppEvent.QUIT,
    "Up": AppEvent.LIST_UP,
    "Down": AppEvent.LIST_DOWN,
    "Tab": AppEvent.LIST_QUEUE,
    "Enter": AppEvent.LIST_SELECT,
    "Esc": AppEvent.LIST_BACK,
    " ": AppEvent.PLAY_TOGGLE,
    "Right": AppEvent.PLAY_SEEK_FORWARD,
    "Left": AppEvent.PLAY_SEEK_BACK,
}


class CurrentList(Enum):
    """Which list has focus."""

    PLAYLISTS = auto()
    TRACKS = auto()


def _curses_key_reader(screen):
    """Build a key reader polling a curses window."""
    import curses

    named = {
        curses.KEY_UP: "Up",
        curses.KEY_DOWN: "Down",
        curses.KEY_LEFT: "Left",
        curses.KEY_RIGHT: "Right",
        curses.KEY_ENTER: "Enter",
    }
    ctrl_named = {b"kUP5": "Up", b"kDN5": "Down", b"kRIT5": "Right", b"kLFT5": "Left"}
    characters = {"\n": "Enter", "\r": "Enter", "\t": "Tab", "\x1b": "Esc"}

    def translate(ch) -> Key | None:
        if isinstance(ch, int):
            if ch in named:
                return Key(named[ch])
            try:
                code = ctrl_named.get(curses.keyname(ch))
            except (ValueError, curses.error):
                return None
            return Key(code, ctrl=True) if code else None
        if ch in characters:
            return Key(characters[ch])
        if len(ch) == 1 and 1 <= ord(ch) <= 26:
            return Key(chr(ord(ch) + 96), ctrl=True)
        return Key(ch)

    def read(timeout: float) -> Key | None:
        screen.timeout(max(int(timeout * 1000), 0))
        try:
            ch = screen.get_wch()
        except curses.error:
            return None
        return translate(ch)

    return read


class App:
    """Holds the library, playback and UI state, and reacts to events."""

    def __init__(
        self,
        source: SourceHandler,
        audio: AudioHandler,
        config: Config,
        events: EventHandler | None = None,
    ):
        self.quitting = False
        self.config = config
        self.source = source
        self.audio = audio
        self.events = events if events is not None else EventHandler()
        self.current_list = CurrentList.PLAYLISTS
        self.album_index = 0
        self.track_index = 0

    def run(self, screen) -> None:
        """Draw and handle events on a curses screen until asked to quit."""
        import curses

        from .ui import render

        curses.raw()
        screen.keypad(True)
        if self.events.key_reader is None:
            self.events.key_reader = _curses_key_reader(screen)
        try:
            while not self.quitting:
                render(self, screen)
                self.handle_events()
        finally:
            self.events.close()

    def handle_events(self) -> None:
        """Wait for the next event and handle it."""
        event = self.events.next()
        if isinstance(event, Tick):
            self.tick()
        elif isinstance(event, KeyInput):
            self.handle_key_event(event.key)
        elif isinstance(event, AppMessage):
            self.handle_app_event(event.event)

    def handle_app_event(self, event: AppEvent) -> None:
        if event is AppEvent.QUIT:
            self.quit()
        elif event in _LIST_EVENTS:
            self.handle_list_events(event)
        elif event is AppEvent.PLAY_TOGGLE:
            self.audio.toggle_playing()
        elif event is AppEvent.PLAY_NEXT:
            self.audio.next()
        elif event is AppEvent.PLAY_PREVIOUS:
            self._previous()
        elif event is AppEvent.PLAY_SEEK_FORWARD:
            self.audio.seek_forward()
        elif event is AppEvent.PLAY_SEEK_BACK:
            self.audio.seek_back()
        elif event is AppEvent.VOLUME_UP:
            self.audio.raise_volume(VOLUME_STEP, self.config)
        elif event is AppEvent.VOLUME_DOWN:
            self.audio.lower_volume(VOLUME_STEP, self.config)

    def handle_key_event(self, key: Key) -> None:
        """Translate a key press into an app event queued for handling."""
        event = _CTRL_KEYS.get(key.code) if key.ctrl else None
        if event is None:
            event = _PLAIN_KEYS.get(key.code)
        if event is not None:
            self.events.send(event)

    def _set_selection(self, index: int) -> None:
        if self.current_list is CurrentList.PLAYLISTS:
            self.album_index = index
        else:
            self.track_index = index

    def handle_list_events(self, event: AppEvent) -> None:
        """Move, queue, select or go back in the focused list."""
        if self.current_list is CurrentList.PLAYLISTS:
            self.track_index = 0
            selected, length = self.album_index, len(self.source.playlists)
        else:
            selected = self.track_index
            length = self.source.num_tracks_in_playlists(self.album_index)

        if event is AppEvent.LIST_UP:
            if length:
                self._set_selection(length - 1 if selected <= 0 else selected - 1)
        elif event is AppEvent.LIST_DOWN:
            if length:
                self._set_selection(0 if selected >= length - 1 else selected + 1)
        elif event is AppEvent.LIST_QUEUE:
            if self.current_list is CurrentList.TRACKS:
                self.audio.queue_track(self.selected_track())
        elif event is AppEvent.LIST_SELECT:
            if self.current_list is CurrentList.PLAYLISTS:
                self.current_list = CurrentList.TRACKS
            else:
                self.audio.play_track(self.selected_track(), True)
        elif event is AppEvent.LIST_BACK:
            self.current_list = CurrentList.PLAYLISTS

    def _previous(self) -> None:
        primary = self.audio.primary_track
        if primary is None or primary.metadata.number <= 1:
            return
        previous = self.previous_in_playlist(primary)
        if previous is None:
            raise LookupError(f"no track before number {primary.metadata.number}")
        self.audio.play_track(previous, True)

    def selected_playlist(self) -> Playlist:
        try:
            return self.source.playlists[self.album_index]
        except KeyError:
            raise LookupError(f"no playlist at index {self.album_index}") from None

    def selected_track(self) -> Track:
        number = self.track_index + 1
        track = self.selected_playlist().get(number)
        if track is None:
            raise LookupError(f"no track number {number} in the selected playlist")
        return track

    def track_to_playlist(self, track: Track) -> Playlist:
        try:
            return self.source.playlists[track.playlist_index]
        except KeyError:
            raise LookupError(f"no playlist at index {track.playlist_index}") from None

    def next_in_playlist(self, track: Track) -> Track | None:
        return self.track_to_playlist(track).get(track.metadata.number + 1)

    def previous_in_playlist(self, track: Track) -> Track | None:
        return self.track_to_playlist(track).get(track.metadata.number - 1)

    def tick(self) -> None:
        self.tick_audio()

    def tick_audio(self) -> None:
        """Start the next track when one ends and update the elapsed time."""
        primary = self.audio.primary_track
        if self.audio.sink.empty():
            if self.audio.queue:
                self.audio.play_track(self.audio.pop_queue(), False)
            elif primary is not None:
                if primary.metadata.number < len(self.track_to_playlist(primary).tracks):
                    following = self.next_in_playlist(primary)
                    if following is None:
                        raise LookupError(
                            f"no track after number {primary.metadata.number}"
                        )
                    self.audio.play_track(following, True)

        current = self.audio.current_track
        if current is not None and not self.audio.sink.is_paused():
            current.elapsed_duration = self.audio.sink.get_pos()

    def quit(self) -> None:
        self.quitting = True