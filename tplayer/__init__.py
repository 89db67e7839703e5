"""Terminal music player for folders of albums: library scanning, tag reading, playback and a curses screen."""

__version__ = "0.1.0"