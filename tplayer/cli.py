"""Command line entry point of the terminal music player."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .app import App
from .audio import AudioHandler
from .config import Config
from .files import SourceHandler

_VERSION = "0.1.0"
DEFAULT_SOURCE = "~/tplayer/"


def expand_source(source: str) -> Path:
    """Replace every ``~`` in ``source`` with the home directory."""
    return Path(source.replace("~", str(Path.home())))


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tplayer", description="Terminal music player")
    parser.add_argument(
        "-s", "--source", default=DEFAULT_SOURCE, help="Source directory"
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    return parser


def main(argv=None) -> int:
    """Scan the library, set up playback and run the interface."""
    args = _parser().parse_args(argv)
    source_dir = expand_source(args.source)
    print(f"Source directory set to `{source_dir}`")

    if not source_dir.exists():
        print("Source Directory doesn't exist, Generating...")
        source_dir.mkdir(parents=True, exist_ok=True)

    source = SourceHandler.build(source_dir)
    audio = AudioHandler()
    config = Config.parse_or_new(source_dir / "config.json")
    audio.sink.set_volume(config.volume)

    import curses

    curses.wrapper(App(source, audio, config).run)
    return 0


if __name__ == "__main__":
    sys.exit(main())