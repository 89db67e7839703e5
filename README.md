# tplayer

A small terminal music player. Point it at a folder of albums, pick an album,
pick a track, and the rest of the album plays on from there. Single tracks can
also be queued.

## Installing

```
pip install .
```

Playback goes through `pygame`'s mixer, so a file plays only if that mixer can
decode it and an audio device is available. The screen is drawn with the
standard `curses` module, which must be present in your Python.

## Running

```
tplayer
tplayer --source ~/Music/albums
tplayer --version
```

`-s` / `--source` sets the library directory; it defaults to `~/tplayer/`.
Every `~` in the path is replaced by your home directory. If the directory does
not exist, it is created.

## Library layout

Each album is a sub-directory of the source directory, and its name must have
the form

```
ARTIST - TITLE
```

A directory name without ` - ` stops the library scan with a `ValueError`.
Albums are listed in directory-name order.

Inside an album, files with the extensions `aac`, `alac`, `flac`, `mp3`, `ogg`,
`opus` or `wav` become tracks; other files are ignored. Tags and stream
properties are read by `tplayer.tags.read_tags`, which understands WAV (RIFF
`INFO` tags), FLAC and Ogg Vorbis/Opus (Vorbis comments) and MP3 (ID3v2.3/2.4
and ID3v1). Each track must carry a track number, title, artist and year, and
its duration, bit rate and sample rate must be readable; otherwise the scan
stops with a `tplayer.tags.TagError`. AAC and ALAC files have no reader and
stop the scan the same way.

Tracks are shown in file-name order, but they are addressed by track number:
the n-th row plays track number n, and when a track ends playback continues
with the next track number in the same album.

The volume is kept in `config.json` inside the source directory and is
restored on the next start. A missing or unreadable config is replaced by one
with full volume.

## Keys

| Key            | Action                                          |
|----------------|-------------------------------------------------|
| `q`, Ctrl+C    | Quit                                            |
| Up / Down      | Move in the focused list (wraps round)          |
| Enter          | Open an album / play the selected track         |
| Esc            | Back to the album list                          |
| Tab            | Add the selected track to the queue             |
| Space          | Pause / resume                                  |
| Right          | Seek forward 5 seconds                          |
| Left           | Seek back 5 seconds (not within the first 5)    |
| Ctrl+Right     | Skip the playing track                          |
| Ctrl+Left      | Previous track number in the album              |
| Ctrl+Up / Down | Volume up / down by 5% (kept between 0 and 100) |

Ctrl with the arrow keys is recognised only where the terminal reports those
combinations as distinct keys.

When a track ends or is skipped, a queued track plays first; the most recently
queued one is taken first. Once the queue is empty the album continues after
the last track that was chosen from the list.

## Screen

The album list (title and artist) is on the left and the tracks of the
selected album are on the right. The bottom row shows the playing track's
title and artist, a progress bar with a pause mark and elapsed / total time,
and the volume (`V:`) and queue length (`Q:`).

## Using it from Python

The pieces can be used on their own:

- `tplayer.files.SourceHandler.build(path)` scans a library into `Playlist`
  objects holding `Track` and `TrackMetadata` values.
- `tplayer.tags.read_tags(path)` returns a dict with `track`, `title`,
  `artist`, `year`, `duration`, `bit_rate` and `sample_rate`.
- `tplayer.config.Config.parse_or_new(path)` loads or creates the config.
- `tplayer.audio.AudioHandler` takes any `sink` object with the methods of
  `PygameSink`, which makes it usable without sound hardware.
- `tplayer.event.EventHandler` takes a `key_reader` callable and yields
  `Tick`, `KeyInput` and `AppMessage` events.
- `tplayer.widgets` computes the text of each pane without drawing it, and
  `tplayer.ui.compute_layout` the screen areas.

## What it does not do

There is no search, no shuffle or repeat, no editing of tags, and no way to
see or reorder the queue beyond its length. Tracks are found only one level
deep inside each album directory.