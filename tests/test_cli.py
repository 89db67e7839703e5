from pathlib import Path

import pytest

from tplayer.cli import expand_source, main


def test_expand_source_replaces_tilde(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert expand_source("~/music") == tmp_path / "music"


def test_expand_source_leaves_absolute_paths(tmp_path):
    target = tmp_path / "library"
    assert expand_source(str(target)) == target


def test_help_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    assert "Source directory" in capsys.readouterr().out


def test_unknown_option_is_rejected():
    with pytest.raises(SystemExit) as exc:
        main(["--bogus"])
    assert exc.value.code == 2


def test_badly_named_playlist_is_an_error(tmp_path, capsys):
    library = tmp_path / "lib"
    (library / "nodash").mkdir(parents=True)
    with pytest.raises(ValueError):
        main(["--source", str(library)])
    assert f"Source directory set to `{library}`" in capsys.readouterr().out


def test_source_that_is_a_file_is_an_error(tmp_path):
    target = tmp_path / "notes.txt"
    target.write_text("not a library")
    with pytest.raises(NotADirectoryError):
        main(["-s", str(target)])
    assert target.read_text() == "not a library"
    assert not (Path(target).parent / "config.json").exists()