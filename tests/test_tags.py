import struct

import pytest

from tplayer.tags import TagError, read_tags


def _vorbis_comments(fields):
    vendor = b"vendor"
    out = struct.pack("<I", len(vendor)) + vendor + struct.pack("<I", len(fields))
    for key, value in fields.items():
        entry = f"{key}={value}".encode()
        out += struct.pack("<I", len(entry)) + entry
    return out


def _info_chunk(fields):
    body = b"INFO"
    for key, value in fields.items():
        text = value.encode() + b"\x00"
        if len(text) % 2:
            text += b"\x00"
        body += key + struct.pack("<I", len(text)) + text
    return b"LIST" + struct.pack("<I", len(body)) + body


def write_wav(path, sample_rate, seconds, fields):
    fmt = struct.pack("<HHIIHH", 1, 1, sample_rate, sample_rate * 2, 2, 16)
    audio = bytes(sample_rate * 2 * seconds)
    chunks = (
        b"fmt " + struct.pack("<I", len(fmt)) + fmt
        + _info_chunk(fields)
        + b"data" + struct.pack("<I", len(audio)) + audio
    )
    path.write_bytes(b"RIFF" + struct.pack("<I", 4 + len(chunks)) + b"WAVE" + chunks)


def test_wav_tags(tmp_path):
    path = tmp_path / "a.wav"
    write_wav(path, 8000, 2, {b"INAM": "Song", b"IART": "Band", b"ITRK": "3", b"ICRD": "1999"})
    tags = read_tags(path)
    assert tags["title"] == "Song"
    assert tags["artist"] == "Band"
    assert tags["track"] == 3
    assert tags["year"] == 1999
    assert tags["sample_rate"] == 8000
    assert tags["duration"] == 2


def test_flac_tags(tmp_path):
    rate = 44100
    packed = (rate << 44) | (1 << 41) | (15 << 36) | (rate * 3)
    info = bytes(10) + packed.to_bytes(8, "big") + bytes(16)
    comments = _vorbis_comments({"TITLE": "Flac", "ARTIST": "Them", "TRACKNUMBER": "7/10", "DATE": "2020-01-01"})
    data = (
        b"fLaC"
        + bytes([0]) + len(info).to_bytes(3, "big") + info
        + bytes([0x84]) + len(comments).to_bytes(3, "big") + comments
        + bytes(1000)
    )
    path = tmp_path / "a.flac"
    path.write_bytes(data)
    tags = read_tags(path)
    assert tags["title"] == "Flac"
    assert tags["track"] == 7
    assert tags["year"] == 2020
    assert tags["sample_rate"] == rate
    assert tags["duration"] == 3


def _id3_frame(frame_id, text):
    content = b"\x03" + text.encode()
    return frame_id + struct.pack(">I", len(content)) + b"\x00\x00" + content


def test_mp3_tags(tmp_path):
    frames = _id3_frame(b"TIT2", "Mp3") + _id3_frame(b"TPE1", "Artist") + _id3_frame(b"TRCK", "2")
    size = len(frames)
    syncsafe = bytes([(size >> 21) & 0x7F, (size >> 14) & 0x7F, (size >> 7) & 0x7F, size & 0x7F])
    header = b"ID3\x03\x00\x00" + syncsafe
    audio = (b"\xff\xfb\x90\x00" + bytes(413)) * 4
    path = tmp_path / "a.mp3"
    path.write_bytes(header + frames + audio)
    tags = read_tags(path)
    assert tags["title"] == "Mp3"
    assert tags["artist"] == "Artist"
    assert tags["track"] == 2
    assert tags["sample_rate"] == 44100
    assert tags["duration"] > 0


def _ogg_page(packets, granule, seq, header_type=0):
    table = b""
    body = b""
    for packet in packets:
        table += bytes([255] * (len(packet) // 255) + [len(packet) % 255])
        body += packet
    return (
        b"OggS" + bytes([0, header_type])
        + struct.pack("<qIII", granule, 1, seq, 0)
        + bytes([len(table)]) + table + body
    )


def test_ogg_vorbis_tags(tmp_path):
    head = b"\x01vorbis" + struct.pack("<IBIiii", 0, 2, 16000, 0, 0, 0) + b"\xb8\x01"
    comment = b"\x03vorbis" + _vorbis_comments({"TITLE": "Ogg", "ARTIST": "X", "TRACKNUMBER": "1", "DATE": "2001"}) + b"\x01"
    data = _ogg_page([head], 0, 0, 2) + _ogg_page([comment], 0, 1) + _ogg_page([bytes(300)], 16000 * 4, 2, 4)
    path = tmp_path / "a.ogg"
    path.write_bytes(data)
    tags = read_tags(path)
    assert tags["title"] == "Ogg"
    assert tags["sample_rate"] == 16000
    assert tags["duration"] == 4


def test_unsupported_format(tmp_path):
    path = tmp_path / "a.aac"
    path.write_bytes(b"hello world")
    with pytest.raises(TagError):
        read_tags(path)


def test_missing_file(tmp_path):
    with pytest.raises(TagError):
        read_tags(tmp_path / "nope.wav")