"""Reading tags and stream properties from audio files."""

from __future__ import annotations

import re
import struct
from pathlib import Path


class TagError(Exception):
    """Raised when an audio file's tags or properties cannot be read."""


_MPEG1_L3 = (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320)
_MPEG2_L3 = (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160)
_MPEG_RATES = {
    3: (44100, 48000, 32000),
    2: (22050, 24000, 16000),
    0: (11025, 12000, 8000),
}
_ID3_FRAMES = {"TIT2": "title", "TPE1": "artist", "TRCK": "track", "TYER": "year", "TDRC": "year"}
_ID3_ENCODINGS = {0: "latin-1", 1: "utf-16", 2: "utf-16-be", 3: "utf-8"}
_VORBIS_FIELDS = {"TITLE": "title", "ARTIST": "artist", "TRACKNUMBER": "track", "DATE": "year", "YEAR": "year"}
_INFO_FIELDS = {b"INAM": "title", b"IART": "artist", b"ICRD": "year", b"ITRK": "track", b"IPRT": "track"}


def _empty() -> dict:
    return dict.fromkeys(
        ("track", "title", "artist", "year", "duration", "bit_rate", "sample_rate")
    )


def _leading_number(text: str) -> int | None:
    match = re.match(r"\s*(\d+)", text)
    return int(match.group(1)) if match else None


def _set(tags: dict, key: str, value: str) -> None:
    if tags[key] is not None:
        return
    value = value.strip("\x00 ").strip()
    if not value:
        return
    tags[key] = _leading_number(value) if key in ("track", "year") else value


def _apply_vorbis_comments(block: bytes, tags: dict) -> None:
    try:
        (vendor_len,) = struct.unpack_from("<I", block, 0)
        pos = 4 + vendor_len
        (count,) = struct.unpack_from("<I", block, pos)
        pos += 4
        for _ in range(count):
            (length,) = struct.unpack_from("<I", block, pos)
            entry = block[pos + 4 : pos + 4 + length].decode("utf-8", "replace")
            pos += 4 + length
            key, sep, value = entry.partition("=")
            field = _VORBIS_FIELDS.get(key.upper())
            if sep and field:
                _set(tags, field, value)
    except struct.error as exc:
        raise TagError("truncated vorbis comment block") from exc


def _read_wav(data: bytes) -> dict:
    tags = _empty()
    byte_rate = None
    data_size = None
    pos = 12
    while pos + 8 <= len(data):
        chunk_id = data[pos : pos + 4]
        (size,) = struct.unpack_from("<I", data, pos + 4)
        body = data[pos + 8 : pos + 8 + size]
        if chunk_id == b"fmt ":
            if len(body) < 16:
                raise TagError("truncated WAV format chunk")
            _, _, sample_rate, byte_rate = struct.unpack_from("<HHII", body)
            tags["sample_rate"] = sample_rate
        elif chunk_id == b"data":
            data_size = len(body)
        elif chunk_id == b"LIST" and body[:4] == b"INFO":
            sub = 4
            while sub + 8 <= len(body):
                sub_id = body[sub : sub + 4]
                (sub_size,) = struct.unpack_from("<I", body, sub + 4)
                field = _INFO_FIELDS.get(sub_id)
                if field:
                    text = body[sub + 8 : sub + 8 + sub_size].split(b"\x00")[0]
                    _set(tags, field, text.decode("utf-8", "replace"))
                sub += 8 + sub_size + (sub_size & 1)
        pos += 8 + size + (size & 1)

    if byte_rate and data_size is not None:
        tags["duration"] = data_size / byte_rate
        tags["bit_rate"] = round(byte_rate * 8 / 1000)
    return tags


def _read_flac(data: bytes) -> dict:
    tags = _empty()
    sample_rate = total_samples = None
    pos = 4
    while True:
        if pos + 4 > len(data):
            raise TagError("truncated FLAC metadata")
        header = data[pos]
        length = int.from_bytes(data[pos + 1 : pos + 4], "big")
        block = data[pos + 4 : pos + 4 + length]
        block_type = header & 0x7F
        if block_type == 0:
            if len(block) < 18:
                raise TagError("truncated FLAC stream info")
            packed = int.from_bytes(block[10:18], "big")
            sample_rate = packed >> 44
            total_samples = packed & ((1 << 36) - 1)
        elif block_type == 4:
            _apply_vorbis_comments(block, tags)
        pos += 4 + length
        if header & 0x80:
            break

    if not sample_rate:
        raise TagError("FLAC stream info missing")
    tags["sample_rate"] = sample_rate
    duration = total_samples / sample_rate
    tags["duration"] = duration
    if duration > 0:
        tags["bit_rate"] = round((len(data) - pos) * 8 / duration / 1000)
    return tags


def _syncsafe(raw: bytes) -> int:
    value = 0
    for byte in raw:
        value = (value << 7) | (byte & 0x7F)
    return value


def _read_id3v2_frames(body: bytes, major: int, tags: dict) -> None:
    pos = 0
    while pos + 10 <= len(body):
        frame_id = body[pos : pos + 4]
        if frame_id[0] == 0:
            break
        raw_size = body[pos + 4 : pos + 8]
        size = _syncsafe(raw_size) if major == 4 else int.from_bytes(raw_size, "big")
        content = body[pos + 10 : pos + 10 + size]
        pos += 10 + size
        field = _ID3_FRAMES.get(frame_id.decode("latin-1"))
        if field and len(content) > 1:
            encoding = _ID3_ENCODINGS.get(content[0], "latin-1")
            text = content[1:].decode(encoding, "replace").split("\x00")[0]
            _set(tags, field, text)


def _find_mpeg_frame(data: bytes, start: int, end: int) -> tuple[int, int, int] | None:
    pos = data.find(b"\xff", start, end)
    while pos != -1 and pos + 3 < end:
        b1, b2 = data[pos + 1], data[pos + 2]
        version = (b1 >> 3) & 3
        layer = (b1 >> 1) & 3
        bitrate_index = b2 >> 4
        rate_index = (b2 >> 2) & 3
        if (
            b1 & 0xE0 == 0xE0
            and version != 1
            and layer == 1
            and bitrate_index not in (0, 15)
            and rate_index != 3
        ):
            table = _MPEG1_L3 if version == 3 else _MPEG2_L3
            return pos, table[bitrate_index], _MPEG_RATES[version][rate_index]
        pos = data.find(b"\xff", pos + 1, end)
    return None


def _read_mp3(data: bytes) -> dict:
    tags = _empty()
    pos = 0
    if data[:3] == b"ID3" and len(data) >= 10:
        major, flags = data[3], data[5]
        end = 10 + _syncsafe(data[6:10])
        body = data[10:end]
        if flags & 0x40 and len(body) >= 4:
            ext = _syncsafe(body[:4]) if major == 4 else int.from_bytes(body[:4], "big") + 4
            body = body[ext:]
        if major in (3, 4):
            _read_id3v2_frames(body, major, tags)
        pos = end + (10 if flags & 0x10 else 0)

    audio_end = len(data)
    if len(data) >= 128 and data[-128:-125] == b"TAG":
        v1 = data[-128:]
        _set(tags, "title", v1[3:33].decode("latin-1"))
        _set(tags, "artist", v1[33:63].decode("latin-1"))
        _set(tags, "year", v1[93:97].decode("latin-1"))
        if v1[125] == 0 and v1[126]:
            _set(tags, "track", str(v1[126]))
        audio_end -= 128

    frame = _find_mpeg_frame(data, pos, audio_end)
    if frame is None:
        raise TagError("no MPEG audio frame found")
    frame_pos, bit_rate, sample_rate = frame
    tags["bit_rate"] = bit_rate
    tags["sample_rate"] = sample_rate
    tags["duration"] = (audio_end - frame_pos) * 8 / (bit_rate * 1000)
    return tags


def _read_ogg(data: bytes) -> dict:
    tags = _empty()
    serial = None
    packets: list[bytes] = []
    partial = b""
    last_granule = 0
    pos = 0
    while data.startswith(b"OggS", pos) and pos + 27 <= len(data):
        granule, page_serial = struct.unpack_from("<qI", data, pos + 6)
        segments = data[pos + 27 : pos + 27 + data[pos + 26]]
        body_pos = pos + 27 + len(segments)
        if serial is None:
            serial = page_serial
        if page_serial == serial:
            if granule >= 0:
                last_granule = granule
            cursor = body_pos
            for lace in segments:
                if len(packets) >= 2:
                    break
                partial += data[cursor : cursor + lace]
                cursor += lace
                if lace < 255:
                    packets.append(partial)
                    partial = b""
        pos = body_pos + sum(segments)

    if len(packets) < 2:
        raise TagError("missing Ogg headers")
    head, comment = packets[0], packets[1]
    if head.startswith(b"\x01vorbis") and len(head) >= 16:
        (sample_rate,) = struct.unpack_from("<I", head, 12)
        if comment.startswith(b"\x03vorbis"):
            _apply_vorbis_comments(comment[7:], tags)
        if not sample_rate:
            raise TagError("invalid Vorbis sample rate")
        duration = last_granule / sample_rate
    elif head.startswith(b"OpusHead") and len(head) >= 16:
        pre_skip, input_rate = struct.unpack_from("<HI", head, 10)
        if comment.startswith(b"OpusTags"):
            _apply_vorbis_comments(comment[8:], tags)
        sample_rate = input_rate or 48000
        duration = max(last_granule - pre_skip, 0) / 48000
    else:
        raise TagError("unsupported Ogg codec")

    tags["sample_rate"] = sample_rate
    tags["duration"] = duration
    if duration > 0:
        tags["bit_rate"] = round(len(data) * 8 / duration / 1000)
    return tags


def read_tags(path) -> dict:
    """Read tags and stream properties.

    Returns a dict with keys ``track``, ``title``, ``artist``, ``year``,
    ``duration`` (seconds), ``bit_rate`` (kbps) and ``sample_rate`` (Hz);
    values the file does not provide are ``None``.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise TagError(f"cannot read {path}: {exc}") from exc

    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return _read_wav(data)
    if data[:4] == b"fLaC":
        return _read_flac(data)
    if data[:4] == b"OggS":
        return _read_ogg(data)
    if data[:3] == b"ID3" or _find_mpeg_frame(data, 0, min(len(data), 4096)):
        return _read_mp3(data)
    raise TagError(f"unsupported audio format: {path}")