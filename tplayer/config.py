"""Persistent player configuration stored as JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Config:
    """Global player settings, saved next to the music library."""

    volume: float = 1.0
    path: Path | None = field(default=None, compare=False, repr=False)

    @classmethod
    def _create_new(cls, path: Path) -> Config:
        config = cls(path=path)
        path.parent.mkdir(parents=True, exist_ok=True)
        config.save()
        return config

    @classmethod
    def parse_or_new(cls, path) -> Config:
        """Load the config at ``path``, or write and return a default one."""
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return cls._create_new(path)

        volume = raw.get("volume") if isinstance(raw, dict) else None
        if isinstance(volume, bool) or not isinstance(volume, (int, float)):
            return cls._create_new(path)
        return cls(volume=float(volume), path=path)

    def set_volume(self, volume: float) -> None:
        """Update the volume and persist it."""
        self.volume = volume
        self.save()

    def save(self) -> None:
        """Write the config to its path."""
        if self.path is None:
            raise RuntimeError("config has no path to save to")
        self.path.write_text(json.dumps({"volume": self.volume}), encoding="utf-8")