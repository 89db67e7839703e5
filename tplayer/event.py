"""Events driving the player: periodic ticks, key presses and app messages."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Union

TICK_FPS = 30.0


class AppEvent(Enum):
    """Actions the application can be asked to perform."""

    QUIT = auto()

    LIST_UP = auto()
    LIST_DOWN = auto()
    LIST_QUEUE = auto()
    LIST_SELECT = auto()
    LIST_BACK = auto()

    PLAY_TOGGLE = auto()
    PLAY_NEXT = auto()
    PLAY_PREVIOUS = auto()
    PLAY_SEEK_FORWARD = auto()
    PLAY_SEEK_BACK = auto()

    VOLUME_UP = auto()
    VOLUME_DOWN = auto()


@dataclass(frozen=True)
class Key:
    """A key press.

    ``code`` is a single character, or one of ``Up``, ``Down``, ``Left``,
    ``Right``, ``Tab``, ``Enter`` and ``Esc``.
    """

    code: str
    ctrl: bool = False


@dataclass(frozen=True)
class Tick:
    """Emitted at a fixed rate to drive periodic work."""


@dataclass(frozen=True)
class KeyInput:
    """A key press read from the terminal."""

    key: Key


@dataclass(frozen=True)
class AppMessage:
    """An application event queued with :meth:`EventHandler.send`."""

    event: AppEvent


Event = Union[Tick, KeyInput, AppMessage]
KeyReader = Callable[[float], Optional[Key]]


class EventHandler:
    """Produces ticks at a fixed rate, key presses in between, and queued app events.

    ``key_reader`` is called with the number of seconds it may wait and
    returns a :class:`Key` or ``None`` if nothing was pressed in that time.
    """

    def __init__(self, key_reader: KeyReader | None = None, tick_fps: float = TICK_FPS):
        if tick_fps <= 0:
            raise ValueError("tick rate must be positive")
        self.key_reader = key_reader
        self._interval = 1.0 / tick_fps
        self._last_tick = time.monotonic()
        self._pending: deque[AppEvent] = deque()
        self._closed = False

    def next(self, timeout: float | None = None) -> Event:
        """Block until the next event.

        Raises ``TimeoutError`` if ``timeout`` seconds pass without one and
        ``RuntimeError`` once the handler is closed.
        """
        if self._closed:
            raise RuntimeError("event handler is closed")
        if self._pending:
            return AppMessage(self._pending.popleft())

        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            now = time.monotonic()
            remaining = self._interval - (now - self._last_tick)
            if remaining <= 0:
                self._last_tick = now
                return Tick()
            if deadline is not None:
                if now >= deadline:
                    raise TimeoutError("no event arrived in time")
                remaining = min(remaining, deadline - now)
            if self.key_reader is None:
                time.sleep(remaining)
                continue
            key = self.key_reader(remaining)
            if key is not None:
                return KeyInput(key)

    def send(self, app_event: AppEvent) -> None:
        """Queue an app event for the next call to :meth:`next`."""
        if not self._closed:
            self._pending.append(app_event)

    def close(self) -> None:
        """Stop producing events."""
        self._closed = True
        self._pending.clear()