"""A 4x3 matrix keypad scanned through digital pins."""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Sequence

from .pin import DigitalPin, Direction, Level

logger = logging.getLogger(__name__)

ROWS = 4
COLS = 3
DEFAULT_POLL = 150
"""Default delay between background scans, in milliseconds."""

_DEBOUNCE = 0.02


class Key(enum.IntEnum):
    """A key on the keypad; NONE means no key is pressed."""

    NONE = 0
    K0 = 1
    K1 = 2
    K2 = 3
    K3 = 4
    K4 = 5
    K5 = 6
    K6 = 7
    K7 = 8
    K8 = 9
    K9 = 10
    STAR = 11
    HASH = 12

    def __str__(self) -> str:
        if self is Key.STAR:
            return "*"
        if self is Key.HASH:
            return "#"
        return str(int(self) - 1)


KEY_MAP: tuple[tuple[Key, ...], ...] = (
    (Key.K1, Key.K2, Key.K3),
    (Key.K4, Key.K5, Key.K6),
    (Key.K7, Key.K8, Key.K9),
    (Key.STAR, Key.K0, Key.HASH),
)


class Matrix4x3:
    """A 4x3 keypad with rows read as inputs and columns driven as outputs."""

    def __init__(
        self,
        row_pins: Sequence[DigitalPin],
        col_pins: Sequence[DigitalPin],
        poll: int = DEFAULT_POLL,
    ) -> None:
        if len(row_pins) < ROWS:
            raise ValueError(f"matrix4x3: need {ROWS} row pins, got {len(row_pins)}")
        if len(col_pins) < COLS:
            raise ValueError(f"matrix4x3: need {COLS} column pins, got {len(col_pins)}")
        self.row_pins = tuple(row_pins[:ROWS])
        self.col_pins = tuple(col_pins[:COLS])
        self.poll = poll
        self._initialized = False
        self._setup_lock = threading.Lock()
        self._lock = threading.Lock()
        self._latest: Key | None = None
        self._stop: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def _setup(self) -> None:
        with self._setup_lock:
            if self._initialized:
                return
            for pin in self.row_pins:
                pin.set_direction(Direction.IN)
                pin.pull_up()
            for pin in self.col_pins:
                pin.set_direction(Direction.OUT)
                pin.write(Level.HIGH)
            self._initialized = True

    def _find_pressed_key(self) -> Key:
        self._setup()
        for col, col_pin in enumerate(self.col_pins):
            col_pin.write(Level.LOW)
            for row, row_pin in enumerate(self.row_pins):
                if row_pin.read() != Level.LOW:
                    continue
                time.sleep(_DEBOUNCE)
                if row_pin.read() == Level.LOW:
                    col_pin.write(Level.HIGH)
                    return KEY_MAP[row][col]
            col_pin.write(Level.HIGH)
        return Key.NONE

    def pressed_key(self) -> Key:
        """Return the key currently pressed, or Key.NONE.

        While the scan loop runs, its latest result is returned; otherwise
        the keypad is scanned directly.
        """
        with self._lock:
            latest = self._latest
        if latest is not None:
            return latest
        return self._find_pressed_key()

    def _poll_loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.poll / 1000):
            try:
                key = self._find_pressed_key()
            except Exception as exc:  # a failed scan keeps the previous result
                logger.debug("matrix4x3: scan failed: %s", exc)
                continue
            with self._lock:
                self._latest = key

    def run(self) -> None:
        """Start the continuous key scan loop in the background."""
        if self._thread is not None:
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._poll_loop, args=(self._stop,), daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        """Stop the scan loop, if running, and drop its result."""
        if self._thread is None or self._stop is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self._stop = None
        with self._lock:
            self._latest = None

    def __enter__(self) -> Matrix4x3:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()