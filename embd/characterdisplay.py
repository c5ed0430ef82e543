"""A convenience layer over a character display controller."""

from __future__ import annotations

import abc


class Controller(abc.ABC):
    """Basic operations of a character display controller."""

    @abc.abstractmethod
    def display_off(self) -> None:
        """Turn the display off."""

    @abc.abstractmethod
    def display_on(self) -> None:
        """Turn the display on."""

    @abc.abstractmethod
    def cursor_off(self) -> None:
        """Hide the cursor."""

    @abc.abstractmethod
    def cursor_on(self) -> None:
        """Show the cursor."""

    @abc.abstractmethod
    def blink_off(self) -> None:
        """Stop the cursor blinking."""

    @abc.abstractmethod
    def blink_on(self) -> None:
        """Make the cursor blink."""

    @abc.abstractmethod
    def shift_left(self) -> None:
        """Move the cursor and text one column left."""

    @abc.abstractmethod
    def shift_right(self) -> None:
        """Move the cursor and text one column right."""

    @abc.abstractmethod
    def backlight_off(self) -> None:
        """Turn the backlight off."""

    @abc.abstractmethod
    def backlight_on(self) -> None:
        """Turn the backlight on."""

    @abc.abstractmethod
    def home(self) -> None:
        """Move the cursor to the home position."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Clear the display and move the cursor home."""

    @abc.abstractmethod
    def write_char(self, char: int) -> None:
        """Write one character byte."""

    @abc.abstractmethod
    def set_cursor(self, col: int, row: int) -> None:
        """Move the cursor to a position."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the controller."""


class Display(Controller):
    """A character display of fixed size that tracks the cursor position."""

    def __init__(self, controller: Controller, cols: int, rows: int) -> None:
        self.controller = controller
        self.cols = cols
        self.rows = rows
        self._col = 0
        self._row = 0

    def home(self) -> None:
        """Move the cursor and all characters to the home position."""
        self._col, self._row = 0, 0
        self.controller.home()

    def clear(self) -> None:
        """Clear the display, keeping mode settings, and reset the position."""
        self._col, self._row = 0, 0
        self.controller.clear()

    def message(self, message: str) -> None:
        """Print text, honouring newlines and wrapping at the end of lines."""
        for byte in message.encode():
            if byte == ord("\n"):
                self.newline()
                continue
            self.write_char(byte)
            self._col += 1
            if self._col >= self.cols or self._col < 0:
                self.newline()

    def newline(self) -> None:
        """Move the cursor to the start of the next line."""
        self.set_cursor(0, self._row + 1)

    def set_cursor(self, col: int, row: int) -> None:
        """Move the cursor, clamping the row to the last line."""
        if row >= self.rows:
            row = self.rows - 1
        self._col, self._row = col, row
        self.controller.set_cursor(col, row)

    def write_char(self, char: int) -> None:
        self.controller.write_char(char)

    def close(self) -> None:
        self.controller.close()

    def display_off(self) -> None:
        self.controller.display_off()

    def display_on(self) -> None:
        self.controller.display_on()

    def cursor_off(self) -> None:
        self.controller.cursor_off()

    def cursor_on(self) -> None:
        self.controller.cursor_on()

    def blink_off(self) -> None:
        self.controller.blink_off()

    def blink_on(self) -> None:
        self.controller.blink_on()

    def shift_left(self) -> None:
        self.controller.shift_left()

    def shift_right(self) -> None:
        self.controller.shift_right()

    def backlight_off(self) -> None:
        self.controller.backlight_off()

    def backlight_on(self) -> None:
        self.controller.backlight_on()