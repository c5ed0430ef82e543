from embd.characterdisplay import Controller, Display

ROWS = 4
COLS = 20


class MockController(Controller):
    def __init__(self):
        self.calls = []

    def display_off(self):
        self.calls.append(("display_off",))

    def display_on(self):
        self.calls.append(("display_on",))

    def cursor_off(self):
        self.calls.append(("cursor_off",))

    def cursor_on(self):
        self.calls.append(("cursor_on",))

    def blink_off(self):
        self.calls.append(("blink_off",))

    def blink_on(self):
        self.calls.append(("blink_on",))

    def shift_left(self):
        self.calls.append(("shift_left",))

    def shift_right(self):
        self.calls.append(("shift_right",))

    def backlight_off(self):
        self.calls.append(("backlight_off",))

    def backlight_on(self):
        self.calls.append(("backlight_on",))

    def home(self):
        self.calls.append(("home",))

    def clear(self):
        self.calls.append(("clear",))

    def write_char(self, char):
        self.calls.append(("write_char", char))

    def set_cursor(self, col, row):
        self.calls.append(("set_cursor", col, row))

    def close(self):
        self.calls.append(("close",))


def _drive(*actions):
    """Run actions against a fresh display and return the controller calls."""
    mock = MockController()
    display = Display(mock, COLS, ROWS)
    for action in actions:
        action(display)
    return mock.calls


def test_newline():
    calls = _drive(lambda d: d.newline())
    assert calls == [("set_cursor", 0, 1)]


def test_message():
    calls = _drive(lambda d: d.message("ab"))
    assert calls == [("write_char", ord("a")), ("write_char", ord("b"))]


def test_message_newline():
    calls = _drive(lambda d: d.message("a\nb"))
    assert calls == [
        ("write_char", ord("a")),
        ("set_cursor", 0, 1),
        ("write_char", ord("b")),
    ]


def test_message_wrap():
    calls = _drive(lambda d: d.set_cursor(COLS - 1, 0), lambda d: d.message("ab"))
    assert calls == [
        ("set_cursor", COLS - 1, 0),
        ("write_char", ord("a")),
        ("set_cursor", 0, 1),
        ("write_char", ord("b")),
    ]


def test_set_cursor_clamps_row():
    calls = _drive(lambda d: d.set_cursor(3, ROWS + 5))
    assert calls == [("set_cursor", 3, ROWS - 1)]


def test_newline_on_last_row_stays_on_last_row():
    calls = _drive(lambda d: d.set_cursor(0, ROWS - 1), lambda d: d.newline())
    assert calls[-1] == ("set_cursor", 0, ROWS - 1)


def test_clear_resets_position():
    calls = _drive(
        lambda d: d.set_cursor(5, 2),
        lambda d: d.clear(),
        lambda d: d.newline(),
    )
    assert calls == [("set_cursor", 5, 2), ("clear",), ("set_cursor", 0, 1)]


def test_home_resets_position():
    calls = _drive(
        lambda d: d.set_cursor(5, 2),
        lambda d: d.home(),
        lambda d: d.newline(),
    )
    assert calls[1:] == [("home",), ("set_cursor", 0, 1)]


def test_delegated_operations():
    calls = _drive(
        lambda d: d.backlight_off(),
        lambda d: d.blink_on(),
        lambda d: d.close(),
    )
    assert calls == [("backlight_off",), ("blink_on",), ("close",)]