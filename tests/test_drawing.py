import io

import pytest

from bacon.drawing import clear_line, goto, goto_line


def test_goto_origin():
    w = io.StringIO()
    goto(w, 0, 0)
    assert w.getvalue() == "\x1b[1;1H"


@pytest.mark.parametrize("y", [0, 3, 42])
def test_goto_line_is_goto_first_column(y):
    a, b = io.StringIO(), io.StringIO()
    goto_line(a, y)
    goto(b, 0, y)
    assert a.getvalue() == b.getvalue()


def test_goto_distinguishes_axes():
    a, b = io.StringIO(), io.StringIO()
    goto(a, 2, 7)
    goto(b, 7, 2)
    assert a.getvalue() != b.getvalue()
    assert a.getvalue().startswith("\x1b[") and a.getvalue().endswith("H")


def test_clear_line():
    w = io.StringIO()
    clear_line(w)
    assert w.getvalue() == "\x1b[K"