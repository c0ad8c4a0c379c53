from __future__ import annotations

from .constants import TAB_STOP
from .models import Row


def update_render(row: Row) -> None:
    """Rebuild ``row.render`` from ``row.chars``, expanding tabs to the next stop."""
    out: list[str] = []
    idx = 0
    for ch in row.chars:
        if ch == "\t":
            out.append(" ")
            idx += 1
            while idx % TAB_STOP != 0:
                out.append(" ")
                idx += 1
        else:
            out.append(ch)
            idx += 1
    row.render = "".join(out)


def cx_to_rx(row: Row, cx: int) -> int:
    rx = 0
    for ch in row.chars[:cx]:
        if ch == "\t":
            rx += (TAB_STOP - 1) - (rx % TAB_STOP)
        rx += 1
    return rx


def rx_to_cx(row: Row, rx: int) -> int:
    """Return the raw index whose rendered span covers column ``rx``.

    Columns inside a tab's expansion map back to the tab itself; columns past
    the end of the row map to ``row.size``.
    """
    cur_rx = 0
    for cx, ch in enumerate(row.chars):
        if ch == "\t":
            cur_rx += (TAB_STOP - 1) - (cur_rx % TAB_STOP)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return row.size
