"""Tests for tab expansion and cursor column mapping."""

from tiny.models import Row
from tiny.render import cx_to_rx, rx_to_cx, update_render


def make_row(chars: str) -> Row:
    row = Row(idx=0, chars=chars)
    update_render(row)
    return row


class TestUpdateRender:
    def test_plain_text_unchanged(self):
        assert make_row("hello").render == "hello"

    def test_leading_tab_expands_to_stop(self):
        assert make_row("\tab").render == " " * 8 + "ab"

    def test_tab_after_text_fills_to_next_stop(self):
        row = make_row("a\tb")
        assert row.render == "a" + " " * 7 + "b"
        assert row.rsize == 9

    def test_tab_at_stop_takes_full_width(self):
        assert make_row("12345678\tx").render == "12345678" + " " * 8 + "x"


class TestColumnMapping:
    def test_cx_to_rx_counts_tab_gap(self):
        row = make_row("a\tb")
        assert cx_to_rx(row, 0) == 0
        assert cx_to_rx(row, 1) == 1
        assert cx_to_rx(row, 2) == 8
        assert cx_to_rx(row, 3) == 9

    def test_rx_inside_tab_maps_to_tab(self):
        row = make_row("\tab")
        for rx in range(8):
            assert rx_to_cx(row, rx) == 0
        assert rx_to_cx(row, 8) == 1
        assert rx_to_cx(row, 9) == 2

    def test_rx_past_end_maps_to_size(self):
        row = make_row("ab")
        assert rx_to_cx(row, 50) == 2

    def test_round_trip_for_every_cursor_column(self):
        for text in ("", "plain", "\t\tx", "a\tbc\td", "x\t"):
            row = make_row(text)
            for cx in range(row.size + 1):
                assert rx_to_cx(row, cx_to_rx(row, cx)) == cx
