"""Tests for key decoding and the cursor position reply parser."""

import os

import pytest

from tiny.constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    DEL_KEY,
    END_KEY,
    ESC,
    HOME_KEY,
    PAGE_DOWN,
    PAGE_UP,
)
from tiny.terminal import decode_key, parse_cursor_position, read_key


def decode(data: bytes) -> int:
    pending = iter(data[1:])
    return decode_key(data[0], lambda: next(pending, None))


class TestDecodeKey:
    def test_plain_bytes_pass_through(self):
        assert decode(b"a") == ord("a")
        assert decode(b"\r") == 13
        assert decode(b"\x7f") == 127

    @pytest.mark.parametrize(
        "seq, key",
        [
            (b"\x1b[A", ARROW_UP),
            (b"\x1b[B", ARROW_DOWN),
            (b"\x1b[C", ARROW_RIGHT),
            (b"\x1b[D", ARROW_LEFT),
            (b"\x1b[H", HOME_KEY),
            (b"\x1b[F", END_KEY),
            (b"\x1bOH", HOME_KEY),
            (b"\x1bOF", END_KEY),
            (b"\x1b[1~", HOME_KEY),
            (b"\x1b[3~", DEL_KEY),
            (b"\x1b[4~", END_KEY),
            (b"\x1b[5~", PAGE_UP),
            (b"\x1b[6~", PAGE_DOWN),
            (b"\x1b[7~", HOME_KEY),
            (b"\x1b[8~", END_KEY),
        ],
    )
    def test_escape_sequences(self, seq, key):
        assert decode(seq) == key

    @pytest.mark.parametrize(
        "seq",
        [b"\x1b", b"\x1b[", b"\x1b[3", b"\x1b[3x", b"\x1b[9~", b"\x1b[Z", b"\x1bOA", b"\x1bxy"],
    )
    def test_incomplete_or_unknown_sequences_are_escape(self, seq):
        assert decode(seq) == ESC

    def test_does_not_read_past_sequence(self):
        pending = iter(b"[Aq")
        assert decode_key(ESC, lambda: next(pending, None)) == ARROW_UP
        assert next(pending) == ord("q")


class TestReadKey:
    def test_reads_sequence_from_fd(self):
        r, w = os.pipe()
        try:
            os.write(w, b"\x1b[Bz")
            assert read_key(r) == ARROW_DOWN
            assert read_key(r) == ord("z")
        finally:
            os.close(r)
            os.close(w)


class TestCursorPosition:
    def test_parse_reply(self):
        assert parse_cursor_position(b"\x1b[24;80R") == (24, 80)

    def test_malformed_reply(self):
        with pytest.raises(OSError):
            parse_cursor_position(b"24;80R")
