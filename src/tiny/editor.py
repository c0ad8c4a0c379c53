from __future__ import annotations

import errno
import logging
import os
import signal
import sys
import time
from typing import Callable

from .buffer import Document
from .constants import (
    ANSI_CLEAR_SCREEN,
    ANSI_CURSOR_HOME,
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    CTRL_F,
    CTRL_H,
    CTRL_L,
    CTRL_Q,
    CTRL_S,
    DEL_KEY,
    END_KEY,
    ENTER,
    ESC,
    HOME_KEY,
    PAGE_DOWN,
    PAGE_UP,
    QUIT_TIMES,
)
from .log import setup_logging
from .models import EditorConfig
from .screen import refresh_screen, scroll
from .search import find
from .syntax import select_syntax_highlight
from .terminal import RawMode, get_window_size, read_key

logger = logging.getLogger(__name__)

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"


class Editor:
    def __init__(
        self,
        stdin_fd: int = 0,
        stdout_fd: int = 1,
        screen_size: tuple[int, int] | None = None,
    ) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.doc = Document()
        self.cfg = EditorConfig(doc=self.doc)
        self.quit_times = QUIT_TIMES
        if screen_size is None:
            self.update_window_size()
        else:
            self.set_window_size(*screen_size)

    def set_window_size(self, rows: int, cols: int) -> None:
        # Two lines are reserved for the status and message bars.
        self.cfg.screenrows = max(1, rows - 2)
        self.cfg.screencols = max(1, cols)

    def update_window_size(self) -> None:
        try:
            rows, cols = get_window_size(self.stdin_fd, self.stdout_fd)
        except OSError as exc:
            raise OSError(exc.errno, "Unable to query screen size") from exc
        self.set_window_size(rows, cols)

    def handle_sigwinch(self, _signum: int, _frame) -> None:
        try:
            self.update_window_size()
        except OSError as exc:
            logger.warning("resize ignored: %s", exc.__cause__ or exc)
            self.set_status_message("Can't read window size, keeping %dx%d",
                                    self.cfg.screencols, self.cfg.screenrows + 2)
        else:
            scroll(self.cfg)
        self.refresh_screen()

    def set_status_message(self, fmt: str, *args: object) -> None:
        self.cfg.statusmsg = fmt % args if args else fmt
        self.cfg.statusmsg_time = time.time()

    def read_key(self) -> int:
        return read_key(self.stdin_fd)

    def refresh_screen(self) -> None:
        refresh_screen(self.cfg, self.stdout_fd)

    def select_syntax_highlight(self) -> None:
        self.doc.set_syntax(select_syntax_highlight(self.doc.filename))

    def open_file(self, filename: str) -> None:
        self.doc.filename = filename
        self.select_syntax_highlight()
        try:
            with open(filename, "rb") as f:
                self.doc.load_lines(f)
        except FileNotFoundError:
            logger.info("%s does not exist yet, starting empty", filename)
        except OSError as exc:
            raise OSError(exc.errno, f"Opening file failed: {filename}") from exc
        else:
            logger.info("opened %s (%d rows)", filename, self.doc.numrows)
        self.doc.dirty = 0

    def save(self) -> None:
        if self.doc.filename is None:
            filename = self.prompt("Save as: %s (ESC to cancel)")
            if filename is None:
                self.set_status_message("Save aborted")
                return
            self.doc.filename = filename
            self.select_syntax_highlight()

        data = self.doc.serialize()
        fd = -1
        try:
            fd = os.open(self.doc.filename, os.O_RDWR | os.O_CREAT, 0o644)
            os.ftruncate(fd, len(data))
            written = 0
            while written < len(data):
                n = os.write(fd, data[written:])
                if n <= 0:
                    raise OSError(errno.EIO, "short write")
                written += n
        except OSError as exc:
            logger.warning("saving %s failed: %s", self.doc.filename, exc)
            reason = os.strerror(exc.errno) if exc.errno else str(exc)
            self.set_status_message("Can't save! I/O error: %s", reason)
            return
        finally:
            if fd != -1:
                os.close(fd)

        self.doc.dirty = 0
        logger.info("wrote %d bytes to %s", len(data), self.doc.filename)
        self.set_status_message("%d bytes written to disk", len(data))

    def prompt(
        self, template: str, callback: Callable[[str, int], None] | None = None
    ) -> str | None:
        """Read a line on the message bar.

        ``callback`` sees the buffer and the key after every keystroke,
        ESC and Enter included. Returns ``None`` when cancelled with ESC.
        """
        buf = ""
        while True:
            self.set_status_message(template, buf)
            self.refresh_screen()

            c = self.read_key()
            if c in (DEL_KEY, CTRL_H, BACKSPACE):
                buf = buf[:-1]
            elif c == ESC:
                self.set_status_message("")
                if callback is not None:
                    callback(buf, c)
                return None
            elif c == ENTER:
                if buf:
                    self.set_status_message("")
                    if callback is not None:
                        callback(buf, c)
                    return buf
            elif 32 <= c < 127:
                buf += chr(c)

            if callback is not None:
                callback(buf, c)

    def find(self) -> None:
        find(self)

    def insert_char(self, c: int) -> None:
        cfg = self.cfg
        self.doc.insert_char(cfg.cy, cfg.cx, chr(c))
        cfg.cx += 1

    def insert_newline(self) -> None:
        cfg = self.cfg
        self.doc.split_row(cfg.cy, cfg.cx)
        cfg.cy += 1
        cfg.cx = 0

    def del_char(self) -> None:
        cfg = self.cfg
        cfg.cy, cfg.cx = self.doc.delete_char(cfg.cy, cfg.cx)

    def move_cursor(self, key: int) -> None:
        cfg = self.cfg
        row = cfg.current_row()

        if key == ARROW_LEFT:
            if cfg.cx != 0:
                cfg.cx -= 1
            elif cfg.cy > 0:
                cfg.cy -= 1
                cfg.cx = self.doc.rows[cfg.cy].size
        elif key == ARROW_RIGHT:
            if row is not None and cfg.cx < row.size:
                cfg.cx += 1
            elif row is not None and cfg.cx == row.size:
                cfg.cy += 1
                cfg.cx = 0
        elif key == ARROW_UP:
            if cfg.cy != 0:
                cfg.cy -= 1
        elif key == ARROW_DOWN:
            if cfg.cy < cfg.numrows:
                cfg.cy += 1

        row = cfg.current_row()
        rowlen = row.size if row is not None else 0
        if cfg.cx > rowlen:
            cfg.cx = rowlen

    def page(self, key: int) -> None:
        cfg = self.cfg
        if key == PAGE_UP:
            cfg.cy = cfg.rowoff
        else:
            cfg.cy = min(cfg.rowoff + cfg.screenrows - 1, cfg.numrows)
        for _ in range(cfg.screenrows):
            self.move_cursor(ARROW_UP if key == PAGE_UP else ARROW_DOWN)

    def quit(self) -> None:
        if self.doc.dirty and self.quit_times > 0:
            self.set_status_message(
                "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit.",
                self.quit_times,
            )
            self.quit_times -= 1
            return
        os.write(self.stdout_fd, (ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME).encode())
        raise SystemExit(0)

    def process_keypress(self) -> None:
        c = self.read_key()
        if c == CTRL_Q:
            self.quit()
            return

        if c == ENTER:
            self.insert_newline()
        elif c == CTRL_S:
            self.save()
        elif c == HOME_KEY:
            self.cfg.cx = 0
        elif c == END_KEY:
            row = self.cfg.current_row()
            if row is not None:
                self.cfg.cx = row.size
        elif c == CTRL_F:
            self.find()
        elif c in (BACKSPACE, CTRL_H, DEL_KEY):
            if c == DEL_KEY:
                self.move_cursor(ARROW_RIGHT)
            self.del_char()
        elif c in (PAGE_UP, PAGE_DOWN):
            self.page(c)
        elif c in (ARROW_UP, ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT):
            self.move_cursor(c)
        elif c in (CTRL_L, ESC):
            pass
        elif c < 256:
            self.insert_char(c)

        self.quit_times = QUIT_TIMES


def run(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) > 1:
        print("Usage: tiny [filename]", file=sys.stderr)
        return 1

    setup_logging()
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    try:
        with RawMode(stdin_fd):
            editor = Editor(stdin_fd, stdout_fd)
            if args:
                editor.open_file(args[0])
            signal.signal(signal.SIGWINCH, editor.handle_sigwinch)
            editor.set_status_message(HELP_MESSAGE)
            while True:
                editor.refresh_screen()
                editor.process_keypress()
    except SystemExit as exc:
        if isinstance(exc.code, int):
            return exc.code
        return 0
    except OSError as exc:
        logger.exception("fatal terminal error")
        if os.isatty(stdout_fd):
            os.write(stdout_fd, (ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME).encode())
        print(f"tiny: {exc.strerror or exc}", file=sys.stderr)
        return 1
