from __future__ import annotations

import os
import time

from .constants import (
    ANSI_ATTR_OFF,
    ANSI_CLEAR_LINE,
    ANSI_CURSOR_HOME,
    ANSI_DEFAULT_FG,
    ANSI_HIDE_CURSOR,
    ANSI_INVERT_ON,
    ANSI_SHOW_CURSOR,
    HL_NORMAL,
    STATUS_MSG_SECONDS,
    STATUS_NAME_WIDTH,
    TINY_VERSION,
)
from .models import EditorConfig, Row
from .render import cx_to_rx
from .syntax import syntax_to_color


def scroll(cfg: EditorConfig) -> None:
    """Keep the cursor's render position inside the viewport."""
    cfg.rx = 0
    row = cfg.current_row()
    if row is not None:
        cfg.rx = cx_to_rx(row, cfg.cx)

    if cfg.cy < cfg.rowoff:
        cfg.rowoff = cfg.cy
    if cfg.cy >= cfg.rowoff + cfg.screenrows:
        cfg.rowoff = cfg.cy - cfg.screenrows + 1
    if cfg.rx < cfg.coloff:
        cfg.coloff = cfg.rx
    if cfg.rx >= cfg.coloff + cfg.screencols:
        cfg.coloff = cfg.rx - cfg.screencols + 1


def draw_welcome(cfg: EditorConfig, out: list[str]) -> None:
    welcome = f"Tiny editor -- version {TINY_VERSION}"[: cfg.screencols]
    padding = (cfg.screencols - len(welcome)) // 2
    if padding:
        out.append("~")
        padding -= 1
    if padding > 0:
        out.append(" " * padding)
    out.append(welcome)


def draw_row(row: Row, coloff: int, width: int, out: list[str]) -> None:
    text = row.render[coloff : coloff + width]
    hl = row.hl[coloff : coloff + width]
    current_color = -1
    for ch, h in zip(text, hl):
        if ord(ch) < 32 or ord(ch) == 127:
            sym = chr(ord("@") + ord(ch)) if ord(ch) <= 26 else "?"
            out.append(ANSI_INVERT_ON)
            out.append(sym)
            out.append(ANSI_ATTR_OFF)
            if current_color != -1:
                out.append(f"\x1b[{current_color}m")
        elif h == HL_NORMAL:
            if current_color != -1:
                out.append(ANSI_DEFAULT_FG)
                current_color = -1
            out.append(ch)
        else:
            color = syntax_to_color(h)
            if color != current_color:
                current_color = color
                out.append(f"\x1b[{color}m")
            out.append(ch)
    out.append(ANSI_DEFAULT_FG)


def draw_rows(cfg: EditorConfig, out: list[str]) -> None:
    for y in range(cfg.screenrows):
        filerow = cfg.rowoff + y
        if filerow >= cfg.numrows:
            if cfg.numrows == 0 and y == cfg.screenrows // 3:
                draw_welcome(cfg, out)
            else:
                out.append("~")
        else:
            draw_row(cfg.doc.rows[filerow], cfg.coloff, cfg.screencols, out)
        out.append(ANSI_CLEAR_LINE)
        out.append("\r\n")


def draw_status_bar(cfg: EditorConfig, out: list[str]) -> None:
    doc = cfg.doc
    name = doc.filename or "[No Name]"
    modified = " (modified)" if doc.dirty else ""
    status = f"{name[:STATUS_NAME_WIDTH]} - {doc.numrows} lines{modified}"
    filetype = doc.syntax.filetype if doc.syntax else "no ft"
    rstatus = f"{filetype} | {cfg.cy + 1}/{doc.numrows}"

    status = status[: cfg.screencols]
    out.append(ANSI_INVERT_ON)
    out.append(status)
    fill = len(status)
    while fill < cfg.screencols:
        if cfg.screencols - fill == len(rstatus):
            out.append(rstatus)
            break
        out.append(" ")
        fill += 1
    out.append(ANSI_ATTR_OFF)
    out.append("\r\n")


def draw_message_bar(cfg: EditorConfig, out: list[str], now: float) -> None:
    out.append(ANSI_CLEAR_LINE)
    if cfg.statusmsg and now - cfg.statusmsg_time < STATUS_MSG_SECONDS:
        out.append(cfg.statusmsg[: cfg.screencols])


def compose_frame(cfg: EditorConfig, now: float | None = None) -> str:
    scroll(cfg)
    out: list[str] = [ANSI_HIDE_CURSOR, ANSI_CURSOR_HOME]
    draw_rows(cfg, out)
    draw_status_bar(cfg, out)
    draw_message_bar(cfg, out, time.time() if now is None else now)
    out.append(f"\x1b[{cfg.cy - cfg.rowoff + 1};{cfg.rx - cfg.coloff + 1}H")
    out.append(ANSI_SHOW_CURSOR)
    return "".join(out)


def refresh_screen(cfg: EditorConfig, fd: int) -> None:
    # Whole frame in a single write.
    os.write(fd, compose_frame(cfg).encode("latin-1", errors="replace"))
