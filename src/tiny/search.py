from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    ENTER,
    ESC,
    HL_MATCH,
)
from .models import EditorConfig
from .render import rx_to_cx

if TYPE_CHECKING:
    from .editor import Editor

SEARCH_PROMPT = "Search: %s (Use ESC/Arrows/Enter)"


class FindCallback:
    """Incremental search driven one prompt keystroke at a time.

    Holds the last matching row, the search direction and the highlight
    tags of the row currently painted with the match class, so they can be
    put back before the next match or when the prompt closes.
    """

    def __init__(self, cfg: EditorConfig) -> None:
        self.cfg = cfg
        self.last_match = -1
        self.direction = 1
        self.saved_hl_line = -1
        self.saved_hl: list[int] | None = None

    def restore_highlight(self) -> None:
        rows = self.cfg.doc.rows
        if self.saved_hl is not None and 0 <= self.saved_hl_line < len(rows):
            rows[self.saved_hl_line].hl = self.saved_hl
        self.saved_hl = None
        self.saved_hl_line = -1

    def __call__(self, query: str, key: int) -> None:
        self.restore_highlight()

        if key in (ENTER, ESC):
            self.last_match = -1
            self.direction = 1
            return
        if key in (ARROW_RIGHT, ARROW_DOWN):
            self.direction = 1
        elif key in (ARROW_LEFT, ARROW_UP):
            self.direction = -1
        else:
            self.last_match = -1
            self.direction = 1

        if not query:
            return
        if self.last_match == -1:
            self.direction = 1
        self.search(query)

    def search(self, query: str) -> bool:
        cfg = self.cfg
        rows = cfg.doc.rows
        current = self.last_match
        for _ in range(len(rows)):
            current += self.direction
            if current == -1:
                current = len(rows) - 1
            elif current == len(rows):
                current = 0

            row = rows[current]
            pos = row.render.find(query)
            if pos == -1:
                continue

            self.last_match = current
            cfg.cy = current
            cfg.cx = rx_to_cx(row, pos)
            # Past the end so the next scroll puts the match on the top line.
            cfg.rowoff = len(rows)

            self.saved_hl_line = current
            self.saved_hl = row.hl.copy()
            end = min(pos + len(query), row.rsize)
            row.hl[pos:end] = [HL_MATCH] * (end - pos)
            return True
        return False


def find(editor: Editor) -> None:
    cfg = editor.cfg
    saved = cfg.snapshot()
    callback = FindCallback(cfg)
    query = editor.prompt(SEARCH_PROMPT, callback)
    if query is None:
        cfg.restore(saved)
