from __future__ import annotations

from .models import EditorSyntax, Row
from .render import update_render
from .syntax import update_syntax

# Files are mapped byte-for-character so any input round-trips on save.
ENCODING = "latin-1"


class Document:
    """Ordered rows plus the dirty counter, file name and active syntax.

    Rows are addressed by index only; callers re-fetch ``rows[i]`` after any
    insert or delete instead of holding on to a ``Row`` across the call.
    """

    def __init__(self, filename: str | None = None) -> None:
        self.rows: list[Row] = []
        self.dirty = 0
        self.filename = filename
        self.syntax: EditorSyntax | None = None

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def set_syntax(self, syntax: EditorSyntax | None) -> None:
        self.syntax = syntax
        for idx in range(self.numrows):
            update_syntax(self, idx)

    def update_row(self, idx: int) -> None:
        update_render(self.rows[idx])
        update_syntax(self, idx)

    def _renumber(self, start: int) -> None:
        for j in range(start, self.numrows):
            self.rows[j].idx = j

    def insert_row(self, at: int, s: str) -> None:
        at = max(0, min(at, self.numrows))
        # Seeded with what the row below used to see, so a new exit state propagates.
        seed = self.rows[at - 1].hl_open_comment if at > 0 else False
        self.rows.insert(at, Row(idx=at, chars=s, hl_open_comment=seed))
        self._renumber(at + 1)
        self.update_row(at)
        self.dirty += 1

    def append_row(self, s: str) -> None:
        self.insert_row(self.numrows, s)

    def delete_row(self, at: int) -> None:
        if at < 0 or at >= self.numrows:
            return
        del self.rows[at]
        self._renumber(at)
        # The row that moved up is now seeded by a different neighbour.
        update_syntax(self, at)
        self.dirty += 1

    def row_insert_char(self, idx: int, at: int, c: str) -> None:
        row = self.rows[idx]
        if at < 0 or at > row.size:
            at = row.size
        row.chars = row.chars[:at] + c + row.chars[at:]
        self.update_row(idx)
        self.dirty += 1

    def row_append_string(self, idx: int, s: str) -> None:
        self.rows[idx].chars += s
        self.update_row(idx)
        self.dirty += 1

    def row_del_char(self, idx: int, at: int) -> None:
        row = self.rows[idx]
        if at < 0 or at >= row.size:
            return
        row.chars = row.chars[:at] + row.chars[at + 1 :]
        self.update_row(idx)
        self.dirty += 1

    def insert_char(self, cy: int, cx: int, c: str) -> None:
        """Insert ``c`` at (cy, cx); ``cy == numrows`` first appends a row."""
        if cy < 0 or cy > self.numrows:
            return
        if cy == self.numrows:
            self.append_row("")
        self.row_insert_char(cy, cx, c)

    def split_row(self, cy: int, cx: int) -> None:
        if cy < 0 or cy > self.numrows:
            return
        if cy == self.numrows or cx <= 0:
            self.insert_row(cy, "")
            return
        cx = min(cx, self.rows[cy].size)
        self.insert_row(cy + 1, self.rows[cy].chars[cx:])
        row = self.rows[cy]
        row.chars = row.chars[:cx]
        self.update_row(cy)

    def delete_char(self, cy: int, cx: int) -> tuple[int, int]:
        """Backspace at (cy, cx) and return where the cursor ends up.

        At column 0 the row is joined onto the previous one and the cursor
        lands on the previous row's former end.
        """
        if cy < 0 or cy >= self.numrows:
            return cy, cx
        if cx == 0 and cy == 0:
            return cy, cx
        if cx > 0:
            cx = min(cx, self.rows[cy].size)
            self.row_del_char(cy, cx - 1)
            return cy, cx - 1
        prev_size = self.rows[cy - 1].size
        self.row_append_string(cy - 1, self.rows[cy].chars)
        self.delete_row(cy)
        return cy - 1, prev_size

    def rows_to_string(self) -> str:
        return "".join(f"{row.chars}\n" for row in self.rows)

    def serialize(self) -> bytes:
        return self.rows_to_string().encode(ENCODING, errors="replace")

    def load_lines(self, lines) -> None:
        """Append one row per line, dropping trailing CR/LF bytes."""
        for line in lines:
            if isinstance(line, bytes):
                line = line.decode(ENCODING)
            self.append_row(line.rstrip("\r\n"))
