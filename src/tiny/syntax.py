from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from .constants import (
    C_HL_EXTENSIONS,
    C_HL_FILETYPE,
    C_HL_KEYWORDS,
    HL_COMMENT,
    HL_HIGHLIGHT_NUMBERS,
    HL_HIGHLIGHT_STRINGS,
    HL_KEYWORD1,
    HL_KEYWORD2,
    HL_MATCH,
    HL_MLCOMMENT,
    HL_NORMAL,
    HL_NUMBER,
    HL_STRING,
    SEPARATORS,
    WHITESPACE,
)
from .models import EditorSyntax, Row

if TYPE_CHECKING:
    from .buffer import Document

logger = logging.getLogger(__name__)


HLDB: tuple[EditorSyntax, ...] = (
    EditorSyntax(
        filetype=C_HL_FILETYPE,
        filematch=C_HL_EXTENSIONS,
        keywords=C_HL_KEYWORDS,
        singleline_comment_start="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
        flags=HL_HIGHLIGHT_NUMBERS | HL_HIGHLIGHT_STRINGS,
    ),
)


def is_separator(c: str) -> bool:
    # An empty string stands for the end of the row.
    return not c or c == "\0" or c in WHITESPACE or c in SEPARATORS


def syntax_to_color(hl: int) -> int:
    if hl in (HL_COMMENT, HL_MLCOMMENT):
        return 36
    if hl == HL_KEYWORD1:
        return 33
    if hl == HL_KEYWORD2:
        return 32
    if hl == HL_STRING:
        return 35
    if hl == HL_NUMBER:
        return 31
    if hl == HL_MATCH:
        return 34
    return 37


def select_syntax_highlight(filename: str | None) -> EditorSyntax | None:
    """Pick the syntax entry for ``filename``.

    Patterns starting with a dot must equal the file's last extension; any
    other pattern matches anywhere in the name.
    """
    if not filename:
        return None
    ext = os.path.splitext(filename)[1]
    for syntax in HLDB:
        for pattern in syntax.filematch:
            is_ext = pattern.startswith(".")
            if (is_ext and ext == pattern) or (not is_ext and pattern in filename):
                logger.debug("selected %s syntax for %s", syntax.filetype, filename)
                return syntax
    return None


def _highlight_row(row: Row, syntax: EditorSyntax, in_comment: bool) -> bool:
    """Tag one row and return whether it ends inside a block comment."""
    p = row.render
    hl = row.hl
    n = len(p)

    scs = syntax.singleline_comment_start
    mcs = syntax.multiline_comment_start
    mce = syntax.multiline_comment_end

    prev_sep = True
    in_string = ""

    i = 0
    while i < n:
        ch = p[i]
        prev_hl = hl[i - 1] if i > 0 else HL_NORMAL

        if scs and not in_string and not in_comment:
            if p.startswith(scs, i):
                hl[i:] = [HL_COMMENT] * (n - i)
                break

        if mcs and mce and not in_string:
            if in_comment:
                hl[i] = HL_MLCOMMENT
                if p.startswith(mce, i):
                    end = min(i + len(mce), n)
                    hl[i:end] = [HL_MLCOMMENT] * (end - i)
                    i += len(mce)
                    in_comment = False
                    prev_sep = True
                else:
                    i += 1
                continue
            if p.startswith(mcs, i):
                end = min(i + len(mcs), n)
                hl[i:end] = [HL_MLCOMMENT] * (end - i)
                i += len(mcs)
                in_comment = True
                continue

        if syntax.flags & HL_HIGHLIGHT_STRINGS:
            if in_string:
                hl[i] = HL_STRING
                if ch == "\\" and i + 1 < n:
                    hl[i + 1] = HL_STRING
                    i += 2
                    continue
                if ch == in_string:
                    in_string = ""
                i += 1
                prev_sep = True
                continue
            if ch in ('"', "'"):
                in_string = ch
                hl[i] = HL_STRING
                i += 1
                continue

        if syntax.flags & HL_HIGHLIGHT_NUMBERS:
            if (ch.isdigit() and (prev_sep or prev_hl == HL_NUMBER)) or (
                ch == "." and prev_hl == HL_NUMBER
            ):
                hl[i] = HL_NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = False
            for kw in syntax.keywords:
                kw2 = kw.endswith("|")
                token = kw[:-1] if kw2 else kw
                klen = len(token)
                tail = p[i + klen] if i + klen < n else ""
                if p.startswith(token, i) and is_separator(tail):
                    hl[i : i + klen] = [HL_KEYWORD2 if kw2 else HL_KEYWORD1] * klen
                    i += klen
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        prev_sep = is_separator(ch)
        i += 1

    return in_comment


def update_syntax(doc: Document, idx: int) -> None:
    """Re-tag row ``idx`` and every following row whose comment state changes.

    A row's entry state is the previous row's ``hl_open_comment``; when a
    row's exit state flips, the next row is queued, until the state settles
    or the document ends.
    """
    while 0 <= idx < doc.numrows:
        row = doc.rows[idx]
        row.hl = [HL_NORMAL] * row.rsize
        if doc.syntax is None:
            return

        in_comment = idx > 0 and doc.rows[idx - 1].hl_open_comment
        open_comment = _highlight_row(row, doc.syntax, in_comment)
        changed = row.hl_open_comment != open_comment
        row.hl_open_comment = open_comment
        if not changed:
            return
        idx += 1
