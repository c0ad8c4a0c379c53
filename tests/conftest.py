from __future__ import annotations

import os

import pytest

from tiny.buffer import Document
from tiny.editor import Editor
from tiny.syntax import HLDB


def keys_of(*items) -> list[int]:
    out: list[int] = []
    for item in items:
        if isinstance(item, str):
            out.extend(ord(ch) for ch in item)
        else:
            out.append(item)
    return out


@pytest.fixture
def c_document():
    def build(*lines: str) -> Document:
        doc = Document("main.c")
        doc.set_syntax(HLDB[0])
        doc.load_lines(lines)
        return doc

    return build


@pytest.fixture
def editor():
    devnull = os.open(os.devnull, os.O_WRONLY)
    ed = Editor(stdin_fd=-1, stdout_fd=devnull, screen_size=(12, 80))
    yield ed
    os.close(devnull)


@pytest.fixture
def feed():
    """Script the keys an editor will read, strings expanding to their bytes."""

    def apply(ed: Editor, *items) -> None:
        ed.read_key = iter(keys_of(*items)).__next__

    return apply
