"""Render engine: state snapshot to markup, plus the targets it is mounted in."""

from marsdash.render.inline import ActionRef, decode_inline, encode_inline
from marsdash.render.markup import SCROLL_TO_TOP, SELECT_ROVER, TOGGLE_THEME, render
from marsdash.render.target import FileTarget, MemoryTarget, RenderTarget

__all__ = [
    "SCROLL_TO_TOP",
    "SELECT_ROVER",
    "TOGGLE_THEME",
    "ActionRef",
    "FileTarget",
    "MemoryTarget",
    "RenderTarget",
    "decode_inline",
    "encode_inline",
    "render",
]
