"""Full-screen arrow-key selector and y/n confirmation for real terminals."""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

Key = Literal["up", "down", "enter", "cancel", "yes", "no", "other"]


@dataclass(frozen=True, slots=True)
class SelectorOption(Generic[T]):
    value: T
    label: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class SelectorResult(Generic[T]):
    action: Literal["select", "cancel"]
    value: T | None
    index: int


def is_interactive_terminal() -> bool:
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _color_enabled() -> bool:
    if not is_interactive_terminal():
        return False
    if os.getenv("NO_COLOR") is not None:
        return False
    return os.getenv("TERM", "").lower() != "dumb"


def _paint(text: str, *codes: str) -> str:
    if not _color_enabled() or not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _clear() -> None:
    sys.stdout.write("\x1b[2J\x1b[H")


def _read_char() -> str:
    if os.name == "nt":
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            return {"H": "\x1b[A", "P": "\x1b[B"}.get(msvcrt.getwch(), "")
        return ch

    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
        if ch == "\x1b" and sys.stdin.read(1) == "[":
            return "\x1b[" + sys.stdin.read(1)
        return ch
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def _decode(ch: str) -> Key:
    match ch:
        case "\r" | "\n":
            return "enter"
        case "\x1b[A" | "k":
            return "up"
        case "\x1b[B" | "j":
            return "down"
        case "q" | "Q" | "\x1b" | "\x03":
            return "cancel"
        case "y" | "Y":
            return "yes"
        case "n" | "N":
            return "no"
        case _:
            return "other"


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        text = text[: max(0, width - 3)] + "..."
    return text.ljust(width)


def _render(
    *, title: str, subtitle: str | None, options: list[SelectorOption[object]], index: int
) -> None:
    cols = max(60, min(120, shutil.get_terminal_size((100, 30)).columns))
    label_w = max(len(o.label) for o in options)
    detail_w = max(10, cols - label_w - 8)

    _clear()
    print(_paint(title, "1", "96"))
    if subtitle is not None:
        print(_paint(subtitle, "2", "37"))
    print()

    for i, opt in enumerate(options):
        line = f"{_fit(opt.label, label_w)}  {_fit(opt.detail or '', detail_w)}"
        if i == index:
            print(_paint(f" > {line}", "1", "30", "46"))
        else:
            print(f"   {_paint(_fit(opt.label, label_w), '97')}  {_paint(opt.detail or '', '2')}")

    print()
    print(_paint("Up/Down + Enter to choose, q to cancel", "2", "37"))
    sys.stdout.flush()


def select_one(
    *,
    title: str,
    options: list[SelectorOption[T]],
    subtitle: str | None = None,
    initial_index: int = 0,
) -> SelectorResult[T]:
    if not options:
        raise ValueError("selector requires at least one option")
    if not is_interactive_terminal():
        raise RuntimeError("interactive selector requires a TTY")

    idx = max(0, min(initial_index, len(options) - 1))
    plain: list[SelectorOption[object]] = [
        SelectorOption(value=o.value, label=o.label, detail=o.detail) for o in options
    ]

    while True:
        _render(title=title, subtitle=subtitle, options=plain, index=idx)
        match _decode(_read_char()):
            case "up":
                idx = (idx - 1) % len(options)
            case "down":
                idx = (idx + 1) % len(options)
            case "enter":
                return SelectorResult(action="select", value=options[idx].value, index=idx)
            case "cancel":
                return SelectorResult(action="cancel", value=None, index=idx)
            case _:
                pass


def confirm_yn(*, prompt: str) -> bool:
    if not is_interactive_terminal():
        raise RuntimeError("interactive confirmation requires a TTY")

    print()
    print(_paint(prompt, "1", "97") + " " + _paint("[y/n]", "2"))
    sys.stdout.flush()

    while True:
        match _decode(_read_char()):
            case "yes":
                print("y")
                return True
            case "no" | "cancel":
                print("n")
                return False
            case _:
                pass
