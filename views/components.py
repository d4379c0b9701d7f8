"""
Text Components

Terminal stand-ins for the feed's UI building blocks. Everything renders to a
plain string; colour is ANSI and can be switched off with ``USE_COLOR`` or
``--no-color``. Input components read through an injectable function so they
can be driven from tests.
"""

import re
import textwrap
from typing import Callable, List, Optional, Sequence

from config import settings

ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
COLORS = {
    "default": "\x1b[37;1m",
    "outline": "\x1b[37;2m",
    "success": "\x1b[32;1m",
    "warning": "\x1b[33;1m",
    "danger": "\x1b[31;1m",
    "info": "\x1b[34;1m",
    "primary": "\x1b[36;1m",
    "muted": "\x1b[30;1m",
}

BADGE_VARIANTS = ("default", "outline", "success", "warning", "danger", "info")
BUTTON_VARIANTS = ("primary", "outline", "danger", "muted")


def _color_enabled(use_color: Optional[bool]) -> bool:
    return settings.USE_COLOR if use_color is None else use_color


def paint(text: str, color: str, use_color: Optional[bool] = None) -> str:
    """Wrap text in the ANSI code for a named colour."""
    if not _color_enabled(use_color) or color not in COLORS:
        return text
    return f"{COLORS[color]}{text}{RESET}"


def bold(text: str, use_color: Optional[bool] = None) -> str:
    if not _color_enabled(use_color):
        return text
    return f"{BOLD}{text}{RESET}"


def visible_len(text: str) -> int:
    """Length of a string as shown on screen, ignoring ANSI codes."""
    return len(ANSI_PATTERN.sub("", text))


class Badge:
    """A short coloured label such as ``[LOST]`` or ``[URGENT]``."""

    def __init__(self, label: str, variant: str = "default"):
        if variant not in BADGE_VARIANTS:
            raise ValueError(f"Unknown badge variant: {variant}")
        self.label = label
        self.variant = variant

    def render(self, use_color: Optional[bool] = None) -> str:
        return paint(f"[{self.label}]", self.variant, use_color)

    def __str__(self):
        return self.render()


class Button:
    """A bracketed action label, e.g. ``< Delete >``."""

    def __init__(self, label: str, variant: str = "primary"):
        if variant not in BUTTON_VARIANTS:
            raise ValueError(f"Unknown button variant: {variant}")
        self.label = label
        self.variant = variant

    def render(self, use_color: Optional[bool] = None) -> str:
        return paint(f"< {self.label} >", self.variant, use_color)

    def __str__(self):
        return self.render()


class Card:
    """
    A boxed block of text with a title, body lines and an optional footer.

    Body lines wider than the card are wrapped; lines carrying colour codes
    are kept whole.
    """

    def __init__(self, title: str, body_lines: Optional[Sequence[str]] = None,
                 footer: Optional[str] = None, width: Optional[int] = None):
        self.title = title
        self.body_lines = list(body_lines or [])
        self.footer = footer
        self.width = width or settings.CARD_WIDTH

    def _row(self, text: str) -> str:
        inner = self.width - 4
        return f"| {text}{' ' * max(inner - visible_len(text), 0)} |"

    def _wrap(self, line: str) -> List[str]:
        inner = self.width - 4
        wrapped = []
        for part in line.splitlines() or [""]:
            if visible_len(part) <= inner or ANSI_PATTERN.search(part):
                wrapped.append(part)
            else:
                wrapped.extend(textwrap.wrap(part, inner) or [""])
        return wrapped

    def render(self, use_color: Optional[bool] = None) -> str:
        rule = "+" + "-" * (self.width - 2) + "+"
        lines = [rule]
        for title_line in self._wrap(self.title):
            lines.append(self._row(bold(title_line, use_color)))
        lines.append(rule)
        for body_line in self.body_lines:
            for wrapped in self._wrap(body_line):
                lines.append(self._row(wrapped))
        if self.footer:
            lines.append(rule)
            for footer_line in self._wrap(self.footer):
                lines.append(self._row(footer_line))
        lines.append(rule)
        return "\n".join(lines)

    def __str__(self):
        return self.render()


class Input:
    """Reads one line from the user."""

    def __init__(self, label: str, default: Optional[str] = None,
                 input_func: Callable[[str], str] = input):
        self.label = label
        self.default = default
        self.input_func = input_func

    def prompt(self) -> str:
        if self.default:
            return f"{self.label} [{self.default}]: "
        return f"{self.label}: "

    def read(self) -> str:
        value = self.input_func(self.prompt()).strip()
        return value or (self.default or "")


class Textarea:
    """Reads several lines from the user, stopping at the first blank line."""

    def __init__(self, label: str, input_func: Callable[[str], str] = input):
        self.label = label
        self.input_func = input_func

    def read(self) -> str:
        lines = []
        prompt = f"{self.label} (finish with an empty line): "
        while True:
            try:
                line = self.input_func(prompt)
            except EOFError:
                break
            if not line.strip():
                break
            lines.append(line.rstrip())
            prompt = "... "
        return "\n".join(lines)


class Navigation:
    """Header bar naming the app and the available commands."""

    def __init__(self, commands: Sequence[str], current: Optional[str] = None,
                 title: str = "Campus Feed"):
        self.commands = list(commands)
        self.current = current
        self.title = title

    def render(self, use_color: Optional[bool] = None) -> str:
        tabs = []
        for command in self.commands:
            if command == self.current:
                tabs.append(paint(f"[{command}]", "primary", use_color))
            else:
                tabs.append(command)
        header = f"{bold(self.title, use_color)} | " + "  ".join(tabs)
        return header + "\n" + "=" * max(visible_len(header), 1)

    def __str__(self):
        return self.render()
