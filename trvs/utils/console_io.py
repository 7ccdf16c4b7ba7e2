"""
Console IO - Colored printing and interactive prompts for the terminal
"""

import os
import sys
from enum import Enum
from typing import List, Optional

COLORS = {
    "red": "\033[91m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "cyan": "\033[36m",
    "white": "\033[97m",
    "gray": "\033[37m",
}
RESET = "\033[0m"

PRINT_WIDTH = 80

STD_OUTPUT_HANDLE = -11
ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004


class DefaultOption(Enum):
    """Default answer used by yes/no prompts when the user enters nothing."""

    NONE = "none"
    YES = "yes"
    NO = "no"


def _read_key_windows() -> str:
    import msvcrt

    key = msvcrt.getwch()
    # getwch reads CTRL + C as a plain character
    if key == "\x03":
        raise KeyboardInterrupt
    return key


def _enable_windows_ansi() -> None:
    import ctypes

    kernel32 = ctypes.windll.kernel32
    handle = kernel32.GetStdHandle(STD_OUTPUT_HANDLE)
    mode = ctypes.c_ulong()
    if kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
        kernel32.SetConsoleMode(handle, mode.value | ENABLE_VIRTUAL_TERMINAL_PROCESSING)


def _set_windows_title(title: str) -> None:
    import ctypes

    ctypes.windll.kernel32.SetConsoleTitleW(title)


def _read_key_posix(stream) -> str:
    import termios
    import tty

    fd = stream.fileno()
    old_attrs = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        key = stream.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_attrs)
    # Raw mode swallows CTRL + C, so hand it back as an interrupt
    if key == "\x03":
        raise KeyboardInterrupt
    return key


def center_text(text: str, edge: str = "", width: int = PRINT_WIDTH) -> str:
    """
    Returns `text` centered over `width` with `edge` on each side.
    If `text` is too wide, it is returned with only a space between it and the edges.
    """
    inner_width = width - 2 * len(edge)
    if inner_width < len(text):
        return f"{edge} {text} {edge}"
    return f"{edge}{text.center(inner_width)}{edge}"


class ConsoleIO:
    """
    Terminal input/output used by every interactive part of the program.

    Streams and the key reader are injectable so prompts can be scripted.
    """

    def __init__(self, stdin=None, stdout=None, use_color: Optional[bool] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        if use_color is None:
            use_color = hasattr(self.stdout, "isatty") and self.stdout.isatty()
        self.use_color = use_color
        if use_color and os.name == "nt":
            _enable_windows_ansi()

    # --- Output ---

    def print_line(self, text: str = "") -> None:
        self.stdout.write(f"{text}\n")
        self.stdout.flush()

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def print_with_color(self, text: str, color: str) -> None:
        """Writes a line in a given color, then resets the color."""
        if self.use_color and color in COLORS:
            self.print_line(f"{COLORS[color]}{text}{RESET}")
        else:
            self.print_line(text)

    def print_centered(self, text: str, color: str = "gray", width: int = PRINT_WIDTH) -> None:
        """Prints a one-line banner, or the text as-is if it is too wide."""
        self.print_with_color(text if len(text) > width else center_text(text, width=width), color)

    def print_header(self, title: str, subtitle: str = "", color: str = "gray", width: int = PRINT_WIDTH) -> None:
        """Pretty-prints a boxed header `width` characters wide."""
        border = "═" * (width - 2)
        self.print_with_color(f"╔{border}╗", color)
        self.print_with_color(center_text(title, "║", width), color)
        if subtitle:
            self.print_with_color(center_text(subtitle, "║", width), color)
        self.print_with_color(f"╚{border}╝", color)

    def set_title(self, title: str) -> None:
        if not (hasattr(self.stdout, "isatty") and self.stdout.isatty()):
            return
        if os.name == "nt":
            _set_windows_title(title)
        else:
            self.write(f"\033]0;{title}\007")

    # --- Input ---

    def read_line(self) -> str:
        line = self.stdin.readline()
        if line == "":
            raise EOFError("Input stream closed")
        return line.rstrip("\r\n")

    def read_key(self) -> str:
        """Blocks until a single key is pressed."""
        if hasattr(self.stdin, "isatty") and self.stdin.isatty():
            if os.name == "nt":
                return _read_key_windows()
            return _read_key_posix(self.stdin)
        # Not a terminal; a full line is the closest thing to a key press
        return self.read_line()[:1]

    def wait_for_key(self, message: str = "Press any key to continue...") -> None:
        if message:
            self.print_line(message)
        self.read_key()

    def prompt_yes_no(self, prompt_text: str = "", default: DefaultOption = DefaultOption.NONE) -> bool:
        """
        Gives a yes/no prompt and evaluates the user's response.

        Empty input returns `default` when one is set, otherwise the prompt repeats.
        Unrecognized input always repeats the prompt.

        Returns:
            True for yes/y, False for no/n
        """
        if not prompt_text:
            suffix = {
                DefaultOption.YES: "[Y/n]",
                DefaultOption.NO: "[y/N]",
            }.get(default, "[y/n]")
            prompt_text = f"Yes or no? {suffix}: "

        while True:
            self.write(prompt_text)
            answer = self.read_line().strip().lower()
            self.print_line()

            if not answer:
                if default is DefaultOption.YES:
                    return True
                if default is DefaultOption.NO:
                    return False
                continue

            if answer in ("yes", "y"):
                return True
            if answer in ("no", "n"):
                return False

    def prompt_choice(self, options: List[str], prompt_text: str = "Enter a number: ") -> int:
        """
        Prints a numbered menu of `options` and returns the zero-based index the user picked.
        """
        if not options:
            raise ValueError("No options to choose from")

        for number, option in enumerate(options, start=1):
            self.print_line(f"  {number}: {option}")

        while True:
            self.write(prompt_text)
            answer = self.read_line().strip()
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                self.print_line()
                return int(answer) - 1
            self.print_line(f"Please enter a number from 1 to {len(options)}.")
