"""
Console output and status display for gitup.
"""
import sys
from typing import Optional, TextIO

from colorama import Fore, Style


class Console:
    """
    Formats status lines, optionally colorized.

    Holds no state beyond the color flag and the target streams. Errors go
    to the error stream, everything else to the output stream. When the
    streams are not given, sys.stdout and sys.stderr are looked up on every
    write so redirection after construction is honoured.
    """

    SECTION = Fore.BLUE
    SUCCESS = Fore.GREEN
    ERROR = Fore.RED
    WARNING = Style.BRIGHT + Fore.YELLOW
    INFO = Fore.CYAN

    def __init__(self, color: bool = True, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.color = color
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def paint(self, text: str, code: str) -> str:
        """Wrap text in an ANSI code when color is enabled."""
        if not self.color:
            return text
        return f"{code}{text}{Style.RESET_ALL}"

    def _line(self, glyph: str, text: str, code: str, indent: int, stream: TextIO):
        prefix = "  " * indent
        print(self.paint(f"{prefix}{glyph} {text}", code), file=stream)

    def section(self, text: str):
        """Print a section header."""
        print(f"\n{self.paint(f'==== {text} ====', self.SECTION)}\n", file=self.out)

    def success(self, text: str, indent: int = 0):
        self._line("✓", text, self.SUCCESS, indent, self.out)

    def error(self, text: str, indent: int = 0):
        self._line("✗", text, self.ERROR, indent, self.err)

    def warning(self, text: str, indent: int = 0):
        self._line("⚠", text, self.WARNING, indent, self.out)

    def info(self, text: str, indent: int = 0):
        self._line("ℹ", text, self.INFO, indent, self.out)
