"""
Line cursor with one line of lookahead.
"""

from typing import Iterable, Iterator, Optional


class LineCursor:
    """
    Sequential reader over the lines of a document.

    The cursor holds the current line and at most one buffered lookahead line.
    Line numbers are 1-based; `line_number` is 0 before the first advance.
    Trailing newline characters are stripped from every line.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines: Iterator[str] = iter(lines)
        self._held: Optional[str] = None
        self._has_held = False
        self.current: Optional[str] = None
        self.line_number = 0

    def advance(self) -> bool:
        """
        Move to the next line.

        Returns:
            False when the source is exhausted, True otherwise
        """
        if self._has_held:
            line = self._held
            self._held = None
            self._has_held = False
        else:
            line = next(self._lines, None)
            if line is None:
                self.current = None
                return False
            line = line.rstrip('\r\n')

        self.current = line
        self.line_number += 1
        return True

    def peek(self) -> Optional[str]:
        """Get the next line without consuming it, None at the end of input."""
        if not self._has_held:
            line = next(self._lines, None)
            if line is None:
                return None
            self._held = line.rstrip('\r\n')
            self._has_held = True
        return self._held
