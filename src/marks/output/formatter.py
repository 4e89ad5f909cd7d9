"""
Result formatter for Marks.

Renders a SearchResult as a single line:

    path[:line]:header1/header2:content

The score is only used for ordering and is never printed.
"""

from typing import Iterable, List, Optional

from ..models.config import OutputConfig
from ..models.search_results import SearchResult


MAGENTA = "\033[35m"
GREEN = "\033[32m"
BLUE = "\033[34m"
WHITE = "\033[37m"
RESET = "\033[0m"


class ResultFormatter:
    """Formats search results for terminal output."""

    def __init__(self, config: Optional[OutputConfig] = None):
        """
        Initialize the formatter.

        Args:
            config: Output configuration
        """
        self.config = config or OutputConfig()

    def _paint(self, text: str, color: str) -> str:
        if not self.config.color or not text:
            return text
        return f"{color}{text}{RESET}"

    def format(self, result: SearchResult) -> str:
        """
        Format a single result.

        Args:
            result: The result to format

        Returns:
            The formatted line, without a trailing newline
        """
        colon = self._paint(":", WHITE)
        parts = [self._paint(result.file_path, MAGENTA)]

        if self.config.show_line_numbers:
            path_separator = "\0" if self.config.null_separator else colon
            parts.append(path_separator + self._paint(str(result.line_number), GREEN))

        if self.config.show_headers and result.header_chain:
            separator = self._paint(self.config.header_separator, WHITE)
            headers = separator.join(self._paint(header, BLUE) for header in result.header_chain)
            parts.append(colon + headers)

        parts.append(colon + result.content)
        return "".join(parts)

    def format_all(self, results: Iterable[SearchResult]) -> List[str]:
        """
        Format results, honouring the configured count.

        Args:
            results: Results, already sorted

        Returns:
            Formatted lines
        """
        lines = []
        for result in results:
            if self.config.count is not None and len(lines) >= self.config.count:
                break
            lines.append(self.format(result))
        return lines
