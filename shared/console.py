"""
espwatch Console Interface
===========================

Rich-powered console abstraction providing a unified presentation layer
for espwatch: section headers, severity-coloured messages and tables
with consistent styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme -- consistent palette across all espwatch output
# ---------------------------------------------------------------------------
_WATCH_THEME = Theme(
    {
        "watch.banner": "bold bright_cyan",
        "watch.section": "bold bright_magenta",
        "watch.success": "bold green",
        "watch.warning": "bold yellow",
        "watch.error": "bold red",
        "watch.info": "bold bright_blue",
        "watch.dim": "dim white",
        "watch.highlight": "bold bright_white",
    }
)


class WatchConsole:
    """Unified console interface for espwatch output.

    Usage::

        con = WatchConsole()
        con.section("Unique Devices")
        con.success("Scan complete")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        color: bool = True,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording for text export.
            color:  Disable to emit plain, uncoloured text.
            width:  Fixed console width; auto-detected when ``None``.
        """
        self._console = Console(
            theme=_WATCH_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
            no_color=not color,
            width=width,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(
            f"  {title}  ",
            style="watch.section",
            characters="─",
        )
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def _tagged(self, style: str, tag: str, message: str) -> None:
        self._console.print(f"[{style}]{tag}[/{style}] {escape(message)}")

    def success(self, message: str) -> None:
        self._tagged("watch.success", "[✔] SUCCESS:", message)

    def warning(self, message: str) -> None:
        self._tagged("watch.warning", "[⚠] WARNING:", message)

    def error(self, message: str) -> None:
        self._tagged("watch.error", "[✘] ERROR:", message)

    def info(self, message: str) -> None:
        self._tagged("watch.info", "[ℹ] INFO:", message)

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
