"""
espwatch Console Output
========================

Rich-based console output for espwatch. Renders the tool banner, the
vendor prefix listing, scan statistics and the unique-device report.

References:
    - Rich library: https://github.com/Textualize/rich
    - espwatch Console: shared.console.WatchConsole
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from rich.align import Align
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import WatchConsole

from espwatch.core.models import FrameRecord, ScanStats, parse_mac
from espwatch.core.prefixes import PrefixTable


def _format_timestamp(timestamp: Optional[float]) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(
        "%Y-%m-%d %H:%M:%S"
    )


def _truncate(text: str, width: int) -> str:
    if width <= 0 or len(text) <= width:
        return text
    return text[: max(width - 3, 0)] + "..."


class EspwatchConsoleOutput:
    """Console renderer for espwatch results.

    Usage::

        output = EspwatchConsoleOutput(console)
        output.display_banner()
        output.display_devices(matches, table)
    """

    def __init__(self, console: Optional[WatchConsole] = None) -> None:
        self._console = console or WatchConsole()

    def display_banner(self, vendor_name: str = "Espressif") -> None:
        """Display the espwatch tool banner."""
        banner_text = (
            "[bright_cyan]espwatch[/bright_cyan]\n"
            f"[bright_magenta]{vendor_name} device detector "
            "for 802.11 captures[/bright_magenta]"
        )
        panel = Panel(
            Align.center(Text.from_markup(banner_text)),
            border_style="bright_cyan",
            padding=(0, 2),
        )
        self._console.print(panel)

    def display_prefixes(self, table: PrefixTable, vendor_name: str = "Espressif") -> None:
        """List every prefix in the table, in table order."""
        self._console.section(f"{vendor_name} Prefixes")
        self._console.table(
            title=f"{len(table)} vendor prefixes",
            columns=["#", "Hex", "Display"],
            rows=[
                (idx, prefix.hex, prefix.display)
                for idx, prefix in enumerate(table, start=1)
            ],
            styles=["dim", "bright_white", ""],
        )

    def display_stats(self, stats: ScanStats) -> None:
        """Display frame counters from a scan."""
        summary_table = Table(
            title="Scan Summary",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 2),
        )
        summary_table.add_column("Metric", style="bold")
        summary_table.add_column("Value", style="bright_white", justify="right")

        summary_table.add_row("Frames read", str(stats.frames))
        summary_table.add_row("  Decode errors", str(stats.decode_errors))
        summary_table.add_row("  Non-802.11 frames", str(stats.non_wireless))
        summary_table.add_row("Address matches", str(stats.match_events))
        summary_table.add_row("Unique devices", str(stats.unique_devices))

        self._console.rich.print(summary_table)
        self._console.blank()

    def display_devices(
        self,
        matches: dict[str, FrameRecord],
        table: PrefixTable,
        *,
        vendor_name: str = "Espressif",
        show_frames: bool = True,
        summary_width: int = 80,
    ) -> None:
        """Display the unique matched devices.

        Args:
            matches: Match set from the scanner.
            table: Prefix table, used to show which prefix matched.
            vendor_name: Vendor label for titles.
            show_frames: Include the frame summary column.
            summary_width: Truncate frame summaries to this many characters.
        """
        self._console.section(f"Unique {vendor_name} Devices")

        if not matches:
            self._console.info(f"No {vendor_name} devices found.")
            return

        device_table = Table(
            title=f"{len(matches)} unique device(s)",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        device_table.add_column("MAC Address", style="bright_white", no_wrap=True)
        device_table.add_column("Prefix", no_wrap=True)
        device_table.add_column("Frame", justify="right")
        device_table.add_column("Captured", no_wrap=True)
        if show_frames:
            device_table.add_column("Packet")

        # Sorted for readability only; the match set itself is unordered.
        for mac in sorted(matches):
            frame = matches[mac]
            prefix = table.match(parse_mac(mac))
            row: list[str | Text] = [
                mac,
                prefix.display if prefix is not None else "-",
                str(frame.index),
                _format_timestamp(frame.timestamp),
            ]
            if show_frames:
                row.append(Text(_truncate(str(frame), summary_width)))
            device_table.add_row(*row)

        self._console.rich.print(device_table)
        self._console.blank()
        self._console.success(f"Found {len(matches)} unique {vendor_name} device(s)")
