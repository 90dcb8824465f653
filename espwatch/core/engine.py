"""
espwatch Engine
================

Central orchestration for espwatch. Wires the prefix table, the capture
frame source, the device scanner and the console report together.

The engine follows a pipeline architecture:
    1. Reference data: Build and validate the vendor prefix table
    2. Collection: Open the capture and read frames lazily
    3. Matching: Test every address field against the prefix table
    4. Output: Log and display the unique matched devices

Everything runs synchronously in one thread; the only blocking point is
reading the next frame from the capture file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from shared.config import WatchConfig
from shared.console import WatchConsole
from shared.logger import WatchLogger

from espwatch.collectors.pcap_reader import WirelessPCAPReader
from espwatch.core.models import FrameRecord, ScanResult
from espwatch.core.prefixes import PrefixTable, default_prefix_table
from espwatch.core.scanner import DeviceScanner
from espwatch.output.console import EspwatchConsoleOutput

logger = WatchLogger("espwatch.core.engine")


class EspwatchEngine:
    """Run a vendor device scan over a capture trace.

    Usage::

        engine = EspwatchEngine()
        result = engine.scan_capture("capture.pcap")
        print(result.device_count)
    """

    def __init__(
        self,
        config: Optional[WatchConfig] = None,
        console: Optional[WatchConsole] = None,
        table: Optional[PrefixTable] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: espwatch configuration. Uses defaults if None.
            console: WatchConsole for output. Creates new if None.
            table: Prefix table to match against. The embedded Espressif
                table is built on first use if None.
        """
        self._config = config or WatchConfig()
        self._console = console or WatchConsole(color=self._config.global_settings.color)
        self._output = EspwatchConsoleOutput(self._console)
        self._table = table

    @property
    def vendor_name(self) -> str:
        return self._config.scan.vendor_name

    @property
    def table(self) -> PrefixTable:
        """The prefix table, built from the embedded data on first access.

        Raises:
            PrefixTableError: If the embedded reference data is malformed.
        """
        if self._table is None:
            self._table = default_prefix_table()
        return self._table

    # ------------------------------------------------------------------ #
    #  Operations
    # ------------------------------------------------------------------ #

    def list_prefixes(self) -> PrefixTable:
        """Display the vendor prefix table and return it."""
        table = self.table
        self._output.display_prefixes(table, self.vendor_name)
        return table

    def scan_capture(self, file_path: Union[str, Path]) -> ScanResult:
        """Scan a capture trace for devices of the configured vendor.

        Args:
            file_path: Path to a PCAP or PCAPNG file.

        Returns:
            ScanResult with the unique matched devices and frame counters.

        Raises:
            PrefixTableError: If the embedded reference data is malformed.
            CaptureOpenError: If the capture cannot be opened.
        """
        filename = str(file_path)
        table = self.table

        logger.info(
            "Checking for %s prefixes",
            self.vendor_name.lower(),
            filename=filename,
            prefix_count=len(table),
        )

        self._output.display_banner(self.vendor_name)

        scanner = DeviceScanner(table, on_match=self._log_match)
        # Open before timing starts: a capture that fails to open is not timed.
        with WirelessPCAPReader(filename) as frames:
            with logger.operation("scan"), logger.timed(f"scan of {filename}"):
                matches = scanner.scan(frames)

        result = ScanResult(
            filename=filename,
            prefix_count=len(table),
            matches=matches,
            stats=scanner.stats,
        )
        self.report(result)
        return result

    def report(self, result: ScanResult) -> None:
        """Log and display every unique matched device."""
        logger.info("Found unique devices", device_count=result.device_count)
        for mac, frame in result.matches.items():
            logger.info("Found unique device", mac=mac, packet=str(frame))

        scan_config = self._config.scan
        self._output.display_stats(result.stats)
        if result.stats.decode_errors:
            self._console.warning(
                f"{result.stats.decode_errors} frame(s) could not be decoded and were skipped"
            )
        self._output.display_devices(
            result.matches,
            self.table,
            vendor_name=self.vendor_name,
            show_frames=scan_config.show_frames,
            summary_width=scan_config.summary_width,
        )

    # ------------------------------------------------------------------ #
    #  Match hook
    # ------------------------------------------------------------------ #

    def _log_match(self, mac: str, frame: FrameRecord) -> None:
        logger.info(
            "Found %s device",
            self.vendor_name.lower(),
            found_mac=mac,
            frame=frame.index,
            packet=str(frame),
        )
