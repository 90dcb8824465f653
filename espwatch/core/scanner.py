"""
espwatch Device Scanner
========================

Walks a sequence of frame records, tests every address field against a
:class:`~espwatch.core.prefixes.PrefixTable`, and accumulates the set of
unique matching devices.

The match set maps the canonical address string to the frame the address
was matched in. A repeated address replaces the stored frame, so the
report shows the most recent sighting of each device.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from espwatch.core.models import FrameRecord, ScanStats, format_mac
from espwatch.core.prefixes import PrefixTable

# Canonical address string -> frame of the latest sighting.
MatchSet = dict[str, FrameRecord]

# Invoked once per positive match with (address string, frame).
MatchObserver = Callable[[str, FrameRecord], None]


class DeviceScanner:
    """Match frame addresses against a vendor prefix table.

    Frames flagged with a decode error and frames without an 802.11
    address header are skipped and counted, never raised.

    Usage::

        scanner = DeviceScanner(table, on_match=lambda mac, frame: ...)
        matches = scanner.scan(frames)
        print(scanner.stats.unique_devices)
    """

    def __init__(
        self,
        table: PrefixTable,
        on_match: Optional[MatchObserver] = None,
    ) -> None:
        self._table = table
        self._on_match = on_match
        self._stats = ScanStats()

    @property
    def table(self) -> PrefixTable:
        return self._table

    @property
    def stats(self) -> ScanStats:
        """Counters from the most recent :meth:`scan` call."""
        return self._stats

    def scan(self, frames: Iterable[FrameRecord]) -> MatchSet:
        """Consume *frames* once, front to back, and return the match set.

        Args:
            frames: Any iterable of frame records; may be a lazy generator.

        Returns:
            Mapping of canonical address string to the last frame the
            address was matched in.
        """
        self._stats = ScanStats()
        found: MatchSet = {}

        for frame in frames:
            self._stats.frames += 1

            if frame.decode_error:
                self._stats.decode_errors += 1
                continue
            if frame.addresses is None:
                self._stats.non_wireless += 1
                continue

            for address in frame.addresses.present():
                if not self._table.matches(address):
                    continue
                mac = format_mac(address)
                found[mac] = frame
                self._stats.match_events += 1
                if self._on_match is not None:
                    self._on_match(mac, frame)

        self._stats.unique_devices = len(found)
        return found


def scan(
    frames: Iterable[FrameRecord],
    table: PrefixTable,
    on_match: Optional[MatchObserver] = None,
) -> MatchSet:
    """Functional form of :meth:`DeviceScanner.scan`."""
    return DeviceScanner(table, on_match=on_match).scan(frames)
