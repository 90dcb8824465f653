"""
espwatch Core
==============

Prefix table, device scanner, engine and domain models.
"""

from espwatch.core.exceptions import CaptureOpenError, EspwatchError, PrefixTableError
from espwatch.core.models import (
    FrameRecord,
    ScanResult,
    ScanStats,
    VendorPrefix,
    WirelessAddresses,
    format_mac,
)
from espwatch.core.prefixes import (
    ESPRESSIF_PREFIX_DATA,
    PrefixTable,
    default_prefix_table,
    load_prefix_table,
)
from espwatch.core.scanner import DeviceScanner, MatchSet, scan

__all__ = [
    "CaptureOpenError",
    "EspwatchError",
    "PrefixTableError",
    "FrameRecord",
    "ScanResult",
    "ScanStats",
    "VendorPrefix",
    "WirelessAddresses",
    "format_mac",
    "ESPRESSIF_PREFIX_DATA",
    "PrefixTable",
    "default_prefix_table",
    "load_prefix_table",
    "DeviceScanner",
    "MatchSet",
    "scan",
]
