"""
espwatch Collectors
====================

Frame sources for espwatch.

Modules:
    pcap_reader     -- PCAP/PCAPNG wireless capture file reader
"""

from espwatch.collectors.pcap_reader import WirelessPCAPReader, read_frames

__all__ = [
    "WirelessPCAPReader",
    "read_frames",
]
