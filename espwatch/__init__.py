"""
espwatch -- Vendor Device Detector for 802.11 Captures
========================================================

espwatch reads a previously captured wireless trace (PCAP or PCAPNG),
extracts the MAC header addresses of every 802.11 frame, and reports the
unique devices whose address carries a known vendor prefix. The embedded
prefix table lists the IEEE OUI assignments of Espressif Systems.

Modules:
    core.prefixes   -- Vendor prefix table and prefix matching
    core.scanner    -- Address matching and device deduplication
    core.engine     -- Central orchestration engine
    core.models     -- Pydantic domain models
    collectors      -- PCAP/PCAPNG frame source
    output          -- Console output
    cli             -- Click-based command-line interface

References:
    - IEEE. (2020). IEEE Std 802.11-2020: Wireless LAN MAC and PHY
      Specifications.
    - IEEE Registration Authority. MA-L Public Listing.
"""

__version__ = "1.0.0"
__tool__ = "espwatch"
__description__ = "Vendor device detector for 802.11 captures"
