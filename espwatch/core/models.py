"""
espwatch Core Data Models
==========================

Pydantic-based domain models for the espwatch vendor device detector.
These models represent vendor address prefixes, the four-address 802.11
header payload, captured frame records, and scan statistics.

Address fields follow the IEEE 802.11-2020 MAC header layout, where up
to four 48-bit addresses (receiver, transmitter, BSSID / destination,
source) are carried depending on frame type and the To DS / From DS
flags.

References:
    - IEEE. (2020). IEEE Std 802.11-2020: Wireless LAN Medium Access Control
      (MAC) and Physical Layer (PHY) Specifications. Section 9.2.4.
    - IEEE. (2014). IEEE Std 802-2014. Section 8.2: Universal addresses.
    - Pydantic v2 Documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Width of the organisationally unique identifier portion of a MAC address.
OUI_LENGTH: int = 3

# Width of an IEEE 802 MAC-48 address.
MAC_LENGTH: int = 6


# ---------------------------------------------------------------------------
# Address helpers
# ---------------------------------------------------------------------------


def format_mac(raw: bytes) -> str:
    """Format raw address bytes as a lower-case colon-separated string.

    This is the canonical key form used by the match set.

    Args:
        raw: Address bytes (usually 6).

    Returns:
        Address in "xx:xx:xx:xx:xx:xx" format; empty string for empty input.
    """
    return ":".join(f"{b:02x}" for b in raw)


def parse_mac(text: str) -> bytes:
    """Parse a colon- or dash-separated MAC string into raw bytes.

    The empty string parses to empty bytes, mirroring :func:`format_mac`.

    Raises:
        ValueError: If any octet is not a two-digit hex number.
    """
    if not text:
        return b""
    octets = text.replace("-", ":").split(":")
    if any(len(octet) != 2 for octet in octets):
        raise ValueError(f"Invalid MAC address: {text!r}")
    return bytes(int(octet, 16) for octet in octets)


# ---------------------------------------------------------------------------
# Vendor Prefix
# ---------------------------------------------------------------------------


class VendorPrefix(BaseModel):
    """A vendor address prefix (OUI) loaded from the reference table.

    Attributes:
        raw: The most-significant address bytes (0-3 bytes).
        display: Human-readable form from the source row (e.g. "78-21-84").
    """

    model_config = ConfigDict(frozen=True)

    raw: bytes
    display: str = ""

    def __len__(self) -> int:
        return len(self.raw)

    def is_prefix_of(self, address: bytes) -> bool:
        """Return True if *address* starts with this prefix.

        An address shorter than the prefix never matches.
        """
        if len(self.raw) > len(address):
            return False
        for i, octet in enumerate(self.raw):
            if address[i] != octet:
                return False
        return True

    @property
    def hex(self) -> str:
        """Upper-case hex string as written in the reference table."""
        return self.raw.hex().upper()


# ---------------------------------------------------------------------------
# Wireless addresses (four-address header payload)
# ---------------------------------------------------------------------------


class WirelessAddresses(BaseModel):
    """The four address fields of an 802.11 MAC header.

    Fields that the frame type does not carry are ``None``. Addresses
    are raw bytes; see :func:`format_mac` for the string form.

    Reference:
        IEEE. (2020). IEEE Std 802.11-2020. Table 9-26: Address field
        contents.
    """

    model_config = ConfigDict(frozen=True)

    addr1: Optional[bytes] = None
    addr2: Optional[bytes] = None
    addr3: Optional[bytes] = None
    addr4: Optional[bytes] = None

    def present(self) -> Iterator[bytes]:
        """Yield the address fields that are present, in header order."""
        for address in (self.addr1, self.addr2, self.addr3, self.addr4):
            if address is not None:
                yield address


# ---------------------------------------------------------------------------
# Frame Record
# ---------------------------------------------------------------------------


class FrameRecord(BaseModel):
    """One frame read from a capture trace.

    Attributes:
        index: 1-based position of the frame in the trace.
        timestamp: Capture time in epoch seconds, when known.
        decode_error: True when lower-layer dissection failed.
        addresses: Four-address payload; ``None`` for non-802.11 frames.
        summary: One-line description of the frame for reporting.
        packet: The underlying packet object (opaque, never serialised).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int = 0
    timestamp: Optional[float] = None
    decode_error: bool = False
    addresses: Optional[WirelessAddresses] = None
    summary: str = ""
    packet: Any = Field(default=None, exclude=True, repr=False)

    def __str__(self) -> str:
        return self.summary or f"frame #{self.index}"


# ---------------------------------------------------------------------------
# Scan statistics
# ---------------------------------------------------------------------------


class ScanStats(BaseModel):
    """Counters collected while scanning a frame sequence.

    Attributes:
        frames: Total frames consumed.
        decode_errors: Frames skipped because dissection failed.
        non_wireless: Frames skipped for lacking an 802.11 header.
        match_events: Positive address matches (including repeats).
        unique_devices: Distinct matched addresses.
    """

    frames: int = 0
    decode_errors: int = 0
    non_wireless: int = 0
    match_events: int = 0
    unique_devices: int = 0

    @property
    def skipped(self) -> int:
        return self.decode_errors + self.non_wireless


# ---------------------------------------------------------------------------
# Scan result
# ---------------------------------------------------------------------------


class ScanResult(BaseModel):
    """Outcome of scanning one capture file.

    Attributes:
        filename: Path of the capture trace.
        prefix_count: Number of vendor prefixes checked.
        matches: Canonical address string -> frame of its latest sighting.
        stats: Frame counters.
    """

    filename: str
    prefix_count: int = 0
    matches: dict[str, FrameRecord] = Field(default_factory=dict)
    stats: ScanStats = Field(default_factory=ScanStats)

    @property
    def device_count(self) -> int:
        return len(self.matches)
