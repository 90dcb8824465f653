"""
espwatch Wireless PCAP Reader
==============================

Reads PCAP and PCAPNG capture files containing 802.11 wireless frames
and turns each captured packet into a :class:`FrameRecord` carrying the
four MAC header address fields.

Frames are read lazily, one at a time, through Scapy's ``PcapReader``
which handles both standard PCAP (libpcap) and PCAPNG files and selects
the link-layer dissector (RadioTap, raw 802.11, PPI, Prism) from the
file's data link type.

Dissection runs with Scapy's ``debug_dissector`` switched on so that a
malformed frame raises instead of silently degrading to a ``Raw`` layer.
Such frames are yielded with ``decode_error`` set.

References:
    - Wireshark Foundation. (2024). Libpcap File Format.
      https://wiki.wireshark.org/Development/LibpcapFileFormat
    - Tuexen, M., et al. (2020). PCAP Next Generation (pcapng) Capture
      File Format. RFC draft-tuexen-opsawg-pcapng.
    - IEEE. (2020). IEEE Std 802.11-2020. Section 9.2.3: General frame
      format.
    - Biondi, P. (2024). Scapy Documentation.
      https://scapy.readthedocs.io/
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterator, Optional, Union

from shared.logger import WatchLogger

from espwatch.core.exceptions import CaptureOpenError
from espwatch.core.models import FrameRecord, WirelessAddresses

logger = WatchLogger("espwatch.collectors.pcap_reader")

_ADDRESS_FIELDS = ("addr1", "addr2", "addr3", "addr4")


@contextmanager
def _strict_dissection() -> Generator[None, None, None]:
    """Make Scapy raise on dissector failures for the duration of the block.

    Scapy also reports each failure on its ``scapy.runtime`` logger; that
    logger is muted here because the reader logs skipped frames itself at
    DEBUG.
    """
    from scapy.all import conf  # type: ignore[import-untyped]

    runtime_log = logging.getLogger("scapy.runtime")
    previous_debug = conf.debug_dissector
    previous_level = runtime_log.level
    conf.debug_dissector = True
    runtime_log.setLevel(logging.CRITICAL)
    try:
        yield
    finally:
        conf.debug_dissector = previous_debug
        runtime_log.setLevel(previous_level)


def extract_addresses(packet: Any) -> Optional[WirelessAddresses]:
    """Pull the addr1..addr4 fields out of a packet's 802.11 layer.

    Args:
        packet: Scapy packet.

    Returns:
        The address payload, or None if the packet has no 802.11 layer.
    """
    from scapy.all import Dot11  # type: ignore[import-untyped]
    from scapy.fields import ConditionalField  # type: ignore[import-untyped]
    from scapy.utils import mac2str  # type: ignore[import-untyped]

    if not packet.haslayer(Dot11):
        return None

    dot11 = packet.getlayer(Dot11)
    fields: dict[str, Optional[bytes]] = {}
    for fld in dot11.fields_desc:
        if fld.name not in _ADDRESS_FIELDS:
            continue
        # Frame type and DS bits decide which address fields the header carries.
        if isinstance(fld, ConditionalField) and not fld._evalcond(dot11):
            fields[fld.name] = None
            continue
        value = dot11.getfieldval(fld.name)
        fields[fld.name] = mac2str(value) if value else None
    return WirelessAddresses(**fields)


def frame_from_packet(packet: Any, index: int) -> FrameRecord:
    """Build a :class:`FrameRecord` from a dissected Scapy packet."""
    timestamp = getattr(packet, "time", None)
    return FrameRecord(
        index=index,
        timestamp=float(timestamp) if timestamp is not None else None,
        addresses=extract_addresses(packet),
        summary=packet.summary(),
        packet=packet,
    )


class WirelessPCAPReader:
    """Lazy frame source over a PCAP/PCAPNG file.

    The reader owns the file handle; use it as a context manager so the
    handle is released when iteration ends.

    Supports:
        - Standard PCAP files (magic: 0xA1B2C3D4 / 0xD4C3B2A1, ns variants)
        - PCAPNG files (magic: 0x0A0D0D0A)
        - RadioTap (DLT 127), raw IEEE 802.11 (DLT 105), PPI and Prism
          link-layer headers

    Usage::

        with WirelessPCAPReader("capture.pcap") as frames:
            for frame in frames:
                ...
    """

    def __init__(self, file_path: Union[str, Path]) -> None:
        self._path = Path(file_path)
        self._reader: Any = None
        self._frames_read = 0
        self._decode_errors = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def frames_read(self) -> int:
        return self._frames_read

    @property
    def decode_errors(self) -> int:
        return self._decode_errors

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #

    def open(self) -> WirelessPCAPReader:
        """Open the capture file.

        Raises:
            CaptureOpenError: If the file does not exist, is empty, or is
                not a capture format Scapy recognises.
        """
        from scapy.all import PcapReader  # type: ignore[import-untyped]
        from scapy.error import Scapy_Exception  # type: ignore[import-untyped]

        if not self._path.is_file():
            raise CaptureOpenError(f"PCAP file not found: {self._path}")

        file_size = self._path.stat().st_size
        if file_size == 0:
            raise CaptureOpenError(f"Empty file: {self._path}")

        try:
            self._reader = PcapReader(str(self._path))
        except (Scapy_Exception, OSError, EOFError) as exc:
            raise CaptureOpenError(
                f"Cannot read capture file {self._path}: {exc}"
            ) from exc

        logger.info(
            "Reading PCAP file",
            filename=str(self._path),
            size_bytes=file_size,
        )
        return self

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def __enter__(self) -> WirelessPCAPReader:
        return self.open()

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    #  Iteration
    # ------------------------------------------------------------------ #

    def __iter__(self) -> Iterator[FrameRecord]:
        if self._reader is None:
            raise RuntimeError("WirelessPCAPReader is not open")

        self._frames_read = 0
        self._decode_errors = 0

        while True:
            index = self._frames_read + 1
            try:
                with _strict_dissection():
                    packet = self._reader.read_packet()
            except EOFError:
                break
            except Exception as exc:
                self._frames_read = index
                self._decode_errors += 1
                logger.debug(
                    "Frame failed to decode",
                    frame=index,
                    error=str(exc),
                )
                yield FrameRecord(
                    index=index,
                    decode_error=True,
                    summary=f"undecodable frame #{index}",
                )
                continue

            self._frames_read = index
            yield frame_from_packet(packet, index)

        logger.debug(
            "Capture exhausted",
            frames=self._frames_read,
            decode_errors=self._decode_errors,
        )


def read_frames(file_path: Union[str, Path]) -> Iterator[FrameRecord]:
    """Generator over the frames of a capture file.

    Opens the file on first iteration and closes it once exhausted.

    Raises:
        CaptureOpenError: If the file cannot be opened.
    """
    with WirelessPCAPReader(file_path) as reader:
        yield from reader
