"""Shared pytest fixtures for espwatch tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest
from scapy.all import IP, UDP, Ether, RawPcapWriter, raw, wrpcap

from shared.logger import configure_logging

from espwatch.core.models import FrameRecord, WirelessAddresses
from espwatch.core.prefixes import PrefixTable

from tests.helpers import (
    BROADCAST,
    DLT_IEEE802_11_RADIO,
    EMPTY_RADIOTAP,
    ESP_MAC,
    ESP_MAC_2,
    OTHER_MAC,
    beacon,
    mac_bytes,
    truncated_beacon,
    wds_data,
)


@pytest.fixture
def esp_table() -> PrefixTable:
    """Small table with two Espressif prefixes."""
    return PrefixTable.from_records("782184\t78-21-84\n240AC4\t24-0A-C4\n")


@pytest.fixture
def make_frame() -> Callable[..., FrameRecord]:
    """Factory for 802.11 frame records built from MAC strings."""

    def _make(
        *macs: Optional[str],
        index: int = 1,
        decode_error: bool = False,
        wireless: bool = True,
    ) -> FrameRecord:
        addresses = None
        if wireless:
            fields = {
                f"addr{n}": mac_bytes(mac) if mac is not None else None
                for n, mac in enumerate(macs, start=1)
            }
            addresses = WirelessAddresses(**fields)
        return FrameRecord(
            index=index,
            decode_error=decode_error,
            addresses=addresses,
            summary=f"test frame {index}",
        )

    return _make


@pytest.fixture
def wireless_pcap(tmp_path: Path) -> Path:
    """RadioTap capture: ESP beacon, unrelated beacon, WDS frame, ESP beacon again."""
    path = tmp_path / "wireless.pcap"
    wrpcap(
        str(path),
        [
            beacon(ESP_MAC),
            beacon(OTHER_MAC),
            wds_data(OTHER_MAC, OTHER_MAC, OTHER_MAC, ESP_MAC_2),
            beacon(ESP_MAC),
        ],
    )
    return path


@pytest.fixture
def truncated_pcap(tmp_path: Path) -> Path:
    """RadioTap capture: ESP beacon, 802.11 header cut inside addr2, 3-byte RadioTap."""
    path = tmp_path / "truncated.pcap"
    writer = RawPcapWriter(str(path), linktype=DLT_IEEE802_11_RADIO)
    try:
        writer.write(raw(beacon(ESP_MAC)))
        writer.write(truncated_beacon(ESP_MAC_2))
        writer.write(EMPTY_RADIOTAP[:3])
    finally:
        writer.close()
    return path


@pytest.fixture
def ethernet_pcap(tmp_path: Path) -> Path:
    """Ethernet capture whose source address carries an Espressif prefix."""
    path = tmp_path / "ethernet.pcap"
    wrpcap(
        str(path),
        [Ether(src=ESP_MAC, dst=BROADCAST) / IP(dst="10.0.0.1") / UDP(dport=53)],
    )
    return path


@pytest.fixture(autouse=True)
def _reset_logging():
    """Start every test from the default logging setup."""
    configure_logging()
    yield
    configure_logging()
