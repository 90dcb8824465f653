"""Addresses and Scapy frame builders shared by the espwatch tests."""

from __future__ import annotations

from scapy.all import Dot11, Dot11Beacon, Dot11Elt, RadioTap

ESP_MAC = "78:21:84:aa:bb:cc"
ESP_MAC_2 = "24:0a:c4:01:02:03"
OTHER_MAC = "00:11:22:33:44:55"
BROADCAST = "ff:ff:ff:ff:ff:ff"

# Frame control bits 0 and 1: To DS and From DS both set.
TO_DS_FROM_DS = 0x03

# RadioTap link type for PcapWriter.
DLT_IEEE802_11_RADIO = 127

# RadioTap header with no optional fields (version 0, length 8).
EMPTY_RADIOTAP = b"\x00\x00\x08\x00\x00\x00\x00\x00"


def mac_bytes(mac: str) -> bytes:
    return bytes.fromhex(mac.replace(":", ""))


def beacon(bssid: str) -> RadioTap:
    return (
        RadioTap()
        / Dot11(type=0, subtype=8, addr1=BROADCAST, addr2=bssid, addr3=bssid)
        / Dot11Beacon()
        / Dot11Elt(ID="SSID", info=b"esp-test")
    )


def wds_data(addr1: str, addr2: str, addr3: str, addr4: str) -> RadioTap:
    return RadioTap() / Dot11(
        type=2,
        subtype=0,
        FCfield=TO_DS_FROM_DS,
        addr1=addr1,
        addr2=addr2,
        addr3=addr3,
        addr4=addr4,
    )


def truncated_beacon(transmitter: str) -> bytes:
    """RadioTap record whose 802.11 header stops halfway through addr2."""
    frame_control = b"\x80\x00"
    duration = b"\x00\x00"
    return (
        EMPTY_RADIOTAP
        + frame_control
        + duration
        + mac_bytes(BROADCAST)
        + mac_bytes(transmitter)[:3]
    )
