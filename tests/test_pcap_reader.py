"""Tests for the PCAP/PCAPNG frame source."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from scapy.all import conf, wrpcapng

from tests.helpers import BROADCAST, ESP_MAC, ESP_MAC_2, OTHER_MAC, beacon, mac_bytes

from espwatch.collectors.pcap_reader import (
    WirelessPCAPReader,
    extract_addresses,
    read_frames,
)
from espwatch.core.exceptions import CaptureOpenError
from espwatch.core.scanner import DeviceScanner


class _FailingReader:
    """Stands in for Scapy's PcapReader; raises for the second record."""

    def __init__(self, packet):
        self._results = [packet, ValueError("dissector failed"), EOFError()]
        self.closed = False

    def read_packet(self):
        result = self._results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    def close(self):
        self.closed = True


class TestExtractAddresses:
    def test_beacon_addresses(self):
        addresses = extract_addresses(beacon(ESP_MAC))
        assert addresses is not None
        assert addresses.addr1 == mac_bytes(BROADCAST)
        assert addresses.addr2 == mac_bytes(ESP_MAC)
        assert addresses.addr3 == mac_bytes(ESP_MAC)
        assert addresses.addr4 is None

    def test_non_wireless_packet(self):
        from scapy.all import Ether

        assert extract_addresses(Ether(src=ESP_MAC)) is None


class TestWirelessPCAPReader:
    def test_reads_records_in_order(self, wireless_pcap):
        with WirelessPCAPReader(wireless_pcap) as reader:
            frames = list(reader)

        assert [f.index for f in frames] == [1, 2, 3, 4]
        assert not any(f.decode_error for f in frames)
        assert frames[0].addresses.addr2 == mac_bytes(ESP_MAC)
        assert frames[1].addresses.addr2 == mac_bytes(OTHER_MAC)
        assert reader.frames_read == 4
        assert reader.decode_errors == 0

    def test_four_address_frame(self, wireless_pcap):
        frames = list(read_frames(wireless_pcap))
        wds = frames[2]
        assert wds.addresses.addr1 == mac_bytes(OTHER_MAC)
        assert wds.addresses.addr4 == mac_bytes(ESP_MAC_2)

    def test_records_carry_summary_timestamp_and_packet(self, wireless_pcap):
        frame = next(iter(read_frames(wireless_pcap)))
        assert frame.summary
        assert str(frame) == frame.summary
        assert frame.timestamp is not None and frame.timestamp > 0
        assert frame.packet is not None
        assert "packet" not in frame.model_dump()

    def test_ethernet_capture_has_no_wireless_addresses(self, ethernet_pcap):
        frames = list(read_frames(ethernet_pcap))
        assert len(frames) == 1
        assert frames[0].addresses is None
        assert not frames[0].decode_error

    def test_pcapng_capture(self, tmp_path: Path):
        path = tmp_path / "wireless.pcapng"
        wrpcapng(str(path), [beacon(ESP_MAC)])
        frames = list(read_frames(path))
        assert len(frames) == 1
        assert frames[0].addresses.addr2 == mac_bytes(ESP_MAC)

    def test_read_failure_is_counted(self, wireless_pcap):
        reader = WirelessPCAPReader(wireless_pcap)
        reader._reader = _FailingReader(beacon(ESP_MAC))

        frames = list(reader)

        assert len(frames) == 2
        assert not frames[0].decode_error
        assert frames[1].decode_error
        assert frames[1].index == 2
        assert frames[1].addresses is None
        assert reader.decode_errors == 1

    def test_strict_dissection_is_restored(self, wireless_pcap):
        previous = conf.debug_dissector
        list(read_frames(wireless_pcap))
        assert conf.debug_dissector == previous

    def test_file_closed_after_context(self, wireless_pcap):
        reader = WirelessPCAPReader(wireless_pcap)
        with reader:
            pass
        with pytest.raises(RuntimeError):
            list(reader)

    def test_iterating_unopened_reader_fails(self, wireless_pcap):
        with pytest.raises(RuntimeError, match="not open"):
            list(WirelessPCAPReader(wireless_pcap))


class TestStrictDissection:
    def test_truncated_frames_are_flagged(self, truncated_pcap):
        frames = list(read_frames(truncated_pcap))

        assert [f.index for f in frames] == [1, 2, 3]
        assert [f.decode_error for f in frames] == [False, True, True]
        assert frames[1].addresses is None
        assert frames[2].addresses is None

    def test_truncated_frames_add_no_devices(self, truncated_pcap, esp_table):
        scanner = DeviceScanner(esp_table)
        with WirelessPCAPReader(truncated_pcap) as reader:
            matches = scanner.scan(reader)

        # addr2 of the cut-off frame carries an Espressif prefix
        assert list(matches) == [ESP_MAC]
        assert scanner.stats.decode_errors == 2
        assert reader.decode_errors == 2

    def test_dissector_errors_stay_off_stderr(self, truncated_pcap, capfd):
        list(read_frames(truncated_pcap))
        assert "dissector failed" not in capfd.readouterr().err

    def test_scapy_log_level_is_restored(self, truncated_pcap):
        runtime_log = logging.getLogger("scapy.runtime")
        previous = runtime_log.level
        list(read_frames(truncated_pcap))
        assert runtime_log.level == previous


class TestOpenFailures:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CaptureOpenError, match="not found"):
            WirelessPCAPReader(tmp_path / "missing.pcap").open()

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.pcap"
        path.write_bytes(b"")
        with pytest.raises(CaptureOpenError, match="Empty file"):
            WirelessPCAPReader(path).open()

    def test_not_a_capture_file(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"this is definitely not a capture file\n")
        with pytest.raises(CaptureOpenError):
            WirelessPCAPReader(path).open()

    def test_empty_filename(self):
        with pytest.raises(CaptureOpenError):
            WirelessPCAPReader("").open()

    def test_error_is_an_os_error(self, tmp_path: Path):
        with pytest.raises(OSError):
            list(read_frames(tmp_path / "missing.pcap"))
