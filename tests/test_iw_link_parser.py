"""Unit tests for the 'iw dev <interface> link' parser."""

import dataclasses

import pytest

from signalplus.wifi.constants import (
    GUARD_INTERVAL_LONG_1,
    GUARD_INTERVAL_NORMAL,
    GUARD_INTERVAL_SHORT,
)
from signalplus.wifi.models import LinkInfo, WifiGeneration
from signalplus.wifi.parsers.iw import (
    detect_legacy_generation,
    parse_bitrate_line,
    parse_iw_link,
)

HE_LINK_OUTPUT = """Connected to ae:8b:a9:51:30:23 (on wlp192s0)
\tSSID: LaccordeonCoworking
\tfreq: 5220.0
\tRX: 1533905496 bytes (1321800 packets)
\tTX: 220138288 bytes (525917 packets)
\tsignal: -39 dBm
\trx bitrate: 573.5 MBit/s 40MHz HE-MCS 11 HE-NSS 2 HE-GI 0 HE-DCM 0
\ttx bitrate: 573.5 MBit/s 40MHz HE-MCS 11 HE-NSS 2 HE-GI 0 HE-DCM 0
\tbss flags: short-slot-time
\tdtim period: 3
\tbeacon int: 100
"""

VHT_LINK_OUTPUT = """Connected to 00:11:22:33:44:55 (on wlan0)
\tSSID: MyNetwork
\tfreq: 5180
\tsignal: -55 dBm
\ttx bitrate: 866.7 MBit/s VHT-MCS 9 80MHz VHT-NSS 2
\trx bitrate: 650.0 MBit/s VHT-MCS 7 80MHz short GI VHT-NSS 2
"""

HT_LINK_OUTPUT = """Connected to aa:bb:cc:dd:ee:ff (on wlan0)
\tSSID: OldRouter
\tfreq: 2437
\tsignal: -65 dBm
\ttx bitrate: 72.2 MBit/s MCS 7 20MHz short GI
\trx bitrate: 65.0 MBit/s MCS 6 20MHz
"""

EHT_LINK_OUTPUT = """Connected to 11:22:33:44:55:66 (on wlan0)
\tSSID: WiFi7Network
\tfreq: 6115
\tsignal: -45 dBm
\ttx bitrate: 2882.4 MBit/s 160MHz EHT-MCS 13 EHT-NSS 2 EHT-GI 0
\trx bitrate: 2882.4 MBit/s 160MHz EHT-MCS 13 EHT-NSS 2 EHT-GI 0
"""


def link_output(*lines, freq=None):
    """Helper to build minimal iw link output."""
    body = ['Connected to 00:00:00:00:00:00 (on wlan0)']
    if freq is not None:
        body.append(f'\tfreq: {freq}')
    body.extend(f'\t{line}' for line in lines)
    return '\n'.join(body)


class TestDisconnected:
    """Tests for empty and disconnected output."""

    def test_empty_input(self):
        assert parse_iw_link('') == LinkInfo.empty()

    def test_not_connected(self):
        assert parse_iw_link('Not connected.') == LinkInfo.empty()

    def test_empty_matches_not_connected(self):
        assert parse_iw_link('') == parse_iw_link('Not connected.')

    def test_empty_link_info_fields(self):
        info = LinkInfo.empty()

        assert info.generation == WifiGeneration.UNKNOWN
        for field in dataclasses.fields(info):
            if field.name != 'generation':
                assert getattr(info, field.name) is None

    def test_result_is_frozen(self):
        info = parse_iw_link('Connected to 00:00:00:00:00:00 (on wlan0)')

        with pytest.raises(dataclasses.FrozenInstanceError):
            info.ssid = 'other'


class TestModernGenerations:
    """Tests for links carrying MCS markers."""

    def test_wifi6_real_output(self):
        """Test WiFi 6 detection from real iw output."""
        result = parse_iw_link(HE_LINK_OUTPUT)

        assert result.generation == WifiGeneration.WIFI_6
        assert result.standard == '802.11ax'
        assert result.ssid == 'LaccordeonCoworking'
        assert result.bssid == 'ae:8b:a9:51:30:23'
        assert result.frequency == 5220.0
        assert result.signal == -39
        assert result.mcs == 11
        assert result.nss == 2
        assert result.guard_interval == GUARD_INTERVAL_NORMAL
        assert result.channel_width == 40
        assert result.tx_bitrate == 573.5
        assert result.rx_bitrate == 573.5

    def test_wifi5(self):
        result = parse_iw_link(VHT_LINK_OUTPUT)

        assert result.generation == WifiGeneration.WIFI_5
        assert result.standard == '802.11ac'
        assert result.mcs == 9
        assert result.nss == 2
        assert result.channel_width == 80
        assert result.guard_interval == GUARD_INTERVAL_NORMAL
        assert result.tx_bitrate == 866.7
        assert result.rx_bitrate == 650.0

    def test_wifi4(self):
        result = parse_iw_link(HT_LINK_OUTPUT)

        assert result.generation == WifiGeneration.WIFI_4
        assert result.standard == '802.11n'
        assert result.mcs == 7
        assert result.nss == 1
        assert result.channel_width == 20
        assert result.guard_interval == GUARD_INTERVAL_SHORT

    def test_wifi7(self):
        result = parse_iw_link(EHT_LINK_OUTPUT)

        assert result.generation == WifiGeneration.WIFI_7
        assert result.standard == '802.11be'
        assert result.mcs == 13
        assert result.nss == 2
        assert result.channel_width == 160
        assert result.frequency == 6115

    def test_tx_takes_precedence_over_rx(self):
        """Test tx fields win even when the rx line comes first."""
        output = link_output(
            'rx bitrate: 200 MBit/s HE-MCS 9 HE-NSS 2 HE-GI 1 40MHz',
            'tx bitrate: 866.7 MBit/s VHT-MCS 9 80MHz VHT-NSS 2',
        )
        result = parse_iw_link(output)

        assert result.generation == WifiGeneration.WIFI_5
        assert result.nss == 2
        assert result.channel_width == 80
        assert result.rx_bitrate == 200

    def test_rx_used_when_tx_has_no_marker(self):
        """Test fallback to rx details when tx carries no MCS marker."""
        output = link_output(
            'tx bitrate: 100 MBit/s',
            'rx bitrate: 200 MBit/s HE-MCS 9 HE-NSS 2 HE-GI 1 40MHz',
        )
        result = parse_iw_link(output)

        assert result.generation == WifiGeneration.WIFI_6
        assert result.mcs == 9
        assert result.guard_interval == GUARD_INTERVAL_LONG_1
        assert result.channel_width == 40
        assert result.tx_bitrate == 100
        assert result.rx_bitrate == 200

    def test_idempotent(self):
        assert parse_iw_link(HE_LINK_OUTPUT) == parse_iw_link(HE_LINK_OUTPUT)


class TestLegacyFallback:
    """Tests for generation guessing without MCS markers."""

    def test_5ghz_is_wifi2(self):
        result = parse_iw_link(link_output('tx bitrate: 54.0 MBit/s', freq=5180))

        assert result.generation == WifiGeneration.WIFI_2
        assert result.standard == '802.11a'

    def test_5ghz_without_bitrate_is_wifi2(self):
        result = parse_iw_link(link_output(freq=5180))
        assert result.generation == WifiGeneration.WIFI_2

    def test_24ghz_slow_is_wifi1(self):
        result = parse_iw_link(link_output('tx bitrate: 11.0 MBit/s', freq=2437))

        assert result.generation == WifiGeneration.WIFI_1
        assert result.standard == '802.11b'

    def test_24ghz_fast_is_wifi3(self):
        result = parse_iw_link(link_output(
            'tx bitrate: 5.5 MBit/s',
            'rx bitrate: 12.0 MBit/s',
            freq=2437,
        ))

        assert result.generation == WifiGeneration.WIFI_3
        assert result.standard == '802.11g'

    def test_24ghz_without_bitrate_is_unknown(self):
        result = parse_iw_link(link_output(freq=2437))

        assert result.generation == WifiGeneration.UNKNOWN
        assert result.standard is None

    def test_no_frequency_is_unknown(self):
        result = parse_iw_link(link_output('tx bitrate: 54.0 MBit/s'))

        assert result.generation == WifiGeneration.UNKNOWN
        assert result.tx_bitrate == 54.0

    @pytest.mark.parametrize('freq, tx, rx, expected', [
        (5180, None, None, WifiGeneration.WIFI_2),
        (2437, 11, None, WifiGeneration.WIFI_1),
        (2437, 12, None, WifiGeneration.WIFI_3),
        (2437, None, 1, WifiGeneration.WIFI_1),
        (2437, 0, 0, WifiGeneration.UNKNOWN),
        (2437, None, None, WifiGeneration.UNKNOWN),
        (None, 54, 54, WifiGeneration.UNKNOWN),
    ])
    def test_detect_legacy_generation(self, freq, tx, rx, expected):
        assert detect_legacy_generation(freq, tx, rx) == expected


class TestMalformedInput:
    """Tests for truncated and garbled output."""

    def test_garbage_lines_ignored(self):
        output = link_output(
            'signal: strong',
            'freq: unknown',
            'tx bitrate: fast',
            'SSID:',
        )
        result = parse_iw_link(output)

        assert result.signal is None
        assert result.frequency is None
        assert result.tx_bitrate is None
        assert result.ssid == ''
        assert result.generation == WifiGeneration.UNKNOWN

    def test_truncated_bitrate_line(self):
        result = parse_iw_link(link_output('tx bitrate: 573.5 MBit/s 40MHz HE-MCS'))

        assert result.generation == WifiGeneration.WIFI_6
        assert result.mcs is None
        assert result.tx_bitrate == 573.5

    def test_missing_connected_line(self):
        result = parse_iw_link('\tSSID: Lonely\n\tsignal: -70 dBm\n')

        assert result.bssid is None
        assert result.ssid == 'Lonely'
        assert result.signal == -70

    def test_ssid_with_spaces(self):
        result = parse_iw_link(link_output('SSID:   Cafe Guest WiFi  '))
        assert result.ssid == 'Cafe Guest WiFi'


class TestBitrateLine:
    """Tests for the bitrate sub-grammar."""

    def test_fields(self):
        parsed = parse_bitrate_line('tx bitrate: 866.7 MBit/s VHT-MCS 9 80MHz short GI VHT-NSS 2')

        assert parsed.bitrate == 866.7
        assert parsed.channel_width == 80
        assert parsed.detection.generation == WifiGeneration.WIFI_5
        assert parsed.detection.guard_interval == GUARD_INTERVAL_SHORT

    def test_integer_bitrate(self):
        assert parse_bitrate_line('tx bitrate: 100 MBit/s').bitrate == 100.0

    def test_no_width(self):
        assert parse_bitrate_line('tx bitrate: 54.0 MBit/s').channel_width is None
