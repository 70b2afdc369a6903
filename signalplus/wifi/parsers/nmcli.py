r"""
Parsers for NetworkManager nmcli output.

Example output from 'nmcli -t -f DEVICE,TYPE,STATE device':
wlp192s0:wifi:connected
enp3s0:ethernet:unavailable
lo:loopback:unmanaged

Example output from
'nmcli -t -f IN-USE,SSID,BSSID,FREQ,RATE,BANDWIDTH,SIGNAL,WPA-FLAGS,RSN-FLAGS device wifi list':
*:MyWiFi:AE\:8B\:A9\:51\:30\:23:5220 MHz:540 Mbit/s:80 MHz:75:(none):pair_ccmp group_ccmp psk sae
 :Guest:00\:11\:22\:33\:44\:66:2437 MHz:130 Mbit/s:20 MHz:60:(none):(none)
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from ..constants import (
    NMCLI_DEVICE_STATE_CONNECTED,
    NMCLI_DEVICE_TYPE_WIFI,
    NMCLI_SECURITY_FLAG_NAMES,
)
from ..models import (
    AccessPointRecord,
    ActiveConnection,
    BitrateMbps,
    ChannelWidthMHz,
    FrequencyMHz,
    SignalPercent,
)

logger = logging.getLogger(__name__)

LEADING_NUMBER_PATTERN = re.compile(r'(\d+(?:\.\d+)?)')

AP_FIELD_COUNT = 9


def parse_nmcli_devices(output: str) -> list[tuple[str, str, str]]:
    """
    Parse nmcli terse device listing.

    Returns:
        List of (device, type, state) tuples.
    """
    devices = []

    for line in output.strip().split('\n'):
        if not line:
            continue
        parts = split_nmcli_line(line)
        if len(parts) < 3:
            logger.debug(f"Skipping malformed nmcli device line: {line!r}")
            continue
        devices.append((parts[0], parts[1], parts[2]))

    return devices


def find_wifi_device(devices: list[tuple[str, str, str]]) -> Optional[str]:
    """Pick the connected WiFi device, else the first WiFi device, else None."""
    wifi_devices = [d for d in devices if d[1] == NMCLI_DEVICE_TYPE_WIFI]

    for name, _type, state in wifi_devices:
        if state == NMCLI_DEVICE_STATE_CONNECTED:
            return name

    return wifi_devices[0][0] if wifi_devices else None


def parse_nmcli_access_points(output: str) -> list[AccessPointRecord]:
    """
    Parse nmcli terse access point listing.

    Args:
        output: Raw output from nmcli with -t flag and the AP field list.

    Returns:
        List of AccessPointRecord objects. Malformed lines are skipped.
    """
    records = []

    for line in output.strip().split('\n'):
        if not line:
            continue

        record = _parse_access_point_line(line)
        if record:
            records.append(record)

    return records


def _parse_access_point_line(line: str) -> Optional[AccessPointRecord]:
    """Parse a single line of nmcli terse AP output."""
    parts = split_nmcli_line(line)

    if len(parts) < AP_FIELD_COUNT:
        logger.debug(f"Skipping nmcli line with {len(parts)} fields: {line!r}")
        return None

    # IN-USE,SSID,BSSID,FREQ,RATE,BANDWIDTH,SIGNAL,WPA-FLAGS,RSN-FLAGS
    in_use, ssid, bssid, freq_str, rate_str, width_str, signal_str, wpa_str, rsn_str = parts[:AP_FIELD_COUNT]

    if not bssid:
        logger.debug(f"Skipping nmcli line without BSSID: {line!r}")
        return None

    return AccessPointRecord(
        bssid=bssid.lower(),
        ssid=ssid,
        frequency=FrequencyMHz(_parse_leading_number(freq_str)),
        bandwidth=ChannelWidthMHz(int(_parse_leading_number(width_str))),
        max_bitrate=BitrateMbps(_parse_leading_number(rate_str)),
        signal_percent=SignalPercent(int(_parse_leading_number(signal_str))),
        wpa_flags=parse_security_flags(wpa_str),
        rsn_flags=parse_security_flags(rsn_str),
        in_use=in_use.strip() == '*',
    )


def _parse_leading_number(value: str) -> float:
    """First number in a field like '5180 MHz' or '540 Mbit/s'; 0 if absent."""
    match = LEADING_NUMBER_PATTERN.search(value)
    return float(match.group(1)) if match else 0.0


def parse_security_flags(value: str) -> int:
    """
    Fold nmcli security flag names back into the NetworkManager bitmask.

    Examples:
        '(none)' -> 0x0
        'pair_ccmp group_ccmp psk' -> 0x188
    """
    flags = 0
    for name in value.split():
        flags |= NMCLI_SECURITY_FLAG_NAMES.get(name.lower(), 0)
    return flags


def find_active_connection(
    records: list[AccessPointRecord],
    interface_name: Optional[str],
) -> Optional[ActiveConnection]:
    """Build the live connection record from the in-use access point."""
    for ap in records:
        if ap.in_use:
            return ActiveConnection(
                interface_name=interface_name,
                ssid=ap.ssid,
                bssid=ap.bssid,
                frequency=ap.frequency,
                signal_percent=ap.signal_percent,
                bitrate=ap.max_bitrate,
                wpa_flags=ap.wpa_flags,
                rsn_flags=ap.rsn_flags,
            )
    return None


def split_nmcli_line(line: str) -> list[str]:
    """Split nmcli terse line handling escaped colons and backslashes."""
    parts = []
    current = []
    i = 0

    while i < len(line):
        if line[i] == '\\' and i + 1 < len(line) and line[i + 1] in (':', '\\'):
            current.append(line[i + 1])
            i += 2
        elif line[i] == ':':
            parts.append(''.join(current))
            current = []
            i += 1
        else:
            current.append(line[i])
            i += 1

    parts.append(''.join(current))

    return parts
