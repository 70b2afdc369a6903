"""
WiFi tool output parsers.

iw output is parsed into link details and advertised generations; nmcli
output supplies the live connection and scan results.
"""

from .iw import parse_iw_link, parse_iw_scan_dump, parse_iw_last_seen, parse_bitrate_line
from .nmcli import (
    parse_nmcli_devices,
    parse_nmcli_access_points,
    find_wifi_device,
    find_active_connection,
)

__all__ = [
    'parse_iw_link',
    'parse_iw_scan_dump',
    'parse_iw_last_seen',
    'parse_bitrate_line',
    'parse_nmcli_devices',
    'parse_nmcli_access_points',
    'find_wifi_device',
    'find_active_connection',
]
