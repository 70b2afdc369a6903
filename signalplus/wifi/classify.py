"""
Classification and derived metrics for WiFi links and scan results.

All functions here are pure and safe to call from any thread.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, Optional, TypeVar

from .cache import GenerationCache
from .constants import (
    AP_SECURITY_KEY_MGMT_802_1X,
    AP_SECURITY_KEY_MGMT_PSK,
    AP_SECURITY_KEY_MGMT_SAE,
    AP_SECURITY_NONE,
    BAND_2_4_GHZ,
    BAND_2_4_GHZ_RANGE,
    BAND_5_GHZ,
    BAND_5_GHZ_RANGE,
    BAND_6_GHZ,
    BAND_6_GHZ_RANGE,
    BAND_UNKNOWN,
    CHANNEL_14_FREQUENCY,
    CHANNEL_RANGE_2_4_GHZ,
    CHANNEL_RANGE_5_GHZ,
    CHANNEL_RANGE_6_GHZ,
    NEVER_SEEN,
    PLACEHOLDER,
    SECURITY_OPEN,
    SECURITY_UNKNOWN,
    SECURITY_WPA,
    SECURITY_WPA2,
    SECURITY_WPA2_ENTERPRISE,
    SECURITY_WPA3,
    SECURITY_WPA_ENTERPRISE,
    SIGNAL_CSS_PREFIX,
    SIGNAL_DBM_EXCELLENT,
    SIGNAL_DBM_FAIR,
    SIGNAL_DBM_GOOD,
    SIGNAL_DBM_WEAK,
    SIGNAL_ESTIMATE_MAX_DBM,
    SIGNAL_ESTIMATE_MIN_DBM,
    SIGNAL_PERCENT_EXCELLENT,
    SIGNAL_PERCENT_FAIR,
    SIGNAL_PERCENT_GOOD,
    SIGNAL_PERCENT_WEAK,
    SPEED_EXCELLENT,
    SPEED_GOOD,
    SPEED_OK,
    SPEED_VERY_GOOD,
    SPEED_WEAK,
    STALE_SCAN_SECONDS,
)
from .models import (
    AccessPointRecord,
    ActiveConnection,
    BitrateMbps,
    ChannelNumber,
    ConnectedInfo,
    FrequencyMHz,
    LinkInfo,
    ScannedNetwork,
    SignalDbm,
    SignalQuality,
    SpeedQuality,
)

T = TypeVar('T')


# =============================================================================
# Quality tiers
# =============================================================================

def get_signal_quality_from_percent(signal_percent: float) -> SignalQuality:
    """Signal quality from a 0-100 signal percentage."""
    if signal_percent >= SIGNAL_PERCENT_EXCELLENT:
        return SignalQuality.EXCELLENT
    elif signal_percent >= SIGNAL_PERCENT_GOOD:
        return SignalQuality.GOOD
    elif signal_percent >= SIGNAL_PERCENT_FAIR:
        return SignalQuality.FAIR
    elif signal_percent >= SIGNAL_PERCENT_WEAK:
        return SignalQuality.WEAK
    return SignalQuality.POOR


def get_signal_quality(signal_strength: Optional[SignalDbm]) -> SignalQuality:
    """Signal quality from a dBm reading; UNKNOWN when there is no reading."""
    if signal_strength is None:
        return SignalQuality.UNKNOWN
    if signal_strength >= SIGNAL_DBM_EXCELLENT:
        return SignalQuality.EXCELLENT
    elif signal_strength >= SIGNAL_DBM_GOOD:
        return SignalQuality.GOOD
    elif signal_strength >= SIGNAL_DBM_FAIR:
        return SignalQuality.FAIR
    elif signal_strength >= SIGNAL_DBM_WEAK:
        return SignalQuality.WEAK
    return SignalQuality.POOR


def get_signal_css_class(signal_strength: Optional[SignalDbm]) -> str:
    quality = get_signal_quality(signal_strength)
    if quality is SignalQuality.UNKNOWN:
        return ''
    return f"{SIGNAL_CSS_PREFIX}{quality.value.lower()}"


def get_speed_quality(bitrate: BitrateMbps) -> SpeedQuality:
    """Speed tier from a bitrate in Mbit/s."""
    if bitrate >= SPEED_EXCELLENT:
        return SpeedQuality.EXCELLENT
    elif bitrate >= SPEED_VERY_GOOD:
        return SpeedQuality.VERY_GOOD
    elif bitrate >= SPEED_GOOD:
        return SpeedQuality.GOOD
    elif bitrate >= SPEED_OK:
        return SpeedQuality.OK
    elif bitrate >= SPEED_WEAK:
        return SpeedQuality.WEAK
    return SpeedQuality.POOR


def estimate_signal_dbm(signal_percent: float) -> SignalDbm:
    """Linear estimate of dBm from a signal percentage (0% = -90, 100% = -30)."""
    span = SIGNAL_ESTIMATE_MAX_DBM - SIGNAL_ESTIMATE_MIN_DBM
    return SignalDbm(SIGNAL_ESTIMATE_MIN_DBM + (signal_percent / 100) * span)


# =============================================================================
# Frequency helpers
# =============================================================================

def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def frequency_to_channel(frequency: FrequencyMHz) -> ChannelNumber:
    """
    Channel number for a frequency in MHz; 0 when outside every band.

    The channel ranges do not line up exactly with frequency_to_band():
    between 5825 and 5955 MHz the channel is 0 while the band may still
    be '5 GHz'.
    """
    low, high = CHANNEL_RANGE_2_4_GHZ
    if low <= frequency <= high:
        if frequency == CHANNEL_14_FREQUENCY:
            return ChannelNumber(14)
        return ChannelNumber(_round_half_up((frequency - 2412) / 5) + 1)

    low, high = CHANNEL_RANGE_5_GHZ
    if low <= frequency <= high:
        return ChannelNumber(_round_half_up((frequency - 5000) / 5))

    low, high = CHANNEL_RANGE_6_GHZ
    if low <= frequency <= high:
        return ChannelNumber(_round_half_up((frequency - 5950) / 5))

    return ChannelNumber(0)


def frequency_to_band(frequency: FrequencyMHz) -> str:
    """Band label for a frequency in MHz."""
    if BAND_2_4_GHZ_RANGE[0] <= frequency < BAND_2_4_GHZ_RANGE[1]:
        return BAND_2_4_GHZ
    elif BAND_5_GHZ_RANGE[0] <= frequency < BAND_5_GHZ_RANGE[1]:
        return BAND_5_GHZ
    elif BAND_6_GHZ_RANGE[0] <= frequency <= BAND_6_GHZ_RANGE[1]:
        return BAND_6_GHZ
    return BAND_UNKNOWN


# =============================================================================
# Security
# =============================================================================

def detect_security_protocols(wpa_flags: int, rsn_flags: int) -> list[str]:
    """
    All security protocols advertised by an access point, strongest first.

    Args:
        wpa_flags: NetworkManager WPA (legacy) security flags.
        rsn_flags: NetworkManager RSN security flags.
    """
    protocols = []

    if rsn_flags & AP_SECURITY_KEY_MGMT_SAE:
        protocols.append(SECURITY_WPA3)

    if rsn_flags & AP_SECURITY_KEY_MGMT_802_1X:
        protocols.append(SECURITY_WPA2_ENTERPRISE)
    elif rsn_flags & AP_SECURITY_KEY_MGMT_PSK:
        protocols.append(SECURITY_WPA2)

    if wpa_flags & AP_SECURITY_KEY_MGMT_802_1X and SECURITY_WPA2_ENTERPRISE not in protocols:
        protocols.append(SECURITY_WPA_ENTERPRISE)
    elif wpa_flags & AP_SECURITY_KEY_MGMT_PSK:
        protocols.append(SECURITY_WPA)

    return protocols


def get_security_protocol(wpa_flags: int, rsn_flags: int) -> str:
    """Strongest security protocol, 'Open' for no flags, else 'Unknown'."""
    protocols = detect_security_protocols(wpa_flags, rsn_flags)
    if protocols:
        return protocols[0]
    if wpa_flags == AP_SECURITY_NONE and rsn_flags == AP_SECURITY_NONE:
        return SECURITY_OPEN
    return SECURITY_UNKNOWN


# =============================================================================
# Scan result helpers
# =============================================================================

def is_stale(last_seen: float, last_scan: Optional[float]) -> bool:
    """
    Check whether an access point dropped out of the latest scan.

    Args:
        last_seen: When the access point was last seen (seconds), or
            NEVER_SEEN.
        last_scan: When the last scan completed (seconds); None or
            NEVER_SEEN if no scan has completed yet.
    """
    if last_scan is None or last_scan == NEVER_SEEN:
        return False
    if last_seen == NEVER_SEEN:
        return True
    return last_scan - last_seen > STALE_SCAN_SECONDS


def filter_stale(
    access_points: Iterable[AccessPointRecord],
    last_scan: Optional[float],
) -> list[AccessPointRecord]:
    return [ap for ap in access_points if not is_stale(ap.last_seen, last_scan)]


def sort_by_signal_strength(networks: Iterable[ScannedNetwork]) -> list[ScannedNetwork]:
    """Strongest signal first; ties keep their original order."""
    return sorted(networks, key=lambda n: n.signal_percent, reverse=True)


def group_by_ssid(networks: Iterable[ScannedNetwork]) -> dict[str, list[ScannedNetwork]]:
    """Group networks by SSID, keeping the order each SSID first appears in."""
    groups: dict[str, list[ScannedNetwork]] = {}
    for network in networks:
        groups.setdefault(network.ssid, []).append(network)
    return groups


# =============================================================================
# Record builders
# =============================================================================

def build_scanned_network(ap: AccessPointRecord, cache: GenerationCache) -> ScannedNetwork:
    """Build a ScannedNetwork from a scan result and the generation cache."""
    bssid = ap.bssid.lower()
    return ScannedNetwork(
        ssid=ap.ssid,
        bssid=bssid,
        frequency=ap.frequency,
        channel=frequency_to_channel(ap.frequency),
        band=frequency_to_band(ap.frequency),
        bandwidth=ap.bandwidth,
        max_bitrate=ap.max_bitrate,
        signal_percent=ap.signal_percent,
        security=get_security_protocol(ap.wpa_flags, ap.rsn_flags),
        generation=cache.get(bssid),
    )


def build_connected_info(connection: ActiveConnection, link: LinkInfo) -> ConnectedInfo:
    """Merge the live connection with parsed iw link details."""
    if link.signal is not None:
        signal_strength = link.signal
    else:
        signal_strength = estimate_signal_dbm(connection.signal_percent)

    known_rates = [
        rate for rate in (link.tx_bitrate, link.rx_bitrate, connection.bitrate)
        if rate is not None
    ]

    return ConnectedInfo(
        interface_name=connection.interface_name,
        ssid=connection.ssid,
        bssid=connection.bssid,
        frequency=connection.frequency,
        channel=frequency_to_channel(connection.frequency),
        band=frequency_to_band(connection.frequency),
        signal_strength=signal_strength,
        signal_percent=connection.signal_percent,
        bitrate=connection.bitrate,
        security=get_security_protocol(connection.wpa_flags, connection.rsn_flags),
        generation=link.generation,
        standard=link.standard,
        mcs=link.mcs,
        nss=link.nss,
        guard_interval=link.guard_interval,
        channel_width=link.channel_width,
        tx_bitrate=link.tx_bitrate,
        rx_bitrate=link.rx_bitrate,
        max_bitrate=BitrateMbps(max(known_rates, default=0)),
    )


# =============================================================================
# Display
# =============================================================================

def format_value(value: Optional[T], formatter: Optional[Callable[[T], str]] = None) -> str:
    """Format a value for display, '--' when it is absent."""
    if value is None:
        return PLACEHOLDER
    return formatter(value) if formatter else str(value)
