"""
WiFi data models for link telemetry.

Measurement quantities are distinct ``NewType`` wrappers so that a bitrate
cannot be passed where a channel width is expected. Construction performs no
validation: the values come from system tooling and are taken as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import NewType, Optional

from .constants import (
    BAND_UNKNOWN,
    GENERATION_CSS_DISCONNECTED,
    NEVER_SEEN,
    SECURITY_UNKNOWN,
)

# =============================================================================
# MEASUREMENT TYPES
# =============================================================================

FrequencyMHz = NewType('FrequencyMHz', float)
SignalDbm = NewType('SignalDbm', float)
SignalPercent = NewType('SignalPercent', int)
BitrateMbps = NewType('BitrateMbps', float)
ChannelWidthMHz = NewType('ChannelWidthMHz', int)
ChannelNumber = NewType('ChannelNumber', int)
McsIndex = NewType('McsIndex', int)
SpatialStreams = NewType('SpatialStreams', int)
GuardIntervalUs = NewType('GuardIntervalUs', float)


# =============================================================================
# GENERATIONS
# =============================================================================

class WifiGeneration(IntEnum):
    """WiFi generation, ordered from oldest to newest."""
    UNKNOWN = 0
    WIFI_1 = 1
    WIFI_2 = 2
    WIFI_3 = 3
    WIFI_4 = 4
    WIFI_5 = 5
    WIFI_6 = 6
    WIFI_7 = 7

    @property
    def is_known(self) -> bool:
        return self is not WifiGeneration.UNKNOWN


IEEE_STANDARDS: dict[WifiGeneration, str] = {
    WifiGeneration.WIFI_1: '802.11b',
    WifiGeneration.WIFI_2: '802.11a',
    WifiGeneration.WIFI_3: '802.11g',
    WifiGeneration.WIFI_4: '802.11n',
    WifiGeneration.WIFI_5: '802.11ac',
    WifiGeneration.WIFI_6: '802.11ax',
    WifiGeneration.WIFI_7: '802.11be',
    WifiGeneration.UNKNOWN: 'Unknown',
}

GENERATION_CSS_CLASSES: dict[WifiGeneration, str] = {
    WifiGeneration.WIFI_1: 'wifi-gen-1',
    WifiGeneration.WIFI_2: 'wifi-gen-2',
    WifiGeneration.WIFI_3: 'wifi-gen-3',
    WifiGeneration.WIFI_4: 'wifi-gen-4',
    WifiGeneration.WIFI_5: 'wifi-gen-5',
    WifiGeneration.WIFI_6: 'wifi-gen-6',
    WifiGeneration.WIFI_7: 'wifi-gen-7',
    WifiGeneration.UNKNOWN: GENERATION_CSS_DISCONNECTED,
}

GENERATION_ICON_FILENAMES: dict[WifiGeneration, Optional[str]] = {
    WifiGeneration.WIFI_1: 'wifi-1.svg',
    WifiGeneration.WIFI_2: 'wifi-2.svg',
    WifiGeneration.WIFI_3: 'wifi-3.svg',
    WifiGeneration.WIFI_4: 'wifi-4.png',
    WifiGeneration.WIFI_5: 'wifi-5.png',
    WifiGeneration.WIFI_6: 'wifi-6.png',
    WifiGeneration.WIFI_7: 'wifi-7.png',
    WifiGeneration.UNKNOWN: None,
}


def _check_total(table: dict, name: str) -> None:
    missing = set(WifiGeneration) - set(table)
    if missing:
        raise RuntimeError(f"{name} is missing generations: {sorted(missing)}")


for _table, _name in (
    (IEEE_STANDARDS, 'IEEE_STANDARDS'),
    (GENERATION_CSS_CLASSES, 'GENERATION_CSS_CLASSES'),
    (GENERATION_ICON_FILENAMES, 'GENERATION_ICON_FILENAMES'),
):
    _check_total(_table, _name)


# =============================================================================
# QUALITY TIERS
# =============================================================================

class SignalQuality(str, Enum):
    """Signal quality tiers."""
    EXCELLENT = 'Excellent'
    GOOD = 'Good'
    FAIR = 'Fair'
    WEAK = 'Weak'
    POOR = 'Poor'
    UNKNOWN = 'Unknown'

    def __str__(self) -> str:
        return self.value


class SpeedQuality(str, Enum):
    """Link speed tiers."""
    EXCELLENT = 'Excellent'
    VERY_GOOD = 'VeryGood'
    GOOD = 'Good'
    OK = 'OK'
    WEAK = 'Weak'
    POOR = 'Poor'

    def __str__(self) -> str:
        return self.value


# =============================================================================
# PARSE RESULTS
# =============================================================================

@dataclass(frozen=True)
class GenerationDetection:
    """Result of running the generation detection chain over one line."""

    generation: WifiGeneration = WifiGeneration.UNKNOWN
    mcs: Optional[McsIndex] = None
    nss: Optional[SpatialStreams] = None
    guard_interval: Optional[GuardIntervalUs] = None

    @classmethod
    def unknown(cls) -> GenerationDetection:
        return cls()


@dataclass(frozen=True)
class LinkInfo:
    """
    Details of the currently associated link, as reported by
    'iw dev <interface> link'.

    ``standard`` is set if and only if ``generation`` is known.
    """

    generation: WifiGeneration = WifiGeneration.UNKNOWN
    standard: Optional[str] = None
    mcs: Optional[McsIndex] = None
    nss: Optional[SpatialStreams] = None
    guard_interval: Optional[GuardIntervalUs] = None
    channel_width: Optional[ChannelWidthMHz] = None
    tx_bitrate: Optional[BitrateMbps] = None
    rx_bitrate: Optional[BitrateMbps] = None
    signal: Optional[SignalDbm] = None
    frequency: Optional[FrequencyMHz] = None
    ssid: Optional[str] = None
    bssid: Optional[str] = None

    @classmethod
    def empty(cls) -> LinkInfo:
        """Link info for a disconnected or unreadable link."""
        return cls()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'generation': int(self.generation),
            'standard': self.standard,
            'mcs': self.mcs,
            'nss': self.nss,
            'guard_interval': self.guard_interval,
            'channel_width': self.channel_width,
            'tx_bitrate': self.tx_bitrate,
            'rx_bitrate': self.rx_bitrate,
            'signal': self.signal,
            'frequency': self.frequency,
            'ssid': self.ssid,
            'bssid': self.bssid,
        }


# =============================================================================
# COLLABORATOR RECORDS
# =============================================================================

@dataclass(frozen=True)
class AccessPointRecord:
    """One access point as reported by the scan-result provider."""

    bssid: str
    ssid: str = ''
    frequency: FrequencyMHz = FrequencyMHz(0)
    bandwidth: ChannelWidthMHz = ChannelWidthMHz(0)
    max_bitrate: BitrateMbps = BitrateMbps(0)
    signal_percent: SignalPercent = SignalPercent(0)
    wpa_flags: int = 0
    rsn_flags: int = 0
    in_use: bool = False
    last_seen: float = NEVER_SEEN


@dataclass(frozen=True)
class ActiveConnection:
    """Live state of the active link, as reported by the connection provider."""

    interface_name: Optional[str]
    ssid: str
    bssid: str
    frequency: FrequencyMHz
    signal_percent: SignalPercent
    bitrate: BitrateMbps
    wpa_flags: int = 0
    rsn_flags: int = 0


# =============================================================================
# VIEWS
# =============================================================================

@dataclass(frozen=True)
class ScannedNetwork:
    """A discovered access point, rebuilt on every scan read."""

    ssid: str
    bssid: str
    frequency: FrequencyMHz
    channel: ChannelNumber
    band: str = BAND_UNKNOWN
    bandwidth: ChannelWidthMHz = ChannelWidthMHz(0)
    max_bitrate: BitrateMbps = BitrateMbps(0)
    signal_percent: SignalPercent = SignalPercent(0)
    security: str = SECURITY_UNKNOWN
    generation: WifiGeneration = WifiGeneration.UNKNOWN

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'ssid': self.ssid,
            'bssid': self.bssid,
            'frequency': self.frequency,
            'channel': self.channel,
            'band': self.band,
            'bandwidth': self.bandwidth,
            'max_bitrate': self.max_bitrate,
            'signal_percent': self.signal_percent,
            'security': self.security,
            'generation': int(self.generation),
            'standard': IEEE_STANDARDS[self.generation] if self.generation.is_known else None,
        }


@dataclass(frozen=True)
class DisconnectedInfo:
    """No WiFi link is active."""

    interface_name: Optional[str] = None
    connected: bool = field(default=False, init=False)

    def to_dict(self) -> dict:
        return {
            'connected': False,
            'interface_name': self.interface_name,
        }


@dataclass(frozen=True)
class ConnectedInfo:
    """Merged view of the live connection and the parsed link details."""

    interface_name: Optional[str]
    ssid: str
    bssid: str
    frequency: FrequencyMHz
    channel: ChannelNumber
    band: str
    signal_strength: SignalDbm
    signal_percent: SignalPercent
    bitrate: BitrateMbps
    security: str
    generation: WifiGeneration
    standard: Optional[str] = None
    mcs: Optional[McsIndex] = None
    nss: Optional[SpatialStreams] = None
    guard_interval: Optional[GuardIntervalUs] = None
    channel_width: Optional[ChannelWidthMHz] = None
    tx_bitrate: Optional[BitrateMbps] = None
    rx_bitrate: Optional[BitrateMbps] = None
    max_bitrate: BitrateMbps = BitrateMbps(0)
    connected: bool = field(default=True, init=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'connected': True,
            'interface_name': self.interface_name,
            'ssid': self.ssid,
            'bssid': self.bssid,
            'frequency': self.frequency,
            'channel': self.channel,
            'band': self.band,
            'signal_strength': self.signal_strength,
            'signal_percent': self.signal_percent,
            'bitrate': self.bitrate,
            'security': self.security,
            'generation': int(self.generation),
            'standard': self.standard,
            'mcs': self.mcs,
            'nss': self.nss,
            'guard_interval': self.guard_interval,
            'channel_width': self.channel_width,
            'tx_bitrate': self.tx_bitrate,
            'rx_bitrate': self.rx_bitrate,
            'max_bitrate': self.max_bitrate,
        }


def is_connected(info: ConnectedInfo | DisconnectedInfo) -> bool:
    """Check whether a connection view describes an active link."""
    return info.connected
