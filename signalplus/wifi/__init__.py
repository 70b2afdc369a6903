"""
WiFi link telemetry package for WiFi Signal Plus.

Parses iw link and scan dump output into typed records, detects the WiFi
generation (802.11b through 802.11be) and classifies signal, speed, band
and security.
"""

from .models import (
    WifiGeneration,
    SignalQuality,
    SpeedQuality,
    LinkInfo,
    GenerationDetection,
    AccessPointRecord,
    ActiveConnection,
    ScannedNetwork,
    ConnectedInfo,
    DisconnectedInfo,
    IEEE_STANDARDS,
    GENERATION_CSS_CLASSES,
    GENERATION_ICON_FILENAMES,
    is_connected,
)

from .generation import (
    detect_generation,
    is_known_generation,
    get_standard,
    get_generation_label,
    get_generation_description,
    get_generation_css_class,
    get_generation_icon_filename,
)

from .parsers import (
    parse_iw_link,
    parse_iw_scan_dump,
    parse_nmcli_access_points,
)

from .classify import (
    get_signal_quality,
    get_signal_quality_from_percent,
    get_signal_css_class,
    get_speed_quality,
    estimate_signal_dbm,
    frequency_to_channel,
    frequency_to_band,
    detect_security_protocols,
    get_security_protocol,
    is_stale,
    filter_stale,
    sort_by_signal_strength,
    group_by_ssid,
    build_scanned_network,
    build_connected_info,
    format_value,
)

from .cache import (
    GenerationCache,
    get_generation_cache,
    reset_generation_cache,
)

from .service import (
    WifiInfoService,
    get_wifi_info_service,
    reset_wifi_info_service,
)

__all__ = [
    # Models
    'WifiGeneration',
    'SignalQuality',
    'SpeedQuality',
    'LinkInfo',
    'GenerationDetection',
    'AccessPointRecord',
    'ActiveConnection',
    'ScannedNetwork',
    'ConnectedInfo',
    'DisconnectedInfo',
    'IEEE_STANDARDS',
    'GENERATION_CSS_CLASSES',
    'GENERATION_ICON_FILENAMES',
    'is_connected',

    # Generation detection
    'detect_generation',
    'is_known_generation',
    'get_standard',
    'get_generation_label',
    'get_generation_description',
    'get_generation_css_class',
    'get_generation_icon_filename',

    # Parsers
    'parse_iw_link',
    'parse_iw_scan_dump',
    'parse_nmcli_access_points',

    # Classification
    'get_signal_quality',
    'get_signal_quality_from_percent',
    'get_signal_css_class',
    'get_speed_quality',
    'estimate_signal_dbm',
    'frequency_to_channel',
    'frequency_to_band',
    'detect_security_protocols',
    'get_security_protocol',
    'is_stale',
    'filter_stale',
    'sort_by_signal_strength',
    'group_by_ssid',
    'build_scanned_network',
    'build_connected_info',
    'format_value',

    # Generation cache
    'GenerationCache',
    'get_generation_cache',
    'reset_generation_cache',

    # Service
    'WifiInfoService',
    'get_wifi_info_service',
    'reset_wifi_info_service',
]
