"""
WiFi-specific constants for link telemetry parsing and classification.
"""

from __future__ import annotations

# =============================================================================
# TOOL SETTINGS
# =============================================================================

# Marker printed by 'iw dev <interface> link' when not associated
IW_NOT_CONNECTED = 'Not connected'

# Block boundary in 'iw dev <interface> scan dump' output
IW_SCAN_BSS_PREFIX = 'BSS '

# nmcli field lists
NMCLI_DEVICE_FIELDS = 'DEVICE,TYPE,STATE'
NMCLI_AP_FIELDS = 'IN-USE,SSID,BSSID,FREQ,RATE,BANDWIDTH,SIGNAL,WPA-FLAGS,RSN-FLAGS'

NMCLI_DEVICE_TYPE_WIFI = 'wifi'
NMCLI_DEVICE_STATE_CONNECTED = 'connected'

# =============================================================================
# GENERATION DETECTION
# =============================================================================

# Highest bitrate (Mbit/s) an 802.11b link can negotiate
WIFI_1_MAX_BITRATE = 11

# Anything at or above this frequency without an MCS marker is 802.11a
FREQ_5GHZ_START = 5000

# Scan dump capability headers, newest generation first
EHT_CAPABILITY_HEADERS = ('EHT capabilities',)
HE_CAPABILITY_HEADERS = ('HE capabilities',)
VHT_CAPABILITY_HEADERS = ('VHT capabilities', 'VHT operation')
HT_CAPABILITY_HEADERS = ('HT capabilities', 'HT operation')

# =============================================================================
# GUARD INTERVALS (microseconds)
# =============================================================================

GUARD_INTERVAL_SHORT = 0.4
GUARD_INTERVAL_NORMAL = 0.8
GUARD_INTERVAL_LONG_1 = 1.6
GUARD_INTERVAL_LONG_2 = 3.2

# HE-GI / EHT-GI index as printed by iw
HE_GI_INDEX_MAP = {
    0: GUARD_INTERVAL_NORMAL,
    1: GUARD_INTERVAL_LONG_1,
    2: GUARD_INTERVAL_LONG_2,
}

# =============================================================================
# WIFI BANDS
# =============================================================================

BAND_2_4_GHZ = '2.4 GHz'
BAND_5_GHZ = '5 GHz'
BAND_6_GHZ = '6 GHz'
BAND_UNKNOWN = 'Unknown'

# Band label ranges (MHz); upper bound exclusive except for 6 GHz
BAND_2_4_GHZ_RANGE = (2400, 2500)
BAND_5_GHZ_RANGE = (5150, 5900)
BAND_6_GHZ_RANGE = (5925, 7125)

# Channel number ranges (MHz, inclusive)
CHANNEL_RANGE_2_4_GHZ = (2412, 2484)
CHANNEL_RANGE_5_GHZ = (5170, 5825)
CHANNEL_RANGE_6_GHZ = (5955, 7115)

CHANNEL_14_FREQUENCY = 2484

# =============================================================================
# SIGNAL QUALITY
# =============================================================================

# Signal percentage thresholds
SIGNAL_PERCENT_EXCELLENT = 80
SIGNAL_PERCENT_GOOD = 60
SIGNAL_PERCENT_FAIR = 40
SIGNAL_PERCENT_WEAK = 20

# Signal strength thresholds (dBm)
SIGNAL_DBM_EXCELLENT = -50
SIGNAL_DBM_GOOD = -60
SIGNAL_DBM_FAIR = -70
SIGNAL_DBM_WEAK = -80

# Percent -> dBm estimation range
SIGNAL_ESTIMATE_MIN_DBM = -90
SIGNAL_ESTIMATE_MAX_DBM = -30

# =============================================================================
# SPEED QUALITY (Mbit/s)
# =============================================================================

SPEED_EXCELLENT = 1000
SPEED_VERY_GOOD = 300
SPEED_GOOD = 100
SPEED_OK = 50
SPEED_WEAK = 20

# =============================================================================
# SECURITY
# =============================================================================

SECURITY_WPA3 = 'WPA3'
SECURITY_WPA2_ENTERPRISE = 'WPA2-Enterprise'
SECURITY_WPA2 = 'WPA2'
SECURITY_WPA_ENTERPRISE = 'WPA-Enterprise'
SECURITY_WPA = 'WPA'
SECURITY_OPEN = 'Open'
SECURITY_UNKNOWN = 'Unknown'

# NetworkManager NM80211ApSecurityFlags
AP_SECURITY_NONE = 0x0
AP_SECURITY_PAIR_WEP40 = 0x1
AP_SECURITY_PAIR_WEP104 = 0x2
AP_SECURITY_PAIR_TKIP = 0x4
AP_SECURITY_PAIR_CCMP = 0x8
AP_SECURITY_GROUP_WEP40 = 0x10
AP_SECURITY_GROUP_WEP104 = 0x20
AP_SECURITY_GROUP_TKIP = 0x40
AP_SECURITY_GROUP_CCMP = 0x80
AP_SECURITY_KEY_MGMT_PSK = 0x100
AP_SECURITY_KEY_MGMT_802_1X = 0x200
AP_SECURITY_KEY_MGMT_SAE = 0x400
AP_SECURITY_KEY_MGMT_OWE = 0x800
AP_SECURITY_KEY_MGMT_OWE_TM = 0x1000
AP_SECURITY_KEY_MGMT_EAP_SUITE_B_192 = 0x2000

# Flag names as printed by 'nmcli -f WPA-FLAGS,RSN-FLAGS'
NMCLI_SECURITY_FLAG_NAMES = {
    'pair_wep40': AP_SECURITY_PAIR_WEP40,
    'pair_wep104': AP_SECURITY_PAIR_WEP104,
    'pair_tkip': AP_SECURITY_PAIR_TKIP,
    'pair_ccmp': AP_SECURITY_PAIR_CCMP,
    'group_wep40': AP_SECURITY_GROUP_WEP40,
    'group_wep104': AP_SECURITY_GROUP_WEP104,
    'group_tkip': AP_SECURITY_GROUP_TKIP,
    'group_ccmp': AP_SECURITY_GROUP_CCMP,
    'psk': AP_SECURITY_KEY_MGMT_PSK,
    '802.1x': AP_SECURITY_KEY_MGMT_802_1X,
    'sae': AP_SECURITY_KEY_MGMT_SAE,
    'owe': AP_SECURITY_KEY_MGMT_OWE,
    'owe_transition_mode': AP_SECURITY_KEY_MGMT_OWE_TM,
    'eap_suite_b_192': AP_SECURITY_KEY_MGMT_EAP_SUITE_B_192,
}

# =============================================================================
# SCAN RESULTS
# =============================================================================

# Sentinel for "never seen" / "no scan completed yet"
NEVER_SEEN = -1

# Access points not seen within this many seconds of the last scan are stale
STALE_SCAN_SECONDS = 10

# =============================================================================
# DISPLAY
# =============================================================================

PLACEHOLDER = '--'

GENERATION_LABEL_PREFIX = 'WiFi'
GENERATION_CSS_DISCONNECTED = 'wifi-disconnected'
SIGNAL_CSS_PREFIX = 'wifi-signal-'
