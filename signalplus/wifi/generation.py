"""
WiFi generation detection.

Recognizes the MCS annotations printed by iw on bitrate lines:

    EHT  (WiFi 7): 2882.4 MBit/s 160MHz EHT-MCS 13 EHT-NSS 2 EHT-GI 0
    HE   (WiFi 6): 573.5 MBit/s 40MHz HE-MCS 11 HE-NSS 2 HE-GI 0 HE-DCM 0
    VHT  (WiFi 5): 866.7 MBit/s VHT-MCS 9 80MHz short GI VHT-NSS 2
    HT   (WiFi 4): 72.2 MBit/s MCS 7 20MHz short GI

Matchers are tried newest first and the first match wins.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

from .constants import (
    GENERATION_LABEL_PREFIX,
    GUARD_INTERVAL_NORMAL,
    GUARD_INTERVAL_SHORT,
    HE_GI_INDEX_MAP,
)
from .models import (
    GENERATION_CSS_CLASSES,
    GENERATION_ICON_FILENAMES,
    IEEE_STANDARDS,
    GenerationDetection,
    GuardIntervalUs,
    McsIndex,
    SpatialStreams,
    WifiGeneration,
)

EHT_MCS_PATTERN = re.compile(r'EHT-MCS\s+(\d+)')
EHT_NSS_PATTERN = re.compile(r'EHT-NSS\s+(\d+)')
EHT_GI_PATTERN = re.compile(r'EHT-GI\s+(\d+)')

HE_MCS_PATTERN = re.compile(r'HE-MCS\s+(\d+)')
HE_NSS_PATTERN = re.compile(r'HE-NSS\s+(\d+)')
HE_GI_PATTERN = re.compile(r'HE-GI\s+(\d+)')

VHT_MCS_PATTERN = re.compile(r'VHT-MCS\s+(\d+)')
VHT_NSS_PATTERN = re.compile(r'VHT-NSS\s+(\d+)')

HT_MCS_PATTERN = re.compile(r'\bMCS\s+(\d+)')

SHORT_GI_MARKER = 'short GI'
DASH_MCS_MARKER = '-MCS'


def detect_generation(line: str) -> GenerationDetection:
    """
    Detect the WiFi generation and modulation details from a bitrate line.

    Args:
        line: A 'tx bitrate:' or 'rx bitrate:' line, or any text carrying
            MCS annotations.

    Returns:
        GenerationDetection; UNKNOWN with all fields None when no marker
        is recognized.
    """
    for matcher in _MATCHERS:
        result = matcher(line)
        if result is not None:
            return result
    return GenerationDetection.unknown()


def _try_eht(line: str) -> Optional[GenerationDetection]:
    if 'EHT-MCS' not in line:
        return None
    return GenerationDetection(
        generation=WifiGeneration.WIFI_7,
        mcs=_parse_mcs(line, EHT_MCS_PATTERN),
        nss=_parse_nss(line, EHT_NSS_PATTERN),
        guard_interval=_parse_he_guard_interval(line, EHT_GI_PATTERN),
    )


def _try_he(line: str) -> Optional[GenerationDetection]:
    if 'HE-MCS' not in line:
        return None
    return GenerationDetection(
        generation=WifiGeneration.WIFI_6,
        mcs=_parse_mcs(line, HE_MCS_PATTERN),
        nss=_parse_nss(line, HE_NSS_PATTERN),
        guard_interval=_parse_he_guard_interval(line, HE_GI_PATTERN),
    )


def _try_vht(line: str) -> Optional[GenerationDetection]:
    if 'VHT-MCS' not in line:
        return None
    return GenerationDetection(
        generation=WifiGeneration.WIFI_5,
        mcs=_parse_mcs(line, VHT_MCS_PATTERN),
        nss=_parse_nss(line, VHT_NSS_PATTERN),
        guard_interval=_parse_short_guard_interval(line),
    )


def _try_ht(line: str) -> Optional[GenerationDetection]:
    # A bare 'MCS n' only counts when no 'XXX-MCS' token is present
    if DASH_MCS_MARKER in line or not HT_MCS_PATTERN.search(line):
        return None

    mcs = _parse_mcs(line, HT_MCS_PATTERN)
    return GenerationDetection(
        generation=WifiGeneration.WIFI_4,
        mcs=mcs,
        nss=SpatialStreams(mcs // 8 + 1) if mcs is not None else None,
        guard_interval=_parse_short_guard_interval(line),
    )


_MATCHERS: tuple[Callable[[str], Optional[GenerationDetection]], ...] = (
    _try_eht,
    _try_he,
    _try_vht,
    _try_ht,
)


def _parse_int(line: str, pattern: re.Pattern) -> Optional[int]:
    match = pattern.search(line)
    if not match:
        return None
    return int(match.group(1))


def _parse_mcs(line: str, pattern: re.Pattern) -> Optional[McsIndex]:
    value = _parse_int(line, pattern)
    return McsIndex(value) if value is not None else None


def _parse_nss(line: str, pattern: re.Pattern) -> Optional[SpatialStreams]:
    value = _parse_int(line, pattern)
    return SpatialStreams(value) if value is not None else None


def _parse_he_guard_interval(line: str, pattern: re.Pattern) -> GuardIntervalUs:
    """Decode an HE/EHT GI index; unknown or missing indexes mean 0.8us."""
    index = _parse_int(line, pattern)
    return GuardIntervalUs(HE_GI_INDEX_MAP.get(index, GUARD_INTERVAL_NORMAL))


def _parse_short_guard_interval(line: str) -> GuardIntervalUs:
    if SHORT_GI_MARKER in line:
        return GuardIntervalUs(GUARD_INTERVAL_SHORT)
    return GuardIntervalUs(GUARD_INTERVAL_NORMAL)


# =============================================================================
# Display helpers
# =============================================================================

def is_known_generation(generation: WifiGeneration) -> bool:
    """True for WiFi 1-7, False for UNKNOWN."""
    return generation.is_known


def get_standard(generation: WifiGeneration) -> Optional[str]:
    """IEEE standard for a known generation, None for UNKNOWN."""
    return IEEE_STANDARDS[generation] if is_known_generation(generation) else None


def get_generation_label(generation: WifiGeneration) -> str:
    """Short label, e.g. 'WiFi 6'."""
    if is_known_generation(generation):
        return f"{GENERATION_LABEL_PREFIX} {int(generation)}"
    return GENERATION_LABEL_PREFIX


def get_generation_description(generation: WifiGeneration) -> str:
    """Label with IEEE standard, e.g. 'WiFi 6 (802.11ax)'."""
    if is_known_generation(generation):
        return f"{GENERATION_LABEL_PREFIX} {int(generation)} ({IEEE_STANDARDS[generation]})"
    return GENERATION_LABEL_PREFIX


def get_generation_css_class(generation: WifiGeneration) -> str:
    return GENERATION_CSS_CLASSES[generation]


def get_generation_icon_filename(generation: WifiGeneration) -> Optional[str]:
    return GENERATION_ICON_FILENAMES[generation]
