"""
Parsers for Linux iw output.

Example output from 'iw dev wlan0 link':
Connected to ae:8b:a9:51:30:23 (on wlp192s0)
    SSID: LaccordeonCoworking
    freq: 5220.0
    RX: 1533905496 bytes (1321800 packets)
    TX: 220138288 bytes (525917 packets)
    signal: -39 dBm
    rx bitrate: 573.5 MBit/s 40MHz HE-MCS 11 HE-NSS 2 HE-GI 0 HE-DCM 0
    tx bitrate: 573.5 MBit/s 40MHz HE-MCS 11 HE-NSS 2 HE-GI 0 HE-DCM 0
    bss flags: short-slot-time
    dtim period: 3
    beacon int: 100

Example output from 'iw dev wlan0 scan dump':
BSS 00:11:22:33:44:55(on wlan0) -- associated
    freq: 5180
    signal: -52.00 dBm
    last seen: 1520 ms ago
    SSID: MyWiFi
    HT capabilities:
        Capabilities: 0x9ef
    VHT capabilities:
        VHT Capabilities (0x338b79b2):
    HE capabilities:
        HE MAC Capabilities (0x000801185018):
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterator, Optional

from ..constants import (
    EHT_CAPABILITY_HEADERS,
    FREQ_5GHZ_START,
    HE_CAPABILITY_HEADERS,
    HT_CAPABILITY_HEADERS,
    IW_NOT_CONNECTED,
    IW_SCAN_BSS_PREFIX,
    VHT_CAPABILITY_HEADERS,
    WIFI_1_MAX_BITRATE,
)
from ..generation import detect_generation, get_standard
from ..models import (
    BitrateMbps,
    ChannelWidthMHz,
    FrequencyMHz,
    GenerationDetection,
    LinkInfo,
    SignalDbm,
    WifiGeneration,
)

logger = logging.getLogger(__name__)

CONNECTED_TO_PATTERN = re.compile(r'Connected to ([0-9a-f:]+)', re.IGNORECASE)
FREQ_PATTERN = re.compile(r'^[-+]?(?:\d+\.?\d*|\.\d+)')
SIGNAL_PATTERN = re.compile(r'signal:\s*(-?\d+)')
BITRATE_PATTERN = re.compile(r'(\d+\.?\d*)\s*MBit/s')
CHANNEL_WIDTH_PATTERN = re.compile(r'(\d+)MHz')
BSSID_PATTERN = re.compile(r'^([0-9a-fA-F:]{17})')
LAST_SEEN_PATTERN = re.compile(r'last seen:\s*(\d+)\s*ms ago')


@dataclass(frozen=True)
class BitrateLine:
    """Parsed contents of a single 'tx bitrate:' or 'rx bitrate:' line."""
    bitrate: Optional[BitrateMbps]
    channel_width: Optional[ChannelWidthMHz]
    detection: GenerationDetection


# =============================================================================
# iw dev <interface> link
# =============================================================================

def parse_iw_link(output: str) -> LinkInfo:
    """
    Parse 'iw dev <interface> link' output.

    Generation and modulation fields come from the tx bitrate line; the rx
    line is only used when tx carries no MCS marker. Without any marker the
    generation is guessed from frequency and bitrate.

    Args:
        output: Raw output from 'iw dev <interface> link'. May be empty.

    Returns:
        LinkInfo. Missing fields are None; never raises on malformed input.
    """
    if not output or IW_NOT_CONNECTED in output:
        return LinkInfo.empty()

    info = LinkInfo()

    for raw_line in output.split('\n'):
        line = raw_line.strip()

        if line.startswith('SSID:'):
            info = replace(info, ssid=line[len('SSID:'):].strip())

        elif line.startswith('Connected to'):
            bssid_match = CONNECTED_TO_PATTERN.match(line)
            if bssid_match:
                info = replace(info, bssid=bssid_match.group(1))

        elif line.startswith('freq:'):
            freq_match = FREQ_PATTERN.match(line[len('freq:'):].strip())
            if freq_match:
                info = replace(info, frequency=FrequencyMHz(float(freq_match.group(0))))

        elif line.startswith('signal:'):
            signal_match = SIGNAL_PATTERN.match(line)
            if signal_match:
                info = replace(info, signal=SignalDbm(int(signal_match.group(1))))

        elif line.startswith('tx bitrate:'):
            parsed = parse_bitrate_line(line)
            info = replace(info, tx_bitrate=parsed.bitrate)
            info = _apply_detection(info, parsed)

        elif line.startswith('rx bitrate:'):
            parsed = parse_bitrate_line(line)
            info = replace(info, rx_bitrate=parsed.bitrate)
            if info.generation is WifiGeneration.UNKNOWN:
                info = _apply_detection(info, parsed)

    if info.generation is WifiGeneration.UNKNOWN:
        info = replace(info, generation=detect_legacy_generation(
            info.frequency, info.tx_bitrate, info.rx_bitrate,
        ))

    return replace(info, standard=get_standard(info.generation))


def parse_bitrate_line(line: str) -> BitrateLine:
    """Extract bitrate, channel width and MCS details from a bitrate line."""
    bitrate_match = BITRATE_PATTERN.search(line)
    width_match = CHANNEL_WIDTH_PATTERN.search(line)

    return BitrateLine(
        bitrate=BitrateMbps(float(bitrate_match.group(1))) if bitrate_match else None,
        channel_width=ChannelWidthMHz(int(width_match.group(1))) if width_match else None,
        detection=detect_generation(line),
    )


def _apply_detection(info: LinkInfo, parsed: BitrateLine) -> LinkInfo:
    detection = parsed.detection
    if detection.generation is WifiGeneration.UNKNOWN:
        return info
    return replace(
        info,
        generation=detection.generation,
        mcs=detection.mcs,
        nss=detection.nss,
        guard_interval=detection.guard_interval,
        channel_width=parsed.channel_width,
    )


def detect_legacy_generation(
    frequency: Optional[FrequencyMHz],
    tx_bitrate: Optional[BitrateMbps],
    rx_bitrate: Optional[BitrateMbps],
) -> WifiGeneration:
    """
    Guess a pre-802.11n generation when no MCS marker was found.

    5 GHz means 802.11a. On 2.4 GHz, a peak bitrate of 11 Mbit/s or less
    means 802.11b, anything faster 802.11g.
    """
    if frequency is None:
        return WifiGeneration.UNKNOWN

    if frequency >= FREQ_5GHZ_START:
        return WifiGeneration.WIFI_2

    max_bitrate = max(tx_bitrate or 0, rx_bitrate or 0)
    if max_bitrate <= 0:
        return WifiGeneration.UNKNOWN

    if max_bitrate <= WIFI_1_MAX_BITRATE:
        return WifiGeneration.WIFI_1
    return WifiGeneration.WIFI_3


# =============================================================================
# iw dev <interface> scan dump
# =============================================================================

def parse_iw_scan_dump(output: str) -> dict[str, WifiGeneration]:
    """
    Parse 'iw dev <interface> scan dump' output into advertised generations.

    Args:
        output: Raw scan dump text. May be empty.

    Returns:
        Mapping of lower-case BSSID to the newest generation the access
        point advertises. Blocks without a BSSID are skipped.
    """
    generations = {
        bssid: detect_scan_generation(block)
        for bssid, block in _iter_bss_blocks(output)
    }

    logger.debug(f"Parsed {len(generations)} BSS entries from scan dump")
    return generations


def parse_iw_last_seen(output: str) -> dict[str, int]:
    """
    Parse the 'last seen: N ms ago' line of every BSS block.

    Returns:
        Mapping of lower-case BSSID to milliseconds since the radio last
        heard the access point. Blocks without the line are left out.
    """
    last_seen = {}

    for bssid, block in _iter_bss_blocks(output):
        match = LAST_SEEN_PATTERN.search(block)
        if match:
            last_seen[bssid] = int(match.group(1))

    return last_seen


def _iter_bss_blocks(output: str) -> Iterator[tuple[str, str]]:
    """Yield (bssid, block text) for each BSS entry in a scan dump."""
    if not output:
        return

    current_block: list[str] = []

    for line in output.split('\n'):
        if line.startswith(IW_SCAN_BSS_PREFIX):
            # Start of new BSS entry
            if current_block:
                yield from _bss_block(current_block)
            current_block = [line[len(IW_SCAN_BSS_PREFIX):]]
        elif current_block:
            current_block.append(line)

    # Last block
    if current_block:
        yield from _bss_block(current_block)


def _bss_block(lines: list[str]) -> Iterator[tuple[str, str]]:
    """lines[0] starts with the BSSID; yields nothing when it does not."""
    bssid_match = BSSID_PATTERN.match(lines[0])
    if not bssid_match:
        logger.debug(f"Skipping BSS block without BSSID: {lines[0]!r}")
        return

    yield bssid_match.group(1).lower(), '\n'.join(lines)


def detect_scan_generation(block: str) -> WifiGeneration:
    """Newest generation whose capability header appears in a BSS block."""
    for headers, generation in (
        (EHT_CAPABILITY_HEADERS, WifiGeneration.WIFI_7),
        (HE_CAPABILITY_HEADERS, WifiGeneration.WIFI_6),
        (VHT_CAPABILITY_HEADERS, WifiGeneration.WIFI_5),
        (HT_CAPABILITY_HEADERS, WifiGeneration.WIFI_4),
    ):
        if any(header in block for header in headers):
            return generation
    return WifiGeneration.UNKNOWN
