"""Unit tests for WiFi generation detection and generation tables."""

import pytest

from signalplus.wifi.constants import (
    GUARD_INTERVAL_LONG_1,
    GUARD_INTERVAL_LONG_2,
    GUARD_INTERVAL_NORMAL,
    GUARD_INTERVAL_SHORT,
)
from signalplus.wifi.generation import (
    detect_generation,
    get_generation_css_class,
    get_generation_description,
    get_generation_icon_filename,
    get_generation_label,
    get_standard,
    is_known_generation,
)
from signalplus.wifi.models import (
    GENERATION_CSS_CLASSES,
    GENERATION_ICON_FILENAMES,
    IEEE_STANDARDS,
    GenerationDetection,
    WifiGeneration,
)


class TestDetectionChain:
    """Tests for per-line generation detection."""

    def test_eht_line(self):
        """Test EHT markers are detected as WiFi 7."""
        result = detect_generation('tx bitrate: 2882.4 MBit/s 160MHz EHT-MCS 13 EHT-NSS 2 EHT-GI 1')

        assert result.generation == WifiGeneration.WIFI_7
        assert result.mcs == 13
        assert result.nss == 2
        assert result.guard_interval == GUARD_INTERVAL_LONG_1

    def test_he_line(self):
        """Test HE markers are detected as WiFi 6."""
        result = detect_generation('573.5 MBit/s 40MHz HE-MCS 11 HE-NSS 2 HE-GI 0 HE-DCM 0')

        assert result.generation == WifiGeneration.WIFI_6
        assert result.mcs == 11
        assert result.nss == 2
        assert result.guard_interval == GUARD_INTERVAL_NORMAL

    def test_vht_line(self):
        """Test VHT markers are detected as WiFi 5."""
        result = detect_generation('866.7 MBit/s VHT-MCS 9 80MHz short GI VHT-NSS 2')

        assert result.generation == WifiGeneration.WIFI_5
        assert result.mcs == 9
        assert result.nss == 2
        assert result.guard_interval == GUARD_INTERVAL_SHORT

    def test_ht_line(self):
        """Test a bare MCS token is detected as WiFi 4."""
        result = detect_generation('72.2 MBit/s MCS 7 20MHz')

        assert result.generation == WifiGeneration.WIFI_4
        assert result.mcs == 7
        assert result.nss == 1
        assert result.guard_interval == GUARD_INTERVAL_NORMAL

    def test_no_marker(self):
        """Test a legacy bitrate line yields UNKNOWN with no fields."""
        result = detect_generation('54.0 MBit/s')

        assert result == GenerationDetection.unknown()
        assert result.mcs is None
        assert result.nss is None
        assert result.guard_interval is None

    def test_empty_line(self):
        assert detect_generation('').generation == WifiGeneration.UNKNOWN

    @pytest.mark.parametrize('gi, expected', [
        ('0', GUARD_INTERVAL_NORMAL),
        ('1', GUARD_INTERVAL_LONG_1),
        ('2', GUARD_INTERVAL_LONG_2),
        ('7', GUARD_INTERVAL_NORMAL),
    ])
    def test_he_guard_interval_index(self, gi, expected):
        """Test HE-GI index decoding, including unrecognized indexes."""
        result = detect_generation(f'100 MBit/s HE-MCS 5 HE-NSS 1 HE-GI {gi}')
        assert result.guard_interval == expected

    def test_he_guard_interval_missing(self):
        """Test HE without a GI token defaults to normal GI."""
        result = detect_generation('100 MBit/s HE-MCS 5 HE-NSS 1')
        assert result.guard_interval == GUARD_INTERVAL_NORMAL

    @pytest.mark.parametrize('mcs, expected_nss', [
        (0, 1), (7, 1), (8, 2), (15, 2), (16, 3), (23, 3), (31, 4),
    ])
    def test_ht_nss_derived_from_mcs(self, mcs, expected_nss):
        """Test HT spatial streams are derived from the MCS index."""
        result = detect_generation(f'100 MBit/s MCS {mcs} 20MHz')
        assert result.nss == expected_nss

    def test_ht_short_gi(self):
        result = detect_generation('72.2 MBit/s MCS 7 20MHz short GI')
        assert result.guard_interval == GUARD_INTERVAL_SHORT

    def test_dash_mcs_not_mistaken_for_ht(self):
        """Test an XXX-MCS token without a known prefix is not HT."""
        result = detect_generation('100 MBit/s UHR-MCS 3')
        assert result.generation == WifiGeneration.UNKNOWN

    def test_newest_marker_wins(self):
        """Test priority order when several grammars co-occur."""
        text = 'HT MCS 7 VHT-MCS 9 VHT-NSS 2 HE-MCS 11 HE-NSS 2 EHT-MCS 13 EHT-NSS 4'
        assert detect_generation(text).generation == WifiGeneration.WIFI_7

        text = 'VHT-MCS 9 VHT-NSS 2 HE-MCS 11 HE-NSS 3'
        result = detect_generation(text)
        assert result.generation == WifiGeneration.WIFI_6
        assert result.nss == 3

    def test_marker_without_numbers(self):
        """Test a marker with missing numeric tokens leaves fields absent."""
        result = detect_generation('HE-MCS')

        assert result.generation == WifiGeneration.WIFI_6
        assert result.mcs is None
        assert result.nss is None
        assert result.guard_interval == GUARD_INTERVAL_NORMAL


class TestGenerationTables:
    """Tests for generation lookup tables."""

    @pytest.mark.parametrize('table', [
        IEEE_STANDARDS,
        GENERATION_CSS_CLASSES,
        GENERATION_ICON_FILENAMES,
    ])
    def test_tables_are_total(self, table):
        assert set(table) == set(WifiGeneration)

    def test_ieee_standards(self):
        assert IEEE_STANDARDS[WifiGeneration.WIFI_1] == '802.11b'
        assert IEEE_STANDARDS[WifiGeneration.WIFI_2] == '802.11a'
        assert IEEE_STANDARDS[WifiGeneration.WIFI_3] == '802.11g'
        assert IEEE_STANDARDS[WifiGeneration.WIFI_4] == '802.11n'
        assert IEEE_STANDARDS[WifiGeneration.WIFI_5] == '802.11ac'
        assert IEEE_STANDARDS[WifiGeneration.WIFI_6] == '802.11ax'
        assert IEEE_STANDARDS[WifiGeneration.WIFI_7] == '802.11be'
        assert IEEE_STANDARDS[WifiGeneration.UNKNOWN] == 'Unknown'

    def test_known_standards_are_unique(self):
        known = [IEEE_STANDARDS[g] for g in WifiGeneration if g.is_known]
        assert len(known) == len(set(known))

    def test_css_classes(self):
        assert get_generation_css_class(WifiGeneration.WIFI_6) == 'wifi-gen-6'
        assert get_generation_css_class(WifiGeneration.UNKNOWN) == 'wifi-disconnected'

    def test_icon_filenames(self):
        assert get_generation_icon_filename(WifiGeneration.WIFI_1) == 'wifi-1.svg'
        assert get_generation_icon_filename(WifiGeneration.WIFI_7) == 'wifi-7.png'
        assert get_generation_icon_filename(WifiGeneration.UNKNOWN) is None

    def test_generations_are_ordered(self):
        assert WifiGeneration.UNKNOWN < WifiGeneration.WIFI_1 < WifiGeneration.WIFI_7
        assert max(WifiGeneration) == WifiGeneration.WIFI_7


class TestGenerationLabels:
    """Tests for display labels."""

    def test_is_known_generation(self):
        assert is_known_generation(WifiGeneration.WIFI_4) is True
        assert is_known_generation(WifiGeneration.UNKNOWN) is False

    @pytest.mark.parametrize('generation', list(WifiGeneration))
    def test_helpers_agree_with_is_known(self, generation):
        """Test every display helper branches on is_known_generation."""
        known = is_known_generation(generation)

        assert (get_standard(generation) is not None) == known
        assert (get_generation_label(generation) != 'WiFi') == known
        assert ('(' in get_generation_description(generation)) == known

    def test_get_standard(self):
        assert get_standard(WifiGeneration.WIFI_5) == '802.11ac'
        assert get_standard(WifiGeneration.UNKNOWN) is None

    def test_label(self):
        assert get_generation_label(WifiGeneration.WIFI_6) == 'WiFi 6'
        assert get_generation_label(WifiGeneration.UNKNOWN) == 'WiFi'

    def test_description(self):
        assert get_generation_description(WifiGeneration.WIFI_4) == 'WiFi 4 (802.11n)'
        assert get_generation_description(WifiGeneration.WIFI_7) == 'WiFi 7 (802.11be)'
        assert get_generation_description(WifiGeneration.UNKNOWN) == 'WiFi'
