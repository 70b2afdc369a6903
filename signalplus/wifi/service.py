"""
WiFi information service.

Runs iw and nmcli, hands their output to the parsers and merges the results
into connection and scan views. Tool failures (missing binary, permission
denied, timeout) degrade to empty output, never to an exception.
"""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from dataclasses import replace
from typing import Optional

from signalplus.config import IW_TIMEOUT, MAX_NETWORKS, NMCLI_TIMEOUT, WIFI_INTERFACE

from .cache import GenerationCache, get_generation_cache
from .classify import (
    build_connected_info,
    build_scanned_network,
    filter_stale,
    group_by_ssid,
    sort_by_signal_strength,
)
from .constants import NEVER_SEEN, NMCLI_AP_FIELDS, NMCLI_DEVICE_FIELDS
from .models import (
    AccessPointRecord,
    ConnectedInfo,
    DisconnectedInfo,
    LinkInfo,
    ScannedNetwork,
)
from .parsers.iw import parse_iw_last_seen, parse_iw_link, parse_iw_scan_dump
from .parsers.nmcli import (
    find_active_connection,
    find_wifi_device,
    parse_nmcli_access_points,
    parse_nmcli_devices,
)

logger = logging.getLogger(__name__)

# Global service instance
_service_instance: Optional['WifiInfoService'] = None
_service_lock = threading.Lock()


class WifiInfoService:
    """
    Collects WiFi link details and scan results from system tools.

    The generation cache is shared with every other reader in the process;
    this service is its only writer.
    """

    def __init__(
        self,
        interface: Optional[str] = None,
        cache: Optional[GenerationCache] = None,
        iw_timeout: float = IW_TIMEOUT,
        nmcli_timeout: float = NMCLI_TIMEOUT,
    ):
        """
        Initialize the service.

        Args:
            interface: WiFi interface name (e.g., 'wlan0'). Auto-detected
                through nmcli when None.
            cache: Generation cache to update; the shared cache by default.
            iw_timeout: Timeout for iw invocations in seconds.
            nmcli_timeout: Timeout for nmcli invocations in seconds.
        """
        self._interface = interface
        self._cache = cache if cache is not None else get_generation_cache()
        self._iw_timeout = iw_timeout
        self._nmcli_timeout = nmcli_timeout
        self._lock = threading.Lock()
        self._last_scan: Optional[float] = None
        self._last_seen: dict[str, float] = {}

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def cache(self) -> GenerationCache:
        return self._cache

    @property
    def last_scan(self) -> Optional[float]:
        """Monotonic time of the last scan dump that listed any BSS."""
        with self._lock:
            return self._last_scan

    # =========================================================================
    # Tool invocation
    # =========================================================================

    def _run_command(self, cmd: list[str], timeout: float) -> str:
        """Run a tool and return stdout; raises RuntimeError on failure."""
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            raise RuntimeError(f"{cmd[0]} timed out after {timeout}s")
        except FileNotFoundError:
            raise RuntimeError(f"{cmd[0]} not found")
        except OSError as e:
            raise RuntimeError(f"{cmd[0]} could not be started: {e}")

        if result.returncode != 0:
            error_msg = result.stderr.strip() or f"{cmd[0]} returned code {result.returncode}"
            if 'Operation not permitted' in error_msg or 'Permission denied' in error_msg:
                raise RuntimeError(f"{cmd[0]} requires more privileges: {error_msg}")
            raise RuntimeError(f"{' '.join(cmd)} failed: {error_msg}")

        return result.stdout

    def _read_tool_output(self, cmd: list[str], timeout: float) -> str:
        """Run a tool, mapping any failure to empty output."""
        try:
            return self._run_command(cmd, timeout)
        except RuntimeError as e:
            logger.debug(f"Tool output unavailable: {e}")
            return ''

    # =========================================================================
    # Interface
    # =========================================================================

    def detect_interface(self) -> Optional[str]:
        """Configured interface, else the WiFi device nmcli reports."""
        if self._interface:
            return self._interface

        output = self._read_tool_output(
            ['nmcli', '-t', '-f', NMCLI_DEVICE_FIELDS, 'device'],
            self._nmcli_timeout,
        )
        interface = find_wifi_device(parse_nmcli_devices(output))
        if interface is None:
            logger.debug("No WiFi device found")
        return interface

    # =========================================================================
    # iw
    # =========================================================================

    def read_link(self, interface: Optional[str] = None) -> LinkInfo:
        """Parsed 'iw dev <interface> link' output."""
        interface = interface or self.detect_interface()
        if not interface:
            return LinkInfo.empty()

        output = self._read_tool_output(
            ['iw', 'dev', interface, 'link'],
            self._iw_timeout,
        )
        return parse_iw_link(output)

    def refresh_generations(self, interface: Optional[str] = None) -> bool:
        """
        Re-read the kernel scan cache and update the generation cache.

        A dump that lists any BSS also becomes the latest completed scan,
        and its 'last seen' ages become the access points' last-seen times.

        Returns:
            True if the generation cache was replaced.
        """
        interface = interface or self.detect_interface()
        if not interface:
            return False

        output = self._read_tool_output(
            ['iw', 'dev', interface, 'scan', 'dump'],
            self._iw_timeout,
        )
        read_at = time.monotonic()

        generations = parse_iw_scan_dump(output)
        if generations:
            last_seen = {
                bssid: read_at - age_ms / 1000
                for bssid, age_ms in parse_iw_last_seen(output).items()
            }
            with self._lock:
                self._last_scan = read_at
                self._last_seen = last_seen

        return self._cache.update(generations)

    # =========================================================================
    # nmcli
    # =========================================================================

    def request_scan(self) -> bool:
        """Ask NetworkManager for a rescan; returns False if it refused."""
        try:
            self._run_command(['nmcli', 'device', 'wifi', 'rescan'], self._nmcli_timeout)
        except RuntimeError as e:
            # NetworkManager rate-limits rescans, this is routine
            logger.debug(f"Rescan request failed: {e}")
            return False
        return True

    def list_access_points(self, interface: Optional[str] = None) -> list[AccessPointRecord]:
        """
        Access points currently known to NetworkManager.

        last_seen comes from the latest scan dump; access points missing
        from it are NEVER_SEEN.
        """
        cmd = ['nmcli', '-t', '-f', NMCLI_AP_FIELDS, 'device', 'wifi', 'list']
        if interface:
            cmd += ['ifname', interface]

        output = self._read_tool_output(cmd, self._nmcli_timeout)

        with self._lock:
            last_seen = self._last_seen

        return [
            replace(ap, last_seen=last_seen.get(ap.bssid, NEVER_SEEN))
            for ap in parse_nmcli_access_points(output)
        ]

    # =========================================================================
    # Views
    # =========================================================================

    def get_connection_info(self) -> ConnectedInfo | DisconnectedInfo:
        """Merged view of the active link."""
        interface = self.detect_interface()
        if not interface:
            return DisconnectedInfo()

        connection = find_active_connection(self.list_access_points(interface), interface)
        if connection is None:
            return DisconnectedInfo(interface_name=interface)

        return build_connected_info(connection, self.read_link(interface))

    def get_scanned_networks(self) -> list[ScannedNetwork]:
        """Fresh scan results, strongest signal first."""
        access_points = filter_stale(self.list_access_points(self.detect_interface()), self.last_scan)
        networks = sort_by_signal_strength(
            build_scanned_network(ap, self._cache) for ap in access_points
        )
        if MAX_NETWORKS > 0:
            networks = networks[:MAX_NETWORKS]
        return networks

    def get_grouped_networks(self) -> dict[str, list[ScannedNetwork]]:
        """Scan results grouped by SSID, strongest group member first."""
        return group_by_ssid(self.get_scanned_networks())


# =============================================================================
# Module-level functions
# =============================================================================

def get_wifi_info_service(interface: Optional[str] = None) -> WifiInfoService:
    """
    Get or create the global WiFi info service.

    Args:
        interface: WiFi interface name; defaults to SIGNALPLUS_INTERFACE.

    Returns:
        WifiInfoService instance.
    """
    global _service_instance

    with _service_lock:
        if _service_instance is None:
            _service_instance = WifiInfoService(interface or WIFI_INTERFACE)
        return _service_instance


def reset_wifi_info_service() -> None:
    """Reset the global service instance."""
    global _service_instance

    with _service_lock:
        _service_instance = None
