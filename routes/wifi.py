"""
WiFi link API.

Exposes the active link's generation and modulation details, scanned
networks grouped by SSID, and the advertised-generation cache.
"""

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from signalplus.config import SCAN_ON_REQUEST
from signalplus.logging import get_logger
from signalplus.wifi import (
    ScannedNetwork,
    get_generation_description,
    get_generation_label,
    get_signal_quality,
    get_signal_quality_from_percent,
    get_speed_quality,
    get_wifi_info_service,
    is_connected,
)

logger = get_logger('signalplus.wifi')

wifi_bp = Blueprint('wifi', __name__, url_prefix='/api/wifi')


def _network_to_dict(network: ScannedNetwork) -> dict:
    data = network.to_dict()
    data['generation_label'] = get_generation_label(network.generation)
    data['signal_quality'] = str(get_signal_quality_from_percent(network.signal_percent))
    return data


@wifi_bp.route('/link', methods=['GET'])
def get_link() -> Response:
    """Get the active link."""
    try:
        info = get_wifi_info_service().get_connection_info()

        data = info.to_dict()
        if is_connected(info):
            data['generation_label'] = get_generation_label(info.generation)
            data['generation_description'] = get_generation_description(info.generation)
            data['signal_quality'] = str(get_signal_quality(info.signal_strength))
            data['speed_quality'] = str(get_speed_quality(info.max_bitrate))

        return jsonify({
            'status': 'success',
            'link': data,
        })
    except Exception as e:
        logger.error(f"Error reading link info: {e}")
        return jsonify({
            'status': 'error',
            'message': str(e)
        }), 500


@wifi_bp.route('/networks', methods=['GET'])
def get_networks() -> Response:
    """Get scanned networks grouped by SSID."""
    try:
        groups = get_wifi_info_service().get_grouped_networks()

        return jsonify({
            'status': 'success',
            'count': sum(len(members) for members in groups.values()),
            'networks': {
                ssid: [_network_to_dict(n) for n in members]
                for ssid, members in groups.items()
            },
        })
    except Exception as e:
        logger.error(f"Error listing networks: {e}")
        return jsonify({
            'status': 'error',
            'message': str(e)
        }), 500


@wifi_bp.route('/scan', methods=['POST'])
def scan() -> Response:
    """Request a rescan and refresh the generation cache."""
    try:
        service = get_wifi_info_service()

        scan_requested = service.request_scan() if SCAN_ON_REQUEST else False
        cache_updated = service.refresh_generations()

        return jsonify({
            'status': 'success',
            'scan_requested': scan_requested,
            'cache_updated': cache_updated,
            'cached_count': len(service.cache),
        })
    except Exception as e:
        logger.error(f"Error refreshing scan: {e}")
        return jsonify({
            'status': 'error',
            'message': str(e)
        }), 500


@wifi_bp.route('/generations', methods=['GET'])
def get_generations() -> Response:
    """Get the cached BSSID -> generation mapping."""
    try:
        snapshot = get_wifi_info_service().cache.snapshot()

        return jsonify({
            'status': 'success',
            'count': len(snapshot),
            'generations': {bssid: int(gen) for bssid, gen in snapshot.items()},
        })
    except Exception as e:
        logger.error(f"Error reading generation cache: {e}")
        return jsonify({
            'status': 'error',
            'message': str(e)
        }), 500
