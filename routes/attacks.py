"""
WiFi attack monitor API routes.

Accepts scan snapshots and compass headings from the host and exposes
channel statistics, attack events and direction tracking state as JSON.
"""

from __future__ import annotations

import logging
import time

from flask import Blueprint, jsonify, request

from wifiwatch import get_attack_monitor

logger = logging.getLogger(__name__)

attacks_bp = Blueprint('attacks', __name__, url_prefix='/attacks')


# =============================================================================
# Snapshot Feed
# =============================================================================

@attacks_bp.route('/snapshot', methods=['POST'])
def ingest_snapshot():
    """
    Ingest one scan snapshot.

    Request body:
        networks: List of scan results (bssid, ssid, rssi, frequency, capabilities)
        timestamp: Optional snapshot time in seconds since epoch

    Returns:
        Channel statistics and the events created by this snapshot.
    """
    data = request.get_json(silent=True) or {}
    networks = data.get('networks', [])
    if not isinstance(networks, list):
        return jsonify({'error': 'networks must be a list'}), 400

    timestamp = data.get('timestamp')
    if timestamp is not None:
        try:
            timestamp = float(timestamp)
        except (TypeError, ValueError):
            return jsonify({'error': 'Invalid timestamp'}), 400

    monitor = get_attack_monitor()
    try:
        new_events = monitor.ingest_scan_results(networks, now=timestamp)
    except (ValueError, AttributeError) as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({
        'status': 'ok',
        'networks': len(networks),
        'channel_stats': [s.to_dict() for s in monitor.channel_stats],
        'new_events': [e.to_dict(active_window=monitor.active_window) for e in new_events],
    })


# =============================================================================
# Data Endpoints
# =============================================================================

@attacks_bp.route('/networks', methods=['GET'])
def get_networks():
    """Get the networks of the latest snapshot."""
    monitor = get_attack_monitor()
    return jsonify([n.to_dict() for n in monitor.networks])


@attacks_bp.route('/channels', methods=['GET'])
def get_channels():
    """
    Get per-channel statistics of the latest snapshot.

    Query params:
        suspicious: Only channels with suspicious activity (true/false)
    """
    monitor = get_attack_monitor()
    stats = monitor.channel_stats

    if request.args.get('suspicious') == 'true':
        stats = [s for s in stats if s.has_suspicious_activity]

    return jsonify({
        'channels': [s.to_dict() for s in stats],
        'highest_threat_level': monitor.highest_threat_level().display_name,
    })


@attacks_bp.route('/events', methods=['GET'])
def get_events():
    """
    Get attack events, newest last.

    Query params:
        limit: Maximum number of results
        type: Filter by attack type ('deauth', 'evil_twin', 'beacon_flood', 'unknown')
    """
    monitor = get_attack_monitor()
    events = monitor.events

    attack_type = request.args.get('type')
    if attack_type:
        events = [e for e in events if e.attack_type.value == attack_type]

    # Apply limit
    limit = request.args.get('limit')
    if limit:
        try:
            limit = int(limit)
            events = events[-limit:] if limit > 0 else []
        except ValueError:
            pass

    return jsonify({
        'events': [e.to_dict(active_window=monitor.active_window) for e in events],
        'active_count': monitor.active_attack_count(),
    })


# =============================================================================
# Direction Tracking
# =============================================================================

@attacks_bp.route('/orientation', methods=['POST'])
def update_orientation():
    """
    Feed the latest compass heading.

    Request body:
        azimuth: Heading in degrees
    """
    data = request.get_json(silent=True) or {}
    try:
        azimuth = float(data['azimuth'])
    except (KeyError, TypeError, ValueError):
        return jsonify({'error': 'Invalid azimuth'}), 400

    monitor = get_attack_monitor()
    monitor.update_orientation(azimuth)
    return jsonify({
        'azimuth': monitor.direction.azimuth,
        'cardinal': monitor.direction.cardinal_direction(),
    })


@attacks_bp.route('/track/start', methods=['POST'])
def start_tracking():
    """
    Start direction tracking of one station.

    Request body:
        bssid: Station to track
    """
    data = request.get_json(silent=True) or {}
    bssid = str(data.get('bssid') or '').strip()
    if not bssid:
        return jsonify({'error': 'bssid is required'}), 400

    monitor = get_attack_monitor()
    monitor.start_tracking(bssid)
    return jsonify({'status': 'tracking', 'bssid': monitor.direction.tracked_bssid})


@attacks_bp.route('/track/stop', methods=['POST'])
def stop_tracking():
    """Stop direction tracking."""
    get_attack_monitor().stop_tracking()
    return jsonify({'status': 'stopped'})


@attacks_bp.route('/direction', methods=['GET'])
def get_direction():
    """Get the direction profile and bearing estimates for the tracked station."""
    monitor = get_attack_monitor()
    direction = monitor.direction
    now = time.time()
    return jsonify({
        'tracking': direction.tracked_bssid,
        'azimuth': direction.azimuth,
        'cardinal': direction.cardinal_direction(),
        'profile': monitor.current_direction_profile(now).to_dict(),
        'bearing': monitor.estimate_bearing(now),
    })


# =============================================================================
# Status / Maintenance
# =============================================================================

@attacks_bp.route('/status', methods=['GET'])
def get_status():
    """Get monitor statistics."""
    return jsonify(get_attack_monitor().stats)


@attacks_bp.route('/clear', methods=['POST'])
def clear_data():
    """Clear all histories, statistics, events and direction readings."""
    get_attack_monitor().clear_all()
    return jsonify({'status': 'cleared'})
