"""
wifiwatch - Heuristic WiFi attack monitor

Flask application exposing the attack monitor to a presentation layer.
"""

from __future__ import annotations

import sys
import time

from flask import Flask, jsonify, Response

import config
from wifiwatch import get_attack_monitor

_started_at = time.time()


def create_app() -> Flask:
    """Create the Flask application and register blueprints."""
    from routes import register_blueprints

    app = Flask(__name__)
    register_blueprints(app)

    @app.route('/health')
    def health_check() -> Response:
        monitor = get_attack_monitor()
        return jsonify({
            'status': 'healthy',
            'version': config.VERSION,
            'uptime_seconds': round(time.time() - _started_at, 1),
            'monitor': monitor.stats,
        })

    return app


def main() -> None:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description='wifiwatch - Heuristic WiFi attack monitor',
        epilog='Environment variables: WIFIWATCH_HOST, WIFIWATCH_PORT, WIFIWATCH_DEBUG, WIFIWATCH_LOG_LEVEL'
    )
    parser.add_argument(
        '-p', '--port',
        type=int,
        default=config.PORT,
        help=f'Port to run server on (default: {config.PORT})'
    )
    parser.add_argument(
        '-H', '--host',
        default=config.HOST,
        help=f'Host to bind to (default: {config.HOST})'
    )
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        default=config.DEBUG,
        help='Enable debug mode'
    )
    args = parser.parse_args()

    config.configure_logging()

    print("=" * 50)
    print("  wifiwatch // WiFi attack monitor")
    print("=" * 50)
    print()
    print(f"POST scan snapshots to http://localhost:{args.port}/attacks/snapshot")
    print("Press Ctrl+C to stop")
    print()

    app = create_app()
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)


if __name__ == '__main__':
    sys.exit(main())
