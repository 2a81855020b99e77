# routes/health_routes.py
import time
from datetime import datetime, timezone

import psutil
from flask import Blueprint, jsonify, current_app

health_bp = Blueprint('health_bp', __name__)


def process_uptime():
    """Seconds since this server process started."""
    return time.time() - psutil.Process().create_time()


@health_bp.route('', methods=['GET'])
def health_check():
    """
    Liveness probe.
    ---
    tags:
      - Health
    responses:
      200:
        description: Service is up.
    """
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'uptime': round(process_uptime(), 3),
        'environment': current_app.config.get('ENVIRONMENT', 'development'),
    })
