"""Health check endpoints for monitoring worker status"""

import os

import psutil
from flask import Blueprint, jsonify

import state

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Server status, memory usage and live game counts.
    Used by the load balancer health check.
    """
    try:
        process = psutil.Process(os.getpid())
        memory_mb = process.memory_info().rss / 1024 / 1024

        with state.lock:
            stats = state.registry.stats()
            connections = state.sessions.connection_count()

        return jsonify({
            "status": "healthy",
            "pid": os.getpid(),
            "memory_mb": round(memory_mb, 2),
            "active_rooms": stats["rooms"],
            "active_games": stats["playing"],
            "total_players": stats["participants"],
            "connections": connections,
            "num_threads": process.num_threads()
        }), 200

    except Exception as e:
        return jsonify({
            "status": "unhealthy",
            "error": str(e)
        }), 500


@health_bp.route('/metrics', methods=['GET'])
def metrics():
    """
    Detailed metrics endpoint for debugging
    """
    try:
        process = psutil.Process(os.getpid())
        memory_info = process.memory_info()

        with state.lock:
            stats = state.registry.stats()
            queues = {
                game_type: state.matchmaking.queue_size(game_type)
                for game_type in state.registry.handlers
            }
            connections = state.sessions.connection_count()

        return jsonify({
            "process": {
                "pid": os.getpid(),
                "cpu_percent": process.cpu_percent(interval=0.1),
                "num_threads": process.num_threads(),
            },
            "memory": {
                "rss_mb": round(memory_info.rss / 1024 / 1024, 2),
                "vms_mb": round(memory_info.vms / 1024 / 1024, 2),
                "percent": process.memory_percent()
            },
            "rooms": stats,
            "queues": queues,
            "connections": connections,
        }), 200

    except Exception as e:
        return jsonify({
            "error": str(e)
        }), 500
