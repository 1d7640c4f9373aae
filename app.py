# © 2024–2025 Harnisch LLC. All Rights Reserved.
# Licensed exclusively for use by St. Edward Church & School (Nashville, TN).
# Unauthorized use, distribution, or modification is prohibited.

#!/usr/bin/env python3
"""
Sheet Calendar Sync - web service with "Run Sync Now" and duplicate cleanup
"""
import os
import logging
import threading
from datetime import datetime
from typing import Dict
from flask import Flask, jsonify, request

import config
from sync import DuplicateCollapser, SyncEngine
from sync.errors import SyncError
from utils.logger import setup_logging
from utils.timezone import get_local_time

setup_logging(config.LOG_LEVEL, config.STRUCTURED_LOGGING)
logger = logging.getLogger(__name__)

SERVICE_NAME = "sheet-calendar-sync"
SERVICE_VERSION = "1.0.0"

# Initialize Flask
app = Flask(__name__)


@app.after_request
def add_security_headers(response):
    """Add security headers to all responses"""
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
    response.headers['Server'] = 'Sheet Calendar Sync'
    return response


# Global components - initialized on first request
sync_engine = None
scheduler = None
auth_manager = None
sync_thread = None
init_error = None

_components_initialized = False
_init_lock = threading.Lock()


def initialize_components():
    """Build the engine and scheduler from the environment"""
    global sync_engine, scheduler, auth_manager, init_error

    from auth import GoogleAuth
    from components import build_engine
    from sync.scheduler import SyncScheduler

    sync_config = config.load_sync_config()
    auth_manager = GoogleAuth()
    sync_engine = build_engine(sync_config, auth_manager=auth_manager)
    logger.info("✅ Sync engine initialized")

    scheduler = SyncScheduler(sync_engine, config.SYNC_INTERVAL_MIN, config.MIN_SYNC_INTERVAL_SECONDS)
    if config.SCHEDULER_ENABLED:
        scheduler.start()
        logger.info("✅ Scheduler started")
    init_error = None


def ensure_components_initialized():
    """Initialize components on first request to avoid startup delays"""
    global _components_initialized, init_error
    with _init_lock:
        if _components_initialized:
            return
        try:
            initialize_components()
            _components_initialized = True
            logger.info("✅ Components initialized on first request")
        except SyncError as e:
            init_error = f"{type(e).__name__}: {e}"
            logger.error(f"Failed to initialize components: {init_error}")


def _not_ready():
    return jsonify({"error": init_error or "Sync engine not initialized"}), 500


@app.route('/health')
def health_check():
    """Lightweight health check"""
    return jsonify({
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION
    }), 200


@app.route('/status')
def get_status():
    """Get current system status"""
    ensure_components_initialized()
    if not sync_engine:
        return _not_ready()

    status = sync_engine.get_status()
    status["authenticated"] = auth_manager.is_authenticated() if auth_manager else False
    status["current_time"] = get_local_time(sync_engine.config.timezone).isoformat()
    if scheduler:
        status["scheduler"] = scheduler.get_status()
    return jsonify(status)


def _json_flag(body: Dict, name: str) -> bool:
    """JSON true or the strings "true" and "1"; anything else is false"""
    value = body.get(name, False)
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1')
    return value is True


@app.route('/sync', methods=['POST'])
def trigger_sync():
    """Run Sync Now; a dry run reports planned changes synchronously"""
    global sync_thread

    ensure_components_initialized()
    if not sync_engine or not scheduler:
        return _not_ready()

    body = request.get_json(silent=True) or {}
    dry_run = _json_flag(body, 'dry_run')

    if dry_run:
        preview = SyncEngine(sync_engine.config.with_overrides(dry_run=True),
                             sync_engine.row_source, sync_engine.provider)
        result = preview.sync_calendars()
        return jsonify(result), 200 if result.get('success') else 500

    if scheduler.run_lock.locked():
        return jsonify({
            "status": "already_running",
            "message": "Sync is already in progress",
            "progress": sync_engine.sync_state.get('progress', 0)
        }), 409

    sync_thread = threading.Thread(target=_run_sync_background, daemon=True)
    sync_thread.start()

    return jsonify({
        "status": "started",
        "message": "Sync started in background",
        "check_progress": "/status"
    }), 202


def _run_sync_background():
    """Run sync in background thread"""
    logger.info("🔄 Background sync started")
    result = scheduler.run_once(trigger='manual')
    if result.get('skipped'):
        logger.info(f"Background sync skipped: {result.get('error')}")


@app.route('/cleanup-duplicates', methods=['POST'])
def cleanup_duplicates():
    """Delete duplicate free-block events, keeping the first per title and day"""
    ensure_components_initialized()
    if not sync_engine or not scheduler:
        return _not_ready()

    body = request.get_json(silent=True) or {}
    dry_run = _json_flag(body, 'dry_run')
    cleanup = DuplicateCollapser(sync_engine.config, sync_engine.row_source, sync_engine.provider,
                                 dry_run=dry_run)

    # Deletions share the calendar with sync runs
    if not dry_run and not scheduler.run_lock.acquire(blocking=False):
        return jsonify({
            "status": "already_running",
            "message": "Sync is in progress, try the cleanup again later"
        }), 409

    try:
        result = cleanup.cleanup_duplicates()
    except SyncError as e:
        logger.error(f"❌ Duplicate cleanup failed: {e}")
        return jsonify({"success": False, "error": str(e), "error_type": type(e).__name__}), 500
    finally:
        if not dry_run:
            scheduler.run_lock.release()
    return jsonify(result)


@app.route('/history')
def get_history():
    """Get sync history"""
    ensure_components_initialized()
    if not scheduler:
        return _not_ready()

    hours = request.args.get('hours', 24, type=int)
    limit = request.args.get('limit', 10, type=int)
    return jsonify({
        "statistics": scheduler.history.get_statistics(hours),
        "recent": scheduler.history.get_recent(limit)
    })


if __name__ == '__main__':
    port = int(os.environ.get('PORT', config.PORT))
    logger.info(f"Starting sheet calendar sync service on port {port}")
    app.run(host='0.0.0.0', port=port)
