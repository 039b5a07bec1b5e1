"""
project: Cavern
module: __init__.py
License: MIT

Flask application factory and core setup.

The web layer is a thin generation-request surface around ``cavern.caves``.
Configuration is sourced from environment variables (optionally loaded from a
``.env`` file) with development defaults. A local ``instance/`` directory
holds runtime files such as the rotating log.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so SECRET_KEY and CAVE_* flags can be supplied without
# exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only deployments can still serve requests; only file logging needs it
    pass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    # Cave generation feature flags (same keys as the environment overrides)
    CAVE_REMOVE_SMALL_REGIONS=_env_flag("CAVE_REMOVE_SMALL_REGIONS", "1"),
    CAVE_CONNECT_REGIONS=_env_flag("CAVE_CONNECT_REGIONS", "1"),
    CAVE_ENABLE_GENERATION_METRICS=_env_flag("CAVE_ENABLE_GENERATION_METRICS", "1"),
)

from cavern.routes.cave_api import bp_cave  # noqa: E402

app.register_blueprint(bp_cave)


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500
