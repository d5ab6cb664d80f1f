"""
WEBLINE - Roll-to-Roll Web Tension Simulator
Flask application factory.

Serves the REST API for tension simulations via registered
WeblineService instances.

Usage:
    python app.py              # Development server on http://localhost:5000
    flask run                  # Same, via Flask CLI
"""

__version__ = "0.1.0"

import logging

from flask import Flask, jsonify

from webline.services import WeblineRegistry
from webline.services.simulation import SimulationService
from webline.services.materials import MaterialsService


def create_registry():
    """Build and populate the service registry."""
    registry = WeblineRegistry()
    registry.register(SimulationService())
    registry.register(MaterialsService())
    return registry


def create_app():
    """Application factory for the WEBLINE Flask app."""
    app = Flask(__name__)

    # Zone series are ordered by line position; keep that order in JSON
    app.json.sort_keys = False

    registry = create_registry()

    # Create and register API blueprint (shared + service-owned routes)
    from api.routes import create_api_blueprint
    api = create_api_blueprint(registry)
    app.register_blueprint(api)

    @app.route("/")
    def index():
        return jsonify({
            "name": "WEBLINE",
            "version": __version__,
            "services": registry.list_all(),
        })

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    app = create_app()
    app.run(debug=True, host="127.0.0.1", port=5000)
