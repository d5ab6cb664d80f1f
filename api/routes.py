"""
Flask API routes for WEBLINE.

Shared endpoints (owned by no single service):
  GET  /api/services          - metadata of every registered service
  GET  /api/services/<id>     - metadata of one service
  GET  /api/constants         - model constants used by the engine

Service-owned endpoints are mounted by the registry through each
service's register_routes() (see webline/services/*).
"""

from flask import Blueprint, jsonify

from webline import constants


def create_api_blueprint(registry):
    """
    Build the /api blueprint for a populated service registry.

    Parameters
    ----------
    registry : WeblineRegistry
        Registry whose services mount their own endpoints.

    Returns
    -------
    flask.Blueprint
    """
    api = Blueprint("api", __name__, url_prefix="/api")

    @api.route("/services", methods=["GET"])
    def list_services():
        """Return metadata for all registered services."""
        return jsonify(registry.list_all())

    @api.route("/services/<service_id>", methods=["GET"])
    def get_service(service_id):
        """Return metadata for a single service."""
        service = registry.get(service_id)
        if service is None:
            return jsonify({"error": "Service not found"}), 404
        return jsonify(service.metadata())

    @api.route("/constants", methods=["GET"])
    def get_constants():
        """Return the model constants used by the engine."""
        return jsonify({
            "station_types": list(constants.STATION_TYPES),
            "dt": constants.DT,
            "total_time": constants.TOTAL_TIME,
            "num_steps": constants.num_steps(),
            "nominal_line_speed": constants.NOMINAL_LINE_SPEED,
            "ramp_time": constants.RAMP_TIME,
            "base_damping": constants.BASE_DAMPING,
            "dancer_damping_factor": constants.DANCER_DAMPING_FACTOR,
            "min_zone_length_m": constants.MIN_ZONE_LENGTH_M,
            "defaults": {
                "effective_axial_stiffness":
                    constants.DEFAULT_EFFECTIVE_AXIAL_STIFFNESS,
                "base_strain": constants.DEFAULT_BASE_STRAIN,
                "strain_step": constants.DEFAULT_STRAIN_STEP,
                "total_line_length": constants.DEFAULT_LINE_LENGTH_M,
            },
        })

    registry.mount(api)

    return api
