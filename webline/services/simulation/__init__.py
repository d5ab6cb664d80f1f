"""
Tension Simulation Service for WEBLINE.

Implements the WeblineService interface for the web tension simulator.
This service turns a request payload into validated engine inputs, runs
the TensionEngine pipeline, and owns all simulation endpoints under
/api/simulation/*.

Endpoints:
    POST /api/simulation/run          - full run: time axis, tension and strain per zone
    POST /api/simulation/zones        - zones, tension groups and set-points (no integration)
    GET  /api/simulation/default-line - default station layout

Material selection (in priority order):
    material_id (+ thickness_um, width_m) - catalog entry, EA = E * t * w
    material                              - explicit parameters, defaults for missing keys
    neither                               - documented defaults

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import logging

from flask import jsonify, request

from webline.services import WeblineService
from webline.config import (
    ConfigError,
    MaterialParameters,
    effective_axial_stiffness,
    line_length_from_config,
    material_parameters_from_config,
    parse_stations,
)
from webline.danger import find_dangerous_zones
from webline.engine import TensionConfig, TensionEngine
from webline.grouping import tension_groups
from data.lines import get_default_line
from data.materials import (
    DEFAULT_THICKNESS_UM,
    DEFAULT_WIDTH_M,
    get_material_by_id,
)

log = logging.getLogger(__name__)


def _flag(raw, name):
    """JSON boolean; absent or null means False."""
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise ConfigError("{} must be true or false".format(name))
    return raw


def resolve_material(config):
    """
    Build MaterialParameters from a request payload.

    A catalog material_id wins over an explicit material object. For a
    catalog entry, an explicit 'material' object may still override
    individual values (e.g. a custom max_strain).
    """
    material_id = config.get("material_id")
    raw = config.get("material")

    if material_id is None:
        return material_parameters_from_config(raw)

    entry = get_material_by_id(material_id)
    if entry is None:
        raise ConfigError("Unknown material '{}'".format(material_id))

    ea = effective_axial_stiffness(
        entry["E"],
        config.get("thickness_um", DEFAULT_THICKNESS_UM),
        config.get("width_m", DEFAULT_WIDTH_M),
    )
    merged = {
        "effective_axial_stiffness": ea,
        "base_strain": entry["base_strain"],
        "strain_step": entry["strain_step"],
        "max_strain": entry["max_strain"],
    }
    if raw is not None:
        if not isinstance(raw, dict):
            raise ConfigError("material must be an object")
        overrides = {k: v for k, v in raw.items() if v is not None}
        if "EA" in overrides:
            overrides.setdefault("effective_axial_stiffness",
                                 overrides.pop("EA"))
        merged.update(overrides)
    return material_parameters_from_config(merged)


class SimulationService(WeblineService):
    """
    Web tension simulation service.

    Runs the five-stage pipeline (topology, grouping, parameters,
    integration, aggregation) and adds danger detection on top of the
    raw output contract.
    """

    id = "simulation"
    name = "Tension Simulation"
    description = "Per-zone tension and strain of a moving web"
    endpoints = (
        ("POST", "/api/simulation/run"),
        ("POST", "/api/simulation/zones"),
        ("GET", "/api/simulation/default-line"),
    )

    def validate(self, config):
        """Validate a simulation request payload."""
        if config is None or not isinstance(config, dict):
            raise ConfigError("Request body must be JSON")

        raw_stations = config.get("stations")
        if raw_stations is None:
            raw_stations = get_default_line()["stations"]

        return {
            "stations": parse_stations(raw_stations),
            "total_line_length": line_length_from_config(
                config.get("total_line_length")),
            "material": resolve_material(config),
            "verbose": _flag(config.get("verbose"), "verbose"),
        }

    def _engine(self, config):
        return TensionEngine(TensionConfig(
            stations=config["stations"],
            total_line_length=config["total_line_length"],
            material=config["material"],
        ))

    def compute(self, config, cancel_check=None):
        """
        Run the full simulation.

        Parameters
        ----------
        config : dict
            From validate().
        cancel_check : callable, optional
            Cooperative cancellation, evaluated once per time step.

        Returns
        -------
        dict
            Output contract (time, tension_series, strain_series) plus
            zones, final values, danger list and the material used.
        """
        material = config["material"]
        result = self._engine(config).run(cancel_check=cancel_check)

        if config.get("verbose"):
            response = result.to_verbose_response()
        else:
            response = result.to_api_response()
            response["zones"] = [z.to_dict() for z in result.zones]

        response["final"] = result.final_values()
        response["material"] = material.to_dict()
        response["danger"] = find_dangerous_zones(
            result, material.max_strain)

        if response["danger"]:
            log.info("Simulation flagged %d zone(s) above max_strain=%s",
                     len(response["danger"]), material.max_strain)
        return response

    def compute_zones(self, config):
        """Zones, tension groups and set-points without time integration."""
        zones, zone_parameters = self._engine(config).prepare()
        assignments = [(zp.group_index, zp.local_index)
                       for zp in zone_parameters]
        return {
            "zones": [z.to_dict() for z in zones],
            "zone_parameters": [zp.to_dict() for zp in zone_parameters],
            "groups": tension_groups(zones, assignments),
            "material": config["material"].to_dict(),
        }

    def register_routes(self, bp):
        """Register simulation API endpoints on the given blueprint."""
        service = self

        @bp.route("/simulation/run", methods=["POST"])
        def simulation_run():
            return service.handle(request.get_json(silent=True))

        @bp.route("/simulation/zones", methods=["POST"])
        def simulation_zones():
            return service.handle(request.get_json(silent=True),
                                  service.compute_zones)

        @bp.route("/simulation/default-line", methods=["GET"])
        def simulation_default_line():
            line = get_default_line()
            line["material"] = MaterialParameters.defaults().to_dict()
            return jsonify(line)
