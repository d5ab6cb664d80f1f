"""
Material catalog service.

GET  /api/materials                 - list all catalog materials
GET  /api/materials/<id>            - one material
POST /api/materials/<id>/stiffness  - EA for a given thickness and width

IMPORTANT: No unicode in code or messages (Windows charmap).
"""

from flask import jsonify, request

from webline.services import WeblineService
from webline.config import ConfigError, effective_axial_stiffness
from data.materials import (
    DEFAULT_THICKNESS_UM,
    DEFAULT_WIDTH_M,
    get_all_materials,
    get_material_by_id,
)


class MaterialsService(WeblineService):

    id = "materials"
    name = "Material Catalog"
    description = "Web materials with modulus and working strain window"
    endpoints = (
        ("GET", "/api/materials"),
        ("GET", "/api/materials/<material_id>"),
        ("POST", "/api/materials/<material_id>/stiffness"),
    )

    def validate(self, config):
        """Validate a stiffness request: material_id, thickness_um, width_m."""
        if config is None or not isinstance(config, dict):
            raise ConfigError("Request body must be JSON")
        material = get_material_by_id(config.get("material_id"))
        if material is None:
            raise ConfigError(
                "Unknown material '{}'".format(config.get("material_id")))
        thickness = config.get("thickness_um", DEFAULT_THICKNESS_UM)
        width = config.get("width_m", DEFAULT_WIDTH_M)
        # Raises ConfigError on bad thickness/width
        effective_axial_stiffness(material["E"], thickness, width)
        return {
            "material": material,
            "thickness_um": float(thickness),
            "width_m": float(width),
        }

    def compute(self, config):
        """Effective axial stiffness of a catalog material."""
        material = config["material"]
        ea = effective_axial_stiffness(
            material["E"], config["thickness_um"], config["width_m"])
        return {
            "material_id": material["id"],
            "thickness_um": config["thickness_um"],
            "width_m": config["width_m"],
            "effective_axial_stiffness": ea,
        }

    def register_routes(self, bp):
        service = self

        @bp.route("/materials", methods=["GET"])
        def materials_list():
            return jsonify(get_all_materials())

        @bp.route("/materials/<material_id>", methods=["GET"])
        def materials_get(material_id):
            material = get_material_by_id(material_id)
            if material is None:
                return jsonify({"error": "Material not found"}), 404
            return jsonify(material)

        @bp.route("/materials/<material_id>/stiffness", methods=["POST"])
        def materials_stiffness(material_id):
            if get_material_by_id(material_id) is None:
                return jsonify({"error": "Material not found"}), 404
            data = request.get_json(silent=True) or {}
            if not isinstance(data, dict):
                return jsonify({"error": "Request body must be JSON"}), 400
            payload = dict(data)
            payload["material_id"] = material_id
            return service.handle(payload)
