"""
Tests for Flask API endpoints.

Integration tests that validate the REST API returns correct status codes,
JSON structure, and physically reasonable values.
"""

import json
import pytest

from webline.services import WeblineRegistry
from webline.services.materials import MaterialsService
from webline.services.simulation import SimulationService


SINGLE_ZONE = [
    {"id": "unwind", "type": "UNWIND", "position": 0},
    {"id": "rewind", "type": "REWIND", "position": 100},
]


class TestRegistryEndpoints:

    def test_index(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["name"] == "WEBLINE"

    def test_list_services(self, client):
        resp = client.get("/api/services")
        assert resp.status_code == 200
        ids = [s["id"] for s in resp.get_json()]
        assert ids == ["simulation", "materials"]

    def test_service_by_id(self, client):
        resp = client.get("/api/services/simulation")
        assert resp.status_code == 200
        assert "POST /api/simulation/run" in resp.get_json()["endpoints"]

    def test_listed_endpoints_are_mounted(self, app, client):
        """Every endpoint a service lists is a real route of the app."""
        rules = {}
        for rule in app.url_map.iter_rules():
            rules.setdefault(rule.rule, set()).update(rule.methods)
        for service in client.get("/api/services").get_json():
            for endpoint in service["endpoints"]:
                method, path = endpoint.split(" ")
                assert method in rules[path], endpoint

    def test_service_not_found(self, client):
        resp = client.get("/api/services/nonexistent")
        assert resp.status_code == 404

    def test_constants(self, client):
        data = client.get("/api/constants").get_json()
        assert data["num_steps"] == 601
        assert data["dt"] == 0.01
        assert data["defaults"]["effective_axial_stiffness"] == 2e5


class TestSimulationRun:

    def test_single_zone(self, client):
        payload = {"stations": SINGLE_ZONE, "total_line_length": 10}
        resp = client.post(
            "/api/simulation/run",
            data=json.dumps(payload),
            content_type="application/json",
        )
        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["time"]) == 601
        assert data["time"][0] == 0.0
        assert data["time"][-1] == 6.0
        assert list(data["tension_series"].keys()) == ["unwind-rewind"]
        assert data["tension_series"]["unwind-rewind"][-1] == 30.0
        assert data["strain_series"]["unwind-rewind"][-1] == \
            pytest.approx(1.5e-4, rel=1e-9)
        assert data["final"]["unwind-rewind"]["tension"] == 30.0
        assert data["danger"] == []

    def test_default_line_when_stations_missing(self, client):
        resp = client.post("/api/simulation/run", json={})
        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["zones"]) == 9
        assert list(data["tension_series"].keys()) == \
            [z["id"] for z in data["zones"]]

    def test_catalog_material_flags_danger(self, client):
        """Copper foil on the default line: the last zones run above
        max_strain because the set-point rises 5e-5 per zone."""
        resp = client.post("/api/simulation/run", json={
            "material_id": "copper_foil",
            "thickness_um": 70,
            "width_m": 0.12,
        })
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["material"]["effective_axial_stiffness"] == \
            pytest.approx(9.24e5)
        flagged = {d["index"] for d in data["danger"]}
        assert {7, 8, 9} <= flagged
        assert not flagged & {1, 2, 3, 4, 5}

    def test_explicit_material(self, client):
        resp = client.post("/api/simulation/run", json={
            "stations": SINGLE_ZONE,
            "material": {"effective_axial_stiffness": 1e5,
                         "base_strain": 2e-4},
        })
        data = resp.get_json()
        assert data["tension_series"]["unwind-rewind"][-1] == 20.0

    def test_verbose(self, client):
        resp = client.post("/api/simulation/run", json={
            "stations": SINGLE_ZONE, "verbose": True})
        data = resp.get_json()
        assert "zone_parameters" in data
        assert "groups" in data
        assert data["config"]["total_line_length"] == 10.0

    @pytest.mark.parametrize("verbose", ["false", "true", 1, 0, []])
    def test_verbose_must_be_boolean(self, client, verbose):
        resp = client.post("/api/simulation/run", json={
            "stations": SINGLE_ZONE, "verbose": verbose})
        assert resp.status_code == 400
        assert "verbose" in resp.get_json()["error"]

    def test_verbose_false_and_null(self, client):
        for verbose in (False, None):
            data = client.post("/api/simulation/run", json={
                "stations": SINGLE_ZONE, "verbose": verbose}).get_json()
            assert "zone_parameters" not in data

    def test_catalog_material_ea_override(self, client):
        """The short EA key overrides a catalog stiffness just like the
        long one does."""
        for key in ("EA", "effective_axial_stiffness"):
            resp = client.post("/api/simulation/run", json={
                "stations": SINGLE_ZONE,
                "material_id": "copper_foil",
                "material": {key: 1e5},
            })
            assert resp.status_code == 200
            data = resp.get_json()
            assert data["material"]["effective_axial_stiffness"] == 1e5
            assert data["material"]["max_strain"] == 3e-4

    def test_station_id_with_separator_rejected(self, client):
        """Ids "a-b", "c", "a", "b-c" would give two zones named a-b-c."""
        resp = client.post("/api/simulation/run", json={"stations": [
            {"id": "a-b", "type": "UNWIND", "position": 0},
            {"id": "c", "type": "ROLLER", "position": 10},
            {"id": "a", "type": "ROLLER", "position": 20},
            {"id": "b-c", "type": "REWIND", "position": 30},
        ]})
        assert resp.status_code == 400
        assert "must not contain '-'" in resp.get_json()["error"]

    def test_not_json(self, client):
        resp = client.post("/api/simulation/run", data="stations",
                           content_type="text/plain")
        assert resp.status_code == 400

    def test_unknown_station_type(self, client):
        resp = client.post("/api/simulation/run", json={
            "stations": [{"id": "a", "type": "SPINDLE", "position": 0}]})
        assert resp.status_code == 400
        assert "unknown type" in resp.get_json()["error"]

    def test_bad_line_length(self, client):
        resp = client.post("/api/simulation/run", json={
            "stations": SINGLE_ZONE, "total_line_length": 0})
        assert resp.status_code == 400

    def test_unknown_material(self, client):
        resp = client.post("/api/simulation/run", json={
            "material_id": "unobtainium"})
        assert resp.status_code == 400

    def test_malformed_material(self, client):
        resp = client.post("/api/simulation/run", json={
            "material": {"base_strain": "lots"}})
        assert resp.status_code == 400


class TestSimulationZones:

    def test_pitch_groups(self, client):
        resp = client.post("/api/simulation/zones", json={"stations": [
            {"id": "u", "type": "UNWIND", "position": 0},
            {"id": "p", "type": "PITCH", "position": 50},
            {"id": "w", "type": "REWIND", "position": 100},
        ]})
        assert resp.status_code == 200
        data = resp.get_json()
        assert [z["id"] for z in data["zones"]] == ["u-p", "p-w"]
        assert [g["group_index"] for g in data["groups"]] == [0, 1]
        targets = [p["target_strain"] for p in data["zone_parameters"]]
        assert targets == [1.5e-4, 1.5e-4]
        assert "time" not in data

    def test_default_line(self, client):
        resp = client.get("/api/simulation/default-line")
        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["stations"]) == 10
        assert data["material"]["base_strain"] == 1.5e-4


class TestMaterialsEndpoints:

    def test_list(self, client):
        resp = client.get("/api/materials")
        assert resp.status_code == 200
        assert len(resp.get_json()) == 6

    def test_get(self, client):
        resp = client.get("/api/materials/separator")
        assert resp.status_code == 200
        assert resp.get_json()["max_strain"] == 1.2e-3

    def test_not_found(self, client):
        assert client.get("/api/materials/nope").status_code == 404

    def test_stiffness(self, client):
        resp = client.post("/api/materials/copper_foil/stiffness", json={
            "thickness_um": 70, "width_m": 0.12})
        assert resp.status_code == 200
        assert resp.get_json()["effective_axial_stiffness"] == \
            pytest.approx(9.24e5)

    def test_stiffness_bad_width(self, client):
        resp = client.post("/api/materials/pet/stiffness", json={
            "thickness_um": 50, "width_m": 0})
        assert resp.status_code == 400

    def test_stiffness_unknown_material(self, client):
        resp = client.post("/api/materials/nope/stiffness", json={})
        assert resp.status_code == 404


class TestServiceLayer:
    """Validation flow shared by the services (see WeblineService.handle)."""

    def test_handle_returns_compute_result(self, app):
        service = MaterialsService()
        with app.test_request_context():
            resp = service.handle({"material_id": "pet", "thickness_um": 50,
                                   "width_m": 0.5})
        assert resp.get_json()["material_id"] == "pet"

    def test_handle_config_error_is_400(self, app):
        service = SimulationService()
        with app.test_request_context():
            resp, status = service.handle({"stations": "u"})
        assert status == 400
        assert resp.get_json() == {"error": "stations must be a list"}

    def test_handle_custom_handler(self, app):
        service = SimulationService()
        with app.test_request_context():
            resp = service.handle({"stations": SINGLE_ZONE},
                                  service.compute_zones)
        assert [z["id"] for z in resp.get_json()["zones"]] == \
            ["unwind-rewind"]

    def test_duplicate_registration(self):
        registry = WeblineRegistry()
        registry.register(MaterialsService())
        with pytest.raises(ValueError):
            registry.register(MaterialsService())
