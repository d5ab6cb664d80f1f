"""
WEBLINE service layer.

The simulation and material services share one request flow: a JSON body
is validated into a normalized config, a handler turns that config into a
JSON-serializable dict, and a body that fails validation is answered with
HTTP 400 and {"error": message}. WeblineService.handle() owns that flow;
subclasses supply validate(), compute() and their routes.

Classes:
    WeblineService  - Base class: validation flow and endpoint listing
    WeblineRegistry - Ordered services mounted on the /api blueprint

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import logging
from abc import ABC, abstractmethod

from flask import jsonify

from webline.config import ConfigError

log = logging.getLogger(__name__)


class WeblineService(ABC):
    """
    Base class for a WEBLINE service.

    Class Attributes
    ----------------
    id : str
        Unique service identifier (e.g. "simulation", "materials").
    name : str
        Human-readable display name.
    description : str
        One-liner for the service listing.
    endpoints : tuple of (method, path)
        Endpoints mounted by register_routes(), for the listing.
    """

    id = ""
    name = ""
    description = ""
    endpoints = ()

    @abstractmethod
    def validate(self, payload):
        """
        Turn a raw request body into a normalized config.

        Raises
        ------
        ConfigError
            If the body is missing, not an object, or holds bad values.
        """

    @abstractmethod
    def compute(self, config):
        """Main result of the service for a config from validate()."""

    @abstractmethod
    def register_routes(self, blueprint):
        """Mount the service's endpoints on the /api blueprint."""

    def handle(self, payload, handler=None):
        """
        Validate a request body and answer it.

        Parameters
        ----------
        payload : object
            Decoded JSON body (None when the body is not JSON).
        handler : callable, optional
            config -> dict. Defaults to compute().

        Returns
        -------
        flask.Response or (flask.Response, int)
            handler(config) as JSON, or a 400 with the validation message.
        """
        try:
            config = self.validate(payload)
        except ConfigError as e:
            log.warning("Rejected %s request: %s", self.id, e)
            return jsonify({"error": str(e)}), 400
        handler = handler or self.compute
        return jsonify(handler(config))

    def metadata(self):
        """Listing entry: id, name, description and "METHOD /path" endpoints."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "endpoints": ["{} {}".format(method, path)
                          for method, path in self.endpoints],
        }


class WeblineRegistry:
    """
    Ordered set of services, keyed by id.

    The /api blueprint lists them under /api/services and mounts their
    routes through mount().
    """

    def __init__(self):
        self._services = {}

    def register(self, service):
        """
        Add a service.

        Raises
        ------
        ValueError
            If the id is taken.
        """
        if service.id in self._services:
            raise ValueError(
                "Service '{}' is already registered".format(service.id))
        self._services[service.id] = service

    def get(self, service_id):
        """Service by id, or None."""
        return self._services.get(service_id)

    def list_all(self):
        return [s.metadata() for s in self._services.values()]

    def mount(self, blueprint):
        """Register every service's routes on the blueprint."""
        for service in self._services.values():
            service.register_routes(blueprint)
            log.debug("Mounted %s: %s", service.id,
                      ", ".join(p for _, p in service.endpoints))
