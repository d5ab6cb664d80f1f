"""
TensionEngine: shared pipeline infrastructure for the web tension simulator.

ARCHITECTURE RULE: This module only wires the five simulation stages
together and packages their output. The stage logic itself lives in its
own module:

    webline.topology    - Topology Builder (stations -> zones)
    webline.grouping    - Zone Grouping (pitch rollers split tension groups)
    webline.parameters  - Zone Parameterizer (set-points, damping, gain)
    webline.integrator  - Integrator (explicit Euler strain relaxation)
    webline.engine      - Result Aggregator (TensionResult, this module)

Request parsing, defaults and validation belong in webline.config and the
services under webline/services/*, never here.

This module provides:
    TensionConfig  - Validated run inputs (stations, line length, material)
    TensionEngine  - Runs the stages in order and produces a TensionResult
    TensionResult  - Complete run output with serialization methods

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import logging
from collections import OrderedDict

from webline.constants import DT, TOTAL_TIME
from webline.grouping import tension_groups
from webline.integrator import integrate
from webline.parameters import parameterize_zones
from webline.topology import build_zones

log = logging.getLogger(__name__)


class TensionConfig:
    """
    Inputs of one simulation run.

    The configuration layer (webline.config) is responsible for producing
    these values; the engine trusts them.

    Parameters
    ----------
    stations : list of Station
        Stations in any order.
    total_line_length : float
        Line length in meters, > 0.
    material : MaterialParameters
        Fully populated material parameters.
    dt : float, optional
        Time step in seconds (default 0.01).
    total_time : float, optional
        Horizon in seconds (default 6.0).
    """

    def __init__(self, stations, total_line_length, material, dt=DT,
                 total_time=TOTAL_TIME):
        self.stations = list(stations)
        self.total_line_length = float(total_line_length)
        self.material = material
        self.dt = dt
        self.total_time = total_time

    def to_dict(self):
        return {
            "stations": [s.to_dict() for s in self.stations],
            "total_line_length": self.total_line_length,
            "material": self.material.to_dict(),
            "dt": self.dt,
            "total_time": self.total_time,
        }


class TensionResult:
    """
    Complete pipeline output.

    Holds the shared time axis and, per zone, the tension and strain
    sequences. Zone order everywhere equals global_index order.

    Parameters
    ----------
    config : TensionConfig
        Configuration that produced this result.
    zones : list of Zone
    zone_parameters : list of ZoneParameters
    time : list of float
    tension_series : OrderedDict
        Zone id -> tensions in newtons (two decimals, >= 0).
    strain_series : OrderedDict
        Zone id -> raw strain values.
    """

    def __init__(self, config, zones, zone_parameters, time, tension_series,
                 strain_series):
        self.config = config
        self.zones = zones
        self.zone_parameters = zone_parameters
        self.time = time
        self.tension_series = tension_series
        self.strain_series = strain_series

    def tension(self, zone_id):
        """Tension sequence of one zone. Raises KeyError if unknown."""
        return self.tension_series[zone_id]

    def strain(self, zone_id):
        """Strain sequence of one zone. Raises KeyError if unknown."""
        return self.strain_series[zone_id]

    def final_values(self):
        """
        Last tension and strain of every zone.

        Returns
        -------
        OrderedDict
            Zone id -> {"tension": float, "strain": float}.
        """
        final = OrderedDict()
        for zid, tensions in self.tension_series.items():
            strains = self.strain_series[zid]
            final[zid] = {
                "tension": tensions[-1] if tensions else None,
                "strain": strains[-1] if strains else None,
            }
        return final

    def groups(self):
        assignments = [(zp.group_index, zp.local_index)
                       for zp in self.zone_parameters]
        return tension_groups(self.zones, assignments)

    def to_api_response(self):
        """
        Output contract: time axis plus per-zone tension and strain.

        Returns
        -------
        dict
            {"time": [...], "tension_series": {id: [...]},
             "strain_series": {id: [...]}}
        """
        return {
            "time": list(self.time),
            "tension_series": OrderedDict(
                (zid, list(v)) for zid, v in self.tension_series.items()),
            "strain_series": OrderedDict(
                (zid, list(v)) for zid, v in self.strain_series.items()),
        }

    def to_verbose_response(self):
        """Output contract plus configuration, zones, parameters and groups."""
        response = self.to_api_response()
        response["config"] = self.config.to_dict()
        response["zones"] = [z.to_dict() for z in self.zones]
        response["zone_parameters"] = [
            zp.to_dict() for zp in self.zone_parameters]
        response["groups"] = self.groups()
        return response


class TensionEngine:
    """
    Pipeline orchestrator.

    Parameters
    ----------
    config : TensionConfig
    """

    def __init__(self, config):
        self.config = config

    def prepare(self):
        """
        Run the first three stages only.

        Returns
        -------
        tuple
            (zones, zone_parameters).
        """
        config = self.config
        zones = build_zones(config.stations, config.total_line_length)
        zone_parameters = parameterize_zones(
            config.stations, zones, config.material)
        return zones, zone_parameters

    def run(self, cancel_check=None):
        """
        Execute the full pipeline.

        Parameters
        ----------
        cancel_check : callable, optional
            Passed to the integrator; evaluated once per time step.

        Returns
        -------
        TensionResult
        """
        zones, zone_parameters = self.prepare()

        time, tension_series, strain_series = integrate(
            zone_parameters,
            self.config.material.effective_axial_stiffness,
            dt=self.config.dt,
            total_time=self.config.total_time,
            cancel_check=cancel_check,
        )

        n_groups = len({zp.group_index for zp in zone_parameters})
        log.info("Tension run: %d stations, %d zones, %d tension groups",
                 len(self.config.stations), len(zones), n_groups)

        return TensionResult(
            config=self.config,
            zones=zones,
            zone_parameters=zone_parameters,
            time=time,
            tension_series=tension_series,
            strain_series=strain_series,
        )

    @classmethod
    def simulate(cls, stations, total_line_length, material,
                 cancel_check=None):
        """Convenience: build a config and run it."""
        config = TensionConfig(stations, total_line_length, material)
        return cls(config).run(cancel_check=cancel_check)

