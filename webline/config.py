"""
Configuration construction for simulation runs.

Raw request payloads are turned into fully populated, validated objects
here, before anything reaches the simulation core. Missing material values
are filled in with the documented defaults; values that are present but
malformed are rejected with a ConfigError. The core itself never guesses.

Classes:
    ConfigError        - Raised for malformed configuration (a ValueError)
    MaterialParameters - Effective axial stiffness and strain set-points

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import math

from webline.constants import (
    DEFAULT_BASE_STRAIN,
    DEFAULT_EFFECTIVE_AXIAL_STIFFNESS,
    DEFAULT_LINE_LENGTH_M,
    DEFAULT_STRAIN_STEP,
    POSITION_MAX,
    POSITION_MIN,
    STATION_TYPES,
)
from webline.topology import ZONE_ID_SEPARATOR, Station


class ConfigError(ValueError):
    """Malformed simulation configuration."""


class MaterialParameters:
    """
    Material inputs of the simulation core.

    Parameters
    ----------
    effective_axial_stiffness : float
        EA in newtons (modulus * thickness * width). Converts strain to
        tension.
    base_strain : float
        Strain set-point of the first zone of every tension group.
    strain_step : float
        Set-point increase per zone within a tension group.
    max_strain : float, optional
        Danger threshold. Only used by danger detection, never by the
        integration core.
    """

    def __init__(self, effective_axial_stiffness, base_strain, strain_step,
                 max_strain=None):
        self.effective_axial_stiffness = float(effective_axial_stiffness)
        self.base_strain = float(base_strain)
        self.strain_step = float(strain_step)
        self.max_strain = float(max_strain) if max_strain is not None else None

    @classmethod
    def defaults(cls):
        return cls(
            effective_axial_stiffness=DEFAULT_EFFECTIVE_AXIAL_STIFFNESS,
            base_strain=DEFAULT_BASE_STRAIN,
            strain_step=DEFAULT_STRAIN_STEP,
        )

    def to_dict(self):
        result = {
            "effective_axial_stiffness": self.effective_axial_stiffness,
            "base_strain": self.base_strain,
            "strain_step": self.strain_step,
        }
        if self.max_strain is not None:
            result["max_strain"] = self.max_strain
        return result

    def __repr__(self):
        return ("MaterialParameters(EA=%r, base_strain=%r, strain_step=%r, "
                "max_strain=%r)" % (self.effective_axial_stiffness,
                                    self.base_strain, self.strain_step,
                                    self.max_strain))


def _number(raw, name):
    """Coerce raw to a finite float or raise ConfigError."""
    if isinstance(raw, bool):
        raise ConfigError("{} must be a number".format(name))
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError("{} must be a number".format(name))
    if not math.isfinite(value):
        raise ConfigError("{} must be finite".format(name))
    return value


def material_parameters_from_config(raw):
    """
    Build MaterialParameters from a raw dict, defaulting missing values.

    Parameters
    ----------
    raw : dict or None
        May contain 'effective_axial_stiffness' (alias 'EA'),
        'base_strain', 'strain_step' and 'max_strain'. None or {} gives the
        defaults.

    Returns
    -------
    MaterialParameters

    Raises
    ------
    ConfigError
        If a value is present but not a finite number, or the stiffness
        is negative.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("material must be an object")

    ea_raw = raw.get("effective_axial_stiffness", raw.get("EA"))
    if ea_raw is None:
        ea = DEFAULT_EFFECTIVE_AXIAL_STIFFNESS
    else:
        ea = _number(ea_raw, "effective_axial_stiffness")
        if ea < 0:
            raise ConfigError("effective_axial_stiffness must be >= 0")

    base_raw = raw.get("base_strain")
    base = (DEFAULT_BASE_STRAIN if base_raw is None
            else _number(base_raw, "base_strain"))

    step_raw = raw.get("strain_step")
    step = (DEFAULT_STRAIN_STEP if step_raw is None
            else _number(step_raw, "strain_step"))

    max_raw = raw.get("max_strain")
    max_strain = None if max_raw is None else _number(max_raw, "max_strain")

    return MaterialParameters(ea, base, step, max_strain=max_strain)


def effective_axial_stiffness(youngs_modulus, thickness_um, width_m):
    """
    EA = E * thickness * width.

    Parameters
    ----------
    youngs_modulus : float
        E in pascals.
    thickness_um : float
        Web thickness in micrometers.
    width_m : float
        Web width in meters.

    Returns
    -------
    float
        Effective axial stiffness in newtons.
    """
    thickness = _number(thickness_um, "thickness_um")
    width = _number(width_m, "width_m")
    if thickness <= 0:
        raise ConfigError("thickness_um must be positive")
    if width <= 0:
        raise ConfigError("width_m must be positive")
    return float(youngs_modulus) * thickness * 1e-6 * width


def parse_stations(raw):
    """
    Build Station objects from a list of raw dicts.

    Each entry needs 'id', 'type' and 'position' (the key 'x' is accepted
    for position). Order does not matter; the topology builder sorts.

    Raises
    ------
    ConfigError
        On a non-list payload, a missing field, an unknown type, a
        position outside [0, 100], a duplicate id or an id containing the
        zone id separator '-'.
    """
    if not isinstance(raw, list):
        raise ConfigError("stations must be a list")

    stations = []
    seen = set()
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigError("stations[{}] must be an object".format(i))

        sid = item.get("id")
        if sid is None or str(sid) == "":
            raise ConfigError("stations[{}] is missing an id".format(i))
        sid = str(sid)
        if ZONE_ID_SEPARATOR in sid:
            raise ConfigError(
                "Station id '{}' must not contain '{}'".format(
                    sid, ZONE_ID_SEPARATOR))
        if sid in seen:
            raise ConfigError("Duplicate station id '{}'".format(sid))
        seen.add(sid)

        stype = str(item.get("type", "")).upper()
        if stype not in STATION_TYPES:
            raise ConfigError(
                "Station '{}' has unknown type '{}'".format(
                    sid, item.get("type")))

        pos_raw = item.get("position", item.get("x"))
        if pos_raw is None:
            raise ConfigError("Station '{}' is missing a position".format(sid))
        position = _number(pos_raw, "position of station '{}'".format(sid))
        if not (POSITION_MIN <= position <= POSITION_MAX):
            raise ConfigError(
                "Station '{}' position must be between 0 and 100".format(sid))

        stations.append(Station(sid, stype, position))
    return stations


def line_length_from_config(raw):
    """Validate total line length in meters; None gives the default."""
    if raw is None:
        return DEFAULT_LINE_LENGTH_M
    value = _number(raw, "total_line_length")
    if value <= 0:
        raise ConfigError("total_line_length must be positive")
    return value
