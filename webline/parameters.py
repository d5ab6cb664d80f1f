"""
Zone Parameterizer: physical set-points of every zone.

Within one tension group the strain set-point rises by strain_step per
zone, so downstream spans of the same regulated group run progressively
tauter. A dancer on either end of a zone raises its damping.

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

from webline.constants import (
    BASE_DAMPING,
    DANCER,
    DANCER_DAMPING_FACTOR,
    MIN_ZONE_LENGTH_M,
)
from webline.grouping import assign_groups


class ZoneParameters:
    """
    Derived parameters of one zone.

    Invariant: target_tension == effective_axial_stiffness * target_strain.

    Parameters
    ----------
    zone_id : str
        Id of the zone these parameters belong to.
    target_strain : float
        Strain the zone relaxes toward.
    target_tension : float
        Tension at the strain set-point (N).
    damping_coefficient : float
        Relaxation rate constant (1/s).
    strain_gain : float
        Coupling coefficient of the velocity mismatch term (1/m).
    group_index : int
        Tension group of the zone.
    local_index : int
        Position of the zone within its tension group.
    length_m : float
        Length used for strain_gain (floored at MIN_ZONE_LENGTH_M).
    """

    def __init__(self, zone_id, target_strain, target_tension,
                 damping_coefficient, strain_gain, group_index, local_index,
                 length_m):
        self.zone_id = zone_id
        self.target_strain = target_strain
        self.target_tension = target_tension
        self.damping_coefficient = damping_coefficient
        self.strain_gain = strain_gain
        self.group_index = group_index
        self.local_index = local_index
        self.length_m = length_m

    def to_dict(self):
        return {
            "zone_id": self.zone_id,
            "target_strain": self.target_strain,
            "target_tension": self.target_tension,
            "damping_coefficient": self.damping_coefficient,
            "strain_gain": self.strain_gain,
            "group_index": self.group_index,
            "local_index": self.local_index,
            "length_m": self.length_m,
        }


def dancer_ids(stations):
    """Ids of all DANCER stations."""
    return {s.id for s in stations if s.type == DANCER}


def gain_length(length_m):
    """Zone length used in the strain gain, floored to avoid 1/0."""
    return max(length_m or 0.0, MIN_ZONE_LENGTH_M)


def parameterize_zone(zone, group_index, local_index, dancers, material):
    """
    Compute the set-points of a single zone.

    Parameters
    ----------
    zone : Zone
    group_index, local_index : int
        From assign_groups().
    dancers : set of str
        Ids of DANCER stations.
    material : MaterialParameters
        Fully populated material parameters.

    Returns
    -------
    ZoneParameters
    """
    target_strain = material.base_strain + local_index * material.strain_step
    target_tension = material.effective_axial_stiffness * target_strain

    damping = BASE_DAMPING
    if zone.from_station.id in dancers or zone.to_station.id in dancers:
        damping *= DANCER_DAMPING_FACTOR

    length_m = gain_length(zone.length_m)
    # Reserved for the velocity mismatch term (dv)
    strain_gain = 1.0 / length_m

    return ZoneParameters(
        zone_id=zone.id,
        target_strain=target_strain,
        target_tension=target_tension,
        damping_coefficient=damping,
        strain_gain=strain_gain,
        group_index=group_index,
        local_index=local_index,
        length_m=length_m,
    )


def parameterize_zones(stations, zones, material):
    """
    Group and parameterize all zones in global_index order.

    Returns
    -------
    list of ZoneParameters
    """
    dancers = dancer_ids(stations)
    return [
        parameterize_zone(zone, group_index, local_index, dancers, material)
        for zone, (group_index, local_index)
        in zip(zones, assign_groups(zones))
    ]
