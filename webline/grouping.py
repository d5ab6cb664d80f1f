"""
Zone Grouping: split the zone chain into independently regulated tension
groups.

A driven pitch roller nips the web, so the tension upstream of it is
decoupled from the tension downstream. Walking the zones in line order,
every zone that starts at a PITCH station opens a new group and restarts
the within-group index at 0. The globally first zone is always (0, 0),
even when its upstream station is a pitch roller.
"""

from collections import OrderedDict

from webline.constants import PITCH


def assign_groups(zones):
    """
    Assign (group_index, local_index) to every zone.

    Parameters
    ----------
    zones : list of Zone
        Zones in ascending global_index order (as built by build_zones).

    Returns
    -------
    list of tuple
        One (group_index, local_index) pair per zone, same order.
    """
    assignments = []
    group_index = 0
    local_index = 0

    for zone in zones:
        if zone.global_index > 0 and zone.from_station.type == PITCH:
            group_index += 1
            local_index = 0

        assignments.append((group_index, local_index))
        local_index += 1

    return assignments


def tension_groups(zones, assignments):
    """
    Collect zone ids per tension group.

    Returns
    -------
    list of dict
        {"group_index": int, "zone_ids": [...]} in group order.
    """
    groups = OrderedDict()
    for zone, (group_index, _) in zip(zones, assignments):
        groups.setdefault(group_index, []).append(zone.id)
    return [
        {"group_index": g, "zone_ids": ids}
        for g, ids in groups.items()
    ]
