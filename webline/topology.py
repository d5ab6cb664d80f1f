"""
Topology Builder: stations along the line and the zones between them.

A zone is the free web span between two adjacent stations. Stations are
ordered by their position (percent of the line length); every adjacent
pair produces one zone whose physical length is the position difference
scaled by the total line length.

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

# Joins the two bounding station ids into a zone id
ZONE_ID_SEPARATOR = "-"


class Station:
    """
    One web-handling station (unwind, roller, dancer, pitch roller, rewind).

    Parameters
    ----------
    id : str
        Unique station identifier.
    type : str
        One of constants.STATION_TYPES.
    position : float
        Position along the line in percent (0 to 100).
    """

    def __init__(self, id, type, position):
        self.id = id
        self.type = type
        self.position = float(position)

    def to_dict(self):
        return {"id": self.id, "type": self.type, "position": self.position}

    def __repr__(self):
        return "Station(%r, %r, %r)" % (self.id, self.type, self.position)


class Zone:
    """
    Web span between two adjacent stations.

    Zones are created by build_zones() and never modified afterwards.

    Parameters
    ----------
    from_station : Station
        Upstream bounding station.
    to_station : Station
        Downstream bounding station.
    length_percent : float
        Span length in percent of the total line length.
    length_m : float
        Span length in meters.
    global_index : int
        Zero-based rank of the zone in ascending position order.
    """

    __slots__ = ("id", "from_station", "to_station", "length_percent",
                 "length_m", "global_index")

    def __init__(self, from_station, to_station, length_percent, length_m,
                 global_index):
        object.__setattr__(self, "id", zone_id(from_station, to_station))
        object.__setattr__(self, "from_station", from_station)
        object.__setattr__(self, "to_station", to_station)
        object.__setattr__(self, "length_percent", length_percent)
        object.__setattr__(self, "length_m", length_m)
        object.__setattr__(self, "global_index", global_index)

    def __setattr__(self, name, value):
        raise AttributeError("Zone is immutable")

    @property
    def span(self):
        """Readable '<from> -> <to>' label."""
        return "%s -> %s" % (self.from_station.id, self.to_station.id)

    def to_dict(self):
        return {
            "id": self.id,
            "from": self.from_station.id,
            "to": self.to_station.id,
            "length_percent": self.length_percent,
            "length_m": self.length_m,
            "global_index": self.global_index,
        }

    def __repr__(self):
        return "Zone(%r, index=%d, length_m=%r)" % (
            self.id, self.global_index, self.length_m)


def zone_id(from_station, to_station):
    """Zone identifier derived from its two bounding station ids."""
    return ZONE_ID_SEPARATOR.join((from_station.id, to_station.id))


def sort_stations(stations):
    """
    Order stations by position, ascending.

    sorted() is stable, so stations sharing a position keep their input
    order and the zone list stays deterministic.
    """
    return sorted(stations, key=lambda s: s.position)


def build_zones(stations, total_line_length):
    """
    Derive the ordered zone list from an unordered station set.

    Parameters
    ----------
    stations : iterable of Station
        Stations in any order. Ids are expected to be unique.
    total_line_length : float
        Total line length in meters. Validated (> 0) by the caller.

    Returns
    -------
    list of Zone
        One zone per adjacent station pair, in ascending position order.
        Fewer than two stations give an empty list.

    Raises
    ------
    ValueError
        If two zones end up with the same id, e.g. stations "a-b", "c", "a", "b-c"
        in line order. Per-zone series are keyed by zone id.
    """
    ordered = sort_stations(stations)
    zones = []
    seen = {}
    for i in range(len(ordered) - 1):
        from_station = ordered[i]
        to_station = ordered[i + 1]
        length_percent = to_station.position - from_station.position
        length_m = (length_percent / 100.0) * total_line_length
        zid = zone_id(from_station, to_station)
        if zid in seen:
            raise ValueError(
                "Zones {} and {} share the id '{}'".format(
                    seen[zid] + 1, i + 1, zid))
        seen[zid] = i
        zones.append(Zone(
            from_station=from_station,
            to_station=to_station,
            length_percent=length_percent,
            length_m=length_m,
            global_index=i,
        ))
    return zones
