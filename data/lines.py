"""
Default line layout.

A ten-station line: unwind, a dancer on each end, six idler rollers in
between and the rewind. Positions are percent of the line length.

IMPORTANT: No unicode characters (Windows charmap constraint).
"""

from webline.constants import DEFAULT_LINE_LENGTH_M

DEFAULT_STATIONS = [
    {"id": "unwind", "type": "UNWIND", "position": 5},
    {"id": "dancer1", "type": "DANCER", "position": 15},
    {"id": "roller1", "type": "ROLLER", "position": 25},
    {"id": "roller2", "type": "ROLLER", "position": 35},
    {"id": "roller3", "type": "ROLLER", "position": 45},
    {"id": "roller4", "type": "ROLLER", "position": 55},
    {"id": "roller5", "type": "ROLLER", "position": 65},
    {"id": "roller6", "type": "ROLLER", "position": 75},
    {"id": "dancer2", "type": "DANCER", "position": 85},
    {"id": "rewind", "type": "REWIND", "position": 95},
]


def get_default_line():
    """Return a fresh copy of the default layout."""
    return {
        "stations": [dict(s) for s in DEFAULT_STATIONS],
        "total_line_length": DEFAULT_LINE_LENGTH_M,
    }
