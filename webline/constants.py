"""
Model constants for the web tension simulator.

Every numeric value the simulation core depends on lives here so that the
time axis, damping rules and material defaults stay identical between the
engine, the services and the test suite.

IMPORTANT: No unicode characters allowed in this file (Windows charmap constraint).
"""

import math

# Station types along the web path
UNWIND = "UNWIND"
ROLLER = "ROLLER"
DANCER = "DANCER"
PITCH = "PITCH"
REWIND = "REWIND"

STATION_TYPES = (UNWIND, ROLLER, DANCER, PITCH, REWIND)

# Station positions are given in percent of the total line length
POSITION_MIN = 0.0
POSITION_MAX = 100.0

# Fixed time axis
DT = 0.01  # s
TOTAL_TIME = 6.0  # s
TIME_DECIMALS = 2
TENSION_DECIMALS = 2

# Line speed profile: linear ramp to the nominal speed, then constant
NOMINAL_LINE_SPEED = 1.0  # m/s
RAMP_TIME = 1.5  # s

# First-order strain relaxation
BASE_DAMPING = 4.0  # 1/s
DANCER_DAMPING_FACTOR = 2.5

# Shortest zone length used in the strain gain (avoids 1/0)
MIN_ZONE_LENGTH_M = 0.2  # m

# Material defaults applied by the configuration layer
DEFAULT_EFFECTIVE_AXIAL_STIFFNESS = 2e5  # N
DEFAULT_BASE_STRAIN = 1.5e-4
DEFAULT_STRAIN_STEP = 2e-5

# Line length used when a request does not give one
DEFAULT_LINE_LENGTH_M = 10.0


def num_steps(total_time=TOTAL_TIME, dt=DT):
    """Number of samples on the time axis: floor(total_time / dt) + 1."""
    return int(math.floor(total_time / dt)) + 1
