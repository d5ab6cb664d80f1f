"""
Integrator: explicit Euler time stepping of the per-zone strain dynamics.

Every zone is a first-order system relaxing toward its strain set-point:

    d(eps)/dt = strain_gain * dv - damping * (eps - eps_set)
    T = EA * eps,  T >= 0

dv is the velocity mismatch between the upstream and downstream station of
the zone. In the current model both run at the common line speed, so dv is
always zero; the term is still evaluated so that per-zone speeds can be
plugged in later.

Zones are not coupled, so the per-step update is done for all zones at
once on numpy arrays. The steps of each zone are strictly sequential.

Post-condition: every recorded tension is >= 0 (a web cannot push).

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

import logging
from collections import OrderedDict

import numpy as np

from webline.constants import (
    DT,
    NOMINAL_LINE_SPEED,
    RAMP_TIME,
    TENSION_DECIMALS,
    TIME_DECIMALS,
    TOTAL_TIME,
    num_steps,
)

log = logging.getLogger(__name__)


class SimulationCancelled(RuntimeError):
    """Raised when a cancellation check asks the run to stop."""

    def __init__(self, step, time):
        super().__init__(
            "Simulation cancelled at step {} (t={} s)".format(step, time))
        self.step = step
        self.time = time


def time_axis(dt=DT, total_time=TOTAL_TIME):
    """Shared time axis in seconds, rounded to two decimals."""
    return [round(i * dt, TIME_DECIMALS)
            for i in range(num_steps(total_time, dt))]


def line_speed(t):
    """Line speed (m/s): linear ramp over RAMP_TIME, then constant."""
    if t < RAMP_TIME:
        return NOMINAL_LINE_SPEED * t / RAMP_TIME
    return NOMINAL_LINE_SPEED


def speed_mismatch(v_line, n_zones):
    """
    Velocity mismatch dv = v_up - v_down for every zone.

    Both sides of each zone run at the line speed, so this is zero.
    """
    v_up = np.full(n_zones, v_line)
    v_down = np.full(n_zones, v_line)
    return v_up - v_down


def integrate(zone_parameters, effective_axial_stiffness, dt=DT,
              total_time=TOTAL_TIME, cancel_check=None):
    """
    Advance all zones over the fixed horizon.

    Parameters
    ----------
    zone_parameters : list of ZoneParameters
        In global_index order. Defines the output ordering.
    effective_axial_stiffness : float
        EA in newtons.
    dt : float, optional
        Time step in seconds (default 0.01).
    total_time : float, optional
        Horizon in seconds (default 6.0).
    cancel_check : callable, optional
        Called once per step with no arguments; a truthy return value
        stops the run with SimulationCancelled.

    Returns
    -------
    tuple
        (time, tension_series, strain_series). The series are
        OrderedDicts of zone id -> list of samples aligned with time.
        Tension is rounded to two decimals; strain is left unrounded.

    Raises
    ------
    SimulationCancelled
        If cancel_check returns True.
    """
    time = time_axis(dt, total_time)
    ids = [zp.zone_id for zp in zone_parameters]
    n = len(ids)

    target = np.array([zp.target_strain for zp in zone_parameters],
                      dtype=float)
    damping = np.array([zp.damping_coefficient for zp in zone_parameters],
                       dtype=float)
    gain = np.array([zp.strain_gain for zp in zone_parameters], dtype=float)

    # State owned by this run only
    strain = np.zeros(n, dtype=float)

    tension_series = OrderedDict((zid, []) for zid in ids)
    strain_series = OrderedDict((zid, []) for zid in ids)

    for step, t in enumerate(time):
        if cancel_check is not None and cancel_check():
            raise SimulationCancelled(step, t)

        dv = speed_mismatch(line_speed(t), n)

        depsdt = gain * dv - damping * (strain - target)
        strain = strain + depsdt * dt
        tension = np.maximum(effective_axial_stiffness * strain, 0.0)

        for i, zid in enumerate(ids):
            tension_series[zid].append(
                round(float(tension[i]), TENSION_DECIMALS))
            strain_series[zid].append(float(strain[i]))

    log.debug("Integrated %d zones over %d steps (dt=%s s)",
              n, len(time), dt)
    return time, tension_series, strain_series
