"""Orbit type classification and decay estimation.

``classify_orbit`` is a pure rule table over perigee/apogee altitude,
inclination and period.  The decay estimate extrapolates the mean motion
with the first derivative from the element set until it reaches 16.67
rev/day, the point past which an orbit cannot survive a day.
"""

from __future__ import annotations

import math
from enum import Enum

from satpredict.constants import LEO_APOGEE_LIMIT, WGS72_a
from satpredict.sgp4._types import OrbitalElementSet

# Geosynchronous band [min]
_GEO_PERIOD_MIN = 1410.0
_GEO_PERIOD_MAX = 1470.0

# Molniya band [min]
_MOLNIYA_PERIOD_MIN = 685.0
_MOLNIYA_PERIOD_MAX = 755.0

_GEO_MAX_INCLINATION = 5.0  # [deg]
_TUNDRA_MIN_ECCENTRICITY = 0.2
_MOLNIYA_MIN_ECCENTRICITY = 0.5
_HEO_MIN_ECCENTRICITY = 0.25

# Mean motion at which an orbit has at most a day left [rev/day]
_DECAY_MEAN_MOTION = 16.666666


class OrbitType(Enum):
    """Coarse orbit class of a satellite."""

    LEO = "leo"
    MEO = "meo"
    GEO = "geo"
    GSO = "gso"
    MOLNIYA = "molniya"
    TUNDRA = "tundra"
    HEO = "heo"
    HIGH = "high"
    DECAYED = "decayed"

    def __str__(self) -> str:
        return self.name


def classify_orbit(
    perigee_alt: float,
    apogee_alt: float,
    inclination_deg: float,
    period_min: float,
    decayed: bool = False,
    radius: float = WGS72_a,
) -> OrbitType:
    """Classify an orbit from its shape and period.

    Rules are checked in order and the first match wins, so every input
    maps to exactly one ``OrbitType``.

    Args:
        perigee_alt: Perigee altitude [km].
        apogee_alt: Apogee altitude [km].
        inclination_deg: Inclination [deg].
        period_min: Orbital period [min].
        decayed: Whether the orbit is already known to have decayed.
        radius: Earth radius used to turn altitudes into radii [km].

    Returns:
        The orbit class.

    Examples:
        ```python
        from satpredict.tracking import OrbitType, classify_orbit
        assert classify_orbit(410.0, 420.0, 51.6, 92.7) is OrbitType.LEO
        ```
    """
    if decayed or perigee_alt < 0.0:
        return OrbitType.DECAYED

    rp = radius + perigee_alt
    ra = radius + apogee_alt
    ecc = (ra - rp) / (ra + rp)

    if _GEO_PERIOD_MIN <= period_min <= _GEO_PERIOD_MAX:
        if ecc >= _TUNDRA_MIN_ECCENTRICITY:
            return OrbitType.TUNDRA
        if inclination_deg <= _GEO_MAX_INCLINATION:
            return OrbitType.GEO
        return OrbitType.GSO

    if _MOLNIYA_PERIOD_MIN <= period_min <= _MOLNIYA_PERIOD_MAX and ecc >= _MOLNIYA_MIN_ECCENTRICITY:
        return OrbitType.MOLNIYA

    if ecc >= _HEO_MIN_ECCENTRICITY:
        return OrbitType.HEO

    if apogee_alt <= LEO_APOGEE_LIMIT:
        return OrbitType.LEO

    if period_min < _GEO_PERIOD_MIN:
        return OrbitType.MEO

    return OrbitType.HIGH


def predict_decay_jd(elements: OrbitalElementSet) -> float:
    """Estimate the Julian date at which an orbit decays.

    Linear extrapolation of the mean motion with the element set's first
    derivative: ``jd_epoch + (16.666666 - n) / (10 * |ndot/2|)`` with ``n``
    in rev/day and ``ndot/2`` in rev/day^2.

    Args:
        elements: Parsed orbital elements.

    Returns:
        Estimated decay date, or ``inf`` if the element set carries no
        mean motion derivative.
    """
    ndot = abs(elements.mean_motion_dot)
    if ndot == 0.0:
        return math.inf
    return elements.jd_epoch + (_DECAY_MEAN_MOTION - elements.mean_motion) / (10.0 * ndot)


def is_decayed(elements: OrbitalElementSet, jd: float) -> bool:
    """Return whether the decay estimate lies before the date *jd*."""
    return predict_decay_jd(elements) < jd
