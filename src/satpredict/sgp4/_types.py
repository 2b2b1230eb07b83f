"""
Data types for the SGP4/SDP4 propagator.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import pi
from typing import NamedTuple

from jax import Array

from satpredict.constants import MINUTES_PER_DAY, RAD2DEG

# rev/day per rad/min
_XPDOTP = MINUTES_PER_DAY / (2.0 * pi)


@dataclass(frozen=True)
class OrbitalElementSet:
    """Orbital elements parsed from a three-line TLE record.

    Immutable once parsed. Angles and rates are stored in the units the
    propagator consumes (radians, rad/min); the properties give the values
    in the units the TLE format is written in.

    Attributes:
        name: Object name from the name line (trimmed, may be empty).
        catnum: Satellite catalog number.
        classification: Classification character (``'U'``, ``'C'``, or ``'S'``).
        intldesg: International designator (e.g. ``'98067A'``).
        epoch_year: Four-digit epoch year.
        epochdays: Day of year with fractional day (1.0 = Jan 1 00:00 UTC).
        jdsatepoch: Julian date of epoch (whole days).
        jdsatepochF: Julian date of epoch (fractional day).
        ndot: First derivative of mean motion divided by 2 [rad/min^2].
        nddot: Second derivative of mean motion divided by 6 [rad/min^3].
        bstar: B* drag coefficient [1/earth_radii].
        ephtype: Ephemeris type (typically 0).
        elnum: Element set number.
        revnum: Revolution number at epoch.
        inclo: Inclination [rad], in ``[0, pi]``.
        nodeo: Right ascension of ascending node [rad], in ``[0, 2pi)``.
        ecco: Eccentricity, in ``[0, 1)``.
        argpo: Argument of perigee [rad], in ``[0, 2pi)``.
        mo: Mean anomaly [rad], in ``[0, 2pi)``.
        no_kozai: Mean motion (Kozai) [rad/min].
    """

    name: str
    catnum: int
    classification: str
    intldesg: str
    epoch_year: int
    epochdays: float
    jdsatepoch: float
    jdsatepochF: float
    ndot: float
    nddot: float
    bstar: float
    ephtype: int
    elnum: int
    revnum: int
    inclo: float
    nodeo: float
    ecco: float
    argpo: float
    mo: float
    no_kozai: float

    @property
    def epoch_day(self) -> int:
        """Integer day of year of the epoch."""
        return int(self.epochdays)

    @property
    def epoch_fod(self) -> float:
        """Fraction of day of the epoch."""
        return self.epochdays - int(self.epochdays)

    @property
    def jd_epoch(self) -> float:
        """Julian date of epoch."""
        return self.jdsatepoch + self.jdsatepochF

    @property
    def inclination(self) -> float:
        """Inclination [deg]."""
        return self.inclo * RAD2DEG

    @property
    def raan(self) -> float:
        """Right ascension of ascending node [deg]."""
        return self.nodeo * RAD2DEG

    @property
    def eccentricity(self) -> float:
        """Eccentricity [dimensionless]."""
        return self.ecco

    @property
    def argument_of_perigee(self) -> float:
        """Argument of perigee [deg]."""
        return self.argpo * RAD2DEG

    @property
    def mean_anomaly(self) -> float:
        """Mean anomaly [deg]."""
        return self.mo * RAD2DEG

    @property
    def mean_motion(self) -> float:
        """Mean motion (Kozai) [rev/day]."""
        return self.no_kozai * _XPDOTP

    @property
    def mean_motion_dot(self) -> float:
        """First derivative of mean motion divided by 2 [rev/day^2], as written in the TLE."""
        return self.ndot * (_XPDOTP * MINUTES_PER_DAY)

    @property
    def mean_motion_ddot(self) -> float:
        """Second derivative of mean motion divided by 6 [rev/day^3], as written in the TLE."""
        return self.nddot * (_XPDOTP * MINUTES_PER_DAY * MINUTES_PER_DAY)

    @property
    def period(self) -> float:
        """Orbital period from the Kozai mean motion [min]."""
        return 2.0 * pi / self.no_kozai


class OrbitSample(NamedTuple):
    """Output of a single SGP4/SDP4 evaluation.

    Attributes:
        position: TEME position ``[x, y, z]`` [km]. NaN when ``error != 0``.
        velocity: TEME velocity ``[vx, vy, vz]`` [km/s]. NaN when ``error != 0``.
        phase: Orbital phase, the long-period corrected mean anomaly [rad],
            in ``[0, 2pi)``.
        error: SGP4 error code; 0 on success.
    """

    position: Array
    velocity: Array
    phase: Array
    error: Array
