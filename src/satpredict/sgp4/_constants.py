"""
Earth gravity constants for the SGP4/SDP4 propagator.

Provides three standard gravity models: WGS72OLD, WGS72 (standard), and WGS84,
plus ``get_gravity`` to resolve a model by name.
"""

from __future__ import annotations

from math import sqrt
from typing import NamedTuple


class EarthGravity(NamedTuple):
    """Earth gravity model constants for SGP4 propagation.

    Attributes:
        name: Model name (``'wgs72old'``, ``'wgs72'`` or ``'wgs84'``).
        tumin: Time units per minute (1/xke).
        mu: Gravitational parameter [km^3/s^2].
        radiusearthkm: Earth equatorial radius [km].
        xke: Reciprocal of tumin (sqrt(GM) in SGP4 time units).
        j2: Second zonal harmonic.
        j3: Third zonal harmonic.
        j4: Fourth zonal harmonic.
        j3oj2: Ratio j3/j2.
    """

    name: str
    tumin: float
    mu: float
    radiusearthkm: float
    xke: float
    j2: float
    j3: float
    j4: float
    j3oj2: float


def _model(name: str, mu: float, re: float, xke: float, j2: float, j3: float, j4: float):
    return EarthGravity(
        name=name,
        tumin=1.0 / xke,
        mu=mu,
        radiusearthkm=re,
        xke=xke,
        j2=j2,
        j3=j3,
        j4=j4,
        j3oj2=j3 / j2,
    )


WGS72OLD = _model(
    "wgs72old", 398600.79964, 6378.135, 0.0743669161, 0.001082616, -0.00000253881, -0.00000165597
)
"""WGS 72 Old gravity model (legacy)."""

WGS72 = _model(
    "wgs72",
    398600.8,
    6378.135,
    60.0 / sqrt(6378.135**3 / 398600.8),
    0.001082616,
    -0.00000253881,
    -0.00000165597,
)
"""WGS 72 gravity model (standard for SGP4)."""

WGS84 = _model(
    "wgs84",
    398600.5,
    6378.137,
    60.0 / sqrt(6378.137**3 / 398600.5),
    0.00108262998905,
    -0.00000253215306,
    -0.00000161098761,
)
"""WGS 84 gravity model."""

GRAVITY_MODELS = {
    "wgs72old": WGS72OLD,
    "wgs72": WGS72,
    "wgs84": WGS84,
}
"""Mapping of gravity model names to ``EarthGravity`` instances."""


def get_gravity(gravity: str | EarthGravity) -> EarthGravity:
    """Resolve a gravity model given either its name or the model itself.

    Raises:
        ValueError: If *gravity* is a string that names no known model.
    """
    if isinstance(gravity, EarthGravity):
        return gravity
    try:
        return GRAVITY_MODELS[gravity.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown gravity model '{gravity}'. Choose from: {', '.join(GRAVITY_MODELS)}"
        ) from None
