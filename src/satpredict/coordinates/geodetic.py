"""Geodetic coordinate transformations.

Converts between geodetic coordinates ``[longitude, latitude, altitude]``
and Earth-fixed Cartesian coordinates ``[x, y, z]`` on a reference
ellipsoid.  The default ellipsoid is WGS72, whose equatorial radius is the
one the SGP4 gravity model uses, so that ground tracks and the propagator
agree on the size of the Earth.

The forward transformation is closed-form; the inverse uses Bowring's
iterative method implemented with ``jax.lax.while_loop`` for JAX
traceability.

All inputs and outputs use kilometres and radians (or degrees with
``use_degrees=True``).

References:
    1. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, Springer, 2012, Sec. 5.3.
"""

from __future__ import annotations

from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satpredict.config import get_dtype
from satpredict.constants import WGS72_a, WGS72_f, WGS84_a, WGS84_f


class Ellipsoid(NamedTuple):
    """Reference ellipsoid.

    Attributes:
        name: Ellipsoid name.
        a: Equatorial radius [km].
        f: Flattening.
    """

    name: str
    a: float
    f: float

    @property
    def e2(self) -> float:
        """First eccentricity squared."""
        return self.f * (2.0 - self.f)


WGS72 = Ellipsoid("wgs72", WGS72_a, WGS72_f)
WGS84 = Ellipsoid("wgs84", WGS84_a, WGS84_f)


def position_geodetic_to_ecef(
    x_geod: ArrayLike,
    ellipsoid: Ellipsoid = WGS72,
    use_degrees: bool = False,
) -> Array:
    """Convert geodetic position to Earth-fixed Cartesian coordinates.

    Args:
        x_geod: Geodetic coordinates ``[lon, lat, alt]``.
            Longitude and latitude in *rad* (or *deg* if ``use_degrees=True``),
            altitude in *km* above the ellipsoid.
        ellipsoid: Reference ellipsoid.
        use_degrees: If ``True``, interpret longitude and latitude as degrees.

    Returns:
        Earth-fixed position ``[x, y, z]`` in *km*.

    Example:
        >>> import jax.numpy as jnp
        >>> from satpredict.coordinates import position_geodetic_to_ecef
        >>> x_ecef = position_geodetic_to_ecef(jnp.array([0.0, 0.0, 0.0]))
        >>> float(x_ecef[0])  # equatorial radius
        6378.135
    """
    x_geod = jnp.asarray(x_geod, dtype=get_dtype())

    lon = x_geod[0]
    lat = x_geod[1]
    alt = x_geod[2]

    if use_degrees:
        lon = jnp.deg2rad(lon)
        lat = jnp.deg2rad(lat)

    e2 = ellipsoid.e2
    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    N = ellipsoid.a / jnp.sqrt(1.0 - e2 * sin_lat * sin_lat)

    x = (N + alt) * cos_lat * jnp.cos(lon)
    y = (N + alt) * cos_lat * jnp.sin(lon)
    z = ((1.0 - e2) * N + alt) * sin_lat

    return jnp.array([x, y, z])


def position_ecef_to_geodetic(
    x_ecef: ArrayLike,
    ellipsoid: Ellipsoid = WGS72,
    use_degrees: bool = False,
) -> Array:
    """Convert Earth-fixed Cartesian coordinates to geodetic position.

    Uses Bowring's iterative method with convergence controlled by
    ``jax.lax.while_loop`` (max 10 iterations).  The convergence
    threshold scales with the precision of the active dtype.

    Args:
        x_ecef: Earth-fixed position ``[x, y, z]`` in *km*.
        ellipsoid: Reference ellipsoid.
        use_degrees: If ``True``, return longitude and latitude in degrees.

    Returns:
        Geodetic coordinates ``[lon, lat, alt]``.  Longitude in
        ``(-pi, pi]`` and latitude in ``[-pi/2, pi/2]`` (rad, or deg),
        altitude in *km* above the ellipsoid.
    """
    dtype = get_dtype()
    x_ecef = jnp.asarray(x_ecef, dtype=dtype)

    x = x_ecef[0]
    y = x_ecef[1]
    z = x_ecef[2]

    a = ellipsoid.a
    e2 = ellipsoid.e2
    eps = 1.0e-3 * a * jnp.finfo(dtype).eps
    rho2 = x * x + y * y

    # State: (dz, dz_prev, iteration_count)
    dz0 = e2 * z

    def cond(state):
        dz, dz_prev, i = state
        return (jnp.abs(dz - dz_prev) > eps) & (i < 10)

    def body(state):
        dz, _, i = state
        zdz = z + dz
        Nh = jnp.sqrt(rho2 + zdz * zdz)
        sinphi = zdz / Nh
        N = a / jnp.sqrt(1.0 - e2 * sinphi * sinphi)
        return (N * e2 * sinphi, dz, i + 1)

    # Force the first iteration by starting dz_prev far from dz0
    init_state = (dz0, dz0 + 1.0e10, jnp.int32(0))
    dz_final, _, _ = jax.lax.while_loop(cond, body, init_state)

    zdz = z + dz_final
    lon = jnp.arctan2(y, x)
    lon = jnp.where(lon <= -jnp.pi, lon + 2.0 * jnp.pi, lon)
    lat = jnp.arctan2(zdz, jnp.sqrt(rho2))

    Nh = jnp.sqrt(rho2 + zdz * zdz)
    sinphi = zdz / Nh
    N = a / jnp.sqrt(1.0 - e2 * sinphi * sinphi)
    alt = Nh - N

    if use_degrees:
        lon = jnp.rad2deg(lon)
        lat = jnp.rad2deg(lat)

    return jnp.array([lon, lat, alt])
