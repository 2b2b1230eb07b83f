"""Observer-relative geometry: East-North-Zenith frame and look angles.

Converts Earth-fixed positions into a local topocentric frame defined by
East, North and Zenith axes at an observer on the reference ellipsoid, and
from there into azimuth, elevation and range.  ``observe`` chains these
with the TEME to Earth-fixed rotation to produce the full set of look
angles for one propagated state.

The ENZ frame is a right-handed coordinate system:

- **East** (E): tangent to the surface, pointing geographic east
- **North** (N): tangent to the surface, pointing geographic north
- **Zenith** (Z): normal to the surface, pointing outward

Distances are in kilometres.
"""

from __future__ import annotations

from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satpredict.config import get_dtype
from satpredict.constants import WGS72_a
from satpredict.coordinates.geodetic import (
    WGS72,
    Ellipsoid,
    position_ecef_to_geodetic,
    position_geodetic_to_ecef,
)
from satpredict.frames.teme import rotation_teme_to_pef, state_teme_to_pef


class ObserverLocation(NamedTuple):
    """Ground observer position.

    Attributes:
        lat: Geodetic latitude [deg], north positive.
        lon: Longitude [deg], east positive.
        alt: Altitude above the ellipsoid [km].
    """

    lat: float
    lon: float
    alt: float = 0.0

    def geodetic(self) -> Array:
        """Observer as ``[lon, lat, alt]`` in degrees and km."""
        return jnp.array([self.lon, self.lat, self.alt], dtype=get_dtype())


class LookAngles(NamedTuple):
    """Satellite direction and distance as seen from an observer.

    Attributes:
        az: Azimuth [deg], clockwise from north, in ``[0, 360)``.
        el: Elevation above the horizon [deg], in ``[-90, 90]``.
        range: Slant range [km].
        range_rate: Rate of change of the slant range [km/s], positive
            when receding.
        ra: Topocentric right ascension of date [deg], in ``[0, 360)``.
        dec: Topocentric declination of date [deg].
    """

    az: Array
    el: Array
    range: Array
    range_rate: Array
    ra: Array
    dec: Array


def rotation_ellipsoid_to_enz(
    x_ellipsoid: ArrayLike,
    use_degrees: bool = False,
) -> Array:
    """Compute the rotation matrix from Earth-fixed to East-North-Zenith.

    Args:
        x_ellipsoid: Observer coordinates ``[lon, lat, alt]``.
            Longitude and latitude in *rad* (or *deg* if ``use_degrees=True``).
        use_degrees: If ``True``, interpret longitude and latitude as degrees.

    Returns:
        3x3 rotation matrix (Earth-fixed -> ENZ).
    """
    x_ellipsoid = jnp.asarray(x_ellipsoid, dtype=get_dtype())

    lon = x_ellipsoid[0]
    lat = x_ellipsoid[1]

    if use_degrees:
        lon = jnp.deg2rad(lon)
        lat = jnp.deg2rad(lat)

    sin_lon = jnp.sin(lon)
    cos_lon = jnp.cos(lon)
    sin_lat = jnp.sin(lat)
    cos_lat = jnp.cos(lat)

    # Rows are E, N, Z basis vectors expressed in Earth-fixed axes
    return jnp.array([
        [-sin_lon, cos_lon, 0.0],                             # East
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],    # North
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],      # Zenith
    ])


def relative_position_ecef_to_enz(
    location_ecef: ArrayLike,
    r_ecef: ArrayLike,
    ellipsoid: Ellipsoid = WGS72,
) -> Array:
    """Convert an Earth-fixed position to ENZ relative to an observer.

    Args:
        location_ecef: Earth-fixed observer position ``[x, y, z]`` [km].
        r_ecef: Earth-fixed target position ``[x, y, z]`` [km].
        ellipsoid: Reference ellipsoid defining the local vertical.

    Returns:
        Relative position ``[east, north, zenith]`` [km].
    """
    location_ecef = jnp.asarray(location_ecef, dtype=get_dtype())
    r_ecef = jnp.asarray(r_ecef, dtype=get_dtype())

    x_geod = position_ecef_to_geodetic(location_ecef, ellipsoid)
    rot = rotation_ellipsoid_to_enz(x_geod)
    return rot @ (r_ecef - location_ecef)


def position_enz_to_azel(
    x_enz: ArrayLike,
    use_degrees: bool = False,
) -> Array:
    """Convert ENZ position to azimuth, elevation and range.

    At the zenith singularity azimuth is defined as 0.

    Args:
        x_enz: ENZ position ``[east, north, zenith]`` [km].
        use_degrees: If ``True``, return azimuth and elevation in degrees.

    Returns:
        ``[azimuth, elevation, range]``.  Azimuth in ``[0, 2pi)`` rad
        (or ``[0, 360)`` deg), elevation in ``[-pi/2, pi/2]`` rad, range
        in *km*.
    """
    x_enz = jnp.asarray(x_enz, dtype=get_dtype())

    e = x_enz[0]
    n = x_enz[1]
    z = x_enz[2]

    rho = jnp.sqrt(e * e + n * n + z * z)
    horiz = jnp.sqrt(e * e + n * n)
    el = jnp.arctan2(z, horiz)

    az_raw = jnp.arctan2(e, n)
    az_wrapped = jnp.where(az_raw >= 0.0, az_raw, az_raw + 2.0 * jnp.pi)
    az = jnp.where(horiz == 0.0, 0.0, az_wrapped)

    if use_degrees:
        az = jnp.rad2deg(az)
        el = jnp.rad2deg(el)

    return jnp.array([az, el, rho])


def observe(
    jd: ArrayLike,
    r_teme: ArrayLike,
    v_teme: ArrayLike,
    observer: ObserverLocation,
    ellipsoid: Ellipsoid = WGS72,
) -> LookAngles:
    """Look angles of a satellite from a ground observer.

    The observer is fixed to the rotating Earth, so the range rate is the
    radial component of the satellite's Earth-fixed velocity.  Right
    ascension and declination are taken from the topocentric range vector
    in TEME.

    Args:
        jd: Julian date of the state (UT1 ~ UTC).
        r_teme: Satellite TEME position [km].
        v_teme: Satellite TEME velocity [km/s].
        observer: Observer location.
        ellipsoid: Reference ellipsoid for the observer position.

    Returns:
        Azimuth, elevation, range, range rate, right ascension and
        declination.
    """
    r_pef, v_pef = state_teme_to_pef(jd, r_teme, v_teme)

    x_geod = observer.geodetic()
    obs_ecef = position_geodetic_to_ecef(x_geod, ellipsoid, use_degrees=True)
    rho = r_pef - obs_ecef

    enz = rotation_ellipsoid_to_enz(x_geod, use_degrees=True) @ rho
    az, el, rng = position_enz_to_azel(enz, use_degrees=True)
    range_rate = jnp.dot(rho, v_pef) / rng

    rho_teme = rotation_teme_to_pef(jd).T @ rho
    ra = jnp.mod(jnp.rad2deg(jnp.arctan2(rho_teme[1], rho_teme[0])), 360.0)
    dec = jnp.rad2deg(jnp.arcsin(rho_teme[2] / rng))

    return LookAngles(az=az, el=el, range=rng, range_rate=range_rate, ra=ra, dec=dec)


def footprint_diameter(r: ArrayLike, radius: float = WGS72_a) -> Array:
    """Diameter of the area from which the satellite is above the horizon.

    Computed as ``2 * R * acos(R / |r|)``, the great-circle span of the
    visibility circle on a spherical Earth.

    Args:
        r: Satellite position [km], any frame centred on the Earth.
        radius: Earth radius [km].

    Returns:
        Footprint diameter [km]; zero for a position at or below the
        surface.
    """
    r = jnp.asarray(r, dtype=get_dtype())
    ratio = jnp.minimum(radius / jnp.linalg.norm(r), 1.0)
    return 2.0 * radius * jnp.arccos(ratio)
