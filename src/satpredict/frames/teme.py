"""TEME to Earth-fixed transformations for SGP4 output.

TEME (True Equator, Mean Equinox) is the native output frame of the
SGP4/SDP4 propagator.  The Earth-fixed frame used for ground tracks and
look angles is the pseudo Earth-fixed frame (PEF): TEME rotated about the
z-axis by the Greenwich mean sidereal time.  Polar motion is neglected.

All inputs and outputs use kilometres and kilometres/second.  Times are
Julian dates (UT1 is approximated by UTC).
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satpredict.config import get_dtype
from satpredict.constants import OMEGA_EARTH

_JD_J2000 = 2451545.0


def gmst(jd: ArrayLike) -> Array:
    """Greenwich Mean Sidereal Time using the IAU 1982 model.

    Same polynomial as the SGP4 epoch sidereal time, evaluated in
    ``jax.numpy`` so it can be traced and vectorized.

    Args:
        jd: Julian date (UT1 ~ UTC).

    Returns:
        GMST [rad], in ``[0, 2pi)``.

    References:

        1. D. Vallado, *Fundamentals of Astrodynamics and Applications
           (4th Ed.)*, 2010.
    """
    jd = jnp.asarray(jd, dtype=get_dtype())
    t_ut1 = (jd - _JD_J2000) / 36525.0

    gmst_sec = (
        67310.54841
        + (876600.0 * 3600.0 + 8640184.812866) * t_ut1
        + 0.093104 * t_ut1 * t_ut1
        - 6.2e-6 * t_ut1 * t_ut1 * t_ut1
    )

    # 1 second of time = 1/240 degree
    return jnp.mod(gmst_sec / 240.0 * jnp.pi / 180.0, 2.0 * jnp.pi)


def rotation_teme_to_pef(jd: ArrayLike) -> Array:
    """Compute the 3x3 rotation matrix from TEME to PEF.

    Args:
        jd: Julian date (UT1 ~ UTC).

    Returns:
        3x3 rotation matrix ``Rz(GMST)`` (TEME -> PEF).
    """
    theta = gmst(jd)
    c = jnp.cos(theta)
    s = jnp.sin(theta)
    zero = jnp.zeros_like(theta)
    one = jnp.ones_like(theta)

    return jnp.array([
        [c, s, zero],
        [-s, c, zero],
        [zero, zero, one],
    ])


def rotation_pef_to_teme(jd: ArrayLike) -> Array:
    """Transpose of :func:`rotation_teme_to_pef`."""
    return rotation_teme_to_pef(jd).T


def state_teme_to_pef(jd: ArrayLike, r_teme: ArrayLike, v_teme: ArrayLike) -> tuple[Array, Array]:
    """Transform a TEME position and velocity to PEF.

    Velocity includes the Earth-rotation correction:
    ``v_pef = R @ v_teme - omega_earth x r_pef``

    Args:
        jd: Julian date (UT1 ~ UTC).
        r_teme: TEME position ``[x, y, z]`` [km].
        v_teme: TEME velocity ``[vx, vy, vz]`` [km/s].

    Returns:
        Tuple of PEF position [km] and velocity [km/s].
    """
    dtype = get_dtype()
    r_teme = jnp.asarray(r_teme, dtype=dtype)
    v_teme = jnp.asarray(v_teme, dtype=dtype)

    R = rotation_teme_to_pef(jd)
    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)

    r_pef = R @ r_teme
    v_pef = R @ v_teme - jnp.cross(omega, r_pef)

    return r_pef, v_pef


def state_pef_to_teme(jd: ArrayLike, r_pef: ArrayLike, v_pef: ArrayLike) -> tuple[Array, Array]:
    """Inverse of :func:`state_teme_to_pef`.

    Args:
        jd: Julian date (UT1 ~ UTC).
        r_pef: PEF position ``[x, y, z]`` [km].
        v_pef: PEF velocity ``[vx, vy, vz]`` [km/s].

    Returns:
        Tuple of TEME position [km] and velocity [km/s].
    """
    dtype = get_dtype()
    r_pef = jnp.asarray(r_pef, dtype=dtype)
    v_pef = jnp.asarray(v_pef, dtype=dtype)

    R = rotation_teme_to_pef(jd)
    omega = jnp.array([0.0, 0.0, OMEGA_EARTH], dtype=dtype)

    r_teme = R.T @ r_pef
    v_teme = R.T @ (v_pef + jnp.cross(omega, r_pef))

    return r_teme, v_teme
