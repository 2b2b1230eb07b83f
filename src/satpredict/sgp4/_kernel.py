"""
Mean-to-osculating conversion shared by the SGP4 and SDP4 propagators.

Both models reduce to the same tail once the mean elements at the requested
time are known: drag decay of the semi-major axis and eccentricity, the
long-period periodics, the Kepler solve, the short-period periodics and the
rotation into TEME. SDP4 additionally hands in its lunar-solar periodic
terms as the ``periodics`` callable.

All functions here are pure ``jax.numpy`` and JIT/vmap compatible.
"""

from __future__ import annotations

from collections.abc import Callable
from math import pi

import jax
import jax.numpy as jnp
from jax import Array

from satpredict.sgp4._constants import EarthGravity
from satpredict.sgp4._secular import XLCOF_TEMP4, SecularTerms
from satpredict.sgp4._types import OrbitSample

_TWOPI = 2.0 * pi
_X2O3 = 2.0 / 3.0

KEPLER_TOLERANCE = 1.0e-12
KEPLER_MAX_ITERATIONS = 10

# (ep, inclp, nodep, argpp, mp) -> perturbed (ep, inclp, nodep, argpp, mp)
Periodics = Callable[
    [Array, Array, Array, Array, Array],
    tuple[Array, Array, Array, Array, Array],
]


def solve_kepler(u: Array, axnl: Array, aynl: Array) -> Array:
    """Solve the modified Kepler equation for the eccentric longitude.

    Newton-Raphson iteration on ``u = E + aynl*cos(E) - axnl*sin(E)``,
    started from ``E = u``. Each correction is clamped to ``+/-0.95`` rad
    and the iteration stops once the correction drops below 1e-12 or after
    10 steps.

    Args:
        u: Mean longitude minus node [rad].
        axnl: ``e*cos(omega)`` (long-period corrected).
        aynl: ``e*sin(omega)`` (long-period corrected).

    Returns:
        Eccentric longitude [rad].
    """

    def cond(state):
        _, tem5, ktr = state
        return (jnp.abs(tem5) >= KEPLER_TOLERANCE) & (ktr <= KEPLER_MAX_ITERATIONS)

    def body(state):
        eo1, _, ktr = state
        sineo1 = jnp.sin(eo1)
        coseo1 = jnp.cos(eo1)
        tem5 = 1.0 - coseo1 * axnl - sineo1 * aynl
        tem5 = (u - aynl * coseo1 + axnl * sineo1 - eo1) / tem5
        tem5 = jnp.clip(tem5, -0.95, 0.95)
        return eo1 + tem5, tem5, ktr + 1

    init_state = (u, jnp.full_like(u, 9999.9), jnp.int32(1))
    eo1, _, _ = jax.lax.while_loop(cond, body, init_state)
    return eo1


def osculating_sample(
    gravity: EarthGravity,
    sec: SecularTerms,
    nm: Array | float,
    em: Array | float,
    inclm: Array | float,
    mm: Array,
    argpm: Array,
    nodem: Array,
    tempa: Array,
    tempe: Array,
    templ: Array,
    periodics: Periodics | None = None,
) -> OrbitSample:
    """Turn mean elements at time t into a TEME position/velocity sample.

    Args:
        gravity: Earth gravity model constants.
        sec: Secular coefficient bundle of the element set.
        nm: Mean motion before drag [rad/min].
        em: Mean eccentricity before drag.
        inclm: Mean inclination [rad].
        mm: Mean anomaly [rad].
        argpm: Argument of perigee [rad].
        nodem: Right ascension of ascending node [rad].
        tempa: Semi-major axis drag factor from ``secular_drag``.
        tempe: Eccentricity drag decrement from ``secular_drag``.
        templ: Mean longitude drag term from ``secular_drag``.
        periodics: Deep-space lunar-solar periodics, or ``None`` for SGP4.

    Returns:
        ``OrbitSample`` with position [km], velocity [km/s], phase [rad]
        and the SGP4 error code. Position and velocity are NaN whenever
        the error code is non-zero.
    """
    xke = gravity.xke
    j2 = gravity.j2

    nm_bad = nm <= 0.0
    am = (xke / nm) ** _X2O3 * tempa * tempa
    nm = xke / am**1.5
    em = em - tempe

    em_bad = (em >= 1.0) | (em < -0.001)
    em = jnp.maximum(em, 1.0e-6)

    mm = mm + sec.no_unkozai * templ
    xlm = mm + argpm + nodem
    nodem = jnp.fmod(nodem, _TWOPI)
    argpm = jnp.fmod(argpm, _TWOPI)
    xlm = jnp.fmod(xlm, _TWOPI)
    mm = jnp.fmod(xlm - argpm - nodem, _TWOPI)

    ep = em
    xincp = inclm
    argpp = argpm
    nodep = nodem
    mp = mm

    if periodics is None:
        sinip = jnp.sin(xincp)
        cosip = jnp.cos(xincp)
        aycof = sec.aycof
        xlcof = sec.xlcof
        con41 = sec.con41
        x1mth2 = sec.x1mth2
        x7thm1 = sec.x7thm1
    else:
        ep, xincp, nodep, argpp, mp = periodics(ep, xincp, nodep, argpp, mp)

        # Negative inclination after the periodics: reflect through the node
        flip = xincp < 0.0
        xincp = jnp.where(flip, -xincp, xincp)
        nodep = jnp.where(flip, nodep + jnp.pi, nodep)
        argpp = jnp.where(flip, argpp - jnp.pi, argpp)
        ep_bad = (ep < 0.0) | (ep > 1.0)

        sinip = jnp.sin(xincp)
        cosip = jnp.cos(xincp)
        aycof = -0.5 * gravity.j3oj2 * sinip
        denom = jnp.where(jnp.abs(cosip + 1.0) > XLCOF_TEMP4, 1.0 + cosip, XLCOF_TEMP4)
        xlcof = -0.25 * gravity.j3oj2 * sinip * (3.0 + 5.0 * cosip) / denom
        cosisq = cosip * cosip
        con41 = 3.0 * cosisq - 1.0
        x1mth2 = 1.0 - cosisq
        x7thm1 = 7.0 * cosisq - 1.0

    # --- Long period periodics ---
    axnl = ep * jnp.cos(argpp)
    temp = 1.0 / (am * (1.0 - ep * ep))
    aynl = ep * jnp.sin(argpp) + temp * aycof
    xl = mp + argpp + nodep + temp * xlcof * axnl

    # --- Solve Kepler's equation ---
    u = jnp.fmod(xl - nodep, _TWOPI)
    eo1 = solve_kepler(u, axnl, aynl)
    sineo1 = jnp.sin(eo1)
    coseo1 = jnp.cos(eo1)

    # --- Short period preliminary quantities ---
    ecose = axnl * coseo1 + aynl * sineo1
    esine = axnl * sineo1 - aynl * coseo1
    el2 = axnl * axnl + aynl * aynl
    pl = am * (1.0 - el2)

    rl = am * (1.0 - ecose)
    rdotl = jnp.sqrt(am) * esine / rl
    rvdotl = jnp.sqrt(pl) / rl
    betal = jnp.sqrt(1.0 - el2)
    temp = esine / (1.0 + betal)
    sinu = am / rl * (sineo1 - aynl - axnl * temp)
    cosu = am / rl * (coseo1 - axnl + aynl * temp)
    su = jnp.arctan2(sinu, cosu)
    sin2u = (cosu + cosu) * sinu
    cos2u = 1.0 - 2.0 * sinu * sinu
    temp = 1.0 / pl
    temp1 = 0.5 * j2 * temp
    temp2 = temp1 * temp

    # --- Update for short period periodics ---
    mrt = rl * (1.0 - 1.5 * temp2 * betal * con41) + 0.5 * temp1 * x1mth2 * cos2u
    su = su - 0.25 * temp2 * x7thm1 * sin2u
    xnode = nodep + 1.5 * temp2 * cosip * sin2u
    xinc = xincp + 1.5 * temp2 * cosip * sinip * cos2u
    mvt = rdotl - nm * temp1 * x1mth2 * sin2u / xke
    rvdot = rvdotl + nm * temp1 * (x1mth2 * cos2u + 1.5 * con41) / xke

    # --- Orientation vectors ---
    sinsu = jnp.sin(su)
    cossu = jnp.cos(su)
    snod = jnp.sin(xnode)
    cnod = jnp.cos(xnode)
    sini = jnp.sin(xinc)
    cosi = jnp.cos(xinc)
    xmx = -snod * cosi
    xmy = cnod * cosi
    ux = xmx * sinsu + cnod * cossu
    uy = xmy * sinsu + snod * cossu
    uz = sini * sinsu
    vx = xmx * cossu - cnod * sinsu
    vy = xmy * cossu - snod * sinsu
    vz = sini * cossu

    # --- Position and velocity (km and km/s) ---
    vkmpersec = gravity.radiusearthkm * xke / 60.0
    mr = mrt * gravity.radiusearthkm
    r = jnp.array([mr * ux, mr * uy, mr * uz])
    v = jnp.array(
        [
            (mvt * ux + rvdot * vx) * vkmpersec,
            (mvt * uy + rvdot * vy) * vkmpersec,
            (mvt * uz + rvdot * vz) * vkmpersec,
        ]
    )

    # Precedence mirrors the order in which the reference exits early
    error = jnp.where(mrt < 1.0, 6, 0)
    error = jnp.where(pl < 0.0, 4, error)
    if periodics is not None:
        error = jnp.where(ep_bad, 3, error)
    error = jnp.where(em_bad, 1, error)
    error = jnp.where(nm_bad, 2, error)

    valid = error == 0
    r = jnp.where(valid, r, jnp.nan)
    v = jnp.where(valid, v, jnp.nan)
    phase = jnp.mod(xl - nodep - argpp, _TWOPI)

    return OrbitSample(position=r, velocity=v, phase=phase, error=error)
