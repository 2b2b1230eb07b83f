"""
Secular coefficients shared by the SGP4 and SDP4 propagators.

``init_secular`` runs once per element set at Python time and returns a
frozen ``SecularTerms`` bundle of plain floats: the recovered (un-Kozai)
mean motion, the J2/J4 secular rates and the B* drag coefficients.
``secular_drag`` is the JAX-traceable per-call update that advances the
mean elements with those rates.

References:
    1. F. R. Hoots and R. L. Roehrich, *Spacetrack Report No. 3: Models
       for Propagation of NORAD Element Sets*, 1980.
    2. D. Vallado, P. Crawford, R. Hujsak and T. S. Kelso, *Revisiting
       Spacetrack Report #3*, AIAA 2006-6753, 2006.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, fabs, fmod, pi, sin, sqrt

import jax.numpy as jnp
from jax import Array

from satpredict.constants import JD_1950
from satpredict.sgp4._constants import EarthGravity
from satpredict.sgp4._types import OrbitalElementSet

_TWOPI = 2.0 * pi
_X2O3 = 2.0 / 3.0

# Divisor guard for the xlcof singularity at 180 deg inclination
XLCOF_TEMP4 = 1.5e-12


@dataclass(frozen=True)
class SecularTerms:
    """Per-element-set constants of the SGP4 secular theory.

    All values are plain Python floats computed once by ``init_secular``.
    Distances are in earth radii and times in minutes.

    Attributes:
        epoch: Epoch in days since 1950 Jan 0.0 UT.
        gsto: Greenwich sidereal time at epoch [rad].
        ecco, inclo, nodeo, argpo, mo, bstar: Element set values [rad].
        no_unkozai: Recovered (Brouwer) mean motion [rad/min].
        a: Semi-major axis [earth radii].
        alta: Apogee height [earth radii].
        altp: Perigee height [earth radii].
        isimp: Whether the simplified drag model (perigee below 220 km or
            deep-space) is in use.
    """

    epoch: float
    gsto: float
    ecco: float
    inclo: float
    nodeo: float
    argpo: float
    mo: float
    bstar: float
    no_unkozai: float
    a: float
    alta: float
    altp: float
    isimp: bool
    con41: float
    x1mth2: float
    x7thm1: float
    cc1: float
    cc4: float
    cc5: float
    d2: float
    d3: float
    d4: float
    delmo: float
    eta: float
    mdot: float
    argpdot: float
    nodedot: float
    nodecf: float
    omgcof: float
    xmcof: float
    sinmao: float
    t2cof: float
    t3cof: float
    t4cof: float
    t5cof: float
    xlcof: float
    aycof: float

    @property
    def xpidot(self) -> float:
        """Secular rate of the longitude of perigee [rad/min]."""
        return self.argpdot + self.nodedot

    @property
    def period(self) -> float:
        """Orbital period from the recovered mean motion [min]."""
        return _TWOPI / self.no_unkozai


def gstime(jdut1: float) -> float:
    """Compute Greenwich Sidereal Time from a Julian date (Python floats).

    Args:
        jdut1: Julian date (UT1).

    Returns:
        Greenwich sidereal time [rad], in ``[0, 2pi)``.
    """
    tut1 = (jdut1 - 2451545.0) / 36525.0
    temp = (
        -6.2e-6 * tut1 * tut1 * tut1
        + 0.093104 * tut1 * tut1
        + (876600.0 * 3600 + 8640184.812866) * tut1
        + 67310.54841
    )
    temp = fmod(temp * (pi / 180.0) / 240.0, _TWOPI)
    if temp < 0.0:
        temp += _TWOPI
    return temp


def recover_mean_motion(no_kozai: float, ecco: float, inclo: float, gravity: EarthGravity) -> float:
    """Recover the Brouwer mean motion from the Kozai mean motion of a TLE.

    Args:
        no_kozai: Kozai mean motion [rad/min].
        ecco: Eccentricity.
        inclo: Inclination [rad].
        gravity: Earth gravity model constants.

    Returns:
        Un-Kozai'd mean motion [rad/min].
    """
    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = sqrt(omeosq)
    cosio2 = cos(inclo) ** 2

    ak = (gravity.xke / no_kozai) ** _X2O3
    d1 = 0.75 * gravity.j2 * (3.0 * cosio2 - 1.0) / (rteosq * omeosq)
    del_ = d1 / (ak * ak)
    adel = ak * (1.0 - del_ * del_ - del_ * (1.0 / 3.0 + 134.0 * del_ * del_ / 81.0))
    del_ = d1 / (adel * adel)
    return no_kozai / (1.0 + del_)


def init_secular(
    elements: OrbitalElementSet,
    gravity: EarthGravity,
    deep_space: bool = False,
) -> SecularTerms:
    """Compute the secular gravity and drag coefficients of an element set.

    Args:
        elements: Parsed orbital elements.
        gravity: Earth gravity model constants.
        deep_space: Whether the element set was routed to SDP4. Deep-space
            orbits always use the simplified drag model.

    Returns:
        The frozen coefficient bundle.
    """
    R = gravity.radiusearthkm
    j2 = gravity.j2
    ecco = elements.ecco
    inclo = elements.inclo
    bstar = elements.bstar
    epoch = elements.jd_epoch - JD_1950

    ss = 78.0 / R + 1.0
    qzms2t = ((120.0 - 78.0) / R) ** 4
    sfour = ss

    no = recover_mean_motion(elements.no_kozai, ecco, inclo, gravity)
    eccsq = ecco * ecco
    omeosq = 1.0 - eccsq
    rteosq = sqrt(omeosq)
    cosio = cos(inclo)
    cosio2 = cosio * cosio
    sinio = sin(inclo)
    ao = (gravity.xke / no) ** _X2O3
    po = ao * omeosq
    con42 = 1.0 - 5.0 * cosio2
    con41 = -con42 - cosio2 - cosio2
    posq = po * po
    rp = ao * (1.0 - ecco)
    gsto = gstime(epoch + JD_1950)

    a = (no * gravity.tumin) ** (-_X2O3)

    isimp = deep_space or rp < 220.0 / R + 1.0

    # For perigees below 156 km, s and qoms2t are altered
    qzms24 = qzms2t
    perige = (rp - 1.0) * R
    if perige < 156.0:
        sfour = perige - 78.0
        if perige < 98.0:
            sfour = 20.0
        qzms24 = ((120.0 - sfour) / R) ** 4
        sfour = sfour / R + 1.0

    pinvsq = 1.0 / posq
    tsi = 1.0 / (ao - sfour)
    eta = ao * ecco * tsi
    etasq = eta * eta
    eeta = ecco * eta
    psisq = fabs(1.0 - etasq)
    coef = qzms24 * tsi**4
    coef1 = coef / psisq**3.5
    cc2 = (
        coef1
        * no
        * (
            ao * (1.0 + 1.5 * etasq + eeta * (4.0 + etasq))
            + 0.375 * j2 * tsi / psisq * con41 * (8.0 + 3.0 * etasq * (8.0 + etasq))
        )
    )
    cc1 = bstar * cc2
    cc3 = 0.0
    if ecco > 1.0e-4:
        cc3 = -2.0 * coef * tsi * gravity.j3oj2 * no * sinio / ecco
    x1mth2 = 1.0 - cosio2
    cc4 = (
        2.0
        * no
        * coef1
        * ao
        * omeosq
        * (
            eta * (2.0 + 0.5 * etasq)
            + ecco * (0.5 + 2.0 * etasq)
            - j2
            * tsi
            / (ao * psisq)
            * (
                -3.0 * con41 * (1.0 - 2.0 * eeta + etasq * (1.5 - 0.5 * eeta))
                + 0.75 * x1mth2 * (2.0 * etasq - eeta * (1.0 + etasq)) * cos(2.0 * elements.argpo)
            )
        )
    )
    cc5 = 2.0 * coef1 * ao * omeosq * (1.0 + 2.75 * (etasq + eeta) + eeta * etasq)

    cosio4 = cosio2 * cosio2
    temp1 = 1.5 * j2 * pinvsq * no
    temp2 = 0.5 * temp1 * j2 * pinvsq
    temp3 = -0.46875 * gravity.j4 * pinvsq * pinvsq * no
    mdot = (
        no
        + 0.5 * temp1 * rteosq * con41
        + 0.0625 * temp2 * rteosq * (13.0 - 78.0 * cosio2 + 137.0 * cosio4)
    )
    argpdot = (
        -0.5 * temp1 * con42
        + 0.0625 * temp2 * (7.0 - 114.0 * cosio2 + 395.0 * cosio4)
        + temp3 * (3.0 - 36.0 * cosio2 + 49.0 * cosio4)
    )
    xhdot1 = -temp1 * cosio
    nodedot = xhdot1 + (
        0.5 * temp2 * (4.0 - 19.0 * cosio2) + 2.0 * temp3 * (3.0 - 7.0 * cosio2)
    ) * cosio

    omgcof = bstar * cc3 * cos(elements.argpo)
    xmcof = 0.0
    if ecco > 1.0e-4:
        xmcof = -_X2O3 * coef * bstar / eeta
    nodecf = 3.5 * omeosq * xhdot1 * cc1
    t2cof = 1.5 * cc1

    # 1 + cos(i) vanishes for retrograde equatorial orbits
    if fabs(cosio + 1.0) > XLCOF_TEMP4:
        xlcof = -0.25 * gravity.j3oj2 * sinio * (3.0 + 5.0 * cosio) / (1.0 + cosio)
    else:
        xlcof = -0.25 * gravity.j3oj2 * sinio * (3.0 + 5.0 * cosio) / XLCOF_TEMP4
    aycof = -0.5 * gravity.j3oj2 * sinio
    delmo = (1.0 + eta * cos(elements.mo)) ** 3

    d2 = d3 = d4 = t3cof = t4cof = t5cof = 0.0
    if not isimp:
        cc1sq = cc1 * cc1
        d2 = 4.0 * ao * tsi * cc1sq
        temp = d2 * tsi * cc1 / 3.0
        d3 = (17.0 * ao + sfour) * temp
        d4 = 0.5 * temp * ao * tsi * (221.0 * ao + 31.0 * sfour) * cc1
        t3cof = d2 + 2.0 * cc1sq
        t4cof = 0.25 * (3.0 * d3 + cc1 * (12.0 * d2 + 10.0 * cc1sq))
        t5cof = 0.2 * (3.0 * d4 + 12.0 * cc1 * d3 + 6.0 * d2 * d2 + 15.0 * cc1sq * (2.0 * d2 + cc1sq))

    return SecularTerms(
        epoch=epoch,
        gsto=gsto,
        ecco=ecco,
        inclo=inclo,
        nodeo=elements.nodeo,
        argpo=elements.argpo,
        mo=elements.mo,
        bstar=bstar,
        no_unkozai=no,
        a=a,
        alta=a * (1.0 + ecco) - 1.0,
        altp=a * (1.0 - ecco) - 1.0,
        isimp=bool(isimp),
        con41=con41,
        x1mth2=x1mth2,
        x7thm1=7.0 * cosio2 - 1.0,
        cc1=cc1,
        cc4=cc4,
        cc5=cc5,
        d2=d2,
        d3=d3,
        d4=d4,
        delmo=delmo,
        eta=eta,
        mdot=mdot,
        argpdot=argpdot,
        nodedot=nodedot,
        nodecf=nodecf,
        omgcof=omgcof,
        xmcof=xmcof,
        sinmao=sin(elements.mo),
        t2cof=t2cof,
        t3cof=t3cof,
        t4cof=t4cof,
        t5cof=t5cof,
        xlcof=xlcof,
        aycof=aycof,
    )


def secular_drag(sec: SecularTerms, t: Array) -> tuple[Array, Array, Array, Array, Array, Array]:
    """Advance the mean elements for secular gravity and atmospheric drag.

    Args:
        sec: Secular coefficient bundle.
        t: Time since epoch [min].

    Returns:
        Tuple of ``(mm, argpm, nodem, tempa, tempe, templ)``: mean anomaly,
        argument of perigee and node [rad] plus the drag factors applied to
        the semi-major axis, eccentricity and mean longitude.
    """
    xmdf = sec.mo + sec.mdot * t
    argpm = sec.argpo + sec.argpdot * t
    t2 = t * t
    nodem = sec.nodeo + sec.nodedot * t + sec.nodecf * t2
    mm = xmdf
    tempa = 1.0 - sec.cc1 * t
    tempe = sec.bstar * sec.cc4 * t
    templ = sec.t2cof * t2

    if not sec.isimp:
        delomg = sec.omgcof * t
        delmtemp = 1.0 + sec.eta * jnp.cos(xmdf)
        delm = sec.xmcof * (delmtemp * delmtemp * delmtemp - sec.delmo)
        temp = delomg + delm
        mm = xmdf + temp
        argpm = argpm - temp
        t3 = t2 * t
        t4 = t3 * t
        tempa = tempa - sec.d2 * t2 - sec.d3 * t3 - sec.d4 * t4
        tempe = tempe + sec.bstar * sec.cc5 * (jnp.sin(mm) - sec.sinmao)
        templ = templ + sec.t3cof * t3 + t4 * (sec.t4cof + t * sec.t5cof)

    return mm, argpm, nodem, tempa, tempe, templ
