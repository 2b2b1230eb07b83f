"""
SDP4 deep-space propagator.

Orbits with a period of 225 minutes or more are propagated with the SGP4
secular theory plus three families of deep-space terms:

- **Lunar-solar secular rates** of eccentricity, inclination, mean anomaly,
  node and perigee.
- **Lunar-solar periodics**, evaluated from the Sun's and Moon's mean
  anomalies at the requested time (``BodyPeriodics``). Below 0.2 rad of
  inclination they are applied through the Lyddane modification.
- **Geopotential resonance** for synchronous (~24 h) and half-day (~12 h,
  eccentric) orbits, integrated from epoch in 720 minute steps.

Initialization is pure Python and runs once at selection time; the
per-call routines are JAX-traceable. The resonance integration always
restarts from epoch, so a propagation is a pure function of the time
offset and does not depend on earlier calls.

References:
    1. F. R. Hoots and R. L. Roehrich, *Spacetrack Report No. 3*, 1980.
    2. D. Vallado, P. Crawford, R. Hujsak and T. S. Kelso, *Revisiting
       Spacetrack Report #3*, AIAA 2006-6753, 2006.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from math import atan2, cos, fmod, pi, sin, sqrt
from typing import ClassVar, NamedTuple

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from satpredict.config import get_dtype
from satpredict.sgp4._constants import EarthGravity
from satpredict.sgp4._kernel import osculating_sample
from satpredict.sgp4._secular import SecularTerms, secular_drag
from satpredict.sgp4._types import OrbitSample

_TWOPI = 2.0 * pi
_X2O3 = 2.0 / 3.0

# Solar perturbation constants
ZES = 0.01675  # Solar orbit eccentricity
ZNS = 1.19459e-5  # Solar mean motion [rad/min]
C1SS = 2.9864797e-6
ZSINIS = 0.39785416  # sin/cos of the ecliptic obliquity
ZCOSIS = 0.91744867
ZCOSGS = 0.1945905
ZSINGS = -0.98088458

# Lunar perturbation constants
ZEL = 0.05490  # Lunar orbit eccentricity
ZNL = 1.5835218e-4  # Lunar mean motion [rad/min]
C1L = 4.7968065e-7

# Resonance constants
RPTIM = 4.37526908801129966e-3  # Earth rotation rate [rad/min]
STEPP = 720.0  # Integrator step [min]
STEP2 = 259200.0  # STEPP**2 / 2
Q22 = 1.7891679e-6
Q31 = 2.1460748e-6
Q33 = 2.2123015e-7
ROOT22 = 1.7891679e-6
ROOT32 = 3.7393792e-7
ROOT44 = 7.3636953e-9
ROOT52 = 1.1428639e-7
ROOT54 = 2.1765803e-9
FASX2 = 0.13130908
FASX4 = 2.8843198
FASX6 = 0.37448087
G22 = 5.7686396
G32 = 0.95240898
G44 = 1.8014998
G52 = 1.0508330
G54 = 4.4108898

# Within 3 deg of the equator the node rate from lunar-solar terms is dropped
_NEAR_EQUATORIAL = 5.2359877e-2


class Resonance(IntEnum):
    """Geopotential resonance class of a deep-space orbit."""

    NONE = 0
    SYNCHRONOUS = 1
    HALF_DAY = 2


class _BodyTerms(NamedTuple):
    """Per-body coefficients of the lunar-solar expansion."""

    s1: float
    s2: float
    s3: float
    s4: float
    s5: float
    s6: float
    s7: float
    z1: float
    z2: float
    z3: float
    z11: float
    z12: float
    z13: float
    z21: float
    z22: float
    z23: float
    z31: float
    z32: float
    z33: float


def _body_terms(
    zcosg: float,
    zsing: float,
    zcosi: float,
    zsini: float,
    zcosh: float,
    zsinh: float,
    cc: float,
    em: float,
    cosim: float,
    sinim: float,
    cosomm: float,
    sinomm: float,
    xnoi: float,
) -> _BodyTerms:
    """Expand the perturbing body's orientation against the satellite orbit."""
    emsq = em * em
    betasq = 1.0 - emsq
    rtemsq = sqrt(betasq)

    a1 = zcosg * zcosh + zsing * zcosi * zsinh
    a3 = -zsing * zcosh + zcosg * zcosi * zsinh
    a7 = -zcosg * zsinh + zsing * zcosi * zcosh
    a8 = zsing * zsini
    a9 = zsing * zsinh + zcosg * zcosi * zcosh
    a10 = zcosg * zsini
    a2 = cosim * a7 + sinim * a8
    a4 = cosim * a9 + sinim * a10
    a5 = -sinim * a7 + cosim * a8
    a6 = -sinim * a9 + cosim * a10

    x1 = a1 * cosomm + a2 * sinomm
    x2 = a3 * cosomm + a4 * sinomm
    x3 = -a1 * sinomm + a2 * cosomm
    x4 = -a3 * sinomm + a4 * cosomm
    x5 = a5 * sinomm
    x6 = a6 * sinomm
    x7 = a5 * cosomm
    x8 = a6 * cosomm

    z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
    z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
    z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
    z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * emsq
    z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * emsq
    z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * emsq
    z11 = -6.0 * a1 * a5 + emsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
    z12 = -6.0 * (a1 * a6 + a3 * a5) + emsq * (
        -24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5)
    )
    z13 = -6.0 * a3 * a6 + emsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
    z21 = 6.0 * a2 * a5 + emsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
    z22 = 6.0 * (a4 * a5 + a2 * a6) + emsq * (
        24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8)
    )
    z23 = 6.0 * a4 * a6 + emsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
    z1 = z1 + z1 + betasq * z31
    z2 = z2 + z2 + betasq * z32
    z3 = z3 + z3 + betasq * z33

    s3 = cc * xnoi
    s2 = -0.5 * s3 / rtemsq
    s4 = s3 * rtemsq
    s1 = -15.0 * em * s4
    s5 = x1 * x3 + x2 * x4
    s6 = x2 * x3 + x1 * x4
    s7 = x2 * x4 - x1 * x3

    return _BodyTerms(
        s1, s2, s3, s4, s5, s6, s7, z1, z2, z3, z11, z12, z13, z21, z22, z23, z31, z32, z33
    )


def _secular_rates(b: _BodyTerms, emsq: float, zn: float) -> tuple[float, float, float, float, float]:
    """Secular rates of (e, i, M, perigee, node) caused by one perturbing body."""
    return (
        b.s1 * zn * b.s5,
        b.s2 * zn * (b.z11 + b.z13),
        -zn * b.s3 * (b.z1 + b.z3 - 14.0 - 6.0 * emsq),
        b.s4 * zn * (b.z31 + b.z33 - 6.0),
        -zn * b.s2 * (b.z21 + b.z23),
    )


@dataclass(frozen=True)
class BodyPeriodics:
    """Periodic perturbation coefficients from one body (Sun or Moon).

    Attributes:
        e2, e3: Eccentricity coefficients.
        i2, i3: Inclination coefficients.
        l2, l3, l4: Mean anomaly coefficients.
        gh2, gh3, gh4: Perigee coefficients.
        h2, h3: Node coefficients.
        zmo: Body mean anomaly at epoch [rad].
        zn: Body mean motion [rad/min].
        ze: Body orbit eccentricity.
    """

    e2: float
    e3: float
    i2: float
    i3: float
    l2: float
    l3: float
    l4: float
    gh2: float
    gh3: float
    gh4: float
    h2: float
    h3: float
    zmo: float
    zn: float
    ze: float

    @classmethod
    def from_terms(cls, b: _BodyTerms, emsq: float, zmo: float, zn: float, ze: float) -> BodyPeriodics:
        return cls(
            e2=2.0 * b.s1 * b.s6,
            e3=2.0 * b.s1 * b.s7,
            i2=2.0 * b.s2 * b.z12,
            i3=2.0 * b.s2 * (b.z13 - b.z11),
            l2=-2.0 * b.s3 * b.z2,
            l3=-2.0 * b.s3 * (b.z3 - b.z1),
            l4=-2.0 * b.s3 * (-21.0 - 9.0 * emsq) * ze,
            gh2=2.0 * b.s4 * b.z32,
            gh3=2.0 * b.s4 * (b.z33 - b.z31),
            gh4=-18.0 * b.s4 * ze,
            h2=-2.0 * b.s2 * b.z22,
            h3=-2.0 * b.s2 * (b.z23 - b.z21),
            zmo=zmo,
            zn=zn,
            ze=ze,
        )

    def evaluate(self, t: Array) -> tuple[Array, Array, Array, Array, Array]:
        """Periodic corrections ``(pe, pinc, pl, pgh, ph)`` at time *t* [min]."""
        zm = self.zmo + self.zn * t
        zf = zm + 2.0 * self.ze * jnp.sin(zm)
        sinzf = jnp.sin(zf)
        f2 = 0.5 * sinzf * sinzf - 0.25
        f3 = -0.5 * sinzf * jnp.cos(zf)
        pe = self.e2 * f2 + self.e3 * f3
        pinc = self.i2 * f2 + self.i3 * f3
        pl = self.l2 * f2 + self.l3 * f3 + self.l4 * sinzf
        pgh = self.gh2 * f2 + self.gh3 * f3 + self.gh4 * sinzf
        ph = self.h2 * f2 + self.h3 * f3
        return pe, pinc, pl, pgh, ph


@dataclass(frozen=True)
class LunisolarTerms:
    """Lunar-solar secular rates and periodic coefficients.

    Attributes:
        solar: Periodic coefficients of the Sun.
        lunar: Periodic coefficients of the Moon.
        dedt: Eccentricity rate [1/min].
        didt: Inclination rate [rad/min].
        dmdt: Mean anomaly rate [rad/min].
        dnodt: Node rate [rad/min].
        domdt: Argument of perigee rate [rad/min].
    """

    solar: BodyPeriodics
    lunar: BodyPeriodics
    dedt: float
    didt: float
    dmdt: float
    dnodt: float
    domdt: float

    def apply(
        self,
        t: Array,
        ep: Array,
        inclp: Array,
        nodep: Array,
        argpp: Array,
        mp: Array,
    ) -> tuple[Array, Array, Array, Array, Array]:
        """Add the lunar-solar periodics to the mean elements at time *t*.

        Returns:
            Perturbed ``(ep, inclp, nodep, argpp, mp)``.
        """
        ses, sis, sls, sghs, shs = self.solar.evaluate(t)
        sel, sil, sll, sghl, shll = self.lunar.evaluate(t)
        pe = ses + sel
        pinc = sis + sil
        pl = sls + sll
        pgh = sghs + sghl
        ph = shs + shll

        inclp = inclp + pinc
        ep = ep + pe
        sinip = jnp.sin(inclp)
        cosip = jnp.cos(inclp)

        # Direct application (inclp >= 0.2 rad)
        ph_direct = ph / sinip
        argpp_direct = argpp + pgh - cosip * ph_direct
        nodep_direct = nodep + ph_direct

        # Lyddane modification (inclp < 0.2 rad)
        sinop = jnp.sin(nodep)
        cosop = jnp.cos(nodep)
        alfdp = sinip * sinop + (ph * cosop + pinc * cosip * sinop)
        betdp = sinip * cosop + (-ph * sinop + pinc * cosip * cosop)
        xls = mp + argpp + pl + pgh + (cosip - pinc * sinip) * nodep
        xnoh = nodep
        nodep_lyd = jnp.arctan2(alfdp, betdp)
        nodep_lyd = jnp.where(
            jnp.abs(xnoh - nodep_lyd) > jnp.pi,
            jnp.where(nodep_lyd < xnoh, nodep_lyd + _TWOPI, nodep_lyd - _TWOPI),
            nodep_lyd,
        )
        argpp_lyd = xls - (mp + pl) - cosip * nodep_lyd

        use_direct = inclp >= 0.2
        argpp = jnp.where(use_direct, argpp_direct, argpp_lyd)
        nodep = jnp.where(use_direct, nodep_direct, nodep_lyd)
        mp = mp + pl

        return ep, inclp, nodep, argpp, mp


@dataclass(frozen=True)
class ResonanceTerms:
    """Geopotential resonance coefficients.

    Only the ``del*`` terms are used for synchronous orbits and only the
    ``d****`` terms for half-day orbits; the rest stay zero.

    Attributes:
        kind: Resonance class.
        xfact: Resonance phase rate offset [rad/min].
        xlamo: Resonance phase at epoch [rad].
    """

    kind: Resonance
    xfact: float = 0.0
    xlamo: float = 0.0
    del1: float = 0.0
    del2: float = 0.0
    del3: float = 0.0
    d2201: float = 0.0
    d2211: float = 0.0
    d3210: float = 0.0
    d3222: float = 0.0
    d4410: float = 0.0
    d4422: float = 0.0
    d5220: float = 0.0
    d5232: float = 0.0
    d5421: float = 0.0
    d5433: float = 0.0

    def _rates(self, sec: SecularTerms, xli: Array, xni: Array, atime: Array) -> tuple[Array, Array, Array]:
        """Derivatives ``(xndt, xldot, xnddt)`` of the resonance state."""
        xldot = xni + self.xfact

        if self.kind is Resonance.SYNCHRONOUS:
            xndt = (
                self.del1 * jnp.sin(xli - FASX2)
                + self.del2 * jnp.sin(2.0 * (xli - FASX4))
                + self.del3 * jnp.sin(3.0 * (xli - FASX6))
            )
            xnddt = (
                self.del1 * jnp.cos(xli - FASX2)
                + 2.0 * self.del2 * jnp.cos(2.0 * (xli - FASX4))
                + 3.0 * self.del3 * jnp.cos(3.0 * (xli - FASX6))
            )
            return xndt, xldot, xnddt * xldot

        xomi = sec.argpo + sec.argpdot * atime
        x2omi = xomi + xomi
        x2li = xli + xli
        xndt = (
            self.d2201 * jnp.sin(x2omi + xli - G22)
            + self.d2211 * jnp.sin(xli - G22)
            + self.d3210 * jnp.sin(xomi + xli - G32)
            + self.d3222 * jnp.sin(-xomi + xli - G32)
            + self.d4410 * jnp.sin(x2omi + x2li - G44)
            + self.d4422 * jnp.sin(x2li - G44)
            + self.d5220 * jnp.sin(xomi + xli - G52)
            + self.d5232 * jnp.sin(-xomi + xli - G52)
            + self.d5421 * jnp.sin(xomi + x2li - G54)
            + self.d5433 * jnp.sin(-xomi + x2li - G54)
        )
        xnddt = (
            self.d2201 * jnp.cos(x2omi + xli - G22)
            + self.d2211 * jnp.cos(xli - G22)
            + self.d3210 * jnp.cos(xomi + xli - G32)
            + self.d3222 * jnp.cos(-xomi + xli - G32)
            + self.d5220 * jnp.cos(xomi + xli - G52)
            + self.d5232 * jnp.cos(-xomi + xli - G52)
            + 2.0
            * (
                self.d4410 * jnp.cos(x2omi + x2li - G44)
                + self.d4422 * jnp.cos(x2li - G44)
                + self.d5421 * jnp.cos(xomi + x2li - G54)
                + self.d5433 * jnp.cos(-xomi + x2li - G54)
            )
        )
        return xndt, xldot, xnddt * xldot

    def advance(
        self,
        sec: SecularTerms,
        t: Array,
        nodem: Array,
        argpm: Array,
        nm: Array | float,
        mm: Array,
    ) -> tuple[Array | float, Array]:
        """Integrate the resonance state from epoch to *t*.

        Args:
            sec: Secular coefficient bundle.
            t: Time since epoch [min].
            nodem: Node at *t* [rad].
            argpm: Argument of perigee at *t* [rad].
            nm: Mean motion [rad/min].
            mm: Mean anomaly at *t* [rad].

        Returns:
            Tuple of ``(nm, mm)``, unchanged for non-resonant orbits.
        """
        if self.kind is Resonance.NONE:
            return nm, mm

        theta = jnp.fmod(sec.gsto + t * RPTIM, _TWOPI)
        delt = jnp.where(t > 0.0, STEPP, -STEPP)

        def cond(state):
            atime, _, _ = state
            return jnp.abs(t - atime) >= STEPP

        def body(state):
            atime, xni, xli = state
            xndt, xldot, xnddt = self._rates(sec, xli, xni, atime)
            return (
                atime + delt,
                xni + xndt * delt + xnddt * STEP2,
                xli + xldot * delt + xndt * STEP2,
            )

        init_state = (
            jnp.zeros_like(t),
            jnp.full_like(t, sec.no_unkozai),
            jnp.full_like(t, self.xlamo),
        )
        atime, xni, xli = jax.lax.while_loop(cond, body, init_state)

        ft = t - atime
        xndt, xldot, xnddt = self._rates(sec, xli, xni, atime)
        nm = xni + xndt * ft + xnddt * ft * ft * 0.5
        xl = xli + xldot * ft + xndt * ft * ft * 0.5

        if self.kind is Resonance.SYNCHRONOUS:
            mm = xl - nodem - argpm + theta
        else:
            mm = xl - 2.0 * nodem + 2.0 * theta
        return nm, mm


def _init_resonance(
    gravity: EarthGravity,
    sec: SecularTerms,
    lunisolar: LunisolarTerms,
) -> ResonanceTerms:
    """Classify the resonance and compute its coefficients at epoch."""
    nm = sec.no_unkozai
    em = sec.ecco
    emsq = em * em
    cosim = cos(sec.inclo)
    sinim = sin(sec.inclo)
    theta = fmod(sec.gsto, _TWOPI)

    if 0.0034906585 < nm < 0.0052359877:
        kind = Resonance.SYNCHRONOUS
    elif 8.26e-3 <= nm <= 9.24e-3 and em >= 0.5:
        kind = Resonance.HALF_DAY
    else:
        return ResonanceTerms(kind=Resonance.NONE)

    aonv = (nm / gravity.xke) ** _X2O3

    if kind is Resonance.SYNCHRONOUS:
        g200 = 1.0 + emsq * (-2.5 + 0.8125 * emsq)
        g310 = 1.0 + 2.0 * emsq
        g300 = 1.0 + emsq * (-6.0 + 6.60937 * emsq)
        f220 = 0.75 * (1.0 + cosim) * (1.0 + cosim)
        f311 = 0.9375 * sinim * sinim * (1.0 + 3.0 * cosim) - 0.75 * (1.0 + cosim)
        f330 = 1.875 * (1.0 + cosim) ** 3
        del1 = 3.0 * nm * nm * aonv * aonv
        return ResonanceTerms(
            kind=kind,
            del1=del1 * f311 * g310 * Q31 * aonv,
            del2=2.0 * del1 * f220 * g200 * Q22,
            del3=3.0 * del1 * f330 * g300 * Q33 * aonv,
            xlamo=fmod(sec.mo + sec.nodeo + sec.argpo - theta, _TWOPI),
            xfact=(
                sec.mdot
                + sec.xpidot
                - RPTIM
                + lunisolar.dmdt
                + lunisolar.domdt
                + lunisolar.dnodt
                - nm
            ),
        )

    # Half-day resonance: eccentricity-dependent G functions
    cosisq = cosim * cosim
    eoc = em * emsq
    g201 = -0.306 - (em - 0.64) * 0.440

    if em <= 0.65:
        g211 = 3.616 - 13.2470 * em + 16.2900 * emsq
        g310 = -19.302 + 117.3900 * em - 228.4190 * emsq + 156.5910 * eoc
        g322 = -18.9068 + 109.7927 * em - 214.6334 * emsq + 146.5816 * eoc
        g410 = -41.122 + 242.6940 * em - 471.0940 * emsq + 313.9530 * eoc
        g422 = -146.407 + 841.8800 * em - 1629.014 * emsq + 1083.4350 * eoc
        g520 = -532.114 + 3017.977 * em - 5740.032 * emsq + 3708.2760 * eoc
    else:
        g211 = -72.099 + 331.819 * em - 508.738 * emsq + 266.724 * eoc
        g310 = -346.844 + 1582.851 * em - 2415.925 * emsq + 1246.113 * eoc
        g322 = -342.585 + 1554.908 * em - 2366.899 * emsq + 1215.972 * eoc
        g410 = -1052.797 + 4758.686 * em - 7193.992 * emsq + 3651.957 * eoc
        g422 = -3581.690 + 16178.110 * em - 24462.770 * emsq + 12422.520 * eoc
        if em > 0.715:
            g520 = -5149.66 + 29936.92 * em - 54087.36 * emsq + 31324.56 * eoc
        else:
            g520 = 1464.74 - 4664.75 * em + 3763.64 * emsq

    if em < 0.7:
        g533 = -919.22770 + 4988.6100 * em - 9064.7700 * emsq + 5542.21 * eoc
        g521 = -822.71072 + 4568.6173 * em - 8491.4146 * emsq + 5337.524 * eoc
        g532 = -853.66600 + 4690.2500 * em - 8624.7700 * emsq + 5341.4 * eoc
    else:
        g533 = -37995.780 + 161616.52 * em - 229838.20 * emsq + 109377.94 * eoc
        g521 = -51752.104 + 218913.95 * em - 309468.16 * emsq + 146349.42 * eoc
        g532 = -40023.880 + 170470.89 * em - 242699.48 * emsq + 115605.82 * eoc

    sini2 = sinim * sinim
    f220 = 0.75 * (1.0 + 2.0 * cosim + cosisq)
    f221 = 1.5 * sini2
    f321 = 1.875 * sinim * (1.0 - 2.0 * cosim - 3.0 * cosisq)
    f322 = -1.875 * sinim * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    f441 = 35.0 * sini2 * f220
    f442 = 39.3750 * sini2 * sini2
    f522 = (
        9.84375
        * sinim
        * (
            sini2 * (1.0 - 2.0 * cosim - 5.0 * cosisq)
            + 0.33333333 * (-2.0 + 4.0 * cosim + 6.0 * cosisq)
        )
    )
    f523 = sinim * (
        4.92187512 * sini2 * (-2.0 - 4.0 * cosim + 10.0 * cosisq)
        + 6.56250012 * (1.0 + 2.0 * cosim - 3.0 * cosisq)
    )
    f542 = 29.53125 * sinim * (2.0 - 8.0 * cosim + cosisq * (-12.0 + 8.0 * cosim + 10.0 * cosisq))
    f543 = 29.53125 * sinim * (-2.0 - 8.0 * cosim + cosisq * (12.0 + 8.0 * cosim - 10.0 * cosisq))

    temp1 = 3.0 * nm * nm * aonv * aonv
    temp = temp1 * ROOT22
    d2201 = temp * f220 * g201
    d2211 = temp * f221 * g211
    temp1 = temp1 * aonv
    temp = temp1 * ROOT32
    d3210 = temp * f321 * g310
    d3222 = temp * f322 * g322
    temp1 = temp1 * aonv
    temp = 2.0 * temp1 * ROOT44
    d4410 = temp * f441 * g410
    d4422 = temp * f442 * g422
    temp1 = temp1 * aonv
    temp = temp1 * ROOT52
    d5220 = temp * f522 * g520
    d5232 = temp * f523 * g532
    temp = 2.0 * temp1 * ROOT54
    d5421 = temp * f542 * g521
    d5433 = temp * f543 * g533

    return ResonanceTerms(
        kind=kind,
        d2201=d2201,
        d2211=d2211,
        d3210=d3210,
        d3222=d3222,
        d4410=d4410,
        d4422=d4422,
        d5220=d5220,
        d5232=d5232,
        d5421=d5421,
        d5433=d5433,
        xlamo=fmod(sec.mo + sec.nodeo + sec.nodeo - theta - theta, _TWOPI),
        xfact=sec.mdot + lunisolar.dmdt + 2.0 * (sec.nodedot + lunisolar.dnodt - RPTIM) - nm,
    )


def init_deep_space(gravity: EarthGravity, sec: SecularTerms) -> tuple[LunisolarTerms, ResonanceTerms]:
    """Compute the deep-space coefficients of an element set at epoch.

    Args:
        gravity: Earth gravity model constants.
        sec: Secular coefficients from ``init_secular(..., deep_space=True)``.

    Returns:
        Tuple of ``(lunisolar, resonance)`` coefficient bundles.
    """
    em = sec.ecco
    emsq = em * em
    inclm = sec.inclo
    snodm = sin(sec.nodeo)
    cnodm = cos(sec.nodeo)
    sinomm = sin(sec.argpo)
    cosomm = cos(sec.argpo)
    sinim = sin(inclm)
    cosim = cos(inclm)
    xnoi = 1.0 / sec.no_unkozai

    # Lunar orbit orientation at epoch; day counts from 1900 Jan 0.5
    day = sec.epoch + 18261.5
    xnodce = fmod(4.5236020 - 9.2422029e-4 * day, _TWOPI)
    stem = sin(xnodce)
    ctem = cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = sqrt(1.0 - zsinhl * zsinhl)
    gam = 5.8351514 + 0.0019443680 * day
    zx = 0.39785416 * stem / zsinil
    zy = zcoshl * ctem + 0.91744867 * zsinhl * stem
    zx = gam + atan2(zx, zy) - xnodce
    zcosgl = cos(zx)
    zsingl = sin(zx)

    orbit = (em, cosim, sinim, cosomm, sinomm, xnoi)
    solar = _body_terms(ZCOSGS, ZSINGS, ZCOSIS, ZSINIS, cnodm, snodm, C1SS, *orbit)
    lunar = _body_terms(
        zcosgl,
        zsingl,
        zcosil,
        zsinil,
        zcoshl * cnodm + zsinhl * snodm,
        snodm * zcoshl - cnodm * zsinhl,
        C1L,
        *orbit,
    )

    zmol = fmod(4.7199672 + 0.22997150 * day - gam, _TWOPI)
    zmos = fmod(6.2565837 + 0.017201977 * day, _TWOPI)

    ses, sis, sls, sghs, shs = _secular_rates(solar, emsq, ZNS)
    sel, sil, sll, sghl, shll = _secular_rates(lunar, emsq, ZNL)

    if inclm < _NEAR_EQUATORIAL or inclm > pi - _NEAR_EQUATORIAL:
        shs = 0.0
        shll = 0.0
    if sinim != 0.0:
        shs = shs / sinim
    domdt = sghs - cosim * shs + sghl
    dnodt = shs
    if sinim != 0.0:
        domdt = domdt - cosim / sinim * shll
        dnodt = dnodt + shll / sinim

    lunisolar = LunisolarTerms(
        solar=BodyPeriodics.from_terms(solar, emsq, zmos, ZNS, ZES),
        lunar=BodyPeriodics.from_terms(lunar, emsq, zmol, ZNL, ZEL),
        dedt=ses + sel,
        didt=sis + sil,
        dmdt=sls + sll,
        dnodt=dnodt,
        domdt=domdt,
    )
    return lunisolar, _init_resonance(gravity, sec, lunisolar)


@dataclass(frozen=True)
class DeepSpaceModel:
    """SDP4 propagator for a single element set.

    Attributes:
        gravity: Earth gravity model constants.
        secular: Secular coefficients computed at selection time.
        lunisolar: Lunar-solar secular rates and periodic coefficients.
        resonance: Geopotential resonance coefficients.
    """

    gravity: EarthGravity
    secular: SecularTerms
    lunisolar: LunisolarTerms
    resonance: ResonanceTerms

    kind: ClassVar[str] = "deep-space"
    deep_space: ClassVar[bool] = True

    def propagate(self, tsince: ArrayLike) -> OrbitSample:
        """Propagate to a time offset from epoch (JAX, JIT-compatible).

        Use ``jax.vmap(model.propagate)`` to evaluate many offsets at once.

        Args:
            tsince: Time since epoch [min]. Negative values propagate
                backwards.

        Returns:
            ``OrbitSample`` with TEME position [km], velocity [km/s],
            phase [rad] and SGP4 error code.
        """
        sec = self.secular
        ls = self.lunisolar
        t = jnp.asarray(tsince, dtype=get_dtype())

        mm, argpm, nodem, tempa, tempe, templ = secular_drag(sec, t)

        em = sec.ecco + ls.dedt * t
        inclm = sec.inclo + ls.didt * t
        argpm = argpm + ls.domdt * t
        nodem = nodem + ls.dnodt * t
        mm = mm + ls.dmdt * t

        nm, mm = self.resonance.advance(sec, t, nodem, argpm, sec.no_unkozai, mm)

        def periodics(ep, inclp, nodep, argpp, mp):
            return ls.apply(t, ep, inclp, nodep, argpp, mp)

        return osculating_sample(
            self.gravity,
            sec,
            nm,
            em,
            inclm,
            mm,
            argpm,
            nodem,
            tempa,
            tempe,
            templ,
            periodics,
        )
