"""Live satellite state: propagation plus derived tracking quantities.

A ``SatelliteState`` owns the propagator model selected for its element
set and is refreshed in place by ``propagate_to``.  Each refresh runs the
propagator once and derives the ground track, speed, footprint, phase,
revolution number, orbit type and (with an observer) the look angles.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array

from satpredict.constants import MINUTES_PER_DAY, RAD2DEG
from satpredict.coordinates.geodetic import position_ecef_to_geodetic
from satpredict.coordinates.topocentric import (
    LookAngles,
    ObserverLocation,
    footprint_diameter,
    observe,
)
from satpredict.exceptions import DecayedError, NumericSingularityError
from satpredict.frames.teme import state_teme_to_pef
from satpredict.sgp4._constants import EarthGravity
from satpredict.sgp4._selector import PropagatorModel, select_ephemeris
from satpredict.sgp4._types import OrbitalElementSet, OrbitSample
from satpredict.tracking._classify import OrbitType, classify_orbit, is_decayed, predict_decay_jd

logger = logging.getLogger(__name__)

_DECAYED = 6


@dataclass
class SatelliteState:
    """Most recent propagated state of one satellite.

    Attributes:
        elements: Element set the state is propagated from.
        model: Propagator selected for ``elements``.
        observer: Optional ground observer for look angles.
        tsince: Minutes since epoch of the current values.
        jul_epoch: Julian date of the element set epoch.
        jul_utc: Julian date of the current values.
        position: TEME position [km].
        velocity: TEME velocity [km/s].
        speed: Magnitude of the velocity [km/s].
        ssplat: Sub-satellite geodetic latitude [deg].
        ssplon: Sub-satellite longitude [deg], in ``(-180, 180]``.
        alt: Altitude above the ellipsoid [km].
        look: Look angles from ``observer``, or ``None`` without one.
        phase: Orbital phase [rad], in ``[0, 2pi)``.
        ma: Phase on the 0-256 scale.
        footprint: Footprint diameter [km].
        orbit: Revolution number.
        otype: Orbit class.
        decay_tsince: Minutes since epoch of the first decay seen, if any.
    """

    elements: OrbitalElementSet
    model: PropagatorModel
    observer: ObserverLocation | None = None
    tsince: float = 0.0
    jul_epoch: float = 0.0
    jul_utc: float = 0.0
    position: Array | None = None
    velocity: Array | None = None
    speed: float = 0.0
    ssplat: float = 0.0
    ssplon: float = 0.0
    alt: float = 0.0
    look: LookAngles | None = None
    phase: float = 0.0
    ma: float = 0.0
    footprint: float = 0.0
    orbit: int = 0
    otype: OrbitType = OrbitType.LEO
    decay_tsince: float | None = None

    @property
    def gravity(self) -> EarthGravity:
        return self.model.gravity

    @property
    def perigee_alt(self) -> float:
        """Mean perigee altitude at epoch [km]."""
        return self.model.secular.altp * self.gravity.radiusearthkm

    @property
    def apogee_alt(self) -> float:
        """Mean apogee altitude at epoch [km]."""
        return self.model.secular.alta * self.gravity.radiusearthkm

    @property
    def period(self) -> float:
        """Orbital period [min]."""
        return self.model.secular.period

    @property
    def decay_jd(self) -> float:
        """Estimated Julian date of decay (``inf`` without drag data)."""
        return predict_decay_jd(self.elements)


def revolution_number(elements: OrbitalElementSet, tsince: float) -> int:
    """Revolution number at a time offset from epoch.

    ``floor(n*age + M0/2pi) + revnum - 1`` with ``n`` in rev/day and
    ``age`` the offset in days.  Negative results are clamped to 0, and the
    count never decreases with time since no drag correction is applied.

    Args:
        elements: Parsed orbital elements.
        tsince: Minutes since epoch.

    Returns:
        The revolution number.
    """
    age = tsince / MINUTES_PER_DAY
    revs = elements.mean_motion * age + elements.mo / (2.0 * math.pi)
    return max(math.floor(revs) + elements.revnum - 1, 0)


def _apply_sample(state: SatelliteState, tsince: float, sample: OrbitSample) -> None:
    """Derive every tracking quantity from one propagator sample."""
    elements = state.elements
    jd = state.jul_epoch + tsince / MINUTES_PER_DAY
    r = sample.position
    v = sample.velocity

    r_pef, _ = state_teme_to_pef(jd, r, v)
    lon, lat, alt = position_ecef_to_geodetic(r_pef, use_degrees=True)

    look = None
    if state.observer is not None:
        look = LookAngles(*(float(x) for x in observe(jd, r, v, state.observer)))

    phase = float(sample.phase)

    state.tsince = tsince
    state.jul_utc = jd
    state.position = r
    state.velocity = v
    state.speed = float(jnp.linalg.norm(v))
    state.ssplat = float(lat)
    state.ssplon = float(lon)
    state.alt = float(alt)
    state.look = look
    state.phase = phase
    state.ma = phase * RAD2DEG * 256.0 / 360.0
    state.footprint = float(footprint_diameter(r, state.gravity.radiusearthkm))
    state.orbit = revolution_number(elements, tsince)
    state.otype = classify_orbit(
        state.perigee_alt,
        state.apogee_alt,
        elements.inclination,
        state.period,
        decayed=is_decayed(elements, jd),
        radius=state.gravity.radiusearthkm,
    )


def propagate_to(state: SatelliteState, tsince: float) -> SatelliteState:
    """Refresh a state to a time offset from its epoch.

    The state is updated in place.  On failure it keeps the values of its
    last successful refresh.

    Args:
        state: State to refresh.
        tsince: Minutes since epoch; negative values propagate backwards.

    Returns:
        The same ``state``, refreshed.

    Raises:
        DecayedError: If the orbit has decayed at or before *tsince*.
        NumericSingularityError: If the propagator reports any other error.
    """
    tsince = float(tsince)
    catnum = state.elements.catnum

    if state.decay_tsince is not None and tsince >= state.decay_tsince:
        raise DecayedError(_DECAYED, state.decay_tsince, catnum)

    sample = state.model.propagate(tsince)
    code = int(sample.error)

    if code != 0:
        logger.warning(
            "Propagation of #%d (%s) failed at %.3f min with error %d",
            catnum,
            state.model.kind,
            tsince,
            code,
        )
        if code == _DECAYED:
            if tsince >= 0.0:
                state.decay_tsince = tsince
            raise DecayedError(code, tsince, catnum)
        raise NumericSingularityError(code, tsince, catnum)

    _apply_sample(state, tsince, sample)
    return state


def propagate_to_jd(state: SatelliteState, jd: float) -> SatelliteState:
    """Refresh a state to an absolute Julian date.

    Args:
        state: State to refresh.
        jd: Julian date (UTC).

    Returns:
        The same ``state``, refreshed.
    """
    return propagate_to(state, (jd - state.jul_epoch) * MINUTES_PER_DAY)


def initialize_at_epoch(
    elements: OrbitalElementSet,
    observer: ObserverLocation | None = None,
    gravity: str | EarthGravity = "wgs72",
) -> SatelliteState:
    """Select the propagator for an element set and evaluate it at epoch.

    Args:
        elements: Parsed orbital elements.
        observer: Optional ground observer for look angles.
        gravity: Gravity model name or constants.

    Returns:
        A state populated at ``tsince = 0``.

    Raises:
        NumericSingularityError: If the element set cannot be propagated
            even at its own epoch.

    Examples:
        ```python
        from satpredict import initialize_at_epoch, parse_3le, propagate_to
        state = initialize_at_epoch(parse_3le(record))
        propagate_to(state, 90.0)
        print(state.ssplat, state.ssplon, state.alt)
        ```
    """
    model = select_ephemeris(elements, gravity)
    logger.debug(
        "Initializing #%d %r with the %s model",
        elements.catnum,
        elements.name,
        model.kind,
    )
    state = SatelliteState(
        elements=elements,
        model=model,
        observer=observer,
        jul_epoch=elements.jd_epoch,
        jul_utc=elements.jd_epoch,
    )
    return propagate_to(state, 0.0)
