"""
Ephemeris selection: route an element set to SGP4 or SDP4.

The choice depends only on the orbital period computed from the recovered
(un-Kozai) mean motion: 225 minutes or more selects the deep-space model.
Selection is deterministic and performed once per element set; the
returned model carries every coefficient it needs and is immutable.
"""

from __future__ import annotations

import logging
from math import pi
from typing import Union

from satpredict.sgp4._constants import EarthGravity, get_gravity
from satpredict.sgp4._deep_space import DeepSpaceModel, init_deep_space
from satpredict.sgp4._near_earth import NearEarthModel
from satpredict.sgp4._secular import init_secular, recover_mean_motion
from satpredict.sgp4._types import OrbitalElementSet

logger = logging.getLogger(__name__)

DEEP_SPACE_PERIOD = 225.0
"""Period threshold selecting the deep-space model [min]."""

PropagatorModel = Union[NearEarthModel, DeepSpaceModel]


def is_deep_space(elements: OrbitalElementSet, gravity: str | EarthGravity = "wgs72") -> bool:
    """Return whether an element set needs the deep-space model.

    Args:
        elements: Parsed orbital elements.
        gravity: Gravity model name or constants.

    Returns:
        True if the recovered orbital period is at least 225 minutes.
    """
    grav = get_gravity(gravity)
    no = recover_mean_motion(elements.no_kozai, elements.ecco, elements.inclo, grav)
    return 2.0 * pi / no >= DEEP_SPACE_PERIOD


def select_ephemeris(
    elements: OrbitalElementSet,
    gravity: str | EarthGravity = "wgs72",
) -> PropagatorModel:
    """Build the propagator model for an element set.

    Args:
        elements: Parsed orbital elements.
        gravity: Gravity model name (``"wgs72old"``, ``"wgs72"``,
            ``"wgs84"``) or an ``EarthGravity`` instance.

    Returns:
        A ``NearEarthModel`` or ``DeepSpaceModel`` with all secular (and
        deep-space) coefficients initialized.

    Raises:
        ValueError: If the gravity model name is unknown.

    Examples:
        ```python
        from satpredict.sgp4 import parse_tle, select_ephemeris
        elements = parse_tle(line1, line2)
        model = select_ephemeris(elements)
        sample = model.propagate(90.0)
        ```
    """
    grav = get_gravity(gravity)
    deep = is_deep_space(elements, grav)
    secular = init_secular(elements, grav, deep_space=deep)

    if not deep:
        logger.debug(
            "Selected SGP4 for #%d (period %.2f min, %s)",
            elements.catnum,
            secular.period,
            grav.name,
        )
        return NearEarthModel(gravity=grav, secular=secular)

    lunisolar, resonance = init_deep_space(grav, secular)
    logger.debug(
        "Selected SDP4 for #%d (period %.2f min, resonance %s, %s)",
        elements.catnum,
        secular.period,
        resonance.kind.name.lower(),
        grav.name,
    )
    return DeepSpaceModel(gravity=grav, secular=secular, lunisolar=lunisolar, resonance=resonance)
