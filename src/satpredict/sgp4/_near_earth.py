"""
SGP4 near-Earth propagator.

Used for orbits with a period below 225 minutes. The model is a frozen
bundle of the gravity constants and the ``SecularTerms`` computed once at
selection; ``propagate`` is a pure JAX function of the time since epoch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import jax.numpy as jnp
from jax.typing import ArrayLike

from satpredict.config import get_dtype
from satpredict.sgp4._constants import EarthGravity
from satpredict.sgp4._kernel import osculating_sample
from satpredict.sgp4._secular import SecularTerms, secular_drag
from satpredict.sgp4._types import OrbitSample


@dataclass(frozen=True)
class NearEarthModel:
    """SGP4 propagator for a single element set.

    Attributes:
        gravity: Earth gravity model constants.
        secular: Secular coefficients computed at selection time.
    """

    gravity: EarthGravity
    secular: SecularTerms

    kind: ClassVar[str] = "near-earth"
    deep_space: ClassVar[bool] = False

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
        t = jnp.asarray(tsince, dtype=get_dtype())

        mm, argpm, nodem, tempa, tempe, templ = secular_drag(sec, t)

        return osculating_sample(
            self.gravity,
            sec,
            sec.no_unkozai,
            sec.ecco,
            sec.inclo,
            mm,
            argpm,
            nodem,
            tempa,
            tempe,
            templ,
        )
