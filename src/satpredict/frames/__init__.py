"""Frame transformations.

Rotates SGP4 output from the TEME frame into the pseudo Earth-fixed frame
(PEF) by the Greenwich mean sidereal time.
"""

from .teme import (
    gmst,
    rotation_pef_to_teme,
    rotation_teme_to_pef,
    state_pef_to_teme,
    state_teme_to_pef,
)

__all__ = [
    "gmst",
    "rotation_teme_to_pef",
    "rotation_pef_to_teme",
    "state_teme_to_pef",
    "state_pef_to_teme",
]
