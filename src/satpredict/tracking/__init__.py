"""Satellite tracking on top of the SGP4/SDP4 propagators.

- **State**: ``initialize_at_epoch`` / ``propagate_to`` / ``propagate_to_jd``
  keep a ``SatelliteState`` with ground track, look angles, footprint,
  phase, revolution number and orbit type.
- **Classification**: ``classify_orbit`` and the decay estimate.
- **Record source**: catalog number lookup in TLE files.
"""

from satpredict.coordinates.topocentric import LookAngles, ObserverLocation
from satpredict.tracking._classify import OrbitType, classify_orbit, is_decayed, predict_decay_jd
from satpredict.tracking._source import find_tle, load_satellite, read_tle
from satpredict.tracking._state import (
    SatelliteState,
    initialize_at_epoch,
    propagate_to,
    propagate_to_jd,
    revolution_number,
)

__all__ = [
    "ObserverLocation",
    "LookAngles",
    "SatelliteState",
    "OrbitType",
    "initialize_at_epoch",
    "propagate_to",
    "propagate_to_jd",
    "revolution_number",
    "classify_orbit",
    "predict_decay_jd",
    "is_decayed",
    "find_tle",
    "read_tle",
    "load_satellite",
]
