"""
SGP4/SDP4 orbit propagator implemented in JAX.

Element sets are parsed from TLE records, routed once to the near-Earth
(SGP4) or deep-space (SDP4) model by their orbital period, and then
propagated as a pure JAX function of the time since epoch. Models support
JIT compilation and ``vmap`` over time arrays.
"""

from satpredict.sgp4._constants import GRAVITY_MODELS, WGS72, WGS72OLD, WGS84, EarthGravity, get_gravity
from satpredict.sgp4._deep_space import DeepSpaceModel, Resonance
from satpredict.sgp4._near_earth import NearEarthModel
from satpredict.sgp4._selector import (
    DEEP_SPACE_PERIOD,
    PropagatorModel,
    is_deep_space,
    select_ephemeris,
)
from satpredict.sgp4._tle import (
    compute_checksum,
    format_tle,
    parse_3le,
    parse_tle,
    validate_tle_line,
)
from satpredict.sgp4._types import OrbitalElementSet, OrbitSample

__all__ = [
    # Types
    "OrbitalElementSet",
    "OrbitSample",
    "EarthGravity",
    "NearEarthModel",
    "DeepSpaceModel",
    "PropagatorModel",
    "Resonance",
    # Constants
    "WGS72OLD",
    "WGS72",
    "WGS84",
    "GRAVITY_MODELS",
    "DEEP_SPACE_PERIOD",
    "get_gravity",
    # TLE records
    "parse_tle",
    "parse_3le",
    "format_tle",
    "compute_checksum",
    "validate_tle_line",
    # Ephemeris selection
    "is_deep_space",
    "select_ephemeris",
]
