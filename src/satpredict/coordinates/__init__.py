"""Coordinate transformations.

This sub-module provides the ground-track and observer geometry:

- **Geodetic**: reference ellipsoid ``[lon, lat, alt]`` <-> Earth-fixed
- **Topocentric (ENZ)**: East-North-Zenith local horizontal frame, look
  angles and the visibility footprint
"""

from .geodetic import (
    WGS72,
    WGS84,
    Ellipsoid,
    position_ecef_to_geodetic,
    position_geodetic_to_ecef,
)
from .topocentric import (
    LookAngles,
    ObserverLocation,
    footprint_diameter,
    observe,
    position_enz_to_azel,
    relative_position_ecef_to_enz,
    rotation_ellipsoid_to_enz,
)

__all__ = [
    "Ellipsoid",
    "WGS72",
    "WGS84",
    "position_geodetic_to_ecef",
    "position_ecef_to_geodetic",
    "ObserverLocation",
    "LookAngles",
    "rotation_ellipsoid_to_enz",
    "relative_position_ecef_to_enz",
    "position_enz_to_azel",
    "observe",
    "footprint_diameter",
]
