"""
Physical and unit constants shared across satpredict.

Distances are in kilometres: the propagators, the geometry engine and every
public result use km and km/s throughout.
"""

from math import pi

DEG2RAD = pi / 180.0  # Degrees to radians
RAD2DEG = 180.0 / pi  # Radians to degrees

"""
Minutes per day.
"""
MINUTES_PER_DAY = 1440.0

"""
Offset of the Julian date at 1950 January 0.0 UT, the day count used by
SGP4/SDP4 internally.
"""
JD_1950 = 2433281.5

"""
Earth axial rotation rate. [rad/s]

References:

1. D. Vallado, *Fundamentals of Astrodynamics and Applications (4th Ed.)*, p. 222, 2010
"""
OMEGA_EARTH = 7.292115146706979e-5  # [rad/s] Taken from Vallado 4th Ed page 222

"""
Earth equatorial radius and flattening, WGS72. [km], [dimensionless]

These match the earth radius used by the WGS72 SGP4 gravity model, so the
ground track and the propagator agree on the shape of the Earth.

References:

1. F. R. Hoots and R. L. Roehrich, *Spacetrack Report No. 3*, 1980.
"""
WGS72_a = 6378.135  # [km]
WGS72_f = 1.0 / 298.26

"""
Earth equatorial radius and flattening, WGS84. [km], [dimensionless]

References:

1. NIMA Technical Report TR8350.2
"""
WGS84_a = 6378.137  # [km]
WGS84_f = 1.0 / 298.257223563  # WGS-84 flattening

"""
Altitude below which an apogee counts as low Earth orbit. [km]
"""
LEO_APOGEE_LIMIT = 2000.0
