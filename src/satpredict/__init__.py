"""
satpredict computes satellite positions and look angles from two-line element sets with SGP4/SDP4 implemented in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
    MINUTES_PER_DAY,
    OMEGA_EARTH,
    WGS72_a,
    WGS72_f,
    WGS84_a,
    WGS84_f,
)

from .config import set_dtype, get_dtype

from .exceptions import (
    SatPredictError,
    TLEError,
    MalformedRecordError,
    ChecksumError,
    NotFoundError,
    SourceUnreadableError,
    NumericSingularityError,
    DecayedError,
)

from .sgp4 import (
    OrbitalElementSet,
    OrbitSample,
    EarthGravity,
    NearEarthModel,
    DeepSpaceModel,
    PropagatorModel,
    parse_tle,
    parse_3le,
    format_tle,
    compute_checksum,
    validate_tle_line,
    is_deep_space,
    select_ephemeris,
)

from .frames import (
    gmst,
    rotation_teme_to_pef,
    state_teme_to_pef,
)

from .coordinates import (
    Ellipsoid,
    position_geodetic_to_ecef,
    position_ecef_to_geodetic,
    observe,
    footprint_diameter,
)

from .tracking import (
    ObserverLocation,
    LookAngles,
    SatelliteState,
    OrbitType,
    initialize_at_epoch,
    propagate_to,
    propagate_to_jd,
    classify_orbit,
    predict_decay_jd,
    is_decayed,
    find_tle,
    read_tle,
    load_satellite,
)
