"""Tests for SGP4/SDP4 propagation against the reference python-sgp4 library."""

import jax
import jax.numpy as jnp
import pytest
from sgp4.api import WGS72 as SGP4_WGS72
from sgp4.api import Satrec

from satpredict.sgp4 import (
    DeepSpaceModel,
    NearEarthModel,
    Resonance,
    compute_checksum,
    parse_tle,
    select_ephemeris,
)

# ISS TLE: near-Earth LEO (period ~92 min)
ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

# Polar orbit test TLE
POLAR_LINE1 = "1     1U          20  1.00000000  .00000000  00000-0  00000-0 0    07"
POLAR_LINE2 = "2     1  90.0000   0.0000 0010000   0.0000   0.0000 15.21936719    07"

# Molniya 2-14: Highly-elliptical, 12-hour resonance
MOLNIYA_2_14_L1 = "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813"
MOLNIYA_2_14_L2 = "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656"

# Molniya 1-36: Highly-elliptical, 12-hour resonance
MOLNIYA_1_36_L1 = "1 09880U 77021A   06176.56157475  .00000421  00000-0  10000-3 0   837"
MOLNIYA_1_36_L2 = "2 09880  64.5968 349.3786 7069051 270.0229  16.3320  2.00813614112380"

# ITALSAT 2: GEO, synchronous resonance, inclination below 0.2 rad (Lyddane)
ITALSAT_2_L1 = "1 24208U 96044A   06177.04061740 -.00000094  00000-0  10000-3 0  1600"
ITALSAT_2_L2 = "2 24208   3.8536  80.0121 0026640 311.0977  48.3000  1.00778054 36119"

# Vela 5A: Deep-space, non-resonant
VELA_5A_L1 = "1 04965U 69046F   06175.83186726  .00000094  00000-0  10000-3 0  4711"
VELA_5A_L2 = "2 04965  32.9048 138.7680 6088834 148.5862 269.3268  2.47283741134637"


def _with_checksum(line: str) -> str:
    return line[:68] + str(compute_checksum(line))


# Synthetic geostationary satellite: near-zero inclination and eccentricity
GEO_L1 = _with_checksum("1 99990U 20001A   20001.00000000  .00000000  00000-0  00000-0 0  9990")
GEO_L2 = _with_checksum("2 99990   0.0500  90.0000 0001000  90.0000 180.0000  1.00273800    10")

# ISS with B* raised to 0.5: re-enters within days
DECAYING_L1 = _with_checksum(ISS_LINE1[:53] + " 50000+0" + ISS_LINE1[61:])
DECAYING_L2 = ISS_LINE2


def _get_reference(line1: str, line2: str, tsince_min: float) -> tuple:
    """Get reference position and velocity from python-sgp4."""
    sat = Satrec.twoline2rv(line1, line2, SGP4_WGS72)
    e, r, v = sat.sgp4_tsince(tsince_min)
    return e, r, v


def _assert_match(
    line1: str,
    line2: str,
    tsince: float,
    pos_atol: float = 1e-6,
    vel_atol: float = 1e-9,
) -> None:
    """Assert satpredict matches python-sgp4 at the given tsince."""
    model = select_ephemeris(parse_tle(line1, line2))
    sample = model.propagate(tsince)
    e_ref, r_ref, v_ref = _get_reference(line1, line2, tsince)
    assert e_ref == 0, f"Reference SGP4 error {e_ref} at tsince={tsince}"
    assert int(sample.error) == 0

    r = sample.position
    v = sample.velocity
    assert jnp.allclose(r, jnp.array(r_ref), atol=pos_atol), (
        f"Position mismatch at t={tsince}: {r} vs {r_ref}, "
        f"diff={float(jnp.max(jnp.abs(r - jnp.array(r_ref))))}"
    )
    assert jnp.allclose(v, jnp.array(v_ref), atol=vel_atol), (
        f"Velocity mismatch at t={tsince}: {v} vs {v_ref}, "
        f"diff={float(jnp.max(jnp.abs(v - jnp.array(v_ref))))}"
    )


class TestSGP4NearEarth:
    """Test near-Earth SGP4 propagation against reference python-sgp4."""

    def test_iss_is_near_earth(self) -> None:
        model = select_ephemeris(parse_tle(ISS_LINE1, ISS_LINE2))
        assert isinstance(model, NearEarthModel)
        assert model.kind == "near-earth"
        assert not model.secular.isimp

    @pytest.mark.parametrize("tsince", [0.0, 60.0, 360.0, 1440.0, -60.0])
    def test_iss(self, tsince: float) -> None:
        _assert_match(ISS_LINE1, ISS_LINE2, tsince)

    @pytest.mark.parametrize("tsince", [0.0, 45.0, 720.0])
    def test_polar(self, tsince: float) -> None:
        _assert_match(POLAR_LINE1, POLAR_LINE2, tsince)

    def test_epoch_state_is_exact(self) -> None:
        """Propagating to tsince = 0 reproduces the reference epoch state."""
        model = select_ephemeris(parse_tle(ISS_LINE1, ISS_LINE2))
        sample = model.propagate(0.0)
        _, r_ref, v_ref = _get_reference(ISS_LINE1, ISS_LINE2, 0.0)
        assert jnp.allclose(sample.position, jnp.array(r_ref), atol=1e-8)
        assert jnp.allclose(sample.velocity, jnp.array(v_ref), atol=1e-11)

    def test_phase_in_range(self) -> None:
        model = select_ephemeris(parse_tle(ISS_LINE1, ISS_LINE2))
        for t in (0.0, 17.0, 51.0, 88.0):
            phase = float(model.propagate(t).phase)
            assert 0.0 <= phase < 2.0 * jnp.pi

    def test_repeatable(self) -> None:
        """Propagation is a pure function of the offset."""
        model = select_ephemeris(parse_tle(ISS_LINE1, ISS_LINE2))
        first = model.propagate(500.0).position
        model.propagate(-300.0)
        assert jnp.array_equal(model.propagate(500.0).position, first)


class TestSDP4DeepSpace:
    """Test deep-space SDP4 propagation against reference python-sgp4."""

    @pytest.mark.parametrize("tsince", [0.0, 359.117678, 718.235357, 1440.0])
    def test_molniya_2_14(self, tsince: float) -> None:
        _assert_match(MOLNIYA_2_14_L1, MOLNIYA_2_14_L2, tsince)

    @pytest.mark.parametrize("tsince", [0.0, 358.541428, 717.082857, 1440.0])
    def test_molniya_1_36(self, tsince: float) -> None:
        _assert_match(MOLNIYA_1_36_L1, MOLNIYA_1_36_L2, tsince)

    @pytest.mark.parametrize("tsince", [0.0, 714.441261, 1428.882522, 1440.0])
    def test_italsat_2(self, tsince: float) -> None:
        _assert_match(ITALSAT_2_L1, ITALSAT_2_L2, tsince)

    @pytest.mark.parametrize("tsince", [0.0, 291.163502, 582.327004, 1440.0])
    def test_vela_5a(self, tsince: float) -> None:
        _assert_match(VELA_5A_L1, VELA_5A_L2, tsince)

    def test_molniya_backwards(self) -> None:
        _assert_match(MOLNIYA_2_14_L1, MOLNIYA_2_14_L2, -1440.0)

    def test_italsat_several_days(self) -> None:
        """Resonance integration over many 720 minute steps."""
        _assert_match(ITALSAT_2_L1, ITALSAT_2_L2, 10000.0, pos_atol=1e-5, vel_atol=1e-8)

    def test_resonance_classes(self) -> None:
        molniya = select_ephemeris(parse_tle(MOLNIYA_2_14_L1, MOLNIYA_2_14_L2))
        italsat = select_ephemeris(parse_tle(ITALSAT_2_L1, ITALSAT_2_L2))
        vela = select_ephemeris(parse_tle(VELA_5A_L1, VELA_5A_L2))
        assert isinstance(molniya, DeepSpaceModel)
        assert molniya.resonance.kind is Resonance.HALF_DAY
        assert italsat.resonance.kind is Resonance.SYNCHRONOUS
        assert vela.resonance.kind is Resonance.NONE

    def test_deep_space_uses_simplified_drag(self) -> None:
        model = select_ephemeris(parse_tle(VELA_5A_L1, VELA_5A_L2))
        assert model.secular.isimp

    def test_geo_drift_is_small(self) -> None:
        """A geostationary satellite stays near its sub-satellite longitude."""
        from satpredict.coordinates import position_ecef_to_geodetic
        from satpredict.frames import state_teme_to_pef

        elements = parse_tle(GEO_L1, GEO_L2)
        model = select_ephemeris(elements)
        assert model.kind == "deep-space"

        lons = []
        for t in range(0, 25 * 60, 60):
            sample = model.propagate(t)
            jd = elements.jd_epoch + t / 1440.0
            r_pef, _ = state_teme_to_pef(jd, sample.position, sample.velocity)
            lons.append(float(position_ecef_to_geodetic(r_pef, use_degrees=True)[0]))
        drift = [abs((lon - lons[0] + 180.0) % 360.0 - 180.0) for lon in lons]
        assert len(drift) == 25
        assert max(drift) < 0.5


class TestJITAndVmap:
    """Test JIT compilation and vmap of model propagation."""

    def test_near_earth_jit(self) -> None:
        model = select_ephemeris(parse_tle(ISS_LINE1, ISS_LINE2))
        sample = jax.jit(model.propagate)(jnp.float64(360.0))
        _, r_ref, v_ref = _get_reference(ISS_LINE1, ISS_LINE2, 360.0)
        assert jnp.allclose(sample.position, jnp.array(r_ref), atol=1e-6)
        assert jnp.allclose(sample.velocity, jnp.array(v_ref), atol=1e-9)

    def test_deep_space_jit(self) -> None:
        model = select_ephemeris(parse_tle(MOLNIYA_2_14_L1, MOLNIYA_2_14_L2))
        sample = jax.jit(model.propagate)(jnp.float64(360.0))
        _, r_ref, v_ref = _get_reference(MOLNIYA_2_14_L1, MOLNIYA_2_14_L2, 360.0)
        assert jnp.allclose(sample.position, jnp.array(r_ref), atol=1e-6)
        assert jnp.allclose(sample.velocity, jnp.array(v_ref), atol=1e-9)

    def test_vmap_over_time(self) -> None:
        model = select_ephemeris(parse_tle(ITALSAT_2_L1, ITALSAT_2_L2))
        times = jnp.array([0.0, 714.441261, 1440.0, -2000.0])

        batch = jax.vmap(model.propagate)(times)
        assert batch.position.shape == (4, 3)
        assert batch.velocity.shape == (4, 3)

        for i, t in enumerate(times):
            _, r_ref, v_ref = _get_reference(ITALSAT_2_L1, ITALSAT_2_L2, float(t))
            assert jnp.allclose(batch.position[i], jnp.array(r_ref), atol=1e-6)
            assert jnp.allclose(batch.velocity[i], jnp.array(v_ref), atol=1e-9)


class TestPropagationErrors:
    """Test error codes for degenerate element sets."""

    def test_extreme_drag_decays(self) -> None:
        """An element set with extreme drag decays within a few days."""
        line1, line2 = DECAYING_L1, DECAYING_L2
        model = select_ephemeris(parse_tle(line1, line2))
        times = jnp.arange(0.0, 10 * 1440.0, 60.0)
        errors = jax.vmap(model.propagate)(times).error
        assert int(errors[0]) == 0
        failed = errors != 0
        assert bool(jnp.any(failed))

        first = int(jnp.argmax(failed))
        sample = model.propagate(times[first])
        assert int(sample.error) in (1, 2, 4, 6)
        assert bool(jnp.all(jnp.isnan(sample.position)))

        ref = Satrec.twoline2rv(line1, line2, SGP4_WGS72)
        e_ref, _, _ = ref.sgp4_tsince(float(times[first]))
        assert e_ref == int(sample.error)
