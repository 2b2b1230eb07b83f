"""Tests for the TEME to pseudo Earth-fixed transformations."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from satpredict.constants import OMEGA_EARTH
from satpredict.frames import (
    gmst,
    rotation_pef_to_teme,
    rotation_teme_to_pef,
    state_pef_to_teme,
    state_teme_to_pef,
)
from satpredict.sgp4._secular import gstime

JD_J2000 = 2451545.0


class TestGMST:
    @pytest.mark.parametrize("jd", [JD_J2000, 2454733.0, 2454733.51782528, 2460000.25])
    def test_matches_epoch_sidereal_time(self, jd) -> None:
        assert float(gmst(jd)) == pytest.approx(gstime(jd), abs=1e-9)

    def test_j2000_value(self) -> None:
        # 18h 41m 50.54841s
        expected = (67310.54841 / 240.0) * np.pi / 180.0
        assert float(gmst(JD_J2000)) == pytest.approx(expected, abs=1e-12)

    def test_range(self) -> None:
        jds = jnp.linspace(2451545.0, 2451555.0, 97)
        theta = jax.vmap(gmst)(jds)
        assert bool(jnp.all(theta >= 0.0))
        assert bool(jnp.all(theta < 2.0 * jnp.pi))

    def test_sidereal_day(self) -> None:
        """GMST gains one full turn per sidereal day."""
        sidereal_day = 2.0 * np.pi / OMEGA_EARTH / 86400.0
        t0 = float(gmst(2454733.0))
        t1 = float(gmst(2454733.0 + sidereal_day))
        wrapped = np.mod(t1 - t0 + np.pi, 2.0 * np.pi) - np.pi
        assert abs(wrapped) < 2e-6


class TestRotation:
    def test_orthonormal(self) -> None:
        R = rotation_teme_to_pef(2454733.51782528)
        np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-14)
        assert float(jnp.linalg.det(R)) == pytest.approx(1.0, abs=1e-14)

    def test_inverse_is_transpose(self) -> None:
        jd = 2456789.123
        np.testing.assert_allclose(rotation_pef_to_teme(jd), rotation_teme_to_pef(jd).T)

    def test_z_axis_fixed(self) -> None:
        R = rotation_teme_to_pef(2458000.5)
        np.testing.assert_allclose(R @ jnp.array([0.0, 0.0, 1.0]), [0.0, 0.0, 1.0], atol=1e-15)

    def test_angle_is_gmst(self) -> None:
        jd = 2458000.5
        R = rotation_teme_to_pef(jd)
        x_pef = R @ jnp.array([1.0, 0.0, 0.0])
        # The TEME x-axis sits at longitude -GMST in PEF
        lon = float(jnp.arctan2(x_pef[1], x_pef[0]))
        assert np.mod(-lon, 2.0 * np.pi) == pytest.approx(float(gmst(jd)), abs=1e-12)


class TestStateTransform:
    def test_round_trip(self) -> None:
        jd = 2454733.51782528
        r = jnp.array([-6045.0, -3490.0, 2500.0])
        v = jnp.array([-3.457, 6.618, 2.533])
        r_pef, v_pef = state_teme_to_pef(jd, r, v)
        r_back, v_back = state_pef_to_teme(jd, r_pef, v_pef)
        np.testing.assert_allclose(r_back, r, atol=1e-9)
        np.testing.assert_allclose(v_back, v, atol=1e-12)

    def test_position_norm_preserved(self) -> None:
        r = jnp.array([7000.0, -1200.0, 300.0])
        r_pef, _ = state_teme_to_pef(2455000.0, r, jnp.zeros(3))
        assert float(jnp.linalg.norm(r_pef)) == pytest.approx(float(jnp.linalg.norm(r)), rel=1e-14)

    def test_corotating_point_is_static(self) -> None:
        """A point moving with the Earth has zero Earth-fixed velocity."""
        r = jnp.array([42164.0, 0.0, 0.0])
        v = jnp.array([0.0, OMEGA_EARTH * 42164.0, 0.0])
        _, v_pef = state_teme_to_pef(2455000.0, r, v)
        np.testing.assert_allclose(v_pef, np.zeros(3), atol=1e-12)

    def test_matches_reference_geodetic_track(self) -> None:
        """The ISS sub-satellite point at epoch matches an independent rotation."""
        from sgp4.api import WGS72 as SGP4_WGS72
        from sgp4.api import Satrec

        line1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
        line2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"
        sat = Satrec.twoline2rv(line1, line2, SGP4_WGS72)
        _, r, v = sat.sgp4_tsince(0.0)
        jd = sat.jdsatepoch + sat.jdsatepochF

        theta = gstime(jd)
        c, s = np.cos(theta), np.sin(theta)
        expected = np.array([c * r[0] + s * r[1], -s * r[0] + c * r[1], r[2]])

        r_pef, _ = state_teme_to_pef(jd, jnp.array(r), jnp.array(v))
        np.testing.assert_allclose(r_pef, expected, atol=1e-8)
