"""Tests for the tracking state: initialization, refresh and decay handling."""

import math

import jax.numpy as jnp
import numpy as np
import pytest
from sgp4.api import WGS72 as SGP4_WGS72
from sgp4.api import Satrec

from satpredict.constants import MINUTES_PER_DAY
from satpredict.coordinates import observe
from satpredict.exceptions import DecayedError, NumericSingularityError
from satpredict.sgp4 import compute_checksum, parse_tle
from satpredict.tracking import (
    ObserverLocation,
    OrbitType,
    initialize_at_epoch,
    propagate_to,
    propagate_to_jd,
    revolution_number,
)

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

MOLNIYA_2_14_L1 = "1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813"
MOLNIYA_2_14_L2 = "2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656"

VELA_5A_L1 = "1 04965U 69046F   06175.83186726  .00000094  00000-0  10000-3 0  4711"
VELA_5A_L2 = "2 04965  32.9048 138.7680 6088834 148.5862 269.3268  2.47283741134637"


def _with_checksum(line: str) -> str:
    return line[:68] + str(compute_checksum(line))


GEO_L1 = _with_checksum("1 99990U 20001A   20001.00000000  .00000000  00000-0  00000-0 0  9990")
GEO_L2 = _with_checksum("2 99990   0.0500  90.0000 0001000  90.0000 180.0000  1.00273800    10")

DECAYING_L1 = _with_checksum(ISS_LINE1[:53] + " 50000+0" + ISS_LINE1[61:])
NEGATIVE_DRAG_L1 = _with_checksum(ISS_LINE1[:53] + "-50000-0" + ISS_LINE1[61:])

TOKYO = ObserverLocation(lat=35.68, lon=139.69, alt=0.04)


@pytest.fixture
def iss():
    return initialize_at_epoch(parse_tle(ISS_LINE1, ISS_LINE2))


class _ScriptedModel:
    """Wraps a real model and forces an error code where *fails* says so."""

    def __init__(self, model, fails, code=6):
        self._model = model
        self._fails = fails
        self._code = code
        self.calls = 0

    @property
    def gravity(self):
        return self._model.gravity

    @property
    def secular(self):
        return self._model.secular

    @property
    def kind(self):
        return self._model.kind

    def propagate(self, tsince):
        self.calls += 1
        sample = self._model.propagate(tsince)
        if self._fails(tsince):
            nan = jnp.full(3, jnp.nan)
            return sample._replace(position=nan, velocity=nan, error=jnp.asarray(self._code))
        return sample


class TestInitializeAtEpoch:
    def test_matches_reference(self, iss) -> None:
        sat = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, SGP4_WGS72)
        _, r_ref, v_ref = sat.sgp4_tsince(0.0)
        np.testing.assert_allclose(iss.position, r_ref, atol=1e-8)
        np.testing.assert_allclose(iss.velocity, v_ref, atol=1e-11)

    def test_epoch_time(self, iss) -> None:
        assert iss.tsince == 0.0
        assert iss.jul_utc == iss.jul_epoch == iss.elements.jd_epoch

    def test_derived_quantities(self, iss) -> None:
        assert iss.speed == pytest.approx(float(jnp.linalg.norm(iss.velocity)))
        assert 7.5 < iss.speed < 7.9
        assert abs(iss.ssplat) <= 52.0
        assert -180.0 < iss.ssplon <= 180.0
        assert 300.0 < iss.alt < 450.0
        assert 3500.0 < iss.footprint < 5000.0
        assert iss.otype is OrbitType.LEO

    def test_phase_and_ma(self, iss) -> None:
        assert 0.0 <= iss.phase < 2.0 * math.pi
        assert iss.ma == pytest.approx(iss.phase * 256.0 / (2.0 * math.pi))
        assert 0.0 <= iss.ma < 256.0

    def test_orbit_number_at_epoch(self, iss) -> None:
        assert iss.orbit == iss.elements.revnum - 1

    def test_no_observer_no_look(self, iss) -> None:
        assert iss.observer is None
        assert iss.look is None

    def test_perigee_apogee(self, iss) -> None:
        assert 300.0 < iss.perigee_alt < iss.apogee_alt < 450.0
        assert iss.period == pytest.approx(91.6, abs=0.2)

    @pytest.mark.parametrize(
        "line1, line2, expected",
        [
            (MOLNIYA_2_14_L1, MOLNIYA_2_14_L2, OrbitType.MOLNIYA),
            (VELA_5A_L1, VELA_5A_L2, OrbitType.HEO),
            (GEO_L1, GEO_L2, OrbitType.GEO),
        ],
    )
    def test_orbit_types(self, line1, line2, expected) -> None:
        state = initialize_at_epoch(parse_tle(line1, line2))
        assert state.otype is expected


class TestPropagateTo:
    def test_matches_reference(self, iss) -> None:
        sat = Satrec.twoline2rv(ISS_LINE1, ISS_LINE2, SGP4_WGS72)
        _, r_ref, v_ref = sat.sgp4_tsince(720.0)
        propagate_to(iss, 720.0)
        assert iss.tsince == 720.0
        assert iss.jul_utc == pytest.approx(iss.jul_epoch + 0.5)
        np.testing.assert_allclose(iss.position, r_ref, atol=1e-6)
        np.testing.assert_allclose(iss.velocity, v_ref, atol=1e-9)

    def test_returns_same_state(self, iss) -> None:
        assert propagate_to(iss, 10.0) is iss

    def test_backwards(self, iss) -> None:
        propagate_to(iss, -90.0)
        assert iss.tsince == -90.0
        assert iss.orbit == iss.elements.revnum - 2

    def test_orbit_number_monotonic(self, iss) -> None:
        orbits = []
        for t in np.arange(0.0, 3.0 * MINUTES_PER_DAY, 30.0):
            orbits.append(propagate_to(iss, float(t)).orbit)
        assert all(b >= a for a, b in zip(orbits, orbits[1:]))
        # About 15.7 revolutions per day
        assert 45 <= orbits[-1] - orbits[0] <= 48

    def test_to_jd(self, iss) -> None:
        propagate_to_jd(iss, iss.jul_epoch + 1.0 / 24.0)
        assert iss.tsince == pytest.approx(60.0, abs=1e-5)

    def test_observer_look_angles(self) -> None:
        state = initialize_at_epoch(parse_tle(ISS_LINE1, ISS_LINE2), observer=TOKYO)
        propagate_to(state, 33.0)
        expected = observe(state.jul_utc, state.position, state.velocity, TOKYO)
        assert state.look is not None
        for got, want in zip(state.look, expected):
            assert got == pytest.approx(float(want))
        assert isinstance(state.look.az, float)

    def test_ground_track_moves(self, iss) -> None:
        start = (iss.ssplat, iss.ssplon)
        propagate_to(iss, 5.0)
        assert (iss.ssplat, iss.ssplon) != start


class TestRevolutionNumber:
    def test_epoch(self) -> None:
        elements = parse_tle(ISS_LINE1, ISS_LINE2)
        assert revolution_number(elements, 0.0) == 56352

    def test_one_day(self) -> None:
        elements = parse_tle(ISS_LINE1, ISS_LINE2)
        revs = elements.mean_motion + elements.mo / (2.0 * math.pi)
        assert revolution_number(elements, MINUTES_PER_DAY) == math.floor(revs) + 56352

    def test_large_negative_bstar_never_decreases(self) -> None:
        """The count depends on mean motion only, so drag cannot make it fall."""
        elements = parse_tle(NEGATIVE_DRAG_L1, ISS_LINE2)
        assert elements.bstar == pytest.approx(-0.5)
        orbits = [
            revolution_number(elements, float(t))
            for t in np.arange(0.0, 40.0 * MINUTES_PER_DAY, 60.0)
        ]
        assert all(b >= a for a, b in zip(orbits, orbits[1:]))
        assert orbits[-1] - orbits[0] > 600

    def test_state_orbit_never_decreases_with_large_negative_bstar(self) -> None:
        state = initialize_at_epoch(parse_tle(NEGATIVE_DRAG_L1, ISS_LINE2))
        orbits = []
        for day in (0.0, 10.0, 20.0, 30.0, 40.0):
            orbits.append(propagate_to(state, day * MINUTES_PER_DAY).orbit)
        assert orbits == sorted(orbits)
        assert orbits[0] == 56352

    def test_clamped_at_zero(self) -> None:
        elements = parse_tle(ISS_LINE1, ISS_LINE2)
        assert revolution_number(elements, -10000.0 * MINUTES_PER_DAY) == 0


class TestPropagationFailures:
    def test_decay_is_cached(self, iss) -> None:
        model = _ScriptedModel(iss.model, lambda t: t >= 100.0)
        iss.model = model
        propagate_to(iss, 50.0)

        with pytest.raises(DecayedError) as excinfo:
            propagate_to(iss, 100.0)
        assert excinfo.value.code == 6
        assert iss.decay_tsince == 100.0

        calls = model.calls
        with pytest.raises(DecayedError) as excinfo:
            propagate_to(iss, 500.0)
        assert model.calls == calls
        assert excinfo.value.tsince == 100.0

        # Earlier times still propagate
        propagate_to(iss, 80.0)
        assert iss.tsince == 80.0

    def test_state_unchanged_after_failure(self, iss) -> None:
        propagate_to(iss, 50.0)
        before = (iss.tsince, iss.ssplat, iss.ssplon, iss.alt, iss.orbit)
        position = iss.position
        iss.model = _ScriptedModel(iss.model, lambda t: t >= 100.0)

        with pytest.raises(DecayedError):
            propagate_to(iss, 120.0)
        assert (iss.tsince, iss.ssplat, iss.ssplon, iss.alt, iss.orbit) == before
        assert iss.position is position

    def test_decay_before_epoch_not_cached(self, iss) -> None:
        iss.model = _ScriptedModel(iss.model, lambda t: t < -100.0)
        with pytest.raises(DecayedError):
            propagate_to(iss, -200.0)
        assert iss.decay_tsince is None
        propagate_to(iss, 10.0)

    @pytest.mark.parametrize("code", [1, 2, 3, 4])
    def test_other_codes_are_singularities(self, iss, code) -> None:
        iss.model = _ScriptedModel(iss.model, lambda t: t > 0.0, code=code)
        with pytest.raises(NumericSingularityError) as excinfo:
            propagate_to(iss, 10.0)
        assert not isinstance(excinfo.value, DecayedError)
        assert excinfo.value.code == code
        assert excinfo.value.catnum == 25544
        assert iss.decay_tsince is None

    def test_failure_is_logged(self, iss, caplog) -> None:
        iss.model = _ScriptedModel(iss.model, lambda t: t > 0.0)
        with caplog.at_level("WARNING", logger="satpredict.tracking._state"):
            with pytest.raises(DecayedError):
                propagate_to(iss, 10.0)
        assert "Propagation of #25544" in caplog.text
        assert "error 6" in caplog.text

    def test_extreme_drag(self) -> None:
        """A heavily dragged orbit fails where the reference library does."""
        state = initialize_at_epoch(parse_tle(DECAYING_L1, ISS_LINE2))
        sat = Satrec.twoline2rv(DECAYING_L1, ISS_LINE2, SGP4_WGS72)
        e_ref, _, _ = sat.sgp4_tsince(10.0 * MINUTES_PER_DAY)
        assert e_ref != 0

        with pytest.raises(NumericSingularityError) as excinfo:
            propagate_to(state, 10.0 * MINUTES_PER_DAY)
        assert excinfo.value.code == e_ref
