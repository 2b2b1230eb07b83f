"""Tests for orbit classification and the decay estimate."""

import math

import pytest

from satpredict.sgp4 import parse_tle
from satpredict.tracking import OrbitType, classify_orbit, is_decayed, predict_decay_jd

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"

POLAR_LINE1 = "1     1U          20  1.00000000  .00000000  00000-0  00000-0 0    07"
POLAR_LINE2 = "2     1  90.0000   0.0000 0010000   0.0000   0.0000 15.21936719    07"


class TestClassifyOrbit:
    @pytest.mark.parametrize(
        "perigee, apogee, incl, period, expected",
        [
            (410.0, 420.0, 51.6, 92.7, OrbitType.LEO),
            (780.0, 800.0, 98.6, 100.4, OrbitType.LEO),
            (20180.0, 20200.0, 55.0, 717.9, OrbitType.MEO),
            (35780.0, 35790.0, 0.05, 1436.1, OrbitType.GEO),
            (35780.0, 35790.0, 5.0, 1436.1, OrbitType.GEO),
            (35700.0, 35870.0, 30.0, 1436.0, OrbitType.GSO),
            (24000.0, 47000.0, 63.4, 1436.0, OrbitType.TUNDRA),
            (500.0, 39800.0, 63.4, 718.0, OrbitType.MOLNIYA),
            (300.0, 20000.0, 28.5, 360.0, OrbitType.HEO),
            (100000.0, 100100.0, 10.0, 8000.0, OrbitType.HIGH),
        ],
    )
    def test_rules(self, perigee, apogee, incl, period, expected) -> None:
        assert classify_orbit(perigee, apogee, incl, period) is expected

    def test_negative_perigee_is_decayed(self) -> None:
        assert classify_orbit(-5.0, 300.0, 51.6, 89.0) is OrbitType.DECAYED

    def test_decayed_flag_wins(self) -> None:
        assert classify_orbit(35780.0, 35790.0, 0.05, 1436.1, decayed=True) is OrbitType.DECAYED

    def test_tundra_before_geo(self) -> None:
        """An eccentric 24-hour orbit is Tundra even at low inclination."""
        assert classify_orbit(24000.0, 47000.0, 1.0, 1436.0) is OrbitType.TUNDRA

    def test_circular_12h_is_not_molniya(self) -> None:
        assert classify_orbit(20180.0, 20200.0, 63.4, 718.0) is OrbitType.MEO

    def test_leo_apogee_limit(self) -> None:
        assert classify_orbit(1900.0, 2000.0, 50.0, 125.0) is OrbitType.LEO
        assert classify_orbit(1900.0, 2100.0, 50.0, 126.0) is OrbitType.MEO

    def test_every_input_maps_to_a_type(self) -> None:
        for perigee in (-100.0, 200.0, 1500.0, 20000.0, 36000.0, 400000.0):
            for apogee_extra in (0.0, 500.0, 40000.0):
                for period in (88.0, 700.0, 1440.0, 10000.0):
                    otype = classify_orbit(perigee, perigee + apogee_extra, 45.0, period)
                    assert isinstance(otype, OrbitType)

    def test_str(self) -> None:
        assert str(OrbitType.MOLNIYA) == "MOLNIYA"


class TestDecayEstimate:
    def test_iss(self) -> None:
        elements = parse_tle(ISS_LINE1, ISS_LINE2)
        expected = elements.jd_epoch + (16.666666 - 15.72125391) / (10.0 * 0.00002182)
        assert predict_decay_jd(elements) == pytest.approx(expected, rel=1e-9)

    def test_no_drag_term_never_decays(self) -> None:
        elements = parse_tle(POLAR_LINE1, POLAR_LINE2)
        assert math.isinf(predict_decay_jd(elements))
        assert not is_decayed(elements, 1e9)

    def test_is_decayed(self) -> None:
        elements = parse_tle(ISS_LINE1, ISS_LINE2)
        decay = predict_decay_jd(elements)
        assert not is_decayed(elements, elements.jd_epoch)
        assert not is_decayed(elements, decay - 1.0)
        assert is_decayed(elements, decay + 1.0)
