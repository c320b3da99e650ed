import math

import pytest

from wloc.analysis.triangulate import compute_triangulated_location, weight_from_signal
from wloc.analysis.types import Candidate
from wloc.utils.geo import from_vector, to_unit_vector


def test_weight_is_monotonic_and_clamped():
    assert weight_from_signal(-52) > weight_from_signal(-90)
    assert weight_from_signal(-3) == weight_from_signal(-5)
    assert weight_from_signal(-200) == weight_from_signal(-120)
    assert weight_from_signal(-50) == pytest.approx(1e-5)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, None])
def test_non_finite_signal_weighs_nothing(value):
    assert weight_from_signal(value) == 0


def test_two_equal_points():
    est = compute_triangulated_location([Candidate(48.0, 2.0, 1.0), Candidate(48.0, 2.01, 1.0)])
    assert est.latitude == pytest.approx(48.0, abs=1e-5)
    assert 2.0 < est.longitude < 2.01
    assert est.longitude == pytest.approx(2.005, abs=1e-6)
    assert est.points_used == 2
    assert est.weight_sum == 2.0


def test_single_candidate_gives_no_estimate():
    assert compute_triangulated_location([]) is None
    assert compute_triangulated_location([Candidate(48.0, 2.0, 1.0)]) is None


def test_zero_weights_give_no_estimate():
    assert compute_triangulated_location([Candidate(1.0, 1.0, 0.0), Candidate(2.0, 2.0, 0.0)]) is None


def test_points_used_counts_every_candidate():
    est = compute_triangulated_location(
        [Candidate(48.0, 2.0, 1.0), Candidate(48.0, 2.01, 1.0), Candidate(10.0, 10.0, 0.0)]
    )
    assert est.points_used == 3
    assert est.weight_sum == 2.0
    assert 2.0 < est.longitude < 2.01


def test_stronger_signal_pulls_the_estimate():
    strong, weak = weight_from_signal(-40), weight_from_signal(-80)
    est = compute_triangulated_location([Candidate(0.0, 0.0, strong), Candidate(0.0, 1.0, weak)])
    assert 0.0 < est.longitude < 0.01


def test_antimeridian_does_not_average_to_zero():
    est = compute_triangulated_location([Candidate(0.0, 179.9, 1.0), Candidate(0.0, -179.9, 1.0)])
    assert abs(est.longitude) == pytest.approx(180.0, abs=1e-6)
    assert est.latitude == pytest.approx(0.0, abs=1e-9)


def test_output_is_rounded_to_seven_places():
    est = compute_triangulated_location([Candidate(48.123456789, 2.0, 1.0), Candidate(48.0, 2.333333333, 3.0)])
    assert est.latitude == round(est.latitude, 7)
    assert est.longitude == round(est.longitude, 7)


def test_unit_vector_round_trip():
    x, y, z = to_unit_vector(48.856613, 2.352222)
    assert x * x + y * y + z * z == pytest.approx(1.0)
    lat, lon = from_vector(x, y, z)
    assert lat == pytest.approx(48.856613)
    assert lon == pytest.approx(2.352222)
