import math

import pytest

from app.core.effort import classify, compute_zones, round_half_away
from app.core.exceptions import InvalidArgument
from app.schemas.effort import Zone


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(0.5) == 1
    assert round_half_away(1.49) == 1
    assert round_half_away(-2.5) == -3
    assert round_half_away(0) == 0


def test_zones_for_200():
    zones = compute_zones(200)
    assert (zones.recovery.min, zones.recovery.max) == (0, 100)
    assert (zones.fatBurn.min, zones.fatBurn.max) == (100, 120)
    assert (zones.aerobic.min, zones.aerobic.max) == (120, 140)
    assert (zones.anaerobic.min, zones.anaerobic.max) == (140, 170)
    assert (zones.max.min, zones.max.max) == (170, 200)


def test_zone_edges_round_half_up():
    # 0.5 * 201 = 100.5
    zones = compute_zones(201)
    assert zones.recovery.max == 101
    assert zones.fatBurn.min == 101


@pytest.mark.parametrize("max_hr", list(range(1, 260)))
def test_zones_contiguous_and_non_decreasing(max_hr):
    ranges = compute_zones(max_hr).ranges()
    assert ranges[0][1].min == 0
    for (_, lower), (_, upper) in zip(ranges, ranges[1:]):
        assert lower.max == upper.min
        assert lower.min <= lower.max
    assert ranges[-1][1].max == max_hr
    assert [zone for zone, _ in ranges] == [
        Zone.recovery, Zone.fat_burn, Zone.aerobic, Zone.anaerobic, Zone.max,
    ]


@pytest.mark.parametrize("bad", [0, -1, -180, math.nan, math.inf, None, "190", True])
def test_zones_reject_invalid_max(bad):
    with pytest.raises(InvalidArgument):
        compute_zones(bad)


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        classify(120, 0)


def test_classify_boundaries_belong_to_lower_zone():
    reading = classify(100, 200)
    assert reading.zone == Zone.recovery
    assert reading.intensity == 20
    assert reading.description == "Very Light"

    reading = classify(101, 200)
    assert reading.zone == Zone.fat_burn
    assert reading.intensity == 21
    assert reading.label == "Fat Burn"


def test_classify_interpolates_within_zone():
    assert classify(60, 200).intensity == 12
    assert classify(130, 200).intensity == 50
    assert classify(150, 200).zone == Zone.anaerobic
    assert classify(150, 200).intensity == 67
    assert classify(150, 200).description == "Hard"
    assert classify(190, 200).intensity == 93
    assert classify(200, 200).intensity == 100
    assert classify(0, 200).intensity == 0


def test_classify_above_max_is_max_zone_and_clamped():
    reading = classify(230, 200)
    assert reading.zone == Zone.max
    assert reading.description == "Maximum"
    assert reading.intensity == 100


def test_classify_degenerate_bands_do_not_divide_by_zero():
    # max HR 1: every band above recovery collapses to [1, 1]
    assert classify(1, 1).zone == Zone.recovery
    assert classify(1, 1).intensity == 20
    high = classify(5, 1)
    assert high.zone == Zone.max
    assert high.intensity == 80

    # max HR 2: fat burn and aerobic collapse, anaerobic is [1, 2]
    assert classify(2, 2).zone == Zone.anaerobic
    assert classify(2, 2).intensity == 80
    assert classify(3, 2).intensity == 80


@pytest.mark.parametrize("max_hr", [1, 2, 7, 60, 150, 187, 200, 220])
def test_intensity_bounded_and_monotonic(max_hr):
    previous = -1
    for hr in range(0, max_hr + 1):
        intensity = classify(hr, max_hr).intensity
        assert 0 <= intensity <= 100
        assert intensity >= previous
        previous = intensity
