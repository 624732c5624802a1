import dataclasses

import pytest

from kaffeepause.enums import (
    BlockerStatus,
    ButtonArea,
    ButtonName,
    CoinData,
    CoinType,
    Detection,
)

AREA = ButtonArea(137, 238, 100, 500, ButtonName.CREMA)


def test_contains_inside_point():
    assert AREA.contains(138, 101) is True
    assert AREA.contains(237, 499) is True


@pytest.mark.parametrize(
    "x, y",
    [(137, 300), (238, 300), (200, 100), (200, 500), (0, 0), (600, 300)],
)
def test_contains_excludes_edges_and_outside(x, y):
    assert AREA.contains(x, y) is False


def test_button_area_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        AREA.begin_x = 0
    assert AREA.begin_x == 137
    assert AREA.contains(138, 101) is True


def test_coin_data_fields_and_equality():
    data = CoinData(2125, 167, 392, 0)
    assert data.diameter_micrometer == 2125
    assert data.width_micrometer == 167
    assert data.weight_milligram == 392
    assert data.magnetic_property == 0
    assert data == CoinData(2125, 167, 392, 0)


def test_coin_types_have_distinct_values_matching_magnetic_index():
    assert CoinType(0) is CoinType.EUR005
    assert CoinType(6) is CoinType.INVALID
    assert len({c.value for c in CoinType}) == len(CoinType)


@pytest.mark.parametrize("value", [d.value for d in Detection])
def test_detection_toggle_round_trip(value):
    reading = Detection(value)
    assert reading.toggled() is not reading
    assert reading.toggled().toggled() is reading


def test_blocker_toggle():
    assert BlockerStatus.CLOSED.toggled() is BlockerStatus.OPENED
    assert BlockerStatus.OPENED.toggled() is BlockerStatus.CLOSED