from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pytest

from aire_zmvm import InvalidArgument, Pollutant, convert_imeca, to_imeca
from aire_zmvm.imeca import pm10_to_imeca_2006, pm10_to_imeca_2014


def test_o3_low_end_of_moderate_band() -> None:
    assert to_imeca('O3', 70) == 50


def test_negative_co_is_missing() -> None:
    assert to_imeca('CO', -1) is None


def test_convert_preserves_order_and_missing() -> None:
    assert convert_imeca(['O3', 'CO'], [70, -1]) == [50, None]


@pytest.mark.parametrize('missing', [None, float('nan'), np.nan, pd.NA])
def test_missing_concentration_propagates(missing) -> None:
    assert to_imeca('PM10', missing) is None


@pytest.mark.parametrize('pollutant, value, expected', [
    ('O3', 95, 100), ('O3', 96, 101),
    ('O3', 154, 150), ('O3', 155, 151),
    ('O3', 204, 200), ('O3', 205, 201),
    ('NO2', 105, 50), ('NO2', 210, 100), ('NO2', 211, 101),
    ('NO2', 420, 200), ('NO2', 421, 201),
    ('CO', 5.5, 50), ('CO', 11, 100), ('CO', 22, 200), ('CO', 22.01, 201),
    ('PM10', 40, 50), ('PM10', 41, 51),
    ('PM10', 75, 100), ('PM10', 76, 101),
    ('PM10', 214, 150), ('PM10', 215, 151),
    ('PM10', 354, 200), ('PM10', 355, 201),
    ('PM2', 15.4, 50), ('PM2', 40.4, 100), ('PM2', 65.4, 150),
    ('PM2', 150.4, 200), ('PM2', 150.5, 201),
    ('SO2', 130, 100),
])
def test_curves_are_continuous_at_breakpoints(pollutant, value, expected) -> None:
    assert to_imeca(pollutant, value) == expected


def test_every_pollutant_has_a_curve() -> None:
    for pollutant in Pollutant:
        assert to_imeca(pollutant, 0) == 0


@pytest.mark.parametrize('code', ['PM2', 'PM2.5', 'pm25', Pollutant.PM2])
def test_pm25_aliases(code) -> None:
    assert to_imeca(code, 40.4) == 100


def test_rounds_half_to_even() -> None:
    # 1.25 * 2 = 2.5 and 1.25 * 6 = 7.5 exactly
    assert pm10_to_imeca_2014(2) == 2
    assert pm10_to_imeca_2014(6) == 8
    # 5.4 * 5 / 6, 24.6 * 5 / 6 and 34.2 * 5 / 6 land exactly on .5
    assert pm10_to_imeca_2006(5.4) == 4
    assert pm10_to_imeca_2006(24.6) == 20
    assert pm10_to_imeca_2006(34.2) == 28
    assert to_imeca('PM10', 5.4, pm10_norm=2006) == 4


def test_pm10_2006_norm() -> None:
    assert pm10_to_imeca_2006(120) == 100
    assert pm10_to_imeca_2006(320) == 200
    assert to_imeca('PM10', 400, pm10_norm=2006) == 250
    assert to_imeca('PM10', 400) == 227


def test_unknown_pm10_norm_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        to_imeca('PM10', 50, pm10_norm=1999)


@pytest.mark.parametrize('pollutant', ['O3', 'NO2', 'SO2', 'PM10', 'PM2'])
def test_negative_concentration_is_missing(pollutant) -> None:
    assert to_imeca(pollutant, -0.5) is None


def test_infinite_concentration_is_missing() -> None:
    assert to_imeca('O3', float('inf')) is None


def test_unknown_pollutant_returns_none_and_warns(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger='aire_zmvm.imeca'):
        assert to_imeca('NOX', 10) is None
    assert 'NOX' in caplog.text


def test_unknown_pollutant_strict() -> None:
    with pytest.raises(InvalidArgument):
        to_imeca('NOX', 10, strict=True)


def test_non_numeric_concentration_is_rejected() -> None:
    with pytest.raises(InvalidArgument):
        to_imeca('O3', 'high')


def test_convert_broadcasts_single_pollutant() -> None:
    assert convert_imeca('O3', [70, None, 95]) == [50, None, 100]


def test_convert_broadcasts_single_value() -> None:
    assert convert_imeca(['O3', 'PM10'], 70) == [50, 93]


def test_convert_accepts_pandas_and_numpy() -> None:
    pollutants = pd.Series(['O3', 'PM10', 'CO'])
    values = np.array([70.0, np.nan, 5.5])

    assert convert_imeca(pollutants, values) == [50, None, 50]


def test_convert_length_mismatch() -> None:
    with pytest.raises(InvalidArgument):
        convert_imeca(['O3', 'CO'], [70, 1, 2])


@pytest.mark.parametrize('missing', [None, np.nan, pd.NA])
def test_convert_broadcasts_single_missing_value(missing) -> None:
    assert convert_imeca(['O3', 'CO'], missing) == [None, None]


def test_convert_broadcasts_zero_dimensional_array() -> None:
    assert convert_imeca(['O3', 'PM10'], np.array(70.0)) == [50, 93]


def test_strict_rejects_unknown_pollutant_even_when_value_missing() -> None:
    with pytest.raises(InvalidArgument):
        to_imeca('NOX', None, strict=True)
    with pytest.raises(InvalidArgument):
        convert_imeca(['O3', 'NOX'], [70, None], strict=True)


def test_unknown_pollutant_with_missing_value_is_none() -> None:
    assert to_imeca('NOX', None) is None
