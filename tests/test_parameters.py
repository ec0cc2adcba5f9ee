"""Tests for the parameter catalogue."""

from __future__ import annotations

import pytest

from envirogeo.exceptions import InputError
from envirogeo.parameters import PARAMETERS, SEASONAL_PARAMETERS, get_parameter

EXPECTED_IDS = [
    "NDVI",
    "EVI",
    "Aerosol Index",
    "NO2",
    "SO2",
    "CO",
    "Soil Moisture",
    "Rainfall",
    "LST",
    "ET",
    "AQI",
]


@pytest.mark.unit
class TestCatalogue:
    """Verify catalogue contents and derived properties."""

    def test_all_parameters_present(self) -> None:
        assert sorted(PARAMETERS) == sorted(EXPECTED_IDS)

    @pytest.mark.parametrize("parameter", EXPECTED_IDS)
    def test_ranges_are_ordered(self, parameter: str) -> None:
        definition = PARAMETERS[parameter]
        assert definition.min < definition.max
        assert definition.span > 0

    @pytest.mark.parametrize("parameter", EXPECTED_IDS)
    def test_palette_not_empty(self, parameter: str) -> None:
        definition = PARAMETERS[parameter]
        assert definition.palette
        assert definition.display_color in definition.palette

    def test_ndvi_range(self) -> None:
        ndvi = get_parameter("NDVI")
        assert (ndvi.min, ndvi.max) == (-0.2, 0.9)
        assert ndvi.span == pytest.approx(1.1)

    def test_display_color_is_middle_entry(self) -> None:
        aqi = get_parameter("AQI")
        assert aqi.display_color == aqi.palette[len(aqi.palette) // 2]

    def test_seasonal_subset(self) -> None:
        assert SEASONAL_PARAMETERS == {"NDVI", "EVI", "LST", "ET", "Rainfall"}
        assert SEASONAL_PARAMETERS <= set(PARAMETERS)


@pytest.mark.unit
class TestGetParameter:
    """Verify lookup errors."""

    def test_unknown_parameter(self) -> None:
        with pytest.raises(InputError, match="Unknown parameter: 'PM25'"):
            get_parameter("PM25")

    def test_lookup_is_case_sensitive(self) -> None:
        with pytest.raises(InputError):
            get_parameter("ndvi")
