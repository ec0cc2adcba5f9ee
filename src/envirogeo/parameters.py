"""Catalogue of supported environmental parameters.

Each parameter has a fixed physical range used to bound generated
series and to normalise variability, plus display metadata (unit,
colour ramp, icon) consumed by the dashboard.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from envirogeo.exceptions import InputError


class ParameterDefinition(BaseModel):
    """Static definition of one environmental parameter.

    Args:
        name: Display name (e.g. ``"Nitrogen Dioxide"``).
        unit: Unit label shown next to values.
        description: One-line description for the parameter picker.
        min: Lower bound of the valid range.
        max: Upper bound of the valid range.
        palette: Ordered colour ramp, low to high.
        icon: Icon identifier used by the dashboard.

    Example:
        >>> PARAMETERS["NDVI"].span
        1.1
    """

    model_config = ConfigDict(frozen=True)

    name: str
    unit: str
    description: str
    min: float
    max: float
    palette: tuple[str, ...]
    icon: str

    @property
    def span(self) -> float:
        """Width of the valid range (``max - min``)."""
        return round(self.max - self.min, 10)

    @property
    def display_color(self) -> str:
        """Middle colour of the ramp, used for charts and legends."""
        return self.palette[len(self.palette) // 2]


PARAMETERS: dict[str, ParameterDefinition] = {
    "NDVI": ParameterDefinition(
        name="Normalized Difference Vegetation Index",
        unit="Index (-1 to 1)",
        description="Measures vegetation health and density using satellite imagery",
        min=-0.2,
        max=0.9,
        palette=("#d73027", "#fc8d59", "#fee08b", "#d9ef8b", "#91cf60", "#1a9850"),
        icon="Leaf",
    ),
    "EVI": ParameterDefinition(
        name="Enhanced Vegetation Index",
        unit="Index (0 to 1)",
        description="Improved vegetation index optimized for high biomass regions",
        min=0,
        max=1,
        palette=("#ffffcc", "#c7e9b4", "#7fcdbb", "#41b6c4", "#1d91c0", "#225ea8"),
        icon="Trees",
    ),
    "Aerosol Index": ParameterDefinition(
        name="Aerosol Index",
        unit="AI",
        description="Indicates presence of absorbing aerosols like dust and smoke",
        min=-1,
        max=5,
        palette=(
            "#313695", "#4575b4", "#74add1", "#abd9e9",
            "#fee090", "#f46d43", "#d73027",
        ),
        icon="Wind",
    ),
    "NO2": ParameterDefinition(
        name="Nitrogen Dioxide",
        unit="mol/m²",
        description=(
            "Air pollutant from combustion, indicates traffic and industrial activity"
        ),
        min=0,
        max=0.0003,
        palette=("#4575b4", "#91bfdb", "#e0f3f8", "#fee090", "#fc8d59", "#d73027"),
        icon="Factory",
    ),
    "SO2": ParameterDefinition(
        name="Sulfur Dioxide",
        unit="mol/m²",
        description="Gas produced by volcanic activity and industrial processes",
        min=0,
        max=0.001,
        palette=(
            "#762a83", "#9970ab", "#c2a5cf", "#e7d4e8",
            "#d9f0d3", "#a6dba0", "#5aae61",
        ),
        icon="Flame",
    ),
    "CO": ParameterDefinition(
        name="Carbon Monoxide",
        unit="mol/m²",
        description="Colorless gas from incomplete combustion",
        min=0,
        max=0.05,
        palette=("#2166ac", "#67a9cf", "#d1e5f0", "#fddbc7", "#ef8a62", "#b2182b"),
        icon="CloudFog",
    ),
    "Soil Moisture": ParameterDefinition(
        name="Soil Moisture",
        unit="mm",
        description="Water content in the top layer of soil",
        min=0,
        max=100,
        palette=(
            "#8c510a", "#bf812d", "#dfc27d", "#f6e8c3",
            "#c7eae5", "#80cdc1", "#35978f", "#01665e",
        ),
        icon="Droplets",
    ),
    "Rainfall": ParameterDefinition(
        name="Precipitation",
        unit="mm/day",
        description="Daily rainfall amount",
        min=0,
        max=100,
        palette=(
            "#f7fbff", "#deebf7", "#c6dbef", "#9ecae1",
            "#6baed6", "#4292c6", "#2171b5", "#084594",
        ),
        icon="CloudRain",
    ),
    "LST": ParameterDefinition(
        name="Land Surface Temperature",
        unit="°C",
        description="Temperature of the Earth's surface",
        min=-10,
        max=50,
        palette=(
            "#313695", "#4575b4", "#74add1", "#abd9e9",
            "#fee090", "#fdae61", "#f46d43", "#d73027",
        ),
        icon="Thermometer",
    ),
    "ET": ParameterDefinition(
        name="Evapotranspiration",
        unit="kg/m²/8day",
        description="Combined evaporation and plant transpiration",
        min=0,
        max=100,
        palette=(
            "#ffffd4", "#fee391", "#fec44f", "#fe9929",
            "#ec7014", "#cc4c02", "#8c2d04",
        ),
        icon="Waves",
    ),
    "AQI": ParameterDefinition(
        name="Air Quality Index",
        unit="AQI",
        description="Composite measure of air quality",
        min=0,
        max=500,
        palette=("#00e400", "#ffff00", "#ff7e00", "#ff0000", "#8f3f97", "#7e0023"),
        icon="Wind",
    ),
}

# Parameters with a yearly cycle (vegetation, temperature and water).
SEASONAL_PARAMETERS: frozenset[str] = frozenset(
    {"NDVI", "EVI", "LST", "ET", "Rainfall"}
)


def get_parameter(parameter: str) -> ParameterDefinition:
    """Look up a parameter definition by identifier.

    Identifiers are case-sensitive and match the catalogue keys
    (``"NDVI"``, ``"Soil Moisture"``, ...).

    Raises:
        InputError: If *parameter* is not in the catalogue.
    """
    try:
        return PARAMETERS[parameter]
    except KeyError:
        valid = ", ".join(PARAMETERS)
        raise InputError(
            what=f"Unknown parameter: {parameter!r}",
            cause=f"Supported parameters are: {valid}",
            fix="Pick one of the supported parameters",
        ) from None
