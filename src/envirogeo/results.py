"""Result object model for analysis outputs."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from envirogeo.geometry import geometry_center
from envirogeo.parameters import get_parameter

if TYPE_CHECKING:
    import pandas as pd

TrendLabel = Literal["increasing", "decreasing", "stable"]

# Fallback geometry for GeoJSON export when no area was recorded.
_NULL_ISLAND: dict[str, Any] = {"type": "Point", "coordinates": [0, 0]}

_EXPORT_EXTENSIONS: dict[str, str] = {"csv": "csv", "geojson": "geojson"}


def compact_number(value: float) -> float | int:
    """Drop a redundant ``.0`` so ``5.0`` renders as ``5``."""
    if math.isfinite(value) and float(value).is_integer():
        return int(value)
    return value


class TimeSeriesPoint(BaseModel):
    """One dated observation of a parameter.

    Attributes:
        date: Calendar day in ISO form (``YYYY-MM-DD``).
        value: Observed or generated value, inside the parameter range.
        min: Lower uncertainty bound, if known.
        max: Upper uncertainty bound, if known.

    Example:
        >>> TimeSeriesPoint(date="2020-01-01", value=0.5).to_dict()
        {'date': '2020-01-01', 'value': 0.5}
    """

    model_config = ConfigDict(frozen=True)

    date: str
    value: float
    min: float | None = None
    max: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form, omitting absent bounds."""
        return self.model_dump(exclude_none=True)


class Stats(BaseModel):
    """Summary statistics of a series.

    Accepts both Python field names and the camelCase wire names used
    by the store and the data functions (``stdDev``, ``trendPercent``).

    Example:
        >>> s = Stats(mean=0.4, min=0.1, max=0.7, stdDev=0.1,
        ...           trend="stable", trendPercent=0.5)
        >>> s.std_dev
        0.1
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mean: float
    min: float
    max: float
    std_dev: float = Field(alias="stdDev")
    trend: TrendLabel
    trend_percent: float = Field(alias="trendPercent")

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire form."""
        return self.model_dump(by_alias=True)


class AnalysisPayload(BaseModel):
    """The ``results`` bundle persisted with an analysis record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time_series: list[TimeSeriesPoint] = Field(alias="timeSeries")
    stats: Stats
    insights: list[str] = Field(default_factory=list)


class AnalysisRecord(BaseModel):
    """A saved analysis as returned by the document store.

    Example:
        >>> record = AnalysisRecord.model_validate(doc)  # doctest: +SKIP
        >>> record.to_result().parameter  # doctest: +SKIP
        'NDVI'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    user_id: str = Field(alias="userId")
    parameter: str
    geometry: dict[str, Any] | None = None
    geometry_type: str = Field(default="", alias="geometryType")
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    results: AnalysisPayload
    created_at: str = Field(alias="createdAt")

    def to_result(self) -> AnalysisResult:
        """Rebuild an ``AnalysisResult`` from the stored record."""
        return AnalysisResult(
            parameter=self.parameter,
            time_series=list(self.results.time_series),
            stats=self.results.stats,
            insights=list(self.results.insights),
            start_date=self.start_date,
            end_date=self.end_date,
            geometry=self.geometry,
            geometry_type=self.geometry_type,
            source="history",
        )


class NationalSummary(BaseModel):
    """Country-wide yearly NDVI averages for the supported region.

    Attributes:
        yearly_averages: Mean NDVI per year, keyed by the year string.
        mean: Mean across the whole period.
        min: Lowest yearly value.
        max: Highest yearly value.
        insights: Insight sentences supplied by the data function.
        source: Name of the upstream dataset.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    yearly_averages: dict[str, float] = Field(alias="yearlyAverages")
    mean: float
    min: float
    max: float
    insights: list[str] = Field(default_factory=list)
    source: str = ""

    @property
    def change_percent(self) -> float:
        """Relative change from the first to the last year, in percent."""
        values = list(self.yearly_averages.values())
        if len(values) < 2 or values[0] == 0:
            return 0.0
        return (values[-1] - values[0]) / values[0] * 100

    @property
    def trend(self) -> TrendLabel:
        """Direction of the first-to-last change, stable within 2%."""
        change = self.change_percent
        if change > 2:
            return "increasing"
        if change < -2:
            return "decreasing"
        return "stable"


@dataclass
class AnalysisResult:
    """Result of one area analysis.

    Dataclass (not pydantic) so downstream code can attach warnings and
    so the pydantic point/stat models stay the serialisation boundary.

    Attributes:
        parameter: Parameter identifier (e.g. ``"NDVI"``).
        time_series: Ordered observations.
        stats: Summary statistics of ``time_series``.
        insights: Ordered insight sentences, trend sentence first.
        start_date: First day of the analysis period (ISO).
        end_date: Last day of the analysis period (ISO).
        geometry: GeoJSON geometry of the analysed area.
        geometry_type: Selection tag (``"point"``, ``"rectangle"``, ...).
        source: ``"synthetic"``, the remote dataset name, or
            ``"history"`` for reopened records.
        warnings: Human-readable notes about the result.

    Example:
        >>> result = analyze("NDVI", area)  # doctest: +SKIP
        >>> result.to_csv().splitlines()[0]  # doctest: +SKIP
        'Date,Value'
    """

    parameter: str
    time_series: list[TimeSeriesPoint]
    stats: Stats
    insights: list[str] = field(default_factory=list)
    start_date: str = ""
    end_date: str = ""
    geometry: dict[str, Any] | None = None
    geometry_type: str = ""
    source: str = "synthetic"
    warnings: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        """Return a narrative summary; raw points are not shown."""
        definition = get_parameter(self.parameter)
        lines: list[str] = [f"{type(self).__name__}("]
        lines.append(f"  parameter: {self.parameter} ({definition.name})")

        center = geometry_center(self.geometry) if self.geometry else None
        if center is not None:
            lat, lon = center
            ns = "N" if lat >= 0 else "S"
            ew = "E" if lon >= 0 else "W"
            lines.append(
                f"  location: {abs(lat):.2f}°{ns}, {abs(lon):.2f}°{ew}"
            )

        if self.start_date and self.end_date:
            lines.append(f"  period: {self.start_date} → {self.end_date}")

        lines.append(f"  observations: {len(self.time_series)} ({self.source})")
        lines.append(
            f"  mean: {self.stats.mean} {definition.unit} "
            f"(min {self.stats.min}, max {self.stats.max}, "
            f"std {self.stats.std_dev})"
        )
        lines.append(f"  trend: {self.stats.trend} ({self.stats.trend_percent:+}%)")

        for w in self.warnings:
            lines.append(f"  ⚠ {w}")

        lines.append(")")
        return "\n".join(lines)

    # ── Persistence ───────────────────────────────────────────────────

    def to_record(self) -> dict[str, Any]:
        """Build the document body stored by ``saveAnalysis``.

        The store adds ``_id``, ``userId`` and ``createdAt``.
        """
        return {
            "parameter": self.parameter,
            "geometry": self.geometry,
            "geometryType": self.geometry_type,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "results": {
                "timeSeries": [p.to_dict() for p in self.time_series],
                "stats": self.stats.to_dict(),
                "insights": list(self.insights),
            },
        }

    # ── Exports ───────────────────────────────────────────────────────

    def to_csv(self) -> str:
        """Export the series as ``Date,Value`` CSV text.

        Rows are joined with ``\\n``; there is no trailing newline.

        Example:
            >>> result.to_csv()  # doctest: +SKIP
            'Date,Value\\n2020-01-01,0.5\\n2020-01-02,0.6'
        """
        rows = ["Date,Value"]
        rows.extend(
            f"{p.date},{compact_number(p.value)}" for p in self.time_series
        )
        return "\n".join(rows)

    def to_geojson(self) -> dict[str, Any]:
        """Export as a GeoJSON ``FeatureCollection`` with one feature.

        The feature carries the analysed geometry (``Point [0, 0]`` when
        none was recorded) and ``{parameter, stats, timeSeries}`` as
        properties.
        """
        return {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {
                        "parameter": self.parameter,
                        "stats": self.stats.to_dict(),
                        "timeSeries": [p.to_dict() for p in self.time_series],
                    },
                    "geometry": self.geometry or dict(_NULL_ISLAND),
                }
            ],
        }

    def export_filename(self, fmt: str) -> str:
        """Return ``{parameter}_{YYYYMMDD}_{YYYYMMDD}.{ext}`` for *fmt*."""
        ext = _EXPORT_EXTENSIONS.get(fmt, fmt)
        start = self.start_date.replace("-", "")
        end = self.end_date.replace("-", "")
        return f"{self.parameter}_{start}_{end}.{ext}"

    def export(self, fmt: str) -> str:
        """Render the result in an export format.

        Args:
            fmt: ``"csv"`` or ``"geojson"``.

        Returns:
            File content as text.

        Raises:
            ValueError: For any other format.
        """
        if fmt == "csv":
            return self.to_csv()
        if fmt == "geojson":
            return json.dumps(self.to_geojson(), indent=2, ensure_ascii=False)
        if fmt == "shapefile":
            msg = "Shapefile export requires server-side processing"
            raise ValueError(msg)
        msg = f"Unsupported export format: {fmt!r} (use 'csv' or 'geojson')"
        raise ValueError(msg)

    def write_export(self, fmt: str, directory: str | Path = ".") -> Path:
        """Write an export file named by ``export_filename()``.

        Returns:
            Path of the written file.
        """
        content = self.export(fmt)
        path = Path(directory) / self.export_filename(fmt)
        path.write_text(content, encoding="utf-8")
        return path

    def to_dataframe(self) -> pd.DataFrame:
        """Export the series to a pandas DataFrame.

        Columns: ``date`` (datetime64), ``value``, ``min``, ``max``.
        Missing uncertainty bounds become NaN.
        """
        import pandas as pd

        df = pd.DataFrame(
            [
                {"date": p.date, "value": p.value, "min": p.min, "max": p.max}
                for p in self.time_series
            ],
            columns=["date", "value", "min", "max"],
        )
        df["date"] = pd.to_datetime(df["date"])
        df[["value", "min", "max"]] = df[["value", "min", "max"]].astype(float)
        return df

    def to_png(self, path: str | Path) -> Path:
        """Export the time series chart to a PNG image.

        Draws the value line in the parameter's display colour, the
        uncertainty band when available, and a title with the period,
        mean and trend.

        Args:
            path: Output file path (will be created/overwritten).

        Returns:
            Path object pointing to the written file.
        """
        import matplotlib

        matplotlib.use("Agg")  # Non-interactive backend for file output
        import matplotlib.pyplot as plt

        path = Path(path)
        definition = get_parameter(self.parameter)
        df = self.to_dataframe()

        fig, ax = plt.subplots(figsize=(12, 6))

        title = definition.name
        if self.start_date and self.end_date:
            title += f"\n{self.start_date} → {self.end_date}"
        title += (
            f"\nMean: {self.stats.mean} {definition.unit}, "
            f"trend: {self.stats.trend} ({self.stats.trend_percent:+}%)"
        )
        ax.set_title(title)

        if df.empty:
            ax.text(
                0.5,
                0.5,
                "No data available",
                ha="center",
                va="center",
                fontsize=14,
                transform=ax.transAxes,
            )
        else:
            color = definition.display_color
            ax.plot(df["date"], df["value"], color=color, linewidth=2)
            if df["min"].notna().all() and df["max"].notna().all():
                ax.fill_between(df["date"], df["min"], df["max"], alpha=0.2, color=color)
            ax.set_xlabel("Date")
            ax.set_ylabel(definition.unit)
            ax.set_ylim(definition.min, definition.max)

        plt.tight_layout()
        plt.savefig(path, dpi=150, bbox_inches="tight")
        plt.close(fig)

        return path
