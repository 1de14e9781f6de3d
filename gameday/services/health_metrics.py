"""Boundary with wearable / health-data providers.

Providers hand over a partial snapshot. Any populated field overwrites the
matching athlete metric after clamping; absent fields are left untouched.
"""
from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel

from gameday.models.domain import AthleteMetrics


logger = logging.getLogger(__name__)

SLEEP_RANGE = (3.0, 10.0)
HYDRATION_RANGE = (20.0, 180.0)
SCALE_RANGE = (1, 10)


class MetricsProviderError(RuntimeError):
    """Provider could not deliver a snapshot (unavailable, not authorized, ...)."""


class NoMetricsDataError(MetricsProviderError):
    """Provider responded but no metric field was populated."""

    def __init__(self, message: str = "No recent health values were found for your metrics.") -> None:
        super().__init__(message)


class HealthMetricsSnapshot(BaseModel):
    sleep_hours: float | None = None
    hydration_oz: float | None = None
    stress: int | None = None
    soreness: int | None = None
    training_intensity: int | None = None

    @property
    def populated_fields(self) -> list[str]:
        return sorted(name for name, value in self.model_dump().items() if value is not None)

    @property
    def has_values(self) -> bool:
        return bool(self.populated_fields)


class MetricsProvider(Protocol):
    async def fetch_snapshot(self) -> HealthMetricsSnapshot:
        ...


class WearableReadingsProvider:
    """Provider over raw wearable readings already handed to us by the caller."""

    def __init__(self, **readings: float | None) -> None:
        self.readings = readings

    async def fetch_snapshot(self) -> HealthMetricsSnapshot:
        return snapshot_from_wearable(**self.readings)


def _bounded(value, lower, upper):
    return max(lower, min(upper, value))


def stress_from_hrv(hrv_ms: float) -> int:
    """Map overnight HRV (SDNN, ms) to a 1-10 stress rating."""
    if hrv_ms < 30:
        return 9
    if hrv_ms < 45:
        return 8
    if hrv_ms < 60:
        return 6
    if hrv_ms < 80:
        return 4
    return 3


def soreness_from_resting_hr(bpm: float) -> int:
    """Map resting heart rate to a 1-10 soreness rating."""
    if bpm < 52:
        return 3
    if bpm < 60:
        return 4
    if bpm < 68:
        return 6
    if bpm < 76:
        return 7
    return 8


def intensity_from_active_energy(kcal: float) -> int:
    """Map today's active energy burn to a 1-10 training intensity."""
    if kcal < 180:
        return 3
    if kcal < 350:
        return 5
    if kcal < 550:
        return 7
    if kcal < 800:
        return 8
    return 9


def snapshot_from_wearable(
    sleep_hours: float | None = None,
    hydration_oz: float | None = None,
    hrv_ms: float | None = None,
    resting_hr: float | None = None,
    active_energy_kcal: float | None = None,
) -> HealthMetricsSnapshot:
    """
    Build a snapshot from raw wearable readings.

    Zero or negative sleep / hydration totals are treated as missing, as are
    missing physiological readings.
    """
    return HealthMetricsSnapshot(
        sleep_hours=sleep_hours if sleep_hours and sleep_hours > 0 else None,
        hydration_oz=hydration_oz if hydration_oz and hydration_oz > 0 else None,
        stress=stress_from_hrv(hrv_ms) if hrv_ms is not None else None,
        soreness=soreness_from_resting_hr(resting_hr) if resting_hr is not None else None,
        training_intensity=(
            intensity_from_active_energy(active_energy_kcal) if active_energy_kcal is not None else None
        ),
    )


def apply_snapshot(metrics: AthleteMetrics, snapshot: HealthMetricsSnapshot) -> AthleteMetrics:
    """
    Return new metrics with the snapshot's populated fields applied.

    Raises:
        NoMetricsDataError: If the snapshot carries no values at all
    """
    if not snapshot.has_values:
        raise NoMetricsDataError()

    updates: dict[str, float | int] = {}
    if snapshot.sleep_hours is not None:
        updates["sleep_hours"] = _bounded(snapshot.sleep_hours, *SLEEP_RANGE)
    if snapshot.hydration_oz is not None:
        updates["hydration_oz"] = _bounded(snapshot.hydration_oz, *HYDRATION_RANGE)
    if snapshot.stress is not None:
        updates["stress"] = _bounded(snapshot.stress, *SCALE_RANGE)
    if snapshot.soreness is not None:
        updates["soreness"] = _bounded(snapshot.soreness, *SCALE_RANGE)
    if snapshot.training_intensity is not None:
        updates["training_intensity"] = _bounded(snapshot.training_intensity, *SCALE_RANGE)

    logger.info("Applied health snapshot fields: %s", ", ".join(sorted(updates)))
    return metrics.model_copy(update=updates)
