"""
Derived metrics computed from validated GCMS measurement rows.

This module holds the numerical core behind the chromatogram and mass-spectra
charts: time-sorted chromatogram series, per-metabolite mean intensities,
canonical first-seen metabolites, local-maximum peak detection and
trapezoidal area under the curve. All functions are pure; malformed input
raises to the caller.
"""

# --- Standard Library Imports ---
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

# --- Third-party Imports ---
import numpy as np
from scipy.integrate import trapezoid

# --- Local Application Imports ---
from ..utils.file_handler import MeasurementRow

# --- Setup Logging ---
logger = logging.getLogger(__name__)

DEFAULT_PEAK_THRESHOLD = 0.1


@dataclass
class ChromatogramSeries:
    times: List[float] = field(default_factory=list)
    intensities: List[float] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)


@dataclass
class MassSpectraSeries:
    metabolites: List[str] = field(default_factory=list)
    intensities: List[float] = field(default_factory=list)

    def as_dict(self) -> Dict[str, float]:
        return dict(zip(self.metabolites, self.intensities))


@dataclass
class ProcessedData:
    """Everything the charts and results table need from one upload."""
    chromatogram: ChromatogramSeries
    mass_spectra: MassSpectraSeries
    metabolites: List[MeasurementRow]
    peaks: List[int]
    area: float


def extract_chromatogram_data(rows: Sequence[MeasurementRow]) -> ChromatogramSeries:
    """Sorts rows by retention time (ties keep input order) into parallel arrays."""
    sorted_rows = sorted(rows, key=lambda row: row.retention_time)
    return ChromatogramSeries(
        times=[row.retention_time for row in sorted_rows],
        intensities=[row.intensity for row in sorted_rows],
        labels=[row.name for row in sorted_rows],
    )


def extract_mass_spectra_data(rows: Sequence[MeasurementRow]) -> MassSpectraSeries:
    """Mean intensity per metabolite name, in first-seen order."""
    grouped: Dict[str, List[float]] = {}
    for row in rows:
        grouped.setdefault(row.name, []).append(row.intensity)
    return MassSpectraSeries(
        metabolites=list(grouped.keys()),
        intensities=[float(np.mean(values)) for values in grouped.values()],
    )


def extract_metabolites(rows: Sequence[MeasurementRow]) -> List[MeasurementRow]:
    """Returns the first row seen for each distinct metabolite name."""
    canonical: Dict[str, MeasurementRow] = {}
    for row in rows:
        if row.name not in canonical:
            canonical[row.name] = row
    return list(canonical.values())


def find_peaks(intensities: Sequence[float], threshold: float = DEFAULT_PEAK_THRESHOLD) -> List[int]:
    """
    Finds local maxima above a fraction of the highest intensity.

    A point at index i (1 <= i <= n-2) is a peak when it exceeds
    `threshold * max(intensities)` and is strictly greater than both of its
    neighbours. Endpoints are never peaks.

    Args:
        intensities: Intensity values in chromatogram (time) order.
        threshold: Minimum peak height as a fraction of the maximum.

    Returns:
        List[int]: Peak indices in ascending order.

    Raises:
        ValueError: If `intensities` is empty.
    """
    values = np.asarray(intensities, dtype=float)
    if values.size == 0:
        raise ValueError("Cannot detect peaks in an empty intensity series.")
    if values.size < 3:
        return []
    min_height = threshold * values.max()
    middle = values[1:-1]
    is_peak = (middle > min_height) & (middle > values[:-2]) & (middle > values[2:])
    return [int(i) + 1 for i in np.flatnonzero(is_peak)]


def calculate_area(times: Sequence[float], intensities: Sequence[float]) -> float:
    """Trapezoidal area under the (time, intensity) curve; 0.0 below two points."""
    if len(times) != len(intensities):
        raise ValueError(f"times and intensities differ in length ({len(times)} vs {len(intensities)}).")
    if len(times) < 2:
        return 0.0
    t = np.asarray(times, dtype=float)
    y = np.asarray(intensities, dtype=float)
    order = np.argsort(t, kind="stable")
    return float(trapezoid(y[order], t[order]))


def process_data(rows: Sequence[MeasurementRow], peak_threshold: float = DEFAULT_PEAK_THRESHOLD) -> ProcessedData:
    """Computes all derived series for one set of validated rows."""
    chromatogram = extract_chromatogram_data(rows)
    mass_spectra = extract_mass_spectra_data(rows)
    metabolites = extract_metabolites(rows)
    peaks = find_peaks(chromatogram.intensities, peak_threshold)
    area = calculate_area(chromatogram.times, chromatogram.intensities)
    logger.info(f"Processed {len(rows)} rows: {len(metabolites)} metabolites, {len(peaks)} peaks, area {area:.2f}.")
    return ProcessedData(
        chromatogram=chromatogram,
        mass_spectra=mass_spectra,
        metabolites=metabolites,
        peaks=peaks,
        area=area,
    )
