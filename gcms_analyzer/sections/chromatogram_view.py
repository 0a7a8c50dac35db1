"""Renders the chromatogram and mass-spectra charts for the current upload."""

# --- Standard Library Imports ---
import logging

# --- Third-party Imports ---
import pandas as pd
import streamlit as st

# --- Local Application Imports ---
from ..analytics.chromatogram import calculate_area, find_peaks
from ..utils.file_handler import rows_to_dataframe
from ..utils.plot_utils import create_chromatogram_chart, create_mass_spectra_chart
from ..utils.session_state_manager import SessionStateManager

# --- Setup Logging ---
logger = logging.getLogger(__name__)


def render_chromatogram_view(ssm: SessionStateManager) -> None:
    st.header("📈 Chromatogram & Mass Spectra")
    analysis = ssm.get_data("analysis")
    if analysis is None:
        st.info("Upload a GCMS CSV file or load the sample data to get started.", icon="ℹ️")
        return

    try:
        series = analysis.processed.chromatogram
        threshold = st.slider(
            "Peak detection threshold (fraction of max intensity)",
            min_value=0.0, max_value=1.0, value=float(ssm.config.peak_threshold), step=0.05,
        )
        peaks = find_peaks(series.intensities, threshold) if series.intensities else []
        area = calculate_area(series.times, series.intensities)

        kpi1, kpi2, kpi3 = st.columns(3)
        kpi1.metric("Data Points", f"{len(series.times)}")
        kpi2.metric("Detected Peaks", f"{len(peaks)}")
        kpi3.metric("Area Under Curve", f"{area:,.1f}", help="Trapezoidal integration of intensity over retention time (intensity·min).")

        st.plotly_chart(create_chromatogram_chart(series, peaks), use_container_width=True)
        if peaks:
            peaks_df = pd.DataFrame({
                "Metabolite": [series.labels[i] for i in peaks],
                "Retention Time (min)": [round(series.times[i], 2) for i in peaks],
                "Intensity": [round(series.intensities[i]) for i in peaks],
            })
            st.dataframe(peaks_df, use_container_width=True, hide_index=True)

        st.divider()
        st.plotly_chart(create_mass_spectra_chart(analysis.processed.mass_spectra), use_container_width=True)
        st.caption("Bars show the mean intensity of each metabolite across all of its rows.")

        with st.expander("Raw measurement rows"):
            st.dataframe(rows_to_dataframe(ssm.get_data("rows", [])), use_container_width=True, hide_index=True)
    except Exception as e:
        st.error("Could not render the chromatogram view.")
        logger.error(f"Error in render_chromatogram_view: {e}", exc_info=True)
