#gcms_analyzer/app.py
"""
Main application entry point for the GCMS Analyzer.

This Streamlit application is a browser-based front-end for gas
chromatography–mass spectrometry data. It ingests a CSV of metabolite
measurements, plots the chromatogram and per-metabolite mass spectra, maps
metabolites to gene loci and pathways, looks compounds up in PubChem and
draws the resulting pathway network.

Run with:  streamlit run gcms_analyzer/app.py
"""

# --- Standard Library Imports ---
import logging
import os
import sys

# --- Third-party Imports ---
import streamlit as st

# --- Robust Path Correction Block ---
try:
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(current_dir)
    if project_root not in sys.path:
        sys.path.insert(0, project_root)
except Exception as e:
    st.warning(f"Could not adjust system path. Module imports may fail. Error: {e}")

# --- Local Application Imports ---
try:
    from gcms_analyzer.sections import chromatogram_view, pathway_network, results_table
    from gcms_analyzer.sections.upload_panel import render_upload_panel
    from gcms_analyzer.utils.session_state_manager import SessionStateManager
except ImportError as e:
    st.error(f"Fatal Error: A required local module could not be imported: {e}. "
             "Please ensure the application is run from the project's root directory and that all subdirectories contain an `__init__.py` file.")
    logging.critical(f"Fatal module import error: {e}", exc_info=True)
    st.stop()


st.set_page_config(layout="wide", page_title="GCMS Analyzer", page_icon="🧪")

# --- Setup Logging ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)
logger = logging.getLogger(__name__)

# --- Module-Level Constants ---
ANALYSIS_PAGES = {
    "📈 **Chromatogram & Spectra**": chromatogram_view.render_chromatogram_view,
    "🧬 **Results**": results_table.render_results_table,
    "🕸️ **Pathway Network**": pathway_network.render_pathway_network,
}

# ==============================================================================
# --- MAIN APPLICATION LOGIC ---
# ==============================================================================
def main() -> None:
    """Main function to run the Streamlit application."""
    try:
        ssm = SessionStateManager()
    except Exception as e:
        st.error("Fatal Error: Could not initialize Session State."); logger.critical(f"Failed to instantiate SessionStateManager: {e}", exc_info=True); st.stop()

    st.title("🧪 GCMS Analyzer")
    source_name = ssm.get_data("source_name")
    st.caption(f"Currently showing **{source_name}**" if source_name else "Gas chromatography–mass spectrometry visualization and metabolite mapping")

    with st.sidebar:
        render_upload_panel(ssm)

    tabs = st.tabs(list(ANALYSIS_PAGES.keys()))
    for tab, render_page in zip(tabs, ANALYSIS_PAGES.values()):
        with tab:
            render_page(ssm)

# ==============================================================================
# --- SCRIPT EXECUTION ---
# ==============================================================================
if __name__ == "__main__":
    main()
