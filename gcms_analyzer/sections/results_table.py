"""
Renders the metabolite results table.

One row per distinct metabolite with its gene locus, PubChem CID and, once
background enrichment has completed, molecular formula and weight.
"""

# --- Standard Library Imports ---
import logging

# --- Third-party Imports ---
import streamlit as st

# --- Local Application Imports ---
from ..analytics.metabolite_pipeline import results_to_dataframe
from ..config import LOOKUP_ERROR, NOT_FOUND, RESULT_COLUMNS
from ..utils.session_state_manager import SessionStateManager

# --- Setup Logging ---
logger = logging.getLogger(__name__)


def style_lookup_cell(val: str) -> str:
    """Greys out sentinel values, highlights resolved identifiers."""
    if val in (NOT_FOUND, LOOKUP_ERROR):
        return 'color: #6c757d;'
    return 'color: #2563EB; font-weight: bold;'


def render_results_table(ssm: SessionStateManager) -> None:
    st.header("🧬 Metabolite Mapping Results")
    analysis = ssm.get_data("analysis")
    if analysis is None:
        st.info("No results yet. Process a file to map metabolites.", icon="ℹ️")
        return

    try:
        results = analysis.results
        genes_mapped = sum(1 for r in results if r.gene_locus_id != NOT_FOUND)
        compounds_found = sum(1 for r in results if r.pubchem_url)
        failures = [r for r in results if r.error]

        kpi1, kpi2, kpi3 = st.columns(3)
        kpi1.metric("Metabolites", f"{len(results)}")
        kpi2.metric("Mapped to Gene Locus", f"{genes_mapped} / {len(results)}")
        kpi3.metric("Found in PubChem", f"{compounds_found} / {len(results)}")

        df = results_to_dataframe(results)
        styled = df.style.map(style_lookup_cell, subset=[RESULT_COLUMNS["gene_locus_id"]])
        st.dataframe(
            styled,
            use_container_width=True,
            hide_index=True,
            column_config={
                RESULT_COLUMNS["pubchem_id"]: st.column_config.LinkColumn(display_text=r"compound/(\d+)$"),
                RESULT_COLUMNS["retention_time"]: st.column_config.NumberColumn(format="%.2f"),
                RESULT_COLUMNS["intensity"]: st.column_config.NumberColumn(format="%d"),
            },
        )
        st.download_button("Download results (CSV)", df.to_csv(index=False).encode("utf-8"), file_name="gcms_results.csv", mime="text/csv")

        if failures:
            st.warning(f"{len(failures)} metabolite(s) could not be fully processed: " + ", ".join(r.name for r in failures))
    except Exception as e:
        st.error("Could not render the results table.")
        logger.error(f"Error in render_results_table: {e}", exc_info=True)
