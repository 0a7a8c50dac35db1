"""
Renders the data upload panel.

Accepts a GCMS CSV (or the bundled sample run), validates it, and runs the
full analysis: derived chromatogram metrics, metabolite mapping, PubChem
lookups and pathway network construction. Ingestion errors reject the
upload and are shown verbatim; the previous results stay in place.
"""

# --- Standard Library Imports ---
import asyncio
import logging
from typing import Callable, List, Optional

# --- Third-party Imports ---
import streamlit as st

# --- Local Application Imports ---
from ..analytics.metabolite_pipeline import run_analysis
from ..utils.errors import GCMSAnalyzerError
from ..utils.file_handler import MeasurementRow, StatusCallback, load_sample_data, parse_csv
from ..utils.session_state_manager import SessionStateManager

# --- Setup Logging ---
logger = logging.getLogger(__name__)

_STATUS_RENDERERS = {
    "success": st.success,
    "error": st.error,
    "info": st.info,
}


def _make_status_callback(placeholder) -> StatusCallback:
    def on_status(status: str, message: str, progress: Optional[int]) -> None:
        text = f"{message} ({progress}%)" if progress else message
        if status == "error":
            placeholder.error(text, icon="⚠️")
        elif status == "complete":
            placeholder.success(text, icon="✅")
        else:
            placeholder.info(text, icon="⏳")
    return on_status


def is_new_upload(ssm: SessionStateManager, uploaded) -> bool:
    """True only for an uploader file not yet handed to the analysis; sample loads and resets do not re-arm it."""
    return uploaded is not None and uploaded.file_id != ssm.last_upload_id


def run_upload(ssm: SessionStateManager, loader: Callable[[StatusCallback], List[MeasurementRow]], source_name: str) -> bool:
    """Loads rows through `loader` and, if they validate, replaces the session's analysis."""
    placeholder = st.empty()
    on_status = _make_status_callback(placeholder)
    try:
        rows = loader(on_status)
    except GCMSAnalyzerError as e:
        logger.warning(f"Rejected upload '{source_name}': {e}")
        ssm.set_data("status", ("error", f"Error: {e}"))
        placeholder.empty()
        return False

    ssm.reset()
    ssm.set_data("rows", rows)
    with st.spinner(f"Mapping {len(rows)} rows to genes, pathways and PubChem records..."):
        analysis = asyncio.run(run_analysis(rows, ssm.mapper, ssm.pubchem, ssm.graph, ssm.config, on_status=on_status))
    ssm.set_data("analysis", analysis)
    ssm.set_data("source_name", source_name)
    ssm.set_data("status", ("success", f"Processed {len(analysis.results)} metabolites from **{source_name}**."))
    placeholder.empty()
    return True


def render_upload_panel(ssm: SessionStateManager) -> None:
    """Renders the file uploader, the sample-data button and the status banner."""
    st.header("📂 Data Upload")
    st.caption("CSV with a header row and the columns **Metabolite**, **RetentionTime** (min) and **Intensity**. Extra columns are kept.")
    try:
        uploaded = st.file_uploader("Upload GCMS CSV", type=["csv"], key="gcms_upload")
        if is_new_upload(ssm, uploaded):
            ssm.last_upload_id = uploaded.file_id
            run_upload(
                ssm,
                lambda on_status: parse_csv(uploaded.getvalue(), filename=uploaded.name, mime_type=uploaded.type, on_status=on_status),
                uploaded.name,
            )

        if st.button("🧪 Load sample data", use_container_width=True):
            run_upload(ssm, load_sample_data, "sample_data.csv")

        status = ssm.get_data("status")
        if status:
            kind, message = status
            _STATUS_RENDERERS.get(kind, st.info)(message)
    except Exception as e:
        st.error("Could not process the uploaded file.")
        logger.error(f"Error in render_upload_panel: {e}", exc_info=True)
