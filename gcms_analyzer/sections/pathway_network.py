"""Renders the metabolite / gene / pathway network for the current session."""

# --- Standard Library Imports ---
import logging

# --- Third-party Imports ---
import streamlit as st

# --- Local Application Imports ---
from ..utils.plot_utils import create_pathway_network_figure
from ..utils.session_state_manager import SessionStateManager

# --- Setup Logging ---
logger = logging.getLogger(__name__)


def render_pathway_network(ssm: SessionStateManager) -> None:
    st.header("🕸️ Pathway Network")
    st.markdown("Metabolites (green) link to their gene locus (amber), pathway (indigo) and reaction steps (blue).")

    try:
        graph = ssm.graph
        col1, col2, col3 = st.columns([1, 1, 1])
        col1.metric("Nodes", f"{graph.node_count}")
        col2.metric("Edges", f"{graph.edge_count}")
        with col3:
            if st.button("♻️ Reset session", use_container_width=True, help="Clears the network, lookup caches and the current upload."):
                ssm.reset()
                st.rerun()

        st.plotly_chart(create_pathway_network_figure(graph), use_container_width=True)

        if graph.node_count:
            nodes_df, edges_df = graph.to_dataframes()
            with st.expander("Network elements"):
                tab_nodes, tab_edges = st.tabs(["Nodes", "Edges"])
                with tab_nodes:
                    st.dataframe(nodes_df, use_container_width=True, hide_index=True)
                with tab_edges:
                    st.dataframe(edges_df, use_container_width=True, hide_index=True)
    except Exception as e:
        st.error("Could not render the pathway network.")
        logger.error(f"Error in render_pathway_network: {e}", exc_info=True)
