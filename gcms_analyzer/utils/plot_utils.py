"""
Plotting utilities for the GCMS Analyzer.

Generates the Plotly figures shown by the dashboard: the chromatogram trace
with detected peaks, the per-metabolite mass-spectra bar chart and the
pathway network. Every builder returns a placeholder figure instead of
raising so one bad chart never takes down the page.
"""

# --- Standard Library Imports ---
import logging
from typing import Any, Dict, List, Optional, Sequence

# --- Third-party Imports ---
import networkx as nx
import plotly.graph_objects as go

# --- Local Application Imports ---
from ..analytics.chromatogram import ChromatogramSeries, MassSpectraSeries
from ..analytics.pathway_graph import PathwayGraph

# --- Setup Logging ---
logger = logging.getLogger(__name__)


# ==============================================================================
# --- MODULE-LEVEL CONFIGURATION CONSTANTS ---
# ==============================================================================

_PLOT_LAYOUT_CONFIG: Dict[str, Any] = {
    "margin": dict(l=50, r=30, t=80, b=50),
    "title_x": 0.5,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "template": "plotly_white"
}

_PRIMARY_COLOR = "#3B82F6"
_PEAK_COLOR = "#EF4444"
_EDGE_COLOR = "#94A3B8"

_NODE_STYLE: Dict[str, Dict[str, str]] = {
    "metabolite": {"color": "#10B981", "symbol": "circle"},
    "gene": {"color": "#F59E0B", "symbol": "square"},
    "pathway": {"color": "#6366F1", "symbol": "diamond"},
    "reaction": {"color": _PRIMARY_COLOR, "symbol": "circle"},
}


def _create_placeholder_figure(text: str, title: str, icon: str = "ℹ️") -> go.Figure:
    """Creates a standardized, empty figure with an icon and text annotation."""
    fig = go.Figure()
    fig.update_layout(
        title_text=f"<b>{title}</b>",
        xaxis={'visible': False}, yaxis={'visible': False},
        annotations=[{'text': f"{icon}<br>{text}", 'xref': 'paper', 'yref': 'paper', 'showarrow': False, 'font': {'size': 16, 'color': '#7f7f7f'}}],
        height=300, **_PLOT_LAYOUT_CONFIG
    )
    return fig

# ==============================================================================
# --- CHROMATOGRAM & MASS SPECTRA ---
# ==============================================================================

def create_chromatogram_chart(series: ChromatogramSeries, peaks: Optional[Sequence[int]] = None) -> go.Figure:
    """Line chart of intensity over retention time with detected peaks marked."""
    title = "Chromatogram"
    try:
        if not series.times:
            return _create_placeholder_figure("Upload a GCMS file to view the chromatogram.", title)
        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=series.times, y=series.intensities, mode='lines', name='Intensity',
            line=dict(color=_PRIMARY_COLOR, width=2, shape='spline'),
            fill='tozeroy', fillcolor='rgba(59, 130, 246, 0.1)',
            customdata=series.labels,
            hovertemplate="<b>Retention Time: %{x:.2f} min</b><br>Intensity: %{y:.0f}<br>Metabolite: %{customdata}<extra></extra>"
        ))
        if peaks:
            fig.add_trace(go.Scatter(
                x=[series.times[i] for i in peaks], y=[series.intensities[i] for i in peaks],
                mode='markers+text', name='Peaks',
                text=[series.labels[i] for i in peaks], textposition='top center', textfont=dict(size=9, color='#444'),
                marker=dict(color=_PEAK_COLOR, size=9, symbol='triangle-down'),
                hovertemplate="<b>Peak: %{text}</b><br>RT: %{x:.2f} min<br>Intensity: %{y:.0f}<extra></extra>"
            ))
        fig.update_layout(title_text=f"<b>{title}</b>", xaxis_title="Retention Time (min)", yaxis_title="Intensity",
                          yaxis=dict(rangemode='tozero'), hovermode='closest', height=420, **_PLOT_LAYOUT_CONFIG)
        return fig
    except Exception as e:
        logger.error(f"Error creating chromatogram chart: {e}", exc_info=True)
        return _create_placeholder_figure("Chromatogram Error", title, icon="⚠️")


def create_mass_spectra_chart(series: MassSpectraSeries) -> go.Figure:
    """Bar chart of the mean intensity of each metabolite."""
    title = "Mass Spectra"
    try:
        if not series.metabolites:
            return _create_placeholder_figure("Upload a GCMS file to view mass spectra.", title)
        fig = go.Figure(go.Bar(
            x=series.metabolites, y=series.intensities, name='Average Intensity',
            marker=dict(color=_PRIMARY_COLOR, line=dict(color='#2563EB', width=1)),
            hovertemplate="<b>%{x}</b><br>Intensity: %{y:.0f}<extra></extra>"
        ))
        fig.update_layout(title_text=f"<b>{title}</b>", xaxis_title="Metabolite", yaxis_title="Average Intensity",
                          xaxis=dict(tickangle=-45), yaxis=dict(rangemode='tozero'), height=420, **_PLOT_LAYOUT_CONFIG)
        return fig
    except Exception as e:
        logger.error(f"Error creating mass spectra chart: {e}", exc_info=True)
        return _create_placeholder_figure("Mass Spectra Error", title, icon="⚠️")

# ==============================================================================
# --- PATHWAY NETWORK ---
# ==============================================================================

def create_pathway_network_figure(pathway_graph: PathwayGraph, seed: int = 42) -> go.Figure:
    """Draws the pathway network with a spring layout, one trace per node type."""
    title = "Metabolic Pathway Network"
    try:
        graph = pathway_graph.graph
        if graph.number_of_nodes() == 0:
            return _create_placeholder_figure("No mapped metabolites yet. Process a file to build the network.", title)
        positions = nx.spring_layout(graph, seed=seed)

        edge_x: List[Optional[float]] = []
        edge_y: List[Optional[float]] = []
        label_x, label_y, label_text = [], [], []
        for source, target, data in graph.edges(data=True):
            x0, y0 = positions[source]
            x1, y1 = positions[target]
            edge_x += [x0, x1, None]
            edge_y += [y0, y1, None]
            label_x.append((x0 + x1) / 2)
            label_y.append((y0 + y1) / 2)
            label_text.append(data.get('label', ''))

        fig = go.Figure()
        fig.add_trace(go.Scatter(x=edge_x, y=edge_y, mode='lines', line=dict(color=_EDGE_COLOR, width=2), hoverinfo='none', showlegend=False))
        fig.add_trace(go.Scatter(x=label_x, y=label_y, mode='text', text=label_text, textfont=dict(size=9, color='#64748B'), hoverinfo='none', showlegend=False))

        for node_type, style in _NODE_STYLE.items():
            members = [(n, d) for n, d in graph.nodes(data=True) if d.get('type') == node_type]
            if not members:
                continue
            fig.add_trace(go.Scatter(
                x=[positions[n][0] for n, _ in members], y=[positions[n][1] for n, _ in members],
                mode='markers+text', name=node_type.capitalize(),
                text=[d.get('label', n) for n, d in members], textposition='bottom center', textfont=dict(size=11, color='#1F2937'),
                marker=dict(color=style['color'], symbol=style['symbol'], size=22, line=dict(color='white', width=1.5)),
                hovertemplate="<b>%{text}</b><extra>" + node_type + "</extra>"
            ))

        fig.update_layout(title_text=f"<b>{title}</b>", showlegend=True, height=600, hovermode='closest',
                          xaxis=dict(visible=False), yaxis=dict(visible=False), **_PLOT_LAYOUT_CONFIG)
        return fig
    except Exception as e:
        logger.error(f"Error creating pathway network figure: {e}", exc_info=True)
        return _create_placeholder_figure("Network Error", title, icon="⚠️")
