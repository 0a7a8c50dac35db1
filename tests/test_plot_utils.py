from gcms_analyzer.analytics.chromatogram import ChromatogramSeries, MassSpectraSeries
from gcms_analyzer.analytics.pathway_graph import PathwayGraph
from gcms_analyzer.lookups.metabolite_mapper import PathwayInfo
from gcms_analyzer.sections.results_table import style_lookup_cell
from gcms_analyzer.utils.plot_utils import (
    create_chromatogram_chart, create_mass_spectra_chart, create_pathway_network_figure
)


def _is_placeholder(fig):
    return len(fig.data) == 0 and len(fig.layout.annotations) == 1


def test_chromatogram_chart_marks_peaks():
    series = ChromatogramSeries([1.0, 2.0, 3.0], [10.0, 50.0, 5.0], ["A", "B", "C"])
    fig = create_chromatogram_chart(series, peaks=[1])
    assert [trace.name for trace in fig.data] == ["Intensity", "Peaks"]
    assert list(fig.data[1].x) == [2.0]
    assert list(fig.data[1].text) == ["B"]


def test_chromatogram_chart_without_peaks():
    fig = create_chromatogram_chart(ChromatogramSeries([1.0, 2.0], [3.0, 4.0], ["A", "B"]))
    assert len(fig.data) == 1


def test_empty_inputs_give_placeholders():
    assert _is_placeholder(create_chromatogram_chart(ChromatogramSeries()))
    assert _is_placeholder(create_mass_spectra_chart(MassSpectraSeries()))
    assert _is_placeholder(create_pathway_network_figure(PathwayGraph()))


def test_mass_spectra_chart():
    fig = create_mass_spectra_chart(MassSpectraSeries(["Glucose", "Lactate"], [65350.0, 28750.0]))
    assert list(fig.data[0].x) == ["Glucose", "Lactate"]


def test_network_figure_has_one_trace_per_node_type():
    graph = PathwayGraph()
    graph.add_metabolite_edge("Glucose", "GLK1")
    graph.add_pathway_connections(PathwayInfo("Glucose", "Glycolysis", ("Glucose → Glucose-6P",)))
    fig = create_pathway_network_figure(graph)
    names = [trace.name for trace in fig.data if trace.name]
    assert names == ["Metabolite", "Gene", "Pathway", "Reaction"]
    gene_trace = next(trace for trace in fig.data if trace.name == "Gene")
    assert list(gene_trace.text) == ["GLK1"]


def test_style_lookup_cell():
    assert "6c757d" in style_lookup_cell("Not found")
    assert "6c757d" in style_lookup_cell("Error")
    assert "bold" in style_lookup_cell("5793")
