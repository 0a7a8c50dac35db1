import asyncio

from gcms_analyzer.analytics.metabolite_pipeline import (
    MetaboliteResult, process_metabolites, results_to_dataframe, run_analysis
)
from gcms_analyzer.analytics.pathway_graph import PathwayGraph
from gcms_analyzer.config import NOT_FOUND, RESULT_COLUMNS, AnalyzerConfig
from gcms_analyzer.lookups.metabolite_mapper import MetaboliteMapper, StaticReferenceBackend
from gcms_analyzer.utils.file_handler import MeasurementRow

FAST = AnalyzerConfig(metabolite_batch_delay=0.0)


class RecordingBackend(StaticReferenceBackend):
    def __init__(self):
        super().__init__(latency=0.01)
        self.events = []

    async def gene_locus(self, name):
        self.events.append(("start", name))
        result = await super().gene_locus(name)
        self.events.append(("end", name))
        return result


class BrokenGraph(PathwayGraph):
    def add_metabolite_edge(self, metabolite, gene_locus_id):
        if metabolite == "Lactate":
            raise RuntimeError("graph write failed")
        super().add_metabolite_edge(metabolite, gene_locus_id)


def test_run_analysis_enriches_every_metabolite(rows, mapper, pubchem):
    graph = PathwayGraph()
    statuses = []
    analysis = asyncio.run(run_analysis(
        rows, mapper, pubchem, graph, config=FAST,
        on_status=lambda status, message, progress: statuses.append((status, progress)),
    ))

    by_name = {r.name: r for r in analysis.results}
    assert [r.name for r in analysis.results] == ["Glucose", "Lactate", "Unobtainium"]
    assert by_name["Glucose"].gene_locus_id == "GLK1"
    assert by_name["Glucose"].pubchem_id == "5793"
    assert by_name["Glucose"].properties == "C6H12O6 (MW: 180.16)"
    assert by_name["Unobtainium"].gene_locus_id == NOT_FOUND
    assert by_name["Unobtainium"].pubchem_id == NOT_FOUND
    assert by_name["Unobtainium"].properties == ""

    for node_id in ("m_Glucose", "g_GLK1", "p_Glycolysis", "r_Glucose_0", "m_Lactate", "p_Fermentation"):
        assert graph.has_node(node_id)
    assert not graph.has_node("m_Unobtainium")
    assert graph.node_count == 9

    assert statuses == [("processing", 33), ("processing", 66), ("complete", 100)]
    assert analysis.processed.chromatogram.labels[0] == "Lactate"


def test_run_analysis_unsubscribes_when_done(rows, mapper, pubchem):
    asyncio.run(run_analysis(rows, mapper, pubchem, PathwayGraph(), config=FAST))
    assert pubchem._subscribers == []


def test_failure_is_isolated_to_one_row(rows, mapper, pubchem):
    graph = BrokenGraph()
    analysis = asyncio.run(run_analysis(rows, mapper, pubchem, graph, config=FAST))
    by_name = {r.name: r for r in analysis.results}
    assert "graph write failed" in by_name["Lactate"].error
    assert by_name["Glucose"].error is None
    assert by_name["Glucose"].properties == "C6H12O6 (MW: 180.16)"
    assert graph.has_node("g_GLK1")
    assert not graph.has_node("g_LDH1")


def test_next_batch_waits_for_current_batch(pubchem):
    backend = RecordingBackend()
    metabolites = [MeasurementRow(name, float(i + 1), 100.0) for i, name in enumerate(["Glucose", "Lactate", "Citrate"])]
    seen = []

    results = asyncio.run(process_metabolites(
        metabolites, MetaboliteMapper(backend), pubchem, PathwayGraph(),
        batch_size=2, batch_delay=0.0, on_row=lambda r: seen.append(r.name),
    ))

    events = backend.events
    third_start = events.index(("start", "Citrate"))
    assert events.index(("end", "Glucose")) < third_start
    assert events.index(("end", "Lactate")) < third_start
    assert events.index(("start", "Lactate")) < events.index(("end", "Glucose"))
    assert [r.name for r in results] == ["Glucose", "Lactate", "Citrate"]
    assert seen == ["Glucose", "Lactate", "Citrate"]


def test_results_to_dataframe():
    found = MetaboliteResult("Glucose", 15.384, 87600.4, gene_locus_id="GLK1", pubchem_id="5793",
                             pubchem_url="https://pubchem.ncbi.nlm.nih.gov/compound/5793",
                             properties="C6H12O6 (MW: 180.16)")
    missing = MetaboliteResult("Unobtainium", 9.0, 1200.0)
    df = results_to_dataframe([found, missing])
    assert list(df.columns) == list(RESULT_COLUMNS.values())
    assert df.loc[0, RESULT_COLUMNS["retention_time"]] == 15.38
    assert df.loc[0, RESULT_COLUMNS["pubchem_id"]].endswith("/5793")
    assert df.loc[1, RESULT_COLUMNS["pubchem_id"]] == NOT_FOUND
    assert results_to_dataframe([]).empty
