"""
Batched metabolite enrichment.

For every canonical metabolite of an upload this module looks up the gene
locus and the PubChem record, and grows the pathway network when a gene is
found. Metabolites are processed in fixed-size batches: lookups inside a
batch run concurrently, and the next batch only starts once the current one
has settled and a fixed delay has passed. A failure while enriching one
metabolite is logged and degrades only that row.
"""

# --- Standard Library Imports ---
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

# --- Third-party Imports ---
import pandas as pd

# --- Local Application Imports ---
from ..config import NOT_FOUND, RESULT_COLUMNS, AnalyzerConfig
from ..lookups.metabolite_mapper import MetaboliteMapper
from ..lookups.pubchem_client import CompoundInfo, PubChemClient
from ..utils.file_handler import MeasurementRow, StatusCallback
from .chromatogram import ProcessedData, process_data
from .pathway_graph import PathwayGraph

# --- Setup Logging ---
logger = logging.getLogger(__name__)

RowCallback = Callable[["MetaboliteResult"], None]


@dataclass
class MetaboliteResult:
    """One row of the results table."""
    name: str
    retention_time: float
    intensity: float
    additional_data: Dict[str, Any] = field(default_factory=dict)
    gene_locus_id: str = NOT_FOUND
    pubchem_id: str = NOT_FOUND
    pubchem_url: Optional[str] = None
    properties: str = ""
    error: Optional[str] = None

    @classmethod
    def from_row(cls, row: MeasurementRow) -> "MetaboliteResult":
        return cls(name=row.name, retention_time=row.retention_time, intensity=row.intensity,
                   additional_data=dict(row.additional_data))

    def apply_compound_info(self, info: CompoundInfo) -> None:
        self.pubchem_id = info.id
        self.pubchem_url = info.url
        self.properties = info.summary()


@dataclass
class AnalysisResult:
    processed: ProcessedData
    results: List[MetaboliteResult]


def results_to_dataframe(results: Sequence[MetaboliteResult]) -> pd.DataFrame:
    """Builds the display table, keyed by the human-readable column names."""
    records = [
        {
            RESULT_COLUMNS["name"]: r.name,
            RESULT_COLUMNS["retention_time"]: round(r.retention_time, 2),
            RESULT_COLUMNS["intensity"]: round(r.intensity),
            RESULT_COLUMNS["gene_locus_id"]: r.gene_locus_id,
            RESULT_COLUMNS["pubchem_id"]: r.pubchem_url or r.pubchem_id,
            RESULT_COLUMNS["properties"]: r.properties,
        }
        for r in results
    ]
    return pd.DataFrame(records, columns=list(RESULT_COLUMNS.values()))


async def process_metabolite(
    metabolite: MeasurementRow,
    mapper: MetaboliteMapper,
    pubchem: PubChemClient,
    graph: PathwayGraph,
) -> MetaboliteResult:
    result = MetaboliteResult.from_row(metabolite)
    try:
        result.gene_locus_id = await mapper.map_to_gene_locus_id(metabolite.name)
        result.apply_compound_info(await pubchem.fetch_compound_info(metabolite.name))
        if result.gene_locus_id != NOT_FOUND:
            graph.add_metabolite_edge(metabolite.name, result.gene_locus_id)
            graph.add_pathway_connections(await mapper.get_pathway_information(metabolite.name))
    except Exception as e:
        logger.error(f"Error processing metabolite {metabolite.name}: {e}", exc_info=True)
        result.error = str(e)
    return result


async def process_metabolites(
    metabolites: Sequence[MeasurementRow],
    mapper: MetaboliteMapper,
    pubchem: PubChemClient,
    graph: PathwayGraph,
    batch_size: int = 5,
    batch_delay: float = 1.0,
    on_row: Optional[RowCallback] = None,
) -> List[MetaboliteResult]:
    """Enriches metabolites batch by batch; results keep the input order."""
    results: List[MetaboliteResult] = []
    for start in range(0, len(metabolites), batch_size):
        batch = metabolites[start:start + batch_size]
        batch_results = await asyncio.gather(*(process_metabolite(m, mapper, pubchem, graph) for m in batch))
        for result in batch_results:
            if on_row is not None:
                on_row(result)
        results.extend(batch_results)
        logger.debug(f"Processed metabolite batch {start // batch_size + 1} ({len(batch)} items).")
        if start + batch_size < len(metabolites):
            await asyncio.sleep(batch_delay)
    return results


async def run_analysis(
    rows: Sequence[MeasurementRow],
    mapper: MetaboliteMapper,
    pubchem: PubChemClient,
    graph: PathwayGraph,
    config: Optional[AnalyzerConfig] = None,
    on_status: Optional[StatusCallback] = None,
    on_row: Optional[RowCallback] = None,
) -> AnalysisResult:
    """
    Runs the complete post-upload flow for a set of validated rows.

    Derived series are computed first, then every canonical metabolite is
    enriched, and finally the call waits for PubChem background enrichment
    so the returned rows carry the compound properties that arrived.
    """
    config = config or AnalyzerConfig()
    if on_status is not None:
        on_status("processing", "Generating chromatogram...", 33)
    processed = process_data(rows, config.peak_threshold)

    by_name: Dict[str, MetaboliteResult] = {}

    def _on_compound_update(compound_name: str, info: CompoundInfo) -> None:
        if compound_name in by_name:
            by_name[compound_name].apply_compound_info(info)

    def _on_row(result: MetaboliteResult) -> None:
        by_name[result.name] = result
        if on_row is not None:
            on_row(result)

    if on_status is not None:
        on_status("processing", "Mapping metabolites...", 66)
    pubchem.subscribe(_on_compound_update)
    try:
        results = await process_metabolites(
            processed.metabolites, mapper, pubchem, graph,
            batch_size=config.metabolite_batch_size,
            batch_delay=config.metabolite_batch_delay,
            on_row=_on_row,
        )
        await pubchem.wait_for_enrichment()
    finally:
        pubchem.unsubscribe(_on_compound_update)

    # enrichment may have landed before a row was registered
    for result in results:
        info = pubchem.get_cached(result.name)
        if info is not None and result.error is None:
            result.apply_compound_info(info)

    if on_status is not None:
        on_status("complete", "File processed successfully!", 100)
    logger.info(f"Analysis complete: {len(results)} metabolites, graph has {graph.node_count} nodes / {graph.edge_count} edges.")
    return AnalysisResult(processed=processed, results=results)
