"""
Configuration for the GCMS Analyzer.

Module-level constants hold the fixed domain values (required CSV columns,
accepted upload types, PubChem endpoints). `AnalyzerConfig` groups the
tunable runtime values so the session state manager can inject them into
the lookup services instead of relying on hidden globals.
"""

# --- Standard Library Imports ---
from dataclasses import dataclass
from typing import Dict, Tuple

# ==============================================================================
# --- CSV INGESTION ---
# ==============================================================================

REQUIRED_COLUMNS: Tuple[str, ...] = ("Metabolite", "RetentionTime", "Intensity")

VALID_MIME_TYPES: Tuple[str, ...] = ("text/csv", "application/vnd.ms-excel")

SAMPLE_DATA_FILE = "sample_data.csv"

# ==============================================================================
# --- LOOKUPS ---
# ==============================================================================

NOT_FOUND = "Not found"
LOOKUP_ERROR = "Error"

PUBCHEM_BASE_URL = "https://pubchem.ncbi.nlm.nih.gov/rest/pug"
PUBCHEM_COMPOUND_URL = "https://pubchem.ncbi.nlm.nih.gov/compound"
PUBCHEM_PROPERTIES: Tuple[str, ...] = ("MolecularFormula", "MolecularWeight", "IUPACName", "ExactMass")
PUBCHEM_SMILES_PROPERTY = "IsomericSMILES"

# ==============================================================================
# --- RESULTS TABLE ---
# ==============================================================================

RESULT_COLUMNS: Dict[str, str] = {
    "name": "Metabolite",
    "retention_time": "Retention Time (min)",
    "intensity": "Intensity",
    "gene_locus_id": "Gene Locus ID",
    "pubchem_id": "PubChem CID",
    "properties": "Properties",
}


@dataclass(frozen=True)
class AnalyzerConfig:
    """Tunable runtime settings for one analysis session."""
    peak_threshold: float = 0.1
    lookup_latency: float = 0.5
    request_delay: float = 0.3
    request_timeout: float = 10.0
    compound_batch_size: int = 5
    compound_batch_delay: float = 1.0
    metabolite_batch_size: int = 5
    metabolite_batch_delay: float = 1.0
    pubchem_base_url: str = PUBCHEM_BASE_URL
