"""
GCMS Analyzer: browser-based visualization and metabolite mapping for
gas chromatography–mass spectrometry data.

Pipeline:
    - CSV ingestion and validation (`utils.file_handler`)
    - Derived chromatogram metrics (`analytics.chromatogram`)
    - Gene locus / pathway mapping (`lookups.metabolite_mapper`)
    - Rate-limited PubChem lookups (`lookups.pubchem_client`)
    - Pathway network construction (`analytics.pathway_graph`)
"""

__version__ = "0.1.0"

from .analytics.chromatogram import calculate_area, find_peaks, process_data  # noqa: F401
from .analytics.pathway_graph import PathwayGraph  # noqa: F401
from .lookups.metabolite_mapper import MetaboliteMapper  # noqa: F401
from .lookups.pubchem_client import PubChemClient  # noqa: F401
from .utils.file_handler import MeasurementRow, parse_csv  # noqa: F401
