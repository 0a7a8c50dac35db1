"""
Per-session ownership of the analyzer's stateful collaborators.

Streamlit re-runs the script on every interaction, so the metabolite mapper,
the PubChem client and the pathway graph are created once per browser
session and kept in `st.session_state`. Their lifetime is explicit: they
are built on first access and emptied by `reset()`. Any mutable mapping can
stand in for `st.session_state`, which keeps the manager usable outside
the Streamlit runtime.
"""

# --- Standard Library Imports ---
import logging
from typing import Any, Dict, MutableMapping, Optional

# --- Third-party Imports ---
import streamlit as st

# --- Local Application Imports ---
from ..analytics.pathway_graph import PathwayGraph
from ..config import AnalyzerConfig
from ..lookups.metabolite_mapper import LookupBackend, MetaboliteMapper, StaticReferenceBackend
from ..lookups.pubchem_client import PubChemClient, RateLimitedRequester, make_requests_transport

# --- Setup Logging ---
logger = logging.getLogger(__name__)

_STATE_KEY = "gcms_analyzer"


class SessionStateManager:
    """
    Builds and holds the mapper, compound client, graph and upload data for a session.

    Args:
        config: Runtime settings; defaults to `AnalyzerConfig()`.
        state: Backing mapping; defaults to `st.session_state`.
        backend: Lookup backend for the mapper; defaults to the static reference tables.
        requester: Request queue for PubChem; defaults to a requests-backed one.
    """

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        state: Optional[MutableMapping[str, Any]] = None,
        backend: Optional[LookupBackend] = None,
        requester: Optional[RateLimitedRequester] = None,
    ):
        self._state = state if state is not None else st.session_state
        if _STATE_KEY not in self._state:
            config = config or AnalyzerConfig()
            self._state[_STATE_KEY] = self._build_session(config, backend, requester)
            logger.info("Initialized new analyzer session state.")

    @staticmethod
    def _build_session(
        config: AnalyzerConfig,
        backend: Optional[LookupBackend],
        requester: Optional[RateLimitedRequester],
    ) -> Dict[str, Any]:
        if backend is None:
            backend = StaticReferenceBackend(latency=config.lookup_latency)
        if requester is None:
            requester = RateLimitedRequester(
                make_requests_transport(timeout=config.request_timeout),
                delay=config.request_delay,
            )
        return {
            "config": config,
            "mapper": MetaboliteMapper(backend),
            "pubchem": PubChemClient(
                requester,
                base_url=config.pubchem_base_url,
                batch_size=config.compound_batch_size,
                batch_delay=config.compound_batch_delay,
            ),
            "graph": PathwayGraph(),
            "upload_id": None,
            "data": {},
        }

    @property
    def _session(self) -> Dict[str, Any]:
        return self._state[_STATE_KEY]

    @property
    def config(self) -> AnalyzerConfig:
        return self._session["config"]

    @property
    def mapper(self) -> MetaboliteMapper:
        return self._session["mapper"]

    @property
    def pubchem(self) -> PubChemClient:
        return self._session["pubchem"]

    @property
    def graph(self) -> PathwayGraph:
        return self._session["graph"]

    @property
    def last_upload_id(self) -> Optional[str]:
        """File id of the last uploader file handed to the analysis. Survives `reset()`."""
        return self._session.get("upload_id")

    @last_upload_id.setter
    def last_upload_id(self, file_id: Optional[str]) -> None:
        self._session["upload_id"] = file_id

    def get_data(self, key: str, default: Any = None) -> Any:
        return self._session["data"].get(key, default)

    def set_data(self, key: str, value: Any) -> None:
        self._session["data"][key] = value

    def clear_data(self) -> None:
        self._session["data"].clear()

    def reset(self) -> None:
        """Empties caches, the pathway graph and all stored upload data."""
        self.mapper.clear_cache()
        self.pubchem.clear_cache()
        self.graph.clear()
        self.clear_data()
        logger.info("Analyzer session reset.")
