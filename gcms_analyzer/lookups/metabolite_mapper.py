"""
Metabolite to gene locus and pathway mapping.

`MetaboliteMapper` is the caching front for a `LookupBackend`. The default
backend, `StaticReferenceBackend`, answers from the static tables in
`reference_data` after a simulated network delay; a remote database client
can be dropped in by implementing the same two coroutines.
"""

# --- Standard Library Imports ---
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple

# --- Local Application Imports ---
from ..config import NOT_FOUND
from .reference_data import GENE_LOCUS_MAP, PATHWAY_MAP

# --- Setup Logging ---
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathwayInfo:
    metabolite: str
    pathway: str
    reactions: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LookupResult:
    metabolite: str
    gene_locus_id: str

    @property
    def found(self) -> bool:
        return self.gene_locus_id != NOT_FOUND


class LookupBackend(Protocol):
    async def gene_locus(self, name: str) -> Optional[str]:
        ...

    async def pathway(self, name: str) -> Optional[PathwayInfo]:
        ...


class StaticReferenceBackend:
    """Answers lookups from the bundled reference tables after a fixed delay."""

    def __init__(self, latency: float = 0.5):
        self.latency = latency

    async def gene_locus(self, name: str) -> Optional[str]:
        await asyncio.sleep(self.latency)
        return GENE_LOCUS_MAP.get(name)

    async def pathway(self, name: str) -> Optional[PathwayInfo]:
        await asyncio.sleep(self.latency)
        entry = PATHWAY_MAP.get(name)
        if entry is None:
            return None
        return PathwayInfo(metabolite=name, pathway=entry["pathway"], reactions=tuple(entry["reactions"]))


class MetaboliteMapper:
    """
    Maps metabolite names to gene locus IDs and pathway information.

    Results are cached for the lifetime of the mapper, keyed by the exact
    metabolite name. Backend failures are logged and degrade to the
    not-found sentinel (gene locus) or `None` (pathway); they are not cached
    so a later call can succeed.
    """

    def __init__(self, backend: Optional[LookupBackend] = None):
        self.backend: LookupBackend = backend if backend is not None else StaticReferenceBackend()
        self._gene_cache: Dict[str, str] = {}
        self._pathway_cache: Dict[str, Optional[PathwayInfo]] = {}

    async def map_to_gene_locus_id(self, metabolite_name: str) -> str:
        if metabolite_name in self._gene_cache:
            return self._gene_cache[metabolite_name]
        try:
            gene_locus_id = await self.backend.gene_locus(metabolite_name)
        except Exception as e:
            logger.error(f"Error mapping metabolite '{metabolite_name}': {e}", exc_info=True)
            return NOT_FOUND
        result = gene_locus_id or NOT_FOUND
        self._gene_cache[metabolite_name] = result
        return result

    async def lookup(self, metabolite_name: str) -> LookupResult:
        return LookupResult(metabolite=metabolite_name, gene_locus_id=await self.map_to_gene_locus_id(metabolite_name))

    async def get_pathway_information(self, metabolite_name: str) -> Optional[PathwayInfo]:
        if metabolite_name in self._pathway_cache:
            return self._pathway_cache[metabolite_name]
        try:
            info = await self.backend.pathway(metabolite_name)
        except Exception as e:
            logger.error(f"Error getting pathway information for '{metabolite_name}': {e}", exc_info=True)
            return None
        self._pathway_cache[metabolite_name] = info
        return info

    def cached_names(self) -> List[str]:
        return list(self._gene_cache.keys())

    def clear_cache(self) -> None:
        self._gene_cache.clear()
        self._pathway_cache.clear()
        logger.info("Metabolite mapping cache cleared.")
