"""
Rate-limited PubChem PUG-REST integration.

Every outbound request goes through a single `RateLimitedRequester`: one
FIFO queue, one request in flight, and a fixed pause between dispatches.
`PubChemClient` resolves a compound identifier (CID) by name, returns a
minimal result straight away and enriches it in the background with
properties and a SMILES string. Subscribers are told, by compound name,
when that enrichment lands.

Failures never propagate to callers: an unresolvable name becomes a cached
"Not found" result and a failed request becomes an "Error" result carrying
the reason. Neither is retried.
"""

# --- Standard Library Imports ---
import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional, Set, Tuple
from urllib.parse import quote

# --- Third-party Imports ---
import requests

# --- Local Application Imports ---
from ..config import (
    LOOKUP_ERROR, NOT_FOUND, PUBCHEM_BASE_URL, PUBCHEM_COMPOUND_URL,
    PUBCHEM_PROPERTIES, PUBCHEM_SMILES_PROPERTY
)
from ..utils.errors import CompoundLookupError

# --- Setup Logging ---
logger = logging.getLogger(__name__)

# --- Type Aliases for clarity ---
Transport = Callable[[str], Optional[Dict[str, Any]]]
CompoundSubscriber = Callable[[str, "CompoundInfo"], None]


@dataclass
class CompoundInfo:
    """PubChem data for one compound name. Enrichment fills the optional fields in place."""
    id: str
    name: str
    url: Optional[str] = None
    properties: Optional[Dict[str, Any]] = None
    smiles: Optional[str] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.id not in (NOT_FOUND, LOOKUP_ERROR)

    def summary(self) -> str:
        """Formats formula and molecular weight, e.g. 'C6H12O6 (MW: 180.16)'."""
        if not self.properties:
            return ""
        formula = self.properties.get("MolecularFormula")
        weight = self.properties.get("MolecularWeight")
        if not formula or weight is None:
            return ""
        try:
            return f"{formula} (MW: {float(weight):.2f})"
        except (TypeError, ValueError):
            return f"{formula} (MW: {weight})"


def make_requests_transport(timeout: float = 10.0, session: Optional[requests.Session] = None) -> Transport:
    """
    Builds the blocking HTTP transport used by the requester.

    The returned callable GETs a URL and returns its decoded JSON body,
    `None` for a 404 (PubChem's answer for unknown names), and raises
    `CompoundLookupError` for any other failure.
    """
    http = session or requests.Session()

    def _get_json(url: str) -> Optional[Dict[str, Any]]:
        try:
            response = http.get(url, timeout=timeout)
        except requests.exceptions.RequestException as e:
            raise CompoundLookupError(f"Request to PubChem failed: {e}") from e
        if response.status_code == 404:
            return None
        if not response.ok:
            raise CompoundLookupError(f"HTTP error! status: {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise CompoundLookupError(f"Could not decode JSON from PubChem response: {e}") from e

    return _get_json


class RateLimitedRequester:
    """Serializes requests through one FIFO queue with a fixed inter-dispatch delay."""

    def __init__(self, transport: Transport, delay: float = 0.3):
        self.transport = transport
        self.delay = delay
        self.requests_sent = 0
        self._queue: Deque[Tuple[str, asyncio.Future]] = deque()
        self._processing = False

    @property
    def pending(self) -> int:
        return len(self._queue)

    async def request(self, url: str) -> Optional[Dict[str, Any]]:
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._queue.append((url, future))
        if not self._processing:
            self._processing = True
            loop.create_task(self._process_queue())
        return await future

    async def _process_queue(self) -> None:
        try:
            while self._queue:
                url, future = self._queue.popleft()
                logger.debug(f"Dispatching PubChem request: {url}")
                try:
                    result = await asyncio.to_thread(self.transport, url)
                except Exception as e:
                    if not future.done():
                        future.set_exception(e)
                else:
                    if not future.done():
                        future.set_result(result)
                self.requests_sent += 1
                await asyncio.sleep(self.delay)
        finally:
            self._processing = False


class PubChemClient:
    """
    Caching, rate-limited PubChem lookups for one session.

    Args:
        requester: Shared request queue; a requests-backed one is built when omitted.
        base_url: PUG-REST root URL.
        batch_size: Names fetched concurrently per batch.
        batch_delay: Seconds to wait between batches.
    """

    def __init__(
        self,
        requester: Optional[RateLimitedRequester] = None,
        base_url: str = PUBCHEM_BASE_URL,
        batch_size: int = 5,
        batch_delay: float = 1.0,
    ):
        self.requester = requester if requester is not None else RateLimitedRequester(make_requests_transport())
        self.base_url = base_url.rstrip("/")
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._cache: Dict[str, CompoundInfo] = {}
        self._inflight: Dict[str, asyncio.Task] = {}
        self._enrichment_tasks: Set[asyncio.Task] = set()
        self._subscribers: List[CompoundSubscriber] = []

    # --- Subscriptions ---

    def subscribe(self, callback: CompoundSubscriber) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: CompoundSubscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, compound_name: str, info: CompoundInfo) -> None:
        for callback in list(self._subscribers):
            try:
                callback(compound_name, info)
            except Exception as e:
                logger.error(f"Compound update subscriber failed for '{compound_name}': {e}", exc_info=True)

    # --- Lookups ---

    def get_cached(self, compound_name: str) -> Optional[CompoundInfo]:
        return self._cache.get(compound_name)

    async def fetch_compound_info(self, compound_name: str) -> CompoundInfo:
        if compound_name in self._cache:
            return self._cache[compound_name]
        task = self._inflight.get(compound_name)
        if task is None:
            task = asyncio.ensure_future(self._resolve(compound_name))
            self._inflight[compound_name] = task
            task.add_done_callback(lambda _t, name=compound_name: self._inflight.pop(name, None))
        return await task

    async def _resolve(self, compound_name: str) -> CompoundInfo:
        try:
            cid = await self.search_compound(compound_name)
        except Exception as e:
            logger.error(f"Error fetching PubChem data for '{compound_name}': {e}")
            result = CompoundInfo(id=LOOKUP_ERROR, name=compound_name, error=str(e))
            self._cache[compound_name] = result
            return result

        if cid is None:
            logger.info(f"No PubChem CID found for '{compound_name}'.")
            result = CompoundInfo(id=NOT_FOUND, name=compound_name)
            self._cache[compound_name] = result
            return result

        result = CompoundInfo(id=cid, name=compound_name, url=f"{PUBCHEM_COMPOUND_URL}/{cid}")
        self._cache[compound_name] = result

        enrichment = asyncio.ensure_future(self._fetch_additional_data(cid, compound_name))
        self._enrichment_tasks.add(enrichment)
        enrichment.add_done_callback(self._enrichment_tasks.discard)
        return result

    async def search_compound(self, name: str) -> Optional[str]:
        """Resolves the first CID for a compound name, or None when PubChem knows no such name."""
        data = await self.requester.request(f"{self.base_url}/compound/name/{quote(name, safe='')}/cids/JSON")
        if not data:
            return None
        cids = (data.get("IdentifierList") or {}).get("CID") or []
        return str(cids[0]) if cids else None

    async def fetch_properties(self, cid: str) -> Dict[str, Any]:
        url = f"{self.base_url}/compound/cid/{cid}/property/{','.join(PUBCHEM_PROPERTIES)}/JSON"
        try:
            data = await self.requester.request(url)
        except Exception as e:
            logger.error(f"Error fetching properties for CID {cid}: {e}")
            return {}
        properties = ((data or {}).get("PropertyTable") or {}).get("Properties") or [{}]
        return dict(properties[0])

    async def fetch_smiles(self, cid: str) -> Optional[str]:
        url = f"{self.base_url}/compound/cid/{cid}/property/{PUBCHEM_SMILES_PROPERTY}/JSON"
        try:
            data = await self.requester.request(url)
        except Exception as e:
            logger.error(f"Error fetching SMILES for CID {cid}: {e}")
            return None
        properties = ((data or {}).get("PropertyTable") or {}).get("Properties") or [{}]
        # newer PUG-REST responses report isomeric SMILES under "SMILES"
        return properties[0].get(PUBCHEM_SMILES_PROPERTY) or properties[0].get("SMILES")

    async def _fetch_additional_data(self, cid: str, compound_name: str) -> None:
        properties, smiles = await asyncio.gather(self.fetch_properties(cid), self.fetch_smiles(cid))
        info = self._cache.get(compound_name)
        if info is None or info.id != cid:
            logger.debug(f"Dropping enrichment for '{compound_name}': cache entry no longer present.")
            return
        info.properties = properties
        info.smiles = smiles
        logger.debug(f"Enriched PubChem data for '{compound_name}' (CID {cid}).")
        self._notify(compound_name, info)

    async def wait_for_enrichment(self) -> None:
        """Waits until every scheduled background enrichment has finished."""
        while self._enrichment_tasks:
            results = await asyncio.gather(*list(self._enrichment_tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Background PubChem enrichment failed: {result}")

    async def batch_fetch_compound_info(
        self,
        compound_names: List[str],
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
    ) -> Dict[str, CompoundInfo]:
        """Fetches many compounds in fixed-size concurrent batches separated by a delay."""
        size = batch_size or self.batch_size
        delay = self.batch_delay if batch_delay is None else batch_delay
        results: Dict[str, CompoundInfo] = {}
        for start in range(0, len(compound_names), size):
            batch = compound_names[start:start + size]
            batch_results = await asyncio.gather(*(self.fetch_compound_info(name) for name in batch))
            results.update(zip(batch, batch_results))
            if start + size < len(compound_names):
                await asyncio.sleep(delay)
        return results

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("PubChem compound cache cleared.")
