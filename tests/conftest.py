import threading
import time
from typing import Dict, Iterable, List, Optional
from urllib.parse import unquote

import pytest

from gcms_analyzer.lookups.metabolite_mapper import MetaboliteMapper, StaticReferenceBackend
from gcms_analyzer.lookups.pubchem_client import PubChemClient, RateLimitedRequester
from gcms_analyzer.utils.errors import CompoundLookupError
from gcms_analyzer.utils.file_handler import MeasurementRow

SAMPLE_CSV = """Metabolite,RetentionTime,Intensity,Formula
Glucose,15.38,87600,C6H12O6
Lactate,4.05,28750,C3H6O3
Glucose,15.61,43100,C6H12O6
Unobtainium,9.00,1200,
"""

KNOWN_CIDS = {"Glucose": "5793", "Lactate": "612", "Citrate": "311", "Pyruvate": "1060"}


class FakePubChemTransport:
    """Answers PUG-REST URLs from a name -> CID table and records every call."""

    def __init__(self, cids: Optional[Dict[str, str]] = None, fail: Iterable[str] = (), latency: float = 0.0):
        self.cids = dict(KNOWN_CIDS if cids is None else cids)
        self.fail = set(fail)
        self.latency = latency
        self.calls: List[str] = []
        self.timestamps: List[float] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def search_calls(self) -> List[str]:
        return [url for url in self.calls if "/compound/name/" in url]

    def __call__(self, url: str):
        with self._lock:
            self.calls.append(url)
            self.timestamps.append(time.monotonic())
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.latency:
                time.sleep(self.latency)
            if "/compound/name/" in url:
                name = unquote(url.split("/compound/name/")[1].split("/cids")[0])
                if name in self.fail:
                    raise CompoundLookupError("HTTP error! status: 503")
                cid = self.cids.get(name)
                if cid is None:
                    return None
                return {"IdentifierList": {"CID": [int(cid)]}}
            cid = int(url.split("/compound/cid/")[1].split("/")[0])
            if "/property/IsomericSMILES/" in url:
                return {"PropertyTable": {"Properties": [{"CID": cid, "IsomericSMILES": "C([C@@H]1[C@H]([C@@H]([C@H](C(O1)O)O)O)O)O"}]}}
            return {"PropertyTable": {"Properties": [{
                "CID": cid, "MolecularFormula": "C6H12O6", "MolecularWeight": "180.16",
                "IUPACName": "(3R,4S,5S,6R)-6-(hydroxymethyl)oxane-2,3,4,5-tetrol", "ExactMass": "180.06338810",
            }]}}
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def rows() -> List[MeasurementRow]:
    return [
        MeasurementRow("Glucose", 15.38, 87600.0, {"Formula": "C6H12O6"}),
        MeasurementRow("Lactate", 4.05, 28750.0, {"Formula": "C3H6O3"}),
        MeasurementRow("Glucose", 15.61, 43100.0, {"Formula": "C6H12O6"}),
        MeasurementRow("Unobtainium", 9.0, 1200.0, {"Formula": ""}),
    ]


@pytest.fixture
def transport() -> FakePubChemTransport:
    return FakePubChemTransport()


@pytest.fixture
def pubchem(transport) -> PubChemClient:
    return PubChemClient(RateLimitedRequester(transport, delay=0.0), batch_delay=0.0)


@pytest.fixture
def mapper() -> MetaboliteMapper:
    return MetaboliteMapper(StaticReferenceBackend(latency=0.0))
