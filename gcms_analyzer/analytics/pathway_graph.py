"""
Pathway network builder.

Accumulates metabolite, gene, pathway and reaction nodes and their labelled
edges in a `networkx.DiGraph`. Node and edge ids are derived from the names
involved, so adding the same relationship twice leaves the graph unchanged.
The graph only grows during a session; `clear()` empties it.
"""

# --- Standard Library Imports ---
import logging
from typing import Any, Dict, List, Optional, Tuple

# --- Third-party Imports ---
import networkx as nx
import pandas as pd

# --- Local Application Imports ---
from ..lookups.metabolite_mapper import PathwayInfo

# --- Setup Logging ---
logger = logging.getLogger(__name__)

NODE_TYPES: Tuple[str, ...] = ("metabolite", "gene", "pathway", "reaction")


def metabolite_node_id(name: str) -> str:
    return f"m_{name}"


def gene_node_id(gene_locus_id: str) -> str:
    return f"g_{gene_locus_id}"


def pathway_node_id(pathway: str) -> str:
    return f"p_{pathway}"


def reaction_node_id(metabolite: str, index: int) -> str:
    return f"r_{metabolite}_{index}"


class PathwayGraph:
    """Append-only metabolite/gene/pathway/reaction network."""

    def __init__(self):
        self.graph = nx.DiGraph()
        self._edge_ids: Dict[str, Tuple[str, str]] = {}

    @property
    def node_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return len(self._edge_ids)

    def has_node(self, node_id: str) -> bool:
        return self.graph.has_node(node_id)

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edge_ids

    def add_node(self, node_id: str, label: str, node_type: str) -> bool:
        """Adds a node unless its id already exists. Returns True if added."""
        if node_type not in NODE_TYPES:
            raise ValueError(f"Unknown node type '{node_type}'. Expected one of {NODE_TYPES}.")
        if self.graph.has_node(node_id):
            return False
        self.graph.add_node(node_id, label=label, type=node_type)
        return True

    def add_edge(self, edge_id: str, source: str, target: str, label: str) -> bool:
        """Adds a directed edge unless its id already exists. Returns True if added."""
        if edge_id in self._edge_ids:
            return False
        for endpoint in (source, target):
            if not self.graph.has_node(endpoint):
                raise KeyError(f"Edge '{edge_id}' references unknown node '{endpoint}'.")
        self.graph.add_edge(source, target, id=edge_id, label=label)
        self._edge_ids[edge_id] = (source, target)
        return True

    def add_metabolite_edge(self, metabolite: str, gene_locus_id: str) -> None:
        """Links a metabolite to the gene locus associated with it."""
        metabolite_id = metabolite_node_id(metabolite)
        gene_id = gene_node_id(gene_locus_id)
        self.add_node(metabolite_id, metabolite, "metabolite")
        self.add_node(gene_id, gene_locus_id, "gene")
        self.add_edge(f"e_{metabolite}_{gene_locus_id}", metabolite_id, gene_id, "associated with")

    def add_pathway_connections(self, pathway_info: Optional[PathwayInfo]) -> None:
        """Attaches a metabolite to its pathway and to one node per reaction step."""
        if pathway_info is None:
            return
        metabolite = pathway_info.metabolite
        metabolite_id = metabolite_node_id(metabolite)
        self.add_node(metabolite_id, metabolite, "metabolite")

        if pathway_info.pathway:
            pathway_id = pathway_node_id(pathway_info.pathway)
            self.add_node(pathway_id, pathway_info.pathway, "pathway")
            self.add_edge(f"e_{metabolite}_{pathway_info.pathway}", metabolite_id, pathway_id, "part of")

        for index, reaction in enumerate(pathway_info.reactions):
            reaction_id = reaction_node_id(metabolite, index)
            self.add_node(reaction_id, reaction, "reaction")
            self.add_edge(f"e_{metabolite}_reaction_{index}", metabolite_id, reaction_id, "participates in")

    def nodes(self) -> List[Dict[str, Any]]:
        return [{"id": node_id, **data} for node_id, data in self.graph.nodes(data=True)]

    def edges(self) -> List[Dict[str, Any]]:
        return [
            {"id": data["id"], "source": source, "target": target, "label": data["label"]}
            for source, target, data in self.graph.edges(data=True)
        ]

    def to_dataframes(self) -> Tuple[pd.DataFrame, pd.DataFrame]:
        nodes_df = pd.DataFrame(self.nodes(), columns=["id", "label", "type"])
        edges_df = pd.DataFrame(self.edges(), columns=["id", "source", "target", "label"])
        return nodes_df, edges_df

    def clear(self) -> None:
        self.graph.clear()
        self._edge_ids.clear()
        logger.info("Pathway graph cleared.")
