"""Logical interaction graph and solver hardware topology."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

import networkx as nx

if TYPE_CHECKING:
    from .program import Program

Range = tuple[float, float]


class InteractionGraph:
    """Undirected weighted graph of a logical Ising problem.

    Vertices are ``0 .. num_vertices - 1`` and carry a ``bias`` attribute;
    edges carry a ``weight`` attribute. Vertices without any term stay in
    the graph as isolated nodes with zero bias.
    """

    def __init__(self, num_vertices: int) -> None:
        if num_vertices < 0:
            raise ValueError(f"num_vertices must be >= 0, got {num_vertices}")
        self._graph = nx.Graph()
        self._graph.add_nodes_from(range(num_vertices), bias=0.0)

    @classmethod
    def from_program(cls, program: "Program") -> "InteractionGraph":
        """Build the graph of ``program`` with ``max_bit_index + 1`` vertices."""
        graph = cls(program.max_bit_index + 1)
        for term in program.coupling_terms:
            if term.is_bias:
                graph.set_bias(term.qubit_a, term.weight)
            else:
                graph.set_coupling(term.qubit_a, term.qubit_b, term.weight)
        return graph

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_bias(self, vertex: int, value) -> None:
        self._check(vertex)
        self._graph.nodes[vertex]["bias"] = value

    def set_coupling(self, a: int, b: int, value) -> None:
        self._check(a)
        self._check(b)
        self._graph.add_edge(a, b, weight=value)

    def _check(self, vertex: int) -> None:
        if vertex not in self._graph:
            raise IndexError(
                f"vertex {vertex} out of range [0, {self.num_vertices})"
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def num_vertices(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def num_edges(self) -> int:
        return self._graph.number_of_edges()

    def bias(self, vertex: int):
        return self._graph.nodes[vertex]["bias"]

    def weight(self, a: int, b: int):
        return self._graph.edges[a, b]["weight"]

    def has_edge(self, a: int, b: int) -> bool:
        return self._graph.has_edge(a, b)

    def edges(self) -> Iterator[tuple[int, int]]:
        for a, b in self._graph.edges():
            yield (min(a, b), max(a, b))

    def biases(self) -> dict[int, float]:
        return {v: d["bias"] for v, d in self._graph.nodes(data=True)}

    def to_networkx(self) -> nx.Graph:
        """Return a copy of the underlying networkx graph."""
        return self._graph.copy()

    def __repr__(self) -> str:
        return (
            f"InteractionGraph(vertices={self.num_vertices}, "
            f"edges={self.num_edges})"
        )


@dataclass(frozen=True)
class HardwareTopology:
    """Fixed connectivity of a solver plus its allowed weight ranges."""

    num_qubits: int
    edges: tuple[tuple[int, int], ...] = field(default_factory=tuple)
    j_range: Optional[Range] = None
    h_range: Optional[Range] = None

    @classmethod
    def from_edges(
        cls,
        num_qubits: int,
        edges: Iterable[Iterable[int]],
        j_range: Optional[Range] = None,
        h_range: Optional[Range] = None,
    ) -> "HardwareTopology":
        pairs = tuple((int(a), int(b)) for a, b in edges)
        return cls(num_qubits=num_qubits, edges=pairs, j_range=j_range, h_range=h_range)

    def has_coupler(self, a: int, b: int) -> bool:
        return (a, b) in self._edge_set or (b, a) in self._edge_set

    @cached_property
    def _edge_set(self) -> frozenset[tuple[int, int]]:
        return frozenset(self.edges)

    def to_networkx(self) -> nx.Graph:
        """Hardware graph with one node per qubit."""
        graph = nx.Graph()
        graph.add_nodes_from(range(self.num_qubits))
        graph.add_edges_from(self.edges)
        return graph
