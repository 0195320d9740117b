"""Minor-graph embeddings and the pluggable algorithms that compute them.

An :class:`Embedding` maps every logical vertex of an
:class:`~arvak_anneal.graph.InteractionGraph` to a chain of hardware qubits.
The search itself is delegated to an :class:`EmbeddingAlgorithm` looked up by
name in :class:`EmbeddingRegistry`.

Adding new algorithms:
    1. Subclass :class:`EmbeddingAlgorithm` and implement ``name`` and ``embed``
    2. Call ``EmbeddingRegistry.register(YourAlgorithm())``
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from os import PathLike
from typing import IO, Iterable, Iterator, Optional, Union

from .exceptions import ConfigurationError
from .graph import HardwareTopology, InteractionGraph

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "minorminer"

Source = Union[str, PathLike, IO[str]]


class Embedding(Mapping[int, tuple[int, ...]]):
    """Ordered mapping of logical vertex to a chain of hardware qubits.

    Chains must be non-empty and pairwise disjoint.
    """

    def __init__(
        self,
        chains: Union[Mapping[int, Iterable[int]], Iterable[tuple[int, Iterable[int]]]] = (),
    ) -> None:
        items = chains.items() if isinstance(chains, Mapping) else chains
        self._chains: dict[int, tuple[int, ...]] = {}
        owner: dict[int, int] = {}
        for vertex, chain in items:
            vertex = int(vertex)
            chain = tuple(int(q) for q in chain)
            if not chain:
                raise ValueError(f"chain for vertex {vertex} is empty")
            if vertex in self._chains:
                raise ValueError(f"vertex {vertex} appears twice")
            for qubit in chain:
                if qubit in owner:
                    raise ValueError(
                        f"qubit {qubit} is shared by vertices {owner[qubit]} and {vertex}"
                    )
                owner[qubit] = vertex
            self._chains[vertex] = chain

    def __getitem__(self, vertex: int) -> tuple[int, ...]:
        return self._chains[vertex]

    def __iter__(self) -> Iterator[int]:
        return iter(self._chains)

    def __len__(self) -> int:
        return len(self._chains)

    @property
    def physical_qubits(self) -> list[int]:
        return sorted(q for chain in self._chains.values() for q in chain)

    @property
    def max_chain_length(self) -> int:
        return max((len(c) for c in self._chains.values()), default=0)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_string(self) -> str:
        return "".join(
            f"{vertex}: {' '.join(str(q) for q in chain)}\n"
            for vertex, chain in self._chains.items()
        )

    @classmethod
    def from_string(cls, text: str) -> "Embedding":
        records = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            vertex, sep, chain = line.partition(":")
            try:
                if not sep:
                    raise ValueError("missing ':'")
                records.append((int(vertex), [int(q) for q in chain.split()]))
            except ValueError as exc:
                raise ConfigurationError(
                    f"Malformed embedding record on line {lineno}: {line!r}"
                ) from exc
        try:
            return cls(records)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid embedding: {exc}") from exc

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Embedding):
            return list(self._chains.items()) == list(other._chains.items())
        return super().__eq__(other)

    def __repr__(self) -> str:
        return f"Embedding(vertices={len(self)}, max_chain={self.max_chain_length})"


def load_embedding(source: Source) -> Embedding:
    """Read an embedding previously written by :func:`persist_embedding`."""
    if hasattr(source, "read"):
        return Embedding.from_string(source.read())
    with open(source, encoding="utf-8") as fh:
        embedding = Embedding.from_string(fh.read())
    logger.info("Loaded embedding for %d vertices from %s", len(embedding), source)
    return embedding


def persist_embedding(embedding: Embedding, sink: Source) -> None:
    """Write ``embedding`` so that :func:`load_embedding` restores it verbatim."""
    if hasattr(sink, "write"):
        sink.write(embedding.to_string())
        return
    with open(sink, "w", encoding="utf-8") as fh:
        fh.write(embedding.to_string())
    logger.info("Persisted embedding for %d vertices to %s", len(embedding), sink)


class EmbeddingAlgorithm(ABC):
    """Base class for minor-embedding algorithms."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the algorithm (e.g. 'minorminer')."""

    @abstractmethod
    def embed(self, problem: InteractionGraph, hardware: HardwareTopology) -> Embedding:
        """Map every vertex of ``problem`` onto a chain of hardware qubits.

        Raises:
            ConfigurationError: If no embedding could be found.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} ({self.name})>"


class MinorminerEmbedding(EmbeddingAlgorithm):
    """Heuristic embedding through ``minorminer.find_embedding``."""

    def __init__(self, **options) -> None:
        self.options = options

    @property
    def name(self) -> str:
        return "minorminer"

    def embed(self, problem: InteractionGraph, hardware: HardwareTopology) -> Embedding:
        try:
            import minorminer
        except ImportError as exc:
            raise ConfigurationError(
                "The 'minorminer' embedding algorithm requires the minorminer "
                "package: pip install arvak-anneal[embedding]"
            ) from exc

        source = problem.to_networkx()
        target = hardware.to_networkx()
        # find_embedding only places vertices that have edges.
        found = minorminer.find_embedding(
            list(source.edges()), list(target.edges()), **self.options
        )
        if source.number_of_edges() and not found:
            raise ConfigurationError("minorminer failed to embed the problem")

        used = {q for chain in found.values() for q in chain}
        free = (q for q in range(hardware.num_qubits) if q not in used)
        chains = {}
        for vertex in sorted(source.nodes()):
            if vertex in found:
                chains[vertex] = found[vertex]
                continue
            try:
                chains[vertex] = [next(free)]
            except StopIteration:
                raise ConfigurationError(
                    f"Not enough hardware qubits to place vertex {vertex}"
                ) from None
        return Embedding(chains)


class IdentityEmbedding(EmbeddingAlgorithm):
    """Place logical vertex ``i`` on hardware qubit ``i``.

    Only valid when every logical edge already is a hardware coupler.
    """

    @property
    def name(self) -> str:
        return "identity"

    def embed(self, problem: InteractionGraph, hardware: HardwareTopology) -> Embedding:
        if problem.num_vertices > hardware.num_qubits:
            raise ConfigurationError(
                f"Problem needs {problem.num_vertices} qubits, "
                f"hardware has {hardware.num_qubits}"
            )
        for a, b in problem.edges():
            if not hardware.has_coupler(a, b):
                raise ConfigurationError(
                    f"Edge ({a}, {b}) is not a hardware coupler; "
                    "use a minor-embedding algorithm instead"
                )
        return Embedding({v: (v,) for v in range(problem.num_vertices)})


class EmbeddingRegistry:
    """Registry of embedding algorithms keyed by name."""

    _algorithms: dict[str, EmbeddingAlgorithm] = {}

    @classmethod
    def register(cls, algorithm: EmbeddingAlgorithm) -> None:
        cls._algorithms[algorithm.name] = algorithm

    @classmethod
    def get(cls, name: str) -> EmbeddingAlgorithm:
        try:
            return cls._algorithms[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown embedding algorithm {name!r}; "
                f"available: {', '.join(sorted(cls._algorithms))}"
            ) from None

    @classmethod
    def names(cls) -> list[str]:
        return sorted(cls._algorithms)

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove an algorithm (mainly for testing)."""
        cls._algorithms.pop(name, None)


EmbeddingRegistry.register(MinorminerEmbedding())
EmbeddingRegistry.register(IdentityEmbedding())


def embed(
    problem: InteractionGraph,
    hardware: HardwareTopology,
    algorithm: Optional[str] = None,
) -> Embedding:
    """Compute an embedding with the named algorithm (default: minorminer)."""
    name = algorithm or DEFAULT_ALGORITHM
    embedding = EmbeddingRegistry.get(name).embed(problem, hardware)
    logger.info(
        "Embedded %d logical vertices with %r (max chain length %d)",
        len(embedding), name, embedding.max_chain_length,
    )
    return embedding
