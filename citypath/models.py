import math
from typing import List, Dict, Optional, Tuple
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field, model_validator

# -----------------------------
# Errors
# -----------------------------

class NodeNotFound(ValueError):
    """Raised when a lookup references an id that is not in the graph."""

    def __init__(self, node_id: str):
        super().__init__(f"Node '{node_id}' not found in graph")
        self.node_id = node_id

# -----------------------------
# Domain Models (Pydantic)
# -----------------------------

class NodeType(str, Enum):
    LANDMARK = "landmark"
    TRANSPORT = "transport"
    EDUCATION = "education"
    COMMERCIAL = "commercial"
    MEDICAL = "medical"
    RECREATION = "recreation"

class Algorithm(str, Enum):
    DIJKSTRA = "dijkstra"
    ASTAR = "astar"

class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    lat: float
    lng: float
    type: NodeType

class Edge(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    weight: float = Field(default=1.0, ge=0)
    distance: float = Field(default=0.0, ge=0)  # km, display only
    time: float = Field(default=0.0, ge=0)  # minutes, display only

class Graph(BaseModel):
    """
    Immutable node/edge set. Edges are undirected: each one is reachable
    from either endpoint with the same weight.
    """
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]

    _index: Dict[str, Node] = PrivateAttr(default_factory=dict)
    _adjacency: Dict[str, List[Tuple[str, float]]] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _check_references(self) -> "Graph":
        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise ValueError(f"duplicate node id '{node.id}'")
            seen.add(node.id)
        for e in self.edges:
            for endpoint in (e.from_, e.to):
                if endpoint not in seen:
                    raise ValueError(f"edge {e.from_}-{e.to} references unknown node '{endpoint}'")
        return self

    def model_post_init(self, context) -> None:
        self._index = {n.id: n for n in self.nodes}
        self._adjacency = {n.id: [] for n in self.nodes}
        for e in self.edges:
            self._adjacency.setdefault(e.from_, []).append((e.to, e.weight))
            self._adjacency.setdefault(e.to, []).append((e.from_, e.weight))  # bidirectional

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._index

    @property
    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def node_by_id(self, node_id: str) -> Node:
        try:
            return self._index[node_id]
        except KeyError:
            raise NodeNotFound(node_id) from None

    def neighbors(self, node_id: str) -> List[Tuple[str, float]]:
        if node_id not in self._index:
            raise NodeNotFound(node_id)
        return list(self._adjacency[node_id])

    def edge_between(self, a: str, b: str) -> Optional[Edge]:
        """Cheapest edge joining the unordered pair, or None."""
        candidates = [e for e in self.edges if {e.from_, e.to} == {a, b}]
        if not candidates:
            return None
        return min(candidates, key=lambda e: e.weight)

# -----------------------------
# Search Records
# -----------------------------

class SearchTrace(BaseModel):
    """Raw bookkeeping left behind by one search run."""
    algorithm: Algorithm
    start: str
    end: str
    costs: Dict[str, float]
    previous: Dict[str, Optional[str]]
    visited_order: List[str] = Field(default_factory=list)
    steps: int = 0

class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: List[str]
    distance: float  # math.inf when the end is unreachable
    steps: int
    visited_order: List[str]
    algorithm: Algorithm

    @computed_field
    @property
    def reachable(self) -> bool:
        return math.isfinite(self.distance)

class Stop(BaseModel):
    id: str
    name: str
    lat: float
    lng: float

class Segment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    weight: float
    distance: float
    time: float

class RouteSummary(BaseModel):
    stops: List[Stop]
    segments: List[Segment]
    total_distance: float
    total_time: float

class AlgorithmInfo(BaseModel):
    name: str
    description: str
    complexity: str
    pros: List[str]
    cons: List[str]

class Event(BaseModel):
    time: str
    type: str
    detail: dict

# -----------------------------
# API Schemas
# -----------------------------

class PathRequest(BaseModel):
    start: str
    end: str
    algorithm: Optional[Algorithm] = None

class RouteResponse(BaseModel):
    result: SearchResult
    summary: RouteSummary

class NodesResponse(BaseModel):
    nodes: List[Node]

class CompareResponse(BaseModel):
    results: Dict[Algorithm, SearchResult]

# -----------------------------
# In-memory State
# -----------------------------

STATE: Dict[str, List] = {
    "events": [],
}

CITY_GRAPH: Graph = Graph(
    nodes=[
        Node(id="A", name="Downtown Plaza", lat=40.7589, lng=-73.9851, type=NodeType.LANDMARK),
        Node(id="B", name="Central Station", lat=40.7505, lng=-73.9934, type=NodeType.TRANSPORT),
        Node(id="C", name="University Campus", lat=40.7282, lng=-73.9942, type=NodeType.EDUCATION),
        Node(id="D", name="Shopping District", lat=40.7614, lng=-73.9776, type=NodeType.COMMERCIAL),
        Node(id="E", name="Hospital", lat=40.7505, lng=-73.9712, type=NodeType.MEDICAL),
        Node(id="F", name="Park Entrance", lat=40.7829, lng=-73.9654, type=NodeType.RECREATION),
        Node(id="G", name="Airport Terminal", lat=40.7282, lng=-73.9776, type=NodeType.TRANSPORT),
        Node(id="H", name="Business Center", lat=40.7505, lng=-73.9851, type=NodeType.COMMERCIAL),
    ],
    edges=[
        Edge(**{"from": "A", "to": "B", "weight": 1.2, "distance": 1.2, "time": 3}),
        Edge(**{"from": "A", "to": "D", "weight": 0.8, "distance": 0.8, "time": 2}),
        Edge(**{"from": "A", "to": "H", "weight": 0.5, "distance": 0.5, "time": 1}),
        Edge(**{"from": "B", "to": "C", "weight": 2.1, "distance": 2.1, "time": 5}),
        Edge(**{"from": "B", "to": "E", "weight": 1.5, "distance": 1.5, "time": 4}),
        Edge(**{"from": "C", "to": "G", "weight": 1.8, "distance": 1.8, "time": 4}),
        Edge(**{"from": "D", "to": "F", "weight": 2.3, "distance": 2.3, "time": 6}),
        Edge(**{"from": "D", "to": "H", "weight": 1.1, "distance": 1.1, "time": 3}),
        Edge(**{"from": "E", "to": "H", "weight": 1.3, "distance": 1.3, "time": 3}),
        Edge(**{"from": "F", "to": "H", "weight": 2.0, "distance": 2.0, "time": 5}),
        Edge(**{"from": "H", "to": "G", "weight": 1.7, "distance": 1.7, "time": 4}),
    ],
)
