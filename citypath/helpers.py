import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from citypath.algo_funcs import heuristic_search, uniform_cost_search
from citypath.config import settings
from citypath.models import (
    STATE,
    Algorithm,
    AlgorithmInfo,
    Event,
    Graph,
    NodeNotFound,
    RouteSummary,
    SearchResult,
    SearchTrace,
    Segment,
    Stop,
)

logger = logging.getLogger(__name__)

SEARCHES = {
    Algorithm.DIJKSTRA: uniform_cost_search,
    Algorithm.ASTAR: heuristic_search,
}

ALGORITHM_INFO: Dict[Algorithm, AlgorithmInfo] = {
    Algorithm.DIJKSTRA: AlgorithmInfo(
        name="Dijkstra's Algorithm",
        description="Guarantees shortest path, explores all directions equally",
        complexity="O((V + E) log V)",
        pros=["Always finds optimal solution", "No heuristic needed"],
        cons=["Can be slower than A*", "Explores unnecessary nodes"],
    ),
    Algorithm.ASTAR: AlgorithmInfo(
        name="A* Algorithm",
        description="Uses heuristic to guide search toward goal",
        complexity="O(b^d) where b is branching factor",
        pros=["Usually expands fewer nodes than Dijkstra", "Heuristic guides search"],
        cons=["Requires good heuristic", "Does not support negative weights"],
    ),
}

# -----------------------------
# Result reporting
# -----------------------------

def reconstruct_path(previous: Dict[str, Optional[str]], start: str, end: str) -> List[str]:
    """
    Follow predecessor links back from `end`.

    Anything shorter than two nodes means `end` was never reached and is
    reported as an empty path. A query with start == end is the exception
    and yields the single-node path [start].
    """
    if start == end:
        return [start]

    path = []
    current: Optional[str] = end
    while current is not None:
        path.insert(0, current)
        current = previous.get(current)
    return path if len(path) > 1 else []

def build_result(trace: SearchTrace) -> SearchResult:
    return SearchResult(
        path=reconstruct_path(trace.previous, trace.start, trace.end),
        distance=trace.costs[trace.end],
        steps=trace.steps,
        visited_order=list(trace.visited_order),
        algorithm=trace.algorithm,
    )

def compute_shortest_path(
    graph: Graph,
    start: str,
    end: str,
    algorithm: Union[Algorithm, str] = Algorithm.DIJKSTRA,
) -> SearchResult:
    """
    Run one search and package the outcome.

    Raises NodeNotFound when start or end is not in the graph and
    ValueError for an unknown algorithm name. An unreachable end is not an
    error: the result has an empty path and an infinite distance.
    """
    algorithm = Algorithm(algorithm)
    try:
        trace = SEARCHES[algorithm](graph, start, end)
    except NodeNotFound as exc:
        log_event("node_not_found", {"algorithm": algorithm.value, "node": exc.node_id})
        raise
    result = build_result(trace)
    if result.reachable:
        log_event("path_computed", {
            "algorithm": algorithm.value,
            "start": start,
            "end": end,
            "distance": result.distance,
            "steps": result.steps,
        })
    else:
        log_event("path_not_found", {"algorithm": algorithm.value, "start": start, "end": end})
    return result

def compare_algorithms(graph: Graph, start: str, end: str) -> Dict[Algorithm, SearchResult]:
    return {alg: compute_shortest_path(graph, start, end, alg) for alg in Algorithm}

def summarize_route(graph: Graph, result: SearchResult) -> RouteSummary:
    """
    Display details for a found path: named stops plus the km/minutes
    carried by each edge walked.
    """
    stops = []
    for node_id in result.path:
        node = graph.node_by_id(node_id)
        stops.append(Stop(id=node.id, name=node.name, lat=node.lat, lng=node.lng))

    segments = []
    for frm, to in zip(result.path[:-1], result.path[1:]):
        edge = graph.edge_between(frm, to)
        if edge is None:
            continue
        segments.append(Segment(**{
            "from": frm,
            "to": to,
            "weight": edge.weight,
            "distance": edge.distance,
            "time": edge.time,
        }))

    return RouteSummary(
        stops=stops,
        segments=segments,
        total_distance=sum(s.distance for s in segments),
        total_time=sum(s.time for s in segments),
    )

# -----------------------------
# Logging
# -----------------------------

class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)

def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a single JSON stdout handler to the package logger."""
    root = logging.getLogger("citypath")
    if not root.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        root.addHandler(h)
    root.setLevel(level or settings.LOG_LEVEL)
    return root

def log_event(type_: str, detail: dict):
    STATE["events"].append(Event(
        time=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        type=type_,
        detail=detail,
    ))
    if len(STATE["events"]) > settings.MAX_EVENTS:
        del STATE["events"][: len(STATE["events"]) - settings.MAX_EVENTS]
    logger.info(type_, extra={"extra": {"event": type_, **detail}})
