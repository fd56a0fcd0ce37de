from math import inf
from typing import Callable, Dict, Iterable, Optional

from citypath.models import Algorithm, Graph, Node, SearchTrace

Heuristic = Callable[[Node, Node], float]

# -----------------------------
# Heuristics
# -----------------------------

def manhattan_heuristic(a: Node, b: Node) -> float:
    """Sum of absolute lat/lng deltas. Admissible for the city dataset only."""
    return abs(a.lat - b.lat) + abs(a.lng - b.lng)

def zero_heuristic(a: Node, b: Node) -> float:
    return 0.0

# -----------------------------
# Shared helpers
# -----------------------------

def _check_endpoints(graph: Graph, start: str, end: str) -> None:
    # node_by_id raises NodeNotFound for unknown ids
    graph.node_by_id(start)
    graph.node_by_id(end)

def _pick_min(candidates: Iterable[str], score: Dict[str, float]) -> str:
    # equal scores resolve to the smallest node id
    return min(candidates, key=lambda n: (score[n], n))

# -----------------------------
# Uniform-cost search (Dijkstra)
# -----------------------------

def uniform_cost_search(graph: Graph, start: str, end: str) -> SearchTrace:
    """
    Finalizes nodes cheapest-first until the goal itself is finalized or
    nothing reachable is left. The goal counts as a step.
    """
    _check_endpoints(graph, start, end)

    dist: Dict[str, float] = {n: (0.0 if n == start else inf) for n in graph.node_ids}
    previous: Dict[str, Optional[str]] = {n: None for n in graph.node_ids}
    frontier = set(graph.node_ids)
    finalized = set()
    visited_order = []
    steps = 0

    while frontier:
        current = _pick_min(frontier, dist)
        if dist[current] == inf:
            break  # everything left is unreachable

        frontier.remove(current)
        finalized.add(current)
        visited_order.append(current)
        steps += 1

        if current == end:
            break

        for nbr, w in graph.neighbors(current):
            if nbr in finalized:
                continue
            candidate = dist[current] + w
            if candidate < dist[nbr]:
                dist[nbr] = candidate
                previous[nbr] = current

    return SearchTrace(
        algorithm=Algorithm.DIJKSTRA,
        start=start,
        end=end,
        costs=dist,
        previous=previous,
        visited_order=visited_order,
        steps=steps,
    )

# -----------------------------
# Heuristic-guided search (A*)
# -----------------------------

def heuristic_search(
    graph: Graph,
    start: str,
    end: str,
    heuristic: Heuristic = manhattan_heuristic,
) -> SearchTrace:
    """
    A* over an open/closed set pair. The goal is checked when it is
    selected from the open set, before it is closed, so it never appears
    in visited_order and is not counted as a step.
    """
    _check_endpoints(graph, start, end)
    goal = graph.node_by_id(end)

    def h(node_id: str) -> float:
        return heuristic(graph.node_by_id(node_id), goal)

    g_score: Dict[str, float] = {n: inf for n in graph.node_ids}
    f_score: Dict[str, float] = {n: inf for n in graph.node_ids}
    previous: Dict[str, Optional[str]] = {n: None for n in graph.node_ids}
    g_score[start] = 0.0
    f_score[start] = h(start)

    open_set = {start}
    closed_set = set()
    visited_order = []
    steps = 0

    while open_set:
        current = _pick_min(open_set, f_score)
        if current == end:
            break

        open_set.remove(current)
        closed_set.add(current)
        visited_order.append(current)
        steps += 1

        for nbr, w in graph.neighbors(current):
            if nbr in closed_set:
                continue
            tentative = g_score[current] + w
            if nbr not in open_set:
                open_set.add(nbr)
            elif tentative >= g_score[nbr]:
                continue
            previous[nbr] = current
            g_score[nbr] = tentative
            f_score[nbr] = tentative + h(nbr)

    return SearchTrace(
        algorithm=Algorithm.ASTAR,
        start=start,
        end=end,
        costs=g_score,
        previous=previous,
        visited_order=visited_order,
        steps=steps,
    )
