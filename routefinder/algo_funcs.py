from typing import List, Dict, Tuple
import heapq
import itertools

import structlog

from routefinder.errors import RouteConsistencyError
from routefinder.graph_store import GraphStore
from routefinder.models import Edge, RouteResult

logger = structlog.get_logger(__name__)

INF = float("inf")

# -----------------------------
# Pathfinding
# -----------------------------

def shortest_path(graph: GraphStore, start: str, goal: str) -> RouteResult:
    """
    Dijkstra's algorithm from ``start`` that stops as soon as ``goal`` is settled.

    Raises UnknownNodeError if either name is not in the graph. An unreachable
    goal gives a result with no nodes rather than an error.
    """
    start_node = graph.require_node(start)
    goal_node = graph.require_node(goal)

    dist: Dict[str, float] = {n.name: INF for n in graph.nodes}
    dist[start_node.name] = 0
    prev: Dict[str, str] = {}

    # (distance, sequence, name); the sequence breaks ties in insertion order
    counter = itertools.count()
    heap: List[Tuple[float, int, str]] = [(dist[n.name], next(counter), n.name) for n in graph.nodes]
    heapq.heapify(heap)

    while heap:
        d, _, name = heapq.heappop(heap)
        # skip outdated entries left behind by a decrease
        if d > dist[name]:
            continue
        if name == goal_node.name:
            break
        if d == INF:
            break  # everything left is unreachable from start

        for neighbor, edge in graph.neighbors(name):
            candidate = d + edge.weight
            if candidate < dist[neighbor.name]:
                dist[neighbor.name] = candidate
                prev[neighbor.name] = name
                heapq.heappush(heap, (candidate, next(counter), neighbor.name))

    names = _reconstruct(prev, start_node.name, goal_node.name)
    if not names:
        logger.debug("No route", start=start, goal=goal)
        return RouteResult(start=start, end=goal)

    edges = route_edges(graph, names)
    return RouteResult(
        start=start,
        end=goal,
        nodes=[graph.require_node(n) for n in names],
        edges=edges,
        distance=path_distance(edges),
    )


def _reconstruct(prev: Dict[str, str], start: str, goal: str) -> List[str]:
    if goal != start and goal not in prev:
        return []
    path = [goal]
    while path[-1] != start:
        path.append(prev[path[-1]])
    path.reverse()
    return path


def route_edges(graph: GraphStore, names: List[str]) -> List[Edge]:
    """
    Pick the edge travelled between each consecutive pair of ``names``.

    With parallel edges the lightest one wins, earliest declared among equals,
    rather than simply the first declared, so the edges always add up to the
    distance Dijkstra found.
    """
    edges = []
    for a, b in zip(names, names[1:]):
        candidates = graph.edges_between(a, b)
        if not candidates:
            logger.error("Path step has no connecting route", from_=a, to=b)
            raise RouteConsistencyError(a, b)
        edges.append(min(candidates, key=lambda e: (e.weight, e.edge_id)))
    return edges


def path_distance(edges: List[Edge]) -> int:
    return sum(e.weight for e in edges)
