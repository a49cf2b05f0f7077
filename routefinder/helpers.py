from typing import Optional
from datetime import datetime, timezone

import structlog

from routefinder.algo_funcs import shortest_path
from routefinder.errors import BlankNameError, RouteFinderError
from routefinder.graph_store import GraphStore
from routefinder.models import LOCATIONS, ROUTES, STATE, Event, RouteResult

logger = structlog.get_logger(__name__)

# built once at import; a bad dataset stops the service from starting
GRAPH: GraphStore = GraphStore.from_dataset(LOCATIONS, ROUTES)

ARROW = " → "

# route lookup
def find_route(start: str, end: str, graph: Optional[GraphStore] = None) -> RouteResult:
    """
    Query interface for callers holding raw user input.

    - surrounding whitespace is ignored; blank names raise BlankNameError
    - unknown names raise UnknownNodeError
    - no connection between the two locations gives ``found == False``
    """
    graph = graph if graph is not None else GRAPH
    start, end = (start or "").strip(), (end or "").strip()
    if not start or not end:
        raise BlankNameError()

    result = shortest_path(graph, start, end)
    log_event("route_found" if result.found else "no_route", {
        "start": start,
        "end": end,
        "path": result.names,
        "distance": result.distance,
    })
    return result

# display text
def route_text(result: RouteResult) -> str:
    if not result.found:
        return f"No route found between {result.start} and {result.end}"
    return "Shortest Route: " + ARROW.join(result.names)

def error_text(err: RouteFinderError) -> str:
    return f"Error finding route: {err}"

# logger
def log_event(type_: str, detail: dict):
    STATE["events"].append(Event(time=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"), type=type_, detail=detail))
    logger.info(type_, **detail)
