import asyncio
import itertools

import pytest
from fastapi import HTTPException

from routefinder.algo_funcs import shortest_path, route_edges
from routefinder.errors import BlankNameError, RouteConsistencyError, UnknownNodeError
from routefinder.graph_store import GraphStore
from routefinder.helpers import GRAPH, find_route, log_event, route_text
from routefinder.models import LOCATIONS, MAX_EVENTS, ROUTES, STATE, Event

# -----------------------------
# Test Fixtures (seed deterministic state)
# -----------------------------

@pytest.fixture(autouse=True)
def reset_state():
    """Reset the event log before each test."""
    STATE["events"].clear()
    yield
    STATE["events"].clear()

def all_pairs_distances(graph):
    """Floyd-Warshall over the store, used as the reference for optimality."""
    names = [n.name for n in graph.nodes]
    d = {(a, b): (0 if a == b else float("inf")) for a in names for b in names}
    for e in graph.edges:
        d[e.from_, e.to] = min(d[e.from_, e.to], e.weight)
        d[e.to, e.from_] = min(d[e.to, e.from_], e.weight)
    for k, i, j in itertools.product(names, names, names):
        if d[i, k] + d[k, j] < d[i, j]:
            d[i, j] = d[i, k] + d[k, j]
    return d

# -----------------------------
# Pathfinding Tests
# -----------------------------

def test_balanga_to_orion_goes_through_pilar():
    result = shortest_path(GRAPH, "Balanga", "Orion")
    assert result.names == ["Balanga", "Pilar", "Orion"]
    assert result.distance == 11
    assert [e.weight for e in result.edges] == [2, 9]

def test_morong_to_home_goes_through_mariveles():
    result = shortest_path(GRAPH, "Morong", "Home")
    assert result.names == ["Morong", "Bagac", "Mariveles", "Home"]
    assert result.distance == 81

def test_every_pair_is_valid_and_optimal():
    reference = all_pairs_distances(GRAPH)
    for start, end in itertools.product([n.name for n in GRAPH.nodes], repeat=2):
        result = shortest_path(GRAPH, start, end)
        assert result.found
        assert result.names[0] == start and result.names[-1] == end
        assert len(result.edges) == len(result.nodes) - 1
        # consecutive locations are joined by the listed edge
        for (a, b), edge in zip(zip(result.names, result.names[1:]), result.edges):
            assert edge.connects(a, b)
        assert result.distance == sum(e.weight for e in result.edges)
        assert result.distance == reference[start, end]

def test_same_start_and_end():
    result = shortest_path(GRAPH, "Limay", "Limay")
    assert result.names == ["Limay"]
    assert result.edges == []
    assert result.distance == 0

def test_unreachable_is_empty_result_not_error():
    g = GraphStore.from_dataset(LOCATIONS, ROUTES)
    g.add_node("Corregidor", 300, 430)
    result = shortest_path(g, "Balanga", "Corregidor")
    assert not result.found
    assert result.nodes == [] and result.edges == []
    assert result.distance is None

def test_shortest_path_unknown_node():
    with pytest.raises(UnknownNodeError):
        shortest_path(GRAPH, "Nonexistent", "Orion")
    with pytest.raises(UnknownNodeError):
        shortest_path(GRAPH, "Orion", "Nonexistent")

def test_idempotent():
    first = shortest_path(GRAPH, "Hermosa", "Mariveles")
    second = shortest_path(GRAPH, "Hermosa", "Mariveles")
    assert first == second

def test_symmetric_distance():
    for a, b in itertools.combinations([n.name for n in GRAPH.nodes], 2):
        there = shortest_path(GRAPH, a, b)
        back = shortest_path(GRAPH, b, a)
        assert there.distance == back.distance

def test_heavier_parallel_edge_changes_nothing():
    g = GraphStore.from_dataset(LOCATIONS, ROUTES)
    g.add_route("Balanga", "Pilar", 50)
    result = shortest_path(g, "Balanga", "Orion")
    assert result.names == ["Balanga", "Pilar", "Orion"]
    assert result.distance == 11
    assert result.edges[0].edge_id == 6

def test_lighter_parallel_edge_declared_later_wins():
    g = GraphStore()
    g.add_node("A")
    g.add_node("B")
    g.add_edge("A", "B", 10)
    g.add_edge("B", "A", 3)
    result = shortest_path(g, "A", "B")
    assert result.distance == 3
    assert [e.edge_id for e in result.edges] == [1]

def test_ties_follow_declaration_order():
    g = GraphStore()
    for name in ("A", "B", "C", "D"):
        g.add_node(name)
    g.add_edge("A", "B", 1)
    g.add_edge("A", "C", 1)
    g.add_edge("B", "D", 1)
    g.add_edge("C", "D", 1)
    assert shortest_path(g, "A", "D").names == ["A", "B", "D"]

def test_zero_weight_edges():
    g = GraphStore()
    for name in ("A", "B", "C"):
        g.add_node(name)
    g.add_edge("A", "B", 0)
    g.add_edge("B", "C", 0)
    g.add_edge("A", "C", 1)
    result = shortest_path(g, "A", "C")
    assert result.names == ["A", "B", "C"]
    assert result.distance == 0

def test_route_edges_rejects_disconnected_steps():
    with pytest.raises(RouteConsistencyError):
        route_edges(GRAPH, ["Balanga", "Home"])

# -----------------------------
# Query interface Tests
# -----------------------------

def test_find_route_trims_names():
    result = find_route("  Balanga ", "Orion\n")
    assert result.names == ["Balanga", "Pilar", "Orion"]

@pytest.mark.parametrize("start,end", [("", "Orion"), ("Balanga", "   "), (None, "Orion")])
def test_find_route_blank_names(start, end):
    with pytest.raises(BlankNameError):
        find_route(start, end)
    assert len(STATE["events"]) == 0

def test_find_route_logs_event():
    find_route("Balanga", "Orion")
    assert len(STATE["events"]) == 1
    event = STATE["events"][0]
    assert event.type == "route_found"
    assert event.detail["path"] == ["Balanga", "Pilar", "Orion"]
    assert event.detail["distance"] == 11
    assert event.time.endswith("Z")

def test_find_route_logs_no_route():
    g = GraphStore()
    g.add_node("A")
    g.add_node("B")
    result = find_route("A", "B", graph=g)
    assert not result.found
    assert STATE["events"][0].type == "no_route"

def test_route_text():
    assert route_text(find_route("Balanga", "Orion")) == "Shortest Route: Balanga → Pilar → Orion"
    g = GraphStore()
    g.add_node("A")
    g.add_node("B")
    assert route_text(find_route("A", "B", graph=g)) == "No route found between A and B"

def test_event_log_keeps_only_latest():
    for i in range(MAX_EVENTS + 5):
        log_event("route_found", {"seq": i})
    assert len(STATE["events"]) == MAX_EVENTS
    assert STATE["events"][0].detail["seq"] == 5
    assert STATE["events"][-1].detail["seq"] == MAX_EVENTS + 4

# -----------------------------
# Endpoint Tests
# -----------------------------

def test_get_route_endpoint():
    from routefinder.main import get_route

    response = asyncio.run(get_route("Morong", "Home"))
    assert response.route.names == ["Morong", "Bagac", "Mariveles", "Home"]
    assert response.route.found
    assert response.text == "Shortest Route: Morong → Bagac → Mariveles → Home"

def test_get_route_endpoint_errors():
    from routefinder.main import get_route

    with pytest.raises(HTTPException) as exc:
        asyncio.run(get_route("Manila", "Home"))
    assert exc.value.status_code == 404
    assert "Manila" in exc.value.detail

    with pytest.raises(HTTPException) as exc:
        asyncio.run(get_route(" ", "Home"))
    assert exc.value.status_code == 400

def test_get_graph_endpoint():
    from routefinder.main import get_graph

    graph = asyncio.run(get_graph())
    assert len(graph.nodes) == 13
    assert len(graph.edges) == 15

def test_events_endpoint_newest_first():
    from routefinder.main import get_events

    find_route("Balanga", "Orion")
    find_route("Morong", "Home")
    events = asyncio.run(get_events())
    assert isinstance(events, list)
    assert all(isinstance(e, Event) for e in events)
    assert [e.detail["start"] for e in events] == ["Morong", "Balanga"]
    limited = asyncio.run(get_events(limit=1))
    assert [e.detail["start"] for e in limited] == ["Morong"]
    assert asyncio.run(get_events(since="2999-01-01T00:00:00Z")) == []

def test_events_endpoint_bad_since():
    from routefinder.main import get_events

    with pytest.raises(HTTPException) as exc:
        asyncio.run(get_events(since="yesterday"))
    assert exc.value.status_code == 400

def test_map_highlights_route():
    from routefinder.main import route_map

    html = asyncio.run(route_map(start="Balanga", end="Orion"))
    assert "Shortest Route: Balanga → Pilar → Orion" in html
    assert html.count('class="edge-hl"') == 2
    assert html.count('class="node-hl"') == 3

def test_map_without_query_draws_everything():
    from routefinder.main import route_map

    html = asyncio.run(route_map())
    assert html.count("<line ") == 15
    assert 'class="edge-hl"' not in html
    assert len(STATE["events"]) == 0

def test_map_reports_unknown_location():
    from routefinder.main import route_map

    html = asyncio.run(route_map(start="Manila", end="Orion"))
    assert "Error finding route: Unknown location" in html
    assert 'class="edge-hl"' not in html
