from typing import List, Optional
from datetime import datetime
from html import escape

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from routefinder.errors import BlankNameError, RouteFinderError, UnknownNodeError
from routefinder.helpers import GRAPH, error_text, find_route, route_text
from routefinder.models import MAP_HEIGHT, MAP_WIDTH, STATE, Event, Graph, RouteResponse, RouteResult

# -----------------------------
# App Setup
# -----------------------------

app = FastAPI(
    title="Bataan Route Planner API",
    version="0.1.0",
    description=(
        "Shortest routes between the cities and municipalities of Bataan.\n\n"
        "Endpoints provided: /findRoute, /getGraph, /events, /map.\n"
        "The map is fixed at startup; the event log is in-memory and resets on restart."
    ),
)

# CORS for local dev frontends (Vite/Next/CRA)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite default
        "http://localhost:3000",  # CRA/Next.js
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------
# Lifecycle
# -----------------------------

@app.on_event("startup")
async def reset_events() -> None:
    STATE["events"].clear()

# -----------------------------
# Endpoints
# -----------------------------

@app.get("/healthz")
async def healthz():
    return {"ok": True}

@app.get("/getGraph", response_model=Graph, tags=["graph"])
async def get_graph() -> Graph:
    return GRAPH.to_graph()

@app.get("/findRoute", response_model=RouteResponse, tags=["routes"])
async def get_route(start: str, end: str) -> RouteResponse:
    try:
        result = find_route(start, end)
    except BlankNameError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UnknownNodeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return RouteResponse(route=result, text=route_text(result))

@app.get("/events", response_model=List[Event], tags=["events"])
async def get_events(limit: Optional[int] = None, since: Optional[str] = None):
    """
    Retrieve route query events, newest first, optionally limited and
    filtered by a 'since' timestamp (ISO 8601).
    """
    events = list(STATE["events"])

    if since is not None:
        try:
            since_dt = datetime.fromisoformat(since.replace("Z", "+00:00"))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid ISO 8601 timestamp for 'since'")
        if since_dt.tzinfo is None:
            raise HTTPException(status_code=400, detail="'since' must include a timezone")
        events = [e for e in events if datetime.fromisoformat(e.time.replace("Z", "+00:00")) > since_dt]

    if limit is not None:
        events = events[-limit:] if limit > 0 else []

    return events[::-1]

# -----------------------------
# Map view
# -----------------------------

@app.get("/map", response_class=HTMLResponse)
async def route_map(start: Optional[str] = None, end: Optional[str] = None) -> str:
    """
    Draw every location and route, highlighting the shortest route between
    ``start`` and ``end`` when both are given.
    """
    route: Optional[RouteResult] = None
    message = ""
    if start is not None or end is not None:
        try:
            route = find_route(start, end)
            message = route_text(route)
        except BlankNameError as e:
            message = str(e)
        except RouteFinderError as e:
            message = error_text(e)

    highlighted_nodes = set(route.names) if route is not None else set()
    highlighted_edges = {e.edge_id for e in route.edges} if route is not None else set()
    nodes = {n.name: n for n in GRAPH.nodes}

    html = """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Bataan Route Planner</title>
        <style>
            .planner { font-family: Arial, sans-serif; margin: 20px; }
            .svg-map { border: 1px solid #ccc; background: #fff; }
            .edge { stroke: #ccc; stroke-width: 1; }
            .edge-hl { stroke: red; stroke-width: 3; }
            .edge-text { font-size: 10px; fill: #666; }
            .node-hl { fill: green; }
            .node-text { font-size: 12px; fill: black; }
            form label { margin-right: 8px; }
            .result { margin-top: 12px; padding: 8px; background: #f5f5f5; border-radius: 4px; }
        </style>
    </head>
    <body>
        <div class="planner">
            <h1>City and Municipalities Route Planner in Bataan</h1>
    """

    html += '<form method="get" action="/map">'
    html += f'<label>Start City / Municipality: <input name="start" value="{escape(start or "")}" /></label>'
    html += f'<label>End City / Municipality: <input name="end" value="{escape(end or "")}" /></label>'
    html += '<button type="submit">Find Route</button></form>'

    html += f'<svg width="{MAP_WIDTH}" height="{MAP_HEIGHT}" class="svg-map">'

    # Draw edges first (so they appear behind nodes), highlighted ones last
    ordered_edges = sorted(GRAPH.edges, key=lambda e: e.edge_id in highlighted_edges)
    for edge in ordered_edges:
        a, b = nodes[edge.from_], nodes[edge.to]
        css = "edge-hl" if edge.edge_id in highlighted_edges else "edge"
        html += f'<line x1="{a.x}" y1="{a.y}" x2="{b.x}" y2="{b.y}" class="{css}" />'
        mid_x = (a.x + b.x) / 2
        mid_y = (a.y + b.y) / 2
        html += f'<text x="{mid_x}" y="{mid_y - 5}" class="edge-text">{edge.weight}</text>'

    # Draw nodes
    for node in nodes.values():
        if node.name in highlighted_nodes:
            html += f'<circle cx="{node.x}" cy="{node.y}" r="15" class="node-hl" />'
        else:
            html += f'<circle cx="{node.x}" cy="{node.y}" r="10" fill="{escape(node.color)}" />'
        html += f'<text x="{node.x + 15}" y="{node.y}" class="node-text">{escape(node.name)}</text>'

    html += '</svg>'

    if message:
        html += f'<div class="result">{escape(message)}</div>'

    html += "</div></body></html>"

    return html

# -----------------------------
# Run (if executed directly)
# -----------------------------

# Use: uvicorn routefinder.main:app --reload // or python -m routefinder.main
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "routefinder.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
