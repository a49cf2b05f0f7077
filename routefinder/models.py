from typing import Deque, List, Dict, Optional, Tuple
from collections import deque

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_COLOR = "blue"

# -----------------------------
# Domain Models (Pydantic)
# -----------------------------

class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    # map position and color are only used for drawing
    x: int = 0
    y: int = 0
    color: str = DEFAULT_COLOR

class Edge(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    edge_id: int  # declaration index within its graph
    from_: str = Field(alias="from")
    to: str
    weight: int

    def connects(self, a: str, b: str) -> bool:
        return (self.from_ == a and self.to == b) or (self.from_ == b and self.to == a)

class Graph(BaseModel):
    nodes: List[Node]
    edges: List[Edge]

class RouteResult(BaseModel):
    """
    Outcome of a single shortest-route query.

    ``nodes`` runs from start to end inclusive and ``edges`` holds the
    connections actually travelled (one fewer than the nodes). Both are empty
    when the end cannot be reached from the start.
    """
    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    nodes: List[Node] = []
    edges: List[Edge] = []
    distance: Optional[int] = None

    @computed_field
    @property
    def found(self) -> bool:
        return len(self.nodes) > 0

    @property
    def names(self) -> List[str]:
        return [n.name for n in self.nodes]

class Event(BaseModel):
    time: str
    type: str
    detail: dict

# -----------------------------
# API Schemas
# -----------------------------

class RouteResponse(BaseModel):
    route: RouteResult
    text: str  # human readable summary for the route display area

# -----------------------------
# In-memory State
# -----------------------------

# oldest events are dropped once the log is full
MAX_EVENTS = 1000

STATE: Dict[str, Deque[Event]] = {
    "events": deque(maxlen=MAX_EVENTS),
}

# -----------------------------
# Reference dataset
# -----------------------------

MAP_WIDTH = 600
MAP_HEIGHT = 440

# name, x, y, color
LOCATIONS: List[Tuple[str, int, int, str]] = [
    ("Dinalupihan", 330, 15, DEFAULT_COLOR),
    ("Orani", 460, 60, DEFAULT_COLOR),
    ("Samal", 465, 105, DEFAULT_COLOR),
    ("Abucay", 458, 160, DEFAULT_COLOR),
    ("Balanga", 460, 200, DEFAULT_COLOR),
    ("Pilar", 470, 225, DEFAULT_COLOR),
    ("Orion", 480, 265, DEFAULT_COLOR),
    ("Limay", 485, 320, DEFAULT_COLOR),
    ("Home", 490, 400, DEFAULT_COLOR),
    ("Mariveles", 350, 420, DEFAULT_COLOR),
    ("Bagac", 200, 280, DEFAULT_COLOR),
    ("Morong", 80, 185, DEFAULT_COLOR),
    ("Hermosa", 280, 40, DEFAULT_COLOR),
]

# from, to, distance
ROUTES: List[Tuple[str, str, int]] = [
    ("Dinalupihan", "Hermosa", 15),
    ("Dinalupihan", "Orani", 17),
    ("Dinalupihan", "Orion", 35),
    ("Orani", "Samal", 26),
    ("Samal", "Abucay", 5),
    ("Abucay", "Balanga", 5),
    ("Balanga", "Pilar", 2),
    ("Pilar", "Orion", 9),
    ("Orion", "Limay", 8),
    ("Limay", "Home", 14),
    ("Home", "Mariveles", 12),
    ("Mariveles", "Bagac", 44),
    ("Bagac", "Morong", 25),
    ("Bagac", "Pilar", 26),
    ("Morong", "Hermosa", 48),
]
