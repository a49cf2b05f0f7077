from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import structlog

from routefinder.errors import DuplicateNodeError, InvalidWeightError, UnknownNodeError
from routefinder.models import DEFAULT_COLOR, Edge, Graph, Node

logger = structlog.get_logger(__name__)


class GraphStore:
    """
    Named locations joined by undirected, weighted routes.

    The store is filled once at startup and only read afterwards, so
    concurrent queries need no locking. Nothing is ever removed.
    """

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []
        # node name -> [(neighbor name, edge)] in declaration order
        self._adjacency: Dict[str, List[Tuple[str, Edge]]] = {}

    @classmethod
    def from_dataset(cls, nodes: Iterable[Tuple[str, int, int, str]],
                     routes: Iterable[Tuple[str, str, int]]) -> "GraphStore":
        store = cls()
        for name, x, y, color in nodes:
            store.add_node(name, x, y, color)
        for from_name, to_name, distance in routes:
            store.add_route(from_name, to_name, distance)
        logger.info("Graph loaded", nodes=len(store), edges=len(store.edges))
        return store

    # -----------------
    # NODE OPERATIONS
    # -----------------

    def add_node(self, name: str, x: int = 0, y: int = 0, color: str = DEFAULT_COLOR) -> None:
        if name in self._nodes:
            logger.error("Duplicate location rejected", name=name)
            raise DuplicateNodeError(name)
        self._nodes[name] = Node(name=name, x=x, y=y, color=color)
        self._adjacency[name] = []

    def get_node(self, name: str) -> Optional[Node]:
        return self._nodes.get(name)

    def require_node(self, name: str) -> Node:
        node = self._nodes.get(name)
        if node is None:
            raise UnknownNodeError(name)
        return node

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def __contains__(self, name) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    # -----------------
    # EDGE OPERATIONS
    # -----------------

    def add_edge(self, from_name: str, to_name: str, weight: int) -> Edge:
        for name in (from_name, to_name):
            if name not in self._nodes:
                logger.error("Route endpoint is not a known location", name=name)
                raise UnknownNodeError(name)
        # bool is an int subclass but never a distance
        if isinstance(weight, bool) or not isinstance(weight, int) or weight < 0:
            logger.error("Route distance rejected", from_=from_name, to=to_name, weight=weight)
            raise InvalidWeightError(weight, from_name, to_name)

        edge = Edge(edge_id=len(self._edges), from_=from_name, to=to_name, weight=weight)
        self._edges.append(edge)
        self._adjacency[from_name].append((to_name, edge))
        if to_name != from_name:
            self._adjacency[to_name].append((from_name, edge))
        return edge

    # the setup interface names a connection between two locations a route
    add_route = add_edge

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def neighbors(self, node) -> Iterator[Tuple[Node, Edge]]:
        """
        Yield ``(adjacent node, edge)`` for every edge touching ``node``.

        ``node`` may be a Node or a name. Order follows edge declaration, and
        each call returns a fresh iterator.
        """
        name = node.name if isinstance(node, Node) else node
        if name not in self._adjacency:
            raise UnknownNodeError(name)
        return ((self._nodes[neighbor_name], edge) for neighbor_name, edge in self._adjacency[name])

    def edges_between(self, a: str, b: str) -> List[Edge]:
        return [edge for _, edge in self._adjacency.get(a, []) if edge.connects(a, b)]

    def to_graph(self) -> Graph:
        return Graph(nodes=self.nodes, edges=self.edges)
