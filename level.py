# level.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

from PyQt5.QtCore import QPointF

from edge import Edge
from node import DEFAULT_RADIUS, Node
from utils_geom import PointLike, to_point

BASE_NODE_COUNT = 6
DEGREE_CYCLE = (3, 4, 5)


@dataclass(frozen=True)
class LevelParameters:
    level_number: int
    node_count: int
    target_degree: int


def calculate_level_parameters(level_number: int) -> LevelParameters:
    """
    Degree climbs 3 -> 5 at a fixed node count, then the node count grows by
    one and the degree resets to 3.
    """
    level = max(1, int(level_number))
    cycle, step = divmod(level - 1, len(DEGREE_CYCLE))
    return LevelParameters(level, BASE_NODE_COUNT + cycle, DEGREE_CYCLE[step])


# --------------------------
# Value copies
# --------------------------
def clone_nodes(nodes: Sequence[Node]) -> List[Node]:
    return [n.clone() for n in nodes]

def clone_edges(edges: Sequence[Edge]) -> List[Edge]:
    return [e.clone() for e in edges]

def topology(edges: Sequence[Edge]) -> FrozenSet[Tuple[int, int]]:
    return frozenset(e.key() for e in edges)


# --------------------------
# Serialized records
# --------------------------
def node_to_dict(n: Node) -> Dict[str, Any]:
    x, y = n.pos_tuple()
    return {
        "id": n.getId(),
        "position": {"x": x, "y": y},
        "radius": n.getRadius(),
        "isDragging": False,
        "connections": list(n.getNeighbors()),
    }

def node_from_dict(data: Dict[str, Any]) -> Node:
    try:
        pos = data["position"]
        return Node(int(data["id"]), (float(pos["x"]), float(pos["y"])),
                    float(data.get("radius", DEFAULT_RADIUS)),
                    data.get("connections", ()))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed node record: {data!r}") from e

def edge_to_dict(e: Edge) -> Dict[str, Any]:
    return {"from": e.getFrom(), "to": e.getTo(), "isIntersecting": e.isCrossing()}

def edge_from_dict(data: Dict[str, Any]) -> Edge:
    try:
        return Edge(int(data["from"]), int(data["to"]), bool(data.get("isIntersecting", False)))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed edge record: {data!r}") from e

def extent_key(extent: PointLike) -> Tuple[float, float]:
    p = to_point(extent)
    return (p.x(), p.y())


@dataclass
class Solution:
    nodes: List[Node]
    edges: List[Edge]

    def copy(self) -> Solution:
        return Solution(clone_nodes(self.nodes), clone_edges(self.edges))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "circles": [node_to_dict(n) for n in self.nodes],
            "lines": [edge_to_dict(e) for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Solution:
        return cls([node_from_dict(d) for d in data.get("circles", [])],
                   [edge_from_dict(d) for d in data.get("lines", [])])


@dataclass
class LevelConfig:
    level_number: int
    canvas_size: QPointF
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    solution: Optional[Solution] = None

    def matches(self, level_number: int, canvas_size: PointLike) -> bool:
        return (self.level_number == int(level_number)
                and extent_key(self.canvas_size) == extent_key(canvas_size))

    def is_empty(self) -> bool:
        return not self.nodes

    def copy(self) -> LevelConfig:
        return LevelConfig(
            self.level_number,
            to_point(self.canvas_size),
            clone_nodes(self.nodes),
            clone_edges(self.edges),
            self.solution.copy() if self.solution is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        w, h = extent_key(self.canvas_size)
        return {
            "levelNumber": self.level_number,
            "canvasSize": {"x": w, "y": h},
            "circles": [node_to_dict(n) for n in self.nodes],
            "lines": [edge_to_dict(e) for e in self.edges],
            "solution": self.solution.to_dict() if self.solution is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LevelConfig:
        try:
            size = data["canvasSize"]
            sol = data.get("solution")
            return cls(
                int(data["levelNumber"]),
                QPointF(float(size["x"]), float(size["y"])),
                [node_from_dict(d) for d in data.get("circles", [])],
                [edge_from_dict(d) for d in data.get("lines", [])],
                Solution.from_dict(sol) if sol else None,
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed level config: {e}") from e
