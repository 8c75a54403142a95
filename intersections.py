# intersections.py

from typing import Dict, List, Sequence

from PyQt5.QtCore import QPointF

from edge import Edge
from node import Node
from utils_geom import segments_intersect


class NodeLookupError(LookupError):
    """An edge references a node id that is not in the node list."""


def shares_endpoint(a: Edge, b: Edge) -> bool:
    return (a.getFrom() == b.getFrom() or a.getFrom() == b.getTo() or
            a.getTo() == b.getFrom() or a.getTo() == b.getTo())


def _position_index(nodes: Sequence[Node]) -> Dict[int, QPointF]:
    return {n.getId(): n.getPosition() for n in nodes}


def _segment(edge: Edge, positions: Dict[int, QPointF]):
    try:
        return positions[edge.getFrom()], positions[edge.getTo()]
    except KeyError as e:
        raise NodeLookupError(
            f"Edge {edge.getFrom()}-{edge.getTo()} references unknown node {e.args[0]}"
        ) from None


def edges_cross(a: Edge, b: Edge, positions: Dict[int, QPointF]) -> bool:
    if shares_endpoint(a, b):
        return False
    p1, p2 = _segment(a, positions)
    p3, p4 = _segment(b, positions)
    return segments_intersect(p1, p2, p3, p4)


def compute_crossing_flags(nodes: Sequence[Node], edges: Sequence[Edge]) -> List[bool]:
    """
    Return a list parallel to edges: True where the edge crosses at least one
    non-adjacent edge. Inputs are not modified.
    """
    positions = _position_index(nodes)
    segs = [_segment(e, positions) for e in edges]
    flags = [False] * len(edges)
    for i in range(len(edges)):
        a1, a2 = segs[i]
        for j in range(i + 1, len(edges)):
            if shares_endpoint(edges[i], edges[j]):
                continue
            b1, b2 = segs[j]
            if segments_intersect(a1, a2, b1, b2):
                flags[i] = True
                flags[j] = True
    return flags


def update_intersections(nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
    """Recompute every edge's crossing flag in place from current positions."""
    flags = compute_crossing_flags(nodes, edges)
    for e, f in zip(edges, flags):
        e.setCrossing(f)


def count_crossings(nodes: Sequence[Node], edges: Sequence[Edge]) -> int:
    positions = _position_index(nodes)
    hits = 0
    for i in range(len(edges)):
        for j in range(i + 1, len(edges)):
            if edges_cross(edges[i], edges[j], positions):
                hits += 1
    return hits


def crossing_edges_for_node(node_id: int, nodes: Sequence[Node], edges: Sequence[Edge]) -> List[Edge]:
    """Edges crossing any edge incident to node_id, each listed once."""
    positions = _position_index(nodes)
    if node_id not in positions:
        return []
    incident = [e for e in edges if e.touches(node_id)]
    result: List[Edge] = []
    for other in edges:
        if other.touches(node_id):
            continue
        if any(edges_cross(e, other, positions) for e in incident):
            result.append(other)
    return result


def is_solved(edges: Sequence[Edge]) -> bool:
    return not any(e.isCrossing() for e in edges)
