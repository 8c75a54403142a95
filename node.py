# node.py

from PyQt5.QtCore import QPointF
from typing import Iterable, List, Tuple, Union

DEFAULT_RADIUS = 20.0


class Node:
    __slots__ = ("_id", "_position", "_radius", "_dragging", "_neighbors")

    def __init__(self, node_id: int, position: Union[QPointF, Tuple[float, float]],
                 radius: float = DEFAULT_RADIUS, neighbors: Iterable[int] = ()):
        self._id = int(node_id)
        if isinstance(position, QPointF):
            self._position = QPointF(position.x(), position.y())
        else:
            x, y = position  # type: ignore[assignment]
            self._position = QPointF(float(x), float(y))
        self._radius = float(radius)
        self._dragging = False
        self._neighbors: List[int] = []
        for n in neighbors:
            self.connect(n)

    # --- Getters and Setters ---
    def getId(self) -> int:
        return self._id

    def getPosition(self) -> QPointF:
        return self._position

    def setPosition(self, pos: Union[QPointF, Tuple[float, float]]) -> None:
        if isinstance(pos, QPointF):
            self._position = QPointF(pos.x(), pos.y())
        else:
            x, y = pos  # type: ignore[assignment]
            self._position = QPointF(float(x), float(y))

    def pos_tuple(self) -> Tuple[float, float]:
        return (self._position.x(), self._position.y())

    def getRadius(self) -> float:
        return self._radius

    def isDragging(self) -> bool:
        return self._dragging

    def setDragging(self, v: bool) -> None:
        self._dragging = bool(v)

    # --- Adjacency ---
    def getNeighbors(self) -> Tuple[int, ...]:
        return tuple(self._neighbors)

    def getDegree(self) -> int:
        return len(self._neighbors)

    def connect(self, other_id: int) -> None:
        other_id = int(other_id)
        if other_id == self._id:
            raise ValueError("Node cannot neighbor itself.")
        if other_id not in self._neighbors:
            self._neighbors.append(other_id)

    def clone(self) -> "Node":
        n = Node(self._id, self._position, self._radius, self._neighbors)
        n._dragging = self._dragging
        return n

    def __eq__(self, other) -> bool:
        return (isinstance(other, Node)
                and self._id == other._id
                and self.pos_tuple() == other.pos_tuple()
                and self._radius == other._radius
                and self._dragging == other._dragging
                and sorted(self._neighbors) == sorted(other._neighbors))

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"N({self._id} @ {self._position.x():.1f},{self._position.y():.1f})"
