# edge.py
from __future__ import annotations
from typing import Tuple


class Edge:
    __slots__ = ("_from", "_to", "_crossing")

    def __init__(self, from_id: int, to_id: int, crossing: bool = False):
        # Prevent loops
        if int(from_id) == int(to_id):
            raise ValueError("Edge endpoints must be distinct (no loops).")
        self._from = int(from_id)
        self._to = int(to_id)
        self._crossing = bool(crossing)

    # --- Getters and Setters ---
    def getFrom(self) -> int: return self._from
    def getTo(self) -> int: return self._to
    def isCrossing(self) -> bool: return self._crossing
    def setCrossing(self, v: bool): self._crossing = bool(v)

    def endpoints(self) -> Tuple[int, int]:
        return (self._from, self._to)

    # Unordered identity of the connection
    def key(self) -> Tuple[int, int]:
        return (min(self._from, self._to), max(self._from, self._to))

    def touches(self, node_id: int) -> bool:
        return node_id == self._from or node_id == self._to

    def clone(self) -> Edge:
        return Edge(self._from, self._to, self._crossing)

    def __eq__(self, other) -> bool:
        return (isinstance(other, Edge)
                and self.endpoints() == other.endpoints()
                and self._crossing == other._crossing)

    __hash__ = None  # mutable

    def __repr__(self):
        mark = " x" if self._crossing else ""
        return f"E({self._from} - {self._to}{mark})"
