# game.py

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from edge import Edge
from generator import PuzzleGenerator
from intersections import count_crossings, crossing_edges_for_node, is_solved, update_intersections
from level import LevelParameters, Solution, calculate_level_parameters, clone_edges, clone_nodes
from node import Node
from store import LevelStore
from utils_geom import PointLike, clamp_point, point_in_circle, to_point

logger = logging.getLogger(__name__)


class Game:
    """
    One play session: the current level's nodes and edges, the drag in
    progress and the transient solution reveal. Level configs and progress
    live in the LevelStore handed in by the caller.
    """

    def __init__(self, canvas_size: PointLike, store: Optional[LevelStore] = None,
                 generator: Optional[PuzzleGenerator] = None):
        self.store = store if store is not None else LevelStore()
        self.generator = generator or PuzzleGenerator()
        self.canvas_size = to_point(canvas_size)

        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self.solution: Optional[Solution] = None
        self.parameters: LevelParameters = calculate_level_parameters(self.store.current_level)
        self.dragged_node_id: Optional[int] = None
        self.is_completed = False
        self._hidden_state: Optional[Tuple[List[Node], List[Edge]]] = None

    @property
    def current_level(self) -> int:
        return self.store.current_level

    # --------------------------
    # Level lifecycle
    # --------------------------
    def _begin_level(self) -> int:
        self._hidden_state = None
        self.dragged_node_id = None
        self.parameters = calculate_level_parameters(self.current_level)
        return self.current_level

    def initialize(self) -> None:
        """Resume saved progress for the current level, or build the level."""
        level = self._begin_level()

        progress = self.store.load_progress(level)
        stored = self.store.get_config(level)
        if progress is not None:
            self.nodes, self.edges = progress.nodes, progress.edges
            self.is_completed = progress.completed
            self.solution = stored.solution if stored is not None else None
            logger.info("Loaded saved game state - level %d, %d nodes", level, len(self.nodes))
        else:
            self._load_level(stored)
        update_intersections(self.nodes, self.edges)

    def _load_level(self, stored) -> None:
        level = self.current_level
        generated = self.generator.generate_level(level, self.canvas_size, stored)
        self.nodes, self.edges = generated.nodes, generated.edges
        self.solution = generated.solution
        self.parameters = generated.parameters
        self.is_completed = False
        if not generated.from_cache:
            self.store.put_config(generated.to_config(self.canvas_size))

    def next_level(self) -> None:
        self.store.current_level = self.current_level + 1
        self.store.clear_progress()
        self.initialize()

    def restart_level(self) -> None:
        self.store.clear_progress()
        level = self._begin_level()
        self._load_level(self.store.get_config(level))
        update_intersections(self.nodes, self.edges)

    def new_game(self) -> None:
        self.store.reset()
        self.initialize()

    def resize(self, canvas_size: PointLike) -> None:
        # Takes effect the next time a level is built
        self.canvas_size = to_point(canvas_size)

    # --------------------------
    # Drag input
    # --------------------------
    def find_node_at(self, position: PointLike) -> Optional[int]:
        p = to_point(position)
        for n in reversed(self.nodes):
            if point_in_circle(p, n.getPosition(), n.getRadius()):
                return n.getId()
        return None

    def _node(self, node_id: int) -> Optional[Node]:
        for n in self.nodes:
            if n.getId() == node_id:
                return n
        return None

    def start_drag(self, node_id: int) -> bool:
        if self.is_revealing():
            return False
        n = self._node(node_id)
        if n is None:
            return False
        n.setDragging(True)
        self.dragged_node_id = node_id
        return True

    def drag(self, node_id: int, position: PointLike) -> bool:
        if self.is_revealing():
            return False
        n = self._node(node_id)
        if n is None:
            return False
        n.setPosition(clamp_point(to_point(position), self.canvas_size, n.getRadius()))
        update_intersections(self.nodes, self.edges)
        return True

    def end_drag(self, node_id: int) -> bool:
        """Finish a drag; returns True when this move solved the level."""
        if self.is_revealing():
            # Released over the reveal: drop the drag on the hidden arrangement
            for hidden in self._hidden_state[0]:
                if hidden.getId() == node_id:
                    hidden.setDragging(False)
            if self.dragged_node_id == node_id:
                self.dragged_node_id = None
            return False
        n = self._node(node_id)
        if n is None:
            return False
        n.setDragging(False)
        self.dragged_node_id = None
        solved_now = self.check_for_completion()
        self.store.save_progress(self.current_level, self.nodes, self.edges, self.is_completed)
        return solved_now

    def check_for_completion(self) -> bool:
        if self.is_completed:
            return False
        if is_solved(self.edges):
            self.is_completed = True
            logger.info("Level %d solved", self.current_level)
            return True
        return False

    # --------------------------
    # Solution reveal
    # --------------------------
    def is_revealing(self) -> bool:
        return self._hidden_state is not None

    def show_solution(self) -> bool:
        if self.solution is None:
            logger.warning("No solution available for level %d", self.current_level)
            return False
        if self._hidden_state is None:
            self._hidden_state = (self.nodes, self.edges)
        self.nodes = clone_nodes(self.solution.nodes)
        self.edges = clone_edges(self.solution.edges)
        update_intersections(self.nodes, self.edges)
        return True

    def hide_solution(self) -> None:
        if self._hidden_state is None:
            return
        self.nodes, self.edges = self._hidden_state
        self._hidden_state = None
        update_intersections(self.nodes, self.edges)

    # --------------------------
    # Queries
    # --------------------------
    def crossings_for_node(self, node_id: int) -> List[Edge]:
        return crossing_edges_for_node(node_id, self.nodes, self.edges)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "level": self.current_level,
            "nodes": len(self.nodes),
            "edges": len(self.edges),
            "target_degree": self.parameters.target_degree,
            "crossings": count_crossings(self.nodes, self.edges),
            "crossing_edges": sum(1 for e in self.edges if e.isCrossing()),
            "solved": is_solved(self.edges),
            "completed": self.is_completed,
        }
