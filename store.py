# store.py

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from edge import Edge
from level import (
    LevelConfig, clone_edges, clone_nodes,
    edge_from_dict, edge_to_dict, node_from_dict, node_to_dict,
)
from node import Node

logger = logging.getLogger(__name__)


@dataclass
class Progress:
    """A player's in-progress arrangement of one level."""
    level_number: int
    nodes: List[Node]
    edges: List[Edge]
    completed: bool = False
    saved_at: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "circles": [node_to_dict(n) for n in self.nodes],
            "lines": [edge_to_dict(e) for e in self.edges],
            "currentLevel": self.level_number,
            "isCompleted": self.completed,
            "lastSaved": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Progress:
        try:
            return cls(
                int(data["currentLevel"]),
                [node_from_dict(d) for d in data.get("circles") or []],
                [edge_from_dict(d) for d in data.get("lines") or []],
                bool(data.get("isCompleted", False)),
                float(data.get("lastSaved", 0.0)),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed progress record: {e}") from e


class LevelStore:
    """
    Caller-held state: one generated configuration per level, the current
    level number and the saved progress of the level being played. Everything
    goes in and out as value copies.
    """

    def __init__(self):
        self.current_level = 1
        self._configs: Dict[int, LevelConfig] = {}
        self._progress: Optional[Progress] = None

    # --------------------------
    # Level configurations
    # --------------------------
    def get_config(self, level_number: int) -> Optional[LevelConfig]:
        cfg = self._configs.get(int(level_number))
        return cfg.copy() if cfg is not None else None

    def put_config(self, config: LevelConfig) -> None:
        self._configs[config.level_number] = config.copy()

    def levels(self) -> List[int]:
        return sorted(self._configs)

    def clear_configs(self) -> None:
        self._configs.clear()

    # --------------------------
    # Progress
    # --------------------------
    def save_progress(self, level_number: int, nodes: Sequence[Node], edges: Sequence[Edge],
                      completed: bool = False) -> None:
        self._progress = Progress(int(level_number), clone_nodes(nodes), clone_edges(edges),
                                  bool(completed), time.time())
        for n in self._progress.nodes:
            n.setDragging(False)
        logger.debug("Saved progress for level %d (%d nodes)", level_number, len(nodes))

    def load_progress(self, level_number: int) -> Optional[Progress]:
        p = self._progress
        if p is None or p.level_number != int(level_number) or not p.nodes:
            return None
        return Progress(p.level_number, clone_nodes(p.nodes), clone_edges(p.edges),
                        p.completed, p.saved_at)

    def clear_progress(self) -> None:
        self._progress = None

    def reset(self) -> None:
        self.current_level = 1
        self.clear_configs()
        self.clear_progress()

    # --------------------------
    # Serialization
    # --------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentLevel": self.current_level,
            "levelConfigs": [self._configs[k].to_dict() for k in sorted(self._configs)],
            "gameState": self._progress.to_dict() if self._progress is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LevelStore:
        store = cls()
        store.current_level = max(1, int(data.get("currentLevel", 1)))
        for c in data.get("levelConfigs") or []:
            cfg = LevelConfig.from_dict(c)
            store._configs[cfg.level_number] = cfg
        state = data.get("gameState")
        if state:
            store._progress = Progress.from_dict(state)
        return store

    def save_to_json(self, filepath) -> bool:
        try:
            with open(filepath, 'w') as f:
                json.dump(self.to_dict(), f, indent=4)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving game to %s", filepath)
            return False

    def load_from_json(self, filepath) -> bool:
        try:
            with open(filepath, 'r') as f:
                loaded = LevelStore.from_dict(json.load(f))
        except (OSError, ValueError, TypeError, KeyError, AttributeError):
            logger.exception("Error loading game from %s", filepath)
            return False
        self.current_level = loaded.current_level
        self._configs = loaded._configs
        self._progress = loaded._progress
        return True
