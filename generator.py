# generator.py

from __future__ import annotations

import logging
import math
import random
import secrets
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from PyQt5.QtCore import QPointF

from edge import Edge
from intersections import compute_crossing_flags, edges_cross, update_intersections
from level import (
    LevelConfig, LevelParameters, Solution,
    calculate_level_parameters, clone_edges, clone_nodes,
)
from node import Node
from utils_geom import (
    PointLike, min_distance_to, point_on_circle, point_segment_distance,
    random_position_distributed, to_point, v_dist,
)

logger = logging.getLogger(__name__)

PI = math.pi


@dataclass
class GeneratorConfig:
    node_radius: float = 20.0
    margin: float = 50.0
    min_distance: float = 80.0      # preferred separation when scrambling
    min_degree: int = 3             # playable floor, independent of the level target

    # Ring layout
    max_ring_size: int = 8
    inner_ring_ratio: float = 1.0   # radius step between rings, as a fraction of R / rings
    ring_jitter: float = 0.08
    edge_clearance: float = 2.0     # chords may not graze an unrelated node closer than this

    # Bounded loops (quality / runtime trade-offs)
    max_assignment_iterations: int = 100
    max_placement_attempts: int = 100
    max_generation_attempts: int = 12
    max_scramble_rounds: int = 10
    scaffold_fallback: bool = True


@dataclass
class GenerationReport:
    parameters: LevelParameters
    attempts: int = 0
    used_scaffold: bool = False
    under_minimum: List[int] = field(default_factory=list)
    under_target: List[int] = field(default_factory=list)
    solution_crossing_edges: int = 0
    scramble_rounds: int = 0

    @property
    def ok(self) -> bool:
        return not self.under_minimum and self.solution_crossing_edges == 0


@dataclass
class GeneratedLevel:
    nodes: List[Node]
    edges: List[Edge]
    solution: Optional[Solution]
    parameters: LevelParameters
    report: Optional[GenerationReport] = None
    from_cache: bool = False

    def to_config(self, canvas_extent: PointLike) -> LevelConfig:
        return LevelConfig(
            self.parameters.level_number,
            to_point(canvas_extent),
            clone_nodes(self.nodes),
            clone_edges(self.edges),
            self.solution.copy() if self.solution is not None else None,
        )


def degree_shortfall(nodes: Sequence[Node], degree: int) -> List[int]:
    return [n.getId() for n in nodes if n.getDegree() < degree]


class PuzzleGenerator:
    """
    Builds a crossing-free arrangement for a level, keeps it as the solution
    and scrambles a copy of it into the starting position. Holds no level
    state between calls.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or GeneratorConfig()
        self._rng = rng if rng is not None else random.Random(secrets.randbits(64))

    # --------------------------
    # Public entry point
    # --------------------------
    def generate_level(self, level_number: int, canvas_extent: PointLike,
                       stored_config: Optional[LevelConfig] = None) -> GeneratedLevel:
        params = calculate_level_parameters(level_number)
        extent = to_point(canvas_extent)

        if (stored_config is not None and not stored_config.is_empty()
                and stored_config.matches(params.level_number, extent)):
            logger.debug("Reusing stored configuration for level %d", params.level_number)
            cached = stored_config.copy()
            return GeneratedLevel(cached.nodes, cached.edges, cached.solution, params, from_cache=True)

        nodes, edges, report = self._build_solved_layout(params, extent)

        solution = Solution(clone_nodes(nodes), clone_edges(edges))
        update_intersections(solution.nodes, solution.edges)
        report.solution_crossing_edges = sum(1 for e in solution.edges if e.isCrossing())
        if report.solution_crossing_edges:
            logger.error("Level %d: solution has %d crossing edges",
                         params.level_number, report.solution_crossing_edges)

        report.scramble_rounds = self._scramble(nodes, edges, extent)
        update_intersections(nodes, edges)

        if not report.ok:
            logger.warning("Level %d: nodes %s stay below degree %d, %d crossing solution edge(s)",
                           params.level_number, report.under_minimum, self.config.min_degree,
                           report.solution_crossing_edges)
        if report.under_target:
            logger.info("Level %d: %d node(s) below target degree %d",
                        params.level_number, len(report.under_target), params.target_degree)
        return GeneratedLevel(nodes, edges, solution, params, report)

    # --------------------------
    # Solved layout
    # --------------------------
    def _build_solved_layout(self, params: LevelParameters, extent: QPointF):
        cfg = self.config
        report = GenerationReport(params)

        best = None
        for attempt in range(1, max(1, cfg.max_generation_attempts) + 1):
            report.attempts = attempt
            nodes = self._ring_layout(params.node_count, extent)
            edges = self._assign_edges(nodes, params.target_degree)
            score = self._score(nodes, params.target_degree)
            if best is None or score < best[2]:
                best = (nodes, edges, score)
            if score[0] == 0:
                break

        nodes, edges, score = best
        if score[0] and cfg.scaffold_fallback:
            s_nodes = self._ring_layout(params.node_count, extent)
            s_edges = self._assign_edges(s_nodes, params.target_degree,
                                         self._scaffold_edges(s_nodes, extent))
            s_score = self._score(s_nodes, params.target_degree)
            if s_score < score:
                nodes, edges, score = s_nodes, s_edges, s_score
                report.used_scaffold = True

        report.under_minimum = degree_shortfall(nodes, cfg.min_degree)
        report.under_target = degree_shortfall(nodes, params.target_degree)
        return nodes, edges, report

    def _score(self, nodes, target_degree) -> Tuple[int, int]:
        floor = self.config.min_degree
        return (sum(max(0, floor - n.getDegree()) for n in nodes),
                sum(max(0, target_degree - n.getDegree()) for n in nodes))

    def _ring_sizes(self, count: int) -> List[int]:
        if count < 6:
            return [count]
        rings = max(2, int(math.ceil(count / float(max(3, self.config.max_ring_size)))))
        base, extra = divmod(count, rings)
        return [base + (1 if k < extra else 0) for k in range(rings)]

    def _ring_layout(self, count: int, extent: QPointF) -> List[Node]:
        """
        Concentric rings, outermost first, each rotated by a random phase.
        Node ids run outer to inner.
        """
        cfg = self.config
        center = QPointF(extent.x() * 0.5, extent.y() * 0.5)
        outer_r = max(min(extent.x(), extent.y()) * 0.5 - cfg.margin, cfg.node_radius)
        sizes = self._ring_sizes(count)
        step = outer_r / len(sizes) * cfg.inner_ring_ratio

        nodes: List[Node] = []
        r = outer_r
        for k, size in enumerate(sizes):
            if k:
                # Stay well inside the previous ring's polygon so its sides clear this ring
                r = min(r - step, r * math.cos(PI / sizes[k - 1]) * 0.75)
                r *= 1.0 + self._rng.uniform(-cfg.ring_jitter, cfg.ring_jitter)
                r = max(r, cfg.node_radius)
            phase = -PI / 2 + (0.5 * k + self._rng.uniform(-cfg.ring_jitter, cfg.ring_jitter)) * 2 * PI / size
            for i in range(size):
                theta = phase + 2 * PI * i / size
                nodes.append(Node(len(nodes), point_on_circle(center, r, theta), cfg.node_radius))
        return nodes

    # --------------------------
    # Edge assignment
    # --------------------------
    def _assign_edges(self, nodes: List[Node], target_degree: int,
                      seed_edges: Sequence[Edge] = ()) -> List[Edge]:
        cfg = self.config
        edges: List[Edge] = []
        used: Set[Tuple[int, int]] = set()
        for e in seed_edges:
            self._connect(nodes[e.getFrom()], nodes[e.getTo()], edges, used)

        floor = cfg.min_degree
        for _ in range(max(0, cfg.max_assignment_iterations)):
            ranked = sorted(nodes, key=lambda n: max(0, floor - n.getDegree()), reverse=True)
            placed = False
            for node in ranked:
                if node.getDegree() >= floor:
                    break
                target = self._nearest_valid_target(node, nodes, edges, used, target_degree)
                if target is None:
                    continue
                self._connect(node, target, edges, used)
                placed = True
                break
            if not placed:
                break

        # Best-effort top-up towards the level target
        for node in nodes:
            while node.getDegree() < target_degree:
                target = self._nearest_valid_target(node, nodes, edges, used, target_degree)
                if target is None:
                    break
                self._connect(node, target, edges, used)
        return edges

    def _connect(self, a: Node, b: Node, edges: List[Edge], used: Set[Tuple[int, int]]) -> bool:
        key = (min(a.getId(), b.getId()), max(a.getId(), b.getId()))
        if key in used:
            return False
        used.add(key)
        a.connect(b.getId())
        b.connect(a.getId())
        edges.append(Edge(a.getId(), b.getId()))
        return True

    def _nearest_valid_target(self, node: Node, nodes: Sequence[Node], edges: Sequence[Edge],
                              used: Set[Tuple[int, int]], target_degree: int) -> Optional[Node]:
        positions: Dict[int, QPointF] = {n.getId(): n.getPosition() for n in nodes}
        p = node.getPosition()
        nid = node.getId()
        candidates = [
            c for c in nodes
            if c.getId() != nid
            and c.getDegree() < target_degree
            and (min(nid, c.getId()), max(nid, c.getId())) not in used
        ]
        candidates.sort(key=lambda c: v_dist(p, c.getPosition()))
        for c in candidates:
            if self._chord_is_clear(node, c, nodes, edges, positions):
                return c
        return None

    def _chord_is_clear(self, a: Node, b: Node, nodes, edges, positions) -> bool:
        probe = Edge(a.getId(), b.getId())
        for e in edges:
            if edges_cross(probe, e, positions):
                return False
        pa, pb = a.getPosition(), b.getPosition()
        for n in nodes:
            if n is a or n is b:
                continue
            if point_segment_distance(n.getPosition(), pa, pb) < self.config.edge_clearance:
                return False
        return True

    # --------------------------
    # Fallback: ring scaffold
    # --------------------------
    def _scaffold_edges(self, nodes: List[Node], extent: QPointF) -> List[Edge]:
        """
        Ring cycles plus a strip between consecutive rings; every candidate is
        crossing-checked before it is kept.
        """
        center = QPointF(extent.x() * 0.5, extent.y() * 0.5)
        rings: List[List[Node]] = []
        start = 0
        for size in self._ring_sizes(len(nodes)):
            rings.append(nodes[start:start + size])
            start += size

        def angle(n: Node) -> float:
            p = n.getPosition()
            return math.atan2(p.y() - center.y(), p.x() - center.x())

        pairs: List[Tuple[Node, Node]] = []
        for ring in rings:
            if len(ring) >= 3:
                for i in range(len(ring)):
                    pairs.append((ring[i], ring[(i + 1) % len(ring)]))
        for outer, inner in zip(rings, rings[1:]):
            if outer and inner:
                pairs.extend(self._strip_pairs(outer, inner, angle))

        positions = {n.getId(): n.getPosition() for n in nodes}
        kept: List[Edge] = []
        seen: Set[Tuple[int, int]] = set()
        for a, b in pairs:
            key = (min(a.getId(), b.getId()), max(a.getId(), b.getId()))
            if key in seen:
                continue
            seen.add(key)
            if self._chord_is_clear(a, b, nodes, kept, positions):
                kept.append(Edge(a.getId(), b.getId()))
        return kept

    @staticmethod
    def _strip_pairs(outer: List[Node], inner: List[Node], angle) -> List[Tuple[Node, Node]]:
        """
        Triangulate the band between two rings: walk both rings by angle from
        the first outer node, always stepping the ring whose next node comes
        first. Index pairs only ever grow, so no two strip chords interleave.
        """
        base = angle(outer[0])

        def rel(n: Node) -> float:
            return (angle(n) - base) % (2 * PI)

        o = sorted(outer, key=rel)
        i = sorted(inner, key=rel)
        o_rel = [rel(n) for n in o] + [2 * PI]
        i_rel = [rel(n) for n in i]
        i_rel.append(i_rel[0] + 2 * PI)
        o.append(o[0])
        i.append(i[0])

        a = b = 0
        last_a, last_b = len(o) - 1, len(i) - 1
        pairs = [(o[0], i[0])]
        while a < last_a or b < last_b:
            if b == last_b or (a < last_a and o_rel[a + 1] <= i_rel[b + 1]):
                a += 1
            else:
                b += 1
            pairs.append((o[a], i[b]))
        return pairs

    # --------------------------
    # Scrambling
    # --------------------------
    def _scramble(self, nodes: List[Node], edges: List[Edge], extent: QPointF) -> int:
        rounds = 0
        for rounds in range(1, max(1, self.config.max_scramble_rounds) + 1):
            for node in nodes:
                node.setPosition(self._scrambled_position(node, nodes, extent))
            if len(edges) < 2 or any(compute_crossing_flags(nodes, edges)):
                break
            logger.debug("Scramble round %d produced a solved arrangement, retrying", rounds)
        return rounds

    def _scrambled_position(self, node: Node, nodes: Sequence[Node], extent: QPointF) -> QPointF:
        cfg = self.config
        others = [n.getPosition() for n in nodes if n is not node]
        best: Optional[QPointF] = None
        best_score = -math.inf
        for _ in range(max(1, cfg.max_placement_attempts)):
            cand = random_position_distributed(self._rng, extent, cfg.margin)
            score = min_distance_to(cand, others)
            if score >= cfg.min_distance:
                return cand
            if score > best_score:
                best, best_score = cand, score
        return best


def generate_level(level_number: int, canvas_extent: PointLike,
                   stored_config: Optional[LevelConfig] = None, *,
                   config: Optional[GeneratorConfig] = None,
                   rng: Optional[random.Random] = None) -> GeneratedLevel:
    return PuzzleGenerator(config, rng).generate_level(level_number, canvas_extent, stored_config)
