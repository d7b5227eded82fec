"""Bonsai layout engine: places a commit graph into a square canvas."""

import logging
import math
import random
from collections import deque
from typing import Dict, List, NamedTuple, Optional, Set

from git_bonsai.config import BonsaiConfig
from git_bonsai.core.classify import classify_commit, node_size
from git_bonsai.core.errors import NoCommitsError
from git_bonsai.core.graph import branch_heads, choose_root, main_branch_names
from git_bonsai.models.commit import Branch, Commit
from git_bonsai.models.node import LayoutNode, NodeRole

logger = logging.getLogger(__name__)


class BoundingBox(NamedTuple):
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


class BonsaiLayout:
    """Lays out a commit graph as a bonsai tree.

    The engine only holds configuration. Each ``generate_layout`` call builds
    its own node table and its own random generator seeded from the root
    commit, so the same graph always produces the same layout.
    """

    def __init__(self, config: Optional[BonsaiConfig] = None):
        self.config = config or BonsaiConfig()

    def generate_layout(
        self, commits: Dict[str, Commit], branches: Dict[str, Branch]
    ) -> List[LayoutNode]:
        """Generate positioned nodes for every commit in ``commits``."""
        if not commits:
            raise NoCommitsError()

        root, is_pseudo_root = choose_root(commits)
        if is_pseudo_root:
            logger.warning(
                "No root commit found, using oldest commit %s as root", root.short_sha
            )

        rng = random.Random(root.sha)

        nodes = self.create_nodes(commits, branches, root.sha)
        if is_pseudo_root:
            self._promote_to_root(nodes, root.sha)

        main_names = main_branch_names(branches, self.config.git)
        self.calculate_positions(nodes, commits, root, rng, main_names)
        iterations = self.resolve_collisions(nodes)
        self.fit_to_square(nodes)

        logger.debug(
            "Laid out %d nodes (collision passes: %d)", len(nodes), iterations
        )
        return nodes

    def create_nodes(
        self,
        commits: Dict[str, Commit],
        branches: Dict[str, Branch],
        root_sha: Optional[str] = None,
    ) -> List[LayoutNode]:
        """Create one classified and sized node per commit."""
        heads = branch_heads(branches)
        nodes = []

        for commit in commits.values():
            role = classify_commit(commit, heads, commits, root_sha)
            nodes.append(
                LayoutNode(
                    sha=commit.sha,
                    role=role,
                    size=node_size(commit, commits, role, self.config),
                    color=self.config.colors.for_role(role),
                    parent=commit.parents[0] if commit.parents else None,
                    commit=commit,
                )
            )

        return nodes

    def _promote_to_root(self, nodes: List[LayoutNode], sha: str) -> None:
        for node in nodes:
            if node.sha == sha:
                node.role = NodeRole.ROOT
                node.size = node_size(node.commit, {}, NodeRole.ROOT, self.config)
                node.color = self.config.colors.for_role(NodeRole.ROOT)
                # Its real parent lies outside the loaded history
                node.parent = None
                return

    def calculate_positions(
        self,
        nodes: List[LayoutNode],
        commits: Dict[str, Commit],
        root: Commit,
        rng: random.Random,
        main_names: Optional[Set[str]] = None,
    ) -> None:
        """Place nodes breadth-first from the root, growing upwards.

        Distance per hop grows with the child's depth rather than with the
        accumulated path length. Nodes unreachable from the root keep (0, 0).
        """
        layout = self.config.layout
        if main_names is None:
            main_names = set(self.config.git.main_branch_names)
        node_map = {node.sha: node for node in nodes}

        root_node = node_map[root.sha]
        root_node.x = layout.canvas_size / 2
        root_node.y = layout.canvas_size - layout.margin

        queue = deque([root.sha])
        visited: Set[str] = set()

        while queue:
            sha = queue.popleft()
            if sha in visited:
                continue
            visited.add(sha)

            commit = commits.get(sha)
            node = node_map.get(sha)
            if commit is None or node is None:
                continue

            for index, child_sha in enumerate(commit.children):
                child = commits.get(child_sha)
                child_node = node_map.get(child_sha)
                if child is None or child_node is None:
                    continue

                distance = layout.base_distance + child.depth * layout.depth_factor
                angle = self.calculate_angle(
                    child, commit, index, len(commit.children), rng, main_names
                )

                angle_rad = math.radians(angle)
                dx = distance * math.sin(angle_rad) * layout.horizontal_scale
                dy = distance * math.cos(angle_rad) * layout.vertical_scale
                child_node.x = node.x + dx
                child_node.y = node.y - dy
                child_node.angle = angle

                queue.append(child_sha)

    def calculate_angle(
        self,
        commit: Commit,
        parent: Commit,
        index: int,
        total_children: int,
        rng: random.Random,
        main_names: Set[str],
    ) -> float:
        """Get the growth angle of ``commit`` in degrees from vertical."""
        angles = self.config.angle

        # Main branch grows straight up
        if commit.branch_name in main_names:
            return 0 + (rng.random() - 0.5) * angles.main_branch_variation

        # Siblings fan out evenly
        if total_children > 1:
            step = angles.angle_range / (total_children - 1)
            start = -angles.angle_range / 2
            return start + step * index + (rng.random() - 0.5) * angles.angle_variation

        base_angle = 0 if parent.branch_name == commit.branch_name else angles.single_child_base
        return base_angle + (rng.random() - 0.5) * angles.single_child_variation

    def resolve_collisions(self, nodes: List[LayoutNode]) -> int:
        """Push overlapping nodes apart. Returns the number of passes run.

        Residual overlap may remain in dense graphs once the pass limit is hit.
        """
        max_iterations = self.config.layout.max_iterations
        iterations = 0

        for _ in range(max_iterations):
            iterations += 1
            has_collision = False

            for i in range(len(nodes)):
                for j in range(i + 1, len(nodes)):
                    if self.is_colliding(nodes[i], nodes[j]):
                        self.adjust_position(nodes[i], nodes[j])
                        has_collision = True

            if not has_collision:
                break

        return iterations

    def _min_distance(self, node1: LayoutNode, node2: LayoutNode) -> float:
        return node1.size + node2.size + self.config.layout.collision_margin

    def is_colliding(self, node1: LayoutNode, node2: LayoutNode) -> bool:
        distance = math.hypot(node1.x - node2.x, node1.y - node2.y)
        return distance < self._min_distance(node1, node2)

    def adjust_position(self, node1: LayoutNode, node2: LayoutNode) -> None:
        """Move both nodes apart along their connecting line, half each."""
        dx = node2.x - node1.x
        dy = node2.y - node1.y
        distance = math.hypot(dx, dy)

        if distance == 0:
            return

        overlap = self._min_distance(node1, node2) - distance
        adjust_x = (dx / distance) * overlap * 0.5
        adjust_y = (dy / distance) * overlap * 0.5

        node1.x -= adjust_x
        node1.y -= adjust_y
        node2.x += adjust_x
        node2.y += adjust_y

    def fit_to_square(self, nodes: List[LayoutNode]) -> None:
        """Scale and center all nodes so they fill the canvas inside the margin."""
        layout = self.config.layout
        bbox = self.calculate_bounding_box(nodes)

        max_dimension = max(bbox.width, bbox.height)
        if max_dimension > 0:
            scale = (layout.canvas_size - 2 * layout.margin) / max_dimension
        else:
            scale = 1.0

        center = layout.canvas_size / 2
        bbox_center_x = (bbox.min_x + bbox.max_x) / 2
        bbox_center_y = (bbox.min_y + bbox.max_y) / 2

        for node in nodes:
            node.x = center + (node.x - bbox_center_x) * scale
            node.y = center + (node.y - bbox_center_y) * scale
            node.size *= scale

    @staticmethod
    def calculate_bounding_box(nodes: List[LayoutNode]) -> BoundingBox:
        """Bounding box of all node footprints (position +/- size)."""
        min_x = min_y = math.inf
        max_x = max_y = -math.inf

        for node in nodes:
            min_x = min(min_x, node.x - node.size)
            max_x = max(max_x, node.x + node.size)
            min_y = min(min_y, node.y - node.size)
            max_y = max(max_y, node.y + node.size)

        return BoundingBox(min_x, max_x, min_y, max_y)


def generate_layout(
    commits: Dict[str, Commit],
    branches: Dict[str, Branch],
    config: Optional[BonsaiConfig] = None,
) -> List[LayoutNode]:
    """Lay out a commit graph with a fresh engine."""
    return BonsaiLayout(config).generate_layout(commits, branches)
