"""Draw a bonsai layout as SVG."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

import svgwrite

from git_bonsai.config import BonsaiConfig
from git_bonsai.core.graph import main_branch_names
from git_bonsai.models.commit import Branch
from git_bonsai.models.node import LayoutNode, NodeRole

logger = logging.getLogger(__name__)

TOOLTIP_MESSAGE_LENGTH = 50


def shorten(text: str, maxlen: int = TOOLTIP_MESSAGE_LENGTH) -> str:
    return text if len(text) <= maxlen else text[:maxlen] + "..."


class SvgRenderer:
    """Renders positioned nodes: pot first, then branches, then leaves."""

    def __init__(
        self,
        config: Optional[BonsaiConfig] = None,
        branches: Optional[Dict[str, Branch]] = None,
    ):
        self.config = config or BonsaiConfig()
        # Flagged branches plus configured names, as in the layout
        self.main_names: Set[str] = main_branch_names(branches or {}, self.config.git)

    def render(self, nodes: List[LayoutNode]) -> svgwrite.Drawing:
        size = self.config.layout.canvas_size
        # data-* attributes are not in the SVG 1.1 profile, so skip validation
        dwg = svgwrite.Drawing(size=(size, size), profile="full", debug=False)
        dwg.viewbox(0, 0, size, size)
        dwg.add(
            dwg.rect(insert=(0, 0), size=(size, size), fill=self.config.colors.background)
        )

        node_map = {node.sha: node for node in nodes}

        dwg.add(self._draw_pot(dwg, nodes))
        dwg.add(self._draw_branches(dwg, nodes, node_map))
        dwg.add(self._draw_leaves(dwg, nodes))
        return dwg

    def to_string(self, nodes: List[LayoutNode]) -> str:
        return self.render(nodes).tostring()

    def save(self, nodes: List[LayoutNode], path: Union[str, Path]) -> Path:
        """Write the SVG to ``path`` and return it."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.render(nodes).saveas(str(path), pretty=True)
        logger.info("Wrote %s", path)
        return path

    def _draw_pot(self, dwg: svgwrite.Drawing, nodes: List[LayoutNode]):
        """Inverted trapezoid pot with a rim and soil, just below the root."""
        group = dwg.g(id="root")
        root_node = next((n for n in nodes if n.role is NodeRole.ROOT), None)
        if root_node is None:
            return group

        pot = self.config.pot
        colors = self.config.colors
        center_x = root_node.x
        top_y = root_node.y + pot.offset_y
        top_half = pot.top_width / 2
        bottom_half = pot.bottom_width / 2

        body = (
            f"M {center_x - top_half} {top_y} "
            f"L {center_x - bottom_half} {top_y + pot.height} "
            f"L {center_x + bottom_half} {top_y + pot.height} "
            f"L {center_x + top_half} {top_y} Z"
        )
        group.add(
            dwg.path(d=body, fill=colors.pot_body, stroke=colors.pot_stroke, stroke_width=5)
        )
        group.add(
            dwg.rect(
                insert=(center_x - top_half, top_y - pot.rim_height),
                size=(pot.top_width, pot.rim_height),
                fill=colors.pot_rim,
                stroke=colors.pot_stroke,
                stroke_width=3,
            )
        )
        group.add(
            dwg.rect(
                insert=(center_x - top_half + pot.soil_margin, top_y),
                size=(pot.top_width - pot.soil_margin * 2, pot.soil_height),
                fill=colors.soil,
            )
        )
        return group

    def _draw_branches(
        self,
        dwg: svgwrite.Drawing,
        nodes: List[LayoutNode],
        node_map: Dict[str, LayoutNode],
    ):
        group = dwg.g(id="branches")
        for node in nodes:
            # Parents outside the loaded history are skipped
            parent = node_map.get(node.parent) if node.parent else None
            if parent is None:
                continue
            group.add(
                dwg.line(
                    start=(parent.x, parent.y),
                    end=(node.x, node.y),
                    stroke=self.config.colors.trunk,
                    stroke_width=self.branch_width(node),
                    stroke_linecap="round",
                    class_="branch",
                )
            )
        return group

    def branch_width(self, node: LayoutNode) -> float:
        """Stroke width of the branch leading to ``node``; thinner as it gets deeper."""
        widths = self.config.branch_width
        is_main = node.commit.branch_name in self.main_names
        base_width = widths.main if is_main else widths.other
        depth_factor = max(1, widths.depth_reduction - node.commit.depth)
        return min(base_width * depth_factor * 0.5, widths.max)

    def _draw_leaves(self, dwg: svgwrite.Drawing, nodes: List[LayoutNode]):
        group = dwg.g(id="leaves")
        for node in nodes:
            if node.role is NodeRole.LEAF:
                group.add(self._leaf(dwg, node))
        return group

    def _leaf(self, dwg: svgwrite.Drawing, node: LayoutNode):
        commit = node.commit
        ellipse = dwg.ellipse(
            center=(node.x, node.y),
            r=(node.size, node.size * 0.6),
            fill=node.color,
            stroke=self.config.colors.leaf_stroke,
            stroke_width=3,
            transform=f"rotate({node.angle} {node.x} {node.y})",
            class_="leaf",
            data_sha=node.sha,
            data_message=commit.message,
            data_author=commit.author,
            data_timestamp=str(commit.timestamp),
        )
        ellipse.set_desc(title=self.tooltip_text(node))
        return ellipse

    @staticmethod
    def tooltip_text(node: LayoutNode) -> str:
        commit = node.commit
        date = datetime.fromtimestamp(commit.timestamp, tz=timezone.utc).strftime("%Y-%m-%d")
        return "\n".join(
            [shorten(commit.message), f"Author: {commit.author}", f"Date: {date}"]
        )
