"""Configuration for layout, rendering and repository reading."""

from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, Field

from git_bonsai.models.node import NodeRole


class LayoutConfig(BaseModel):
    """Canvas geometry and solver tuning."""

    canvas_size: float = 800
    margin: float = 50
    base_distance: float = 50  # Base distance between parent and child
    depth_factor: float = 2
    horizontal_scale: float = 3.0  # Stretch sideways
    vertical_scale: float = 0.3  # Flatten vertically
    base_leaf_size: float = 50
    size_multiplier: float = 10
    leaf_bonus_cap: float = 50
    branch_walk_limit: int = 100
    max_iterations: int = 50  # Collision resolution passes
    collision_margin: float = 5


class NodeSizeConfig(BaseModel):
    root: float = 15
    trunk: float = 10
    merge_base: float = 10
    merge_factor: float = 5
    merge_max: float = 20


class AngleConfig(BaseModel):
    """Angles in degrees. Variations are full widths (20 means +/-10)."""

    main_branch_variation: float = 20
    angle_range: float = 170
    angle_variation: float = 25
    single_child_base: float = 75
    single_child_variation: float = 30


class BranchWidthConfig(BaseModel):
    main: float = 16
    other: float = 10
    max: float = 25
    depth_reduction: float = 10


class PotConfig(BaseModel):
    top_width: float = 240
    bottom_width: float = 180
    height: float = 70
    offset_y: float = 10
    rim_height: float = 8
    soil_height: float = 12
    soil_margin: float = 10


class ColorConfig(BaseModel):
    root: str = "#654321"
    trunk: str = "#8B4513"
    merge: str = "#654321"
    leaf: str = "#228B22"
    pot_body: str = "#8B4513"
    pot_stroke: str = "#654321"
    pot_rim: str = "#A0522D"
    soil: str = "#3E2723"
    leaf_stroke: str = "#006400"
    background: str = "#fffef8"

    def for_role(self, role: NodeRole) -> str:
        """Get the fill color for a node role."""
        if role is NodeRole.ROOT:
            return self.root
        if role is NodeRole.TRUNK:
            return self.trunk
        if role is NodeRole.MERGE:
            return self.merge
        if role is NodeRole.LEAF:
            return self.leaf
        raise ValueError(f"Unknown node role: {role!r}")


class GitConfig(BaseModel):
    max_commits: int = 30
    main_branch_names: List[str] = ["main", "master"]


class BonsaiConfig(BaseModel):
    """Top-level configuration, loadable from a JSON file."""

    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    node_size: NodeSizeConfig = Field(default_factory=NodeSizeConfig)
    angle: AngleConfig = Field(default_factory=AngleConfig)
    branch_width: BranchWidthConfig = Field(default_factory=BranchWidthConfig)
    pot: PotConfig = Field(default_factory=PotConfig)
    colors: ColorConfig = Field(default_factory=ColorConfig)
    git: GitConfig = Field(default_factory=GitConfig)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "BonsaiConfig":
        """Load configuration from a JSON file. Missing keys keep defaults."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
