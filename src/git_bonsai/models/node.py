"""Layout node model produced by the bonsai layout engine."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from git_bonsai.models.commit import Commit


class NodeRole(str, Enum):
    """Visual role of a commit in the bonsai."""

    ROOT = "root"
    TRUNK = "trunk"
    MERGE = "merge"
    LEAF = "leaf"


class LayoutNode(BaseModel):
    """A positioned commit, ready for rendering."""

    sha: str
    role: NodeRole
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0  # Degrees from vertical, used for leaves
    size: float
    color: str
    parent: Optional[str] = None
    commit: Commit
