"""Commit and branch models for the commit graph."""

from typing import List, Optional

from pydantic import BaseModel


class Commit(BaseModel):
    """Represents a commit in the graph handed to the layout engine."""

    sha: str
    parents: List[str] = []
    children: List[str] = []  # Filled in by the graph builder
    message: str = ""
    author: str = ""
    timestamp: int = 0
    branch_name: Optional[str] = None  # Estimated from branch heads
    depth: int = 0

    @property
    def is_merge(self) -> bool:
        """Check if this commit has more than one parent."""
        return len(self.parents) > 1

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


class Branch(BaseModel):
    """A named branch and the commit it points to."""

    name: str
    head: str
    is_main: bool = False
