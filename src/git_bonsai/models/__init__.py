"""Data models for Git Bonsai."""

from .commit import Branch, Commit
from .node import LayoutNode, NodeRole

__all__ = ["Branch", "Commit", "LayoutNode", "NodeRole"]
