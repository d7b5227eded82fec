"""Role classification and sizing of commits."""

from collections import deque
from typing import Dict, Optional, Set

from git_bonsai.config import BonsaiConfig
from git_bonsai.models.commit import Commit
from git_bonsai.models.node import NodeRole

# Upper bound on commits visited when measuring a merged side branch
BRANCH_WALK_LIMIT = 100


def classify_commit(
    commit: Commit,
    heads: Set[str],
    commits: Dict[str, Commit],
    root_sha: Optional[str] = None,
) -> NodeRole:
    """Decide the visual role of a commit.

    When ``root_sha`` is given, only that commit can be the root; other
    parentless commits (orphan histories) fall through to the later rules.
    """
    if not commit.parents and (root_sha is None or commit.sha == root_sha):
        return NodeRole.ROOT
    if commit.is_merge:
        return NodeRole.MERGE

    # Branch heads, and the last commit of a branch that gets merged
    if commit.sha in heads:
        return NodeRole.LEAF
    if len(commit.children) == 1:
        child = commits.get(commit.children[0])
        if child is not None and child.is_merge:
            return NodeRole.LEAF

    return NodeRole.TRUNK


def node_size(
    commit: Commit,
    commits: Dict[str, Commit],
    role: NodeRole,
    config: Optional[BonsaiConfig] = None,
) -> float:
    """Get the pre-scaling size of a node for the given role."""
    config = config or BonsaiConfig()
    sizes = config.node_size
    layout = config.layout

    if role is NodeRole.ROOT:
        return sizes.root
    if role is NodeRole.MERGE:
        merge_size = len(commit.parents) * sizes.merge_factor
        return min(sizes.merge_max, sizes.merge_base + merge_size)
    if role is NodeRole.LEAF:
        if commit.is_merge:
            count = count_commits_in_branch(
                commit.parents[1], commits, limit=layout.branch_walk_limit
            )
            return layout.base_leaf_size + min(
                count * layout.size_multiplier, layout.leaf_bonus_cap
            )
        return layout.base_leaf_size
    if role is NodeRole.TRUNK:
        return sizes.trunk
    raise ValueError(f"Unknown node role: {role!r}")


def count_commits_in_branch(
    sha: str, commits: Dict[str, Commit], limit: int = BRANCH_WALK_LIMIT
) -> int:
    """Count commits on a side branch by following first parents from ``sha``.

    The walk stops after ``limit`` commits, at a merge commit (which is
    counted), or when the history runs out of the map.
    """
    count = 0
    visited: Set[str] = set()
    queue = deque([sha])

    while queue and count < limit:
        current_sha = queue.popleft()
        if current_sha in visited:
            continue
        visited.add(current_sha)

        commit = commits.get(current_sha)
        if commit is None:
            continue

        count += 1

        if not commit.is_merge and commit.parents:
            queue.append(commit.parents[0])

    return count
