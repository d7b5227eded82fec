"""Commit graph construction: children, depths and branch estimation."""

import logging
from collections import deque
from typing import Dict, Iterable, Optional, Set, Tuple

from git_bonsai.config import GitConfig
from git_bonsai.models.commit import Branch, Commit

logger = logging.getLogger(__name__)


def build_commit_graph(commits: Iterable[Commit]) -> Dict[str, Commit]:
    """Build a sha -> commit map with children and depths filled in.

    Input order is preserved (usually newest first, as git log returns it).
    Parents missing from the input are left dangling on purpose: a shallow
    read legitimately stops before the true root.
    """
    commit_map: Dict[str, Commit] = {}
    for commit in commits:
        commit.children = []
        commit_map[commit.sha] = commit

    for commit in commit_map.values():
        for parent_sha in commit.parents:
            parent = commit_map.get(parent_sha)
            if parent is not None:
                parent.children.append(commit.sha)

    if commit_map:
        root, _ = choose_root(commit_map)
        calculate_depths(root, commit_map)

    return commit_map


def find_root_commit(commits: Dict[str, Commit]) -> Optional[Commit]:
    """Find the first commit without parents, in map order."""
    for commit in commits.values():
        if not commit.parents:
            return commit
    return None


def find_oldest_commit(commits: Dict[str, Commit]) -> Optional[Commit]:
    """Find the commit with the smallest timestamp (first one wins ties)."""
    oldest = None
    for commit in commits.values():
        if oldest is None or commit.timestamp < oldest.timestamp:
            oldest = commit
    return oldest


def choose_root(commits: Dict[str, Commit]) -> Tuple[Optional[Commit], bool]:
    """Return the root commit and whether it is a promoted pseudo-root."""
    root = find_root_commit(commits)
    if root is not None:
        return root, False
    return find_oldest_commit(commits), True


def calculate_depths(root: Commit, commits: Dict[str, Commit]) -> None:
    """Assign breadth-first depth from ``root`` along child edges."""
    queue = deque([(root, 0)])
    visited: Set[str] = set()

    while queue:
        current, depth = queue.popleft()
        if current.sha in visited:
            continue
        visited.add(current.sha)
        current.depth = depth

        for child_sha in current.children:
            child = commits.get(child_sha)
            if child is not None and child_sha not in visited:
                queue.append((child, depth + 1))


def branch_heads(branches: Dict[str, Branch]) -> Set[str]:
    """Get the set of commits that branches point to."""
    return {branch.head for branch in branches.values()}


def main_branch_names(
    branches: Dict[str, Branch], git_config: Optional[GitConfig] = None
) -> Set[str]:
    """Names treated as the main branch: flagged branches plus configured names."""
    git_config = git_config or GitConfig()
    names = set(git_config.main_branch_names)
    names.update(branch.name for branch in branches.values() if branch.is_main)
    return names


def estimate_branches(commits: Dict[str, Commit], branches: Dict[str, Branch]) -> None:
    """Label commits with the branch they most likely belong to.

    The main branch claims its first-parent history first; other branches
    then claim whatever is still unlabelled on their own first-parent walk.
    """
    main_branch = next((b for b in branches.values() if b.is_main), None)
    if main_branch is not None:
        mark_branch_commits(main_branch.head, commits, main_branch.name)

    for branch in branches.values():
        if not branch.is_main:
            mark_branch_commits(branch.head, commits, branch.name)


def mark_branch_commits(head_sha: str, commits: Dict[str, Commit], branch_name: str) -> int:
    """Walk first parents from ``head_sha``, labelling unlabelled commits.

    Returns the number of commits newly labelled.
    """
    marked = 0
    visited: Set[str] = set()
    queue = deque([head_sha])

    while queue:
        sha = queue.popleft()
        if sha in visited:
            continue
        visited.add(sha)

        commit = commits.get(sha)
        if commit is None:
            continue

        if commit.branch_name is None:
            commit.branch_name = branch_name
            marked += 1

        if commit.parents:
            queue.append(commit.parents[0])

    logger.debug("Branch %s labelled %d commits", branch_name, marked)
    return marked
