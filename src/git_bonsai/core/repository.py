"""Reading commit graphs from git repositories with GitPython."""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import git
from git import Repo

from git_bonsai.config import BonsaiConfig
from git_bonsai.core.errors import RepositoryReadError
from git_bonsai.core.graph import build_commit_graph, estimate_branches
from git_bonsai.models.commit import Branch, Commit

logger = logging.getLogger(__name__)


class BonsaiRepository:
    """Reads commits and branches from a git repository."""

    def __init__(self, project_root: Path, config: Optional[BonsaiConfig] = None):
        self.project_root = Path(project_root)
        self.config = config or BonsaiConfig()
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Get the git repository, opening it on first use."""
        if self._repo is None:
            try:
                self._repo = Repo(self.project_root)
            except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
                raise RepositoryReadError(
                    f"Not a git repository: {self.project_root}"
                ) from e
        return self._repo

    def exists(self) -> bool:
        """Check if the project root holds a git repository."""
        return (self.project_root / ".git").exists()

    @property
    def max_commits(self) -> int:
        return self.config.git.max_commits

    def read(self) -> Tuple[Dict[str, Commit], Dict[str, Branch]]:
        """Read up to ``max_commits`` commits reachable from HEAD, plus branches."""
        logger.info("Reading up to %d commits from %s", self.max_commits, self.project_root)

        try:
            raw_commits = list(self.repo.iter_commits("HEAD", max_count=self.max_commits))
        except (git.exc.GitCommandError, ValueError) as e:
            raise RepositoryReadError(
                f"Could not read commits from {self.project_root}: {e}"
            ) from e

        if not raw_commits:
            raise RepositoryReadError(f"No commits found in {self.project_root}")

        commits = build_commit_graph(self._to_commit(c) for c in raw_commits)
        branches = self.list_branches()
        estimate_branches(commits, branches)

        logger.info("Found %d commits and %d branches", len(commits), len(branches))
        return commits, branches

    def list_branches(self) -> Dict[str, Branch]:
        """List local branches keyed by name."""
        main_names = set(self.config.git.main_branch_names)
        branches: Dict[str, Branch] = {}

        for head in self.repo.heads:
            try:
                head_sha = head.commit.hexsha
            except ValueError as e:
                logger.warning("Could not resolve branch %s: %s", head.name, e)
                continue
            branches[head.name] = Branch(
                name=head.name, head=head_sha, is_main=head.name in main_names
            )

        return branches

    @staticmethod
    def _to_commit(commit: git.Commit) -> Commit:
        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return Commit(
            sha=commit.hexsha,
            parents=[parent.hexsha for parent in commit.parents],
            message=message.split("\n")[0],
            author=commit.author.name or "",
            timestamp=commit.authored_date,
        )
