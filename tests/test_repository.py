"""Tests for reading commit graphs from real git repositories."""

import tempfile
from pathlib import Path

import pytest
from git import Repo

from git_bonsai.config import BonsaiConfig, GitConfig
from git_bonsai.core.errors import RepositoryReadError
from git_bonsai.core.layout import generate_layout
from git_bonsai.core.repository import BonsaiRepository
from git_bonsai.models.node import NodeRole


def commit_file(repo: Repo, project_path: Path, name: str, content: str, message: str, **kwargs):
    """Helper to write a file, stage it and commit it."""
    (project_path / name).write_text(content)
    repo.index.add([name])
    return repo.index.commit(message, **kwargs)


@pytest.fixture
def temp_git_project():
    """Create a repository with a merged feature branch and an open one.

    main:    initial -> main work -> merge(feature)
    feature: initial -> feature work
    topic:   main work -> topic work
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir)
        repo = Repo.init(project_path)
        repo.git.symbolic_ref("HEAD", "refs/heads/main")

        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        initial = commit_file(repo, project_path, "README.md", "# Bonsai\n", "Initial commit")
        main_work = commit_file(
            repo, project_path, "main.py", "print('main')\n", "Add main\n\nWith a longer body."
        )
        feature_work = commit_file(
            repo,
            project_path,
            "feature.py",
            "print('feature')\n",
            "Add feature",
            parent_commits=[initial],
            head=False,
        )
        topic_work = commit_file(
            repo,
            project_path,
            "topic.py",
            "print('topic')\n",
            "Start topic",
            parent_commits=[main_work],
            head=False,
        )
        merge = repo.index.commit(
            "Merge branch 'feature'", parent_commits=[main_work, feature_work], head=True
        )

        repo.create_head("feature", feature_work)
        repo.create_head("topic", topic_work)

        yield project_path, {
            "initial": initial.hexsha,
            "main_work": main_work.hexsha,
            "feature_work": feature_work.hexsha,
            "topic_work": topic_work.hexsha,
            "merge": merge.hexsha,
            "main_branch": "main",
        }


def test_exists(temp_git_project):
    project_path, _ = temp_git_project

    assert BonsaiRepository(project_path).exists()
    assert not BonsaiRepository(project_path / "missing").exists()


def test_read_commits_from_head(temp_git_project):
    project_path, shas = temp_git_project

    commits, _ = BonsaiRepository(project_path).read()

    # topic is not reachable from HEAD
    assert set(commits) == {shas["initial"], shas["main_work"], shas["feature_work"], shas["merge"]}
    merge = commits[shas["merge"]]
    assert merge.parents == [shas["main_work"], shas["feature_work"]]
    assert merge.is_merge
    assert merge.author == "Test User"
    assert merge.timestamp > 0


def test_message_keeps_first_line_only(temp_git_project):
    project_path, shas = temp_git_project

    commits, _ = BonsaiRepository(project_path).read()

    assert commits[shas["main_work"]].message == "Add main"


def test_children_and_depths(temp_git_project):
    project_path, shas = temp_git_project

    commits, _ = BonsaiRepository(project_path).read()

    initial = commits[shas["initial"]]
    assert sorted(initial.children) == sorted([shas["main_work"], shas["feature_work"]])
    assert initial.depth == 0
    assert commits[shas["merge"]].depth == 2


def test_branches_and_estimation(temp_git_project):
    project_path, shas = temp_git_project
    main_branch = shas["main_branch"]

    commits, branches = BonsaiRepository(project_path).read()

    assert set(branches) == {main_branch, "feature", "topic"}
    assert branches[main_branch].is_main
    assert branches[main_branch].head == shas["merge"]
    assert not branches["feature"].is_main
    assert branches["topic"].head == shas["topic_work"]

    assert commits[shas["merge"]].branch_name == main_branch
    assert commits[shas["main_work"]].branch_name == main_branch
    assert commits[shas["initial"]].branch_name == main_branch
    assert commits[shas["feature_work"]].branch_name == "feature"


def test_layout_of_real_repository(temp_git_project):
    project_path, shas = temp_git_project

    commits, branches = BonsaiRepository(project_path).read()
    nodes = {n.sha: n for n in generate_layout(commits, branches)}

    assert nodes[shas["initial"]].role is NodeRole.ROOT
    assert nodes[shas["merge"]].role is NodeRole.MERGE
    assert nodes[shas["feature_work"]].role is NodeRole.LEAF
    assert nodes[shas["main_work"]].role is NodeRole.LEAF


def test_max_commits_limits_history(temp_git_project):
    project_path, _ = temp_git_project
    config = BonsaiConfig(git=GitConfig(max_commits=2))

    commits, branches = BonsaiRepository(project_path, config).read()
    nodes = generate_layout(commits, branches)

    assert len(commits) == 2
    assert len([n for n in nodes if n.role is NodeRole.ROOT]) == 1


def test_not_a_repository():
    with tempfile.TemporaryDirectory() as temp_dir:
        with pytest.raises(RepositoryReadError, match="Not a git repository"):
            BonsaiRepository(Path(temp_dir)).read()


def test_repository_without_commits():
    with tempfile.TemporaryDirectory() as temp_dir:
        Repo.init(temp_dir)

        with pytest.raises(RepositoryReadError):
            BonsaiRepository(Path(temp_dir)).read()
