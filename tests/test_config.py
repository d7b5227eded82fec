"""Tests for configuration loading."""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from git_bonsai.config import BonsaiConfig, ColorConfig
from git_bonsai.models.node import NodeRole


def test_defaults():
    config = BonsaiConfig()

    assert config.layout.canvas_size == 800
    assert config.layout.margin == 50
    assert config.layout.max_iterations == 50
    assert config.layout.collision_margin == 5
    assert config.node_size.merge_max == 20
    assert config.angle.angle_range == 170
    assert config.git.max_commits == 30
    assert config.git.main_branch_names == ["main", "master"]


def test_load_partial_file_keeps_defaults():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "bonsai.json"
        path.write_text(json.dumps({"layout": {"canvas_size": 400}, "git": {"max_commits": 5}}))

        config = BonsaiConfig.load(path)

    assert config.layout.canvas_size == 400
    assert config.layout.margin == 50
    assert config.git.max_commits == 5
    assert config.colors.leaf == "#228B22"


def test_load_rejects_invalid_values():
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "bonsai.json"
        path.write_text(json.dumps({"layout": {"canvas_size": "huge"}}))

        with pytest.raises(ValidationError):
            BonsaiConfig.load(path)


def test_color_for_every_role():
    colors = ColorConfig()

    assert colors.for_role(NodeRole.ROOT) == "#654321"
    assert colors.for_role(NodeRole.TRUNK) == "#8B4513"
    assert colors.for_role(NodeRole.MERGE) == "#654321"
    assert colors.for_role(NodeRole.LEAF) == "#228B22"

    with pytest.raises(ValueError):
        colors.for_role("bark")
