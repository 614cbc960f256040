"""Tests for layered configuration, env overrides and schema validation."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from fogit.core.config import ConfigManager, clear_all_caches
from fogit.core.config.domains import (
    CommitConfig,
    FeaturesConfig,
    SearchConfig,
    TimeoutsConfig,
    WorkflowConfig,
)
from fogit.core.exceptions import ConfigError


def _write_project_config(root: Path, data: dict) -> None:
    path = root / ".fogit" / "config.yml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


class TestDefaults:
    def test_bundled_defaults(self, project_dir: Path) -> None:
        workflow = WorkflowConfig(repo_root=project_dir)
        assert workflow.mode == "branch-per-feature"
        assert workflow.base_branch == "main"
        assert workflow.allow_shared_branches is True
        assert workflow.create_branch_from == "trunk"
        assert workflow.version_format == "simple"
        assert workflow.is_trunk_based is False

        search = SearchConfig(repo_root=project_dir)
        assert search.fuzzy_match is True
        assert search.min_similarity == 60.0
        assert search.max_suggestions == 5

        commit = CommitConfig(repo_root=project_dir)
        assert commit.auto_commit is True
        assert commit.remote == "origin"

        assert FeaturesConfig(repo_root=project_dir).default_priority == "medium"
        assert TimeoutsConfig(repo_root=project_dir).git_operations_seconds == 60.0

    def test_defaults_validate(self, project_dir: Path) -> None:
        ConfigManager(repo_root=project_dir).load_config(validate=True)


class TestLayering:
    def test_project_config_overrides_defaults(self, project_dir: Path) -> None:
        _write_project_config(project_dir, {"workflow": {"mode": "trunk-based", "base_branch": "develop"}})
        workflow = WorkflowConfig(repo_root=project_dir)
        assert workflow.is_trunk_based
        assert workflow.base_branch == "develop"
        # Untouched keys keep their defaults.
        assert workflow.create_branch_from == "trunk"

    def test_user_config_sits_between_defaults_and_project(
        self, project_dir: Path, tmp_path: Path, monkeypatch
    ) -> None:
        user_dir = tmp_path / "home-fogit"
        (user_dir / "config").mkdir(parents=True)
        (user_dir / "config" / "workflow.yaml").write_text(
            yaml.safe_dump({"workflow": {"base_branch": "trunk", "version_format": "semantic"}}),
            encoding="utf-8",
        )
        monkeypatch.setenv("FOGIT_USER_CONFIG_DIR", str(user_dir))
        _write_project_config(project_dir, {"workflow": {"base_branch": "develop"}})

        workflow = WorkflowConfig(repo_root=project_dir)
        assert workflow.base_branch == "develop"
        assert workflow.version_format == "semantic"

    def test_env_override_wins(self, project_dir: Path, monkeypatch) -> None:
        _write_project_config(project_dir, {"workflow": {"mode": "branch-per-feature"}})
        monkeypatch.setenv("FOGIT_WORKFLOW__MODE", "trunk-based")
        monkeypatch.setenv("FOGIT_FEATURE_SEARCH__MAX_SUGGESTIONS", "2")
        assert WorkflowConfig(repo_root=project_dir).mode == "trunk-based"
        assert SearchConfig(repo_root=project_dir).max_suggestions == 2

    def test_cache_sees_rewritten_project_file(self, project_dir: Path) -> None:
        _write_project_config(project_dir, {"workflow": {"base_branch": "one"}})
        assert WorkflowConfig(repo_root=project_dir).base_branch == "one"
        _write_project_config(project_dir, {"workflow": {"base_branch": "two-longer"}})
        clear_all_caches()
        assert WorkflowConfig(repo_root=project_dir).base_branch == "two-longer"

    def test_invalid_yaml_fails_closed(self, project_dir: Path) -> None:
        path = project_dir / ".fogit" / "config.yml"
        path.parent.mkdir(parents=True)
        path.write_text("workflow: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            ConfigManager(repo_root=project_dir).load_config_uncached()


class TestCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("true", True),
            ("False", False),
            ("42", 42),
            ("0.5", 0.5),
            ('{"a": 1}', {"a": 1}),
            ("[1, 2]", [1, 2]),
            (" main ", "main"),
        ],
    )
    def test_coerce_value(self, project_dir: Path, raw: str, expected) -> None:
        assert ConfigManager(repo_root=project_dir).coerce_value(raw) == expected


class TestGetSet:
    def test_get_dotted_key(self, project_dir: Path) -> None:
        manager = ConfigManager(repo_root=project_dir)
        assert manager.get("workflow.mode") == "branch-per-feature"
        assert manager.get("workflow.missing", None) is None
        with pytest.raises(ConfigError, match="unknown config key"):
            manager.get("workflow.missing")

    def test_set_project_value_persists_and_invalidates(self, project_dir: Path) -> None:
        manager = ConfigManager(repo_root=project_dir)
        assert manager.set_project_value("workflow.base_branch", "develop") == "develop"

        saved = yaml.safe_load((project_dir / ".fogit" / "config.yml").read_text(encoding="utf-8"))
        assert saved == {"workflow": {"base_branch": "develop"}}
        assert WorkflowConfig(repo_root=project_dir).base_branch == "develop"

    def test_set_coerces_scalars(self, project_dir: Path) -> None:
        manager = ConfigManager(repo_root=project_dir)
        assert manager.set_project_value("commit.auto_push", "true") is True
        assert CommitConfig(repo_root=project_dir).auto_push is True

    def test_invalid_value_is_not_written(self, project_dir: Path) -> None:
        manager = ConfigManager(repo_root=project_dir)
        with pytest.raises(ConfigError, match="workflow.mode"):
            manager.set_project_value("workflow.mode", "sideways")
        assert not (project_dir / ".fogit" / "config.yml").exists()

    def test_empty_key_is_rejected(self, project_dir: Path) -> None:
        with pytest.raises(ConfigError):
            ConfigManager(repo_root=project_dir).set_project_value("", "x")


class TestCommitTemplate:
    def test_render_message_placeholders(self, project_dir: Path) -> None:
        commit = CommitConfig(repo_root=project_dir)
        assert commit.render_message(title="Login", feature_id="abc") == "feat: Login (abc)"

    def test_template_without_placeholders_falls_back(self, project_dir: Path) -> None:
        _write_project_config(project_dir, {"commit": {"template": "static message"}})
        commit = CommitConfig(repo_root=project_dir)
        assert commit.render_message(title="Login", feature_id="abc", action="Create") == (
            "Create feature: Login"
        )

    def test_action_placeholder(self, project_dir: Path) -> None:
        _write_project_config(project_dir, {"commit": {"template": "{action}: {name}"}})
        commit = CommitConfig(repo_root=project_dir)
        assert commit.render_message(title="Login", feature_id="abc", action="Reopen") == "Reopen: Login"
