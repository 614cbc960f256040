import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'fogit' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_fogit_caches
from helpers.git_helpers import git_commit, git_config_identity, git_init

# Environment variables that redirect fogit away from the test's project.
_LEAK_PRONE_ENV_KEYS = [
    "FOGIT_PROJECT_ROOT",
    "FOGIT_USER_CONFIG_DIR",
    "FOGIT_WORKFLOW__MODE",
    "FOGIT_WORKFLOW__BASE_BRANCH",
]


@pytest.fixture(autouse=True)
def _reset_fogit_state(tmp_path_factory, monkeypatch):
    """Fresh caches, no leaked handlers, and an empty user config dir per test."""
    for key in _LEAK_PRONE_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("FOGIT_USER_CONFIG_DIR", str(tmp_path_factory.mktemp("user-config")))
    reset_fogit_caches()
    yield
    reset_fogit_caches()


@pytest.fixture
def project_dir(tmp_path, monkeypatch) -> Path:
    """An empty working directory that is not a git repository."""
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def git_repo(tmp_path, monkeypatch) -> Path:
    """
    A real git repository on ``main`` with one commit and an identity.

    The fogit features directory exists but nothing under ``.fogit/`` is
    committed yet.
    """
    root = tmp_path / "repo"
    root.mkdir()
    git_init(root, branch="main")
    git_config_identity(root)
    (root / "README.md").write_text("# Test Project\n", encoding="utf-8")
    git_commit(root, "Initial commit")
    (root / ".fogit" / "features").mkdir(parents=True)
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def empty_git_repo(tmp_path, monkeypatch) -> Path:
    """A git repository on ``main`` without any commits."""
    root = tmp_path / "empty-repo"
    root.mkdir()
    git_init(root, branch="main")
    git_config_identity(root)
    monkeypatch.chdir(root)
    return root

