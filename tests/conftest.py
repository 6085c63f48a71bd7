"""
Shared fixtures: environment defaults, local git remotes and fake collaborators.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

# Settings are read at import time
os.environ.setdefault("GITHUB_TOKEN", "test-token")
os.environ.pop("GITHUB_WEBHOOK_SECRET", None)

from delint.core.errors import GitOperationError  # noqa: E402
from delint.services.workspace import CleanStatus, RepositoryWorkspace  # noqa: E402


def git(*args, cwd: Path) -> str:
    result = subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)
    return result.stdout.strip()


class LocalRepositoryWorkspace(RepositoryWorkspace):
    """Clones from bare repositories under a local directory instead of GitHub"""

    def __init__(self, remotes: Path, workspace_root: Path):
        super().__init__(
            host="localhost",
            timeout=60,
            author_name="Test Bot",
            author_email="bot@example.com",
            workspace_root=str(workspace_root),
        )
        self.remotes = remotes

    def remote_url(self, token, owner, repo):
        return str(self.remotes / owner / f"{repo}.git")


@pytest.fixture
def remotes(tmp_path):
    """Bare remote acme/widgets with a main branch holding tslint.json and one source file"""
    root = tmp_path / "remotes"
    bare = root / "acme" / "widgets.git"
    bare.mkdir(parents=True)
    git("init", "--bare", cwd=bare)

    seed = tmp_path / "seed"
    seed.mkdir()
    git("init", cwd=seed)
    git("checkout", "-b", "main", cwd=seed)
    git("config", "user.name", "Seed", cwd=seed)
    git("config", "user.email", "seed@example.com", cwd=seed)
    (seed / "tslint.json").write_text('{"extends": "tslint:recommended"}\n')
    (seed / "file.ts").write_text("const x = 1\n")
    git("add", ".", cwd=seed)
    git("commit", "-m", "Initial commit", cwd=seed)
    git("remote", "add", "origin", str(bare), cwd=seed)
    git("push", "origin", "main", cwd=seed)

    return root


@pytest.fixture
def workspaces(remotes, tmp_path):
    root = tmp_path / "workspaces"
    root.mkdir()
    return LocalRepositoryWorkspace(remotes, root)


class FakeWorkspace:
    """In-memory stand-in for a cloned workspace"""

    def __init__(self, base_dir: Path, files=("tslint.json",), dirty=False, events=None, fail_on=None):
        self.base_dir = Path(base_dir)
        self.files = set(files)
        self.dirty = dirty
        self.events = events if events is not None else []
        self.fail_on = fail_on
        self.discarded = False

    def file_exists(self, relative_path):
        return relative_path in self.files

    def is_clean(self):
        return CleanStatus(success=not self.dirty)

    def _record(self, event, *args):
        if self.fail_on == event:
            raise GitOperationError(f"{event} rejected")
        self.events.append((event, *args))

    def create_branch(self, name):
        self._record("create_branch", name)

    def commit(self, message):
        self._record("commit", message)

    def push(self):
        self._record("push")
        self.dirty = False

    def discard(self):
        self.discarded = True
