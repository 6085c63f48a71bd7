"""
Repository Workspace
Ephemeral local working copies of GitHub repositories, one per push
"""

import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import git

from delint.core.config import settings
from delint.core.errors import CloneError, GitOperationError
from delint.utils.logger import logger

# Never block on a credential prompt
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


@dataclass(frozen=True)
class CleanStatus:
    success: bool


class Workspace:
    """A cloned repository checked out at one branch"""

    def __init__(self, repo: git.Repo, base_dir: Path, branch: str, timeout: float, secret: Optional[str] = None):
        self.repo = repo
        self.base_dir = Path(base_dir)
        self.branch = branch
        self.timeout = timeout
        self._secret = secret

    def file_exists(self, relative_path: str) -> bool:
        return (self.base_dir / relative_path).is_file()

    def is_clean(self) -> CleanStatus:
        """True iff there are no uncommitted changes, untracked files included"""
        return CleanStatus(success=not self.repo.is_dirty(untracked_files=True))

    def create_branch(self, name: str):
        # -B reuses the branch when it is the one already checked out
        self._run("checkout", "-B", name)
        self.branch = name

    def commit(self, message: str):
        self._run("add", "--all")
        self._run("commit", "-m", message)

    def push(self):
        self._run("push", "origin", f"HEAD:refs/heads/{self.branch}", kill_after_timeout=self.timeout)

    def discard(self):
        """Remove the working copy from disk"""
        self.repo.close()
        if self.base_dir.exists():
            shutil.rmtree(self.base_dir, ignore_errors=True)
            logger.debug(f"[Workspace] Discarded {self.base_dir}")

    def _run(self, *args, **kwargs) -> str:
        try:
            return self.repo.git.execute(["git", *args], env=GIT_ENV, **kwargs)
        except git.GitCommandError as e:
            message = scrub(f"git {args[0]} failed: {e.stderr or e}", self._secret)
            logger.error(f"[Workspace] {message}")
            raise GitOperationError(message) from e


class RepositoryWorkspace:
    """Clones repositories into fresh temporary directories"""

    def __init__(
        self,
        host: str = None,
        timeout: float = None,
        author_name: str = None,
        author_email: str = None,
        workspace_root: Optional[str] = None,
    ):
        self.host = host or settings.GITHUB_HOST
        self.timeout = timeout or settings.GIT_TIMEOUT_SECONDS
        self.author_name = author_name or settings.GIT_AUTHOR_NAME
        self.author_email = author_email or settings.GIT_AUTHOR_EMAIL
        self.workspace_root = workspace_root if workspace_root is not None else settings.WORKSPACE_ROOT

    def remote_url(self, token: str, owner: str, repo: str) -> str:
        return f"https://x-access-token:{token}@{self.host}/{owner}/{repo}.git"

    def clone(self, token: str, owner: str, repo: str, branch: str) -> Workspace:
        """
        Clone owner/repo at branch into a new temporary directory

        Raises:
            CloneError: repository or branch inaccessible, bad credential, or timeout
        """
        base_dir = Path(tempfile.mkdtemp(prefix="delint_repo_", dir=self.workspace_root))
        url = self.remote_url(token, owner, repo)

        logger.info(f"[Workspace] Cloning {owner}/{repo}@{branch} to {base_dir}")
        try:
            git.Git().execute(
                ["git", "clone", "--branch", branch, "--single-branch", url, str(base_dir)],
                env=GIT_ENV,
                kill_after_timeout=self.timeout,
            )
            cloned = git.Repo(base_dir)
        except (git.GitCommandError, git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            shutil.rmtree(base_dir, ignore_errors=True)
            detail = e.stderr if isinstance(e, git.GitCommandError) else str(e)
            message = scrub(f"Failed to clone {owner}/{repo}@{branch}: {detail.strip()}", token)
            logger.error(f"[Workspace] {message}")
            raise CloneError(message) from e

        with cloned.config_writer() as config:
            config.set_value("user", "name", self.author_name)
            config.set_value("user", "email", self.author_email)

        return Workspace(cloned, base_dir, branch, self.timeout, secret=token)


def scrub(text: str, secret: Optional[str]) -> str:
    """Mask a credential wherever it appears in text"""
    if secret:
        return text.replace(secret, "***")
    return text

