"""
Change Committer
Persists autofix changes as a remediation commit
"""

from delint.core.config import settings
from delint.utils.logger import logger

DEFAULT_COMMIT_MESSAGE = "Automatic de-linting"


class ChangeCommitter:
    """Commits and pushes a workspace if, and only if, it is dirty"""

    def __init__(self, marker: str = None):
        self.marker = marker or settings.AUTOMATION_MARKER

    def tag(self, message: str) -> str:
        """Append the automation marker unless the message already carries it"""
        if self.marker in message:
            return message
        return f"{message}\n\n{self.marker}"

    def reconcile(self, workspace, branch: str, commit_message: str = DEFAULT_COMMIT_MESSAGE) -> bool:
        """
        Create branch, commit and push when the working tree has changes.

        Returns:
            True if a commit was pushed, False if the workspace was clean

        Raises:
            GitOperationError: from whichever git step failed; later steps are skipped
        """
        if workspace.is_clean().success:
            logger.info(f"[Committer] Working tree clean, nothing to commit on {branch}")
            return False

        workspace.create_branch(branch)
        workspace.commit(self.tag(commit_message))
        workspace.push()
        logger.info(f"[Committer] Pushed remediation commit to {branch}")
        return True
