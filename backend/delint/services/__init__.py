"""
Push-triggered lint remediation services
Clone, lint, commit, notify and report for one push at a time.
"""

from .change_committer import ChangeCommitter
from .github_service import GitHubService, StatusReporter
from .lint_runner import LintOutcome, LintRunner, SinglePassPolicy, TwoPhasePolicy
from .notification_service import NotificationDispatcher, SlackMessageClient
from .push_pipeline import PipelineState, PushPipeline, build_pipeline
from .workspace import RepositoryWorkspace, Workspace

__all__ = [
    "ChangeCommitter",
    "GitHubService",
    "LintOutcome",
    "LintRunner",
    "NotificationDispatcher",
    "PipelineState",
    "PushPipeline",
    "RepositoryWorkspace",
    "SinglePassPolicy",
    "SlackMessageClient",
    "StatusReporter",
    "TwoPhasePolicy",
    "Workspace",
    "build_pipeline",
]
