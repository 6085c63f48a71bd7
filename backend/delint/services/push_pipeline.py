"""
Push Pipeline
Sequences clone -> capability check -> lint -> commit -> notify -> status
for one push event
"""

import asyncio
from enum import Enum
from typing import List, Optional

from delint.core.config import Settings
from delint.core.errors import DelintError, GitOperationError, MissingConfigurationError
from delint.models.handler_result import HandlerResult
from delint.models.push_event import PushEvent
from delint.services.change_committer import DEFAULT_COMMIT_MESSAGE, ChangeCommitter
from delint.services.github_service import GitHubService, StatusReporter
from delint.services.lint_runner import LintOutcome, LintRunner
from delint.services.notification_service import NotificationDispatcher, SlackMessageClient
from delint.services.workspace import RepositoryWorkspace
from delint.utils.logger import logger


class PipelineState(str, Enum):
    CLONING = "cloning"
    CAPABILITY_CHECK = "capability_check"
    LINTING = "linting"
    RECONCILING = "reconciling"
    NOTIFYING = "notifying"
    REPORTING_STATUS = "reporting_status"
    DONE = "done"
    FAILED = "failed"


class PipelineRun:
    """State of a single invocation"""

    def __init__(self, push: PushEvent):
        self.push = push
        self.states: List[PipelineState] = []
        self.outcome: Optional[LintOutcome] = None
        self.committed = False
        self.notified = False
        self.status_reported = False
        self.result: Optional[HandlerResult] = None

    @property
    def state(self) -> Optional[PipelineState]:
        return self.states[-1] if self.states else None

    def enter(self, state: PipelineState):
        self.states.append(state)
        logger.debug(f"[Pipeline {self.push.full_name}] -> {state.value}")

    def finish(self):
        self.enter(PipelineState.DONE)
        self.result = HandlerResult.success()

    def fail(self, error: Exception):
        self.enter(PipelineState.FAILED)
        self.result = HandlerResult.failure(str(error) or error.__class__.__name__)


class PushPipeline:

    def __init__(
        self,
        token: str,
        workspaces: RepositoryWorkspace,
        lint_runner: LintRunner,
        committer: ChangeCommitter,
        notifier: NotificationDispatcher,
        status_reporter: StatusReporter,
        lint_config_file: str = "tslint.json",
        commit_message: str = DEFAULT_COMMIT_MESSAGE,
    ):
        self.token = token
        self.workspaces = workspaces
        self.lint_runner = lint_runner
        self.committer = committer
        self.notifier = notifier
        self.status_reporter = status_reporter
        self.lint_config_file = lint_config_file
        self.commit_message = commit_message

    async def handle(self, push: PushEvent) -> HandlerResult:
        run = await self.run(push)
        return run.result

    async def run(self, push: PushEvent) -> PipelineRun:
        run = PipelineRun(push)
        workspace = None
        logger.info(f"[Pipeline] Processing push to {push.full_name}@{push.branch} ({push.after.sha[:7]})")

        try:
            run.enter(PipelineState.CLONING)
            workspace = await asyncio.to_thread(
                self.workspaces.clone, self.token, push.owner, push.repo, push.branch
            )

            run.enter(PipelineState.CAPABILITY_CHECK)
            if not workspace.file_exists(self.lint_config_file):
                raise MissingConfigurationError(f"No '{self.lint_config_file}' found in project root")

            run.enter(PipelineState.LINTING)
            run.outcome = await self.lint_runner.run(workspace.base_dir)

            run.enter(PipelineState.RECONCILING)
            reconcile_error = None
            try:
                run.committed = await asyncio.to_thread(
                    self.committer.reconcile, workspace, push.branch, self.commit_message
                )
            except GitOperationError as e:
                reconcile_error = e

            if reconcile_error is None:
                run.enter(PipelineState.NOTIFYING)
                run.notified = await self.notifier.notify(push, run.outcome, workspace.base_dir)

            # Unconditional once linting produced an outcome
            run.enter(PipelineState.REPORTING_STATUS)
            run.status_reported = await self.status_reporter.report(
                push.owner, push.repo, push.after.sha, run.outcome.exit_code
            )

            if reconcile_error is not None:
                raise reconcile_error

            run.finish()
            logger.info(f"[Pipeline] Finished {push.full_name}@{push.branch} (lint exit {run.outcome.exit_code})")

        except DelintError as e:
            logger.error(f"[Pipeline] {push.full_name}@{push.branch} failed in {run.state.value}: {e}")
            run.fail(e)
        except Exception as e:
            logger.error(f"[Pipeline] Unexpected error for {push.full_name}@{push.branch}: {e}", exc_info=True)
            run.fail(e)
        finally:
            if workspace is not None:
                await asyncio.to_thread(workspace.discard)

        return run


def build_pipeline(settings: Settings) -> PushPipeline:
    """Wire a pipeline from application settings"""
    slack = None
    if settings.SLACK_BOT_TOKEN:
        slack = SlackMessageClient(
            settings.SLACK_BOT_TOKEN,
            api_url=settings.SLACK_API_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )

    github = GitHubService(
        token=settings.GITHUB_TOKEN,
        webhook_secret=settings.GITHUB_WEBHOOK_SECRET,
        api_url=settings.GITHUB_API_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )

    return PushPipeline(
        token=settings.GITHUB_TOKEN,
        workspaces=RepositoryWorkspace(
            host=settings.GITHUB_HOST,
            timeout=settings.GIT_TIMEOUT_SECONDS,
            author_name=settings.GIT_AUTHOR_NAME,
            author_email=settings.GIT_AUTHOR_EMAIL,
            workspace_root=settings.WORKSPACE_ROOT,
        ),
        lint_runner=LintRunner.from_settings(settings),
        committer=ChangeCommitter(settings.AUTOMATION_MARKER),
        notifier=NotificationDispatcher(slack),
        status_reporter=StatusReporter(github),
        lint_config_file=settings.LINT_CONFIG_FILE,
    )
