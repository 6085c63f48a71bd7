"""
Webhook Service
Turns GitHub push payloads into pipeline runs
"""
import asyncio
from typing import Dict, Optional

from delint.core.config import settings
from delint.models.push_event import ChatId, CommitAuthor, CommitRef, PushEvent
from delint.schemas.schemas import PushPayload
from delint.services.push_pipeline import PushPipeline, build_pipeline
from delint.utils.logger import logger

BRANCH_REF_PREFIX = "refs/heads/"


def to_push_event(payload: PushPayload, chat_identities: Dict[str, str]) -> PushEvent:
    """Build a PushEvent, resolving the author's chat identity from the configured map"""
    repository = payload.repository
    owner = repository.owner.login or repository.owner.name or repository.full_name.split("/")[0]

    head = payload.head_commit
    login = None
    if head is not None and head.author is not None:
        login = head.author.username
    if login is None and payload.sender is not None:
        login = payload.sender.login

    screen_name = chat_identities.get(login) if login else None

    return PushEvent(
        owner=owner,
        repo=repository.name,
        branch=payload.ref[len(BRANCH_REF_PREFIX):],
        before_sha=payload.before,
        after=CommitRef(
            sha=payload.after,
            message=head.message if head is not None else None,
            author=CommitAuthor(
                login=login,
                chat_id=ChatId(screen_name=screen_name) if screen_name else None,
            ),
        ),
    )


class WebhookService:

    def __init__(self, pipeline: Optional[PushPipeline] = None, chat_identities: Dict[str, str] = None, marker: str = None):
        self._pipeline = pipeline
        self.chat_identities = chat_identities if chat_identities is not None else settings.CHAT_IDENTITIES
        self.marker = marker or settings.AUTOMATION_MARKER
        self._tasks = set()

    @property
    def pipeline(self) -> PushPipeline:
        if self._pipeline is None:
            self._pipeline = build_pipeline(settings)
        return self._pipeline

    def skip_reason(self, payload: PushPayload) -> Optional[str]:
        if payload.deleted:
            return "Branch deleted"
        if not payload.ref.startswith(BRANCH_REF_PREFIX):
            return f"Not a branch push: {payload.ref}"
        if payload.head_commit is not None and self.marker in payload.head_commit.message:
            return "Automated remediation commit"
        return None

    async def process_push(self, payload: PushPayload) -> dict:
        reason = self.skip_reason(payload)
        if reason:
            logger.info(f"[Webhook] Ignoring push to {payload.repository.full_name}: {reason}")
            return {"status": "ignored", "message": reason}

        push = to_push_event(payload, self.chat_identities)
        self._schedule(push)

        return {
            "status": "accepted",
            "message": "Push queued for linting",
            "push": {
                "repository": push.full_name,
                "branch": push.branch,
                "commit": push.after.sha[:7],
            },
        }

    def _schedule(self, push: PushEvent):
        # Run in background; keep a reference until done
        task = asyncio.create_task(self.pipeline.handle(push))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


webhook_service = WebhookService()
