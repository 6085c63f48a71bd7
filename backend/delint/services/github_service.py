"""
GitHub Service - Handles GitHub API interactions
"""
import hmac
import hashlib
from typing import Optional, Dict
import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from delint.core.config import settings
from delint.core.errors import StatusReportError
from delint.utils.logger import logger

STATUS_CONTEXT = "linting/atomist"


def status_payload(exit_code: int) -> Dict[str, str]:
    passed = exit_code == 0
    return {
        "state": "success" if passed else "failure",
        "context": STATUS_CONTEXT,
        "description": f"Linting of TypeScript sources {'was successful' if passed else 'failed'}",
    }


class GitHubService:
    """Service for GitHub API operations"""

    def __init__(
        self,
        token: str = None,
        webhook_secret: Optional[str] = None,
        api_url: str = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token or settings.GITHUB_TOKEN
        self.webhook_secret = webhook_secret if webhook_secret is not None else settings.GITHUB_WEBHOOK_SECRET
        self.api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self.transport = transport

    def verify_webhook_signature(self, payload_body: bytes, signature_header: Optional[str]) -> bool:
        """
        Verify GitHub webhook signature
        Every payload is accepted when no secret is configured
        """
        if not self.webhook_secret:
            return True
        if not signature_header:
            return False

        # GitHub sends signature as 'sha256=...'
        hash_algorithm, _, github_signature = signature_header.partition("=")
        if hash_algorithm != "sha256" or not github_signature:
            return False

        mac = hmac.new(
            self.webhook_secret.encode(),
            msg=payload_body,
            digestmod=hashlib.sha256
        )
        expected_signature = mac.hexdigest()

        # Constant-time comparison to prevent timing attacks
        return hmac.compare_digest(expected_signature, github_signature)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, max=4),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def create_commit_status(self, owner: str, repo: str, sha: str, exit_code: int) -> httpx.Response:
        """
        POST a commit status for sha

        Raises:
            StatusReportError: GitHub answered with an error status
            httpx.TransportError: network failure, after retries
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/statuses/{sha}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                url,
                json=status_payload(exit_code),
                headers={
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"token {self.token}",
                },
            )

        if response.status_code >= 400:
            raise StatusReportError(
                f"GitHub rejected status for {owner}/{repo}@{sha[:7]}: "
                f"{response.status_code} {response.text[:200]}"
            )
        return response


class StatusReporter:
    """Best-effort commit status reporting"""

    def __init__(self, github: GitHubService):
        self.github = github

    async def report(self, owner: str, repo: str, sha: str, exit_code: int) -> bool:
        state = status_payload(exit_code)["state"]
        try:
            await self.github.create_commit_status(owner, repo, sha, exit_code)
        except Exception as e:
            logger.warning(
                f"[Status] Could not post '{state}' for {owner}/{repo}@{sha[:7]}: {e}",
                exc_info=not isinstance(e, (StatusReportError, httpx.HTTPError)),
            )
            return False

        logger.info(f"[Status] Posted '{state}' for {owner}/{repo}@{sha[:7]}")
        return True


# Global instance
github_service = GitHubService()
