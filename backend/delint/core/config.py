"""
Application configuration management
"""
import shlex
from pathlib import Path
from typing import Dict, Literal, Optional

from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Application
    APP_NAME: str = "delint - Automatic TypeScript de-linting"
    DEBUG: bool = False

    # GitHub
    GITHUB_TOKEN: str
    GITHUB_WEBHOOK_SECRET: Optional[str] = None
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_HOST: str = "github.com"

    # Slack
    SLACK_BOT_TOKEN: Optional[str] = None
    SLACK_API_URL: str = "https://slack.com/api"
    # GitHub login -> chat screen name (JSON object in the environment)
    CHAT_IDENTITIES: Dict[str, str] = {}

    # Linting
    LINT_POLICY: Literal["single_pass", "two_phase"] = "single_pass"
    LINT_CONFIG_FILE: str = "tslint.json"
    LINT_SCRIPT: str = f"bash {shlex.quote(str(PROJECT_ROOT / 'scripts' / 'run-lint.bash'))}"
    LINT_CHECK_COMMAND: str = "npm run lint"
    LINT_FIX_COMMAND: str = "npm run lint:fix"
    LINT_TIMEOUT_SECONDS: float = 600

    # Git
    GIT_TIMEOUT_SECONDS: float = 300
    GIT_AUTHOR_NAME: str = "delint"
    GIT_AUTHOR_EMAIL: str = "delint@users.noreply.github.com"
    AUTOMATION_MARKER: str = "[auto-delint]"
    WORKSPACE_ROOT: Optional[str] = None  # defaults to the system temp dir

    HTTP_TIMEOUT_SECONDS: float = 10

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env

# Global settings instance
settings = Settings()
