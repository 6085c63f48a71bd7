"""
Push event model
Immutable description of one push, as handed to the pipeline
"""
from typing import Optional

from pydantic import BaseModel


class ChatId(BaseModel):
    screen_name: str

    class Config:
        frozen = True


class CommitAuthor(BaseModel):
    login: Optional[str] = None  # GitHub login
    chat_id: Optional[ChatId] = None

    class Config:
        frozen = True


class CommitRef(BaseModel):
    sha: str
    message: Optional[str] = None
    author: Optional[CommitAuthor] = None

    class Config:
        frozen = True


class PushEvent(BaseModel):
    owner: str  # Repository owner (e.g. "acme")
    repo: str  # Repository name (e.g. "widgets")
    branch: str
    before_sha: Optional[str] = None
    after: CommitRef

    class Config:
        frozen = True

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def author_chat_identity(self) -> Optional[str]:
        """Chat screen name of the pushing author, if one could be resolved"""
        author = self.after.author
        if author is None or author.chat_id is None:
            return None
        return author.chat_id.screen_name or None
