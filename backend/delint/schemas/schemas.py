"""
Pydantic schemas for request/response validation
"""
from pydantic import BaseModel
from typing import Optional, List

# GitHub webhook schemas
class CommitAuthor(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None

class Commit(BaseModel):
    id: str
    message: str = ""
    author: Optional[CommitAuthor] = None
    added: List[str] = []
    modified: List[str] = []
    removed: List[str] = []

class Owner(BaseModel):
    login: Optional[str] = None
    name: Optional[str] = None

class Repository(BaseModel):
    name: str
    full_name: str
    owner: Owner

class Sender(BaseModel):
    login: str

class PushPayload(BaseModel):
    ref: str
    before: Optional[str] = None
    after: str
    deleted: bool = False
    repository: Repository
    commits: List[Commit] = []
    head_commit: Optional[Commit] = None
    sender: Optional[Sender] = None
