"""
Handler result model
Terminal value of one pipeline invocation
"""
from typing import Optional

from pydantic import BaseModel


class HandlerResult(BaseModel):
    code: int = 0
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "HandlerResult":
        return cls(code=0)

    @classmethod
    def failure(cls, message: str, code: int = 1) -> "HandlerResult":
        return cls(code=code, message=message)

    @property
    def ok(self) -> bool:
        return self.code == 0
