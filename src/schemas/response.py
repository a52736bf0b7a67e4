"""
Uniform response envelope.

Every endpoint answers ``{code, message, data?}``; the paged listing also
carries ``total``, ``pages``, ``current`` and ``size``. Keys whose value is
None are left out of the body.
"""

from typing import Any, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None
    total: Optional[int] = None
    pages: Optional[int] = None
    current: Optional[int] = None
    size: Optional[int] = None

    @classmethod
    def success(cls, message: str, data: Any = None):
        return cls(code=200, message=message, data=data)

    @classmethod
    def fail(cls, code: int, message: str):
        return cls(code=code, message=message)

    @classmethod
    def page(cls, message: str, data: list, total: int, pages: int, current: int, size: int):
        return cls(
            code=200,
            message=message,
            data=data,
            total=total,
            pages=pages,
            current=current,
            size=size,
        )

    def body(self) -> dict:
        """JSON-compatible dict without the unset keys."""
        payload = {
            key: value
            for key, value in self.model_dump(mode="json").items()
            if value is not None
        }
        return payload
