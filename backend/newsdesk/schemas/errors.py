"""Error payload returned by the global exception handler."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
