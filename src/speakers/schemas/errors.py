"""Error envelope returned by the registered exception handlers."""

from pydantic import BaseModel


class ErrorObject(BaseModel):
    """A single error object."""

    status: str
    title: str
    detail: str | None = None
    source: dict[str, str] | None = None


class ErrorResponse(BaseModel):
    """Response envelope containing a list of errors."""

    errors: list[ErrorObject]
