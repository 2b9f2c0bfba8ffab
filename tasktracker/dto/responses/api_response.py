from typing import Any

from pydantic import BaseModel


class ApiResponse(BaseModel):
    """Success envelope shared by every endpoint."""

    success: bool = True
    message: str | None = None
    data: Any = None
