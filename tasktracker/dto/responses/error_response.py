from enum import Enum
from typing import Dict, List

from pydantic import BaseModel


class ApiErrorSource(Enum):
    PARAMETER = "parameter"
    PATH = "path"
    HEADER = "header"


class ApiErrorKind(Enum):
    INVALID_INPUT = "invalid-input"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not-found"
    CONFLICT = "conflict"
    INVALID_STATE = "invalid-state"
    INTERNAL = "internal"


class ApiErrorDetail(BaseModel):
    source: Dict[ApiErrorSource, str] | None = None
    title: str | None = None
    detail: str | None = None
    reason: str | None = None


class ApiErrorResponse(BaseModel):
    success: bool = False
    statusCode: int
    kind: ApiErrorKind
    message: str
    errors: List[ApiErrorDetail]
    correlationId: str | None = None
