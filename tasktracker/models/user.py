from pydantic import Field, EmailStr, field_validator
from typing import ClassVar, Dict, Any
from datetime import datetime, timezone

from tasktracker.constants.team import UserRole
from tasktracker.models.common.document import Document
from tasktracker.models.common.pyobjectid import PyObjectId


class UserModel(Document):
    """
    Model for registered users. Accounts are created by the authentication
    service; this backend only reads them and never hard-deletes them.
    """

    collection_name: ClassVar[str] = "users"

    id: PyObjectId | None = Field(None, alias="_id")
    name: str
    email: EmailStr
    role: UserRole = UserRole.USER
    preferences: Dict[str, Any] = Field(default_factory=dict)
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    lastActive: datetime | None = None
    isDeleted: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value
