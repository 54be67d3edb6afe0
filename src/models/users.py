"""
Pydantic models for MongoDB 'users' collection.

The username doubles as the document `_id`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class UserProfile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str
    first_name: str
    last_name: str
    email: EmailStr


class User(UserProfile):
    password: str = Field(..., description="BCrypt password hash")

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        data = dict(doc)
        data["username"] = data.pop("_id")
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        doc = self.model_dump(by_alias=True)
        doc["_id"] = doc.pop("username")
        return doc

    def profile(self) -> UserProfile:
        return UserProfile.model_validate(self.model_dump(exclude={"password"}))
