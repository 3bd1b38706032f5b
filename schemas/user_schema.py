"""Schemas for users, authentication requests and profile updates."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.common import CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def clean_allergies(values: Optional[List[str]]) -> List[str]:
    """Strip whitespace, drop blanks and repeated entries, keep order."""
    out: List[str] = []
    seen = set()
    for item in values or []:
        text = item.strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            out.append(text)
    return out


class UserRecord(CamelModel):
    """A stored user. Carries the password hash, so never return it directly."""

    id: int
    username: str
    email: str
    password_hash: str
    name: Optional[str] = None
    allergies: List[str] = Field(default_factory=list)

    def to_public(self) -> "UserPublic":
        return UserPublic.model_validate(self.model_dump(exclude={"password_hash"}))


class UserPublic(CamelModel):
    """User as exposed over the API: everything except credentials."""

    id: int
    username: str
    email: str
    name: Optional[str] = None
    allergies: List[str] = Field(default_factory=list)


class UserResponse(BaseModel):
    """Envelope returned by the auth endpoints."""

    user: UserPublic


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=3, examples=["demo"])
    password: str = Field(..., min_length=6, examples=["password123"])


class RegisterRequest(CamelModel):
    """Registration payload. Password confirmation is checked by the auth service."""

    username: str = Field(..., min_length=3, max_length=64, examples=["demo"])
    email: str = Field(..., pattern=EMAIL_PATTERN, examples=["demo@example.com"])
    password: str = Field(..., min_length=6, examples=["password123"])
    confirm_password: str = Field(..., min_length=6, examples=["password123"])
    name: Optional[str] = Field(None, examples=["John Doe"])
    allergies: Optional[List[str]] = Field(default=None, examples=[["peanuts", "shellfish"]])

    @field_validator("username", "email")
    @classmethod
    def strip_identity(cls, value: str) -> str:
        return value.strip()

    @field_validator("allergies")
    @classmethod
    def normalize_allergies(cls, value: Optional[List[str]]) -> List[str]:
        return clean_allergies(value)


class UpdateProfileRequest(CamelModel):
    """Partial profile update; omitted fields stay as they are."""

    name: Optional[str] = None
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    new_password: Optional[str] = Field(None, min_length=6)


class UpdateAllergiesRequest(CamelModel):
    allergies: List[str] = Field(..., examples=[["peanuts"]])

    @field_validator("allergies")
    @classmethod
    def normalize_allergies(cls, value: List[str]) -> List[str]:
        return clean_allergies(value)
