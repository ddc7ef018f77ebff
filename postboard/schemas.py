# postboard/schemas.py

from datetime import datetime
from typing import Any
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


MAX_EMAIL_LENGTH = 255


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _check_email_length(value: str) -> str:
    if len(value) > MAX_EMAIL_LENGTH:
        raise ValueError(f"The email may not be greater than {MAX_EMAIL_LENGTH} characters.")
    return value


# ---------- Requests ----------

class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=8, max_length=4096)
    password_confirmation: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, value):
        return _check_email_length(value)

    @model_validator(mode="after")
    def check_password_confirmed(self):
        if self.password != self.password_confirmation:
            raise ValueError("The password field confirmation does not match.")
        return self


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class ProfileUpdateIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str | None = Field(None, min_length=8, max_length=4096)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, value):
        return _check_email_length(value)

    @field_validator("password", mode="before")
    @classmethod
    def blank_password_means_unchanged(cls, value):
        # an empty password field means "keep the current one"
        if isinstance(value, str) and not value:
            return None
        return value


# ---------- Responses ----------

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    image: str | None = None
    image_url: str | None = None
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    data: dict[str, Any]
    read_at: datetime | None = None
    created_at: datetime | None = None
