# app/schemas/lead.py
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

LeadType = Literal["customer", "caregiver"]


class LeadCreate(SQLModel):
    """
    Lead-capture form from the marketing site.

    Validation rules:
      - type is customer | caregiver
      - name and phone cannot be empty or whitespace
      - email must be a valid EmailStr
      - message is optional; blank becomes None
    """

    model_config = ConfigDict(extra="forbid")

    type: LeadType
    name: str = Field(max_length=200)
    email: EmailStr
    phone: str = Field(max_length=50)
    message: str | None = Field(default=None, max_length=5000)

    @field_validator("name", "phone")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("message")
    @classmethod
    def normalize_message(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class LeadResult(SQLModel):
    success: bool
    message: str | None = None
    error: str | None = None
