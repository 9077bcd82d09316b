"""
Pydantic models for loyalty program customers.

A customer is identified by an e-mail address, a phone number or
both; at least one of them is required.  ``loyaltyProgramId`` is not
stored on the user: when present on creation the new user is enrolled
in that program.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .common import EMAIL_PATTERN, MODEL_CONFIG, PHONE_PATTERN, URL_PATTERN, UUID_PATTERN, blank_to_none


class UserCreate(BaseModel):
    """Schema for registering a customer."""

    name: str = Field(..., min_length=2, max_length=50)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    birthday: Optional[date] = Field(None, description="ISO date, e.g. 1990-01-01")
    points: int = Field(0, ge=0)
    wallet_pass_url: Optional[str] = Field(None, alias="walletPassUrl", pattern=URL_PATTERN)
    loyalty_program_id: Optional[str] = Field(None, alias="loyaltyProgramId", pattern=UUID_PATTERN)

    model_config = MODEL_CONFIG

    @field_validator("email", "phone", "wallet_pass_url", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def _email_or_phone(self):
        if not self.email and not self.phone:
            raise ValueError("Either email or phone number is required")
        return self


class UserUpdate(UserCreate):
    """Schema for updating a customer.  Same rules as registration."""


class PointsOperation(BaseModel):
    """Body of the add/redeem points endpoints."""

    points: int = Field(..., ge=1, description="Number of points, at least 1")
    description: Optional[str] = Field(None, max_length=200)
