"""
Pydantic schemas for companies.

A company is the business running one or more loyalty programs.  It
has a display name, the e-mail address of its administrator and an
optional logo URL.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import EMAIL_PATTERN, MODEL_CONFIG, URL_PATTERN, blank_to_none


class CompanyCreate(BaseModel):
    """Schema for creating a company."""

    name: str = Field(..., min_length=2, max_length=100, description="Company name")
    admin_email: str = Field(..., alias="adminEmail", pattern=EMAIL_PATTERN, description="Administrator e-mail")
    logo: Optional[str] = Field(None, pattern=URL_PATTERN, description="Logo URL")

    model_config = MODEL_CONFIG

    @field_validator("logo", mode="before")
    @classmethod
    def _blank_logo(cls, v):
        return blank_to_none(v)


class CompanyUpdate(CompanyCreate):
    """Schema for updating a company.

    Updates replace the company's name, administrator e-mail and logo,
    so the same fields are required as on creation.
    """
