"""
Pydantic schemas for loyalty programs.

Every program belongs to a company, is built from one of a fixed set
of templates and is joined by customers through an invite link.
"""

from typing import Literal

from pydantic import BaseModel, Field

from .common import MODEL_CONFIG, URL_PATTERN, UUID_PATTERN

Template = Literal["basic", "premium", "coffee", "retail", "restaurant", "beauty"]


class LoyaltyProgramCreate(BaseModel):
    """Schema for creating a loyalty program."""

    company_id: str = Field(..., alias="companyId", pattern=UUID_PATTERN, description="Owning company")
    name: str = Field(..., min_length=2, max_length=100)
    template: Template
    invite_link: str = Field(..., alias="inviteLink", pattern=URL_PATTERN)

    model_config = MODEL_CONFIG


class LoyaltyProgramUpdate(LoyaltyProgramCreate):
    """Schema for updating a loyalty program.

    The owning company cannot be changed; ``companyId`` is still
    validated so that clients can send the same body as on creation.
    """
