"""
Pydantic schemas for digital wallet passes.

Passes follow the Apple Wallet layout: a pass type, colours, groups of
display fields and a list of barcodes.  ``fields`` and ``barcodes``
are stored JSON-encoded and decoded again on the way out.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .common import HEX_COLOR_PATTERN, MODEL_CONFIG, UUID_PATTERN

PassType = Literal["storeCard", "coupon", "eventTicket", "generic", "boardingPass"]
BarcodeFormat = Literal[
    "PKBarcodeFormatQR",
    "PKBarcodeFormatPDF417",
    "PKBarcodeFormatAztec",
    "PKBarcodeFormatCode128",
]


class PassFields(BaseModel):
    headerFields: Optional[List[Dict[str, Any]]] = None
    primaryFields: Optional[List[Dict[str, Any]]] = None
    secondaryFields: Optional[List[Dict[str, Any]]] = None
    auxiliaryFields: Optional[List[Dict[str, Any]]] = None
    backFields: Optional[List[Dict[str, Any]]] = None


class Barcode(BaseModel):
    format: BarcodeFormat
    message: str
    messageEncoding: str = "iso-8859-1"


class WalletPassCreate(BaseModel):
    """Schema for creating a wallet pass."""

    pass_type_identifier: Optional[str] = Field(None, alias="passTypeIdentifier", pattern=r"^pass\.[\w.]+$")
    organization_name: str = Field(..., alias="organizationName", min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    serial_number: Optional[str] = Field(None, alias="serialNumber")
    pass_type: PassType = Field("storeCard", alias="passType")
    background_color: str = Field("#1976D2", alias="backgroundColor", pattern=HEX_COLOR_PATTERN)
    foreground_color: str = Field("#FFFFFF", alias="foregroundColor", pattern=HEX_COLOR_PATTERN)
    pass_fields: Optional[PassFields] = Field(None, alias="fields")
    barcodes: Optional[List[Barcode]] = None
    logo: Optional[str] = None
    company_id: Optional[str] = Field(None, alias="companyId", pattern=UUID_PATTERN)
    loyalty_program_id: Optional[str] = Field(None, alias="loyaltyProgramId", pattern=UUID_PATTERN)

    model_config = MODEL_CONFIG


class WalletPassUpdate(BaseModel):
    """Schema for updating a wallet pass.

    All fields are optional; only provided values are changed.
    """

    organization_name: Optional[str] = Field(None, alias="organizationName", min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    pass_type: Optional[PassType] = Field(None, alias="passType")
    background_color: Optional[str] = Field(None, alias="backgroundColor", pattern=HEX_COLOR_PATTERN)
    foreground_color: Optional[str] = Field(None, alias="foregroundColor", pattern=HEX_COLOR_PATTERN)
    pass_fields: Optional[PassFields] = Field(None, alias="fields")
    barcodes: Optional[List[Barcode]] = None
    logo: Optional[str] = None
    company_id: Optional[str] = Field(None, alias="companyId", pattern=UUID_PATTERN)
    loyalty_program_id: Optional[str] = Field(None, alias="loyaltyProgramId", pattern=UUID_PATTERN)

    model_config = MODEL_CONFIG


class PassAssignment(BaseModel):
    """Body of ``POST /passes/{id}/assign``."""

    user_id: str = Field(..., alias="userId", min_length=1)

    model_config = MODEL_CONFIG
