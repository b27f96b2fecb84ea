"""
Request schemas for the contact form and the bathroom configurator.

The configurator models are deliberately permissive: nearly every field is
optional, numbers are nullable and unknown fields are kept. Contact data is
the only part with required fields.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import AnyUrl, BaseModel, ConfigDict, EmailStr, Field

# Accepts a URL, any non-empty string (relative asset paths) or ""
FlexibleUri = Union[AnyUrl, Annotated[str, Field(min_length=1)], Literal[""]]


class ContactFormSubmission(BaseModel):
    """Generic website contact form"""

    model_config = ConfigDict(extra="allow")

    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    service: Optional[str] = None
    subject: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    urgent: Optional[bool] = None


class EquipmentOption(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    imageUrl: Optional[FlexibleUri] = None
    selected: Optional[bool] = None


class PopupDetails(BaseModel):
    model_config = ConfigDict(extra="allow")

    options: Optional[list[EquipmentOption]] = None


class EquipmentItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    imageUrl: Optional[FlexibleUri] = None
    iconUrl: Optional[FlexibleUri] = None
    selected: Optional[bool] = None
    popupDetails: Optional[PopupDetails] = None


class QualityLevel(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    imageUrl: Optional[FlexibleUri] = None
    features: Optional[list[Any]] = None


class BathroomData(BaseModel):
    model_config = ConfigDict(extra="allow")

    bathroomSize: Optional[float] = Field(None, ge=0)
    equipment: Optional[list[EquipmentItem]] = None
    qualityLevel: Optional[QualityLevel] = None
    floorTiles: Optional[list[Any]] = None
    wallTiles: Optional[list[Any]] = None
    heating: Optional[list[Any]] = None


class ContactData(BaseModel):
    model_config = ConfigDict(extra="allow")

    salutation: Optional[str] = None
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None


class BathroomConfiguration(BaseModel):
    """Bathroom configurator submission"""

    model_config = ConfigDict(extra="allow")

    contactData: ContactData
    bathroomData: Optional[BathroomData] = None
    comments: Optional[str] = None
    additionalInfo: Optional[dict[str, Any]] = None


class ValidationIssue(BaseModel):
    field: str
    message: str
    value: Optional[Any] = None
