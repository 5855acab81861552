from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, conint, field_validator
from pydantic.alias_generators import to_camel

# Attribute names match column names; the JSON API speaks camelCase.

# Echoed back by react-admin, never written from a request body.
READ_ONLY = {"id", "created", "modified"}


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreatePayload(ApiModel):
    """Request body for POST: unknown keys rejected; ``id`` and the timestamps are tolerated and ignored."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[int] = Field(None, description="Ignored (react-admin echoes it)")

    def to_columns(self) -> Dict[str, Any]:
        return self.model_dump(exclude=READ_ONLY, exclude_none=True)


class UpdatePayload(CreatePayload):
    """
    Request body for PUT: every field optional.

    Non-nullable fields default to None without being nullable, so omitting
    them is fine but an explicit ``null`` fails validation.
    """

    def to_columns(self) -> Dict[str, Any]:
        return self.model_dump(exclude=READ_ONLY, exclude_unset=True)


# =========================
# Users
# =========================

class User(ApiModel):
    id: int
    firstname: str
    lastname: str
    email: str
    phone: Optional[str] = None
    admin: bool
    created: datetime
    modified: Optional[datetime] = None


class UserCreate(CreatePayload):
    firstname: str = Field(..., min_length=1, max_length=100)
    lastname: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, max_length=255, description="Password (min 8 chars)")
    phone: Optional[str] = Field(None, max_length=20)
    admin: bool = False
    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(UpdatePayload):
    firstname: str = Field(None, min_length=1, max_length=100)
    lastname: str = Field(None, min_length=1, max_length=100)
    email: EmailStr = Field(None)
    password: str = Field(None, min_length=8, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    admin: bool = Field(None)
    created: datetime = Field(None)
    modified: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


# =========================
# Auth
# =========================

class LoginRequest(ApiModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="Password")


class LoginResponse(ApiModel):
    token: str = Field(..., description="Signed session token (also set as cookie)")
    token_type: str = Field("bearer", description="Token type (bearer)")
    expires: datetime
    user: User


# =========================
# Addresses
# =========================

class Address(ApiModel):
    id: int
    address_line1: str
    address_line2: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    zip_code: Optional[int] = None
    id_user: int


class AddressCreate(CreatePayload):
    address_line1: str = Field(..., min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=200)
    country: Optional[str] = Field(None, max_length=200)
    zip_code: Optional[int] = None
    id_user: int


class AddressUpdate(UpdatePayload):
    address_line1: str = Field(None, min_length=1, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=200)
    country: Optional[str] = Field(None, max_length=200)
    zip_code: Optional[int] = None
    id_user: int = Field(None)


# =========================
# Status / Colors
# =========================

class Status(ApiModel):
    id: int
    name: str


class StatusCreate(CreatePayload):
    name: str = Field(..., min_length=1, max_length=100)


class StatusUpdate(UpdatePayload):
    name: str = Field(None, min_length=1, max_length=100)


_HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class Color(ApiModel):
    id: int
    name: str
    color_code: Optional[str] = None


class ColorCreate(CreatePayload):
    name: str = Field(..., min_length=1, max_length=100)
    color_code: Optional[str] = Field(None, pattern=_HEX_COLOR, description="Hex color, e.g. #A1B2C3")


class ColorUpdate(UpdatePayload):
    name: str = Field(None, min_length=1, max_length=100)
    color_code: Optional[str] = Field(None, pattern=_HEX_COLOR)


# =========================
# Catalog
# =========================

class Product(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    price_cents: int
    quantity: int
    id_status: Optional[int] = None
    id_color: Optional[int] = None
    created: datetime
    modified: Optional[datetime] = None


class ProductCreate(CreatePayload):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    price_cents: conint(ge=0) = Field(..., description="Price in cents")
    quantity: conint(ge=0) = 0
    id_status: Optional[int] = None
    id_color: Optional[int] = None
    created: Optional[datetime] = None
    modified: Optional[datetime] = None


class ProductUpdate(UpdatePayload):
    name: str = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    price_cents: conint(ge=0) = Field(None)
    quantity: conint(ge=0) = Field(None)
    id_status: Optional[int] = None
    id_color: Optional[int] = None
    created: datetime = Field(None)
    modified: Optional[datetime] = None


class Image(ApiModel):
    id: int
    name: str
    url: str
    description: Optional[str] = None
    id_product: Optional[int] = None


class ImageCreate(CreatePayload):
    name: str = Field(..., min_length=1, max_length=150)
    url: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=255)
    id_product: Optional[int] = None


class ImageUpdate(UpdatePayload):
    name: str = Field(None, min_length=1, max_length=150)
    url: str = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=255)
    id_product: Optional[int] = None


class Paragraph(ApiModel):
    id: int
    title: str
    content: str
    position: Optional[int] = None
    id_image: Optional[int] = None


class ParagraphCreate(CreatePayload):
    title: str = Field(..., min_length=1, max_length=150)
    content: str = Field(..., min_length=1)
    position: Optional[conint(ge=0)] = None
    id_image: Optional[int] = None


class ParagraphUpdate(UpdatePayload):
    title: str = Field(None, min_length=1, max_length=150)
    content: str = Field(None, min_length=1)
    position: Optional[conint(ge=0)] = None
    id_image: Optional[int] = None
