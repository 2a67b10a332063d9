"""
Pydantic Schemas for the Menu Data Model and Request/Response Validation

Field names are snake_case in Python and camelCase on the wire and in
the document store (backgroundImage, preparationTime, adminPassword...).
Models accept either spelling on input.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


MIN_PASSWORD_LENGTH = 4

# Ids are single path segments in the document store
ID_PATTERN = r"^[^/]+$"


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Dump to the camelCase dict stored in the document store."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# DATA MODEL
# =============================================================================

class WifiInfo(CamelModel):
    """Guest wifi credentials shown on the menu."""
    name: str
    password: str


class FooterInfo(CamelModel):
    """Footer texts; each one is optional."""
    welcome_text: Optional[str] = None
    price_note: Optional[str] = None
    copyright: Optional[str] = None


class RestaurantInfo(CamelModel):
    """Restaurant metadata, stored under the `info` key of the tenant document."""
    name: str = Field(..., min_length=1, examples=["QR Menü Demo Restoran"])
    logo: Optional[str] = None
    background_image: Optional[str] = None
    wifi: Optional[WifiInfo] = None
    footer: Optional[FooterInfo] = None


class MenuItem(CamelModel):
    """Single menu item, owned by exactly one category."""
    id: str = Field(..., min_length=1, pattern=ID_PATTERN)
    name: str
    description: str = ""
    price: float = Field(..., ge=0)
    image: Optional[str] = None
    available: bool = True
    preparation_time: Optional[str] = Field(None, examples=["15-20 dk"])
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: Optional[int] = Field(None, ge=0)


class MenuCategory(CamelModel):
    """Menu category with its nested items."""
    id: str = Field(..., min_length=1, pattern=ID_PATTERN)
    name: str
    description: Optional[str] = None
    order: int = 0
    items: List[MenuItem] = Field(default_factory=list)


class PublicRestaurantData(CamelModel):
    """Aggregate served to anonymous visitors (no admin secret)."""
    info: RestaurantInfo
    categories: List[MenuCategory] = Field(default_factory=list)


class RestaurantData(PublicRestaurantData):
    """Full aggregate: info, categories with items, and the admin secret."""
    admin_password: str

    def to_public(self) -> PublicRestaurantData:
        """Strip the admin secret."""
        return PublicRestaurantData(
            info=self.info.model_copy(deep=True),
            categories=[c.model_copy(deep=True) for c in self.categories],
        )


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RestaurantInfoUpdate(CamelModel):
    """Request body for replacing the restaurant info."""
    info: RestaurantInfo


class LoginRequest(CamelModel):
    """Admin login."""
    password: str = Field(..., min_length=1)


class PasswordChangeRequest(CamelModel):
    """Admin secret change; the current secret must match."""
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        return v


class CategoryCreate(CamelModel):
    """Request schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Tatlılar"])
    description: str = Field(..., min_length=1, max_length=500)


def _reject_null(v: Any) -> Any:
    """Partial updates may omit a required field but never clear it."""
    if v is None:
        raise ValueError("Field cannot be null")
    return v


class CategoryUpdate(CamelModel):
    """Partial category update; id and items are never accepted."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    order: Optional[int] = None

    @field_validator("name", "order")
    @classmethod
    def validate_not_null(cls, v: Any) -> Any:
        return _reject_null(v)


class MenuItemCreate(CamelModel):
    """Request schema for creating an item. Price must be strictly positive."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Kahve"])
    description: str = Field(..., min_length=1, max_length=500)
    price: float = Field(..., gt=0, examples=[25])
    image: Optional[str] = None
    available: Optional[bool] = None
    preparation_time: Optional[str] = Field(None, max_length=50)
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: Optional[int] = Field(None, ge=0)


class MenuItemUpdate(CamelModel):
    """Partial item update; the id field is never accepted."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Optional[float] = Field(None, gt=0)
    image: Optional[str] = None
    available: Optional[bool] = None
    preparation_time: Optional[str] = Field(None, max_length=50)
    rating: Optional[float] = Field(None, ge=0, le=5)
    review_count: Optional[int] = Field(None, ge=0)

    @field_validator("name", "description", "price", "available")
    @classmethod
    def validate_not_null(cls, v: Any) -> Any:
        return _reject_null(v)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class ActionResponse(BaseModel):
    """Generic success response for write endpoints."""
    success: bool = True
    message: str


class CategoryCreateResponse(ActionResponse):
    category: MenuCategory


class MenuItemCreateResponse(ActionResponse):
    item: MenuItem


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    store: str
    store_provider: str
    fallback_mode: str
    using_static_data: bool
    timestamp: datetime
