"""
Menu Catalog Backend - Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract.
How:   Form fields are validated through MenuItemFields before they reach the
       repository; responses are serialized from ORM rows via from_attributes.

Validation policy:
    name, category: required, surrounding whitespace stripped, 1-255 chars
    price:          required, parsed from the form string, finite and >= 0
"""

import math
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError


# ══════════════════════════════════════════════════════════════════════════
# Input Models
# ══════════════════════════════════════════════════════════════════════════


class MenuItemFields(BaseModel):
    """
    What:  The editable fields of a menu item, shared by create and update.
    Who:   Built by the route handlers from multipart form values.
    """
    name: str = Field(max_length=255, description="Display name of the item")
    price: float = Field(description="Price as a non-negative number")
    category: str = Field(max_length=255, description="Category, matched exactly by filters")

    @field_validator("name", "category", mode="before")
    @classmethod
    def require_text(cls, v: Any, info: ValidationInfo) -> Any:
        """Rejects missing or blank text fields and strips whitespace."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(f"{info.field_name} is required")
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> float:
        """Parses the raw form string into a finite, non-negative float."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("price is required")
        try:
            value = float(v)
        except (TypeError, ValueError):
            raise ValueError(f"price must be a number, got '{v}'")
        if not math.isfinite(value):
            raise ValueError("price must be a finite number")
        if value < 0:
            raise ValueError("price must not be negative")
        return value

    @classmethod
    def from_form(
        cls,
        name: Optional[str],
        price: Optional[str],
        category: Optional[str],
    ) -> "MenuItemFields":
        """
        Validate raw form values.

        Raises:
            ValidationError (400) describing the first failing field.
        """
        try:
            return cls(name=name, price=price, category=category)
        except PydanticValidationError as e:
            errors = e.errors()
            first = errors[0]
            field = str(first["loc"][0]) if first.get("loc") else None
            message = first["msg"]
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            elif field:
                message = f"{field}: {message}"
            raise ValidationError(
                message=message,
                field=field,
                context={"error_count": len(errors)},
            )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MenuItemResponse(BaseModel):
    """
    What:  JSON shape of a menu item.
    Who:   Returned by every /menu-items endpoint except DELETE.

    image is the stored path ("uploads/<timestamp>-<name>"), which is also
    the URL path the file is served from.
    """
    id: int = Field(description="Server-generated identifier")
    name: str
    price: float
    category: str
    image: Optional[str] = Field(default=None, description="Stored image path or null")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. {"message": "Menu item deleted"}."""
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Error body returned by every failing request.

    Example:
        {"error": "Menu item not found"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
