"""
Admin Panel API Schemas.

Pydantic models for the ajax request/response bodies.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class SaveSettingsRequest(BaseModel):
    """Settings form submitted from the panel."""

    model_config = ConfigDict(populate_by_name=True)

    settings: dict[str, Any] = Field(
        default_factory=dict,
        alias="TSFE_ADMIN_PANEL",
        description="Module options, e.g. {'preview_simulate_date': '2024-01-01'}",
    )


class ToggleResponse(BaseModel):
    """Response after toggling the panel."""

    success: bool = Field(..., description="Whether the toggle was stored")
    open: bool = Field(..., description="New open state of the panel")


class SaveSettingsResponse(BaseModel):
    """Response after saving the settings form."""

    success: bool = Field(..., description="Whether the settings were stored")


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Error type identifier")
    message: str = Field(..., description="Human-readable error message")
    code: Optional[int] = Field(None, description="Stable error code")
