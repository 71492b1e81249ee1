from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from datetime import datetime


class LinkCreate(BaseModel):
    """Schema for creating a new short link"""
    # Left untyped so that bad values are rejected with the API's own
    # "Invalid URL" and "Invalid custom code format" errors
    target: Any = Field(None, description="Original URL to shorten")
    code: Any = Field(None, description="Custom short code, 3-10 letters or digits")


class LinkResponse(BaseModel):
    """Schema for link response"""
    model_config = ConfigDict(from_attributes=True)

    code: str
    target: str
    created_at: datetime
    clicks: int
    last_clicked: Optional[datetime] = None


class LinkPreview(BaseModel):
    """Schema for previewing a link without counting a click"""
    model_config = ConfigDict(from_attributes=True)

    code: str
    target: str
    clicks: int
    last_clicked: Optional[datetime] = None


class DeleteResponse(BaseModel):
    success: bool = True
