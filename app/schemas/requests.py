"""
Request schemas for the video API.
"""

from pydantic import BaseModel, Field


class CreateVideoRequest(BaseModel):
    """Request body for creating a draft video record."""

    title: str = Field(..., min_length=1, max_length=255, description="Video title")
    description: str = Field(default="", description="Free-form video description")

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Boots on the ground",
                "description": "A short walkthrough of the new boot collection",
            }
        }
