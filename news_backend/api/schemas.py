from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ArticleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    published_at: Optional[datetime] = Field(default=None, alias="publishedAt")

    @field_serializer("published_at")
    def serialize_published_at(self, value: Optional[datetime]) -> Optional[datetime]:
        # Stored as naive UTC; send an explicit UTC instant
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ArticleCreateRequest(BaseModel):
    """Manually added article; publishedAt is set server-side"""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class VolunteerMessageRequest(BaseModel):
    # Validated inside the handler so that malformed submissions get a 400, not a 422
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
