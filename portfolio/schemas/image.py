"""
Image and gallery schemas.
"""
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: uuid.UUID
    model_id: uuid.UUID
    position: int
    payload_ref: str
    created_at: datetime
    content_url: Optional[str] = None


class GalleryResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: uuid.UUID
    featured: Optional[ImageResponse] = None
    gallery: List[ImageResponse] = []


class ImageReorderRequest(BaseModel):
    image_ids: List[uuid.UUID] = Field(..., min_length=1)


class ImagePositionUpdate(BaseModel):
    id: uuid.UUID
    position: int = Field(..., ge=0)


class ImagePositionsRequest(BaseModel):
    updates: List[ImagePositionUpdate] = Field(..., min_length=1)
