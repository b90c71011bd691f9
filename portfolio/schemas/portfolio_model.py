"""
Portfolio model schemas.
"""
import uuid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from portfolio.schemas.image import ImageResponse

STAT_FIELDS = ("height", "bust", "waist", "hips", "shoe_size", "hair_color", "eye_color")


class ModelStats(BaseModel):
    height: str = ""
    bust: str = ""
    waist: str = ""
    hips: str = ""
    shoe_size: str = ""
    hair_color: str = ""
    eye_color: str = ""


class PortfolioModelCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    stats: Optional[ModelStats] = None
    instagram: Optional[str] = Field(None, max_length=200)
    display_order: Optional[int] = None


class PortfolioModelUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    stats: Optional[ModelStats] = None
    instagram: Optional[str] = Field(None, max_length=200)


class PortfolioModelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    slug: Optional[str] = None
    name: Optional[str] = None
    stats: ModelStats = ModelStats()
    instagram: Optional[str] = None
    display_order: int = 0


class PortfolioModelWithGalleryResponse(PortfolioModelResponse):
    featured_image: Optional[ImageResponse] = None
    gallery: List[ImageResponse] = []


class PortfolioModelReorderRequest(BaseModel):
    model_ids: List[uuid.UUID] = Field(..., min_length=1)

    model_config = ConfigDict(protected_namespaces=())
