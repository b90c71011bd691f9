"""
Portfolio model (the person whose images make up a gallery).
"""
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Column, Integer, String
from sqlmodel import Field, Index, Relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .image import Image


class PortfolioModel(BaseModel, table=True):
    """
    Owner of an ordered image collection. The featured image is never stored
    here; it is derived from the image at position 0.
    """
    __tablename__ = "portfolio_model"

    slug: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True, unique=True),
    )
    name: Optional[str] = Field(default=None, max_length=200)
    height: Optional[str] = Field(default=None, max_length=50)
    bust: Optional[str] = Field(default=None, max_length=50)
    waist: Optional[str] = Field(default=None, max_length=50)
    hips: Optional[str] = Field(default=None, max_length=50)
    shoe_size: Optional[str] = Field(default=None, max_length=50)
    hair_color: Optional[str] = Field(default=None, max_length=50)
    eye_color: Optional[str] = Field(default=None, max_length=50)
    instagram: Optional[str] = Field(default=None, max_length=200)
    display_order: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
    )

    images: List["Image"] = Relationship(
        back_populates="model",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "Image.position",
        },
    )

    __table_args__ = (
        Index("idx_portfolio_model_display_order", "display_order"),
    )
