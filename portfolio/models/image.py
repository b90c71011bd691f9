"""
Gallery image rows. Position 0 within a model is its featured image.
"""
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint
from sqlmodel import Field, Relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .portfolio_model import PortfolioModel


class Image(BaseModel, table=True):
    __tablename__ = "image"

    model_id: uuid.UUID = Field(
        sa_column=Column(
            ForeignKey("portfolio_model.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    position: int = Field(sa_column=Column(Integer, nullable=False))
    payload_ref: str = Field(sa_column=Column(String(255), nullable=False))

    model: "PortfolioModel" = Relationship(back_populates="images")

    __table_args__ = (
        UniqueConstraint("model_id", "position", name="uq_image_model_position"),
    )
