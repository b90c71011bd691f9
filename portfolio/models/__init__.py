# Import all models for easy access
from .base import BaseModel
from .image import Image
from .portfolio_model import PortfolioModel

__all__ = [
    "BaseModel",
    "Image",
    "PortfolioModel",
]
