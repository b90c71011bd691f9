"""
Portfolio model management endpoints.
"""
import uuid
from typing import Annotated, Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from portfolio.api.dependencies import require_admin
from portfolio.api.v1.endpoints.images import image_response
from portfolio.core.database import get_session
from portfolio.core.exceptions import ModelNotFoundError
from portfolio.core.logging_config import log_error
from portfolio.schemas.portfolio_model import (
    PortfolioModelCreate,
    PortfolioModelReorderRequest,
    PortfolioModelResponse,
    PortfolioModelUpdate,
    PortfolioModelWithGalleryResponse,
)
from portfolio.services.portfolio_model_service import PortfolioModelService, model_to_dict

router = APIRouter(prefix="/models", tags=["models"])


def _with_gallery_response(data: dict[str, Any]) -> PortfolioModelWithGalleryResponse:
    featured = data.pop("featured_image")
    gallery = data.pop("gallery")
    return PortfolioModelWithGalleryResponse(
        **data,
        featured_image=image_response(featured) if featured else None,
        gallery=[image_response(image) for image in gallery],
    )


@router.get(
    "/",
    response_model=List[PortfolioModelWithGalleryResponse],
)
async def list_models(
    session: Annotated[Session, Depends(get_session)],
):
    """
    List all models in display order, each with its featured image and gallery.
    """
    service = PortfolioModelService(session)
    return [_with_gallery_response(item) for item in service.list_models_with_galleries()]


@router.post(
    "/",
    response_model=PortfolioModelResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid model data"},
        401: {"description": "Not authenticated"},
    }
)
async def create_model(
    model_data: PortfolioModelCreate,
    _admin: Annotated[bool, Depends(require_admin)],
    session: Annotated[Session, Depends(get_session)],
):
    """Create a model. The slug is derived from the name when omitted."""
    service = PortfolioModelService(session)
    try:
        model = service.create_model(model_data)
        return model_to_dict(model)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        ) from e
    except Exception as e:
        log_error(e, request_id=None)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while creating model"
        ) from e


@router.put(
    "/reorder",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Invalid order"},
        401: {"description": "Not authenticated"},
    }
)
async def reorder_models(
    reorder_data: PortfolioModelReorderRequest,
    _admin: Annotated[bool, Depends(require_admin)],
    session: Annotated[Session, Depends(get_session)],
):
    """Set display order from the given list of model ids."""
    service = PortfolioModelService(session)
    try:
        service.reorder_models(reorder_data.model_ids)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        ) from e
    except Exception as e:
        log_error(e, request_id=None)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while reordering models"
        ) from e


@router.get(
    "/{model_id}",
    response_model=PortfolioModelWithGalleryResponse,
    responses={404: {"description": "Model not found"}},
)
async def get_model(
    model_id: uuid.UUID,
    session: Annotated[Session, Depends(get_session)],
):
    """Get a model with its featured image and gallery."""
    service = PortfolioModelService(session)
    try:
        return _with_gallery_response(service.get_model_with_gallery(model_id))
    except ModelNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Model not found"
        ) from None


@router.put(
    "/{model_id}",
    response_model=PortfolioModelResponse,
    responses={
        400: {"description": "Invalid model data"},
        401: {"description": "Not authenticated"},
        404: {"description": "Model not found"},
    }
)
async def update_model(
    model_id: uuid.UUID,
    model_data: PortfolioModelUpdate,
    _admin: Annotated[bool, Depends(require_admin)],
    session: Annotated[Session, Depends(get_session)],
):
    """Update model details. Images are managed through the gallery endpoints."""
    service = PortfolioModelService(session)
    try:
        model = service.update_model(model_id, model_data)
        return model_to_dict(model)
    except ModelNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Model not found"
        ) from None
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        ) from e
    except Exception as e:
        log_error(e, request_id=None)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating model"
        ) from e


@router.delete(
    "/{model_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Model not found"},
    }
)
async def delete_model(
    model_id: uuid.UUID,
    _admin: Annotated[bool, Depends(require_admin)],
    session: Annotated[Session, Depends(get_session)],
):
    """
    Delete a model.

    All of its images are deleted with it.
    """
    service = PortfolioModelService(session)
    try:
        service.delete_model(model_id)
    except ModelNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Model not found"
        ) from None
    except Exception as e:
        log_error(e, request_id=None)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while deleting model"
        ) from e
