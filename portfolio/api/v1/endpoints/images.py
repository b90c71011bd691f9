"""
Gallery image endpoints: upload, delete, reorder and serve.
"""
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse

from portfolio.api.dependencies import get_admin_gallery_service, get_gallery_service
from portfolio.core.config import settings
from portfolio.core.exceptions import (
    ConflictRetryableError,
    ConstraintViolationError,
    ForbiddenError,
    GalleryError,
    NotFoundError,
    UpstreamFailureError,
    ValidationError,
)
from portfolio.core.logging_config import log_error
from portfolio.models.image import Image
from portfolio.schemas.image import (
    GalleryResponse,
    ImagePositionsRequest,
    ImageReorderRequest,
    ImageResponse,
)
from portfolio.services.gallery_service import GalleryService, GalleryView, retry_on_conflict

router = APIRouter(tags=["images"])


def image_response(image: Image) -> ImageResponse:
    response = ImageResponse.model_validate(image)
    response.content_url = f"{settings.api_v1_prefix}/images/{image.id}/content"
    return response


def _gallery_response(view: GalleryView) -> GalleryResponse:
    return GalleryResponse(
        model_id=view.owner_id,
        featured=image_response(view.featured) if view.featured else None,
        gallery=[image_response(image) for image in view.gallery],
    )


def _http_error(exc: GalleryError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, ForbiddenError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConflictRetryableError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, UpstreamFailureError):
        code = (
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
            if exc.too_large
            else status.HTTP_502_BAD_GATEWAY
        )
        return HTTPException(status_code=code, detail=str(exc))
    if isinstance(exc, ConstraintViolationError):
        log_error(exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Gallery consistency error",
    )


@router.get(
    "/models/{model_id}/gallery",
    response_model=GalleryResponse,
    responses={404: {"description": "Model not found"}},
)
async def get_gallery(
    model_id: uuid.UUID,
    service: Annotated[GalleryService, Depends(get_gallery_service)],
):
    """Featured image and the ordered remainder of a model's gallery."""
    try:
        return _gallery_response(service.read(model_id))
    except GalleryError as e:
        raise _http_error(e) from e


@router.post(
    "/models/{model_id}/images",
    response_model=ImageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Model not found"},
        409: {"description": "Concurrent modification"},
        413: {"description": "Upload too large"},
        502: {"description": "Image could not be processed"},
    }
)
async def upload_image(
    model_id: uuid.UUID,
    file: Annotated[UploadFile, File(...)],
    service: Annotated[GalleryService, Depends(get_admin_gallery_service)],
):
    """
    Upload an image and append it to the gallery.

    The first image uploaded to an empty gallery becomes the featured image.
    """
    data = await file.read()
    try:
        image = retry_on_conflict(
            lambda: service.upload(model_id, data),
            attempts=settings.reorder_retry_attempts,
        )
        return image_response(image)
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        log_error(e, request_id=None, model_id=model_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while uploading image"
        ) from e


@router.put(
    "/models/{model_id}/images/reorder",
    response_model=GalleryResponse,
    responses={
        400: {"description": "Invalid order"},
        401: {"description": "Not authenticated"},
        404: {"description": "Model or image not found"},
        409: {"description": "Concurrent modification"},
    }
)
async def reorder_images(
    model_id: uuid.UUID,
    reorder_data: ImageReorderRequest,
    service: Annotated[GalleryService, Depends(get_admin_gallery_service)],
):
    """Apply a new order; the first listed image becomes featured."""
    try:
        view = retry_on_conflict(
            lambda: service.reorder(model_id, reorder_data.image_ids),
            attempts=settings.reorder_retry_attempts,
        )
        return _gallery_response(view)
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        log_error(e, request_id=None, model_id=model_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while reordering images"
        ) from e


@router.patch(
    "/models/{model_id}/images/positions",
    response_model=GalleryResponse,
    responses={
        400: {"description": "Invalid positions"},
        401: {"description": "Not authenticated"},
        404: {"description": "Model or image not found"},
        409: {"description": "Concurrent modification"},
    }
)
async def update_image_positions(
    model_id: uuid.UUID,
    positions_data: ImagePositionsRequest,
    service: Annotated[GalleryService, Depends(get_admin_gallery_service)],
):
    """Move only the listed images to explicit positions."""
    explicit = {item.id: item.position for item in positions_data.updates}
    if len(explicit) != len(positions_data.updates):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Duplicate image ids in request"
        )
    try:
        view = retry_on_conflict(
            lambda: service.reorder_partial(model_id, explicit),
            attempts=settings.reorder_retry_attempts,
        )
        return _gallery_response(view)
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        log_error(e, request_id=None, model_id=model_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating image positions"
        ) from e


@router.delete(
    "/models/{model_id}/images/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Image not found"},
        409: {"description": "Concurrent modification"},
    }
)
async def delete_image(
    model_id: uuid.UUID,
    image_id: uuid.UUID,
    service: Annotated[GalleryService, Depends(get_admin_gallery_service)],
):
    """
    Delete an image.

    Remaining positions are not compacted. Deleting the featured image
    promotes the next image in order.
    """
    try:
        retry_on_conflict(
            lambda: service.delete(model_id, image_id),
            attempts=settings.reorder_retry_attempts,
        )
    except GalleryError as e:
        raise _http_error(e) from e
    except Exception as e:
        log_error(e, request_id=None, model_id=model_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while deleting image"
        ) from e


@router.get(
    "/images/{image_id}/content",
    response_class=FileResponse,
    responses={404: {"description": "Image not found"}},
)
async def get_image_content(
    image_id: uuid.UUID,
    service: Annotated[GalleryService, Depends(get_gallery_service)],
):
    """Serve the stored image blob."""
    try:
        image = service.get_image(image_id)
    except GalleryError as e:
        raise _http_error(e) from e
    if service.payload_store is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    try:
        path = service.payload_store.resolve(image.payload_ref)
    except ValueError as e:
        log_error(e, request_id=None, image_id=image_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found") from e
    if not path.exists():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image file missing")
    return FileResponse(
        path,
        media_type="image/webp",
        headers={"Cache-Control": "public, max-age=31536000, immutable"},
    )
