"""
Shared FastAPI dependencies.
"""
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from portfolio.core.database import get_session
from portfolio.core.security import is_authorized
from portfolio.services.gallery_service import GalleryService
from portfolio.services.payload_store import PayloadStore

ADMIN_PROOF_HEADER = "X-Admin-Proof"


def get_payload_store() -> PayloadStore:
    return PayloadStore.from_settings()


def require_admin(
    x_admin_proof: Annotated[Optional[str], Header(alias=ADMIN_PROOF_HEADER)] = None,
) -> bool:
    """Reject the request unless it carries a valid admin proof."""
    if not x_admin_proof:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin proof is required",
        )
    if not is_authorized(x_admin_proof):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin proof",
        )
    return True


def get_gallery_service(
    session: Annotated[Session, Depends(get_session)],
    payload_store: Annotated[PayloadStore, Depends(get_payload_store)],
) -> GalleryService:
    """Read-only gallery service; mutating endpoints use get_admin_gallery_service."""
    return GalleryService(session, payload_store=payload_store)


def get_admin_gallery_service(
    authorized: Annotated[bool, Depends(require_admin)],
    session: Annotated[Session, Depends(get_session)],
    payload_store: Annotated[PayloadStore, Depends(get_payload_store)],
) -> GalleryService:
    return GalleryService(session, authorized=authorized, payload_store=payload_store)
