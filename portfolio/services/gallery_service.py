"""
Gallery service: ordered image collections per portfolio model.
"""
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, Sequence, TypeVar

from sqlmodel import Session, col, func, select

from portfolio.core.exceptions import (
    ConflictRetryableError,
    ConstraintViolationError,
    ForbiddenError,
    ItemNotFoundError,
    ModelNotFoundError,
    ValidationError,
)
from portfolio.core.logging_config import log_info, log_warning
from portfolio.models.image import Image
from portfolio.models.portfolio_model import PortfolioModel
from portfolio.services.collection_store import CollectionStore
from portfolio.services.featured_projector import FEATURED_POSITION, project
from portfolio.services.payload_store import PayloadStore
from portfolio.services.position_allocator import (
    plan_reassignment,
    target_from_order,
    validate_target,
)

_T = TypeVar("_T")


@dataclass(frozen=True)
class GalleryView:
    owner_id: uuid.UUID
    featured: Optional[Image] = None
    gallery: List[Image] = field(default_factory=list)


def retry_on_conflict(operation: Callable[[], _T], attempts: int = 3) -> _T:
    """Run ``operation`` again when it loses a concurrent write race.

    ``operation`` must re-read current state itself; every GalleryService
    mutation does.
    """
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except ConflictRetryableError:
            if attempt == attempts:
                raise
            log_warning(f"Gallery write conflict, retrying (attempt {attempt + 1}/{attempts})")
    raise ValueError("attempts must be at least 1")


class GalleryService:
    """Service class for gallery operations.

    Mutating calls require ``authorized=True``; the caller is expected to
    have evaluated the admin credential for this request.
    """

    def __init__(
        self,
        session: Session,
        *,
        authorized: bool = False,
        payload_store: Optional[PayloadStore] = None,
    ):
        self.session = session
        self.authorized = authorized
        self.payload_store = payload_store
        self.store = CollectionStore(session)

    def _require_authorized(self) -> None:
        if not self.authorized:
            raise ForbiddenError("Admin authorization required")

    def _get_owner(self, owner_id: uuid.UUID) -> PortfolioModel:
        owner = self.session.get(PortfolioModel, owner_id)
        if owner is None:
            raise ModelNotFoundError(owner_id)
        return owner

    def _next_position(self, owner_id: uuid.UUID) -> int:
        max_position = self.session.exec(
            select(func.max(Image.position)).where(Image.model_id == owner_id)
        ).one()
        return 0 if max_position is None else int(max_position) + 1

    def get_image(self, item_id: uuid.UUID) -> Image:
        image = self.session.get(Image, item_id)
        if image is None:
            raise ItemNotFoundError([item_id])
        return image

    def list_images(self, owner_id: uuid.UUID) -> List[Image]:
        statement = (
            select(Image)
            .where(Image.model_id == owner_id)
            .order_by(col(Image.position))
        )
        return list(self.session.exec(statement).all())

    def read(self, owner_id: uuid.UUID) -> GalleryView:
        """Featured image plus the rest of the gallery in position order."""
        self._get_owner(owner_id)
        projection = project(self.list_images(owner_id))
        return GalleryView(owner_id=owner_id, featured=projection.featured, gallery=projection.rest)

    def append(self, owner_id: uuid.UUID, payload_ref: str) -> Image:
        """Add an image after the current last one (at 0 for an empty gallery)."""
        self._require_authorized()
        if not payload_ref:
            raise ValidationError("payload_ref is required")

        image: Optional[Image] = None
        try:
            with self.store.transaction():
                self.store.lock_owner(owner_id)
                image = Image(
                    model_id=owner_id,
                    position=self._next_position(owner_id),
                    payload_ref=payload_ref,
                )
                self.session.add(image)
        except ConstraintViolationError as exc:
            # Another append took the same slot first.
            raise ConflictRetryableError(
                f"Concurrent append on model {owner_id}; retry"
            ) from exc

        self.session.refresh(image)
        log_info(f"Image appended: {image.id} at position {image.position}", model_id=owner_id)
        return image

    def upload(self, owner_id: uuid.UUID, data: bytes) -> Image:
        """Store ``data`` through the payload pipeline and append it."""
        self._require_authorized()
        if self.payload_store is None:
            raise RuntimeError("GalleryService was created without a payload store")
        self._get_owner(owner_id)
        payload_ref = self.payload_store.store_payload(data)
        return self.append(owner_id, payload_ref)

    def delete(self, owner_id: uuid.UUID, item_id: uuid.UUID) -> None:
        """Remove an image without compacting the rest.

        Deleting the featured image promotes the image with the next smallest
        position to position 0 in the same transaction.
        """
        self._require_authorized()
        promoted: Optional[uuid.UUID] = None
        with self.store.transaction():
            self.store.lock_owner(owner_id)
            image = self.session.exec(
                select(Image).where(Image.id == item_id, Image.model_id == owner_id)
            ).first()
            if image is None:
                raise ItemNotFoundError([item_id], owner_id)

            was_featured = image.position == FEATURED_POSITION
            self.session.delete(image)
            self.session.flush()

            if was_featured:
                current = self.store.current_positions(owner_id)
                if current:
                    promoted = min(current, key=lambda key: current[key])
                    plan = plan_reassignment(current, {promoted: FEATURED_POSITION})
                    self.store.stage_plan(owner_id, plan)

        log_info(f"Image deleted: {item_id}", model_id=owner_id)
        if promoted is not None:
            log_info(f"Image promoted to featured: {promoted}", model_id=owner_id)

    def reorder(self, owner_id: uuid.UUID, ordered_item_ids: Sequence[uuid.UUID]) -> GalleryView:
        """Place ``ordered_item_ids`` at positions 0..n-1; the first becomes featured."""
        self._require_authorized()
        if not ordered_item_ids:
            raise ValidationError("ordered_item_ids must not be empty")
        target = target_from_order(list(ordered_item_ids))
        return self._apply_target(owner_id, target)

    def reorder_partial(
        self,
        owner_id: uuid.UUID,
        explicit_positions: Mapping[uuid.UUID, int],
    ) -> GalleryView:
        """Move only the named images to the given positions."""
        self._require_authorized()
        if not explicit_positions:
            raise ValidationError("explicit_positions must not be empty")
        negative = [item_id for item_id, position in explicit_positions.items() if position < 0]
        if negative:
            raise ValidationError(f"Positions must be non-negative: {negative}")
        return self._apply_target(owner_id, dict(explicit_positions), require_featured=True)

    def _apply_target(
        self,
        owner_id: uuid.UUID,
        target: dict[uuid.UUID, int],
        *,
        require_featured: bool = False,
    ) -> GalleryView:
        # Read, validate and plan under the owner lock so a concurrent writer
        # cannot move images between the read and the write.
        with self.store.transaction():
            self.store.lock_owner(owner_id)
            current = self.store.current_positions(owner_id)
            self._validate_target(owner_id, current, target, require_featured=require_featured)
            plan = plan_reassignment(current, target)
            moved = self.store.stage_plan(owner_id, plan)

        if moved:
            log_info(f"Gallery reordered: {moved} image(s) moved", model_id=owner_id)
        return self.read(owner_id)

    @staticmethod
    def _validate_target(
        owner_id: uuid.UUID,
        current: Mapping[uuid.UUID, int],
        target: Mapping[uuid.UUID, int],
        *,
        require_featured: bool,
    ) -> None:
        unknown = [item_id for item_id in target if item_id not in current]
        if unknown:
            raise ItemNotFoundError(unknown, owner_id)
        validate_target(current, target)

        untouched = {
            position: item_id
            for item_id, position in current.items()
            if item_id not in target
        }
        clashes = sorted(position for position in target.values() if position in untouched)
        if clashes:
            raise ValidationError(
                f"Position(s) {clashes} are held by images not included in the request"
            )

        if require_featured and current:
            final = {**current, **target}
            if FEATURED_POSITION not in final.values():
                raise ValidationError("Reorder would leave the gallery without a featured image")
