"""
Transactional application of position plans to image collections.
"""
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, func, select

from portfolio.core.db_utils import is_serialization_failure, normalize_uuid_list
from portfolio.core.exceptions import (
    ConflictRetryableError,
    ConstraintViolationError,
    GalleryError,
    ItemNotFoundError,
    ModelNotFoundError,
)
from portfolio.core.logging_config import log_debug, log_error, log_warning
from portfolio.core.time_utils import utc_now
from portfolio.models.image import Image
from portfolio.models.portfolio_model import PortfolioModel
from portfolio.services.position_allocator import ReassignmentPlan


class CollectionStore:
    """Applies reassignment plans atomically, scoped to one owning model."""

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit everything staged inside the block, or nothing.

        Database failures are translated into the gallery error taxonomy after
        rollback.
        """
        try:
            yield self.session
            self.session.commit()
        except GalleryError:
            self.session.rollback()
            raise
        except IntegrityError as exc:
            self.session.rollback()
            log_error(exc)
            raise ConstraintViolationError(
                "Image position uniqueness violated; transaction rolled back"
            ) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            if is_serialization_failure(exc):
                log_warning(f"Concurrent gallery write rejected: {exc}")
                raise ConflictRetryableError(
                    "Gallery was modified concurrently; reload and retry"
                ) from exc
            log_error(exc)
            raise

    def lock_owner(self, owner_id: uuid.UUID) -> PortfolioModel:
        """Take the owner's write lock for the rest of the transaction.

        ``FOR UPDATE`` locks the row where the store supports it. The row is
        also touched and flushed, which takes the database write lock on
        SQLite, where ``FOR UPDATE`` is ignored. Positions read after this
        call cannot change until the transaction ends.
        """
        owner = self.session.exec(
            select(PortfolioModel)
            .where(PortfolioModel.id == owner_id)
            .with_for_update()
        ).first()
        if owner is None:
            raise ModelNotFoundError(owner_id)
        owner.updated_at = utc_now()
        self.session.add(owner)
        self.session.flush()
        return owner

    def current_positions(self, owner_id: uuid.UUID) -> dict[uuid.UUID, int]:
        rows = self.session.exec(
            select(Image.id, Image.position).where(Image.model_id == owner_id)
        ).all()
        return {image_id: position for image_id, position in rows}

    def duplicate_positions(self, owner_id: uuid.UUID) -> List[int]:
        rows = self.session.exec(
            select(Image.position)
            .where(Image.model_id == owner_id)
            .group_by(col(Image.position))
            .having(func.count() > 1)
        ).all()
        return sorted(rows)

    def stage_plan(self, owner_id: uuid.UUID, plan: ReassignmentPlan) -> int:
        """Write every phase of ``plan`` without committing.

        Each phase is flushed before the next begins, so the store sees all
        placeholders in place before any final position is written.
        """
        if not plan:
            return 0

        ids = normalize_uuid_list(plan.item_ids)
        images = self.session.exec(
            select(Image).where(
                col(Image.model_id) == owner_id,
                col(Image.id).in_(ids),
            )
        ).all()
        image_map: dict[uuid.UUID, Image] = {image.id: image for image in images}
        missing = [item_id for item_id in ids if item_id not in image_map]
        if missing:
            raise ItemNotFoundError(missing, owner_id)

        for phase in plan.phases:
            for step in phase:
                image = image_map[step.item_id]
                image.position = step.position
                self.session.add(image)
            self.session.flush()

        duplicates = self.duplicate_positions(owner_id)
        if duplicates:
            raise ConstraintViolationError(
                f"Duplicate positions {duplicates} for model {owner_id} after applying plan"
            )
        log_debug(f"Staged {len(image_map)} position updates", model_id=owner_id)
        return len(image_map)

    def apply_plan(
        self,
        owner_id: uuid.UUID,
        plan: ReassignmentPlan,
        expected: Optional[Mapping[uuid.UUID, int]] = None,
    ) -> int:
        """Apply ``plan`` for ``owner_id`` as a single transaction.

        ``expected`` is the state the plan was computed from. When given, it
        is compared with the positions read under the owner lock and a
        mismatch raises ConflictRetryableError without writing.

        Returns the number of moved images.
        """
        if not plan:
            return 0
        with self.transaction():
            self.lock_owner(owner_id)
            if expected is not None and self.current_positions(owner_id) != dict(expected):
                raise ConflictRetryableError(
                    f"Gallery of model {owner_id} changed since the plan was built; retry"
                )
            moved = self.stage_plan(owner_id, plan)
        return moved
