"""
Portfolio model service: model records, slugs and listing order.
"""
import re
import uuid
from typing import Any, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, func, select

from portfolio.core.exceptions import ModelNotFoundError
from portfolio.core.logging_config import log_error, log_info
from portfolio.models.portfolio_model import PortfolioModel
from portfolio.schemas.portfolio_model import (
    STAT_FIELDS,
    PortfolioModelCreate,
    PortfolioModelUpdate,
)
from portfolio.services.featured_projector import project

_SLUG_STRIP_RE = re.compile(r"[^\w\s-]")
_SLUG_SEPARATOR_RE = re.compile(r"[\s_-]+")


def generate_slug(name: str) -> str:
    """Lowercase, hyphen-separated slug: "Anna  Maria!" -> "anna-maria"."""
    slug = _SLUG_STRIP_RE.sub("", name.lower().strip())
    slug = _SLUG_SEPARATOR_RE.sub("-", slug)
    return slug.strip("-")


def model_to_dict(model: PortfolioModel) -> dict[str, Any]:
    return {
        "id": model.id,
        "slug": model.slug,
        "name": model.name,
        "stats": {field: getattr(model, field) or "" for field in STAT_FIELDS},
        "instagram": model.instagram,
        "display_order": model.display_order,
    }


class PortfolioModelService:
    """Service class for portfolio model operations."""

    def __init__(self, session: Session):
        self.session = session

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            log_error(exc)
            raise ValueError("Model slug already exists") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            log_error(exc)
            raise

    def _slug_taken(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        statement = select(PortfolioModel.id).where(PortfolioModel.slug == slug)
        if exclude_id is not None:
            statement = statement.where(PortfolioModel.id != exclude_id)
        return self.session.exec(statement).first() is not None

    def _unique_slug(self, base: str) -> str:
        candidate = base
        counter = 1
        while self._slug_taken(candidate):
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate

    def _next_display_order(self) -> int:
        max_order = self.session.exec(select(func.max(PortfolioModel.display_order))).one()
        return 0 if max_order is None else int(max_order) + 1

    def create_model(self, data: PortfolioModelCreate) -> PortfolioModel:
        slug = data.slug
        if slug:
            if self._slug_taken(slug):
                raise ValueError(f"Model with slug '{slug}' already exists")
        elif data.name:
            slug = self._unique_slug(generate_slug(data.name)) or None

        stats = data.stats.model_dump() if data.stats else {}
        model = PortfolioModel(
            slug=slug,
            name=data.name,
            instagram=data.instagram,
            display_order=(
                data.display_order if data.display_order is not None else self._next_display_order()
            ),
            **{field: stats.get(field) or None for field in STAT_FIELDS},
        )
        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        log_info(f"Model created: {model.id} ({model.slug})")
        return model

    def get_model(self, model_id: uuid.UUID) -> PortfolioModel:
        model = self.session.get(PortfolioModel, model_id)
        if model is None:
            raise ModelNotFoundError(model_id)
        return model

    def get_model_by_slug(self, slug: str) -> PortfolioModel:
        model = self.session.exec(
            select(PortfolioModel).where(PortfolioModel.slug == slug)
        ).first()
        if model is None:
            raise ModelNotFoundError(slug)
        return model

    def get_model_with_gallery(self, model_id: uuid.UUID) -> dict[str, Any]:
        model = self.get_model(model_id)
        return self._with_gallery(model)

    def list_models_with_galleries(self) -> List[dict[str, Any]]:
        """All models in display order, each flattened into featured + gallery."""
        statement = (
            select(PortfolioModel)
            .options(selectinload(PortfolioModel.images))  # type: ignore[arg-type]
            .order_by(col(PortfolioModel.display_order), col(PortfolioModel.name))
        )
        return [self._with_gallery(model) for model in self.session.exec(statement).all()]

    def _with_gallery(self, model: PortfolioModel) -> dict[str, Any]:
        projection = project(list(model.images))
        return {
            **model_to_dict(model),
            "featured_image": projection.featured,
            "gallery": projection.rest,
        }

    def update_model(self, model_id: uuid.UUID, data: PortfolioModelUpdate) -> PortfolioModel:
        model = self.get_model(model_id)
        update_data = data.model_dump(exclude_unset=True, exclude={"stats"})
        if update_data.get("slug") and self._slug_taken(update_data["slug"], exclude_id=model_id):
            raise ValueError(f"Model with slug '{update_data['slug']}' already exists")
        for key, value in update_data.items():
            setattr(model, key, value)
        if data.stats is not None:
            for field, value in data.stats.model_dump().items():
                setattr(model, field, value or None)

        self.session.add(model)
        self._commit()
        self.session.refresh(model)
        log_info(f"Model updated: {model_id}")
        return model

    def delete_model(self, model_id: uuid.UUID) -> None:
        """Delete a model; its images go with it."""
        model = self.get_model(model_id)
        try:
            self.session.delete(model)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            log_error(exc)
            raise
        else:
            log_info(f"Model deleted: {model_id}")

    def reorder_models(self, ordered_ids: Sequence[uuid.UUID]) -> int:
        """Set display_order to each model's index in ``ordered_ids``.

        display_order carries no uniqueness constraint, so values are written
        directly. Unknown ids are skipped; returns the number of updated models.
        """
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValueError("Duplicate model ids in reorder request")
        if not ordered_ids:
            return 0
        order = {model_id: index for index, model_id in enumerate(ordered_ids)}
        models = self.session.exec(
            select(PortfolioModel).where(col(PortfolioModel.id).in_(list(order)))
        ).all()
        for model in models:
            model.display_order = order[model.id]
            self.session.add(model)
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            log_error(exc)
            raise

        updated = len(models)
        if updated:
            log_info(f"Models reordered: {updated} updated")
        return updated
