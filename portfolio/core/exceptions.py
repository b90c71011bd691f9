"""
Typed failures raised by the gallery core.

Transport layers map these to responses; nothing here knows about HTTP.
"""
from typing import Any, Iterable, Optional


class GalleryError(Exception):
    """Base class for every failure the gallery core reports."""


class ValidationError(GalleryError):
    """Malformed or inconsistent client input. Rejected before any write."""


class ForbiddenError(GalleryError):
    """A mutating call was made without a successful authorization check."""


class NotFoundError(GalleryError):
    """A referenced owner or item does not exist."""


class ModelNotFoundError(NotFoundError):
    """Raised when a portfolio model is not found."""

    def __init__(self, model_id: Any):
        super().__init__(f"Model {model_id} not found")
        self.model_id = model_id


class ItemNotFoundError(NotFoundError):
    """Raised when images are missing or belong to another model."""

    def __init__(self, item_ids: Iterable[Any], owner_id: Optional[Any] = None):
        self.item_ids = list(item_ids)
        self.owner_id = owner_id
        joined = ", ".join(str(item_id) for item_id in self.item_ids)
        scope = f" for model {owner_id}" if owner_id is not None else ""
        super().__init__(f"Image(s) not found{scope}: {joined}")


class ConstraintViolationError(GalleryError):
    """The (model, position) uniqueness invariant was or would be violated.

    Raised from a server-generated plan this indicates a defect, not a
    recoverable client condition.
    """


class ConflictRetryableError(GalleryError):
    """A concurrent write on the same model won the race.

    Callers should re-read current state and resubmit.
    """


class UpstreamFailureError(GalleryError):
    """The payload pipeline could not store an upload."""

    def __init__(self, message: str, *, too_large: bool = False):
        super().__init__(message)
        self.too_large = too_large
