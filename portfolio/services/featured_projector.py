"""
Single definition of "which image is featured" for every read path.
"""
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Protocol, Sequence, TypeVar


class _Positioned(Protocol):
    position: int


_ItemT = TypeVar("_ItemT", bound=_Positioned)

FEATURED_POSITION = 0


@dataclass(frozen=True)
class GalleryProjection(Generic[_ItemT]):
    featured: Optional[_ItemT] = None
    rest: List[_ItemT] = field(default_factory=list)


def project(items: Sequence[_ItemT]) -> GalleryProjection[_ItemT]:
    """Split a collection into its featured item and the remaining gallery.

    The featured item is the one at position 0. When no item sits at 0 the
    lowest-positioned item is presented as featured instead; stored positions
    are not touched.
    """
    ordered = sorted(items, key=lambda item: item.position)
    if not ordered:
        return GalleryProjection()

    featured_index = next(
        (index for index, item in enumerate(ordered) if item.position == FEATURED_POSITION),
        0,
    )
    featured = ordered[featured_index]
    rest = ordered[:featured_index] + ordered[featured_index + 1:]
    return GalleryProjection(featured=featured, rest=rest)
