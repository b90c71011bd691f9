"""
Two-phase position reassignment planning.

Moving images inside a collection that enforces a unique (model, position)
pair cannot be done by writing final positions directly: swapping two images
would alias them onto one position halfway through. The planner first parks
every moving image on a distinct placeholder outside every real position,
then moves each one to its final slot. No intermediate state, including each
individual write, holds a duplicate.

Everything here is pure and works on plain mappings, so the safety property
can be checked without a database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterator, Mapping, Sequence, Tuple, TypeVar

from portfolio.core.exceptions import (
    ConstraintViolationError,
    ItemNotFoundError,
    ValidationError,
)

PLACEHOLDER_OFFSET = 10000
PARK_PHASE = 1
FINAL_PHASE = 2

ItemId = TypeVar("ItemId", bound=Hashable)


@dataclass(frozen=True)
class PositionAssignment:
    item_id: Hashable
    position: int
    phase: int


@dataclass(frozen=True)
class ReassignmentPlan:
    """Ordered writes, grouped into phases that must run one after another."""

    phases: Tuple[Tuple[PositionAssignment, ...], ...] = field(default_factory=tuple)

    @property
    def steps(self) -> list[PositionAssignment]:
        return [step for phase in self.phases for step in phase]

    @property
    def item_ids(self) -> list[Hashable]:
        if not self.phases:
            return []
        return [step.item_id for step in self.phases[-1]]

    def final_positions(self) -> dict[Hashable, int]:
        if not self.phases:
            return {}
        return {step.item_id: step.position for step in self.phases[-1]}

    def __len__(self) -> int:
        return len(self.item_ids)

    def __bool__(self) -> bool:
        return bool(self.phases)


def target_from_order(ordered_ids: Sequence[ItemId]) -> dict[ItemId, int]:
    """Turn an ordered id list into ``{id: index}``."""
    target: dict[ItemId, int] = {}
    for index, item_id in enumerate(ordered_ids):
        if item_id in target:
            raise ValidationError(f"Duplicate id in requested order: {item_id}")
        target[item_id] = index
    return target


def validate_target(current: Mapping[ItemId, int], target: Mapping[ItemId, int]) -> None:
    """Check that the target only names known items and is injective."""
    unknown = [item_id for item_id in target if item_id not in current]
    if unknown:
        raise ItemNotFoundError(unknown)

    seen: dict[int, ItemId] = {}
    for item_id, position in target.items():
        if position in seen:
            raise ValidationError(
                f"Position {position} requested for both {seen[position]} and {item_id}"
            )
        seen[position] = item_id


def plan_reassignment(
    current: Mapping[ItemId, int],
    target: Mapping[ItemId, int],
) -> ReassignmentPlan:
    """Build the park-then-place plan that moves ``current`` onto ``target``.

    ``current`` must describe every item of the collection; items it holds
    that ``target`` does not name keep their positions. Items already at
    their target position are not written at all.
    """
    if not target:
        return ReassignmentPlan()

    validate_target(current, target)

    moving = [item_id for item_id, position in target.items() if current[item_id] != position]
    if not moving:
        return ReassignmentPlan()

    floor = min(0, *current.values(), *target.values())
    parked = tuple(
        PositionAssignment(item_id, floor - PLACEHOLDER_OFFSET - index, PARK_PHASE)
        for index, item_id in enumerate(moving)
    )
    placed = tuple(
        PositionAssignment(item_id, target[item_id], FINAL_PHASE)
        for item_id in moving
    )
    return ReassignmentPlan(phases=(parked, placed))


def simulate(
    current: Mapping[ItemId, int],
    plan: ReassignmentPlan,
) -> Iterator[dict[ItemId, int]]:
    """Apply ``plan`` one write at a time, yielding every intermediate state.

    Raises ConstraintViolationError at the first write that would leave two
    items on the same position.
    """
    state = dict(current)
    occupied = {position: item_id for item_id, position in state.items()}
    if len(occupied) != len(state):
        raise ConstraintViolationError("Starting state already holds duplicate positions")

    for step in plan.steps:
        holder = occupied.get(step.position)
        if holder is not None and holder != step.item_id:
            raise ConstraintViolationError(
                f"Step {step} collides with {holder} at position {step.position}"
            )
        del occupied[state[step.item_id]]
        state[step.item_id] = step.position
        occupied[step.position] = step.item_id
        yield dict(state)
