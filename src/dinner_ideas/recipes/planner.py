"""Random meal plans drawn from the recipe collection."""

import random
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .records import Recipe

MAX_MEALS = 7


class MealPlan(BaseModel):
    """A week's worth of picked recipes. Not persisted."""

    id: UUID = Field(default_factory=uuid4)
    item_ids: list[UUID] = Field(default_factory=list)
    generated_date: datetime = Field(default_factory=datetime.now)


def plan_meals(
    items: Sequence[Recipe],
    count: int = 3,
    *,
    rng: Optional[random.Random] = None,
) -> tuple[MealPlan, list[Recipe]]:
    """Pick up to ``count`` distinct recipes at random.

    ``count`` is clamped to MAX_MEALS and to the collection size.
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    count = min(count, MAX_MEALS, len(items))
    picked = (rng or random).sample(list(items), count)
    return MealPlan(item_ids=[recipe.id for recipe in picked]), picked


__all__ = ["MAX_MEALS", "MealPlan", "plan_meals"]
