"""Partially generated recipes.

A draft mirrors :class:`Recipe` with every field optional. It doubles as the
structured output schema handed to the model, so the field descriptions are
also generation guidance.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from .records import FoodTag

REQUIRED_FIELDS = ("name", "description", "prep_time", "cook_time", "steps", "tags")


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


def _keep(current: Any, previous: Any) -> Any:
    """Newer value unless it would clear something already filled in.

    An empty string or list only falls back when the previous value had
    content, so a finished empty list still counts as populated.
    """
    if current is None:
        return previous
    if _is_blank(current) and not _is_blank(previous):
        return previous
    return current


class StepDraft(BaseModel):
    """A generated cooking step."""

    title: Optional[str] = Field(None, description="A short, clear title for this cooking step")
    description: Optional[str] = Field(
        None, description="Detailed instructions for completing this step of the recipe"
    )

    def carry_forward(self, previous: "StepDraft") -> "StepDraft":
        return StepDraft(
            title=_keep(self.title, previous.title),
            description=_keep(self.description, previous.description),
        )


class RecipeDraft(BaseModel):
    """A recipe as it is being generated."""

    name: Optional[str] = Field(
        None, description="The name of the recipe, should be descriptive and appetizing"
    )
    description: Optional[str] = Field(
        None,
        description="A brief description of the dish, its flavors, and what makes it special",
    )
    prep_time: Optional[int] = Field(None, description="Time needed to prepare ingredients in minutes")
    cook_time: Optional[int] = Field(None, description="Time needed to cook the dish in minutes")
    steps: Optional[list[StepDraft]] = Field(
        None,
        description="Step-by-step cooking instructions, each with a title and detailed description",
    )
    tags: Optional[list[FoodTag]] = Field(
        None, description="Relevant food tags that describe the dish characteristics"
    )

    def populated_fields(self) -> set[str]:
        """Names of the top-level fields that have a value."""
        return {name for name in REQUIRED_FIELDS if getattr(self, name) is not None}

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def carry_forward(self, previous: Optional["RecipeDraft"]) -> "RecipeDraft":
        """Return this draft with nothing that ``previous`` already had taken away.

        Missing fields, and blanks that would clear a filled-in value, fall
        back to the previous value. A steps list never shrinks.
        """
        if previous is None:
            return self

        values = {}
        for name in ("name", "description", "prep_time", "cook_time", "tags"):
            values[name] = _keep(getattr(self, name), getattr(previous, name))

        steps = _keep(self.steps, previous.steps)
        prev_steps = previous.steps or []
        if steps and steps is not previous.steps:
            merged = [
                step.carry_forward(prev_steps[i]) if i < len(prev_steps) else step
                for i, step in enumerate(steps)
            ]
            merged.extend(prev_steps[len(merged):])
            steps = merged
        values["steps"] = steps

        return RecipeDraft(**values)

    @classmethod
    def sample(cls) -> "RecipeDraft":
        """Example shape shown to the model. Its content must not be copied."""
        return cls(
            name="Spaghetti Bolognese",
            description="A classic Italian pasta dish with rich meat sauce.",
            prep_time=15,
            cook_time=45,
            steps=[
                StepDraft(
                    title="Boil pasta",
                    description="Cook pasta in salted boiling water until al dente.",
                ),
                StepDraft(
                    title="Prepare sauce",
                    description="Sauté onions, garlic, and ground beef, then add tomatoes and simmer.",
                ),
            ],
            tags=[FoodTag.FAMILY_FRIENDLY, FoodTag.CHEAP, FoodTag.VEGAN],
        )


__all__ = ["REQUIRED_FIELDS", "StepDraft", "RecipeDraft"]
