"""Pydantic models for recipe records."""

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FoodTag(str, Enum):
    """Fixed set of labels a recipe can carry."""

    QUICK = "Quick"
    VEGETARIAN = "Vegetarian"
    VEGAN = "Vegan"
    GLUTEN_FREE = "GlutenFree"
    CHEAP = "Cheap"
    LOW_CARB = "LowCarb"
    FAMILY_FRIENDLY = "FamilyFriendly"

    @property
    def label(self) -> str:
        """Human readable label."""
        return _TAG_LABELS[self]

    @property
    def color(self) -> str:
        """Rich color name used when rendering the tag."""
        return _TAG_COLORS[self]

    @classmethod
    def _missing_(cls, value):
        # Accept human labels ("Gluten Free"), any casing of raw values and
        # spellings found in older collection files
        if isinstance(value, str):
            wanted = value.replace(" ", "").lower()
            if wanted in _TAG_ALIASES:
                return cls(_TAG_ALIASES[wanted])
            for tag in cls:
                if tag.value.lower() == wanted:
                    return tag
        return None


_TAG_ALIASES = {
    "vegeterian": "Vegetarian",
}

_TAG_LABELS = {
    FoodTag.QUICK: "Quick",
    FoodTag.VEGETARIAN: "Vegetarian",
    FoodTag.VEGAN: "Vegan",
    FoodTag.GLUTEN_FREE: "Gluten Free",
    FoodTag.CHEAP: "Cheap",
    FoodTag.LOW_CARB: "Low Carb",
    FoodTag.FAMILY_FRIENDLY: "Family Friendly",
}

_TAG_COLORS = {
    FoodTag.QUICK: "blue",
    FoodTag.VEGETARIAN: "green",
    FoodTag.VEGAN: "spring_green2",
    FoodTag.GLUTEN_FREE: "yellow",
    FoodTag.CHEAP: "dark_orange",
    FoodTag.LOW_CARB: "red",
    FoodTag.FAMILY_FRIENDLY: "hot_pink",
}


class Step(BaseModel):
    """One preparation or cooking step."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., alias="stepTitle", description="Short step title")
    description: str = Field(..., alias="stepDescription", description="Detailed instructions")
    id: UUID = Field(default_factory=uuid4)


class Recipe(BaseModel):
    """A recipe in the user's collection.

    Field aliases are the names used in the persisted collection file.
    ``version`` is carried along but nothing compares or increments it.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4)
    created_by: int = Field(1, alias="createdBy")
    last_modified_by: int = Field(1, alias="lastModifiedBy")
    created_date: datetime = Field(default_factory=datetime.now, alias="createdDate")
    last_modified_date: datetime = Field(default_factory=datetime.now, alias="lastModifiedDate")
    version: Optional[int] = None

    name: str
    description: str
    prep_time: int = Field(..., alias="prepTime", description="Prep time in minutes")
    cook_time: int = Field(..., alias="cookTime", description="Cook time in minutes")
    steps: list[Step] = Field(default_factory=list)
    tags: list[FoodTag] = Field(default_factory=list)
    image: Optional[str] = Field(None, description="Opaque image filename, bytes live elsewhere")

    @field_validator("tags")
    @classmethod
    def _drop_duplicate_tags(cls, tags: list[FoodTag]) -> list[FoodTag]:
        return list(dict.fromkeys(tags))

    @property
    def total_time(self) -> int:
        return total_time(self)

    def touch(self, modifier_id: int = 1) -> None:
        """Record an edit by ``modifier_id``."""
        self.last_modified_by = modifier_id
        self.last_modified_date = datetime.now()

    @classmethod
    def empty(cls, created_by: int = 1) -> "Recipe":
        """Blank record used as the starting point for manual entry."""
        return cls(
            created_by=created_by,
            last_modified_by=created_by,
            name="",
            description="",
            prep_time=0,
            cook_time=0,
            image="",
        )


def total_time(recipe: Recipe) -> int:
    return recipe.prep_time + recipe.cook_time


def format_duration(minutes: int) -> str:
    """Render minutes as "45 mins", "1 hour" or "2 hours 15 mins".

    Negative input is not checked; callers guard against it.
    """
    if minutes < 60:
        return f"{minutes} mins"

    hours, remainder = divmod(minutes, 60)
    text = "1 hour" if hours == 1 else f"{hours} hours"
    if remainder:
        text += f" {remainder} mins"
    return text


def search_recipes(items: Iterable[Recipe], text: str) -> list[Recipe]:
    """Case-insensitive match on name, description or tag label."""
    needle = text.strip().lower()
    if not needle:
        return list(items)

    matches = []
    for recipe in items:
        if needle in recipe.name.lower() or needle in recipe.description.lower():
            matches.append(recipe)
            continue
        if any(needle in tag.label.lower() for tag in recipe.tags):
            matches.append(recipe)
    return matches


def sample_items() -> list[Recipe]:
    """The built-in collection used when nothing has been saved yet."""
    return [
        Recipe(
            created_by=1,
            last_modified_by=1,
            name="Spaghetti Bolognese",
            description="A classic Italian pasta dish with rich meat sauce.",
            prep_time=15,
            cook_time=45,
            steps=[
                Step(title="Boil pasta", description="Cook pasta in salted boiling water until al dente."),
                Step(
                    title="Prepare sauce",
                    description="Sauté onions, garlic, and ground beef, then add tomatoes and simmer.",
                ),
            ],
            tags=[FoodTag.FAMILY_FRIENDLY, FoodTag.CHEAP, FoodTag.VEGAN],
            image="",
        ),
        Recipe(
            created_by=2,
            last_modified_by=2,
            name="Grilled Chicken Salad",
            description="Healthy grilled chicken served with fresh greens.",
            prep_time=10,
            cook_time=20,
            steps=[
                Step(title="Grill chicken", description="Season and grill chicken breast until cooked through."),
                Step(title="Assemble salad", description="Chop fresh vegetables and mix with dressing."),
            ],
            tags=[FoodTag.LOW_CARB, FoodTag.QUICK],
            image="",
        ),
        Recipe(
            created_by=3,
            last_modified_by=3,
            name="Vegetable Stir Fry",
            description="Quick and easy stir fry loaded with fresh vegetables.",
            prep_time=10,
            cook_time=15,
            steps=[
                Step(
                    title="Chop vegetables",
                    description="Cut bell peppers, carrots, and broccoli into bite-sized pieces.",
                ),
                Step(
                    title="Stir-fry ingredients",
                    description="Sauté vegetables in a hot pan with soy sauce and garlic.",
                ),
            ],
            tags=[FoodTag.VEGETARIAN, FoodTag.QUICK],
            image="",
        ),
    ]


__all__ = [
    "FoodTag",
    "Step",
    "Recipe",
    "total_time",
    "format_duration",
    "search_recipes",
    "sample_items",
]
