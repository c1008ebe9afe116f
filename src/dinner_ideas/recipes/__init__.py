"""Recipe records, drafts, storage and generation."""

from .drafts import RecipeDraft, StepDraft
from .generator import RECIPE_INSTRUCTIONS, RECIPE_TYPES, RecipeGenerator
from .planner import MAX_MEALS, MealPlan, plan_meals
from .reconciler import GenerationReconciler, GenerationState
from .records import FoodTag, Recipe, Step, format_duration, sample_items, search_recipes, total_time
from .store import RecipeStore

__all__ = [
    # Records
    "FoodTag",
    "Step",
    "Recipe",
    "total_time",
    "format_duration",
    "search_recipes",
    "sample_items",

    # Generation
    "StepDraft",
    "RecipeDraft",
    "RECIPE_TYPES",
    "RECIPE_INSTRUCTIONS",
    "RecipeGenerator",
    "GenerationState",
    "GenerationReconciler",

    # Storage and planning
    "RecipeStore",
    "MAX_MEALS",
    "MealPlan",
    "plan_meals",
]
