"""Dinner Ideas - a recipe collection with streaming LLM recipe generation."""

from .errors import (
    DecodeError,
    DinnerIdeasError,
    GenerationError,
    GenerationInProgressError,
    GenerationTimeoutError,
    StoreError,
    WriteError,
)
from .models import ModelTier, create_agent, list_available_providers
from .profile import Profile
from .recipes import (
    FoodTag,
    GenerationReconciler,
    GenerationState,
    Recipe,
    RecipeDraft,
    RecipeGenerator,
    RecipeStore,
    Step,
)

__version__ = "0.1.0"

__all__ = [
    # Records and storage
    "FoodTag",
    "Step",
    "Recipe",
    "RecipeStore",
    "Profile",

    # Generation
    "RecipeDraft",
    "RecipeGenerator",
    "GenerationState",
    "GenerationReconciler",

    # Models and configuration
    "ModelTier",
    "create_agent",
    "list_available_providers",

    # Errors
    "DinnerIdeasError",
    "StoreError",
    "DecodeError",
    "WriteError",
    "GenerationError",
    "GenerationTimeoutError",
    "GenerationInProgressError",
]
