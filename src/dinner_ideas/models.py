"""Model selection for recipe generation with .env-based configuration."""

import os
from enum import Enum
from typing import Dict, List, Optional, Union

from dotenv import load_dotenv

# Load environment variables at module import
load_dotenv()

from pydantic_ai import Agent
from pydantic_ai.models import Model

DEFAULT_GENERATION_TIMEOUT = 120.0


class ModelTier(str, Enum):
    """Model capability tiers for automatic selection."""
    LOW = "low"        # Fast, cheap drafts
    MEDIUM = "medium"  # Balanced performance
    HIGH = "high"      # Maximum quality


# Tier preferences (ordered by preference)
TIER_MODELS = {
    ModelTier.LOW: [
        "openai:gpt-4.1-nano",
        "anthropic:claude-3-5-haiku-latest",
        "google:gemini-2.0-flash-lite",
    ],
    ModelTier.MEDIUM: [
        "openai:gpt-4.1-mini",
        "anthropic:claude-sonnet-4-0",
        "google:gemini-2.5-flash",
    ],
    ModelTier.HIGH: [
        "openai:gpt-4.1",
        "anthropic:claude-opus-4-1",
        "google:gemini-2.5-pro",
    ],
}

ModelSpec = Union[str, ModelTier, Model]


def _get_available_providers() -> Dict[str, Optional[str]]:
    """Get providers with configured API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "anthropic": os.getenv("ANTHROPIC_API_KEY"),
        "google": os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"),
        "groq": os.getenv("GROQ_API_KEY"),
        "mistral": os.getenv("MISTRAL_API_KEY"),
    }


def _as_tier(value: str) -> Union[str, ModelTier]:
    """Turn "low"/"medium"/"high" (any case) into a ModelTier, else keep the string."""
    try:
        return ModelTier(value.strip().lower())
    except ValueError:
        return value


def default_model_spec() -> Union[str, ModelTier]:
    """Model named by DINNER_IDEAS_MODEL, as a tier when it names one."""
    value = os.getenv("DINNER_IDEAS_MODEL", "").strip()
    if not value:
        return ModelTier.MEDIUM
    return _as_tier(value)


def generation_timeout() -> Optional[float]:
    """Ceiling for one generation stream, from DINNER_IDEAS_GENERATION_TIMEOUT.

    ``0`` or ``none`` disables the ceiling.
    """
    value = os.getenv("DINNER_IDEAS_GENERATION_TIMEOUT", "").strip().lower()
    if not value:
        return DEFAULT_GENERATION_TIMEOUT
    if value in ("0", "none", "off"):
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise ValueError(
            f"DINNER_IDEAS_GENERATION_TIMEOUT must be a number of seconds, got '{value}'"
        )
    return seconds if seconds > 0 else None


def get_model(spec: ModelSpec) -> Model:
    """Get model by tier or explicit name.

    Args:
        spec: ModelTier or its name ("low", "medium", "high"), an explicit
            "provider:model" string, or an already built pydantic-ai Model

    Returns:
        Pydantic AI Model instance

    Raises:
        ValueError: If model not available (no API key or unknown model)
    """
    if isinstance(spec, Model):
        return spec

    if isinstance(spec, str) and not isinstance(spec, ModelTier):
        spec = _as_tier(spec)

    if isinstance(spec, ModelTier):
        # Try each model in tier until one is available
        last_error = None
        for model_str in TIER_MODELS[spec]:
            try:
                return _create_model(model_str)
            except ValueError as e:
                last_error = e
                continue

        available = list_available_providers()
        if not available:
            raise ValueError(
                f"No models available for tier '{spec.value}'. "
                f"Please set an API key in the .env file:\n"
                f"  OPENAI_API_KEY=...\n"
                f"  ANTHROPIC_API_KEY=...\n"
                f"  GOOGLE_API_KEY=..."
            )
        raise ValueError(
            f"No models available for tier '{spec.value}'. "
            f"Available providers: {', '.join(available)}. "
            f"Last error: {last_error}"
        )

    return _create_model(spec)


def _create_model(model_str: str) -> Model:
    """Create model instance, with clear errors if unavailable.

    Args:
        model_str: Model identifier like "openai:gpt-4.1" or "gpt-4.1"

    Raises:
        ValueError: If provider not configured or model unknown
    """
    provider, model_name = _parse_model_string(model_str)

    api_key = _get_available_providers().get(provider)
    if not api_key:
        env_var = f"{provider.upper()}_API_KEY"
        if provider == "google":
            env_var = "GOOGLE_API_KEY or GEMINI_API_KEY"
        raise ValueError(f"Model '{model_str}' requires {env_var} in .env file")

    # Provider SDKs are imported on demand so a missing one only matters when used
    if provider == "openai":
        from pydantic_ai.models.openai import OpenAIChatModel
        from pydantic_ai.providers.openai import OpenAIProvider
        return OpenAIChatModel(model_name, provider=OpenAIProvider(api_key=api_key))
    elif provider == "anthropic":
        from pydantic_ai.models.anthropic import AnthropicModel
        from pydantic_ai.providers.anthropic import AnthropicProvider
        return AnthropicModel(model_name, provider=AnthropicProvider(api_key=api_key))
    elif provider == "google":
        from pydantic_ai.models.google import GoogleModel
        from pydantic_ai.providers.google import GoogleProvider
        return GoogleModel(model_name, provider=GoogleProvider(api_key=api_key))
    elif provider == "groq":
        from pydantic_ai.models.groq import GroqModel
        from pydantic_ai.providers.groq import GroqProvider
        return GroqModel(model_name, provider=GroqProvider(api_key=api_key))
    elif provider == "mistral":
        from pydantic_ai.models.mistral import MistralModel
        from pydantic_ai.providers.mistral import MistralProvider
        return MistralModel(model_name, provider=MistralProvider(api_key=api_key))
    else:
        raise ValueError(
            f"Unknown provider '{provider}'. "
            f"Supported: openai, anthropic, google, groq, mistral"
        )


def _parse_model_string(model_str: str) -> tuple[str, str]:
    """Parse 'provider:model' string or infer provider from model name.

    Raises:
        ValueError: If provider cannot be determined
    """
    if ":" in model_str:
        provider, model_name = model_str.split(":", 1)
        return provider.lower(), model_name

    if model_str.startswith(("gpt-", "o1", "o3", "o4")):
        return "openai", model_str
    elif model_str.startswith("claude"):
        return "anthropic", model_str
    elif model_str.startswith("gemini"):
        return "google", model_str
    elif model_str.startswith(("llama", "mixtral")):
        return "groq", model_str
    elif model_str.startswith("mistral"):
        return "mistral", model_str
    else:
        raise ValueError(
            f"Cannot infer provider for model '{model_str}'. "
            f"Use explicit format 'provider:model' (e.g., 'openai:gpt-4.1')"
        )


def list_available_providers() -> List[str]:
    """List providers that have API keys configured."""
    return [
        provider
        for provider, api_key in _get_available_providers().items()
        if api_key
    ]


def create_agent(spec: ModelSpec = ModelTier.MEDIUM, **agent_kwargs) -> Agent:
    """Convenience function to create a Pydantic AI agent.

    Examples:
        agent = create_agent(ModelTier.LOW, output_type=RecipeDraft)
        agent = create_agent("anthropic:claude-sonnet-4-0")
    """
    model = get_model(spec)
    return Agent(model, **agent_kwargs)


__all__ = [
    "ModelTier",
    "TIER_MODELS",
    "DEFAULT_GENERATION_TIMEOUT",
    "default_model_spec",
    "generation_timeout",
    "get_model",
    "list_available_providers",
    "create_agent",
]
