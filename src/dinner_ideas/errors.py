"""Exceptions raised by the recipe store and the generation pipeline."""


class DinnerIdeasError(Exception):
    """Base class for all dinner-ideas errors."""


class StoreError(DinnerIdeasError):
    """The recipe collection could not be loaded or saved."""


class DecodeError(StoreError):
    """The persisted collection file exists but does not match the schema."""


class WriteError(StoreError):
    """Writing the collection file failed; the previous file is untouched."""


class GenerationError(DinnerIdeasError):
    """The generative model failed while streaming a draft."""


class GenerationTimeoutError(GenerationError):
    """The draft stream did not finish within the configured ceiling."""


class GenerationInProgressError(GenerationError):
    """A generation was requested while another one is still streaming."""


__all__ = [
    "DinnerIdeasError",
    "StoreError",
    "DecodeError",
    "WriteError",
    "GenerationError",
    "GenerationTimeoutError",
    "GenerationInProgressError",
]
