"""Turns a stream of recipe drafts into observable generation state."""

import asyncio
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from ..errors import GenerationError, GenerationInProgressError, GenerationTimeoutError
from ..logger import get_logger
from ..models import generation_timeout
from .drafts import RecipeDraft
from .generator import RecipeGenerator
from .records import Recipe, Step

logger = get_logger("reconciler")

DraftCallback = Callable[[RecipeDraft], None]

_UNSET = object()


class GenerationState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerationReconciler:
    """Owns the published draft for one generation at a time.

    Every draft the generator yields replaces ``generated_draft`` as a whole
    and is handed to subscribers in order. A reset bumps a stream token so
    late drafts from a superseded stream are dropped instead of published.
    All of this runs on the event loop thread.
    """

    def __init__(self, generator: RecipeGenerator, *, timeout=_UNSET):
        """
        Args:
            generator: Anything with an ``async stream_generate(name_hint)``.
            timeout: Seconds one stream may take, ``None`` for no ceiling.
                Defaults to DINNER_IDEAS_GENERATION_TIMEOUT.
        """
        self.generator = generator
        self.timeout: Optional[float] = generation_timeout() if timeout is _UNSET else timeout
        self._state = GenerationState.IDLE
        self._draft: Optional[RecipeDraft] = None
        self._error: Optional[GenerationError] = None
        self._token = 0
        self._task: Optional[asyncio.Task] = None
        self._subscribers: list[DraftCallback] = []

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def generated_draft(self) -> Optional[RecipeDraft]:
        return self._draft

    @property
    def error(self) -> Optional[GenerationError]:
        return self._error

    @property
    def is_streaming(self) -> bool:
        return self._state is GenerationState.STREAMING

    def subscribe(self, callback: DraftCallback) -> Callable[[], None]:
        """Register ``callback`` for published drafts. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def start(self, name_hint: Optional[str] = None) -> asyncio.Task:
        """Open one draft stream and consume it on a task.

        Raises:
            GenerationInProgressError: A stream is already running.
            RuntimeError: Called outside a running event loop.
        """
        if self._state is GenerationState.STREAMING:
            raise GenerationInProgressError("A recipe is already being generated; reset it first.")

        loop = asyncio.get_running_loop()
        if self._state is not GenerationState.IDLE:
            self.reset()

        hint = name_hint if name_hint and name_hint.strip() else None
        self._token += 1
        self._state = GenerationState.STREAMING
        self._task = loop.create_task(self._consume(self._token, hint))
        logger.info(f"Started generation #{self._token} (hint: {hint!r})")
        return self._task

    async def _consume(self, token: int, hint: Optional[str]) -> None:
        stream = None
        ceiling = asyncio.timeout(self.timeout)
        try:
            async with ceiling:
                stream = self.generator.stream_generate(hint)
                async for draft in stream:
                    if token != self._token:
                        logger.debug(f"Dropping draft from superseded generation #{token}")
                        return
                    self._publish(draft)
        except Exception as e:
            if token != self._token:
                return
            if ceiling.expired():
                self._fail(GenerationTimeoutError(f"Generation took longer than {self.timeout}s"), e)
            elif isinstance(e, GenerationError):
                self._fail(e)
            else:
                self._fail(GenerationError(f"Generation failed: {e}"), e)
        else:
            if token == self._token:
                self._state = GenerationState.COMPLETED
                logger.info(f"Generation #{token} completed")
        finally:
            # Closing runs the generator's own cleanup, e.g. the model stream context
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    def _publish(self, draft: RecipeDraft) -> None:
        self._draft = draft
        for callback in list(self._subscribers):
            try:
                callback(draft)
            except Exception:
                logger.exception("Draft subscriber raised")

    def _fail(self, error: GenerationError, cause: Optional[BaseException] = None) -> None:
        if cause is not None:
            error.__cause__ = cause
        self._error = error
        self._state = GenerationState.FAILED
        logger.error(f"{error} ({type(cause or error).__name__})")

    def reset(self) -> None:
        """Drop the current draft and error and stop applying the running stream."""
        self._token += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        self._draft = None
        self._error = None
        self._state = GenerationState.IDLE

    async def wait(self) -> None:
        """Wait for the current stream task to settle, if there is one."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def run(self, name_hint: Optional[str] = None) -> Optional[RecipeDraft]:
        """Start a generation and wait for it. Check ``state`` for the outcome."""
        self.start(name_hint)
        await self.wait()
        return self._draft

    def finalize(self, created_by: int = 1) -> Optional[Recipe]:
        """Build a new Recipe from a complete draft, or None while anything is missing."""
        draft = self._draft
        if draft is None or not draft.is_complete:
            return None

        now = datetime.now()
        return Recipe(
            created_by=created_by,
            last_modified_by=created_by,
            created_date=now,
            last_modified_date=now,
            name=draft.name,
            description=draft.description,
            prep_time=draft.prep_time,
            cook_time=draft.cook_time,
            steps=[
                Step(title=step.title or "", description=step.description or "")
                for step in draft.steps
            ],
            tags=list(draft.tags),
            image="",
        )


__all__ = ["GenerationState", "GenerationReconciler"]
