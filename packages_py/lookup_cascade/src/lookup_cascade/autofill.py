"""
Debounced, cancellable autofill driven by live text input.

A new keystroke supersedes any pending resolution. Every write to the
session's visible state first checks that its generation is still the
current one, so a superseded resolution never overwrites newer state.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from .cascade import LookupCascade
from .types import LookupResult, ResolutionSource

logger = logging.getLogger("lookup_cascade.autofill")


class AutofillStatus(str, Enum):
    NONE = "none"
    FETCHING = "fetching"
    FILLED = "filled"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class AutofillConfig:
    """Configuration for AutofillSession."""

    debounce_seconds: float = 0.4
    no_result_message: str = "No result found. You can keep entering it manually."
    failure_message: str = "Autofill failed. You can keep entering it manually."


DEFAULT_AUTOFILL_CONFIG = AutofillConfig()


def merge_autofill_config(config: Optional[AutofillConfig] = None) -> AutofillConfig:
    """Merge a user config over the defaults."""
    if config is None:
        return AutofillConfig(**vars(DEFAULT_AUTOFILL_CONFIG))
    if config.debounce_seconds < 0:
        raise ValueError("debounce_seconds must be >= 0")
    return AutofillConfig(
        debounce_seconds=config.debounce_seconds,
        no_result_message=config.no_result_message or DEFAULT_AUTOFILL_CONFIG.no_result_message,
        failure_message=config.failure_message or DEFAULT_AUTOFILL_CONFIG.failure_message,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AutofillSession:
    """Holds the autofill state of one editor."""

    def __init__(
        self,
        cascade: LookupCascade,
        config: Optional[AutofillConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._cascade = cascade
        self._config = merge_autofill_config(config)
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

        self.text = ""
        self.status = AutofillStatus.NONE
        self.result: Optional[LookupResult] = None
        self.confidence: Optional[float] = None
        self.message: Optional[str] = None
        self.provider_used: Optional[ResolutionSource] = None
        self.last_fetched_at: Optional[datetime] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def on_text_changed(self, text: str) -> None:
        """Record new input and schedule a debounced resolution."""
        self.text = text
        generation = self._supersede()
        if not text.strip():
            self._clear_outcome()
            self.status = AutofillStatus.NONE
            return
        self._task = asyncio.get_running_loop().create_task(self._debounced(generation))

    async def retry(self) -> None:
        """Resolve the current text immediately."""
        generation = self._supersede()
        await self._perform(generation)

    def reset(self) -> None:
        """Cancel pending work and clear all state."""
        self._supersede()
        self.text = ""
        self._clear_outcome()
        self.status = AutofillStatus.NONE

    async def wait(self) -> None:
        """Wait for the pending resolution, if any, to finish or be cancelled."""
        if self._task is not None:
            await asyncio.wait({self._task})

    def close(self) -> None:
        self._supersede()

    def _supersede(self) -> int:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _debounced(self, generation: int) -> None:
        await asyncio.sleep(self._config.debounce_seconds)
        if not self._is_current(generation):
            return
        await self._perform(generation)

    async def _perform(self, generation: int) -> None:
        term = self.text.strip()
        if not term or not self._is_current(generation):
            return

        self._clear_outcome()
        self.status = AutofillStatus.FETCHING

        try:
            resolution = await self._cascade.resolve_detailed(term)
        except Exception as e:
            if not self._is_current(generation):
                return
            logger.warning(f"AutofillSession: lookup failed for term={term!r}: {e}")
            self.last_fetched_at = self._clock()
            self.provider_used = ResolutionSource.NONE
            self.status = AutofillStatus.FAILED
            self.message = self._config.failure_message
            return

        if not self._is_current(generation):
            logger.debug(f"AutofillSession: dropping superseded result for term={term!r}")
            return

        self.last_fetched_at = self._clock()
        self.provider_used = resolution.source
        result = resolution.result
        self.result = result

        if result is None:
            self.status = AutofillStatus.FAILED
            self.message = self._config.no_result_message
            return

        self.confidence = result.confidence

        if not result.has_reading and not result.has_meanings:
            self.status = AutofillStatus.FAILED
            self.message = self._config.no_result_message
            return

        if result.has_reading and result.has_meanings:
            self.status = AutofillStatus.FILLED
        else:
            self.status = AutofillStatus.PARTIAL

    def _clear_outcome(self) -> None:
        self.result = None
        self.confidence = None
        self.message = None
        self.provider_used = None
        self.last_fetched_at = None
