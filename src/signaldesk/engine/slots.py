"""Per-slot generation state: idle -> in_flight -> populated | failed."""

import logging
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from ..errors import GenerationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SlotState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    POPULATED = "populated"
    FAILED = "failed"


class GenerationSlot:
    """Guards one logical generation target against duplicate calls.

    While a call is in flight, further runs are ignored without invoking
    their factory. A GenerationError is recorded as a user-facing notice and
    never raised. Any other error is re-raised after the slot is marked
    failed. Either way the slot can be run again afterwards.
    """

    def __init__(self, name: str, failure_notice: str = "Generation failed. Check your connection or API key."):
        self.name = name
        self.failure_notice = failure_notice
        self.state = SlotState.IDLE
        self.notice: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.state is SlotState.IN_FLIGHT

    async def run(self, factory: Callable[[], Awaitable[T]]) -> Optional[T]:
        """Run a generation call if the slot is free.

        Returns the call's result, or None if the slot was busy or the
        call failed.
        """
        if self.busy:
            logger.debug(f"[WORKSPACE] Slot '{self.name}' busy, ignoring request")
            return None

        self.state = SlotState.IN_FLIGHT
        self.notice = None
        try:
            result = await factory()
        except GenerationError as e:
            self.state = SlotState.FAILED
            self.notice = self.failure_notice
            logger.warning(f"[WORKSPACE] Slot '{self.name}' failed: {e}")
            return None
        except BaseException:
            # Unexpected errors propagate, but must not leave the slot busy
            self.state = SlotState.FAILED
            self.notice = self.failure_notice
            raise

        self.state = SlotState.POPULATED
        return result
