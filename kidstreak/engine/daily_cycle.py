"""Once-per-day reset of task completion state."""

import logging

from kidstreak.core.config import ResetPolicy
from kidstreak.core.logging import span
from kidstreak.domain.streak import ResetResult
from kidstreak.engine.date_authority import DateAuthority
from kidstreak.stores.protocols import CycleStore


logger = logging.getLogger(__name__)


class DailyCycleController:
    """Resets every task the first time it is invoked on a new calendar day."""

    def __init__(
        self,
        *,
        store: CycleStore,
        dates: DateAuthority,
        policy: ResetPolicy = ResetPolicy.CLEAR_DONE_AND_DEACTIVATE,
    ) -> None:
        self._store = store
        self._dates = dates
        self._policy = policy

    async def check_and_reset(self) -> ResetResult:
        """Reset tasks unless a reset already ran today.

        Safe to call on every page load: a second call on the same day is a
        no-op. The task reset and the new reset date are committed together.

        Returns:
            ResetResult telling whether the reset side effects ran

        Raises:
            ClockUnavailableError: If today cannot be determined
            PersistenceUnavailableError: If the store fails (nothing is committed)
        """
        with span("daily_cycle.check_and_reset"):
            last_reset = await self._store.get_last_reset_date()
            today = self._dates.today()

            if last_reset is not None and not DateAuthority.is_calendar_day(last_reset):
                logger.warning("Malformed reset marker, resetting", extra={"last_reset": last_reset, "today": today})
            elif last_reset == today:
                logger.debug("Reset already performed today", extra={"today": today})
                return ResetResult(reset_performed=False, today=today)

            is_active = False if self._policy == ResetPolicy.CLEAR_DONE_AND_DEACTIVATE else None
            await self._store.reset_cycle(today=today, is_done=False, is_active=is_active)

            logger.info(
                "Daily reset performed",
                extra={"today": today, "previous_reset": last_reset, "policy": str(self._policy)},
            )
            return ResetResult(reset_performed=True, today=today)
