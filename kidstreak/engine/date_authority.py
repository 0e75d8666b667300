"""Single source of truth for the calendar day."""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from kidstreak.core.config import constants
from kidstreak.core.errors import ClockUnavailableError


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _to_utc_midnight(day: str) -> datetime:
    """Parse YYYY-MM-DD into midnight UTC, ignoring any time of day."""
    parsed = datetime.strptime(day, constants.DATE_FORMAT).date()
    return datetime(parsed.year, parsed.month, parsed.day, tzinfo=UTC)


class DateAuthority:
    """Computes "today" in one canonical timezone and day gaps between dates.

    Every date comparison in the engine goes through one instance of this class
    so the reset controller and the streak tracker can never disagree about
    which day it is.

    Args:
        timezone: IANA zone name that defines the calendar day
        clock: Callable returning the current aware datetime (defaults to UTC now)
    """

    def __init__(self, timezone: str, clock: Callable[[], datetime] | None = None) -> None:
        try:
            self._zone = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = f"Unknown timezone: {timezone}"
            raise ClockUnavailableError(msg) from e
        self._clock = clock or _utc_now
        self.timezone = timezone

    def today(self) -> str:
        """Return the current date in the configured timezone as YYYY-MM-DD.

        Raises:
            ClockUnavailableError: If the clock fails or returns a naive datetime
        """
        try:
            now = self._clock()
        except Exception as e:
            logger.error("clock_unavailable", extra={"error": str(e)})
            raise ClockUnavailableError(f"Clock failed: {e}") from e

        if now.tzinfo is None or now.utcoffset() is None:
            # A naive value would silently be read as host-local time.
            raise ClockUnavailableError("Clock returned a naive datetime")

        return now.astimezone(self._zone).strftime(constants.DATE_FORMAT)

    @staticmethod
    def day_diff(prev: str | None, curr: str | None) -> int | None:
        """Return the signed number of whole days from ``prev`` to ``curr``.

        Both dates are taken as UTC midnights, so daylight-saving transitions in
        the configured zone never skew the result. Returns None when either
        date is absent.

        Raises:
            ValueError: If a date is not in YYYY-MM-DD form
        """
        if not prev or not curr:
            return None
        delta = _to_utc_midnight(curr) - _to_utc_midnight(prev)
        diff_ms = delta.total_seconds() * 1000
        return round(diff_ms / constants.MS_PER_DAY)

    @staticmethod
    def is_calendar_day(value: str) -> bool:
        """Whether ``value`` is a valid YYYY-MM-DD string."""
        try:
            return date.fromisoformat(value).strftime(constants.DATE_FORMAT) == value
        except ValueError:
            return False
