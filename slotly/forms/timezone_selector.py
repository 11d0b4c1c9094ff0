import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo, available_timezones

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"
FALLBACK_TIMEZONES = [
    "UTC",
    "America/New_York",
    "America/Los_Angeles",
    "Europe/London",
    "Asia/Tokyo",
]


def list_timezones() -> list[str]:
    """All IANA zone names known to this interpreter, or a short fallback list"""
    try:
        zones = sorted(available_timezones())
    except Exception as e:
        logger.warning(f"⚠️ Could not read timezone database, using fallback list: {e}")
        return list(FALLBACK_TIMEZONES)
    return zones or list(FALLBACK_TIMEZONES)


def format_timezone(tz: str, now: Optional[datetime] = None) -> str:
    """"America/New_York" -> "America/New York (EST)" """
    label = tz.replace("_", " ", 1)
    try:
        now = now or datetime.now(timezone.utc)
        abbreviation = now.astimezone(ZoneInfo(tz)).tzname() or ""
    except Exception:
        return label
    return f"{label} ({abbreviation})"


class TimezoneSelector:
    """
    Visitor timezone picker state.

    The on_change callback fires once with the initial selection and again on
    every later selection.
    """

    def __init__(
        self,
        on_change: Optional[Callable[[str], None]] = None,
        default_value: Optional[str] = None,
    ):
        self.on_change = on_change
        self.timezones = list_timezones()
        selected = default_value or DEFAULT_TIMEZONE
        if selected not in self.timezones:
            logger.warning(f"Unknown timezone {selected}; defaulting to {DEFAULT_TIMEZONE}")
            selected = DEFAULT_TIMEZONE if DEFAULT_TIMEZONE in self.timezones else self.timezones[0]
        self.selected = selected
        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.selected)

    def select(self, tz: str) -> None:
        if tz not in self.timezones:
            raise ValueError(f"Unknown timezone: {tz}")
        self.selected = tz
        self._notify()

    def options(self) -> list[dict]:
        now = datetime.now(timezone.utc)
        return [{"value": tz, "label": format_timezone(tz, now)} for tz in self.timezones]

    def to_dict(self) -> dict:
        return {"selected": self.selected, "options": self.options()}
