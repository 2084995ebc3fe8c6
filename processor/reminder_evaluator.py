"""Time-window predicates and the per-event reminder evaluator."""
import logging
from datetime import datetime, timedelta
from typing import List

from processor.models import Event, Reminder, ReminderKind

logger = logging.getLogger(__name__)

REGULAR_HOUR = 19
WINDOW = timedelta(hours=1)
QUIET_RATIO = 0.5


def is_start_time(start: datetime, now: datetime) -> bool:
    """Return True during the first hour after an event starts."""
    return start <= now < start + WINDOW


def is_regular_time(now: datetime, regular_hour: int = REGULAR_HOUR) -> bool:
    """Return True during the daily one-hour window starting at regular_hour."""
    regular_time = now.replace(hour=regular_hour, minute=0, second=0, microsecond=0)
    return regular_time <= now < regular_time + WINDOW


def is_days_before(target: datetime, days: int, now: datetime) -> bool:
    """
    Compare day-of-year of target, shifted by days, against today.

    Negative days mean "days after". Only the day of year is compared, so
    offsets spanning a new year never match.

    Args:
        target: Event timestamp
        days: Offset in days before target
        now: Current time; target is converted to its timezone

    Returns:
        True if target is the given number of days after today
    """
    target_day = target.astimezone(now.tzinfo).timetuple().tm_yday
    today = now.timetuple().tm_yday
    return target_day - days == today


def is_quiet_event(accepted: int, limit: int) -> bool:
    """Return True when at most half of the capacity is taken. No capacity is never quiet."""
    if limit <= 0:
        return False
    return accepted / limit <= QUIET_RATIO


class ReminderEvaluator:
    """Decides which reminders fire for an event at a given instant."""

    def __init__(self, regular_hour: int = REGULAR_HOUR):
        self.regular_hour = regular_hour

    def evaluate(self, event: Event, now: datetime) -> List[Reminder]:
        """
        Evaluate every reminder rule for an event.

        Rules are independent, so more than one reminder may be returned.

        Args:
            event: Event to evaluate
            now: Current time in the configured timezone

        Returns:
            Reminders to send, in rule order
        """
        kinds = []
        regular = is_regular_time(now, self.regular_hour)
        start = event.started_at

        # 2 weeks before
        if regular and is_days_before(start, 14, now):
            if is_quiet_event(event.accepted, event.limit):
                kinds.append(ReminderKind.TWO_WEEKS_BEFORE_QUIET)
            else:
                kinds.append(ReminderKind.TWO_WEEKS_BEFORE_BUSY)

        # 1 week before
        if regular and is_days_before(start, 7, now):
            kinds.append(ReminderKind.ONE_WEEK_BEFORE)

        # 2 days before
        if regular and is_days_before(start, 2, now):
            kinds.append(ReminderKind.TWO_DAYS_BEFORE)

        if is_start_time(start, now):
            kinds.append(ReminderKind.START)

        # next day
        if regular and is_days_before(start, -1, now):
            kinds.append(ReminderKind.NEXT_DAY)

        if kinds:
            logger.info(
                f"Event '{event.title}' matched reminders: "
                f"{', '.join(kind.name for kind in kinds)}"
            )

        return [
            Reminder(kind=kind, channel=kind.channel, text=kind.format_message(event))
            for kind in kinds
        ]
