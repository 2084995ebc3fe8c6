"""Data models for connpass events and reminders."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class Event:
    """Event as returned by the connpass API."""
    title: str
    url: str
    started_at: datetime
    ended_at: datetime
    place: str
    limit: int
    accepted: int


class ReminderKind(Enum):
    """Notification types with their channel, text and whether the URL is embedded."""
    TWO_WEEKS_BEFORE_BUSY = (
        '#general',
        '2週間前になりました。参加者はそれなりに多いようです。やったね！',
        True,
    )
    TWO_WEEKS_BEFORE_QUIET = (
        '#general',
        '2週間前になりました。参加者が少し少ないようです。みんなで宣伝しましょう！',
        True,
    )
    ONE_WEEK_BEFORE = (
        '#manage',
        '1週間前になりました。次回の会場が決まっていない場合は検討しましょう。',
        False,
    )
    TWO_DAYS_BEFORE = (
        '#general',
        '2日前です。当日参加できないことが分かっている方は、前日までにキャンセルしましょう。',
        True,
    )
    START = (
        '#general',
        'イベントスタートです！\n'
        'Twitter のハッシュタグ #nfug (https://twitter.com/search?q=%23nfug) もご活用ください！',
        False,
    )
    NEXT_DAY = (
        '#general',
        '昨日のイベントお疲れさまでした。次のイベントが立っていなければ用意しましょう！',
        False,
    )

    def __init__(self, channel: str, text: str, with_url: bool):
        self.channel = channel
        self.text = text
        self.with_url = with_url

    def format_message(self, event: Event) -> str:
        """Render the message body for an event."""
        if self.with_url:
            return f"『{event.title}』{self.text} <{event.url}>\n"
        return f"『{event.title}』{self.text}\n"


@dataclass
class Reminder:
    """A formatted message ready to be dispatched."""
    kind: ReminderKind
    channel: str
    text: str


@dataclass
class RunResult:
    """Result of a reminder run."""
    events_fetched: int
    reminders_sent: int
    errors: list[str] = field(default_factory=list)
