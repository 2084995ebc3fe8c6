"""AWS Lambda handler for connpass event reminders."""
import json
import logging
import os
import time
from datetime import datetime
from typing import Dict, Any, List

import requests

from fetcher.connpass_client import ConnpassEventClient
from notifier.slack_dispatcher import SlackDispatcher
from processor.clock import current_time, load_timezone
from processor.models import Event, RunResult
from processor.reminder_evaluator import ReminderEvaluator

SLACK_URL = "https://nfug.slack.com/"
NO_EVENTS = "no events"

# Attributes every LogRecord carries; anything else came in through extra=
RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord('', 0, '', 0, '', None, None))
) | {'message', 'asctime'}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in record.__dict__.items():
            if key not in RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _response(status_code: int, body: str) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'text/plain; charset=utf-8'},
        'body': body
    }


def send_reminders(
    events: List[Event],
    evaluator: ReminderEvaluator,
    dispatcher: SlackDispatcher,
    now: datetime
) -> RunResult:
    """
    Send every reminder that fires for the given events at the given instant.

    A failed send is recorded and the remaining reminders are still sent.

    Args:
        events: Events fetched for this invocation
        evaluator: Reminder rules
        dispatcher: Message sink
        now: Current time in the configured timezone

    Returns:
        RunResult with counts and dispatch errors
    """
    logger = logging.getLogger(__name__)

    result = RunResult(events_fetched=len(events), reminders_sent=0)

    for event in events:
        for reminder in evaluator.evaluate(event, now):
            try:
                dispatcher.send(reminder.channel, reminder.text)
                result.reminders_sent += 1
            except requests.RequestException as e:
                error_msg = (
                    f"Failed to send {reminder.kind.name} reminder for "
                    f"'{event.title}' to {reminder.channel}: {e}"
                )
                logger.error(error_msg)
                result.errors.append(error_msg)

    return result


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for connpass reminders.

    Args:
        event: Function URL request or EventBridge scheduled event
        context: Lambda context object

    Returns:
        Response dict with statusCode and plain text body
    """
    webhook_url = os.environ.get('SLACKBOT_URL', '')
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info("Lambda execution started", extra={'timeout_seconds': timeout_seconds})

    try:
        client = ConnpassEventClient(timeout=timeout_seconds)
        evaluator = ReminderEvaluator()
        dispatcher = SlackDispatcher(webhook_url, timeout=timeout_seconds)
        now = current_time(load_timezone())

        try:
            logger.info("Fetching events from connpass")
            events = client.fetch_events()
        except requests.RequestException as e:
            logger.error(
                f"Failed to fetch events from connpass: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return _response(500, str(e))

        if not events:
            logger.info("No events to evaluate")
            return _response(200, NO_EVENTS)

        # Only needed once there is something to send
        if not webhook_url:
            logger.error("SLACKBOT_URL is not configured")
            return _response(500, "SLACKBOT_URL is not configured")

        logger.info("Evaluating reminders", extra={'now': now.isoformat()})
        result = send_reminders(events, evaluator, dispatcher, now)

        duration = time.time() - start_time
        logger.info(
            "Lambda execution completed",
            extra={
                'duration_seconds': round(duration, 2),
                'events_fetched': result.events_fetched,
                'reminders_sent': result.reminders_sent,
                'errors': result.errors
            }
        )

        if result.errors:
            return _response(500, "\n".join(result.errors))

        return _response(200, SLACK_URL)

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _response(500, str(e))
