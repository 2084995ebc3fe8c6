"""Client for the connpass event search API."""
import json
import logging
from datetime import datetime
from typing import List, Union

import requests

from processor.models import Event

logger = logging.getLogger(__name__)


class ConnpassEventClient:
    """Fetches the latest events of the watched connpass series."""

    # ref: https://connpass.com/about/api/
    BASE_URL = "https://connpass.com/api/v1/event/"
    SERIES_IDS = "964,4986"  # 964: html5nagoya, 4986: nfug
    COUNT = 5
    ORDER = 2

    def __init__(self, timeout: int = 30):
        """
        Initialize the connpass client.

        Args:
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.timeout = timeout

    def fetch_events(self) -> List[Event]:
        """
        Fetch the most recent events of the configured series.

        Returns:
            List of Event objects, empty if the body could not be parsed

        Raises:
            requests.RequestException: If the request cannot be completed
        """
        params = {
            'count': self.COUNT,
            'order': self.ORDER,
            'series_id': self.SERIES_IDS
        }

        logger.info(f"Fetching events for series {self.SERIES_IDS}")
        response = requests.get(
            self.BASE_URL,
            params=params,
            timeout=self.timeout,
            stream=True
        )

        try:
            body = response.content
        except requests.RequestException as e:
            logger.warning(f"Failed to read response body: {e}")
            body = b''
        finally:
            response.close()

        events = self.parse_events(body)
        logger.info(f"Fetched {len(events)} events")
        return events

    def parse_events(self, raw: Union[bytes, str]) -> List[Event]:
        """
        Parse an API response body into events.

        Any malformed input yields an empty list rather than an error.

        Args:
            raw: Response body

        Returns:
            List of Event objects
        """
        try:
            data = json.loads(raw)
            records = data['events']
            if not isinstance(records, list):
                raise TypeError(f"'events' is {type(records).__name__}, not a list")
            return [self._parse_event(record) for record in records]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning(f"Failed to parse events response: {e}")
            return []

    def _parse_event(self, record: dict) -> Event:
        """
        Convert a single API record into an Event.

        Args:
            record: Event object from the 'events' array

        Returns:
            Event object

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        return Event(
            title=record.get('title') or '',
            url=record.get('event_url') or '',
            started_at=self._parse_timestamp(record['started_at']),
            ended_at=self._parse_timestamp(record['ended_at']),
            place=record.get('place') or '',
            limit=int(record.get('limit') or 0),
            accepted=int(record.get('accepted') or 0)
        )

    def _parse_timestamp(self, value: str) -> datetime:
        """Parse an ISO-8601 timestamp that carries a UTC offset."""
        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        timestamp = datetime.fromisoformat(value)
        if timestamp.tzinfo is None:
            raise ValueError(f"Timestamp without UTC offset: {value}")
        return timestamp
