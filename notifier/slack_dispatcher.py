"""Slack webhook dispatcher for reminder messages."""
import logging

import requests

logger = logging.getLogger(__name__)


class SlackDispatcher:
    """Posts messages to a Slack incoming webhook."""

    def __init__(self, webhook_url: str, timeout: int = 30):
        """
        Initialize the dispatcher.

        Args:
            webhook_url: Slack webhook URL
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, channel: str, text: str) -> requests.Response:
        """
        Post a message to a channel.

        The response status is not inspected.

        Args:
            channel: Destination channel, e.g. '#general'
            text: Message body

        Returns:
            The webhook response

        Raises:
            requests.RequestException: If the request cannot be completed
        """
        response = requests.post(
            self.webhook_url,
            json={'channel': channel, 'text': text},
            timeout=self.timeout
        )
        logger.debug(
            f"Webhook response for {channel}: {response.status_code} {response.text}"
        )
        return response
