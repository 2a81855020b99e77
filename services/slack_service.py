import hashlib
import hmac
import logging
import time

import requests

from common.errors import TransportFailure
from common.formatting import format_timestamp

logger = logging.getLogger(__name__)


class SlackService:
    """Slack incoming-webhook notifications plus a few bot-token Web API calls."""

    API_BASE_URL = "https://slack.com/api"
    SIGNATURE_VERSION = "v0"
    # Requests older than this are treated as replays
    SIGNATURE_MAX_AGE = 60 * 5

    def __init__(self, webhook_url=None, bot_token=None, signing_secret=None, timeout=10):
        self.webhook_url = webhook_url
        self.bot_token = bot_token
        self.signing_secret = signing_secret
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            webhook_url=config.get('SLACK_WEBHOOK_URL'),
            bot_token=config.get('SLACK_BOT_TOKEN'),
            signing_secret=config.get('SLACK_SIGNING_SECRET'),
            timeout=config.get('SLACK_TIMEOUT', 10),
        )

    @staticmethod
    def _response_body(response):
        try:
            return response.json()
        except ValueError:
            return response.text

    def send_webhook_message(self, message):
        """
        Post a message to the configured incoming webhook.

        Args:
            message (dict): Slack message payload (``text`` and optional ``blocks``)

        Returns:
            The webhook response body, or None when no webhook is configured
        """
        if not self.webhook_url:
            logger.warning("Slack webhook URL not configured")
            return None

        try:
            response = requests.post(self.webhook_url, json=message, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send Slack message: {str(e)}")
            raise TransportFailure('slack', f"Slack notification failed: {str(e)}")

        logger.info("Slack message sent successfully")
        return self._response_body(response)

    def _post_api(self, method, payload):
        headers = {
            'Authorization': f'Bearer {self.bot_token}',
            'Content-Type': 'application/json',
        }
        response = requests.post(f"{self.API_BASE_URL}/{method}", json=payload,
                                 headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def send_direct_message(self, user_id, text):
        """Send a direct message through the bot user; None when no bot token is set."""
        if not self.bot_token:
            logger.warning("Slack bot token not configured")
            return None

        try:
            data = self._post_api('chat.postMessage', {'channel': user_id, 'text': text})
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Failed to send direct message: {str(e)}")
            raise TransportFailure('slack', f"Slack direct message failed: {str(e)}")

        if not data.get('ok'):
            logger.error(f"Failed to send direct message: {data.get('error')}")
            raise TransportFailure('slack', data.get('error') or 'unknown_error')
        return data

    def add_reaction(self, channel_id, timestamp, emoji):
        """Add an emoji reaction to a message; None when no bot token is set."""
        if not self.bot_token:
            logger.warning("Slack bot token not configured")
            return None

        try:
            return self._post_api('reactions.add', {
                'channel': channel_id,
                'timestamp': timestamp,
                'name': emoji,
            })
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Failed to update message reaction: {str(e)}")
            raise TransportFailure('slack', f"Slack reaction failed: {str(e)}")

    def verify_signature(self, timestamp, body, signature, now=None):
        """Check a request signed with the app's signing secret."""
        if not (self.signing_secret and timestamp and signature):
            return False
        try:
            age = abs((now or time.time()) - int(timestamp))
        except (TypeError, ValueError):
            return False
        if age > self.SIGNATURE_MAX_AGE:
            return False

        if isinstance(body, bytes):
            body = body.decode('utf-8')
        base = f"{self.SIGNATURE_VERSION}:{timestamp}:{body}"
        digest = hmac.new(self.signing_secret.encode('utf-8'), base.encode('utf-8'),
                          hashlib.sha256).hexdigest()
        return hmac.compare_digest(f"{self.SIGNATURE_VERSION}={digest}", signature)

    def handle_slack_event(self, event):
        event_type = event.get('type')
        logger.info(f"Slack event received: {event_type}")

        if event_type == 'url_verification':
            return {'challenge': event.get('challenge')}

        if event_type == 'event_callback':
            inner_event = event.get('event') or {}
            logger.info(f"Inner event: {inner_event.get('type')}")

        return {'ok': True}

    @staticmethod
    def format_contact_notification(contact):
        return {
            'text': f"New Contact Submission from {contact.name}",
            'blocks': [
                {
                    'type': 'header',
                    'text': {
                        'type': 'plain_text',
                        'text': '📬 New Contact Submission',
                        'emoji': True,
                    },
                },
                {
                    'type': 'section',
                    'fields': [
                        {'type': 'mrkdwn', 'text': f"*Name:*\n{contact.name}"},
                        {'type': 'mrkdwn', 'text': f"*Email:*\n{contact.email}"},
                        {'type': 'mrkdwn', 'text': f"*Phone:*\n{contact.phone or 'N/A'}"},
                        {'type': 'mrkdwn', 'text': f"*Subject:*\n{contact.subject}"},
                    ],
                },
                {
                    'type': 'section',
                    'text': {'type': 'mrkdwn', 'text': f"*Message:*\n{contact.message}"},
                },
                {
                    'type': 'context',
                    'elements': [
                        {'type': 'mrkdwn', 'text': f"Submitted at: {format_timestamp(contact.created_at)}"},
                    ],
                },
                {
                    'type': 'actions',
                    'elements': [
                        {
                            'type': 'button',
                            'text': {
                                'type': 'plain_text',
                                'text': 'View in Dashboard',
                                'emoji': True,
                            },
                            'value': str(contact.id) if contact.id is not None else None,
                            'action_id': 'view_contact',
                        },
                    ],
                },
            ],
        }

    @staticmethod
    def format_newsletter_notification(subscriber):
        return {
            'text': f"New Newsletter Subscriber: {subscriber.email}",
            'blocks': [
                {
                    'type': 'section',
                    'text': {
                        'type': 'mrkdwn',
                        'text': (
                            "📧 *New Newsletter Subscriber*\n\n"
                            f"Email: {subscriber.email}\n"
                            f"Name: {subscriber.name or 'Not provided'}\n"
                            f"Time: {format_timestamp(subscriber.created_at)}"
                        ),
                    },
                },
            ],
        }
