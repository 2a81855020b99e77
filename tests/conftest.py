"""
Pytest configuration and shared fixtures.

Every test gets a fresh application on an in-memory SQLite database. The
notification adapters can be swapped for recording fakes through the
``fake_email`` and ``fake_slack`` fixtures.
"""

import pytest

from app import create_app
from common.database import db
from common.errors import TransportFailure
from services.slack_service import SlackService


class FakeEmailService:
    """Records every send; raises TransportFailure when ``fail`` is set."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def _send(self, kind, record):
        if self.fail:
            raise TransportFailure('email', "Email sending failed: connection refused")
        self.sent.append((kind, record.email))
        return f"<{kind}-{len(self.sent)}@example.com>"

    def send_contact_confirmation(self, contact):
        return self._send('contact-confirmation', contact)

    def send_admin_notification(self, contact):
        return self._send('admin-notification', contact)

    def send_newsletter_welcome(self, subscriber):
        return self._send('newsletter-welcome', subscriber)


class FakeSlackService(SlackService):
    """Real message formatting, recorded webhook delivery."""

    def __init__(self, response=None, **kwargs):
        kwargs.setdefault('signing_secret', 'test-signing-secret')
        super().__init__(webhook_url='https://hooks.slack.test/services/T/B/X', **kwargs)
        self.messages = []
        self.response = response if response is not None else 'ok'
        self.fail = False

    def send_webhook_message(self, message):
        if self.fail:
            raise TransportFailure('slack', "Slack notification failed: 503 Service Unavailable")
        self.messages.append(message)
        return self.response


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def pipeline(app):
    return app.extensions['intake_pipeline']


@pytest.fixture
def fake_email(pipeline):
    fake = FakeEmailService()
    pipeline.email_service = fake
    return fake


@pytest.fixture
def fake_slack(app, pipeline):
    fake = FakeSlackService()
    app.extensions['slack_service'] = fake
    pipeline.slack_service = fake
    return fake


@pytest.fixture
def contact_payload():
    return {
        'name': 'John Doe',
        'email': 'john@example.com',
        'phone': '+1234567890',
        'subject': 'Test Subject',
        'message': 'This is a test message with sufficient length',
    }
