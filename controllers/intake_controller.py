# controllers/intake_controller.py
"""
Submission intake pipeline.

Every submission type runs the same sequence:

1) validate the raw payload
2) apply the type-specific pre-persistence policy
3) persist the record
4) fan out notifications (email, Slack), each in its own failure boundary
5) patch the record with the Slack message id, once every notification resolved

Only validation, duplicate and persistence failures reach the caller. A
notification channel being down never fails a submission.
"""
import logging
from collections import namedtuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from common.database import utcnow
from common.errors import DuplicateKeyError, DuplicateResource, TransportFailure, ValidationFailure
from schemas.submission_schemas import validate_contact, validate_newsletter, validate_waitlist
from services.submission_store import ContactStore, NewsletterStore, WaitlistStore

logger = logging.getLogger(__name__)

IntakeResult = namedtuple('IntakeResult', ['record', 'created', 'message', 'notifications'])
NotificationOutcome = namedtuple('NotificationOutcome', ['delivered', 'result', 'error'])

CONTACT_CONFIRMATION = 'contact_confirmation_email'
ADMIN_NOTIFICATION = 'admin_notification_email'
NEWSLETTER_WELCOME = 'newsletter_welcome_email'
SLACK_NOTIFICATION = 'slack_notification'


def run_notifications(tasks):
    """
    Run ``(label, callable)`` notification tasks in order.

    Each task is isolated: a failure is logged once and recorded in the
    returned outcome map, and the remaining tasks still run.
    """
    outcomes = {}
    for label, task in tasks:
        try:
            outcomes[label] = NotificationOutcome(True, task(), None)
        except TransportFailure as e:
            logger.error(f"{label} failed, continuing: {e.message}")
            outcomes[label] = NotificationOutcome(False, None, e.message)
        except Exception as e:
            logger.exception(f"{label} raised unexpectedly, continuing: {str(e)}")
            outcomes[label] = NotificationOutcome(False, None, str(e))
    return outcomes


def external_message_id(outcome):
    """Pull the Slack message timestamp out of a webhook response, if any."""
    if not outcome or not outcome.delivered or not isinstance(outcome.result, dict):
        return None
    return outcome.result.get('ts')


class IntakePipeline:

    def __init__(self, email_service, slack_service, contacts=None, newsletters=None, waitlist=None):
        self.email_service = email_service
        self.slack_service = slack_service
        self.contacts = contacts or ContactStore()
        self.newsletters = newsletters or NewsletterStore()
        self.waitlist = waitlist or WaitlistStore()

    @staticmethod
    def _validated(result, kind):
        if not result.is_valid:
            logger.warning(f"{kind} validation errors: {result.errors}")
            raise ValidationFailure(result.errors)
        return result.data

    def submit_contact(self, raw, ip_address=None, user_agent=None):
        data = self._validated(validate_contact(raw), 'Contact')

        contact = self.contacts.create(
            name=data['name'],
            email=data['email'],
            phone=data.get('phone'),
            subject=data['subject'],
            message=data['message'],
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.info(f"Contact created: {contact.id}")

        outcomes = run_notifications([
            (CONTACT_CONFIRMATION, lambda: self.email_service.send_contact_confirmation(contact)),
            (ADMIN_NOTIFICATION, lambda: self.email_service.send_admin_notification(contact)),
            (SLACK_NOTIFICATION, lambda: self.slack_service.send_webhook_message(
                self.slack_service.format_contact_notification(contact))),
        ])

        message_id = external_message_id(outcomes.get(SLACK_NOTIFICATION))
        if message_id:
            try:
                self.contacts.update(contact, slack_message_id=message_id)
            except SQLAlchemyError as e:
                logger.error(f"Could not store Slack message id for contact {contact.id}: {str(e)}")

        return IntakeResult(contact, True, "Contact submitted successfully", outcomes)

    def submit_newsletter(self, raw):
        data = self._validated(validate_newsletter(raw), 'Newsletter')
        email = data['email']

        subscriber = self.newsletters.find_by_email(email)
        if subscriber is not None:
            if subscriber.subscribed:
                raise DuplicateResource("Already subscribed to newsletter")
            subscriber = self.newsletters.update(subscriber, subscribed=True, verified=True,
                                                 verified_at=utcnow())
            created = False
        else:
            try:
                subscriber = self.newsletters.create(
                    email=email,
                    name=data.get('name'),
                    subscribed=True,
                    verified=True,
                    verified_at=utcnow(),
                )
            except DuplicateKeyError:
                raise DuplicateResource("Already subscribed to newsletter")
            created = True

        logger.info(f"Newsletter subscriber added: {subscriber.id}")

        outcomes = run_notifications([
            (NEWSLETTER_WELCOME, lambda: self.email_service.send_newsletter_welcome(subscriber)),
            (SLACK_NOTIFICATION, lambda: self.slack_service.send_webhook_message(
                self.slack_service.format_newsletter_notification(subscriber))),
        ])

        return IntakeResult(subscriber, created, "Successfully subscribed to newsletter", outcomes)

    def join_waitlist(self, raw):
        data = self._validated(validate_waitlist(raw), 'Waitlist')
        email = data['email']

        existing = self.waitlist.find_by_email(email)
        if existing is not None:
            return IntakeResult(existing, False, "You're already on the waitlist", {})

        try:
            entry = self.waitlist.create(email=email)
        except DuplicateKeyError:
            # Lost the race between lookup and insert
            return IntakeResult(None, False, "Email already registered", {})

        logger.info(f"Waitlist entry created: {entry.id}")
        return IntakeResult(entry, True, "Successfully joined the waitlist", {})


def get_intake_pipeline():
    return current_app.extensions['intake_pipeline']
