import logging

from common.errors import NotFound
from services.submission_store import NewsletterStore

logger = logging.getLogger(__name__)

newsletters = NewsletterStore()


def parse_bool(value, default=True):
    if value is None or value == '':
        return default
    return str(value).strip().lower() in ('1', 'true', 'yes')


class NewsletterController:

    @staticmethod
    def list_subscribers(subscribed=True, page=None, limit=None):
        return newsletters.find_many({'subscribed': subscribed}, page=page, limit=limit)

    @staticmethod
    def unsubscribe(email):
        subscriber = newsletters.unsubscribe(email)
        if subscriber is None:
            raise NotFound("Subscriber not found")
        logger.info(f"Newsletter subscriber unsubscribed: {subscriber.id}")
        return subscriber
